from __future__ import annotations

"""
Domain Constants and Static Data Structures.

Centralizes the MSBuild vocabulary (tag names, attribute names, property
names) shared by the project and filters documents, plus the templates used
when a document region has to be created from scratch.
"""

from typing import Dict, List, Tuple

APP_NAME = "vsprojm"
APP_VERSION = "0.1.0"
CURRENT_CONFIG_VERSION = "1.0.0"

# -----------------------------------------------------------------------------
# PATH CONVENTIONS
# -----------------------------------------------------------------------------

SEGMENT_DELIMITER = "\\"
FILTERS_SUFFIX = ".filters"

DEFAULT_SOURCE_EXTENSIONS: List[str] = ["c", "cpp", "cc", "cxx"]
DEFAULT_EXTENSION = "cpp"

# -----------------------------------------------------------------------------
# MARKUP ANCHORS
# -----------------------------------------------------------------------------

ROOT_CLOSE = "</Project>"
ITEM_GROUP_OPEN = "<ItemGroup"
ITEM_GROUP_CLOSE = "</ItemGroup>"

COMPILE_TAG = "ClCompile"
COMPILE_ENTRY_OPEN = '<ClCompile Include="'

FILTER_TAG = "Filter"
FILTER_DECL_OPEN = '<Filter Include="'
FILTER_ASSIGN_OPEN = "<Filter>"
UNIQUE_ID_TAG = "UniqueIdentifier"

CONFIG_BLOCK_OPEN = "<ItemDefinitionGroup Condition="
CONFIG_BLOCK_CLOSE = "</ItemDefinitionGroup>"

INCLUDE_ATTR = "Include"
CONDITION_ATTR = "Condition"

# -----------------------------------------------------------------------------
# CONFIGURATION PROPERTIES
# -----------------------------------------------------------------------------

# section selector -> element name inside <ItemDefinitionGroup>
PROPERTY_SECTIONS: Dict[str, str] = {
    "compile": "ClCompile",
    "link": "Link",
}

# property selector -> MSBuild property element name
PROPERTY_NAMES: Dict[str, str] = {
    "include-dirs": "AdditionalIncludeDirectories",
    "lib-dirs": "AdditionalLibraryDirectories",
    "lib-deps": "AdditionalDependencies",
}

# CLI command -> (section, property)
PROPERTY_COMMANDS: Dict[str, Tuple[str, str]] = {
    "add-incdir": ("compile", "include-dirs"),
    "add-libdir": ("link", "lib-dirs"),
    "add-lib": ("link", "lib-deps"),
}


def inheritance_token(property_name: str) -> str:
    """Return the placeholder standing for inherited values, e.g. '%(AdditionalDependencies)'."""
    return f"%({property_name})"

# -----------------------------------------------------------------------------
# DOCUMENT TEMPLATES
# -----------------------------------------------------------------------------

FILTERS_TEMPLATE_LINES: List[str] = [
    '<?xml version="1.0" encoding="utf-8"?>',
    '<Project ToolsVersion="4.0" xmlns="http://schemas.microsoft.com/developer/msbuild/2003">',
    "</Project>",
]

# -----------------------------------------------------------------------------
# RENDERING SYMBOLS
# -----------------------------------------------------------------------------

FOLDER_ICON = "📁"
FILE_ICON = "📄"
BRANCH = "├── "
LAST_BRANCH = "└── "
PIPE_PREFIX = "│   "
BLANK_PREFIX = "    "
EMPTY_PROJECT_MARKER = "   (empty project)"
