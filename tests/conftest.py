from __future__ import annotations

"""
Global Pytest Configuration and Fixtures.

This module sets up the testing environment, including:
1. Path manipulation to ensure the 'src' directory is importable.
2. Sample project and filters documents shared by unit, integration and
   end-to-end tests.
"""

import itertools
import os
import sys
from pathlib import Path
from typing import Callable, Tuple

import pytest

# -----------------------------------------------------------------------------
# Path Configuration
# -----------------------------------------------------------------------------
_SRC_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src"))
if _SRC_PATH not in sys.path:
    sys.path.insert(0, _SRC_PATH)

# -----------------------------------------------------------------------------
# Sample Documents
# -----------------------------------------------------------------------------
SAMPLE_PROJECT = """<?xml version="1.0" encoding="utf-8"?>
<Project DefaultTargets="Build" ToolsVersion="15.0" xmlns="http://schemas.microsoft.com/developer/msbuild/2003">
  <ItemGroup Label="ProjectConfigurations">
    <ProjectConfiguration Include="Debug|x64">
      <Configuration>Debug</Configuration>
      <Platform>x64</Platform>
    </ProjectConfiguration>
  </ItemGroup>
  <ItemDefinitionGroup Condition="'$(Configuration)|$(Platform)'=='Debug|x64'">
    <ClCompile>
      <WarningLevel>Level3</WarningLevel>
      <AdditionalIncludeDirectories>include;%(AdditionalIncludeDirectories)</AdditionalIncludeDirectories>
    </ClCompile>
    <Link>
      <SubSystem>Console</SubSystem>
    </Link>
  </ItemDefinitionGroup>
  <ItemDefinitionGroup Condition="'$(Configuration)|$(Platform)'=='Release|x64'">
    <ClCompile>
      <WarningLevel>Level3</WarningLevel>
    </ClCompile>
  </ItemDefinitionGroup>
  <ItemGroup>
    <ClCompile Include="main.cpp" />
    <ClCompile Include="src\\app.cpp" />
    <ClCompile Include="src\\util\\strings.cpp" />
    <ClCompile Include="src\\util\\legacy.c" />
  </ItemGroup>
  <ItemGroup>
    <ClInclude Include="src\\app.h" />
  </ItemGroup>
</Project>
"""

SAMPLE_FILTERS = """<?xml version="1.0" encoding="utf-8"?>
<Project ToolsVersion="4.0" xmlns="http://schemas.microsoft.com/developer/msbuild/2003">
  <ItemGroup>
    <Filter Include="src">
      <UniqueIdentifier>{11111111-1111-1111-1111-111111111111}</UniqueIdentifier>
    </Filter>
    <Filter Include="src\\util">
      <UniqueIdentifier>{22222222-2222-2222-2222-222222222222}</UniqueIdentifier>
    </Filter>
    <Filter Include="Header Files">
      <UniqueIdentifier>{33333333-3333-3333-3333-333333333333}</UniqueIdentifier>
      <Extensions>h;hpp</Extensions>
    </Filter>
    <Filter Include="Docs">
      <UniqueIdentifier>{44444444-4444-4444-4444-444444444444}</UniqueIdentifier>
    </Filter>
  </ItemGroup>
  <ItemGroup>
    <ClCompile Include="main.cpp" />
    <ClCompile Include="src\\app.cpp">
      <Filter>src</Filter>
    </ClCompile>
    <ClCompile Include="src\\util\\strings.cpp">
      <Filter>src\\util</Filter>
    </ClCompile>
    <ClCompile Include="src\\util\\legacy.c">
      <Filter>src\\util</Filter>
    </ClCompile>
  </ItemGroup>
  <ItemGroup>
    <ClInclude Include="src\\app.h">
      <Filter>Header Files</Filter>
    </ClInclude>
  </ItemGroup>
</Project>
"""


def to_crlf(text: str) -> str:
    return text.replace("\n", "\r\n")

# -----------------------------------------------------------------------------
# Shared Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture
def project_text() -> str:
    return SAMPLE_PROJECT


@pytest.fixture
def filters_text() -> str:
    return SAMPLE_FILTERS


@pytest.fixture
def sequential_ids() -> Callable[[], str]:
    """Deterministic identifier factory: {00000000-0000-0000-0000-000000000001}, ..."""
    counter = itertools.count(1)
    return lambda: "{00000000-0000-0000-0000-%012d}" % next(counter)


@pytest.fixture
def project_on_disk(tmp_path: Path) -> Tuple[Path, Path]:
    """
    Write the sample documents as Visual Studio does (CRLF, UTF-8 BOM).

    Returns:
        Tuple[Path, Path]: (project file, filters file).
    """
    project = tmp_path / "app.vcxproj"
    filters = tmp_path / "app.vcxproj.filters"
    project.write_bytes(b"\xef\xbb\xbf" + to_crlf(SAMPLE_PROJECT).encode("utf-8"))
    filters.write_bytes(b"\xef\xbb\xbf" + to_crlf(SAMPLE_FILTERS).encode("utf-8"))
    return project, filters
