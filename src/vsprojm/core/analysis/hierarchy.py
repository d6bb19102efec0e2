from __future__ import annotations

"""
Filter Hierarchy Reconstructor.

Rebuilds the explicit display tree from the flat, backslash-delimited
filter names stored in the filters document. Ancestors implied by a
qualified name are synthesized here and never written back.
"""

import logging
from typing import Dict, Iterable, List, Mapping, Optional

from vsprojm.domain.project_models import ProjectFile
from vsprojm.domain.tree_models import HierarchyNode, ancestor_names, parent_name

logger = logging.getLogger(__name__)


class ProjectHierarchy:
    """
    Read-only tree of filters keyed by qualified name.

    The root is stored under the empty string. Use build() or
    from_documents() rather than the constructor.
    """

    def __init__(self, nodes: Dict[str, HierarchyNode]):
        self.nodes = nodes

    # -------------------------------------------------------------------------
    # Construction
    # -------------------------------------------------------------------------

    @classmethod
    def build(
            cls,
            files: Iterable[str],
            file_to_node: Mapping[str, str],
            node_names: Iterable[str],
    ) -> "ProjectHierarchy":
        """
        Create the hierarchy from flat projections.

        Args:
            files: Include paths of the compile-unit list.
            file_to_node: Filter assignment per include path.
            node_names: Declared filter names.

        Returns:
            ProjectHierarchy: Tree with one node per declared or assigned name
            plus every implied ancestor.
        """
        declared = set(node_names)
        names = set(declared) | {n for n in file_to_node.values() if n}

        nodes: Dict[str, HierarchyNode] = {"": HierarchyNode(name="", declared=True)}
        for name in sorted(names):
            for qualified in ancestor_names(name) + [name]:
                if qualified in nodes:
                    continue
                parent = parent_name(qualified)
                nodes[qualified] = HierarchyNode(
                    name=qualified,
                    parent=parent,
                    declared=qualified in declared,
                )
                nodes[parent].children.append(qualified)

        for path in files:
            owner = file_to_node.get(path) or ""
            nodes[owner].files.append(path)

        logger.debug(f"Hierarchy rebuilt: {len(nodes) - 1} filters, {sum(len(n.files) for n in nodes.values())} files")
        return cls(nodes)

    @classmethod
    def from_documents(cls, project_doc, filter_doc=None) -> "ProjectHierarchy":
        """Build from a ProjectDocument and an optional FilterDocument."""
        files = project_doc.project_files()
        if filter_doc is None:
            return cls.build(files, {}, [])
        return cls.build(files, filter_doc.file_to_node_map(), filter_doc.declared_nodes())

    # -------------------------------------------------------------------------
    # Navigation
    # -------------------------------------------------------------------------

    @property
    def root(self) -> HierarchyNode:
        return self.nodes[""]

    def get(self, name: str) -> Optional[HierarchyNode]:
        return self.nodes.get(name)

    def children_of(self, name: str) -> List[HierarchyNode]:
        """Child filters sorted by qualified name."""
        node = self.nodes[name]
        return [self.nodes[c] for c in sorted(node.children)]

    def files_of(self, name: str) -> List[str]:
        """Files displayed directly under a filter, sorted by recorded path."""
        return sorted(self.nodes[name].files)

    def project_files(self) -> List[ProjectFile]:
        """Every file joined with its filter (None under the root)."""
        joined = []
        for node in self.nodes.values():
            for path in node.files:
                joined.append(ProjectFile(path=path, filter=node.name or None))
        return sorted(joined, key=lambda f: f.path)

    # -------------------------------------------------------------------------
    # Summary
    # -------------------------------------------------------------------------

    @property
    def file_count(self) -> int:
        return sum(len(n.files) for n in self.nodes.values())

    @property
    def node_count(self) -> int:
        return len(self.nodes) - 1

    @property
    def is_empty(self) -> bool:
        return self.file_count == 0 and self.node_count == 0
