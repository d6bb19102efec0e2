from __future__ import annotations

"""
Unit tests for the Filter Hierarchy Reconstructor.

Verifies:
1. Implied ancestors are synthesized but flagged as undeclared.
2. Unassigned files hang off the root.
3. Sorted navigation helpers and summary counts.
"""

from vsprojm.core.analysis.hierarchy import ProjectHierarchy
from vsprojm.core.documents.filter_document import FilterDocument
from vsprojm.core.documents.project_document import ProjectDocument
from vsprojm.domain.project_models import ProjectFile


def test_build_synthesizes_ancestors():
    h = ProjectHierarchy.build(
        files=["x\\y\\z\\f.cpp"],
        file_to_node={"x\\y\\z\\f.cpp": "x\\y\\z"},
        node_names=["x\\y\\z"],
    )

    assert set(h.nodes) == {"", "x", "x\\y", "x\\y\\z"}
    assert h.nodes["x"].declared is False
    assert h.nodes["x\\y\\z"].declared is True
    assert h.nodes["x\\y"].parent == "x"
    assert h.nodes["x\\y\\z"].depth == 3
    assert h.nodes["x\\y\\z"].label == "z"
    assert [n.name for n in h.children_of("")] == ["x"]


def test_unassigned_files_belong_to_root():
    h = ProjectHierarchy.build(["b.cpp", "a.cpp"], {}, [])
    assert h.files_of("") == ["a.cpp", "b.cpp"]
    assert h.root.is_root
    assert h.node_count == 0
    assert h.file_count == 2


def test_children_sorted_by_qualified_name():
    h = ProjectHierarchy.build([], {}, ["zeta", "alpha", "alpha\\beta", "Beta"])
    assert [n.name for n in h.children_of("")] == ["Beta", "alpha", "zeta"]
    assert [n.name for n in h.children_of("alpha")] == ["alpha\\beta"]


def test_from_documents_joins_both_projections(project_text, filters_text):
    h = ProjectHierarchy.from_documents(ProjectDocument(project_text), FilterDocument(filters_text))

    assert h.file_count == 4
    assert h.node_count == 4
    assert h.files_of("src\\util") == ["src\\util\\legacy.c", "src\\util\\strings.cpp"]
    assert ProjectFile(path="main.cpp", filter=None) in h.project_files()


def test_from_documents_without_filters_puts_everything_at_root(project_text):
    h = ProjectHierarchy.from_documents(ProjectDocument(project_text))
    assert h.node_count == 0
    assert len(h.files_of("")) == 4


def test_empty_hierarchy():
    assert ProjectHierarchy.build([], {}, []).is_empty is True
