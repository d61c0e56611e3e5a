# tests/test_permission_tree.py

"""
Tests for the resource → category → permission tree projection.
"""

from core.permission_tree import (
    build_tree,
    count_leaves,
    filter_tree,
    find_node,
    format_action_name,
    format_resource_name,
    iter_leaves,
)
from models.enums import NodeLevel
from fakes import make_permission


def _all_nodes(tree):
    for resource in tree:
        yield resource
        for category in resource.children:
            yield category
            yield from category.children


def test_view_selected_modify_inherited_scenario():
    catalog = [
        make_permission("view.x", "x", "view"),
        make_permission("modify.x", "x", "modify"),
    ]
    tree = build_tree(catalog, {"view.x"}, {"modify.x"}, "admin")

    assert len(tree) == 1
    resource = tree[0]
    assert resource.id == "x"
    assert resource.level == NodeLevel.resource
    assert resource.indeterminate is True
    assert resource.selected is False

    view, modify = resource.children
    assert view.name == "View Operations"
    assert view.selected is True
    assert view.indeterminate is False

    assert modify.name == "Modify Operations"
    assert modify.selected is False
    assert modify.indeterminate is False
    leaf = modify.children[0]
    assert leaf.inherited is True
    assert leaf.inherited_from == "admin"
    assert leaf.selected is False


def test_grouping_follows_catalog_order(catalog):
    tree = build_tree(catalog, set(), set())

    assert [r.id for r in tree] == ["invoices", "clients", "reports"]
    assert [c.name for c in tree[0].children] == [
        "View Operations",
        "Add Operations",
        "Modify Operations",
        "Delete Operations",
    ]
    assert [c.name for c in tree[1].children] == ["View Operations", "Other Operations"]


def test_exactly_three_levels(catalog):
    tree = build_tree(catalog, set(), set())
    for resource in tree:
        assert resource.level == NodeLevel.resource
        for category in resource.children:
            assert category.level == NodeLevel.category
            for leaf in category.children:
                assert leaf.level == NodeLevel.permission
                assert leaf.children is None
                assert leaf.permission_key == leaf.id
    assert count_leaves(tree) == len(catalog)


def test_tri_state_invariant(catalog):
    selected = {"view.invoices", "add.invoices", "view.clients", "export.clients"}
    tree = build_tree(catalog, selected, set())

    for node in _all_nodes(tree):
        if node.is_leaf:
            continue
        leaves = list(iter_leaves(node))
        picked = sum(1 for leaf in leaves if leaf.selected)
        assert node.selected == (picked == len(leaves) and len(leaves) > 0)
        assert node.indeterminate == (0 < picked < len(leaves))

    invoices, clients, reports = tree
    assert invoices.indeterminate is True
    assert clients.selected is True
    assert reports.selected is False and reports.indeterminate is False


def test_inherited_only_when_not_selected(catalog):
    selected = {"view.invoices"}
    inherited = {"view.invoices", "add.invoices"}
    tree = build_tree(catalog, selected, inherited, "admin, technician")

    for node in _all_nodes(tree):
        if node.is_leaf:
            key = node.permission_key
            assert node.inherited == (key in inherited and key not in selected)
            if not node.inherited:
                assert node.inherited_from is None

    leaf = find_node(tree, ["invoices", "invoices:Add Operations", "add.invoices"])
    assert leaf.inherited_from == "admin, technician"


def test_build_is_deterministic(catalog):
    first = build_tree(catalog, {"view.clients"}, {"add.invoices"}, "admin")
    second = build_tree(list(catalog), {"view.clients"}, {"add.invoices"}, "admin")
    assert [n.model_dump() for n in first] == [n.model_dump() for n in second]


def test_empty_catalog():
    assert build_tree([], {"a"}, {"b"}) == []


def test_display_names():
    assert format_resource_name("service_requests") == "Service Requests"
    assert format_resource_name("invoices") == "Invoices"
    assert format_action_name("view") == "View"
    assert format_action_name("viewAll") == "View All"
    assert format_action_name("modify_own_status") == "Modify Own Status"


def test_find_node(catalog):
    tree = build_tree(catalog, set(), set())
    assert find_node(tree, ["invoices"]).level == NodeLevel.resource
    assert find_node(tree, ["invoices", "invoices:View Operations"]).level == NodeLevel.category
    assert find_node(tree, ["invoices", "invoices:View Operations", "view.invoices"]).is_leaf
    assert find_node(tree, ["missing"]) is None
    assert find_node(tree, ["invoices", "clients:View Operations"]) is None


def test_filter_tree_by_leaf_text(catalog):
    tree = build_tree(catalog, {"view.invoices"}, set())
    filtered = filter_tree(tree, "VIEW")

    # resource "reports" matches via "View All"; clients and invoices via "View"
    assert [r.id for r in filtered] == ["invoices", "clients", "reports"]
    invoices = filtered[0]
    assert [c.name for c in invoices.children] == ["View Operations"]
    # only the selected view leaf survives, so the resource is now fully selected
    assert invoices.selected is True
    assert invoices.indeterminate is False


def test_filter_tree_by_resource_name_keeps_all_leaves(catalog):
    tree = build_tree(catalog, set(), set())
    filtered = filter_tree(tree, "clients")
    assert [r.id for r in filtered] == ["clients"]
    assert count_leaves(filtered) == 2


def test_filter_tree_empty_query_and_no_match(catalog):
    tree = build_tree(catalog, set(), set())
    assert filter_tree(tree, "") == tree
    assert filter_tree(tree, None) == tree
    assert filter_tree(tree, "no-such-permission") == []
