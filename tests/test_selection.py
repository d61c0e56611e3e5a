# tests/test_selection.py

"""
Tests for the selection transitions.
"""

import pytest

from core import selection
from core.permission_tree import build_tree, find_node, iter_leaves
from fakes import make_permission


@pytest.fixture
def abc_catalog():
    return [
        make_permission("a", "docs", "view"),
        make_permission("b", "docs", "view_all"),
        make_permission("c", "docs", "view_own"),
    ]


def _category(tree, path):
    node = find_node(tree, path)
    assert node is not None
    return node


@pytest.mark.parametrize("start", [set(), {"a"}, {"a", "b"}, {"x", "y"}])
@pytest.mark.parametrize("key", ["a", "b", "z"])
def test_toggle_leaf_is_invertible(start, key):
    once = selection.toggle_leaf(start, key)
    assert (key in once) != (key in start)
    assert selection.toggle_leaf(once, key) == start


def test_transitions_do_not_mutate_input(abc_catalog):
    start = frozenset({"a"})
    tree = build_tree(abc_catalog, start, set())
    category = _category(tree, ["docs", "docs:View Operations"])

    selection.toggle_leaf(start, "b")
    selection.toggle_parent(start, category)
    selection.copy_from_role(start, {"z"})
    selection.select_all_in_category(start, category)
    selection.deselect_all_in_category(start, category)
    assert start == {"a"}


def test_cascade_select_then_deselect(abc_catalog):
    tree = build_tree(abc_catalog, set(), set())
    category = _category(tree, ["docs", "docs:View Operations"])

    selected = selection.toggle_parent({"other"}, category)
    assert {"a", "b", "c"} <= selected
    assert "other" in selected

    tree = build_tree(abc_catalog, selected, set())
    category = _category(tree, ["docs", "docs:View Operations"])
    assert category.selected is True

    selected = selection.toggle_parent(selected, category)
    assert selected & {"a", "b", "c"} == set()
    assert selected == {"other"}


def test_indeterminate_parent_selects_everything(abc_catalog):
    tree = build_tree(abc_catalog, {"a"}, set())
    resource = _category(tree, ["docs"])
    assert resource.indeterminate is True
    assert selection.toggle_parent({"a"}, resource) == {"a", "b", "c"}


def test_cascade_promotes_inherited_leaves(abc_catalog):
    tree = build_tree(abc_catalog, set(), {"b"})
    category = _category(tree, ["docs", "docs:View Operations"])
    assert [leaf.inherited for leaf in iter_leaves(category)] == [False, True, False]

    assert selection.toggle_parent(set(), category) == {"a", "b", "c"}


def test_cascade_deselect_strips_overlapping_direct_grants(abc_catalog):
    selected = {"a", "b", "c"}
    tree = build_tree(abc_catalog, selected, {"b"})
    category = _category(tree, ["docs", "docs:View Operations"])
    assert selection.toggle_parent(selected, category) == set()


@pytest.mark.parametrize("start", [set(), {"a"}, {"a", "q"}])
@pytest.mark.parametrize("source", [set(), {"b"}, {"a", "c"}])
def test_copy_from_role_is_monotonic(start, source):
    result = selection.copy_from_role(start, source)
    assert result >= start
    assert result >= source
    assert result == start | source


def test_select_all_in_category_skips_inherited(abc_catalog):
    tree = build_tree(abc_catalog, set(), {"b"})
    category = _category(tree, ["docs", "docs:View Operations"])
    assert selection.select_all_in_category({"z"}, category) == {"z", "a", "c"}


def test_deselect_all_in_category_scenario():
    catalog = [make_permission("m", "x", "modify"), make_permission("n", "x", "modify_own")]
    selected = {"n", "other"}
    tree = build_tree(catalog, selected, {"m"})
    category = _category(tree, ["x", "x:Modify Operations"])
    leaf_m = find_node(tree, ["x", "x:Modify Operations", "m"])
    assert leaf_m.inherited is True

    result = selection.deselect_all_in_category(selected, category)
    assert result == {"other"}
    assert "m" not in result


def test_select_all_excludes_inherited(catalog):
    inherited = {"view.invoices", "view.clients"}
    result = selection.select_all({"stale"}, catalog, inherited)

    assert result & inherited == set()
    assert result == {p.key for p in catalog} - inherited
    assert "stale" not in result


def test_deselect_all_and_reset():
    assert selection.deselect_all({"a", "b"}) == set()
    assert selection.reset_to_saved({"a", "b"}, ["c"]) == {"c"}
