# core/selection.py

"""
Selection transitions for the edited role.

Every function takes the current set of directly granted keys and
returns a new set; inputs are never mutated. Rebuilding the tree after
a transition is the caller's job.
"""

from typing import AbstractSet, Iterable, Sequence, Set

from core.permission_tree import iter_leaves
from models.permission import Permission, PermissionTreeNode


def toggle_leaf(selected: AbstractSet[str], key: str) -> Set[str]:
    """Grant the key if absent, revoke it if present."""
    return set(selected) ^ {key}


def toggle_parent(selected: AbstractSet[str], node: PermissionTreeNode) -> Set[str]:
    """
    Cascade a resource/category toggle to every leaf below it.

    A fully selected node becomes fully deselected; an indeterminate or
    unselected node becomes fully selected. Inherited-only leaves are
    included, so selecting promotes them to direct grants and
    deselecting strips direct grants that overlap with inheritance.
    """
    new_state = not node.selected and not node.indeterminate
    keys = {leaf.permission_key for leaf in iter_leaves(node)}
    if new_state:
        return set(selected) | keys
    return set(selected) - keys


def copy_from_role(selected: AbstractSet[str], source_direct_keys: Iterable[str]) -> Set[str]:
    """Add another role's direct grants; never removes anything."""
    return set(selected) | set(source_direct_keys)


def select_all_in_category(selected: AbstractSet[str], category_node: PermissionTreeNode) -> Set[str]:
    """Grant every leaf of the category except inherited-only ones."""
    return set(selected) | {
        leaf.permission_key for leaf in iter_leaves(category_node) if not leaf.inherited
    }


def deselect_all_in_category(selected: AbstractSet[str], category_node: PermissionTreeNode) -> Set[str]:
    return set(selected) - {leaf.permission_key for leaf in iter_leaves(category_node)}


def select_all(
    selected: AbstractSet[str],
    catalog: Sequence[Permission],
    inherited: AbstractSet[str],
) -> Set[str]:
    """Replace the selection with every catalog key not already inherited."""
    return {p.key for p in catalog if p.key not in inherited}


def deselect_all(selected: AbstractSet[str]) -> Set[str]:
    return set()


def reset_to_saved(selected: AbstractSet[str], saved_direct_keys: Iterable[str]) -> Set[str]:
    """Discard in-memory edits in favour of the last persisted grants."""
    return set(saved_direct_keys)
