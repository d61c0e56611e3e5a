# core/permission_tree.py

"""
Permission tree projection.

Builds the resource → category → permission tree shown by the admin
permission manager from (catalog, selected keys, inherited keys).
The tree is a pure function of its inputs: grouping follows catalog
order, node ids are derived from the path, and nothing is cached.

Node ids:
    resource  -> "<resource_type>"
    category  -> "<resource_type>:<category label>"
    leaf      -> "<permission key>"
"""

import re
from typing import Dict, Iterable, Iterator, List, Optional, Sequence

from core.categorizer import categorize
from models.enums import NodeLevel, PermissionCategory
from models.permission import Permission, PermissionTreeNode


# ============================================================
# Display names
# ============================================================

def format_resource_name(resource_type: str) -> str:
    """"service_requests" -> "Service Requests"."""
    return " ".join(word[:1].upper() + word[1:] for word in resource_type.split("_"))


def format_action_name(action_type: str) -> str:
    """"viewOwn_invoices" -> "View Own Invoices"."""
    spaced = re.sub(r"([A-Z])", r" \1", action_type).replace("_", " ").strip()
    return " ".join(word[:1].upper() + word[1:] for word in spaced.split(" "))


# ============================================================
# Tri-state roll-up
# ============================================================

def iter_leaves(node: PermissionTreeNode) -> Iterator[PermissionTreeNode]:
    """Yield leaf descendants of a node (the node itself if it is a leaf)."""
    if node.is_leaf:
        yield node
        return
    for child in node.children or []:
        yield from iter_leaves(child)


def _parent_node(
    node_id: str,
    name: str,
    level: NodeLevel,
    children: List[PermissionTreeNode],
) -> PermissionTreeNode:
    leaves = [leaf for child in children for leaf in iter_leaves(child)]
    total = len(leaves)
    selected = sum(1 for leaf in leaves if leaf.selected)
    return PermissionTreeNode(
        id=node_id,
        name=name,
        level=level,
        children=children,
        selected=total > 0 and selected == total,
        indeterminate=0 < selected < total,
    )


# ============================================================
# Builder
# ============================================================

def _leaf_node(
    permission: Permission,
    selected: Iterable[str],
    inherited: Iterable[str],
    inherited_from: Optional[str],
) -> PermissionTreeNode:
    is_selected = permission.key in selected
    is_inherited = permission.key in inherited and not is_selected
    return PermissionTreeNode(
        id=permission.key,
        name=format_action_name(permission.action_type),
        description=permission.description,
        level=NodeLevel.permission,
        permission_key=permission.key,
        selected=is_selected,
        inherited=is_inherited,
        inherited_from=inherited_from if is_inherited else None,
    )


def build_tree(
    catalog: Sequence[Permission],
    selected: Iterable[str],
    inherited: Iterable[str],
    inherited_from: Optional[str] = None,
) -> List[PermissionTreeNode]:
    """
    Project the catalog into the three-level permission tree.

    Args:
        catalog: Permissions in catalog order (defines tree order)
        selected: Keys granted directly to the edited role
        inherited: Keys the edited role inherits from its ancestors
        inherited_from: Provenance text put on inherited leaves

    Returns:
        Resource nodes, each holding category nodes, each holding leaves
    """
    selected = set(selected)
    inherited = set(inherited)

    # resource_type -> category -> permissions; dicts keep first-occurrence order
    groups: Dict[str, Dict[PermissionCategory, List[Permission]]] = {}
    for permission in catalog:
        categories = groups.setdefault(permission.resource_type, {})
        categories.setdefault(categorize(permission.action_type), []).append(permission)

    tree = []
    for resource_type, categories in groups.items():
        category_nodes = []
        for category, permissions in categories.items():
            leaves = [_leaf_node(p, selected, inherited, inherited_from) for p in permissions]
            category_nodes.append(
                _parent_node(f"{resource_type}:{category.value}", category.value, NodeLevel.category, leaves)
            )
        tree.append(
            _parent_node(resource_type, format_resource_name(resource_type), NodeLevel.resource, category_nodes)
        )
    return tree


# ============================================================
# Navigation
# ============================================================

def find_node(tree: Sequence[PermissionTreeNode], path: Sequence[str]) -> Optional[PermissionTreeNode]:
    """
    Resolve a path of node ids from a resource node downwards.
    Returns None if any step is missing.
    """
    node = None
    level = tree
    for node_id in path:
        node = next((n for n in level if n.id == node_id), None)
        if node is None:
            return None
        level = node.children or []
    return node


def count_leaves(tree: Sequence[PermissionTreeNode]) -> int:
    return sum(1 for root in tree for _ in iter_leaves(root))


# ============================================================
# Search
# ============================================================

def filter_tree(tree: Sequence[PermissionTreeNode], query: Optional[str]) -> List[PermissionTreeNode]:
    """
    Keep leaves whose name, description, or key match the query, or whose
    resource or category name matches. Case-insensitive substring match.

    Empty branches are dropped and parent flags are recomputed over the
    remaining leaves. Selection state is never touched.
    """
    if not query:
        return list(tree)

    needle = query.lower()

    def matches(*texts: Optional[str]) -> bool:
        return any(needle in text.lower() for text in texts if text)

    filtered = []
    for resource in tree:
        category_nodes = []
        for category in resource.children or []:
            if matches(resource.name, category.name):
                leaves = list(category.children or [])
            else:
                leaves = [
                    leaf for leaf in category.children or []
                    if matches(leaf.name, leaf.description, leaf.permission_key)
                ]
            if leaves:
                category_nodes.append(_parent_node(category.id, category.name, NodeLevel.category, leaves))
        if category_nodes:
            filtered.append(_parent_node(resource.id, resource.name, NodeLevel.resource, category_nodes))
    return filtered
