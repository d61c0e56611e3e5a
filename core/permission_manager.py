# core/permission_manager.py

"""
Role permission editor.

Holds the editing state for one role at a time:

  - roles / catalog   reference data, loaded once per editor
  - selected          keys granted directly to the edited role (mutable)
  - inherited         keys granted by the role's ancestors (derived)
  - saved             direct grants as last loaded from the gateway

All edits go through the pure transitions in core.selection and the
tree is rebuilt from (catalog, selected, inherited) whenever it is
asked for. Nothing reaches the database until save().

Usage:
    editor = RolePermissionEditor(SupabasePermissionGateway())
    editor.load()
    editor.select_role(role_id)
    editor.apply_toggle(["invoices", "invoices:View Operations"])
    editor.save()
"""

from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Set

from core import selection
from core.config import settings
from core.errors import ImmutableRoleError, LoadFailure, SaveFailure, UnknownNodeError
from core.inheritance import ancestor_roles, inherited_from_label, resolve_inherited
from core.logging_config import logger
from core.permission_tree import build_tree, filter_tree, find_node
from core.role_inheritance import get_inheritance_map
from models.enums import BulkOperation, NodeLevel
from models.permission import Permission, PermissionTreeNode, PermissionTreeRead, Role


def keys_to_permission_ids(keys: Iterable[str], catalog: Sequence[Permission]) -> List[str]:
    """
    Map permission keys to catalog ids, in catalog order.
    Keys with no catalog entry are dropped.
    """
    keys = set(keys)
    return [p.id for p in catalog if p.key in keys]


def active_keys(permissions: Iterable[Permission]) -> Set[str]:
    """Keys of the active permissions only."""
    return {p.key for p in permissions if p.active}


def sort_roles(roles: Iterable[Role], display_order: Sequence[str]) -> List[Role]:
    """Configured display order first, then sort_order, then name."""
    def sort_key(role: Role):
        rank = display_order.index(role.name) if role.name in display_order else len(display_order)
        sort_order = role.sort_order if role.sort_order is not None else float("inf")
        return (rank, sort_order, role.name)

    return sorted(roles, key=sort_key)


class RolePermissionEditor:
    """
    Editing session for role permissions.

    Attributes:
        roles: Active roles in display order.
        catalog: Active permissions in catalog order.
        role: The role currently being edited (None until select_role).
        selected: Direct grants being edited.
        inherited: Keys inherited from the role's ancestors.
    """

    def __init__(
        self,
        gateway,
        inheritance: Optional[Mapping[str, List[str]]] = None,
        read_only_roles: Optional[Iterable[str]] = None,
        role_display_order: Optional[Sequence[str]] = None,
    ):
        self.gateway = gateway
        self.inheritance = inheritance if inheritance is not None else get_inheritance_map()
        self.read_only_roles = set(read_only_roles if read_only_roles is not None else settings.READ_ONLY_ROLES)
        self.role_display_order = list(role_display_order if role_display_order is not None else settings.ROLE_DISPLAY_ORDER)

        self.roles: List[Role] = []
        self.catalog: List[Permission] = []
        self.role: Optional[Role] = None
        self.selected: Set[str] = set()
        self.inherited: Set[str] = set()
        self._saved: Set[str] = set()

    # =====================================================
    # Loading
    # =====================================================
    def load(self) -> None:
        """Fetch roles and the active catalog. Prior state survives a failure."""
        roles = self.gateway.list_roles()
        catalog = self.gateway.list_permission_catalog()

        self.roles = sort_roles(roles, self.role_display_order)
        self.catalog = [p for p in catalog if p.active]
        logger.debug(f"Loaded {len(self.roles)} roles and {len(self.catalog)} permissions")

    def get_role(self, role_id: str) -> Optional[Role]:
        return next((r for r in self.roles if r.id == str(role_id)), None)

    def select_role(self, role_id: str) -> Optional[Role]:
        """
        Make `role_id` the edited role and load its direct and inherited keys.

        The role and all of its ancestors are fetched in one batch; ancestors
        are taken from the inheritance map as-is, never expanded. Returns
        None (and changes nothing) when the role is not in the role list.
        """
        role = self.get_role(role_id)
        if role is None:
            logger.debug(f"Role {role_id} not in role list; nothing to edit")
            return None

        ancestors = ancestor_roles(role, self.roles, self.inheritance)
        direct = self.gateway.get_roles_direct_permissions(
            [role.id] + [a.id for a in ancestors.values()]
        )

        ancestor_keys = {
            name: active_keys(direct.get(ancestor.id, []))
            for name, ancestor in ancestors.items()
        }

        self.role = role
        self.selected = active_keys(direct.get(role.id, []))
        self._saved = set(self.selected)
        self.inherited = resolve_inherited(role, ancestor_keys, self.inheritance)

        logger.debug(
            f"Editing role '{role.name}': {len(self.selected)} direct, "
            f"{len(self.inherited)} inherited from {sorted(ancestor_keys)}"
        )
        return role

    # =====================================================
    # Projection
    # =====================================================
    @property
    def read_only(self) -> bool:
        return self.role is not None and self.role.name in self.read_only_roles

    @property
    def has_changes(self) -> bool:
        return self.selected != self._saved

    def get_tree(self, query: Optional[str] = None) -> List[PermissionTreeNode]:
        inherited_from = inherited_from_label(self.role.name, self.inheritance) if self.role else None
        tree = build_tree(self.catalog, self.selected, self.inherited, inherited_from)
        return filter_tree(tree, query)

    def get_selected_count(self) -> int:
        return len(self.selected)

    def get_inherited_count(self) -> int:
        """Inherited keys that are not also granted directly."""
        return len(self.inherited - self.selected)

    def summary(self, query: Optional[str] = None) -> PermissionTreeRead:
        if self.role is None:
            raise LoadFailure("No role selected")
        return PermissionTreeRead(
            role=self.role,
            read_only=self.read_only,
            has_changes=self.has_changes,
            selected_count=self.get_selected_count(),
            inherited_count=self.get_inherited_count(),
            tree=self.get_tree(query),
        )

    # =====================================================
    # Mutations
    # =====================================================
    def _node(self, node_path: Sequence[str]) -> PermissionTreeNode:
        node = find_node(self.get_tree(), node_path)
        if node is None:
            raise UnknownNodeError(f"No permission tree node at path {'/'.join(node_path)}")
        return node

    def _category(self, node_path: Sequence[str]) -> PermissionTreeNode:
        node = self._node(node_path)
        if node.level != NodeLevel.category:
            raise ValueError(f"Node {node.id} is a {node.level} node, not a category")
        return node

    def apply_toggle(self, node_path: Sequence[str]) -> None:
        """Toggle a leaf, or cascade-toggle a resource/category node."""
        node = self._node(node_path)
        if node.is_leaf:
            self.selected = selection.toggle_leaf(self.selected, node.permission_key)
        else:
            self.selected = selection.toggle_parent(self.selected, node)

    def apply_bulk_op(self, op_name: str, args: Optional[Dict[str, Any]] = None) -> None:
        """
        Apply a BulkOperation by name.

        Args:
            op_name: One of BulkOperation's values
            args: copy_from_role needs {"source_role_id"}; the category
                  operations need {"node_path"}

        Raises:
            ValueError: Unknown operation, or missing / wrong arguments
            UnknownNodeError: node_path not in the tree
            LoadFailure: A gateway fetch failed (selection unchanged)
        """
        op = BulkOperation(op_name)
        args = args or {}

        if op == BulkOperation.copy_from_role:
            source_role_id = args.get("source_role_id")
            if source_role_id is None:
                raise ValueError("copy_from_role requires 'source_role_id'")
            if self.get_role(source_role_id) is None:
                logger.debug(f"Copy source role {source_role_id} not in role list; ignored")
                return
            source = self.gateway.get_role_direct_permissions(str(source_role_id))
            self.selected = selection.copy_from_role(self.selected, active_keys(source))

        elif op == BulkOperation.select_all:
            self.selected = selection.select_all(self.selected, self.catalog, self.inherited)

        elif op == BulkOperation.deselect_all:
            self.selected = selection.deselect_all(self.selected)

        elif op in (BulkOperation.select_all_in_category, BulkOperation.deselect_all_in_category):
            node_path = args.get("node_path")
            if not node_path:
                raise ValueError(f"{op.value} requires 'node_path'")
            if not isinstance(node_path, list) or not all(isinstance(part, str) for part in node_path):
                raise ValueError(f"{op.value} 'node_path' must be a list of node ids")
            category = self._category(node_path)
            if op == BulkOperation.select_all_in_category:
                self.selected = selection.select_all_in_category(self.selected, category)
            else:
                self.selected = selection.deselect_all_in_category(self.selected, category)

        elif op == BulkOperation.reset_to_saved:
            self.reset()

    # =====================================================
    # Persistence
    # =====================================================
    def reset(self) -> None:
        """Drop in-memory edits by reloading direct grants from the gateway."""
        if self.role is None:
            return
        saved = active_keys(self.gateway.get_role_direct_permissions(self.role.id))
        self.selected = selection.reset_to_saved(self.selected, saved)
        self._saved = set(saved)

    def save(self) -> dict:
        """
        Replace the role's direct grants with the current selection.

        Keys missing from the catalog are dropped. On failure the selection
        is left untouched so the save can be retried. On success the role
        is reloaded so selection and inheritance match the database.
        """
        if self.role is None:
            raise SaveFailure("No role selected")
        if self.read_only:
            raise ImmutableRoleError(
                f"Cannot modify {self.role.name} role permissions; the role is read-only"
            )

        role = self.role
        permission_ids = keys_to_permission_ids(self.selected, self.catalog)
        ack = self.gateway.replace_role_permissions(role.id, permission_ids)
        logger.info(f"Saved {len(permission_ids)} permissions for role '{role.name}'")

        try:
            self.select_role(role.id)
        except LoadFailure as e:
            # Save went through; keep the edited selection as the saved state
            logger.error(f"Saved role '{role.name}' but reload failed: {e}")
            self._saved = set(self.selected)
            return {**ack, "reloaded": False}

        return {**ack, "reloaded": True}
