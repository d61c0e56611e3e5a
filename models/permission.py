# models/permission.py

from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field

from .enums import NodeLevel


# ===============================================================
# REFERENCE DATA (read-only, owned by the catalog / role tables)
# ===============================================================

class Permission(BaseModel):
    """
    Mirrors a row of the `permissions` table.
    `key` is the stable identifier; `id` is the database id used on save.
    """
    id: str
    key: str
    resource_type: str
    action_type: str
    description: str = ""
    active: bool = True

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "Permission":
        return cls(
            id=str(row["id"]),
            key=row["permission_key"],
            resource_type=row["resource_type"],
            action_type=row["action_type"],
            description=row.get("description") or "",
            active=row.get("is_active", True) is not False,
        )


class Role(BaseModel):
    """
    Mirrors a row of the `roles` table.
    `name` is the key used by the role inheritance map.
    """
    id: str
    name: str
    display_name: str
    sort_order: Optional[int] = None

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "Role":
        return cls(
            id=str(row["id"]),
            name=row["name"],
            display_name=row.get("display_name") or row["name"],
            sort_order=row.get("sort_order"),
        )


# ===============================================================
# TREE PROJECTION
# ===============================================================

class PermissionTreeNode(BaseModel):
    """
    One node of the resource → category → permission tree.

    Leaves carry `permission_key` and the `inherited` flags; resource and
    category nodes carry `children`. The tree is rebuilt on every change,
    never edited in place.
    """
    id: str
    name: str
    level: NodeLevel
    description: Optional[str] = None
    permission_key: Optional[str] = None
    children: Optional[List["PermissionTreeNode"]] = None
    selected: bool = False
    indeterminate: bool = False
    inherited: bool = False
    inherited_from: Optional[str] = None

    @property
    def is_leaf(self) -> bool:
        return self.level == NodeLevel.permission


# ===============================================================
# API PAYLOADS
# ===============================================================

class ToggleRequest(BaseModel):
    """Path of node ids from a resource node down to the toggled node."""
    node_path: List[str] = Field(..., min_length=1)


class BulkOperationRequest(BaseModel):
    operation: str = Field(..., description="One of BulkOperation")
    args: Dict[str, Any] = {}


class PermissionTreeRead(BaseModel):
    """Returned to the admin UI after every load / mutation."""
    role: Role
    read_only: bool = False
    has_changes: bool = False
    selected_count: int = 0
    inherited_count: int = 0
    tree: List[PermissionTreeNode] = []
