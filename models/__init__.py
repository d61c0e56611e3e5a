# -------------------------
# Enums
# -------------------------
from .enums import (
    BaseStrEnum,
    PermissionCategory,
    NodeLevel,
    BulkOperation,
)

# -------------------------
# Permission / Role Models
# -------------------------
from .permission import (
    Permission,
    Role,
    PermissionTreeNode,
    ToggleRequest,
    BulkOperationRequest,
    PermissionTreeRead,
)

__all__ = [
    # enums
    "BaseStrEnum",
    "PermissionCategory",
    "NodeLevel",
    "BulkOperation",

    # reference data
    "Permission",
    "Role",

    # tree
    "PermissionTreeNode",
    "PermissionTreeRead",

    # payloads
    "ToggleRequest",
    "BulkOperationRequest",
]
