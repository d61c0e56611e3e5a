from enum import Enum


class BaseStrEnum(str, Enum):
    """
    Base enum that serializes cleanly to a string
    and provides a .list() method for UI dropdowns.
    """

    def __str__(self):
        return str(self.value)

    @classmethod
    def list(cls):
        return [item.value for item in cls]


# -----------------------------------------------------
# PERMISSION CATEGORY
# -----------------------------------------------------
class PermissionCategory(BaseStrEnum):
    """Middle tree level: bucket an action type falls into."""

    add = "Add Operations"
    modify = "Modify Operations"
    delete = "Delete Operations"
    view = "View Operations"
    other = "Other Operations"


# -----------------------------------------------------
# TREE NODE LEVEL
# -----------------------------------------------------
class NodeLevel(BaseStrEnum):
    """Depth of a node in the resource → category → permission tree."""

    resource = "resource"
    category = "category"
    permission = "permission"


# -----------------------------------------------------
# BULK OPERATION
# -----------------------------------------------------
class BulkOperation(BaseStrEnum):
    """Bulk edits the admin UI can apply to the edited role."""

    copy_from_role = "copy_from_role"
    select_all = "select_all"
    deselect_all = "deselect_all"
    select_all_in_category = "select_all_in_category"
    deselect_all_in_category = "deselect_all_in_category"
    reset_to_saved = "reset_to_saved"
