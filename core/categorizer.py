# core/categorizer.py

from models.enums import PermissionCategory


def categorize(action_type: str) -> PermissionCategory:
    """
    Bucket an action type into its tree category.

    First match wins, in this order: "add", "modify", "delete"
    (case-insensitive), "view". Anything else is Other Operations.
    """
    if "add" in action_type:
        return PermissionCategory.add
    if "modify" in action_type:
        return PermissionCategory.modify
    if "delete" in action_type.lower():
        return PermissionCategory.delete
    if "view" in action_type:
        return PermissionCategory.view
    return PermissionCategory.other
