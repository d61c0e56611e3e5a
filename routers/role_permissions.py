# routers/role_permissions.py

from typing import Dict, List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query

from core.cache import drop_editor, get_editor, put_editor
from core.config import settings
from core.errors import PermissionEngineError, engine_error_to_http
from core.gateway import SupabasePermissionGateway
from core.logging_config import logger
from core.permission_manager import RolePermissionEditor, sort_roles
from core.role_inheritance import get_inheritance_map
from models.permission import BulkOperationRequest, ToggleRequest

router = APIRouter(
    prefix="/role-permissions",
    tags=["Role Permissions"],
)


# ============================================================
# Dependencies
# ============================================================
def get_gateway() -> SupabasePermissionGateway:
    return SupabasePermissionGateway()


def get_role_inheritance() -> Dict[str, List[str]]:
    return get_inheritance_map()


def require_editor(role_id: str) -> RolePermissionEditor:
    editor = get_editor(role_id)
    if editor is None:
        raise HTTPException(404, f"No open permission editor for role {role_id}")
    return editor


def ok(data) -> dict:
    return {"success": True, "data": data}


def _tree_payload(editor: RolePermissionEditor, query: Optional[str] = None) -> dict:
    return editor.summary(query).model_dump(mode="json")


# ============================================================
# Reference data
# ============================================================
@router.get(
    "/roles",
    summary="List roles",
    description="Active roles in display order, with their ancestors from the inheritance map.",
)
def list_roles(
    gateway: SupabasePermissionGateway = Depends(get_gateway),
    inheritance: Dict[str, List[str]] = Depends(get_role_inheritance),
):
    try:
        roles = sort_roles(gateway.list_roles(), settings.ROLE_DISPLAY_ORDER)
    except PermissionEngineError as e:
        raise engine_error_to_http(e, "Failed to fetch roles")

    return ok({
        "roles": [
            {
                **role.model_dump(mode="json"),
                "inherits_from": inheritance.get(role.name, []),
                "read_only": role.name in settings.READ_ONLY_ROLES,
            }
            for role in roles
        ],
        "count": len(roles),
    })


@router.get(
    "/catalog",
    summary="List permission catalog",
)
def list_catalog(gateway: SupabasePermissionGateway = Depends(get_gateway)):
    try:
        catalog = [p for p in gateway.list_permission_catalog() if p.active]
    except PermissionEngineError as e:
        raise engine_error_to_http(e, "Failed to fetch permissions")

    return ok({
        "permissions": [p.model_dump(mode="json") for p in catalog],
        "count": len(catalog),
    })


# ============================================================
# Editor sessions
# ============================================================
@router.post(
    "/{role_id}/editor",
    summary="Open a permission editor for a role",
    description="Loads roles, catalog, and the role's direct + inherited permissions. "
                "Replaces any editor already open for the role (unsaved edits are dropped).",
)
def open_editor(
    role_id: str,
    gateway: SupabasePermissionGateway = Depends(get_gateway),
    inheritance: Dict[str, List[str]] = Depends(get_role_inheritance),
):
    editor = RolePermissionEditor(gateway, inheritance)
    try:
        editor.load()
        role = editor.select_role(role_id)
    except PermissionEngineError as e:
        raise engine_error_to_http(e, "Failed to load role permissions")

    if role is None:
        raise HTTPException(404, f"Role {role_id} not found")

    put_editor(role_id, editor)
    logger.info(f"Opened permission editor for role '{role.name}'")
    return ok(_tree_payload(editor))


@router.get(
    "/{role_id}/tree",
    summary="Current permission tree",
)
def get_tree(
    role_id: str,
    q: Optional[str] = Query(None, description="Filter leaves by name, description, key, resource, or category"),
):
    editor = require_editor(role_id)
    return ok(_tree_payload(editor, q))


@router.post(
    "/{role_id}/toggle",
    summary="Toggle a permission, category, or resource",
)
def toggle_node(role_id: str, payload: ToggleRequest):
    editor = require_editor(role_id)
    try:
        editor.apply_toggle(payload.node_path)
    except PermissionEngineError as e:
        raise engine_error_to_http(e, "Failed to toggle permission")

    return ok(_tree_payload(editor))


@router.post(
    "/{role_id}/bulk",
    summary="Apply a bulk operation",
    description="copy_from_role {source_role_id}, select_all, deselect_all, "
                "select_all_in_category {node_path}, deselect_all_in_category {node_path}, reset_to_saved",
)
def bulk_operation(role_id: str, payload: BulkOperationRequest):
    editor = require_editor(role_id)
    try:
        editor.apply_bulk_op(payload.operation, payload.args)
    except PermissionEngineError as e:
        raise engine_error_to_http(e, f"Failed to apply {payload.operation}")
    except ValueError as e:
        raise HTTPException(400, str(e))

    return ok(_tree_payload(editor))


@router.post(
    "/{role_id}/save",
    summary="Save the role's permissions",
    description="Replaces the role's direct permissions with the current selection.",
)
def save_permissions(role_id: str):
    editor = require_editor(role_id)
    try:
        ack = editor.save()
    except PermissionEngineError as e:
        raise engine_error_to_http(e, "Failed to save role permissions")

    return {
        "success": True,
        "message": "Role permissions updated successfully",
        "data": {**_tree_payload(editor), "ack": ack},
    }


@router.post(
    "/{role_id}/reset",
    summary="Discard unsaved changes",
)
def reset_permissions(role_id: str):
    editor = require_editor(role_id)
    try:
        editor.reset()
    except PermissionEngineError as e:
        raise engine_error_to_http(e, "Failed to reload role permissions")

    return ok(_tree_payload(editor))


@router.delete(
    "/{role_id}/editor",
    summary="Close the role's editor",
)
def close_editor(role_id: str):
    drop_editor(role_id)
    return {"success": True, "message": f"Editor for role {role_id} closed"}
