# core/gateway.py
# Persistence gateway for roles, the permission catalog and role grants.

from typing import Dict, List, Optional, Sequence

from supabase import Client

from core.errors import LoadFailure, load_failure, save_failure
from core.logging_config import logger
from core.supabase_client import get_supabase_client
from models.permission import Permission, Role


PERMISSION_COLUMNS = "id, permission_key, resource_type, action_type, description, is_active"


class SupabasePermissionGateway:
    """
    Reads and writes the `roles`, `permissions` and `role_permissions`
    tables. Every client error surfaces as LoadFailure / SaveFailure;
    nothing is retried.
    """

    def __init__(self, client: Optional[Client] = None):
        self._client = client

    @property
    def client(self) -> Client:
        if self._client is None:
            self._client = get_supabase_client()
        if self._client is None:
            raise LoadFailure("Supabase client not configured")
        return self._client

    # -----------------------------------------------------
    # Reference data
    # -----------------------------------------------------
    def list_roles(self) -> List[Role]:
        try:
            result = (
                self.client.table("roles")
                .select("id, name, display_name, sort_order")
                .eq("is_active", True)
                .order("sort_order")
                .execute()
            )
        except LoadFailure:
            raise
        except Exception as e:
            raise load_failure(e, "Failed to fetch roles") from e

        return [Role.from_row(row) for row in result.data or []]

    def list_permission_catalog(self) -> List[Permission]:
        try:
            result = (
                self.client.table("permissions")
                .select(PERMISSION_COLUMNS)
                .eq("is_active", True)
                .order("resource_type")
                .order("action_type")
                .execute()
            )
        except LoadFailure:
            raise
        except Exception as e:
            raise load_failure(e, "Failed to fetch permission catalog") from e

        return [Permission.from_row(row) for row in result.data or []]

    # -----------------------------------------------------
    # Direct grants (never inherited ones)
    # -----------------------------------------------------
    def get_role_direct_permissions(self, role_id: str) -> List[Permission]:
        return self.get_roles_direct_permissions([role_id]).get(role_id, [])

    def get_roles_direct_permissions(self, role_ids: Sequence[str]) -> Dict[str, List[Permission]]:
        """
        Batch fetch direct grants for several roles in one query.
        Returns role_id -> permissions; every requested id is present.
        Grants on inactive permissions are left out.
        """
        if not role_ids:
            return {}

        result_map: Dict[str, List[Permission]] = {role_id: [] for role_id in role_ids}

        try:
            result = (
                self.client.table("role_permissions")
                .select(f"role_id, permissions!inner({PERMISSION_COLUMNS})")
                .in_("role_id", list(role_ids))
                .eq("permissions.is_active", True)
                .eq("is_granted", True)
                .execute()
            )
        except LoadFailure:
            raise
        except Exception as e:
            raise load_failure(e, "Failed to fetch role permissions") from e

        for row in result.data or []:
            role_id = str(row.get("role_id"))
            permission = row.get("permissions")
            if role_id not in result_map or not permission:
                continue
            permission = Permission.from_row(permission)
            if permission.active:
                result_map[role_id].append(permission)

        return result_map

    # -----------------------------------------------------
    # Save
    # -----------------------------------------------------
    def replace_role_permissions(self, role_id: str, permission_ids: Sequence[str]) -> dict:
        """
        Atomically replace a role's direct grants with `permission_ids`.
        Runs inside the replace_role_permissions Postgres function so the
        delete + insert happen in one transaction.
        """
        try:
            result = self.client.rpc(
                "replace_role_permissions",
                {"p_role_id": role_id, "p_permission_ids": list(permission_ids)},
            ).execute()
        except Exception as e:
            raise save_failure(e, "Failed to save role permissions") from e

        logger.info(f"Replaced permissions for role {role_id} ({len(permission_ids)} granted)")
        return {
            "role_id": role_id,
            "permission_count": len(permission_ids),
            "result": result.data,
        }
