# core/inheritance.py

from typing import Dict, Iterable, List, Mapping, Optional, Set

from models.permission import Role


def ancestors_of(role_name: str, inheritance: Mapping[str, List[str]]) -> List[str]:
    """Ancestor names for a role; roles without an entry have none."""
    return list(inheritance.get(role_name, []))


def resolve_inherited(
    role: Optional[Role],
    ancestor_direct_permissions: Mapping[str, Iterable[str]],
    inheritance: Mapping[str, List[str]],
) -> Set[str]:
    """
    Effective inherited permission keys for a role.

    Unions the direct keys of every ancestor listed for `role.name`.
    Ancestor sets are expected to be fetched already (one fetch per
    ancestor, no recursive expansion). A missing role, a role with no
    entry, or an ancestor with no fetched set contributes nothing.
    """
    if role is None:
        return set()

    inherited: Set[str] = set()
    for ancestor in ancestors_of(role.name, inheritance):
        inherited.update(ancestor_direct_permissions.get(ancestor, ()))
    return inherited


def inherited_from_label(role_name: str, inheritance: Mapping[str, List[str]]) -> Optional[str]:
    """
    Provenance text shown on inherited leaves.

    Lists every ancestor of the role, not the specific one granting a
    given key.
    """
    ancestors = ancestors_of(role_name, inheritance)
    return ", ".join(ancestors) if ancestors else None


def ancestor_roles(role: Role, roles: Iterable[Role], inheritance: Mapping[str, List[str]]) -> Dict[str, Role]:
    """Map ancestor name -> Role for ancestors present in the role list."""
    wanted = set(ancestors_of(role.name, inheritance))
    return {r.name: r for r in roles if r.name in wanted}
