# ============================================
# CENTRALIZED ROLE → ANCESTORS MAP
# ============================================
# Each entry is the FULL ancestor set of the role (already flattened).
# The resolver never walks this graph; whatever is listed here is what
# the role inherits.

import json
from pathlib import Path
from typing import Dict, List, Optional

from core.errors import InheritanceConfigError
from core.logging_config import logger


ROLE_INHERITANCE: Dict[str, List[str]] = {

    # =====================================================
    # EXECUTIVE: inherits every operational role
    # =====================================================
    "executive": ["admin", "sales", "technician"],

    # =====================================================
    # ADMIN
    # =====================================================
    "admin": ["technician"],

    # =====================================================
    # SALES
    # =====================================================
    "sales": [],

    # =====================================================
    # TECHNICIAN
    # =====================================================
    "technician": [],
}


def validate_inheritance_map(inheritance: Dict[str, List[str]]) -> Dict[str, List[str]]:
    """
    Check the map once at startup.

    Raises InheritanceConfigError for a malformed entry or any cycle
    (self-reference included). Entries that are not transitively complete
    only produce a warning.
    """
    if not isinstance(inheritance, dict):
        raise InheritanceConfigError("Role inheritance map must be an object of role -> ancestor list")

    for role_name, ancestors in inheritance.items():
        if not isinstance(ancestors, list) or not all(isinstance(a, str) for a in ancestors):
            raise InheritanceConfigError(f"Ancestors of '{role_name}' must be a list of role names")
        if role_name in ancestors:
            raise InheritanceConfigError(f"Role '{role_name}' lists itself as an ancestor")

    # Depth-first search for cycles; 1 = on stack, 2 = done
    state: Dict[str, int] = {}

    def visit(role_name: str, trail: List[str]):
        mark = state.get(role_name)
        if mark == 2:
            return
        if mark == 1:
            cycle = " -> ".join(trail[trail.index(role_name):] + [role_name])
            raise InheritanceConfigError(f"Role inheritance cycle: {cycle}")
        state[role_name] = 1
        for ancestor in inheritance.get(role_name, []):
            visit(ancestor, trail + [role_name])
        state[role_name] = 2

    for role_name in inheritance:
        visit(role_name, [])

    for role_name, ancestors in inheritance.items():
        listed = set(ancestors)
        for ancestor in ancestors:
            missing = [a for a in inheritance.get(ancestor, []) if a not in listed]
            if missing:
                logger.warning(
                    f"Role '{role_name}' inherits '{ancestor}' but not its ancestors "
                    f"{missing}; entries are used as-is"
                )

    return inheritance


def load_inheritance_map(path: Optional[str] = None) -> Dict[str, List[str]]:
    """
    Load and validate the inheritance map.
    Uses ROLE_INHERITANCE when no file is configured.
    """
    if not path:
        return validate_inheritance_map({k: list(v) for k, v in ROLE_INHERITANCE.items()})

    file_path = Path(path)
    try:
        raw = json.loads(file_path.read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        raise InheritanceConfigError(f"Role inheritance file not found: {file_path}") from e
    except json.JSONDecodeError as e:
        raise InheritanceConfigError(f"Role inheritance file is not valid JSON: {e}") from e

    inheritance = validate_inheritance_map(raw)
    logger.info(f"Loaded role inheritance map from {file_path} ({len(inheritance)} roles)")
    return inheritance


_inheritance: Optional[Dict[str, List[str]]] = None


def get_inheritance_map() -> Dict[str, List[str]]:
    """Process-wide inheritance map, loaded and validated on first use."""
    global _inheritance
    if _inheritance is None:
        from core.config import settings
        _inheritance = load_inheritance_map(settings.ROLE_INHERITANCE_FILE)
    return _inheritance
