# core/errors.py

from fastapi import HTTPException


# =================================================================
#  ENGINE ERROR TAXONOMY
# =================================================================

class PermissionEngineError(Exception):
    """Base class for all permission editor failures."""


class LoadFailure(PermissionEngineError):
    """Catalog, role list, or role permissions could not be fetched."""


class SaveFailure(PermissionEngineError):
    """The gateway rejected a permission replace for a role."""


class ImmutableRoleError(SaveFailure):
    """Attempt to save a role configured as read-only (e.g. executive)."""


class UnknownNodeError(PermissionEngineError, KeyError):
    """A node path does not resolve to a node in the current tree."""

    def __str__(self):
        # KeyError quotes its argument; keep plain messages
        return str(self.args[0]) if self.args else ""


class InheritanceConfigError(PermissionEngineError, ValueError):
    """The role inheritance map is malformed or cyclic."""


# =================================================================
#  SUPABASE ERROR HELPERS
# =================================================================

def extract_supabase_error(error: Exception) -> str:
    """
    Safely extract readable details from Supabase Python client errors.
    Handles:
      • PostgREST errors
      • Generic Python exceptions
    """

    # Case 1: PostgREST APIError exposes .message
    message = getattr(error, "message", None)
    if message:
        return str(message)

    # Case 2: Supabase errors with args (common)
    if getattr(error, "args", None):
        return str(error.args[0])

    # Case 3: Plain string fallback
    return str(error) or error.__class__.__name__


def load_failure(error: Exception, operation: str) -> LoadFailure:
    """
    Wrap a client error as a LoadFailure with a descriptive message.
    Returns (doesn't raise) so the caller can `raise ... from error`.
    """
    return LoadFailure(f"{operation}: {extract_supabase_error(error)}")


def save_failure(error: Exception, operation: str) -> SaveFailure:
    """Wrap a client error as a SaveFailure; the gateway detail is kept verbatim."""
    return SaveFailure(f"{operation}: {extract_supabase_error(error)}")


# =================================================================
#  HTTP BOUNDARY
# =================================================================

def engine_error_to_http(error: PermissionEngineError, operation: str = "Permission operation") -> HTTPException:
    """
    Convert an engine error into an HTTPException with consistent formatting.
    Returns HTTPException (doesn't raise) so caller can customize or re-raise.

    Args:
        error: The engine error that occurred
        operation: Description of what failed (e.g., "Failed to save role permissions")

    Returns:
        HTTPException with standardized error message
    """
    from core.logging_config import logger

    logger.error(f"{operation}: {error}")

    if isinstance(error, ImmutableRoleError):
        return HTTPException(status_code=403, detail=str(error))
    if isinstance(error, UnknownNodeError):
        return HTTPException(status_code=404, detail=str(error))
    if isinstance(error, (LoadFailure, SaveFailure)):
        return HTTPException(status_code=502, detail=f"{operation}: {error}")
    if isinstance(error, InheritanceConfigError):
        return HTTPException(status_code=500, detail=str(error))
    return HTTPException(status_code=500, detail=f"{operation} failed")
