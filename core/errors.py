# core/errors.py

from typing import Any, Optional

from fastapi import HTTPException

from core.logging_config import logger


# PostgREST: .single() matched zero rows
NO_ROWS_CODE = "PGRST116"

# Postgres: relation (table) does not exist
UNDEFINED_TABLE_CODE = "42P01"


class NotFoundError(Exception):
    """Lookup miss where the caller expected the row to exist."""

    def __init__(self, entity: str, key: Any = None):
        self.entity = entity
        self.key = key
        super().__init__(f"{entity} not found" if key is None else f"{entity} {key} not found")


class NotProvisionedError(Exception):
    """A backing table has not been created yet in this environment."""

    def __init__(self, table: str):
        self.table = table
        super().__init__(f"Table '{table}' is not provisioned")


def extract_supabase_error(error: Exception) -> str:
    """
    Safely extract readable details from Supabase Python client errors.
    Handles:
      • PostgREST errors
      • Generic Python exceptions
    """

    if getattr(error, "message", None):
        return str(error.message)

    if getattr(error, "args", None):
        return str(error.args[0])

    return str(error) or "Unknown Supabase error"


def supabase_error_code(error: Exception) -> Optional[str]:
    """PostgREST / Postgres error code, when the client exposes one."""
    code = getattr(error, "code", None)
    if code:
        return str(code)

    # Some client versions only carry the payload dict in args[0]
    if getattr(error, "args", None) and isinstance(error.args[0], dict):
        code = error.args[0].get("code")
        return str(code) if code else None

    return None


def is_no_rows_error(error: Exception) -> bool:
    return supabase_error_code(error) == NO_ROWS_CODE


def is_missing_relation_error(error: Exception) -> bool:
    return supabase_error_code(error) == UNDEFINED_TABLE_CODE


def api_error(status_code: int, message: str, details: Any = None) -> HTTPException:
    """
    Build an HTTPException whose body renders as {"error": ..., "details": ...}.
    """
    detail = {"error": message}
    if details is not None:
        detail["details"] = details
    return HTTPException(status_code=status_code, detail=detail)


def handle_supabase_error(error: Exception, operation: str = "Database operation") -> HTTPException:
    """
    Convert a store failure into an HTTPException.
    Returns HTTPException (doesn't raise) so caller can re-raise.

    - NotFoundError / PGRST116 → 404
    - NotProvisionedError / 42P01 → 503
    - anything else → 500 with the upstream error echoed for diagnostics
    """
    if isinstance(error, HTTPException):
        return error

    error_detail = extract_supabase_error(error)

    if isinstance(error, NotFoundError) or is_no_rows_error(error):
        logger.info(f"{operation}: not found ({error_detail})")
        return api_error(404, f"{operation}: resource not found")

    if isinstance(error, NotProvisionedError) or is_missing_relation_error(error):
        logger.warning(f"{operation}: backing table not provisioned ({error_detail})")
        return api_error(503, f"{operation}: not yet provisioned")

    logger.error(f"{operation}: {error_detail}")

    details = {"message": error_detail}
    code = supabase_error_code(error)
    if code:
        details["code"] = code

    return api_error(500, operation, details)
