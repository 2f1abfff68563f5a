# core/utils.py

from datetime import datetime, timezone
from typing import Any, Dict


def utcnow_iso() -> str:
    """Timestamp format written to created_at / updated_at columns."""
    return datetime.now(timezone.utc).isoformat()


def sanitize(data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Clean a payload before it is written to Supabase:
    - Empty / whitespace-only strings → None
    - Strings are stripped
    - Enum members → their value
    - Everything else is kept as-is
    """
    clean = {}

    for k, v in data.items():
        if isinstance(v, str):
            stripped = v.strip()
            clean[k] = stripped or None
            continue

        # str-based enums (UnitStatus etc.)
        if hasattr(v, "value") and isinstance(getattr(v, "value"), str):
            clean[k] = v.value
            continue

        clean[k] = v

    return clean


def drop_none(data: Dict[str, Any]) -> Dict[str, Any]:
    """Remove None values so partial updates don't null columns."""
    return {k: v for k, v in data.items() if v is not None}
