# services/identity_sync.py

"""
Mirror Clerk user lifecycle events into the users table.

    user.created  → insert (role defaults to tenant, id == clerk id)
    user.updated  → contact fields only; user_type is never touched
    user.deleted  → redact in place; the row stays for lease/payment FKs

Each handler is idempotent: replaying an event leaves the row as a
single application would.
"""

from datetime import datetime, timezone
from typing import Optional, Tuple

from core.errors import NotFoundError
from core.logging_config import get_logger
from core.utils import utcnow_iso
from models.enums import UserType
from models.webhook import ClerkUserData, ClerkWebhookEvent
from services.users import create_user, get_user_by_clerk_id, update_user_by_clerk_id

log = get_logger("identity_sync")

USER_CREATED = "user.created"
USER_UPDATED = "user.updated"
USER_DELETED = "user.deleted"


# ============================================================
# Payload helpers
# ============================================================
def primary_contact(data: ClerkUserData) -> Tuple[Optional[str], Optional[str]]:
    """
    The entries Clerk designates as primary; the first entry if the
    designation is missing or dangling.
    """
    email = next(
        (e.email_address for e in data.email_addresses if e.id == data.primary_email_address_id),
        None,
    )
    if email is None and data.email_addresses:
        email = data.email_addresses[0].email_address

    phone = next(
        (p.phone_number for p in data.phone_numbers if p.id == data.primary_phone_number_id),
        None,
    )
    if phone is None and data.phone_numbers:
        phone = data.phone_numbers[0].phone_number

    return email, phone


def full_name(data: ClerkUserData) -> str:
    return f"{data.first_name or ''} {data.last_name or ''}".strip()


def deleted_email(clerk_id: str) -> str:
    return f"deleted_{clerk_id}@deleted.com"


def _event_time(raw: dict) -> str:
    """Clerk's updated_at (epoch ms) so replays stamp the same value."""
    millis = raw.get("updated_at")
    if isinstance(millis, (int, float)):
        return datetime.fromtimestamp(millis / 1000, tz=timezone.utc).isoformat()
    return utcnow_iso()


# ============================================================
# Handlers
# ============================================================
def handle_user_created(raw: dict) -> dict:
    data = ClerkUserData(**raw)

    existing = get_user_by_clerk_id(data.id)
    if existing:
        log.info(f"user.created for {data.id}: row already exists, skipping")
        return existing

    email, phone = primary_contact(data)
    return create_user({
        "clerk_id": data.id,
        "email": email,
        "full_name": full_name(data),
        "phone_number": phone,
        "user_type": UserType.tenant.value,
    })


def handle_user_updated(raw: dict) -> dict:
    data = ClerkUserData(**raw)
    email, phone = primary_contact(data)

    updated = update_user_by_clerk_id(data.id, {
        "email": email,
        "full_name": full_name(data),
        "phone_number": phone,
        "updated_at": _event_time(raw),
    })
    if updated is None:
        raise NotFoundError("User", data.id)

    log.info(f"Synced contact details for {data.id}")
    return updated


def handle_user_deleted(raw: dict) -> dict:
    clerk_id = raw.get("id")
    if not clerk_id:
        raise ValueError("user.deleted event has no id")

    updated = update_user_by_clerk_id(clerk_id, {
        "email": deleted_email(clerk_id),
        "phone_number": None,
    })
    if updated is None:
        raise NotFoundError("User", clerk_id)

    log.info(f"Redacted users row for deleted Clerk user {clerk_id}")
    return updated


HANDLERS = {
    USER_CREATED: handle_user_created,
    USER_UPDATED: handle_user_updated,
    USER_DELETED: handle_user_deleted,
}


def process_event(event: ClerkWebhookEvent) -> Optional[dict]:
    """
    Apply one verified event. Returns the affected row, or None for
    event types this service does not mirror.
    """
    handler = HANDLERS.get(event.type)
    if handler is None:
        log.info(f"Ignoring Clerk event {event.type}")
        return None

    return handler(event.data)
