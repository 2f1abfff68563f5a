# routers/webhooks_clerk.py

"""
Clerk → users table sync.

Clerk delivers through Svix; every request is signature-checked before
anything is read from or written to Supabase.
"""

import json
from typing import Optional

from fastapi import APIRouter, Header, Request
from starlette.concurrency import run_in_threadpool
from pydantic import ValidationError
from svix.webhooks import Webhook, WebhookVerificationError

from core.config import settings
from core.errors import NotFoundError, api_error, handle_supabase_error
from core.logging_config import get_logger
from models.webhook import ClerkWebhookEvent
from services.identity_sync import process_event

log = get_logger("webhooks.clerk")

router = APIRouter(tags=["Webhooks"])


def verify_clerk_webhook(payload: bytes, headers: dict) -> dict:
    """
    Verify the Svix signature, then decode the body ourselves.
    verify() is only used for the exception it raises; its return value
    differs between svix releases.
    """
    if not settings.CLERK_WEBHOOK_SECRET:
        log.error("CLERK_WEBHOOK_SECRET is not configured")
        raise api_error(500, "Webhook secret is missing")

    try:
        Webhook(settings.CLERK_WEBHOOK_SECRET).verify(payload, headers)
    except WebhookVerificationError as e:
        log.warning(f"Clerk webhook signature rejected: {e}")
        raise api_error(400, "Invalid webhook signature")

    try:
        body = json.loads(payload)
    except ValueError:
        raise api_error(400, "Invalid webhook payload")

    if not isinstance(body, dict):
        raise api_error(400, "Invalid webhook payload")
    return body


@router.post("/api/webhooks/clerk", summary="Clerk user lifecycle webhook")
@router.post("/api/webhook/clerk", include_in_schema=False)
async def clerk_webhook(
    request: Request,
    svix_id: Optional[str] = Header(None, alias="svix-id"),
    svix_timestamp: Optional[str] = Header(None, alias="svix-timestamp"),
    svix_signature: Optional[str] = Header(None, alias="svix-signature"),
):
    """
    **Setup:**
    1. Add an endpoint in the Clerk dashboard: `https://your-api.com/api/webhooks/clerk`
    2. Subscribe to `user.created`, `user.updated`, `user.deleted`
    3. Put the signing secret (`whsec_...`) in `CLERK_WEBHOOK_SECRET`
    """
    if not (svix_id and svix_timestamp and svix_signature):
        raise api_error(400, "Missing svix headers")

    payload = await request.body()
    verified = verify_clerk_webhook(payload, {
        "svix-id": svix_id,
        "svix-timestamp": svix_timestamp,
        "svix-signature": svix_signature,
    })

    try:
        event = ClerkWebhookEvent(**verified)
    except ValidationError as e:
        raise api_error(400, "Invalid webhook payload", e.errors())

    log.info(f"Clerk event {event.type} ({svix_id})")

    try:
        row = await run_in_threadpool(process_event, event)
    except NotFoundError:
        raise api_error(404, "User not found")
    except ValidationError as e:
        raise api_error(400, "Invalid webhook payload", e.errors())
    except ValueError as e:
        raise api_error(400, str(e))
    except Exception as e:
        raise handle_supabase_error(e, f"Failed to process {event.type}")

    if row is None:
        return {"success": True, "ignored": True}

    return {"success": True, "data": row}
