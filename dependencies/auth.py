from typing import Any, Dict, Optional

from fastapi import Depends, HTTPException, Request, status
from pydantic import BaseModel

from core.clerk_verifier import get_verifier, ClerkVerificationError
from core.config import settings
from core.errors import api_error, handle_supabase_error
from core.logging_config import get_logger
from core.roles import normalize_role
from models.enums import UserType
from services.users import get_user_by_clerk_id

log = get_logger("auth")


# ============================================================
# Subject (authenticated Clerk identity, before role lookup)
# ============================================================
class Subject(BaseModel):
    external_id: str                 # Clerk user id (JWT sub)
    session_id: Optional[str] = None
    claims: Dict[str, Any] = {}


# ============================================================
# Current User (subject + users row + normalized role)
# ============================================================
class CurrentUser(BaseModel):
    id: str                          # internal users.id
    clerk_id: str
    role: str                        # always tenant | admin

    email: Optional[str] = None
    full_name: Optional[str] = None
    phone_number: Optional[str] = None

    @property
    def is_admin(self) -> bool:
        return self.role == UserType.admin.value


# ============================================================
# IDENTITY RESOLVER (fails closed, never raises)
# ============================================================
def extract_token(request: Request) -> Optional[str]:
    """
    Bearer header first (API clients), then Clerk's session cookie
    (same-site browser requests).
    """
    header = request.headers.get("authorization") or ""
    scheme, _, credentials = header.partition(" ")
    if scheme.lower() == "bearer" and credentials.strip():
        return credentials.strip()

    cookie = request.cookies.get(settings.SESSION_COOKIE_NAME)
    return cookie or None


def resolve_subject(request: Request) -> Optional[Subject]:
    token = extract_token(request)
    if not token:
        return None

    try:
        claims = get_verifier().verify_token(token)
    except ClerkVerificationError as e:
        log.info(f"Rejected session token ({e.error_code}): {e.message}")
        return None
    except Exception as e:
        log.error(f"Session verification failed unexpectedly: {e}", exc_info=True)
        return None

    return Subject(
        external_id=claims["sub"],
        session_id=claims.get("sid"),
        claims=claims,
    )


def get_subject(request: Request) -> Subject:
    subject = resolve_subject(request)
    if subject is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"error": "Unauthorized"},
            headers={"WWW-Authenticate": "Bearer"},
        )
    return subject


# ============================================================
# ROLE RESOLVER
# ============================================================
def resolve_role(subject: Subject) -> Optional[CurrentUser]:
    """
    Look up the users row for this subject.
    None → authenticated but no role chosen yet.
    """
    row = get_user_by_clerk_id(subject.external_id)
    if not row:
        return None

    return CurrentUser(
        id=str(row["id"]),
        clerk_id=row.get("clerk_id") or subject.external_id,
        role=normalize_role(row.get("user_type")),
        email=row.get("email"),
        full_name=row.get("full_name"),
        phone_number=row.get("phone_number"),
    )


def get_current_user(subject: Subject = Depends(get_subject)) -> CurrentUser:
    try:
        user = resolve_role(subject)
    except Exception as e:
        raise handle_supabase_error(e, "Failed to fetch user data")

    if user is None:
        raise api_error(
            status.HTTP_403_FORBIDDEN,
            "User role not set",
            {"action": "select_role", "path": "/api/auth/update-role"},
        )
    return user

