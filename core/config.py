from typing import List, Optional
from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    # -------------------------------------------------
    # General
    # -------------------------------------------------
    PROJECT_NAME: str = "MAKAO Property Management API"
    ENV: str = "development"

    # -------------------------------------------------
    # Frontend Domains (CORS)
    # -------------------------------------------------
    FRONTEND_ORIGINS: List[str] = [
        "http://localhost:3000",
    ]

    BACKEND_CORS_ORIGINS: List[str] = []

    # -------------------------------------------------
    # Supabase (Primary DB)
    # -------------------------------------------------
    SUPABASE_URL: Optional[str] = Field(None, env="SUPABASE_URL")
    SUPABASE_ANON_KEY: Optional[str] = Field(None, env="SUPABASE_ANON_KEY")
    SUPABASE_SERVICE_ROLE_KEY: Optional[str] = Field(None, env="SUPABASE_SERVICE_ROLE_KEY")

    # -------------------------------------------------
    # Clerk (Identity Provider)
    # -------------------------------------------------
    CLERK_ISSUER_URL: Optional[str] = Field(None, env="CLERK_ISSUER_URL")
    CLERK_JWKS_URL: Optional[str] = Field(None, env="CLERK_JWKS_URL")
    CLERK_AUDIENCE: Optional[str] = Field(None, env="CLERK_AUDIENCE")
    CLERK_WEBHOOK_SECRET: Optional[str] = Field(None, env="CLERK_WEBHOOK_SECRET")

    # Clerk stores the session JWT in this cookie for same-site requests
    SESSION_COOKIE_NAME: str = "__session"

    # Seconds the JWKS document is kept before re-fetching
    JWKS_CACHE_SECONDS: int = 3600

    # -------------------------------------------------
    # Authorization policy
    # -------------------------------------------------
    # Admins may read tenant-scoped collections (maintenance, notifications, leases)
    ADMIN_READS_TENANT_DATA: bool = True

    # -------------------------------------------------
    # SMTP Email Notifications
    # -------------------------------------------------
    SMTP_HOST: Optional[str] = Field(None, env="SMTP_HOST")
    SMTP_PORT: Optional[int] = Field(None, env="SMTP_PORT")
    SMTP_USER: Optional[str] = Field(None, env="SMTP_USER")
    SMTP_PASS: Optional[str] = Field(None, env="SMTP_PASS")

    # -------------------------------------------------
    # Model Config
    # -------------------------------------------------
    class Config:
        case_sensitive = True


# Instantiate settings
settings = Settings()

# -------------------------------------------------
# Build CORS list after loading settings
# -------------------------------------------------
settings.BACKEND_CORS_ORIGINS = sorted(
    set(origin.rstrip("/") for origin in settings.FRONTEND_ORIGINS)
)
