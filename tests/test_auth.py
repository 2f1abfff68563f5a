# tests/test_auth.py

"""
Tests for identity resolution, role resolution and role selection.
"""

import time

import pytest
from fastapi.testclient import TestClient
from unittest.mock import Mock, patch
from jose import jwt, jwk
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from core.clerk_verifier import ClerkJWTVerifier, ClerkVerificationError
from dependencies.auth import Subject, get_subject

ISSUER = "https://clerk.makao.test"


def verifier_returning(claims=None, error=None):
    verifier = Mock()
    if error is not None:
        verifier.verify_token.side_effect = error
    else:
        verifier.verify_token.return_value = claims
    return verifier


# ============================================================
# Identity resolver
# ============================================================
def test_no_token_is_401_before_storage(client: TestClient, supabase):
    response = client.get("/api/admin/payments")

    assert response.status_code == 401
    assert response.json() == {"error": "Unauthorized"}
    assert not supabase.touched()


def test_rejected_token_fails_closed(client: TestClient, supabase):
    bad = verifier_returning(error=ClerkVerificationError("Invalid token", "invalid_token"))
    with patch("dependencies.auth.get_verifier", return_value=bad):
        response = client.get(
            "/api/admin/payments",
            headers={"Authorization": "Bearer not-a-jwt"},
        )

    assert response.status_code == 401
    assert response.json() == {"error": "Unauthorized"}
    assert not supabase.touched()


def test_verifier_crash_fails_closed(client: TestClient, supabase):
    broken = verifier_returning(error=RuntimeError("JWKS endpoint exploded"))
    with patch("dependencies.auth.get_verifier", return_value=broken):
        response = client.get(
            "/api/tenant/lease",
            headers={"Authorization": "Bearer whatever"},
        )

    assert response.status_code == 401


def test_session_cookie_is_accepted(client: TestClient, supabase):
    supabase.stub("users", [{"id": "user_1", "clerk_id": "user_1", "user_type": "tenant"}])
    good = verifier_returning({"sub": "user_1", "sid": "sess_1"})

    client.cookies.set("__session", "cookie-token")
    with patch("dependencies.auth.get_verifier", return_value=good):
        response = client.get("/api/auth/me")

    assert response.status_code == 200
    assert response.json()["data"]["role"] == "tenant"
    good.verify_token.assert_called_once_with("cookie-token")


def test_bearer_header_wins_over_cookie(client: TestClient, supabase):
    supabase.stub("users", [{"id": "user_1", "clerk_id": "user_1", "user_type": "tenant"}])
    good = verifier_returning({"sub": "user_1"})

    client.cookies.set("__session", "cookie-token")
    with patch("dependencies.auth.get_verifier", return_value=good):
        client.get("/api/auth/me", headers={"Authorization": "Bearer header-token"})

    good.verify_token.assert_called_once_with("header-token")


# ============================================================
# Role resolver
# ============================================================
def test_missing_users_row_is_role_not_set(client: TestClient, supabase):
    supabase.stub("users", [])
    good = verifier_returning({"sub": "user_new"})

    with patch("dependencies.auth.get_verifier", return_value=good):
        response = client.get(
            "/api/admin/payments",
            headers={"Authorization": "Bearer t"},
        )

    assert response.status_code == 403
    body = response.json()
    assert body["error"] == "User role not set"
    assert body["details"]["action"] == "select_role"


@pytest.mark.parametrize("stored", ["landlord", "property_manager", "admin"])
def test_landlord_rows_resolve_to_admin(client: TestClient, supabase, stored):
    supabase.stub("users", [{"id": "u1", "clerk_id": "u1", "user_type": stored}])
    supabase.stub("payments", [])
    good = verifier_returning({"sub": "u1"})

    with patch("dependencies.auth.get_verifier", return_value=good):
        response = client.get("/api/admin/payments", headers={"Authorization": "Bearer t"})

    assert response.status_code == 200
    assert response.json() == []


def test_users_lookup_is_by_clerk_id(client: TestClient, supabase):
    users = supabase.stub("users", [{"id": "u1", "clerk_id": "clerk_u1", "user_type": "tenant"}])
    good = verifier_returning({"sub": "clerk_u1"})

    with patch("dependencies.auth.get_verifier", return_value=good):
        client.get("/api/auth/me", headers={"Authorization": "Bearer t"})

    users.eq.assert_any_call("clerk_id", "clerk_u1")


def test_unknown_stored_role_defaults_to_tenant(client: TestClient, supabase):
    supabase.stub("users", [{"id": "u1", "clerk_id": "u1", "user_type": "superuser"}])
    good = verifier_returning({"sub": "u1"})

    with patch("dependencies.auth.get_verifier", return_value=good):
        response = client.get("/api/admin/payments", headers={"Authorization": "Bearer t"})

    assert response.status_code == 403
    assert response.json()["error"] == "Unauthorized - Admin access required"


# ============================================================
# Role selection
# ============================================================
@pytest.fixture
def signed_in(app):
    app.dependency_overrides[get_subject] = lambda: Subject(external_id="user_9")
    yield
    app.dependency_overrides.clear()


def test_update_role_creates_row_with_clerk_id(client: TestClient, supabase, signed_in):
    users = supabase.sequence(
        "users",
        [],
        [{"id": "user_9", "clerk_id": "user_9", "user_type": "admin"}],
    )

    response = client.post("/api/auth/update-role", json={"role": "landlord"})

    assert response.status_code == 200
    assert response.json() == {
        "success": True,
        "data": {"id": "user_9", "user_type": "admin", "role": "admin"},
    }
    inserted = users.insert.call_args[0][0]
    assert inserted["id"] == "user_9"
    assert inserted["clerk_id"] == "user_9"
    assert inserted["user_type"] == "admin"


def test_update_role_changes_existing_row(client: TestClient, supabase, signed_in):
    users = supabase.sequence(
        "users",
        [{"id": "user_9", "clerk_id": "user_9", "user_type": "tenant"}],
        [{"id": "user_9", "clerk_id": "user_9", "user_type": "admin"}],
    )

    response = client.post("/api/auth/update-role", json={"role": "admin"})

    assert response.status_code == 200
    assert response.json()["data"]["role"] == "admin"
    users.insert.assert_not_called()
    assert users.update.call_args[0][0]["user_type"] == "admin"


@pytest.mark.parametrize("body", [{"role": "superuser"}, {"role": ""}, {}])
def test_update_role_rejects_unknown_roles(client: TestClient, supabase, signed_in, body):
    response = client.post("/api/auth/update-role", json=body)

    assert response.status_code == 400
    assert response.json() == {"error": "Invalid user type"}
    assert not supabase.touched()


def test_update_role_requires_session(client: TestClient, supabase):
    response = client.post("/api/auth/update-role", json={"role": "tenant"})
    assert response.status_code == 401


def test_me_before_role_selection(client: TestClient, supabase, signed_in):
    supabase.stub("users", [])

    response = client.get("/api/auth/me")

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["role"] is None
    assert data["needs_role_selection"] is True


# ============================================================
# Clerk JWT verification
# ============================================================
@pytest.fixture(scope="module")
def rsa_keys():
    private_key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    private_pem = private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    ).decode()
    public_pem = private_key.public_key().public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    ).decode()

    public_jwk = jwk.construct(public_pem, "RS256").to_dict()
    public_jwk["kid"] = "key-1"
    return private_pem, {"keys": [public_jwk]}


def make_token(private_pem, **overrides):
    now = int(time.time())
    claims = {"sub": "user_1", "sid": "sess_1", "iss": ISSUER, "iat": now, "exp": now + 300}
    claims.update(overrides)
    return jwt.encode(claims, private_pem, algorithm="RS256", headers={"kid": "key-1"})


def test_verifier_accepts_valid_token(rsa_keys):
    private_pem, jwks = rsa_keys
    verifier = ClerkJWTVerifier(issuer=ISSUER)

    with patch.object(verifier, "_fetch_jwks", return_value=jwks):
        claims = verifier.verify_token(f"Bearer {make_token(private_pem)}")

    assert claims["sub"] == "user_1"


def test_verifier_rejects_expired_token(rsa_keys):
    private_pem, jwks = rsa_keys
    verifier = ClerkJWTVerifier(issuer=ISSUER)
    token = make_token(private_pem, exp=int(time.time()) - 3600)

    with patch.object(verifier, "_fetch_jwks", return_value=jwks):
        with pytest.raises(ClerkVerificationError) as exc:
            verifier.verify_token(token)

    assert exc.value.error_code == "token_expired"


def test_verifier_rejects_wrong_issuer(rsa_keys):
    private_pem, jwks = rsa_keys
    verifier = ClerkJWTVerifier(issuer=ISSUER)
    token = make_token(private_pem, iss="https://evil.example.com")

    with patch.object(verifier, "_fetch_jwks", return_value=jwks):
        with pytest.raises(ClerkVerificationError) as exc:
            verifier.verify_token(token)

    assert exc.value.error_code == "invalid_token"


def test_verifier_caches_jwks(rsa_keys):
    private_pem, jwks = rsa_keys
    verifier = ClerkJWTVerifier(issuer=ISSUER)

    with patch.object(verifier, "_fetch_jwks", return_value=jwks) as fetch:
        verifier.verify_token(make_token(private_pem))
        verifier.verify_token(make_token(private_pem))

    assert fetch.call_count == 1


def test_verifier_refreshes_once_for_unknown_kid(rsa_keys):
    _, jwks = rsa_keys
    verifier = ClerkJWTVerifier(issuer=ISSUER)

    with patch.object(verifier, "_fetch_jwks", return_value=jwks) as fetch:
        with pytest.raises(ClerkVerificationError) as exc:
            verifier._signing_key("rotated-away")

    assert exc.value.error_code == "unknown_kid"
    assert fetch.call_count == 2


def test_verifier_requires_issuer(monkeypatch):
    monkeypatch.setattr("core.clerk_verifier.settings.CLERK_ISSUER_URL", None)
    with pytest.raises(ClerkVerificationError) as exc:
        ClerkJWTVerifier()
    assert exc.value.error_code == "config_error"
