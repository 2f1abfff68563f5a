# tests/test_tenants.py

"""
Tests for the landlord's tenant directory.
"""

from fastapi.testclient import TestClient


def test_list_only_tenants(client: TestClient, supabase, login, admin_user):
    login(admin_user)
    users = supabase.stub("users", [
        {"id": "tenant-1", "clerk_id": "tenant-1", "full_name": "Tomas Tenant", "email": "tenant@example.com"},
        {"id": "t-offline", "clerk_id": None, "full_name": "Wanjiru Walk-in", "email": "w@example.com"},
    ])

    response = client.get("/api/tenants")

    assert response.status_code == 200
    users.eq.assert_any_call("user_type", "tenant")
    rows = response.json()
    assert [r["has_account"] for r in rows] == [True, False]
    assert "clerk_id" not in rows[0]


def test_tenant_cannot_read_directory(client: TestClient, supabase, login, tenant_user):
    login(tenant_user)

    response = client.get("/api/tenants")

    assert response.status_code == 403
    assert response.json() == {"error": "Unauthorized - Admin access required"}
    assert not supabase.touched()


def test_read_tenant_with_leases(client: TestClient, supabase, login, admin_user):
    login(admin_user)
    supabase.stub("users", [{
        "id": "tenant-1",
        "clerk_id": "tenant-1",
        "full_name": "Tomas Tenant",
        "leases": [{
            "id": "lease-1",
            "status": "active",
            "unit": {"unit_number": "A1", "property": {"name": "Sunrise Court", "address": "1 Ngong Rd"}},
        }],
    }])

    body = client.get("/api/tenants/tenant-1").json()

    assert body["full_name"] == "Tomas Tenant"
    assert body["leases"][0]["unit_number"] == "A1"
    assert body["leases"][0]["property_name"] == "Sunrise Court"


def test_read_non_tenant_is_404(client: TestClient, supabase, login, admin_user):
    login(admin_user)
    users = supabase.stub("users", [])

    response = client.get("/api/tenants/admin-2")

    assert response.status_code == 404
    assert response.json() == {"error": "Tenant not found"}
    users.eq.assert_any_call("user_type", "tenant")


def test_create_tenant_forces_role(client: TestClient, supabase, login, admin_user):
    login(admin_user)
    users = supabase.stub("users", [{"id": "t-new", "full_name": "Amani Otieno", "email": "amani@example.com"}])

    response = client.post("/api/tenants", json={
        "full_name": "  Amani Otieno ",
        "email": "Amani@Example.com",
        "phone_number": "",
    })

    assert response.status_code == 201
    inserted = users.insert.call_args[0][0]
    assert inserted["user_type"] == "tenant"
    assert inserted["full_name"] == "Amani Otieno"
    assert inserted["email"] == "amani@example.com"
    assert inserted["phone_number"] is None
    assert response.json()["has_account"] is False


def test_create_tenant_requires_email(client: TestClient, supabase, login, admin_user):
    login(admin_user)

    response = client.post("/api/tenants", json={"full_name": "No Mail", "email": "nope"})

    assert response.status_code == 400
    assert not supabase.touched()


def test_update_tenant_contact(client: TestClient, supabase, login, admin_user):
    login(admin_user)
    users = supabase.stub("users", [{"id": "tenant-1", "phone_number": "+254700000002"}])

    response = client.patch("/api/tenants/tenant-1", json={"phone_number": "+254700000002"})

    assert response.status_code == 200
    written = users.update.call_args[0][0]
    assert written["phone_number"] == "+254700000002"
    assert "user_type" not in written
    users.eq.assert_any_call("user_type", "tenant")


def test_update_unknown_tenant_is_404(client: TestClient, supabase, login, admin_user):
    login(admin_user)
    supabase.stub("users", [])

    response = client.patch("/api/tenants/ghost", json={"full_name": "Ghost"})

    assert response.status_code == 404
