# tests/test_maintenance.py

"""
Tests for tenant and admin maintenance workflows.
"""

from fastapi.testclient import TestClient
from unittest.mock import patch

from services.maintenance import create_request, SUBMITTED_MESSAGE

ACTIVE_LEASE = {
    "id": "lease-1",
    "tenant_id": "tenant-1",
    "unit_id": "unit-1",
    "status": "active",
    "unit": {"id": "unit-1", "unit_number": "A1", "property": {"id": "prop-1", "name": "Sunrise Court"}},
}


# ============================================================
# Tenant
# ============================================================
def test_tenant_list_is_filtered_to_caller(client: TestClient, supabase, login, tenant_user):
    login(tenant_user)
    requests = supabase.stub("maintenance_requests", [
        {"id": "m1", "tenant_id": "tenant-1", "title": "Leak", "status": "submitted",
         "unit": {"unit_number": "A1", "property": {"name": "Sunrise Court", "address": "1 Ngong Rd"}}},
    ])

    response = client.get("/api/tenant/maintenance")

    assert response.status_code == 200
    requests.eq.assert_any_call("tenant_id", "tenant-1")
    row = response.json()[0]
    assert row["unit_number"] == "A1"
    assert row["property_address"] == "1 Ngong Rd"
    assert "tenant_id" not in row


def test_admin_own_list_is_still_scoped(client: TestClient, supabase, login, admin_user):
    login(admin_user)
    requests = supabase.stub("maintenance_requests", [])

    response = client.get("/api/tenant/maintenance")

    assert response.status_code == 200
    requests.eq.assert_any_call("tenant_id", "admin-1")


def test_tenant_creates_request_on_leased_unit(client: TestClient, supabase, login, tenant_user):
    login(tenant_user)
    supabase.stub("leases", [ACTIVE_LEASE])
    requests = supabase.stub("maintenance_requests", [{"id": "m9", "status": "submitted", "unit_id": "unit-1"}])
    updates = supabase.stub("maintenance_updates", [{"id": "u1"}])

    response = client.post("/api/tenant/maintenance", json={
        "title": "Broken tap",
        "description": "Kitchen tap drips constantly",
        "priority": "high",
    })

    assert response.status_code == 201
    assert response.json()["data"]["id"] == "m9"

    inserted = requests.insert.call_args[0][0]
    assert inserted["tenant_id"] == "tenant-1"
    assert inserted["unit_id"] == "unit-1"
    assert inserted["status"] == "submitted"

    log_entry = updates.insert.call_args[0][0]
    assert log_entry["request_id"] == "m9"
    assert log_entry["message"] == SUBMITTED_MESSAGE


def test_tenant_cannot_file_for_another_unit(client: TestClient, supabase, login, tenant_user):
    login(tenant_user)
    supabase.stub("leases", [ACTIVE_LEASE])
    requests = supabase.stub("maintenance_requests", [])

    response = client.post("/api/tenant/maintenance", json={
        "unitId": "unit-99",
        "title": "Noise",
        "description": "Neighbours",
    })

    assert response.status_code == 403
    requests.insert.assert_not_called()


def test_tenant_without_lease_cannot_file(client: TestClient, supabase, login, tenant_user):
    login(tenant_user)
    supabase.stub("leases", [])

    response = client.post("/api/tenant/maintenance", json={"title": "x", "description": "y"})

    assert response.status_code == 400
    assert response.json() == {"error": "No active lease found"}


def test_missing_title_is_validation_error(client: TestClient, supabase, login, tenant_user):
    login(tenant_user)

    response = client.post("/api/tenant/maintenance", json={"description": "no title"})

    assert response.status_code == 400
    assert response.json()["error"] == "Invalid request"


def test_request_kept_when_update_log_fails(supabase):
    requests = supabase.stub("maintenance_requests", [{"id": "m5", "status": "submitted"}])
    supabase.fail("maintenance_updates", Exception("insert into maintenance_updates failed"))

    created = create_request("tenant-1", "unit-1", "Leak", "Bathroom", "medium")

    assert created["id"] == "m5"
    requests.delete.assert_not_called()


def test_updates_of_someone_elses_request_are_forbidden(client: TestClient, supabase, login, other_tenant):
    login(other_tenant)
    supabase.stub("maintenance_requests", [{"id": "m1", "tenant_id": "tenant-1"}])
    updates = supabase.stub("maintenance_updates", [])

    response = client.get("/api/tenant/maintenance/m1/updates")

    assert response.status_code == 403
    updates.select.assert_not_called()


def test_updates_of_own_request(client: TestClient, supabase, login, tenant_user):
    login(tenant_user)
    supabase.stub("maintenance_requests", [{"id": "m1", "tenant_id": "tenant-1"}])
    supabase.stub("maintenance_updates", [
        {"id": "u1", "message": SUBMITTED_MESSAGE, "status": "submitted"},
        {"id": "u2", "message": "Plumber booked", "status": "scheduled"},
    ])

    response = client.get("/api/tenant/maintenance/m1/updates")

    assert response.status_code == 200
    assert [u["id"] for u in response.json()] == ["u1", "u2"]


def test_updates_of_unknown_request_is_404(client: TestClient, supabase, login, tenant_user):
    login(tenant_user)
    supabase.stub("maintenance_requests", [])

    response = client.get("/api/tenant/maintenance/nope/updates")

    assert response.status_code == 404


# ============================================================
# Admin
# ============================================================
def test_admin_list_includes_tenant_name(client: TestClient, supabase, login, admin_user):
    login(admin_user)
    supabase.stub("maintenance_requests", [
        {"id": "m1", "title": "Leak", "tenant": {"full_name": "Tomas Tenant"}, "unit": None},
    ])

    row = client.get("/api/admin/maintenance").json()[0]

    assert row["tenant_name"] == "Tomas Tenant"
    assert row["unit_number"] == "Unknown"


def test_admin_schedules_request(client: TestClient, supabase, login, admin_user):
    login(admin_user)
    requests = supabase.sequence(
        "maintenance_requests",
        [{"id": "m1", "tenant_id": "tenant-1", "title": "Leak", "status": "submitted"}],
        [{"id": "m1", "tenant_id": "tenant-1", "title": "Leak", "status": "scheduled"}],
    )
    updates = supabase.stub("maintenance_updates", [{"id": "u2"}])

    with patch("routers.admin_maintenance.notify_user") as notify:
        response = client.patch("/api/admin/maintenance/m1", json={
            "status": "scheduled",
            "scheduled_date": "2026-04-02T10:00:00+00:00",
            "message": "Plumber booked for Thursday",
        })

    assert response.status_code == 200
    written = requests.update.call_args[0][0]
    assert written["status"] == "scheduled"
    assert written["scheduled_date"] == "2026-04-02T10:00:00+00:00"

    entry = updates.insert.call_args[0][0]
    assert entry["message"] == "Plumber booked for Thursday"
    assert entry["created_by"] == "admin-1"
    assert notify.call_args[0][0] == "tenant-1"


def test_admin_completing_stamps_completed_date(client: TestClient, supabase, login, admin_user):
    login(admin_user)
    requests = supabase.stub("maintenance_requests", [
        {"id": "m1", "tenant_id": "tenant-1", "title": "Leak", "status": "in_progress"},
    ])

    with patch("routers.admin_maintenance.notify_user"):
        client.patch("/api/admin/maintenance/m1", json={"status": "completed"})

    assert requests.update.call_args[0][0]["completed_date"]


def test_completed_request_cannot_reopen(client: TestClient, supabase, login, admin_user):
    login(admin_user)
    requests = supabase.stub("maintenance_requests", [
        {"id": "m1", "tenant_id": "tenant-1", "status": "completed", "completed_date": "2026-03-01T09:00:00+00:00"},
    ])
    updates = supabase.stub("maintenance_updates", [])

    with patch("routers.admin_maintenance.notify_user") as notify:
        response = client.patch("/api/admin/maintenance/m1", json={"status": "submitted"})

    assert response.status_code == 409
    assert response.json()["details"] == {"current": "completed", "requested": "submitted"}
    requests.select.assert_called()
    requests.update.assert_not_called()
    updates.insert.assert_not_called()
    notify.assert_not_called()


def test_in_progress_cannot_go_back_to_scheduled(client: TestClient, supabase, login, admin_user):
    login(admin_user)
    requests = supabase.stub("maintenance_requests", [{"id": "m1", "status": "in_progress"}])

    response = client.patch("/api/admin/maintenance/m1", json={"status": "scheduled"})

    assert response.status_code == 409
    requests.update.assert_not_called()


def test_cancelled_is_final(client: TestClient, supabase, login, admin_user):
    login(admin_user)
    supabase.stub("maintenance_requests", [{"id": "m1", "status": "cancelled"}])

    response = client.patch("/api/admin/maintenance/m1", json={"status": "in_progress"})

    assert response.status_code == 409


def test_status_change_on_unknown_request_is_404(client: TestClient, supabase, login, admin_user):
    login(admin_user)
    requests = supabase.stub("maintenance_requests", [])

    response = client.patch("/api/admin/maintenance/nope", json={"status": "scheduled"})

    assert response.status_code == 404
    assert response.json() == {"error": "Maintenance request not found"}
    requests.update.assert_not_called()


def test_admin_rejects_unknown_status(client: TestClient, supabase, login, admin_user):
    login(admin_user)

    response = client.patch("/api/admin/maintenance/m1", json={"status": "teleported"})

    assert response.status_code == 400


def test_dashboard_maintenance_limited_to_three(client: TestClient, supabase, login, admin_user):
    login(admin_user)
    requests = supabase.stub("maintenance_requests", [])

    client.get("/api/admin/dashboard/maintenance")

    requests.limit.assert_called_with(3)


def test_blank_title_is_validation_error(client: TestClient, supabase, login, tenant_user):
    login(tenant_user)
    supabase.stub("leases", [ACTIVE_LEASE])
    requests = supabase.stub("maintenance_requests", [])

    response = client.post("/api/tenant/maintenance", json={"title": "   ", "description": "\n\t"})

    assert response.status_code == 400
    assert response.json()["error"] == "Invalid request"
    requests.insert.assert_not_called()


def test_status_change_emails_tenant(client: TestClient, supabase, login, admin_user):
    login(admin_user)
    supabase.sequence(
        "maintenance_requests",
        [{"id": "m1", "tenant_id": "tenant-1", "title": "Leak", "status": "scheduled"}],
        [{"id": "m1", "tenant_id": "tenant-1", "title": "Leak", "status": "in_progress"}],
    )
    supabase.stub("users", [{"id": "tenant-1", "email": "tenant@example.com", "full_name": "Tomas Tenant"}])

    with patch("routers.admin_maintenance.notify_user") as notify:
        client.patch("/api/admin/maintenance/m1", json={"status": "in_progress", "message": "Plumber on site"})

    args, kwargs = notify.call_args
    assert args[0] == "tenant-1"
    assert args[1] == "Maintenance Request Update"
    assert args[2] == "Your request 'Leak' is now in progress. Plumber on site"
    assert kwargs["email"] == "tenant@example.com"
    assert "Hello Tomas Tenant" in kwargs["html_body"]
