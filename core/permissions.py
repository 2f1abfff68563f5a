# ============================================
# CENTRALIZED ROLE → OPERATION POLICY TABLE
# ============================================
#
# Operation classes:
#   ADMIN_ONLY        role check only
#   TENANT_SCOPED     caller must be the resource's tenant
#   PROPERTY_SCOPED   caller must own the property
#   INVOICE           admin, or the payment's tenant
#
# Roles are normalized (landlord → admin) before lookup, so there is
# no separate landlord entry.

# -----------------------------------------------------
# Admin-only collections
# -----------------------------------------------------
PAYMENTS_READ_ALL = "payments:read_all"
PAYMENTS_VERIFY = "payments:verify"
MAINTENANCE_READ_ALL = "maintenance:read_all"
MAINTENANCE_MANAGE = "maintenance:manage"
DASHBOARD_READ = "dashboard:read"
TENANTS_READ = "tenants:read"
TENANTS_WRITE = "tenants:write"

# -----------------------------------------------------
# Tenant-scoped
# -----------------------------------------------------
MAINTENANCE_READ_OWN = "maintenance:read_own"
MAINTENANCE_CREATE = "maintenance:create"
NOTIFICATIONS_READ_OWN = "notifications:read_own"
LEASE_READ_OWN = "lease:read_own"
PAYMENTS_READ_OWN = "payments:read_own"
PAYMENTS_CREATE = "payments:create"

# -----------------------------------------------------
# Property-scoped
# -----------------------------------------------------
PROPERTIES_READ = "properties:read"
PROPERTIES_WRITE = "properties:write"
UNITS_READ = "units:read"
UNITS_WRITE = "units:write"
LEASES_READ = "leases:read"
LEASES_WRITE = "leases:write"

# -----------------------------------------------------
# Invoice view
# -----------------------------------------------------
INVOICE_READ = "invoice:read"


ADMIN_ONLY = {
    PAYMENTS_READ_ALL,
    PAYMENTS_VERIFY,
    MAINTENANCE_READ_ALL,
    MAINTENANCE_MANAGE,
    DASHBOARD_READ,
    TENANTS_READ,
    TENANTS_WRITE,
}

TENANT_SCOPED = {
    MAINTENANCE_READ_OWN,
    MAINTENANCE_CREATE,
    NOTIFICATIONS_READ_OWN,
    LEASE_READ_OWN,
    PAYMENTS_READ_OWN,
    PAYMENTS_CREATE,
}

PROPERTY_SCOPED = {
    PROPERTIES_READ,
    PROPERTIES_WRITE,
    UNITS_READ,
    UNITS_WRITE,
    LEASES_READ,
    LEASES_WRITE,
}


ROLE_PERMISSIONS = {

    # =====================================================
    # ADMIN (landlord): manages properties, verifies payments
    # =====================================================
    "admin": [
        PAYMENTS_READ_ALL, PAYMENTS_VERIFY,
        MAINTENANCE_READ_ALL, MAINTENANCE_MANAGE,
        DASHBOARD_READ,
        TENANTS_READ, TENANTS_WRITE,

        PROPERTIES_READ, PROPERTIES_WRITE,
        UNITS_READ, UNITS_WRITE,
        LEASES_READ, LEASES_WRITE,

        INVOICE_READ,

        # Tenant-scoped reads; gated again by ADMIN_READS_TENANT_DATA
        MAINTENANCE_READ_OWN,
        NOTIFICATIONS_READ_OWN,
        LEASE_READ_OWN,
        PAYMENTS_READ_OWN,
    ],

    # =====================================================
    # TENANT: own lease, payments, maintenance, notifications
    # =====================================================
    "tenant": [
        MAINTENANCE_READ_OWN, MAINTENANCE_CREATE,
        NOTIFICATIONS_READ_OWN,
        LEASE_READ_OWN,
        PAYMENTS_READ_OWN, PAYMENTS_CREATE,
        INVOICE_READ,
    ],
}
