# routers/__init__.py

from .admin_payments import router as admin_payments_router
from .admin_maintenance import router as admin_maintenance_router
from .admin_dashboard import router as admin_dashboard_router
from .tenant import router as tenant_router
from .payments import router as payments_router
from .notifications import router as notifications_router
from .properties import router as properties_router
from .units import router as units_router
from .leases import router as leases_router
from .tenants import router as tenants_router
from .auth import router as auth_router
from .invoice import router as invoice_router
from .webhooks_clerk import router as clerk_webhooks_router
from .health import router as health_router


# Registration order is the order main.py mounts them in
all_routers = [
    auth_router,
    admin_payments_router,
    admin_maintenance_router,
    admin_dashboard_router,
    tenant_router,
    payments_router,
    notifications_router,
    properties_router,
    units_router,
    leases_router,
    tenants_router,
    invoice_router,
    clerk_webhooks_router,
    health_router,
]

__all__ = ["all_routers"]
