# -------------------------
# Enums
# -------------------------
from .enums import (
    UserType,
    UnitStatus,
    LeaseStatus,
    PaymentStatus,
    MaintenancePriority,
    MaintenanceStatus,
    NotificationType,
)

# -------------------------
# Users / roles
# -------------------------
from .user import RoleUpdate, RoleUpdateResult

# -------------------------
# Properties & units
# -------------------------
from .property import PropertyCreate, PropertyUpdate, PropertyStats
from .unit import UnitCreate, UnitUpdate
from .lease import LeaseCreate, LeaseUpdate
from .tenant import TenantCreate, TenantUpdate

# -------------------------
# Payments
# -------------------------
from .payment import PaymentCreate, PaymentVerify, PaymentReject

# -------------------------
# Maintenance & notifications
# -------------------------
from .maintenance import MaintenanceRequestCreate, MaintenanceStatusUpdate
from .notification import NotificationMarkRead

# -------------------------
# Clerk webhooks
# -------------------------
from .webhook import ClerkWebhookEvent, ClerkUserData
