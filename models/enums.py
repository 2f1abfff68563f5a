from enum import Enum


class BaseStrEnum(str, Enum):
    """
    Base enum that serializes cleanly to a string
    and provides a .list() method for UI dropdowns.
    """

    def __str__(self):
        return str(self.value)

    @classmethod
    def list(cls):
        return [item.value for item in cls]


# -----------------------------------------------------
# USER TYPE (domain role)
# -----------------------------------------------------
class UserType(BaseStrEnum):
    """Domain role stored in users.user_type. 'landlord' is an alias of admin."""

    tenant = "tenant"
    admin = "admin"


# -----------------------------------------------------
# UNIT STATUS
# -----------------------------------------------------
class UnitStatus(BaseStrEnum):
    vacant = "vacant"
    occupied = "occupied"
    maintenance = "maintenance"


# -----------------------------------------------------
# LEASE STATUS
# -----------------------------------------------------
class LeaseStatus(BaseStrEnum):
    active = "active"
    pending = "pending"
    expired = "expired"
    terminated = "terminated"


# -----------------------------------------------------
# PAYMENT STATUS
# -----------------------------------------------------
class PaymentStatus(BaseStrEnum):
    """Tenant submits → pending; admin verifies or rejects."""

    pending = "pending"
    verified = "verified"
    rejected = "rejected"
    paid = "paid"


# -----------------------------------------------------
# MAINTENANCE PRIORITY
# -----------------------------------------------------
class MaintenancePriority(BaseStrEnum):
    low = "low"
    medium = "medium"
    high = "high"
    emergency = "emergency"


# -----------------------------------------------------
# MAINTENANCE STATUS
# -----------------------------------------------------
class MaintenanceStatus(BaseStrEnum):
    """Workflow: submitted → scheduled → in_progress → completed (or cancelled)."""

    submitted = "submitted"
    scheduled = "scheduled"
    in_progress = "in_progress"
    completed = "completed"
    cancelled = "cancelled"


# -----------------------------------------------------
# NOTIFICATION TYPE
# -----------------------------------------------------
class NotificationType(BaseStrEnum):
    payment = "payment"
    maintenance = "maintenance"
    lease = "lease"
    announcement = "announcement"
    general = "general"
