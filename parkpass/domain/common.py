from enum import Enum


class LotStatus(str, Enum):
    OPEN = "OPEN"
    CLOSED = "CLOSED"


class PaymentStatus(str, Enum):
    PENDING = "PENDING"
    PAID = "PAID"


class VehicleType(str, Enum):
    STANDARD = "STANDARD"
    OVERSIZE = "OVERSIZE"


class UserRole(str, Enum):
    ADMIN = "ADMIN"
    OWNER = "OWNER"
    CUSTOMER = "CUSTOMER"
    SUPERVISOR = "SUPERVISOR"


class StaffRole(str, Enum):
    SUPERVISOR = "SUPERVISOR"
    EMPLOYEE = "EMPLOYEE"
