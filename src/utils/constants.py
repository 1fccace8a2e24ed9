from enum import Enum


class SlotStatus(str, Enum):
    AVAILABLE = "Available"
    OCCUPIED = "Occupied"


class SessionStatus(str, Enum):
    ACTIVE = "Active"
    COMPLETED = "Completed"


class SessionStatusFilter(str, Enum):
    ALL = "All"
    ACTIVE = "Active"
    COMPLETED = "Completed"


class StorageKey(str, Enum):
    SLOTS = "smartpark_slots"
    VEHICLES = "smartpark_cars"
    SESSIONS = "smartpark_records"
    PAYMENTS = "smartpark_payments"


SECONDS_PER_HOUR = 3600
SLOT_NUMBER_PREFIX = "P-"
SESSION_ID_PREFIX = "TKT"
PAYMENT_ID_PREFIX = "RCP"
