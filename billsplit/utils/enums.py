from enum import Enum

class BillStatus(str, Enum):
    ACTIVE = "active"
    PENDING = "pending"
    SETTLED = "settled"
    ARCHIVED = "archived"

class SplitType(str, Enum):
    EQUAL = "equal"
    CUSTOM = "custom"
    PERCENTAGE = "percentage"

class UserTier(str, Enum):
    GUEST = "guest"
    STANDARD = "standard"
    PREMIUM = "premium"
