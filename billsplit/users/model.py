"""User model."""
from dataclasses import dataclass
from typing import Dict, Any

from billsplit.utils.enums import UserTier


@dataclass(frozen=True)
class User:
    id: str
    name: str
    email: str
    password_hash: str
    nickname: str = ""
    tier: UserTier = UserTier.STANDARD
    bills_created: int = 0

    @property
    def is_premium(self) -> bool:
        return self.tier == UserTier.PREMIUM

    def to_dict(self) -> Dict[str, Any]:
        # Never expose the password hash
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "nickname": self.nickname,
            "tier": self.tier.value,
            "bills_created": self.bills_created,
        }
