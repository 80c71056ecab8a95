"""
User Service - Mock account directory.

Responsibilities:
- Register and authenticate users
- Profile updates
- Tier based bill and participant limits
"""
import logging
import uuid
from dataclasses import replace
from typing import Optional, Dict, Any

from billsplit.core.errors import ConflictError, NotFoundError, ValidationError
from billsplit.users.model import User
from billsplit.utils.enums import UserTier

logger = logging.getLogger(__name__)

DEMO_USERS = [
    {
        "id": "1",
        "name": "John Doe",
        "email": "john@example.com",
        "nickname": "Johnny",
        "password": "password123",
        "tier": UserTier.STANDARD,
        "bills_created": 2,
    },
    {
        "id": "2",
        "name": "Jane Smith",
        "email": "jane@example.com",
        "nickname": "Janey",
        "password": "password123",
        "tier": UserTier.PREMIUM,
        "bills_created": 8,
    },
    {
        "id": "3",
        "name": "Guest User",
        "email": "guest@example.com",
        "nickname": "Guest",
        "password": "guest123",
        "tier": UserTier.GUEST,
        "bills_created": 0,
    },
]


class UserDirectory:
    """In-memory user accounts."""

    def __init__(self, hasher, tier_limits: Dict[str, tuple]):
        """
        Args:
            hasher: flask_bcrypt.Bcrypt instance used for password hashes
            tier_limits: {tier: (max_bills, max_participants)}
        """
        self._hasher = hasher
        self._tier_limits = tier_limits
        self._users: Dict[str, User] = {}

    def seed_demo_users(self):
        for data in DEMO_USERS:
            user = User(
                id=data["id"],
                name=data["name"],
                email=data["email"],
                nickname=data["nickname"],
                password_hash=self._hash(data["password"]),
                tier=data["tier"],
                bills_created=data["bills_created"],
            )
            self._users[user.id] = user
        logger.info("[UserDirectory] Seeded %d demo users", len(DEMO_USERS))

    def _hash(self, password: str) -> str:
        return self._hasher.generate_password_hash(password).decode("utf-8")

    def find_by_email(self, email: Optional[str]) -> Optional[User]:
        if not email:
            return None
        email = email.strip().lower()
        return next((u for u in self._users.values() if u.email.lower() == email), None)

    def get(self, user_id: str) -> User:
        user = self._users.get(str(user_id))
        if not user:
            raise NotFoundError("User not found")
        return user

    def register(self, data: Dict[str, Any]) -> User:
        """
        Create a new account.

        `name` may be given directly or as `first_name` + `last_name`.
        """
        email = (data.get("email") or "").strip()
        password = data.get("password") or ""
        name = (data.get("name") or "").strip()
        if not name:
            name = f"{data.get('first_name', '')} {data.get('last_name', '')}".strip()

        if not email or not password or not name:
            raise ValidationError("Missing required fields")

        if self.find_by_email(email):
            raise ConflictError("User already exists")

        try:
            tier = UserTier(data.get("tier", UserTier.STANDARD))
        except ValueError:
            raise ValidationError(f"Unknown tier: {data.get('tier')}")

        user = User(
            id=f"user_{uuid.uuid4().hex[:12]}",
            name=name,
            email=email,
            nickname=(data.get("nickname") or "").strip(),
            password_hash=self._hash(password),
            tier=tier,
        )
        self._users[user.id] = user
        logger.info("[UserDirectory] Registered %s (%s)", user.id, user.tier.value)
        return user

    def authenticate(self, email: Optional[str], password: Optional[str]) -> Optional[User]:
        user = self.find_by_email(email)
        if not user or not password:
            return None
        if not self._hasher.check_password_hash(user.password_hash, password):
            return None
        return user

    def update(self, user_id: str, data: Dict[str, Any]) -> User:
        user = self.get(user_id)
        changes = {}
        for key in ("name", "nickname"):
            if key in data:
                value = (data[key] or "").strip()
                if key == "name" and not value:
                    raise ValidationError("Name is required")
                changes[key] = value
        user = replace(user, **changes)
        self._users[user.id] = user
        return user

    def bill_limit(self, user: User) -> Optional[int]:
        return self._tier_limits.get(user.tier.value, (None, None))[0]

    def participant_limit(self, user: User) -> Optional[int]:
        return self._tier_limits.get(user.tier.value, (None, None))[1]

    def record_bill_created(self, user: User) -> User:
        current = self.get(user.id)
        current = replace(current, bills_created=current.bills_created + 1)
        self._users[current.id] = current
        return current
