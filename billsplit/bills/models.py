"""Bill models."""
from dataclasses import dataclass
from typing import Optional, Tuple, Dict, Any

from billsplit.utils.enums import BillStatus, SplitType


def same_email(a: Optional[str], b: Optional[str]) -> bool:
    """Emails match ignoring case and surrounding whitespace."""
    if not a or not b:
        return False
    return a.strip().lower() == b.strip().lower()


@dataclass(frozen=True)
class Participant:
    id: str
    name: str
    email: Optional[str] = None
    is_registered: bool = False
    paid: float = 0.0
    owes: float = 0.0

    @property
    def balance(self) -> float:
        """Positive when the participant is owed money, negative when in debt."""
        return round(self.paid - self.owes, 2)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "is_registered": self.is_registered,
            "paid": self.paid,
            "owes": self.owes,
            "balance": self.balance,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Participant":
        return cls(
            id=data["id"],
            name=data["name"],
            email=data.get("email"),
            is_registered=bool(data.get("is_registered", False)),
            paid=float(data.get("paid", 0)),
            owes=float(data.get("owes", 0)),
        )


@dataclass(frozen=True)
class Split:
    participant_id: str
    amount: float

    def to_dict(self) -> Dict[str, Any]:
        return {"participant_id": self.participant_id, "amount": self.amount}


@dataclass(frozen=True)
class Expense:
    id: str
    description: str
    amount: float
    paid_by: str
    date: str
    split_type: SplitType = SplitType.EQUAL
    splits: Tuple[Split, ...] = ()

    @property
    def participant_ids(self) -> Tuple[str, ...]:
        return tuple(s.participant_id for s in self.splits)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "description": self.description,
            "amount": self.amount,
            "paid_by": self.paid_by,
            "date": self.date,
            "split_type": self.split_type.value,
            "splits": [s.to_dict() for s in self.splits],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Expense":
        return cls(
            id=data["id"],
            description=data["description"],
            amount=float(data["amount"]),
            paid_by=data["paid_by"],
            date=data["date"],
            split_type=SplitType(data.get("split_type", SplitType.EQUAL)),
            splits=tuple(
                Split(s["participant_id"], float(s["amount"]))
                for s in data.get("splits", [])
            ),
        )


@dataclass(frozen=True)
class Bill:
    id: str
    name: str
    created_by: str
    created_at: str
    updated_at: str
    description: str = ""
    status: BillStatus = BillStatus.ACTIVE
    participants: Tuple[Participant, ...] = ()
    expenses: Tuple[Expense, ...] = ()
    invitation_code: str = ""
    is_exclusive: bool = False

    @property
    def total_amount(self) -> float:
        return round(sum(e.amount for e in self.expenses), 2)

    def find_participant(self, participant_id: str) -> Optional[Participant]:
        return next((p for p in self.participants if p.id == participant_id), None)

    def find_participant_by_email(self, email: Optional[str]) -> Optional[Participant]:
        if not email:
            return None
        return next((p for p in self.participants if same_email(p.email, email)), None)

    def find_expense(self, expense_id: str) -> Optional[Expense]:
        return next((e for e in self.expenses if e.id == expense_id), None)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "created_by": self.created_by,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
            "status": self.status.value,
            "participants": [p.to_dict() for p in self.participants],
            "expenses": [e.to_dict() for e in self.expenses],
            "total_amount": self.total_amount,
            "invitation_code": self.invitation_code,
            "is_exclusive": self.is_exclusive,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Bill":
        return cls(
            id=data["id"],
            name=data["name"],
            description=data.get("description", ""),
            created_by=data["created_by"],
            created_at=data["created_at"],
            updated_at=data.get("updated_at", data["created_at"]),
            status=BillStatus(data.get("status", BillStatus.ACTIVE)),
            participants=tuple(Participant.from_dict(p) for p in data.get("participants", [])),
            expenses=tuple(Expense.from_dict(e) for e in data.get("expenses", [])),
            invitation_code=data.get("invitation_code", ""),
            is_exclusive=bool(data.get("is_exclusive", False)),
        )
