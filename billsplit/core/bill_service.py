"""
Bill Service - In-memory bill store.

Responsibilities:
- Bill create / update / archive / delete
- Participant add / remove
- Expense add / update / delete with split validation
- Invitations by code
- Keep participant balances consistent with the expense list after every mutation
"""
import logging
import secrets
import string
import uuid
from dataclasses import replace
from datetime import datetime, timezone
from typing import Optional, Dict, Any, List, Tuple

from billsplit.bills.demo import DEMO_BILLS
from billsplit.bills.models import Bill, Participant, Expense, Split, same_email
from billsplit.core.balance_service import BalanceService
from billsplit.core.errors import (
    ValidationError, NotFoundError, PermissionDeniedError, LimitExceededError, ConflictError
)
from billsplit.core.expense_service import ExpenseDistributionService
from billsplit.core.settlement_service import SettlementCalculator
from billsplit.core.user_service import UserDirectory
from billsplit.users.model import User
from billsplit.utils.enums import BillStatus, SplitType
from billsplit.utils.permissions import is_creator, can_view
from billsplit.utils.validators import parse_amount

logger = logging.getLogger(__name__)

INVITATION_ALPHABET = string.ascii_uppercase + string.digits
INVITATION_CODE_LENGTH = 8

# Inputs that force an expense's splits to be rebuilt on update
SPLIT_INPUTS = ("amount", "split_type", "split_details", "participant_ids", "splits")


def _now() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="seconds").replace("+00:00", "Z")


def _new_id(prefix: str) -> str:
    return f"{prefix}_{uuid.uuid4().hex[:12]}"


class BillStore:
    """
    Owns the bill collection for one application instance.

    Bills are immutable snapshots; every mutation stores and returns a new
    Bill whose participant balances were recomputed from its expenses.
    """

    def __init__(self, users: UserDirectory):
        self.users = users
        self._bills: Dict[str, Bill] = {}

    def seed_demo_bills(self):
        for data in DEMO_BILLS:
            bill = self._with_balances(Bill.from_dict(data))
            self._bills[bill.id] = bill
        logger.info("[BillStore] Seeded %d demo bills", len(DEMO_BILLS))

    # ------------------ INTERNALS ------------------

    @staticmethod
    def _with_balances(bill: Bill) -> Bill:
        participants = BalanceService.recompute(bill.participants, bill.expenses)
        return replace(bill, participants=tuple(participants))

    def _commit(self, bill: Bill) -> Bill:
        bill = self._with_balances(replace(bill, updated_at=_now()))
        self._bills[bill.id] = bill
        return bill

    def _load(self, user: User, bill_id: str) -> Bill:
        bill = self._bills.get(bill_id)
        if not bill or not can_view(user, bill):
            raise NotFoundError("Bill not found")
        return bill

    def _load_owned(self, user: User, bill_id: str, action: str) -> Bill:
        bill = self._load(user, bill_id)
        if not is_creator(user, bill):
            raise PermissionDeniedError(f"Only the bill creator can {action} this bill")
        return bill

    def _load_editable(self, user: User, bill_id: str) -> Bill:
        bill = self._load(user, bill_id)
        if bill.status == BillStatus.ARCHIVED:
            raise ValidationError("Archived bills cannot be modified")
        return bill

    def _check_participant_limit(self, user: User, count: int):
        limit = self.users.participant_limit(user)
        if not user.is_premium and limit is not None and count > limit:
            raise LimitExceededError(
                f"You have reached your limit of {limit} participants. Please upgrade to add more."
            )

    @staticmethod
    def _build_participant(data: Dict[str, Any], is_registered: bool = False) -> Participant:
        name = (data.get("name") or "").strip()
        if not name:
            raise ValidationError("Name is required")
        email = (data.get("email") or "").strip() or None
        return Participant(
            id=_new_id("part"),
            name=name,
            email=email,
            is_registered=bool(data.get("is_registered", is_registered)),
        )

    # ------------------ QUERIES ------------------

    def get_bill(self, user: User, bill_id: str) -> Bill:
        return self._load(user, bill_id)

    def list_bills(self, user: User, status: Optional[BillStatus] = None) -> List[Bill]:
        bills = [b for b in self._bills.values() if can_view(user, b)]
        if status is not None:
            bills = [b for b in bills if b.status == status]
        return bills

    def active_bills(self, user: User) -> List[Bill]:
        return self.list_bills(user, BillStatus.ACTIVE)

    def archived_bills(self, user: User) -> List[Bill]:
        return self.list_bills(user, BillStatus.ARCHIVED)

    def pending_invitations(self, user: User) -> List[Bill]:
        return self.list_bills(user, BillStatus.PENDING)

    def balance_report(self, user: User, bill_id: str) -> Dict[str, Any]:
        """Net balances, suggested settlements and reference diagnostics."""
        bill = self._load(user, bill_id)
        report = BalanceService.summarize(bill.participants)
        report["bill_id"] = bill.id
        report["settlements"] = SettlementCalculator.calculate_debts(bill.participants)
        report["warnings"] = BalanceService.find_unresolved_references(
            bill.participants, bill.expenses
        )
        return report

    def generate_invitation_code(self) -> str:
        existing = {b.invitation_code for b in self._bills.values()}
        while True:
            code = "".join(
                secrets.choice(INVITATION_ALPHABET) for _ in range(INVITATION_CODE_LENGTH)
            )
            if code not in existing:
                return code

    # ------------------ BILLS ------------------

    def create_bill(self, user: User, data: Dict[str, Any]) -> Bill:
        """
        Create a bill with the creator as its first participant.

        Raises:
            LimitExceededError: the user's tier allows no more bills
        """
        user = self.users.get(user.id)
        limit = self.users.bill_limit(user)
        if not user.is_premium and limit is not None and user.bills_created >= limit:
            raise LimitExceededError(
                f"You have reached your limit of {limit} bills. Please upgrade to create more."
            )

        creator = Participant(
            id=_new_id("part"), name=user.name, email=user.email, is_registered=True
        )
        participants = [creator]
        for p in data.get("participants") or []:
            participant = self._build_participant(p)
            if participant.email and any(same_email(x.email, participant.email) for x in participants):
                raise ConflictError(f"{participant.email} is already a participant")
            participants.append(participant)
        self._check_participant_limit(user, len(participants))

        code = (data.get("invitation_code") or "").strip().upper()
        if not code:
            code = self.generate_invitation_code()
        elif any(b.invitation_code == code for b in self._bills.values()):
            raise ConflictError("Invitation code already in use")

        now = _now()
        bill = Bill(
            id=_new_id("bill"),
            name=(data.get("name") or "").strip() or "Untitled Bill",
            description=(data.get("description") or "").strip(),
            created_by=user.id,
            created_at=now,
            updated_at=now,
            status=BillStatus.ACTIVE,
            participants=tuple(participants),
            invitation_code=code,
            is_exclusive=bool(data.get("is_exclusive", False)),
        )
        bill = self._with_balances(bill)
        self._bills[bill.id] = bill
        self.users.record_bill_created(user)

        logger.info("[BillStore] User %s created bill %s", user.id, bill.id)
        return bill

    def update_bill(self, user: User, bill_id: str, data: Dict[str, Any]) -> Bill:
        bill = self._load_owned(user, bill_id, "update")
        changes = {}

        if "name" in data:
            name = (data["name"] or "").strip()
            if not name:
                raise ValidationError("Name is required")
            changes["name"] = name
        if "description" in data:
            changes["description"] = (data["description"] or "").strip()
        if "status" in data:
            try:
                changes["status"] = BillStatus(data["status"])
            except ValueError:
                raise ValidationError(f"Unknown bill status: {data['status']}")
        if "is_exclusive" in data:
            changes["is_exclusive"] = bool(data["is_exclusive"])

        return self._commit(replace(bill, **changes))

    def archive_bill(self, user: User, bill_id: str) -> Bill:
        bill = self._load_owned(user, bill_id, "archive")
        logger.info("[BillStore] Archiving bill %s", bill_id)
        return self._commit(replace(bill, status=BillStatus.ARCHIVED))

    def delete_bill(self, user: User, bill_id: str) -> None:
        self._load_owned(user, bill_id, "delete")
        del self._bills[bill_id]
        logger.info("[BillStore] Deleted bill %s", bill_id)

    def accept_invitation(self, user: User, invitation_code: str) -> Bill:
        """Join the bill carrying this invitation code as a registered participant."""
        code = (invitation_code or "").strip().upper()
        bill = next((b for b in self._bills.values() if b.invitation_code == code), None)
        if not code or not bill:
            raise NotFoundError("Invalid invitation code")

        if is_creator(user, bill) or bill.find_participant_by_email(user.email):
            raise ConflictError("You are already a participant in this bill")
        if bill.is_exclusive:
            raise PermissionDeniedError("This bill is exclusive to its creator")
        if bill.status == BillStatus.ARCHIVED:
            raise ValidationError("Archived bills cannot be modified")

        participant = Participant(
            id=_new_id("part"), name=user.name, email=user.email, is_registered=True
        )
        logger.info("[BillStore] User %s joined bill %s", user.id, bill.id)
        return self._commit(replace(bill, participants=bill.participants + (participant,)))

    # ------------------ PARTICIPANTS ------------------

    def add_participant(
        self,
        user: User,
        bill_id: str,
        data: Dict[str, Any]
    ) -> Tuple[Bill, Participant]:
        bill = self._load_editable(user, bill_id)
        self._check_participant_limit(user, len(bill.participants) + 1)

        participant = self._build_participant(data)
        if participant.email and bill.find_participant_by_email(participant.email):
            raise ConflictError(f"{participant.email} is already a participant")

        bill = self._commit(replace(bill, participants=bill.participants + (participant,)))
        return bill, bill.find_participant(participant.id)

    def remove_participant(self, user: User, bill_id: str, participant_id: str) -> Bill:
        """
        Remove a participant who neither paid for nor owes anything.

        Their remaining zero-amount splits are dropped with them.
        """
        bill = self._load_editable(user, bill_id)
        participant = bill.find_participant(participant_id)
        if not participant:
            raise NotFoundError("Participant not found")

        if any(e.paid_by == participant_id for e in bill.expenses):
            raise ValidationError(
                "Cannot remove a participant who has paid for expenses. Reassign the expenses first."
            )
        if participant.owes > 0:
            raise ValidationError(
                "Cannot remove a participant who still owes money. Settle up first."
            )

        expenses = tuple(
            replace(e, splits=tuple(s for s in e.splits if s.participant_id != participant_id))
            for e in bill.expenses
        )
        participants = tuple(p for p in bill.participants if p.id != participant_id)

        logger.info("[BillStore] Removed participant %s from bill %s", participant_id, bill_id)
        return self._commit(replace(bill, participants=participants, expenses=expenses))

    # ------------------ EXPENSES ------------------

    def _build_expense(
        self,
        bill: Bill,
        data: Dict[str, Any],
        base: Optional[Expense] = None
    ) -> Expense:
        """Merge payload over `base` (if any) and validate the result."""
        description = data.get("description", base.description if base else "")
        description = (description or "").strip()
        if not description:
            raise ValidationError("Description is required")

        if "amount" in data:
            amount = parse_amount(data["amount"])
        elif base:
            amount = parse_amount(base.amount)
        else:
            raise ValidationError("Amount must be greater than 0")
        if amount <= 0:
            raise ValidationError("Amount must be greater than 0")

        paid_by = data.get("paid_by") or (base.paid_by if base else None)
        if not paid_by:
            raise ValidationError("Please select who paid")
        if not bill.find_participant(paid_by):
            raise ValidationError(f"Participant {paid_by} is not part of this bill")

        try:
            split_type = SplitType(data.get("split_type", base.split_type if base else SplitType.EQUAL))
        except ValueError:
            raise ValidationError(f"Unknown split type: {data.get('split_type')}")

        bill_participant_ids = [p.id for p in bill.participants]

        if "splits" in data:
            splits = []
            for s in data["splits"] or []:
                if not isinstance(s, dict):
                    raise ValidationError("Each split needs a participant_id and an amount")
                amount_value = parse_amount(s.get("amount"), "split amount")
                splits.append(Split(s.get("participant_id"), float(amount_value)))
        elif base and not any(k in data for k in SPLIT_INPUTS):
            splits = list(base.splits)
        else:
            details = data.get("split_details")
            reuse_previous = (
                details is None
                and base is not None
                and split_type == base.split_type
            )
            if reuse_previous and split_type == SplitType.CUSTOM:
                details = {"amounts": {s.participant_id: s.amount for s in base.splits}}
            elif reuse_previous and split_type == SplitType.PERCENTAGE:
                # Percentages are not stored; the old shares of the total stand in for them
                details = {
                    "percentages": ExpenseDistributionService.percentages_from_splits(base.splits)
                }

            participant_ids = (
                data.get("participant_ids")
                or (list(base.participant_ids) if base else None)
                or bill_participant_ids
            )
            splits, error = ExpenseDistributionService.build_splits(
                float(amount), split_type, participant_ids, details
            )
            if error:
                logger.info("[BillStore] Rejected expense on bill %s: %s", bill.id, error)
                raise ValidationError(error)

        is_valid, error = ExpenseDistributionService.validate_splits(
            float(amount), splits, bill_participant_ids
        )
        if not is_valid:
            logger.info("[BillStore] Rejected expense on bill %s: %s", bill.id, error)
            raise ValidationError(error)

        return Expense(
            id=base.id if base else _new_id("exp"),
            description=description,
            amount=float(amount),
            paid_by=paid_by,
            date=data.get("date") or (base.date if base else _now()),
            split_type=split_type,
            splits=tuple(splits),
        )

    def add_expense(
        self,
        user: User,
        bill_id: str,
        data: Dict[str, Any]
    ) -> Tuple[Bill, Expense]:
        bill = self._load_editable(user, bill_id)
        expense = self._build_expense(bill, data)

        bill = self._commit(replace(bill, expenses=bill.expenses + (expense,)))
        logger.info("[BillStore] Added expense %s (%.2f) to bill %s", expense.id, expense.amount, bill_id)
        return bill, expense

    def update_expense(
        self,
        user: User,
        bill_id: str,
        expense_id: str,
        data: Dict[str, Any]
    ) -> Tuple[Bill, Expense]:
        bill = self._load_editable(user, bill_id)
        current = bill.find_expense(expense_id)
        if not current:
            raise NotFoundError("Expense not found")

        expense = self._build_expense(bill, data, base=current)
        expenses = tuple(expense if e.id == expense_id else e for e in bill.expenses)

        bill = self._commit(replace(bill, expenses=expenses))
        return bill, expense

    def delete_expense(self, user: User, bill_id: str, expense_id: str) -> Bill:
        bill = self._load_editable(user, bill_id)
        if not bill.find_expense(expense_id):
            raise NotFoundError("Expense not found")

        expenses = tuple(e for e in bill.expenses if e.id != expense_id)
        logger.info("[BillStore] Deleted expense %s from bill %s", expense_id, bill_id)
        return self._commit(replace(bill, expenses=expenses))
