"""
Balance Service - Participant paid/owed recomputation.

Responsibilities:
- Rebuild every participant's paid and owed totals from the full expense list
- Report payer or split references that match no participant
- Summarize net balances for a bill
"""
from dataclasses import replace
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, Any, List, Iterable

from billsplit.bills.models import Participant, Expense

CENT = Decimal('0.01')


def _to_decimal(value) -> Decimal:
    return Decimal(str(value))


def _to_money(value: Decimal) -> float:
    return float(value.quantize(CENT, rounding=ROUND_HALF_UP))


class BalanceService:
    """Service for recomputing participant balances."""

    @classmethod
    def recompute(
        cls,
        participants: Iterable[Participant],
        expenses: Iterable[Expense]
    ) -> List[Participant]:
        """
        Recompute paid and owed amounts from scratch.

        Every participant starts at zero. For each expense the full amount
        is credited to the payer and each split amount is charged to the
        split's participant. Ids that match no participant are skipped.

        Args:
            participants: Ordered participants of the bill
            expenses: Ordered expenses of the bill

        Returns:
            New participant list in the same order with paid/owes overwritten
        """
        participants = list(participants)
        paid = {p.id: Decimal('0') for p in participants}
        owes = {p.id: Decimal('0') for p in participants}

        for expense in expenses:
            if expense.paid_by in paid:
                paid[expense.paid_by] += _to_decimal(expense.amount)

            for split in expense.splits:
                if split.participant_id in owes:
                    owes[split.participant_id] += _to_decimal(split.amount)

        return [
            replace(p, paid=_to_money(paid[p.id]), owes=_to_money(owes[p.id]))
            for p in participants
        ]

    @classmethod
    def find_unresolved_references(
        cls,
        participants: Iterable[Participant],
        expenses: Iterable[Expense]
    ) -> List[str]:
        """
        List payer and split ids that recompute() had to skip.

        Returns:
            One message per dangling reference, in expense order
        """
        known = {p.id for p in participants}
        warnings = []

        for expense in expenses:
            if expense.paid_by not in known:
                warnings.append(
                    f"Expense {expense.id} is paid by unknown participant {expense.paid_by}"
                )
            for split in expense.splits:
                if split.participant_id not in known:
                    warnings.append(
                        f"Expense {expense.id} has a split for unknown participant "
                        f"{split.participant_id}"
                    )

        return warnings

    @classmethod
    def summarize(cls, participants: Iterable[Participant]) -> Dict[str, Any]:
        """
        Net balance rows for display.

        Returns:
            {balances: [{participant_id, name, paid, owes, balance}],
             total_paid, total_owed}
        """
        rows = []
        total_paid = Decimal('0')
        total_owed = Decimal('0')

        for p in participants:
            total_paid += _to_decimal(p.paid)
            total_owed += _to_decimal(p.owes)
            rows.append({
                "participant_id": p.id,
                "name": p.name,
                "paid": p.paid,
                "owes": p.owes,
                "balance": p.balance,
            })

        return {
            "balances": rows,
            "total_paid": _to_money(total_paid),
            "total_owed": _to_money(total_owed),
        }
