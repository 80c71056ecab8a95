"""
Expense Distribution Service - Split calculation and validation.

Responsibilities:
- Calculate equal splits
- Accept custom (exact amount) splits
- Calculate percentage splits
- Validate splits sum to total
- Validate only bill participants appear in splits
"""
from decimal import Decimal, ROUND_HALF_UP, InvalidOperation
from typing import Optional, Dict, Any, List, Tuple

from billsplit.bills.models import Split
from billsplit.utils.enums import SplitType

CENT = Decimal('0.01')
TOLERANCE = Decimal('0.01')


def _quantize(value: Decimal) -> Decimal:
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def _reconcile_first(total: Decimal, amounts: List[Decimal]) -> List[Decimal]:
    """
    Put the rounding remainder on the first share so the sum is exact.

    When that would push the first share below zero (tiny totals where every
    share rounded up), the remainder is taken back one cent at a time,
    starting from the first share and skipping shares already at zero.
    """
    remainder = total - sum(amounts, Decimal('0'))
    if not amounts or not remainder:
        return amounts

    if amounts[0] + remainder >= 0:
        amounts[0] = amounts[0] + remainder
        return amounts

    step = -CENT if remainder < 0 else CENT
    index = 0
    while abs(remainder) >= CENT:
        if amounts[index] + step >= 0:
            amounts[index] = amounts[index] + step
            remainder -= step
        index = (index + 1) % len(amounts)

    # Sub-cent leftovers only occur when the total itself has more than two places
    if remainder:
        largest = max(range(len(amounts)), key=lambda i: amounts[i])
        amounts[largest] = amounts[largest] + remainder
    return amounts


class ExpenseDistributionService:
    """Service for expense split calculation and validation."""

    @classmethod
    def calculate_equal_split(
        cls,
        total_amount: float,
        participant_ids: List[str]
    ) -> List[Split]:
        """
        Calculate equal split among participants.

        Each share is rounded to cents; the remainder is added to the
        first participant.

        Args:
            total_amount: Total expense amount
            participant_ids: Ordered participant ids

        Returns:
            List of Split
        """
        if not participant_ids:
            return []

        total = Decimal(str(total_amount))
        share = _quantize(total / len(participant_ids))
        amounts = _reconcile_first(total, [share] * len(participant_ids))

        return [
            Split(participant_id, float(amount))
            for participant_id, amount in zip(participant_ids, amounts)
        ]

    @classmethod
    def calculate_custom_split(
        cls,
        total_amount: float,
        amounts: Dict[str, Any]
    ) -> Tuple[List[Split], Optional[str]]:
        """
        Validate and use caller supplied amounts per participant.

        Args:
            total_amount: Total expense amount
            amounts: Dict of {participant_id: amount}

        Returns:
            Tuple of (splits list, error message if invalid)
        """
        if not amounts:
            return [], "No split amounts provided"

        parsed = {}
        for participant_id, raw in amounts.items():
            if raw is None or (isinstance(raw, str) and not raw.strip()):
                return [], "All participants must have a split amount"
            try:
                value = Decimal(str(raw).strip())
            except (InvalidOperation, ValueError):
                return [], "All split amounts must be valid numbers"
            if not value.is_finite() or value < 0:
                return [], "All split amounts must be valid numbers"
            parsed[participant_id] = _quantize(value)

        total = Decimal(str(total_amount))
        amounts_sum = sum(parsed.values(), Decimal('0'))
        if abs(amounts_sum - total) > TOLERANCE:
            return [], (
                f"The sum of splits ({amounts_sum:.2f}) must equal "
                f"the expense amount ({total:.2f})"
            )

        return [Split(pid, float(amount)) for pid, amount in parsed.items()], None

    @classmethod
    def calculate_percentage_split(
        cls,
        total_amount: float,
        percentages: Dict[str, Any]
    ) -> Tuple[List[Split], Optional[str]]:
        """
        Calculate split based on percentages.

        Args:
            total_amount: Total expense amount
            percentages: Dict of {participant_id: percentage} (should sum to 100)

        Returns:
            Tuple of (splits list, error message if invalid)
        """
        if not percentages:
            return [], "No percentages provided"

        parsed = {}
        for participant_id, raw in percentages.items():
            try:
                pct = Decimal(str(raw))
            except (InvalidOperation, ValueError):
                return [], "All percentages must be valid numbers"
            if not pct.is_finite() or pct < 0:
                return [], "All percentages must be valid numbers"
            parsed[participant_id] = pct

        total_pct = sum(parsed.values(), Decimal('0'))
        if abs(total_pct - 100) > TOLERANCE:
            return [], f"Percentages must sum to 100, got {total_pct}"

        total = Decimal(str(total_amount))
        amounts = _reconcile_first(
            total, [_quantize(total * pct / 100) for pct in parsed.values()]
        )

        return [
            Split(participant_id, float(amount))
            for participant_id, amount in zip(parsed.keys(), amounts)
        ], None

    @classmethod
    def percentages_from_splits(cls, splits: List[Split]) -> Dict[str, Decimal]:
        """Recover each participant's share of the total from stored splits."""
        splits_total = sum((Decimal(str(s.amount)) for s in splits), Decimal('0'))
        if not splits_total:
            return {}
        return {
            s.participant_id: Decimal(str(s.amount)) / splits_total * 100
            for s in splits
        }

    @classmethod
    def build_splits(
        cls,
        amount: float,
        split_type: SplitType,
        participant_ids: List[str],
        split_details: Optional[Dict[str, Any]] = None
    ) -> Tuple[List[Split], Optional[str]]:
        """
        Calculate splits for the given split type.

        Args:
            amount: Total amount
            split_type: equal, custom or percentage
            participant_ids: Participants sharing an equal split
            split_details: {"amounts": {...}} for custom,
                {"percentages": {...}} for percentage

        Returns:
            Tuple of (splits list, error message)
        """
        split_details = split_details or {}
        if not isinstance(split_details, dict):
            return [], "split_details must be an object"

        if split_type == SplitType.EQUAL:
            if not participant_ids:
                return [], "An equal split needs at least one participant"
            return cls.calculate_equal_split(amount, participant_ids), None

        if split_type == SplitType.CUSTOM:
            return cls.calculate_custom_split(amount, split_details.get("amounts", {}))

        if split_type == SplitType.PERCENTAGE:
            return cls.calculate_percentage_split(amount, split_details.get("percentages", {}))

        return [], f"Unknown split type: {split_type}"

    @classmethod
    def validate_splits(
        cls,
        total_amount: float,
        splits: List[Split],
        participant_ids: List[str]
    ) -> Tuple[bool, Optional[str]]:
        """
        Validate that splits are correct.

        Checks:
        - Splits are not empty
        - No negative amounts
        - No duplicate participants
        - All participants belong to the bill
        - Splits sum to total

        Returns:
            Tuple of (is_valid, error_message)
        """
        if not splits:
            return False, "No splits provided"

        for s in splits:
            if s.amount < 0:
                return False, f"Negative amount for participant {s.participant_id}"

        ids = [s.participant_id for s in splits]
        if len(ids) != len(set(ids)):
            return False, "Duplicate participants in splits"

        known = set(participant_ids)
        for participant_id in ids:
            if participant_id not in known:
                return False, f"Participant {participant_id} is not part of this bill"

        splits_sum = sum((Decimal(str(s.amount)) for s in splits), Decimal('0'))
        total = Decimal(str(total_amount))
        if abs(splits_sum - total) > TOLERANCE:
            return False, f"Splits sum to {splits_sum}, expected {total}"

        return True, None
