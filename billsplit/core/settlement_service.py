"""Settlement calculation service - Splitwise-style debt minimization."""
from typing import List, Dict, Any, Iterable

from billsplit.bills.models import Participant


class SettlementCalculator:
    """Derive who pays whom from participant balances."""

    # Balances within a cent are treated as settled
    THRESHOLD = 0.01

    @classmethod
    def calculate_debts(cls, participants: Iterable[Participant]) -> List[Dict[str, Any]]:
        """
        Calculate who owes whom using greedy algorithm to minimize transactions.

        Returns list of: {from_participant, from_name, to_participant, to_name, amount}
        """
        creditors = []  # People who are OWED money
        debtors = []    # People who OWE money

        for p in participants:
            if p.balance > cls.THRESHOLD:
                creditors.append({"id": p.id, "name": p.name, "amount": p.balance})
            elif p.balance < -cls.THRESHOLD:
                debtors.append({"id": p.id, "name": p.name, "amount": -p.balance})

        # Largest first; sort is stable so ties keep bill order
        creditors.sort(key=lambda x: -x["amount"])
        debtors.sort(key=lambda x: -x["amount"])

        settlements = []

        for debtor in debtors:
            debt = debtor["amount"]

            while debt > cls.THRESHOLD and creditors:
                creditor = creditors[0]
                amount = round(min(debt, creditor["amount"]), 2)

                if amount >= cls.THRESHOLD:
                    settlements.append({
                        "from_participant": debtor["id"],
                        "from_name": debtor["name"],
                        "to_participant": creditor["id"],
                        "to_name": creditor["name"],
                        "amount": amount
                    })

                debt = round(debt - amount, 2)
                creditor["amount"] = round(creditor["amount"] - amount, 2)

                if creditor["amount"] < cls.THRESHOLD:
                    creditors.pop(0)

        return settlements
