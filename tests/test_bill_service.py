import pytest

from billsplit.core.errors import (
    ValidationError, NotFoundError, PermissionDeniedError, LimitExceededError, ConflictError
)
from billsplit.utils.enums import BillStatus, SplitType


def _balances(bill):
    return {p.id: (p.paid, p.owes) for p in bill.participants}


def test_demo_bills_are_recomputed_on_load(store, john):
    bill = store.get_bill(john, "bill_1")

    assert _balances(bill) == {
        "part_1": (250.0, 83.34),
        "part_2": (0.0, 83.33),
        "part_3": (0.0, 83.33),
    }


def test_visibility_by_creator_or_email(store, john, jane, guest):
    assert {b.id for b in store.list_bills(john)} == {"bill_1", "bill_2", "bill_3"}
    assert {b.id for b in store.list_bills(jane)} == {"bill_1", "bill_3"}
    assert store.list_bills(guest) == []

    with pytest.raises(NotFoundError):
        store.get_bill(guest, "bill_1")


def test_status_helpers(store, john):
    assert {b.id for b in store.active_bills(john)} == {"bill_1", "bill_2"}
    assert [b.id for b in store.archived_bills(john)] == ["bill_3"]
    assert store.pending_invitations(john) == []


def test_add_expense_equal_split_recomputes(store, john):
    bill, expense = store.add_expense(john, "bill_2", {
        "description": "Taxi",
        "amount": "100",
        "paid_by": "part_4",
    })

    assert expense.split_type == SplitType.EQUAL
    assert [s.amount for s in expense.splits] == [50.0, 50.0]
    assert _balances(bill) == {"part_1": (120.0, 110.0), "part_4": (100.0, 110.0)}
    assert store.get_bill(john, "bill_2") == bill


def test_add_expense_equal_split_among_subset(store, john):
    _, expense = store.add_expense(john, "bill_1", {
        "description": "Snacks",
        "amount": 10,
        "paid_by": "part_2",
        "participant_ids": ["part_2", "part_3", "part_1"],
    })

    assert [(s.participant_id, s.amount) for s in expense.splits] == [
        ("part_2", 3.34), ("part_3", 3.33), ("part_1", 3.33)
    ]


def test_add_then_delete_expense_restores_balances(store, john):
    before = _balances(store.get_bill(john, "bill_1"))

    bill, expense = store.add_expense(john, "bill_1", {
        "description": "Fuel", "amount": 77.77, "paid_by": "part_3",
    })
    assert _balances(bill) != before

    bill = store.delete_expense(john, "bill_1", expense.id)
    assert _balances(bill) == before


def test_custom_split_must_match_total(store, john):
    with pytest.raises(ValidationError) as exc:
        store.add_expense(john, "bill_2", {
            "description": "Wine",
            "amount": 100,
            "paid_by": "part_1",
            "split_type": "custom",
            "split_details": {"amounts": {"part_1": 50, "part_4": 49.98}},
        })
    assert "must equal the expense amount" in exc.value.message

    bill = store.get_bill(john, "bill_2")
    assert len(bill.expenses) == 1


def test_percentage_split_expense(store, john):
    bill, expense = store.add_expense(john, "bill_2", {
        "description": "Cake",
        "amount": 40,
        "paid_by": "part_4",
        "split_type": "percentage",
        "split_details": {"percentages": {"part_1": 75, "part_4": 25}},
    })

    assert [s.amount for s in expense.splits] == [30.0, 10.0]
    assert _balances(bill)["part_4"] == (40.0, 70.0)


@pytest.mark.parametrize("payload, message", [
    ({"description": " ", "amount": 10, "paid_by": "part_1"}, "Description is required"),
    ({"description": "X", "amount": 0, "paid_by": "part_1"}, "Amount must be greater than 0"),
    ({"description": "X", "amount": -5, "paid_by": "part_1"}, "Amount must be greater than 0"),
    ({"description": "X", "amount": 10}, "Please select who paid"),
    ({"description": "X", "amount": 10, "paid_by": "nobody"}, "Participant nobody is not part of this bill"),
    ({"description": "X", "amount": 10, "paid_by": "part_1", "split_type": "shares"},
     "Unknown split type: shares"),
])
def test_add_expense_validation(store, john, payload, message):
    with pytest.raises(ValidationError) as exc:
        store.add_expense(john, "bill_2", payload)
    assert exc.value.message == message


def test_explicit_splits_are_validated(store, john):
    with pytest.raises(ValidationError):
        store.add_expense(john, "bill_2", {
            "description": "X", "amount": 10, "paid_by": "part_1",
            "splits": [{"participant_id": "part_1", "amount": 5}, {"participant_id": "ghost", "amount": 5}],
        })

    _, expense = store.add_expense(john, "bill_2", {
        "description": "X", "amount": 10, "paid_by": "part_1", "split_type": "custom",
        "splits": [{"participant_id": "part_1", "amount": 7}, {"participant_id": "part_4", "amount": 3}],
    })
    assert [s.amount for s in expense.splits] == [7.0, 3.0]


def test_update_expense_amount_rebuilds_equal_split(store, john):
    bill, expense = store.update_expense(john, "bill_1", "exp_1", {"amount": 300})

    assert expense.amount == 300.0
    assert [s.amount for s in expense.splits] == [100.0, 100.0, 100.0]
    assert _balances(bill)["part_1"] == (400.0, 133.34)


def test_update_expense_description_keeps_splits(store, john):
    original = store.get_bill(john, "bill_1").find_expense("exp_2")

    _, expense = store.update_expense(john, "bill_1", "exp_2", {"description": "Food"})

    assert expense.description == "Food"
    assert expense.splits == original.splits


def test_update_expense_change_payer(store, john):
    bill, _ = store.update_expense(john, "bill_2", "exp_3", {"paid_by": "part_4"})

    assert _balances(bill) == {"part_1": (0.0, 60.0), "part_4": (120.0, 60.0)}


def test_update_custom_expense_amount_rechecks_amounts(store, john):
    _, expense = store.add_expense(john, "bill_2", {
        "description": "Wine", "amount": 30, "paid_by": "part_1", "split_type": "custom",
        "split_details": {"amounts": {"part_1": 10, "part_4": 20}},
    })

    with pytest.raises(ValidationError):
        store.update_expense(john, "bill_2", expense.id, {"amount": 40})


def test_update_percentage_expense_amount_keeps_percentages(store, john):
    _, expense = store.add_expense(john, "bill_2", {
        "description": "Flowers", "amount": 100, "paid_by": "part_1", "split_type": "percentage",
        "split_details": {"percentages": {"part_1": 70, "part_4": 30}},
    })

    bill, updated = store.update_expense(john, "bill_2", expense.id, {"amount": 200})

    assert updated.split_type == SplitType.PERCENTAGE
    assert [s.amount for s in updated.splits] == [140.0, 60.0]
    assert _balances(bill)["part_4"] == (0.0, 120.0)


def test_tiny_equal_split_never_goes_negative(store, jane):
    bill = store.create_bill(jane, {
        "name": "Gum",
        "participants": [{"name": "A"}, {"name": "B"}, {"name": "C"}],
    })
    payer = bill.participants[0].id

    _, expense = store.add_expense(jane, bill.id, {
        "description": "Gum", "amount": 0.02, "paid_by": payer,
    })

    assert all(s.amount >= 0 for s in expense.splits)
    assert round(sum(s.amount for s in expense.splits), 2) == 0.02


def test_update_and_delete_missing_expense(store, john):
    with pytest.raises(NotFoundError):
        store.update_expense(john, "bill_1", "exp_missing", {"amount": 1})
    with pytest.raises(NotFoundError):
        store.delete_expense(john, "bill_1", "exp_missing")
    with pytest.raises(NotFoundError):
        store.add_expense(john, "bill_missing", {"description": "X", "amount": 1, "paid_by": "p"})


def test_create_bill_adds_creator_and_counts(store, jane):
    bill = store.create_bill(jane, {
        "name": "  Ski Trip ",
        "participants": [{"name": "Tom", "email": "tom@example.com"}, {"name": "Ann"}],
    })

    assert bill.name == "Ski Trip"
    assert bill.status == BillStatus.ACTIVE
    assert bill.created_by == "2"
    assert [p.name for p in bill.participants] == ["Jane Smith", "Tom", "Ann"]
    assert bill.participants[0].is_registered is True
    assert len(bill.invitation_code) == 8
    assert store.users.get("2").bills_created == 9


def test_create_bill_tier_limit(store, guest):
    store.create_bill(guest, {"name": "First"})

    with pytest.raises(LimitExceededError):
        store.create_bill(store.users.get("3"), {"name": "Second"})


def test_create_bill_participant_limit(store, guest):
    with pytest.raises(LimitExceededError):
        store.create_bill(guest, {"name": "Crowd", "participants": [{"name": "A"}, {"name": "B"}]})


def test_update_archive_delete_require_creator(store, john, jane):
    with pytest.raises(PermissionDeniedError):
        store.update_bill(jane, "bill_1", {"name": "Mine now"})

    bill = store.update_bill(john, "bill_1", {"name": "Mountains", "status": "settled"})
    assert bill.name == "Mountains"
    assert bill.status == BillStatus.SETTLED

    with pytest.raises(ValidationError):
        store.update_bill(john, "bill_1", {"status": "closed"})

    bill = store.archive_bill(john, "bill_2")
    assert bill.status == BillStatus.ARCHIVED

    with pytest.raises(PermissionDeniedError):
        store.delete_bill(john, "bill_3")
    store.delete_bill(jane, "bill_3")
    with pytest.raises(NotFoundError):
        store.get_bill(jane, "bill_3")


def test_archived_bill_rejects_changes(store, john):
    with pytest.raises(ValidationError):
        store.add_expense(john, "bill_3", {"description": "X", "amount": 1, "paid_by": "part_2"})


def test_add_participant_and_limit(store, john):
    bill, participant = store.add_participant(john, "bill_2", {"name": "Zoe", "email": "zoe@example.com"})

    assert participant.name == "Zoe"
    assert participant.paid == 0 and participant.owes == 0
    assert len(bill.participants) == 3

    with pytest.raises(LimitExceededError):
        store.add_participant(john, "bill_2", {"name": "One too many"})


def test_add_participant_duplicate_email(store, jane):
    with pytest.raises(ConflictError):
        store.add_participant(jane, "bill_1", {"name": "Mike again", "email": "mike@example.com"})


def test_remove_participant_rules(store, john):
    with pytest.raises(ValidationError) as exc:
        store.remove_participant(john, "bill_1", "part_1")
    assert "paid for expenses" in exc.value.message

    with pytest.raises(ValidationError) as exc:
        store.remove_participant(john, "bill_1", "part_3")
    assert "still owes money" in exc.value.message

    with pytest.raises(NotFoundError):
        store.remove_participant(john, "bill_1", "part_404")


def test_remove_participant_without_balance(store, john):
    bill, participant = store.add_participant(john, "bill_2", {"name": "Zoe"})

    bill = store.remove_participant(john, "bill_2", participant.id)

    assert [p.id for p in bill.participants] == ["part_1", "part_4"]
    assert _balances(bill) == {"part_1": (120.0, 60.0), "part_4": (0.0, 60.0)}


def test_accept_invitation(store, guest, john):
    bill = store.accept_invitation(guest, "dinner07")

    joined = bill.find_participant_by_email("guest@example.com")
    assert joined.is_registered is True
    assert store.get_bill(guest, "bill_2").id == "bill_2"

    with pytest.raises(ConflictError):
        store.accept_invitation(guest, "DINNER07")
    with pytest.raises(ConflictError):
        store.accept_invitation(john, "TRIP2023")
    with pytest.raises(NotFoundError):
        store.accept_invitation(guest, "NOPE1234")


def test_exclusive_bill_rejects_invitations(store, jane, guest):
    bill = store.create_bill(jane, {"name": "Private", "is_exclusive": True})

    with pytest.raises(PermissionDeniedError):
        store.accept_invitation(guest, bill.invitation_code)


def test_balance_report(store, john):
    report = store.balance_report(john, "bill_1")

    assert report["bill_id"] == "bill_1"
    assert report["total_paid"] == 250.0
    assert report["total_owed"] == 250.0
    assert [s["amount"] for s in report["settlements"]] == [83.33, 83.33]
    assert report["warnings"] == []


def test_generate_invitation_code_is_unique(store):
    codes = {store.generate_invitation_code() for _ in range(20)}

    assert len(codes) == 20
    assert all(len(c) == 8 and c.isalnum() and c.upper() == c for c in codes)
    assert not codes & {"TRIP2023", "DINNER07", "OFFICE05"}


def test_participant_email_matching_ignores_case(store, jane):
    bob = store.users.register({"name": "Bob", "email": "Bob@Example.com", "password": "pw123456"})
    store.add_participant(jane, "bill_1", {"name": "Bob", "email": "bob@example.com"})

    assert store.get_bill(bob, "bill_1").id == "bill_1"

    with pytest.raises(ConflictError):
        store.add_participant(jane, "bill_1", {"name": "Mike", "email": "MIKE@example.com"})
