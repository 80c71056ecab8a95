# billsplit/expenses/routes.py

from flask import Blueprint, request, jsonify
from flask_jwt_extended import jwt_required

from billsplit.auth.helpers import current_user
from billsplit.extensions import get_store
from billsplit.utils.validators import require_keys

expenses_bp = Blueprint("expenses", __name__)


@expenses_bp.route("/", methods=["POST"])
@jwt_required()
def add_expense(bill_id):
    """
    Add an expense and refresh participant balances.

    Request body:
    {
        "description": "Dinner",
        "amount": 150.00,
        "paid_by": "<participant id>",
        "split_type": "equal|custom|percentage",  // default: equal
        "participant_ids": [...],                  // optional, equal split subset
        "split_details": {"amounts": {...}} | {"percentages": {...}},
        "splits": [{"participant_id": "...", "amount": 50.0}]  // optional, precomputed
    }
    """
    data = request.get_json(silent=True) or {}
    require_keys(data, "description", "amount", "paid_by")

    bill, expense = get_store().add_expense(current_user(), bill_id, data)
    return jsonify({
        "expense": expense.to_dict(),
        "bill": bill.to_dict()
    }), 201


@expenses_bp.route("/<expense_id>", methods=["PATCH"])
@jwt_required()
def update_expense(bill_id, expense_id):
    data = request.get_json(silent=True) or {}
    bill, expense = get_store().update_expense(current_user(), bill_id, expense_id, data)
    return jsonify({
        "expense": expense.to_dict(),
        "bill": bill.to_dict()
    })


@expenses_bp.route("/<expense_id>", methods=["DELETE"])
@jwt_required()
def delete_expense(bill_id, expense_id):
    bill = get_store().delete_expense(current_user(), bill_id, expense_id)
    return jsonify(bill.to_dict())
