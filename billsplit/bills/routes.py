# billsplit/bills/routes.py

from flask import Blueprint, request, jsonify
from flask_jwt_extended import jwt_required

from billsplit.auth.helpers import current_user
from billsplit.core.errors import ValidationError
from billsplit.extensions import get_store
from billsplit.utils.enums import BillStatus
from billsplit.utils.validators import require_keys

bills_bp = Blueprint("bills", __name__)


@bills_bp.route("/", methods=["GET"])
@jwt_required()
def list_bills():
    """
    List the bills visible to the current user.

    Query params:
        status: active | pending | settled | archived (optional)
    """
    status = request.args.get("status")
    if status:
        try:
            status = BillStatus(status)
        except ValueError:
            raise ValidationError(f"Unknown bill status: {status}")

    bills = get_store().list_bills(current_user(), status)
    return jsonify({"bills": [b.to_dict() for b in bills]})


@bills_bp.route("/", methods=["POST"])
@jwt_required()
def create_bill():
    """
    Create a bill. The caller becomes its first participant.

    Request body:
    {
        "name": "Weekend Trip",
        "description": "...",
        "participants": [{"name": "Mike", "email": "mike@example.com"}],
        "is_exclusive": false
    }
    """
    data = request.get_json(silent=True) or {}
    bill = get_store().create_bill(current_user(), data)
    return jsonify(bill.to_dict()), 201


@bills_bp.route("/invitation-code", methods=["GET"])
@jwt_required()
def invitation_code():
    return jsonify({"invitation_code": get_store().generate_invitation_code()})


@bills_bp.route("/join", methods=["POST"])
@jwt_required()
def join_bill():
    data = request.get_json(silent=True) or {}
    require_keys(data, "invitation_code")

    bill = get_store().accept_invitation(current_user(), data["invitation_code"])
    return jsonify(bill.to_dict())


@bills_bp.route("/<bill_id>", methods=["GET"])
@jwt_required()
def get_bill(bill_id):
    bill = get_store().get_bill(current_user(), bill_id)
    return jsonify(bill.to_dict())


@bills_bp.route("/<bill_id>", methods=["PATCH"])
@jwt_required()
def update_bill(bill_id):
    data = request.get_json(silent=True) or {}
    bill = get_store().update_bill(current_user(), bill_id, data)
    return jsonify(bill.to_dict())


@bills_bp.route("/<bill_id>/archive", methods=["POST"])
@jwt_required()
def archive_bill(bill_id):
    bill = get_store().archive_bill(current_user(), bill_id)
    return jsonify(bill.to_dict())


@bills_bp.route("/<bill_id>", methods=["DELETE"])
@jwt_required()
def delete_bill(bill_id):
    get_store().delete_bill(current_user(), bill_id)
    return jsonify({"message": "Bill deleted"})


@bills_bp.route("/<bill_id>/balances", methods=["GET"])
@jwt_required()
def bill_balances(bill_id):
    """
    Net balance per participant plus suggested settlements.

    Response:
    {
        "bill_id": "...",
        "balances": [{participant_id, name, paid, owes, balance}],
        "total_paid": 250.0,
        "total_owed": 250.0,
        "settlements": [{from_participant, from_name, to_participant, to_name, amount}],
        "warnings": []
    }
    """
    return jsonify(get_store().balance_report(current_user(), bill_id))


@bills_bp.route("/<bill_id>/participants", methods=["POST"])
@jwt_required()
def add_participant(bill_id):
    data = request.get_json(silent=True) or {}
    require_keys(data, "name")

    bill, participant = get_store().add_participant(current_user(), bill_id, data)
    return jsonify({
        "participant": participant.to_dict(),
        "bill": bill.to_dict()
    }), 201


@bills_bp.route("/<bill_id>/participants/<participant_id>", methods=["DELETE"])
@jwt_required()
def remove_participant(bill_id, participant_id):
    bill = get_store().remove_participant(current_user(), bill_id, participant_id)
    return jsonify(bill.to_dict())
