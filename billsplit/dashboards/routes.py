from flask import Blueprint, jsonify, request
from flask_jwt_extended import jwt_required

from billsplit.auth.helpers import current_user
from billsplit.extensions import get_store

dashboard_bp = Blueprint("dashboard", __name__)


@dashboard_bp.route("/overview", methods=["GET"])
@jwt_required()
def overview():
    """
    Totals across the user's active bills.

    total_you_owe sums the bills where the user's share exceeds what they paid;
    total_owed_to_you sums the bills where they paid more than their share.
    """
    user = current_user()
    store = get_store()
    limit = max(0, min(request.args.get("recent", 3, type=int), 20))

    active_bills = store.active_bills(user)
    pending = store.pending_invitations(user)

    total_you_owe = 0.0
    total_owed_to_you = 0.0
    for bill in active_bills:
        participant = bill.find_participant_by_email(user.email)
        if not participant:
            continue
        if participant.balance < 0:
            total_you_owe += -participant.balance
        elif participant.balance > 0:
            total_owed_to_you += participant.balance

    return jsonify({
        "active_bill_count": len(active_bills),
        "pending_invitation_count": len(pending),
        "recent_bills": [b.to_dict() for b in active_bills[:limit]],
        "total_you_owe": round(total_you_owe, 2),
        "total_owed_to_you": round(total_owed_to_you, 2),
    })
