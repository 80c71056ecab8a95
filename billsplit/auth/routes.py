from flask import Blueprint, request, jsonify
from flask_jwt_extended import create_access_token, jwt_required

from billsplit.auth.helpers import current_user
from billsplit.extensions import get_store
from billsplit.utils.validators import require_keys

auth_bp = Blueprint("auth", __name__)


@auth_bp.route("/register", methods=["POST"])
def register():
    data = request.get_json(silent=True) or {}
    require_keys(data, "email", "password")

    user = get_store().users.register(data)
    access_token = create_access_token(identity=user.id)

    return jsonify({
        "access_token": access_token,
        "user": user.to_dict()
    }), 201


@auth_bp.route("/login", methods=["POST"])
def login():
    data = request.get_json(silent=True) or {}
    user = get_store().users.authenticate(data.get("email"), data.get("password"))

    if not user:
        return jsonify({"error": "Invalid credentials"}), 401

    token = create_access_token(identity=user.id)

    return jsonify({
        "access_token": token,
        "user": user.to_dict()
    })


@auth_bp.route("/me", methods=["GET"])
@jwt_required()
def me():
    return jsonify(current_user().to_dict())


@auth_bp.route("/me", methods=["PATCH"])
@jwt_required()
def update_me():
    data = request.get_json(silent=True) or {}
    user = get_store().users.update(current_user().id, data)
    return jsonify(user.to_dict())
