#!/usr/bin/env python
"""Authentication API endpoints for registration and login."""

from __future__ import annotations

from datetime import datetime
from typing import Dict, Tuple

from flask import Blueprint, jsonify, request
from flask_login import current_user, login_user, logout_user

from songregistry.database.db_manager import User, db


auth_bp = Blueprint("auth", __name__, url_prefix="/api/auth")

PRINCIPAL_MAX_LENGTH = 255
PASSWORD_MIN_LENGTH = 8


def _validate_credentials(payload: Dict[str, object]) -> Tuple[str, str, Dict[str, str]]:
    # Principals are opaque identities; they are stored exactly as sent
    principal = payload.get("principal")
    password = payload.get("password")
    errors: Dict[str, str] = {}
    if not isinstance(principal, str) or not principal:
        errors["principal"] = "Please provide an identity."
        principal = ""
    elif len(principal) > PRINCIPAL_MAX_LENGTH:
        errors["principal"] = f"Identity must be {PRINCIPAL_MAX_LENGTH} characters or fewer."
    if not isinstance(password, str) or len(password) < PASSWORD_MIN_LENGTH:
        errors["password"] = f"Password must be at least {PASSWORD_MIN_LENGTH} characters long."
        password = ""
    return principal, password, errors


@auth_bp.route("/register", methods=["POST"])
def register_user():
    data = request.get_json(silent=True) or {}
    principal, password, errors = _validate_credentials(data)
    if errors:
        return jsonify({"errors": errors}), 400

    existing = User.query.filter_by(principal=principal).first()
    if existing:
        return jsonify({"errors": {"principal": "An account with this identity already exists."}}), 409

    user = User(principal=principal)
    user.set_password(password)
    db.session.add(user)
    db.session.commit()

    login_user(user)
    return jsonify({"user": user.to_dict()}), 201


@auth_bp.route("/login", methods=["POST"])
def login():
    data = request.get_json(silent=True) or {}
    principal = data.get("principal")
    password = data.get("password")

    if not isinstance(principal, str) or not principal or not isinstance(password, str) or not password:
        return jsonify({"errors": {"form": "Identity and password are required."}}), 400

    user = User.query.filter_by(principal=principal).first()
    if user is None or not user.check_password(password):
        return jsonify({"errors": {"form": "Invalid identity or password."}}), 401

    if not user.is_active:
        return jsonify({"errors": {"form": "Account is disabled."}}), 403

    user.last_login_at = datetime.utcnow()
    login_user(user)
    db.session.commit()
    return jsonify({"user": user.to_dict()}), 200


@auth_bp.route("/logout", methods=["POST"])
def logout():
    if current_user.is_authenticated:
        logout_user()
    return jsonify({"success": True}), 200


@auth_bp.route("/session", methods=["GET"])
def session_info():
    if current_user.is_authenticated:
        return jsonify({"user": current_user.to_dict()}), 200
    return jsonify({"user": None}), 200


__all__ = ["auth_bp"]
