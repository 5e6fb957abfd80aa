from __future__ import annotations

from flask import Blueprint, jsonify
from sqlalchemy import text

from songregistry.database.db_manager import db
from songregistry.domain.registry import IdentifierAllocator, LedgerClock

health_bp = Blueprint("health_bp", __name__)


@health_bp.route("/healthz")
def healthz():
    status = 200
    checks = {}

    try:
        db.session.execute(text("SELECT 1"))
        checks["database"] = "ok"
        checks["total_count"] = IdentifierAllocator(db.session).current()
        checks["ledger_height"] = LedgerClock(db.session).current()
    except Exception as exc:  # pragma: no cover - DB failure path
        db.session.rollback()
        status = 503
        checks["database"] = f"error: {exc}"

    overall = "ok" if status == 200 else "degraded"
    return jsonify({"status": overall, "checks": checks}), status
