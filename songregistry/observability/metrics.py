from __future__ import annotations

from flask import Blueprint, Response
from prometheus_client import Counter, generate_latest

metrics_blueprint = Blueprint("metrics_bp", __name__)

CONTENT_TYPE_LATEST = "text/plain; version=0.0.4; charset=utf-8"

REGISTRY_OPERATIONS = Counter(
    "songregistry_operations_total",
    "Registry operations handled by the API, by operation and outcome.",
    ["operation", "outcome"],
)


def record_registry_operation(operation: str, outcome: str) -> None:
    """``outcome`` is ``ok``, the registry error code that ended the call, or ``error``."""
    REGISTRY_OPERATIONS.labels(operation=operation, outcome=outcome).inc()


@metrics_blueprint.route("/metrics")
def metrics_endpoint() -> Response:
    return Response(generate_latest(), mimetype=CONTENT_TYPE_LATEST)
