from __future__ import annotations

from typing import Optional

from flask import has_request_context
from flask_login import current_user


def current_principal() -> Optional[str]:
    """Return the authenticated caller's identity, or None outside a logged-in request.

    The principal is passed to the registry untouched: no trimming, no case
    folding.
    """
    if not has_request_context():
        return None
    if not getattr(current_user, "is_authenticated", False):
        return None
    return current_user.principal


__all__ = ["current_principal"]
