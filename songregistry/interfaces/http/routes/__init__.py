"""Route blueprints exposed via Flask."""

from .auth import auth_bp
from .songs import songs_bp
from .health import health_bp

__all__ = [
    "auth_bp",
    "songs_bp",
    "health_bp",
]
