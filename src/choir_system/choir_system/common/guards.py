from __future__ import annotations

from functools import wraps
from typing import Iterable

from flask import current_app, g, request

from ..core.enums import ADMIN_ROLES, Role
from ..core.exceptions import AuthenticationError
from .access import ensure_role

CONTAINER_KEY = "choir_container"


def get_container():
    return current_app.extensions[CONTAINER_KEY]


def bearer_token() -> str:
    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise AuthenticationError("No token provided")
    return token.strip()


def auth_required(view):
    """Resolve the bearer token to an Actor stored on `g.actor`."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        g.actor = get_container().auth_service.authenticate_token(bearer_token())
        return view(*args, **kwargs)

    return wrapper


def roles_required(allowed: Iterable[Role], message: str = "Access denied"):
    allowed = frozenset(allowed)

    def decorator(view):
        @auth_required
        @wraps(view)
        def wrapper(*args, **kwargs):
            ensure_role(g.actor, allowed, message)
            return view(*args, **kwargs)

        return wrapper

    return decorator


admin_required = roles_required(ADMIN_ROLES, "Access denied. Admin privileges required.")
