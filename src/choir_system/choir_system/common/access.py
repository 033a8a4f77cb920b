from __future__ import annotations

from typing import Iterable

from ..core.enums import ADMIN_ROLES, Role
from ..core.exceptions import AuthorizationError


def ensure_role(actor, allowed: Iterable[Role], message: str = "Access denied") -> None:
    if actor is None or actor.role not in set(allowed):
        raise AuthorizationError(message)


def ensure_admin(actor) -> None:
    ensure_role(actor, ADMIN_ROLES, "Access denied. Admin privileges required.")


def ensure_self_or_admin(actor, user_id: int) -> None:
    if actor is None:
        raise AuthorizationError("Access denied")
    if actor.user_id != int(user_id) and not actor.is_admin:
        raise AuthorizationError("You can only view your own records")
