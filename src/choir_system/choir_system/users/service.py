from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.access import ensure_admin
from ..common.validators import optional_text, require_enum, require_min_length, require_non_empty
from ..core.constants import MIN_PASSWORD_LENGTH
from ..core.enums import Role, UserStatus
from ..core.exceptions import AuthenticationError, AuthorizationError, NotFoundError, ValidationError
from .model import PROFILE_CHOICES, PROFILE_FIELDS, Actor, NewUser, User
from .repository import UserRepository
from .tokens import TokenService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuthResult:
    """A user together with a freshly issued bearer token."""

    user: User
    token: str


def _require_email(value: str) -> str:
    email = require_non_empty(value, "Email").lower()
    if "@" not in email or email.startswith("@") or email.endswith("@"):
        raise ValidationError("Email is not valid")
    return email


def _clean_profile(profile: Optional[dict]) -> dict:
    """Keep known profile keys with non-empty values."""
    out: dict = {}
    for key, value in (profile or {}).items():
        if key not in PROFILE_FIELDS:
            continue
        if isinstance(value, str):
            value = value.strip()
        if value in (None, "", {}):
            continue
        if key in PROFILE_CHOICES:
            value = require_enum(PROFILE_CHOICES[key], value, PROFILE_FIELDS[key]).value
        out[key] = value
    return out


def _status_message(user: User) -> str:
    if user.status == UserStatus.PENDING:
        return "Your account is pending approval. Please wait for the President to confirm you."
    return "Your account has been rejected. Please contact the administrator."


class AuthService:
    """Use cases: register, login, resolve a bearer token to an Actor."""

    def __init__(self, users: UserRepository, tokens: TokenService):
        self._users = users
        self._tokens = tokens

    def _generate_username(self, name: str) -> str:
        parts = name.split()
        last_name = parts[-1] if parts else ""
        first_name = parts[0] if parts else ""
        username = last_name
        if self._users.get_by_username(last_name) and first_name:
            username = f"{last_name}.{first_name}"
        return username

    def register(
        self,
        *,
        name: str,
        email: str,
        password: str,
        role,
        username: Optional[str] = None,
        phone_number: Optional[str] = None,
        profile_picture_url: Optional[str] = None,
        profile: Optional[dict] = None,
    ) -> User:
        name = require_non_empty(name, "Name")
        email = _require_email(email)
        require_min_length(password or "", "Password", MIN_PASSWORD_LENGTH)
        role = require_enum(Role, role, "role")

        username = optional_text(username) or self._generate_username(name)

        if self._users.get_by_email(email) or self._users.get_by_username(username):
            raise ValidationError("User already exists")

        user_id = self._users.create_user(
            NewUser(
                username=username,
                name=name,
                email=email,
                role=role,
                password_hash=generate_password_hash(password),
                status=UserStatus.PENDING,
                phone_number=optional_text(phone_number),
                profile_picture_url=optional_text(profile_picture_url),
                profile=_clean_profile(profile),
            )
        )
        logger.info("Registered user %s (%s) pending approval", user_id, username)
        user = self._users.get_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")
        return user

    def login(self, identifier: str, password: str) -> AuthResult:
        identifier = (identifier or "").strip()
        user = self._users.get_by_username(identifier) if identifier else None
        if not user and "@" in identifier:
            user = self._users.get_by_email(identifier)

        try:
            ok = bool(user) and check_password_hash(user.password_hash, password or "")
        except ValueError:
            # e.g. placeholder or corrupted hashes
            ok = False

        if not ok:
            raise AuthenticationError("Invalid credentials")
        if not user.is_approved:
            raise AuthorizationError(_status_message(user))

        return AuthResult(user=user, token=self._tokens.issue(user.user_id))

    def authenticate_token(self, token: str) -> Actor:
        user_id = self._tokens.verify(token)
        user = self._users.get_by_id(user_id)
        if not user:
            raise AuthenticationError("Invalid token")
        if not user.is_approved:
            raise AuthorizationError(_status_message(user))
        return Actor.from_user(user)


class UserService:
    """Use cases: profile edits and member administration."""

    def __init__(self, users: UserRepository, tokens: TokenService):
        self._users = users
        self._tokens = tokens

    def _require_user(self, user_id: int) -> User:
        user = self._users.get_by_id(int(user_id))
        if not user:
            raise NotFoundError("User not found")
        return user

    def _build_changes(
        self,
        user: User,
        fields: dict,
        *,
        password: Optional[str],
        allow_admin_fields: bool,
    ) -> dict:
        """Translate submitted fields into column changes; empty values keep the current value."""
        changes: dict = {}

        name = optional_text(fields.get("name"))
        if name:
            changes["name"] = name

        if optional_text(fields.get("email")):
            email = _require_email(fields["email"])
            other = self._users.get_by_email(email)
            if other and other.user_id != user.user_id:
                raise ValidationError("Email is already in use")
            changes["email"] = email

        for column in ("phone_number", "profile_picture_url"):
            value = optional_text(fields.get(column))
            if value:
                changes[column] = value

        if allow_admin_fields:
            username = optional_text(fields.get("username"))
            if username and username.lower() != user.username.lower():
                if self._users.get_by_username(username):
                    raise ValidationError("Username is already in use")
                changes["username"] = username
            if fields.get("role"):
                changes["role"] = require_enum(Role, fields["role"], "role").value

        profile_updates = _clean_profile(fields.get("profile"))
        if profile_updates:
            changes["profile"] = {**user.profile, **profile_updates}

        if password:
            require_min_length(password, "Password", MIN_PASSWORD_LENGTH)
            changes["password_hash"] = generate_password_hash(password)

        return changes

    def get_profile(self, actor: Actor) -> User:
        return self._require_user(actor.user_id)

    def update_profile(self, actor: Actor, fields: dict, *, password: Optional[str] = None) -> AuthResult:
        user = self._require_user(actor.user_id)
        changes = self._build_changes(user, fields, password=password, allow_admin_fields=False)
        self._users.update_user(user.user_id, changes)
        updated = self._require_user(user.user_id)
        return AuthResult(user=updated, token=self._tokens.issue(updated.user_id))

    def list_users(self, actor: Actor) -> Sequence[User]:
        ensure_admin(actor)
        return self._users.list_all()

    def list_pending(self, actor: Actor) -> Sequence[User]:
        ensure_admin(actor)
        return self._users.list_by_status(UserStatus.PENDING)

    def get_user(self, actor: Actor, user_id: int) -> User:
        ensure_admin(actor)
        return self._require_user(user_id)

    def update_user(self, actor: Actor, user_id: int, fields: dict, *, password: Optional[str] = None) -> User:
        ensure_admin(actor)
        user = self._require_user(user_id)
        changes = self._build_changes(user, fields, password=password, allow_admin_fields=True)
        self._users.update_user(user.user_id, changes)
        return self._require_user(user.user_id)

    def delete_user(self, actor: Actor, user_id: int) -> None:
        ensure_admin(actor)
        user = self._require_user(user_id)
        if user.user_id == actor.user_id:
            raise ValidationError("You cannot delete your own account")
        if not self._users.delete_by_id(user.user_id):
            raise NotFoundError("User not found")
        logger.info("User %s deleted by %s", user.user_id, actor.user_id)

    def _set_status(self, actor: Actor, user_id: int, status: UserStatus) -> User:
        ensure_admin(actor)
        user = self._require_user(user_id)
        self._users.set_status(user.user_id, status)
        logger.info("User %s marked %s by %s", user.user_id, status.value, actor.user_id)
        return self._require_user(user.user_id)

    def approve_user(self, actor: Actor, user_id: int) -> User:
        return self._set_status(actor, user_id, UserStatus.APPROVED)

    def reject_user(self, actor: Actor, user_id: int) -> User:
        return self._set_status(actor, user_id, UserStatus.REJECTED)
