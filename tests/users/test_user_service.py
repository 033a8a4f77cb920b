from __future__ import annotations

import pytest

from src.choir_system.choir_system.core.enums import Role, UserStatus
from src.choir_system.choir_system.core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    NotFoundError,
    ValidationError,
)
from src.choir_system.choir_system.users.model import public_user_dict
from src.choir_system.choir_system.users.tokens import TokenService
from tests.fakes import FakeWorld, actor_for


@pytest.fixture
def world():
    return FakeWorld()


def _register(world, **overrides):
    data = dict(name="Alice Mukamana", email="Alice@Choir.test", password="secret123", role="Singer")
    data.update(overrides)
    return world.container.auth_service.register(**data)


def test_register_creates_pending_user_with_generated_username(world):
    user = _register(world)
    assert user.status == UserStatus.PENDING
    assert user.username == "Mukamana"
    assert user.email == "alice@choir.test"
    assert user.password_hash != "secret123"


def test_register_username_collision_uses_last_first(world):
    world.users.add("Eric Mukamana", username="Mukamana")
    user = _register(world)
    assert user.username == "Mukamana.Alice"


def test_register_keeps_known_profile_fields(world):
    user = _register(
        world,
        profile={"university": " University of Rwanda ", "home_parish_name": "St Michel", "gender": "", "shoe_size": 42},
    )
    assert user.profile == {"university": "University of Rwanda", "home_parish_name": "St Michel"}
    assert public_user_dict(user)["university"] == "University of Rwanda"
    assert public_user_dict(user)["homeParishName"] == "St Michel"
    assert "password_hash" not in public_user_dict(user)


@pytest.mark.parametrize(
    "profile",
    [
        {"university": "UR"},
        {"gender": "Other"},
        {"year_of_study": "Year 9"},
        {"marital_status": 1},
    ],
)
def test_register_rejects_unlisted_profile_choices(world, profile):
    with pytest.raises(ValidationError):
        _register(world, profile=profile)


def test_update_profile_rejects_unlisted_choice(world):
    user = world.users.add("Bob Habimana")
    with pytest.raises(ValidationError):
        world.container.user_service.update_profile(actor_for(user), {"profile": {"gender": "unknown"}})
    assert world.users.get_by_id(user.user_id).profile == {}


@pytest.mark.parametrize(
    "overrides",
    [
        {"password": "123"},
        {"role": "Tenor"},
        {"name": "  "},
        {"email": "not-an-email"},
    ],
)
def test_register_validation(world, overrides):
    with pytest.raises(ValidationError):
        _register(world, **overrides)


def test_register_duplicate_email(world):
    _register(world)
    with pytest.raises(ValidationError):
        _register(world, name="Other Person")


def test_login_pending_account_forbidden(world):
    _register(world)
    with pytest.raises(AuthorizationError) as exc:
        world.container.auth_service.login("mukamana", "secret123")
    assert "pending" in str(exc.value)


def test_login_rejected_account_forbidden(world):
    world.users.add("Bob Habimana", status=UserStatus.REJECTED)
    with pytest.raises(AuthorizationError) as exc:
        world.container.auth_service.login("Habimana", "secret123")
    assert "rejected" in str(exc.value)


def test_login_wrong_password(world):
    world.users.add("Bob Habimana")
    with pytest.raises(AuthenticationError):
        world.container.auth_service.login("Habimana", "nope")


def test_login_by_username_or_email_and_token_roundtrip(world):
    user = world.users.add("Bob Habimana", email="bob@choir.test")
    auth = world.container.auth_service

    by_name = auth.login("HABIMANA", "secret123")
    by_email = auth.login("Bob@Choir.test", "secret123")

    assert by_name.user.user_id == by_email.user.user_id == user.user_id
    actor = auth.authenticate_token(by_name.token)
    assert (actor.user_id, actor.name, actor.role) == (user.user_id, "Bob Habimana", Role.SINGER)


def test_token_rejected_after_user_rejected(world):
    user = world.users.add("Bob Habimana")
    token = world.tokens.issue(user.user_id)
    world.users.set_status(user.user_id, UserStatus.REJECTED)
    with pytest.raises(AuthorizationError):
        world.container.auth_service.authenticate_token(token)


def test_token_for_deleted_user_invalid(world):
    user = world.users.add("Bob Habimana")
    token = world.tokens.issue(user.user_id)
    world.users.delete_by_id(user.user_id)
    with pytest.raises(AuthenticationError):
        world.container.auth_service.authenticate_token(token)


def test_token_signed_with_other_key_invalid(world):
    user = world.users.add("Bob Habimana")
    forged = TokenService("another-secret").issue(user.user_id)
    with pytest.raises(AuthenticationError):
        world.container.auth_service.authenticate_token(forged)
    with pytest.raises(AuthenticationError):
        world.container.auth_service.authenticate_token("")


def test_update_profile_returns_fresh_token(world):
    user = world.users.add("Bob Habimana")
    result = world.container.user_service.update_profile(
        actor_for(user), {"name": "Bob H.", "role": "President", "profile": {"university": "East African"}}
    )
    assert result.user.name == "Bob H."
    # Members cannot promote themselves.
    assert result.user.role == Role.SINGER
    assert result.user.profile["university"] == "East African"
    assert world.container.auth_service.authenticate_token(result.token).user_id == user.user_id


def test_update_profile_email_conflict(world):
    world.users.add("Alice Mukamana", email="alice@choir.test")
    bob = world.users.add("Bob Habimana")
    with pytest.raises(ValidationError):
        world.container.user_service.update_profile(actor_for(bob), {"email": "ALICE@choir.test"})


def test_admin_approves_and_changes_role(world):
    svc = world.container.user_service
    admin = actor_for(world.users.add("Grace President", role=Role.PRESIDENT))
    pending = _register(world)

    assert [u.user_id for u in svc.list_pending(admin)] == [pending.user_id]
    approved = svc.approve_user(admin, pending.user_id)
    assert approved.status == UserStatus.APPROVED

    updated = svc.update_user(admin, pending.user_id, {"role": "Accountant"})
    assert updated.role == Role.ACCOUNTANT


def test_admin_cannot_delete_self(world):
    president = world.users.add("Grace President", role=Role.PRESIDENT)
    with pytest.raises(ValidationError):
        world.container.user_service.delete_user(actor_for(president), president.user_id)


def test_delete_missing_user(world):
    admin = actor_for(world.users.add("Grace President", role=Role.ADVISOR))
    with pytest.raises(NotFoundError):
        world.container.user_service.delete_user(admin, 999)


def test_member_management_requires_admin(world):
    secretary = actor_for(world.users.add("Sam Secretary", role=Role.SECRETARY))
    with pytest.raises(AuthorizationError):
        world.container.user_service.list_users(secretary)
