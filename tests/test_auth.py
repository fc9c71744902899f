"""
Unit tests for identity token handling and user synchronization
"""

from datetime import timedelta

import pytest
from jose import jwt

from careshift.core.auth import (
    Principal, create_identity_token, decode_identity_token, verify_identity_token,
)
from careshift.core.config import get_settings
from careshift.core.exceptions import PermissionDeniedError, ValidationError
from careshift.models.user import UserRole
from careshift.repositories.users import UserStore
from careshift.services.users import UserService

settings = get_settings()


def test_create_and_verify_identity_token():
    token = create_identity_token("carer@example.com", name="Carer", picture="https://img/x.png")

    principal = verify_identity_token(token)
    assert principal is not None
    assert principal.email == "carer@example.com"
    assert principal.name == "Carer"
    assert principal.picture == "https://img/x.png"

    payload = decode_identity_token(token)
    assert payload["sub"] == "carer@example.com"
    assert "exp" in payload


def test_verify_invalid_token():
    assert verify_identity_token("invalid.token.string.here") is None


def test_expired_token():
    token = create_identity_token("carer@example.com", expires_delta=timedelta(hours=-1))
    assert verify_identity_token(token) is None


def test_wrong_secret_is_rejected():
    token = jwt.encode({"email": "carer@example.com"}, "another-secret", algorithm=settings.JWT_ALGORITHM)
    assert verify_identity_token(token) is None


def test_token_without_valid_email_is_rejected():
    token = jwt.encode({"email": "not-an-email"}, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)
    assert verify_identity_token(token) is None

    token = jwt.encode({"name": "No Email"}, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)
    assert verify_identity_token(token) is None


@pytest.fixture
def user_service(db, policy) -> UserService:
    return UserService(db, UserStore(db), policy)


def test_first_login_creates_careworker(user_service):
    user = user_service.find_or_create(Principal(email="new@example.com", name="New Carer"))

    assert user.role == UserRole.CAREWORKER
    assert user.total_shifts == 0
    assert user.average_hours == 0.0

    again = user_service.find_or_create(Principal(email="new@example.com", name="Renamed"))
    assert again.id == user.id
    assert again.name == "New Carer"


def test_profile_refresh(user_service):
    user_service.find_or_create(Principal(email="new@example.com", name="Old"))
    user = user_service.find_or_create(
        Principal(email="new@example.com", name="New", picture="https://img/p.png"),
        refresh_profile=True,
    )
    assert user.name == "New"
    assert user.profile_pic_url == "https://img/p.png"


def test_role_change(user_service, careworker):
    user = user_service.change_role(careworker, "MANAGER")
    assert user.role == UserRole.MANAGER

    with pytest.raises(ValidationError) as exc:
        user_service.change_role(user, "ADMIN")
    assert exc.value.message == "Invalid role. Must be CAREWORKER or MANAGER"


def test_only_managers_list_users(user_service, careworker, manager_user):
    with pytest.raises(PermissionDeniedError) as exc:
        user_service.list_users(careworker)
    assert exc.value.message == "Only managers can access all users"

    emails = {u.email for u in user_service.list_users(manager_user)}
    assert emails == {careworker.email, manager_user.email}
