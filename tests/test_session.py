import asyncio
import json

import pytest

from kneeklinic.core.exceptions import AuthenticationError, ValidationError
from kneeklinic.schemas.auth import User
from kneeklinic.services.session_service import get_auth_session, reset_auth_session
from kneeklinic.utils.constants import STORAGE_KEY_TOKEN, STORAGE_KEY_USER

from tests.fake_backend import PASSWORD, TOKEN


def test_load_restores_stored_session(kk_app):
    session = kk_app.session
    assert session.is_loading is False
    assert session.is_authenticated
    assert session.token == TOKEN
    assert session.user.id == "u1"
    assert session.user.full_name == "Jane Doe"


def test_load_with_empty_store(guest_app):
    assert guest_app.session.is_loading is False
    assert guest_app.session.user is None
    assert not guest_app.session.is_authenticated


def test_load_discards_corrupt_user(guest_app, store):
    store.multi_set([(STORAGE_KEY_TOKEN, TOKEN), (STORAGE_KEY_USER, "{not json")])
    assert guest_app.session.load() is None
    assert store.get_item(STORAGE_KEY_TOKEN) is None
    assert store.get_item(STORAGE_KEY_USER) is None


def test_login_persists_token_and_user(guest_app, store):
    user = asyncio.run(guest_app.session.login("jane@example.com", PASSWORD))

    assert user.email == "jane@example.com"
    assert guest_app.session.is_authenticated
    assert store.get_item(STORAGE_KEY_TOKEN) == TOKEN
    cached = json.loads(store.get_item(STORAGE_KEY_USER))
    assert cached["_id"] == "u1"
    assert cached["firstName"] == "Jane"
    assert User.model_validate(cached).full_name == "Jane Doe"


def test_login_requires_credentials(guest_app, backend):
    with pytest.raises(ValidationError) as exc_info:
        asyncio.run(guest_app.session.login("  ", PASSWORD))
    assert exc_info.value.details == {"email": "Email is required"}

    with pytest.raises(ValidationError):
        asyncio.run(guest_app.session.login("jane@example.com", ""))
    assert backend.requests == []


def test_login_normalizes_email(guest_app, backend):
    user = asyncio.run(guest_app.session.login("  Jane@Example.COM ", PASSWORD))
    assert backend.last_body["email"] == "jane@example.com"
    assert user.id == "u1"


def test_login_rejects_blank_password(guest_app, backend):
    with pytest.raises(ValidationError) as exc_info:
        asyncio.run(guest_app.session.login("jane@example.com", "   "))
    assert exc_info.value.details == {"password": "Password is required"}
    assert backend.requests == []


def test_login_rejected(guest_app, store):
    with pytest.raises(AuthenticationError) as exc_info:
        asyncio.run(guest_app.session.login("jane@example.com", "wrong"))
    assert exc_info.value.message == "Invalid email or password"
    assert not guest_app.session.is_authenticated
    assert store.get_item(STORAGE_KEY_TOKEN) is None


def test_logout_clears_state(kk_app, logged_in_store, backend):
    asyncio.run(kk_app.session.logout())
    assert backend.logout_count == 1
    assert kk_app.session.user is None
    assert logged_in_store.get_item(STORAGE_KEY_TOKEN) is None


def test_logout_clears_state_when_backend_fails(kk_app, logged_in_store, backend):
    backend.failures[("POST", "/api/auth/logout")] = 500
    asyncio.run(kk_app.session.logout())
    assert not kk_app.session.is_authenticated
    assert logged_in_store.get_item(STORAGE_KEY_USER) is None


def test_unauthorized_response_resets_session(kk_app, logged_in_store):
    logged_in_store.set_item(STORAGE_KEY_TOKEN, "stale-token")

    with pytest.raises(AuthenticationError):
        asyncio.run(kk_app.messages.get_conversations())

    assert kk_app.session.user is None
    assert kk_app.session.token is None
    assert logged_in_store.get_item(STORAGE_KEY_TOKEN) is None
    assert logged_in_store.get_item(STORAGE_KEY_USER) is None


def test_refresh_user_updates_cache(kk_app, backend, logged_in_store):
    backend.patient()["firstName"] = "Janet"
    user = asyncio.run(kk_app.session.refresh_user())
    assert user.first_name == "Janet"
    assert kk_app.session.user.first_name == "Janet"
    assert json.loads(logged_in_store.get_item(STORAGE_KEY_USER))["firstName"] == "Janet"


def test_update_profile_without_picture_is_form_encoded(kk_app, backend):
    user = asyncio.run(kk_app.session.update_profile(" Janet ", "Doe", "jane@example.com"))
    assert user.first_name == "Janet"
    assert backend.last_content_type.startswith("application/x-www-form-urlencoded")
    assert backend.last_form == {"firstName": "Janet", "lastName": "Doe", "email": "jane@example.com"}


def test_update_profile_with_picture_is_multipart(kk_app, backend, tmp_path):
    picture = tmp_path / "me.png"
    picture.write_bytes(b"\x89PNG")

    user = asyncio.run(kk_app.session.update_profile("Jane", "Doe", "jane@example.com", picture))

    assert backend.last_content_type.startswith("multipart/form-data")
    assert user.profile_image_url == "https://cdn.example.com/profiles/me.png"

    user = asyncio.run(kk_app.session.delete_profile_picture())
    assert user.profile_image_url is None


def test_update_profile_requires_all_fields(kk_app, backend):
    with pytest.raises(ValidationError) as exc_info:
        asyncio.run(kk_app.session.update_profile("Jane", "", "jane@example.com"))
    assert exc_info.value.message == "Please fill in all fields"
    assert backend.requests == []


def test_change_password(kk_app, backend):
    with pytest.raises(ValidationError) as exc_info:
        asyncio.run(kk_app.session.change_password(PASSWORD, "newpass12", "newpass21"))
    assert exc_info.value.message == "New passwords do not match"

    response = asyncio.run(kk_app.session.change_password(PASSWORD, "newpass12", "newpass12"))
    assert response.success is True
    assert backend.users["jane@example.com"]["password"] == "newpass12"


def test_change_password_wrong_current(kk_app):
    with pytest.raises(ValidationError) as exc_info:
        asyncio.run(kk_app.session.change_password("wrong", "newpass12", "newpass12"))
    assert exc_info.value.message == "Current password is incorrect"


def test_onboarding_flag(guest_app):
    assert guest_app.session.has_onboarded() is False
    guest_app.session.mark_onboarded()
    assert guest_app.session.has_onboarded() is True


def test_process_wide_session(kk_app):
    assert get_auth_session() is kk_app.session
    reset_auth_session()
    with pytest.raises(RuntimeError):
        get_auth_session()
