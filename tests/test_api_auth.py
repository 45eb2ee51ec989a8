"""
API tests for /api/auth and /api/users with the user crud layer mocked
"""
from unittest.mock import AsyncMock, patch

import pytest

from careerforge.core.config import settings
from careerforge.core.security import create_refresh_token, decode_access_token, hash_password, hash_reset_token

from conftest import make_user


async def _identity(user, *args, **kwargs):
    return user


async def _apply(user, changes):
    for key, value in changes.items():
        setattr(user, key, value)
    return user


@pytest.fixture
def users():
    created = []

    async def create_user(name, email, password_hash, is_admin=False):
        user = make_user(name=name, email=email, password=password_hash, is_admin=is_admin)
        created.append(user)
        return user

    mocks = {
        "get_user_by_email": AsyncMock(return_value=None),
        "get_user": AsyncMock(return_value=None),
        "get_user_by_reset_token": AsyncMock(return_value=None),
        "create_user": AsyncMock(side_effect=create_user),
        "save_user": AsyncMock(side_effect=_identity),
        "update_user": AsyncMock(side_effect=_apply),
    }
    patchers = [patch(f"careerforge.crud.crud_user.{name}", mock) for name, mock in mocks.items()]
    for p in patchers:
        p.start()
    mocks["created"] = created
    yield mocks
    for p in patchers:
        p.stop()


def test_register_issues_tokens(client, users):
    response = client.post("/api/auth/register", json={"name": " Ada ", "email": "Ada@Example.com", "password": "secret1"})

    assert response.status_code == 201
    data = response.json()["data"]
    assert data["user"]["name"] == "Ada"
    assert data["user"]["email"] == "ada@example.com"
    assert "password" not in data["user"]
    assert decode_access_token(data["accessToken"])["id"] == data["user"]["id"]
    assert users["created"][0].refreshToken == data["refreshToken"]
    assert users["created"][0].password != "secret1"


def test_register_allow_listed_email_becomes_admin(client, users):
    response = client.post("/api/auth/register", json={"name": "Boss", "email": "boss@example.com", "password": "secret1"})
    assert response.json()["data"]["user"]["isAdmin"] is True


def test_register_duplicate_email(client, users):
    users["get_user_by_email"].return_value = make_user(email="ada@example.com")
    response = client.post("/api/auth/register", json={"name": "Ada", "email": "ada@example.com", "password": "secret1"})
    assert response.status_code == 400
    assert response.json()["message"] == "User already exists"


def test_register_short_password_is_validation_error(client, users):
    response = client.post("/api/auth/register", json={"name": "Ada", "email": "ada@example.com", "password": "123"})
    assert response.status_code == 400
    assert response.json()["errors"][0]["field"] == "password"


def test_login(client, users):
    user = make_user(email="ada@example.com", password=hash_password("secret1"))
    users["get_user_by_email"].return_value = user

    bad = client.post("/api/auth/login", json={"email": "ada@example.com", "password": "nope"})
    assert bad.status_code == 401
    assert bad.json()["message"] == "Invalid credentials"

    good = client.post("/api/auth/login", json={"email": "ada@example.com", "password": "secret1"})
    assert good.status_code == 200
    assert user.lastLogin is not None
    assert good.json()["data"]["refreshToken"] == user.refreshToken


def test_refresh_token_must_match_stored(client, users):
    user = make_user()
    token = create_refresh_token(str(user.id))
    users["get_user"].return_value = user

    assert client.post("/api/auth/refresh-token", json={"refreshToken": token}).status_code == 401

    user.refreshToken = token
    response = client.post("/api/auth/refresh-token", json={"refreshToken": token})
    assert response.status_code == 200
    assert decode_access_token(response.json()["data"]["accessToken"])["id"] == str(user.id)
    assert user.refreshToken != token


def test_me_and_logout(client, login_as, users):
    user = make_user(refreshToken="stored")
    login_as(user)

    assert client.get("/api/auth/me").json()["data"]["email"] == "jane@example.com"
    assert client.post("/api/auth/logout").status_code == 200
    assert user.refreshToken is None


def test_bearer_token_authenticates(client, users):
    from careerforge.core.security import create_access_token

    user = make_user()
    users["get_user"].return_value = user
    headers = {"Authorization": f"Bearer {create_access_token(str(user.id))}"}
    assert client.get("/api/auth/me", headers=headers).status_code == 200
    assert client.get("/api/auth/me", headers={"Authorization": "Bearer junk"}).status_code == 401


def test_forgot_and_reset_password(client, users, monkeypatch):
    monkeypatch.setattr(settings, "EXPOSE_RESET_TOKEN", True)
    user = make_user(password=hash_password("old-pass"))
    users["get_user_by_email"].return_value = user

    response = client.post("/api/auth/forgot-password", json={"email": "jane@example.com"})
    assert response.status_code == 200
    raw = response.json()["data"]["resetToken"]
    assert user.resetPasswordToken == hash_reset_token(raw)

    users["get_user_by_reset_token"].return_value = user
    reset = client.post(f"/api/auth/reset-password/{raw}", json={"password": "new-pass"})
    assert reset.status_code == 200
    assert users["get_user_by_reset_token"].await_args.args[0] == hash_reset_token(raw)
    assert user.resetPasswordToken is None

    users["get_user_by_reset_token"].return_value = None
    assert client.post("/api/auth/reset-password/stale", json={"password": "new-pass"}).status_code == 400


def test_forgot_password_hides_token_by_default(client, users):
    users["get_user_by_email"].return_value = make_user()
    response = client.post("/api/auth/forgot-password", json={"email": "jane@example.com"})
    assert response.json()["data"] is None


def test_profile_update_and_password_change(client, login_as, users):
    user = make_user(password=hash_password("old-pass"))
    login_as(user)

    response = client.put("/api/users/profile", json={"name": "Jane Q. Doe"})
    assert response.status_code == 200
    assert response.json()["data"]["name"] == "Jane Q. Doe"

    users["get_user_by_email"].return_value = make_user(email="taken@example.com")
    taken = client.put("/api/users/profile", json={"email": "taken@example.com"})
    assert taken.status_code == 400

    wrong = client.put("/api/users/password", json={"currentPassword": "nope", "newPassword": "new-pass"})
    assert wrong.status_code == 400
    ok = client.put("/api/users/password", json={"currentPassword": "old-pass", "newPassword": "new-pass"})
    assert ok.status_code == 200


def test_account_delete_cascades(client, login_as, owner, full_resume):
    from careerforge.schemas.resume import OriginalFile

    full_resume.originalFile = OriginalFile(storageId="resumes/abc")
    owner.profilePictureId = "profile-pictures/me"
    login_as(owner)

    with patch("careerforge.crud.crud_resume.get_resumes_for_user", AsyncMock(return_value=[full_resume])), \
            patch("careerforge.crud.crud_resume.delete_resumes_for_user", AsyncMock()) as delete_resumes, \
            patch("careerforge.crud.crud_user.delete_user", AsyncMock()) as delete_user, \
            patch("careerforge.tools.file_uploader.delete_file", AsyncMock(return_value=True)) as delete_file:
        response = client.delete("/api/users/account")

    assert response.status_code == 200
    assert response.json()["data"] == {"deletedResumes": 1}
    delete_resumes.assert_awaited_once_with(owner.id)
    delete_user.assert_awaited_once_with(owner)
    assert [c.args[0] for c in delete_file.await_args_list] == ["resumes/abc", "profile-pictures/me"]
