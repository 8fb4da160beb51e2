from datetime import timedelta

import pytest
from conftest import STRONG_PASSWORD, RecordingTransport, extract_token
from src.core.exceptions import ServerConfigError
from src.models.login_event import AuditAction, LoginEvent
from src.models.user import UserProfile
from src.services.email_service import EmailService
from src.services.password_reset_service import PasswordResetService
from src.utils.time_utils import utcnow

NEW_PASSWORD = "Brighter-Day-47"


@pytest.fixture
def registered(client, identity):
    identity.add_user("uid-a", "a@b.com")
    client.post("/api/users", json={"uid": "uid-a", "email": "a@b.com"})
    return "uid-a"


def request_reset(client, email="a@b.com"):
    return client.post("/api/forgot-password", json={"email": email})


def test_forgot_password_unknown_email_is_silent(client, transport, app_session):
    response = request_reset(client, "ghost@b.com")
    assert response.status_code == 200
    assert response.json() == {
        "success": True, "message": "If that email exists, a reset link has been sent."}
    assert transport.sent == []
    assert app_session.query(LoginEvent).count() == 0


def test_forgot_password_known_email(client, registered, transport, app_session):
    response = request_reset(client)
    unknown = request_reset(client, "ghost@b.com")
    assert response.json() == unknown.json()

    [msg] = transport.sent_to("a@b.com")
    assert msg["Subject"] == "Reset Your Password"
    token = extract_token(msg)

    user = app_session.query(UserProfile).filter_by(uid="uid-a").one()
    assert user.reset_token == token
    assert timedelta(minutes=59) < user.reset_expires - utcnow() <= timedelta(hours=1)

    event = app_session.query(LoginEvent).one()
    assert event.action == AuditAction.reset_password


def test_forgot_password_overwrites_previous_token(client, registered, transport):
    request_reset(client)
    request_reset(client)
    first, second = (extract_token(m) for m in transport.sent_to("a@b.com"))

    response = client.post("/api/reset-password", json={"token": first, "newPassword": NEW_PASSWORD})
    assert response.status_code == 400
    assert response.json()["error"] == "Invalid or expired reset token"

    response = client.post("/api/reset-password", json={"token": second, "newPassword": NEW_PASSWORD})
    assert response.status_code == 200


def test_reset_password_success(client, registered, identity, transport, app_session):
    request_reset(client)
    token = extract_token(transport.sent[0])

    response = client.post("/api/reset-password", json={"token": token, "newPassword": NEW_PASSWORD})
    assert response.status_code == 200
    assert response.json() == {"success": True, "message": "Password updated successfully"}
    assert identity.passwords["uid-a"] == NEW_PASSWORD

    user = app_session.query(UserProfile).filter_by(uid="uid-a").one()
    assert user.reset_token is None
    assert user.reset_expires is None

    actions = [e.action for e in app_session.query(LoginEvent).all()]
    assert AuditAction.change_password in actions

    # 令牌只能使用一次
    response = client.post("/api/reset-password", json={"token": token, "newPassword": NEW_PASSWORD})
    assert response.status_code == 400


def test_reset_password_expired(client, registered, transport, app_session):
    request_reset(client)
    user = app_session.query(UserProfile).filter_by(uid="uid-a").one()
    user.reset_expires = utcnow() - timedelta(seconds=1)
    app_session.commit()

    response = client.post(
        "/api/reset-password", json={"token": user.reset_token, "newPassword": NEW_PASSWORD})
    assert response.status_code == 400
    assert response.json()["error"] == "Reset token has expired"


def test_reset_password_rejects_weak_password(client, registered, identity, transport):
    request_reset(client)
    token = extract_token(transport.sent[0])

    response = client.post("/api/reset-password", json={"token": token, "newPassword": "password1234"})
    assert response.status_code == 400
    assert response.json()["error"] == "Don't use sequences (e.g. 123, abc)"
    assert "uid-a" not in identity.passwords


def test_reset_password_requires_fields(client):
    response = client.post("/api/reset-password", json={"token": "abc"})
    assert response.status_code == 400
    assert response.json()["error"] == "Token and new password are required"


def test_forgot_password_requires_email(client):
    response = client.post("/api/forgot-password", json={})
    assert response.status_code == 400


def test_forgot_password_smtp_failure(client, registered, transport):
    transport.fail = True
    response = request_reset(client)
    assert response.status_code == 500
    assert response.json()["success"] is False


@pytest.mark.asyncio
async def test_reset_without_admin_sdk(db_session, settings, unavailable_identity):
    transport = RecordingTransport()
    email_service = EmailService(db_session, transport, settings)
    service = PasswordResetService(db_session, unavailable_identity, email_service, settings.website_url)

    db_session.add(UserProfile(uid="uid-a", email="a@b.com"))
    db_session.commit()
    assert await service.issue_token("a@b.com") is True
    token = extract_token(transport.sent[0])

    with pytest.raises(ServerConfigError) as exc_info:
        await service.redeem_token(token, STRONG_PASSWORD)
    assert exc_info.value.status_code == 500
    assert "Admin SDK missing" in exc_info.value.message

    # 令牌保持不变，配置修复后仍可使用
    user = db_session.query(UserProfile).filter_by(uid="uid-a").one()
    assert user.reset_token == token
