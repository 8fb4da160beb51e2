import threading

import pytest
from conftest import STRONG_PASSWORD, FakeIdentityProvider, RecordingTransport
from fastapi.testclient import TestClient
from src.core.database import Database
from src.core.identity import (IdentityStatus, UnavailableIdentityProvider,
                               init_identity_provider)
from src.main import create_app
from src.models.user import UserProfile
from src.services.email_service import EmailService
from src.services.password_reset_service import PasswordResetService
from src.services.user_service import UserService


def test_missing_credentials_file_degrades(tmp_path):
    provider = init_identity_provider(str(tmp_path / "service-account.json"))
    assert isinstance(provider, UnavailableIdentityProvider)
    assert provider.available is False
    assert provider.update_password("uid", "pw").status == IdentityStatus.unavailable


def test_invalid_credentials_file_degrades(tmp_path):
    path = tmp_path / "service-account.json"
    path.write_text("{}")
    provider = init_identity_provider(str(path))
    assert provider.available is False


def test_app_starts_without_credentials(settings, transport):
    app = create_app(settings=settings, database=Database("sqlite://"), mail_transport=transport)
    with TestClient(app) as client:
        assert isinstance(app.state.identity, UnavailableIdentityProvider)
        response = client.post("/api/check-email", json={"email": "a@b.com"})
        assert response.json() == {"available": True}


@pytest.mark.asyncio
async def test_availability_falls_back_to_profile_store(db_session, unavailable_identity):
    service = UserService(db_session, unavailable_identity)
    assert await service.check_email_availability("a@b.com") is True

    await service.upsert_profile("uid-a", "a@b.com")
    assert await service.check_email_availability("a@b.com") is False


class ThreadRecordingIdentity(FakeIdentityProvider):
    """记录每次 Admin 调用所在的线程"""

    def __init__(self):
        super().__init__()
        self.threads = []

    def get_user_by_email(self, email):
        self.threads.append(threading.get_ident())
        return super().get_user_by_email(email)

    def update_password(self, uid, password):
        self.threads.append(threading.get_ident())
        return super().update_password(uid, password)

    def delete_user(self, uid):
        self.threads.append(threading.get_ident())
        return super().delete_user(uid)


@pytest.mark.asyncio
async def test_admin_calls_run_off_the_event_loop(db_session, settings):
    loop_thread = threading.get_ident()
    identity = ThreadRecordingIdentity()
    identity.add_user("uid-a", "a@b.com")

    users = UserService(db_session, identity)
    assert await users.check_email_availability("a@b.com") is False

    db_session.add(UserProfile(uid="uid-a", email="a@b.com"))
    db_session.commit()
    reset = PasswordResetService(
        db_session, identity, EmailService(db_session, RecordingTransport(), settings), settings.website_url)
    await reset.issue_token("a@b.com")
    user = db_session.query(UserProfile).filter_by(uid="uid-a").one()
    await reset.redeem_token(user.reset_token, STRONG_PASSWORD)

    await users.force_delete_user("a@b.com")

    assert identity.deleted == ["uid-a"]
    assert len(identity.threads) == 4
    assert loop_thread not in identity.threads
