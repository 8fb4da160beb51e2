import smtplib
from typing import Dict, List

import pytest
from fastapi.testclient import TestClient
from src.config import Settings
from src.core.database import Database
from src.core.identity import (IdentityProvider, IdentityResult,
                               IdentityStatus, IdentityUser,
                               UnavailableIdentityProvider)
from src.main import create_app

STRONG_PASSWORD = "Uncertain829!"


class FakeIdentityProvider(IdentityProvider):
    """内存中的 Firebase Admin 替身"""

    def __init__(self):
        self.users: Dict[str, str] = {}  # email -> uid
        self.passwords: Dict[str, str] = {}  # uid -> password
        self.deleted: List[str] = []

    def add_user(self, uid: str, email: str) -> None:
        self.users[email] = uid

    def get_user_by_email(self, email: str) -> IdentityResult:
        uid = self.users.get(email)
        if uid is None:
            return IdentityResult(IdentityStatus.not_found)
        return IdentityResult(IdentityStatus.ok, IdentityUser(uid, email))

    def update_password(self, uid: str, password: str) -> IdentityResult:
        if uid not in self.users.values():
            return IdentityResult(IdentityStatus.not_found)
        self.passwords[uid] = password
        return IdentityResult(IdentityStatus.ok, IdentityUser(uid))

    def delete_user(self, uid: str) -> IdentityResult:
        for email, known_uid in list(self.users.items()):
            if known_uid == uid:
                del self.users[email]
                self.deleted.append(uid)
                return IdentityResult(IdentityStatus.ok, IdentityUser(uid, email))
        return IdentityResult(IdentityStatus.not_found)


class RecordingTransport:
    """记录发出的邮件，不连接 SMTP"""

    host = "smtp.test"
    port = 587
    username = "mailer"
    secure = False

    def __init__(self):
        self.sent = []
        self.fail = False

    def send(self, msg) -> str:
        if self.fail:
            raise smtplib.SMTPException("relay unavailable")
        self.sent.append(msg)
        return msg["Message-ID"]

    def sent_to(self, email: str):
        return [m for m in self.sent if m["To"] == email]


def extract_token(msg) -> str:
    """从邮件纯文本部分取出 token 参数"""
    text = msg.get_payload()[0].get_payload(decode=True).decode()
    return text.rsplit("token=", 1)[1].strip()


@pytest.fixture
def settings():
    return Settings(
        database_url="sqlite://",
        smtp_password="secret",
        smtp_email="noreply@superta.test",
        website_url="http://superta.test",
        firebase_credentials_path="does-not-exist.json",
        enable_debug_endpoints=True,
    )


@pytest.fixture
def identity():
    return FakeIdentityProvider()


@pytest.fixture
def transport():
    return RecordingTransport()


@pytest.fixture
def database(settings):
    db = Database(settings.database_url).open()
    db.init_schema()
    yield db
    db.close()


@pytest.fixture
def db_session(database):
    session = database.session()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def app(settings, identity, transport):
    return create_app(
        settings=settings,
        database=Database(settings.database_url),
        identity=identity,
        mail_transport=transport,
    )


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def app_session(app, client):
    """与 client 共用同一个数据库的会话"""
    session = app.state.database.session()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def unavailable_identity():
    return UnavailableIdentityProvider()
