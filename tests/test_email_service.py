import pytest
from conftest import RecordingTransport
from sqlalchemy.exc import OperationalError
from src.core.exceptions import EmailDeliveryError
from src.models.sent_email import SentEmail
from src.services.email_service import EmailService, SmtpTransport


@pytest.fixture
def transport():
    return RecordingTransport()


@pytest.fixture
def email_service(db_session, transport, settings):
    return EmailService(db_session, transport, settings)


@pytest.mark.asyncio
async def test_message_headers_and_parts(email_service, transport):
    message_id = await email_service.send_password_reset_email(
        "a@b.com", "http://superta.test/reset-password?token=abc")

    [msg] = transport.sent
    assert msg["Message-ID"] == message_id
    assert msg["From"] == "SuperTA Support <noreply@superta.test>"
    assert msg["To"] == "a@b.com"
    plain, html = msg.get_payload()
    assert plain.get_content_type() == "text/plain"
    assert html.get_content_type() == "text/html"
    assert "Link expires in 1 hour." in html.get_payload(decode=True).decode()


@pytest.mark.asyncio
async def test_sent_email_is_logged(email_service, db_session):
    await email_service.send_confirmation_email("a@b.com")

    logged = db_session.query(SentEmail).one()
    assert logged.to == "a@b.com"
    assert logged.type == "confirmation"
    assert logged.subject == "Welcome to Our Service!"
    assert logged.timestamp.endswith("+08:00")


@pytest.mark.asyncio
async def test_smtp_failure_raises_and_is_not_logged(email_service, transport, db_session):
    transport.fail = True
    with pytest.raises(EmailDeliveryError) as exc_info:
        await email_service.send_verification_email("a@b.com", "abc")

    assert exc_info.value.status_code == 500
    assert db_session.query(SentEmail).count() == 0


@pytest.mark.asyncio
async def test_log_failure_is_swallowed(email_service, transport, db_session, monkeypatch):
    def broken_commit():
        raise OperationalError("INSERT", {}, Exception("disk full"))

    monkeypatch.setattr(db_session, "commit", broken_commit)

    message_id = await email_service.send_verification_email("a@b.com", "abc")
    assert message_id
    assert len(transport.sent) == 1


def test_transport_from_settings(settings):
    settings.smtp_outgoing_port = 465
    transport = SmtpTransport.from_settings(settings)
    assert transport.secure is True
    assert transport.password == "secret"

    settings.smtp_outgoing_port = 587
    assert SmtpTransport.from_settings(settings).secure is False
