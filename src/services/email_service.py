"""
邮件发送服务
通过 SMTP 中继发送事务邮件，并把已发送的邮件记录到 sending_emails 表
"""
import smtplib
import ssl
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import formataddr, make_msgid

from fastapi.concurrency import run_in_threadpool
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from src.config import Settings
from src.core.exceptions import EmailDeliveryError
from src.models.sent_email import SentEmail
from src.utils.logger import email_logger
from src.utils.time_utils import hk_timestamp


class SmtpTransport:
    """SMTP 连接，每封邮件单独建立连接"""

    def __init__(self, host: str, port: int, username: str = "", password: str = "", timeout: int = 60):
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.timeout = timeout

    @classmethod
    def from_settings(cls, settings: Settings) -> "SmtpTransport":
        return cls(
            settings.smtp_outgoing_server,
            settings.smtp_outgoing_port,
            settings.smtp_username,
            settings.smtp_password,
            settings.smtp_timeout,
        )

    @property
    def secure(self) -> bool:
        return self.port == 465

    def send(self, msg: MIMEMultipart) -> str:
        context = ssl.create_default_context()
        if self.secure:
            server = smtplib.SMTP_SSL(
                self.host, self.port, timeout=self.timeout, context=context)
        else:
            server = smtplib.SMTP(self.host, self.port, timeout=self.timeout)

        with server:
            if not self.secure and server.has_extn("starttls"):
                server.starttls(context=context)
            if self.username and self.password:
                server.login(self.username, self.password)
            server.send_message(msg)

        return msg["Message-ID"]


class EmailService:
    """邮件发送服务"""

    def __init__(self, db: Session, transport: SmtpTransport, settings: Settings):
        self.db = db
        self.transport = transport
        self.settings = settings

    async def send_verification_email(self, to_email: str, token: str) -> str:
        """发送邮箱验证邮件"""
        email_logger.info(f"Preparing to send verification email to: {to_email}")
        link = f"{self.settings.website_url}/verify?token={token}"

        text = f"Please verify your email address by clicking this link: {link}"
        html = f"""
<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
    <h2 style="color: #4a90e2;">Verify Your Email Address</h2>
    <p>Thank you for signing up! Please verify your email address by clicking the button below:</p>
    <a href="{link}" style="display: inline-block; padding: 12px 24px; background-color: #4a90e2; color: white; text-decoration: none; border-radius: 4px; margin: 16px 0;">Verify Email</a>
    <p>Or copy and paste this link into your browser:</p>
    <p style="color: #666; word-break: break-all;">{link}</p>
    <p style="color: #999; font-size: 12px; margin-top: 32px;">If you didn't create an account, you can safely ignore this email.</p>
</div>
        """.strip()  # noqa: E501

        return await self._deliver(
            to_email, "Verify Your Email Address", text, html,
            email_type="verification", from_name="SuperTA")

    async def send_confirmation_email(self, to_email: str) -> str:
        """发送欢迎邮件"""
        email_logger.info(f"Preparing to send email to: {to_email}")
        return await self._deliver(
            to_email,
            "Welcome to Our Service!",
            "Thank you for signing up! We are excited to have you on board.",
            "<b>Thank you for signing up!</b><br>We are excited to have you on board.",
            email_type="confirmation",
            from_name=self.settings.smtp_username or "SuperTA",
        )

    async def send_password_reset_email(self, to_email: str, reset_link: str) -> str:
        """发送密码重置邮件"""
        email_logger.info(f"Preparing to send password reset email to: {to_email}")
        text = f"You requested a password reset. Click here to reset your password: {reset_link}"
        html = f"""
<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
    <h2 style="color: #4a90e2;">Reset Your Password</h2>
    <p>You have requested to reset your password. Click the button below to proceed:</p>
    <a href="{reset_link}" style="display: inline-block; padding: 12px 24px; background-color: #d9534f; color: white; text-decoration: none; border-radius: 4px; margin: 16px 0;">Reset Password</a>
    <p>Or copy and paste this link:</p>
    <p style="color: #666; word-break: break-all;">{reset_link}</p>
    <p style="color: #999; font-size: 12px;">Link expires in 1 hour.</p>
</div>
        """.strip()  # noqa: E501

        return await self._deliver(
            to_email, "Reset Your Password", text, html,
            email_type="reset_password", from_name="SuperTA Support")

    def _build_message(self, to_email: str, subject: str, text: str, html: str, from_name: str) -> MIMEMultipart:
        sender = self.settings.sender_address
        domain = sender.rpartition("@")[2] or None

        msg = MIMEMultipart("alternative")
        msg["From"] = formataddr((from_name, sender))
        msg["To"] = to_email
        msg["Subject"] = subject
        msg["Message-ID"] = make_msgid(domain=domain)
        msg.attach(MIMEText(text, "plain", "utf-8"))
        msg.attach(MIMEText(html, "html", "utf-8"))
        return msg

    async def _deliver(self, to_email: str, subject: str, text: str, html: str,
                       email_type: str, from_name: str) -> str:
        msg = self._build_message(to_email, subject, text, html, from_name)

        try:
            message_id = await run_in_threadpool(self.transport.send, msg)
        except (smtplib.SMTPException, OSError) as e:
            email_logger.error(f"Error sending {email_type} email to {to_email}: {e}")
            raise EmailDeliveryError(f"Failed to send {email_type} email") from e

        email_logger.info(f"{email_type} email sent to {to_email}. Message ID: {message_id}")
        self._log_sent(to_email, subject, html or text, email_type, message_id)
        return message_id

    def _log_sent(self, to_email: str, subject: str, content: str, email_type: str, message_id: str) -> None:
        # 记录失败不影响请求
        try:
            self.db.add(SentEmail(
                to=to_email,
                subject=subject,
                content=content,
                type=email_type,
                message_id=message_id,
                timestamp=hk_timestamp(),
            ))
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            email_logger.error(f"Error logging email: {e}")
