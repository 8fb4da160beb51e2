from datetime import timedelta
from typing import Optional

from fastapi.concurrency import run_in_threadpool
from sqlalchemy.orm import Session
from src.core.exceptions import (BadRequestError, NotFoundError,
                                 ServerConfigError, TokenExpiredError,
                                 TokenNotFoundError)
from src.core.identity import IdentityProvider, IdentityStatus
from src.core.password_policy import get_password_error
from src.models.login_event import AuditAction
from src.models.user import UserProfile
from src.services.audit_service import AuditService
from src.services.email_service import EmailService
from src.services.verification_service import generate_token
from src.utils.logger import api_logger, identity_logger
from src.utils.time_utils import utcnow


class PasswordResetService:
    """忘记密码 / 重置密码流程"""

    def __init__(
        self,
        db: Session,
        identity: IdentityProvider,
        email_service: EmailService,
        website_url: str,
        ttl_minutes: int = 60,
    ):
        self.db = db
        self.identity = identity
        self.email_service = email_service
        self.website_url = website_url
        self.ttl = timedelta(minutes=ttl_minutes)
        self.audit = AuditService(db)

    async def issue_token(self, email: str, ip: Optional[str] = None) -> bool:
        """生成重置令牌并发送邮件

        邮箱不存在时直接返回 False，不发邮件也不记审计，调用方返回相同的成功响应。
        """
        user = self.db.query(UserProfile).filter(UserProfile.email == email).first()
        if user is None:
            api_logger.info(f"Password reset requested for non-existent email: {email}")
            return False

        user.reset_token = generate_token()
        user.reset_expires = utcnow() + self.ttl
        self.db.commit()

        reset_link = f"{self.website_url}/reset-password?token={user.reset_token}"
        await self.email_service.send_password_reset_email(email, reset_link)
        api_logger.info(f"Password reset link sent to {email}")

        await self.audit.record_event(user.uid, user.email, ip, AuditAction.reset_password)
        return True

    async def redeem_token(self, token: str, new_password: str, ip: Optional[str] = None) -> UserProfile:
        user = self.db.query(UserProfile).filter(UserProfile.reset_token == token).first()
        if user is None:
            raise TokenNotFoundError("Invalid or expired reset token", status_code=400)

        if user.reset_expires is None or utcnow() > user.reset_expires:
            raise TokenExpiredError("Reset token has expired")

        policy_error = get_password_error(new_password)
        if policy_error:
            raise BadRequestError(policy_error)

        result = await run_in_threadpool(self.identity.update_password, user.uid, new_password)
        if result.status == IdentityStatus.unavailable:
            identity_logger.error("Cannot reset password: Firebase Admin not initialized")
            raise ServerConfigError(
                "Server configuration error: Cannot update password (Admin SDK missing)")
        if result.status == IdentityStatus.not_found:
            raise NotFoundError("User not found")

        user.reset_token = None
        user.reset_expires = None
        self.db.commit()
        api_logger.info(f"Password updated for user: {user.email}")

        await self.audit.record_event(user.uid, user.email, ip, AuditAction.change_password)
        return user
