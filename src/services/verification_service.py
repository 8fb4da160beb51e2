import secrets
from datetime import timedelta
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from src.core.exceptions import (AlreadyVerifiedError, TokenExpiredError,
                                 TokenNotFoundError)
from src.models.verification_token import VerificationToken
from src.services.email_service import EmailService
from src.utils.logger import db_logger
from src.utils.time_utils import utcnow


def generate_token() -> str:
    """256 位随机令牌，十六进制编码"""
    return secrets.token_hex(32)


class VerificationService:
    """邮箱验证令牌服务"""

    def __init__(self, db: Session, email_service: Optional[EmailService] = None, ttl_hours: int = 24):
        self.db = db
        self.email_service = email_service
        self.ttl = timedelta(hours=ttl_hours)

    async def issue_token(self, uid: str, email: str, _retried: bool = False) -> VerificationToken:
        """生成令牌（每个 uid 保留一条）并发送验证邮件"""
        now = utcnow()
        record = self.db.query(VerificationToken).filter(
            VerificationToken.uid == uid).first()
        if record is None:
            record = VerificationToken(uid=uid)
            self.db.add(record)

        record.email = email
        record.token = generate_token()
        record.expires_at = now + self.ttl
        record.verified = False
        record.created_at = now
        try:
            self.db.commit()
        except IntegrityError:
            # 并发请求已为该 uid 插入记录，回退为更新
            self.db.rollback()
            if _retried:
                raise
            db_logger.warning(f"Concurrent verification token insert for uid {uid}, retrying as update")
            return await self.issue_token(uid, email, _retried=True)
        self.db.refresh(record)

        if self.email_service is not None:
            await self.email_service.send_verification_email(email, record.token)
        return record

    async def redeem_token(self, token: str) -> VerificationToken:
        """兑换验证令牌；已验证的令牌再次兑换会报错"""
        record = self.db.query(VerificationToken).filter(
            VerificationToken.token == token).first()
        if record is None:
            raise TokenNotFoundError("Invalid verification token")

        if record.verified:
            raise AlreadyVerifiedError("Email has already verified")

        now = utcnow()
        if now > record.expires_at:
            raise TokenExpiredError("Verification token has expired")

        record.verified = True
        record.verified_at = now
        self.db.commit()
        db_logger.info(f"Email verified for uid: {record.uid}")
        return record

    async def get_status(self, uid: str) -> Optional[VerificationToken]:
        return self.db.query(VerificationToken).filter(
            VerificationToken.uid == uid).first()
