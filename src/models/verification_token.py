import uuid

from sqlalchemy import Boolean, Column, DateTime, String
from src.core.database import Base
from src.utils.time_utils import utcnow


class VerificationToken(Base):
    """邮箱验证令牌，每个 uid 一条"""
    __tablename__ = "verification_tokens"

    id = Column(String(36), primary_key=True,
                default=lambda: str(uuid.uuid4()))
    uid = Column(String(128), unique=True, index=True, nullable=False)
    email = Column(String(255), nullable=False)
    token = Column(String(64), unique=True, index=True, nullable=False)
    expires_at = Column(DateTime, nullable=False)
    verified = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    verified_at = Column(DateTime, nullable=True)
