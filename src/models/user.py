import uuid

from sqlalchemy import Column, DateTime, String
from src.core.database import Base


class UserProfile(Base):
    """用户资料（uid 对应 Firebase 账号）"""
    __tablename__ = "users"

    id = Column(String(36), primary_key=True,
                default=lambda: str(uuid.uuid4()))
    uid = Column(String(128), unique=True, index=True, nullable=False)
    email = Column(String(255), index=True, nullable=False)
    country = Column(String(100), nullable=False, default="")
    institution = Column(String(255), nullable=False, default="")
    last_ip = Column(String(64), nullable=True)
    signup_ip = Column(String(64), nullable=True)

    # 香港时间字符串
    created_at = Column(String(32), nullable=True)
    updated_at = Column(String(32), nullable=True)

    # 密码重置令牌，兑换后清空
    reset_token = Column(String(64), index=True, nullable=True)
    reset_expires = Column(DateTime, nullable=True)
