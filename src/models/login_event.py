import uuid
from enum import Enum

from sqlalchemy import Column
from sqlalchemy import Enum as SQLEnum
from sqlalchemy import String
from src.core.database import Base


class AuditAction(str, Enum):
    login = "login"
    logout = "logout"
    change_password = "change_password"
    reset_password = "reset_password"


class LoginEvent(Base):
    """登录/登出/改密审计记录，只追加"""
    __tablename__ = "logins"

    id = Column(String(36), primary_key=True,
                default=lambda: str(uuid.uuid4()))
    uid = Column(String(128), index=True, nullable=False)
    email = Column(String(255), index=True, nullable=False)
    ip = Column(String(64), nullable=True)
    action = Column(SQLEnum(AuditAction), nullable=False)
    timestamp = Column(String(32), nullable=False)
