# 导入所有模型以确保它们被注册到SQLAlchemy中
from src.models.login_event import AuditAction, LoginEvent
from src.models.sent_email import SentEmail
from src.models.user import UserProfile
from src.models.verification_token import VerificationToken

__all__ = [
    "AuditAction",
    "LoginEvent",
    "SentEmail",
    "UserProfile",
    "VerificationToken",
]
