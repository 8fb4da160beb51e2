from typing import Optional

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.orm import Session
from src.config import Settings
from src.core.database import get_db
from src.core.identity import IdentityProvider
from src.services.email_service import EmailService
from src.services.password_reset_service import PasswordResetService
from src.services.user_service import UserService
from src.services.verification_service import VerificationService


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_identity_provider(request: Request) -> IdentityProvider:
    return request.app.state.identity


def get_client_ip(request: Request) -> Optional[str]:
    """客户端 IP：优先 Nginx 传入的 client_ip 参数，其次代理头"""
    return (
        request.query_params.get("client_ip")
        or request.headers.get("x-real-ip")
        or request.headers.get("x-forwarded-for")
        or (request.client.host if request.client else None)
    )


def get_email_service(
    request: Request,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> EmailService:
    return EmailService(db, request.app.state.mail_transport, settings)


def get_user_service(
    db: Session = Depends(get_db),
    identity: IdentityProvider = Depends(get_identity_provider),
) -> UserService:
    return UserService(db, identity)


def get_verification_service(
    db: Session = Depends(get_db),
    email_service: EmailService = Depends(get_email_service),
    settings: Settings = Depends(get_settings),
) -> VerificationService:
    return VerificationService(db, email_service, settings.verification_token_ttl_hours)


def get_password_reset_service(
    db: Session = Depends(get_db),
    identity: IdentityProvider = Depends(get_identity_provider),
    email_service: EmailService = Depends(get_email_service),
    settings: Settings = Depends(get_settings),
) -> PasswordResetService:
    return PasswordResetService(
        db, identity, email_service, settings.website_url, settings.reset_token_ttl_minutes)


async def require_debug_endpoints(settings: Settings = Depends(get_settings)) -> None:
    """调试/管理接口无鉴权，只在显式开启时可用"""
    if not settings.enable_debug_endpoints:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not Found")
