from fastapi import APIRouter, Depends
from src.api.dependencies import get_client_ip, get_password_reset_service
from src.core.exceptions import BadRequestError
from src.schemas.auth import ForgotPasswordRequest, ResetPasswordRequest
from src.schemas.base import SuccessResponse
from src.services.password_reset_service import PasswordResetService
from src.utils.logger import api_logger

router = APIRouter()

# 邮箱存在与否返回同一条消息，避免被用来枚举账号
FORGOT_PASSWORD_MESSAGE = "If that email exists, a reset link has been sent."


@router.post("/forgot-password", response_model=SuccessResponse)
async def forgot_password(
    payload: ForgotPasswordRequest,
    ip: str = Depends(get_client_ip),
    service: PasswordResetService = Depends(get_password_reset_service),
):
    if not payload.email:
        raise BadRequestError("Email is required")

    api_logger.info(f"Received forgot-password request for: {payload.email}")
    await service.issue_token(payload.email, ip)
    return SuccessResponse(message=FORGOT_PASSWORD_MESSAGE)


@router.post("/reset-password", response_model=SuccessResponse)
async def reset_password(
    payload: ResetPasswordRequest,
    ip: str = Depends(get_client_ip),
    service: PasswordResetService = Depends(get_password_reset_service),
):
    if not payload.token or not payload.new_password:
        raise BadRequestError("Token and new password are required")

    api_logger.info("Processing password reset")
    await service.redeem_token(payload.token, payload.new_password, ip)
    return SuccessResponse(message="Password updated successfully")
