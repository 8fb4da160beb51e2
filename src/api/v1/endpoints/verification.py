from typing import Optional

from fastapi import APIRouter, Depends, Query
from src.api.dependencies import get_verification_service
from src.core.exceptions import BadRequestError
from src.schemas.auth import (SendVerificationRequest,
                              VerificationStatusResponse, VerifyEmailResponse)
from src.schemas.base import SuccessResponse
from src.services.verification_service import VerificationService
from src.utils.logger import api_logger

router = APIRouter()


@router.post("/send-verification", response_model=SuccessResponse)
async def send_verification(
    payload: SendVerificationRequest,
    service: VerificationService = Depends(get_verification_service),
):
    """生成验证令牌并发送验证邮件"""
    if not payload.email or not payload.uid:
        raise BadRequestError("Email and UID are required")

    api_logger.info(f"Sending verification email to: {payload.email}")
    await service.issue_token(payload.uid, payload.email)
    return SuccessResponse(message="Verification email sent")


@router.get("/verify-email", response_model=VerifyEmailResponse)
async def verify_email(
    token: Optional[str] = Query(None, description="Verification token"),
    service: VerificationService = Depends(get_verification_service),
):
    """兑换邮箱验证令牌"""
    if not token:
        raise BadRequestError("Token is required")

    record = await service.redeem_token(token)
    return VerifyEmailResponse(message="Email verified successfully", email=record.email)


@router.get("/verification-status/{uid}", response_model=VerificationStatusResponse,
            response_model_exclude_none=True)
async def verification_status(
    uid: str,
    service: VerificationService = Depends(get_verification_service),
):
    """查询验证状态，无记录时返回 verified=false"""
    record = await service.get_status(uid)
    if record is None:
        return VerificationStatusResponse(verified=False)
    return VerificationStatusResponse(verified=bool(record.verified), email=record.email)
