from fastapi import APIRouter, Depends
from src.api.dependencies import (get_client_ip, get_email_service,
                                  get_settings, get_user_service)
from src.config import Settings
from src.core.exceptions import AppException, BadRequestError
from src.schemas.user import (CheckEmailRequest, CheckEmailResponse,
                              UserDeleteResponse, UserDetailResponse,
                              UserProfileResponse, UserSaveRequest,
                              UserSaveResponse)
from src.services.email_service import EmailService
from src.services.user_service import UserService
from src.utils.logger import api_logger, email_logger

router = APIRouter()


@router.post("/check-email", response_model=CheckEmailResponse)
async def check_email(
    payload: CheckEmailRequest,
    user_service: UserService = Depends(get_user_service),
):
    """检查邮箱是否可注册（资料库 + Firebase）"""
    if not payload.email:
        raise BadRequestError("Email is required")

    available = await user_service.check_email_availability(payload.email)
    return CheckEmailResponse(available=available)


@router.post("/users", response_model=UserSaveResponse)
async def save_user(
    payload: UserSaveRequest,
    ip: str = Depends(get_client_ip),
    user_service: UserService = Depends(get_user_service),
    email_service: EmailService = Depends(get_email_service),
    settings: Settings = Depends(get_settings),
):
    """保存/更新用户资料"""
    if not payload.uid or not payload.email:
        api_logger.info(
            f"Missing required fields (uid: {payload.uid}, email: {payload.email})")
        raise BadRequestError("Missing required fields")

    api_logger.info(f"Saving user: {payload.email} ({payload.uid})")
    result = await user_service.upsert_profile(
        payload.uid, payload.email, payload.country, payload.institution, ip)

    if result.upserted_count and settings.send_welcome_email:
        try:
            await email_service.send_confirmation_email(payload.email)
        except AppException as e:
            email_logger.error(f"Error sending confirmation email: {e.message}")

    return UserSaveResponse(message="User saved/updated", result=result)


@router.get("/users/{uid}", response_model=UserDetailResponse)
async def get_user(uid: str, user_service: UserService = Depends(get_user_service)):
    """按 uid 获取用户资料"""
    api_logger.info(f"Fetching user profile for uid: {uid}")
    user = await user_service.get_profile(uid)
    return UserDetailResponse(user=UserProfileResponse.model_validate(user))


@router.delete("/users/{email}", response_model=UserDeleteResponse)
async def delete_user(email: str, user_service: UserService = Depends(get_user_service)):
    """按邮箱删除用户资料（不删除 Firebase 账号）"""
    api_logger.info(f"Deleting user with email: {email}")
    result = await user_service.delete_profile_by_email(email)
    return UserDeleteResponse(message="User deleted if existed", result=result)
