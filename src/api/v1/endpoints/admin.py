from fastapi import APIRouter, Depends
from src.api.dependencies import get_user_service
from src.core.exceptions import BadRequestError
from src.schemas.base import SuccessResponse
from src.schemas.user import (EmailRequest, UserListResponse,
                              UserProfileResponse)
from src.services.user_service import UserService
from src.utils.logger import api_logger

router = APIRouter()


@router.get("/admin/users", response_model=UserListResponse)
async def list_users(user_service: UserService = Depends(get_user_service)):
    """列出全部用户资料"""
    users = await user_service.list_profiles()
    return UserListResponse(
        count=len(users),
        users=[UserProfileResponse.model_validate(u) for u in users],
    )


@router.post("/debug/delete-user", response_model=SuccessResponse)
async def force_delete_user(
    payload: EmailRequest,
    user_service: UserService = Depends(get_user_service),
):
    """强制删除用户（Firebase + 资料库）"""
    if not payload.email:
        raise BadRequestError("Email is required")

    api_logger.warning(f"[DEBUG] Request to force delete user: {payload.email}")
    await user_service.force_delete_user(payload.email)
    return SuccessResponse(message="User deleted (if existed)")
