from fastapi import APIRouter, Depends
from src.api.dependencies import require_debug_endpoints
from src.api.v1.endpoints import admin, password, sessions, users, verification

api_router = APIRouter()

# 用户资料
api_router.include_router(users.router, tags=["users"])

# 登录/登出审计
api_router.include_router(sessions.router, tags=["sessions"])

# 邮箱验证
api_router.include_router(verification.router, tags=["verification"])

# 忘记/重置密码
api_router.include_router(password.router, tags=["password"])

# 调试与管理（默认关闭）
api_router.include_router(
    admin.router, tags=["admin"], dependencies=[Depends(require_debug_endpoints)])
