from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from src.api.dependencies import get_client_ip
from src.core.database import get_db
from src.core.exceptions import BadRequestError
from src.models.login_event import AuditAction
from src.schemas.auth import SessionLogRequest
from src.schemas.base import SuccessResponse
from src.services.audit_service import AuditService
from src.utils.logger import api_logger

router = APIRouter()


async def _record(payload: SessionLogRequest, action: AuditAction, ip: str, db: Session) -> SuccessResponse:
    if not payload.uid or not payload.email:
        raise BadRequestError("Missing uid or email")

    api_logger.info(f"Logging {action.value} for {payload.email} from {ip}")
    await AuditService(db).record_event(payload.uid, payload.email, ip, action)
    return SuccessResponse()


@router.post("/logins", response_model=SuccessResponse, response_model_exclude_none=True)
async def log_login(
    payload: SessionLogRequest,
    ip: str = Depends(get_client_ip),
    db: Session = Depends(get_db),
):
    """记录登录"""
    return await _record(payload, AuditAction.login, ip, db)


@router.post("/logout", response_model=SuccessResponse, response_model_exclude_none=True)
async def log_logout(
    payload: SessionLogRequest,
    ip: str = Depends(get_client_ip),
    db: Session = Depends(get_db),
):
    """记录登出"""
    return await _record(payload, AuditAction.logout, ip, db)
