from typing import List, Optional

from sqlalchemy.orm import Session
from src.models.login_event import AuditAction, LoginEvent
from src.utils.time_utils import hk_timestamp


class AuditService:
    """登录/登出/改密审计日志，只追加不修改"""

    def __init__(self, db: Session):
        self.db = db

    async def record_event(self, uid: str, email: str, ip: Optional[str], action: AuditAction) -> LoginEvent:
        event = LoginEvent(
            uid=uid,
            email=email,
            ip=ip,
            action=action,
            timestamp=hk_timestamp(),
        )
        self.db.add(event)
        self.db.commit()
        self.db.refresh(event)
        return event

    async def list_events(self, email: str, limit: int = 20) -> List[LoginEvent]:
        """按时间倒序查询某个邮箱的记录"""
        return (
            self.db.query(LoginEvent)
            .filter(LoginEvent.email == email)
            .order_by(LoginEvent.timestamp.desc())
            .limit(limit)
            .all()
        )
