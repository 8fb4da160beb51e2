from datetime import datetime, timedelta, timezone
from typing import Optional

# 业务时间戳统一使用香港时间（UTC+8）
HK_TZ = timezone(timedelta(hours=8), name="HKT")


def hk_timestamp(now: Optional[datetime] = None) -> str:
    """返回形如 2025-01-31T18:05:09+08:00 的香港时间字符串"""
    now = now or datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return now.astimezone(HK_TZ).strftime("%Y-%m-%dT%H:%M:%S") + "+08:00"


def utcnow() -> datetime:
    """数据库中存储的 naive UTC 时间"""
    return datetime.now(timezone.utc).replace(tzinfo=None)
