"""Firebase Admin 身份服务封装

Admin SDK 是否可用在启动时确定一次；不可用时各操作返回 UNAVAILABLE，
由调用方决定报错或降级。
"""
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional

import firebase_admin
from firebase_admin import auth, credentials
from firebase_admin.exceptions import FirebaseError
from src.utils.logger import identity_logger

FIREBASE_APP_NAME = "superta-admin"


class IdentityStatus(str, Enum):
    ok = "ok"
    not_found = "not_found"
    unavailable = "unavailable"


@dataclass
class IdentityUser:
    uid: str
    email: Optional[str] = None


@dataclass
class IdentityResult:
    status: IdentityStatus
    user: Optional[IdentityUser] = None

    @property
    def ok(self) -> bool:
        return self.status == IdentityStatus.ok


class IdentityProviderError(Exception):
    """身份服务返回了非 not-found 的错误"""


class IdentityProvider:
    """身份服务管理接口"""

    available = True

    def get_user_by_email(self, email: str) -> IdentityResult:
        raise NotImplementedError

    def update_password(self, uid: str, password: str) -> IdentityResult:
        raise NotImplementedError

    def delete_user(self, uid: str) -> IdentityResult:
        raise NotImplementedError


class UnavailableIdentityProvider(IdentityProvider):
    """Admin SDK 未初始化时的占位实现"""

    available = False

    def __init__(self, reason: str = "Firebase Admin not initialized"):
        self.reason = reason

    def get_user_by_email(self, email: str) -> IdentityResult:
        return IdentityResult(IdentityStatus.unavailable)

    def update_password(self, uid: str, password: str) -> IdentityResult:
        return IdentityResult(IdentityStatus.unavailable)

    def delete_user(self, uid: str) -> IdentityResult:
        return IdentityResult(IdentityStatus.unavailable)


class FirebaseIdentityProvider(IdentityProvider):
    def __init__(self, app: firebase_admin.App):
        self.app = app

    def get_user_by_email(self, email: str) -> IdentityResult:
        try:
            record = auth.get_user_by_email(email, app=self.app)
        except auth.UserNotFoundError:
            return IdentityResult(IdentityStatus.not_found)
        except FirebaseError as e:
            raise IdentityProviderError(str(e)) from e
        return IdentityResult(IdentityStatus.ok, IdentityUser(record.uid, record.email))

    def update_password(self, uid: str, password: str) -> IdentityResult:
        try:
            record = auth.update_user(uid, password=password, app=self.app)
        except auth.UserNotFoundError:
            return IdentityResult(IdentityStatus.not_found)
        except FirebaseError as e:
            raise IdentityProviderError(str(e)) from e
        return IdentityResult(IdentityStatus.ok, IdentityUser(record.uid, record.email))

    def delete_user(self, uid: str) -> IdentityResult:
        try:
            auth.delete_user(uid, app=self.app)
        except auth.UserNotFoundError:
            return IdentityResult(IdentityStatus.not_found)
        except FirebaseError as e:
            raise IdentityProviderError(str(e)) from e
        return IdentityResult(IdentityStatus.ok, IdentityUser(uid))


def init_identity_provider(credentials_path: str) -> IdentityProvider:
    """根据 service account 文件初始化 Firebase Admin

    文件缺失或无效时返回 UnavailableIdentityProvider，不抛异常。
    """
    path = Path(credentials_path)
    if not path.is_file():
        identity_logger.warning(
            f"[FIREBASE ADMIN] '{credentials_path}' not found. "
            "Password reset and account deletion will fail.")
        return UnavailableIdentityProvider(f"{credentials_path} not found")

    try:
        app = firebase_admin.get_app(FIREBASE_APP_NAME)
    except ValueError:
        try:
            cred = credentials.Certificate(str(path))
            app = firebase_admin.initialize_app(cred, name=FIREBASE_APP_NAME)
        except (ValueError, OSError) as e:
            identity_logger.error(f"[FIREBASE ADMIN] Initialization failed: {e}")
            return UnavailableIdentityProvider(str(e))

    identity_logger.info("[FIREBASE ADMIN] Initialized successfully.")
    return FirebaseIdentityProvider(app)
