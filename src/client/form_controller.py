"""
登录/注册表单控制器

状态：anonymous -> submitting -> authenticated_unverified / authenticated_verified
登录后未验证的会话通过 poll_verification() 轮询验证状态。
"""
import re
from enum import Enum
from typing import Any, Dict, Optional

import httpx
from src.client.api_client import ApiError, AuthApiClient
from src.client.config import ClientSettings
from src.client.identity_client import AuthClientError, AuthUser, FirebaseAuthClient
from src.client.messages import GENERIC_ERROR, describe_auth_error
from src.core.password_policy import get_password_error
from src.utils.logger import get_logger

logger = get_logger("client")

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

UNVERIFIED_MESSAGE = "Please verify your email address before logging in."
PROFILE_PLACEHOLDER = {"country": "Not set", "institution": "Not set"}


class AuthState(str, Enum):
    anonymous = "anonymous"
    submitting = "submitting"
    authenticated_unverified = "authenticated_unverified"
    authenticated_verified = "authenticated_verified"


class DialogType(str, Enum):
    error = "error"
    success = "success"
    processing = "processing"


class AuthFormController:
    def __init__(self, identity: FirebaseAuthClient, api: AuthApiClient):
        self.identity = identity
        self.api = api
        self.state = AuthState.anonymous
        self.user: Optional[AuthUser] = None
        self.profile: Optional[Dict[str, Any]] = None
        self.message = ""
        self.dialog_type: Optional[DialogType] = None
        self.verification_sent = False
        self.email_available: Optional[bool] = None

    def _show(self, message: str, dialog_type: DialogType) -> None:
        self.message = message
        self.dialog_type = dialog_type

    def _fail(self, message: str) -> bool:
        self._show(message, DialogType.error)
        if self.state == AuthState.submitting:
            self.state = AuthState.anonymous
        return False

    async def check_email_availability(self, email: str) -> Optional[bool]:
        """邮箱失焦时检查是否可用；格式不对或请求失败时为 None"""
        self.email_available = None
        if not email or not EMAIL_PATTERN.match(email):
            return None
        try:
            self.email_available = await self.api.check_email(email)
        except (ApiError, httpx.HTTPError) as e:
            logger.error(f"Email check failed: {e}")
        return self.email_available

    async def signup(self, email: str, password: str, confirm_password: str,
                     country: str = "", institution: str = "") -> bool:
        password_error = get_password_error(password)
        if password_error:
            return self._fail(password_error)
        if password != confirm_password:
            return self._fail("Passwords do not match.")
        if self.email_available is False:
            return self._fail("This email address is already in use.")

        self.state = AuthState.submitting
        self._show("Creating account...", DialogType.processing)
        try:
            user = await self.identity.sign_up(email, password)
            await self.api.save_user(user.uid, user.email, country, institution)
            await self.api.send_verification(user.email, user.uid)
        except (AuthClientError, ApiError, httpx.HTTPError) as e:
            logger.error(f"Signup failed: {e}")
            return self._fail(describe_auth_error(str(e)))

        # 注册后需要先验证邮箱，不保留登录状态
        self.state = AuthState.anonymous
        self.user = None
        self.verification_sent = True
        self._show(f"Verification email sent to {email}.", DialogType.success)
        return True

    async def login(self, email: str, password: str) -> bool:
        if not password:
            return False

        self.state = AuthState.submitting
        self._show("Logging in...", DialogType.processing)
        try:
            user = await self.identity.sign_in(email, password)
            verified = await self.api.verification_status(user.uid)
        except (AuthClientError, ApiError, httpx.HTTPError) as e:
            logger.error(f"Login failed: {e}")
            return self._fail(describe_auth_error(str(e)))

        self.user = user
        if not verified:
            self.state = AuthState.authenticated_unverified
            self._show(UNVERIFIED_MESSAGE, DialogType.error)
            return False

        await self._complete_login()
        return True

    async def poll_verification(self) -> bool:
        """未验证会话重新查询验证状态，已验证则完成登录"""
        if self.state != AuthState.authenticated_unverified or self.user is None:
            return self.state == AuthState.authenticated_verified

        try:
            verified = await self.api.verification_status(self.user.uid)
        except (ApiError, httpx.HTTPError) as e:
            logger.error(f"Error checking verification status: {e}")
            return False

        if verified:
            await self._complete_login()
        return verified

    async def _complete_login(self) -> None:
        self.state = AuthState.authenticated_verified
        self.message = ""
        self.dialog_type = None

        # 审计和资料加载失败都不影响登录
        try:
            await self.api.log_login(self.user.uid, self.user.email)
        except (ApiError, httpx.HTTPError) as e:
            logger.error(f"Error logging login: {e}")

        try:
            self.profile = await self.api.get_user(self.user.uid) or dict(PROFILE_PLACEHOLDER)
        except (ApiError, httpx.HTTPError):
            self.profile = dict(PROFILE_PLACEHOLDER)

    async def logout(self) -> None:
        if self.user is not None and self.state == AuthState.authenticated_verified:
            try:
                await self.api.log_logout(self.user.uid, self.user.email)
            except (ApiError, httpx.HTTPError) as e:
                logger.error(f"Error logging logout: {e}")

        self.state = AuthState.anonymous
        self.user = None
        self.profile = None
        self.message = ""
        self.dialog_type = None

    async def forgot_password(self, email: str) -> bool:
        if not email:
            return self._fail("Please enter your email address to reset password.")

        self._show("Sending password reset email...", DialogType.processing)
        try:
            await self.api.forgot_password(email)
        except ApiError as e:
            return self._fail(e.message)
        except httpx.HTTPError:
            return self._fail(GENERIC_ERROR)

        self._show(f"Password reset email sent to {email}. Please check your inbox.", DialogType.success)
        return True

    async def reset_password(self, token: Optional[str], password: str, confirm_password: str) -> bool:
        password_error = get_password_error(password)
        if password_error:
            return self._fail(password_error)
        if password != confirm_password:
            return self._fail("Passwords do not match")
        if not token:
            return self._fail("Invalid or missing reset token")

        self._show("Resetting password...", DialogType.processing)
        try:
            await self.api.reset_password(token, password)
        except ApiError as e:
            return self._fail(e.message or "Failed to reset password")
        except httpx.HTTPError:
            return self._fail("An error occurred. Please try again.")

        self._show("Password reset successfully! Redirecting to login...", DialogType.success)
        return True

    async def verify_email(self, token: Optional[str]) -> bool:
        if not token:
            return self._fail("Invalid verification link")
        try:
            await self.api.verify_email(token)
        except ApiError as e:
            return self._fail(e.message or "Verification failed")
        except httpx.HTTPError:
            return self._fail("An error occurred during verification")

        self._show("Email is verified", DialogType.success)
        return True


def create_controller(settings: Optional[ClientSettings] = None) -> AuthFormController:
    settings = settings or ClientSettings()
    return AuthFormController(
        FirebaseAuthClient(settings.firebase_api_key),
        AuthApiClient(settings.api_url),
    )
