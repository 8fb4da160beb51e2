"""Firebase Auth REST 客户端（Identity Toolkit v1）"""
from dataclasses import dataclass
from typing import Optional

import httpx

IDENTITY_TOOLKIT_URL = "https://identitytoolkit.googleapis.com/v1"

# REST 错误码 -> JS SDK 错误码
REST_ERROR_CODES = {
    "EMAIL_EXISTS": "auth/email-already-in-use",
    "EMAIL_NOT_FOUND": "auth/user-not-found",
    "INVALID_PASSWORD": "auth/wrong-password",
    "INVALID_LOGIN_CREDENTIALS": "auth/invalid-credential",
    "TOO_MANY_ATTEMPTS_TRY_LATER": "auth/too-many-requests",
    "INVALID_EMAIL": "auth/invalid-email",
    "USER_DISABLED": "auth/user-disabled",
    "WEAK_PASSWORD": "auth/weak-password",
}


class AuthClientError(Exception):
    def __init__(self, code: str):
        self.code = code
        super().__init__(f"Firebase: Error ({code}).")


@dataclass
class AuthUser:
    uid: str
    email: str
    id_token: Optional[str] = None
    refresh_token: Optional[str] = None


def normalize_error_code(rest_message: str) -> str:
    # 形如 "WEAK_PASSWORD : Password should be at least 6 characters"
    key = rest_message.split(":", 1)[0].strip()
    return REST_ERROR_CODES.get(key, "auth/internal-error")


class FirebaseAuthClient:
    def __init__(self, api_key: str, http: Optional[httpx.AsyncClient] = None,
                 base_url: str = IDENTITY_TOOLKIT_URL):
        self.api_key = api_key
        self.base_url = base_url
        self.http = http or httpx.AsyncClient(timeout=30.0)

    async def sign_in(self, email: str, password: str) -> AuthUser:
        return await self._post("accounts:signInWithPassword", email, password)

    async def sign_up(self, email: str, password: str) -> AuthUser:
        return await self._post("accounts:signUp", email, password)

    async def aclose(self) -> None:
        await self.http.aclose()

    async def _post(self, endpoint: str, email: str, password: str) -> AuthUser:
        try:
            response = await self.http.post(
                f"{self.base_url}/{endpoint}",
                params={"key": self.api_key},
                json={"email": email, "password": password, "returnSecureToken": True},
            )
        except httpx.RequestError as e:
            raise AuthClientError("auth/network-request-failed") from e

        try:
            data = response.json()
        except ValueError as e:
            # 代理返回的 HTML 错误页等
            raise AuthClientError("auth/internal-error") from e
        if response.status_code != 200:
            message = data.get("error", {}).get("message", "")
            raise AuthClientError(normalize_error_code(message))

        return AuthUser(
            uid=data["localId"],
            email=data.get("email", email),
            id_token=data.get("idToken"),
            refresh_token=data.get("refreshToken"),
        )
