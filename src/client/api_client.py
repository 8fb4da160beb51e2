"""后端 API 客户端"""
from typing import Any, Dict, Optional

import httpx


class ApiError(Exception):
    def __init__(self, status_code: int, message: str):
        self.status_code = status_code
        self.message = message
        super().__init__(message)


class AuthApiClient:
    def __init__(self, base_url: str, http: Optional[httpx.AsyncClient] = None):
        self.http = http or httpx.AsyncClient(base_url=base_url, timeout=30.0)

    async def aclose(self) -> None:
        await self.http.aclose()

    async def _request(self, method: str, url: str, **kwargs) -> Dict[str, Any]:
        response = await self.http.request(method, url, **kwargs)
        try:
            data = response.json()
        except ValueError:
            data = {}
        if response.is_error:
            message = data.get("error") or data.get("message") or response.reason_phrase
            raise ApiError(response.status_code, message)
        return data

    async def check_email(self, email: str) -> bool:
        data = await self._request("POST", "/api/check-email", json={"email": email})
        return bool(data["available"])

    async def save_user(self, uid: str, email: str, country: str = "", institution: str = "") -> Dict[str, Any]:
        return await self._request("POST", "/api/users", json={
            "uid": uid, "email": email, "country": country, "institution": institution,
        })

    async def get_user(self, uid: str) -> Optional[Dict[str, Any]]:
        try:
            data = await self._request("GET", f"/api/users/{uid}")
        except ApiError as e:
            if e.status_code == 404:
                return None
            raise
        return data["user"]

    async def log_login(self, uid: str, email: str) -> None:
        await self._request("POST", "/api/logins", json={"uid": uid, "email": email})

    async def log_logout(self, uid: str, email: str) -> None:
        await self._request("POST", "/api/logout", json={"uid": uid, "email": email})

    async def send_verification(self, email: str, uid: str) -> Dict[str, Any]:
        return await self._request("POST", "/api/send-verification", json={"email": email, "uid": uid})

    async def verify_email(self, token: str) -> Dict[str, Any]:
        return await self._request("GET", "/api/verify-email", params={"token": token})

    async def verification_status(self, uid: str) -> bool:
        data = await self._request("GET", f"/api/verification-status/{uid}")
        return bool(data.get("verified", False))

    async def forgot_password(self, email: str) -> Dict[str, Any]:
        return await self._request("POST", "/api/forgot-password", json={"email": email})

    async def reset_password(self, token: str, new_password: str) -> Dict[str, Any]:
        return await self._request("POST", "/api/reset-password", json={
            "token": token, "newPassword": new_password,
        })
