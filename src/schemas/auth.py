from typing import Optional

from pydantic import BaseModel, Field


class SessionLogRequest(BaseModel):
    uid: Optional[str] = Field(None, description="Firebase UID")
    email: Optional[str] = Field(None, description="邮箱地址")


class SendVerificationRequest(BaseModel):
    email: Optional[str] = Field(None, description="邮箱地址")
    uid: Optional[str] = Field(None, description="Firebase UID")


class VerifyEmailResponse(BaseModel):
    success: bool = True
    message: str
    email: str


class VerificationStatusResponse(BaseModel):
    verified: bool = False
    email: Optional[str] = None


class ForgotPasswordRequest(BaseModel):
    email: Optional[str] = Field(None, description="Email address")


class ResetPasswordRequest(BaseModel):
    token: Optional[str] = Field(None, description="Reset token")
    new_password: Optional[str] = Field(
        None, alias="newPassword", description="New password")

    class Config:
        populate_by_name = True
