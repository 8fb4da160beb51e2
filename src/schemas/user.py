from typing import List, Optional

from pydantic import BaseModel, Field
from src.schemas.base import DeleteResult, WriteResult


class UserSaveRequest(BaseModel):
    uid: Optional[str] = Field(None, description="Firebase UID")
    email: Optional[str] = Field(None, description="邮箱地址")
    country: Optional[str] = Field(None, description="国家/地区")
    institution: Optional[str] = Field(None, description="所属机构")


class UserProfileResponse(BaseModel):
    uid: str = Field(..., description="Firebase UID")
    email: str = Field(..., description="邮箱地址")
    country: str = Field(default="", description="国家/地区")
    institution: str = Field(default="", description="所属机构")
    last_ip: Optional[str] = Field(None, alias="lastIp")
    signup_ip: Optional[str] = Field(None, alias="signupIp")
    created_at: Optional[str] = Field(None, alias="createdAt")
    updated_at: Optional[str] = Field(None, alias="updatedAt")

    class Config:
        from_attributes = True
        populate_by_name = True


class UserSaveResponse(BaseModel):
    success: bool = True
    message: str
    result: WriteResult


class UserDeleteResponse(BaseModel):
    success: bool = True
    message: str
    result: DeleteResult


class UserDetailResponse(BaseModel):
    success: bool = True
    user: UserProfileResponse


class UserListResponse(BaseModel):
    count: int
    users: List[UserProfileResponse]


class CheckEmailRequest(BaseModel):
    email: Optional[str] = Field(None, description="邮箱地址")


class CheckEmailResponse(BaseModel):
    available: bool


class EmailRequest(BaseModel):
    email: Optional[str] = Field(None, description="邮箱地址")
