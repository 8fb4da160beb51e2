from typing import Any, Optional

from pydantic import BaseModel, Field


class SuccessResponse(BaseModel):
    success: bool = Field(default=True, description="请求是否成功")
    message: Optional[str] = Field(None, description="响应消息")


class WriteResult(BaseModel):
    """写操作统计，字段名与前端约定保持一致"""
    matched_count: int = Field(default=0, alias="matchedCount")
    modified_count: int = Field(default=0, alias="modifiedCount")
    upserted_count: int = Field(default=0, alias="upsertedCount")
    upserted_id: Optional[Any] = Field(default=None, alias="upsertedId")

    class Config:
        populate_by_name = True


class DeleteResult(BaseModel):
    deleted_count: int = Field(default=0, alias="deletedCount")

    class Config:
        populate_by_name = True
