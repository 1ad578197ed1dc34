"""
HTTP API 请求/响应结构（Pydantic）。

请求体沿用 flow 风格的外层包装：
    {"data": {"question": "...", "sessionID": "..."}}
成功时返回 {"result": "..."}，失败时返回 {"error": {"status": "...", "message": "..."}}。
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ChatInput(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    question: str = Field(default="", description="User question to be answered")
    session_id: Optional[str] = Field(
        default=None,
        alias="sessionID",
        description="Session identifier for context tracking",
    )


class ChatRequest(BaseModel):
    data: ChatInput


class ChatResponse(BaseModel):
    result: str


class ErrorDetail(BaseModel):
    status: str = "INTERNAL"
    message: str


class ErrorResponse(BaseModel):
    error: ErrorDetail
