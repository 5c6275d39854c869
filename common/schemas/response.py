"""공통 응답 envelope 스키마."""

from __future__ import annotations

from typing import Generic, TypeVar

from pydantic import BaseModel


T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """성공 응답 envelope. `{"message": ..., "data": ...}`"""

    message: str = "success"
    data: T


class ErrorDetail(BaseModel):
    code: str
    message: str


class ErrorResponse(BaseModel):
    """에러 응답 envelope. `{"error": {"code": ..., "message": ...}}`"""

    error: ErrorDetail
