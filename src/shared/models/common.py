# src/shared/models/common.py
"""
Общие модели ответов сервиса.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Ответ с ошибкой: только человекочитаемое сообщение."""

    error: str


class HealthStatus(BaseModel):
    """Статус здоровья сервиса."""

    service: str
    status: str = "healthy"
    version: str | None = None
    dependencies: dict[str, str] = Field(default_factory=dict)
