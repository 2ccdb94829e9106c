# src/shared/models/reward.py
"""
Модели истории наград (тапов) и отчёта по аккаунту.
"""

from __future__ import annotations

from decimal import Decimal, localcontext

from pydantic import BaseModel, ConfigDict, Field, field_serializer


# Количество знаков после запятой у валюты наград (NACKL)
REWARD_DECIMALS = 9


def decode_amount(value: str, decimals: int = REWARD_DECIMALS) -> Decimal:
    """
    Переводит hex-значение из value_other в десятичную сумму.

    "0x3B9ACA00" -> Decimal("1.000000000"). Точность контекста подбирается
    по числу цифр, поэтому результат точный при любой длине значения.
    """
    raw = int(value, 16)
    with localcontext() as ctx:
        ctx.prec = max(len(str(raw)), 28)
        return Decimal(raw).scaleb(-decimals)


class RewardMessage(BaseModel):
    """Входящее сообщение с наградой (тап)."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    sender: str = Field(serialization_alias="src")
    reward_amount: Decimal = Field(serialization_alias="reward")
    timestamp: int
    body: str | None = None
    sender_code_hash: str | None = Field(default=None, serialization_alias="src_code_hash")
    is_known_contract: bool = Field(default=False, serialization_alias="is_popit")

    @field_serializer("reward_amount")
    def _serialize_amount(self, value: Decimal) -> float:
        return float(value)


class AccountSnapshot(BaseModel):
    """Баланс аккаунта в валюте наград на момент запроса."""
    address: str
    balance: Decimal = Decimal(0)


class RewardReport(BaseModel):
    """Итоговый ответ: баланс, сумма наград и отсортированные тапы."""

    address: str
    balance: Decimal
    taps_count: int = Field(serialization_alias="tapsCount")
    total_reward: Decimal = Field(serialization_alias="totalReward")
    taps: list[RewardMessage] = Field(default_factory=list)

    @field_serializer("balance", "total_reward")
    def _serialize_amount(self, value: Decimal) -> float:
        return float(value)

    def to_response(self) -> dict:
        """JSON-совместимый словарь с именами полей внешнего API."""
        return self.model_dump(mode="json", by_alias=True)
