# src/services/reward_tracker/aggregator.py
"""
Склейка сообщений с code_hash, сортировка и подсчёт суммы наград.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Mapping, Sequence

from src.shared.models.reward import RewardMessage


@dataclass
class AggregatedRewards:
    """Тапы от новых к старым и их сумма."""
    taps: list[RewardMessage]
    total_reward: Decimal


def aggregate(
    messages: Sequence[RewardMessage],
    code_hash_by_address: Mapping[str, str | None],
    known_code_hash: str,
) -> AggregatedRewards:
    """
    Проставить code_hash и признак известного контракта, отсортировать по времени.

    Сортировка устойчивая: при равном timestamp сохраняется входной порядок.
    """
    annotated = []
    for message in messages:
        code_hash = code_hash_by_address.get(message.sender)
        annotated.append(
            message.model_copy(update={
                "sender_code_hash": code_hash,
                "is_known_contract": code_hash is not None and code_hash == known_code_hash,
            })
        )

    annotated.sort(key=lambda m: m.timestamp, reverse=True)
    total = sum((m.reward_amount for m in annotated), Decimal(0))
    return AggregatedRewards(taps=annotated, total_reward=total)
