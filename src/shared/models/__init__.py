# src/shared/models/__init__.py
"""
Pydantic-модели трекера наград.
"""

from src.shared.models.common import (
    ErrorResponse,
    HealthStatus,
)
from src.shared.models.reward import (
    REWARD_DECIMALS,
    AccountSnapshot,
    RewardMessage,
    RewardReport,
    decode_amount,
)

__all__ = [
    # Common
    "ErrorResponse",
    "HealthStatus",
    # Reward
    "REWARD_DECIMALS",
    "AccountSnapshot",
    "RewardMessage",
    "RewardReport",
    "decode_amount",
]
