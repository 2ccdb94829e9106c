# src/services/reward_tracker/dependencies.py
"""
Dependency Injection для трекера наград.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from src.infra.graphql_client import GraphQLClient
    from src.infra.telegram_membership import TelegramMembershipChecker
    from src.services.reward_tracker.service import RewardTrackerService


# Синглтоны
_graphql: "GraphQLClient | None" = None
_membership: "TelegramMembershipChecker | None" = None
_reward_service: "RewardTrackerService | None" = None


async def init_dependencies(
    graphql: "GraphQLClient",
    membership: "TelegramMembershipChecker",
    reward_service: "RewardTrackerService",
) -> None:
    """Зарегистрировать зависимости при старте приложения."""
    global _graphql, _membership, _reward_service
    _graphql = graphql
    _membership = membership
    _reward_service = reward_service


def get_reward_service() -> "RewardTrackerService":
    """Получить сервис истории наград."""
    if _reward_service is None:
        raise RuntimeError("RewardTrackerService не инициализирован. Вызовите init_dependencies()")
    return _reward_service


async def cleanup_dependencies() -> None:
    """Закрыть HTTP-клиенты при остановке приложения."""
    global _graphql, _membership, _reward_service
    if _graphql is not None:
        await _graphql.close()
    if _membership is not None:
        await _membership.close()
    _graphql = None
    _membership = None
    _reward_service = None
