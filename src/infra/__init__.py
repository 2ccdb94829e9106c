# src/infra/__init__.py
"""
Инфраструктурный слой.
Внешние системы: GraphQL индексатор, Telegram Bot API, кэш code_hash.
"""

from src.infra.code_hash_cache import CodeHashStore, InMemoryCodeHashCache, get_code_hash_cache
from src.infra.graphql_client import (
    GraphQLClient,
    UpstreamError,
    UpstreamGraphQLError,
    UpstreamTimeoutError,
)
from src.infra.telegram_membership import TelegramMembershipChecker

__all__ = [
    "CodeHashStore",
    "InMemoryCodeHashCache",
    "get_code_hash_cache",
    "GraphQLClient",
    "UpstreamError",
    "UpstreamGraphQLError",
    "UpstreamTimeoutError",
    "TelegramMembershipChecker",
]
