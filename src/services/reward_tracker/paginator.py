# src/services/reward_tracker/paginator.py
"""
Постраничный обход входящих сообщений аккаунта.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from src.common.logger import log_debug, log_info
from src.infra.graphql_client import GraphQLClient
from src.services.reward_tracker.queries import ACCOUNT_MESSAGES_QUERY
from src.shared.models.reward import REWARD_DECIMALS, RewardMessage, decode_amount


@dataclass(frozen=True)
class PaginationPolicy:
    """
    Ограничения обхода.

    Обход останавливается, когда страниц больше нет, набрано max_messages
    сообщений или сделано max_iterations запросов, смотря что наступит раньше.
    """
    page_size: int = 50
    max_messages: int = 2000
    max_iterations: int = 20
    reward_currency: int = 1
    reward_decimals: int = REWARD_DECIMALS


def find_currency_value(values: list[dict[str, Any]] | None, currency: int) -> str | None:
    """hex-значение нужной валюты из списка value_other/balance_other."""
    for entry in values or []:
        if entry.get("currency") == currency:
            return entry.get("value")
    return None


class MessagePaginator:
    """Собирает все сообщения с наградой для адреса."""

    def __init__(self, graphql: GraphQLClient, policy: PaginationPolicy | None = None) -> None:
        self.graphql = graphql
        self.policy = policy or PaginationPolicy()

    def _to_reward_message(self, node: dict[str, Any]) -> RewardMessage | None:
        value = find_currency_value(node.get("value_other"), self.policy.reward_currency)
        if value is None:
            return None
        return RewardMessage(
            id=node["id"],
            sender=node["src"],
            reward_amount=decode_amount(value, self.policy.reward_decimals),
            timestamp=int(node["created_at"]),
            body=node.get("body"),
        )

    async def fetch_page(self, address: str, cursor: str | None) -> tuple[list[RewardMessage], str | None, bool]:
        """
        Запросить одну страницу.

        Returns:
            (сообщения с наградой, курсор следующей страницы, есть ли ещё страницы)
        """
        data = await self.graphql.execute(
            ACCOUNT_MESSAGES_QUERY,
            {"a": address, "first": self.policy.page_size, "after": cursor},
        )

        account = (data.get("blockchain") or {}).get("account") or {}
        connection = account.get("messages") or {}
        page_info = connection.get("pageInfo") or {}

        messages = []
        for edge in connection.get("edges") or []:
            node = (edge or {}).get("node")
            if not node:
                continue
            message = self._to_reward_message(node)
            if message is not None:
                messages.append(message)

        next_cursor = page_info.get("endCursor")
        # Без курсора следующую страницу запросить нельзя
        has_more = bool(page_info.get("hasNextPage")) and next_cursor is not None
        return messages, next_cursor, has_more

    async def fetch_all_messages(self, address: str) -> list[RewardMessage]:
        """Обойти страницы в пределах политики и вернуть сообщения в порядке получения."""
        policy = self.policy
        collected: list[RewardMessage] = []
        cursor: str | None = None
        has_more = True
        iterations = 0

        while has_more and len(collected) < policy.max_messages and iterations < policy.max_iterations:
            page, cursor, has_more = await self.fetch_page(address, cursor)
            iterations += 1

            room = policy.max_messages - len(collected)
            collected.extend(page[:room])

            await log_debug(
                "Получена страница сообщений",
                extra={"address": address, "page": iterations, "rewards": len(page)},
            )

        if has_more:
            await log_info(
                "Обход сообщений остановлен по лимиту",
                extra={"address": address, "pages": iterations, "messages": len(collected)},
            )

        return collected
