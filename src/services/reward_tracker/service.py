# src/services/reward_tracker/service.py
"""
Бизнес-логика трекера наград.

Порядок обработки запроса:
адрес -> initData -> подписка на GOLD-канал -> (баланс || сообщения)
-> code_hash отправителей -> агрегация -> отчёт.
Любая ошибка прерывает запрос целиком, повторов нет.
"""

from __future__ import annotations

import asyncio
from decimal import Decimal

from src.common.logger import log_info, log_warning
from src.infra.code_hash_cache import CodeHashStore
from src.infra.graphql_client import GraphQLClient
from src.infra.telegram_membership import TelegramMembershipChecker
from src.services.reward_tracker.aggregator import aggregate
from src.services.reward_tracker.errors import (
    MissingAddressError,
    PremiumRequiredError,
    UnauthorizedError,
)
from src.services.reward_tracker.paginator import (
    MessagePaginator,
    PaginationPolicy,
    find_currency_value,
)
from src.services.reward_tracker.queries import ACCOUNT_BALANCE_QUERY
from src.services.reward_tracker.resolver import CodeHashResolver
from src.services.reward_tracker.telegram_auth import (
    TelegramAuthError,
    TelegramInitData,
    validate_init_data,
)
from src.shared.models.reward import AccountSnapshot, RewardMessage, RewardReport, decode_amount


class RewardTrackerService:
    """
    Сервис истории наград для Telegram Mini App.

    Объединяет:
    - проверку initData и подписки на премиум-канал
    - баланс аккаунта
    - постраничный обход входящих сообщений
    - разрешение code_hash отправителей через общий кэш
    """

    def __init__(
        self,
        graphql: GraphQLClient,
        membership: TelegramMembershipChecker,
        cache: CodeHashStore,
        bot_token: str,
        known_code_hash: str,
        invite_link: str,
        policy: PaginationPolicy | None = None,
        batch_size: int = 20,
        init_data_max_age: int = 0,
    ) -> None:
        self.graphql = graphql
        self.membership = membership
        self.bot_token = bot_token
        self.known_code_hash = known_code_hash
        self.invite_link = invite_link
        self.init_data_max_age = init_data_max_age
        self.policy = policy or PaginationPolicy()

        self.paginator = MessagePaginator(graphql, self.policy)
        self.resolver = CodeHashResolver(graphql, cache, batch_size=batch_size)

    # === ДОСТУП ===

    def authenticate(self, init_data: str | None) -> TelegramInitData:
        """Проверить initData; при любой ошибке: 401."""
        try:
            return validate_init_data(init_data or "", self.bot_token, self.init_data_max_age)
        except TelegramAuthError as e:
            raise UnauthorizedError() from e

    async def ensure_premium(self, user_id: int) -> None:
        """Проверить подписку на GOLD-канал; без подписки: 403."""
        if not await self.membership.is_member(user_id):
            await log_warning("Пользователь не подписан на премиум-канал", extra={"user_id": user_id})
            raise PremiumRequiredError(self.invite_link)

    # === ДАННЫЕ ===

    async def fetch_account_snapshot(self, address: str) -> AccountSnapshot:
        """Баланс аккаунта в валюте наград (0, если аккаунта или записи нет)."""
        data = await self.graphql.execute(ACCOUNT_BALANCE_QUERY, {"a": address})

        account = (data.get("blockchain") or {}).get("account") or {}
        info = account.get("info") or {}
        value = find_currency_value(info.get("balance_other"), self.policy.reward_currency)

        balance = decode_amount(value, self.policy.reward_decimals) if value is not None else Decimal(0)
        return AccountSnapshot(address=address, balance=balance)

    async def _fetch_account_data(self, address: str) -> tuple[AccountSnapshot, list[RewardMessage]]:
        """Баланс и сообщения параллельно; ошибка одного запроса отменяет второй."""
        tasks = [
            asyncio.create_task(self.fetch_account_snapshot(address)),
            asyncio.create_task(self.paginator.fetch_all_messages(address)),
        ]
        try:
            snapshot, messages = await asyncio.gather(*tasks)
        except BaseException:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise
        return snapshot, messages

    async def get_reward_report(self, address: str | None, init_data: str | None) -> RewardReport:
        """
        Собрать отчёт по наградам аккаунта.

        Raises:
            MissingAddressError: Пустой адрес
            UnauthorizedError: initData отсутствует или невалидна
            PremiumRequiredError: Нет подписки на GOLD-канал
            UpstreamError: Ошибка или таймаут индексатора
            TelegramNetworkError: Bot API недоступен
        """
        address = (address or "").strip()
        if not address:
            raise MissingAddressError()

        init = self.authenticate(init_data)
        await self.ensure_premium(init.user.id)

        snapshot, messages = await self._fetch_account_data(address)

        code_hashes = await self.resolver.resolve(m.sender for m in messages)
        aggregated = aggregate(messages, code_hashes, self.known_code_hash)

        await log_info(
            "Отчёт по наградам собран",
            extra={
                "address": address,
                "user_id": init.user.id,
                "taps": len(aggregated.taps),
                "senders": len(code_hashes),
            },
        )

        return RewardReport(
            address=address,
            balance=snapshot.balance,
            taps_count=len(aggregated.taps),
            total_reward=aggregated.total_reward,
            taps=aggregated.taps,
        )
