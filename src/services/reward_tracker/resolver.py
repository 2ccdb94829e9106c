# src/services/reward_tracker/resolver.py
"""
Разрешение code_hash отправителей наград.

Неизвестные адреса разбиваются на пачки, каждая пачка: один запрос,
пачки запрашиваются параллельно. Результаты пишутся в общий кэш процесса.
"""

from __future__ import annotations

import asyncio
from typing import Iterable

from src.common.logger import log_debug
from src.infra.code_hash_cache import CodeHashStore
from src.infra.graphql_client import GraphQLClient
from src.services.reward_tracker.queries import CodeHashBatchQuery, build_code_hash_batches


class CodeHashResolver:
    """address -> code_hash с кэшем на время жизни процесса."""

    def __init__(
        self,
        graphql: GraphQLClient,
        cache: CodeHashStore,
        batch_size: int = 20,
    ) -> None:
        self.graphql = graphql
        self.cache = cache
        self.batch_size = batch_size

    async def _fetch_batch(self, batch: CodeHashBatchQuery) -> dict[str, str | None]:
        data = await self.graphql.execute(batch.query, batch.variables)
        resolved = batch.parse(data)
        for address, code_hash in resolved.items():
            self.cache.set(address, code_hash)
        return resolved

    async def resolve(self, addresses: Iterable[str]) -> dict[str, str | None]:
        """
        Вернуть code_hash для каждого адреса.

        Ошибка любой пачки прерывает разрешение целиком, но уже записанные
        в кэш пачки остаются в нём.
        """
        cached, uncached = self.cache.partition(set(addresses))
        if not uncached:
            return cached

        batches = build_code_hash_batches(uncached, self.batch_size)
        await log_debug(
            "Запрос code_hash",
            extra={"cached": len(cached), "uncached": len(uncached), "batches": len(batches)},
        )

        results = await asyncio.gather(*(self._fetch_batch(batch) for batch in batches))

        resolved = dict(cached)
        for batch_result in results:
            resolved.update(batch_result)
        return resolved
