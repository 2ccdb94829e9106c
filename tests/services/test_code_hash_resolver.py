# tests/services/test_code_hash_resolver.py
"""
Тесты разрешения code_hash отправителей.
"""

import asyncio
import math
import re

import pytest

from src.infra.code_hash_cache import InMemoryCodeHashCache
from src.infra.graphql_client import UpstreamTimeoutError
from src.services.reward_tracker.queries import CodeHashBatchQuery, build_code_hash_batches
from src.services.reward_tracker.resolver import CodeHashResolver


def fake_indexer(code_hashes: dict):
    """GraphQL-ответ по переменным батч-запроса: address -> code_hash (или отсутствие аккаунта)."""
    async def execute(query, variables):
        aliases = re.findall(r"(a\d+_\d+): account\(address: \$(v\d+)\)", query)
        blockchain = {}
        for alias, var in aliases:
            address = variables[var]
            if address in code_hashes:
                blockchain[alias] = {"info": {"address": address, "code_hash": code_hashes[address]}}
            else:
                blockchain[alias] = None
        return {"blockchain": blockchain}
    return execute


class TestCodeHashBatchQuery:
    """Тесты построителя батч-запроса."""

    def test_aliases_and_variables(self) -> None:
        batch = CodeHashBatchQuery(batch_index=3, addresses=["0:a", "0:b"])

        assert batch.aliases == ["a3_0", "a3_1"]
        assert batch.variables == {"v0": "0:a", "v1": "0:b"}
        assert "$v0: String!" in batch.query
        assert "a3_1: account(address: $v1)" in batch.query
        assert "0:a" not in batch.query

    def test_parse_handles_missing_parts(self) -> None:
        batch = CodeHashBatchQuery(batch_index=0, addresses=["0:a", "0:b", "0:c", "0:d"])
        data = {"blockchain": {
            "a0_0": {"info": {"code_hash": "h"}},
            "a0_1": None,
            "a0_2": {"info": None},
            "a0_3": {"info": {"code_hash": ""}},
        }}

        assert batch.parse(data) == {"0:a": "h", "0:b": None, "0:c": None, "0:d": None}

    def test_build_batches(self) -> None:
        addresses = [f"0:{i:02d}" for i in range(45)]
        batches = build_code_hash_batches(addresses, 20)

        assert [len(b.addresses) for b in batches] == [20, 20, 5]
        assert [b.batch_index for b in batches] == [0, 1, 2]
        assert sum((b.addresses for b in batches), []) == addresses


class TestCodeHashResolver:
    """Тесты CodeHashResolver."""

    @pytest.mark.asyncio
    async def test_batches_and_caches(self, mock_graphql) -> None:
        addresses = {f"0:{i:03d}" for i in range(45)}
        mock_graphql.execute.side_effect = fake_indexer({a: f"hash-{a}" for a in addresses})
        cache = InMemoryCodeHashCache()

        result = await CodeHashResolver(mock_graphql, cache, batch_size=20).resolve(addresses)

        assert result == {a: f"hash-{a}" for a in addresses}
        assert mock_graphql.execute.await_count == math.ceil(45 / 20)
        assert len(cache) == 45

    @pytest.mark.asyncio
    async def test_cached_addresses_are_not_queried(self, mock_graphql) -> None:
        cache = InMemoryCodeHashCache()
        cache.set("0:a", "h1")
        cache.set("0:b", None)

        result = await CodeHashResolver(mock_graphql, cache).resolve(["0:a", "0:b", "0:a"])

        assert result == {"0:a": "h1", "0:b": None}
        mock_graphql.execute.assert_not_called()

    @pytest.mark.asyncio
    async def test_only_uncached_are_queried(self, mock_graphql) -> None:
        cache = InMemoryCodeHashCache()
        cache.set("0:a", "h1")
        mock_graphql.execute.side_effect = fake_indexer({"0:b": "h2"})

        result = await CodeHashResolver(mock_graphql, cache).resolve(["0:a", "0:b", "0:c"])

        assert result == {"0:a": "h1", "0:b": "h2", "0:c": None}
        assert mock_graphql.execute.await_count == 1
        variables = mock_graphql.execute.call_args.args[1]
        assert sorted(variables.values()) == ["0:b", "0:c"]
        # Адрес без code_hash запомнен как «запрошен, хэша нет»
        assert cache.contains("0:c") and cache.get("0:c") is None

    @pytest.mark.asyncio
    async def test_second_resolution_hits_cache(self, mock_graphql) -> None:
        cache = InMemoryCodeHashCache()
        mock_graphql.execute.side_effect = fake_indexer({"0:a": "h1"})
        resolver = CodeHashResolver(mock_graphql, cache)

        await resolver.resolve(["0:a"])
        await resolver.resolve(["0:a"])

        assert mock_graphql.execute.await_count == 1

    @pytest.mark.asyncio
    async def test_empty_input(self, mock_graphql) -> None:
        result = await CodeHashResolver(mock_graphql, InMemoryCodeHashCache()).resolve([])

        assert result == {}
        mock_graphql.execute.assert_not_called()

    @pytest.mark.asyncio
    async def test_batches_run_concurrently(self, mock_graphql) -> None:
        in_flight = 0
        peak = 0
        indexer = fake_indexer({})

        async def slow(query, variables):
            nonlocal in_flight, peak
            in_flight += 1
            peak = max(peak, in_flight)
            await asyncio.sleep(0.01)
            in_flight -= 1
            return await indexer(query, variables)

        mock_graphql.execute.side_effect = slow
        addresses = [f"0:{i}" for i in range(60)]

        await CodeHashResolver(mock_graphql, InMemoryCodeHashCache(), batch_size=20).resolve(addresses)

        assert peak == 3

    @pytest.mark.asyncio
    async def test_batch_failure_fails_resolution(self, mock_graphql) -> None:
        mock_graphql.execute.side_effect = UpstreamTimeoutError("timeout")

        with pytest.raises(UpstreamTimeoutError):
            await CodeHashResolver(mock_graphql, InMemoryCodeHashCache()).resolve(["0:a"])
