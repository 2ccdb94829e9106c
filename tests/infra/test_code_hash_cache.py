# tests/infra/test_code_hash_cache.py
"""
Тесты кэша code_hash.
"""

import threading

from src.infra.code_hash_cache import InMemoryCodeHashCache, get_code_hash_cache


class TestInMemoryCodeHashCache:
    """Тесты InMemoryCodeHashCache."""

    def test_absent_vs_queried_without_hash(self) -> None:
        """None в кэше отличается от отсутствия ключа."""
        cache = InMemoryCodeHashCache()
        cache.set("0:no_code", None)

        assert cache.contains("0:no_code") is True
        assert cache.get("0:no_code") is None
        assert cache.contains("0:unknown") is False

    def test_set_is_idempotent(self) -> None:
        cache = InMemoryCodeHashCache()
        cache.set("0:a", "hash")
        cache.set("0:a", "hash")

        assert len(cache) == 1
        assert cache.get("0:a") == "hash"

    def test_partition(self) -> None:
        cache = InMemoryCodeHashCache()
        cache.set("0:a", "h1")
        cache.set("0:b", None)

        cached, missing = cache.partition(["0:d", "0:a", "0:b", "0:c", "0:d"])

        assert cached == {"0:a": "h1", "0:b": None}
        assert missing == ["0:c", "0:d"]

    def test_concurrent_writers(self) -> None:
        """Параллельные записи одного значения не ломают кэш."""
        cache = InMemoryCodeHashCache()

        def writer() -> None:
            for i in range(200):
                cache.set(f"0:{i}", f"h{i}")

        threads = [threading.Thread(target=writer) for _ in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(cache) == 200
        assert cache.get("0:199") == "h199"

    def test_clear(self) -> None:
        cache = InMemoryCodeHashCache()
        cache.set("0:a", "h")
        cache.clear()
        assert len(cache) == 0


def test_process_wide_cache_is_singleton() -> None:
    assert get_code_hash_cache() is get_code_hash_cache()
