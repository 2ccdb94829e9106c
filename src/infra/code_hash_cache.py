# src/infra/code_hash_cache.py
"""
Кэш code_hash контрактов на время жизни процесса.

code_hash задеплоенного контракта не меняется, поэтому записи не устаревают:
нет TTL и вытеснения. None в кэше означает «запрашивали, code_hash нет»,
отсутствие ключа: «ещё не запрашивали».
"""

from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from typing import Iterable


class CodeHashStore(ABC):
    """Хранилище address -> code_hash."""

    @abstractmethod
    def contains(self, address: str) -> bool:
        """Был ли адрес уже разрешён."""

    @abstractmethod
    def get(self, address: str) -> str | None:
        """code_hash адреса (None, если нет или адрес не разрешался)."""

    @abstractmethod
    def set(self, address: str, code_hash: str | None) -> None:
        """Сохранить результат разрешения адреса."""

    def partition(self, addresses: Iterable[str]) -> tuple[dict[str, str | None], list[str]]:
        """
        Разделить адреса на уже известные и неизвестные.

        Returns:
            (найденные в кэше address -> code_hash, отсортированный список остальных)
        """
        cached: dict[str, str | None] = {}
        missing: set[str] = set()
        for address in addresses:
            if self.contains(address):
                cached[address] = self.get(address)
            else:
                missing.add(address)
        return cached, sorted(missing)


class InMemoryCodeHashCache(CodeHashStore):
    """
    Потокобезопасный словарь в памяти процесса.

    Конкурентные запросы могут записать один и тот же адрес дважды,
    значение всегда одинаковое, поэтому побеждает последняя запись.
    """

    def __init__(self) -> None:
        self._data: dict[str, str | None] = {}
        self._lock = threading.Lock()

    def contains(self, address: str) -> bool:
        with self._lock:
            return address in self._data

    def get(self, address: str) -> str | None:
        with self._lock:
            return self._data.get(address)

    def set(self, address: str, code_hash: str | None) -> None:
        with self._lock:
            self._data[address] = code_hash

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)

    def clear(self) -> None:
        """Очистить кэш (используется в тестах)."""
        with self._lock:
            self._data.clear()


# Общий кэш процесса, разделяемый всеми запросами
code_hash_cache = InMemoryCodeHashCache()


def get_code_hash_cache() -> InMemoryCodeHashCache:
    """Получить общий кэш code_hash."""
    return code_hash_cache
