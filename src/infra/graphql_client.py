# src/infra/graphql_client.py
"""
Асинхронный клиент GraphQL индексатора блокчейна.

Один POST-запрос на вызов, общий дедлайн на весь запрос, без повторов.
Повторы (если нужны): ответственность вызывающего кода.
"""

from __future__ import annotations

import asyncio
from typing import Any

import httpx

from src.common.logger import log_debug, log_warning


class UpstreamError(Exception):
    """Ошибка обращения к индексатору (сеть, HTTP, формат ответа)."""
    pass


class UpstreamTimeoutError(UpstreamError):
    """Индексатор не ответил за отведённое время."""
    pass


class UpstreamGraphQLError(UpstreamError):
    """Индексатор вернул список errors в теле ответа."""

    def __init__(self, message: str, errors: list[dict[str, Any]] | None = None) -> None:
        super().__init__(message)
        self.errors = errors or []


class GraphQLClient:
    """
    Клиент для единственного GraphQL endpoint.

    Args:
        url: Адрес endpoint
        timeout: Дедлайн одного запроса в секундах
        http: Общий httpx.AsyncClient (если None, создаётся собственный)
    """

    def __init__(
        self,
        url: str,
        timeout: float = 8.0,
        http: httpx.AsyncClient | None = None,
    ) -> None:
        self.url = url
        self.timeout = timeout
        self._owns_http = http is None
        self.http = http or httpx.AsyncClient(timeout=timeout)

    async def close(self) -> None:
        """Закрыть HTTP клиент, если он создан этим объектом."""
        if self._owns_http:
            await self.http.aclose()

    async def execute(
        self,
        query: str,
        variables: dict[str, Any] | None = None,
        timeout: float | None = None,
    ) -> dict[str, Any]:
        """
        Выполнить запрос и вернуть объект data.

        Raises:
            UpstreamTimeoutError: Нет ответа за timeout секунд
            UpstreamGraphQLError: В ответе есть errors (сообщение: из первой ошибки)
            UpstreamError: Сетевая ошибка, HTTP-ошибка или ответ без data
        """
        deadline = self.timeout if timeout is None else timeout
        payload = {"query": query, "variables": variables or {}}

        try:
            response = await asyncio.wait_for(
                self.http.post(
                    self.url,
                    json=payload,
                    headers={"Content-Type": "application/json"},
                ),
                timeout=deadline,
            )
        except (asyncio.TimeoutError, httpx.TimeoutException) as e:
            await log_warning(
                f"GraphQL запрос превысил таймаут {deadline}s",
                extra={"url": self.url},
            )
            raise UpstreamTimeoutError(f"GraphQL request timed out after {deadline}s") from e
        except httpx.HTTPError as e:
            raise UpstreamError(f"GraphQL request failed: {e}") from e

        try:
            body = response.json()
        except ValueError as e:
            raise UpstreamError(
                f"GraphQL endpoint returned non-JSON response (HTTP {response.status_code})"
            ) from e

        errors = body.get("errors") if isinstance(body, dict) else None
        if errors:
            first = errors[0] if isinstance(errors[0], dict) else {}
            message = first.get("message") or "GraphQL error"
            await log_debug("GraphQL вернул ошибки", extra={"errors": errors})
            raise UpstreamGraphQLError(message, errors)

        if response.status_code >= 400:
            raise UpstreamError(f"GraphQL endpoint returned HTTP {response.status_code}")

        data = body.get("data") if isinstance(body, dict) else None
        if not isinstance(data, dict):
            raise UpstreamError("GraphQL response has no data")

        return data
