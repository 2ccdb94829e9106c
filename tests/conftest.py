# tests/conftest.py
"""
Общие фикстуры и настройки для тестов.
"""

from __future__ import annotations

import hashlib
import hmac
import json
import os
import time
from pathlib import Path
from typing import Any, Callable
from unittest.mock import AsyncMock
from urllib.parse import urlencode

import pytest

# Устанавливаем переменные окружения перед импортом модулей
os.environ.setdefault("TG_BOT_TOKEN", "123456:TEST-bot-token")
os.environ.setdefault("TG_PREMIUM_CHANNEL_ID", "-1001234567890")
os.environ.setdefault("LOG_FORMAT", "colored")

BOT_TOKEN = "123456:TEST-bot-token"
POPIT_CODE_HASH = "18365592c5f1e7d319cc1a2fd58fa05ca3afbe4ac49e73bc765d139a2e2d7a29"


# =============================================================================
# ФИКСТУРЫ КОНФИГУРАЦИИ
# =============================================================================

@pytest.fixture(scope="session")
def project_root() -> Path:
    """Корневая директория проекта."""
    return Path(__file__).parent.parent


@pytest.fixture
def bot_token() -> str:
    """Токен бота для подписи initData."""
    return BOT_TOKEN


@pytest.fixture
def popit_code_hash() -> str:
    """code_hash известного контракта."""
    return POPIT_CODE_HASH


# =============================================================================
# TELEGRAM INITDATA
# =============================================================================

@pytest.fixture
def make_init_data() -> Callable[..., str]:
    """
    Фабрика подписанной initData.

    Подпись считается здесь напрямую по документации Telegram,
    независимо от кода сервиса.
    """
    def _make(
        user_id: int = 42,
        token: str = BOT_TOKEN,
        auth_date: int | None = None,
        tamper: bool = False,
        **extra: str,
    ) -> str:
        fields = {
            "query_id": "AAHdF6IQAAAAAN0XohDhrOrc",
            "user": json.dumps({"id": user_id, "first_name": "Тест", "username": "tester"}),
            "auth_date": str(auth_date if auth_date is not None else int(time.time())),
            **extra,
        }
        check_string = "\n".join(f"{k}={v}" for k, v in sorted(fields.items()))
        secret = hmac.new(b"WebAppData", token.encode(), hashlib.sha256).digest()
        fields["hash"] = hmac.new(secret, check_string.encode(), hashlib.sha256).hexdigest()
        if tamper:
            fields["user"] = json.dumps({"id": user_id + 1, "first_name": "Mallory"})
        return urlencode(fields)

    return _make


# =============================================================================
# ОТВЕТЫ GRAPHQL
# =============================================================================

def make_node(
    msg_id: str,
    src: str,
    created_at: int,
    value: str | None = None,
    currency: int = 1,
    body: str | None = "te6ccg",
) -> dict[str, Any]:
    """Узел сообщения; value=None: сообщение без value_other."""
    return {
        "id": msg_id,
        "created_at": created_at,
        "src": src,
        "value_other": [{"currency": currency, "value": value}] if value is not None else None,
        "body": body,
    }


def make_messages_page(
    nodes: list[dict[str, Any]],
    end_cursor: str | None = None,
    has_next: bool = False,
) -> dict[str, Any]:
    """data для ACCOUNT_MESSAGES_QUERY."""
    return {
        "blockchain": {
            "account": {
                "messages": {
                    "edges": [{"node": node} for node in nodes],
                    "pageInfo": {"endCursor": end_cursor, "hasNextPage": has_next},
                }
            }
        }
    }


def make_balance(value: str | None, currency: int = 1) -> dict[str, Any]:
    """data для ACCOUNT_BALANCE_QUERY."""
    balance_other = [{"currency": currency, "value": value}] if value is not None else []
    return {"blockchain": {"account": {"info": {"balance_other": balance_other}}}}


@pytest.fixture
def node_factory() -> Callable[..., dict[str, Any]]:
    return make_node


@pytest.fixture
def page_factory() -> Callable[..., dict[str, Any]]:
    return make_messages_page


@pytest.fixture
def balance_factory() -> Callable[..., dict[str, Any]]:
    return make_balance


@pytest.fixture
def mock_graphql() -> AsyncMock:
    """Мок GraphQL клиента."""
    graphql = AsyncMock()
    graphql.execute = AsyncMock(return_value={"blockchain": {}})
    graphql.close = AsyncMock()
    return graphql


@pytest.fixture
def mock_membership() -> AsyncMock:
    """Мок проверки подписки: по умолчанию пользователь подписан."""
    membership = AsyncMock()
    membership.is_member = AsyncMock(return_value=True)
    membership.close = AsyncMock()
    return membership
