# src/services/reward_tracker/telegram_auth.py
"""
Валидация Telegram Mini App initData.
https://core.telegram.org/bots/webapps#validating-data-received-via-the-mini-app
"""

from __future__ import annotations

import hashlib
import hmac
import json
from datetime import datetime, timezone
from urllib.parse import parse_qsl

from pydantic import BaseModel


class TelegramUser(BaseModel):
    """Данные пользователя из initData."""
    id: int
    first_name: str = ""
    last_name: str | None = None
    username: str | None = None
    language_code: str | None = None
    is_premium: bool | None = None
    photo_url: str | None = None


class TelegramInitData(BaseModel):
    """Распарсенные данные initData."""
    user: TelegramUser
    auth_date: datetime | None = None
    query_id: str | None = None
    chat_type: str | None = None
    chat_instance: str | None = None
    start_param: str | None = None
    hash: str


class TelegramAuthError(Exception):
    """Ошибка валидации Telegram данных."""
    pass


def compute_init_data_hash(fields: dict[str, str], bot_token: str) -> str:
    """
    Подпись initData.

    Строка проверки: пары key=value без hash, отсортированные и склеенные
    через перевод строки. Секретный ключ: HMAC-SHA256("WebAppData", bot_token).
    """
    data_check_string = "\n".join(
        f"{key}={value}" for key, value in sorted(fields.items()) if key != "hash"
    )
    secret_key = hmac.new(b"WebAppData", bot_token.encode(), hashlib.sha256).digest()
    return hmac.new(secret_key, data_check_string.encode(), hashlib.sha256).hexdigest()


def validate_init_data(
    init_data: str,
    bot_token: str,
    max_age_seconds: int = 0,
) -> TelegramInitData:
    """
    Валидировать initData от Telegram Mini App.

    Args:
        init_data: URL-encoded строка Telegram.WebApp.initData
        bot_token: Токен бота
        max_age_seconds: Максимальный возраст auth_date (0: не проверять)

    Returns:
        TelegramInitData с данными пользователя

    Raises:
        TelegramAuthError: Если данные отсутствуют, невалидны или устарели
    """
    if not init_data:
        raise TelegramAuthError("Пустая initData")
    if not bot_token:
        raise TelegramAuthError("Токен бота не настроен")

    fields = dict(parse_qsl(init_data, keep_blank_values=True))

    received_hash = fields.get("hash")
    if not received_hash:
        raise TelegramAuthError("Отсутствует hash в initData")

    calculated_hash = compute_init_data_hash(fields, bot_token)
    if not hmac.compare_digest(calculated_hash, received_hash):
        raise TelegramAuthError("Невалидный hash initData")

    auth_date = None
    if "auth_date" in fields:
        try:
            auth_date = datetime.fromtimestamp(int(fields["auth_date"]), tz=timezone.utc)
        except (ValueError, OverflowError, OSError) as e:
            raise TelegramAuthError(f"Некорректный auth_date: {e}") from e

    if max_age_seconds:
        if auth_date is None:
            raise TelegramAuthError("Отсутствует auth_date в initData")
        age = (datetime.now(timezone.utc) - auth_date).total_seconds()
        if age > max_age_seconds:
            raise TelegramAuthError("initData устарели")

    if "user" not in fields:
        raise TelegramAuthError("Отсутствует user в initData")

    try:
        user = TelegramUser(**json.loads(fields["user"]))
    except (ValueError, TypeError) as e:
        raise TelegramAuthError(f"Ошибка парсинга user: {e}") from e

    return TelegramInitData(
        user=user,
        auth_date=auth_date,
        query_id=fields.get("query_id"),
        chat_type=fields.get("chat_type"),
        chat_instance=fields.get("chat_instance"),
        start_param=fields.get("start_param"),
        hash=received_hash,
    )
