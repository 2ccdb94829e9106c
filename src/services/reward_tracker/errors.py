# src/services/reward_tracker/errors.py
"""
Ошибки запроса истории наград с HTTP-статусами ответа.
"""

from __future__ import annotations


class RewardTrackerError(Exception):
    """Базовая ошибка с HTTP-статусом и сообщением для клиента."""

    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class MissingAddressError(RewardTrackerError):
    """Не передан адрес аккаунта."""

    status_code = 400

    def __init__(self) -> None:
        super().__init__("Missing address")


class UnauthorizedError(RewardTrackerError):
    """initData отсутствует или не прошла проверку подписи."""

    status_code = 401

    def __init__(self) -> None:
        super().__init__("Open the tracker from the Telegram bot")


class PremiumRequiredError(RewardTrackerError):
    """Пользователь не подписан на GOLD-канал."""

    status_code = 403

    def __init__(self, invite_link: str) -> None:
        super().__init__(f"Subscribe to the GOLD channel: {invite_link}")
        self.invite_link = invite_link


class InternalError(RewardTrackerError):
    """Любая другая ошибка: индексатор, таймаут, сбой внутри сервиса."""

    status_code = 500

    def __init__(self, message: str = "Internal error") -> None:
        super().__init__(message or "Internal error")
