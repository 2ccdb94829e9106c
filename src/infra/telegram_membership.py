# src/infra/telegram_membership.py
"""
Проверка подписки пользователя на премиум (GOLD) канал через Bot API.
"""

from __future__ import annotations

from aiogram import Bot
from aiogram.exceptions import TelegramAPIError, TelegramNetworkError

from src.common.constants import PREMIUM_MEMBER_STATUSES
from src.common.logger import log_debug, log_warning


class TelegramMembershipChecker:
    """
    Обёртка над getChatMember.

    Подписчиком считается пользователь со статусом member, administrator или creator.
    Если канал не настроен или Bot API отклонил запрос: пользователь не подписчик.
    Сетевые ошибки пробрасываются наверх.
    """

    def __init__(self, bot: Bot | None, channel_id: str) -> None:
        self._bot = bot
        self.channel_id = channel_id

    async def close(self) -> None:
        """Закрыть HTTP-сессию бота."""
        if self._bot is not None:
            await self._bot.session.close()

    async def is_member(self, user_id: int) -> bool:
        """Является ли пользователь подписчиком канала."""
        if self._bot is None or not self.channel_id:
            await log_warning("Премиум-канал или токен бота не настроены, доступ закрыт")
            return False

        try:
            member = await self._bot.get_chat_member(chat_id=self.channel_id, user_id=user_id)
        except TelegramNetworkError:
            raise
        except TelegramAPIError as e:
            await log_warning(
                f"getChatMember завершился ошибкой: {e}",
                extra={"user_id": user_id, "channel_id": self.channel_id},
            )
            return False

        status = getattr(member.status, "value", member.status)
        await log_debug(
            "Статус участника премиум-канала",
            extra={"user_id": user_id, "status": status},
        )
        return status in PREMIUM_MEMBER_STATUSES
