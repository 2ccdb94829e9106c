# src/services/reward_tracker/__init__.py
"""
Трекер наград NACKL для Telegram Mini App.

Собирает историю входящих наград аккаунта из GraphQL индексатора:
- Постраничный обход сообщений с ограничениями
- Пакетное разрешение code_hash отправителей с кэшем процесса
- Проверка Telegram initData и подписки на GOLD-канал
"""
