# src/services/__init__.py
"""
HTTP-сервисы приложения.

Сервисы:
- reward_tracker: история наград NACKL для Telegram Mini App
"""

__all__: list[str] = []
