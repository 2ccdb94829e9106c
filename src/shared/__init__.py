# src/shared/__init__.py
"""
Общий код сервиса.

Модули:
- models: Pydantic-модели наград, отчёта и служебных ответов
"""

__all__: list[str] = []
