#!/usr/bin/env python3
"""
Entrypoint для трекера наград.

Запуск:
    python entrypoints/entrypoint_reward_tracker.py

Порт по умолчанию: 8092
"""

import sys
from pathlib import Path

# Добавляем корневую директорию проекта в путь
project_root = Path(__file__).parent.parent.resolve()
sys.path.insert(0, str(project_root))

import uvicorn

from src.config import settings


def main() -> None:
    """Запустить трекер наград."""
    uvicorn.run(
        "src.services.reward_tracker.app:app",
        host=settings.deployment.REWARD_TRACKER_HOST,
        port=settings.deployment.REWARD_TRACKER_PORT,
        reload=settings.system.DEBUG,
        log_level=settings.system.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()
