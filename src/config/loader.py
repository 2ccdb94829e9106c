# src/config/loader.py
"""
Загрузчик конфигурации трекера наград.
Несекретные параметры лежат в config/config.json.
Токен бота, ID премиум-канала и адрес индексатора переопределяются из окружения.
"""

from __future__ import annotations

import json
import os
from functools import lru_cache
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


# =============================================================================
# ОПРЕДЕЛЕНИЕ ПУТЕЙ
# =============================================================================

def get_project_root() -> Path:
    """Возвращает корневую директорию проекта."""
    return Path(__file__).parent.parent.parent


def get_config_path() -> Path:
    """Возвращает путь к файлу конфигурации."""
    return get_project_root() / "config" / "config.json"


def load_config_json() -> dict[str, Any]:
    """Загружает config.json и возвращает словарь без ключей-комментариев."""
    config_path = get_config_path()
    if not config_path.exists():
        raise FileNotFoundError(f"Файл конфигурации не найден: {config_path}")

    with open(config_path, "r", encoding="utf-8") as f:
        data = json.load(f)

    return {k: v for k, v in data.items() if not k.startswith("_comment_")}


# =============================================================================
# PYDANTIC МОДЕЛИ КОНФИГУРАЦИИ
# =============================================================================

class SystemSettings(BaseModel):
    """Системные настройки."""
    PROJECT_NAME: str = "nackl_reward_tracker"
    VERSION: str = "1.0.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    ENVIRONMENT: str = "production"


class DeploymentSettings(BaseModel):
    """Где слушает HTTP-сервис."""
    REWARD_TRACKER_HOST: str = "0.0.0.0"
    REWARD_TRACKER_PORT: int = 8092


class LoggingSettings(BaseModel):
    """Настройки логирования."""
    LOG_LEVEL: str = "INFO"
    LOG_TO_FILE: bool = False
    LOG_FILE_PATH: str = "logs/app.log"
    LOG_FORMAT: str = "json"
    LOG_MAX_BYTES: int = 10485760
    LOG_BACKUP_COUNT: int = 5


class TelegramSettings(BaseModel):
    """Настройки Telegram: проверка initData и членства в GOLD-канале."""
    BOT_TOKEN: str = ""
    PREMIUM_CHANNEL_ID: str = ""
    PREMIUM_INVITE_LINK: str = "https://t.me/+GsMPPRnYcMtiOTY8"
    INIT_DATA_MAX_AGE: int = 0  # 0: без проверки возраста

    @field_validator("BOT_TOKEN", "PREMIUM_CHANNEL_ID", mode="before")
    @classmethod
    def get_from_env(cls, v: str | int | None, info) -> str:
        """Берёт значение из TG_* переменных окружения, если не задано явно."""
        if v is None or v == "":
            return os.getenv(f"TG_{info.field_name}", "")
        return str(v)


class BlockchainSettings(BaseModel):
    """Настройки GraphQL индексатора."""
    GRAPHQL_URL: str = "https://mainnet.ackinacki.org/graphql"
    GRAPHQL_TIMEOUT: float = 8.0
    REWARD_CURRENCY: int = 1
    REWARD_DECIMALS: int = 9
    KNOWN_CODE_HASH: str = "18365592c5f1e7d319cc1a2fd58fa05ca3afbe4ac49e73bc765d139a2e2d7a29"


class PaginationSettings(BaseModel):
    """Ограничения обхода сообщений и батчей code_hash."""
    PAGE_SIZE: int = Field(default=50, ge=1)
    MAX_MESSAGES: int = Field(default=2000, ge=1)
    MAX_ITERATIONS: int = Field(default=20, ge=1)
    CODE_HASH_BATCH_SIZE: int = Field(default=20, ge=1)


# =============================================================================
# ГЛАВНЫЙ КЛАСС НАСТРОЕК
# =============================================================================

class Settings(BaseSettings):
    """
    Главный класс настроек приложения.
    Агрегирует все секции конфигурации.
    """
    system: SystemSettings = Field(default_factory=SystemSettings)
    deployment: DeploymentSettings = Field(default_factory=DeploymentSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    telegram: TelegramSettings = Field(default_factory=TelegramSettings)
    blockchain: BlockchainSettings = Field(default_factory=BlockchainSettings)
    pagination: PaginationSettings = Field(default_factory=PaginationSettings)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @classmethod
    def from_config_json(cls) -> "Settings":
        """
        Создаёт объект Settings из config.json.
        Секреты и адрес индексатора переопределяются из переменных окружения.
        """
        data = load_config_json()

        return cls(
            system=SystemSettings(
                PROJECT_NAME=data.get("PROJECT_NAME", "nackl_reward_tracker"),
                VERSION=data.get("VERSION", "1.0.0"),
                DEBUG=data.get("DEBUG", False),
                LOG_LEVEL=data.get("LOG_LEVEL", "INFO"),
                ENVIRONMENT=os.getenv("ENVIRONMENT", data.get("ENVIRONMENT", "production")),
            ),
            deployment=DeploymentSettings(
                REWARD_TRACKER_HOST=os.getenv("REWARD_TRACKER_HOST", data.get("REWARD_TRACKER_HOST", "0.0.0.0")),
                REWARD_TRACKER_PORT=int(os.getenv("REWARD_TRACKER_PORT", data.get("REWARD_TRACKER_PORT", 8092))),
            ),
            logging=LoggingSettings(
                LOG_LEVEL=data.get("LOG_LEVEL", "INFO"),
                LOG_TO_FILE=data.get("LOG_TO_FILE", False),
                LOG_FILE_PATH=data.get("LOG_FILE_PATH", "logs/app.log"),
                LOG_FORMAT=os.getenv("LOG_FORMAT", data.get("LOG_FORMAT", "json")),
                LOG_MAX_BYTES=data.get("LOG_MAX_BYTES", 10485760),
                LOG_BACKUP_COUNT=data.get("LOG_BACKUP_COUNT", 5),
            ),
            telegram=TelegramSettings(
                BOT_TOKEN=os.getenv("TG_BOT_TOKEN", data.get("BOT_TOKEN", "")),
                PREMIUM_CHANNEL_ID=os.getenv("TG_PREMIUM_CHANNEL_ID", data.get("PREMIUM_CHANNEL_ID", "")),
                PREMIUM_INVITE_LINK=data.get("PREMIUM_INVITE_LINK", "https://t.me/+GsMPPRnYcMtiOTY8"),
                INIT_DATA_MAX_AGE=data.get("INIT_DATA_MAX_AGE", 0),
            ),
            blockchain=BlockchainSettings(
                GRAPHQL_URL=os.getenv("GRAPHQL_URL", data.get("GRAPHQL_URL", "https://mainnet.ackinacki.org/graphql")),
                GRAPHQL_TIMEOUT=float(os.getenv("GRAPHQL_TIMEOUT", data.get("GRAPHQL_TIMEOUT", 8.0))),
                REWARD_CURRENCY=data.get("REWARD_CURRENCY", 1),
                REWARD_DECIMALS=data.get("REWARD_DECIMALS", 9),
                KNOWN_CODE_HASH=data.get(
                    "KNOWN_CODE_HASH",
                    "18365592c5f1e7d319cc1a2fd58fa05ca3afbe4ac49e73bc765d139a2e2d7a29",
                ),
            ),
            pagination=PaginationSettings(
                PAGE_SIZE=data.get("PAGE_SIZE", 50),
                MAX_MESSAGES=data.get("MAX_MESSAGES", 2000),
                MAX_ITERATIONS=data.get("MAX_ITERATIONS", 20),
                CODE_HASH_BATCH_SIZE=data.get("CODE_HASH_BATCH_SIZE", 20),
            ),
        )


@lru_cache()
def get_settings() -> Settings:
    """
    Возвращает синглтон настроек приложения.
    Перед чтением config.json подгружает .env из корня проекта.
    """
    from dotenv import load_dotenv

    env_path = get_project_root() / ".env"
    if env_path.exists():
        load_dotenv(env_path)

    return Settings.from_config_json()


# Экспорт синглтона для удобного импорта
settings = get_settings()
