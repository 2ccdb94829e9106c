# src/common/logger.py
"""
Структурированное логирование трекера наград.
JSON или цветной консольный вывод, опциональная запись в файлы с ротацией.
"""

from __future__ import annotations

import inspect
import json
import logging
import sys
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

from src.common.constants import TypeMsg


DEFAULT_LOGGER_NAME = "reward_tracker"

# Файловые хендлеры общие для всех логгеров
_GLOBAL_FILE_HANDLER: logging.Handler | None = None
_GLOBAL_ERROR_HANDLER: logging.Handler | None = None

_LOGGING_INITIALIZED: bool = False


# =============================================================================
# ФОРМАТТЕРЫ
# =============================================================================

class JsonFormatter(logging.Formatter):
    """Форматтер для JSON логов."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if hasattr(record, "extra_data"):
            log_data["extra"] = record.extra_data

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, ensure_ascii=False, default=str)


class ColoredFormatter(logging.Formatter):
    """Цветной форматтер для консоли (разработка)."""

    COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET = "\033[0m"
    GRAY = "\033[90m"

    def format(self, record: logging.LogRecord) -> str:
        color = self.COLORS.get(record.levelname, self.GRAY)
        timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")

        caller_info = ""
        extra_data = getattr(record, "extra_data", None) or {}
        if extra_data.get("caller_function"):
            caller_info = (
                f" {self.GRAY}[{extra_data.get('caller_module')}."
                f"{extra_data.get('caller_function')}() "
                f"{extra_data.get('caller_file')}:{extra_data.get('caller_line')}]{self.RESET}"
            )

        message = f"{timestamp} {color}[{record.levelname}]{self.RESET}{caller_info} {record.getMessage()}"

        if record.exc_info:
            message += "\n" + self.formatException(record.exc_info)

        return message


def _make_formatter(log_format: str) -> logging.Formatter:
    return JsonFormatter() if log_format == "json" else ColoredFormatter()


# =============================================================================
# ЛОГГЕР
# =============================================================================

_loggers: dict[str, logging.Logger] = {}


def _read_logging_settings() -> dict[str, Any]:
    """
    Читает секцию logging из настроек.
    При недоступных настройках (или MagicMock в тестах) возвращает значения по умолчанию.
    """
    defaults: dict[str, Any] = {
        "level": "INFO",
        "format": "colored",
        "to_file": False,
        "file_path": "logs/app.log",
        "max_bytes": 10485760,
        "backup_count": 5,
    }
    try:
        from src.config import settings
        section = settings.logging
        values = {
            "level": section.LOG_LEVEL,
            "format": section.LOG_FORMAT,
            "to_file": section.LOG_TO_FILE,
            "file_path": section.LOG_FILE_PATH,
            "max_bytes": section.LOG_MAX_BYTES,
            "backup_count": section.LOG_BACKUP_COUNT,
        }
    except Exception:
        return defaults

    for key, default in defaults.items():
        if not isinstance(values[key], type(default)):
            values[key] = default
    return values


def setup_logging() -> None:
    """
    Инициализирует систему логирования при старте приложения.
    Повторные вызовы ничего не делают.
    """
    global _LOGGING_INITIALIZED

    if _LOGGING_INITIALIZED:
        return

    _LOGGING_INITIALIZED = True

    get_logger(DEFAULT_LOGGER_NAME)

    # Сторонние библиотеки
    logging.getLogger("aiogram").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


def get_logger(name: str = DEFAULT_LOGGER_NAME) -> logging.Logger:
    """
    Возвращает настроенный логгер.
    Логгеры кэшируются, хендлеры добавляются один раз.

    Args:
        name: Имя логгера

    Returns:
        Настроенный логгер
    """
    global _GLOBAL_FILE_HANDLER, _GLOBAL_ERROR_HANDLER

    if name in _loggers:
        return _loggers[name]

    cfg = _read_logging_settings()

    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, cfg["level"].upper(), logging.INFO))

    if logger.handlers:
        return logger

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(_make_formatter(cfg["format"]))
    logger.addHandler(console_handler)

    if cfg["to_file"]:
        log_path = Path(cfg["file_path"])
        log_path.parent.mkdir(parents=True, exist_ok=True)

        if _GLOBAL_FILE_HANDLER is None:
            _GLOBAL_FILE_HANDLER = RotatingFileHandler(
                log_path,
                maxBytes=cfg["max_bytes"],
                backupCount=cfg["backup_count"],
                encoding="utf-8",
            )
            _GLOBAL_FILE_HANDLER.setFormatter(_make_formatter(cfg["format"]))
        logger.addHandler(_GLOBAL_FILE_HANDLER)

        if _GLOBAL_ERROR_HANDLER is None:
            _GLOBAL_ERROR_HANDLER = RotatingFileHandler(
                log_path.parent / "error.log",
                maxBytes=cfg["max_bytes"],
                backupCount=cfg["backup_count"],
                encoding="utf-8",
            )
            _GLOBAL_ERROR_HANDLER.setLevel(logging.ERROR)
            _GLOBAL_ERROR_HANDLER.setFormatter(_make_formatter(cfg["format"]))
        logger.addHandler(_GLOBAL_ERROR_HANDLER)

    logger.propagate = False

    _loggers[name] = logger
    return logger


# =============================================================================
# ВСПОМОГАТЕЛЬНЫЕ ФУНКЦИИ ЛОГИРОВАНИЯ
# =============================================================================

def _get_caller_info(depth: int = 2) -> dict[str, Any]:
    """
    Информация о коде, вызвавшем функцию логирования.

    Args:
        depth: Сколько кадров пропустить (сама функция + обёртка log_*)
    """
    frame = inspect.currentframe()
    try:
        caller_frame = frame
        for _ in range(depth):
            if caller_frame is None:
                return {}
            caller_frame = caller_frame.f_back
        if caller_frame is None:
            return {}

        module = inspect.getmodule(caller_frame)
        return {
            "caller_function": caller_frame.f_code.co_name,
            "caller_module": module.__name__ if module else "unknown",
            "caller_file": Path(caller_frame.f_code.co_filename).name,
            "caller_line": caller_frame.f_lineno,
        }
    finally:
        # Разрываем ссылки на кадры стека
        del frame


def _emit(
    message: str,
    type_msg: TypeMsg,
    logger_name: str,
    extra: dict[str, Any] | None,
    caller_info: dict[str, Any],
    exc_info: bool = False,
) -> None:
    logger = get_logger(logger_name)
    record_extra = {"extra_data": {**caller_info, **(extra or {})}}

    match type_msg:
        case TypeMsg.DEBUG:
            logger.debug(message, extra=record_extra)
        case TypeMsg.WARNING:
            logger.warning(message, extra=record_extra)
        case TypeMsg.ERROR:
            logger.error(message, extra=record_extra, exc_info=exc_info)
        case TypeMsg.CRITICAL:
            logger.critical(message, extra=record_extra, exc_info=exc_info)
        case _:
            logger.info(message, extra=record_extra)


async def log_info(
    message: str,
    *,
    type_msg: TypeMsg = TypeMsg.INFO,
    logger_name: str = DEFAULT_LOGGER_NAME,
    extra: dict[str, Any] | None = None,
) -> None:
    """
    Асинхронное логирование (по умолчанию INFO).

    Args:
        message: Сообщение для логирования
        type_msg: Уровень сообщения
        logger_name: Имя логгера
        extra: Дополнительные данные
    """
    _emit(message, type_msg, logger_name, extra, _get_caller_info())


async def log_debug(
    message: str,
    logger_name: str = DEFAULT_LOGGER_NAME,
    extra: dict[str, Any] | None = None,
) -> None:
    """Логирование DEBUG уровня."""
    _emit(message, TypeMsg.DEBUG, logger_name, extra, _get_caller_info())


async def log_warning(
    message: str,
    logger_name: str = DEFAULT_LOGGER_NAME,
    extra: dict[str, Any] | None = None,
) -> None:
    """Логирование WARNING уровня."""
    _emit(message, TypeMsg.WARNING, logger_name, extra, _get_caller_info())


async def log_error(
    message: str,
    logger_name: str = DEFAULT_LOGGER_NAME,
    extra: dict[str, Any] | None = None,
    exc_info: bool = False,
) -> None:
    """
    Логирование ERROR уровня.

    Args:
        message: Сообщение об ошибке
        logger_name: Имя логгера
        extra: Дополнительные данные
        exc_info: Включать ли трейсбек текущего исключения
    """
    _emit(message, TypeMsg.ERROR, logger_name, extra, _get_caller_info(), exc_info=exc_info)
