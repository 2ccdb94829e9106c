# src/services/reward_tracker/app.py
"""
FastAPI приложение трекера наград NACKL.

Endpoints:
- GET /health - проверка здоровья
- GET /reward?address=<addr> - история наград аккаунта (заголовок X-Telegram-Init-Data обязателен)
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Annotated, Any

from aiogram import Bot
from fastapi import Depends, FastAPI, Header, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from src.common.logger import log_error, log_info, setup_logging
from src.config import Settings, settings
from src.infra.code_hash_cache import get_code_hash_cache
from src.infra.graphql_client import GraphQLClient
from src.infra.telegram_membership import TelegramMembershipChecker
from src.services.reward_tracker.dependencies import (
    cleanup_dependencies,
    get_reward_service,
    init_dependencies,
)
from src.services.reward_tracker.errors import InternalError, RewardTrackerError
from src.services.reward_tracker.paginator import PaginationPolicy
from src.services.reward_tracker.service import RewardTrackerService
from src.shared.models.common import ErrorResponse, HealthStatus


SERVICE_NAME = "reward_tracker"


def build_reward_service(
    config: Settings,
    graphql: GraphQLClient,
    membership: TelegramMembershipChecker,
) -> RewardTrackerService:
    """Собрать сервис из настроек."""
    return RewardTrackerService(
        graphql=graphql,
        membership=membership,
        cache=get_code_hash_cache(),
        bot_token=config.telegram.BOT_TOKEN,
        known_code_hash=config.blockchain.KNOWN_CODE_HASH,
        invite_link=config.telegram.PREMIUM_INVITE_LINK,
        policy=PaginationPolicy(
            page_size=config.pagination.PAGE_SIZE,
            max_messages=config.pagination.MAX_MESSAGES,
            max_iterations=config.pagination.MAX_ITERATIONS,
            reward_currency=config.blockchain.REWARD_CURRENCY,
            reward_decimals=config.blockchain.REWARD_DECIMALS,
        ),
        batch_size=config.pagination.CODE_HASH_BATCH_SIZE,
        init_data_max_age=config.telegram.INIT_DATA_MAX_AGE,
    )


# === LIFESPAN ===

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Жизненный цикл приложения."""
    setup_logging()

    graphql = GraphQLClient(
        url=settings.blockchain.GRAPHQL_URL,
        timeout=settings.blockchain.GRAPHQL_TIMEOUT,
    )

    bot = Bot(token=settings.telegram.BOT_TOKEN) if settings.telegram.BOT_TOKEN else None
    membership = TelegramMembershipChecker(bot, settings.telegram.PREMIUM_CHANNEL_ID)

    await init_dependencies(
        graphql=graphql,
        membership=membership,
        reward_service=build_reward_service(settings, graphql, membership),
    )
    await log_info(
        "Reward tracker запущен",
        extra={"graphql_url": settings.blockchain.GRAPHQL_URL, "premium_gate": bot is not None},
    )

    yield

    await cleanup_dependencies()
    await log_info("Reward tracker остановлен")


# === APP ===

app = FastAPI(
    title="NACKL Reward Tracker",
    description="История наград (тапов) аккаунта Acki Nacki для Telegram Mini App.",
    version=settings.system.VERSION,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# CORS для Mini App
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Mini App открывается с домена хостинга фронтенда
    allow_methods=["GET"],
    allow_headers=["*"],
)


@app.exception_handler(RewardTrackerError)
async def reward_tracker_error_handler(request: Request, exc: RewardTrackerError) -> JSONResponse:
    """Все ошибки отдаются как {"error": "<сообщение>"}."""
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(error=exc.message).model_dump(),
    )


# === HEALTH CHECK ===

@app.get("/health", response_model=HealthStatus, tags=["Health"])
async def health_check() -> HealthStatus:
    """Проверка здоровья сервиса."""
    return HealthStatus(
        status="healthy",
        service=SERVICE_NAME,
        version=settings.system.VERSION,
    )


# === REWARDS ===

@app.get("/reward", tags=["Rewards"])
@app.get("/api/reward", include_in_schema=False)
async def get_reward(
    service: Annotated[RewardTrackerService, Depends(get_reward_service)],
    address: str = Query(default=""),
    x_telegram_init_data: Annotated[str | None, Header(alias="X-Telegram-Init-Data")] = None,
) -> dict[str, Any]:
    """
    История наград аккаунта.

    Возвращает баланс, количество и сумму наград и тапы от новых к старым.
    """
    try:
        report = await service.get_reward_report(address, x_telegram_init_data)
    except RewardTrackerError:
        raise
    except Exception as e:
        await log_error(
            f"Не удалось собрать отчёт по наградам: {e}",
            extra={"address": address},
            exc_info=True,
        )
        raise InternalError(str(e)) from e

    return report.to_response()


# === STARTUP ===

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.deployment.REWARD_TRACKER_HOST, port=settings.deployment.REWARD_TRACKER_PORT)
