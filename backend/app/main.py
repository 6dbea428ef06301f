from contextlib import asynccontextmanager
from typing import Optional
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from slowapi.errors import RateLimitExceeded
from app.core.config import Settings, settings as default_settings
from app.core.database import Database
from app.core.errors import (
    LogServiceError,
    service_error_handler,
    request_validation_error_handler,
    unhandled_error_handler,
)
from app.core.logging import setup_logging, get_logger
from app.core.security_headers import SecurityHeadersMiddleware
from app.core.rate_limit import limiter, rate_limit_exceeded_handler
from app.routers import health, logs

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """アプリケーションライフサイクル管理"""
    settings: Settings = app.state.settings
    database: Database = app.state.database

    setup_logging(debug=settings.DEBUG)
    if settings.DB_AUTO_CREATE:
        database.create_all()
        logger.info("logsテーブル初期化完了")
    logger.info("アプリケーション起動")
    yield
    database.dispose()
    logger.info("アプリケーション終了")


def create_app(settings: Optional[Settings] = None, database: Optional[Database] = None) -> FastAPI:
    """アプリケーションファクトリ"""
    settings = settings or default_settings

    app = FastAPI(
        title=settings.SITE_NAME,
        lifespan=lifespan,
        docs_url="/api/docs" if settings.DEBUG else None,
        redoc_url="/api/redoc" if settings.DEBUG else None,
    )
    app.state.settings = settings
    app.state.database = database or Database.from_settings(settings)

    # レート制限設定
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)

    # エラーレスポンスは全て {"error": ..., "message": ...}
    app.add_exception_handler(LogServiceError, service_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    # ミドルウェア (登録順序: 後に登録したものが先に実行される)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins_list,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    # ルーター登録
    app.include_router(health.router)
    app.include_router(logs.router)

    return app


app = create_app()
