from pydantic_settings import BaseSettings


LOG_LEVELS = ("error", "warn", "info", "debug")


class Settings(BaseSettings):
    """アプリケーション設定"""

    # データベース
    DATABASE_URL: str = "mysql+pymysql://loguser:logpassword@db:3306/logs_db?charset=utf8mb4"
    DB_POOL_SIZE: int = 10
    DB_MAX_OVERFLOW: int = 20
    DB_POOL_RECYCLE: int = 3600
    # 起動時に logs テーブルを作成 (Alembic 運用時は false)
    DB_AUTO_CREATE: bool = True

    # サービス設定
    SITE_NAME: str = "Log Ingestion Service"
    ALLOWED_ORIGINS: str = "http://localhost:3000,http://localhost:5000"

    # 検索
    QUERY_DEFAULT_LIMIT: int = 100
    QUERY_MAX_LIMIT: int = 1000

    # レベルを error/warn/info/debug に限定するか
    STRICT_LEVELS: bool = False

    # レート制限
    RATE_LIMIT_ENABLED: bool = True
    INGEST_RATE_LIMIT: str = "600/minute"

    # 環境
    ENV: str = "development"
    DEBUG: bool = False

    @property
    def allowed_origins_list(self) -> list[str]:
        return [o.strip() for o in self.ALLOWED_ORIGINS.split(",") if o.strip()]

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
