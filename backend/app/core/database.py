from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, DeclarativeBase, Session
from starlette.requests import Request

from app.core.config import Settings


class Base(DeclarativeBase):
    pass


class Database:
    """エンジンとセッションファクトリを保持するストアハンドル

    起動時に生成して app.state に載せ、終了時に dispose する。
    """

    def __init__(self, url: str, *, pool_size: int = 10, max_overflow: int = 20,
                 pool_recycle: int = 3600, echo: bool = False):
        if url.startswith("sqlite"):
            # SQLite はスレッドをまたいで接続を共有するためチェックを外す
            self.engine: Engine = create_engine(
                url,
                connect_args={"check_same_thread": False},
                echo=echo,
            )
        else:
            self.engine = create_engine(
                url,
                pool_size=pool_size,
                max_overflow=max_overflow,
                pool_recycle=pool_recycle,
                pool_pre_ping=True,
                echo=echo,
            )
        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        return cls(
            settings.DATABASE_URL,
            pool_size=settings.DB_POOL_SIZE,
            max_overflow=settings.DB_MAX_OVERFLOW,
            pool_recycle=settings.DB_POOL_RECYCLE,
            echo=settings.DEBUG,
        )

    def session(self) -> Session:
        return self.SessionLocal()

    def create_all(self) -> None:
        """テーブル・インデックス作成 (既存ならスキップ)"""
        import app.models  # noqa: F401

        Base.metadata.create_all(bind=self.engine)

    def check_connection(self) -> bool:
        """DB接続チェック"""
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return True
        except Exception:
            return False

    def dispose(self) -> None:
        self.engine.dispose()


def get_database(request: Request) -> Database:
    """FastAPI依存関数: アプリに紐づくストアハンドル取得"""
    return request.app.state.database


def get_db(request: Request):
    """FastAPI依存関数: DBセッション取得"""
    db = get_database(request).session()
    try:
        yield db
    finally:
        db.close()
