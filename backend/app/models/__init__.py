# 全モデルをインポート (Alembic autogenerate用)
from app.models.log_record import LogRecord

__all__ = [
    "LogRecord",
]
