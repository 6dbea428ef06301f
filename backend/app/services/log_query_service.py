"""ログ検索: 一覧 (ページング)、レベル別集計、単体取得"""
import math
from datetime import datetime
from typing import Optional

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.errors import NotFoundError, StorageError
from app.core.logging import get_logger
from app.models.log_record import LogRecord
from app.services.log_filters import LogFilters, LogFilterBuilder

logger = get_logger(__name__)


def list_logs(db: Session, filters: LogFilters, page: int = 1, limit: int = 100) -> tuple[list[LogRecord], dict]:
    """条件に一致するログを timestamp 降順で1ページ分取得

    戻り値: (ログ, {page, limit, total, totalPages})
    """
    q = filters.builder().apply(db.query(LogRecord))

    offset = (page - 1) * limit
    try:
        total = q.order_by(None).count()
        # 最終ページより後ろは問い合わせずに空 (offset がDBの整数範囲を超えうる)
        logs = []
        if offset < total:
            logs = (
                q.order_by(LogRecord.timestamp.desc(), LogRecord.id.desc())
                .offset(offset)
                .limit(limit)
                .all()
            )
    except SQLAlchemyError as e:
        logger.exception("ログ検索失敗")
        raise StorageError("ログの検索に失敗しました", str(e))

    pagination = {
        "page": page,
        "limit": limit,
        "total": total,
        "totalPages": math.ceil(total / limit),
    }
    return logs, pagination


def get_level_stats(db: Session, start_date: Optional[datetime] = None,
                    end_date: Optional[datetime] = None) -> list[dict]:
    """レベル別件数 (件数降順)"""
    count_col = func.count(LogRecord.id).label("count")
    q = db.query(LogRecord.level, count_col)
    q = LogFilterBuilder().time_range(start_date, end_date).apply(q)

    try:
        rows = q.group_by(LogRecord.level).order_by(count_col.desc(), LogRecord.level).all()
    except SQLAlchemyError as e:
        logger.exception("ログ集計失敗")
        raise StorageError("統計の取得に失敗しました", str(e))

    return [{"level": level, "count": count} for level, count in rows]


def get_log(db: Session, log_id: int) -> LogRecord:
    """ログ1件取得。存在しなければ NotFoundError"""
    try:
        log = db.query(LogRecord).filter(LogRecord.id == log_id).first()
    except SQLAlchemyError as e:
        logger.exception("ログ取得失敗")
        raise StorageError("ログの取得に失敗しました", str(e))

    if not log:
        raise NotFoundError("ログが見つかりません")
    return log
