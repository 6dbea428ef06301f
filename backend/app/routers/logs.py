"""ログ取り込み・検索API"""
from fastapi import APIRouter, Body, Depends, Query, Request
from sqlalchemy.orm import Session
from typing import Any, Optional

from app.core.database import get_db
from app.core.errors import ValidationError, NotFoundError
from app.core.rate_limit import limit_ingest
from app.schemas.log import parse_timestamp, serialize_log
from app.services import log_ingest_service, log_query_service
from app.services.log_filters import LogFilters

router = APIRouter(prefix="/api/logs", tags=["logs"])


def _parse_date_param(value: Optional[str], name: str):
    if not value:
        return None
    try:
        return parse_timestamp(value)
    except ValueError:
        raise ValidationError(f"{name} は日時として解釈できません: {value}")


def _settings(request: Request):
    return request.app.state.settings


@router.post("", status_code=201)
@limit_ingest()
async def ingest_log(
    request: Request,
    payload: Any = Body(None),
    db: Session = Depends(get_db),
):
    """ログ1件登録"""
    log = log_ingest_service.create_log(db, payload, _settings(request).STRICT_LEVELS)
    return {"success": True, "log": serialize_log(log)}


@router.post("/bulk", status_code=201)
@limit_ingest()
async def ingest_logs_bulk(
    request: Request,
    payload: Any = Body(None),
    db: Session = Depends(get_db),
):
    """ログ一括登録"""
    logs, skipped = log_ingest_service.create_logs_bulk(db, payload, _settings(request).STRICT_LEVELS)
    return {
        "success": True,
        "count": len(logs),
        "logs": [serialize_log(l) for l in logs],
        "skipped": skipped,
    }


@router.get("")
async def list_logs(
    request: Request,
    level: Optional[str] = None,
    resource_id: Optional[str] = Query(None, alias="resourceId"),
    trace_id: Optional[str] = Query(None, alias="traceId"),
    commit: Optional[str] = None,
    start_date: Optional[str] = Query(None, alias="startDate"),
    end_date: Optional[str] = Query(None, alias="endDate"),
    search: Optional[str] = None,
    page: int = Query(1, ge=1),
    limit: Optional[int] = Query(None, ge=1),
    db: Session = Depends(get_db),
):
    """ログ一覧"""
    settings = _settings(request)
    if limit is None:
        limit = settings.QUERY_DEFAULT_LIMIT
    if limit > settings.QUERY_MAX_LIMIT:
        raise ValidationError(f"件数は{settings.QUERY_MAX_LIMIT}以下の値を入力してください")

    filters = LogFilters(
        level=level,
        resource_id=resource_id,
        trace_id=trace_id,
        commit=commit,
        start_date=_parse_date_param(start_date, "startDate"),
        end_date=_parse_date_param(end_date, "endDate"),
        search=search,
    )
    logs, pagination = log_query_service.list_logs(db, filters, page, limit)
    return {
        "success": True,
        "logs": [serialize_log(l) for l in logs],
        "pagination": pagination,
    }


# /{log_id} より先に登録すること
@router.get("/stats")
async def log_stats(
    start_date: Optional[str] = Query(None, alias="startDate"),
    end_date: Optional[str] = Query(None, alias="endDate"),
    db: Session = Depends(get_db),
):
    """レベル別件数"""
    stats = log_query_service.get_level_stats(
        db,
        _parse_date_param(start_date, "startDate"),
        _parse_date_param(end_date, "endDate"),
    )
    return {"success": True, "stats": stats}


@router.get("/{log_id}")
async def get_log(log_id: str, db: Session = Depends(get_db)):
    """ログ詳細"""
    # 数値以外・範囲外のIDは該当なし扱い
    if not (log_id.isascii() and log_id.isdigit()) or len(log_id) > 18:
        raise NotFoundError("ログが見つかりません")
    log = log_query_service.get_log(db, int(log_id))
    return {"success": True, "log": serialize_log(log)}
