from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel
from typing import Any, Optional
from datetime import datetime, timezone

from app.models.log_record import LogRecord


def parse_timestamp(value: Any) -> datetime:
    """ISO-8601 文字列またはエポックミリ秒を naive UTC の datetime に変換

    日付のみ ("2024-01-01") は UTC の 0 時として扱う。
    """
    if isinstance(value, bool):
        raise ValueError("日時として解釈できません")
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, (int, float)):
        try:
            dt = datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            raise ValueError("日時として解釈できません")
    elif isinstance(value, str) and value.strip():
        try:
            dt = datetime.fromisoformat(value.strip())
        except ValueError:
            raise ValueError("日時として解釈できません")
    else:
        raise ValueError("日時として解釈できません")

    if dt.tzinfo is not None:
        # 0001-01-01T00:00:00+01:00 のように UTC 換算で範囲外になる値
        try:
            dt = dt.astimezone(timezone.utc).replace(tzinfo=None)
        except OverflowError:
            raise ValueError("日時として解釈できません")
    return dt


def format_timestamp(dt: Optional[datetime]) -> Optional[str]:
    if dt is None:
        return None
    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc).replace(tzinfo=None)
    return dt.isoformat(timespec="milliseconds") + "Z"


class LogCreate(BaseModel):
    """取り込み対象の1レコード (camelCase)"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    level: str = Field(min_length=1)
    message: str = Field(min_length=1)
    timestamp: datetime
    resource_id: Optional[str] = None
    trace_id: Optional[str] = None
    span_id: Optional[str] = None
    commit: Optional[str] = None
    metadata: Optional[dict[str, Any]] = None

    @field_validator("timestamp", mode="before")
    @classmethod
    def _parse_timestamp(cls, v):
        return parse_timestamp(v)

    @field_validator("level", "message", mode="before")
    @classmethod
    def _number_to_text(cls, v):
        # 数値はテキストとして保存 (真偽値は対象外)
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return v

    @field_validator("resource_id", "trace_id", "span_id", "commit", mode="before")
    @classmethod
    def _empty_to_none(cls, v):
        # 空文字は未指定として null で保存
        if v == "":
            return None
        return v

    def to_model(self) -> LogRecord:
        return LogRecord(
            level=self.level,
            message=self.message,
            resource_id=self.resource_id,
            timestamp=self.timestamp,
            trace_id=self.trace_id,
            span_id=self.span_id,
            commit=self.commit,
            metadata_=self.metadata,
        )


def serialize_log(log: LogRecord) -> dict:
    """保存済みレコードをレスポンス用dictに変換 (カラム名そのまま)"""
    return {
        "id": log.id,
        "level": log.level,
        "message": log.message,
        "resource_id": log.resource_id,
        "timestamp": format_timestamp(log.timestamp),
        "trace_id": log.trace_id,
        "span_id": log.span_id,
        "commit": log.commit,
        "metadata": log.metadata_,
        "created_at": format_timestamp(log.created_at),
    }
