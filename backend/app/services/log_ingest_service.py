"""ログ取り込み: 単体登録と一括登録"""
from typing import Any

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.config import LOG_LEVELS
from app.core.errors import ValidationError, StorageError, translate_errors
from app.core.logging import get_logger, log_data
from app.models.log_record import LogRecord
from app.schemas.log import LogCreate

logger = get_logger(__name__)

REQUIRED_FIELDS_ERROR = "必須項目が不足しています: level, message, timestamp は必須です"


def validate_log(payload: Any, strict_levels: bool = False) -> LogCreate:
    """1件分の入力を検証。不備があれば ValidationError"""
    if not isinstance(payload, dict):
        raise ValidationError("ログはJSONオブジェクトで送信してください")

    missing = [f for f in ("level", "message", "timestamp") if payload.get(f) in (None, "")]
    if missing:
        raise ValidationError(REQUIRED_FIELDS_ERROR, f"不足: {', '.join(missing)}")

    try:
        candidate = LogCreate.model_validate(payload)
    except PydanticValidationError as e:
        raise ValidationError(translate_errors(e.errors()))

    if strict_levels and candidate.level not in LOG_LEVELS:
        raise ValidationError(f"レベルは {', '.join(LOG_LEVELS)} のいずれかを指定してください")
    return candidate


def create_log(db: Session, payload: Any, strict_levels: bool = False) -> LogRecord:
    """ログ1件登録"""
    candidate = validate_log(payload, strict_levels)

    log = candidate.to_model()
    try:
        db.add(log)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("ログ登録失敗")
        raise StorageError("ログの登録に失敗しました", str(e))

    try:
        db.refresh(log)
    except SQLAlchemyError as e:
        logger.exception("ログ登録後の再読込失敗")
        raise StorageError("ログは登録されましたが結果の取得に失敗しました", str(e))
    return log


def extract_batch(payload: Any) -> list:
    """{"logs": [...]} と素の配列の両方を受け付ける"""
    if isinstance(payload, dict):
        payload = payload.get("logs")
    if not isinstance(payload, list) or len(payload) == 0:
        raise ValidationError("ログの配列を指定してください")
    return payload


def create_logs_bulk(db: Session, payload: Any, strict_levels: bool = False) -> tuple[list[LogRecord], list[dict]]:
    """ログ一括登録

    不備のあるレコードはスキップして残りを登録する。DBエラー時はバッチ全体をロールバック。
    戻り値: (登録したレコード, スキップ情報 [{index, reason}])
    """
    entries = extract_batch(payload)

    skipped = []
    logs = []
    try:
        for index, entry in enumerate(entries):
            try:
                candidate = validate_log(entry, strict_levels)
            except ValidationError as e:
                skipped.append({"index": index, "reason": e.message or e.error})
                continue

            log = candidate.to_model()
            db.add(log)
            db.flush()
            logs.append(log)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("ログ一括登録失敗: ロールバックしました", extra=log_data(size=len(entries)))
        raise StorageError("ログの一括登録に失敗しました", str(e))

    # コミット済み。created_at など DB 側で決まる値を読み直す
    try:
        for log in logs:
            db.refresh(log)
    except SQLAlchemyError as e:
        logger.exception("ログ一括登録後の再読込失敗", extra=log_data(inserted=len(logs)))
        raise StorageError("ログは登録されましたが結果の取得に失敗しました", str(e))

    logger.info(
        f"ログ一括登録: {len(logs)}件登録, {len(skipped)}件スキップ",
        extra=log_data(inserted=len(logs), skipped=len(skipped)),
    )
    return logs, skipped
