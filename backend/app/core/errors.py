"""サービス例外とJSONエラーレスポンス"""
from typing import Optional

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.core.logging import get_logger

logger = get_logger(__name__)


class LogServiceError(Exception):
    """サービス例外の基底: status_code と error 文言を持つ"""

    status_code = 500

    def __init__(self, error: str, message: Optional[str] = None):
        super().__init__(error)
        self.error = error
        self.message = message

    def to_dict(self) -> dict:
        body = {"error": self.error}
        if self.message:
            body["message"] = self.message
        return body


class ValidationError(LogServiceError):
    """入力不備 (400)"""

    status_code = 400


class NotFoundError(LogServiceError):
    """対象なし (404)"""

    status_code = 404


class StorageError(LogServiceError):
    """ストア障害・トランザクション失敗 (500)"""

    status_code = 500


# --- バリデーションエラー文言 ---
_FIELD_JA = {
    "level": "レベル",
    "message": "メッセージ",
    "timestamp": "タイムスタンプ",
    "resourceId": "リソースID",
    "traceId": "トレースID",
    "spanId": "スパンID",
    "commit": "コミット",
    "metadata": "メタデータ",
    "startDate": "開始日時",
    "endDate": "終了日時",
    "page": "ページ",
    "limit": "件数",
}


def translate_error(err: dict) -> str:
    """pydantic のエラー1件を表示用文言に変換"""
    t = err.get("type", "")
    ctx = err.get("ctx") or {}
    loc = err.get("loc", [])
    field = str(loc[-1]) if loc else ""
    fj = _FIELD_JA.get(field, field)

    if t == "missing":
        return f"{fj}は必須です"
    if t == "string_too_short":
        return f"{fj}は必須です"
    if t in ("int_parsing", "int_type"):
        return f"{fj}は数値で入力してください"
    if t == "greater_than_equal":
        return f"{fj}は{ctx.get('ge', '')}以上の値を入力してください"
    if t == "less_than_equal":
        return f"{fj}は{ctx.get('le', '')}以下の値を入力してください"
    if t == "string_type":
        return f"{fj}は文字列で入力してください"
    if t in ("dict_type", "model_type"):
        return f"{fj}はJSONオブジェクトで入力してください"
    if t == "json_invalid":
        return "リクエストボディが不正なJSONです"
    if t == "value_error":
        return f"{fj}: {err.get('msg', '').removeprefix('Value error, ')}"
    return f"{fj}: 入力値が不正です"


def translate_errors(errors) -> str:
    return "、".join(translate_error(e) for e in errors)


async def service_error_handler(request: Request, exc: LogServiceError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{exc.error}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def request_validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"error": translate_errors(exc.errors())})


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """想定外の例外も JSON で返す"""
    logger.exception(f"想定外のエラー: {request.method} {request.url.path}", exc_info=exc)
    return JSONResponse(
        status_code=500,
        content={"error": "サーバー内部でエラーが発生しました", "message": str(exc)},
    )
