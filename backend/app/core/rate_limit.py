"""レート制限設定（slowapi使用）

制限値と有効/無効はリクエストが属するアプリの settings (app.state.settings) から読む。
"""
from slowapi import Limiter
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded
from starlette.requests import Request
from starlette.responses import JSONResponse

# キー "<クライアントIP>@<制限値>" の区切り
_KEY_SEP = "@"


def get_client_ip(request: Request) -> str:
    """
    クライアントIPアドレスを取得
    プロキシ経由の場合はX-Forwarded-Forヘッダーを参照
    """
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return get_remote_address(request)


def ingest_rate_key(request: Request) -> str:
    """取り込み用のキー: クライアントIPにアプリの制限値を添える"""
    return f"{get_client_ip(request)}{_KEY_SEP}{request.app.state.settings.INGEST_RATE_LIMIT}"


def ingest_rate_limit(key: str) -> str:
    """キーから制限値を取り出す (slowapi はキーを渡して呼ぶ)"""
    return key.rsplit(_KEY_SEP, 1)[1]


def ingest_rate_limit_disabled(request: Request) -> bool:
    return not request.app.state.settings.RATE_LIMIT_ENABLED


# 取り込みエンドポイントに適用 (参照系は制限なし)
limiter = Limiter(
    key_func=get_client_ip,
    storage_uri="memory://",
)


def limit_ingest():
    """取り込みエンドポイント用デコレータ"""
    return limiter.limit(
        ingest_rate_limit,
        key_func=ingest_rate_key,
        exempt_when=ingest_rate_limit_disabled,
    )


async def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """
    レート制限超過時のカスタムエラーハンドラ
    """
    return JSONResponse(
        status_code=429,
        content={
            "error": "リクエスト回数が上限を超えました。しばらく待ってから再度お試しください。",
            "retry_after": exc.detail,
        },
    )
