"""セキュリティヘッダーミドルウェア"""
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """
    JSON API 向けのセキュリティヘッダーを付与するミドルウェア
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        response = await call_next(request)

        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "no-referrer"

        # レスポンスはHTMLを返さないためスクリプト等は一切不要
        response.headers["Content-Security-Policy"] = "default-src 'none'; frame-ancestors 'none'"

        # ログ検索結果はキャッシュさせない
        if request.url.path.startswith("/api/"):
            response.headers["Cache-Control"] = "no-store"

        return response
