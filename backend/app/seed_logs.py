"""サンプルログ投入スクリプト: python -m app.seed_logs"""
import sys

from app.core.config import settings
from app.core.database import Database
from app.core.errors import StorageError
from app.services.log_ingest_service import create_logs_bulk

SAMPLE_LOGS = [
    {
        "level": "info",
        "message": "Application started successfully",
        "resourceId": "server-1",
        "timestamp": "2024-01-01T10:00:00Z",
        "traceId": "trace-abc123",
        "spanId": "span-001",
        "commit": "abc123def456",
        "metadata": {"environment": "production", "version": "1.0.0"},
    },
    {
        "level": "error",
        "message": "Failed to connect to database",
        "resourceId": "server-1",
        "timestamp": "2024-01-01T10:05:00Z",
        "traceId": "trace-abc123",
        "spanId": "span-002",
        "commit": "abc123def456",
        "metadata": {"errorCode": "DB_CONN_ERR", "retryCount": 3},
    },
    {
        "level": "warn",
        "message": "High memory usage detected",
        "resourceId": "server-2",
        "timestamp": "2024-01-01T10:10:00Z",
        "traceId": "trace-xyz789",
        "spanId": "span-003",
        "commit": "def456ghi789",
        "metadata": {"memoryUsage": "85%", "threshold": "80%"},
    },
    {
        "level": "info",
        "message": "User authentication successful",
        "resourceId": "auth-service",
        "timestamp": "2024-01-01T10:15:00Z",
        "traceId": "trace-usr001",
        "spanId": "span-004",
        "commit": "abc123def456",
        "metadata": {"userId": "user-123", "method": "oauth"},
    },
    {
        "level": "debug",
        "message": "Processing request",
        "resourceId": "api-gateway",
        "timestamp": "2024-01-01T10:20:00Z",
        "traceId": "trace-req001",
        "spanId": "span-005",
        "commit": "def456ghi789",
        "metadata": {"endpoint": "/api/users", "method": "GET"},
    },
]


def main() -> int:
    database = Database.from_settings(settings)
    database.create_all()
    db = database.session()
    try:
        logs, _ = create_logs_bulk(db, SAMPLE_LOGS)
        for log in logs:
            print(f"登録: id={log.id} [{log.level}] {log.message}")
        print(f"サンプルログ投入完了: {len(logs)}件")
        return 0
    except StorageError as e:
        print(f"サンプルログ投入失敗: {e.message}", file=sys.stderr)
        return 1
    finally:
        db.close()
        database.dispose()


if __name__ == "__main__":
    sys.exit(main())
