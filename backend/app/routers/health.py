from fastapi import APIRouter, Depends

from app.core.database import Database, get_database

router = APIRouter()


@router.get("/health")
@router.get("/api/health")
async def health_check(database: Database = Depends(get_database)):
    """ヘルスチェックエンドポイント (プロセス稼働中は常に200)"""
    db_ok = database.check_connection()

    return {
        "status": "ok",
        "message": "Log ingestion service is running",
        "db": "connected" if db_ok else "disconnected",
    }
