import pytest
from fastapi.testclient import TestClient

from app.core.config import Settings
from app.core.database import Database
from app.main import create_app


@pytest.fixture
def sample_log():
    return {
        "level": "error",
        "message": "db down",
        "timestamp": "2024-01-01T10:00:00Z",
        "resourceId": "server-1",
        "traceId": "trace-abc123",
        "spanId": "span-001",
        "commit": "abc123def456",
        "metadata": {"errorCode": "DB_CONN_ERR", "retryCount": 3},
    }


@pytest.fixture
def test_settings(tmp_path):
    """一時ファイルのSQLiteを使うテスト用設定"""
    return Settings(
        DATABASE_URL=f"sqlite:///{tmp_path / 'logs.db'}",
        DB_AUTO_CREATE=True,
        QUERY_DEFAULT_LIMIT=100,
        QUERY_MAX_LIMIT=1000,
        STRICT_LEVELS=False,
        DEBUG=False,
    )


@pytest.fixture
def database(test_settings):
    database = Database.from_settings(test_settings)
    database.create_all()
    yield database
    database.dispose()


@pytest.fixture
def db(database):
    session = database.session()
    yield session
    session.close()


@pytest.fixture
def app(test_settings, database):
    return create_app(test_settings, database)


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def make_log():
    """必須項目入りのログ入力を作るファクトリ"""

    def _make(**overrides):
        log = {
            "level": "info",
            "message": "request handled",
            "timestamp": "2024-01-01T10:00:00Z",
        }
        log.update(overrides)
        return log

    return _make
