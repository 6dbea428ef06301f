from sqlalchemy import Column, Integer, String, Text, DateTime, JSON, func
from app.core.database import Base


class LogRecord(Base):
    __tablename__ = "logs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    level = Column(String(50), nullable=False, index=True, comment="error/warn/info/debug")
    message = Column(Text, nullable=False)
    resource_id = Column(String(255), nullable=True, index=True)
    timestamp = Column(DateTime, nullable=False, index=True, comment="イベント発生日時 (UTC)")
    trace_id = Column(String(255), nullable=True, index=True)
    span_id = Column(String(255), nullable=True)
    commit = Column(String(255), nullable=True, index=True)
    metadata_ = Column("metadata", JSON, nullable=True, comment="任意のJSONオブジェクト")
    created_at = Column(DateTime, nullable=False, server_default=func.now())
