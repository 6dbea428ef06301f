"""ログ検索条件の組み立て

指定された条件だけを型付きの述語として積み上げ、AND で結合して
SQLAlchemy のクエリに適用する。値は全てバインドパラメータとして渡る。
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from sqlalchemy import and_, or_
from sqlalchemy.orm import Query
from sqlalchemy.sql.elements import ColumnElement

from app.models.log_record import LogRecord


@dataclass(frozen=True)
class Equals:
    """カラム完全一致"""

    column: str
    value: str

    def clause(self) -> ColumnElement:
        return getattr(LogRecord, self.column) == self.value


@dataclass(frozen=True)
class TimestampRange:
    """timestamp の範囲 (両端含む、片側省略可)"""

    start: Optional[datetime] = None
    end: Optional[datetime] = None

    def clause(self) -> ColumnElement:
        conds = []
        if self.start is not None:
            conds.append(LogRecord.timestamp >= self.start)
        if self.end is not None:
            conds.append(LogRecord.timestamp <= self.end)
        return and_(*conds)


@dataclass(frozen=True)
class TextSearch:
    """message または resource_id の部分一致 (大文字小文字区別なし)"""

    term: str

    def clause(self) -> ColumnElement:
        pattern = f"%{_escape_like(self.term)}%"
        return or_(
            LogRecord.message.ilike(pattern, escape="/"),
            LogRecord.resource_id.ilike(pattern, escape="/"),
        )


def _escape_like(term: str) -> str:
    # % と _ をリテラルとして扱う
    return term.replace("/", "//").replace("%", "/%").replace("_", "/_")


class LogFilterBuilder:
    """検索条件ビルダー

    使用例:
        builder = LogFilterBuilder().equals("level", "error").time_range(start, None)
        q = builder.apply(db.query(LogRecord))
    """

    def __init__(self):
        self._predicates: list = []

    @property
    def predicates(self) -> list:
        return list(self._predicates)

    def equals(self, column: str, value: Optional[str]) -> "LogFilterBuilder":
        if value:
            self._predicates.append(Equals(column, value))
        return self

    def time_range(self, start: Optional[datetime], end: Optional[datetime]) -> "LogFilterBuilder":
        if start is not None or end is not None:
            self._predicates.append(TimestampRange(start, end))
        return self

    def search(self, term: Optional[str]) -> "LogFilterBuilder":
        if term:
            self._predicates.append(TextSearch(term))
        return self

    def apply(self, query: Query) -> Query:
        if not self._predicates:
            return query
        return query.filter(and_(*(p.clause() for p in self._predicates)))


@dataclass
class LogFilters:
    """一覧検索の入力条件 (全て任意)"""

    level: Optional[str] = None
    resource_id: Optional[str] = None
    trace_id: Optional[str] = None
    commit: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    search: Optional[str] = None

    def builder(self) -> LogFilterBuilder:
        return (
            LogFilterBuilder()
            .equals("level", self.level)
            .equals("resource_id", self.resource_id)
            .equals("trace_id", self.trace_id)
            .equals("commit", self.commit)
            .time_range(self.start_date, self.end_date)
            .search(self.search)
        )
