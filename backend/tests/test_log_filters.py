from datetime import datetime

from app.models.log_record import LogRecord
from app.services.log_filters import (
    Equals,
    LogFilterBuilder,
    LogFilters,
    TextSearch,
    TimestampRange,
)


def _add(db, **fields):
    base = {"level": "info", "message": "ok", "timestamp": datetime(2024, 1, 1, 10)}
    base.update(fields)
    db.add(LogRecord(**base))


class TestBuilder:
    def test_absent_values_add_no_predicates(self):
        builder = LogFilterBuilder().equals("level", None).equals("commit", "").search(None).time_range(None, None)
        assert builder.predicates == []

    def test_predicates_accumulate_in_order(self):
        start = datetime(2024, 1, 1)
        builder = LogFilters(level="error", commit="abc", start_date=start, search="db").builder()
        assert builder.predicates == [
            Equals("level", "error"),
            Equals("commit", "abc"),
            TimestampRange(start, None),
            TextSearch("db"),
        ]

    def test_values_are_bound_parameters(self):
        clause = Equals("level", "x' OR '1'='1").clause()
        compiled = clause.compile()
        assert "x' OR" not in str(compiled)
        assert "x' OR '1'='1" in compiled.params.values()


class TestApply:
    def test_no_filters_matches_all(self, db):
        for i in range(3):
            _add(db, message=f"m{i}")
        db.commit()
        q = LogFilterBuilder().apply(db.query(LogRecord))
        assert q.count() == 3

    def test_and_combination(self, db):
        _add(db, level="error", resource_id="api")
        _add(db, level="error", resource_id="worker")
        _add(db, level="info", resource_id="api")
        db.commit()
        q = LogFilters(level="error", resource_id="api").builder().apply(db.query(LogRecord))
        assert q.count() == 1

    def test_range_is_inclusive(self, db):
        _add(db, timestamp=datetime(2024, 1, 1, 9, 59, 59))
        _add(db, timestamp=datetime(2024, 1, 1, 10))
        _add(db, timestamp=datetime(2024, 1, 1, 11))
        _add(db, timestamp=datetime(2024, 1, 1, 11, 0, 1))
        db.commit()
        q = LogFilterBuilder().time_range(datetime(2024, 1, 1, 10), datetime(2024, 1, 1, 11)).apply(db.query(LogRecord))
        assert q.count() == 2

    def test_search_message_or_resource_case_insensitive(self, db):
        _add(db, message="Database connection LOST")
        _add(db, message="all good", resource_id="database-primary")
        _add(db, message="all good", resource_id="cache")
        db.commit()
        q = LogFilterBuilder().search("database").apply(db.query(LogRecord))
        assert q.count() == 2

    def test_search_wildcards_are_literal(self, db):
        _add(db, message="disk 100% full")
        _add(db, message="disk 1000 blocks")
        _add(db, message="snake_case name")
        _add(db, message="snakeXcase name")
        db.commit()
        assert LogFilterBuilder().search("100%").apply(db.query(LogRecord)).count() == 1
        assert LogFilterBuilder().search("snake_case").apply(db.query(LogRecord)).count() == 1
