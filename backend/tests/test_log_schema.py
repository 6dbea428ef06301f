from datetime import datetime

import pytest
from pydantic import ValidationError as PydanticValidationError

from app.schemas.log import LogCreate, parse_timestamp, format_timestamp


class TestParseTimestamp:
    def test_utc_z_suffix(self):
        assert parse_timestamp("2024-01-01T10:00:00Z") == datetime(2024, 1, 1, 10, 0, 0)

    def test_offset_converted_to_utc(self):
        assert parse_timestamp("2024-01-01T19:00:00+09:00") == datetime(2024, 1, 1, 10, 0, 0)

    def test_naive_kept_as_is(self):
        assert parse_timestamp("2024-01-01T10:00:00") == datetime(2024, 1, 1, 10, 0, 0)

    def test_date_only_is_midnight(self):
        assert parse_timestamp("2024-01-01") == datetime(2024, 1, 1)

    def test_epoch_millis(self):
        assert parse_timestamp(1704103200000) == datetime(2024, 1, 1, 10, 0, 0)

    @pytest.mark.parametrize("value", ["not a date", "", None, True, {"a": 1}])
    def test_invalid(self, value):
        with pytest.raises(ValueError):
            parse_timestamp(value)


def test_format_timestamp_appends_z():
    assert format_timestamp(datetime(2024, 1, 1, 10, 0, 0)) == "2024-01-01T10:00:00.000Z"
    assert format_timestamp(None) is None


class TestLogCreate:
    def test_camel_case_fields(self, sample_log):
        log = LogCreate.model_validate(sample_log)
        assert log.resource_id == "server-1"
        assert log.trace_id == "trace-abc123"
        assert log.span_id == "span-001"
        assert log.commit == "abc123def456"
        assert log.metadata == {"errorCode": "DB_CONN_ERR", "retryCount": 3}
        assert log.timestamp == datetime(2024, 1, 1, 10, 0, 0)

    def test_empty_optional_strings_become_none(self, make_log):
        log = LogCreate.model_validate(make_log(resourceId="", traceId="", spanId="", commit=""))
        assert log.resource_id is None
        assert log.trace_id is None
        assert log.span_id is None
        assert log.commit is None

    def test_unknown_fields_ignored(self, make_log):
        log = LogCreate.model_validate(make_log(hostname="web-1"))
        assert not hasattr(log, "hostname")

    def test_metadata_must_be_object(self, make_log):
        with pytest.raises(PydanticValidationError):
            LogCreate.model_validate(make_log(metadata=["a", "b"]))

    def test_bad_timestamp_rejected(self, make_log):
        with pytest.raises(PydanticValidationError):
            LogCreate.model_validate(make_log(timestamp="yesterday"))

    def test_to_model_copies_fields(self, sample_log):
        record = LogCreate.model_validate(sample_log).to_model()
        assert record.level == "error"
        assert record.message == "db down"
        assert record.resource_id == "server-1"
        assert record.metadata_ == {"errorCode": "DB_CONN_ERR", "retryCount": 3}
        assert record.id is None


class TestOutOfRangeTimestamp:
    @pytest.mark.parametrize("value", ["0001-01-01T00:00:00+01:00", "9999-12-31T23:59:59-01:00"])
    def test_utc_conversion_out_of_range(self, value):
        with pytest.raises(ValueError):
            parse_timestamp(value)

    def test_rejected_by_schema(self, make_log):
        with pytest.raises(PydanticValidationError):
            LogCreate.model_validate(make_log(timestamp="0001-01-01T00:00:00+01:00"))


class TestNumericText:
    def test_numeric_level_and_message_stored_as_text(self, make_log):
        log = LogCreate.model_validate(make_log(level=5, message=404))
        assert log.level == "5"
        assert log.message == "404"

    def test_boolean_level_rejected(self, make_log):
        with pytest.raises(PydanticValidationError):
            LogCreate.model_validate(make_log(level=True))
