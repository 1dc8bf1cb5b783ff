import logging

import pytest

from claim_ingest.logging.logger import Log, _FieldsFormatter


def _format(message: str, **fields: object) -> str:
    record = logging.makeLogRecord({"msg": message, "levelname": "INFO"})
    for key, value in fields.items():
        setattr(record, key, value)
    return _FieldsFormatter("[%(levelname)s] %(message)s").format(record)


class TestFieldsFormatter:
    def test_plain_message_without_fields(self) -> None:
        assert _format("hello") == "[INFO] hello"

    def test_appends_fields_sorted(self) -> None:
        line = _format("resolved", mirror="m1", address="cid1")
        assert line == "[INFO] resolved | address=cid1 mirror=m1"


class TestLog:
    def test_fields_reach_the_record(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.INFO, logger="claim_ingest"):
            Log.info("Content resolved", address="cid1")

        record = caplog.records[-1]
        assert record.getMessage() == "Content resolved"
        assert record.address == "cid1"

    def test_warning_level(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger="claim_ingest"):
            Log.warning("Mirror fetch failed")

        assert caplog.records[-1].levelno == logging.WARNING

    def test_debug_suppressed_at_info(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.INFO, logger="claim_ingest"):
            Log.debug("noisy")

        assert all(r.getMessage() != "noisy" for r in caplog.records)

    @pytest.mark.parametrize(
        ("level", "doc"),
        [
            ("info", "Log an info message."),
            ("error", "Log an error message."),
            ("warning", "Log a warning message."),
            ("debug", "Log a debug message."),
        ],
    )
    def test_level_methods_documented(self, level: str, doc: str) -> None:
        assert getattr(Log, level).__doc__ == doc
