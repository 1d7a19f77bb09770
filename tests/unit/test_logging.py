"""Tests for logging setup and payment-data redaction."""

from __future__ import annotations

import json
import logging
import sys

import pytest

from raspadinha.core.logging import (
    REDACTED,
    CorrelationFilter,
    JSONFormatter,
    RedactingFormatter,
    get_correlation_id,
    is_sensitive_key,
    redact_dict,
    redact_string,
    set_correlation_id,
    setup_logging,
)


def _record(msg: str, **extra: object) -> logging.LogRecord:
    record = logging.LogRecord("raspadinha.test", logging.INFO, __file__, 10, msg, (), None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestRedaction:
    @pytest.mark.parametrize("key", ["api_token", "SECRET_KEY", "Authorization"])
    def test_sensitive_keys(self, key: str) -> None:
        assert is_sensitive_key(key)

    @pytest.mark.parametrize("key", ["method", "amount", "tier_value", "ticket_id", "payment_id"])
    def test_game_keys_are_plain(self, key: str) -> None:
        assert not is_sensitive_key(key)

    def test_redact_dict_nested(self) -> None:
        data = {
            "method": "pix",
            "auth": {"token": "abc", "secret": "s3"},
            "items": [{"authorization": "x"}],
        }
        result = redact_dict(data)
        assert result["method"] == "pix"
        assert result["auth"] == {"token": REDACTED, "secret": REDACTED}
        assert result["items"] == [{"authorization": REDACTED}]

    def test_redact_key_value_pairs(self) -> None:
        text = redact_string("token=abc123 secret: hunter2")
        assert "abc123" not in text
        assert "hunter2" not in text
        assert text.count(REDACTED) == 2

    def test_game_log_lines_untouched(self) -> None:
        line = "Payment 1a2b3c4d approved: R$ 25,00 via PIX; ticket 4f2a prize 1000"
        assert redact_string(line) == line


class TestFormatters:
    def test_json_formatter(self) -> None:
        record = _record("Ticket 1a2b issued", correlation_id="abc123", tier="R$ 5,00")
        entry = json.loads(JSONFormatter().format(record))
        assert entry["level"] == "INFO"
        assert entry["logger"] == "raspadinha.test"
        assert entry["message"] == "Ticket 1a2b issued"
        assert entry["correlation_id"] == "abc123"
        assert entry["extra"] == {"tier": "R$ 5,00"}
        assert entry["source"]["line"] == 10

    def test_json_formatter_redacts_extra(self) -> None:
        entry = json.loads(JSONFormatter().format(_record("pay", api_token="t-999")))
        assert entry["extra"]["api_token"] == REDACTED

    def test_json_formatter_exception(self) -> None:
        try:
            raise ValueError("boom")
        except ValueError:
            record = _record("failed")
            record.exc_info = sys.exc_info()
        entry = json.loads(JSONFormatter().format(record))
        assert entry["exception"] == {"type": "ValueError", "message": "boom"}

    def test_text_formatter_redacts(self) -> None:
        out = RedactingFormatter().format(_record("retry with token=t-999"))
        assert "[INFO] raspadinha.test:" in out
        assert "t-999" not in out


class TestCorrelation:
    def test_filter_copies_context_id(self) -> None:
        set_correlation_id("req-42")
        record = _record("x")
        assert CorrelationFilter().filter(record) is True
        assert record.correlation_id == "req-42"  # type: ignore[attr-defined]
        assert get_correlation_id() == "req-42"


class TestSetupLogging:
    @pytest.fixture(autouse=True)
    def _restore_root(self):  # type: ignore[no-untyped-def]
        root = logging.getLogger()
        handlers, level = list(root.handlers), root.level
        yield
        root.handlers[:] = handlers
        root.setLevel(level)

    def test_json_handler(self) -> None:
        setup_logging(level="debug", log_format="json")
        root = logging.getLogger()
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, JSONFormatter)

    def test_text_handler(self) -> None:
        setup_logging(level="WARNING")
        root = logging.getLogger()
        assert root.level == logging.WARNING
        assert isinstance(root.handlers[0].formatter, RedactingFormatter)

    def test_unknown_level_falls_back_to_info(self) -> None:
        setup_logging(level="chatty")
        assert logging.getLogger().level == logging.INFO
