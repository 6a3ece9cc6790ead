"""Configuration loading and structured logging helpers."""

from __future__ import annotations

import json
import logging

import pytest

from tools.observability import instrument_tool
from wardrobe_app.config import WardrobeConfig
from wardrobe_app.logging_config import (
    CORRELATION_ID,
    JsonFormatter,
    correlation_context,
    log_event,
    operation_context,
    redact_for_log,
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in ("APP_ENV", "APP_CONFIG_PATH", "WARDROBE_CONFIG_DIR", "WARDROBE_MAX_USES", "WARDROBE_LAYERING_THRESHOLD_C"):
        monkeypatch.delenv(key, raising=False)


def test_defaults() -> None:
    config = WardrobeConfig.from_env()
    assert config.max_uses == 3
    assert config.layering_threshold_c == 14.0
    assert config.near_duplicate_threshold == 95.0
    assert config.environment is None


def test_environment_overrides_and_bad_values(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("WARDROBE_MAX_USES", "5")
    monkeypatch.setenv("WARDROBE_LAYERING_THRESHOLD_C", "chilly")

    config = WardrobeConfig.from_env()

    assert config.max_uses == 5
    assert config.layering_threshold_c == 14.0


def test_yaml_file_is_merged_under_environment(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    config_dir = tmp_path / "environments"
    config_dir.mkdir()
    (config_dir / "staging.yaml").write_text(
        "# staging thresholds\nnear_duplicate_threshold: 90\nmax_uses: '4'\nwardrobe_db_path: \"/tmp/w.db\"\n"
    )
    monkeypatch.setenv("APP_ENV", "staging")
    monkeypatch.setenv("WARDROBE_CONFIG_DIR", str(config_dir))
    monkeypatch.setenv("WARDROBE_MAX_USES", "6")

    config = WardrobeConfig.from_env()

    assert config.environment == "staging"
    assert config.near_duplicate_threshold == 90.0
    assert config.wardrobe_db_path == "/tmp/w.db"
    assert config.max_uses == 6


def test_redaction_scrubs_identifiers_and_image_content() -> None:
    scrubbed = redact_for_log(
        {
            "user_id": "u-42",
            "payload": [b"\x89PNG", "data:image/png;base64,AAAA", "ab" * 32, "plain"],
            "count": 3,
        }
    )

    assert scrubbed == {
        "user_id": "[redacted]",
        "payload": ["[4 bytes]", "[redacted-data-url]", "abababab...", "plain"],
        "count": 3,
    }


def test_json_formatter_includes_event_and_correlation_id() -> None:
    record = logging.LogRecord("wardrobe", logging.INFO, __file__, 1, "item_saved", None, None)
    record.event = "item_saved"
    record.item_count = 2

    with correlation_context("corr-1"):
        payload = json.loads(JsonFormatter().format(record))

    assert payload["event"] == "item_saved"
    assert payload["correlation_id"] == "corr-1"
    assert payload["item_count"] == 2
    assert payload["level"] == "INFO"


def test_correlation_context_restores_previous_value() -> None:
    with correlation_context("outer"):
        with correlation_context("inner"):
            assert CORRELATION_ID.get() == "inner"
        assert CORRELATION_ID.get() == "outer"


def test_operation_contexts_get_separate_ids() -> None:
    token = CORRELATION_ID.set(None)
    try:
        with operation_context("first") as first_id:
            assert CORRELATION_ID.get() == first_id
        assert CORRELATION_ID.get() is None

        with operation_context("second") as second_id:
            pass

        assert first_id != second_id
        assert CORRELATION_ID.get() is None
    finally:
        CORRELATION_ID.reset(token)


def test_log_event_outside_a_context_does_not_bind_an_id(caplog: pytest.LogCaptureFixture) -> None:
    token = CORRELATION_ID.set(None)
    logger = logging.getLogger("wardrobe.test")
    try:
        with caplog.at_level(logging.INFO, logger="wardrobe.test"):
            log_event(logger, logging.INFO, "usage_reset")
        assert caplog.records[-1].correlation_id is None
        assert CORRELATION_ID.get() is None
    finally:
        CORRELATION_ID.reset(token)


def test_log_event_attaches_structured_fields(caplog: pytest.LogCaptureFixture) -> None:
    logger = logging.getLogger("wardrobe.test")
    with caplog.at_level(logging.INFO, logger="wardrobe.test"):
        log_event(logger, logging.INFO, "outfit_saved", user_id="u-1", items=3, correlation_id="c-9")

    record = caplog.records[-1]
    assert record.event == "outfit_saved"
    assert record.correlation_id == "c-9"
    assert record.user_id == "[redacted]"
    assert record.items == 3


def test_instrument_tool_logs_failures(caplog: pytest.LogCaptureFixture) -> None:
    @instrument_tool("explode")
    def explode(reason: str) -> None:
        raise RuntimeError(reason)

    with caplog.at_level(logging.INFO, logger="tools.observability"):
        with pytest.raises(RuntimeError):
            explode(reason="boom")

    events = [getattr(record, "event", None) for record in caplog.records]
    assert "tool_call_started" in events
    assert "tool_call_failed" in events
