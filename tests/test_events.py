"""
Tests for the event logging utility.
"""

import json
from datetime import datetime
from unittest.mock import patch

import pytest

from recipebook.events import (
    log_comment_added,
    log_event,
    log_rating_submitted,
    log_recipe_created,
    log_recipe_viewed,
    log_search_performed,
)


def _records(path):
    with open(path, "r", encoding="utf-8") as f:
        return [json.loads(line) for line in f if line.strip()]


class TestEventLogging:
    """Test event logging functionality."""

    def test_log_event_writes_valid_json(self, event_log):
        """Test that log_event writes valid JSON lines."""
        log_event("test_event", user_id="user_123", payload={"key": "value", "number": 42})

        records = _records(event_log)
        assert len(records) == 1
        record = records[0]
        assert set(record) == {"ts", "event", "user_id", "payload"}
        assert record["event"] == "test_event"
        assert record["user_id"] == "user_123"
        assert record["payload"] == {"key": "value", "number": 42}
        # Timestamp is ISO-8601 with a timezone
        assert datetime.fromisoformat(record["ts"]).tzinfo is not None

    def test_log_event_handles_none_user_and_payload(self, event_log):
        """Test that log_event handles a missing user and payload."""
        log_event("test_event", user_id=None, payload=None)

        record = _records(event_log)[0]
        assert record["user_id"] is None
        assert record["payload"] == {}

    def test_log_event_appends_multiple_events(self, event_log):
        """Test that log_event appends multiple events correctly."""
        for i in range(1, 4):
            log_event(f"event{i}", user_id="u", payload={"num": i})

        records = _records(event_log)
        assert [r["event"] for r in records] == ["event1", "event2", "event3"]

    def test_log_event_creates_parent_directory(self, tmp_path):
        """Test that a missing log directory is created."""
        nested = tmp_path / "logs" / "events.log"
        with patch("recipebook.events.EVENT_LOG_FILE", nested):
            log_event("test_event", user_id="u")
        assert nested.exists()

    def test_log_event_fails_silently_on_error(self):
        """Test that log_event doesn't raise exceptions on file errors."""
        with patch("pathlib.Path.open", side_effect=PermissionError("Access denied")):
            log_event("test_event", user_id="u", payload={"test": True})

        with patch("recipebook.events.json.dumps", side_effect=TypeError("not serializable")):
            log_event("test_event", user_id="u", payload={"test": True})

    def test_event_logging_never_raises_with_odd_inputs(self):
        """Test that unusual inputs never raise."""
        try:
            log_event("", user_id=None, payload={"obj": object()})
            log_event("test_event", user_id="u", payload="not a dict")
        except Exception as exc:
            pytest.fail(f"log_event should not raise, but raised: {exc}")


class TestEventHelpers:
    """Test the per-event helper functions."""

    def test_helpers_write_expected_payloads(self, event_log):
        """Test that each helper logs its event name and payload."""
        log_recipe_created("u1", "recipe_1", "public", True)
        log_recipe_viewed("u1", "recipe_1", "Soup")
        log_rating_submitted("u1", "recipe_1", 4, False)
        log_comment_added("u1", "recipe_1", 12)
        log_search_performed("u1", "pasta", "italian", 3)

        records = {r["event"]: r for r in _records(event_log)}
        assert records["recipe_created"]["payload"] == {
            "recipe_id": "recipe_1", "privacy_level": "public", "has_image": True,
        }
        assert records["recipe_viewed"]["payload"]["title"] == "Soup"
        assert records["rating_submitted"]["payload"]["rating"] == 4
        assert records["comment_added"]["payload"]["length"] == 12
        assert records["search_performed"]["payload"] == {
            "query": "pasta", "category": "italian", "result_count": 3,
        }
        assert all(r["user_id"] == "u1" for r in records.values())
