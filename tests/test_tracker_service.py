"""
Test suite for the session layer
================================
Tests for SessionManager and TrackerService.
"""

import pytest

from fishlog.core.models import Locale, TrackerStatus
from fishlog.game.exceptions import (
    InvalidActionException, SessionNotFoundException, UnsupportedLocaleError,
)
from fishlog.game.managers.session_manager import SessionManager
from fishlog.game.services.tracker_service import TrackerService


@pytest.fixture
def manager():
    return SessionManager(default_locale=Locale.ENGLISH)


@pytest.fixture
def service(manager):
    return TrackerService(manager)


class TestSessionManager:
    """Tests for per-connection trackers"""

    def test_open_session_uses_default_locale(self, manager):
        tracker = manager.open_session("sid-1")

        assert tracker.locale == Locale.ENGLISH
        assert manager.get_tracker("sid-1") is tracker

    def test_open_session_with_locale(self, manager):
        tracker = manager.open_session("sid-1", Locale.FRENCH)

        assert tracker.locale == Locale.FRENCH

    def test_sessions_are_independent(self, manager):
        first = manager.open_session("sid-1")
        second = manager.open_session("sid-2")

        first.process_line("You cast your line on The Minnow Ponds.")

        assert first.status == TrackerStatus.CASTING
        assert second.status == TrackerStatus.IDLE

    def test_unknown_session_raises(self, manager):
        with pytest.raises(SessionNotFoundException):
            manager.get_tracker("missing")

    def test_close_session(self, manager):
        manager.open_session("sid-1")

        assert manager.close_session("sid-1") is not None
        assert manager.close_session("sid-1") is None
        assert manager.all_sessions() == []

    def test_reset(self, manager):
        tracker = manager.open_session("sid-1")
        tracker.process_line("You cast your line on The Minnow Ponds.")

        manager.reset("sid-1")

        assert tracker.status == TrackerStatus.IDLE

    def test_set_locale(self, manager):
        manager.open_session("sid-1")

        tracker = manager.set_locale("sid-1", "ja")

        assert tracker.locale == Locale.JAPANESE


class TestTrackerService:
    """Tests for request validation and serialization"""

    def test_connect_returns_cleared_state(self, service):
        state = service.handle_connect("sid-1")

        assert state == {
            "status": "idle",
            "current_spot": None,
            "is_undiscovered_spot": False,
            "is_mooching": False,
            "locale": "en",
            "discovered_spots": [],
        }

    def test_connect_with_unsupported_locale(self, service):
        with pytest.raises(UnsupportedLocaleError):
            service.handle_connect("sid-1", "xx")

    def test_log_line_with_event(self, service):
        service.handle_connect("sid-1")

        result = service.handle_log_line("sid-1", {"line": "You cast your line on The Minnow Ponds."})

        assert result["event"] == {"type": "cast_started", "spot": "The Minnow Ponds", "undiscovered": False}
        assert result["state"]["status"] == "casting"
        assert result["changed"] is True

    def test_log_line_without_event(self, service):
        service.handle_connect("sid-1")

        result = service.handle_log_line("sid-1", {"line": "Player123 says: hi"})

        assert result["event"] is None
        assert result["changed"] is False

    @pytest.mark.parametrize("payload", [None, {}, {"line": 5}, "You cast your line on X."])
    def test_log_line_rejects_bad_payloads(self, service, payload):
        service.handle_connect("sid-1")

        with pytest.raises(InvalidActionException):
            service.handle_log_line("sid-1", payload)

    def test_log_line_for_unknown_session(self, service):
        with pytest.raises(SessionNotFoundException):
            service.handle_log_line("missing", {"line": "hi"})

    def test_log_lines_batch(self, service):
        service.handle_connect("sid-1")

        result = service.handle_log_lines("sid-1", {"lines": [
            "Boco casts his line on an undiscovered fishing hole.",
            "Player123 says: hi",
            "The Minnow Ponds is added to your fishing log.",
            "You lose your line with the fish still hooked.",
        ]})

        assert [event["type"] for event in result["events"]] == [
            "cast_started", "area_discovered", "mooch_attempted"]
        assert result["state"]["status"] == "mooching"
        assert result["state"]["current_spot"] == "The Minnow Ponds"
        assert result["state"]["discovered_spots"] == ["The Minnow Ponds"]

    def test_log_lines_rejects_bad_payload(self, service):
        service.handle_connect("sid-1")

        with pytest.raises(InvalidActionException):
            service.handle_log_lines("sid-1", {"lines": "not a list"})

    def test_reset(self, service):
        service.handle_connect("sid-1")
        service.handle_log_line("sid-1", {"line": "You cast your line on The Minnow Ponds."})

        state = service.handle_reset("sid-1")

        assert state["status"] == "idle"
        assert state["current_spot"] is None

    def test_set_locale(self, service):
        service.handle_connect("sid-1")

        state = service.handle_set_locale("sid-1", {"locale": "de"})

        assert state["locale"] == "de"

    def test_set_unsupported_locale_keeps_session(self, service):
        service.handle_connect("sid-1")

        with pytest.raises(UnsupportedLocaleError):
            service.handle_set_locale("sid-1", {"locale": "xx"})

        assert service.get_session_state("sid-1")["locale"] == "en"

    def test_disconnect(self, service):
        service.handle_connect("sid-1")

        assert service.handle_disconnect("sid-1") is True
        assert service.handle_disconnect("sid-1") is False
