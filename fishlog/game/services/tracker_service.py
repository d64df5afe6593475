import logging
from typing import Any, Dict, Optional

from ...core.models import Locale
from ..exceptions import InvalidActionException
from ..managers.fishing_manager import FishingStateMachine
from ..managers.session_manager import SessionManager

log = logging.getLogger(__name__)

def serialize_session(tracker: FishingStateMachine) -> Dict[str, Any]:
    """Builds the JSON payload describing a session's current state."""
    state = tracker.state.model_dump(mode="json")
    state["locale"] = tracker.locale.value
    state["discovered_spots"] = sorted(tracker.discovered_spots)
    return state

class TrackerService:
    """Validates client requests and routes them to the session trackers."""

    def __init__(self, session_manager: SessionManager):
        self.session_manager = session_manager
        log.info("TrackerService initialized.")

    def handle_connect(self, sid: str, locale: Optional[str] = None) -> Dict[str, Any]:
        """Opens a session for a new connection and returns its state."""
        parsed = Locale.parse(locale) if locale else None
        tracker = self.session_manager.open_session(sid, parsed)
        return serialize_session(tracker)

    def handle_disconnect(self, sid: str) -> bool:
        return self.session_manager.close_session(sid) is not None

    def handle_log_line(self, sid: str, data: dict) -> Dict[str, Any]:
        """
        Processes one log line for a session.
        Returns the serialized event (or None), the session state and whether it changed.
        """
        if not isinstance(data, dict) or not isinstance(data.get('line'), str):
            raise InvalidActionException("Expected a payload of the form {'line': <text>}.")

        tracker = self.session_manager.get_tracker(sid)
        before = tracker.state
        event = tracker.process_line(data['line'])
        after = tracker.state
        return {
            "event": event.model_dump() if event else None,
            "state": serialize_session(tracker),
            "changed": before != after,
        }

    def handle_log_lines(self, sid: str, data: dict) -> Dict[str, Any]:
        """Processes a batch of lines in order; returns every event produced."""
        lines = data.get('lines') if isinstance(data, dict) else None
        if not isinstance(lines, list):
            raise InvalidActionException("Expected a payload of the form {'lines': [<text>, ...]}.")

        tracker = self.session_manager.get_tracker(sid)
        before = tracker.state
        events = []
        for line in lines:
            event = tracker.process_line(line)
            if event:
                events.append(event.model_dump())
        log.debug(f"Processed {len(lines)} lines for SID {sid}, {len(events)} events")
        return {
            "events": events,
            "state": serialize_session(tracker),
            "changed": before != tracker.state,
        }

    def handle_reset(self, sid: str) -> Dict[str, Any]:
        tracker = self.session_manager.reset(sid)
        return serialize_session(tracker)

    def handle_set_locale(self, sid: str, data: dict) -> Dict[str, Any]:
        if not isinstance(data, dict) or 'locale' not in data:
            raise InvalidActionException("Expected a payload of the form {'locale': <code>}.")
        # UnsupportedLocaleError propagates, the session keeps its old locale
        tracker = self.session_manager.set_locale(sid, data['locale'])
        return serialize_session(tracker)

    def get_session_state(self, sid: str) -> Dict[str, Any]:
        return serialize_session(self.session_manager.get_tracker(sid))
