import logging
from typing import Dict, List, Optional

from ...config import settings
from ...core.models import Locale
from ..exceptions import SessionNotFoundException
from .fishing_manager import FishingStateMachine

log = logging.getLogger(__name__)

class SessionManager:
    """Keeps one fishing state machine per connected log source."""

    def __init__(self, default_locale: Optional[Locale] = None):
        self.default_locale = Locale.parse(default_locale or settings.DEFAULT_LOCALE)
        # Trackers by their connection SID (SocketIO session ID)
        self.sessions: Dict[str, FishingStateMachine] = {}

    def open_session(self, sid: str, locale: Optional[Locale] = None) -> FishingStateMachine:
        """Creates a fresh tracker for a SID, replacing any previous one."""
        if sid in self.sessions:
            log.warning(f"Session for SID {sid} already exists. Overwriting.")
        tracker = FishingStateMachine(locale or self.default_locale)
        self.sessions[sid] = tracker
        log.info(f"Opened tracking session for SID {sid} (locale: {tracker.locale.name})")
        return tracker

    def close_session(self, sid: str) -> Optional[FishingStateMachine]:
        tracker = self.sessions.pop(sid, None)
        if tracker:
            log.info(f"Closed tracking session for SID {sid}")
            return tracker
        log.warning(f"Attempted to close non-existent session with SID {sid}")
        return None

    def get_tracker(self, sid: str) -> FishingStateMachine:
        tracker = self.sessions.get(sid)
        if tracker is None:
            raise SessionNotFoundException(sid)
        return tracker

    def set_locale(self, sid: str, locale) -> FishingStateMachine:
        """Switches a session to another locale. The session's state is cleared."""
        tracker = self.get_tracker(sid)
        tracker.change_locale(locale)
        return tracker

    def reset(self, sid: str) -> FishingStateMachine:
        """Reset trigger, e.g. when the player stops fishing or changes zone."""
        tracker = self.get_tracker(sid)
        tracker.reset()
        return tracker

    def all_sessions(self) -> List[str]:
        return list(self.sessions.keys())
