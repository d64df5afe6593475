import logging
from flask import request
from flask_socketio import Namespace, emit

from ..game.services.tracker_service import TrackerService
from ..game.exceptions import (
    TrackerException, SessionNotFoundException, InvalidActionException, UnsupportedLocaleError,
)

log = logging.getLogger(__name__)

# Define the namespace for log-line ingestion
class TrackerNamespace(Namespace):
    """Receives chat log lines from a log source and pushes fishing events back."""

    def __init__(self, namespace: str, tracker_service: TrackerService):
        """
        Initialize the namespace with dependency injection.

        Args:
            namespace: The Socket.IO namespace (e.g., '/tracker').
            tracker_service: The injected TrackerService instance.
        """
        super().__init__(namespace)
        self.tracker_service = tracker_service
        log.info(f"TrackerNamespace initialized for namespace '{namespace}'")

    def _emit_error(self, sid: str, message: str):
        emit('error', {'message': message}, room=sid, namespace=self.namespace)

    # --- Connection / Disconnection Events ---

    def on_connect(self, auth=None):
        """Opens a tracking session; the client may pass {'locale': <code>} as auth data."""
        sid = request.sid
        locale = auth.get('locale') if isinstance(auth, dict) else None
        log.info(f"Client connected to namespace '{self.namespace}': {sid}")
        try:
            state = self.tracker_service.handle_connect(sid, locale)
        except UnsupportedLocaleError as e:
            # Misconfigured source, refuse the connection
            log.error(f"Rejecting connection {sid}: {e}")
            return False
        emit('session_state', state, room=sid, namespace=self.namespace)

    def on_disconnect(self, reason=None):
        sid = request.sid
        log.info(f"Client disconnected from namespace '{self.namespace}': {sid}")
        try:
            self.tracker_service.handle_disconnect(sid)
        except Exception as e:
            log.exception(f"Unexpected error during disconnect for SID {sid}: {e}") # Log full traceback

    # --- Log Ingestion ---

    def on_log_line(self, data: dict):
        """Handles one raw chat log line."""
        sid = request.sid
        try:
            result = self.tracker_service.handle_log_line(sid, data)
            if result['event']:
                emit('fishing_event', result['event'], room=sid, namespace=self.namespace)
            if result['changed']:
                emit('session_state', result['state'], room=sid, namespace=self.namespace)
        except SessionNotFoundException:
            log.warning(f"log_line event from unknown SID: {sid}")
            self._emit_error(sid, 'No tracking session, reconnect first.')
        except InvalidActionException as e:
            log.warning(f"Invalid log_line payload from SID {sid}: {e}")
            self._emit_error(sid, str(e))
        except TrackerException as e:
            log.error(f"Tracker error during log_line for SID {sid}: {e}")
            self._emit_error(sid, str(e))
        except Exception as e:
            log.exception(f"Unexpected error during log_line for SID {sid}: {e}")
            self._emit_error(sid, "An internal server error occurred processing the log line.")

    def on_log_lines(self, data: dict):
        """Handles a batch of chat log lines, in order."""
        sid = request.sid
        try:
            result = self.tracker_service.handle_log_lines(sid, data)
            for event in result['events']:
                emit('fishing_event', event, room=sid, namespace=self.namespace)
            if result['changed']:
                emit('session_state', result['state'], room=sid, namespace=self.namespace)
        except SessionNotFoundException:
            log.warning(f"log_lines event from unknown SID: {sid}")
            self._emit_error(sid, 'No tracking session, reconnect first.')
        except InvalidActionException as e:
            log.warning(f"Invalid log_lines payload from SID {sid}: {e}")
            self._emit_error(sid, str(e))
        except TrackerException as e:
            log.error(f"Tracker error during log_lines for SID {sid}: {e}")
            self._emit_error(sid, str(e))
        except Exception as e:
            log.exception(f"Unexpected error during log_lines for SID {sid}: {e}")
            self._emit_error(sid, "An internal server error occurred processing the log lines.")

    # --- Session Control ---

    def on_reset(self, data=None):
        """Reset trigger from the log source (stopped fishing, changed zone...)."""
        sid = request.sid
        try:
            state = self.tracker_service.handle_reset(sid)
            emit('session_state', state, room=sid, namespace=self.namespace)
        except TrackerException as e:
            log.warning(f"Reset failed for SID {sid}: {e}")
            self._emit_error(sid, str(e))
        except Exception as e:
            log.exception(f"Unexpected error during reset for SID {sid}: {e}")
            self._emit_error(sid, "An internal server error occurred while resetting.")

    def on_set_locale(self, data: dict):
        sid = request.sid
        try:
            state = self.tracker_service.handle_set_locale(sid, data)
            emit('session_state', state, room=sid, namespace=self.namespace)
        except UnsupportedLocaleError as e:
            log.error(f"SID {sid} requested unsupported locale: {e}")
            self._emit_error(sid, str(e))
        except TrackerException as e:
            log.warning(f"set_locale failed for SID {sid}: {e}")
            self._emit_error(sid, str(e))
        except Exception as e:
            log.exception(f"Unexpected error during set_locale for SID {sid}: {e}")
            self._emit_error(sid, "An internal server error occurred while changing locale.")
