# Custom exceptions for the tracker logic layer

class TrackerException(Exception):
    """Base class for tracker-related exceptions."""
    pass

class UnsupportedLocaleError(TrackerException):
    """Raised when a locale outside the supported set is requested."""
    def __init__(self, locale):
        self.locale = locale
        super().__init__(f"Locale '{locale}' is not supported.")

class SessionNotFoundException(TrackerException):
    """Raised when no tracking session exists for a connection."""
    def __init__(self, sid: str):
        self.sid = sid
        super().__init__(f"No tracking session for SID '{sid}'.")

class InvalidActionException(TrackerException):
    """Raised when a client sends a malformed or invalid request."""
    pass
