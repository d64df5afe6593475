from enum import Enum
from typing import Literal, Optional
from pydantic import BaseModel, ConfigDict

from ..game.exceptions import UnsupportedLocaleError

# Using Pydantic for data validation and clear schemas.

class Locale(str, Enum):
    """Client languages whose chat log texts we can recognize."""
    ENGLISH = "en"
    GERMAN = "de"
    FRENCH = "fr"
    JAPANESE = "ja"
    KOREAN = "ko"

    @classmethod
    def parse(cls, value) -> "Locale":
        """Accepts a Locale, a language code ('de') or a member name ('German')."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            candidate = value.strip()
            for locale in cls:
                if candidate == locale.value or candidate.upper() == locale.name:
                    return locale
        raise UnsupportedLocaleError(value)

class TrackerStatus(str, Enum):
    """Coarse fishing status derived from the log."""
    IDLE = "idle"
    CASTING = "casting"
    MOOCHING = "mooching"

class FishingState(BaseModel):
    """Mutable fishing state owned by a single state machine."""
    status: TrackerStatus = TrackerStatus.IDLE
    current_spot: Optional[str] = None # Absent when not fishing or spot is unknown
    is_undiscovered_spot: bool = False
    is_mooching: bool = False

    def clear(self):
        """Resets every field back to the idle defaults."""
        self.status = TrackerStatus.IDLE
        self.current_spot = None
        self.is_undiscovered_spot = False
        self.is_mooching = False

# --- Parse events ---
# Produced at most once per log line, never retained by the tracker.

class ParseEvent(BaseModel):
    """Base class of recognized log events."""
    model_config = ConfigDict(frozen=True)

    type: str

class CastStarted(ParseEvent):
    type: Literal["cast_started"] = "cast_started"
    spot: Optional[str] = None # None when cast at an undiscovered hole
    undiscovered: bool = False

class AreaDiscovered(ParseEvent):
    type: Literal["area_discovered"] = "area_discovered"
    spot: str

class MoochAttempted(ParseEvent):
    type: Literal["mooch_attempted"] = "mooch_attempted"
