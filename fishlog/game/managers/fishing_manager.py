import logging
from typing import Callable, FrozenSet, List, Optional, Set

from ...config import settings
from ...core.models import (
    AreaDiscovered, CastStarted, FishingState, Locale, MoochAttempted, ParseEvent, TrackerStatus,
)
from ...core.patterns import PatternSet, patterns_for

log = logging.getLogger(__name__)

EventListener = Callable[[ParseEvent], None]

class FishingStateMachine:
    """
    Derives the fishing state of one session from its chat log, one line at a time.

    Lines are tested against the locale's patterns in a fixed order - cast,
    area discovered, mooch - and only the first match is honored.
    Not meant to be shared between threads; each session owns its own instance.
    """

    def __init__(self, locale: Locale = Locale.ENGLISH, max_line_length: Optional[int] = None):
        # Fails fast on an unsupported locale
        self.patterns: PatternSet = patterns_for(locale)
        self.max_line_length = max_line_length or settings.MAX_LINE_LENGTH
        self._state = FishingState()
        self._discovered_spots: Set[str] = set()
        self._listeners: List[EventListener] = []
        log.debug(f"FishingStateMachine initialized for locale {self.locale.name}.")

    # --- Read access ---

    @property
    def locale(self) -> Locale:
        return self.patterns.locale

    @property
    def state(self) -> FishingState:
        """A snapshot of the current state; mutating it does not affect the machine."""
        return self._state.model_copy()

    @property
    def status(self) -> TrackerStatus:
        return self._state.status

    @property
    def discovered_spots(self) -> FrozenSet[str]:
        """Spots reported as newly added to the fishing log during this session."""
        return frozenset(self._discovered_spots)

    # --- Listeners ---

    def subscribe(self, listener: EventListener):
        """Registers a callback invoked synchronously with every emitted event."""
        if listener not in self._listeners:
            self._listeners.append(listener)

    def unsubscribe(self, listener: EventListener):
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _notify(self, event: ParseEvent):
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception as e:
                # A broken collaborator must not stop the log stream
                log.exception(f"Listener {listener!r} failed on {event.type}: {e}")

    # --- Core tracking logic ---

    def process_line(self, line: str) -> Optional[ParseEvent]:
        """
        Feeds one log line into the machine.

        Returns the recognized event, or None for the (common) unrelated line.
        Never raises on any input.
        """
        if not isinstance(line, str) or not line:
            return None
        if len(line) > self.max_line_length:
            log.debug(f"Ignoring log line of length {len(line)} (limit {self.max_line_length})")
            return None

        spot = self.patterns.match_cast(line)
        if spot is not None:
            event = self._on_cast(spot)
        else:
            spot = self.patterns.match_area_discovered(line)
            if spot is not None:
                event = self._on_area_discovered(spot)
            elif self.patterns.match_mooch(line):
                event = self._on_mooch()
            else:
                return None

        self._notify(event)
        return event

    def _on_cast(self, spot: str) -> CastStarted:
        undiscovered = self.patterns.is_undiscovered(spot)
        self._state.status = TrackerStatus.CASTING
        self._state.is_mooching = False
        self._state.is_undiscovered_spot = undiscovered
        # Never expose the placeholder phrase as a spot name
        self._state.current_spot = None if undiscovered else (spot or None)
        log.info(f"Cast started at {self._state.current_spot or 'an unknown spot'}"
                 f"{' (undiscovered)' if undiscovered else ''}")
        return CastStarted(spot=self._state.current_spot, undiscovered=undiscovered)

    def _on_area_discovered(self, spot: str) -> AreaDiscovered:
        self._discovered_spots.add(spot)
        if self._state.is_undiscovered_spot and self._state.status != TrackerStatus.IDLE:
            # The anonymous hole we are fishing at just got its name
            self._state.is_undiscovered_spot = False
            self._state.current_spot = spot
        log.info(f"Fishing spot discovered: {spot}")
        return AreaDiscovered(spot=spot)

    def _on_mooch(self) -> MoochAttempted:
        self._state.is_mooching = True
        if self._state.status == TrackerStatus.CASTING:
            self._state.status = TrackerStatus.MOOCHING
        log.debug(f"Mooch attempted (status: {self._state.status.value})")
        return MoochAttempted()

    def reset(self):
        """Returns to Idle and clears the state, whatever the current status."""
        if self._state.status != TrackerStatus.IDLE:
            log.info(f"Resetting fishing state from '{self._state.status.value}' to 'idle'")
        self._state.clear()

    def change_locale(self, locale: Locale):
        """Rebinds the machine to another locale; the state starts over."""
        patterns = patterns_for(locale) # Raises before touching any state
        log.info(f"Switching locale from {self.locale.name} to {patterns.locale.name}")
        self.patterns = patterns
        self._state.clear()
        self._discovered_spots.clear()
