import logging
import re
import threading
from typing import Callable, Dict, Optional
from pydantic import BaseModel, ConfigDict

from .models import Locale

log = logging.getLogger(__name__)

# Named groups used by the cast and discovery patterns
SPOT_GROUP = "FishingSpot"
SPOT_WITH_ARTICLE_GROUP = "FishingSpotWithArticle"

class PatternSet(BaseModel):
    """Immutable bundle of the chat log rules for one locale."""
    model_config = ConfigDict(frozen=True)

    locale: Locale
    cast_pattern: re.Pattern
    area_discovered_pattern: re.Pattern
    mooch_pattern: re.Pattern
    undiscovered_marker: str

    def match_cast(self, line: str) -> Optional[str]:
        """
        Returns the resolved spot text of a cast line, or None if the line is no cast.

        The primary capture wins. Locales with article handling capture the spot
        in a secondary group instead, which is used when the primary one is empty.
        An empty string means the cast matched but no spot text was captured.
        The patterns consume the line's closing full stop, the capture is used as is.
        """
        match = self.cast_pattern.search(line)
        if match is None:
            return None
        groups = match.groupdict()
        primary = groups.get(SPOT_GROUP)
        with_article = groups.get(SPOT_WITH_ARTICLE_GROUP)
        if primary and with_article:
            # Both slots are meant to be exclusive, keep the plain capture
            log.warning(f"Cast pattern for {self.locale.name} populated both spot groups "
                        f"('{primary}' / '{with_article}'), using '{primary}'")
            return primary
        return primary or with_article or ""

    def match_area_discovered(self, line: str) -> Optional[str]:
        """Returns the spot named in a 'new fishing hole recorded' line."""
        match = self.area_discovered_pattern.search(line)
        if match is None:
            return None
        return match.group(SPOT_GROUP) or None

    def match_mooch(self, line: str) -> bool:
        return self.mooch_pattern.search(line) is not None

    def is_undiscovered(self, spot: str) -> bool:
        """True if the spot text is the locale's placeholder for an unlogged hole."""
        return self.undiscovered_marker in spot

# --- Per-locale builders ---
# None of the patterns nest quantifiers, so a failed match cannot backtrack
# catastrophically. Discovery and cast patterns are anchored where the text allows.
# Spot captures end right before the message's closing full stop, which is the
# only one removed from the spot text.

# The optional "on|at" prefix of the discovery pattern retries from each candidate
# word, so a failing line costs quadratic time in its length. MAX_LINE_LENGTH caps it.
def _build_english(locale: Locale = Locale.ENGLISH) -> PatternSet:
    return PatternSet(
        locale=locale,
        cast_pattern=re.compile(r"(?:You cast your| casts (?:her|his)) line (?:on|in|at) (?P<FishingSpot>.+)\."),
        area_discovered_pattern=re.compile(r"^(?:.*?\b(?:on|at) )?(?P<FishingSpot>.+) is added to your fishing log\."),
        mooch_pattern=re.compile(r"line with the fish still hooked\."),
        undiscovered_marker="undiscovered fishing hole",
    )

def _build_german() -> PatternSet:
    return PatternSet(
        locale=Locale.GERMAN,
        # The plain group only exists so both locales expose the same names, it never matches real text
        cast_pattern=re.compile(r" has?t mit dem Fischen (?P<FishingSpotWithArticle>.+) begonnen\.(?P<FishingSpot>invalid)?"),
        area_discovered_pattern=re.compile(r"Die neue Angelstelle (?P<FishingSpot>.+) wurde in deinem Fischer-Notizbuch vermerkt\."),
        mooch_pattern=re.compile(r"Du hast die Leine mit"),
        undiscovered_marker="unerforschten Angelplatz",
    )

def _build_french() -> PatternSet:
    return PatternSet(
        locale=Locale.FRENCH,
        cast_pattern=re.compile(r" commencez? à pêcher\.\s*Point de pêche: (?P<FishingSpot>.+)\."),
        area_discovered_pattern=re.compile(r"Vous notez le banc de poissons “(?P<FishingSpot>.+)” dans votre carnet\."),
        mooch_pattern=re.compile(r"Vous essayez de pêcher au vif avec"),
        undiscovered_marker="Zone de pêche inconnue",
    )

# The two greedy groups of the cast pattern backtrack over every "は", quadratic
# in the line length. MAX_LINE_LENGTH caps it.
def _build_japanese() -> PatternSet:
    return PatternSet(
        locale=Locale.JAPANESE,
        cast_pattern=re.compile(r"^.+は(?P<FishingSpot>.+)で釣りを開始した。"),
        area_discovered_pattern=re.compile(r"釣り手帳に新しい釣り場「(?P<FishingSpot>.+)」の情報を記録した！"),
        mooch_pattern=re.compile(r"は釣り上げた.+を慎重に投げ込み、泳がせ釣りを試みた。"),
        undiscovered_marker="未知の釣り場",
    )

def _build_korean() -> PatternSet:
    # Korean clients print these messages in English
    return _build_english(Locale.KOREAN)

_BUILDERS: Dict[Locale, Callable[[], PatternSet]] = {
    Locale.ENGLISH: _build_english,
    Locale.GERMAN: _build_german,
    Locale.FRENCH: _build_french,
    Locale.JAPANESE: _build_japanese,
    Locale.KOREAN: _build_korean,
}

# Built pattern sets, filled lazily and never mutated afterwards
_catalog: Dict[Locale, PatternSet] = {}
_catalog_lock = threading.Lock()

def patterns_for(locale) -> PatternSet:
    """
    Returns the PatternSet of a locale, compiling it on first use.

    Every later call for the same locale returns the identical object.
    Raises UnsupportedLocaleError for anything that is not a supported locale.
    """
    locale = Locale.parse(locale)
    pattern_set = _catalog.get(locale)
    if pattern_set is not None:
        return pattern_set

    with _catalog_lock:
        # Another thread may have built it while we waited
        pattern_set = _catalog.get(locale)
        if pattern_set is None:
            pattern_set = _BUILDERS[locale]()
            _catalog[locale] = pattern_set
            log.info(f"Compiled chat log patterns for locale {locale.name}")
    return pattern_set
