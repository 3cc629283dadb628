"""
Condition Keyword Tables

Keyword -> weight lookups used to turn free-text inspection notes into a
0-100 condition score, plus the indicator list used to flag weather damage
when the store does not record it explicitly.

Each keyword contributes its weight once if it appears anywhere in the
lower-cased text (substring match). Tables are versioned so a tuned table
can ship next to the old one and be selected per call.

Condition score formula:
  base 80
  + sum(weight for keyword present in notes)
  + sum(priority penalty for each linked report)
  clamped to 0..100
"""
from typing import Dict, Iterable, Optional, Tuple

CONDITION_BASE_SCORE = 80

# Severe issues -15, moderate issues -8, positive indicators +5
CONDITION_KEYWORDS_V1: Dict[str, int] = {
    "leak": -15,
    "damage": -15,
    "missing": -15,
    "cracked": -15,
    "broken": -15,
    "deteriorated": -15,
    "wear": -8,
    "aging": -8,
    "discoloration": -8,
    "loose": -8,
    "minor": -8,
    "good": 5,
    "excellent": 5,
    "well-maintained": 5,
    "no issues": 5,
}

REPORT_PRIORITY_PENALTIES_V1: Dict[str, int] = {
    "high": -20,
    "medium": -10,
    "low": -5,
}

WEATHER_DAMAGE_INDICATORS_V1: Tuple[str, ...] = (
    "storm",
    "hail",
    "wind",
    "weather",
    "hurricane",
    "tornado",
    "rain damage",
    "water damage",
    "ice damage",
)

KEYWORD_TABLES = {
    "v1": CONDITION_KEYWORDS_V1,
}

CURRENT_VERSION = "v1"


def keyword_adjustment(text: Optional[str], table: Dict[str, int] = CONDITION_KEYWORDS_V1) -> int:
    """Sum of weights for every keyword present in *text*."""
    if not text:
        return 0
    lowered = text.lower()
    return sum(weight for keyword, weight in table.items() if keyword in lowered)


def report_adjustment(
    priority_levels: Iterable[Optional[str]],
    penalties: Dict[str, int] = REPORT_PRIORITY_PENALTIES_V1,
) -> int:
    """Penalty for each linked report by its priority level."""
    return sum(penalties.get((level or "").lower(), 0) for level in priority_levels)


def score_condition(
    notes: Optional[str],
    priority_levels: Iterable[Optional[str]] = (),
    version: str = CURRENT_VERSION,
) -> int:
    """Condition score for a single inspection, clamped to 0..100."""
    table = KEYWORD_TABLES[version]
    score = CONDITION_BASE_SCORE + keyword_adjustment(notes, table) + report_adjustment(priority_levels)
    return max(0, min(100, score))


def mentions_weather_damage(*texts: Optional[str]) -> bool:
    """True if any weather-damage indicator appears in the joined texts."""
    joined = " ".join(t for t in texts if t).lower()
    return any(indicator in joined for indicator in WEATHER_DAMAGE_INDICATORS_V1)
