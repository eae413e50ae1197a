"""Real-time match status derived from the scheduled kickoff and the wall clock.

The stored status of a match only changes when someone edits it, so the
status shown to users is recomputed against ``now``:

- PLAYED: a result has been entered (terminal)
- PENDING: kickoff is in the future, or the kickoff cannot be parsed
- LIVE: 0 to 105 minutes since kickoff, halftime included
- PENDING_RESULT: the live window is over but no result was entered
"""

import logging
import math
import re
from datetime import date, datetime
from typing import Optional
from zoneinfo import ZoneInfo

from .models import (
    LIVE,
    PENDING,
    PENDING_RESULT,
    PLAYED,
    POSTPONED,
    Match,
    MatchLiveStatus,
)

LOGGER = logging.getLogger(__name__)

LIVE_WINDOW_MINUTES = 105
FIRST_HALF_MINUTES = 45
HALFTIME_MINUTES = 15
REGULATION_MINUTES = 90
HALFTIME_LABEL = "Descanso"

_DATE_RE = re.compile(r"^\s*(\d{1,2})[-/](\d{1,2})[-/](\d{4})\s*$")
_TIME_RE = re.compile(r"^\s*(\d{1,2}):(\d{2})(?::\d{2})?\s*$")


def parse_match_date(date_str: Optional[str]) -> Optional[date]:
    """Parse ``DD-MM-YYYY`` or ``DD/MM/YYYY``; ``None`` when it is not a real day."""
    if not date_str or not isinstance(date_str, str):
        return None
    found = _DATE_RE.match(date_str)
    if not found:
        return None
    day, month, year = (int(part) for part in found.groups())
    try:
        return date(year, month, day)
    except ValueError:
        LOGGER.debug("Invalid calendar date: %s", date_str)
        return None


def parse_match_datetime(date_str: Optional[str], time_str: Optional[str]) -> Optional[datetime]:
    """Combine a match date and an ``HH:MM`` time into a naive local datetime."""
    match_date = parse_match_date(date_str)
    if match_date is None or not time_str or not isinstance(time_str, str):
        return None
    found = _TIME_RE.match(time_str)
    if not found:
        return None
    hours, minutes = int(found.group(1)), int(found.group(2))
    if hours > 23 or minutes > 59:
        return None
    return datetime(match_date.year, match_date.month, match_date.day, hours, minutes)


def minutes_since_kickoff(match: Match, now: datetime) -> Optional[int]:
    """Whole minutes between kickoff and ``now`` (negative before kickoff)."""
    start = parse_match_datetime(match.date, match.time)
    if start is None:
        return None
    return math.floor((now - start).total_seconds() / 60)


def is_in_live_window(
    match: Match, now: datetime, live_window: int = LIVE_WINDOW_MINUTES
) -> bool:
    elapsed = minutes_since_kickoff(match, now)
    return elapsed is not None and 0 <= elapsed <= live_window


def classify(
    match: Match, now: datetime, live_window: int = LIVE_WINDOW_MINUTES
) -> MatchLiveStatus:
    """Derive the display status of ``match`` as of ``now``."""
    if match.status == PLAYED:
        return MatchLiveStatus(PLAYED)
    if match.status == POSTPONED:
        return MatchLiveStatus(POSTPONED)

    elapsed = minutes_since_kickoff(match, now)
    if elapsed is None or elapsed < 0:
        return MatchLiveStatus(PENDING)
    if elapsed <= live_window:
        return MatchLiveStatus(LIVE, elapsed)
    # Never LIVE past the window, even if storage still says so
    return MatchLiveStatus(PENDING_RESULT)


def format_elapsed_minutes(minutes: int) -> str:
    """Text shown on a live match card for the minutes since kickoff."""
    if minutes <= FIRST_HALF_MINUTES:
        return f"{minutes}'"
    if minutes <= FIRST_HALF_MINUTES + HALFTIME_MINUTES:
        return HALFTIME_LABEL
    game_minutes = minutes - HALFTIME_MINUTES
    if game_minutes > REGULATION_MINUTES:
        return f"90+{game_minutes - REGULATION_MINUTES}'"
    return f"{game_minutes}'"


def describe_status(status: MatchLiveStatus) -> str:
    if status.display_status == LIVE and status.elapsed_minutes is not None:
        return f"LIVE {format_elapsed_minutes(status.elapsed_minutes)}"
    return status.display_status


def league_now(timezone: str = "Europe/Madrid") -> datetime:
    """Current wall-clock time in the league's timezone, as a naive datetime."""
    return datetime.now(ZoneInfo(timezone)).replace(tzinfo=None)
