"""Choosing which matchdays to feature: the last one played and the next one."""

from datetime import date, datetime
from typing import Iterable, Optional

from .match_status import parse_match_date
from .models import LIVE, PENDING, PLAYED, SCHEDULED, FeaturedMatchdays, Matchday

_UNPLAYED = {PENDING, SCHEDULED}
_STARTED = {PLAYED, LIVE}


def sort_matchdays(matchdays: Iterable[Matchday]) -> list[Matchday]:
    return sorted(matchdays, key=lambda md: md.jornada)


def matchday_day(matchday: Matchday) -> Optional[date]:
    """Calendar day of a matchday, falling back to its earliest dated match."""
    day = parse_match_date(matchday.date)
    if day is not None:
        return day
    match_days = [d for d in (parse_match_date(m.date) for m in matchday.matches) if d]
    return min(match_days) if match_days else None


def is_today_or_past(matchday: Matchday, today: date) -> bool:
    day = matchday_day(matchday)
    return day is not None and day <= today


def has_live_match(matchday: Matchday) -> bool:
    return any(m.status == LIVE for m in matchday.matches)


def has_started_match(matchday: Matchday) -> bool:
    return any(m.status in _STARTED for m in matchday.matches)


def has_unplayed_match(matchday: Matchday) -> bool:
    return any(m.status in _UNPLAYED for m in matchday.matches)


def select_featured(matchdays: Iterable[Matchday], now: datetime) -> FeaturedMatchdays:
    """Pick the last played matchday, the next one and any live one.

    Matchdays are taken in the given order; callers sort by jornada first.
    Only the calendar day of ``now`` matters here.
    """
    matchdays = list(matchdays)
    today = now.date()

    last_played = None
    for matchday in matchdays:
        if has_started_match(matchday) or is_today_or_past(matchday, today):
            last_played = matchday

    upcoming = (
        md for md in matchdays
        if has_unplayed_match(md) and not is_today_or_past(md, today)
    )
    live = (md for md in matchdays if has_live_match(md))

    return FeaturedMatchdays(
        last_played=last_played,
        next=next(upcoming, None),
        live=next(live, None),
    )


def find_matchday(matchdays: Iterable[Matchday], jornada: int) -> Optional[Matchday]:
    return next((md for md in matchdays if md.jornada == jornada), None)


def default_jornada(matchdays: Iterable[Matchday]) -> int:
    """Jornada to open the calendar on: first with pending matches, else the last."""
    matchdays = list(matchdays)
    pending = next((md for md in matchdays if has_unplayed_match(md)), None)
    if pending is not None:
        return pending.jornada
    return matchdays[-1].jornada if matchdays else 1
