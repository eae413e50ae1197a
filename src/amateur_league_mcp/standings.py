"""League table built from the matches of every matchday."""

import logging
from datetime import datetime
from typing import Iterable, Optional

from .match_status import parse_match_date, parse_match_datetime
from .models import LIVE, PLAYED, Match, Matchday, Team, TeamStanding

LOGGER = logging.getLogger(__name__)

POINTS_FOR_WIN = 3
POINTS_FOR_DRAW = 1

# LIVE results count too, so the table moves while a match is being played
COUNTED_STATUSES = {PLAYED, LIVE}


def _is_goal_count(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


def _is_countable(match: Match) -> bool:
    if match.status not in COUNTED_STATUSES:
        return False
    if not match.home or not match.away or match.home == match.away:
        LOGGER.warning("Skipping match with invalid teams: %r vs %r", match.home, match.away)
        return False
    if not (_is_goal_count(match.home_goals) and _is_goal_count(match.away_goals)):
        LOGGER.warning(
            "Skipping %s-%s with invalid score %r-%r",
            match.home, match.away, match.home_goals, match.away_goals,
        )
        return False
    return True


def _kickoff(match: Match) -> Optional[datetime]:
    start = parse_match_datetime(match.date, match.time)
    if start is not None:
        return start
    day = parse_match_date(match.date)
    return datetime(day.year, day.month, day.day) if day else None


def _counted_matches(matchdays: Iterable[Matchday], chronological: bool) -> list[Match]:
    matches = [m for md in matchdays for m in md.matches if _is_countable(m)]
    if not chronological:
        return matches

    # Undated matches keep their processing order, after the dated ones
    indexed = list(enumerate(matches))
    indexed.sort(key=lambda item: (
        _kickoff(item[1]) is None,
        _kickoff(item[1]) or datetime.min,
        item[0],
    ))
    return [m for _, m in indexed]


def _row(table: dict[str, TeamStanding], team: str) -> TeamStanding:
    if team not in table:
        table[team] = TeamStanding(team=team)
    return table[team]


def _record(row: TeamStanding, scored: int, conceded: int) -> None:
    row.played += 1
    row.goals_for += scored
    row.goals_against += conceded
    if scored > conceded:
        row.won += 1
        row.points += POINTS_FOR_WIN
        row.form.append("W")
    elif scored < conceded:
        row.lost += 1
        row.form.append("L")
    else:
        row.drawn += 1
        row.points += POINTS_FOR_DRAW
        row.form.append("D")


def sort_key(row: TeamStanding) -> tuple:
    return (-row.points, -row.goal_difference, -row.goals_for, row.team)


def compute_standings(
    matchdays: Iterable[Matchday],
    teams: Iterable[Team] = (),
    form_length: int = 5,
    chronological: bool = False,
) -> list[TeamStanding]:
    """Compute the ordered league table.

    Args:
        matchdays: Matchdays in processing order (usually jornada order)
        teams: Registered teams; each gets a row even without matches
        form_length: Number of most recent results kept in ``form``
        chronological: Fold results by kickoff time instead of matchday order
    """
    matchdays = list(matchdays)
    table: dict[str, TeamStanding] = {}

    for team in teams:
        if team.name:
            _row(table, team.name)

    # Names that only appear in fixtures still get a row
    for matchday in matchdays:
        for match in matchday.matches:
            for name in (match.home, match.away):
                if name:
                    _row(table, name)

    for match in _counted_matches(matchdays, chronological):
        _record(_row(table, match.home), match.home_goals, match.away_goals)
        _record(_row(table, match.away), match.away_goals, match.home_goals)

    standings = list(table.values())
    for row in standings:
        row.goal_difference = row.goals_for - row.goals_against
        row.form = row.form[-form_length:] if form_length > 0 else []

    standings.sort(key=sort_key)
    for position, row in enumerate(standings, 1):
        row.position = position

    return standings


def leader(standings: list[TeamStanding]) -> Optional[TeamStanding]:
    return standings[0] if standings else None
