"""Conversion of document-store records into league models.

Documents use the app's camelCase field names. Match reports are keyed
``"{home}-{away}"`` and hold one field per team name, next to ``id`` and
``observations``. Nothing here raises on malformed input: bad values are
coerced to safe defaults and unusable documents are skipped (``None``).
"""

import logging
from typing import Any, Iterable, Optional

from .models import (
    MATCH_STATUSES,
    PENDING,
    SCHEDULED,
    Match,
    Matchday,
    MatchReport,
    Player,
    PlayerId,
    ReportPlayer,
    Team,
    TeamParticipation,
)

LOGGER = logging.getLogger(__name__)

REPORT_RESERVED_FIELDS = {"id", "observations"}


def safe_int(value: Any) -> int:
    """Non-negative int from a loosely typed value; 0 when unusable."""
    if isinstance(value, bool) or value is None:
        return 0
    try:
        number = int(float(value)) if isinstance(value, (str, float)) else int(value)
    except (TypeError, ValueError, OverflowError):
        return 0
    return max(number, 0)


def optional_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def text(value: Any) -> str:
    return optional_text(value) or ""


def player_id(value: Any) -> PlayerId:
    """Dorsals are stored as numbers or strings; keep numbers numeric."""
    if isinstance(value, bool) or value is None:
        return ""
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return str(value).strip()


def normalize_status(value: Any) -> str:
    status = text(value).upper()
    if status == SCHEDULED:
        return PENDING
    if status not in MATCH_STATUSES:
        if status:
            LOGGER.debug("Unknown match status %r treated as PENDING", value)
        return PENDING
    return status


def match_from_document(data: Any, default_date: str = "") -> Optional[Match]:
    if not isinstance(data, dict):
        return None
    home, away = text(data.get("home")), text(data.get("away"))
    if not home or not away:
        LOGGER.warning("Skipping match without both teams: %r", data)
        return None
    return Match(
        home=home,
        away=away,
        home_goals=safe_int(data.get("homeGoals")),
        away_goals=safe_int(data.get("awayGoals")),
        date=text(data.get("date")) or default_date,
        time=text(data.get("time")),
        status=normalize_status(data.get("status")),
        referee=optional_text(data.get("referee")),
        referee_name=optional_text(data.get("refereeName")),
    )


def matchday_from_document(data: Any, doc_id: Optional[str] = None) -> Optional[Matchday]:
    if not isinstance(data, dict):
        return None
    jornada = safe_int(data.get("jornada"))
    if jornada < 1:
        LOGGER.warning("Skipping matchday %r without a valid jornada", doc_id or data.get("id"))
        return None

    matchday_date = text(data.get("date"))
    raw_matches = data.get("matches")
    matches: list[Match] = []
    if isinstance(raw_matches, list):
        for item in raw_matches:
            match = match_from_document(item, default_date=matchday_date)
            if match is not None:
                matches.append(match)

    return Matchday(
        matchday_id=text(doc_id or data.get("id")) or f"jornada-{jornada}",
        jornada=jornada,
        date=matchday_date,
        matches=matches,
        rest=optional_text(data.get("rest")),
    )


def team_from_document(data: Any, doc_id: Optional[str] = None) -> Optional[Team]:
    if not isinstance(data, dict):
        return None
    name = text(data.get("name"))
    if not name:
        LOGGER.warning("Skipping team %r without a name", doc_id or data.get("id"))
        return None

    players: list[Player] = []
    raw_players = data.get("players")
    if isinstance(raw_players, list):
        for item in raw_players:
            if isinstance(item, dict) and text(item.get("name")):
                players.append(Player(
                    player_id=player_id(item.get("id")),
                    name=text(item.get("name")),
                    alias=optional_text(item.get("alias")),
                ))

    return Team(team_id=text(doc_id or data.get("id")) or name, name=name, players=players)


def report_player_from_document(data: Any) -> Optional[ReportPlayer]:
    if not isinstance(data, dict) or not text(data.get("name")):
        return None
    return ReportPlayer(
        player_id=player_id(data.get("id")),
        name=text(data.get("name")),
        match_number=player_id(data.get("matchNumber")),
        is_starting=bool(data.get("isStarting")),
        substitution_min=text(data.get("substitutionMin")),
        goals=safe_int(data.get("goals")),
        own_goals=safe_int(data.get("ownGoals")),
        yellow_cards=safe_int(data.get("yellowCards")),
        red_cards=safe_int(data.get("redCards")),
        direct_red_cards=safe_int(data.get("directRedCards")),
        alias=optional_text(data.get("alias")),
    )


def participation_from_document(team: str, data: Any) -> TeamParticipation:
    players: list[ReportPlayer] = []
    formation = None
    if isinstance(data, dict):
        formation = optional_text(data.get("formation"))
        raw_players = data.get("players")
        if isinstance(raw_players, list):
            players = [p for p in map(report_player_from_document, raw_players) if p]

    participation = TeamParticipation(team=team, players=players, formation=formation)
    if not participation.has_valid_lineup():
        LOGGER.warning(
            "%s lists %d starters in one report", team, len(participation.starters)
        )
    return participation


def split_report_id(report_id: str, known_teams: Iterable[str]) -> Optional[tuple[str, str]]:
    """Split ``"{home}-{away}"`` at the hyphen whose halves are both known teams.

    Team names may contain hyphens themselves, so splitting on the first
    one is not enough.
    """
    known = set(known_teams)
    candidates = [
        (report_id[:i], report_id[i + 1:])
        for i, char in enumerate(report_id)
        if char == "-"
    ]
    for home, away in candidates:
        if home in known and away in known and home != away:
            return home, away
    return None


def resolve_report_sides(
    report_id: str, team_keys: list[str], known_teams: Iterable[str] = ()
) -> Optional[tuple[str, str]]:
    """Work out (home, away) for a report from its id and its team-keyed fields."""
    if len(team_keys) == 2:
        first, second = team_keys
        if report_id == f"{first}-{second}":
            return first, second
        if report_id == f"{second}-{first}":
            return second, first

    known = set(known_teams) | set(team_keys)
    sides = split_report_id(report_id, known)
    if sides is not None:
        return sides

    if len(team_keys) == 2:
        return team_keys[0], team_keys[1]
    return None


def report_from_document(
    data: Any, known_teams: Iterable[str] = (), doc_id: Optional[str] = None
) -> Optional[MatchReport]:
    if not isinstance(data, dict):
        return None
    report_id = text(doc_id or data.get("id"))
    team_keys = [
        key for key, value in data.items()
        if key not in REPORT_RESERVED_FIELDS and isinstance(value, dict)
    ]

    sides = resolve_report_sides(report_id, team_keys, known_teams)
    if sides is None:
        LOGGER.warning("Skipping match report %r: cannot tell home from away", report_id)
        return None

    home, away = sides
    observations = data.get("observations")
    return MatchReport(
        home=home,
        away=away,
        home_participation=participation_from_document(home, data.get(home)),
        away_participation=participation_from_document(away, data.get(away)),
        observations=observations if isinstance(observations, str) else "",
    )
