"""Read access to the league collections stored in Neo4j."""

import logging
from typing import Any, Optional

from .config import Settings
from .database import Neo4jDatabase
from .documents import normalize_status, optional_text, player_id, safe_int, text
from .league import LeagueSnapshot
from .models import (
    LIVE,
    PENDING,
    SCHEDULED,
    Match,
    Matchday,
    MatchReport,
    Player,
    ReportPlayer,
    Team,
    TeamParticipation,
)

LOGGER = logging.getLogger(__name__)

MATCHDAYS_QUERY = """
MATCH (md:Matchday)
OPTIONAL MATCH (md)-[:HAS_MATCH]->(m:Match)
WITH md, m ORDER BY m.position
RETURN md.matchday_id AS matchday_id, md.jornada AS jornada, md.date AS date,
       md.rest AS rest, collect(m {.*}) AS matches
ORDER BY jornada
"""

TEAMS_QUERY = """
MATCH (t:Team)
OPTIONAL MATCH (p:Player)-[:PLAYS_FOR]->(t)
WITH t, p ORDER BY p.position
RETURN t.team_id AS team_id, t.name AS name, collect(p {.*}) AS players
ORDER BY name
"""

REPORTS_QUERY = """
MATCH (r:MatchReport)
OPTIONAL MATCH (r)-[:HAS_ENTRY]->(e:ReportEntry)
WITH r, e ORDER BY e.position
RETURN r {.*} AS report, collect(e {.*}) AS entries
ORDER BY report.report_id
"""

MARK_LIVE_QUERY = """
MATCH (:Matchday {matchday_id: $matchday_id})-[:HAS_MATCH]->(m:Match {home: $home, away: $away})
WHERE m.status IN $from_statuses
SET m.status = $status
RETURN count(m) AS updated
"""


def _match_from_row(row: dict[str, Any], default_date: str) -> Optional[Match]:
    home, away = text(row.get("home")), text(row.get("away"))
    if not home or not away:
        return None
    return Match(
        home=home,
        away=away,
        home_goals=safe_int(row.get("home_goals")),
        away_goals=safe_int(row.get("away_goals")),
        date=text(row.get("date")) or default_date,
        time=text(row.get("time")),
        status=normalize_status(row.get("status")),
        referee=optional_text(row.get("referee")),
        referee_name=optional_text(row.get("referee_name")),
    )


def _report_player_from_row(row: dict[str, Any]) -> ReportPlayer:
    return ReportPlayer(
        player_id=player_id(row.get("player_id")),
        name=text(row.get("name")),
        match_number=player_id(row.get("match_number")),
        is_starting=bool(row.get("is_starting")),
        substitution_min=text(row.get("substitution_min")),
        goals=safe_int(row.get("goals")),
        own_goals=safe_int(row.get("own_goals")),
        yellow_cards=safe_int(row.get("yellow_cards")),
        red_cards=safe_int(row.get("red_cards")),
        direct_red_cards=safe_int(row.get("direct_red_cards")),
        alias=optional_text(row.get("alias")),
    )


class LeagueRepository:
    """Loads matchdays, teams and match reports as league models."""

    def __init__(self, db: Neo4jDatabase):
        self.db = db

    def get_all_matchdays(self) -> list[Matchday]:
        """All matchdays in jornada order."""
        matchdays = []
        for row in self.db.execute_query(MATCHDAYS_QUERY):
            jornada = safe_int(row.get("jornada"))
            if jornada < 1:
                LOGGER.warning("Skipping stored matchday %r without jornada", row.get("matchday_id"))
                continue
            matchday_date = text(row.get("date"))
            matches = [
                m for m in (
                    _match_from_row(item, matchday_date) for item in row.get("matches") or []
                )
                if m is not None
            ]
            matchdays.append(Matchday(
                matchday_id=text(row.get("matchday_id")),
                jornada=jornada,
                date=matchday_date,
                matches=matches,
                rest=optional_text(row.get("rest")),
            ))
        return sorted(matchdays, key=lambda md: md.jornada)

    def get_all_teams(self) -> list[Team]:
        teams = []
        for row in self.db.execute_query(TEAMS_QUERY):
            name = text(row.get("name"))
            if not name:
                continue
            players = [
                Player(
                    player_id=player_id(p.get("player_id")),
                    name=text(p.get("name")),
                    alias=optional_text(p.get("alias")),
                )
                for p in row.get("players") or []
                if text(p.get("name"))
            ]
            teams.append(Team(team_id=text(row.get("team_id")) or name, name=name, players=players))
        return teams

    def get_all_match_reports(self) -> list[MatchReport]:
        reports = []
        for row in self.db.execute_query(REPORTS_QUERY):
            report = row.get("report") or {}
            home, away = text(report.get("home")), text(report.get("away"))
            if not home or not away or home == away:
                LOGGER.warning("Skipping stored report %r without two teams", report.get("report_id"))
                continue

            sides = {
                home: TeamParticipation(home, formation=optional_text(report.get("home_formation"))),
                away: TeamParticipation(away, formation=optional_text(report.get("away_formation"))),
            }
            for entry in row.get("entries") or []:
                participation = sides.get(text(entry.get("team")))
                if participation is not None and text(entry.get("name")):
                    participation.players.append(_report_player_from_row(entry))

            observations = report.get("observations")
            reports.append(MatchReport(
                home=home,
                away=away,
                home_participation=sides[home],
                away_participation=sides[away],
                observations=observations if isinstance(observations, str) else "",
            ))
        return reports

    def load_snapshot(self, settings: Optional[Settings] = None) -> LeagueSnapshot:
        """Fetch the three collections in one go."""
        return LeagueSnapshot(
            matchdays=self.get_all_matchdays(),
            teams=self.get_all_teams(),
            reports=self.get_all_match_reports(),
            settings=settings or Settings(),
        )

    def mark_match_live(self, matchday_id: str, match: Match) -> bool:
        """Move a pending match to LIVE; False when it was no longer pending."""
        result = self.db.execute_query(
            MARK_LIVE_QUERY,
            {
                "matchday_id": matchday_id,
                "home": match.home,
                "away": match.away,
                "from_statuses": [PENDING, SCHEDULED],
                "status": LIVE,
            },
        )
        return bool(result and result[0].get("updated"))
