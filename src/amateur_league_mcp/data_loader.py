"""Data loader for populating Neo4j with amateur league data."""

import logging
from typing import Any

from .database import Neo4jDatabase
from .models import (
    PENDING,
    PLAYED,
    Match,
    Matchday,
    MatchReport,
    Player,
    ReportPlayer,
    Team,
    TeamParticipation,
)

LOGGER = logging.getLogger(__name__)


def match_key(matchday_id: str, position: int) -> str:
    """Storage key of the match at ``position`` within a matchday."""
    return f"{matchday_id}:{position}"


class LeagueDataLoader:
    """Load league data into Neo4j."""

    def __init__(self, db: Neo4jDatabase):
        self.db = db

    def load_team(self, team: Team) -> None:
        """Load a team and replace its roster."""
        query = """
        MERGE (t:Team {team_id: $team_id})
        SET t.name = $name
        WITH t
        OPTIONAL MATCH (old:Player)-[:PLAYS_FOR]->(t)
        DETACH DELETE old
        WITH DISTINCT t
        UNWIND $players AS player
        CREATE (p:Player)-[:PLAYS_FOR]->(t)
        SET p = player
        """
        self.db.execute_write(
            query,
            {
                "team_id": team.team_id,
                "name": team.name,
                "players": [
                    {
                        "player_id": player.player_id,
                        "name": player.name,
                        "alias": player.alias,
                        "position": position,
                    }
                    for position, player in enumerate(team.players)
                ],
            },
        )

    def load_matchday(self, matchday: Matchday) -> None:
        """Load a matchday and replace its matches."""
        query = """
        MERGE (md:Matchday {matchday_id: $matchday_id})
        SET md.jornada = $jornada,
            md.date = $date,
            md.rest = $rest
        WITH md
        OPTIONAL MATCH (md)-[:HAS_MATCH]->(old:Match)
        DETACH DELETE old
        WITH DISTINCT md
        UNWIND $matches AS match
        CREATE (md)-[:HAS_MATCH]->(m:Match)
        SET m = match
        """
        self.db.execute_write(
            query,
            {
                "matchday_id": matchday.matchday_id,
                "jornada": matchday.jornada,
                "date": matchday.date,
                "rest": matchday.rest,
                "matches": [
                    {
                        "match_key": match_key(matchday.matchday_id, position),
                        "position": position,
                        "home": match.home,
                        "away": match.away,
                        "home_goals": match.home_goals,
                        "away_goals": match.away_goals,
                        "date": match.date,
                        "time": match.time,
                        "status": match.status,
                        "referee": match.referee,
                        "referee_name": match.referee_name,
                    }
                    for position, match in enumerate(matchday.matches)
                ],
            },
        )

    def load_match_report(self, report: MatchReport) -> None:
        """Load a match report and replace its player entries."""
        query = """
        MERGE (r:MatchReport {report_id: $report_id})
        SET r.home = $home,
            r.away = $away,
            r.observations = $observations,
            r.home_formation = $home_formation,
            r.away_formation = $away_formation
        WITH r
        OPTIONAL MATCH (r)-[:HAS_ENTRY]->(old:ReportEntry)
        DETACH DELETE old
        WITH DISTINCT r
        UNWIND $entries AS entry
        CREATE (r)-[:HAS_ENTRY]->(e:ReportEntry)
        SET e = entry
        """
        entries = []
        for participation in report.participations():
            for position, player in enumerate(participation.players):
                entries.append({
                    "team": participation.team,
                    "position": position,
                    "player_id": player.player_id,
                    "name": player.name,
                    "match_number": player.match_number,
                    "is_starting": player.is_starting,
                    "substitution_min": player.substitution_min,
                    "goals": player.goals,
                    "own_goals": player.own_goals,
                    "yellow_cards": player.yellow_cards,
                    "red_cards": player.red_cards,
                    "direct_red_cards": player.direct_red_cards,
                    "alias": player.alias,
                })

        self.db.execute_write(
            query,
            {
                "report_id": report.report_id,
                "home": report.home,
                "away": report.away,
                "observations": report.observations,
                "home_formation": report.home_participation.formation,
                "away_formation": report.away_participation.formation,
                "entries": entries,
            },
        )


def _entry(player_id, name, goals=0, yellow=0, red=0, direct_red=0,
           starting=True, sub_min="") -> ReportPlayer:
    return ReportPlayer(
        player_id=player_id,
        name=name,
        match_number=player_id,
        is_starting=starting,
        substitution_min=sub_min,
        goals=goals,
        yellow_cards=yellow,
        red_cards=red,
        direct_red_cards=direct_red,
    )


def get_sample_data() -> dict[str, Any]:
    """Get a small sample league for demo purposes."""
    teams = [
        Team("T001", "Real Barrio", [
            Player(1, "Pablo Ruiz"),
            Player(4, "Andrés Vidal"),
            Player(9, "Javier Moreno", "Javi"),
            Player(10, "Luis Ortega"),
        ]),
        Team("T002", "Deportivo Las Lomas", [
            Player(1, "Iván Gómez"),
            Player(7, "Carlos Pérez"),
            Player(11, "Miguel Santos", "Migue"),
        ]),
        Team("T003", "Atlético Sur-Este", [
            Player(8, "Rubén Castro"),
            Player(9, "Daniel Sanz"),
            Player("10B", "Hugo León"),
        ]),
        Team("T004", "CD Ribera", [
            Player(5, "Marcos Gil"),
            Player(9, "Álvaro Díaz"),
        ]),
        Team("T005", "Unión Norte", [
            Player(6, "Raúl Navarro"),
            Player(10, "Javier Moreno"),  # namesake of the Real Barrio striker
        ]),
    ]

    matchdays = [
        Matchday("MD01", 1, "04-10-2025", [
            Match("Real Barrio", "Deportivo Las Lomas", 2, 1, "04-10-2025", "10:00", PLAYED),
            Match("Atlético Sur-Este", "CD Ribera", 0, 0, "04-10-2025", "12:00", PLAYED),
        ], rest="Unión Norte"),
        Matchday("MD02", 2, "11-10-2025", [
            Match("Unión Norte", "Real Barrio", 1, 3, "11-10-2025", "10:00", PLAYED),
            Match("Deportivo Las Lomas", "Atlético Sur-Este", 2, 2, "11/10/2025", "12:00", PLAYED),
        ], rest="CD Ribera"),
        Matchday("MD03", 3, "18-10-2025", [
            Match("CD Ribera", "Unión Norte", 1, 0, "18-10-2025", "10:00", PLAYED),
            Match("Real Barrio", "Atlético Sur-Este", 1, 1, "18-10-2025", "12:00", PLAYED),
        ], rest="Deportivo Las Lomas"),
        Matchday("MD04", 4, "25-10-2025", [
            Match("Deportivo Las Lomas", "CD Ribera", 0, 0, "25-10-2025", "10:00", PENDING),
            Match("Atlético Sur-Este", "Unión Norte", 0, 0, "25-10-2025", "12:00", PENDING),
        ], rest="Real Barrio"),
    ]

    reports = [
        MatchReport(
            "Real Barrio", "Deportivo Las Lomas",
            TeamParticipation("Real Barrio", [
                _entry(9, "Javier Moreno", goals=2, yellow=1),
                _entry(10, "Luis Ortega"),
                _entry(1, "Pablo Ruiz"),
                _entry(4, "Andrés Vidal", yellow=1, starting=False, sub_min="65'"),
            ], formation="2-3-1"),
            TeamParticipation("Deportivo Las Lomas", [
                _entry(7, "Carlos Pérez", goals=1),
                _entry(11, "Miguel Santos", yellow=1, red=1),
                _entry(1, "Iván Gómez"),
            ]),
            observations="Expulsión por doble amarilla en el minuto 80.",
        ),
        MatchReport(
            "Unión Norte", "Real Barrio",
            TeamParticipation("Unión Norte", [
                _entry(10, "Javier Moreno", goals=1),
                _entry(6, "Raúl Navarro", direct_red=1),
            ]),
            TeamParticipation("Real Barrio", [
                _entry(9, "Javier Moreno", goals=1),
                _entry(10, "Luis Ortega", goals=2, yellow=1),
                _entry(1, "Pablo Ruiz"),
            ]),
        ),
        MatchReport(
            "Deportivo Las Lomas", "Atlético Sur-Este",
            TeamParticipation("Deportivo Las Lomas", [
                _entry(11, "Miguel Santos", goals=2, yellow=1),
                _entry(7, "Carlos Pérez"),
            ]),
            TeamParticipation("Atlético Sur-Este", [
                _entry(9, "Daniel Sanz", goals=1),
                _entry("10B", "Hugo León", goals=1, yellow=1, starting=False, sub_min="70'"),
                _entry(8, "Rubén Castro", yellow=1, red=1),
            ]),
        ),
        MatchReport(
            "Real Barrio", "Atlético Sur-Este",
            TeamParticipation("Real Barrio", [
                _entry(10, "Luis Ortega", goals=1),
                _entry(9, "Javier Moreno", yellow=1),
            ]),
            TeamParticipation("Atlético Sur-Este", [
                _entry(8, "Rubén Castro", goals=1),
            ]),
        ),
    ]

    return {
        "teams": teams,
        "matchdays": matchdays,
        "match_reports": reports,
    }


def load_league(db: Neo4jDatabase, data: dict[str, Any]) -> dict[str, int]:
    """Load teams, matchdays and match reports into the database."""
    loader = LeagueDataLoader(db)

    # Create constraints and indexes first
    db.create_constraints()
    db.create_indexes()

    for team in data.get("teams", []):
        loader.load_team(team)

    for matchday in data.get("matchdays", []):
        loader.load_matchday(matchday)

    for report in data.get("match_reports", []):
        loader.load_match_report(report)

    counts = {key: len(data.get(key, [])) for key in ("teams", "matchdays", "match_reports")}
    LOGGER.info("Loaded league data: %s", counts)
    return counts


def load_sample_data(db: Neo4jDatabase) -> dict[str, int]:
    """Load all sample data into the database."""
    return load_league(db, get_sample_data())
