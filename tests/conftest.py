"""Pytest configuration and fixtures for amateur league MCP tests."""

import os

import pytest

from amateur_league_mcp.data_loader import get_sample_data, match_key
from amateur_league_mcp.league import LeagueSnapshot
from amateur_league_mcp.models import Match, Matchday
from amateur_league_mcp.repository import LeagueRepository

# Set up test environment
os.environ.setdefault("NEO4J_URI", "bolt://localhost:7687")
os.environ.setdefault("NEO4J_USER", "neo4j")
os.environ.setdefault("NEO4J_PASSWORD", "password")


class MockNeo4jDatabase:
    """Mock Neo4j database for testing without a real database.

    Answers the repository's read queries from sample data kept in memory
    and records every write.
    """

    def __init__(self, data=None):
        self.data = data if data is not None else get_sample_data()
        self.writes = []
        self.mark_live_calls = 0
        self.mark_live_error = None
        self._connected = False

    def connect(self):
        self._connected = True

    def close(self):
        self._connected = False

    def execute_query(self, query: str, parameters: dict = None) -> list:
        """Execute a mock query against in-memory data."""
        params = parameters or {}

        if "SET m.status = $status" in query:
            return self._mark_live(params)

        if "MATCH (md:Matchday)" in query:
            return [self._matchday_row(md) for md in self.data["matchdays"]]

        if "MATCH (t:Team)" in query:
            return [self._team_row(t) for t in sorted(self.data["teams"], key=lambda t: t.name)]

        if "MATCH (r:MatchReport)" in query:
            return [self._report_row(r) for r in self.data["match_reports"]]

        return []

    def execute_write(self, query: str, parameters: dict = None) -> None:
        self.writes.append((query, parameters or {}))

    def clear_database(self) -> None:
        self.execute_write("MATCH (n) DETACH DELETE n")

    def create_constraints(self) -> None:
        pass

    def create_indexes(self) -> None:
        pass

    def _mark_live(self, params: dict) -> list:
        self.mark_live_calls += 1
        if self.mark_live_error is not None:
            raise self.mark_live_error

        updated = 0
        for matchday in self.data["matchdays"]:
            if matchday.matchday_id != params["matchday_id"]:
                continue
            for match in matchday.matches:
                if (match.home, match.away) != (params["home"], params["away"]):
                    continue
                if match.status in params["from_statuses"]:
                    match.status = params["status"]
                    updated += 1
        return [{"updated": updated}]

    @staticmethod
    def _matchday_row(matchday: Matchday) -> dict:
        return {
            "matchday_id": matchday.matchday_id,
            "jornada": matchday.jornada,
            "date": matchday.date,
            "rest": matchday.rest,
            "matches": [
                {
                    "match_key": match_key(matchday.matchday_id, position),
                    "position": position,
                    "home": m.home,
                    "away": m.away,
                    "home_goals": m.home_goals,
                    "away_goals": m.away_goals,
                    "date": m.date,
                    "time": m.time,
                    "status": m.status,
                    "referee": m.referee,
                    "referee_name": m.referee_name,
                }
                for position, m in enumerate(matchday.matches)
            ],
        }

    @staticmethod
    def _team_row(team) -> dict:
        return {
            "team_id": team.team_id,
            "name": team.name,
            "players": [
                {"player_id": p.player_id, "name": p.name, "alias": p.alias, "position": i}
                for i, p in enumerate(team.players)
            ],
        }

    @staticmethod
    def _report_row(report) -> dict:
        entries = []
        for participation in report.participations():
            for position, p in enumerate(participation.players):
                entries.append({
                    "team": participation.team,
                    "position": position,
                    "player_id": p.player_id,
                    "name": p.name,
                    "match_number": p.match_number,
                    "is_starting": p.is_starting,
                    "substitution_min": p.substitution_min,
                    "goals": p.goals,
                    "own_goals": p.own_goals,
                    "yellow_cards": p.yellow_cards,
                    "red_cards": p.red_cards,
                    "direct_red_cards": p.direct_red_cards,
                    "alias": p.alias,
                })
        return {
            "report": {
                "report_id": report.report_id,
                "home": report.home,
                "away": report.away,
                "observations": report.observations,
                "home_formation": report.home_participation.formation,
                "away_formation": report.away_participation.formation,
            },
            "entries": entries,
        }


def played(home, away, home_goals, away_goals, date="", time=""):
    """A PLAYED match, for building small leagues inline."""
    return Match(home, away, home_goals, away_goals, date, time, "PLAYED")


@pytest.fixture
def sample_data():
    return get_sample_data()


@pytest.fixture
def mock_db():
    """Provide a mock database for testing."""
    return MockNeo4jDatabase()


@pytest.fixture
def db_with_sample_data(mock_db):
    """Provide a mock database pre-populated with sample data."""
    mock_db.connect()
    return mock_db


@pytest.fixture
def repository(db_with_sample_data):
    return LeagueRepository(db_with_sample_data)


@pytest.fixture
def snapshot(sample_data):
    """The sample league, straight from the models."""
    return LeagueSnapshot(
        matchdays=sample_data["matchdays"],
        teams=sample_data["teams"],
        reports=sample_data["match_reports"],
    )

