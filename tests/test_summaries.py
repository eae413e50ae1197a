"""Tests for the team and player views."""

from amateur_league_mcp.models import (
    Match,
    Matchday,
    MatchReport,
    Player,
    ReportPlayer,
    TeamParticipation,
)
from amateur_league_mcp.summaries import (
    find_report,
    player_summary,
    sort_roster,
    team_matches,
    team_summary,
)

from conftest import played


class TestTeamSummary:
    def test_record(self, sample_data):
        summary = team_summary(
            "Real Barrio", sample_data["matchdays"], sample_data["teams"], sample_data["match_reports"]
        )
        assert [f.jornada for f in summary.fixtures] == [1, 2, 3]
        assert (summary.played, summary.won, summary.drawn, summary.lost) == (3, 2, 1, 0)
        assert (summary.goals_for, summary.goals_against) == (6, 3)

    def test_roster_stats(self, sample_data):
        summary = team_summary(
            "Real Barrio", sample_data["matchdays"], sample_data["teams"], sample_data["match_reports"]
        )
        assert [s.player.player_id for s in summary.roster] == [1, 4, 9, 10]
        javi = next(s for s in summary.roster if s.player.name == "Javier Moreno")
        assert (javi.games_played, javi.games_started, javi.goals, javi.yellow_cards) == (3, 3, 3, 2)
        vidal = next(s for s in summary.roster if s.player.name == "Andrés Vidal")
        assert (vidal.games_played, vidal.games_started) == (1, 0)

    def test_unknown_team(self, sample_data):
        summary = team_summary("Nadie", sample_data["matchdays"], sample_data["teams"], [])
        assert summary.fixtures == []
        assert summary.roster == []

    def test_team_matches_include_pending(self, sample_data):
        fixtures = team_matches(sample_data["matchdays"], "CD Ribera")
        assert [f.jornada for f in fixtures] == [1, 3, 4]


class TestPlayerSummary:
    def test_match_lines(self, sample_data):
        summary = player_summary(
            "Javier Moreno", "Real Barrio",
            sample_data["matchdays"], sample_data["match_reports"], sample_data["teams"],
        )
        assert summary.player_id == 9
        assert (summary.goals, summary.yellow_cards, summary.red_cards) == (3, 2, 0)
        assert summary.games_started == 3
        lines = [(l.jornada, l.opponent, l.is_home, l.result) for l in summary.matches]
        assert lines == [
            (1, "Deportivo Las Lomas", True, "2-1"),
            (2, "Unión Norte", False, "3-1"),
            (3, "Atlético Sur-Este", True, "1-1"),
        ]

    def test_namesake_in_other_team(self, sample_data):
        summary = player_summary(
            "Javier Moreno", "Unión Norte", sample_data["matchdays"], sample_data["match_reports"]
        )
        assert summary.goals == 1
        assert summary.player_id == 10
        assert [l.result for l in summary.matches] == ["1-3"]

    def test_substitute(self, sample_data):
        summary = player_summary(
            "Hugo León", "Atlético Sur-Este", sample_data["matchdays"], sample_data["match_reports"]
        )
        assert summary.games_as_substitute == 1
        assert summary.matches[0].substitution_min == "70'"


def test_sort_roster_puts_non_numeric_dorsals_last():
    players = [Player("10B", "Hugo"), Player(9, "Daniel"), Player("8", "Rubén"), Player(9, "Ana")]
    assert [p.name for p in sort_roster(players)] == ["Rubén", "Ana", "Daniel", "Hugo"]


def test_find_report_by_home_and_away():
    report = MatchReport("A", "B", TeamParticipation("A"), TeamParticipation("B"))
    assert find_report([report], Match("A", "B")) is report
    assert find_report([report], Match("B", "A")) is None


class TestTwoLegFixtures:
    def _league(self):
        matchdays = [
            Matchday("MD1", 1, matches=[played("B", "A", 0, 3)]),
            Matchday("MD2", 2, matches=[played("A", "B", 1, 1)]),
        ]
        report = MatchReport(
            "A", "B",
            TeamParticipation("A", [ReportPlayer(7, "Xabi", is_starting=True, goals=1)]),
            TeamParticipation("B"),
        )
        return matchdays, report

    def test_report_is_linked_to_its_own_leg(self):
        matchdays, report = self._league()
        summary = player_summary("Xabi", "A", matchdays, [report])
        (line,) = summary.matches
        assert (line.jornada, line.is_home, line.result) == (2, True, "1-1")

    def test_swapped_report_falls_back_to_the_reverse_leg(self):
        matchdays, report = self._league()
        summary = player_summary("Xabi", "A", matchdays[:1], [report])
        (line,) = summary.matches
        assert (line.jornada, line.is_home, line.result) == (1, False, "3-0")
