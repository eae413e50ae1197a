"""Tests for the top scorer and card aggregators."""

from amateur_league_mcp.models import MatchReport, ReportPlayer, TeamParticipation
from amateur_league_mcp.rankings import compute_card_rankings, compute_top_scorers, pichichi


def _report(home, away, home_players=(), away_players=()):
    return MatchReport(
        home, away,
        TeamParticipation(home, list(home_players)),
        TeamParticipation(away, list(away_players)),
    )


def _player(name, **counts):
    return ReportPlayer(player_id=1, name=name, is_starting=True, **counts)


class TestTopScorers:
    def test_tie_on_goals_is_ordered_by_name(self):
        reports = [
            _report("A", "B", [_player("Yago", goals=2)]),
            _report("C", "D", [_player("Xavi", goals=2)]),
        ]
        scorers = compute_top_scorers(reports)
        assert [(s.name, s.team, s.goals) for s in scorers] == [("Xavi", "C", 2), ("Yago", "A", 2)]

    def test_goals_add_up_across_reports(self):
        reports = [
            _report("A", "B", [_player("Yago", goals=1)]),
            _report("B", "A", [], [_player("Yago", goals=2)]),
        ]
        assert compute_top_scorers(reports)[0].goals == 3

    def test_namesakes_stay_apart(self):
        reports = [_report("A", "B", [_player("Leo", goals=1)], [_player("Leo", goals=1)])]
        assert {(s.name, s.team) for s in compute_top_scorers(reports)} == {("Leo", "A"), ("Leo", "B")}

    def test_limit(self, sample_data):
        assert len(compute_top_scorers(sample_data["match_reports"], limit=3)) == 3

    def test_negative_goals_never_subtract(self):
        reports = [
            _report("A", "B", [_player("Yago", goals=2)]),
            _report("A", "C", [_player("Yago", goals=-5)]),
        ]
        assert compute_top_scorers(reports)[0].goals == 2

    def test_pichichi(self, sample_data):
        top = pichichi(compute_top_scorers(sample_data["match_reports"]))
        assert (top.name, top.team) == ("Javier Moreno", "Real Barrio")
        assert pichichi([]) is None


class TestCardRankings:
    def test_direct_and_second_yellow_reds_are_summed(self):
        reports = [_report("A", "B", [_player("Yago", yellow_cards=1, red_cards=1, direct_red_cards=1)])]
        player = compute_card_rankings(reports)[0]
        assert (player.yellow_cards, player.red_cards) == (1, 2)
        assert player.score() == 7

    def test_players_without_cards_are_left_out(self):
        reports = [_report("A", "B", [_player("Yago", goals=3)])]
        assert compute_card_rankings(reports) == []

    def test_more_reds_break_a_score_tie(self):
        reports = [_report("A", "B", [
            _player("Ana", yellow_cards=3),
            _player("Zoe", red_cards=1),
        ])]
        assert [c.name for c in compute_card_rankings(reports)] == ["Zoe", "Ana"]

    def test_totals_never_decrease(self, sample_data):
        reports = sample_data["match_reports"]
        previous = {}
        for i in range(1, len(reports) + 1):
            current = {(c.name, c.team): c.score() for c in compute_card_rankings(reports[:i], limit=100)}
            for key, score in previous.items():
                assert current[key] >= score >= 0
            previous = current
