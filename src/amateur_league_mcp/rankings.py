"""Player rankings (top scorers and cards) folded from match reports."""

from typing import Iterable, Iterator, Optional

from .models import CardRanking, MatchReport, ReportPlayer, TopScorer

DEFAULT_LIMIT = 20
DEFAULT_RED_CARD_WEIGHT = 3


def _count(value: object) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        return 0
    return max(value, 0)


def _report_players(reports: Iterable[MatchReport]) -> Iterator[tuple[str, ReportPlayer]]:
    for report in reports:
        for participation in report.participations():
            for player in participation.players:
                if player.name:
                    yield participation.team, player


def compute_top_scorers(
    reports: Iterable[MatchReport], limit: int = DEFAULT_LIMIT
) -> list[TopScorer]:
    """Goals per player, keyed by (name, team): namesakes in other teams stay apart."""
    scorers: dict[tuple[str, str], TopScorer] = {}

    for team, player in _report_players(reports):
        goals = _count(player.goals)
        if goals == 0:
            continue
        key = (player.name, team)
        if key not in scorers:
            scorers[key] = TopScorer(name=player.name, team=team, player_id=player.player_id)
        scorers[key].goals += goals

    ranked = sorted(scorers.values(), key=lambda s: (-s.goals, s.name, s.team))
    return ranked[:limit]


def compute_card_rankings(
    reports: Iterable[MatchReport],
    limit: int = DEFAULT_LIMIT,
    red_card_weight: int = DEFAULT_RED_CARD_WEIGHT,
) -> list[CardRanking]:
    """Cards per player, ranked by ``yellow + red_card_weight * red``.

    Second-yellow reds and direct reds are summed into a single red count.
    """
    players: dict[tuple[str, str], CardRanking] = {}

    for team, player in _report_players(reports):
        yellow = _count(player.yellow_cards)
        red = _count(player.red_cards) + _count(player.direct_red_cards)
        if yellow == 0 and red == 0:
            continue
        key = (player.name, team)
        if key not in players:
            players[key] = CardRanking(name=player.name, team=team, player_id=player.player_id)
        players[key].yellow_cards += yellow
        players[key].red_cards += red

    ranked = sorted(
        players.values(),
        key=lambda c: (-c.score(red_card_weight), -c.red_cards, c.name, c.team),
    )
    return ranked[:limit]


def pichichi(scorers: list[TopScorer]) -> Optional[TopScorer]:
    return scorers[0] if scorers else None
