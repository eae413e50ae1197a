"""Per-team and per-player views built from fixtures and match reports."""

from typing import Iterable, Optional

from .models import (
    PLAYED,
    Match,
    Matchday,
    MatchReport,
    Player,
    PlayerMatchLine,
    PlayerSeasonStats,
    PlayerSummary,
    Team,
    TeamFixture,
    TeamSummary,
)

_NO_DORSAL = 999


def find_report(reports: Iterable[MatchReport], match: Match) -> Optional[MatchReport]:
    return next((r for r in reports if r.key == match.key), None)


def team_matches(matchdays: Iterable[Matchday], team: str) -> list[TeamFixture]:
    fixtures = [
        TeamFixture(jornada=md.jornada, match=m)
        for md in matchdays
        for m in md.matches
        if m.involves(team)
    ]
    return sorted(fixtures, key=lambda f: f.jornada)


def _dorsal(player: Player) -> int:
    if isinstance(player.player_id, int) and not isinstance(player.player_id, bool):
        return player.player_id
    try:
        return int(str(player.player_id).strip())
    except ValueError:
        return _NO_DORSAL


def sort_roster(players: Iterable[Player]) -> list[Player]:
    return sorted(players, key=lambda p: (_dorsal(p), p.name or ""))


def player_season_stats(
    player: Player, team: str, reports: Iterable[MatchReport]
) -> PlayerSeasonStats:
    stats = PlayerSeasonStats(player=player)
    for report in reports:
        participation = report.participation_for(team)
        if participation is None:
            continue
        entry = participation.find_player(player.name)
        if entry is None:
            continue
        stats.games_played += 1
        if entry.is_starting:
            stats.games_started += 1
        stats.goals += entry.goals
        stats.yellow_cards += entry.yellow_cards
        stats.red_cards += entry.total_red_cards
    return stats


def team_summary(
    team_name: str,
    matchdays: Iterable[Matchday],
    teams: Iterable[Team],
    reports: Iterable[MatchReport],
) -> TeamSummary:
    """Fixtures, season record and roster stats of one team."""
    reports = list(reports)
    summary = TeamSummary(team=team_name, fixtures=team_matches(matchdays, team_name))

    for fixture in summary.fixtures:
        match = fixture.match
        if match.status != PLAYED:
            continue
        is_home = match.home == team_name
        scored = match.home_goals if is_home else match.away_goals
        conceded = match.away_goals if is_home else match.home_goals
        summary.played += 1
        summary.goals_for += scored
        summary.goals_against += conceded
        if scored > conceded:
            summary.won += 1
        elif scored < conceded:
            summary.lost += 1
        else:
            summary.drawn += 1

    team = next((t for t in teams if t.name == team_name), None)
    if team is not None:
        summary.roster = [
            player_season_stats(player, team_name, reports)
            for player in sort_roster(team.players)
        ]
    return summary


def _find_fixture(matchdays: list[Matchday], report: MatchReport) -> Optional[TeamFixture]:
    # Exact leg first; a report filed with home and away swapped is the fallback
    for wanted in (report.key, (report.away, report.home)):
        for matchday in matchdays:
            for match in matchday.matches:
                if match.key == wanted:
                    return TeamFixture(jornada=matchday.jornada, match=match)
    return None


def player_summary(
    player_name: str,
    team_name: str,
    matchdays: Iterable[Matchday],
    reports: Iterable[MatchReport],
    teams: Iterable[Team] = (),
) -> PlayerSummary:
    """Match-by-match history and season totals of one player."""
    matchdays = list(matchdays)
    summary = PlayerSummary(name=player_name, team=team_name)

    team = next((t for t in teams if t.name == team_name), None)
    if team is not None:
        roster_entry = next((p for p in team.players if p.name == player_name), None)
        if roster_entry is not None:
            summary.player_id = roster_entry.player_id

    for report in reports:
        participation = report.participation_for(team_name)
        if participation is None:
            continue
        entry = participation.find_player(player_name)
        if entry is None:
            continue

        summary.goals += entry.goals
        summary.yellow_cards += entry.yellow_cards
        summary.red_cards += entry.total_red_cards
        if entry.is_starting:
            summary.games_started += 1
        else:
            summary.games_as_substitute += 1
        if summary.player_id is None:
            summary.player_id = entry.player_id

        fixture = _find_fixture(matchdays, report)
        if fixture is None:
            continue
        match = fixture.match
        is_home = match.home == team_name
        own = match.home_goals if is_home else match.away_goals
        other = match.away_goals if is_home else match.home_goals
        summary.matches.append(PlayerMatchLine(
            jornada=fixture.jornada,
            opponent=match.away if is_home else match.home,
            is_home=is_home,
            date=match.date,
            result=f"{own}-{other}",
            is_starting=entry.is_starting,
            substitution_min=entry.substitution_min,
            goals=entry.goals,
            yellow_cards=entry.yellow_cards,
            red_cards=entry.total_red_cards,
        ))

    summary.matches.sort(key=lambda line: line.jornada)
    return summary
