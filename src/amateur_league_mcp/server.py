"""MCP Server for the amateur league statistics engine."""

import asyncio
import logging
import sys
from datetime import datetime
from typing import Optional

from mcp.server.fastmcp import FastMCP

from .config import Settings
from .database import Neo4jDatabase
from .importer import import_league_data
from .league import LeagueSnapshot
from .live_sweep import PeriodicTask, run_live_sweep
from .match_status import classify, describe_status, league_now
from .matchdays import default_jornada, find_matchday
from .models import PLAYED, Match, Matchday
from .repository import LeagueRepository
from .summaries import find_report, player_summary, team_summary

LOGGER = logging.getLogger(__name__)

# Initialize the server
server = FastMCP("amateur-league")

# Database connection (lazy initialization)
_db: Optional[Neo4jDatabase] = None
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings.from_env()
    return _settings


def get_db() -> Neo4jDatabase:
    """Get or create database connection."""
    global _db
    if _db is None:
        _db = Neo4jDatabase(settings=get_settings())
        _db.connect()
    return _db


def get_repository() -> LeagueRepository:
    return LeagueRepository(get_db())


def load_snapshot() -> LeagueSnapshot:
    return get_repository().load_snapshot(get_settings())


def current_time() -> datetime:
    return league_now(get_settings().timezone)


def _score(match: Match) -> str:
    if match.status == PLAYED:
        return f"{match.home_goals}-{match.away_goals}"
    return "vs"


def _format_match(match: Match, now: datetime) -> str:
    status = classify(match, now, get_settings().live_window_minutes)
    line = f"- {match.home} {_score(match)} {match.away}"
    if status.is_live:
        line = f"- {match.home} {match.home_goals}-{match.away_goals} {match.away}"
    kickoff = " ".join(part for part in (match.date, match.time) if part)
    if kickoff:
        line += f" ({kickoff})"
    return line + f" [{describe_status(status)}]\n"


def _format_matchday(title: str, matchday: Optional[Matchday], now: datetime) -> str:
    if matchday is None:
        return f"**{title}**: none\n\n"
    output = f"**{title}: Jornada {matchday.jornada}**"
    if matchday.date:
        output += f" ({matchday.date})"
    output += "\n"
    for match in matchday.matches:
        output += _format_match(match, now)
    if matchday.rest:
        output += f"- Rest: {matchday.rest}\n"
    return output + "\n"


def _find_match(snapshot: LeagueSnapshot, home: str, away: str) -> Optional[tuple[Matchday, Match]]:
    for matchday in snapshot.matchdays:
        for match in matchday.matches:
            if match.home.lower() == home.lower() and match.away.lower() == away.lower():
                return matchday, match
    return None


# ============================================================================
# Table and ranking tools
# ============================================================================


@server.tool()
async def get_standings(chronological_form: bool = False) -> str:
    """Get the league table, including matches currently being played.

    Args:
        chronological_form: Order the form guide by kickoff time instead of jornada
    """
    standings = load_snapshot().standings(chronological=chronological_form)

    if not standings:
        return "No teams registered yet."

    output = "**Standings**\n\n"
    output += "| Pos | Team | P | W | D | L | GF | GA | GD | Pts | Form |\n"
    output += "|---|---|---|---|---|---|---|---|---|---|---|\n"
    for row in standings:
        output += (
            f"| {row.position} | {row.team} | {row.played} | {row.won} | {row.drawn} | "
            f"{row.lost} | {row.goals_for} | {row.goals_against} | {row.goal_difference:+d} | "
            f"{row.points} | {' '.join(row.form)} |\n"
        )
    return output


@server.tool()
async def get_top_scorers(limit: Optional[int] = None) -> str:
    """Get the top scorers (pichichi ranking) from all match reports.

    Args:
        limit: Maximum number of players to return (default 20)
    """
    scorers = load_snapshot().top_scorers()
    if limit is not None:
        scorers = scorers[:max(limit, 0)]

    if not scorers:
        return "No goals recorded yet."

    output = "**Top Scorers**\n\n"
    for i, scorer in enumerate(scorers, 1):
        output += f"{i}. {scorer.name} ({scorer.team}) - {scorer.goals} goals\n"
    return output


@server.tool()
async def get_card_rankings(limit: Optional[int] = None) -> str:
    """Get players ranked by cards, a red card weighing three yellows by default.

    Args:
        limit: Maximum number of players to return (default 20)
    """
    snapshot = load_snapshot()
    rankings = snapshot.card_rankings()
    if limit is not None:
        rankings = rankings[:max(limit, 0)]

    if not rankings:
        return "No cards recorded yet."

    weight = snapshot.settings.red_card_weight
    output = "**Cards**\n\n"
    for i, player in enumerate(rankings, 1):
        output += (
            f"{i}. {player.name} ({player.team}) - {player.yellow_cards} yellow, "
            f"{player.red_cards} red (score {player.score(weight)})\n"
        )
    return output


# ============================================================================
# Matchday tools
# ============================================================================


@server.tool()
async def get_featured_matchdays() -> str:
    """Get the live matchday (if any), the last played matchday and the next one."""
    snapshot = load_snapshot()
    now = current_time()
    featured = snapshot.featured(now)

    output = ""
    if featured.live is not None:
        output += _format_matchday("Live now", featured.live, now)
    output += _format_matchday("Last matchday", featured.last_played, now)
    output += _format_matchday("Next matchday", featured.next, now)
    return output


@server.tool()
async def get_matchday(jornada: Optional[int] = None) -> str:
    """Get the fixtures of one matchday with their real-time status.

    Args:
        jornada: Matchday number (defaults to the first one with pending matches)
    """
    snapshot = load_snapshot()
    if jornada is None:
        jornada = default_jornada(snapshot.matchdays)

    matchday = find_matchday(snapshot.matchdays, jornada)
    if matchday is None:
        return f"Jornada {jornada} not found"

    return _format_matchday("Matchday", matchday, current_time())


@server.tool()
async def get_match_status(home: str, away: str) -> str:
    """Get the real-time status of one match.

    Args:
        home: Home team name
        away: Away team name
    """
    found = _find_match(load_snapshot(), home, away)
    if found is None:
        return f"No match found between '{home}' and '{away}'"

    matchday, match = found
    status = classify(match, current_time(), get_settings().live_window_minutes)
    output = f"**{match.home} vs {match.away}** (Jornada {matchday.jornada})\n\n"
    output += f"- Status: {describe_status(status)}\n"
    if status.elapsed_minutes is not None:
        output += f"- Minutes since kickoff: {status.elapsed_minutes}\n"
    return output


# ============================================================================
# Team and player tools
# ============================================================================


@server.tool()
async def get_team_summary(team: str) -> str:
    """Get fixtures, season record and roster statistics of a team.

    Args:
        team: Team name (exact, case-insensitive)
    """
    snapshot = load_snapshot()
    team_name = next((n for n in snapshot.team_names() if n.lower() == team.lower()), None)
    if team_name is None:
        return f"Team '{team}' not found"

    summary = team_summary(team_name, snapshot.matchdays, snapshot.teams, snapshot.reports)

    output = f"**{summary.team}**\n\n"
    output += f"- Played: {summary.played}\n"
    output += f"- Won: {summary.won}, Drawn: {summary.drawn}, Lost: {summary.lost}\n"
    output += f"- Goals: {summary.goals_for} for, {summary.goals_against} against\n"

    if summary.fixtures:
        output += "\n**Fixtures:**\n"
        for fixture in summary.fixtures:
            match = fixture.match
            output += f"- J{fixture.jornada}: {match.home} {_score(match)} {match.away}\n"

    if summary.roster:
        output += "\n**Roster:**\n"
        for stats in summary.roster:
            player = stats.player
            alias = f" \"{player.alias}\"" if player.alias else ""
            output += (
                f"- #{player.player_id} {player.name}{alias}: {stats.games_played} games "
                f"({stats.games_started} started), {stats.goals} goals, "
                f"{stats.yellow_cards} yellow, {stats.red_cards} red\n"
            )
    return output


@server.tool()
async def get_player_summary(player: str, team: str) -> str:
    """Get the match-by-match record of a player.

    Args:
        player: Player full name
        team: Team name
    """
    snapshot = load_snapshot()
    summary = player_summary(player, team, snapshot.matchdays, snapshot.reports, snapshot.teams)

    if summary.games_started + summary.games_as_substitute == 0:
        return f"No match reports found for '{player}' ({team})"

    output = f"**{summary.name}** ({summary.team})\n\n"
    output += f"- Goals: {summary.goals}\n"
    output += f"- Yellow Cards: {summary.yellow_cards}\n"
    output += f"- Red Cards: {summary.red_cards}\n"
    output += f"- Started: {summary.games_started}, Substitute: {summary.games_as_substitute}\n"

    if summary.matches:
        output += "\n**Matches:**\n"
        for line in summary.matches:
            venue = "home" if line.is_home else "away"
            role = "starter" if line.is_starting else f"sub {line.substitution_min}".strip()
            output += (
                f"- J{line.jornada} vs {line.opponent} ({venue}) {line.result}: {role}, "
                f"{line.goals} goals, {line.yellow_cards} yellow, {line.red_cards} red\n"
            )
    return output


@server.tool()
async def get_match_report(home: str, away: str) -> str:
    """Get the match report (acta) of a match: lineups, goals and cards.

    Args:
        home: Home team name
        away: Away team name
    """
    snapshot = load_snapshot()
    found = _find_match(snapshot, home, away)
    match = found[1] if found else Match(home=home, away=away)
    report = find_report(snapshot.reports, match)
    if report is None:
        return f"No match report for {home} vs {away}"

    output = f"**Match report: {report.home} vs {report.away}**\n"
    if found:
        output += f"Result: {match.home_goals}-{match.away_goals}\n"
    for participation in report.participations():
        output += f"\n**{participation.team}**"
        if participation.formation:
            output += f" ({participation.formation})"
        output += "\n"
        for entry in participation.starters + participation.substitutes:
            details = []
            if not entry.is_starting:
                details.append(f"sub {entry.substitution_min}".strip())
            if entry.goals:
                details.append(f"{entry.goals} goals")
            if entry.yellow_cards:
                details.append(f"{entry.yellow_cards} yellow")
            if entry.total_red_cards:
                details.append(f"{entry.total_red_cards} red")
            suffix = f" ({', '.join(details)})" if details else ""
            output += f"- #{entry.match_number} {entry.name}{suffix}\n"
    if report.observations.strip():
        output += f"\n**Observations:** {report.observations.strip()}\n"
    return output


# ============================================================================
# Maintenance tools
# ============================================================================


def sweep_live_matches() -> None:
    """One scheduler tick: move started matches to LIVE."""
    settings = get_settings()
    result = run_live_sweep(get_repository(), current_time(), settings.live_window_minutes)
    if result.transitioned or result.failed:
        LOGGER.info(
            "Live sweep: %d checked, %d now live, %d failed",
            result.checked, result.transitioned, result.failed,
        )


@server.tool()
async def run_live_sweep_now() -> str:
    """Mark every pending match whose kickoff window has started as LIVE."""
    settings = get_settings()
    result = await asyncio.to_thread(
        run_live_sweep, get_repository(), current_time(), settings.live_window_minutes
    )
    output = f"Checked {result.checked} match(es), {result.transitioned} now LIVE"
    if result.failed:
        output += f", {result.failed} failed"
    output += "\n"
    for label in result.matches:
        output += f"- {label}\n"
    return output


@server.tool()
async def import_league_files() -> str:
    """Import fixtures, rosters, match reports and exports from the data directory."""
    stats = await asyncio.to_thread(import_league_data, get_db(), get_settings().data_dir)
    return (
        f"Imported {stats['teams']} team(s), {stats['matchdays']} matchday(s) and "
        f"{stats['match_reports']} match report(s); {stats['skipped']} record(s) skipped\n"
    )


async def main():
    """Run the MCP server with the live sweep ticking in the background."""
    settings = get_settings()
    # stdout carries the MCP protocol
    logging.basicConfig(
        level=settings.log_level,
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    sweep = PeriodicTask(settings.sweep_interval_seconds, sweep_live_matches, name="live-sweep")
    try:
        async with sweep:
            await server.run_stdio_async()
    finally:
        if _db is not None:
            _db.close()


def run() -> None:
    asyncio.run(main())


if __name__ == "__main__":
    run()
