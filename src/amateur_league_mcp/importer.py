"""Import league data from CSV files and document-store exports into Neo4j."""

import json
import logging
from pathlib import Path
from typing import Any, Iterable, Optional

import pandas as pd

from .config import Settings
from .data_loader import load_league
from .database import Neo4jDatabase
from .documents import (
    matchday_from_document,
    normalize_status,
    optional_text,
    player_id,
    report_from_document,
    safe_int,
    team_from_document,
)
from .models import (
    Match,
    Matchday,
    MatchReport,
    Player,
    ReportPlayer,
    Team,
    TeamParticipation,
)

LOGGER = logging.getLogger(__name__)

DATA_DIR = Path(__file__).parent.parent.parent / "data"

FIXTURES_FILE = "fixtures.csv"
ROSTERS_FILE = "rosters.csv"
REPORTS_FILE = "reports.csv"
EXPORT_FILE = "export.json"

_TRUE_VALUES = {"1", "true", "yes", "si", "sí", "x"}


def _cell(row: pd.Series, column: str) -> str:
    """Stripped text of a CSV cell; empty for missing columns and NaN."""
    value = row.get(column)
    if value is None or not pd.notna(value):
        return ""
    return str(value).strip()


def _flag(row: pd.Series, column: str) -> bool:
    return _cell(row, column).lower() in _TRUE_VALUES


def _read_csv(path: Path) -> Optional[pd.DataFrame]:
    if not path.exists():
        return None
    # Dorsals like "07" and dates must stay text
    return pd.read_csv(path, dtype=str)


class LeagueImporter:
    """Read league files and load them into Neo4j."""

    def __init__(self, db: Neo4jDatabase, data_dir: Optional[Path] = None):
        self.db = db
        self.data_dir = data_dir or Settings.from_env().data_dir or DATA_DIR
        self.skipped = 0

    # ------------------------------------------------------------------
    # Readers
    # ------------------------------------------------------------------

    def read_fixtures(self) -> list[Matchday]:
        """Read fixtures.csv, one row per match, grouped into matchdays."""
        df = _read_csv(self.data_dir / FIXTURES_FILE)
        if df is None:
            return []

        matchdays: dict[int, Matchday] = {}
        for _, row in df.iterrows():
            jornada = safe_int(_cell(row, "jornada"))
            home, away = _cell(row, "home"), _cell(row, "away")
            if jornada < 1 or not home or not away or home == away:
                LOGGER.warning("Skipping fixture row %s: %s vs %s", jornada, home, away)
                self.skipped += 1
                continue

            matchday = matchdays.get(jornada)
            if matchday is None:
                matchday = Matchday(
                    matchday_id=f"MD{jornada:02d}",
                    jornada=jornada,
                    date=_cell(row, "matchday_date") or _cell(row, "date"),
                )
                matchdays[jornada] = matchday
            if not matchday.rest:
                matchday.rest = optional_text(_cell(row, "rest"))

            matchday.matches.append(Match(
                home=home,
                away=away,
                home_goals=safe_int(_cell(row, "home_goals")),
                away_goals=safe_int(_cell(row, "away_goals")),
                date=_cell(row, "date") or matchday.date,
                time=_cell(row, "time"),
                status=normalize_status(_cell(row, "status")),
                referee=optional_text(_cell(row, "referee")),
            ))

        return [matchdays[j] for j in sorted(matchdays)]

    def read_rosters(self) -> list[Team]:
        """Read rosters.csv, one row per player."""
        df = _read_csv(self.data_dir / ROSTERS_FILE)
        if df is None:
            return []

        teams: dict[str, Team] = {}
        for _, row in df.iterrows():
            team_name, name = _cell(row, "team"), _cell(row, "name")
            if not team_name or not name:
                self.skipped += 1
                continue
            if team_name not in teams:
                teams[team_name] = Team(team_id=_cell(row, "team_id") or team_name, name=team_name)
            dorsal = _cell(row, "player_id")
            teams[team_name].players.append(Player(
                player_id=int(dorsal) if dorsal.isdigit() else dorsal,
                name=name,
                alias=optional_text(_cell(row, "alias")),
            ))
        return list(teams.values())

    def read_reports(self) -> list[MatchReport]:
        """Read reports.csv, one row per player per team per match."""
        df = _read_csv(self.data_dir / REPORTS_FILE)
        if df is None:
            return []

        reports: dict[tuple[str, str], MatchReport] = {}
        for _, row in df.iterrows():
            home, away, team = _cell(row, "home"), _cell(row, "away"), _cell(row, "team")
            name = _cell(row, "name")
            if not home or not away or home == away or team not in (home, away) or not name:
                LOGGER.warning("Skipping report row for %s in %s-%s", name or "?", home, away)
                self.skipped += 1
                continue

            report = reports.get((home, away))
            if report is None:
                report = MatchReport(
                    home=home,
                    away=away,
                    home_participation=TeamParticipation(home),
                    away_participation=TeamParticipation(away),
                )
                reports[(home, away)] = report
            if not report.observations:
                report.observations = _cell(row, "observations")

            participation = report.participation_for(team)
            if not participation.formation:
                participation.formation = optional_text(_cell(row, "formation"))

            dorsal = _cell(row, "player_id")
            participation.players.append(ReportPlayer(
                player_id=int(dorsal) if dorsal.isdigit() else dorsal,
                name=name,
                match_number=player_id(_cell(row, "match_number") or dorsal),
                is_starting=_flag(row, "is_starting"),
                substitution_min=_cell(row, "substitution_min"),
                goals=safe_int(_cell(row, "goals")),
                own_goals=safe_int(_cell(row, "own_goals")),
                yellow_cards=safe_int(_cell(row, "yellow_cards")),
                red_cards=safe_int(_cell(row, "red_cards")),
                direct_red_cards=safe_int(_cell(row, "direct_red_cards")),
            ))

        for report in reports.values():
            for participation in report.participations():
                if not participation.has_valid_lineup():
                    LOGGER.warning(
                        "%s lists %d starters in %s",
                        participation.team, len(participation.starters), report.report_id,
                    )
        return list(reports.values())

    def read_export(self) -> dict[str, list[Any]]:
        """Read a document-store export with matchdays, teams and match_reports."""
        path = self.data_dir / EXPORT_FILE
        empty: dict[str, list[Any]] = {"matchdays": [], "teams": [], "match_reports": []}
        if not path.exists():
            return empty
        try:
            payload = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            LOGGER.error("Could not read %s: %s", path, exc)
            return empty
        if not isinstance(payload, dict):
            LOGGER.error("%s does not hold an object of collections", path)
            return empty

        def documents(name: str) -> list[Any]:
            items = payload.get(name)
            return items if isinstance(items, list) else []

        matchdays = self._keep(matchday_from_document(doc) for doc in documents("matchdays"))
        teams = self._keep(team_from_document(doc) for doc in documents("teams"))
        known = _known_team_names(teams, matchdays)
        reports = self._keep(
            report_from_document(doc, known_teams=known) for doc in documents("match_reports")
        )
        return {"matchdays": matchdays, "teams": teams, "match_reports": reports}

    def _keep(self, items: Iterable[Any]) -> list[Any]:
        kept = []
        for item in items:
            if item is None:
                self.skipped += 1
            else:
                kept.append(item)
        return kept

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def read_all(self) -> dict[str, list[Any]]:
        """Everything found in the data directory; CSV rows win over the export."""
        data = self.read_export()

        teams = {t.name: t for t in data["teams"]}
        teams.update({t.name: t for t in self.read_rosters()})

        matchdays = {md.jornada: md for md in data["matchdays"]}
        matchdays.update({md.jornada: md for md in self.read_fixtures()})

        reports = {r.key: r for r in data["match_reports"]}
        reports.update({r.key: r for r in self.read_reports()})

        return {
            "teams": list(teams.values()),
            "matchdays": [matchdays[j] for j in sorted(matchdays)],
            "match_reports": list(reports.values()),
        }

    def load_all(self) -> dict:
        """Load all league files into Neo4j."""
        self.skipped = 0
        data = self.read_all()

        stats = dict(load_league(self.db, data))
        stats["skipped"] = self.skipped
        LOGGER.info("Imported league data from %s: %s", self.data_dir, stats)
        return stats


def _known_team_names(teams: Iterable[Team], matchdays: Iterable[Matchday]) -> set[str]:
    names = {t.name for t in teams}
    for matchday in matchdays:
        for match in matchday.matches:
            names.update((match.home, match.away))
    return names


def import_league_data(db: Neo4jDatabase, data_dir: Optional[Path] = None) -> dict:
    """Load all league files from ``data_dir`` into Neo4j."""
    importer = LeagueImporter(db, data_dir)
    return importer.load_all()
