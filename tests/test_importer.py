"""Tests for importing league files with pandas."""

import json

import pytest

from amateur_league_mcp.importer import LeagueImporter, import_league_data
from amateur_league_mcp.models import PENDING, PLAYED

FIXTURES_CSV = """jornada,date,time,home,away,home_goals,away_goals,status,rest,referee
1,04-10-2025,10:00,Real Barrio,CD Ribera,2,0,PLAYED,Unión Norte,
1,04-10-2025,12:00,Atlético Sur-Este,Unión Norte,,,SCHEDULED,,
2,11-10-2025,10:00,Unión Norte,Real Barrio,,,,CD Ribera,
2,11-10-2025,12:00,CD Ribera,CD Ribera,0,0,PENDING,,
x,,,A,B,,,,,
"""

ROSTERS_CSV = """team,team_id,player_id,name,alias
Real Barrio,T001,9,Javier Moreno,Javi
Real Barrio,T001,07,Luis Ortega,
CD Ribera,,10B,Hugo León,
,,1,Nobody,
"""

REPORTS_CSV = """home,away,team,player_id,name,match_number,is_starting,substitution_min,goals,own_goals,yellow_cards,red_cards,direct_red_cards,formation,observations
Real Barrio,CD Ribera,Real Barrio,9,Javier Moreno,9,1,,2,0,1,0,0,2-3-1,Buen partido
Real Barrio,CD Ribera,CD Ribera,5,Marcos Gil,5,yes,,0,0,0,0,1,,
Real Barrio,CD Ribera,Otro,5,X,,,,,,,,,,
"""

EXPORT = {
    "matchdays": [
        {"id": "old-md1", "jornada": 1, "matches": []},
        {"id": "md3", "jornada": 3, "date": "18-10-2025", "matches": [
            {"home": "Unión Norte", "away": "Atlético Sur-Este", "status": "SCHEDULED", "time": "10:00"},
        ]},
    ],
    "teams": [{"id": "T005", "name": "Unión Norte", "players": [{"id": 6, "name": "Raúl Navarro"}]}],
    "match_reports": [
        {
            "id": "Atlético Sur-Este-Unión Norte",
            "Atlético Sur-Este": {"players": [{"id": 9, "name": "Daniel Sanz", "goals": 1}]},
            "Unión Norte": {"players": []},
        },
        {"id": "broken"},
    ],
}


@pytest.fixture
def data_dir(tmp_path):
    (tmp_path / "fixtures.csv").write_text(FIXTURES_CSV, encoding="utf-8")
    (tmp_path / "rosters.csv").write_text(ROSTERS_CSV, encoding="utf-8")
    (tmp_path / "reports.csv").write_text(REPORTS_CSV, encoding="utf-8")
    (tmp_path / "export.json").write_text(json.dumps(EXPORT), encoding="utf-8")
    return tmp_path


class TestReaders:
    def test_fixtures_grouped_by_jornada(self, mock_db, data_dir):
        importer = LeagueImporter(mock_db, data_dir)
        matchdays = importer.read_fixtures()
        assert [md.matchday_id for md in matchdays] == ["MD01", "MD02"]
        first = matchdays[0]
        assert first.rest == "Unión Norte"
        assert (first.matches[0].home_goals, first.matches[0].status) == (2, PLAYED)
        assert first.matches[1].status == PENDING
        assert len(matchdays[1].matches) == 1
        assert importer.skipped == 2

    def test_rosters_keep_text_dorsals(self, mock_db, data_dir):
        importer = LeagueImporter(mock_db, data_dir)
        teams = {t.name: t for t in importer.read_rosters()}
        assert [p.player_id for p in teams["Real Barrio"].players] == [9, 7]
        assert teams["Real Barrio"].players[0].alias == "Javi"
        assert teams["CD Ribera"].players[0].player_id == "10B"
        assert teams["CD Ribera"].team_id == "CD Ribera"
        assert importer.skipped == 1

    def test_reports(self, mock_db, data_dir):
        importer = LeagueImporter(mock_db, data_dir)
        (report,) = importer.read_reports()
        assert report.key == ("Real Barrio", "CD Ribera")
        assert report.observations == "Buen partido"
        assert report.home_participation.formation == "2-3-1"
        javi = report.home_participation.find_player("Javier Moreno")
        assert (javi.goals, javi.yellow_cards, javi.is_starting) == (2, 1, True)
        assert report.away_participation.find_player("Marcos Gil").total_red_cards == 1
        assert importer.skipped == 1

    def test_export_resolves_hyphenated_names(self, mock_db, data_dir):
        importer = LeagueImporter(mock_db, data_dir)
        export = importer.read_export()
        (report,) = export["match_reports"]
        assert report.key == ("Atlético Sur-Este", "Unión Norte")
        assert importer.skipped == 1

    def test_unreadable_export(self, mock_db, tmp_path):
        (tmp_path / "export.json").write_text("{not json", encoding="utf-8")
        export = LeagueImporter(mock_db, tmp_path).read_export()
        assert export == {"matchdays": [], "teams": [], "match_reports": []}


class TestLoadAll:
    def test_csv_wins_over_export(self, mock_db, data_dir):
        data = LeagueImporter(mock_db, data_dir).read_all()
        assert [md.jornada for md in data["matchdays"]] == [1, 2, 3]
        assert data["matchdays"][0].matchday_id == "MD01"
        assert {t.name for t in data["teams"]} == {"Real Barrio", "CD Ribera", "Unión Norte"}

    def test_counts_and_writes(self, mock_db, data_dir):
        stats = import_league_data(mock_db, data_dir)
        assert stats == {"teams": 3, "matchdays": 3, "match_reports": 2, "skipped": 5}
        assert len(mock_db.writes) == 8

    def test_empty_directory(self, mock_db, tmp_path):
        stats = import_league_data(mock_db, tmp_path)
        assert stats == {"teams": 0, "matchdays": 0, "match_reports": 0, "skipped": 0}
