"""In-memory snapshot of the league collections and its derived views."""

from dataclasses import dataclass, field
from datetime import datetime
from functools import partial
from typing import AsyncIterator, Optional

from .config import Settings
from .live_sweep import Clock, live_status_feed
from .match_status import league_now
from .matchdays import find_matchday, select_featured, sort_matchdays
from .models import (
    CardRanking,
    FeaturedMatchdays,
    Matchday,
    MatchLiveStatus,
    MatchReport,
    Team,
    TeamStanding,
    TopScorer,
)
from .rankings import compute_card_rankings, compute_top_scorers, pichichi
from .standings import compute_standings, leader


@dataclass
class LeagueSnapshot:
    """
    Matchdays, teams and match reports as loaded at one point in time.
    Every view is recomputed from scratch on each call.
    """

    matchdays: list[Matchday] = field(default_factory=list)
    teams: list[Team] = field(default_factory=list)
    reports: list[MatchReport] = field(default_factory=list)
    settings: Settings = field(default_factory=Settings)

    def __post_init__(self) -> None:
        self.matchdays = sort_matchdays(self.matchdays)

    def team_names(self) -> list[str]:
        names = {t.name for t in self.teams}
        for matchday in self.matchdays:
            for match in matchday.matches:
                names.update((match.home, match.away))
        return sorted(n for n in names if n)

    def standings(self, chronological: bool = False) -> list[TeamStanding]:
        return compute_standings(
            self.matchdays,
            self.teams,
            form_length=self.settings.form_length,
            chronological=chronological,
        )

    def leader(self) -> Optional[TeamStanding]:
        return leader(self.standings())

    def top_scorers(self) -> list[TopScorer]:
        return compute_top_scorers(self.reports, limit=self.settings.ranking_limit)

    def pichichi(self) -> Optional[TopScorer]:
        return pichichi(self.top_scorers())

    def card_rankings(self) -> list[CardRanking]:
        return compute_card_rankings(
            self.reports,
            limit=self.settings.ranking_limit,
            red_card_weight=self.settings.red_card_weight,
        )

    def featured(self, now: datetime) -> FeaturedMatchdays:
        return select_featured(self.matchdays, now)

    def status_feed(
        self, jornada: int, clock: Optional[Clock] = None
    ) -> Optional[AsyncIterator[list[MatchLiveStatus]]]:
        """Live status of one matchday, refreshed on the configured interval."""
        matchday = find_matchday(self.matchdays, jornada)
        if matchday is None:
            return None
        if clock is None:
            clock = partial(league_now, self.settings.timezone)
        return live_status_feed(
            matchday.matches,
            clock=clock,
            interval=self.settings.refresh_interval_seconds,
            live_window=self.settings.live_window_minutes,
        )
