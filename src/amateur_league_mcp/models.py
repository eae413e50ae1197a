"""Data models for the amateur league statistics engine."""

from dataclasses import dataclass, field
from typing import Iterator, Optional, Union

# Stored match statuses
PENDING = "PENDING"
LIVE = "LIVE"
PLAYED = "PLAYED"
POSTPONED = "POSTPONED"
SCHEDULED = "SCHEDULED"  # legacy alias of PENDING, normalised on load

# Display-only status
PENDING_RESULT = "PENDING_RESULT"

MATCH_STATUSES = {PENDING, LIVE, PLAYED, POSTPONED}

MAX_STARTERS = 11

PlayerId = Union[int, str]


@dataclass
class Player:
    player_id: PlayerId  # dorsal
    name: str
    alias: Optional[str] = None


@dataclass
class Team:
    team_id: str
    name: str
    players: list[Player] = field(default_factory=list)


@dataclass
class Match:
    home: str
    away: str
    home_goals: int = 0
    away_goals: int = 0
    date: str = ""  # DD-MM-YYYY or DD/MM/YYYY
    time: str = ""  # HH:MM
    status: str = PENDING
    referee: Optional[str] = None
    referee_name: Optional[str] = None

    def involves(self, team: str) -> bool:
        return team in (self.home, self.away)

    @property
    def key(self) -> tuple[str, str]:
        return (self.home, self.away)


@dataclass
class Matchday:
    matchday_id: str
    jornada: int
    date: str = ""
    matches: list[Match] = field(default_factory=list)
    rest: Optional[str] = None  # team with a bye


@dataclass
class ReportPlayer:
    player_id: PlayerId
    name: str
    match_number: PlayerId = ""
    is_starting: bool = False
    substitution_min: str = ""  # e.g. "65'"
    goals: int = 0
    own_goals: int = 0
    yellow_cards: int = 0
    red_cards: int = 0
    direct_red_cards: int = 0
    alias: Optional[str] = None

    @property
    def total_red_cards(self) -> int:
        return self.red_cards + self.direct_red_cards


@dataclass
class TeamParticipation:
    team: str
    players: list[ReportPlayer] = field(default_factory=list)
    formation: Optional[str] = None

    @property
    def starters(self) -> list[ReportPlayer]:
        return [p for p in self.players if p.is_starting]

    @property
    def substitutes(self) -> list[ReportPlayer]:
        return [p for p in self.players if not p.is_starting]

    def has_valid_lineup(self) -> bool:
        return len(self.starters) <= MAX_STARTERS

    def find_player(self, name: str) -> Optional[ReportPlayer]:
        return next((p for p in self.players if p.name == name), None)


@dataclass
class MatchReport:
    """The acta of one played match, with one participation per side."""

    home: str
    away: str
    home_participation: TeamParticipation
    away_participation: TeamParticipation
    observations: str = ""

    @property
    def report_id(self) -> str:
        # Legacy document id, kept for storage compatibility only
        return f"{self.home}-{self.away}"

    @property
    def key(self) -> tuple[str, str]:
        return (self.home, self.away)

    def participations(self) -> Iterator[TeamParticipation]:
        yield self.home_participation
        yield self.away_participation

    def participation_for(self, team: str) -> Optional[TeamParticipation]:
        for participation in self.participations():
            if participation.team == team:
                return participation
        return None


# ---------------------------------------------------------------------------
# Derived views
# ---------------------------------------------------------------------------


@dataclass
class TeamStanding:
    team: str
    position: int = 0
    played: int = 0
    won: int = 0
    drawn: int = 0
    lost: int = 0
    goals_for: int = 0
    goals_against: int = 0
    goal_difference: int = 0
    points: int = 0
    form: list[str] = field(default_factory=list)  # 'W', 'D' or 'L', oldest first


@dataclass
class TopScorer:
    name: str
    team: str
    goals: int = 0
    player_id: Optional[PlayerId] = None


@dataclass
class CardRanking:
    name: str
    team: str
    yellow_cards: int = 0
    red_cards: int = 0
    player_id: Optional[PlayerId] = None

    def score(self, red_card_weight: int = 3) -> int:
        return self.yellow_cards + red_card_weight * self.red_cards


@dataclass(frozen=True)
class MatchLiveStatus:
    display_status: str  # PENDING, LIVE, PENDING_RESULT, PLAYED or POSTPONED
    elapsed_minutes: Optional[int] = None

    @property
    def is_live(self) -> bool:
        return self.display_status == LIVE


@dataclass
class FeaturedMatchdays:
    last_played: Optional[Matchday] = None
    next: Optional[Matchday] = None
    live: Optional[Matchday] = None  # for consumers that prefer a live round


@dataclass
class TeamFixture:
    jornada: int
    match: Match


@dataclass
class PlayerSeasonStats:
    player: Player
    games_played: int = 0
    games_started: int = 0
    goals: int = 0
    yellow_cards: int = 0
    red_cards: int = 0


@dataclass
class TeamSummary:
    team: str
    fixtures: list[TeamFixture] = field(default_factory=list)
    played: int = 0
    won: int = 0
    drawn: int = 0
    lost: int = 0
    goals_for: int = 0
    goals_against: int = 0
    roster: list[PlayerSeasonStats] = field(default_factory=list)


@dataclass
class PlayerMatchLine:
    jornada: int
    opponent: str
    is_home: bool
    date: str
    result: str  # "2-1" from the player's side
    is_starting: bool
    substitution_min: str
    goals: int
    yellow_cards: int
    red_cards: int


@dataclass
class PlayerSummary:
    name: str
    team: str
    player_id: Optional[PlayerId] = None
    matches: list[PlayerMatchLine] = field(default_factory=list)
    goals: int = 0
    yellow_cards: int = 0
    red_cards: int = 0
    games_started: int = 0
    games_as_substitute: int = 0


@dataclass
class SweepResult:
    checked: int = 0
    transitioned: int = 0
    failed: int = 0
    matches: list[str] = field(default_factory=list)  # "Home-Away" labels moved to LIVE
