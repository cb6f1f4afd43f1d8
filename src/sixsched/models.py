"""Data models for the six-team season scheduler."""

from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Optional

NUM_TEAMS = 6
NUM_ROUNDS = 5
FIXTURES_PER_ROUND = 3
NUM_FIXTURES = NUM_ROUNDS * FIXTURES_PER_ROUND
SEASON_SLOTS = 8

# team_id -> round number (1-5) -> True if forced home, False if forced away
PartialLocks = dict[str, dict[int, bool]]
# unordered team-id pair -> id of the team that hosted last season
LastYearMap = dict[frozenset[str], str]


def pair_key(id_a: str, id_b: str) -> frozenset[str]:
    """Unordered key for a pairing of two team ids."""
    return frozenset((id_a, id_b))


class Venue(Enum):
    AWAY = 0
    HOME = 1

    @classmethod
    def from_value(cls, v) -> "Venue":
        """Accept 'home'/'away', 'H'/'A', 1/0 or True/False."""
        if isinstance(v, Venue):
            return v
        if isinstance(v, bool):
            return cls.HOME if v else cls.AWAY
        if isinstance(v, int):
            return cls(v)
        s = str(v).strip().lower()
        if s in ("home", "h", "1"):
            return cls.HOME
        if s in ("away", "a", "0"):
            return cls.AWAY
        raise ValueError(f"Unknown venue: {v!r}")


@dataclass(frozen=True)
class Stadium:
    id: str
    city: str
    latitude: float
    longitude: float


@dataclass(frozen=True)
class Team:
    """A competing team. ranking 1 is the strongest side."""
    id: str
    name: str
    ranking: int
    stadium: Stadium


@dataclass(frozen=True)
class Matchup:
    """An unordered pairing of two teams with its interest score."""
    team_a: Team
    team_b: Team
    competitiveness: float

    @property
    def key(self) -> frozenset[str]:
        return pair_key(self.team_a.id, self.team_b.id)

    def involves(self, team_id: str) -> bool:
        return team_id in (self.team_a.id, self.team_b.id)


@dataclass
class Fixture:
    """A matchup placed in a round, with venue and kickoff.

    home_is_a selects which side of the pairing hosts.
    """
    team_a: Team
    team_b: Team
    competitiveness: float
    round_index: int
    week_slot: int
    home_is_a: bool = True
    kickoff: Optional[datetime] = None

    @classmethod
    def from_matchup(cls, m: Matchup, round_index: int,
                     week_slot: int) -> "Fixture":
        return cls(
            team_a=m.team_a,
            team_b=m.team_b,
            competitiveness=m.competitiveness,
            round_index=round_index,
            week_slot=week_slot,
        )

    @property
    def round_number(self) -> int:
        return self.round_index + 1

    @property
    def home_team(self) -> Team:
        return self.team_a if self.home_is_a else self.team_b

    @property
    def away_team(self) -> Team:
        return self.team_b if self.home_is_a else self.team_a

    @property
    def key(self) -> frozenset[str]:
        return pair_key(self.team_a.id, self.team_b.id)

    def involves(self, team_id: str) -> bool:
        return team_id in (self.team_a.id, self.team_b.id)

    def is_home(self, team_id: str) -> bool:
        return self.home_team.id == team_id

    def flip(self) -> None:
        self.home_is_a = not self.home_is_a


@dataclass
class Schedule:
    """A complete candidate: 15 fixtures laid out over a rest pattern."""
    fixtures: list[Fixture]
    pattern: tuple[bool, ...]
    total_cost: float = float("inf")

    @property
    def match_slots(self) -> list[int]:
        return [i for i, is_match in enumerate(self.pattern) if is_match]

    def copy(self) -> "Schedule":
        """Copy whose fixtures can be changed without touching this one.

        Teams and stadiums are immutable and stay shared.
        """
        return Schedule(
            fixtures=[replace(fx) for fx in self.fixtures],
            pattern=self.pattern,
            total_cost=self.total_cost,
        )

    def round_fixtures(self, round_index: int) -> list[Fixture]:
        return [fx for fx in self.fixtures if fx.round_index == round_index]


@dataclass
class SchedulerResult:
    """What the orchestrator hands back to its caller."""
    fixtures: list[dict] = field(default_factory=list)
    summary: list[str] = field(default_factory=list)
    best_cost: Optional[float] = None
    schedule: Optional[Schedule] = None

    @property
    def feasible(self) -> bool:
        return self.best_cost is not None
