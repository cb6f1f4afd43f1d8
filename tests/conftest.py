"""Shared fixtures: six ranked teams and a hand-built valid season."""

from pathlib import Path

import pytest

from sixsched.distances import build_distance_table
from sixsched.models import Fixture, Stadium, Team
from sixsched.roundrobin import match_interest

CONFIG_PATH = Path(__file__).resolve().parent.parent / "config.yaml"

SIDES = [
    ("IRE", "Ireland", "Dublin", 53.335, -6.228),
    ("FRA", "France", "Paris", 48.924, 2.360),
    ("ENG", "England", "London", 51.456, -0.341),
    ("SCO", "Scotland", "Edinburgh", 55.942, -3.241),
    ("ITA", "Italy", "Rome", 41.934, 12.455),
    ("WAL", "Wales", "Cardiff", 51.478, -3.183),
]

# (home, away) by team index, one row per round. Every team hosts two or
# three times and is never away three rounds running.
VALID_ROUNDS = [
    [(0, 5), (1, 4), (2, 3)],
    [(4, 0), (5, 3), (2, 1)],
    [(3, 0), (4, 2), (1, 5)],
    [(0, 2), (3, 1), (5, 4)],
    [(0, 1), (2, 5), (3, 4)],
]


def make_teams() -> list[Team]:
    return [
        Team(id=tid, name=name, ranking=rank,
             stadium=Stadium(id=tid.lower(), city=city,
                             latitude=lat, longitude=lon))
        for rank, (tid, name, city, lat, lon) in enumerate(SIDES, 1)
    ]


def make_valid_fixtures(teams, slots=(0, 1, 2, 3, 4)) -> list[Fixture]:
    fixtures = []
    for r, pairs in enumerate(VALID_ROUNDS):
        for h, a in pairs:
            home, away = teams[h], teams[a]
            fixtures.append(Fixture(
                team_a=home, team_b=away,
                competitiveness=match_interest(home, away),
                round_index=r, week_slot=slots[r], home_is_a=True,
            ))
    return fixtures


@pytest.fixture
def teams():
    return make_teams()


@pytest.fixture
def fixtures(teams):
    return make_valid_fixtures(teams)


@pytest.fixture
def distances(teams):
    return build_distance_table(teams)


@pytest.fixture
def config_path():
    return CONFIG_PATH


@pytest.fixture
def make_fixtures(teams):
    """Factory for the valid season laid out on other calendar slots."""
    def _make(slots=(0, 1, 2, 3, 4)):
        return make_valid_fixtures(teams, slots)
    return _make
