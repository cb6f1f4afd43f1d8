"""Home/away assignment for fixtures that already have rounds.

Four phases:
1. Seed: locked fixtures take their forced venue, fixtures covered by
   last season's alternation take the reversed venue, the rest are random.
2. Enforce alternation: a safeguard pass that flips any unlocked fixture
   still contradicting last season, keeping the flip only if the schedule
   stays feasible. Seeding already applies alternation, so this normally
   keeps nothing. Repeats to a fixed point or 2 x fixtures passes.
3. Gate: an infeasible result is rejected with infinite cost.
4. First-improvement local search over the venues of unconstrained
   fixtures, keeping a flip only if it stays feasible and lowers cost.

Fixtures are updated in place.
"""

import logging
import random
from dataclasses import dataclass

from sixsched.config import EngineConfig
from sixsched.constraints import (
    alternation_home_is_a, is_constrained, is_feasible, is_locked,
    locked_home_is_a,
)
from sixsched.cost import compute_total_cost
from sixsched.distances import DistanceTable
from sixsched.models import Fixture, LastYearMap, PartialLocks, Team

log = logging.getLogger(__name__)

INFEASIBLE = float("inf")


@dataclass
class HomeAwayResult:
    fixtures: list[Fixture]
    cost: float
    flips: int = 0

    @property
    def feasible(self) -> bool:
        return self.cost != INFEASIBLE


def seed_venues(fixtures: list[Fixture], locks: PartialLocks,
                last_year: LastYearMap, rng: random.Random) -> None:
    for fx in fixtures:
        forced = locked_home_is_a(fx, locks)
        if forced is None:
            forced = alternation_home_is_a(fx, last_year)
        fx.home_is_a = forced if forced is not None else rng.random() < 0.5


def enforce_alternation(fixtures: list[Fixture], teams: list[Team],
                        locks: PartialLocks,
                        last_year: LastYearMap) -> int:
    """Flip unlocked fixtures towards last season's alternation while feasible.

    Locked fixtures keep their venue. Returns the number of flips kept.
    """
    kept = 0
    max_passes = 2 * len(fixtures)
    passes = 0
    changed = True
    while changed and passes < max_passes:
        changed = False
        passes += 1
        for fx in fixtures:
            if is_locked(fx, locks):
                continue
            want = alternation_home_is_a(fx, last_year)
            if want is None or fx.home_is_a == want:
                continue
            fx.home_is_a = want
            if is_feasible(fixtures, teams, locks, last_year):
                kept += 1
                changed = True
            else:
                fx.home_is_a = not want
    return kept


def improve_venues(fixtures: list[Fixture], teams: list[Team],
                   distances: DistanceTable, config: EngineConfig,
                   locks: PartialLocks, last_year: LastYearMap) -> tuple[float, int]:
    """First-improvement flips over free fixtures. Returns (cost, flips)."""
    cost = compute_total_cost(fixtures, teams, distances, config)
    free = [fx for fx in fixtures if not is_constrained(fx, locks, last_year)]
    flips = 0
    improved = True
    passes = 0
    while improved and passes < config.home_away_max_passes:
        improved = False
        passes += 1
        for fx in free:
            fx.flip()
            if not is_feasible(fixtures, teams, locks, last_year):
                fx.flip()
                continue
            new_cost = compute_total_cost(fixtures, teams, distances, config)
            if new_cost < cost:
                cost = new_cost
                flips += 1
                improved = True
            else:
                fx.flip()
    return cost, flips


def assign_home_away(fixtures: list[Fixture], teams: list[Team],
                     distances: DistanceTable,
                     config: EngineConfig | None = None,
                     locks: PartialLocks | None = None,
                     last_year: LastYearMap | None = None,
                     rng: random.Random | None = None) -> HomeAwayResult:
    """Give every fixture a venue and return the resulting cost.

    Cost is infinite when the locks, alternation and distribution rules
    cannot all be met from this seed.
    """
    config = config or EngineConfig()
    locks = locks or {}
    last_year = last_year or {}
    rng = rng or random.Random()

    seed_venues(fixtures, locks, last_year, rng)
    enforce_alternation(fixtures, teams, locks, last_year)

    if not is_feasible(fixtures, teams, locks, last_year):
        locked = sum(1 for fx in fixtures if is_locked(fx, locks))
        log.debug("Home/away seed infeasible (%d locked fixtures)", locked)
        return HomeAwayResult(fixtures=fixtures, cost=INFEASIBLE)

    cost, flips = improve_venues(fixtures, teams, distances, config,
                                 locks, last_year)
    return HomeAwayResult(fixtures=fixtures, cost=cost, flips=flips)
