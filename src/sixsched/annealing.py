"""Simulated-annealing polish of a complete, feasible schedule.

Each iteration proposes one move on a copy of the current schedule:

- flip (40%): swap home and away of one unconstrained fixture
- swap (30%): exchange the rounds of two fixtures in different rounds,
  carrying their round-mates along so every round still covers six teams
- jump (30%): rotate three or more whole rounds through each other's
  places, a bigger step than swap for escaping local optima

Round moves re-date the schedule. A proposal that breaks a move-specific
lock/alternation precondition, cannot be dated, or fails the feasibility
check is discarded. Worse proposals are accepted with probability
exp(-delta / temperature). The best schedule seen is returned.
"""

import logging
import math
import random
from dataclasses import dataclass
from typing import Optional

from sixsched.config import EngineConfig
from sixsched.constraints import is_constrained, is_feasible, is_locked
from sixsched.cost import compute_total_cost
from sixsched.distances import DistanceTable
from sixsched.kickoffs import assign_dates
from sixsched.models import (
    NUM_ROUNDS, FIXTURES_PER_ROUND, LastYearMap, PartialLocks, Schedule,
    Team,
)

log = logging.getLogger(__name__)

MOVE_WEIGHTS = [("flip", 0.4), ("swap", 0.3), ("jump", 0.3)]


@dataclass
class AnnealContext:
    """Everything a move needs besides the schedule itself."""
    teams: list[Team]
    distances: DistanceTable
    config: EngineConfig
    locks: PartialLocks
    last_year: LastYearMap
    rivalries: set[frozenset[str]]
    year: int


def pick_move(rng: random.Random) -> str:
    roll = rng.random()
    acc = 0.0
    for name, weight in MOVE_WEIGHTS:
        acc += weight
        if roll < acc:
            return name
    return MOVE_WEIGHTS[-1][0]


def _move_flip(sched: Schedule, ctx: AnnealContext,
               rng: random.Random) -> bool:
    fx = rng.choice(sched.fixtures)
    if is_constrained(fx, ctx.locks, ctx.last_year):
        return False
    fx.flip()
    return True


def _set_round(sched: Schedule, fx_index: int, round_index: int) -> None:
    fx = sched.fixtures[fx_index]
    fx.round_index = round_index
    fx.week_slot = sched.match_slots[round_index]


def _move_swap(sched: Schedule, ctx: AnnealContext,
               rng: random.Random) -> bool:
    i, j = rng.sample(range(len(sched.fixtures)), 2)
    r1 = sched.fixtures[i].round_index
    r2 = sched.fixtures[j].round_index
    if r1 == r2:
        return False
    # Venues of locked fixtures are tied to their round number.
    for fx in sched.fixtures:
        if fx.round_index in (r1, r2) and is_locked(fx, ctx.locks):
            return False
    for k, fx in enumerate(sched.fixtures):
        if fx.round_index == r1:
            _set_round(sched, k, r2)
        elif fx.round_index == r2:
            _set_round(sched, k, r1)
    return True


def _move_jump(sched: Schedule, ctx: AnnealContext,
               rng: random.Random) -> bool:
    size = rng.randint(3, NUM_ROUNDS)
    picked = rng.sample(range(NUM_ROUNDS), size)
    members = [k for k, fx in enumerate(sched.fixtures)
               if fx.round_index in picked]
    if len(members) != size * FIXTURES_PER_ROUND:
        return False
    if any(is_locked(sched.fixtures[k], ctx.locks) for k in members):
        return False
    # picked[0] -> picked[1] -> ... -> picked[-1] -> picked[0]
    target = {r: picked[(n + 1) % size] for n, r in enumerate(picked)}
    for k in members:
        _set_round(sched, k, target[sched.fixtures[k].round_index])
    return True


MOVES = {"flip": _move_flip, "swap": _move_swap, "jump": _move_jump}


def propose(current: Schedule, ctx: AnnealContext,
            rng: random.Random) -> Optional[Schedule]:
    """A costed neighbour of current, or None if the move was discarded."""
    move = pick_move(rng)
    neighbor = current.copy()
    if not MOVES[move](neighbor, ctx, rng):
        return None
    if move != "flip":
        if assign_dates(neighbor.fixtures, neighbor.match_slots, ctx.year,
                        ctx.teams, ctx.rivalries) is None:
            return None
    if not is_feasible(neighbor.fixtures, ctx.teams, ctx.locks, ctx.last_year):
        return None
    neighbor.total_cost = compute_total_cost(neighbor.fixtures, ctx.teams,
                                             ctx.distances, ctx.config)
    return neighbor


def cool(temperature: float, since_accept: int,
         config: EngineConfig) -> tuple[float, int]:
    """One cooling step: the stall kick when stalled, else the geometric step."""
    if since_accept >= config.anneal_stall_iterations:
        return temperature * config.anneal_stall_cooling, 0
    return temperature * config.anneal_cooling, since_accept


def anneal(schedule: Schedule, ctx: AnnealContext,
           rng: random.Random | None = None) -> Schedule:
    """Run the annealer from schedule and return the best schedule seen.

    The input schedule is not modified.
    """
    rng = rng or random.Random()
    config = ctx.config
    current = schedule.copy()
    best = current
    temperature = config.anneal_start_temperature
    since_accept = 0
    accepted = 0
    discarded = 0

    for _ in range(config.anneal_iterations):
        neighbor = propose(current, ctx, rng)
        if neighbor is None:
            discarded += 1
            since_accept += 1
        else:
            delta = neighbor.total_cost - current.total_cost
            if delta < 0 or (temperature > 0
                             and rng.random() < math.exp(-delta / temperature)):
                current = neighbor
                accepted += 1
                since_accept = 0
                if current.total_cost < best.total_cost:
                    best = current
            else:
                since_accept += 1

        temperature, since_accept = cool(temperature, since_accept, config)

    log.debug("Annealing: %d accepted, %d discarded, cost %.2f -> %.2f",
              accepted, discarded, schedule.total_cost, best.total_cost)
    return best
