"""Round assignment: place the 15 matchups into 5 rounds of 3.

Backtracking over matchups in an order chosen by a strategy:

- "desc": most interesting matchups first, trying the last round first,
  so big matches drift towards the end of the season.
- "asc": least interesting first, rounds tried from round 1.
- "random": shuffled matchups, rounds tried in a fresh random order at
  every step.

Search state is immutable (a tuple of per-round team sets plus the
placements made so far), so a failed branch cannot leak into its siblings.
Dead states are memoized on the full per-round team occupancy.
"""

import logging
import random
from dataclasses import dataclass, field

from sixsched.models import FIXTURES_PER_ROUND, NUM_ROUNDS, Fixture, Matchup

log = logging.getLogger(__name__)

ORDER_STRATEGIES = ("desc", "asc", "random")

# Visited-node ceiling per solve. Six teams never get near it.
DEFAULT_MAX_NODES = 200_000


@dataclass
class RoundAssignment:
    feasible: bool
    rounds: list[list[Fixture]] = field(default_factory=list)
    match_slots: list[int] = field(default_factory=list)

    @property
    def fixtures(self) -> list[Fixture]:
        return [fx for rnd in self.rounds for fx in rnd]


def order_matchups(matchups: list[Matchup], strategy: str,
                   rng: random.Random) -> list[Matchup]:
    if strategy == "desc":
        return sorted(matchups, key=lambda m: m.competitiveness, reverse=True)
    if strategy == "asc":
        return sorted(matchups, key=lambda m: m.competitiveness)
    if strategy == "random":
        shuffled = list(matchups)
        rng.shuffle(shuffled)
        return shuffled
    raise ValueError(f"Unknown ordering strategy: {strategy}")


def _round_order(strategy: str, rng: random.Random) -> list[int]:
    rounds = list(range(NUM_ROUNDS))
    if strategy == "desc":
        rounds.reverse()
    elif strategy == "random":
        rng.shuffle(rounds)
    return rounds


def assign_rounds(matchups: list[Matchup], slots: list[int],
                  strategy: str = "desc",
                  rng: random.Random | None = None,
                  max_nodes: int = DEFAULT_MAX_NODES) -> RoundAssignment:
    """Assign every matchup a round.

    slots: calendar slot index of each round (from the rest pattern).
    Each resulting Fixture is stamped with round_index and week_slot.
    """
    rng = rng or random.Random()
    if len(slots) != NUM_ROUNDS:
        return RoundAssignment(feasible=False)

    ordered = order_matchups(matchups, strategy, rng)
    dead: set[tuple[int, tuple[frozenset[str], ...]]] = set()
    visited = 0

    def search(idx: int, occupied: tuple[frozenset[str], ...],
               placed: tuple[int, ...]) -> tuple[int, ...] | None:
        nonlocal visited
        if idx == len(ordered):
            if all(len(teams) == 2 * FIXTURES_PER_ROUND for teams in occupied):
                return placed
            return None

        state = (idx, occupied)
        if state in dead:
            return None
        visited += 1
        if visited > max_nodes:
            return None

        m = ordered[idx]
        pair = {m.team_a.id, m.team_b.id}
        for r in _round_order(strategy, rng):
            teams = occupied[r]
            if len(teams) >= 2 * FIXTURES_PER_ROUND:
                continue
            if not pair.isdisjoint(teams):
                continue
            nxt = occupied[:r] + (teams | pair,) + occupied[r + 1:]
            found = search(idx + 1, nxt, placed + (r,))
            if found is not None:
                return found

        dead.add(state)
        return None

    empty = tuple(frozenset() for _ in range(NUM_ROUNDS))
    placement = search(0, empty, ())
    if placement is None:
        log.debug("Round assignment failed (strategy=%s, slots=%s, nodes=%d)",
                  strategy, slots, visited)
        return RoundAssignment(feasible=False, match_slots=list(slots))

    rounds: list[list[Fixture]] = [[] for _ in range(NUM_ROUNDS)]
    for m, r in zip(ordered, placement):
        rounds[r].append(Fixture.from_matchup(m, r, slots[r]))

    if any(len(rnd) != FIXTURES_PER_ROUND for rnd in rounds):
        return RoundAssignment(feasible=False, match_slots=list(slots))

    return RoundAssignment(feasible=True, rounds=rounds,
                           match_slots=list(slots))
