"""Calendar dates and kickoff times for each round.

The season is anchored on the first Friday of February. A round played in
calendar slot s starts its weekend s weeks after the anchor.

Rounds 1-4 offer four kickoffs: Fri 20:00, Sat 14:00, Sat 20:00, Sun 14:00.
The first rivalry of a round takes Sat 20:00 and the second Sun 14:00.
Round 5 is Super Saturday: 14:00, 16:00, 18:00, with the #1 vs #2 fixture
in the last slot.
"""

from datetime import date, datetime, time, timedelta

from sixsched.cost import top_two
from sixsched.models import (
    FIXTURES_PER_ROUND, NUM_ROUNDS, Fixture, Team,
)

WEEKEND_KICKOFFS = [
    (0, time(20, 0)),   # Fri
    (1, time(14, 0)),   # Sat
    (1, time(20, 0)),   # Sat prime time
    (2, time(14, 0)),   # Sun
]
PRIME_SLOTS = [2, 3]

SUPER_SATURDAY_KICKOFFS = [time(14, 0), time(16, 0), time(18, 0)]
SUPER_SATURDAY_FINAL = 2


def season_anchor(year: int) -> date:
    """First Friday of February."""
    d = date(year, 2, 1)
    return d + timedelta(days=(4 - d.weekday()) % 7)


def weekend_start(year: int, week_slot: int) -> date:
    """Friday that opens the weekend of a calendar slot."""
    return season_anchor(year) + timedelta(weeks=week_slot)


def round_kickoffs(friday: date, final_round: bool = False) -> list[datetime]:
    if final_round:
        saturday = friday + timedelta(days=1)
        return [datetime.combine(saturday, t) for t in SUPER_SATURDAY_KICKOFFS]
    return [datetime.combine(friday + timedelta(days=offset), t)
            for offset, t in WEEKEND_KICKOFFS]


def _date_regular_round(fixtures: list[Fixture], kickoffs: list[datetime],
                        rivalries: set[frozenset[str]]) -> bool:
    prime = [fx for fx in fixtures if fx.key in rivalries]
    normal = [fx for fx in fixtures if fx.key not in rivalries]

    used = set()
    for slot in PRIME_SLOTS:
        if not prime:
            break
        prime.pop(0).kickoff = kickoffs[slot]
        used.add(slot)

    free = [i for i in range(len(kickoffs)) if i not in used]
    for fx in normal + prime:
        if not free:
            return False
        fx.kickoff = kickoffs[free.pop(0)]
    return True


def _date_final_round(fixtures: list[Fixture], kickoffs: list[datetime],
                      top2: frozenset[str]) -> bool:
    ordered = sorted(fixtures, key=lambda fx: fx.key == top2)
    if ordered[-1].key == top2:
        ordered[-1].kickoff = kickoffs[SUPER_SATURDAY_FINAL]
        rest = ordered[:-1]
        free = [i for i in range(len(kickoffs)) if i != SUPER_SATURDAY_FINAL]
    else:
        rest = ordered
        free = list(range(len(kickoffs)))
    if len(rest) > len(free):
        return False
    for fx, slot in zip(rest, free):
        fx.kickoff = kickoffs[slot]
    return True


def assign_dates(fixtures: list[Fixture], slots: list[int], year: int,
                 teams: list[Team],
                 rivalries: set[frozenset[str]] | None = None
                 ) -> list[Fixture] | None:
    """Stamp every fixture with a kickoff.

    slots: calendar slot of each round. Returns the fixtures, or None if a
    round does not hold exactly three fixtures.
    """
    rivalries = rivalries or set()
    if len(slots) != NUM_ROUNDS:
        return None

    by_round: dict[int, list[Fixture]] = {r: [] for r in range(NUM_ROUNDS)}
    for fx in fixtures:
        if fx.round_index not in by_round:
            return None
        by_round[fx.round_index].append(fx)
    if any(len(rnd) != FIXTURES_PER_ROUND for rnd in by_round.values()):
        return None

    top2 = top_two(teams)
    for r, rnd in by_round.items():
        friday = weekend_start(year, slots[r])
        if r == NUM_ROUNDS - 1:
            ok = _date_final_round(rnd, round_kickoffs(friday, True), top2)
        else:
            ok = _date_regular_round(rnd, round_kickoffs(friday), rivalries)
        if not ok:
            return None
    return fixtures
