"""Weighted soft-cost evaluation of a schedule.

Each term is computed independently and returned in a CostBreakdown
alongside the weighted total. Evaluation is deterministic and leaves the
fixtures untouched.
"""

import math
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import datetime

from sixsched.config import EngineConfig
from sixsched.distances import DistanceTable, distance_between
from sixsched.models import NUM_ROUNDS, Fixture, Team

FINAL_ROUND = NUM_ROUNDS - 1
FINAL_SLOT_HOUR = 18
BIG_MATCH_INTEREST = 5


@dataclass
class CostBreakdown:
    consecutive_away_penalty: float = 0.0
    max_travel: float = 0.0
    total_travel: float = 0.0
    travel_stddev: float = 0.0
    travel_by_team: dict[str, float] = field(default_factory=dict)
    comp_penalty: float = 0.0
    balance_penalty: float = 0.0
    friday_night_count: int = 0
    broadcast_penalty: float = 0.0
    timeslot_penalty: float = 0.0
    short_gap_penalty: float = 0.0
    top2_missed_slot_penalty: float = 0.0
    total_cost: float = 0.0


def is_friday_night(kickoff: datetime | None) -> bool:
    return kickoff is not None and kickoff.weekday() == 4 and kickoff.hour == 20


def timeslot_score(kickoff: datetime | None, competitiveness: float) -> float:
    """Adjustment for where a fixture kicks off.

    Friday 20:00 costs +3. Big matches earn -2 at Saturday 20:00 or
    Sunday 18:00.
    """
    if kickoff is None:
        return 0.0
    if is_friday_night(kickoff):
        return 3.0
    if kickoff.weekday() == 5 and kickoff.hour == 20:
        return -2.0 if competitiveness > BIG_MATCH_INTEREST else 0.0
    if kickoff.weekday() == 6 and kickoff.hour == 18:
        return -2.0 if competitiveness > BIG_MATCH_INTEREST else 0.0
    return 0.0


def top_two(teams: list[Team]) -> frozenset[str]:
    ranked = sorted(teams, key=lambda t: t.ranking)
    return frozenset(t.id for t in ranked[:2])


def short_gap_penalty(fixtures: list[Fixture], teams: list[Team],
                      min_gap_days: float) -> float:
    """Sum over each team's consecutive fixtures of the rest shortfall."""
    kickoffs: dict[str, list[datetime]] = {t.id: [] for t in teams}
    for fx in fixtures:
        if fx.kickoff is None:
            continue
        kickoffs.setdefault(fx.team_a.id, []).append(fx.kickoff)
        kickoffs.setdefault(fx.team_b.id, []).append(fx.kickoff)

    penalty = 0.0
    for dates in kickoffs.values():
        dates.sort()
        for prev, nxt in zip(dates, dates[1:]):
            gap = (nxt - prev).total_seconds() / 86400
            if gap < min_gap_days:
                penalty += min_gap_days - gap
    return penalty


def compute_cost_breakdown(fixtures: list[Fixture], teams: list[Team],
                           distances: DistanceTable,
                           config: EngineConfig | None = None) -> CostBreakdown:
    config = config or EngineConfig()
    b = CostBreakdown()

    travel = {t.id: 0.0 for t in teams}
    home = {t.id: 0 for t in teams}
    away_rounds: dict[str, list[tuple[int, bool]]] = defaultdict(list)
    top2 = top_two(teams)
    top2_missed = False

    for fx in fixtures:
        h, a = fx.home_team.id, fx.away_team.id
        travel[a] = travel.get(a, 0.0) + 2 * distance_between(distances, h, a)
        home[h] = home.get(h, 0) + 1
        away_rounds[h].append((fx.round_index, False))
        away_rounds[a].append((fx.round_index, True))

        # Interesting matches early cost more
        b.comp_penalty += fx.competitiveness * (FINAL_ROUND - fx.round_index)

        if fx.key == top2:
            if (fx.round_index != FINAL_ROUND or fx.kickoff is None
                    or fx.kickoff.hour != FINAL_SLOT_HOUR):
                top2_missed = True

        if is_friday_night(fx.kickoff):
            b.friday_night_count += 1
        b.timeslot_penalty += timeslot_score(fx.kickoff, fx.competitiveness)

    for record in away_rounds.values():
        record.sort()
        for (r0, away0), (r1, away1) in zip(record, record[1:]):
            if away0 and away1 and r1 == r0 + 1:
                b.consecutive_away_penalty += 1

    b.travel_by_team = travel
    values = list(travel.values())
    b.total_travel = sum(values)
    b.max_travel = max(values, default=0.0)
    if values:
        mean = b.total_travel / len(values)
        b.travel_stddev = math.sqrt(
            sum((v - mean) ** 2 for v in values) / len(values))

    b.balance_penalty = sum(abs(n - NUM_ROUNDS / 2) for n in home.values())

    if b.friday_night_count > config.friday_night_limit:
        b.broadcast_penalty = ((b.friday_night_count - config.friday_night_limit)
                               * config.friday_night_penalty)

    b.short_gap_penalty = short_gap_penalty(fixtures, teams,
                                            config.min_gap_days)
    if top2_missed:
        b.top2_missed_slot_penalty = config.top2_missed_slot_penalty

    b.total_cost = (
        config.w1 * b.consecutive_away_penalty
        + config.w2 * b.max_travel
        + config.w3 * b.comp_penalty
        + config.w4 * b.balance_penalty
        + config.w_fri * b.broadcast_penalty
        + b.top2_missed_slot_penalty
        + config.w_travel_total * b.total_travel
        + config.w_travel_fair * b.travel_stddev
        + config.w_slot * b.timeslot_penalty
        + config.w_short_gap * b.short_gap_penalty
    )
    return b


def compute_total_cost(fixtures: list[Fixture], teams: list[Team],
                       distances: DistanceTable,
                       config: EngineConfig | None = None) -> float:
    return compute_cost_breakdown(fixtures, teams, distances, config).total_cost
