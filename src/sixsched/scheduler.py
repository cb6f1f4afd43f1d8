"""Main scheduling engine for the six-team championship.

For every rest pattern and every matchup ordering strategy:
1. Round assignment (solver.py): backtracking into 5 rounds of 3
2. Home/away (homeaway.py): hard locks and alternation, then local search
3. Dates (kickoffs.py): weekends, kickoff slots, rivalries, Super Saturday
4. Cost (cost.py), then optional simulated annealing (annealing.py)

The cheapest feasible schedule across all combinations wins. A failing
stage only abandons its own combination. The multi-run wrapper repeats the
whole search with fresh randomness and keeps the global best.
"""

import logging
import math
import random
import time

from sixsched.annealing import AnnealContext, anneal
from sixsched.config import EngineConfig
from sixsched.cost import compute_total_cost
from sixsched.distances import DistanceTable, build_distance_table
from sixsched.homeaway import assign_home_away
from sixsched.kickoffs import assign_dates
from sixsched.models import (
    NUM_FIXTURES, NUM_TEAMS, LastYearMap, PartialLocks, Schedule,
    SchedulerResult, Team,
)
from sixsched.output import build_summary, fixture_records
from sixsched.roundrobin import (
    filter_patterns, generate_matchups, generate_rest_patterns, match_slots,
)
from sixsched.solver import ORDER_STRATEGIES, assign_rounds

log = logging.getLogger(__name__)

NO_SCHEDULE = "No feasible schedule found."


def _check_teams(teams: list[Team]) -> None:
    if len(teams) != NUM_TEAMS:
        raise ValueError(f"Exactly {NUM_TEAMS} teams are required, "
                         f"got {len(teams)}")
    if len({t.id for t in teams}) != NUM_TEAMS:
        raise ValueError("Team ids must be unique")


def find_best_schedule(teams: list[Team], season: int,
                       requested_rest_count: int | None = None,
                       config: EngineConfig | None = None,
                       locks: PartialLocks | None = None,
                       last_year: LastYearMap | None = None,
                       rivalries: set[frozenset[str]] | None = None,
                       rng: random.Random | None = None,
                       distances: DistanceTable | None = None
                       ) -> Schedule | None:
    """Search every pattern x strategy combination; None if all fail."""
    _check_teams(teams)
    config = config or EngineConfig()
    locks = locks or {}
    last_year = last_year or {}
    rivalries = rivalries or set()
    rng = rng or random.Random()
    if distances is None:
        distances = build_distance_table(teams)

    matchups = generate_matchups(teams, config.alpha, config.beta)
    patterns = filter_patterns(generate_rest_patterns(), requested_rest_count)
    log.info("Trying %d rest patterns x %d strategies",
             len(patterns), len(ORDER_STRATEGIES))

    ctx = AnnealContext(teams=teams, distances=distances, config=config,
                        locks=locks, last_year=last_year,
                        rivalries=rivalries, year=season)
    deadline = None
    if config.time_limit_seconds > 0:
        deadline = time.monotonic() + config.time_limit_seconds

    best: Schedule | None = None
    rejected = {"rounds": 0, "home_away": 0, "dates": 0}

    for pattern in patterns:
        if deadline is not None and time.monotonic() > deadline:
            log.warning("Time limit reached, stopping search early")
            break
        slots = match_slots(pattern)

        for strategy in ORDER_STRATEGIES:
            rounds = assign_rounds(matchups, slots, strategy, rng)
            if not rounds.feasible:
                rejected["rounds"] += 1
                continue
            fixtures = rounds.fixtures

            ha = None
            for _ in range(max(1, config.home_away_attempts)):
                ha = assign_home_away(fixtures, teams, distances, config,
                                      locks, last_year, rng)
                if ha.feasible:
                    break
            if not ha.feasible:
                rejected["home_away"] += 1
                continue

            dated = assign_dates(fixtures, slots, season, teams, rivalries)
            if dated is None or len(dated) != NUM_FIXTURES:
                rejected["dates"] += 1
                continue

            cost = compute_total_cost(dated, teams, distances, config)
            if not math.isfinite(cost):
                continue
            candidate = Schedule(fixtures=dated, pattern=pattern,
                                 total_cost=cost)

            if config.run_local_search:
                refined = anneal(candidate, ctx, rng)
                if refined.total_cost < candidate.total_cost:
                    candidate = refined

            if best is None or candidate.total_cost < best.total_cost:
                best = candidate
                log.debug("New best %.2f (strategy=%s, slots=%s)",
                          best.total_cost, strategy, slots)

    log.debug("Rejected combinations: %s", rejected)
    return best


def generate_fixtures(teams: list[Team], season: int,
                      requested_rest_count: int | None = None,
                      config: EngineConfig | None = None,
                      locks: PartialLocks | None = None,
                      last_year: LastYearMap | None = None,
                      rivalries: set[frozenset[str]] | None = None,
                      rng: random.Random | None = None) -> SchedulerResult:
    """Run one full search and package the result.

    Raises ValueError unless given exactly six teams. When nothing is
    feasible the result carries no fixtures and best_cost None.
    """
    _check_teams(teams)
    config = config or EngineConfig()
    log.info("Scheduling season %d (rest weeks=%s)", season,
             requested_rest_count)
    distances = build_distance_table(teams)
    best = find_best_schedule(teams, season, requested_rest_count, config,
                              locks, last_year, rivalries, rng, distances)
    if best is None:
        log.info(NO_SCHEDULE)
        return SchedulerResult(summary=[NO_SCHEDULE])

    log.info("Best cost found = %.2f", best.total_cost)
    return SchedulerResult(
        fixtures=fixture_records(best, season),
        summary=build_summary(best, teams, distances, config,
                              rivalries or set()),
        best_cost=best.total_cost,
        schedule=best,
    )


def generate_fixtures_with_retries(teams: list[Team], season: int,
                                   requested_rest_count: int | None = None,
                                   config: EngineConfig | None = None,
                                   locks: PartialLocks | None = None,
                                   last_year: LastYearMap | None = None,
                                   rivalries: set[frozenset[str]] | None = None,
                                   runs: int = 10,
                                   rng: random.Random | None = None
                                   ) -> SchedulerResult:
    """Repeat the whole search runs times and keep the cheapest result."""
    _check_teams(teams)
    rng = rng or random.Random()
    best: SchedulerResult | None = None
    for i in range(1, runs + 1):
        log.info("Scheduler run %d of %d", i, runs)
        result = generate_fixtures(teams, season, requested_rest_count,
                                   config, locks, last_year, rivalries, rng)
        if result.feasible and (best is None
                                or result.best_cost < best.best_cost):
            best = result
            log.info("New best cost => %.2f", best.best_cost)

    if best is None:
        msg = "No feasible schedule found after all retries."
        log.info(msg)
        return SchedulerResult(summary=[msg])
    return best


def schedule(config: dict, seed: int | None = None,
             runs: int | None = None,
             rest_weeks: int | None = None) -> SchedulerResult:
    """Generate a schedule from a loaded config (see config.load_config)."""
    season = config["season"]
    if runs is None:
        runs = season.get("runs", 1)
    if rest_weeks is None:
        rest_weeks = season.get("rest_weeks")
    return generate_fixtures_with_retries(
        config["teams"], season["year"],
        requested_rest_count=rest_weeks,
        config=config["weights"],
        locks=config.get("locks"),
        last_year=config.get("last_year"),
        rivalries=config.get("rivalries"),
        runs=max(1, runs),
        rng=random.Random(seed),
    )
