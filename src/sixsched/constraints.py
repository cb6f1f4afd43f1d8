"""Hard-constraint checks for six-team schedules.

is_feasible is the fast predicate the search calls on nearly every
mutation. validate_schedule is the full report used for finished and
imported schedules; it lists every violation instead of stopping at the
first.
"""

from collections import defaultdict
from datetime import time
from itertools import combinations
from typing import Optional

from sixsched.models import (
    FIXTURES_PER_ROUND, NUM_FIXTURES, NUM_ROUNDS, Fixture, LastYearMap,
    PartialLocks, Team,
)

MIN_HOME = 2
MAX_HOME = 3
MAX_AWAY_STREAK = 2

# Kickoff window: Friday from 18:00 through Sunday 20:00
FRIDAY_EARLIEST = time(18, 0)
SUNDAY_LATEST = time(20, 0)


def lock_for(locks: PartialLocks, team_id: str,
             round_number: int) -> Optional[bool]:
    """Forced venue for a team in a round: True home, False away, None free."""
    team_locks = locks.get(team_id)
    if not team_locks:
        return None
    return team_locks.get(round_number)


def locked_home_is_a(fx: Fixture, locks: PartialLocks) -> Optional[bool]:
    """home_is_a forced by a partial lock, or None. Side A's lock wins."""
    lock_a = lock_for(locks, fx.team_a.id, fx.round_number)
    if lock_a is not None:
        return lock_a
    lock_b = lock_for(locks, fx.team_b.id, fx.round_number)
    if lock_b is not None:
        return not lock_b
    return None


def alternation_home_is_a(fx: Fixture,
                          last_year: LastYearMap) -> Optional[bool]:
    """home_is_a forced by last season's host, or None.

    Whoever hosted the pairing last season travels this season.
    """
    host = last_year.get(fx.key)
    if host is None:
        return None
    return host != fx.team_a.id


def is_locked(fx: Fixture, locks: PartialLocks) -> bool:
    return (lock_for(locks, fx.team_a.id, fx.round_number) is not None
            or lock_for(locks, fx.team_b.id, fx.round_number) is not None)


def is_constrained(fx: Fixture, locks: PartialLocks,
                   last_year: LastYearMap) -> bool:
    """True if the fixture's venue is fixed by a lock or by alternation."""
    return is_locked(fx, locks) or fx.key in last_year


def away_slots(fixtures: list[Fixture]) -> dict[str, list[int]]:
    """Sorted calendar slots each team plays away."""
    slots: dict[str, list[int]] = defaultdict(list)
    for fx in fixtures:
        slots[fx.away_team.id].append(fx.week_slot)
    for v in slots.values():
        v.sort()
    return slots


def longest_run(slots: list[int]) -> int:
    """Longest run of consecutive calendar slots."""
    best = 0
    run = 0
    prev = None
    for s in slots:
        run = run + 1 if prev is not None and s == prev + 1 else 1
        best = max(best, run)
        prev = s
    return best


def has_three_away_in_a_row(fixtures: list[Fixture]) -> bool:
    """Any team away on three consecutive calendar weekends.

    Adjacency is by week_slot, so a rest weekend breaks a streak.
    """
    return any(longest_run(s) > MAX_AWAY_STREAK
               for s in away_slots(fixtures).values())


def home_counts(fixtures: list[Fixture], teams: list[Team]) -> dict[str, int]:
    counts = {t.id: 0 for t in teams}
    for fx in fixtures:
        tid = fx.home_team.id
        counts[tid] = counts.get(tid, 0) + 1
    return counts


def _rounds_ok(fixtures: list[Fixture]) -> bool:
    by_round: dict[int, list[Fixture]] = defaultdict(list)
    for fx in fixtures:
        by_round[fx.round_index].append(fx)
    for r in range(NUM_ROUNDS):
        rnd = by_round.get(r, [])
        if len(rnd) != FIXTURES_PER_ROUND:
            return False
        seen = set()
        for fx in rnd:
            if fx.team_a.id in seen or fx.team_b.id in seen:
                return False
            seen.add(fx.team_a.id)
            seen.add(fx.team_b.id)
    return True


def is_feasible(fixtures: list[Fixture], teams: list[Team],
                locks: PartialLocks | None = None,
                last_year: LastYearMap | None = None) -> bool:
    """True if every hard constraint holds. Pure; stops at the first failure.

    Checks, in order: rounds of three fixtures with six distinct teams,
    partial locks, last-season alternation, no three consecutive away
    weekends, and every team hosting two or three times.
    """
    locks = locks or {}
    last_year = last_year or {}

    if not _rounds_ok(fixtures):
        return False

    for fx in fixtures:
        forced = locked_home_is_a(fx, locks)
        if forced is not None and forced != fx.home_is_a:
            return False
        # A lock on side B must hold even when side A is locked too.
        lock_b = lock_for(locks, fx.team_b.id, fx.round_number)
        if lock_b is not None and lock_b == fx.home_is_a:
            return False

    for fx in fixtures:
        forced = alternation_home_is_a(fx, last_year)
        if forced is not None and forced != fx.home_is_a:
            return False

    if has_three_away_in_a_row(fixtures):
        return False

    for count in home_counts(fixtures, teams).values():
        if not MIN_HOME <= count <= MAX_HOME:
            return False

    return True


def _kickoff_in_window(fx: Fixture) -> bool:
    k = fx.kickoff
    wd = k.weekday()
    if wd == 4:
        return k.time() >= FRIDAY_EARLIEST
    if wd == 5:
        return True
    if wd == 6:
        return k.time() <= SUNDAY_LATEST
    return False


def validate_schedule(fixtures: list[Fixture], teams: list[Team],
                      locks: PartialLocks | None = None,
                      last_year: LastYearMap | None = None) -> dict:
    """Validate a schedule against all constraints.

    Returns dict with:
    - valid: bool (True if no hard constraint violations)
    - errors: list of hard constraint violations
    - warnings: list of soft issues
    """
    locks = locks or {}
    last_year = last_year or {}
    errors = []
    warnings = []

    known = {t.id for t in teams}

    if len(fixtures) != NUM_FIXTURES:
        errors.append(f"Expected {NUM_FIXTURES} fixtures, found {len(fixtures)}")

    by_round: dict[int, list[Fixture]] = defaultdict(list)
    pair_counts: dict[frozenset[str], int] = defaultdict(int)
    games_per_team: dict[str, int] = defaultdict(int)
    for fx in fixtures:
        for tid in (fx.team_a.id, fx.team_b.id):
            if tid not in known:
                errors.append(f"Unknown team: {tid}")
            games_per_team[tid] += 1
        by_round[fx.round_index].append(fx)
        pair_counts[fx.key] += 1

    for r in range(NUM_ROUNDS):
        rnd = by_round.get(r, [])
        if len(rnd) != FIXTURES_PER_ROUND:
            errors.append(f"Round {r + 1} has {len(rnd)} fixtures, "
                          f"expected {FIXTURES_PER_ROUND}")
        playing = set()
        for fx in rnd:
            for tid in (fx.team_a.id, fx.team_b.id):
                if tid in playing:
                    errors.append(f"Round {r + 1}: {tid} plays twice")
                playing.add(tid)
    for r in sorted(by_round):
        if not 0 <= r < NUM_ROUNDS:
            errors.append(f"Fixture in unknown round {r + 1}")

    for a, b in combinations(sorted(known), 2):
        count = pair_counts.get(frozenset((a, b)), 0)
        if count != 1:
            errors.append(f"{a} vs {b}: played {count} times (expected 1)")

    for tid in sorted(known):
        if games_per_team.get(tid, 0) != NUM_ROUNDS:
            errors.append(f"{tid} plays {games_per_team.get(tid, 0)} fixtures, "
                          f"expected {NUM_ROUNDS}")

    for tid, count in sorted(home_counts(fixtures, teams).items()):
        if not MIN_HOME <= count <= MAX_HOME:
            errors.append(f"{tid} home/away split: {count}H/"
                          f"{games_per_team.get(tid, 0) - count}A "
                          f"(must host {MIN_HOME} or {MAX_HOME})")

    for tid, slots in sorted(away_slots(fixtures).items()):
        run = longest_run(slots)
        if run > MAX_AWAY_STREAK:
            errors.append(f"{tid} is away {run} weekends in a row")
        elif run == MAX_AWAY_STREAK:
            warnings.append(f"{tid} is away on back-to-back weekends")

    for fx in sorted(fixtures, key=lambda f: f.round_index):
        h, a = fx.home_team.id, fx.away_team.id
        for tid in (fx.team_a.id, fx.team_b.id):
            lock = lock_for(locks, tid, fx.round_number)
            if lock is not None and fx.is_home(tid) != lock:
                want = "home" if lock else "away"
                errors.append(f"Round {fx.round_number}: {tid} is locked "
                              f"{want} but plays {h} vs {a}")
        host = last_year.get(fx.key)
        if host is not None and host == h:
            errors.append(f"Home advantage not alternated: {h} hosted {a} "
                          f"last season and hosts again")

    for fx in sorted(fixtures, key=lambda f: f.round_index):
        if fx.kickoff is None:
            warnings.append(f"Round {fx.round_number}: {fx.home_team.id} vs "
                            f"{fx.away_team.id} has no kickoff")
        elif not _kickoff_in_window(fx):
            errors.append(f"Round {fx.round_number}: {fx.home_team.id} vs "
                          f"{fx.away_team.id} kicks off "
                          f"{fx.kickoff:%a %Y-%m-%d %H:%M}, outside "
                          f"Fri 18:00 - Sun 20:00")

    return {
        "valid": len(errors) == 0,
        "errors": errors,
        "warnings": warnings,
    }


def format_validation_report(result: dict) -> str:
    """Format validation results as text."""
    lines = []
    lines.append("=" * 60)
    lines.append("SCHEDULE VALIDATION REPORT")
    lines.append("=" * 60)

    if result["valid"]:
        lines.append("\nRESULT: VALID (no hard constraint violations)")
    else:
        lines.append(f"\nRESULT: INVALID ({len(result['errors'])} violations)")

    if result["errors"]:
        lines.append(f"\n--- ERRORS ({len(result['errors'])}) ---")
        for e in result["errors"]:
            lines.append(f"  ERROR: {e}")

    if result["warnings"]:
        lines.append(f"\n--- WARNINGS ({len(result['warnings'])}) ---")
        for w in result["warnings"]:
            lines.append(f"  WARN: {w}")

    return "\n".join(lines)
