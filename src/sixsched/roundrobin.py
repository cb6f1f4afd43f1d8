"""Matchup and rest-pattern generation for the six-team round robin."""

from itertools import combinations

from sixsched.models import (
    NUM_ROUNDS, NUM_TEAMS, SEASON_SLOTS, Fixture, Matchup, Team,
)

RestPattern = tuple[bool, ...]


def match_interest(a: Team, b: Team, alpha: float = 1,
                   beta: float = 2) -> float:
    """Interest of a pairing: close ranks and a high tier score highest.

    interest = alpha * (6 - |rank diff|) + beta * (12 - rank sum)
    """
    diff = abs(a.ranking - b.ranking)
    total = a.ranking + b.ranking
    return alpha * (NUM_TEAMS - diff) + beta * (2 * NUM_TEAMS - total)


def generate_matchups(teams: list[Team], alpha: float = 1,
                      beta: float = 2) -> list[Matchup]:
    """All C(n, 2) pairings in team order, each scored by match_interest."""
    return [
        Matchup(a, b, match_interest(a, b, alpha, beta))
        for a, b in combinations(teams, 2)
    ]


def generate_rest_patterns(match_weeks: int = NUM_ROUNDS,
                           total_slots: int = SEASON_SLOTS) -> list[RestPattern]:
    """Every way to place match_weeks match weekends in total_slots slots.

    Patterns come out with the earliest match weekends first, so
    (True, True, True, True, True, False, False, False) leads.
    """
    patterns = []
    for chosen in combinations(range(total_slots), match_weeks):
        picked = set(chosen)
        patterns.append(tuple(i in picked for i in range(total_slots)))
    return patterns


def match_slots(pattern: RestPattern) -> list[int]:
    """Calendar slot index of each round, in round order."""
    return [i for i, is_match in enumerate(pattern) if is_match]


def rest_weeks(pattern: RestPattern) -> int:
    """Rest weekends that fall inside the season.

    Slots before round 1 only move the season start, and slots after
    round 5 are outside the season, so neither counts.
    """
    slots = match_slots(pattern)
    if not slots:
        return 0
    return (slots[-1] - slots[0] + 1) - len(slots)


def filter_patterns(patterns: list[RestPattern],
                    requested_rest_count: int | None) -> list[RestPattern]:
    if requested_rest_count is None:
        return list(patterns)
    return [p for p in patterns if rest_weeks(p) == requested_rest_count]


def verify_round_robin(fixtures: list[Fixture], teams: list[Team]) -> dict:
    """Verify fixtures form a valid, complete single round robin.

    Returns dict with:
    - valid: bool
    - errors: list of error strings
    - matchup_counts: dict of unordered id pair -> count
    - games_per_team: dict of team id -> game count
    """
    errors = []
    matchup_counts: dict[frozenset[str], int] = {}
    games_per_team: dict[str, int] = {t.id: 0 for t in teams}

    by_round: dict[int, list[Fixture]] = {}
    for fx in fixtures:
        by_round.setdefault(fx.round_index, []).append(fx)

    for r in sorted(by_round):
        teams_in_round = set()
        for fx in by_round[r]:
            for tid in (fx.team_a.id, fx.team_b.id):
                if tid in teams_in_round:
                    errors.append(f"Round {r + 1}: {tid} appears twice")
                teams_in_round.add(tid)
                games_per_team[tid] = games_per_team.get(tid, 0) + 1
            matchup_counts[fx.key] = matchup_counts.get(fx.key, 0) + 1

    for a, b in combinations(teams, 2):
        count = matchup_counts.get(frozenset((a.id, b.id)), 0)
        if count != 1:
            errors.append(f"{a.id} vs {b.id}: played {count} times (expected 1)")

    return {
        "valid": len(errors) == 0,
        "errors": errors,
        "matchup_counts": matchup_counts,
        "games_per_team": games_per_team,
    }
