"""Statistics and balance reporting for six-team schedules."""

from collections import defaultdict

from sixsched.constraints import away_slots, longest_run
from sixsched.cost import is_friday_night
from sixsched.distances import DistanceTable, distance_between
from sixsched.models import Fixture, Team


def compute_stats(fixtures: list[Fixture], teams: list[Team],
                  distances: DistanceTable) -> dict:
    """Compute per-team statistics for a schedule.

    Travel is round trip: an away side flies out and back.
    """
    all_teams = [t.id for t in sorted(teams, key=lambda t: t.ranking)]

    home_counts = defaultdict(int)
    away_counts = defaultdict(int)
    travel_km = defaultdict(float)
    friday_nights = defaultdict(int)
    day_counts = defaultdict(lambda: defaultdict(int))  # team -> day -> count

    for fx in fixtures:
        h, a = fx.home_team.id, fx.away_team.id
        home_counts[h] += 1
        away_counts[a] += 1
        travel_km[a] += 2 * distance_between(distances, h, a)
        if fx.kickoff is not None:
            day = fx.kickoff.strftime("%a")
            day_counts[h][day] += 1
            day_counts[a][day] += 1
        if is_friday_night(fx.kickoff):
            friday_nights[h] += 1
            friday_nights[a] += 1

    slots = away_slots(fixtures)
    away_streaks = {t: longest_run(slots.get(t, [])) for t in all_teams}

    return {
        "all_teams": all_teams,
        "home_counts": dict(home_counts),
        "away_counts": dict(away_counts),
        "travel_km": dict(travel_km),
        "total_travel_km": sum(travel_km.values()),
        "friday_nights": dict(friday_nights),
        "friday_night_fixtures": sum(1 for fx in fixtures
                                     if is_friday_night(fx.kickoff)),
        "away_streaks": away_streaks,
        "day_counts": {k: dict(v) for k, v in day_counts.items()},
    }


def format_stats_report(stats: dict, teams: list[Team]) -> str:
    """Format statistics into a human-readable report."""
    names = {t.id: t.name for t in teams}
    lines = []
    lines.append("=" * 70)
    lines.append("SCHEDULE STATISTICS")
    lines.append("=" * 70)

    lines.append("\n--- SEASON BALANCE ---")
    lines.append(f"{'Team':<12} {'Home':>5} {'Away':>5} {'Diff':>5} "
                 f"{'Travel km':>10} {'Fri':>4} {'Streak':>6}")
    lines.append("-" * 54)
    for t in stats["all_teams"]:
        h = stats["home_counts"].get(t, 0)
        a = stats["away_counts"].get(t, 0)
        km = stats["travel_km"].get(t, 0.0)
        fri = stats["friday_nights"].get(t, 0)
        streak = stats["away_streaks"].get(t, 0)
        flag = " ***" if streak > 2 else ""
        lines.append(f"{names.get(t, t):<12} {h:>5} {a:>5} {h - a:>+5} "
                     f"{km:>10.0f} {fri:>4} {streak:>6}{flag}")

    lines.append("\n--- FIXTURES PER DAY ---")
    days = ["Fri", "Sat", "Sun"]
    header = f"{'Team':<12}"
    for d in days:
        header += f" {d:>4}"
    lines.append(header)
    lines.append("-" * (12 + 5 * len(days)))
    for t in stats["all_teams"]:
        row = f"{names.get(t, t):<12}"
        counts = stats["day_counts"].get(t, {})
        for d in days:
            row += f" {counts.get(d, 0):>4}"
        lines.append(row)

    lines.append("")
    lines.append(f"Total travel: {stats['total_travel_km']:.0f} km")
    lines.append(f"Friday night fixtures: {stats['friday_night_fixtures']}")

    return "\n".join(lines)
