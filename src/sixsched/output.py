"""Output formatters for the six-team scheduler."""

import csv
from datetime import date, datetime, time
from io import StringIO
from itertools import combinations
from pathlib import Path

from sixsched.config import EngineConfig
from sixsched.cost import compute_cost_breakdown
from sixsched.distances import DistanceTable, distance_between
from sixsched.models import NUM_ROUNDS, Fixture, Schedule, Team
from sixsched.roundrobin import match_interest

CSV_COLUMNS = ["Round", "Date", "Time", "Home", "Away", "Stadium",
               "Location", "Season"]


def _chronological(fixtures: list[Fixture]) -> list[Fixture]:
    return sorted(fixtures, key=lambda fx: (fx.kickoff or datetime.max,
                                            fx.round_index))


def _fmt_kickoff(k: datetime | None) -> str:
    return k.strftime("%Y-%m-%d %H:%M") if k else "(no date)"


def fixture_records(schedule: Schedule, season: int) -> list[dict]:
    """Fixtures as plain records, in kickoff order."""
    records = []
    for fx in _chronological(schedule.fixtures):
        home = fx.home_team
        records.append({
            "round": fx.round_number,
            "date": fx.kickoff,
            "home_team": home.id,
            "away_team": fx.away_team.id,
            "stadium": home.stadium.id,
            "location": home.stadium.city or "Unknown",
            "season": season,
        })
    return records


def format_fixtures_csv(records: list[dict]) -> str:
    output = StringIO()
    writer = csv.writer(output)
    writer.writerow(CSV_COLUMNS)
    for rec in records:
        k = rec["date"]
        writer.writerow([
            rec["round"],
            k.strftime("%Y-%m-%d") if k else "",
            k.strftime("%H:%M") if k else "",
            rec["home_team"], rec["away_team"],
            rec["stadium"], rec["location"], rec["season"],
        ])
    return output.getvalue()


def parse_fixtures_csv(text: str) -> list[dict]:
    """Read records written by format_fixtures_csv.

    Rows without home and away teams are skipped.
    """
    records = []
    for row in csv.DictReader(StringIO(text)):
        home = (row.get("Home") or "").strip()
        away = (row.get("Away") or "").strip()
        if not home or not away:
            continue
        kickoff = None
        date_str = (row.get("Date") or "").strip()
        if date_str:
            time_str = (row.get("Time") or "").strip() or "00:00"
            kickoff = datetime.combine(date.fromisoformat(date_str),
                                       time.fromisoformat(time_str))
        season = (row.get("Season") or "").strip()
        records.append({
            "round": int(row.get("Round") or 0),
            "date": kickoff,
            "home_team": home,
            "away_team": away,
            "stadium": (row.get("Stadium") or "").strip(),
            "location": (row.get("Location") or "").strip(),
            "season": int(season) if season else None,
        })
    return records


def format_schedule(schedule: Schedule, teams: list[Team]) -> str:
    """Format schedule as human-readable text, organized by round."""
    names = {t.id: t.name for t in teams}
    lines = []
    lines.append("=" * 70)
    lines.append("CHAMPIONSHIP FIXTURES")
    lines.append("=" * 70)

    slots = schedule.match_slots
    for r in range(NUM_ROUNDS):
        rnd = _chronological(schedule.round_fixtures(r))
        label = f"ROUND {r + 1}"
        if slots:
            label += f" (weekend {slots[r] + 1})"
        lines.append(f"\n--- {label} ---")
        for fx in rnd:
            when = fx.kickoff.strftime("%a %d %b %H:%M") if fx.kickoff else "TBD"
            lines.append(
                f"  {when:<16} {names[fx.home_team.id]:<12} vs "
                f"{names[fx.away_team.id]:<12} @ {fx.home_team.stadium.city}"
            )

    rest = [i + 1 for i, is_match in enumerate(schedule.pattern) if not is_match]
    if rest:
        lines.append(f"\nRest weekends: {', '.join(str(w) for w in rest)}")
    return "\n".join(lines)


def build_summary(schedule: Schedule, teams: list[Team],
                  distances: DistanceTable,
                  config: EngineConfig | None = None,
                  rivalries: set[frozenset[str]] | None = None) -> list[str]:
    """Line-oriented report of the chosen schedule and its cost."""
    config = config or EngineConfig()
    rivalries = rivalries or set()
    b = compute_cost_breakdown(schedule.fixtures, teams, distances, config)
    chrono = _chronological(schedule.fixtures)
    by_id = {t.id: t for t in teams}
    lines = []

    lines.append("=== Final Schedule Summary ===")
    lines.append("")
    lines.append(f"Best schedule found with total cost: {schedule.total_cost:.2f}")
    lines.append("Cost breakdown:")
    lines.append(f"  - Consecutive Away Penalty:  {b.consecutive_away_penalty:.2f}"
                 " (each back-to-back away pair adds 1)")
    lines.append(f"  - Max Travel (km):          {b.max_travel:.2f}"
                 " (heaviest total distance for one team)")
    lines.append(f"  - Total Travel (km):        {b.total_travel:.2f}")
    lines.append(f"  - Travel StdDev (fairness): {b.travel_stddev:.2f}")
    lines.append(f"  - Competitiveness Penalty:  {b.comp_penalty:.2f}"
                 " (big matches early cost more)")
    lines.append(f"  - Home/Away Balance:        {b.balance_penalty:.2f}")
    lines.append(f"  - Broadcast Penalty:        {b.broadcast_penalty:.2f}"
                 f" ({b.friday_night_count} Friday nights,"
                 f" limit {config.friday_night_limit})")
    lines.append(f"  - Timeslot Penalty:         {b.timeslot_penalty:.2f}")
    lines.append(f"  - Short-Gap Penalty:        {b.short_gap_penalty:.2f}"
                 f" (fixtures under {config.min_gap_days:g} days apart)")
    lines.append(f"  - Top2 Missed Slot Penalty: {b.top2_missed_slot_penalty:.2f}"
                 " (#1 vs #2 not in the Round 5 final slot)")
    lines.append(f"  => Weighted total:          {b.total_cost:.2f}")
    lines.append("")

    lines.append("Round Start Dates:")
    for r in range(NUM_ROUNDS):
        rnd = _chronological(schedule.round_fixtures(r))
        if rnd:
            first = rnd[0].kickoff
            when = first.strftime("%a %d %b %Y") if first else "(no date)"
            lines.append(f"  Round {r + 1} starts on => {when}")
    lines.append("")

    ranked = sorted(teams, key=lambda t: t.ranking)
    lines.append("Team Rankings:")
    for t in ranked:
        lines.append(f"  - {t.name} (rank {t.ranking})")
    lines.append("")

    lines.append("Match Interest Rankings (highest first):")
    pairs = []
    for a, c in combinations(teams, 2):
        pairs.append((match_interest(a, c, config.alpha, config.beta), a, c))
    pairs.sort(key=lambda p: (-p[0], p[1].ranking + p[2].ranking))
    for i, (interest, a, c) in enumerate(pairs, 1):
        lines.append(
            f"{i} - {a.name} (rank {a.ranking}) vs {c.name} (rank {c.ranking}), "
            f"interest={interest:g}, sum={a.ranking + c.ranking}, "
            f"diff={abs(a.ranking - c.ranking)}"
        )
    lines.append("")

    lines.append("Prime-Time Rivalry Matches (Sat 20:00 or Sun 18:00):")
    prime = []
    for fx in chrono:
        k = fx.kickoff
        if k is None or fx.key not in rivalries:
            continue
        if (k.weekday() == 5 and k.hour == 20) or (k.weekday() == 6 and k.hour == 18):
            prime.append(fx)
    if not prime:
        lines.append("  (No rivalry was assigned to prime time)")
    for fx in prime:
        lines.append(f"  R{fx.round_number}: {fx.home_team.name} vs "
                     f"{fx.away_team.name} @ {_fmt_kickoff(fx.kickoff)}")
    lines.append("")

    lines.append("--- Distances Between Teams ---")
    for a, c in combinations(teams, 2):
        lines.append(f"Distance: {a.name} vs {c.name} => "
                     f"{distance_between(distances, a.id, c.id):.2f} km")
    lines.append("")

    lines.append("--- Total Travel Distances by Team ---")
    for t in teams:
        lines.append(f"  {t.name}: {b.travel_by_team.get(t.id, 0.0):.2f} km")
    lines.append("")

    lines.append("--- Per-Match Travel Logs ---")
    for fx in chrono:
        home, away = fx.home_team, fx.away_team
        d = distance_between(distances, home.id, away.id)
        lines.append(
            f"R{fx.round_number} | {away.name} travels to {home.name} "
            f"[{home.stadium.latitude},{home.stadium.longitude}] => "
            f"{d:.2f} km @ {_fmt_kickoff(fx.kickoff)}"
        )
    lines.append("")

    lines.append("--- Per-Team Fixture Summary ---")
    for t in teams:
        lines.append(f"{t.name}:")
        own = sorted((fx for fx in schedule.fixtures if fx.involves(t.id)),
                     key=lambda fx: fx.round_index)
        for fx in own:
            is_home = fx.is_home(t.id)
            opp = fx.away_team if is_home else fx.home_team
            day = fx.kickoff.strftime("%Y-%m-%d") if fx.kickoff else "(no date)"
            lines.append(f"  R{fx.round_number} - {'Home' if is_home else 'Away'}"
                         f" vs {by_id[opp.id].name} ({day})")
        lines.append("")

    return lines


def write_schedule(schedule: Schedule, records: list[dict], teams: list[Team],
                   summary: list[str], output_prefix: str = "output"):
    """Write all output files into {output_prefix}/ directory.

    Returns the list of paths written.
    """
    out_dir = Path(output_prefix)
    out_dir.mkdir(parents=True, exist_ok=True)
    written = []

    schedule_path = out_dir / "schedule.txt"
    schedule_path.write_text(format_schedule(schedule, teams) + "\n")
    written.append(schedule_path)

    csv_path = out_dir / "fixtures.csv"
    csv_path.write_text(format_fixtures_csv(records))
    written.append(csv_path)

    summary_path = out_dir / "summary.txt"
    summary_path.write_text("\n".join(summary) + "\n")
    written.append(summary_path)

    return written
