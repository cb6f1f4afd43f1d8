"""Standalone verifier for six-team fixture lists.

Validates a fixture CSV (exported by sixsched or drawn up by hand) against
the teams, locks and previous season in config.yaml.
Usage: sixsched-verify <fixtures.csv> [config.yaml]
"""

import sys
from pathlib import Path

from sixsched.config import load_config
from sixsched.constraints import format_validation_report, validate_schedule
from sixsched.distances import build_distance_table
from sixsched.kickoffs import season_anchor
from sixsched.models import Fixture, Stadium, Team
from sixsched.output import parse_fixtures_csv
from sixsched.roundrobin import match_interest
from sixsched.stats import compute_stats, format_stats_report


def _unknown_team(team_id: str) -> Team:
    return Team(id=team_id, name=team_id, ranking=0,
                stadium=Stadium(id=team_id, city="Unknown",
                                latitude=0.0, longitude=0.0))


def parse_csv_schedule(csv_path: str, config: dict) -> list[Fixture]:
    """Parse a fixture CSV back into Fixture objects.

    The home side becomes side A. Calendar slots are counted in weeks
    from the season anchor. Team ids missing from config are kept so the
    validator can report them.
    """
    teams = {t.id: t for t in config["teams"]}
    weights = config["weights"]
    anchor = season_anchor(config["season"]["year"])

    fixtures = []
    for rec in parse_fixtures_csv(Path(csv_path).read_text()):
        home = teams.get(rec["home_team"]) or _unknown_team(rec["home_team"])
        away = teams.get(rec["away_team"]) or _unknown_team(rec["away_team"])
        kickoff = rec["date"]
        week_slot = (kickoff.date() - anchor).days // 7 if kickoff else 0
        fixtures.append(Fixture(
            team_a=home,
            team_b=away,
            competitiveness=match_interest(home, away, weights.alpha,
                                           weights.beta),
            round_index=rec["round"] - 1,
            week_slot=week_slot,
            home_is_a=True,
            kickoff=kickoff,
        ))
    return fixtures


def verify(csv_path: str, config: dict) -> tuple[dict, str]:
    """Validate a fixture CSV. Returns (validation result, printable report)."""
    fixtures = parse_csv_schedule(csv_path, config)
    teams = config["teams"]
    result = validate_schedule(fixtures, teams, config.get("locks"),
                               config.get("last_year"))
    stats = compute_stats(fixtures, teams, build_distance_table(teams))
    report = (format_validation_report(result) + "\n\n"
              + format_stats_report(stats, teams))
    return result, report


def main():
    if len(sys.argv) < 2:
        print("Usage: sixsched-verify <fixtures.csv> [config.yaml]")
        print("  Validates a fixture CSV against constraints in config.")
        sys.exit(1)

    csv_path = sys.argv[1]
    config_path = sys.argv[2] if len(sys.argv) > 2 else "config.yaml"

    if not Path(csv_path).exists():
        print(f"Error: {csv_path} not found")
        sys.exit(1)
    if not Path(config_path).exists():
        print(f"Error: {config_path} not found")
        sys.exit(1)

    print(f"Loading config from {config_path}...")
    config = load_config(config_path)

    print(f"Parsing fixtures from {csv_path}...")
    result, report = verify(csv_path, config)
    print(report)
    sys.exit(0 if result["valid"] else 1)


if __name__ == "__main__":
    main()
