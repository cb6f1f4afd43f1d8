#!/usr/bin/env python3
"""Six-team championship fixture builder.

Generate mode (default):
    sixsched [config.yaml] [--seed N] [--runs N] [--rest-weeks K] [-o DIR]

    Generates fixtures from the YAML config and writes:
      {DIR}/schedule.txt  - Round-by-round fixture list
      {DIR}/fixtures.csv  - Fixture CSV (re-importable with --verify)
      {DIR}/summary.txt   - Cost breakdown, travel and per-team fixtures
      {DIR}/stats.txt     - Validation report + statistics

Verify mode:
    sixsched [config.yaml] --verify <fixtures.csv>

    Re-imports a fixture CSV and checks all constraints against config.
    Exit code 0 if valid, 1 if violations found.

Examples:
    sixsched                               # default config, random seed
    sixsched --seed 42 -o season2026       # reproducible, custom directory
    sixsched --rest-weeks 2 --local-search
    sixsched --verify output/fixtures.csv
"""

import argparse
import logging
import sys
from pathlib import Path

from sixsched.config import ConfigError, load_config
from sixsched.constraints import format_validation_report, validate_schedule
from sixsched.distances import build_distance_table
from sixsched.log import init_logging
from sixsched.output import write_schedule
from sixsched.scheduler import schedule
from sixsched.stats import compute_stats, format_stats_report
from sixsched.verify import verify

log = logging.getLogger(__name__)


def main():
    parser = argparse.ArgumentParser(
        description="Six-team championship fixture builder",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""\
Output files (generate mode):
  {dir}/schedule.txt   Round-by-round fixture list
  {dir}/fixtures.csv   Fixture CSV
  {dir}/summary.txt    Cost breakdown and travel report
  {dir}/stats.txt      Validation report + balance statistics

Exit codes:
  0  Schedule valid (or generation succeeded with no hard violations)
  1  Constraint violations found, or generation error
""",
    )
    parser.add_argument(
        "config", nargs="?", default="config.yaml",
        help="Path to config YAML file (default: config.yaml)"
    )
    parser.add_argument(
        "--seed", type=int, default=None,
        help="Random seed for reproducible fixtures"
    )
    parser.add_argument(
        "--runs", type=int, default=None,
        help="Repeat the whole search N times and keep the cheapest "
             "(default: season.runs from config)"
    )
    parser.add_argument(
        "--rest-weeks", type=int, default=None,
        help="Only use calendars with exactly K rest weekends inside the "
             "season (default: season.rest_weeks from config)"
    )
    parser.add_argument(
        "--local-search", action="store_true",
        help="Polish every candidate with simulated annealing"
    )
    parser.add_argument(
        "--output-prefix", "-o", default="output",
        help="Output directory for generated files (default: output/)"
    )
    parser.add_argument(
        "--verify", metavar="CSV",
        help="Verify an existing fixture CSV instead of generating"
    )
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="Show per-combination search detail")
    parser.add_argument("-q", "--quiet", action="store_true",
                        help="Only show warnings and reports")
    args = parser.parse_args()

    init_logging(1 if args.verbose else -1 if args.quiet else 0)

    config_path = args.config
    if not Path(config_path).exists():
        print(f"Error: config file {config_path} not found")
        sys.exit(1)

    log.info("Loading config from %s", config_path)
    try:
        config = load_config(config_path)
    except ConfigError as e:
        print(f"Error: invalid config {config_path}")
        for msg in e.errors:
            print(f"  {msg}")
        sys.exit(1)

    if args.verify:
        if not Path(args.verify).exists():
            print(f"Error: {args.verify} not found")
            sys.exit(1)
        log.info("Verifying fixtures from %s", args.verify)
        result, report = verify(args.verify, config)
        print(report)
        sys.exit(0 if result["valid"] else 1)

    if args.local_search:
        config["weights"].run_local_search = True

    teams = config["teams"]
    log.info("Generating fixtures (seed=%s)", args.seed)
    result = schedule(config, seed=args.seed, runs=args.runs,
                      rest_weeks=args.rest_weeks)

    if not result.feasible:
        print("Error: " + " ".join(result.summary))
        sys.exit(1)

    fixtures = result.schedule.fixtures
    validation = validate_schedule(fixtures, teams, config["locks"],
                                   config["last_year"])
    report = format_validation_report(validation)
    print(report)

    stats = compute_stats(fixtures, teams, build_distance_table(teams))
    stats_text = format_stats_report(stats, teams)
    print("\n" + stats_text)

    written = write_schedule(result.schedule, result.fixtures, teams,
                             result.summary, output_prefix=args.output_prefix)
    stats_path = Path(args.output_prefix) / "stats.txt"
    stats_path.write_text(report + "\n\n" + stats_text + "\n")
    written.append(stats_path)
    for path in written:
        log.info("Written: %s", path)

    if validation["valid"]:
        print(f"\nFixtures generated successfully (cost {result.best_cost:.2f}).")
    else:
        print(f"\nFixtures have {len(validation['errors'])} constraint violations.")
        sys.exit(1)


if __name__ == "__main__":
    main()
