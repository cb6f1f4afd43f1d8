"""Config loading and validation for the six-team scheduler."""

from dataclasses import dataclass, fields
from pathlib import Path

import yaml

from sixsched.models import (
    NUM_ROUNDS, NUM_TEAMS, LastYearMap, PartialLocks, Stadium, Team, Venue,
    pair_key,
)


class ConfigError(ValueError):
    """Raised when a config file or weights mapping is invalid."""

    def __init__(self, errors: list[str]):
        self.errors = list(errors)
        super().__init__("; ".join(self.errors))


@dataclass
class EngineConfig:
    """Every tunable of the engine, with its default."""
    w1: float = 1.0                  # consecutive away rounds
    w2: float = 0.1                  # max travel of any one team
    w3: float = 1.0                  # competitiveness ordering
    w4: float = 1.0                  # home/away balance
    w_fri: float = 2.0               # broadcast (Friday night) penalty
    w_travel_total: float = 0.05
    w_travel_fair: float = 0.05
    w_slot: float = 0.5
    w_short_gap: float = 0.5
    min_gap_days: float = 6
    alpha: float = 1                 # weight of rank closeness in interest
    beta: float = 2                  # weight of rank tier in interest
    friday_night_limit: int = 2
    friday_night_penalty: float = 5.0
    top2_missed_slot_penalty: float = 15.0
    run_local_search: bool = False

    # Search ceilings
    home_away_attempts: int = 40     # random venue seeds per round layout
    home_away_max_passes: int = 300
    anneal_iterations: int = 400
    anneal_start_temperature: float = 5.0
    anneal_cooling: float = 0.95
    anneal_stall_iterations: int = 20
    anneal_stall_cooling: float = 0.9
    time_limit_seconds: float = 0.0  # wall-clock cap per run, 0 for none

    @classmethod
    def from_dict(cls, raw: dict | None) -> "EngineConfig":
        """Build from a weights mapping.

        Accepts snake_case field names and the camel/upper-case names used
        by the admin UI (wFri, ALPHA, FRIDAY_NIGHT_LIMIT, runLocalSearch...).
        """
        if not raw:
            return cls()
        known = {f.name: f for f in fields(cls)}
        kwargs = {}
        errors = []
        for key, value in raw.items():
            name = WEIGHT_ALIASES.get(key, key)
            if name not in known:
                errors.append(f"Unknown weight: {key}")
                continue
            if value is None:
                continue
            if known[name].type in (bool, "bool"):
                kwargs[name] = bool(value)
                continue
            try:
                kwargs[name] = float(value)
            except (TypeError, ValueError):
                errors.append(f"Weight {key} must be numeric, got {value!r}")
                continue
            if known[name].type in (int, "int"):
                kwargs[name] = int(kwargs[name])
        if errors:
            raise ConfigError(errors)
        return cls(**kwargs)


WEIGHT_ALIASES = {
    "wFri": "w_fri",
    "wTravelTotal": "w_travel_total",
    "wTravelFair": "w_travel_fair",
    "wSlot": "w_slot",
    "wShortGap": "w_short_gap",
    "minGapDays": "min_gap_days",
    "ALPHA": "alpha",
    "BETA": "beta",
    "FRIDAY_NIGHT_LIMIT": "friday_night_limit",
    "FRIDAY_NIGHT_PENALTY": "friday_night_penalty",
    "TOP2_MISSED_SLOT_PENALTY": "top2_missed_slot_penalty",
    "runLocalSearch": "run_local_search",
}

# Historic rivalries, used when a config names none of its own.
DEFAULT_RIVALRIES = [
    ("SCO", "ENG"),
    ("IRE", "ENG"),
    ("ENG", "FRA"),
    ("IRE", "WAL"),
    ("WAL", "ENG"),
]


def parse_team(raw: dict) -> Team:
    """Build a Team from its YAML mapping."""
    st = raw["stadium"]
    return Team(
        id=str(raw["id"]),
        name=raw.get("name", str(raw["id"])),
        ranking=int(raw["ranking"]),
        stadium=Stadium(
            id=str(st.get("id", raw["id"])),
            city=st.get("city", "Unknown"),
            latitude=float(st["latitude"]),
            longitude=float(st["longitude"]),
        ),
    )


def parse_locks(raw: dict | None) -> PartialLocks:
    """Parse {team: {round: home|away}} into PartialLocks.

    Round numbers are 1-based. Values may be home/away, H/A or 1/0.
    """
    locks: PartialLocks = {}
    for team_id, rounds in (raw or {}).items():
        team_locks = {}
        for rnd, venue in (rounds or {}).items():
            team_locks[int(rnd)] = Venue.from_value(venue) is Venue.HOME
        locks[str(team_id)] = team_locks
    return locks


def build_last_year_map(records) -> LastYearMap:
    """Build the alternation map from last season's fixtures.

    records: iterable of mappings with home_team/away_team ids (the shape
    produced by output.fixture_records and parse_fixtures_csv), or with
    home/away keys as written in config files.
    """
    last_year: LastYearMap = {}
    for rec in records:
        home = str(rec.get("home_team", rec.get("home")))
        away = str(rec.get("away_team", rec.get("away")))
        last_year[pair_key(home, away)] = home
    return last_year


def load_config(path: str | Path) -> dict:
    """Load and validate config YAML, returning structured data.

    Returns dict with:
    - season: {year, name, rest_weeks, runs, local_search}
    - teams: list[Team] in file order
    - weights: EngineConfig
    - locks: PartialLocks
    - last_year: LastYearMap
    - rivalries: set of unordered team-id pairs
    """
    path = Path(path)
    with open(path) as f:
        raw = yaml.safe_load(f)

    errors = []

    season_raw = raw.get("season") or {}
    try:
        year = int(season_raw["year"])
    except KeyError:
        errors.append("season.year is required")
        year = None
    except (TypeError, ValueError):
        errors.append(f"season.year must be a number, got {season_raw['year']!r}")
        year = None
    season = {
        "year": year,
        "name": season_raw.get("name", ""),
        "rest_weeks": season_raw.get("rest_weeks"),
        "runs": int(season_raw.get("runs", 1)),
        "local_search": bool(season_raw.get("local_search", False)),
    }
    if season["rest_weeks"] is not None:
        season["rest_weeks"] = int(season["rest_weeks"])

    teams = [parse_team(t) for t in raw.get("teams", [])]
    team_ids = [t.id for t in teams]
    known = set(team_ids)
    if len(teams) != NUM_TEAMS:
        errors.append(f"Exactly {NUM_TEAMS} teams are required, got {len(teams)}")
    if len(known) != len(team_ids):
        errors.append("Duplicate team ids")

    try:
        weights = EngineConfig.from_dict(raw.get("weights"))
    except ConfigError as e:
        errors.extend(e.errors)
        weights = EngineConfig()
    if season["local_search"]:
        weights.run_local_search = True

    try:
        locks = parse_locks(raw.get("locks"))
    except ValueError as e:
        errors.append(f"Bad lock: {e}")
        locks = {}
    for team_id, rounds in locks.items():
        if team_id not in known:
            errors.append(f"Lock for unknown team {team_id}")
        for rnd in rounds:
            if not 1 <= rnd <= NUM_ROUNDS:
                errors.append(f"Lock for {team_id} names round {rnd}, "
                              f"expected 1-{NUM_ROUNDS}")

    previous = list(raw.get("previous_season", []))
    if raw.get("previous_season_csv"):
        from sixsched.output import parse_fixtures_csv
        csv_path = path.parent / raw["previous_season_csv"]
        if csv_path.exists():
            previous.extend(parse_fixtures_csv(csv_path.read_text()))
        else:
            errors.append(f"previous_season_csv {csv_path} not found")
    last_year = build_last_year_map(previous)
    for key in last_year:
        for t in key:
            if t not in known:
                errors.append(f"Previous season names unknown team {t}")

    if "rivalries" in raw:
        rivalries = {pair_key(str(a), str(b)) for a, b in raw["rivalries"]}
        for key in rivalries:
            for t in key:
                if t not in known:
                    errors.append(f"Rivalry names unknown team {t}")
    else:
        rivalries = {pair_key(a, b) for a, b in DEFAULT_RIVALRIES
                     if a in known and b in known}

    if errors:
        raise ConfigError(errors)

    return {
        "season": season,
        "teams": teams,
        "weights": weights,
        "locks": locks,
        "last_year": last_year,
        "rivalries": rivalries,
    }
