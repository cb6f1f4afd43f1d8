"""Tests for config.py — YAML loading, weights and locks."""

import pytest
import yaml

from sixsched.config import (
    ConfigError, EngineConfig, build_last_year_map, load_config, parse_locks,
)
from sixsched.models import pair_key


def _write_config(tmp_path, config_path, **overrides):
    raw = yaml.safe_load(config_path.read_text())
    raw.update(overrides)
    path = tmp_path / "config.yaml"
    path.write_text(yaml.safe_dump(raw))
    return path


class TestEngineConfig:
    def test_defaults(self):
        cfg = EngineConfig()
        assert cfg.w1 == 1.0
        assert cfg.w2 == 0.1
        assert cfg.friday_night_limit == 2
        assert cfg.top2_missed_slot_penalty == 15.0
        assert cfg.run_local_search is False

    def test_from_dict_aliases(self):
        cfg = EngineConfig.from_dict({
            "wFri": 3, "ALPHA": 2, "FRIDAY_NIGHT_LIMIT": 1,
            "runLocalSearch": True, "w2": "0.2",
        })
        assert cfg.w_fri == 3.0
        assert cfg.alpha == 2.0
        assert cfg.friday_night_limit == 1
        assert isinstance(cfg.friday_night_limit, int)
        assert cfg.run_local_search is True
        assert cfg.w2 == 0.2

    def test_from_dict_snake_case(self):
        cfg = EngineConfig.from_dict({"w_travel_total": 0.5})
        assert cfg.w_travel_total == 0.5

    def test_empty(self):
        assert EngineConfig.from_dict(None) == EngineConfig()

    def test_unknown_key(self):
        with pytest.raises(ConfigError) as exc:
            EngineConfig.from_dict({"wBogus": 1, "w1": 2})
        assert "Unknown weight: wBogus" in exc.value.errors

    def test_non_numeric(self):
        with pytest.raises(ConfigError):
            EngineConfig.from_dict({"w1": "lots"})

    def test_config_error_is_value_error(self):
        assert issubclass(ConfigError, ValueError)


class TestParseLocks:
    def test_values(self):
        locks = parse_locks({"SCO": {2: "away"}, "ENG": {"1": "H", 5: 0}})
        assert locks == {"SCO": {2: False}, "ENG": {1: True, 5: False}}

    def test_empty(self):
        assert parse_locks(None) == {}

    def test_bad_value(self):
        with pytest.raises(ValueError):
            parse_locks({"SCO": {2: "maybe"}})


class TestBuildLastYearMap:
    def test_config_shape(self):
        m = build_last_year_map([{"home": "ENG", "away": "WAL"}])
        assert m == {pair_key("WAL", "ENG"): "ENG"}

    def test_record_shape(self):
        m = build_last_year_map([{"home_team": "FRA", "away_team": "IRE"}])
        assert m[pair_key("IRE", "FRA")] == "FRA"


class TestLoadConfig:
    def test_teams(self, config_path):
        config = load_config(config_path)
        teams = config["teams"]
        assert len(teams) == 6
        assert [t.id for t in teams] == ["IRE", "FRA", "ENG", "SCO", "ITA", "WAL"]
        assert sorted(t.ranking for t in teams) == [1, 2, 3, 4, 5, 6]

    def test_stadiums(self, config_path):
        config = load_config(config_path)
        eng = next(t for t in config["teams"] if t.id == "ENG")
        assert eng.stadium.city == "London"
        assert eng.stadium.latitude == pytest.approx(51.456)

    def test_season(self, config_path):
        season = load_config(config_path)["season"]
        assert season["year"] == 2026
        assert season["rest_weeks"] == 3
        assert season["runs"] == 1

    def test_weights(self, config_path):
        weights = load_config(config_path)["weights"]
        assert isinstance(weights, EngineConfig)
        assert weights.w_fri == 2.0
        assert weights.min_gap_days == 6
        assert weights.alpha == 1

    def test_locks(self, config_path):
        assert load_config(config_path)["locks"] == {"SCO": {2: False}}

    def test_last_year(self, config_path):
        last_year = load_config(config_path)["last_year"]
        assert last_year[pair_key("ENG", "WAL")] == "ENG"
        assert last_year[pair_key("SCO", "ITA")] == "ITA"
        assert len(last_year) == 3

    def test_rivalries(self, config_path):
        rivalries = load_config(config_path)["rivalries"]
        assert pair_key("ENG", "SCO") in rivalries
        assert len(rivalries) == 5

    def test_default_rivalries(self, tmp_path, config_path):
        raw = yaml.safe_load(config_path.read_text())
        del raw["rivalries"]
        path = tmp_path / "config.yaml"
        path.write_text(yaml.safe_dump(raw))
        rivalries = load_config(path)["rivalries"]
        assert pair_key("IRE", "WAL") in rivalries
        assert len(rivalries) == 5

    def test_local_search_flag(self, tmp_path, config_path):
        raw = yaml.safe_load(config_path.read_text())
        raw["season"]["local_search"] = True
        path = tmp_path / "config.yaml"
        path.write_text(yaml.safe_dump(raw))
        assert load_config(path)["weights"].run_local_search is True

    def test_wrong_team_count(self, tmp_path, config_path):
        raw = yaml.safe_load(config_path.read_text())
        path = _write_config(tmp_path, config_path, teams=raw["teams"][:5],
                             locks={}, previous_season=[], rivalries=[])
        with pytest.raises(ConfigError) as exc:
            load_config(path)
        assert any("Exactly 6 teams" in e for e in exc.value.errors)

    def test_all_errors_reported(self, tmp_path, config_path):
        path = _write_config(
            tmp_path, config_path,
            locks={"NZL": {2: "home"}, "ENG": {9: "away"}},
            rivalries=[["ENG", "ARG"]],
        )
        with pytest.raises(ConfigError) as exc:
            load_config(path)
        errors = exc.value.errors
        assert any("NZL" in e for e in errors)
        assert any("round 9" in e for e in errors)
        assert any("ARG" in e for e in errors)

    def test_missing_year(self, tmp_path, config_path):
        raw = yaml.safe_load(config_path.read_text())
        del raw["season"]["year"]
        path = _write_config(tmp_path, config_path, season=raw["season"],
                             locks={"NZL": {2: "home"}})
        with pytest.raises(ConfigError) as exc:
            load_config(path)
        errors = exc.value.errors
        assert "season.year is required" in errors
        assert any("NZL" in e for e in errors)

    def test_bad_year(self, tmp_path, config_path):
        raw = yaml.safe_load(config_path.read_text())
        raw["season"]["year"] = "next"
        path = _write_config(tmp_path, config_path, season=raw["season"])
        with pytest.raises(ConfigError) as exc:
            load_config(path)
        assert any("season.year" in e for e in exc.value.errors)

    def test_previous_season_csv(self, tmp_path, config_path):
        (tmp_path / "last.csv").write_text(
            "Round,Date,Time,Home,Away,Stadium,Location,Season\n"
            "1,2025-02-07,20:00,FRA,WAL,stade-de-france,Paris,2025\n"
        )
        path = _write_config(tmp_path, config_path, previous_season=[],
                             previous_season_csv="last.csv")
        last_year = load_config(path)["last_year"]
        assert last_year == {pair_key("WAL", "FRA"): "FRA"}

    def test_previous_season_csv_missing(self, tmp_path, config_path):
        path = _write_config(tmp_path, config_path,
                             previous_season_csv="nowhere.csv")
        with pytest.raises(ConfigError):
            load_config(path)
