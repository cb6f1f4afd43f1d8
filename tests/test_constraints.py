"""Tests for constraints.py — feasibility oracle and schedule validation."""

from datetime import datetime

from sixsched.constraints import (
    alternation_home_is_a, format_validation_report, has_three_away_in_a_row,
    is_constrained, is_feasible, locked_home_is_a, longest_run,
    validate_schedule,
)
from sixsched.kickoffs import assign_dates
from sixsched.models import pair_key


def _find(fixtures, a, b):
    return next(fx for fx in fixtures if fx.key == pair_key(a, b))


class TestLongestRun:
    def test_runs(self):
        assert longest_run([]) == 0
        assert longest_run([3]) == 1
        assert longest_run([1, 2, 4, 5, 6]) == 3
        assert longest_run([0, 2, 4]) == 1


class TestThreeAway:
    def test_valid_schedule(self, fixtures):
        assert not has_three_away_in_a_row(fixtures)

    def test_three_in_a_row(self, fixtures):
        # FRA then travels in rounds 2, 3, 4 and 5
        _find(fixtures, "FRA", "WAL").flip()
        assert has_three_away_in_a_row(fixtures)

    def test_rest_weekend_breaks_streak(self, make_fixtures):
        fixtures = make_fixtures(slots=(0, 1, 2, 4, 5))
        _find(fixtures, "FRA", "WAL").flip()
        assert not has_three_away_in_a_row(fixtures)


class TestLockHelpers:
    def test_lock_on_side_a(self, fixtures):
        fx = _find(fixtures, "IRE", "WAL")   # round 1, IRE is side A
        assert locked_home_is_a(fx, {"IRE": {1: False}}) is False

    def test_lock_on_side_b(self, fixtures):
        fx = _find(fixtures, "IRE", "WAL")
        assert locked_home_is_a(fx, {"WAL": {1: True}}) is False
        assert locked_home_is_a(fx, {"WAL": {1: False}}) is True

    def test_lock_other_round_ignored(self, fixtures):
        fx = _find(fixtures, "IRE", "WAL")
        assert locked_home_is_a(fx, {"IRE": {2: True}}) is None

    def test_alternation(self, fixtures):
        fx = _find(fixtures, "IRE", "WAL")
        # IRE hosted last season, so WAL hosts now
        assert alternation_home_is_a(fx, {pair_key("IRE", "WAL"): "IRE"}) is False
        assert alternation_home_is_a(fx, {pair_key("IRE", "WAL"): "WAL"}) is True
        assert alternation_home_is_a(fx, {}) is None

    def test_is_constrained(self, fixtures):
        fx = _find(fixtures, "IRE", "WAL")
        assert is_constrained(fx, {"WAL": {1: True}}, {})
        assert is_constrained(fx, {}, {pair_key("IRE", "WAL"): "IRE"})
        assert not is_constrained(fx, {"WAL": {2: True}}, {})


class TestIsFeasible:
    def test_valid(self, fixtures, teams):
        assert is_feasible(fixtures, teams)

    def test_idempotent(self, fixtures, teams):
        first = is_feasible(fixtures, teams)
        assert is_feasible(fixtures, teams) == first
        assert all(fx.home_is_a for fx in fixtures)

    def test_home_count(self, fixtures, teams):
        # IRE would host four times
        _find(fixtures, "IRE", "ITA").flip()
        assert not is_feasible(fixtures, teams)

    def test_round_with_team_twice(self, fixtures, teams):
        _find(fixtures, "IRE", "ITA").round_index = 0
        assert not is_feasible(fixtures, teams)

    def test_lock_respected(self, fixtures, teams):
        assert is_feasible(fixtures, teams, locks={"SCO": {2: False}})
        assert not is_feasible(fixtures, teams, locks={"SCO": {2: True}})

    def test_side_b_lock_checked_when_side_a_locked(self, fixtures, teams):
        locks = {"WAL": {2: True}, "SCO": {2: True}}
        assert not is_feasible(fixtures, teams, locks=locks)

    def test_alternation(self, fixtures, teams):
        assert is_feasible(fixtures, teams,
                           last_year={pair_key("IRE", "WAL"): "WAL"})
        assert not is_feasible(fixtures, teams,
                               last_year={pair_key("IRE", "WAL"): "IRE"})


class TestValidateSchedule:
    def test_valid_dated(self, fixtures, teams):
        assign_dates(fixtures, [0, 1, 2, 3, 4], 2026, teams)
        result = validate_schedule(fixtures, teams)
        assert result["valid"], result["errors"]

    def test_missing_kickoffs_warn(self, fixtures, teams):
        result = validate_schedule(fixtures, teams)
        assert result["valid"]
        assert any("no kickoff" in w for w in result["warnings"])

    def test_reports_every_problem(self, fixtures, teams):
        assign_dates(fixtures, [0, 1, 2, 3, 4], 2026, teams)
        _find(fixtures, "IRE", "ITA").flip()
        wal = _find(fixtures, "IRE", "WAL")
        wal.kickoff = datetime(2026, 2, 9, 19, 45)   # a Monday
        result = validate_schedule(
            fixtures, teams,
            locks={"SCO": {2: True}},
            last_year={pair_key("ENG", "WAL"): "ENG"},
        )
        assert not result["valid"]
        errors = " | ".join(result["errors"])
        assert "IRE home/away split: 4H/1A" in errors
        assert "SCO is locked home" in errors
        assert "Home advantage not alternated: ENG hosted WAL" in errors
        assert "outside Fri 18:00 - Sun 20:00" in errors

    def test_missing_pairing(self, fixtures, teams):
        result = validate_schedule(fixtures[:-1], teams)
        assert not result["valid"]
        assert any("Expected 15 fixtures" in e for e in result["errors"])
        assert any("SCO vs ITA" in e or "ITA vs SCO" in e
                   for e in result["errors"])

    def test_unknown_team(self, fixtures, teams):
        result = validate_schedule(fixtures, teams[:5])
        assert any("Unknown team: WAL" in e for e in result["errors"])

    def test_back_to_back_away_warns(self, fixtures, teams):
        result = validate_schedule(fixtures, teams)
        assert any("back-to-back" in w for w in result["warnings"])


class TestFormatValidationReport:
    def test_valid(self):
        text = format_validation_report({"valid": True, "errors": [], "warnings": []})
        assert "RESULT: VALID" in text

    def test_invalid(self):
        text = format_validation_report(
            {"valid": False, "errors": ["bad"], "warnings": ["meh"]})
        assert "INVALID (1 violations)" in text
        assert "ERROR: bad" in text
        assert "WARN: meh" in text
