"""Tests for solver.py — backtracking round assignment."""

import random

import pytest

from sixsched.roundrobin import generate_matchups, verify_round_robin
from sixsched.solver import ORDER_STRATEGIES, assign_rounds, order_matchups


class TestOrderMatchups:
    def test_desc(self, teams):
        ordered = order_matchups(generate_matchups(teams), "desc", random.Random(1))
        scores = [m.competitiveness for m in ordered]
        assert scores == sorted(scores, reverse=True)

    def test_asc(self, teams):
        ordered = order_matchups(generate_matchups(teams), "asc", random.Random(1))
        scores = [m.competitiveness for m in ordered]
        assert scores == sorted(scores)

    def test_random_is_permutation(self, teams):
        matchups = generate_matchups(teams)
        ordered = order_matchups(matchups, "random", random.Random(1))
        assert {m.key for m in ordered} == {m.key for m in matchups}

    def test_unknown(self, teams):
        with pytest.raises(ValueError):
            order_matchups(generate_matchups(teams), "sideways", random.Random())


class TestAssignRounds:
    @pytest.mark.parametrize("strategy", ORDER_STRATEGIES)
    def test_complete_round_robin(self, teams, strategy):
        slots = [0, 2, 3, 5, 7]
        result = assign_rounds(generate_matchups(teams), slots, strategy,
                               random.Random(3))
        assert result.feasible
        assert len(result.fixtures) == 15
        assert verify_round_robin(result.fixtures, teams)["valid"]
        for r, rnd in enumerate(result.rounds):
            assert len(rnd) == 3
            ids = [tid for fx in rnd for tid in (fx.team_a.id, fx.team_b.id)]
            assert len(set(ids)) == 6
            assert all(fx.round_index == r for fx in rnd)
            assert all(fx.week_slot == slots[r] for fx in rnd)

    def test_desc_pushes_big_match_late(self, teams):
        result = assign_rounds(generate_matchups(teams), [0, 1, 2, 3, 4], "desc")
        top = next(fx for fx in result.fixtures if fx.key == frozenset(("IRE", "FRA")))
        assert top.round_index == 4

    def test_asc_fills_first_round_first(self, teams):
        result = assign_rounds(generate_matchups(teams), [0, 1, 2, 3, 4], "asc")
        weakest = next(fx for fx in result.fixtures
                       if fx.key == frozenset(("ITA", "WAL")))
        assert weakest.round_index == 0

    def test_wrong_slot_count(self, teams):
        result = assign_rounds(generate_matchups(teams), [0, 1, 2], "desc")
        assert not result.feasible
        assert result.fixtures == []

    def test_node_ceiling(self, teams):
        result = assign_rounds(generate_matchups(teams), [0, 1, 2, 3, 4],
                               "desc", max_nodes=1)
        assert not result.feasible

    def test_seeded_random_is_reproducible(self, teams):
        matchups = generate_matchups(teams)
        a = assign_rounds(matchups, [0, 1, 2, 3, 4], "random", random.Random(9))
        b = assign_rounds(matchups, [0, 1, 2, 3, 4], "random", random.Random(9))
        assert ([(fx.key, fx.round_index) for fx in a.fixtures]
                == [(fx.key, fx.round_index) for fx in b.fixtures])
