"""Tests for rank selection of candidate files."""

import random
from collections import Counter
from unittest import mock

import pytest
from hypothesis import given, settings, strategies as st

from gamekins.generation.selection import (
    initialize_rank_selection,
    rank_select,
    select_candidate,
)
from tests.fixtures.files import make_source_file


def weights_of(rank_values):
    """Per-position weights from a cumulative table."""
    previous = 0.0
    weights = []
    for value in rank_values:
        weights.append(value - previous)
        previous = value
    return weights


class TestInitializeRankSelection:
    """Tests for the cumulative rank table."""

    def test_single_candidate(self):
        assert initialize_rank_selection(1) == [1.0]

    def test_first_position_weighs_most(self):
        """With c=1.5 and four candidates the weights are c/n down to (2-c)/n."""
        weights = weights_of(initialize_rank_selection(4, 1.5))
        assert weights[0] == pytest.approx(1.5 / 4)
        assert weights[-1] == pytest.approx(0.5 / 4)
        assert weights == sorted(weights, reverse=True)

    def test_uniform_at_bias_one(self):
        weights = weights_of(initialize_rank_selection(5, 1.0))
        assert weights == pytest.approx([0.2] * 5)

    def test_invalid_size(self):
        with pytest.raises(ValueError):
            initialize_rank_selection(0)

    @pytest.mark.parametrize("bias", [0.9, 2.1])
    def test_invalid_bias(self, bias):
        with pytest.raises(ValueError):
            initialize_rank_selection(3, bias)

    @given(
        n=st.integers(min_value=1, max_value=200),
        bias=st.floats(min_value=1.0, max_value=2.0, allow_nan=False),
    )
    @settings(max_examples=100)
    def test_table_is_a_distribution(self, n, bias):
        """The table ascends, ends at 1.0 and never gives a negative weight."""
        rank_values = initialize_rank_selection(n, bias)
        assert len(rank_values) == n
        assert rank_values[-1] == pytest.approx(1.0)
        assert all(weight >= -1e-12 for weight in weights_of(rank_values))
        assert all(a <= b + 1e-12 for a, b in zip(rank_values, rank_values[1:]))


class TestSelectCandidate:
    """Tests for drawing from a rank table."""

    def test_low_draw_takes_first(self):
        rng = mock.Mock(spec=random.Random)
        rng.random.return_value = 0.0
        assert select_candidate(["a", "b", "c"], [0.5, 0.8, 1.0], rng) == "a"

    def test_draw_between_values(self):
        rng = mock.Mock(spec=random.Random)
        rng.random.return_value = 0.6
        assert select_candidate(["a", "b", "c"], [0.5, 0.8, 1.0], rng) == "b"

    def test_rounding_falls_back_to_last(self):
        """A draw above the last value still selects the last candidate."""
        rng = mock.Mock(spec=random.Random)
        rng.random.return_value = 0.99
        assert select_candidate(["a", "b"], [0.5, 0.98], rng) == "b"

    def test_empty(self):
        with pytest.raises(ValueError):
            select_candidate([], [], random.Random(1))


class TestRankSelect:
    """Tests for rank selection over files."""

    def test_sorts_by_coverage(self):
        """The lowest draw hits the worst covered file."""
        files = [make_source_file("A", 0.9), make_source_file("B", 0.1), make_source_file("C", 0.5)]
        rng = mock.Mock(spec=random.Random)
        rng.random.return_value = 0.0
        assert rank_select(files, rng).file_name == "B"

    def test_worst_file_drawn_most(self):
        files = [make_source_file(name, coverage) for name, coverage in [("A", 0.9), ("B", 0.1), ("C", 0.5)]]
        rng = random.Random(7)
        counts = Counter(rank_select(files, rng).file_name for _ in range(3000))
        assert counts["B"] > counts["C"] > counts["A"]
        assert counts["A"] > 0

    def test_custom_key(self):
        rng = mock.Mock(spec=random.Random)
        rng.random.return_value = 0.0
        assert rank_select(["bb", "a", "ccc"], rng, key=len) == "a"

    def test_plain_ratios(self):
        rng = mock.Mock(spec=random.Random)
        rng.random.return_value = 0.0
        assert rank_select([0.7, 0.2], rng) == 0.2
