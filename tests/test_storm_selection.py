"""Uniformity of the storm's random tree selection."""

import random
from collections import Counter

import pytest

from repositories.neighborhood_repo import choose_tree_id


@pytest.mark.parametrize("size", [1, 2, 50])
def test_every_candidate_is_selected_roughly_uniformly(size):
    rng = random.Random(2024)
    candidates = list(range(101, 101 + size))
    trials = 1000 * size

    counts = Counter(choose_tree_id(candidates, rng) for _ in range(trials))

    assert set(counts) == set(candidates)
    expected = trials / size
    for tree_id in candidates:
        assert 0.8 * expected <= counts[tree_id] <= 1.2 * expected


def test_single_candidate_is_always_chosen():
    rng = random.Random(7)
    assert all(choose_tree_id([42], rng) == 42 for _ in range(100))


def test_last_inserted_candidate_is_reachable():
    rng = random.Random(99)
    candidates = [3, 8, 15]

    picks = {choose_tree_id(candidates, rng) for _ in range(200)}

    assert candidates[-1] in picks


def test_draws_index_from_the_full_range():
    class RecordingRandom:
        def __init__(self):
            self.calls = []

        def randrange(self, stop):
            self.calls.append(stop)
            return stop - 1

    rng = RecordingRandom()
    assert choose_tree_id([5, 6, 7], rng) == 7
    assert rng.calls == [3]


def test_empty_candidate_set_is_rejected():
    with pytest.raises(ValueError):
        choose_tree_id([], random.Random(0))
