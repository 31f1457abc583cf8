from __future__ import annotations

import copy

import pytest

from biotope.rng import DeterministicRng


def test_same_seed_same_sequence():
    rng_a = DeterministicRng(1234)
    rng_b = DeterministicRng(1234)
    assert [rng_a.next_float() for _ in range(10)] == [rng_b.next_float() for _ in range(10)]


def test_reset_replays_sequence():
    rng = DeterministicRng(7)
    first = [rng.next_float() for _ in range(5)]
    rng.reset()
    assert [rng.next_float() for _ in range(5)] == first
    assert rng.seed == 7


def test_bernoulli_extremes_ignore_state():
    rng = DeterministicRng(3)
    assert all(rng.next_bernoulli(1.0) for _ in range(200))
    assert not any(rng.next_bernoulli(0.0) for _ in range(200))


def test_bernoulli_consumes_one_draw():
    rng_a = DeterministicRng(11)
    rng_b = DeterministicRng(11)
    rng_a.next_bernoulli(0.5)
    rng_b.next_float()
    assert rng_a.next_float() == rng_b.next_float()


def test_weighted_index_skips_zero_weights():
    rng = DeterministicRng(5)
    picks = {rng.next_weighted_index([0.0, 2.0, 0.0, 1.0, 0.0]) for _ in range(300)}
    assert picks == {1, 3}


def test_weighted_index_consumes_one_draw():
    rng_a = DeterministicRng(21)
    rng_b = DeterministicRng(21)
    rng_a.next_weighted_index([1.0, 2.0, 3.0])
    rng_b.next_float()
    assert rng_a.next_float() == rng_b.next_float()


def test_weighted_index_rejects_zero_total():
    rng = DeterministicRng(0)
    with pytest.raises(ValueError):
        rng.next_weighted_index([0.0, 0.0])


def test_rng_cannot_be_copied():
    rng = DeterministicRng(0)
    with pytest.raises(TypeError):
        copy.copy(rng)
    with pytest.raises(TypeError):
        copy.deepcopy(rng)
