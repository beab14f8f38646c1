"""
Test board point placement.
"""

import itertools
import logging
import math
import random

import pytest

from constellation.engine.points import generate_points, MIN_DISTANCE


def min_pairwise_distance(points):
    return min(
        (math.hypot(a.x - b.x, a.y - b.y) for a, b in itertools.combinations(points, 2)),
        default=math.inf,
    )


@pytest.mark.parametrize("seed", [0, 1, 42, 2024])
def test_points_keep_minimum_distance(seed):
    points = generate_points(30, 800, 600, rng=random.Random(seed))
    assert len(points) == 30
    assert min_pairwise_distance(points) >= MIN_DISTANCE


def test_points_stay_inside_padding():
    points = generate_points(25, 800, 600, padding=20, rng=random.Random(3))
    for p in points:
        assert 20 <= p.x <= 780
        assert 20 <= p.y <= 580


def test_ids_follow_output_order():
    points = generate_points(15, 800, 600, rng=random.Random(5))
    assert [p.id for p in points] == list(range(15))


def test_same_seed_same_board():
    first = generate_points(20, 640, 480, rng=random.Random(99))
    second = generate_points(20, 640, 480, rng=random.Random(99))
    assert [(p.x, p.y) for p in first] == [(p.x, p.y) for p in second]


def test_crowded_board_returns_fewer_points(caplog):
    """A 60x60 usable area cannot hold 50 points 40 apart: keep what fits and warn."""
    with caplog.at_level(logging.WARNING, logger="constellation.engine.points"):
        points = generate_points(50, 100, 100, rng=random.Random(1))

    assert 0 < len(points) < 50
    assert min_pairwise_distance(points) >= MIN_DISTANCE
    assert any("Placed only" in r.message for r in caplog.records)


def test_zero_points():
    assert generate_points(0, 800, 600, rng=random.Random(1)) == []


def test_board_smaller_than_padding_is_rejected():
    with pytest.raises(ValueError):
        generate_points(5, 30, 600)
    with pytest.raises(ValueError):
        generate_points(-1, 800, 600)
