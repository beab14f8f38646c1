"""
Board point placement.
"""

import logging
import math
import random

from constellation.engine.state import Point

logger = logging.getLogger(__name__)

# Minimum distance between any two stars
MIN_DISTANCE = 40
DEFAULT_PADDING = 20
# Sampling budget per requested point
ATTEMPTS_PER_POINT = 100


def generate_points(
    count: int,
    width: float,
    height: float,
    padding: float = DEFAULT_PADDING,
    rng: random.Random | None = None,
) -> list[Point]:
    """
    Place up to `count` points inside the padded board by rejection sampling.

    A candidate is accepted only if it is at least MIN_DISTANCE from every
    point accepted so far. After count * ATTEMPTS_PER_POINT attempts the
    points placed so far are returned, even if there are fewer than asked for.

    Args:
        count: Number of points wanted
        width: Board width
        height: Board height
        padding: Margin kept free along every edge
        rng: Random source; pass a seeded random.Random for reproducible boards

    Returns:
        List of points with ids 0..n-1 in placement order
    """
    if count < 0:
        raise ValueError(f"Point count must not be negative, got {count}")
    if width - 2 * padding <= 0 or height - 2 * padding <= 0:
        raise ValueError(
            f"Board {width}x{height} leaves no room inside padding {padding}"
        )
    rng = rng or random.Random()

    points: list[Point] = []
    attempts = 0
    max_attempts = count * ATTEMPTS_PER_POINT
    while len(points) < count and attempts < max_attempts:
        x = rng.uniform(padding, width - padding)
        y = rng.uniform(padding, height - padding)
        attempts += 1

        if any(math.hypot(p.x - x, p.y - y) < MIN_DISTANCE for p in points):
            continue
        points.append(Point(id=len(points), x=x, y=y))

    if len(points) < count:
        logger.warning(
            "Placed only %d of %d points on a %gx%g board after %d attempts",
            len(points), count, width, height, attempts,
        )
    return points
