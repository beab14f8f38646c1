"""
Planar predicates used by every move-validation path.
All functions are pure and work on anything with `id`, `x` and `y` attributes.
"""

import math

# Distance (board units) under which a segment counts as passing through a point
POINT_TOLERANCE = 10
# Cross-product gate for "roughly collinear", scaled by the tolerance
COLLINEARITY_FACTOR = 1000


def _ccw(a, b, c) -> bool:
    """True if a, b, c turn counter-clockwise (strictly)."""
    return (c.y - a.y) * (b.x - a.x) > (b.y - a.y) * (c.x - a.x)


def segments_intersect(p1, p2, p3, p4) -> bool:
    """
    Check whether segment (p1, p2) strictly crosses segment (p3, p4).

    Segments that share an endpoint (by id) never cross: touching at a star
    is how the board is built. Collinear overlaps are not detected.
    """
    if p1.id in (p3.id, p4.id) or p2.id in (p3.id, p4.id):
        return False

    return (
        _ccw(p1, p3, p4) != _ccw(p2, p3, p4)
        and _ccw(p1, p2, p3) != _ccw(p1, p2, p4)
    )


def distance_to_segment(p, a, b) -> float:
    """Euclidean distance from p to the closed segment (a, b)."""
    l2 = (a.x - b.x) ** 2 + (a.y - b.y) ** 2
    if l2 == 0:
        return math.hypot(p.x - a.x, p.y - a.y)
    t = ((p.x - a.x) * (b.x - a.x) + (p.y - a.y) * (b.y - a.y)) / l2
    t = max(0.0, min(1.0, t))
    return math.hypot(p.x - (a.x + t * (b.x - a.x)), p.y - (a.y + t * (b.y - a.y)))


def point_near_segment(p, a, b, tolerance: float = POINT_TOLERANCE) -> bool:
    """
    Check whether segment (a, b) runs through point p.

    The segment's own endpoints never block it. Otherwise p must be roughly
    collinear with the segment, project between a and b, and lie closer than
    `tolerance` to it.
    """
    if p.id == a.id or p.id == b.id:
        return False

    cross = (p.y - a.y) * (b.x - a.x) - (p.x - a.x) * (b.y - a.y)
    if abs(cross) > tolerance * COLLINEARITY_FACTOR:
        return False

    dot = (p.x - a.x) * (b.x - a.x) + (p.y - a.y) * (b.y - a.y)
    if dot < 0:
        return False  # before a

    squared_length = (b.x - a.x) ** 2 + (b.y - a.y) ** 2
    if dot > squared_length:
        return False  # past b

    return distance_to_segment(p, a, b) < tolerance
