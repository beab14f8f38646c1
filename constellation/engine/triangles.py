"""
Triangle detection.
"""

from typing import Iterable

from constellation.engine.state import Point, Segment


def neighbors(point_id: int, segments: Iterable[Segment]) -> dict[int, Point]:
    """Points joined to point_id by a segment, keyed by id, in segment order."""
    out: dict[int, Point] = {}
    for s in segments:
        if s.p1.id == point_id:
            out.setdefault(s.p2.id, s.p2)
        elif s.p2.id == point_id:
            out.setdefault(s.p1.id, s.p1)
    return out


def find_new_triangles(
    p1: Point,
    p2: Point,
    segments: Iterable[Segment],
) -> list[tuple[Point, Point, Point]]:
    """
    Triangles that drawing (p1, p2) would close.

    Every point already joined to both p1 and p2 closes one triangle, so a
    single segment can close several at once. Pass the segment list as it was
    before (p1, p2) was added, and call this once per committed segment.

    Returns:
        List of (p1, p2, p3) tuples, one per common neighbour
    """
    segments = list(segments)
    n1 = neighbors(p1.id, segments)
    n2 = neighbors(p2.id, segments)
    return [(p1, p2, p3) for pid, p3 in n1.items() if pid in n2]
