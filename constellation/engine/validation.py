"""
Move legality.
A move is legal iff it joins two different points that are not yet joined,
crosses no existing segment and runs through no other point.
"""

from typing import Sequence

from constellation.engine.state import Point, Segment
from constellation.engine.geometry import segments_intersect, point_near_segment

Move = tuple[Point, Point]


def segment_exists(p1: Point, p2: Point, segments: Sequence[Segment]) -> bool:
    return any(s.connects(p1.id, p2.id) for s in segments)


def is_valid_move(
    p1: Point,
    p2: Point,
    points: Sequence[Point],
    segments: Sequence[Segment],
) -> bool:
    """Check whether segment (p1, p2) may be drawn on the current board."""
    if p1.id == p2.id:
        return False

    if segment_exists(p1, p2, segments):
        return False

    for s in segments:
        if segments_intersect(p1, p2, s.p1, s.p2):
            return False

    for p in points:
        if point_near_segment(p, p1, p2):
            return False

    return True


def get_all_valid_moves(points: Sequence[Point], segments: Sequence[Segment]) -> list[Move]:
    """All legal moves, as (p1, p2) with p1 before p2 in point order."""
    moves = []
    for i, p1 in enumerate(points):
        for p2 in points[i + 1:]:
            if is_valid_move(p1, p2, points, segments):
                moves.append((p1, p2))
    return moves


def has_valid_moves(points: Sequence[Point], segments: Sequence[Segment]) -> bool:
    """True as soon as one legal move exists."""
    for i, p1 in enumerate(points):
        for p2 in points[i + 1:]:
            if is_valid_move(p1, p2, points, segments):
                return True
    return False


def _scoring_candidates(points: Sequence[Point], segments: Sequence[Segment]) -> list[Move]:
    """Unjoined pairs with a common neighbour, in point order."""
    adjacency: dict[int, set[int]] = {p.id: set() for p in points}
    for s in segments:
        adjacency[s.p1.id].add(s.p2.id)
        adjacency[s.p2.id].add(s.p1.id)

    order = {p.id: i for i, p in enumerate(points)}
    candidates: set[tuple[int, int]] = set()
    for adjacent in adjacency.values():
        ids = sorted(adjacent, key=order.__getitem__)
        for i, a in enumerate(ids):
            for b in ids[i + 1:]:
                if b not in adjacency[a]:
                    candidates.add((a, b))

    by_id = {p.id: p for p in points}
    return [
        (by_id[a], by_id[b])
        for a, b in sorted(candidates, key=lambda pair: (order[pair[0]], order[pair[1]]))
    ]


def find_scoring_moves(points: Sequence[Point], segments: Sequence[Segment]) -> list[Move]:
    """
    Legal moves that would close at least one triangle.

    Only pairs with a common neighbour can close a triangle, so those are the
    only pairs checked for legality.
    """
    return [
        (p1, p2) for p1, p2 in _scoring_candidates(points, segments)
        if is_valid_move(p1, p2, points, segments)
    ]


def has_scoring_move(points: Sequence[Point], segments: Sequence[Segment]) -> bool:
    return any(
        is_valid_move(p1, p2, points, segments)
        for p1, p2 in _scoring_candidates(points, segments)
    )
