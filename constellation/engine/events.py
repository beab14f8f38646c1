"""
Game events for UI hooks and logging.
Events describe what happened during action processing.
"""

from dataclasses import dataclass
from typing import Any

from constellation.engine.state import Segment, Triangle


@dataclass
class GameEvent:
    """Base event class. All events have a type and payload."""
    type: str
    payload: dict[str, Any]

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type, "payload": self.payload}


# ===== Event Type Constants =====

# Phase/Turn events
PHASE_CHANGED = "phase_changed"
DICE_ROLLED = "dice_rolled"
TURN_SKIPPED = "turn_skipped"

# Board events
POINTS_PLACED = "points_placed"
SEGMENT_ADDED = "segment_added"
TRIANGLES_CLAIMED = "triangles_claimed"
INVALID_MOVE_REJECTED = "invalid_move_rejected"

# Score events
SCORES_CHANGED = "scores_changed"

# End of game
GAME_OVER = "game_over"


# ===== Event Factory Functions =====

def _scores_payload(scores: dict[int, int]) -> dict[str, int]:
    return {str(k): v for k, v in scores.items()}


def phase_changed(old_phase: str, new_phase: str, player: int) -> GameEvent:
    return GameEvent(PHASE_CHANGED, {
        "old_phase": old_phase,
        "new_phase": new_phase,
        "player": player,
    })


def points_placed(requested: int, placed: int, width: float, height: float) -> GameEvent:
    """placed < requested when the board was too crowded for every point."""
    return GameEvent(POINTS_PLACED, {
        "requested": requested,
        "placed": placed,
        "width": width,
        "height": height,
    })


def dice_rolled(player: int, value: int) -> GameEvent:
    return GameEvent(DICE_ROLLED, {
        "player": player,
        "value": value,
    })


def segment_added(segment: Segment, moves_left: int) -> GameEvent:
    return GameEvent(SEGMENT_ADDED, {
        "segment": segment.to_dict(),
        "moves_left": moves_left,
    })


def triangles_claimed(triangles: list[Triangle], owner: int) -> GameEvent:
    """count drives the celebration on the view (bigger burst for more triangles)."""
    return GameEvent(TRIANGLES_CLAIMED, {
        "owner": owner,
        "count": len(triangles),
        "triangles": [t.to_dict() for t in triangles],
    })


def scores_changed(scores: dict[int, int]) -> GameEvent:
    return GameEvent(SCORES_CHANGED, {"scores": _scores_payload(scores)})


def invalid_move_rejected(player: int, point_a: int, point_b: int) -> GameEvent:
    return GameEvent(INVALID_MOVE_REJECTED, {
        "player": player,
        "point_a": point_a,
        "point_b": point_b,
    })


def turn_skipped(player: int, moves_forfeited: int) -> GameEvent:
    return GameEvent(TURN_SKIPPED, {
        "player": player,
        "moves_forfeited": moves_forfeited,
    })


def game_over(final_scores: dict[int, int], winner: int | None) -> GameEvent:
    """
    Emitted once when no legal move remains on the board.

    Args:
        final_scores: {player: triangles} for both players
        winner: Player with the higher score, or None on a draw
    """
    return GameEvent(GAME_OVER, {
        "final_scores": _scores_payload(final_scores),
        "winner": winner,
    })
