"""
Query functions for UI integration.
These functions help the UI understand what actions are available
without mutating game state.
"""

from dataclasses import dataclass
from typing import Any

from constellation.engine import DICE_SIDES, PHASE_PLAYING
from constellation.engine.state import GameState, Point, OpponentConfig
from constellation.engine.actions import Action
from constellation.engine.reducer import PHASE_ALLOWED_ACTIONS, PLAYER_ACTIONS
from constellation.engine.triangles import find_new_triangles
from constellation.engine.validation import is_valid_move, get_all_valid_moves
from constellation.engine.points import DEFAULT_PADDING


@dataclass
class ValidationResult:
    """Result of action validation."""
    valid: bool
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {"valid": self.valid, "error": self.error}


# ===== Action Validation =====

def validate_action(state: GameState, action: Action) -> ValidationResult:
    """
    Validate an action without applying it.
    Returns ValidationResult with valid=True or valid=False with error message.

    A draw_segment between two known points is valid here even if the segment
    itself is illegal: the reducer answers that with invalid_move_rejected.
    """
    allowed = PHASE_ALLOWED_ACTIONS.get(state.phase, [])
    if action.type not in allowed:
        return ValidationResult(
            False,
            f"Cannot {action.type} during {state.phase} phase. Allowed: {allowed}"
        )

    if action.type in PLAYER_ACTIONS and action.player != state.current_player:
        return ValidationResult(
            False,
            f"Not player {action.player}'s turn. Current player: {state.current_player}"
        )

    # Action-specific validation
    if action.type == "start_game":
        return _validate_start_game(action)
    elif action.type == "place_points":
        return _validate_place_points(action)
    elif action.type == "roll_dice":
        return _validate_roll_dice(action)
    elif action.type == "draw_segment":
        return _validate_draw_segment(state, action)
    elif action.type in ["skip_turn", "reset_game"]:
        return ValidationResult(True)

    return ValidationResult(False, f"Unknown action type: {action.type}")


def _validate_start_game(action: Action) -> ValidationResult:
    payload = action.payload
    point_count = payload.get("point_count")
    if not isinstance(point_count, int) or point_count < 0:
        return ValidationResult(False, f"Invalid point count: {point_count!r}")

    width, height = payload.get("width"), payload.get("height")
    if not isinstance(width, (int, float)) or not isinstance(height, (int, float)):
        return ValidationResult(False, "Board width and height are required")
    if width <= 2 * DEFAULT_PADDING or height <= 2 * DEFAULT_PADDING:
        return ValidationResult(False, f"Board {width}x{height} is too small")

    opponent = payload.get("opponent")
    if not isinstance(opponent, OpponentConfig):
        try:
            OpponentConfig.from_dict(opponent)
        except ValueError as e:
            return ValidationResult(False, str(e))
    return ValidationResult(True)


def _validate_place_points(action: Action) -> ValidationResult:
    points = action.payload.get("points")
    if not isinstance(points, list) or not all(isinstance(p, Point) for p in points):
        return ValidationResult(False, "No points to place")
    if len({p.id for p in points}) != len(points):
        return ValidationResult(False, "Point ids must be unique")
    return ValidationResult(True)


def _validate_roll_dice(action: Action) -> ValidationResult:
    value = action.payload.get("value")
    if not isinstance(value, int) or not 1 <= value <= DICE_SIDES:
        return ValidationResult(False, f"Die value must be between 1 and {DICE_SIDES}")
    return ValidationResult(True)


def _validate_draw_segment(state: GameState, action: Action) -> ValidationResult:
    if state.moves_left <= 0:
        return ValidationResult(False, "No moves left this turn")
    for key in ("point_a", "point_b"):
        point_id = action.payload.get(key)
        if not isinstance(point_id, int) or state.get_point(point_id) is None:
            return ValidationResult(False, f"Unknown point: {point_id!r}")
    return ValidationResult(True)


# ===== Board Queries =====

def get_available_action_types(state: GameState) -> list[str]:
    """Action types the current phase accepts."""
    return list(PHASE_ALLOWED_ACTIONS.get(state.phase, []))


def get_valid_moves(state: GameState) -> list[dict[str, int]]:
    """
    Every legal segment on the board, with the triangles each would claim.
    Returns [{"point_a": id, "point_b": id, "triangles": n}, ...]
    """
    return [
        {
            "point_a": p1.id,
            "point_b": p2.id,
            "triangles": len(find_new_triangles(p1, p2, state.segments)),
        }
        for p1, p2 in get_all_valid_moves(state.points, state.segments)
    ]


def get_move_targets(state: GameState, point_id: int) -> list[int]:
    """
    Ids of the points a segment from point_id may be drawn to.
    Used by the view to highlight targets while the player drags.
    """
    origin = state.get_point(point_id)
    if origin is None:
        return []
    return [
        p.id for p in state.points
        if is_valid_move(origin, p, state.points, state.segments)
    ]


def can_draw(state: GameState) -> bool:
    """True if the current player may draw right now."""
    return state.phase == PHASE_PLAYING and state.moves_left > 0


def get_game_summary(state: GameState) -> dict[str, Any]:
    """Compact status line data for the header."""
    return {
        "phase": state.phase,
        "current_player": state.current_player,
        "current_player_is_ai": state.is_ai_player(state.current_player),
        "moves_left": state.moves_left,
        "dice_value": state.dice_value,
        "scores": {str(k): v for k, v in state.scores.items()},
        "points": len(state.points),
        "segments": len(state.segments),
        "triangles": len(state.triangles),
        "winner": state.winner,
        "can_draw": can_draw(state),
    }
