"""
Action definitions for the game.
Actions are immutable, deterministic instructions: any randomness (board
layout, die value) is sampled before the action is built and travels in its
payload.
"""

from dataclasses import dataclass

from constellation.engine.state import Point


@dataclass
class Action:
    """Base action class. All actions have a type, the acting player, and a payload."""
    type: str  # e.g. "start_game", "roll_dice", "draw_segment", "reset_game"
    player: int | None  # None for session-level actions (start, reset)
    payload: dict  # Action-specific data


def start_game(
    point_count: int,
    opponent: dict,  # {"mode": "human" | "ai", "difficulty": "easy" | "medium" | "hard" | None}
    width: float,
    height: float,
) -> Action:
    """
    Leave the menu and start configuring a board.
    width/height are the board size reported once by the view; the engine never polls layout.
    """
    return Action(
        type="start_game",
        player=None,
        payload={
            "point_count": point_count,
            "opponent": opponent,
            "width": width,
            "height": height,
        },
    )


def place_points(points: list[Point]) -> Action:
    """Finish configuring with the generated points; player 1 rolls first."""
    return Action(
        type="place_points",
        player=None,
        payload={"points": list(points)},
    )


def roll_dice(player: int, value: int) -> Action:
    """
    Start the player's turn with a die value already rolled (1-6).
    Example: roll_dice(1, 4)  # player 1 may now draw 4 segments
    """
    return Action(type="roll_dice", player=player, payload={"value": value})


def draw_segment(player: int, point_a: int, point_b: int) -> Action:
    """Draw a segment between two points, by point id."""
    return Action(
        type="draw_segment",
        player=player,
        payload={"point_a": point_a, "point_b": point_b},
    )


def skip_turn(player: int) -> Action:
    """Give up the remaining moves of this turn (used when the AI finds no move)."""
    return Action(type="skip_turn", player=player, payload={})


def reset_game() -> Action:
    """Abort or finish the game and return to the menu."""
    return Action(type="reset_game", player=None, payload={})
