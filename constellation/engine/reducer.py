"""
Main game reducer.
Applies actions to state, enforcing rules and producing new state.
Returns (new_state, events) where events describe what happened.
"""

import logging

from constellation.engine import (
    DICE_SIDES,
    PLAYERS,
    PHASE_MENU,
    PHASE_CONFIGURING,
    PHASE_ROLLING,
    PHASE_PLAYING,
    PHASE_GAMEOVER,
)
from constellation.engine.state import GameState, Point, Segment, Triangle, OpponentConfig
from constellation.engine.actions import Action
from constellation.engine.triangles import find_new_triangles
from constellation.engine.validation import is_valid_move, has_valid_moves
from constellation.engine.points import DEFAULT_PADDING
from constellation.engine.events import (
    GameEvent,
    phase_changed,
    points_placed,
    dice_rolled,
    segment_added,
    triangles_claimed,
    scores_changed,
    invalid_move_rejected,
    turn_skipped,
    game_over,
)

logger = logging.getLogger(__name__)


# Phase rules: which action types are allowed in which phases
PHASE_ALLOWED_ACTIONS = {
    PHASE_MENU: ["start_game"],
    PHASE_CONFIGURING: ["place_points", "reset_game"],
    PHASE_ROLLING: ["roll_dice", "reset_game"],
    PHASE_PLAYING: ["draw_segment", "skip_turn", "reset_game"],
    PHASE_GAMEOVER: ["reset_game"],
}

# Actions taken by a player on their own turn (the rest are session-level)
PLAYER_ACTIONS = ("roll_dice", "draw_segment", "skip_turn")


def _validate_action_for_phase(action: Action, state: GameState) -> None:
    """Validate that an action is allowed in the current phase and by the acting player."""
    allowed_actions = PHASE_ALLOWED_ACTIONS.get(state.phase, [])

    if action.type not in allowed_actions:
        raise ValueError(
            f"Action '{action.type}' is not allowed in phase '{state.phase}'. "
            f"Allowed actions: {', '.join(allowed_actions)}"
        )

    if action.type in PLAYER_ACTIONS and action.player != state.current_player:
        raise ValueError(
            f"Action player {action.player} does not match current player {state.current_player}"
        )


def apply_action(
    state: GameState,
    action: Action,
) -> tuple[GameState, list[GameEvent]]:
    """
    Apply a single action to the current state, returning new state and events.

    An illegal segment is not an error: it produces an invalid_move_rejected
    event and leaves the state unchanged. ValueError is raised only for
    actions the caller should never send (wrong phase, wrong player,
    unknown point ids, malformed payload).

    Args:
        state: Current game state (not modified)
        action: Action to apply

    Returns:
        Tuple of (new_state, events) where events describe what happened
    """
    _validate_action_for_phase(action, state)

    new_state = state.copy()
    events: list[GameEvent] = []

    if action.type == "start_game":
        new_state, evts = _handle_start_game(new_state, action)
        events.extend(evts)

    elif action.type == "place_points":
        new_state, evts = _handle_place_points(new_state, action)
        events.extend(evts)

    elif action.type == "roll_dice":
        new_state, evts = _handle_roll_dice(new_state, action)
        events.extend(evts)

    elif action.type == "draw_segment":
        new_state, evts = _handle_draw_segment(new_state, action)
        events.extend(evts)

    elif action.type == "skip_turn":
        new_state, evts = _handle_skip_turn(new_state)
        events.extend(evts)

    elif action.type == "reset_game":
        new_state, evts = _handle_reset_game(new_state)
        events.extend(evts)

    else:
        raise ValueError(f"Unknown action type: {action.type}")

    return new_state, events


def _set_phase(state: GameState, new_phase: str, events: list[GameEvent]) -> None:
    events.append(phase_changed(state.phase, new_phase, state.current_player))
    state.phase = new_phase


def _resolve_points(state: GameState, action: Action) -> tuple[Point, Point]:
    """Look up both endpoints of a draw_segment action."""
    a_id = action.payload.get("point_a")
    b_id = action.payload.get("point_b")
    if not isinstance(a_id, int) or not isinstance(b_id, int):
        raise ValueError(f"Point ids must be integers, got {a_id!r} and {b_id!r}")
    p1 = state.get_point(a_id)
    p2 = state.get_point(b_id)
    if p1 is None or p2 is None:
        raise ValueError(f"Unknown point: {a_id if p1 is None else b_id}")
    return p1, p2


def _handle_start_game(state: GameState, action: Action) -> tuple[GameState, list[GameEvent]]:
    """
    Leave the menu. Captures the requested star count, opponent and board size once;
    the board itself arrives with place_points.
    """
    events: list[GameEvent] = []
    payload = action.payload

    point_count = payload.get("point_count")
    if not isinstance(point_count, int) or point_count < 0:
        raise ValueError(f"Point count must be a non-negative integer, got {point_count!r}")

    width = payload.get("width")
    height = payload.get("height")
    if not isinstance(width, (int, float)) or not isinstance(height, (int, float)):
        raise ValueError(f"Board size must be numeric, got {width!r}x{height!r}")
    if width <= 2 * DEFAULT_PADDING or height <= 2 * DEFAULT_PADDING:
        raise ValueError(f"Board {width}x{height} is too small")

    opponent = payload.get("opponent")
    if isinstance(opponent, OpponentConfig):
        state.opponent = opponent
    else:
        state.opponent = OpponentConfig.from_dict(opponent)

    state.point_count = point_count
    state.board_width = width
    state.board_height = height
    _set_phase(state, PHASE_CONFIGURING, events)
    return state, events


def _handle_place_points(state: GameState, action: Action) -> tuple[GameState, list[GameEvent]]:
    """Put the generated points on an empty board and hand the first roll to player 1."""
    events: list[GameEvent] = []
    points = action.payload.get("points")
    if not isinstance(points, list) or not all(isinstance(p, Point) for p in points):
        raise ValueError("place_points needs a list of Point")
    if len({p.id for p in points}) != len(points):
        raise ValueError("Point ids must be unique")

    state.points = list(points)
    state.segments = []
    state.triangles = []
    state.scores = {player: 0 for player in PLAYERS}
    state.current_player = 1
    state.moves_left = 0
    state.dice_value = 0
    state.winner = None

    events.append(points_placed(state.point_count, len(points), state.board_width, state.board_height))
    events.append(scores_changed(state.scores))
    _set_phase(state, PHASE_ROLLING, events)
    logger.info(
        "Game started: %d points, opponent %s",
        len(points), state.opponent.difficulty if state.opponent.is_ai else "human",
    )

    # A board without a single legal move (e.g. fewer than two points) ends immediately
    check_game_over(state, events)
    return state, events


def _handle_roll_dice(state: GameState, action: Action) -> tuple[GameState, list[GameEvent]]:
    """Set the number of segments the current player may draw this turn."""
    events: list[GameEvent] = []
    value = action.payload.get("value")
    if not isinstance(value, int) or not 1 <= value <= DICE_SIDES:
        raise ValueError(f"Die value must be between 1 and {DICE_SIDES}, got {value!r}")

    state.moves_left = value
    state.dice_value = value
    events.append(dice_rolled(state.current_player, value))
    _set_phase(state, PHASE_PLAYING, events)
    return state, events


def _handle_draw_segment(state: GameState, action: Action) -> tuple[GameState, list[GameEvent]]:
    """
    Draw one segment for the current player.

    Validates:
    - The segment does not already exist
    - It crosses no existing segment
    - It runs through no other point

    An invalid segment costs nothing: no move is used and the board is unchanged.
    """
    events: list[GameEvent] = []
    player = state.current_player
    p1, p2 = _resolve_points(state, action)

    if state.moves_left <= 0:
        raise ValueError("No moves left this turn")

    if not is_valid_move(p1, p2, state.points, state.segments):
        events.append(invalid_move_rejected(player, p1.id, p2.id))
        return state, events

    # Detect against the board as it was before this segment
    closed = find_new_triangles(p1, p2, state.segments)

    segment = Segment(p1=p1, p2=p2, owner=player)
    state.segments.append(segment)
    state.moves_left -= 1
    events.append(segment_added(segment, state.moves_left))

    if closed:
        new_triangles = [Triangle(p1=a, p2=b, p3=c, owner=player) for a, b, c in closed]
        state.triangles.extend(new_triangles)
        state.scores[player] = state.scores.get(player, 0) + len(new_triangles)
        events.append(triangles_claimed(new_triangles, player))
        events.append(scores_changed(state.scores))

    if check_game_over(state, events):
        return state, events

    if state.moves_left == 0:
        _end_turn(state, events)

    return state, events


def _handle_skip_turn(state: GameState) -> tuple[GameState, list[GameEvent]]:
    """Forfeit the rest of the turn; the game ends here if nobody can move."""
    events: list[GameEvent] = []
    forfeited = state.moves_left
    state.moves_left = 0
    events.append(turn_skipped(state.current_player, forfeited))

    if not check_game_over(state, events):
        _end_turn(state, events)
    return state, events


def _handle_reset_game(state: GameState) -> tuple[GameState, list[GameEvent]]:
    """Back to the menu with an empty board."""
    events: list[GameEvent] = []
    old_phase = state.phase
    new_state = GameState()
    events.append(phase_changed(old_phase, PHASE_MENU, new_state.current_player))
    return new_state, events


def _end_turn(state: GameState, events: list[GameEvent]) -> None:
    """Hand the turn to the other player, who rolls next."""
    state.moves_left = 0
    state.dice_value = 0
    state.current_player = state.other_player
    _set_phase(state, PHASE_ROLLING, events)


def compute_winner(scores: dict[int, int]) -> int | None:
    """Player with the most triangles, or None on a draw."""
    best = max(scores.values(), default=0)
    leaders = [player for player, score in scores.items() if score == best]
    return leaders[0] if len(leaders) == 1 else None


def check_game_over(state: GameState, events: list[GameEvent]) -> bool:
    """
    End the game if no legal move is left anywhere on the board.

    Mutates state and appends events. Idempotent: a game already over
    returns True without emitting anything again.

    Returns:
        True if the game is over
    """
    if state.phase == PHASE_GAMEOVER:
        return True
    if state.phase not in (PHASE_ROLLING, PHASE_PLAYING):
        return False
    if has_valid_moves(state.points, state.segments):
        return False

    state.moves_left = 0
    state.winner = compute_winner(state.scores)
    _set_phase(state, PHASE_GAMEOVER, events)
    events.append(game_over(state.scores, state.winner))
    logger.info("Game over: scores %s, winner %s", state.scores, state.winner or "draw")
    return True


def evaluate_game_over(state: GameState) -> tuple[GameState, list[GameEvent]]:
    """Run the termination check on a copy of state, reducer-style."""
    new_state = state.copy()
    events: list[GameEvent] = []
    check_game_over(new_state, events)
    return new_state, events
