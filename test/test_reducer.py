"""
Test the reducer: phases, turns, rejected moves, triangle scoring and game over.
Boards are hand-made and die values are fixed, so every test is deterministic.
"""

import pytest

from constellation.engine.state import GameState, Segment
from constellation.engine.actions import (
    start_game,
    place_points,
    roll_dice,
    draw_segment,
    skip_turn,
    reset_game,
)
from constellation.engine.reducer import apply_action, evaluate_game_over, compute_winner
from constellation.engine.queries import validate_action
from constellation.engine.utils import make_points
from constellation.engine import events as ev

HUMAN = {"mode": "human"}

SQUARE = [(100, 100), (300, 100), (300, 300), (100, 300)]
# Three far-apart pairs: (0,1), (2,3), (4,5) can be drawn without closing a triangle
LADDER = [(100, 100), (300, 120), (100, 300), (300, 320), (100, 500), (300, 520)]


def event_types(events):
    return [e.type for e in events]


def setup_board(coordinates, opponent=HUMAN):
    """Walk menu -> configuring -> rolling on a fixed board."""
    state = GameState()
    state, _ = apply_action(state, start_game(len(coordinates), opponent, 800, 600))
    state, _ = apply_action(state, place_points(make_points(coordinates)))
    return state


def play(state, *actions):
    """Apply actions in order, returning the final state and all events."""
    all_events = []
    for action in actions:
        state, events = apply_action(state, action)
        all_events.extend(events)
    return state, all_events


# ===== Setup =====

def test_start_game_enters_configuring():
    state, events = apply_action(GameState(), start_game(4, HUMAN, 640, 480))
    assert state.phase == "configuring"
    assert state.point_count == 4
    assert (state.board_width, state.board_height) == (640, 480)
    assert event_types(events) == [ev.PHASE_CHANGED]


def test_place_points_hands_first_roll_to_player_1():
    state = GameState()
    state, _ = apply_action(state, start_game(4, HUMAN, 800, 600))
    state, events = apply_action(state, place_points(make_points(SQUARE)))

    assert state.phase == "rolling"
    assert state.current_player == 1
    assert len(state.points) == 4
    assert state.scores == {1: 0, 2: 0}
    assert event_types(events) == [ev.POINTS_PLACED, ev.SCORES_CHANGED, ev.PHASE_CHANGED]


def test_board_without_moves_ends_at_once():
    state = GameState()
    state, _ = apply_action(state, start_game(1, HUMAN, 800, 600))
    state, events = apply_action(state, place_points(make_points([(100, 100)])))

    assert state.phase == "gameover"
    assert state.winner is None
    assert event_types(events)[-1] == ev.GAME_OVER


def test_start_game_rejects_bad_input():
    with pytest.raises(ValueError):
        apply_action(GameState(), start_game(-1, HUMAN, 800, 600))
    with pytest.raises(ValueError):
        apply_action(GameState(), start_game(10, HUMAN, 30, 600))
    with pytest.raises(ValueError):
        apply_action(GameState(), start_game(10, {"mode": "ai", "difficulty": "brutal"}, 800, 600))


# ===== Rolling and turns =====

@pytest.mark.parametrize("value", [1, 3, 6])
def test_roll_sets_moves_left(value):
    state = setup_board(LADDER)
    state, events = apply_action(state, roll_dice(1, value))

    assert state.phase == "playing"
    assert state.moves_left == value
    assert state.dice_value == value
    assert event_types(events) == [ev.DICE_ROLLED, ev.PHASE_CHANGED]


def test_roll_out_of_range_is_an_error():
    state = setup_board(LADDER)
    with pytest.raises(ValueError):
        apply_action(state, roll_dice(1, 7))
    with pytest.raises(ValueError):
        apply_action(state, roll_dice(1, 0))


def test_turn_passes_after_last_move():
    state = setup_board(LADDER)
    state, _ = apply_action(state, roll_dice(1, 3))
    state, events = play(
        state,
        draw_segment(1, 0, 1),
        draw_segment(1, 2, 3),
        draw_segment(1, 4, 5),
    )

    assert state.phase == "rolling"
    assert state.current_player == 2
    assert state.moves_left == 0
    assert state.dice_value == 0
    assert [s.owner for s in state.segments] == [1, 1, 1]
    assert event_types(events).count(ev.SEGMENT_ADDED) == 3


def test_turn_stays_while_moves_remain():
    state = setup_board(LADDER)
    state, _ = apply_action(state, roll_dice(1, 2))
    state, _ = apply_action(state, draw_segment(1, 0, 1))

    assert state.phase == "playing"
    assert state.current_player == 1
    assert state.moves_left == 1


def test_skip_forfeits_remaining_moves():
    state = setup_board(LADDER)
    state, _ = apply_action(state, roll_dice(1, 5))
    state, events = apply_action(state, skip_turn(1))

    assert state.current_player == 2
    assert state.phase == "rolling"
    assert events[0].type == ev.TURN_SKIPPED
    assert events[0].payload["moves_forfeited"] == 5


# ===== Moves =====

def test_invalid_move_leaves_state_unchanged():
    state = setup_board(SQUARE)
    state, _ = play(state, roll_dice(1, 4), draw_segment(1, 0, 2))

    before = state.copy()
    after, events = apply_action(state, draw_segment(1, 1, 3))  # crosses 0-2

    assert event_types(events) == [ev.INVALID_MOVE_REJECTED]
    assert events[0].payload == {"player": 1, "point_a": 1, "point_b": 3}
    assert after.moves_left == before.moves_left == 3
    assert len(after.segments) == 1
    assert after.current_player == 1


def test_duplicate_move_is_rejected():
    state = setup_board(SQUARE)
    state, _ = play(state, roll_dice(1, 4), draw_segment(1, 0, 1))
    state, events = apply_action(state, draw_segment(1, 1, 0))

    assert event_types(events) == [ev.INVALID_MOVE_REJECTED]
    assert state.moves_left == 3


def test_unknown_point_is_an_error():
    state = setup_board(SQUARE)
    state, _ = apply_action(state, roll_dice(1, 2))
    with pytest.raises(ValueError):
        apply_action(state, draw_segment(1, 0, 99))


def test_wrong_phase_and_wrong_player_are_errors():
    state = setup_board(SQUARE)
    with pytest.raises(ValueError):
        apply_action(state, draw_segment(1, 0, 1))  # must roll first
    with pytest.raises(ValueError):
        apply_action(state, roll_dice(2, 3))  # player 1's turn

    state, _ = apply_action(state, roll_dice(1, 3))
    with pytest.raises(ValueError):
        apply_action(state, roll_dice(1, 3))


def test_apply_action_does_not_mutate_input():
    state = setup_board(SQUARE)
    state, _ = apply_action(state, roll_dice(1, 3))
    apply_action(state, draw_segment(1, 0, 1))
    assert state.segments == []
    assert state.moves_left == 3


# ===== Scoring and game over =====

def test_one_triangle_scores_one():
    state = setup_board(SQUARE)
    state, events = play(
        state,
        roll_dice(1, 6),
        draw_segment(1, 0, 1),
        draw_segment(1, 1, 2),
        draw_segment(1, 0, 2),
    )

    assert state.scores == {1: 1, 2: 0}
    assert len(state.triangles) == 1
    assert {p.id for p in state.triangles[0].vertices} == {0, 1, 2}
    claimed = [e for e in events if e.type == ev.TRIANGLES_CLAIMED]
    assert len(claimed) == 1
    assert claimed[0].payload["count"] == 1
    assert claimed[0].payload["owner"] == 1


def test_diagonal_scores_two_and_ends_the_game():
    """Outline the square, then the diagonal closes both halves and no move is left."""
    state = setup_board(SQUARE)
    state, events = play(
        state,
        roll_dice(1, 6),
        draw_segment(1, 0, 1),
        draw_segment(1, 1, 2),
        draw_segment(1, 2, 3),
        draw_segment(1, 3, 0),
        draw_segment(1, 0, 2),
    )

    assert state.scores == {1: 2, 2: 0}
    assert state.phase == "gameover"
    assert state.winner == 1
    assert state.moves_left == 0
    assert event_types(events).count(ev.GAME_OVER) == 1
    final = [e for e in events if e.type == ev.GAME_OVER][0]
    assert final.payload == {"final_scores": {"1": 2, "2": 0}, "winner": 1}


def test_triangles_are_credited_to_the_mover():
    state = setup_board(SQUARE)
    state, _ = play(
        state,
        roll_dice(1, 2),
        draw_segment(1, 0, 1),
        draw_segment(1, 1, 2),
        roll_dice(2, 1),
        draw_segment(2, 2, 0),
    )
    assert state.scores == {1: 0, 2: 1}
    assert state.triangles[0].owner == 2


def test_game_over_is_idempotent():
    points = make_points(SQUARE)
    a, b, c, d = points
    full = [Segment(a, b, 1), Segment(b, c, 1), Segment(c, d, 2), Segment(d, a, 2), Segment(a, c, 1)]
    state = GameState(phase="playing", points=points, segments=full, moves_left=4,
                      scores={1: 1, 2: 1})

    state, events = evaluate_game_over(state)
    assert state.phase == "gameover"
    assert state.moves_left == 0
    assert state.winner is None
    assert event_types(events) == [ev.PHASE_CHANGED, ev.GAME_OVER]

    state, events = evaluate_game_over(state)
    assert events == []
    assert state.phase == "gameover"


def test_game_over_not_reached_while_moves_exist():
    state = setup_board(SQUARE)
    state, events = evaluate_game_over(state)
    assert events == []
    assert state.phase == "rolling"


def test_compute_winner():
    assert compute_winner({1: 3, 2: 1}) == 1
    assert compute_winner({1: 0, 2: 2}) == 2
    assert compute_winner({1: 2, 2: 2}) is None


# ===== Reset =====

@pytest.mark.parametrize("moves", [0, 1])
def test_reset_returns_to_menu(moves):
    state = setup_board(SQUARE)
    state, _ = apply_action(state, roll_dice(1, 3))
    for _ in range(moves):
        state, _ = apply_action(state, draw_segment(1, 0, 1))

    state, events = apply_action(state, reset_game())
    assert state.phase == "menu"
    assert state.points == [] and state.segments == [] and state.triangles == []
    assert state.scores == {1: 0, 2: 0}
    assert events[0].payload["old_phase"] == "playing"


def test_reset_from_menu_is_not_allowed():
    assert not validate_action(GameState(), reset_game()).valid


# ===== Validation without applying =====

def test_validate_action_explains_rejections():
    state = setup_board(SQUARE)
    result = validate_action(state, draw_segment(1, 0, 1))
    assert not result.valid
    assert "rolling" in result.error

    result = validate_action(state, roll_dice(2, 3))
    assert not result.valid

    assert validate_action(state, roll_dice(1, 3)).valid


def test_validate_accepts_illegal_segment_between_known_points():
    """Segment legality is the reducer's answer (invalid_move_rejected), not a validation error."""
    state = setup_board(SQUARE)
    state, _ = play(state, roll_dice(1, 3), draw_segment(1, 0, 1))
    assert validate_action(state, draw_segment(1, 1, 0)).valid
    assert not validate_action(state, draw_segment(1, 0, 42)).valid


def test_square_diagonal_then_crossing_diagonal():
    """Three sides and a diagonal close exactly one triangle; the other diagonal is then refused."""
    state = setup_board(SQUARE)
    state, events = play(
        state,
        roll_dice(1, 6),
        draw_segment(1, 0, 1),
        draw_segment(1, 1, 2),
        draw_segment(1, 2, 3),
        draw_segment(1, 0, 2),
    )
    claimed = [e for e in events if e.type == ev.TRIANGLES_CLAIMED]
    assert len(claimed) == 1 and claimed[0].payload["count"] == 1

    state, events = apply_action(state, draw_segment(1, 1, 3))
    assert event_types(events) == [ev.INVALID_MOVE_REJECTED]
    assert len(state.segments) == 4
    assert state.moves_left == 2
