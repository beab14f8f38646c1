"""
Utility functions for the game engine.
"""

from typing import Iterable

from constellation.engine import PHASE_GAMEOVER
from constellation.engine.state import GameState, Point


def make_points(coordinates: Iterable[tuple[float, float]]) -> list[Point]:
    """
    Build points from (x, y) pairs, numbering them in order.
    Handy for hand-made boards in scripts and tests.
    """
    return [Point(id=i, x=float(x), y=float(y)) for i, (x, y) in enumerate(coordinates)]


def format_scores(state: GameState) -> str:
    return " | ".join(f"Player {player}: {score}" for player, score in sorted(state.scores.items()))


def print_game_state(state: GameState, verbose: bool = False) -> None:
    """
    Pretty-print the current game state.

    Args:
        state: Current game state
        verbose: If True, list every segment and triangle
    """
    print(f"\n{'='*60}")
    print(
        f"Player {state.current_player} | Phase: {state.phase} | "
        f"Moves left: {state.moves_left} | Die: {state.dice_value or '-'}")
    print(f"{'='*60}")
    print(f"Points: {len(state.points)}  Segments: {len(state.segments)}  Triangles: {len(state.triangles)}")

    if verbose:
        for s in state.segments:
            print(f"  - segment {s.p1.id}-{s.p2.id} (player {s.owner})")
        for t in state.triangles:
            print(f"  - triangle {t.p1.id}-{t.p2.id}-{t.p3.id} (player {t.owner})")

    print(f"\n{'Scores':.<40}")
    print(f"  {format_scores(state)}")
    if state.phase == PHASE_GAMEOVER:
        print(f"  Winner: {'Player ' + str(state.winner) if state.winner else 'draw'}")
    print()
