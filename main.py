"""
Main entry point for the Constellation game engine.
Demonstrates core functionality with simple seeded scenarios.
"""

import logging
import random

from constellation.config import LOG_LEVEL
from constellation.engine.actions import start_game, place_points, roll_dice, draw_segment
from constellation.engine.ai import create_ai
from constellation.engine.reducer import apply_action
from constellation.engine.state import GameState
from constellation.engine.turns import TurnEngine
from constellation.engine.utils import make_points, print_game_state


def main():
    logging.basicConfig(level=LOG_LEVEL)
    print("Constellation Game Engine")
    print("=" * 60)

    # ===== SCENARIO 1: Claiming a triangle on a hand-made board =====
    print("\n[SCENARIO 1: Square board, sides and a diagonal]")

    # Corners 0..3 clockwise; no point sits where the diagonals cross
    points = make_points([(100, 100), (300, 100), (300, 300), (100, 300)])
    state = GameState()
    state, _ = apply_action(state, start_game(len(points), {"mode": "human"}, 400, 400))
    state, _ = apply_action(state, place_points(points))
    state, _ = apply_action(state, roll_dice(1, 6))

    # 0-2 closes (0, 1, 2); 1-3 would cross it; 3-0 closes (0, 2, 3) and fills the board
    for a, b in [(0, 1), (1, 2), (2, 3), (0, 2), (1, 3), (3, 0)]:
        state, events = apply_action(state, draw_segment(1, a, b))
        print(f"Draw {a}-{b}: {[e.type for e in events]}")

    print(f"Triangles claimed: {[(t.p1.id, t.p2.id, t.p3.id) for t in state.triangles]}")
    print_game_state(state, verbose=True)

    # ===== SCENARIO 2: A full game against the computer =====
    print("\n[SCENARIO 2: Seeded game, random player 1 vs hard AI]")

    rng = random.Random(42)
    engine = TurnEngine(rng=rng)
    engine.request_start(15, {"mode": "ai", "difficulty": "hard"}, width=500, height=400)
    human_stand_in = create_ai("easy", player=1, rng=random.Random(7))

    while engine.state.phase != "gameover":
        if engine.is_ai_turn:
            engine.run_ai_turn()
            continue
        if engine.state.phase == "rolling":
            engine.request_roll()
            continue
        move = human_stand_in.select_move(engine.state)
        if move is None:
            engine.request_skip()
        else:
            engine.request_move(move[0].id, move[1].id)

    print_game_state(engine.state)

    print("\n" + "=" * 60)
    print("✓ Scenarios complete")
    print("=" * 60)


if __name__ == "__main__":
    main()
