"""
Computer opponents.

Each difficulty tier is a small class sharing a per-instance RNG, so a seeded
random.Random makes every choice reproducible. The AI only sees the public
board (points and segments) and its answer goes through the same reducer as a
human move.
"""

import random
from abc import ABC, abstractmethod
from typing import Sequence

from constellation.engine.state import GameState, Point, Segment
from constellation.engine.triangles import find_new_triangles
from constellation.engine.validation import (
    Move,
    get_all_valid_moves,
    find_scoring_moves,
    has_scoring_move,
)


class BaseAI(ABC):
    """Abstract base class for all AI implementations"""

    difficulty = ""

    def __init__(self, player: int = 2, rng: random.Random | None = None):
        """
        Args:
            player: The player this AI controls (1 or 2)
            rng: Random source for every choice the AI makes
        """
        self.player = player
        self.rng = rng or random.Random()
        self.move_count = 0

    @abstractmethod
    def choose(
        self,
        points: Sequence[Point],
        segments: Sequence[Segment],
        moves_left: int,
    ) -> Move | None:
        """
        Choose a segment to draw.

        Returns:
            (p1, p2) or None if no legal move exists
        """

    def select_move(self, game_state: GameState) -> Move | None:
        """Choose a move for the current board."""
        move = self.choose(game_state.points, game_state.segments, game_state.moves_left)
        if move is not None:
            self.move_count += 1
        return move

    def get_valid_moves(self, points: Sequence[Point], segments: Sequence[Segment]) -> list[Move]:
        return get_all_valid_moves(points, segments)

    def get_random_element(self, items: Sequence[Move]) -> Move:
        return items[self.rng.randrange(len(items))]


class EasyAI(BaseAI):
    """Any legal move, uniformly at random."""

    difficulty = "easy"

    def choose(self, points, segments, moves_left):
        valid_moves = self.get_valid_moves(points, segments)
        if not valid_moves:
            return None
        return self.get_random_element(valid_moves)


class MediumAI(BaseAI):
    """Takes a triangle whenever one is available, otherwise plays randomly."""

    difficulty = "medium"

    def choose(self, points, segments, moves_left):
        valid_moves = self.get_valid_moves(points, segments)
        if not valid_moves:
            return None

        scoring_moves = find_scoring_moves(points, segments)
        if scoring_moves:
            return self.get_random_element(scoring_moves)
        return self.get_random_element(valid_moves)


class HardAI(BaseAI):
    """
    Greedy scorer with a one-ply safety check.

    1. Play the move closing the most triangles; ties go to the first move in
       enumeration order.
    2. With nothing to score, try moves in random order and play the first one
       after which the opponent has no immediately scoring reply.
    3. If every move hands the opponent a triangle, play randomly.
    """

    difficulty = "hard"

    def choose(self, points, segments, moves_left):
        valid_moves = self.get_valid_moves(points, segments)
        if not valid_moves:
            return None

        best_move = None
        max_score = -1
        for move in valid_moves:
            score = len(find_new_triangles(move[0], move[1], segments))
            if score > max_score:
                max_score = score
                best_move = move

        if max_score > 0:
            return best_move

        shuffled = list(valid_moves)
        self.rng.shuffle(shuffled)
        for move in shuffled:
            simulated = list(segments) + [Segment(p1=move[0], p2=move[1], owner=self.player)]
            if not has_scoring_move(points, simulated):
                return move

        return self.get_random_element(valid_moves)


AI_CLASSES: dict[str, type[BaseAI]] = {
    EasyAI.difficulty: EasyAI,
    MediumAI.difficulty: MediumAI,
    HardAI.difficulty: HardAI,
}


def create_ai(difficulty: str, player: int = 2, rng: random.Random | None = None) -> BaseAI:
    """Build the AI for a difficulty tier ("easy", "medium" or "hard")."""
    ai_class = AI_CLASSES.get(difficulty)
    if ai_class is None:
        raise ValueError(f"Unknown difficulty: {difficulty}")
    return ai_class(player=player, rng=rng)


def select_move(
    points: Sequence[Point],
    segments: Sequence[Segment],
    moves_left: int,
    difficulty: str,
    rng: random.Random | None = None,
    player: int = 2,
) -> Move | None:
    """One-shot helper: choose a move at the given difficulty, or None if the board is full."""
    return create_ai(difficulty, player=player, rng=rng).choose(points, segments, moves_left)
