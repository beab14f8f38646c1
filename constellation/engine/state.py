"""
Game state representation.
Points, segments and triangles are immutable; the reducer returns new state copies.
"""

from dataclasses import dataclass, field
from copy import deepcopy
from typing import Any

from constellation.engine import (
    PHASE_MENU,
    PLAYERS,
    OPPONENT_AI,
    OPPONENT_HUMAN,
    DIFFICULTIES,
)


@dataclass(frozen=True, eq=False)
class Point:
    """A star on the board. Identity is the id; coordinates are never compared."""
    id: int
    x: float
    y: float

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Point):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "x": self.x, "y": self.y}


@dataclass(frozen=True, eq=False)
class Segment:
    """
    An undirected line between two points, owned by the player who drew it.
    (p1, p2) and (p2, p1) are the same segment; the owner does not take part in equality.
    """
    p1: Point
    p2: Point
    owner: int

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Segment):
            return NotImplemented
        return self.key == other.key

    def __hash__(self) -> int:
        return hash(self.key)

    @property
    def key(self) -> frozenset[int]:
        return frozenset((self.p1.id, self.p2.id))

    def connects(self, a_id: int, b_id: int) -> bool:
        """True if this segment joins a_id and b_id, in either order."""
        return (
            (self.p1.id == a_id and self.p2.id == b_id)
            or (self.p1.id == b_id and self.p2.id == a_id)
        )

    def to_dict(self) -> dict[str, Any]:
        return {"p1": self.p1.id, "p2": self.p2.id, "owner": self.owner}


@dataclass(frozen=True)
class Triangle:
    """A claimed triangle. Only vertices are stored; edges are derived."""
    p1: Point
    p2: Point
    p3: Point
    owner: int

    @property
    def vertices(self) -> tuple[Point, Point, Point]:
        return (self.p1, self.p2, self.p3)

    def edges(self) -> list[frozenset[int]]:
        return [
            frozenset((self.p1.id, self.p2.id)),
            frozenset((self.p2.id, self.p3.id)),
            frozenset((self.p1.id, self.p3.id)),
        ]

    def to_dict(self) -> dict[str, Any]:
        return {
            "points": [self.p1.id, self.p2.id, self.p3.id],
            "owner": self.owner,
        }


@dataclass(frozen=True)
class OpponentConfig:
    """Who plays player 2: another human, or the computer at a difficulty tier."""
    mode: str = OPPONENT_HUMAN
    difficulty: str | None = None

    def __post_init__(self) -> None:
        if self.mode not in (OPPONENT_HUMAN, OPPONENT_AI):
            raise ValueError(f"Unknown opponent mode: {self.mode}")
        if self.mode == OPPONENT_AI and self.difficulty not in DIFFICULTIES:
            raise ValueError(
                f"AI opponent needs a difficulty in {', '.join(DIFFICULTIES)}, got {self.difficulty!r}"
            )

    @property
    def is_ai(self) -> bool:
        return self.mode == OPPONENT_AI

    def to_dict(self) -> dict[str, Any]:
        return {"mode": self.mode, "difficulty": self.difficulty}

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> "OpponentConfig":
        if not isinstance(data, dict):
            return cls()
        mode = str(data.get("mode") or OPPONENT_HUMAN)
        difficulty = data.get("difficulty")
        return cls(mode=mode, difficulty=str(difficulty) if difficulty else None)


def _empty_scores() -> dict[int, int]:
    return {player: 0 for player in PLAYERS}


@dataclass
class GameState:
    """Complete game state."""
    phase: str = PHASE_MENU  # "menu", "configuring", "rolling", "playing", "gameover"
    points: list[Point] = field(default_factory=list)
    # Append-only, in the order they were drawn
    segments: list[Segment] = field(default_factory=list)
    triangles: list[Triangle] = field(default_factory=list)
    # player -> number of triangles owned
    scores: dict[int, int] = field(default_factory=_empty_scores)
    current_player: int = 1
    moves_left: int = 0
    # Last die value, kept for display; 0 before the first roll of a turn
    dice_value: int = 0
    opponent: OpponentConfig = field(default_factory=OpponentConfig)
    # Requested star count and board size, captured once by start_game
    point_count: int = 0
    board_width: float = 0
    board_height: float = 0
    # Set at game over: 1 or 2, None while playing or on a draw
    winner: int | None = None

    def copy(self) -> "GameState":
        """Return a deep copy of this game state."""
        return deepcopy(self)

    def get_point(self, point_id: int) -> Point | None:
        """Look up a point by id (ids are list indices, but do not rely on it)."""
        if 0 <= point_id < len(self.points) and self.points[point_id].id == point_id:
            return self.points[point_id]
        for p in self.points:
            if p.id == point_id:
                return p
        return None

    def is_ai_player(self, player: int) -> bool:
        """Player 2 is the computer when the opponent is an AI."""
        return player == 2 and self.opponent.is_ai

    @property
    def other_player(self) -> int:
        return 2 if self.current_player == 1 else 1

    # ===== Serialization =====

    def to_dict(self) -> dict[str, Any]:
        """Snapshot for the view. Player keys become strings for JSON."""
        return {
            "phase": self.phase,
            "points": [p.to_dict() for p in self.points],
            "segments": [s.to_dict() for s in self.segments],
            "triangles": [t.to_dict() for t in self.triangles],
            "scores": {str(k): v for k, v in self.scores.items()},
            "current_player": self.current_player,
            "moves_left": self.moves_left,
            "dice_value": self.dice_value,
            "opponent": self.opponent.to_dict(),
            "point_count": self.point_count,
            "board_width": self.board_width,
            "board_height": self.board_height,
            "winner": self.winner,
        }
