"""
Turn engine: the single owner of a game's state.

The view talks to the engine through request_* calls and listens to events.
Every request builds an action, checks it with validate_action, runs it
through the reducer and notifies listeners. Requests that do not fit the
current phase are ignored (logged) and return no events.

All randomness (board layout, die rolls, AI choices) comes from the injected
random.Random, so a seeded engine replays the same game.
"""

import logging
import random
from collections import defaultdict
from typing import Any, Callable

from constellation.config import DEFAULT_BOARD_WIDTH, DEFAULT_BOARD_HEIGHT
from constellation.engine import DICE_SIDES, PHASE_ROLLING, PHASE_PLAYING
from constellation.engine.state import GameState, OpponentConfig, Segment, Triangle
from constellation.engine.actions import (
    Action,
    start_game,
    place_points,
    roll_dice,
    draw_segment,
    skip_turn,
    reset_game,
)
from constellation.engine.reducer import apply_action, evaluate_game_over
from constellation.engine.queries import validate_action
from constellation.engine.points import generate_points
from constellation.engine.ai import BaseAI, create_ai
from constellation.engine.events import (
    GameEvent,
    PHASE_CHANGED,
    SEGMENT_ADDED,
    TRIANGLES_CLAIMED,
    SCORES_CHANGED,
    INVALID_MOVE_REJECTED,
    GAME_OVER,
)

logger = logging.getLogger(__name__)

EventCallback = Callable[[GameEvent], None]


class GameListener:
    """
    Observer base class for a view. Override the hooks you need.
    Payloads are the JSON-ready dicts carried by the events.
    """

    def on_phase_changed(self, new_phase: str) -> None:
        pass

    def on_segment_added(self, segment: dict[str, Any]) -> None:
        pass

    def on_triangles_claimed(self, triangles: list[dict[str, Any]], owner: int) -> None:
        pass

    def on_scores_changed(self, scores: dict[str, int]) -> None:
        pass

    def on_invalid_move_rejected(self, point_a: int, point_b: int) -> None:
        pass

    def on_game_over(self, final_scores: dict[str, int]) -> None:
        pass

    def handle(self, event: GameEvent) -> None:
        """Route an event to the matching hook."""
        p = event.payload
        if event.type == PHASE_CHANGED:
            self.on_phase_changed(p["new_phase"])
        elif event.type == SEGMENT_ADDED:
            self.on_segment_added(p["segment"])
        elif event.type == TRIANGLES_CLAIMED:
            self.on_triangles_claimed(p["triangles"], p["owner"])
        elif event.type == SCORES_CHANGED:
            self.on_scores_changed(p["scores"])
        elif event.type == INVALID_MOVE_REJECTED:
            self.on_invalid_move_rejected(p["point_a"], p["point_b"])
        elif event.type == GAME_OVER:
            self.on_game_over(p["final_scores"])


class TurnEngine:
    """Drives one game session: menu, board setup, rolls, moves, AI turns, game over."""

    def __init__(self, rng: random.Random | None = None, state: GameState | None = None):
        self.rng = rng or random.Random()
        self.state = state or GameState()
        self._ai: BaseAI | None = None
        if self.state.opponent.is_ai:
            self._ai = create_ai(self.state.opponent.difficulty, player=2, rng=self.rng)
        self._listeners: dict[str, list[EventCallback]] = defaultdict(list)
        self._catch_all: list[EventCallback] = []

    # ===== Listeners =====

    def subscribe(self, event_type: str, callback: EventCallback) -> None:
        self._listeners[event_type].append(callback)

    def subscribe_all(self, callback: EventCallback) -> None:
        self._catch_all.append(callback)

    def add_listener(self, listener: GameListener) -> None:
        self.subscribe_all(listener.handle)

    def _notify(self, events: list[GameEvent]) -> None:
        for event in events:
            for callback in self._catch_all:
                callback(event)
            for callback in self._listeners.get(event.type, []):
                callback(event)

    # ===== Dispatch =====

    def _dispatch(self, action: Action) -> list[GameEvent]:
        validation = validate_action(self.state, action)
        if not validation.valid:
            logger.debug("Ignoring %s: %s", action.type, validation.error)
            return []
        self.state, events = apply_action(self.state, action)
        self._notify(events)
        return events

    @property
    def is_ai_turn(self) -> bool:
        """True while the computer is the one to roll or draw."""
        return (
            self.state.phase in (PHASE_ROLLING, PHASE_PLAYING)
            and self.state.is_ai_player(self.state.current_player)
        )

    def _reject_during_ai_turn(self, request: str) -> bool:
        if self.is_ai_turn:
            logger.debug("Ignoring %s: it is the computer's turn", request)
            return True
        return False

    # ===== Requests from the view =====

    def request_start(
        self,
        point_count: int,
        opponent: OpponentConfig | dict | None = None,
        width: float = DEFAULT_BOARD_WIDTH,
        height: float = DEFAULT_BOARD_HEIGHT,
    ) -> list[GameEvent]:
        """
        Start a game from the menu.

        The board size is taken once, here; points are generated immediately
        and the game moves on to player 1's first roll.
        """
        if isinstance(opponent, OpponentConfig):
            opponent = opponent.to_dict()
        events = self._dispatch(start_game(point_count, opponent or {}, width, height))
        if not events:
            return []

        points = generate_points(point_count, width, height, rng=self.rng)
        events.extend(self._dispatch(place_points(points)))

        opponent_config = self.state.opponent
        self._ai = (
            create_ai(opponent_config.difficulty, player=2, rng=self.rng)
            if opponent_config.is_ai else None
        )
        return events

    def request_roll(self) -> list[GameEvent]:
        """Roll the die for the current (human) player."""
        if self._reject_during_ai_turn("roll"):
            return []
        return self._roll()

    def request_move(self, point_id_a: int, point_id_b: int) -> list[GameEvent]:
        """Draw a segment for the current (human) player."""
        if self._reject_during_ai_turn("move"):
            return []
        return self._dispatch(draw_segment(self.state.current_player, point_id_a, point_id_b))

    def request_skip(self) -> list[GameEvent]:
        """Give up the rest of the current (human) player's turn."""
        if self._reject_during_ai_turn("skip"):
            return []
        return self._dispatch(skip_turn(self.state.current_player))

    def request_reset(self) -> list[GameEvent]:
        """Abort or finish the game and return to the menu."""
        events = self._dispatch(reset_game())
        if events:
            self._ai = None
        return events

    def evaluate_game_over(self) -> list[GameEvent]:
        """Re-run the termination check; emits game_over at most once per game."""
        self.state, events = evaluate_game_over(self.state)
        self._notify(events)
        return events

    def _roll(self) -> list[GameEvent]:
        value = self.rng.randint(1, DICE_SIDES)
        return self._dispatch(roll_dice(self.state.current_player, value))

    # ===== Computer turns =====

    def step_ai(self) -> list[GameEvent]:
        """
        Let the computer take one step: its roll, or one segment.
        The view calls this after its own delay so rolls and moves can be animated.
        """
        if not self.is_ai_turn or self._ai is None:
            return []

        if self.state.phase == PHASE_ROLLING:
            return self._roll()

        move = self._ai.select_move(self.state)
        if move is None:
            logger.info("Player %d has no legal move, skipping turn", self.state.current_player)
            return self._dispatch(skip_turn(self.state.current_player))

        events = self._dispatch(draw_segment(self.state.current_player, move[0].id, move[1].id))
        if any(e.type == INVALID_MOVE_REJECTED for e in events):
            logger.warning(
                "AI chose an illegal segment %d-%d, skipping turn", move[0].id, move[1].id
            )
            events.extend(self._dispatch(skip_turn(self.state.current_player)))
        return events

    def run_ai_turn(self) -> list[GameEvent]:
        """Step the computer until a human is to act or the game is over."""
        events: list[GameEvent] = []
        while self.is_ai_turn:
            step = self.step_ai()
            if not step:
                break
            events.extend(step)
        return events

    # ===== Read-only views =====

    @property
    def segments(self) -> list[Segment]:
        return list(self.state.segments)

    @property
    def triangles(self) -> list[Triangle]:
        return list(self.state.triangles)

    @property
    def scores(self) -> dict[int, int]:
        return dict(self.state.scores)
