"""
FastAPI backend for Constellation.
Lets a browser view drive a local game session: start, roll, draw, AI steps, reset.
Sessions live in memory only; nothing is persisted.
"""

import logging
import random
import uuid
from typing import Any

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from constellation import __version__
from constellation.config import (
    CORS_ORIGINS,
    DEFAULT_BOARD_HEIGHT,
    DEFAULT_BOARD_WIDTH,
    DEFAULT_DIFFICULTY,
    DEFAULT_POINT_COUNT,
    GAME_SIZES,
    LOG_LEVEL,
    MAX_POINT_COUNT,
)
from constellation.engine import DIFFICULTIES, OPPONENT_AI, OPPONENT_HUMAN
from constellation.engine.actions import draw_segment, roll_dice, skip_turn, start_game, reset_game
from constellation.engine.events import GameEvent
from constellation.engine.queries import (
    validate_action,
    get_available_action_types,
    get_valid_moves,
    get_move_targets,
    get_game_summary,
)
from constellation.engine.turns import TurnEngine

logging.basicConfig(level=LOG_LEVEL)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Constellation API",
    description="Backend API for Constellation - connect the stars, claim the sky",
    version=__version__,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request, call_next):
    """Log method and path so 500s can be traced to the failing endpoint."""
    try:
        response = await call_next(request)
        if response.status_code >= 500:
            logger.error("[500] %s %s", request.method, request.url.path)
        return response
    except Exception:
        logger.exception("[500] %s %s (exception)", request.method, request.url.path)
        raise


# In-memory game sessions: game_id -> engine
games: dict[str, TurnEngine] = {}


# ===== Pydantic Models =====

class CreateGameRequest(BaseModel):
    """seed makes the whole session (board, rolls, AI) reproducible."""
    seed: int | None = None


class StartRequest(BaseModel):
    """Either size (a GAME_SIZES preset) or point_count; size wins when both are given."""
    size: str | None = None
    point_count: int = Field(default=DEFAULT_POINT_COUNT, ge=0, le=MAX_POINT_COUNT)
    opponent: str = OPPONENT_HUMAN
    difficulty: str | None = None
    width: float = DEFAULT_BOARD_WIDTH
    height: float = DEFAULT_BOARD_HEIGHT


class MoveRequest(BaseModel):
    point_a: int
    point_b: int


# ===== Helper Functions =====

def get_engine(game_id: str) -> TurnEngine:
    """Get the engine for a game; raise 404 if not found."""
    engine = games.get(game_id)
    if engine is None:
        raise HTTPException(status_code=404, detail=f"Game {game_id} not found")
    return engine


def _require_valid(engine: TurnEngine, action) -> None:
    validation = validate_action(engine.state, action)
    if not validation.valid:
        raise HTTPException(status_code=400, detail=validation.error)


def _require_human_turn(engine: TurnEngine) -> None:
    if engine.is_ai_turn:
        raise HTTPException(status_code=400, detail="It is the computer's turn")


def state_for_response(engine: TurnEngine) -> dict[str, Any]:
    """State dict including the computed summary for the header."""
    out = engine.state.to_dict()
    out["summary"] = get_game_summary(engine.state)
    out["is_ai_turn"] = engine.is_ai_turn
    return out


def _respond(engine: TurnEngine, events: list[GameEvent]) -> dict[str, Any]:
    return {
        "state": state_for_response(engine),
        "events": [e.to_dict() for e in events],
    }


# ===== API Endpoints =====

@app.get("/")
def root():
    return {"message": "Constellation API", "version": __version__}


@app.get("/config")
def get_config():
    """Menu presets and options for the start screen."""
    return {
        "game_sizes": GAME_SIZES,
        "default_point_count": DEFAULT_POINT_COUNT,
        "max_point_count": MAX_POINT_COUNT,
        "difficulties": list(DIFFICULTIES),
        "default_difficulty": DEFAULT_DIFFICULTY,
        "opponents": [OPPONENT_HUMAN, OPPONENT_AI],
    }


@app.post("/games")
def create_game(request: CreateGameRequest | None = None):
    """Create a session in the menu phase."""
    seed = request.seed if request else None
    engine = TurnEngine(rng=random.Random(seed))
    game_id = str(uuid.uuid4())
    games[game_id] = engine
    return {"game_id": game_id, "state": state_for_response(engine)}


@app.get("/games/{game_id}")
def get_game_state(game_id: str):
    return {"state": state_for_response(get_engine(game_id))}


@app.delete("/games/{game_id}")
def delete_game(game_id: str):
    get_engine(game_id)
    del games[game_id]
    return {"deleted": game_id}


@app.get("/games/{game_id}/available-actions")
def available_actions(game_id: str):
    engine = get_engine(game_id)
    return {
        "phase": engine.state.phase,
        "actions": get_available_action_types(engine.state),
        "is_ai_turn": engine.is_ai_turn,
    }


@app.get("/games/{game_id}/moves")
def legal_moves(game_id: str, point_id: int | None = None):
    """All legal segments, or the legal targets from one point when point_id is given."""
    engine = get_engine(game_id)
    if point_id is not None:
        return {"point_id": point_id, "targets": get_move_targets(engine.state, point_id)}
    return {"moves": get_valid_moves(engine.state)}


@app.post("/games/{game_id}/start")
def do_start(game_id: str, request: StartRequest):
    """Start a game from the menu with the board size the view measured."""
    engine = get_engine(game_id)
    if request.size is not None:
        if request.size not in GAME_SIZES:
            raise HTTPException(status_code=400, detail=f"Unknown game size: {request.size}")
        point_count = GAME_SIZES[request.size]
    else:
        point_count = request.point_count
    difficulty = request.difficulty
    if request.opponent == OPPONENT_AI and difficulty is None:
        difficulty = DEFAULT_DIFFICULTY
    opponent = {"mode": request.opponent, "difficulty": difficulty}
    _require_valid(engine, start_game(point_count, opponent, request.width, request.height))
    events = engine.request_start(point_count, opponent, request.width, request.height)
    return _respond(engine, events)


@app.post("/games/{game_id}/roll")
def do_roll(game_id: str):
    """Roll the die for the human player whose turn it is."""
    engine = get_engine(game_id)
    _require_human_turn(engine)
    # The value is rolled by the engine; 1 only stands in for validation
    _require_valid(engine, roll_dice(engine.state.current_player, 1))
    return _respond(engine, engine.request_roll())


@app.post("/games/{game_id}/move")
def do_move(game_id: str, request: MoveRequest):
    """
    Draw a segment. An illegal segment is still a 200: the events carry
    invalid_move_rejected and the state is unchanged.
    """
    engine = get_engine(game_id)
    _require_human_turn(engine)
    _require_valid(engine, draw_segment(engine.state.current_player, request.point_a, request.point_b))
    return _respond(engine, engine.request_move(request.point_a, request.point_b))


@app.post("/games/{game_id}/skip")
def do_skip(game_id: str):
    engine = get_engine(game_id)
    _require_human_turn(engine)
    _require_valid(engine, skip_turn(engine.state.current_player))
    return _respond(engine, engine.request_skip())


@app.post("/games/{game_id}/ai-step")
def do_ai_step(game_id: str):
    """One computer roll or segment. The view calls this on its own timer."""
    engine = get_engine(game_id)
    if not engine.is_ai_turn:
        raise HTTPException(status_code=400, detail="It is not the computer's turn")
    return _respond(engine, engine.step_ai())


@app.post("/games/{game_id}/reset")
def do_reset(game_id: str):
    engine = get_engine(game_id)
    _require_valid(engine, reset_game())
    return _respond(engine, engine.request_reset())


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
