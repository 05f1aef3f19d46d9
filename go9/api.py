"""
FastAPI REST API for the 9x9 Go engine.

Exposes in-process game sessions over HTTP so a presentation layer can
drive the engine: create a game, place stones, pass, ask the computer for
its reply, and fetch the score.

Usage:
    # Start the server
    uvicorn go9.api:app --host 127.0.0.1 --port 8000 --reload

    # Or run directly
    python -m go9.api
"""

import random
import uuid
from contextlib import asynccontextmanager
from typing import Dict, List, Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel, Field

from . import __version__
from .ai import Tier
from .config import AppConfig, load_config
from .game import GameState, MoveResult, ai_move, legal_moves, new_game, pass_turn, place, play_ai_turn, score
from .sgf_handler import game_to_sgf


# ============================================================================
# Pydantic Models (OpenAPI Schema)
# ============================================================================

class NewGameRequest(BaseModel):
    """Request body for POST /games."""
    board_size: Optional[int] = Field(default=None, ge=2, le=19, description="Board size (default from config: 9)")
    komi: Optional[float] = Field(default=None, description="Komi for White (default from config: 5.5)")
    ai_tier: Optional[Tier] = Field(default=None, description="Computer tier used by /ai-move")
    seed: Optional[int] = Field(default=None, description="Seed for reproducible computer moves")

    class Config:
        json_schema_extra = {
            "example": {
                "board_size": 9,
                "komi": 5.5,
                "ai_tier": "hard",
                "seed": 42
            }
        }


class PlaceRequest(BaseModel):
    """Request body for POST /games/{game_id}/place."""
    x: int = Field(..., description="Column, 0 = left")
    y: int = Field(..., description="Row, 0 = top")

    class Config:
        json_schema_extra = {
            "example": {"x": 4, "y": 4}
        }


class ScoreResponse(BaseModel):
    """Territory score."""
    black: float = Field(..., description="Black stones + territory")
    white: float = Field(..., description="White stones + territory + komi")
    winner: Optional[str] = Field(None, description="'B', 'W' or null for a tie")
    result: str = Field(..., description="SGF-style result, e.g. 'W+2.5'")
    komi: float
    black_stones: int
    white_stones: int
    black_territory: int
    white_territory: int
    territory_map: List[List[Optional[str]]] = Field(..., description="Owner of each point, rows top to bottom")


class GameResponse(BaseModel):
    """Snapshot of a game session."""
    game_id: str
    board_size: int
    board: List[str] = Field(..., description="Rows top to bottom, '.'=empty 'B'=black 'W'=white")
    current_color: str
    pass_count: int
    prisoners: Dict[str, int] = Field(..., description="Opponent stones captured by each colour")
    last_move: Optional[List[int]] = None
    phase: str
    komi: float
    moves: List[str]
    score: Optional[ScoreResponse] = None


class MoveResponse(BaseModel):
    """Result of a place, pass or computer move."""
    legal: bool
    reason: Optional[str] = Field(None, description="InvalidCoordinate, Occupied, Suicide, Ko or MoveAfterGameEnded")
    captured: List[List[int]] = Field(default=[], description="Points removed by this move")
    move: Optional[List[int]] = Field(None, description="Point played by the computer, null for a pass")
    game: GameResponse


class LegalMovesResponse(BaseModel):
    color: str
    moves: List[List[int]]


class HealthResponse(BaseModel):
    """Health check response."""
    status: str = Field(..., description="Service status")
    active_games: int = Field(..., description="Number of sessions held in memory")
    version: str


class ErrorResponse(BaseModel):
    """Error response."""
    detail: str = Field(..., description="Error message")


# ============================================================================
# Application State
# ============================================================================

class Session:
    """One game plus its computer-opponent settings."""

    def __init__(self, state: GameState, tier: Tier, seed: Optional[int] = None):
        self.state = state
        self.tier = tier
        self.rng = random.Random(seed)
        # Hints use their own source; /ai-move choices must not depend on them
        self.hint_rng = random.Random(seed)


class AppState:
    """Application state container."""
    config: AppConfig = AppConfig()
    games: Dict[str, Session] = {}


state = AppState()


def _get_session(game_id: str) -> Session:
    session = state.games.get(game_id)
    if session is None:
        raise HTTPException(status_code=404, detail=f"Game not found: {game_id}")
    return session


def _game_response(game_id: str, game: GameState) -> GameResponse:
    return GameResponse(game_id=game_id, **game.to_dict())


def _move_response(game_id: str, result: MoveResult, move=None) -> MoveResponse:
    return MoveResponse(
        legal=result.legal,
        reason=result.reason.value if result.reason else None,
        captured=[list(p) for p in result.captured],
        move=list(move) if move else None,
        game=_game_response(game_id, result.state),
    )


# ============================================================================
# Lifespan Management
# ============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifecycle (startup/shutdown)."""
    print("Starting 9x9 Go API...")
    state.config = load_config()
    print(
        f"Defaults: {state.config.game.board_size}x{state.config.game.board_size}, "
        f"komi {state.config.game.komi}, AI tier {state.config.ai.tier}"
    )

    yield

    print("Shutting down 9x9 Go API...")
    state.games.clear()
    print("Shutdown complete.")


# ============================================================================
# FastAPI Application
# ============================================================================

app = FastAPI(
    title="9x9 Go API",
    description="""
REST API for a 9x9 Go rule engine with a built-in computer opponent.

## Features
- Move legality: captures, suicide and ko
- Territory scoring with komi after two consecutive passes
- Three computer tiers: easy, medium, hard
- SGF export

## Usage
1. `POST /games` to start a game
2. `POST /games/{id}/place` and `POST /games/{id}/pass` to play
3. `POST /games/{id}/ai-move` to let the computer play the side to move
    """,
    version=__version__,
    lifespan=lifespan,
    responses={
        500: {"model": ErrorResponse, "description": "Internal server error"},
    },
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ============================================================================
# Endpoints
# ============================================================================

@app.get("/health", response_model=HealthResponse, tags=["System"], summary="Health check")
async def health_check():
    """Return service health status."""
    return HealthResponse(status="ok", active_games=len(state.games), version=__version__)


@app.post(
    "/games",
    response_model=GameResponse,
    status_code=201,
    tags=["Games"],
    summary="Start a new game",
    responses={400: {"model": ErrorResponse, "description": "Invalid request parameters"}},
)
async def create_game(request: Optional[NewGameRequest] = None):
    """Create a game session with Black to move."""
    request = request or NewGameRequest()
    defaults = state.config

    try:
        game = new_game(
            board_size=request.board_size or defaults.game.board_size,
            komi=request.komi if request.komi is not None else defaults.game.komi,
        )
        tier = request.ai_tier or Tier.parse(defaults.ai.tier)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    seed = request.seed if request.seed is not None else defaults.ai.seed
    game_id = uuid.uuid4().hex[:12]
    state.games[game_id] = Session(game, tier, seed)
    return _game_response(game_id, game)


@app.get("/games/{game_id}", response_model=GameResponse, tags=["Games"], summary="Get a game")
async def get_game(game_id: str):
    return _game_response(game_id, _get_session(game_id).state)


@app.delete("/games/{game_id}", status_code=204, tags=["Games"], summary="Discard a game")
async def delete_game(game_id: str):
    _get_session(game_id)
    del state.games[game_id]


@app.post(
    "/games/{game_id}/place",
    response_model=MoveResponse,
    tags=["Play"],
    summary="Place a stone",
    description="""
Place a stone for the side to move.

An illegal move is not an HTTP error: the response has `legal=false`,
a `reason`, and the unchanged game.
    """,
)
async def place_stone(game_id: str, request: PlaceRequest):
    session = _get_session(game_id)
    result = place(session.state, request.x, request.y)
    session.state = result.state
    return _move_response(game_id, result)


@app.post("/games/{game_id}/pass", response_model=MoveResponse, tags=["Play"], summary="Pass")
async def pass_move(game_id: str):
    """Pass for the side to move; two consecutive passes end and score the game."""
    session = _get_session(game_id)
    result = pass_turn(session.state)
    session.state = result.state
    return _move_response(game_id, result)


@app.post(
    "/games/{game_id}/ai-move",
    response_model=MoveResponse,
    tags=["Play"],
    summary="Computer plays the side to move",
)
async def computer_move(game_id: str, tier: Optional[Tier] = None):
    """Play the computer's choice for the side to move, or pass if it has none."""
    session = _get_session(game_id)
    move, result = play_ai_turn(session.state, tier or session.tier, session.rng)
    session.state = result.state
    return _move_response(game_id, result, move)


@app.get("/games/{game_id}/hint", tags=["Play"], summary="Suggest a move without playing it")
async def hint(game_id: str, tier: Optional[Tier] = None):
    session = _get_session(game_id)
    move = ai_move(session.state, tier or session.tier, session.hint_rng)
    return {"move": list(move) if move else None}


@app.get(
    "/games/{game_id}/legal-moves",
    response_model=LegalMovesResponse,
    tags=["Play"],
    summary="List legal placements",
)
async def get_legal_moves(game_id: str, color: Optional[str] = None):
    session = _get_session(game_id)
    if color is not None and color.upper() not in ("B", "W"):
        raise HTTPException(status_code=400, detail=f"Color must be 'B' or 'W', got {color}")
    color = color.upper() if color else session.state.current_color
    return LegalMovesResponse(
        color=color,
        moves=[list(p) for p in legal_moves(session.state, color)],
    )


@app.get("/games/{game_id}/score", response_model=ScoreResponse, tags=["Games"], summary="Score")
async def get_score(game_id: str):
    """Final score for an ended game, provisional score otherwise."""
    return ScoreResponse(**score(_get_session(game_id).state).to_dict())


@app.get(
    "/games/{game_id}/sgf",
    response_class=PlainTextResponse,
    tags=["Games"],
    summary="Export as SGF",
)
async def export_sgf(game_id: str):
    return game_to_sgf(_get_session(game_id).state)


# ============================================================================
# Main Entry Point
# ============================================================================

if __name__ == "__main__":
    import uvicorn
    config = load_config()
    uvicorn.run(
        "go9.api:app",
        host=config.api.host,
        port=config.api.port,
        reload=True,
    )
