"""
FastAPI web application for the Gobblet engine.

Exposes a small JSON API over the engine: the starting position, the legal
moves in a position, and the engine's move in a position. A browser or any
other client keeps the game itself and sends the full board with every
request.

The handlers are plain functions, so FastAPI runs each search on its worker
threads and a long search never stalls the event loop. The server remembers
nothing between requests.

A board travels as a 3x3 grid of stacks, bottom piece first. Reserves can be
left out, since they follow from what is on the board. A client that sends
them anyway must send the counts the grid implies.

Run with: uvicorn web.app:app
"""

import logging
from typing import Literal, Optional

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, field_validator

from gobblet.board import Board, InvalidBoardError, Move, Place, apply_move, new_game, winner
from gobblet.constants import BOARD_SIZE, MAX_DEPTH, SEARCH_DEPTH
from gobblet.movegen import legal_moves
from gobblet.pieces import Piece, Player, Size
from gobblet.search import search
from interface.notation import move_command

# ---------------------------------------------------------------------------
# Setup
# ---------------------------------------------------------------------------

logging.basicConfig(level=logging.INFO)
_log = logging.getLogger(__name__)

app = FastAPI(title="Gobblet AI", version="1.0.0")

OwnerName = Literal["orange", "blue"]
SizeName = Literal["small", "medium", "large"]

_PLAYERS: dict[str, Player] = {"orange": Player.ORANGE, "blue": Player.BLUE}
_SIZES: dict[str, Size] = {"small": Size.SMALL, "medium": Size.MEDIUM, "large": Size.LARGE}


# ---------------------------------------------------------------------------
# Request / response models
# ---------------------------------------------------------------------------


class PieceModel(BaseModel):
    owner: OwnerName
    size: SizeName


class BoardModel(BaseModel):
    """
    A position on the wire.

    Fields:
        squares:  squares[row][col] is the stack on that square, bottom first.
        reserves: Off-board counts per player and size. Always filled in on
                  responses; optional on requests.
    """

    squares: list[list[list[PieceModel]]]
    reserves: Optional[dict[OwnerName, dict[SizeName, int]]] = None

    @field_validator("squares")
    @classmethod
    def check_grid_shape(cls, v: list) -> list:
        """Reject anything that is not a 3x3 grid."""
        if len(v) != BOARD_SIZE or any(len(row) != BOARD_SIZE for row in v):
            raise ValueError(f"squares must be a {BOARD_SIZE}x{BOARD_SIZE} grid of stacks")
        return v


class MoveModel(BaseModel):
    """
    A move on the wire.

    Fields:
        kind:    "place" (from reserve) or "relocate" (from another square).
        owner:   The moving player.
        size:    Size of the moving piece.
        source:  [row, col] of the square the piece leaves (relocate only).
        target:  [row, col] of the square the piece lands on.
        command: The same move in console notation, e.g. "place L B2".
    """

    kind: Literal["place", "relocate"]
    owner: OwnerName
    size: SizeName
    source: Optional[tuple[int, int]] = None
    target: tuple[int, int]
    command: str


class PositionRequest(BaseModel):
    board: BoardModel
    player: OwnerName


class MoveRequest(PositionRequest):
    """
    Client request for the engine's move.

    Fields:
        depth: Search depth in plies (clamped to [1, MAX_DEPTH] so a client
               cannot tie up a worker with a runaway search).
    """

    depth: int = SEARCH_DEPTH

    @field_validator("depth")
    @classmethod
    def clamp_depth(cls, v: int) -> int:
        """Clamp depth to a safe operating range."""
        return max(1, min(v, MAX_DEPTH))


class LegalMovesResponse(BaseModel):
    moves: list[MoveModel]


class MoveResponse(BaseModel):
    """
    Engine response after computing its move.

    Fields:
        move:   The engine's move.
        board:  The position after the move is applied.
        score:  Evaluation from the engine's perspective (positive = good
                for the engine; +-10000 is a forced win/loss in the horizon).
        depth:  Search depth used.
        nodes:  Positions visited by the search.
        winner: Winner after the move, if the move ended the game.
    """

    move: MoveModel
    board: BoardModel
    score: int
    depth: int
    nodes: int
    winner: Optional[OwnerName] = None


# ---------------------------------------------------------------------------
# Conversion between wire models and engine values
# ---------------------------------------------------------------------------


def _player_name(player: Player) -> str:
    return player.name.lower()


def board_from_model(model: BoardModel) -> Board:
    """
    Build an engine Board from a request model.

    Raises:
        HTTPException 400: the layout breaks covering or conservation, or
            echoed reserves disagree with the pieces on the board.
    """
    stacks = [
        [[Piece(_PLAYERS[p.owner], _SIZES[p.size]) for p in stack] for stack in row]
        for row in model.squares
    ]
    try:
        board = Board.from_stacks(stacks)
    except InvalidBoardError as exc:
        raise HTTPException(status_code=400, detail=f"Invalid board: {exc}") from exc

    if model.reserves is not None:
        for owner, counts in model.reserves.items():
            for size, count in counts.items():
                expected = board.reserve_count(_PLAYERS[owner], _SIZES[size])
                if count != expected:
                    raise HTTPException(
                        status_code=400,
                        detail=f"Invalid board: {owner} {size} reserve is {count}, "
                               f"pieces on the board leave {expected}",
                    )
    return board


def board_to_model(board: Board) -> BoardModel:
    squares = [
        [
            [PieceModel(owner=_player_name(p.owner), size=p.size.name.lower()) for p in board.stack(row, col)]
            for col in range(BOARD_SIZE)
        ]
        for row in range(BOARD_SIZE)
    ]
    reserves = {
        _player_name(player): {size.name.lower(): count for size, count in board.reserve(player).items()}
        for player in Player
    }
    return BoardModel(squares=squares, reserves=reserves)


def move_to_model(move: Move) -> MoveModel:
    return MoveModel(
        kind="place" if isinstance(move, Place) else "relocate",
        owner=_player_name(move.player),
        size=move.piece.size.name.lower(),
        source=None if isinstance(move, Place) else move.source,
        target=move.target,
        command=move_command(move),
    )


# ---------------------------------------------------------------------------
# API routes
# ---------------------------------------------------------------------------


@app.get("/api/new-game", response_model=BoardModel)
def api_new_game() -> BoardModel:
    """Return the starting position."""
    return board_to_model(new_game())


@app.post("/api/legal-moves", response_model=LegalMovesResponse)
def api_legal_moves(request: PositionRequest) -> LegalMovesResponse:
    """List the legal moves for `player`, in the engine's generation order."""
    board = board_from_model(request.board)
    moves = legal_moves(board, _PLAYERS[request.player])
    return LegalMovesResponse(moves=[move_to_model(m) for m in moves])


@app.post("/api/move", response_model=MoveResponse)
def api_move(request: MoveRequest) -> MoveResponse:
    """
    Compute the engine's move for the given position.

    Validates the board, confirms the game is not over, runs the fixed-depth
    search, applies the move, and returns the result.

    Args:
        request: MoveRequest with the board, the side to move and the depth.

    Returns:
        MoveResponse with the move, the resulting board, score and statistics.

    Raises:
        HTTPException 400: invalid board, game already over, or no legal move.
        HTTPException 500: the search itself failed.
    """
    board = board_from_model(request.board)
    player = _PLAYERS[request.player]

    won = winner(board)
    if won is not None:
        raise HTTPException(
            status_code=400,
            detail=f"Game is already over: {_player_name(won)} wins",
        )

    try:
        result = search(board, player, request.depth)
    except Exception as exc:
        _log.exception("Engine search failed for player=%s depth=%d", request.player, request.depth)
        raise HTTPException(status_code=500, detail=f"Engine error: {exc}") from exc

    if result.move is None:
        raise HTTPException(status_code=400, detail=f"No legal move for {request.player}")

    _log.info(
        "Move=%s score=%d depth=%d nodes=%d time=%dms",
        move_command(result.move),
        result.score,
        result.depth,
        result.nodes,
        result.elapsed_ms,
    )

    after = apply_move(board, result.move)
    won = winner(after)
    return MoveResponse(
        move=move_to_model(result.move),
        board=board_to_model(after),
        score=result.score,
        depth=result.depth,
        nodes=result.nodes,
        winner=_player_name(won) if won is not None else None,
    )
