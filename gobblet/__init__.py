"""
Gobblet engine package.

This package implements the game-state engine for Gobblet Gobblers, a
stacking tic-tac-toe: board model, legal move generation, a hand-crafted
evaluation function, and fixed-depth negamax search with alpha-beta pruning.

Modules:
    pieces:    Player, Size, and Piece value types
    constants: Board geometry, evaluation weights, and search parameters
    board:     Immutable Board, Place/Relocate moves, apply_move, winner
    movegen:   Legal move generation in a fixed, deterministic order
    evaluate:  Static position evaluation (lines, position, material, hidden state)
    search:    Negamax search with alpha-beta pruning
"""

from gobblet.board import (
    Board,
    IllegalMoveError,
    InvalidBoardError,
    Move,
    Place,
    Relocate,
    apply_move,
    new_game,
    winner,
)
from gobblet.movegen import legal_moves
from gobblet.pieces import Piece, Player, Size
from gobblet.search import SearchResult, best_move

__all__ = [
    "Board",
    "IllegalMoveError",
    "InvalidBoardError",
    "Move",
    "Piece",
    "Place",
    "Player",
    "Relocate",
    "SearchResult",
    "Size",
    "apply_move",
    "best_move",
    "legal_moves",
    "new_game",
    "winner",
]
