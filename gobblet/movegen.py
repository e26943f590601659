"""
Legal move generation.

The order of the returned list is part of the contract. The search keeps the
first of several equally scored moves and prunes based on what it has seen
so far, so a different order would pick different moves. The generator is
therefore a pure function of (board, player) and always emits:

    1. Placements, size-major: one family per size the player still holds
       in reserve (two Mediums in reserve give one family of Medium
       placements), then cells row-major. Families are ordered by how many
       pieces of the size are left, most first, smallest first among equal
       counts. A fresh reserve runs S, M, L; after a Small has been placed
       it runs M, L, S.
    2. Relocations, cell-major: source cells row-major holding one of the
       player's pieces on top, then target cells row-major, source skipped.
"""

from gobblet.board import Board, Move, Place, Relocate
from gobblet.constants import CELLS
from gobblet.pieces import Piece, Player, Size


def placement_sizes(board: Board, player: Player) -> list[Size]:
    """Sizes `player` can place, in the order their families are generated."""
    in_reserve = [size for size in Size if board.reserve_count(player, size) > 0]
    return sorted(in_reserve, key=lambda size: -board.reserve_count(player, size))


def legal_moves(board: Board, player: Player) -> list[Move]:
    """
    Return every legal move for `player` on `board`, placements first.

    An empty list means the player cannot move. That is a valid outcome,
    not an error; callers treat the position as a leaf.
    """
    tops = board.tops()
    moves: list[Move] = []

    for size in placement_sizes(board, player):
        piece = Piece(player, size)
        for cell, top in zip(CELLS, tops):
            if piece.covers(top):
                moves.append(Place(piece, cell))

    for source, piece in zip(CELLS, tops):
        if piece is None or piece.owner != player:
            continue
        for target, top in zip(CELLS, tops):
            if target != source and piece.covers(top):
                moves.append(Relocate(piece, source, target))

    return moves
