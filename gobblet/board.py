"""
Board state: stacks, reserves, moves, and the rules that connect them.

A Board is an immutable value. Each of the nine squares holds a tuple of
pieces ordered bottom to top; only the last one is visible. Each player also
keeps a reserve of pieces not yet on the board, stored as counts per size.

apply_move() never touches its input: it builds a new Board that shares the
untouched stacks with the old one. Because stacks are tuples, sharing is
safe, and the search can hold any number of successor boards at once without
copying. Nothing in the engine ever deep-copies a board.

Two invariants hold for every board reachable from new_game():

    Covering:      every stack is strictly size-increasing bottom to top.
    Conservation:  for every (owner, size), pieces on the board plus pieces
                   in reserve equal PIECES_PER_SIZE.

apply_move() enforces both by rejecting illegal moves with IllegalMoveError
instead of producing a corrupt board.
"""

from dataclasses import dataclass
from typing import Sequence, Union

from gobblet.constants import BOARD_SIZE, CELLS, LINES, PIECES_PER_SIZE
from gobblet.pieces import Piece, Player, Size

Cell = tuple[int, int]
Stack = tuple[Piece, ...]

_CELL_SET = frozenset(CELLS)


class IllegalMoveError(ValueError):
    """A move was applied that the rules do not allow on this board."""


class InvalidBoardError(ValueError):
    """A board layout breaks the covering or conservation invariant."""


@dataclass(frozen=True)
class Place:
    """Put a reserve piece onto `target`."""

    piece: Piece
    target: Cell

    @property
    def player(self) -> Player:
        return self.piece.owner


@dataclass(frozen=True)
class Relocate:
    """Move the mover's top piece at `source` onto `target`."""

    piece: Piece
    source: Cell
    target: Cell

    @property
    def player(self) -> Player:
        return self.piece.owner


Move = Union[Place, Relocate]


def _index(cell: Cell) -> int:
    row, col = cell
    return row * BOARD_SIZE + col


@dataclass(frozen=True)
class Board:
    """
    One position: nine stacks plus both players' reserves.

    Attributes:
        squares:  Nine stacks in row-major order, each a tuple of pieces
                  from bottom to top. An empty square is an empty tuple.
        reserves: Per player (indexed by Player value), the number of
                  off-board pieces of each size, indexed by size - 1.
    """

    squares: tuple[Stack, ...]
    reserves: tuple[tuple[int, ...], ...]

    def stack(self, row: int, col: int) -> Stack:
        return self.squares[row * BOARD_SIZE + col]

    def top_of(self, row: int, col: int) -> Piece | None:
        """Return the visible piece at (row, col), or None if the square is empty."""
        stack = self.squares[row * BOARD_SIZE + col]
        return stack[-1] if stack else None

    def tops(self) -> tuple[Piece | None, ...]:
        """Visible pieces of all nine squares, row-major."""
        return tuple(stack[-1] if stack else None for stack in self.squares)

    def reserve_count(self, player: Player, size: Size) -> int:
        return self.reserves[player][size - 1]

    def reserve(self, player: Player) -> dict[Size, int]:
        """Off-board piece counts for `player`, keyed by size."""
        return {size: self.reserves[player][size - 1] for size in Size}

    def uncover(self, row: int, col: int) -> "Board":
        """
        Return a copy of this board with the top piece at (row, col) lifted off.

        The lifted piece is simply dropped, so the result breaks conservation
        and is not a game state. The evaluator uses it to ask "what would the
        opponent see if this piece moved away?" without touching the real board.
        """
        idx = row * BOARD_SIZE + col
        squares = list(self.squares)
        squares[idx] = squares[idx][:-1]
        return Board(squares=tuple(squares), reserves=self.reserves)

    @classmethod
    def from_stacks(cls, stacks: Sequence[Sequence[Sequence[Piece]]]) -> "Board":
        """
        Build a board from a 3x3 layout of stacks (bottom to top).

        Reserves are derived from conservation: whatever is not on the board
        is off it. The result is validated with check_invariants().

        Raises:
            InvalidBoardError: if the layout is not 3x3, holds more than
                PIECES_PER_SIZE pieces of some (owner, size), or has a stack
                that is not strictly size-increasing.
        """
        if len(stacks) != BOARD_SIZE or any(len(row) != BOARD_SIZE for row in stacks):
            raise InvalidBoardError(f"expected a {BOARD_SIZE}x{BOARD_SIZE} grid of stacks")

        squares = tuple(
            tuple(Piece(Player(p.owner), Size(p.size)) for p in stack)
            for row in stacks
            for stack in row
        )

        on_board = {(player, size): 0 for player in Player for size in Size}
        for stack in squares:
            for piece in stack:
                on_board[(piece.owner, piece.size)] += 1

        reserves = tuple(
            tuple(PIECES_PER_SIZE - on_board[(player, size)] for size in Size)
            for player in Player
        )
        board = cls(squares=squares, reserves=reserves)
        check_invariants(board)
        return board


def new_game() -> Board:
    """Return the starting position: empty grid, every piece in reserve."""
    empty: Stack = ()
    full = tuple(PIECES_PER_SIZE for _ in Size)
    return Board(
        squares=tuple(empty for _ in CELLS),
        reserves=tuple(full for _ in Player),
    )


def apply_move(board: Board, move: Move) -> Board:
    """
    Return the board that results from playing `move` on `board`.

    Place takes one piece of the given (owner, size) out of the owner's
    reserve and pushes it on the target stack. Relocate pops the top of the
    source stack and pushes it on the target stack, exposing whatever was
    underneath. `board` itself is never modified.

    Raises:
        IllegalMoveError: the target is off the grid or holds a piece of equal
            or larger size, a placed piece is not in reserve, or a relocated
            piece is not the mover's top piece at the source.
    """
    piece = move.piece
    if move.target not in _CELL_SET:
        raise IllegalMoveError(f"target {move.target} is off the board")

    squares = list(board.squares)
    target_idx = _index(move.target)
    target_stack = squares[target_idx]
    target_top = target_stack[-1] if target_stack else None
    reserves = board.reserves

    if isinstance(move, Place):
        if board.reserve_count(piece.owner, piece.size) <= 0:
            raise IllegalMoveError(
                f"{piece.owner.label} has no {piece.size.name.lower()} piece in reserve"
            )
        own = list(reserves[piece.owner])
        own[piece.size - 1] -= 1
        reserves = tuple(
            tuple(own) if player == piece.owner else reserves[player] for player in Player
        )
    elif isinstance(move, Relocate):
        if move.source not in _CELL_SET:
            raise IllegalMoveError(f"source {move.source} is off the board")
        if move.source == move.target:
            raise IllegalMoveError(f"cannot relocate a piece onto its own square {move.source}")
        source_idx = _index(move.source)
        source_stack = squares[source_idx]
        if not source_stack or source_stack[-1] != piece:
            raise IllegalMoveError(f"{piece} is not the top piece at {move.source}")
        squares[source_idx] = source_stack[:-1]
    else:
        raise TypeError(f"not a move: {move!r}")

    if not piece.covers(target_top):
        raise IllegalMoveError(f"{piece} cannot cover {target_top} at {move.target}")

    squares[target_idx] = target_stack + (piece,)
    return Board(squares=tuple(squares), reserves=reserves)


def winner(board: Board) -> Player | None:
    """
    Return the owner of the first completed line, or None.

    Lines are scanned rows first, then columns, then the two diagonals.
    Normal play can never complete lines for both players at once; on a
    contrived board that does, the first line in scan order wins.
    """
    tops = board.tops()
    for line in LINES:
        first = tops[_index(line[0])]
        if first is None:
            continue
        if all(
            (piece := tops[_index(cell)]) is not None and piece.owner == first.owner
            for cell in line[1:]
        ):
            return first.owner
    return None


def check_invariants(board: Board) -> None:
    """
    Verify covering and conservation on `board`.

    Raises:
        InvalidBoardError: describing the first violation found.
    """
    if len(board.squares) != len(CELLS):
        raise InvalidBoardError(f"expected {len(CELLS)} squares, got {len(board.squares)}")

    counts = {(player, size): 0 for player in Player for size in Size}
    for idx, stack in enumerate(board.squares):
        for lower, upper in zip(stack, stack[1:]):
            if upper.size <= lower.size:
                raise InvalidBoardError(
                    f"square {CELLS[idx]}: {upper} stacked on {lower} breaks the covering rule"
                )
        for piece in stack:
            counts[(piece.owner, piece.size)] += 1

    for player in Player:
        for size in Size:
            in_reserve = board.reserve_count(player, size)
            if in_reserve < 0:
                raise InvalidBoardError(
                    f"{player.label} {size.name.lower()}: more than {PIECES_PER_SIZE} on the board"
                )
            total = counts[(player, size)] + in_reserve
            if total != PIECES_PER_SIZE:
                raise InvalidBoardError(
                    f"{player.label} {size.name.lower()}: {total} pieces accounted for, "
                    f"expected {PIECES_PER_SIZE}"
                )
