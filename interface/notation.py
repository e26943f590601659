"""
Text notation for cells, pieces and moves.

Cells are written as a column letter and a row digit, like a spreadsheet:
A1 is the top-left square (row 0, col 0), B2 is the center, C3 the
bottom-right. Sizes are S, M and L.

Move commands (case-insensitive):
    place <size> [at|on] <cell>      e.g. "place L B2", "place s on a1"
    move <cell> [to] <cell>          e.g. "move A1 C3", "move a1 to c3"

parse_move() never builds a Move from scratch. It matches the command
against the legal moves it is given, so anything it returns is legal by
construction and anything illegal is simply not found.
"""

import re
from typing import Sequence

from gobblet.board import Board, Cell, Move, Place, Relocate
from gobblet.constants import BOARD_SIZE
from gobblet.pieces import Player, Size

SIZE_LETTERS: dict[Size, str] = {
    Size.SMALL:  "S",
    Size.MEDIUM: "M",
    Size.LARGE:  "L",
}
_LETTER_SIZES = {letter.lower(): size for size, letter in SIZE_LETTERS.items()}

_PLACE_RE = re.compile(r"^place\s+([sml])\s+(?:(?:at|on)\s+)?([a-c])([1-3])$")
_MOVE_RE = re.compile(r"^move\s+([a-c])([1-3])\s+(?:to\s+)?([a-c])([1-3])$")

# ANSI colours per player: 256-colour orange and standard blue.
_COLORS: dict[Player, str] = {
    Player.ORANGE: "\x1b[38;5;208m",
    Player.BLUE:   "\x1b[34m",
}
_RESET = "\x1b[0m"


def parse_cell(col_letter: str, row_digit: str) -> Cell:
    return int(row_digit) - 1, ord(col_letter.lower()) - ord("a")


def format_cell(cell: Cell) -> str:
    row, col = cell
    return f"{chr(ord('A') + col)}{row + 1}"


def parse_move(text: str, legal: Sequence[Move]) -> Move | None:
    """
    Match a move command against `legal`.

    Args:
        text:  User input, e.g. "place L B2" or "move A1 to C3".
        legal: The legal moves for the player to move.

    Returns:
        The member of `legal` the command describes, or None if the command
        is malformed or names an illegal move.
    """
    command = " ".join(text.lower().split())

    match = _PLACE_RE.match(command)
    if match:
        size = _LETTER_SIZES[match.group(1)]
        target = parse_cell(match.group(2), match.group(3))
        for move in legal:
            if isinstance(move, Place) and move.piece.size == size and move.target == target:
                return move
        return None

    match = _MOVE_RE.match(command)
    if match:
        source = parse_cell(match.group(1), match.group(2))
        target = parse_cell(match.group(3), match.group(4))
        for move in legal:
            if isinstance(move, Relocate) and move.source == source and move.target == target:
                return move
        return None

    return None


def move_command(move: Move) -> str:
    """The command that parse_move() maps back to `move`."""
    if isinstance(move, Place):
        return f"place {SIZE_LETTERS[move.piece.size]} {format_cell(move.target)}"
    return f"move {format_cell(move.source)} {format_cell(move.target)}"


def colorize(text: str, player: Player, enabled: bool = True) -> str:
    if not enabled:
        return text
    return f"{_COLORS[player]}{text}{_RESET}"


def format_move(move: Move, color: bool = False) -> str:
    """Human-readable description, e.g. "Orange placed L on B2"."""
    name = colorize(move.player.label, move.player, color)
    size = SIZE_LETTERS[move.piece.size]
    if isinstance(move, Place):
        return f"{name} placed {size} on {format_cell(move.target)}"
    return f"{name} moved {size} from {format_cell(move.source)} to {format_cell(move.target)}"


def render_board(board: Board, color: bool = False) -> str:
    """
    Draw the reserves and the grid of visible pieces.

    Example (color disabled, Orange L on B2):

        Reserves:
        Orange: S(2) M(2) L(1)
        Blue: S(2) M(2) L(2)

           A  B  C
        1 [ ][ ][ ]
        2 [ ][L][ ]
        3 [ ][ ][ ]
    """
    lines = ["Reserves:"]
    for player in Player:
        counts = " ".join(
            f"{SIZE_LETTERS[size]}({count})" for size, count in board.reserve(player).items()
        )
        lines.append(f"{colorize(player.label, player, color)}: {counts}")

    lines.append("")
    header = "".join(f" {chr(ord('A') + col)} " for col in range(BOARD_SIZE))
    lines.append(f"  {header}".rstrip())
    for row in range(BOARD_SIZE):
        cells = []
        for col in range(BOARD_SIZE):
            piece = board.top_of(row, col)
            if piece is None:
                cells.append("[ ]")
            else:
                cells.append(colorize(f"[{SIZE_LETTERS[piece.size]}]", piece.owner, color))
        lines.append(f"{row + 1} " + "".join(cells))
    return "\n".join(lines)
