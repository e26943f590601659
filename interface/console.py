"""
Interactive console game: a human against the engine in the terminal.

The console is a thin driver around the engine. It owns the current board
and whose turn it is; every rule question goes to the gobblet package:

    legal_moves()  to validate what the human types (via parse_move)
    search()       to choose the engine's move
    apply_move()   to advance the game
    winner()       to detect the end

Output conventions:
    Game text (board, prompts, move log) goes to stdout through _send().
    Diagnostics go to stderr through _log(), so piping a game transcript
    never mixes the two.

Colour is ANSI and enabled only when stdout is a terminal.
"""

import sys
import os
from typing import Callable

# Running `python interface/console.py` puts interface/ on sys.path, not the
# repo root that holds the gobblet package.
_REPO_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if _REPO_ROOT not in sys.path:
    sys.path.insert(0, _REPO_ROOT)

from gobblet.board import Board, Move, apply_move, new_game, winner
from gobblet.constants import SEARCH_DEPTH
from gobblet.movegen import legal_moves
from gobblet.pieces import Player
from gobblet.search import search
from interface.notation import colorize, format_move, parse_move, render_board

MOVE_PROMPT = "Your move (e.g. 'place L B2' or 'move A1 to C3'): "


def _send(line: str = "") -> None:
    """Write a line of game output to stdout and flush immediately."""
    print(line, flush=True)


def _log(message: str) -> None:
    """Write a diagnostic message to stderr."""
    print(message, file=sys.stderr, flush=True)


class ConsoleGame:
    """
    One human-versus-engine game.

    Attributes:
        board:   The current position.
        current: The player to move.
        human:   The side the human plays.
        engine:  The side the engine plays.
        depth:   Search depth used for every engine move.
        color:   Whether to emit ANSI colour codes.
    """

    def __init__(
        self,
        read_line: Callable[[str], str] = input,
        depth: int = SEARCH_DEPTH,
        color: bool | None = None,
    ) -> None:
        self.read_line = read_line
        self.depth = depth
        self.color = sys.stdout.isatty() if color is None else color
        self.board: Board = new_game()
        self.human = Player.ORANGE
        self.engine = Player.BLUE
        self.current = Player.ORANGE

    # -----------------------------------------------------------------------
    # Setup
    # -----------------------------------------------------------------------

    def setup_players(self) -> None:
        """
        Ask which side the human plays and who moves first.

        Anything other than an explicit "B"/"blue" means Orange; anything
        other than an explicit "A"/"AI"/"E"/"engine" means the human starts.
        """
        side = self.read_line("Play as Orange (O) or Blue (B)? ").strip().upper()
        if side in ("B", "BLUE"):
            self.human, self.engine = Player.BLUE, Player.ORANGE
        else:
            self.human, self.engine = Player.ORANGE, Player.BLUE

        first = self.read_line("Who starts? (H)uman or (A)I? ").strip().upper()
        self.current = self.engine if first in ("A", "AI", "E", "ENGINE") else self.human

    # -----------------------------------------------------------------------
    # Turns
    # -----------------------------------------------------------------------

    def human_move(self) -> Move | None:
        """
        Prompt until the human enters a legal move.

        Returns:
            The chosen move, or None if the human typed "quit".
        """
        legal = legal_moves(self.board, self.human)
        while True:
            text = self.read_line(MOVE_PROMPT)
            if text.strip().lower() in ("quit", "exit"):
                return None
            move = parse_move(text, legal)
            if move is not None:
                return move
            _send("Illegal move. Try again.")

    def engine_move(self) -> Move | None:
        """Search for the engine's move and report how long it took."""
        _send(f"{self._name(self.engine)} is thinking (depth {self.depth})...")
        result = search(self.board, self.engine, self.depth)
        _send(f"Decided in {result.elapsed_ms / 1000:.2f}s ({result.nodes:,} nodes).")
        return result.move

    def play(self) -> Player | None:
        """
        Alternate turns until someone wins or the side to move cannot move.

        Returns:
            The winner, or None for a draw or a game the human quit.
        """
        while winner(self.board) is None:
            _send()
            _send(render_board(self.board, self.color))
            _send()
            _send(f"=== {self._name(self.current)} to move ===")

            if self.current == self.human:
                if not legal_moves(self.board, self.human):
                    _send(f"No legal move for {self._name(self.human)}. The game is a draw.")
                    return None
                move = self.human_move()
                if move is None:
                    _send("Game abandoned.")
                    return None
            else:
                move = self.engine_move()
                if move is None:
                    _send(f"No legal move for {self._name(self.engine)}. The game is a draw.")
                    return None

            self.board = apply_move(self.board, move)
            _send(f"> {format_move(move, self.color)}")
            self.current = self.current.opponent()

        _send()
        _send(render_board(self.board, self.color))
        won = winner(self.board)
        _send(f"\nGame over! Winner: {self._name(won)}")
        return won

    def _name(self, player: Player) -> str:
        return colorize(player.label, player, self.color)


def main() -> None:
    """
    Console entry point.

    End of input (Ctrl-D) or Ctrl-C ends the game quietly. Any other error
    is logged to stderr and re-raised.
    """
    _send("==================== Gobblet Gobblers ====================")
    game = ConsoleGame()
    try:
        game.setup_players()
        game.play()
    except (EOFError, KeyboardInterrupt):
        _send()
        _log("console: input closed, exiting")
    except Exception as e:
        _log(f"console: unhandled error: {e}")
        raise


if __name__ == "__main__":
    main()
