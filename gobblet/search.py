"""
Search entry point: fixed-depth negamax with alpha-beta pruning.

negamax() is a plain recursive function over immutable boards. Each call
builds its successors with apply_move() and hands them down; nothing is
pushed and popped, so there is no shared board to restore on the way back
up.

Determinism:
    There is no randomness, no transposition table, and no move ordering
    beyond the generator's own order. The same (board, player, depth)
    always yields the same move. Ties are broken in favour of the first
    move in generator order because the running best is only replaced on a
    strictly greater score.

Perspective:
    Leaves are scored by evaluate() from the root player's (perspective's)
    point of view, then negated when the side to move at the leaf is the
    other player. From there the usual negamax negation on the way up gives
    each node a score from its own mover's point of view.

No legal moves:
    A node whose mover has no legal move is scored like a depth-0 leaf. This
    is a simplification, not draw detection.
"""

import logging
import time
from dataclasses import dataclass

from gobblet.board import Board, Move, apply_move, winner
from gobblet.constants import SCORE_INF, SEARCH_DEPTH
from gobblet.evaluate import evaluate
from gobblet.movegen import legal_moves
from gobblet.pieces import Player

_log = logging.getLogger(__name__)


@dataclass
class SearchState:
    """
    Per-search bookkeeping.

    Attributes:
        node_count: Number of negamax calls made so far, leaves included.
    """

    node_count: int = 0


@dataclass(frozen=True)
class SearchResult:
    """Outcome of one search: the chosen move and how it was reached."""

    move: Move | None
    score: int
    depth: int
    nodes: int
    elapsed_ms: int


def negamax(
    board: Board,
    depth: int,
    alpha: int,
    beta: int,
    mover: Player,
    perspective: Player,
    state: SearchState,
) -> tuple[int, Move | None]:
    """
    Negamax search with alpha-beta pruning.

    Args:
        board:       Position to search. Never modified.
        depth:       Remaining plies. 0 makes this node a leaf.
        alpha:       Lower bound of the window (best the mover can guarantee).
        beta:        Upper bound of the window (best the opponent allows).
        mover:       Player to move at this node.
        perspective: Player the static evaluation is taken for (the root mover).
        state:       Node counter shared by the whole search.

    Returns:
        (score, move): score from `mover`'s point of view, and the first move
        reaching it, or None at a leaf.
    """
    state.node_count += 1

    if depth == 0 or winner(board) is not None:
        sign = 1 if mover == perspective else -1
        return evaluate(board, perspective) * sign, None

    moves = legal_moves(board, mover)
    if not moves:
        sign = 1 if mover == perspective else -1
        return evaluate(board, perspective) * sign, None

    best_score = -SCORE_INF
    best_move = None
    opponent = mover.opponent()

    for move in moves:
        child = apply_move(board, move)
        score, _ = negamax(child, depth - 1, -beta, -alpha, opponent, perspective, state)
        score = -score

        if score > best_score:
            best_score = score
            best_move = move

        if best_score > alpha:
            alpha = best_score

        # Beta cutoff: the opponent already has a better option elsewhere.
        if alpha >= beta:
            break

    return best_score, best_move


def search(board: Board, player: Player, depth: int = SEARCH_DEPTH) -> SearchResult:
    """
    Run a full fixed-depth search for `player` and return the result.

    Args:
        board:  The current position. Not modified.
        player: The side to move; also the evaluation perspective.
        depth:  Lookahead in plies, at least 1.

    Returns:
        SearchResult. `move` is None if the position is already won or the
        player has no legal move; the caller decides what that means.

    Raises:
        ValueError: if depth is less than 1.
    """
    if depth < 1:
        raise ValueError(f"search depth must be at least 1, got {depth}")

    state = SearchState()
    start = time.monotonic()
    score, move = negamax(board, depth, -SCORE_INF, SCORE_INF, player, player, state)
    elapsed_ms = int((time.monotonic() - start) * 1000)

    _log.debug(
        "search player=%s depth=%d move=%s score=%d nodes=%d time=%dms",
        player.label, depth, move, score, state.node_count, elapsed_ms,
    )
    return SearchResult(
        move=move,
        score=score,
        depth=depth,
        nodes=state.node_count,
        elapsed_ms=elapsed_ms,
    )


def best_move(board: Board, player: Player, depth: int = SEARCH_DEPTH) -> Move | None:
    """Return the move the engine would play for `player`, or None if there is none."""
    return search(board, player, depth).move
