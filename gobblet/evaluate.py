"""
Static evaluation: score a position from one player's point of view.

The search needs a number for every leaf so it can compare moves. A won or
lost position gets +-WIN_SCORE. Anything else is the sum of four terms, each
symmetric between the two sides (the opponent's share is subtracted):

    Lines        Uncontested lines are potential wins. Two of three visible
                 pieces is worth far more than one; a line that both sides
                 occupy can no longer be won by either and scores nothing.
    Position     The center sits on four lines and each corner on three, so
                 holding them is worth a flat bonus.
    Material     Bigger visible pieces are harder to cover and can cover
                 more, so each visible piece counts by size.
    Hidden       The one term that looks below the surface. Covering an
                 opponent's piece traps it, which is good. But the moment our
                 piece moves away the trapped piece is visible again, and if
                 that would complete or nearly complete an opponent line the
                 cover is really a liability.

Only visible (top) pieces take part in the first three terms. The hidden term
simulates the reveal on Board.uncover(), a fresh value, so the board being
evaluated is never modified.
"""

from gobblet.board import Board, winner
from gobblet.constants import (
    CELLS,
    CENTER,
    CENTER_CONTROL_SCORE,
    CORNER_CONTROL_SCORE,
    CORNERS,
    LINES,
    ONE_IN_A_ROW_SCORE,
    PIECE_POWER,
    REVEAL_LOSS_MULTIPLIER,
    REVEAL_THREAT_PENALTY,
    TRAPPED_PIECE_BONUS,
    TWO_IN_A_ROW_SCORE,
    WIN_SCORE,
)
from gobblet.pieces import Piece, Player

_CELL_INDEX = {cell: idx for idx, cell in enumerate(CELLS)}


def evaluate(board: Board, perspective: Player) -> int:
    """
    Score `board` for `perspective`; higher is better for that player.

    Args:
        board:       The position to score. Not modified.
        perspective: The player whose point of view the score takes.

    Returns:
        WIN_SCORE if `perspective` has a completed line, -WIN_SCORE if the
        opponent does, otherwise the sum of the line, position, material and
        hidden-state terms.

    Example:
        >>> from gobblet.board import new_game
        >>> evaluate(new_game(), Player.ORANGE)
        0
    """
    won = winner(board)
    if won is not None:
        return WIN_SCORE if won == perspective else -WIN_SCORE

    tops = board.tops()
    return (
        score_lines(tops, perspective)
        + score_position(tops, perspective)
        + score_material(tops, perspective)
        + score_hidden_state(board, perspective)
    )


def _line_counts(tops: tuple[Piece | None, ...], line, player: Player) -> tuple[int, int]:
    """Count visible pieces on `line` owned by `player` and by the opponent."""
    mine = theirs = 0
    for cell in line:
        piece = tops[_CELL_INDEX[cell]]
        if piece is None:
            continue
        if piece.owner == player:
            mine += 1
        else:
            theirs += 1
    return mine, theirs


def score_lines(tops: tuple[Piece | None, ...], player: Player) -> int:
    """Line potential: +100 per open two-in-a-row, +10 per open single, mirrored."""
    score = 0
    for line in LINES:
        mine, theirs = _line_counts(tops, line, player)
        if mine and not theirs:
            if mine == 2:
                score += TWO_IN_A_ROW_SCORE
            elif mine == 1:
                score += ONE_IN_A_ROW_SCORE
        elif theirs and not mine:
            if theirs == 2:
                score -= TWO_IN_A_ROW_SCORE
            elif theirs == 1:
                score -= ONE_IN_A_ROW_SCORE
    return score


def score_position(tops: tuple[Piece | None, ...], player: Player) -> int:
    """Center and corner control by whoever's piece is on top."""
    score = 0
    center = tops[_CELL_INDEX[CENTER]]
    if center is not None:
        score += CENTER_CONTROL_SCORE if center.owner == player else -CENTER_CONTROL_SCORE
    for cell in CORNERS:
        piece = tops[_CELL_INDEX[cell]]
        if piece is not None:
            score += CORNER_CONTROL_SCORE if piece.owner == player else -CORNER_CONTROL_SCORE
    return score


def score_material(tops: tuple[Piece | None, ...], player: Player) -> int:
    """Sum of size weights of visible pieces, ours minus theirs."""
    score = 0
    for piece in tops:
        if piece is None:
            continue
        power = PIECE_POWER[piece.size]
        score += power if piece.owner == player else -power
    return score


def count_threats(board: Board, player: Player) -> int:
    """Number of lines where `player` shows two pieces and the opponent none."""
    tops = board.tops()
    threats = 0
    for line in LINES:
        mine, theirs = _line_counts(tops, line, player)
        if mine == 2 and theirs == 0:
            threats += 1
    return threats


def score_hidden_state(board: Board, player: Player) -> int:
    """
    Risk and reward of opponent pieces buried directly under ours.

    For every stack whose top is `player`'s and whose second piece is the
    opponent's, add TRAPPED_PIECE_BONUS, then look at the board with our top
    piece lifted off. If the opponent would have won outright, apply
    REVEAL_THREAT_PENALTY x REVEAL_LOSS_MULTIPLIER; otherwise, if they would
    have at least one open two-in-a-row, apply REVEAL_THREAT_PENALTY once.

    Only the piece directly beneath the top is considered; deeper pieces
    would need two reveals before they matter.
    """
    opponent = player.opponent()
    score = 0
    for (row, col), stack in zip(CELLS, board.squares):
        if len(stack) < 2:
            continue
        top, hidden = stack[-1], stack[-2]
        if top.owner != player or hidden.owner != opponent:
            continue

        score += TRAPPED_PIECE_BONUS

        revealed = board.uncover(row, col)
        if winner(revealed) == opponent:
            score += REVEAL_THREAT_PENALTY * REVEAL_LOSS_MULTIPLIER
        elif count_threats(revealed, opponent) > 0:
            score += REVEAL_THREAT_PENALTY
    return score
