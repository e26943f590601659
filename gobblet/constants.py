"""
Engine constants: board geometry, evaluation weights, and search parameters.

All numeric constants used throughout the engine are defined here so that
the evaluator and the search never need to introduce magic numbers of their
own. Centralizing them keeps tuning in one place.

Scores are plain integers. The evaluator adds them up term by term and the
search compares them directly, so there is never a float in the loop.
"""

from gobblet.pieces import Size

# ---------------------------------------------------------------------------
# Board geometry
# ---------------------------------------------------------------------------
# The grid is 3x3; squares are addressed as (row, col) and stored row-major.

BOARD_SIZE: int = 3
CELLS: tuple[tuple[int, int], ...] = tuple(
    (row, col) for row in range(BOARD_SIZE) for col in range(BOARD_SIZE)
)

# Each player starts with two pieces of every size, all off the board.
PIECES_PER_SIZE: int = 2

# The eight winning lines. The order matters: winner() reports the first
# completed line, scanning rows 0-2, columns 0-2, main diagonal, anti-diagonal.
LINES: tuple[tuple[tuple[int, int], ...], ...] = (
    # Rows
    ((0, 0), (0, 1), (0, 2)),
    ((1, 0), (1, 1), (1, 2)),
    ((2, 0), (2, 1), (2, 2)),
    # Columns
    ((0, 0), (1, 0), (2, 0)),
    ((0, 1), (1, 1), (2, 1)),
    ((0, 2), (1, 2), (2, 2)),
    # Diagonals
    ((0, 0), (1, 1), (2, 2)),
    ((0, 2), (1, 1), (2, 0)),
)

CENTER: tuple[int, int] = (1, 1)
CORNERS: tuple[tuple[int, int], ...] = ((0, 0), (0, 2), (2, 0), (2, 2))

# ---------------------------------------------------------------------------
# Evaluation weights
# ---------------------------------------------------------------------------
# WIN_SCORE must stay far above the largest non-terminal evaluation
# (8 lines x 100 + 85 positional + 27 material + trapping bonuses) so that a
# won position always outranks any heuristic advantage.

WIN_SCORE: int = 10_000

TWO_IN_A_ROW_SCORE: int = 100
ONE_IN_A_ROW_SCORE: int = 10

CENTER_CONTROL_SCORE: int = 25
CORNER_CONTROL_SCORE: int = 15

# Weight of a visible top piece, by size. Large pieces cannot be covered,
# so they are worth much more than their size rank alone suggests.
PIECE_POWER: dict[Size, int] = {
    Size.SMALL:  1,
    Size.MEDIUM: 4,
    Size.LARGE:  9,
}

# Covering an opponent's piece immobilizes it...
TRAPPED_PIECE_BONUS: int = 20
# ...but lifting our piece off later would reveal it again.
REVEAL_THREAT_PENALTY: int = -200
# Multiplier applied to REVEAL_THREAT_PENALTY when the reveal is an outright loss.
REVEAL_LOSS_MULTIPLIER: int = 10

# ---------------------------------------------------------------------------
# Search parameters
# ---------------------------------------------------------------------------
# SEARCH_DEPTH is the fixed lookahead in plies. There is no iterative
# deepening: every search runs this depth to completion.
SEARCH_DEPTH: int = 5

# MAX_DEPTH caps caller-supplied depths (the web API clamps to it). Depth 6
# already takes several seconds in the opening on a laptop.
MAX_DEPTH: int = 6

# Initial alpha-beta window. Any bound strictly outside [-WIN_SCORE, WIN_SCORE]
# works; SCORE_INF is also the starting "best so far" at each node.
SCORE_INF: int = 1_000_000
