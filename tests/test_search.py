"""
Unit tests for the negamax alpha-beta search.

Tests verify:
1. The engine takes an immediate win and blocks an immediate loss
2. The chosen move is always legal, and the search is deterministic
3. Positions with no move (won root, empty move list) return None
4. Alpha-beta returns the same score and move as plain negamax, in fewer nodes
"""

import pytest

from gobblet import search as search_module
from gobblet.board import Board, Place, apply_move, new_game, winner
from gobblet.constants import SCORE_INF, WIN_SCORE
from gobblet.evaluate import evaluate
from gobblet.movegen import legal_moves
from gobblet.pieces import Piece, Player, Size
from gobblet.search import SearchState, best_move, negamax, search

O = Player.ORANGE
B = Player.BLUE

OL = Piece(O, Size.LARGE)
BS = Piece(B, Size.SMALL)


def full_negamax(board: Board, depth: int, mover: Player, perspective: Player):
    """Reference negamax without pruning, with the same tie-breaking."""
    if depth == 0 or winner(board) is not None:
        sign = 1 if mover == perspective else -1
        return evaluate(board, perspective) * sign, None
    moves = legal_moves(board, mover)
    if not moves:
        sign = 1 if mover == perspective else -1
        return evaluate(board, perspective) * sign, None
    best_score, best = -SCORE_INF, None
    for move in moves:
        score, _ = full_negamax(apply_move(board, move), depth - 1, mover.opponent(), perspective)
        if -score > best_score:
            best_score, best = -score, move
    return best_score, best


def full_tree_nodes(board: Board, depth: int, mover: Player) -> int:
    """Node count of the unpruned tree, counted the way SearchState counts."""
    if depth == 0 or winner(board) is not None:
        return 1
    return 1 + sum(
        full_tree_nodes(apply_move(board, move), depth - 1, mover.opponent())
        for move in legal_moves(board, mover)
    )


@pytest.fixture
def orange_threat():
    """Orange L on A1 and B1, C1 empty; Blue S on A2 and C3, with no two in a line."""
    return Board.from_stacks([
        [[OL], [OL], []],
        [[BS], [], []],
        [[], [], [BS]],
    ])


class TestTactics:
    """Immediate wins and immediate defences."""

    @pytest.mark.parametrize("depth", [1, 2])
    def test_takes_immediate_win(self, orange_threat, depth):
        result = search(orange_threat, O, depth)
        assert result.move == Place(Piece(O, Size.SMALL), (0, 2))
        assert result.score == WIN_SCORE
        assert winner(apply_move(orange_threat, result.move)) == O

    def test_blocks_immediate_loss(self, orange_threat):
        move = best_move(orange_threat, B, depth=2)
        assert move is not None
        assert move.target == (0, 2)
        assert move.piece.size >= Size.MEDIUM
        after = apply_move(orange_threat, move)
        for reply in legal_moves(after, O):
            assert winner(apply_move(after, reply)) != O

    def test_opening_move_from_new_game(self):
        board = new_game()
        move = best_move(board, O, depth=2)
        assert move in legal_moves(board, O)


class TestContract:
    """Legality, determinism and the no-move result."""

    def test_move_is_legal(self, midgame_positions):
        for board, player in midgame_positions[::10]:
            move = best_move(board, player, depth=2)
            assert move in legal_moves(board, player)

    def test_deterministic(self, midgame_positions):
        board, player = midgame_positions[0]
        first = search(board, player, 2)
        second = search(board, player, 2)
        assert first.move == second.move
        assert first.score == second.score
        assert first.nodes == second.nodes

    def test_won_root_returns_none(self):
        board = Board.from_stacks([
            [[OL], [OL], [Piece(O, Size.SMALL)]],
            [[], [], []],
            [[], [], []],
        ])
        assert best_move(board, B, depth=3) is None
        assert best_move(board, O, depth=3) is None

    def test_no_legal_moves_returns_none(self, monkeypatch):
        monkeypatch.setattr(search_module, "legal_moves", lambda board, player: [])
        board = apply_move(new_game(), Place(OL, (1, 1)))
        result = search(board, B, 3)
        assert result.move is None
        assert result.score == evaluate(board, B)

    def test_rejects_zero_depth(self):
        with pytest.raises(ValueError):
            search(new_game(), O, 0)

    def test_leaf_sign_convention(self):
        board = apply_move(new_game(), Place(OL, (1, 1)))
        state = SearchState()
        score, move = negamax(board, 0, -SCORE_INF, SCORE_INF, B, O, state)
        assert move is None
        assert score == -evaluate(board, O)
        assert state.node_count == 1


class TestPruning:
    """Alpha-beta changes the work done, never the answer."""

    def test_matches_plain_negamax(self, midgame_positions):
        for board, player in midgame_positions[::15]:
            expected_score, expected_move = full_negamax(board, 2, player, player)
            result = search(board, player, 2)
            assert result.score == expected_score
            assert result.move == expected_move

    @pytest.mark.parametrize("depth", [2, 3])
    def test_cutoffs_skip_part_of_the_tree(self, orange_threat, depth):
        pruned = search(orange_threat, O, depth).nodes
        assert pruned < full_tree_nodes(orange_threat, depth, O)

    def test_node_count_after_early_win(self, orange_threat):
        # Orange has 26 moves: 5 Small and 7 Medium placements, 7 relocations
        # per Large. Place S C1 comes first and wins, raising alpha to
        # WIN_SCORE. Place M C1 also wins and is a single leaf. Every other
        # move is cut off after Blue's first reply, because no reply scores
        # below -WIN_SCORE for Blue, so each of those 24 costs two nodes.
        result = search(orange_threat, O, 2)
        assert result.score == WIN_SCORE
        assert result.nodes == 1 + 2 * 1 + 24 * 2
