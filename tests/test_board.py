"""
Unit tests for the board model.

Tests verify:
1. The starting position and reserve bookkeeping
2. apply_move for placements and relocations, and that inputs are untouched
3. Illegal moves are rejected instead of corrupting the board
4. Win detection over rows, columns and diagonals, using top pieces only
5. Covering and conservation hold in every position reached by play
"""

import pytest

from gobblet.board import (
    Board,
    IllegalMoveError,
    InvalidBoardError,
    Place,
    Relocate,
    apply_move,
    check_invariants,
    new_game,
    winner,
)
from gobblet.constants import CELLS, LINES, PIECES_PER_SIZE
from gobblet.movegen import legal_moves
from gobblet.pieces import Piece, Player, Size

O = Player.ORANGE
B = Player.BLUE

OS, OM, OL = Piece(O, Size.SMALL), Piece(O, Size.MEDIUM), Piece(O, Size.LARGE)
BS, BM, BL = Piece(B, Size.SMALL), Piece(B, Size.MEDIUM), Piece(B, Size.LARGE)


def empty_layout():
    return [[[] for _ in range(3)] for _ in range(3)]


class TestNewGame:
    """The starting position."""

    def test_grid_is_empty(self):
        board = new_game()
        assert all(board.top_of(row, col) is None for row, col in CELLS)
        assert all(stack == () for stack in board.squares)

    def test_full_reserves(self):
        board = new_game()
        for player in Player:
            assert board.reserve(player) == {size: PIECES_PER_SIZE for size in Size}

    def test_no_winner_and_valid(self):
        board = new_game()
        assert winner(board) is None
        check_invariants(board)


class TestApplyMove:
    """Placements and relocations produce new boards."""

    def test_place_large_in_center(self):
        board = new_game()
        move = Place(OL, (1, 1))
        assert move in legal_moves(board, O)

        after = apply_move(board, move)
        assert after.top_of(1, 1) == OL
        assert after.reserve_count(O, Size.LARGE) == 1
        assert after.reserve_count(O, Size.SMALL) == 2
        assert after.reserve(B) == board.reserve(B)

    def test_input_board_unchanged(self):
        board = new_game()
        snapshot = Board(squares=board.squares, reserves=board.reserves)
        apply_move(board, Place(OL, (1, 1)))
        assert board == snapshot
        assert board.top_of(1, 1) is None

    def test_deterministic(self):
        board = apply_move(new_game(), Place(OM, (0, 0)))
        move = Place(BL, (0, 0))
        assert apply_move(board, move) == apply_move(board, move)

    def test_gobble_covers_smaller_piece(self):
        board = apply_move(new_game(), Place(OS, (1, 1)))
        board = apply_move(board, Place(BM, (1, 1)))
        assert board.top_of(1, 1) == BM
        assert board.stack(1, 1) == (OS, BM)

    def test_relocate_exposes_piece_beneath(self):
        board = apply_move(new_game(), Place(OS, (0, 0)))
        board = apply_move(board, Place(BL, (0, 0)))
        after = apply_move(board, Relocate(BL, (0, 0), (2, 2)))
        assert after.top_of(0, 0) == OS
        assert after.top_of(2, 2) == BL
        assert after.reserves == board.reserves

    def test_stacking_scenario(self):
        # Orange S, then Blue M on top, then Orange L over both.
        board = Board.from_stacks([[[], [], []], [[], [OS, BM], []], [[], [], []]])
        assert board.top_of(1, 1) == BM
        move = Place(OL, (1, 1))
        assert move in legal_moves(board, O)
        after = apply_move(board, move)
        assert after.top_of(1, 1) == OL
        assert after.stack(1, 1) == (OS, BM, OL)


class TestIllegalMoves:
    """apply_move fails fast on moves the rules forbid."""

    def test_place_on_equal_size(self):
        board = apply_move(new_game(), Place(BM, (1, 1)))
        with pytest.raises(IllegalMoveError):
            apply_move(board, Place(OM, (1, 1)))

    def test_place_on_larger(self):
        board = apply_move(new_game(), Place(BL, (1, 1)))
        with pytest.raises(IllegalMoveError):
            apply_move(board, Place(OS, (1, 1)))

    def test_place_from_empty_reserve(self):
        board = apply_move(new_game(), Place(OL, (0, 0)))
        board = apply_move(board, Place(OL, (0, 1)))
        with pytest.raises(IllegalMoveError):
            apply_move(board, Place(OL, (0, 2)))

    def test_relocate_opponent_piece(self):
        board = apply_move(new_game(), Place(BM, (0, 0)))
        with pytest.raises(IllegalMoveError):
            apply_move(board, Relocate(OM, (0, 0), (1, 1)))

    def test_relocate_covered_piece(self):
        board = apply_move(new_game(), Place(OS, (0, 0)))
        board = apply_move(board, Place(BM, (0, 0)))
        with pytest.raises(IllegalMoveError):
            apply_move(board, Relocate(OS, (0, 0), (1, 1)))

    def test_relocate_onto_same_square(self):
        board = apply_move(new_game(), Place(OM, (0, 0)))
        with pytest.raises(IllegalMoveError):
            apply_move(board, Relocate(OM, (0, 0), (0, 0)))

    def test_target_off_board(self):
        with pytest.raises(IllegalMoveError):
            apply_move(new_game(), Place(OS, (3, 0)))

    def test_rejected_move_leaves_board_alone(self):
        board = apply_move(new_game(), Place(BL, (1, 1)))
        with pytest.raises(IllegalMoveError):
            apply_move(board, Place(OM, (1, 1)))
        assert board.top_of(1, 1) == BL
        check_invariants(board)


class TestWinner:
    """Win detection uses visible pieces only."""

    @pytest.mark.parametrize("line", [
        ((0, 0), (0, 1), (0, 2)),
        ((2, 0), (2, 1), (2, 2)),
        ((0, 1), (1, 1), (2, 1)),
        ((0, 0), (1, 1), (2, 2)),
        ((0, 2), (1, 1), (2, 0)),
    ])
    def test_line_wins(self, line):
        layout = empty_layout()
        for (row, col), piece in zip(line, (OS, OM, OL)):
            layout[row][col] = [piece]
        assert winner(Board.from_stacks(layout)) == O

    def test_mixed_line_does_not_win(self):
        layout = empty_layout()
        layout[0][0], layout[0][1], layout[0][2] = [OS], [BM], [OL]
        assert winner(Board.from_stacks(layout)) is None

    def test_covered_piece_does_not_count(self):
        layout = empty_layout()
        layout[0][0], layout[0][1], layout[0][2] = [OS], [OL], [OM, BL]
        # Row 0 holds three Orange pieces but shows Orange, Orange, Blue.
        assert winner(Board.from_stacks(layout)) is None

    def test_covering_completes_line(self):
        layout = empty_layout()
        layout[0][0], layout[0][1], layout[0][2] = [OS], [OM], [BS]
        board = Board.from_stacks(layout)
        assert winner(board) is None
        assert winner(apply_move(board, Place(OL, (0, 2)))) == O

    def test_first_line_in_scan_order(self):
        # Contrived: both players show a full row; row 0 is scanned first.
        layout = empty_layout()
        layout[0] = [[OS], [OM], [OL]]
        layout[2] = [[BS], [BM], [BL]]
        assert winner(Board.from_stacks(layout)) == O
        layout[0], layout[2] = layout[2], layout[0]
        assert winner(Board.from_stacks(layout)) == B


class TestFromStacks:
    """Building boards from layouts validates them."""

    def test_reserves_are_derived(self):
        layout = empty_layout()
        layout[1][1] = [OS, BL]
        board = Board.from_stacks(layout)
        assert board.reserve_count(O, Size.SMALL) == 1
        assert board.reserve_count(B, Size.LARGE) == 1
        assert board.reserve_count(O, Size.LARGE) == 2

    def test_rejects_non_increasing_stack(self):
        layout = empty_layout()
        layout[0][0] = [OL, BS]
        with pytest.raises(InvalidBoardError):
            Board.from_stacks(layout)

    def test_rejects_equal_sizes_stacked(self):
        layout = empty_layout()
        layout[0][0] = [OM, BM]
        with pytest.raises(InvalidBoardError):
            Board.from_stacks(layout)

    def test_rejects_third_copy(self):
        layout = empty_layout()
        layout[0][0], layout[0][1], layout[0][2] = [OS], [OS], [OS]
        with pytest.raises(InvalidBoardError):
            Board.from_stacks(layout)

    def test_rejects_wrong_shape(self):
        with pytest.raises(InvalidBoardError):
            Board.from_stacks([[[], []], [[], []]])

    def test_uncover_is_a_new_value(self):
        layout = empty_layout()
        layout[1][1] = [BS, OM]
        board = Board.from_stacks(layout)
        lifted = board.uncover(1, 1)
        assert lifted.top_of(1, 1) == BS
        assert board.top_of(1, 1) == OM


class TestInvariantsUnderPlay:
    """Covering and conservation hold in every reachable position."""

    def test_check_invariants(self, reachable_positions):
        for board, _ in reachable_positions:
            check_invariants(board)

    def test_piece_conservation(self, reachable_positions):
        for board, _ in reachable_positions:
            for player in Player:
                for size in Size:
                    on_board = sum(
                        1 for stack in board.squares for p in stack if p == Piece(player, size)
                    )
                    assert on_board + board.reserve_count(player, size) == PIECES_PER_SIZE

    def test_stacks_strictly_increasing(self, reachable_positions):
        for board, _ in reachable_positions:
            for stack in board.squares:
                sizes = [p.size for p in stack]
                assert sizes == sorted(set(sizes))

    def test_winner_owns_a_full_line(self, reachable_positions):
        for board, _ in reachable_positions:
            won = winner(board)
            if won is None:
                continue
            tops = board.tops()
            assert any(
                all(
                    tops[row * 3 + col] is not None and tops[row * 3 + col].owner == won
                    for row, col in line
                )
                for line in LINES
            )
