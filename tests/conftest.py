"""
Shared fixtures.

Property tests run over positions reached by seeded random play from the
start, so every board they see is one the rules can actually produce.
"""

import random

import pytest

from gobblet.board import apply_move, new_game, winner
from gobblet.movegen import legal_moves
from gobblet.pieces import Player


def random_game(seed: int, max_plies: int = 30):
    """Yield (board, player_to_move) along one seeded random game."""
    rng = random.Random(seed)
    board = new_game()
    player = Player.ORANGE
    yield board, player
    for _ in range(max_plies):
        if winner(board) is not None:
            return
        moves = legal_moves(board, player)
        if not moves:
            return
        board = apply_move(board, rng.choice(moves))
        player = player.opponent()
        yield board, player


@pytest.fixture(scope="session")
def reachable_positions():
    """A few hundred (board, player_to_move) pairs from 20 random games."""
    positions = []
    for seed in range(20):
        positions.extend(random_game(seed))
    return positions


@pytest.fixture(scope="session")
def midgame_positions(reachable_positions):
    """Non-terminal positions with at least four pieces on the board."""
    return [
        (board, player)
        for board, player in reachable_positions
        if winner(board) is None and sum(len(s) for s in board.squares) >= 4
    ]
