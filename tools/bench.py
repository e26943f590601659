#!/usr/bin/env python3
"""
Benchmark: measure nodes searched and time per move at the search depth.

Run before and after any change to the move generator, evaluator or search
to quantify its cost. A lower node count at the same depth means more
effective pruning; a higher NPS means cheaper move generation or evaluation.
Because the search is deterministic, the chosen move for each position
should only change when the evaluation or move order changes on purpose.

Usage: python3 tools/bench.py [depth]
"""
import sys
import os
import time

REPO = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if REPO not in sys.path:
    sys.path.insert(0, REPO)

from gobblet.board import apply_move, new_game
from gobblet.constants import SEARCH_DEPTH
from gobblet.movegen import legal_moves
from gobblet.pieces import Player
from gobblet.search import search
from interface.notation import move_command, parse_move

# Fixed positions spanning opening, middlegame, and tactical stacks, given as
# the moves that reach them (Orange moves first). Never edit these: the same
# positions are used for every comparison.
POSITIONS = [
    ("Start",        []),
    ("Center L",     ["place L B2"]),
    ("Corners",      ["place L B2", "place L A1", "place M C3", "place M A3"]),
    ("Gobble",       ["place M B2", "place L B2", "place L A1", "place S C3"]),
    ("Reloc",        ["place L B2", "place L A1", "move B2 C3", "place M B2"]),
    ("Blocked",      ["place S A1", "place M B2", "place S A2", "place L A3"]),
]


def build_position(commands: list[str]):
    """Replay `commands` from the start. Returns (board, side to move)."""
    board = new_game()
    player = Player.ORANGE
    for command in commands:
        move = parse_move(command, legal_moves(board, player))
        if move is None:
            raise ValueError(f"illegal benchmark move {command!r} for {player.label}")
        board = apply_move(board, move)
        player = player.opponent()
    return board, player


def run_position(label: str, commands: list[str], depth: int) -> dict:
    """Search one position and return its metrics.

    Args:
        label: Human-readable position name for display.
        commands: Move commands that reach the position from the start.
        depth: Search depth in plies.

    Returns:
        Dict with keys: label, move, score, nodes, nps, time_ms.
    """
    board, player = build_position(commands)
    start = time.monotonic()
    result = search(board, player, depth)
    time_ms = max(1, int((time.monotonic() - start) * 1000))
    return {
        "label": label,
        "move": move_command(result.move) if result.move else "(none)",
        "score": result.score,
        "nodes": result.nodes,
        "nps": result.nodes * 1000 // time_ms,
        "time_ms": time_ms,
    }


def main() -> None:
    """Run all benchmark positions and print a summary table."""
    depth = int(sys.argv[1]) if len(sys.argv) > 1 else SEARCH_DEPTH
    print(f"Gobblet engine benchmark: {sys.executable}")
    print(f"Depth: {depth}")
    print()
    print(
        f"{'Position':<10} {'Move':<12} {'Score':>6} "
        f"{'Nodes':>9} {'NPS':>8} {'Time(ms)':>9}"
    )
    print("-" * 59)

    results = []
    for label, commands in POSITIONS:
        r = run_position(label, commands, depth)
        results.append(r)
        print(
            f"{r['label']:<10} {r['move']:<12} {r['score']:>6} "
            f"{r['nodes']:>9,} {r['nps']:>8,} {r['time_ms']:>9,}"
        )

    avg_nodes = sum(r["nodes"] for r in results) // len(results)
    avg_time = sum(r["time_ms"] for r in results) // len(results)
    avg_nps = sum(r["nps"] for r in results) // len(results)
    print("-" * 59)
    print(
        f"{'AVERAGE':<10} {'':<12} {'':<6} "
        f"{avg_nodes:>9,} {avg_nps:>8,} {avg_time:>9,}"
    )


if __name__ == "__main__":
    main()
