from __future__ import annotations

import argparse
import logging
import sys
from typing import Dict, List

import numpy as np

from tetris_duel.game import BoardEngine, GameConfig

from .driver import AgentDriver


def play_game(seed: int, max_moves: int = 5000) -> Dict[str, int]:
    engine = BoardEngine(GameConfig(random_seed=seed), name=f"agent-{seed}")
    driver = AgentDriver()
    engine.start()
    moves = 0
    while engine.running and moves < max_moves:
        if not driver.make_move(engine):
            # No placement found: let gravity decide
            engine.move(0, 1)
        moves += 1
    return {
        "score": engine.score,
        "lines": engine.lines_cleared_total,
        "pieces": engine.pieces_locked,
        "moves": moves,
    }


def _print_progress(idx: int, total: int, result: Dict[str, int]) -> None:
    width = 30
    filled = int(width * (idx + 1) / max(1, total))
    bar = "=" * filled + "." * (width - filled)
    msg = f"\r[{bar}] {idx + 1}/{total}  score={result['score']}  lines={result['lines']}"
    print(msg, end="", file=sys.stdout, flush=True)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Run the heuristic agent headless and report scores")
    p.add_argument("--games", type=int, default=10)
    p.add_argument("--seed", type=int, default=0)
    p.add_argument("--max-moves", type=int, default=5000)
    p.add_argument("--no-progress", action="store_true")
    p.add_argument("--verbose", action="store_true")
    return p


def main() -> None:
    args = build_parser().parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(message)s",
    )

    results: List[Dict[str, int]] = []
    for i in range(args.games):
        result = play_game(args.seed + i, args.max_moves)
        results.append(result)
        if not args.no_progress:
            _print_progress(i, args.games, result)
        else:
            print(f"Game {i + 1}/{args.games} score={result['score']} lines={result['lines']} "
                  f"pieces={result['pieces']}")
    if not args.no_progress:
        print()
    if not results:
        return

    scores = np.array([r["score"] for r in results], dtype=np.float64)
    lines = np.array([r["lines"] for r in results], dtype=np.float64)
    print(f"Mean score {scores.mean():.1f} (max {scores.max():.0f}), mean lines {lines.mean():.1f}")


if __name__ == "__main__":  # pragma: no cover
    main()
