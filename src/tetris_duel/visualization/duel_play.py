from __future__ import annotations

import argparse
import logging
from typing import Dict

import pygame

from tetris_duel.game import Action, GRID_HEIGHT, GRID_WIDTH
from tetris_duel.match import Match, MatchConfig, MatchResult
from .renderer import DuelRenderer


KEY_TO_ACTION: Dict[int, Action] = {
    pygame.K_LEFT: Action.LEFT,
    pygame.K_RIGHT: Action.RIGHT,
    pygame.K_DOWN: Action.SOFT_DROP,
    pygame.K_UP: Action.ROTATE,
}


def _report(result: MatchResult) -> None:
    winner = result.winner or "nobody"
    print(f"Game over - you {result.human_score}, AI {result.agent_score}, winner: {winner}")


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Play against the heuristic agent")
    p.add_argument("--seed", type=int, default=None)
    p.add_argument("--fps", type=int, default=60)
    p.add_argument("--cell-size", type=int, default=30)
    p.add_argument("--verbose", action="store_true")
    return p


def run() -> None:
    args = build_parser().parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(name)s %(message)s",
    )

    pygame.init()
    try:
        clock = pygame.time.Clock()
        match = Match(MatchConfig(random_seed=args.seed), on_finished=_report)
        renderer = DuelRenderer(cell_size=args.cell_size)
        screen = pygame.display.set_mode(renderer.window_size(GRID_HEIGHT, GRID_WIDTH))
        pygame.display.set_caption("Tetris Duel - Human vs AI")

        match.start()
        running = True
        while running:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYDOWN:
                    if event.key == pygame.K_ESCAPE:
                        running = False
                    elif event.key == pygame.K_r and match.finished:
                        match.reset()
                    else:
                        action = KEY_TO_ACTION.get(event.key)
                        if action is not None:
                            match.handle_input(action)

            if not match.finished:
                match.tick(pygame.time.get_ticks())

            renderer.draw(screen, match)
            pygame.display.flip()
            clock.tick(args.fps)
    finally:
        pygame.quit()


if __name__ == "__main__":  # pragma: no cover
    run()
