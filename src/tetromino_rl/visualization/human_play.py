from __future__ import annotations

import argparse
import logging
import threading
from typing import Callable, Dict, List, Optional

import pygame

from tetromino_rl.game import BlockDropGame, GameConfig, PollingScheduler, RunStatus
from tetromino_rl.scores import LeaderboardEntry, ScoreClient
from .renderer import Renderer, leaderboard_lines


logger = logging.getLogger(__name__)


class LeaderboardView:
    """Ranking overlay state; the list is fetched off the game loop."""

    def __init__(self, client: ScoreClient) -> None:
        self.client = client
        self.visible = False
        self.entries: Optional[List[LeaderboardEntry]] = None

    def toggle(self) -> None:
        self.visible = not self.visible
        if self.visible:
            self.entries = None
            threading.Thread(target=self._load, name="leaderboard-fetch", daemon=True).start()

    def _load(self) -> None:
        self.entries = self.client.fetch_leaderboard()

    def lines(self) -> Optional[List[str]]:
        return leaderboard_lines(self.entries) if self.visible else None


def _commands(game: BlockDropGame) -> Dict[int, Callable[[], bool]]:
    return {
        pygame.K_LEFT: game.move_left,
        pygame.K_RIGHT: game.move_right,
        pygame.K_DOWN: game.soft_drop,
        pygame.K_UP: game.rotate,
        pygame.K_SPACE: game.hard_drop,
        pygame.K_p: game.toggle_pause,
    }


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Play the falling-block game with the keyboard")
    p.add_argument("--variant", choices=["basic", "extended"], default="extended")
    p.add_argument("--seed", type=int, default=None)
    p.add_argument("--nickname", type=str, default="",
                   help="Name sent with the score; empty lets the server pick one")
    p.add_argument("--api-url", type=str, default=None,
                   help="Score API base URL (defaults to $TETROMINO_API_URL)")
    p.add_argument("--cell-size", type=int, default=28)
    p.add_argument("--log-level", type=str, default="INFO")
    return p


def run(args: argparse.Namespace) -> None:
    logging.basicConfig(level=args.log_level.upper(),
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    make_config = GameConfig.extended if args.variant == "extended" else GameConfig.basic
    client = ScoreClient(api_url=args.api_url)

    pygame.init()
    try:
        clock = pygame.time.Clock()
        scheduler = PollingScheduler(pygame.time.get_ticks)
        game = BlockDropGame(make_config(random_seed=args.seed), scheduler=scheduler)
        commands = _commands(game)
        renderer = Renderer(cell_size=args.cell_size)
        screen = pygame.display.set_mode(renderer.window_size(game.grid.width, game.grid.height))
        pygame.display.set_caption("Tetromino - Human Play")

        leaderboard = LeaderboardView(client)
        submitted = False
        running = True
        while running:
            # Input handling
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYDOWN:
                    if event.key == pygame.K_ESCAPE:
                        running = False
                    elif event.key == pygame.K_r:
                        game.reset()
                        submitted = False
                    elif event.key == pygame.K_l:
                        leaderboard.toggle()
                    elif event.key == pygame.K_RETURN and game.status is RunStatus.GAME_OVER:
                        if not submitted:
                            submitted = True
                            client.submit(game.score_submission(args.nickname),
                                          silent=not args.nickname)
                    else:
                        command = commands.get(event.key)
                        if command is not None:
                            command()

            # Gravity
            scheduler.run_pending()

            renderer.draw(screen, game.snapshot(), leaderboard.lines())
            clock.tick(60)
    finally:
        pygame.quit()
        client.close()


def main() -> None:
    run(build_parser().parse_args())


if __name__ == "__main__":  # pragma: no cover
    main()
