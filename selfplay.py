from __future__ import annotations

import argparse
import logging

from config import setup_logging, get_engine_settings
from tethari import DRAW, Game, Player
from tethari.search import SearchEngine

logger = logging.getLogger("selfplay")


def parse_args() -> argparse.Namespace:
    ap = argparse.ArgumentParser(description="Play engine-vs-engine games from the default layout")
    ap.add_argument("--games", type=int, default=1, help="Number of games to play")
    ap.add_argument("--depth", type=int, default=None, help="Search depth (defaults to engine settings)")
    ap.add_argument("--seed", type=int, default=None, help="Seed for the tie-break random source")
    ap.add_argument("--max-plies", type=int, default=400, help="Stop a game after this many half-moves")
    return ap.parse_args()


def play_game(engine: SearchEngine, depth: int, max_plies: int) -> Game:
    game = Game()
    while not game.game_over and game.move_count < max_plies:
        move = engine.find_best_move(game, depth)
        if move is None:
            game.game_over = True
            game.winner = game.active_player.opponent
            break
        game.execute_move(move)
    return game


def main() -> None:
    setup_logging()
    args = parse_args()
    settings = get_engine_settings()
    depth = args.depth or settings.default_depth
    engine = SearchEngine(seed=args.seed if args.seed is not None else settings.seed,
                          time_limit_ms=settings.time_limit_ms)

    results = {Player.WHITE: 0, Player.BLACK: 0, DRAW: 0, None: 0}
    for game_num in range(args.games):
        game = play_game(engine, depth, args.max_plies)
        for entry in game.move_log:
            logger.info("%3d. %-24s %s", entry.number, entry.white, entry.black)
        results[game.winner] += 1
        winner = game.winner.value if isinstance(game.winner, Player) else (game.winner or "unfinished")
        logger.info("Game %d: %s after %d half-moves", game_num + 1, winner, game.move_count)

    logger.info("White %d | Black %d | Draws %d | Unfinished %d",
                results[Player.WHITE], results[Player.BLACK], results[DRAW], results[None])


if __name__ == "__main__":
    main()
