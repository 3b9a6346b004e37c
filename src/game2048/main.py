#!/usr/bin/env python
"""
Main entry point: let an AI play 2048 games through the command service,
record every game and report statistics.
"""

import logging
import os

from tqdm import tqdm

from .config import GameConfig, set_seeds
from .replay import Replay, replay_to_end
from .service import GameService
from .utils.cli import parse_args, setup_logging


def play_game(service, max_steps):
    """
    Play one recorded game with the enabled AI.

    Returns:
        The finished Replay
    """
    result = service.start_recording()
    for _ in range(max_steps):
        result = service.request_ai_move()
        if not result.ok:
            logging.info(result.error)
            break
        if result.payload["state"] != "playing":
            break
    result = service.stop_recording()
    if not result.ok:
        raise RuntimeError(result.error)
    return Replay.from_dict(result.payload)


def main(args=None):
    """Main function to run AI games."""
    args = parse_args(args)
    setup_logging(args.log_file, logging.DEBUG if args.verbose else logging.INFO)
    if args.seed is not None:
        set_seeds(args.seed)

    config = GameConfig(board_size=args.board_size, target_score=args.target,
                        allow_undo=False, seed=args.seed)
    agent_params = {"expectimax": {}, "mcts": {}}
    if args.depth is not None:
        agent_params["expectimax"]["depth"] = args.depth
    if args.playouts is not None:
        agent_params["mcts"]["num_playouts"] = args.playouts

    service = GameService(config, agent_params=agent_params)
    result = service.enable_ai(args.algorithm)
    if not result.ok:
        logging.error(result.error)
        return 1

    if args.output_dir:
        os.makedirs(args.output_dir, exist_ok=True)

    replays = []
    for game_index in tqdm(range(args.games), desc="Playing"):
        if game_index > 0:
            service.new_game()
        replay = play_game(service, args.max_steps)
        replays.append(replay)
        replayed = replay_to_end(replay)
        if replayed.score.current != replay.summary.score:
            logging.error(f"Replay of game {game_index + 1} did not reproduce the recorded score")
        logging.info(f"Game {game_index + 1}/{args.games}: score {replay.summary.score}, "
                     f"max tile {replay.summary.max_tile}, {replay.summary.moves} moves")
        if args.render:
            print(replayed.board.render())
        if args.output_dir:
            path = os.path.join(args.output_dir, f"replay_{game_index + 1:03d}.json")
            with open(path, "w") as f:
                f.write(replay.to_json(indent=2))

    summary = service.get_statistics_summary().payload
    logging.info("=" * 50)
    logging.info(f"Sessions: {summary['total_sessions']}, win rate {summary['win_rate'] * 100:.1f}%")
    logging.info(f"Average score: {summary['average_score']:.1f}, best score: {summary['best_score']}")
    logging.info(f"Best max tile: {summary['best_tile']}")
    for tile, count in summary["tile_counts"].items():
        logging.info(f"  {tile}: {count} games")

    if args.output_dir:
        from .stats import StatisticsManager
        from .utils.visualization import plot_statistics, visualize_replay

        history = StatisticsManager.from_dict(service.export_statistics().payload).history
        plot_statistics(history, os.path.join(args.output_dir, "statistics.png"))
        if replays:
            best = max(replays, key=lambda r: r.summary.score)
            visualize_replay(best, os.path.join(args.output_dir, "best_replay.png"))
        logging.info(f"Results saved to {args.output_dir}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
