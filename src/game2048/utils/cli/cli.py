import argparse
import logging
import sys


def setup_logging(log_file="game2048.log", level=logging.INFO):
    """
    Set up logging configuration.

    Args:
        log_file: Path to the log file, or None to log to stdout only
        level: Logging level
    """
    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.insert(0, logging.FileHandler(log_file, encoding='utf-8'))
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(levelname)s - %(message)s',
        handlers=handlers
    )


def parse_args(args=None):
    """
    Parse command-line arguments.

    Args:
        args: Command-line arguments (defaults to sys.argv)

    Returns:
        Parsed arguments
    """
    parser = argparse.ArgumentParser(
        description="2048 AI play, replay and statistics"
    )

    # General options
    parser.add_argument("--seed", type=int, default=None,
                        help="Random seed for tile spawning and the AI (default: random)")
    parser.add_argument("--output-dir", type=str, default=None,
                        help="Directory for replays and plots (default: none written)")
    parser.add_argument("--log-file", type=str, default=None,
                        help="Also log to this file")
    parser.add_argument("--verbose", action="store_true",
                        help="Log debug messages")

    # Game options
    parser.add_argument("--board-size", type=int, default=4,
                        help="Board size (default: 4)")
    parser.add_argument("--target", type=int, default=2048,
                        help="Winning tile (default: 2048)")
    parser.add_argument("--games", type=int, default=1,
                        help="Number of games to play (default: 1)")
    parser.add_argument("--max-steps", type=int, default=5000,
                        help="Maximum moves per game (default: 5000)")
    parser.add_argument("--render", action="store_true",
                        help="Print the final board of every game")

    # AI options
    parser.add_argument("--algorithm", type=str, default="expectimax",
                        choices=["greedy", "expectimax", "mcts"],
                        help="Move-selection algorithm (default: expectimax)")
    parser.add_argument("--depth", type=int, default=None,
                        help="Expectimax search depth in plies")
    parser.add_argument("--playouts", type=int, default=None,
                        help="MCTS playouts per move")

    return parser.parse_args(args)
