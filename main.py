"""
Command-line host shell: simulate bot matches or serve live rooms.
"""

import argparse
import dataclasses

from coup_engine.config.game_config import default_config
from coup_engine.config.config_loader import load_config
from coup_engine.agents import DIFFICULTIES
from coup_engine.match import CoupMatch


def main():
    """Entry point for running matches."""
    parser = argparse.ArgumentParser(
        description="Run Coup bot matches or host live rooms",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py                                   # One bot match with the default config
  python main.py --config configs/default.yaml     # Use a YAML config
  python main.py --bots 6 --difficulty hardcore    # Six hardcore bots
  python main.py --games 20 --quiet --seed 7       # Twenty reproducible matches, summary only
  python main.py --serve --port 5000               # Host Socket.IO rooms for browser clients
        """
    )
    parser.add_argument(
        "--config",
        "-c",
        type=str,
        default=None,
        help="Path to YAML configuration file (default: use default config)"
    )
    parser.add_argument(
        "--seed",
        "-s",
        type=int,
        default=None,
        help="Random seed for reproducible matches (if not provided, one is generated and shown)"
    )
    parser.add_argument(
        "--bots",
        "-b",
        type=int,
        default=None,
        help="Number of bot seats (overrides config)"
    )
    parser.add_argument(
        "--difficulty",
        "-d",
        choices=DIFFICULTIES,
        default=None,
        help="Bot difficulty (overrides config)"
    )
    parser.add_argument(
        "--games",
        "-g",
        type=int,
        default=1,
        help="Number of matches to simulate (default: 1)"
    )
    parser.add_argument(
        "--quiet",
        "-q",
        action="store_true",
        help="Only print the final tally"
    )
    parser.add_argument(
        "--serve",
        action="store_true",
        help="Start the Socket.IO game server instead of simulating"
    )
    parser.add_argument("--host", type=str, default='127.0.0.1', help="Host to bind to (default: 127.0.0.1)")
    parser.add_argument("--port", "-p", type=int, default=5000, help="Port for the game server (default: 5000)")

    args = parser.parse_args()

    # Load config from YAML if provided, otherwise use default
    config = load_config(args.config) if args.config else default_config

    overrides = {"random_seed": args.seed}
    if args.bots is not None:
        overrides["bot_players"] = args.bots
        overrides["human_players"] = 0
    if args.difficulty is not None:
        overrides["bot_difficulty"] = args.difficulty
    if args.quiet:
        overrides["use_announcements"] = False
    config = dataclasses.replace(config, **overrides)

    if args.serve:
        from coup_engine.web.game_server import GameServer
        GameServer(port=args.port, host=args.host, config=config).start()
        return

    if config.human_players:
        parser.error("Simulation needs bot seats only; use --serve to play with humans")

    print("Coup Match Simulation")
    print("=" * 60)
    if args.config:
        print(f"Using config: {args.config}")
    print(f"Bots: {config.bot_players} ({config.bot_difficulty})")
    print("=" * 60)

    wins = {}
    for game_index in range(args.games):
        seed = config.random_seed + game_index if config.random_seed is not None else None
        match = CoupMatch(config=dataclasses.replace(config, random_seed=seed))
        winner = match.run_game()
        wins[winner] = wins.get(winner, 0) + 1

        if match.run_recorder and not args.quiet:
            run_path = match.run_recorder.get_run_path()
            if run_path:
                print(f"\nMatch history saved to: {run_path}")

    print("\nWINS")
    print("-" * 60)
    for name, count in sorted(wins.items(), key=lambda item: -item[1]):
        print(f"  • {name}: {count}")


if __name__ == "__main__":
    main()
