#!/usr/bin/env python3
"""
TrainAI command-line entry point.
Turns a chat message into a structured workout using Claude.
"""

import argparse
import json
import sys

from trainai.config import get_api_key, load_config
from trainai.llm_client import CoachClient
from trainai.plan_assembler import PlanAssembler
from trainai.plan_normalizer import build_chat_summary
from trainai.workout_store import WorkoutStore


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        description="Generate a workout plan from a free-text request."
    )
    parser.add_argument("message", nargs="?", default="", help="What you want, e.g. '45 min push workout'")
    parser.add_argument("--user", required=True, help="User id whose profile and equipment to use")
    parser.add_argument("--split", default=None, help="Optional split hint (push/pull/legs/upper/full/hiit)")
    parser.add_argument("--minutes", type=int, default=None, help="Optional session length override")
    parser.add_argument("--style", default=None, help="Optional training style (strength/balanced/hiit)")
    parser.add_argument("--style-hint", default=None, help="Optional persona to borrow from, e.g. 'Chris Hemsworth'")
    parser.add_argument(
        "--config",
        default=None,
        help="Path to config.yaml (default: config.yaml next to this file)",
    )
    parser.add_argument("--db-path", default=None, help="Override the SQLite database path")
    parser.add_argument("--json", action="store_true", help="Print the raw result as JSON")
    return parser.parse_args(argv)


def print_banner():
    """Print welcome banner."""
    banner = """
╔══════════════════════════════════════════════════════════════╗
║                                                              ║
║        TRAINAI WORKOUT BUILDER                               ║
║        Powered by Claude AI                                  ║
║                                                              ║
╚══════════════════════════════════════════════════════════════╝
    """
    print(banner)


def main(argv=None):
    """Main application flow."""
    args = parse_args(argv)
    if not args.json:
        print_banner()

    try:
        config = load_config(args.config)
    except FileNotFoundError as e:
        print(f"Error: {e}")
        sys.exit(1)

    api_key = get_api_key(config)
    if not api_key:
        api_key_env = config["claude"]["api_key_env"]
        print(f"\n❌ Error: {api_key_env} not found in environment variables!")
        print("\nPlease:")
        print("1. Copy .env.example to .env")
        print("2. Add your Anthropic API key to .env")
        print("3. Get your API key from: https://console.anthropic.com/")
        sys.exit(1)

    store = WorkoutStore(args.db_path or config["database"]["path"])
    store.init_schema()
    client = CoachClient(api_key=api_key, config=config)
    assembler = PlanAssembler(client=client, store=store, config=config)

    request = {
        "user_id": args.user,
        "message": args.message,
        "split": args.split,
        "minutes": args.minutes,
        "style": args.style,
        "style_hint": args.style_hint,
    }

    try:
        result = assembler.handle(request)
    except ValueError as e:
        print(f"\n❌ Invalid request: {e}")
        sys.exit(2)
    finally:
        store.close()

    if args.json:
        print(json.dumps(result, indent=2, default=str))
        return 0 if result["ok"] else 1

    print("\n" + "=" * 60)
    print("COACH")
    print("=" * 60)
    print(result["coach_message"])

    if result["ok"] and result["workout"]["main"]:
        print("\n" + "=" * 60)
        print("YOUR WORKOUT")
        print("=" * 60)
        print(build_chat_summary(result["workout"], minutes=result["debug"].get("minutes")))

    if not result["ok"]:
        print(f"\n⚠ {result.get('error')}")
        return 1
    return 0


if __name__ == "__main__":
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        print("\n\nExiting...")
        sys.exit(0)
