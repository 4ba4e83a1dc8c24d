"""
Seed the local SQLite store with the exercise catalog and, optionally, a
demo user with equipment.

Usage:
    python3 scripts/seed_catalog.py
    python3 scripts/seed_catalog.py --user demo --equipment Barbell Dumbbells
"""

import argparse
import os
import sys

import yaml

# Ensure project root is on the path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from trainai.config import load_config
from trainai.workout_store import WorkoutStore


ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))


def parse_args():
    parser = argparse.ArgumentParser(description="Seed the TrainAI SQLite store.")
    parser.add_argument(
        "--catalog",
        default=os.path.join(ROOT, "data", "exercise_catalog.yaml"),
        help="Path to the exercise catalog YAML",
    )
    parser.add_argument("--db-path", default=None, help="Override the database path from config.yaml")
    parser.add_argument("--user", default=None, help="Optional demo user id to create")
    parser.add_argument("--equipment", nargs="*", default=[], help="Equipment names for the demo user")
    parser.add_argument("--minutes", type=int, default=45, help="Preferred duration for the demo user")
    return parser.parse_args()


def load_catalog(path):
    with open(path, "r") as f:
        data = yaml.safe_load(f) or {}
    return data.get("exercises") or []


def seed(store, catalog, user=None, equipment=None, minutes=45):
    """Write catalog rows (and an optional user) into the store; returns the exercise count."""
    count = 0
    for row in catalog:
        store.upsert_exercise(
            row["name"],
            category=row.get("category"),
            exercise_phase=row.get("exercise_phase"),
            rest_seconds_default=row.get("rest_seconds_default"),
            set_duration_seconds=row.get("set_duration_seconds"),
            equipment_required=row.get("equipment_required"),
        )
        count += 1

    if user:
        store.upsert_profile(user, preferred_workout_duration=minutes)
        for name in equipment or []:
            store.add_user_equipment(user, name)
    return count


def main():
    args = parse_args()
    config = load_config()
    db_path = args.db_path or config["database"]["path"]

    if not os.path.exists(args.catalog):
        print(f"Catalog not found: {args.catalog}")
        return

    store = WorkoutStore(db_path)
    store.init_schema()
    try:
        count = seed(store, load_catalog(args.catalog), args.user, args.equipment, args.minutes)
        summary = store.count_summary()
    finally:
        store.close()

    print("\nSeed complete:")
    print(f"  Catalog rows written: {count}")
    for table, rows in summary.items():
        print(f"  {table + ':':<22}{rows}")


if __name__ == "__main__":
    main()
