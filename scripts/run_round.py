"""Run one matching round against the CSV roster and store from the environment.

Pseudocode:
1) Load settings from .env / SYNCMATCH_* variables
2) Read the roster and participant records
3) Match, print intros to the console and append history
4) Print a brief summary

Notes:
- Use `--dry-run` to preview groups without writing history.
"""

from __future__ import annotations

import argparse
import logging
import random
import sys
from pathlib import Path

# Ensure project root (parent of scripts/) is on sys.path for package imports
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from rich.logging import RichHandler

from syncmatch.config import Settings
from syncmatch.ingest import CsvRosterSource
from syncmatch.job import run_round
from syncmatch.notifier import ConsoleNotifier
from syncmatch.store import CsvParticipantStore


def parse_args() -> argparse.Namespace:
    """Parse CLI arguments."""
    parser = argparse.ArgumentParser(description="Run one round of random syncs.")
    parser.add_argument("--dry-run", action="store_true", help="Compute groups only")
    parser.add_argument("--seed", type=int, default=None, help="Seed for the random source")
    return parser.parse_args()


def main() -> None:
    """Entry point to run a round with the configured roster and store.

    Raises:
        FileNotFoundError: If the roster CSV does not exist.
        InsufficientParticipants: If fewer than two members are on the roster.
    """
    args = parse_args()
    logging.basicConfig(level=logging.INFO, format="%(message)s", handlers=[RichHandler()])

    settings = Settings.from_env().with_overrides(seed=args.seed)
    print(f"[1/3] Roster: {settings.roster_csv}  Store: {settings.store_csv}")

    print("[2/3] Matching and notifying...")
    result = run_round(
        CsvRosterSource(settings.roster_csv),
        CsvParticipantStore(settings.store_csv),
        ConsoleNotifier(),
        settings,
        rng=random.Random(settings.seed),
        dry_run=args.dry_run,
    )

    triplets = len(result.triplets)
    print(f"[3/3] Done. {len(result.groups)} groups ({triplets} triplet) from {len(result.roster)} participants.")


if __name__ == "__main__":
    try:
        main()
    except Exception as e:
        print(f"Error: {e}")
        sys.exit(1)
