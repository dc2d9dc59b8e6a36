#!/usr/bin/env python3
"""Generate a synthetic roster and participant store for local trial rounds."""

import argparse
import json
import random
import sys
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List

import pandas as pd
import shortuuid

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from syncmatch.data_models import LOCATION_PREFERENCE_TOKENS, LocationPreference
from syncmatch.store import STORE_COLUMNS


SAMPLE_FACTS = [
    "I enjoy exploring Boston",
    "I have run two marathons",
    "I brew my own kombucha",
    "I grew up on a farm",
    "I collect vintage film cameras",
    "I am learning to play the cello",
    "I have visited 20 countries",
    "I make a mean lasagna",
    "I rock climb on weekends",
]


def generate_user_id(rng: random.Random) -> str:
    """Generate a short, Slack-like member id drawn from `rng`."""
    alphabet = shortuuid.get_alphabet()
    return "U" + "".join(rng.choices(alphabet, k=10)).upper()


def generate_timestamped_filename(prefix: str, extension: str) -> str:
    """Generate a timestamped filename, e.g. roster_20241220_143022.csv."""
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    return f"{prefix}_{timestamp}.{extension}"


def generate_records(user_ids: List[str], rng: random.Random, stored_share: float) -> List[Dict[str, Any]]:
    """Build store rows for a random share of the roster.

    Members left out have no stored record, as happens for people who never
    set a preference or added a fact.
    """
    prefs = list(LocationPreference)
    rows = []
    for user_id in user_ids:
        if rng.random() > stored_share:
            continue
        others = [u for u in user_ids if u != user_id]
        history = rng.sample(others, k=min(len(others), rng.randint(0, 4)))
        facts = rng.sample(SAMPLE_FACTS, k=rng.randint(0, 5))
        rows.append(
            {
                "user_id": user_id,
                "location_pref": LOCATION_PREFERENCE_TOKENS[rng.choice(prefs)],
                "last_three_matched": json.dumps(history),
                "facts": json.dumps(facts),
            }
        )
    return rows


def parse_args() -> argparse.Namespace:
    """Parse CLI arguments."""
    parser = argparse.ArgumentParser(description="Generate a synthetic roster and participant store.")
    parser.add_argument("--total", type=int, required=True, help="Number of roster members")
    parser.add_argument("--stored-share", type=float, default=0.8, help="Share of members with a stored record")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument("--out-dir", type=Path, default=Path("data"), help="Output directory")
    return parser.parse_args()


def main() -> None:
    """Entry point for CLI execution."""
    args = parse_args()
    rng = random.Random(args.seed)

    args.out_dir.mkdir(parents=True, exist_ok=True)
    user_ids = [generate_user_id(rng) for _ in range(args.total)]

    roster_path = args.out_dir / generate_timestamped_filename("roster", "csv")
    pd.DataFrame({"user_id": user_ids}).to_csv(roster_path, index=False)
    print(f"Saved {len(user_ids)} roster members to {roster_path}")

    rows = generate_records(user_ids, rng, args.stored_share)
    store_path = args.out_dir / generate_timestamped_filename("participants", "csv")
    pd.DataFrame(rows, columns=STORE_COLUMNS).to_csv(store_path, index=False)
    print(f"Saved {len(rows)} participant records to {store_path}")


if __name__ == "__main__":
    main()
