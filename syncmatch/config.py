from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Mapping, Optional

from dotenv import load_dotenv

from .messages import MAX_DISPLAYED_FACTS


def _int_env(env: Mapping[str, str], name: str, default: Optional[int]) -> Optional[int]:
    raw = env.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


@dataclass(frozen=True)
class Settings:
    roster_csv: Path = Path("data/roster.csv")
    store_csv: Path = Path("data/participants.csv")
    bot_user_id: str = ""
    announce_channel: str = "#random-sync"
    max_facts: int = MAX_DISPLAYED_FACTS
    seed: Optional[int] = None

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "Settings":
        """Build settings from SYNCMATCH_* variables.

        When `env` is not given, `.env` is loaded into the process environment
        first and `os.environ` is used.
        """
        if env is None:
            load_dotenv()
            env = os.environ
        defaults = cls()
        return cls(
            roster_csv=Path(env.get("SYNCMATCH_ROSTER_CSV") or defaults.roster_csv),
            store_csv=Path(env.get("SYNCMATCH_STORE_CSV") or defaults.store_csv),
            bot_user_id=env.get("SYNCMATCH_BOT_USER_ID", defaults.bot_user_id).strip(),
            announce_channel=env.get("SYNCMATCH_ANNOUNCE_CHANNEL") or defaults.announce_channel,
            max_facts=_int_env(env, "SYNCMATCH_MAX_FACTS", defaults.max_facts),
            seed=_int_env(env, "SYNCMATCH_SEED", None),
        )

    def with_overrides(self, **changes: object) -> "Settings":
        """Copy with every non-None value in `changes` applied."""
        return replace(self, **{k: v for k, v in changes.items() if v is not None})
