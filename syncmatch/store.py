"""Participant record stores.

A store holds one row per participant: location preference, the append-only
partner history and the participant's facts. Writes are last-write-wins; no
store offers transactions across participants.
"""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Protocol

import pandas as pd

from .data_models import (
    LOCATION_PREFERENCE_TOKENS,
    LocationPreference,
    ParticipantRecord,
)


STORE_COLUMNS = ["user_id", "location_pref", "last_three_matched", "facts"]


class ParticipantNotFound(KeyError):
    """Raised when a participant has no stored record."""


class FactIndexError(IndexError):
    """Raised when removing a fact index that does not exist."""


class ParticipantStore(Protocol):
    def get_many(self, user_ids: Iterable[str]) -> Dict[str, ParticipantRecord]: ...

    def append_recent_partners(self, user_id: str, partner_ids: List[str]) -> None: ...

    def add_fact(self, user_id: str, fact: str) -> None: ...

    def remove_fact(self, user_id: str, index: int) -> str: ...

    def get_facts(self, user_id: str) -> List[str]: ...

    def set_location_preference(self, user_id: str, preference: LocationPreference) -> None: ...


class InMemoryParticipantStore:
    """Store keeping records in a dict. Subclasses override `_load`/`_save`."""

    def __init__(self, records: Optional[Iterable[ParticipantRecord]] = None):
        self._records: Dict[str, ParticipantRecord] = {r.user_id: r for r in records or []}

    def _load(self) -> Dict[str, ParticipantRecord]:
        return dict(self._records)

    def _save(self, records: Dict[str, ParticipantRecord]) -> None:
        self._records = dict(records)

    def _update(self, user_id: str, **changes: Any) -> ParticipantRecord:
        records = self._load()
        current = records.get(user_id) or ParticipantRecord(user_id=user_id)
        updated = current.model_copy(update=changes)
        records[user_id] = updated
        self._save(records)
        return updated

    def get(self, user_id: str) -> Optional[ParticipantRecord]:
        return self._load().get(user_id)

    def get_many(self, user_ids: Iterable[str]) -> Dict[str, ParticipantRecord]:
        records = self._load()
        return {uid: records[uid] for uid in user_ids if uid in records}

    def append_recent_partners(self, user_id: str, partner_ids: List[str]) -> None:
        current = self.get(user_id)
        history = list(current.last_three_matched) if current else []
        self._update(user_id, last_three_matched=history + list(partner_ids))

    def add_fact(self, user_id: str, fact: str) -> None:
        current = self.get(user_id)
        facts = list(current.facts) if current else []
        self._update(user_id, facts=facts + [fact])

    def get_facts(self, user_id: str) -> List[str]:
        current = self.get(user_id)
        if current is None:
            raise ParticipantNotFound(user_id)
        return list(current.facts)

    def remove_fact(self, user_id: str, index: int) -> str:
        facts = self.get_facts(user_id)
        if index < 0 or index >= len(facts):
            raise FactIndexError(f"No fact {index} for {user_id} ({len(facts)} stored)")
        removed = facts.pop(index)
        self._update(user_id, facts=facts)
        return removed

    def set_location_preference(self, user_id: str, preference: LocationPreference) -> None:
        self._update(user_id, location_pref=LOCATION_PREFERENCE_TOKENS[preference])


def _parse_list(val: Any) -> List[str]:
    """Convert a JSON-encoded list cell to list[str]; blanks become []."""
    if val is None or (isinstance(val, float) and pd.isna(val)):
        return []
    if isinstance(val, list):
        return [str(x) for x in val]
    s = str(val).strip()
    if not s:
        return []
    parsed = json.loads(s)
    if not isinstance(parsed, list):
        raise ValueError(f"Expected a JSON list, got: {s!r}")
    return [str(x) for x in parsed]


class CsvParticipantStore(InMemoryParticipantStore):
    """Store persisted as a CSV file; list columns are JSON-encoded.

    The file is re-read before and fully rewritten after every change.
    """

    def __init__(self, csv_path: Path):
        super().__init__()
        self.csv_path = Path(csv_path)

    def _load(self) -> Dict[str, ParticipantRecord]:
        if not self.csv_path.exists():
            return {}
        df = pd.read_csv(self.csv_path, dtype=str, keep_default_na=False)
        records: Dict[str, ParticipantRecord] = {}
        for row in df.to_dict(orient="records"):
            user_id = str(row.get("user_id", "")).strip()
            if not user_id:
                continue
            records[user_id] = ParticipantRecord(
                user_id=user_id,
                location_pref=row.get("location_pref") or None,
                last_three_matched=_parse_list(row.get("last_three_matched")),
                facts=_parse_list(row.get("facts")),
            )
        return records

    def _save(self, records: Dict[str, ParticipantRecord]) -> None:
        rows = [
            {
                "user_id": r.user_id,
                "location_pref": r.location_pref or "",
                "last_three_matched": json.dumps(r.last_three_matched),
                "facts": json.dumps(r.facts, ensure_ascii=False),
            }
            for r in records.values()
        ]
        self.csv_path.parent.mkdir(parents=True, exist_ok=True)
        pd.DataFrame(rows, columns=STORE_COLUMNS).to_csv(self.csv_path, index=False)
