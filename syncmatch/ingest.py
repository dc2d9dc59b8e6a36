from __future__ import annotations

from pathlib import Path
from typing import Dict, Iterable, List, Mapping, Optional, Protocol

import pandas as pd

from .data_models import Participant, ParticipantRecord, parse_location_preference
from .history import recent_window


FIELD_ALIASES: Dict[str, List[str]] = {
    "id": ["user_id", "member_id", "id", "Slack ID", "Member ID"],
}


def get_alias_column(df: pd.DataFrame, key: str) -> Optional[str]:
    for candidate in FIELD_ALIASES.get(key, []):
        if candidate in df.columns:
            return candidate
    return None


class RosterSource(Protocol):
    def list_members(self) -> List[str]: ...


class StaticRosterSource:
    """Roster backed by a fixed list of ids."""

    def __init__(self, member_ids: Iterable[str]):
        self._member_ids = [str(m) for m in member_ids]

    def list_members(self) -> List[str]:
        return list(self._member_ids)


class CsvRosterSource:
    """Roster read from a CSV export of the channel members.

    The id column is found through FIELD_ALIASES. Blank rows are skipped and
    repeated ids are kept once, at their first position.
    """

    def __init__(self, csv_path: Path):
        self.csv_path = Path(csv_path)

    def list_members(self) -> List[str]:
        if not self.csv_path.exists():
            raise FileNotFoundError(f"Roster CSV not found: {self.csv_path}")
        df = pd.read_csv(self.csv_path, dtype=str)
        df.columns = [col.strip() if isinstance(col, str) else col for col in df.columns]
        id_col = get_alias_column(df, "id")
        if id_col is None:
            raise KeyError(
                f"No member id column in {self.csv_path}; expected one of {FIELD_ALIASES['id']}"
            )
        ids = df[id_col].dropna().astype(str).str.strip().drop_duplicates()
        return [i for i in ids.tolist() if i]


def build_participants(
    member_ids: Iterable[str],
    records: Mapping[str, ParticipantRecord],
) -> List[Participant]:
    """Assemble Participants in `member_ids` order from stored records.

    Members without a stored record get NO_PREFERENCE, no history and no facts.
    Stored history is cut down to the recent window before matching.
    """
    participants: List[Participant] = []
    for member_id in member_ids:
        record = records.get(member_id)
        if record is None:
            participants.append(Participant(id=member_id))
            continue
        participants.append(
            Participant(
                id=member_id,
                location_preference=parse_location_preference(record.location_pref),
                recent_partners=recent_window(record.last_three_matched),
                facts=list(record.facts),
            )
        )
    return participants
