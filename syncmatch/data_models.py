from __future__ import annotations

from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


HISTORY_WINDOW = 3


class LocationPreference(str, Enum):
    IN_PERSON = "IN_PERSON"
    VIRTUAL = "VIRTUAL"
    NO_PREFERENCE = "NO_PREFERENCE"


# Tokens as they are stored in participant records
LOCATION_PREFERENCE_ALIASES: Dict[str, LocationPreference] = {
    "in_person": LocationPreference.IN_PERSON,
    "in-person": LocationPreference.IN_PERSON,
    "in person": LocationPreference.IN_PERSON,
    "virtual": LocationPreference.VIRTUAL,
    "remote": LocationPreference.VIRTUAL,
    "no_pref": LocationPreference.NO_PREFERENCE,
    "no_preference": LocationPreference.NO_PREFERENCE,
    "no preference": LocationPreference.NO_PREFERENCE,
}

LOCATION_PREFERENCE_TOKENS: Dict[LocationPreference, str] = {
    LocationPreference.IN_PERSON: "in_person",
    LocationPreference.VIRTUAL: "virtual",
    LocationPreference.NO_PREFERENCE: "no_pref",
}


def parse_location_preference(value: Optional[str]) -> LocationPreference:
    """Map a stored preference token to a LocationPreference.

    Blank, missing and unrecognised values fall back to NO_PREFERENCE.
    """
    if value is None:
        return LocationPreference.NO_PREFERENCE
    token = str(value).strip().lower()
    if token in LOCATION_PREFERENCE_ALIASES:
        return LOCATION_PREFERENCE_ALIASES[token]
    try:
        return LocationPreference(token.upper())
    except ValueError:
        return LocationPreference.NO_PREFERENCE


class Participant(BaseModel):
    """
    Represents a single participant in one matching run.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Stable platform identifier")
    location_preference: LocationPreference = Field(
        default=LocationPreference.NO_PREFERENCE,
        description="In-person / virtual / no preference",
    )
    recent_partners: List[str] = Field(
        default_factory=list,
        description="Most recent partner ids, oldest first, at most HISTORY_WINDOW long",
    )
    facts: List[str] = Field(default_factory=list, description="Free-text facts shared in intros")

    @field_validator("recent_partners")
    @classmethod
    def _keep_recent_window(cls, value: List[str]) -> List[str]:
        return list(value[-HISTORY_WINDOW:]) if value else []


class Group(BaseModel):
    """A pair, or the single triplet of an odd-sized run."""

    model_config = ConfigDict(frozen=True)

    members: List[str] = Field(..., min_length=2, max_length=3)

    @field_validator("members")
    @classmethod
    def _distinct_members(cls, value: List[str]) -> List[str]:
        if len(set(value)) != len(value):
            raise ValueError(f"Group members must be distinct: {value}")
        return value

    def others(self, member_id: str) -> List[str]:
        return [m for m in self.members if m != member_id]

    def __len__(self) -> int:
        return len(self.members)


class HistoryUpdate(BaseModel):
    """Partner ids to append to one participant's stored history.

    Fields:
        participant_id: Whose history is being extended.
        new_partners: The other members of the participant's group, in group order.
    """

    participant_id: str
    new_partners: List[str]


class MatchRun(BaseModel):
    """Result of one matching invocation. Never persisted."""

    roster: List[str] = Field(default_factory=list, description="Participant ids in match order")
    groups: List[Group] = Field(default_factory=list)

    @property
    def triplets(self) -> List[Group]:
        return [g for g in self.groups if len(g) == 3]


class ParticipantRecord(BaseModel):
    """Stored per-participant row as kept by a participant store."""

    user_id: str
    location_pref: Optional[str] = None
    last_three_matched: List[str] = Field(
        default_factory=list,
        description="Full append-only partner history; readers keep the most recent entries",
    )
    facts: List[str] = Field(default_factory=list)
