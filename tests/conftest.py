from typing import List, Optional

import pytest

from syncmatch.data_models import LocationPreference, Participant


IN_PERSON = LocationPreference.IN_PERSON
VIRTUAL = LocationPreference.VIRTUAL
NO_PREF = LocationPreference.NO_PREFERENCE


def person(
    pid,
    pref: LocationPreference = NO_PREF,
    recent: Optional[List] = None,
    facts: Optional[List[str]] = None,
) -> Participant:
    return Participant(
        id=str(pid),
        location_preference=pref,
        recent_partners=[str(r) for r in recent or []],
        facts=facts or [],
    )


class RecordingNotifier:
    def __init__(self):
        self.conversations: List[List[str]] = []
        self.messages: List[tuple] = []

    def open_conversation(self, member_ids):
        self.conversations.append(list(member_ids))
        return f"dm-{len(self.conversations)}"

    def post_message(self, channel_id, text):
        self.messages.append((channel_id, text))


class NoSwapRandom:
    """Random source under which Fisher-Yates keeps the input order."""

    def randint(self, a, b):
        return b


@pytest.fixture
def notifier():
    return RecordingNotifier()
