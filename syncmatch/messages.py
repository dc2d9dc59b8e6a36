from __future__ import annotations

from typing import List, Mapping, Optional, Sequence

from .data_models import Group, Participant
from .shuffle import RandomSource, shuffled


MAX_DISPLAYED_FACTS = 3
SECTION_SEPARATOR = "\n-------\n"

ANNOUNCEMENT = (
    "Another round of random syncs have been initiated. "
    "React with a :thumbsup: if you've met your partner"
)


def mention(user_id: str) -> str:
    return f"<@{user_id}>"


def pick_facts(
    facts: Sequence[str],
    rng: Optional[RandomSource] = None,
    limit: int = MAX_DISPLAYED_FACTS,
) -> List[str]:
    """Randomly choose up to `limit` facts without touching the stored order."""
    if limit <= 0:
        return []
    return shuffled(facts, rng)[-limit:]


def intro_message(
    group: Group,
    participants_by_id: Mapping[str, Participant],
    rng: Optional[RandomSource] = None,
    max_facts: int = MAX_DISPLAYED_FACTS,
) -> str:
    """Compose the intro posted in a group's conversation.

    Opens with a greeting mentioning every member, followed by one section per
    member that has facts to share.
    """
    names = " and ".join(mention(m) for m in group.members)
    parts = [
        f"Hi {names}, you've been matched for a random sync. "
        "Introduce yourself and ask to get coffee sometime!"
    ]
    for member_id in group.members:
        participant = participants_by_id.get(member_id)
        if participant is None or not participant.facts:
            continue
        chosen = pick_facts(participant.facts, rng, max_facts)
        if not chosen:
            continue
        listed = "\n".join(f"- {fact}" for fact in chosen)
        parts.append(
            f"{mention(member_id)} has some interesting facts about themselves to share:\n{listed}"
        )
    return SECTION_SEPARATOR.join(parts)
