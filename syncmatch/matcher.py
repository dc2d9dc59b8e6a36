"""
Greedy pairing of participants for a round of random syncs.

Flow for one round:

- Shuffle the roster so match order differs between rounds
- Take the first remaining participant as the focal participant
    - Pick the first later participant compatible with them
    - If nobody is compatible, pair them with the next participant anyway
    - Remove both from the pool
- Stop once 3 or fewer participants remain and close them as the last group
  (a pair, or the triplet of an odd-sized roster)

The matcher never backtracks. Falling back to the next participant keeps every
round terminating even when the constraints cannot all be satisfied.
"""
from __future__ import annotations

import logging
from typing import List, Optional, Sequence, Tuple

from .data_models import Group, LocationPreference, MatchRun, Participant
from .shuffle import RandomSource, shuffled


logger = logging.getLogger(__name__)


class InsufficientParticipants(ValueError):
    """Raised when fewer than two participants are available to match."""

    def __init__(self, count: int):
        self.count = count
        super().__init__(f"Can't group {count} participant(s); at least 2 are required.")


def can_match(a: Participant, b: Participant) -> bool:
    """Decide whether two participants may be grouped together.

    Either side having met the other within their recent history blocks the
    pair. Otherwise a NO_PREFERENCE participant is compatible with anyone, and
    two participants with a stated preference must agree on it.
    """
    if b.id in a.recent_partners or a.id in b.recent_partners:
        return False

    if (
        a.location_preference == LocationPreference.NO_PREFERENCE
        or b.location_preference == LocationPreference.NO_PREFERENCE
    ):
        return True

    return a.location_preference == b.location_preference


def extract_pair(
    people: Sequence[Participant],
) -> Tuple[Tuple[str, str], List[Participant]]:
    """Pair the first participant in `people` with the first compatible one after it.

    Args:
        people: Remaining participants, in match order.

    Returns:
        `((focal_id, partner_id), remainder)` where `remainder` keeps the input
        order without the two selected participants.

    Raises:
        InsufficientParticipants: If fewer than two participants are given.
    """
    if len(people) < 2:
        raise InsufficientParticipants(len(people))

    focal = people[0]
    partner = next((p for p in people[1:] if can_match(focal, p)), None)
    if partner is None:
        # No compatible partner left for the focal participant
        partner = people[1]
        logger.debug("No compatible partner for %s; falling back to %s", focal.id, partner.id)

    remainder = [p for p in people if p.id not in (focal.id, partner.id)]
    return (focal.id, partner.id), remainder


def partition(people: Sequence[Participant]) -> List[Group]:
    """Split `people` into pairs, closing with a pair or triplet.

    Raises:
        InsufficientParticipants: If fewer than two participants are given.
    """
    if len(people) < 2:
        raise InsufficientParticipants(len(people))

    groups: List[Group] = []
    remaining = list(people)
    while len(remaining) > 3:
        pair, remaining = extract_pair(remaining)
        groups.append(Group(members=list(pair)))

    groups.append(Group(members=[p.id for p in remaining]))
    return groups


def match_participants(
    participants: Sequence[Participant],
    rng: Optional[RandomSource] = None,
) -> MatchRun:
    """Shuffle a copy of `participants` and partition it into groups.

    The caller's sequence is left in its original order.
    """
    if len(participants) < 2:
        raise InsufficientParticipants(len(participants))

    ordered = shuffled(participants, rng)
    logger.debug("Match order: %s", [p.id for p in ordered])

    groups = partition(ordered)
    for group in groups:
        logger.info("Group: %s", ", ".join(group.members))

    return MatchRun(roster=[p.id for p in ordered], groups=groups)
