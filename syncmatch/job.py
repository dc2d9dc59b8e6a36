"""Run one round of random syncs against the given roster, store and notifier.

Steps:
1) List roster members, dropping the bot's own identity
2) Load stored records and build participants (missing records get defaults)
3) Shuffle and partition into groups
4) Open a conversation per group and post its intro
5) Post the round announcement to the roster channel
6) Append each participant's new partners to their stored history

Groups are fully computed before anything is sent or written, so a roster too
small to match leaves every collaborator untouched. Steps 4-6 are not
transactional: if the job dies midway, some histories will already include the
new round.
"""
from __future__ import annotations

import logging
import random
from typing import Optional

from .config import Settings
from .data_models import MatchRun
from .history import compute_history_updates
from .ingest import RosterSource, build_participants
from .matcher import match_participants
from .messages import ANNOUNCEMENT, intro_message
from .notifier import Notifier
from .shuffle import RandomSource
from .store import ParticipantStore


logger = logging.getLogger(__name__)


def run_round(
    roster: RosterSource,
    store: ParticipantStore,
    notifier: Notifier,
    settings: Settings,
    rng: Optional[RandomSource] = None,
    dry_run: bool = False,
) -> MatchRun:
    """Match the current roster and deliver the round.

    Args:
        roster: Source of current member ids.
        store: Participant records; receives the history appends.
        notifier: Opens group conversations and posts messages.
        settings: Bot identity, announcement channel and fact limit.
        rng: Random source for match order and fact selection.
        dry_run: Compute groups without sending messages or writing history.

    Returns:
        The MatchRun that was delivered.

    Raises:
        InsufficientParticipants: If fewer than two members are eligible.
    """
    rng = rng or random.Random(settings.seed)

    members = roster.list_members()
    logger.info("Roster has %d member(s)", len(members))
    # one entry per member, first occurrence wins
    members = [m for m in dict.fromkeys(members) if m != settings.bot_user_id]

    records = store.get_many(members)
    participants = build_participants(members, records)
    run = match_participants(participants, rng)
    logger.info("Formed %d group(s) from %d participant(s)", len(run.groups), len(participants))

    if dry_run:
        logger.info("Dry run: no messages sent, no history written")
        return run

    by_id = {p.id: p for p in participants}
    for group in run.groups:
        channel_id = notifier.open_conversation(list(group.members))
        notifier.post_message(
            channel_id, intro_message(group, by_id, rng, max_facts=settings.max_facts)
        )

    notifier.post_message(settings.announce_channel, ANNOUNCEMENT)

    for update in compute_history_updates(run.groups):
        logger.debug("History %s += %s", update.participant_id, update.new_partners)
        store.append_recent_partners(update.participant_id, update.new_partners)

    logger.info("Round complete")
    return run
