from __future__ import annotations

from typing import Iterable, List, Sequence

from .data_models import HISTORY_WINDOW, Group, HistoryUpdate


def recent_window(history: Sequence[str], window: int = HISTORY_WINDOW) -> List[str]:
    """Most recent `window` entries of a stored partner history, oldest first."""
    if window <= 0:
        return []
    return list(history[-window:])


def compute_history_updates(groups: Iterable[Group]) -> List[HistoryUpdate]:
    """One update per grouped participant listing the rest of their group."""
    updates: List[HistoryUpdate] = []
    for group in groups:
        for member_id in group.members:
            updates.append(
                HistoryUpdate(participant_id=member_id, new_partners=group.others(member_id))
            )
    return updates
