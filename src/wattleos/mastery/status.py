"""
Mastery Status Helpers

Progression order and the weighted progress percentage shown on progress
bars.
"""

from __future__ import annotations

import math
from typing import Protocol

from wattleos.core.models.mastery import MasteryStatus

# Progression order, used when cycling a cell in the mastery grid
MASTERY_STATUS_ORDER: tuple[MasteryStatus, ...] = (
    MasteryStatus.NOT_STARTED,
    MasteryStatus.PRESENTED,
    MasteryStatus.PRACTICING,
    MasteryStatus.MASTERED,
)

# Weight each status contributes towards the progress percentage
STATUS_WEIGHTS: dict[MasteryStatus, float] = {
    MasteryStatus.MASTERED: 1.0,
    MasteryStatus.PRACTICING: 0.66,
    MasteryStatus.PRESENTED: 0.33,
}


class StatusCounts(Protocol):
    total: int
    presented: int
    practicing: int
    mastered: int


def next_mastery_status(current: MasteryStatus | str) -> MasteryStatus:
    """Return the status after ``current``, wrapping mastered → not_started."""
    index = MASTERY_STATUS_ORDER.index(MasteryStatus(current))
    return MASTERY_STATUS_ORDER[(index + 1) % len(MASTERY_STATUS_ORDER)]


def mastery_percentage(counts: StatusCounts) -> int:
    """Weighted progress percentage (0-100) for a status summary."""
    if counts.total <= 0:
        return 0

    weighted = (
        counts.mastered * STATUS_WEIGHTS[MasteryStatus.MASTERED]
        + counts.practicing * STATUS_WEIGHTS[MasteryStatus.PRACTICING]
        + counts.presented * STATUS_WEIGHTS[MasteryStatus.PRESENTED]
    )
    # Half-up, so 12.5 shows as 13
    return math.floor(weighted / counts.total * 100 + 0.5)
