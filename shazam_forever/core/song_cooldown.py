"""Cooldown after a song is identified so repeated polls of the same track are not reported again."""
from typing import Optional

from shazam_forever.config import DUPLICATE_COOLDOWN_SEC
from shazam_forever.models.song import SongMatch


def same_song(a: SongMatch, b: SongMatch) -> bool:
    """Exact, case-sensitive title and artist comparison."""
    return a.title == b.title and a.artist == b.artist


def is_within_cooldown(
    current: Optional[SongMatch],
    candidate: SongMatch,
    cooldown_sec: float = DUPLICATE_COOLDOWN_SEC,
) -> bool:
    """True if candidate repeats current and was identified less than cooldown_sec after it."""
    if current is None or not same_song(current, candidate):
        return False
    elapsed = abs((candidate.identified_at - current.identified_at).total_seconds())
    return elapsed < cooldown_sec
