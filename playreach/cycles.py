"""
cycles.py — Durée du cycle de lecture par scope
Scope = campagne (playlist) si le média en a une, sinon le lieu.
Cycle = somme des durées des médias actifs du même scope.
"""
from __future__ import annotations
from typing import Iterable, Optional

from .config import DEFAULT_MEDIA_DURATION
from .models import MediaItem


def scope_of(media: MediaItem) -> Optional[str]:
    return media.campaign_id or media.location_id


def media_duration(media: MediaItem, default: int = DEFAULT_MEDIA_DURATION) -> int:
    d = media.duration_seconds
    return d if d and d > 0 else default


def cycle_durations(
    active_media: Iterable[MediaItem],
    default_duration: int = DEFAULT_MEDIA_DURATION,
) -> dict[Optional[str], int]:
    """
    Retourne {scope: durée du cycle en secondes}.
    Un seul passage sur les médias : O(n).
    """
    durations: dict[Optional[str], int] = {}
    for m in active_media:
        key = scope_of(m)
        durations[key] = durations.get(key, 0) + media_duration(m, default_duration)
    return durations


def cycle_duration_for(media: MediaItem, durations: dict[Optional[str], int]) -> int:
    return durations.get(scope_of(media), 0)
