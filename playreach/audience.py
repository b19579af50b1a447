"""
audience.py — Modèle d'exposition (projection, pas de télémétrie)
Formule : Expositions/jour = floor(3600 / cycle) × heures_de_fonctionnement × nb_écrans
          Secondes/jour    = Expositions/jour × durée_du_média
"""
from __future__ import annotations
from typing import Union

from .config import DEFAULT_CONFIG, EngineConfig, PERIOD_DAYS, UNKNOWN_LOCATION_LABEL
from .cycles import cycle_duration_for, cycle_durations, media_duration
from .models import InventorySnapshot, MediaExposureReport, MediaItem
from .periods import Period, as_period


def monitors_count(snapshot: InventorySnapshot, location_id: str | None) -> int:
    """Au moins 1 écran, pour qu'un média d'un lieu sans écran reste visible."""
    return max(1, snapshot.active_monitor_count(location_id))


def exposures_per_hour(cycle_duration: int, seconds_per_hour: int = 3600) -> int:
    if cycle_duration <= 0:
        return 0
    return seconds_per_hour // cycle_duration


def compute_exposure(
    cycle_duration: int,
    screens: int,
    duration: int,
    config: EngineConfig = DEFAULT_CONFIG,
) -> tuple[int, int, int]:
    """
    Retourne (expositions/heure, expositions/jour, secondes/jour).
    Cycle nul → tout à 0, sans division.
    """
    per_hour = exposures_per_hour(cycle_duration, config.seconds_per_hour)
    per_day = per_hour * config.hours_per_day * screens
    return per_hour, per_day, per_day * duration


def _media_report(
    media: MediaItem,
    snapshot: InventorySnapshot,
    cycle: int,
    period: Period,
    config: EngineConfig,
) -> MediaExposureReport:
    location = snapshot.location(media.location_id)
    campaign = snapshot.campaign(media.campaign_id)
    advertiser = snapshot.advertiser(media.advertiser_id)

    screens = monitors_count(snapshot, media.location_id)
    duration = media_duration(media, config.default_media_duration)
    per_hour, per_day, seconds_per_day = compute_exposure(cycle, screens, duration, config)
    k = period.multiplier

    return MediaExposureReport(
        media_id=media.id,
        media_title=media.title,
        media_type=media.media_type,
        advertiser_id=media.advertiser_id,
        advertiser_name=advertiser.name if advertiser else None,
        campaign_id=media.campaign_id,
        campaign_name=campaign.name if campaign else None,
        location_id=media.location_id,
        location_name=location.name if location else UNKNOWN_LOCATION_LABEL,
        monitors_count=screens,
        media_duration=duration,
        cycle_duration=cycle,
        exposures_per_hour=per_hour,
        exposures_per_day=per_day,
        exposures_per_week=per_day * PERIOD_DAYS["week"],
        exposures_per_month=per_day * PERIOD_DAYS["month"],
        exposures_per_year=per_day * PERIOD_DAYS["year"],
        total_seconds_per_day=seconds_per_day,
        total_seconds_per_week=seconds_per_day * PERIOD_DAYS["week"],
        total_seconds_per_month=seconds_per_day * PERIOD_DAYS["month"],
        total_seconds_per_year=seconds_per_day * PERIOD_DAYS["year"],
        exposures_in_period=per_day * k,
        seconds_in_period=seconds_per_day * k,
    )


def build_media_reports(
    snapshot: InventorySnapshot,
    period: Union[Period, str, None] = None,
    config: EngineConfig = DEFAULT_CONFIG,
) -> list[MediaExposureReport]:
    """Une ligne par média actif du snapshot."""
    period = as_period(period)
    active = snapshot.active_media()
    durations = cycle_durations(active, config.default_media_duration)
    return [
        _media_report(m, snapshot, cycle_duration_for(m, durations), period, config)
        for m in active
    ]
