"""
engine.py — Points d'entrée sans état du moteur
Chaque appel reçoit un snapshot déjà chargé et retourne des rapports neufs.
"""
from __future__ import annotations
from typing import Union

from .aggregator import by_advertiser, by_campaign, by_location
from .audience import build_media_reports
from .commissions import compute_commissions
from .config import DEFAULT_CONFIG, EngineConfig
from .models import ExposureReports, InventorySnapshot
from .periods import Period
from .revenue import compute_financial_reports, simulate_budget

__all__ = [
    "compute_exposure_reports",
    "compute_financial_reports",
    "simulate_budget",
    "compute_commissions",
]


def compute_exposure_reports(
    snapshot: InventorySnapshot,
    period: Union[Period, str, None] = None,
    config: EngineConfig = DEFAULT_CONFIG,
) -> ExposureReports:
    media = build_media_reports(snapshot, period, config)
    return ExposureReports(
        media=media,
        advertisers=by_advertiser(media, snapshot),
        locations=by_location(media, snapshot),
        playlists=by_campaign(media, snapshot),
    )
