"""
evaluator.py — Totaux généraux d'un jeu de rapports d'exposition
"""
from __future__ import annotations
from .models import ExposureReports, InventorySnapshot


def evaluate(snapshot: InventorySnapshot, reports: ExposureReports) -> dict:
    """Retourne un dictionnaire de totaux pour l'en-tête des rapports."""
    media = reports.media
    return {
        "total_media": len(snapshot.active_media()),
        "total_advertisers": len(reports.advertisers),
        "total_locations": len(reports.locations),
        "total_playlists": len(reports.playlists),
        "total_monitors": snapshot.active_monitors_total,
        "total_exposures_per_day": sum(m.exposures_per_day for m in media),
        "total_exposures_per_month": sum(m.exposures_per_month for m in media),
        "total_exposures_in_period": sum(m.exposures_in_period for m in media),
        "total_seconds_per_day": sum(m.total_seconds_per_day for m in media),
        # médias dont le lieu n'existe pas dans le snapshot
        "orphan_media": sum(1 for m in media if snapshot.location(m.location_id) is None),
    }
