"""
aggregator.py — Agrégations des lignes par média : annonceur, lieu, campagne

Les agrégats additionnent les lignes de build_media_reports ; aucun cycle
n'est recalculé ici.
"""
from __future__ import annotations
from collections import defaultdict
from typing import Iterable, Optional

from .config import INTERNAL_LABEL
from .models import (
    AdvertiserExposureReport, InventorySnapshot, LocationReport,
    MediaExposureReport, PlaylistReport,
)


def _group(rows: Iterable[MediaExposureReport], attr: str) -> dict[Optional[str], list[MediaExposureReport]]:
    groups: dict[Optional[str], list[MediaExposureReport]] = defaultdict(list)
    for r in rows:
        groups[getattr(r, attr)].append(r)
    return groups


def _total(rows: list[MediaExposureReport], attr: str) -> int:
    return sum(getattr(r, attr) for r in rows)


def by_advertiser(
    rows: list[MediaExposureReport],
    snapshot: InventorySnapshot,
) -> list[AdvertiserExposureReport]:
    groups = _group(rows, "advertiser_id")
    out: list[AdvertiserExposureReport] = []
    for adv in snapshot.advertisers:
        if not adv.is_active:
            continue
        items = groups.get(adv.id, [])
        if not items:
            continue
        out.append(AdvertiserExposureReport(
            advertiser_id=adv.id,
            advertiser_name=adv.name,
            advertiser_segment=adv.segment,
            total_media_items=len(items),
            total_exposures_per_day=_total(items, "exposures_per_day"),
            total_exposures_per_week=_total(items, "exposures_per_week"),
            total_exposures_per_month=_total(items, "exposures_per_month"),
            total_exposures_per_year=_total(items, "exposures_per_year"),
            total_seconds_per_day=_total(items, "total_seconds_per_day"),
            total_seconds_per_week=_total(items, "total_seconds_per_week"),
            total_seconds_per_month=_total(items, "total_seconds_per_month"),
            total_seconds_per_year=_total(items, "total_seconds_per_year"),
            total_exposures_in_period=_total(items, "exposures_in_period"),
            total_seconds_in_period=_total(items, "seconds_in_period"),
            locations_count=len({r.location_id for r in items}),
            # somme par média : un lieu partagé par plusieurs médias compte plusieurs fois
            monitors_count=_total(items, "monitors_count"),
        ))
    return out


def by_location(
    rows: list[MediaExposureReport],
    snapshot: InventorySnapshot,
) -> list[LocationReport]:
    groups = _group(rows, "location_id")
    out: list[LocationReport] = []
    for loc in snapshot.locations:
        items = groups.get(loc.id, [])
        if not items:
            continue
        out.append(LocationReport(
            location_id=loc.id,
            location_name=loc.name,
            city=loc.city,
            state=loc.state,
            total_media_items=len(items),
            total_advertisers=len({r.advertiser_id for r in items if r.advertiser_id}),
            monitors_count=snapshot.active_monitor_count(loc.id),
            total_exposures_per_day=_total(items, "exposures_per_day"),
            total_exposures_per_month=_total(items, "exposures_per_month"),
            total_seconds_per_day=_total(items, "total_seconds_per_day"),
            total_exposures_in_period=_total(items, "exposures_in_period"),
            commission_percentage=loc.commission_percentage,
        ))
    return out


def by_campaign(
    rows: list[MediaExposureReport],
    snapshot: InventorySnapshot,
) -> list[PlaylistReport]:
    groups = _group(rows, "campaign_id")
    out: list[PlaylistReport] = []
    for camp in snapshot.campaigns:
        if not camp.is_active:
            continue
        items = groups.get(camp.id, [])
        if not items:
            continue
        adv = snapshot.advertiser(camp.advertiser_id)
        out.append(PlaylistReport(
            campaign_id=camp.id,
            campaign_name=camp.name,
            advertiser_id=camp.advertiser_id,
            advertiser_name=adv.name if adv else INTERNAL_LABEL,
            start_date=camp.start_date,
            end_date=camp.end_date,
            total_media_items=len(items),
            locations_count=len({r.location_id for r in items if r.location_id}),
            total_exposures_per_day=_total(items, "exposures_per_day"),
            total_exposures_per_month=_total(items, "exposures_per_month"),
            total_seconds_per_day=_total(items, "total_seconds_per_day"),
            total_exposures_in_period=_total(items, "exposures_in_period"),
        ))
    return out


def filter_by_location(
    rows: list[MediaExposureReport],
    location_id: Optional[str] = None,
) -> list[MediaExposureReport]:
    if not location_id or location_id == "all":
        return list(rows)
    return [r for r in rows if r.location_id == location_id]
