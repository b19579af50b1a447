"""
loader.py — Chargement et nettoyage des snapshots d'inventaire (JSON)

Toutes les règles de valeurs par défaut sont appliquées ici : une donnée
invalide (durée négative, NaN, audience manquante…) est ramenée à une valeur
sûre au lieu de lever une exception.
"""
from __future__ import annotations
import json
import math
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Any, Optional

from .config import DEFAULT_MEDIA_DURATION, DEFAULT_TERMINAL_AUDIENCE, TERMINAL_TIERS
from .models import (
    AFFILIATE, Advertiser, Campaign, CommissionLedgerEntry, InventorySnapshot, LEDGER_STATUSES,
    Location, MediaItem, Monitor, PENDING, SALES, Terminal,
)


def _fix_encoding(s: str) -> str:
    """Corrige les chaînes mal encodées (cp1252 → utf-8)."""
    for codec in ("cp1252", "latin1"):
        try:
            return s.encode(codec).decode("utf-8")
        except (UnicodeEncodeError, UnicodeDecodeError):
            continue
    return s


def _fix_obj(obj: object) -> object:
    if isinstance(obj, str):
        return _fix_encoding(obj)
    if isinstance(obj, list):
        return [_fix_obj(x) for x in obj]
    if isinstance(obj, dict):
        return {_fix_obj(k): _fix_obj(v) for k, v in obj.items()}
    return obj


def _get(entry: dict, *keys: str, default: Any = None) -> Any:
    # Les payloads de l'API sont en camelCase, les exports en snake_case
    for k in keys:
        if entry.get(k) is not None:
            return entry[k]
    return default


def _safe_float(value: Any, default: Optional[float] = 0.0, minimum: float = 0.0) -> Optional[float]:
    try:
        v = float(value)
    except (TypeError, ValueError):
        return default
    if math.isnan(v) or math.isinf(v) or v < minimum:
        return default
    return v


def _safe_int(value: Any, default: int = 0, minimum: int = 0) -> int:
    v = _safe_float(value, default=None, minimum=minimum)
    return default if v is None else int(v)


def _duration(value: Any) -> int:
    d = _safe_int(value, default=DEFAULT_MEDIA_DURATION, minimum=0)
    return d if d > 0 else DEFAULT_MEDIA_DURATION


def _parse_date(value: Any) -> Optional[date]:
    if not value:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value)[:10])
    except ValueError:
        return None


def _parse_datetime(value: Any) -> Optional[datetime]:
    if not value:
        return None
    if isinstance(value, datetime):
        return value
    try:
        dt = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        return None
    # tout en UTC naïf pour comparer avec datetime.now()
    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc).replace(tzinfo=None)
    return dt


def _opt_id(value: Any) -> Optional[str]:
    return str(value) if value not in (None, "") else None


# ─────────────────────────────────────────────────
# Enregistrements
# ─────────────────────────────────────────────────

def media_from_dict(entry: dict) -> MediaItem:
    return MediaItem(
        id=str(entry["id"]),
        title=entry.get("title", ""),
        media_type=entry.get("type", entry.get("media_type", "")),
        duration_seconds=_duration(_get(entry, "duration_seconds", "durationSeconds")),
        is_active=bool(_get(entry, "is_active", "isActive", default=True)),
        location_id=_opt_id(_get(entry, "location_id", "locationId", "condominiumId")),
        campaign_id=_opt_id(_get(entry, "campaign_id", "campaignId")),
        advertiser_id=_opt_id(_get(entry, "advertiser_id", "advertiserId")),
    )


def monitor_from_dict(entry: dict) -> Monitor:
    return Monitor(
        id=str(entry["id"]),
        name=entry.get("name", ""),
        location_id=_opt_id(_get(entry, "location_id", "locationId", "condominiumId")),
        is_active=bool(_get(entry, "is_active", "isActive", default=True)),
    )


def location_from_dict(entry: dict) -> Location:
    commission = _get(entry, "commission_percentage", "commissionPercentage")
    if commission is None and isinstance(entry.get("commission"), dict):
        commission = entry["commission"].get("percentage")
    return Location(
        id=str(entry["id"]),
        name=entry.get("name", ""),
        city=entry.get("city", "") or "",
        state=entry.get("state", "") or "",
        commission_percentage=_safe_float(commission, default=None),
        latitude=_safe_float(entry.get("latitude"), default=None, minimum=-90.0),
        longitude=_safe_float(entry.get("longitude"), default=None, minimum=-180.0),
        average_daily_traffic=_safe_int(_get(entry, "average_daily_traffic", "averageDailyTraffic")),
    )


def campaign_from_dict(entry: dict) -> Campaign:
    return Campaign(
        id=str(entry["id"]),
        name=entry.get("name", ""),
        advertiser_id=_opt_id(_get(entry, "advertiser_id", "advertiserId")),
        start_date=_parse_date(_get(entry, "start_date", "startDate")),
        end_date=_parse_date(_get(entry, "end_date", "endDate")),
        is_active=bool(_get(entry, "is_active", "isActive", default=True)),
    )


def advertiser_from_dict(entry: dict) -> Advertiser:
    return Advertiser(
        id=str(entry["id"]),
        name=entry.get("name", ""),
        segment=entry.get("segment", "") or "",
        is_active=bool(_get(entry, "is_active", "isActive", default=True)),
    )


def terminal_from_dict(entry: dict) -> Terminal:
    audience = _get(entry, "avg_daily_audience", "avgDailyAudience")
    tier = str(_get(entry, "tier", "audienceCategory", default="BRONZE")).upper()
    return Terminal(
        id=str(entry["id"]),
        name=entry.get("name", ""),
        location_name=_get(entry, "location_name", "locationName", default=""),
        city=_get(entry, "city", "locationCity", default=""),
        avg_daily_audience=(
            DEFAULT_TERMINAL_AUDIENCE if audience is None else _safe_float(audience, default=0.0)
        ),
        tier=tier if tier in TERMINAL_TIERS else "BRONZE",
        latitude=_safe_float(entry.get("latitude"), default=None, minimum=-90.0),
        longitude=_safe_float(entry.get("longitude"), default=None, minimum=-180.0),
    )


def ledger_entry_from_dict(entry: dict) -> CommissionLedgerEntry:
    status = str(entry.get("status", PENDING)).lower()
    base = _safe_float(_get(entry, "base_amount", "baseAmount"))
    rate = _safe_float(_get(entry, "rate", "percentageApplied"))
    amount = _get(entry, "amount")
    # les exports de ventes portent salesAgentId à la place de affiliateId
    kind = str(_get(entry, "kind", default=SALES if "salesAgentId" in entry else AFFILIATE)).lower()
    if kind not in (AFFILIATE, SALES):
        kind = AFFILIATE
    return CommissionLedgerEntry(
        id=str(entry["id"]),
        earner_id=str(_get(entry, "earner_id", "affiliateId", "salesAgentId", default="")),
        level=0 if kind == SALES else _safe_int(_get(entry, "level", "tier"), default=1, minimum=1),
        rate=rate,
        base_amount=base,
        amount=_safe_float(amount) if amount is not None else round(base * rate / 100, 2),
        status=status if status in LEDGER_STATUSES else PENDING,
        reference_month=_get(entry, "reference_month", "referenceMonth", default=""),
        created_at=_parse_datetime(_get(entry, "created_at", "createdAt")),
        available_at=_parse_datetime(_get(entry, "available_at", "availableAt")),
        invoice_id=_opt_id(_get(entry, "invoice_id", "subscriptionInvoiceId", "invoiceId")),
        source_id=_opt_id(_get(entry, "source_id", "sourceUserId", "sourceTenantId")),
        kind=kind,
    )


# ─────────────────────────────────────────────────
# Fichiers
# ─────────────────────────────────────────────────

def _read_json(path: str | Path) -> Any:
    with open(path, encoding="utf-8") as f:
        return _fix_obj(json.load(f))


def snapshot_from_dict(raw: dict) -> InventorySnapshot:
    return InventorySnapshot(
        media_items=tuple(media_from_dict(e) for e in raw.get("media_items", raw.get("mediaItems", []))),
        monitors=tuple(monitor_from_dict(e) for e in raw.get("monitors", [])),
        locations=tuple(location_from_dict(e) for e in raw.get("locations", raw.get("condominiums", []))),
        campaigns=tuple(campaign_from_dict(e) for e in raw.get("campaigns", [])),
        advertisers=tuple(advertiser_from_dict(e) for e in raw.get("advertisers", [])),
        terminals=tuple(terminal_from_dict(e) for e in raw.get("terminals", [])),
    )


def load_snapshot(path: str | Path = "data/inventory.json") -> InventorySnapshot:
    """Charge un snapshot d'inventaire depuis un fichier JSON."""
    return snapshot_from_dict(_read_json(path))


def load_terminals(path: str | Path = "data/terminals.json") -> list[Terminal]:
    raw = _read_json(path)
    if isinstance(raw, dict):
        raw = raw.get("terminals", [])
    return [terminal_from_dict(e) for e in raw]


def load_ledger(path: str | Path = "data/ledger.json") -> list[CommissionLedgerEntry]:
    raw = _read_json(path)
    if isinstance(raw, dict):
        raw = raw.get("entries", [])
    return [ledger_entry_from_dict(e) for e in raw]
