"""
quotes.py — Devis par terminal, filtres géographiques et médailles de trafic
Formule : Prix = (plays × prix_de_base) × multiplicateur_du_tier, puis remise volume
"""
from __future__ import annotations
import math
from dataclasses import dataclass
from typing import Optional, Sequence

from .config import (
    MedalConfig, NetworkPricing, QuotePricing, REACH_DEDUPLICATION, TERMINAL_TIERS,
)
from .models import Location, Monitor, QuoteResult, Terminal, TerminalQuote

EARTH_RADIUS_KM = 6371.0


# ─────────────────────────────────────────────────
# Géographie
# ─────────────────────────────────────────────────

def distance_km(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Distance haversine en km."""
    d_lat = math.radians(lat2 - lat1)
    d_lng = math.radians(lng2 - lng1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lng / 2) ** 2
    )
    return EARTH_RADIUS_KM * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def filter_by_radius(
    terminals: Sequence[Terminal],
    center_lat: float,
    center_lng: float,
    radius_km: float,
) -> list[Terminal]:
    # sans coordonnées : exclu
    return [
        t for t in terminals
        if t.latitude is not None and t.longitude is not None
        and distance_km(center_lat, center_lng, t.latitude, t.longitude) <= radius_km
    ]


# ─────────────────────────────────────────────────
# Devis
# ─────────────────────────────────────────────────

def tier_multiplier(tier: str) -> float:
    return TERMINAL_TIERS.get(tier, {}).get("multiplier", 1.0)


def volume_discount(screen_count: int, pricing: QuotePricing = QuotePricing()) -> int:
    discount = 0
    for min_screens, percent in pricing.volume_discounts:
        if screen_count >= min_screens:
            discount = percent
    return discount


def terminal_quote(
    terminal: Terminal,
    plays_per_day: int,
    duration_days: int,
    pricing: QuotePricing = QuotePricing(),
) -> TerminalQuote:
    price_per_play = round(pricing.base_price_per_play_cents * tier_multiplier(terminal.tier))
    daily_price = plays_per_day * price_per_play

    # plancher journalier proportionnel au minimum mensuel
    min_daily = round(pricing.min_monthly_price_cents / 30)
    if daily_price < min_daily:
        daily_price = min_daily

    daily_reach = round(terminal.avg_daily_audience * pricing.view_rate)
    return TerminalQuote(
        terminal_id=terminal.id,
        terminal_name=terminal.name,
        tier=terminal.tier,
        daily_traffic=terminal.avg_daily_audience,
        plays_per_day=plays_per_day,
        price_per_play_cents=price_per_play,
        daily_price_cents=daily_price,
        total_price_cents=daily_price * duration_days,
        estimated_daily_reach=daily_reach,
        estimated_total_reach=daily_reach * duration_days,
    )


def calculate_quote(
    terminals: Sequence[Terminal],
    plays_per_day: int,
    duration_days: int,
    pricing: QuotePricing = QuotePricing(),
) -> QuoteResult:
    plays_per_day = max(0, plays_per_day)
    duration_days = max(0, duration_days)
    quotes = [terminal_quote(t, plays_per_day, duration_days, pricing) for t in terminals]

    subtotal = sum(q.total_price_cents for q in quotes)
    total_plays = len(terminals) * plays_per_day * duration_days

    # recouvrement d'audience estimé entre terminaux
    raw_reach = sum(q.estimated_daily_reach for q in quotes)
    dedup = REACH_DEDUPLICATION if len(terminals) > 1 else 1.0
    daily_reach = round(raw_reach * dedup)

    discount_percent = volume_discount(len(terminals), pricing)
    discount = round(subtotal * discount_percent / 100)
    total = subtotal - discount

    return QuoteResult(
        total_terminals=len(terminals),
        total_plays=total_plays,
        total_days=duration_days,
        estimated_daily_reach=daily_reach,
        estimated_total_reach=daily_reach * duration_days,
        estimated_impressions=total_plays,
        subtotal_cents=subtotal,
        volume_discount_percent=discount_percent,
        volume_discount_cents=discount,
        total_cents=total,
        monthly_equivalent_cents=round(total / duration_days * 30) if duration_days > 0 else 0,
        terminal_quotes=quotes,
    )


def format_cents(cents: int, symbol: str = "R$") -> str:
    return f"{symbol} {cents / 100:,.2f}"


# ─────────────────────────────────────────────────
# Médailles (classification des points par trafic)
# ─────────────────────────────────────────────────

def medal_for_traffic(daily_traffic: float, config: MedalConfig = MedalConfig()) -> Optional[dict]:
    if not config.enabled or not daily_traffic or daily_traffic <= 0:
        return None
    for tier in config.tiers:
        if tier["min_traffic"] <= daily_traffic <= tier["max_traffic"]:
            return tier
    return None


def apply_medal_multiplier(
    base_price: float,
    daily_traffic: float,
    config: MedalConfig = MedalConfig(),
) -> tuple[float, Optional[dict]]:
    medal = medal_for_traffic(daily_traffic, config)
    multiplier = medal["multiplier"] if medal else 1.0
    return round(base_price * multiplier, 2), medal


def medal_prices(
    locations: Sequence[Location],
    base_price: float,
    config: MedalConfig = MedalConfig(),
) -> list[dict]:
    """Prix mensuel par point, majoré selon la médaille de son trafic."""
    out = []
    for l in locations:
        price, medal = apply_medal_multiplier(base_price, l.average_daily_traffic, config)
        out.append({
            "location_id": l.id,
            "location_name": l.name,
            "daily_traffic": l.average_daily_traffic,
            "medal": medal["type"] if medal else None,
            "price": price,
        })
    return out


# ─────────────────────────────────────────────────
# Calculateur de budget par rayon (tarif réseau)
# ─────────────────────────────────────────────────

@dataclass(frozen=True)
class NetworkBudget:
    locations_count: int
    display_count: int
    total_daily_traffic: int
    monthly_price: float
    daily_insertions: int
    monthly_insertions: int
    daily_exposure_minutes: float


def locations_in_radius(
    locations: Sequence[Location],
    center_lat: float,
    center_lng: float,
    radius_km: float,
) -> list[Location]:
    return [
        l for l in locations
        if l.has_coordinates
        and distance_km(center_lat, center_lng, l.latitude, l.longitude) <= radius_km
    ]


def network_budget(
    locations: Sequence[Location],
    monitors: Sequence[Monitor],
    center_lat: float,
    center_lng: float,
    radius_km: float,
    pricing: NetworkPricing = NetworkPricing(),
) -> NetworkBudget:
    nearby = locations_in_radius(locations, center_lat, center_lng, radius_km)
    ids = {l.id for l in nearby}
    displays = sum(1 for m in monitors if m.is_active and m.location_id in ids)

    daily_insertions = pricing.insertions_per_hour * pricing.operating_hours_per_day
    return NetworkBudget(
        locations_count=len(nearby),
        display_count=displays,
        total_daily_traffic=sum(l.average_daily_traffic for l in nearby),
        monthly_price=displays * pricing.price_per_display_month,
        daily_insertions=daily_insertions,
        monthly_insertions=daily_insertions * 30 * displays,
        daily_exposure_minutes=daily_insertions * pricing.avg_insertion_seconds * displays / 60,
    )
