from __future__ import annotations

import json
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Dict, List, Tuple

# Fonctionnement des écrans : 12h par jour
HOURS_PER_DAY = 12
SECONDS_PER_HOUR = 3600
DEFAULT_MEDIA_DURATION = 10  # secondes, si la durée est absente ou invalide

PERIOD_DAYS: Dict[str, int] = {
    "day": 1,
    "week": 7,
    "month": 30,
    "year": 365,
}

# Valorisation indicative (pas de facturation) : 5.00 pour 1000 expositions
CPM_REFERENCE = 5.00
MONTHS_PER_YEAR = 12

UNKNOWN_LOCATION_LABEL = "Unknown location"
INTERNAL_LABEL = "Internal"
ESTIMATE_LABEL = "estimate"

# Simulateur de budget
DEFAULT_PRICE_PER_PLAY = 0.10
DEFAULT_REFERENCE_SLOT = 15  # secondes
DEFAULT_SALES_COMMISSION = 15.0  # %
DEFAULT_TERMINAL_AUDIENCE = 500

# Affiliés : taux en %, lock en jours
AFFILIATE_L1_PERCENTAGE = 10.0
AFFILIATE_L2_PERCENTAGE = 5.0
AFFILIATE_LOCK_DAYS = 30
AFFILIATE_MIN_WITHDRAWAL = 50.0

# Devis par terminal (montants en centimes)
BASE_PRICE_PER_PLAY_CENTS = 5
MIN_MONTHLY_PRICE_CENTS = 15_000
VIEW_RATE = 0.7
REACH_DEDUPLICATION = 0.8
VOLUME_DISCOUNTS: List[Tuple[int, int]] = [
    # (nb écrans minimum, % de remise)
    (5, 5),
    (10, 10),
    (20, 15),
    (50, 20),
]

TERMINAL_TIERS = {
    "GOLD":   {"label": "Ouro",   "multiplier": 2.0},
    "SILVER": {"label": "Prata",  "multiplier": 1.5},
    "BRONZE": {"label": "Bronze", "multiplier": 1.0},
}

# Médailles des points selon le flux quotidien de personnes
MEDAL_TIERS = [
    {"type": "bronze", "label": "Bronze", "min_traffic": 1,   "max_traffic": 199,    "multiplier": 1.0},
    {"type": "silver", "label": "Prata",  "min_traffic": 200, "max_traffic": 299,    "multiplier": 1.5},
    {"type": "gold",   "label": "Ouro",   "min_traffic": 300, "max_traffic": 999999, "multiplier": 2.0},
]

# Calculateur par rayon (tarif réseau)
PRICE_PER_DISPLAY_MONTH = 20.0
INSERTIONS_PER_HOUR = 4
AVG_INSERTION_SECONDS = 15


@dataclass(frozen=True)
class EngineConfig:
    hours_per_day: int = HOURS_PER_DAY
    seconds_per_hour: int = SECONDS_PER_HOUR
    default_media_duration: int = DEFAULT_MEDIA_DURATION
    cpm_reference: float = CPM_REFERENCE
    months_per_year: int = MONTHS_PER_YEAR


@dataclass(frozen=True)
class SimulatorPricing:
    price_per_play: float = DEFAULT_PRICE_PER_PLAY
    reference_slot_duration: float = DEFAULT_REFERENCE_SLOT
    commission_rate_percent: float = DEFAULT_SALES_COMMISSION


@dataclass(frozen=True)
class AffiliateSettings:
    enabled: bool = True
    level1_rate: float = AFFILIATE_L1_PERCENTAGE
    level2_rate: float = AFFILIATE_L2_PERCENTAGE
    lock_days: int = AFFILIATE_LOCK_DAYS
    min_withdrawal: float = AFFILIATE_MIN_WITHDRAWAL


@dataclass(frozen=True)
class QuotePricing:
    base_price_per_play_cents: int = BASE_PRICE_PER_PLAY_CENTS
    min_monthly_price_cents: int = MIN_MONTHLY_PRICE_CENTS
    view_rate: float = VIEW_RATE
    volume_discounts: Tuple[Tuple[int, int], ...] = tuple(VOLUME_DISCOUNTS)


@dataclass(frozen=True)
class NetworkPricing:
    price_per_display_month: float = PRICE_PER_DISPLAY_MONTH
    insertions_per_hour: int = INSERTIONS_PER_HOUR
    avg_insertion_seconds: int = AVG_INSERTION_SECONDS
    operating_hours_per_day: int = HOURS_PER_DAY


@dataclass(frozen=True)
class MedalConfig:
    enabled: bool = True
    tiers: Tuple[dict, ...] = field(default_factory=lambda: tuple(MEDAL_TIERS))


@dataclass(frozen=True)
class Settings:
    engine: EngineConfig = field(default_factory=EngineConfig)
    simulator: SimulatorPricing = field(default_factory=SimulatorPricing)
    affiliate: AffiliateSettings = field(default_factory=AffiliateSettings)
    quote: QuotePricing = field(default_factory=QuotePricing)
    network: NetworkPricing = field(default_factory=NetworkPricing)
    medals: MedalConfig = field(default_factory=MedalConfig)


DEFAULT_CONFIG = EngineConfig()
DEFAULT_SETTINGS = Settings()


def _override(obj, values: dict):
    known = {f.name for f in fields(obj)}
    unknown = set(values) - known
    if unknown:
        raise ValueError(f"Unknown settings for {type(obj).__name__}: {sorted(unknown)}")
    if "volume_discounts" in values:
        values = dict(values, volume_discounts=tuple(tuple(t) for t in values["volume_discounts"]))
    if "tiers" in values:
        values = dict(values, tiers=tuple(values["tiers"]))
    return replace(obj, **values)


def load_config(path: str | Path) -> Settings:
    """
    Charge un fichier JSON de surcharge, ex :
    {"engine": {"hours_per_day": 14}, "affiliate": {"level1_rate": 20}}
    Les sections absentes gardent les valeurs par défaut.
    """
    with open(path, encoding="utf-8") as f:
        raw: dict = json.load(f)

    sections = {f.name for f in fields(Settings)}
    unknown = set(raw) - sections
    if unknown:
        raise ValueError(f"Unknown settings sections: {sorted(unknown)}")

    base = DEFAULT_SETTINGS
    return Settings(**{
        name: _override(getattr(base, name), raw.get(name, {}))
        for name in sections
    })
