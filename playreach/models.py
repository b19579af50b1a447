"""
models.py — Classes de données : inventaire (médias, écrans, lieux, campagnes,
annonceurs, terminaux), rapports calculés et ledger de commissions
"""
from __future__ import annotations
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional


# ─────────────────────────────────────────────────
# Inventaire (lecture seule)
# ─────────────────────────────────────────────────

@dataclass(frozen=True)
class MediaItem:
    id: str
    title: str = ""
    media_type: str = ""
    duration_seconds: int = 10
    is_active: bool = True
    location_id: Optional[str] = None
    campaign_id: Optional[str] = None
    advertiser_id: Optional[str] = None


@dataclass(frozen=True)
class Monitor:
    id: str
    location_id: Optional[str]
    name: str = ""
    is_active: bool = True


@dataclass(frozen=True)
class Location:
    id: str
    name: str = ""
    city: str = ""
    state: str = ""
    commission_percentage: Optional[float] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    average_daily_traffic: int = 0

    @property
    def has_coordinates(self) -> bool:
        return self.latitude is not None and self.longitude is not None


@dataclass(frozen=True)
class Campaign:
    id: str
    name: str = ""
    advertiser_id: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    is_active: bool = True


@dataclass(frozen=True)
class Advertiser:
    id: str
    name: str = ""
    segment: str = ""
    is_active: bool = True


@dataclass(frozen=True)
class Terminal:
    """Écran sélectionnable dans le simulateur, avec son audience moyenne."""
    id: str
    name: str = ""
    location_name: str = ""
    city: str = ""
    avg_daily_audience: float = 500
    tier: str = "BRONZE"
    latitude: Optional[float] = None
    longitude: Optional[float] = None


@dataclass(frozen=True)
class InventorySnapshot:
    media_items: tuple[MediaItem, ...] = ()
    monitors: tuple[Monitor, ...] = ()
    locations: tuple[Location, ...] = ()
    campaigns: tuple[Campaign, ...] = ()
    advertisers: tuple[Advertiser, ...] = ()
    terminals: tuple[Terminal, ...] = ()

    # Index construits une seule fois ; le snapshot reste immuable
    _locations_by_id: dict = field(default_factory=dict, init=False, repr=False, compare=False)
    _campaigns_by_id: dict = field(default_factory=dict, init=False, repr=False, compare=False)
    _advertisers_by_id: dict = field(default_factory=dict, init=False, repr=False, compare=False)
    _screens_by_location: dict = field(default_factory=dict, init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        self._locations_by_id.update({l.id: l for l in self.locations})
        self._campaigns_by_id.update({c.id: c for c in self.campaigns})
        self._advertisers_by_id.update({a.id: a for a in self.advertisers})
        for m in self.monitors:
            if m.is_active:
                self._screens_by_location[m.location_id] = self._screens_by_location.get(m.location_id, 0) + 1

    def location(self, location_id: Optional[str]) -> Optional[Location]:
        return self._locations_by_id.get(location_id)

    def campaign(self, campaign_id: Optional[str]) -> Optional[Campaign]:
        return self._campaigns_by_id.get(campaign_id)

    def advertiser(self, advertiser_id: Optional[str]) -> Optional[Advertiser]:
        return self._advertisers_by_id.get(advertiser_id)

    def active_monitor_count(self, location_id: Optional[str]) -> int:
        """Nombre réel d'écrans actifs du lieu (peut valoir 0)."""
        return self._screens_by_location.get(location_id, 0)

    def active_media(self) -> list[MediaItem]:
        return [m for m in self.media_items if m.is_active]

    @property
    def active_monitors_total(self) -> int:
        return sum(1 for m in self.monitors if m.is_active)


# ─────────────────────────────────────────────────
# Rapports calculés (jamais persistés)
# ─────────────────────────────────────────────────

@dataclass(frozen=True)
class MediaExposureReport:
    media_id: str
    media_title: str
    media_type: str
    advertiser_id: Optional[str]
    advertiser_name: Optional[str]
    campaign_id: Optional[str]
    campaign_name: Optional[str]
    location_id: Optional[str]
    location_name: str
    monitors_count: int
    media_duration: int
    cycle_duration: int
    exposures_per_hour: int
    exposures_per_day: int
    exposures_per_week: int
    exposures_per_month: int
    exposures_per_year: int
    total_seconds_per_day: int
    total_seconds_per_week: int
    total_seconds_per_month: int
    total_seconds_per_year: int
    # Valeurs projetées sur la période demandée (day/week/.../custom)
    exposures_in_period: int
    seconds_in_period: int


@dataclass(frozen=True)
class AdvertiserExposureReport:
    advertiser_id: str
    advertiser_name: str
    advertiser_segment: str
    total_media_items: int
    total_exposures_per_day: int
    total_exposures_per_week: int
    total_exposures_per_month: int
    total_exposures_per_year: int
    total_seconds_per_day: int
    total_seconds_per_week: int
    total_seconds_per_month: int
    total_seconds_per_year: int
    total_exposures_in_period: int
    total_seconds_in_period: int
    locations_count: int
    monitors_count: int


@dataclass(frozen=True)
class LocationReport:
    location_id: str
    location_name: str
    city: str
    state: str
    total_media_items: int
    total_advertisers: int
    monitors_count: int
    total_exposures_per_day: int
    total_exposures_per_month: int
    total_seconds_per_day: int
    total_exposures_in_period: int
    commission_percentage: Optional[float]


@dataclass(frozen=True)
class PlaylistReport:
    campaign_id: str
    campaign_name: str
    advertiser_id: Optional[str]
    advertiser_name: str
    start_date: Optional[date]
    end_date: Optional[date]
    total_media_items: int
    locations_count: int
    total_exposures_per_day: int
    total_exposures_per_month: int
    total_seconds_per_day: int
    total_exposures_in_period: int


@dataclass(frozen=True)
class ExposureReports:
    media: list[MediaExposureReport] = field(default_factory=list)
    advertisers: list[AdvertiserExposureReport] = field(default_factory=list)
    locations: list[LocationReport] = field(default_factory=list)
    playlists: list[PlaylistReport] = field(default_factory=list)


@dataclass(frozen=True)
class FinancialReport:
    advertiser_id: str
    advertiser_name: str
    total_exposures_per_month: int
    cpm_reference: float
    estimated_monthly_value: float
    estimated_yearly_value: float
    is_estimate: bool = True
    label: str = "estimate"


@dataclass(frozen=True)
class CampaignParams:
    duration_days: int = 30
    slot_seconds: float = 15
    plays_per_day: int = 48


@dataclass(frozen=True)
class SimulationResult:
    num_terminals: int
    total_daily_audience: float
    slot_multiplier: float
    total_plays: int
    total_value: float
    commission: float
    avg_audience_per_terminal: float
    estimated_impressions: float
    cpm: float
    daily_value: float


@dataclass(frozen=True)
class TerminalQuote:
    terminal_id: str
    terminal_name: str
    tier: str
    daily_traffic: float
    plays_per_day: int
    price_per_play_cents: int
    daily_price_cents: int
    total_price_cents: int
    estimated_daily_reach: int
    estimated_total_reach: int


@dataclass(frozen=True)
class QuoteResult:
    total_terminals: int
    total_plays: int
    total_days: int
    estimated_daily_reach: int
    estimated_total_reach: int
    estimated_impressions: int
    subtotal_cents: int
    volume_discount_percent: int
    volume_discount_cents: int
    total_cents: int
    monthly_equivalent_cents: int
    terminal_quotes: list[TerminalQuote] = field(default_factory=list)


# ─────────────────────────────────────────────────
# Ledger de commissions
# ─────────────────────────────────────────────────

PENDING = "pending"
AVAILABLE = "available"
PROCESSING = "processing"
PAID = "paid"
CANCELLED = "cancelled"

LEDGER_STATUSES = (PENDING, AVAILABLE, PROCESSING, PAID, CANCELLED)

# Origine de l'entrée : parrainage (niveaux 1-2) ou vente (niveau 0)
AFFILIATE = "affiliate"
SALES = "sales"


@dataclass(frozen=True)
class CommissionLedgerEntry:
    id: str
    earner_id: str
    level: int
    rate: float
    base_amount: float
    amount: float
    status: str = PENDING
    reference_month: str = ""
    created_at: Optional[datetime] = None
    available_at: Optional[datetime] = None
    invoice_id: Optional[str] = None
    source_id: Optional[str] = None
    kind: str = AFFILIATE

    @property
    def is_cancelled(self) -> bool:
        return self.status == CANCELLED


@dataclass(frozen=True)
class CommissionSummary:
    total_earnings: float
    pending_balance: float
    available_for_withdraw: float
    paid_total: float
    processing_total: float
    level1_earnings: float
    level2_earnings: float
    sales_earnings: float = 0.0
    per_entry_breakdown: list[dict] = field(default_factory=list)
