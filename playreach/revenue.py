"""
revenue.py — Estimations financières
(a) Valorisation CPM : Valeur_mensuelle = Expositions_mois / 1000 × CPM_référence
(b) Simulateur de budget : Valeur = plays × prix_par_play × (slot / slot_référence)
"""
from __future__ import annotations
import math
from typing import Iterable, Optional, Sequence

from .config import DEFAULT_CONFIG, ESTIMATE_LABEL, EngineConfig, SimulatorPricing
from .models import (
    AdvertiserExposureReport, CampaignParams, FinancialReport, SimulationResult, Terminal,
)


def cpm_value(exposures: float, cpm: float) -> float:
    """Valeur indicative d'un volume d'expositions à un CPM donné."""
    return (exposures / 1000.0) * cpm


def compute_financial_reports(
    advertiser_reports: Iterable[AdvertiserExposureReport],
    config: EngineConfig = DEFAULT_CONFIG,
) -> list[FinancialReport]:
    """Valorisation estimée (jamais une facture) de chaque annonceur."""
    out: list[FinancialReport] = []
    for r in advertiser_reports:
        monthly = cpm_value(r.total_exposures_per_month, config.cpm_reference)
        out.append(FinancialReport(
            advertiser_id=r.advertiser_id,
            advertiser_name=r.advertiser_name,
            total_exposures_per_month=r.total_exposures_per_month,
            cpm_reference=config.cpm_reference,
            estimated_monthly_value=monthly,
            estimated_yearly_value=monthly * config.months_per_year,
            is_estimate=True,
            label=ESTIMATE_LABEL,
        ))
    return out


# ─────────────────────────────────────────────────
# Simulateur "what-if"
# ─────────────────────────────────────────────────

def filter_terminals(terminals: Sequence[Terminal], city: str = "") -> list[Terminal]:
    if not city:
        return list(terminals)
    needle = city.lower()
    return [t for t in terminals if needle in (t.city or "").lower()]


def select_terminals(
    terminals: Sequence[Terminal],
    filtered: Sequence[Terminal],
    selected_ids: Optional[Iterable[str]] = None,
) -> list[Terminal]:
    """Sélection explicite si non vide, sinon tous les terminaux filtrés."""
    ids = set(selected_ids or ())
    if ids:
        return [t for t in terminals if t.id in ids]
    return list(filtered)


def _clamp(value: float, upper: Optional[float] = None) -> float:
    # NaN, infini ou négatif → 0
    if value is None or not math.isfinite(value) or value < 0:
        return 0.0
    return min(value, upper) if upper is not None else value


def simulate_budget(
    terminals: Sequence[Terminal],
    params: CampaignParams = CampaignParams(),
    pricing: SimulatorPricing = SimulatorPricing(),
) -> SimulationResult:
    num_terminals = len(terminals)
    days = max(0, params.duration_days)
    plays_per_day = max(0, params.plays_per_day)
    slot_seconds = _clamp(params.slot_seconds)
    price_per_play = _clamp(pricing.price_per_play)
    commission_rate = _clamp(pricing.commission_rate_percent, 100.0)
    total_daily_audience = sum(_clamp(t.avg_daily_audience) for t in terminals)

    ref = _clamp(pricing.reference_slot_duration)
    slot_multiplier = slot_seconds / ref if ref > 0 else 0.0

    total_plays = num_terminals * plays_per_day * days
    total_value = total_plays * price_per_play * slot_multiplier
    commission = total_value * commission_rate / 100

    avg_audience = total_daily_audience / num_terminals if num_terminals > 0 else 0.0
    impressions = total_plays * avg_audience
    cpm = (total_value / impressions) * 1000 if impressions > 0 else 0.0

    return SimulationResult(
        num_terminals=num_terminals,
        total_daily_audience=total_daily_audience,
        slot_multiplier=slot_multiplier,
        total_plays=total_plays,
        total_value=total_value,
        commission=commission,
        avg_audience_per_terminal=avg_audience,
        estimated_impressions=impressions,
        cpm=cpm,
        daily_value=total_value / days if days > 0 else 0.0,
    )
