"""
visualizer.py — Affichage terminal et export JSON des rapports
"""
from __future__ import annotations
import json
from pathlib import Path
from typing import Sequence

from .models import (
    AdvertiserExposureReport, CommissionSummary, FinancialReport,
    LocationReport, QuoteResult, SimulationResult,
)
from .quotes import NetworkBudget, format_cents


def format_duration(seconds: int) -> str:
    """12 → '12s', 150 → '2min', 5400 → '1h 30min'."""
    if seconds < 60:
        return f"{seconds}s"
    if seconds < 3600:
        return f"{seconds // 60}min"
    hours, rest = divmod(seconds, 3600)
    mins = rest // 60
    return f"{hours}h {mins}min" if mins > 0 else f"{hours}h"


def format_number(n: float) -> str:
    if n >= 1_000_000:
        return f"{n / 1_000_000:.1f}M"
    if n >= 1000:
        return f"{n / 1000:.1f}K"
    return f"{n:,.0f}"


def print_totals(totals: dict) -> None:
    print(f"\n{'═'*50}")
    print("  OVERVIEW")
    print(f"{'═'*50}")
    print(f"  Active media        : {totals['total_media']:>12}")
    print(f"  Advertisers         : {totals['total_advertisers']:>12}")
    print(f"  Locations           : {totals['total_locations']:>12}")
    print(f"  Active screens      : {totals['total_monitors']:>12}")
    print(f"  Exposures / day     : {format_number(totals['total_exposures_per_day']):>12}")
    print(f"  Exposures / month   : {format_number(totals['total_exposures_per_month']):>12}")
    if totals.get("orphan_media"):
        print(f"  ! {totals['orphan_media']} media without a known location")


def print_advertisers(
    reports: Sequence[AdvertiserExposureReport],
    financial: Sequence[FinancialReport] = (),
) -> None:
    values = {f.advertiser_id: f for f in financial}
    print(f"\n{'═'*86}")
    print(f"{'Advertiser':<28} {'Media':>6} {'Loc.':>5} {'Screens':>8} {'Exp/day':>10} {'Time/day':>12} {'Est./month*':>12}")
    print(f"{'─'*86}")
    for r in reports:
        fin = values.get(r.advertiser_id)
        value = f"{fin.estimated_monthly_value:>12,.2f}" if fin else f"{'-':>12}"
        print(
            f"{r.advertiser_name[:27]:<28} {r.total_media_items:>6} {r.locations_count:>5} "
            f"{r.monitors_count:>8} {format_number(r.total_exposures_per_day):>10} "
            f"{format_duration(r.total_seconds_per_day):>12} {value}"
        )
    if financial:
        print(f"  * estimate at CPM {financial[0].cpm_reference:.2f}, not an invoice")


def print_locations(reports: Sequence[LocationReport]) -> None:
    print(f"\n{'═'*78}")
    print(f"{'Location':<28} {'City':<16} {'Media':>6} {'Adv.':>5} {'Screens':>8} {'Exp/day':>10}")
    print(f"{'─'*78}")
    for r in reports:
        print(
            f"{r.location_name[:27]:<28} {r.city[:15]:<16} {r.total_media_items:>6} "
            f"{r.total_advertisers:>5} {r.monitors_count:>8} {format_number(r.total_exposures_per_day):>10}"
        )


def print_simulation(sim: SimulationResult) -> None:
    print(f"\n{'═'*50}")
    print("  BUDGET SIMULATION")
    print(f"{'═'*50}")
    print(f"  Terminals           : {sim.num_terminals:>15}")
    print(f"  Daily audience      : {sim.total_daily_audience:>15,.0f}")
    print(f"  Total plays         : {sim.total_plays:>15,}")
    print(f"  Total value         : {sim.total_value:>15,.2f}")
    print(f"  Daily value         : {sim.daily_value:>15,.2f}")
    print(f"  Sales commission    : {sim.commission:>15,.2f}")
    print(f"  Est. impressions    : {sim.estimated_impressions:>15,.0f}")
    print(f"  CPM                 : {sim.cpm:>15,.2f}")


def print_quote(quote: QuoteResult) -> None:
    print(f"\n{'═'*50}")
    print("  QUOTE")
    print(f"{'═'*50}")
    for q in quote.terminal_quotes:
        print(f"  {q.terminal_name[:24]:<24} {q.tier:<7} {format_cents(q.total_price_cents):>15}")
    print(f"  {'─'*46}")
    print(f"  Subtotal            : {format_cents(quote.subtotal_cents):>20}")
    print(f"  Volume discount     : {quote.volume_discount_percent:>18} %")
    print(f"  Total               : {format_cents(quote.total_cents):>20}")
    print(f"  Monthly equivalent  : {format_cents(quote.monthly_equivalent_cents):>20}")
    print(f"  Daily reach (est.)  : {quote.estimated_daily_reach:>20,}")


def print_commissions(summary: CommissionSummary) -> None:
    print(f"\n{'═'*50}")
    print("  COMMISSIONS")
    print(f"{'═'*50}")
    print(f"  Total earnings      : {summary.total_earnings:>15,.2f}")
    print(f"    level 1           : {summary.level1_earnings:>15,.2f}")
    print(f"    level 2           : {summary.level2_earnings:>15,.2f}")
    print(f"    sales             : {summary.sales_earnings:>15,.2f}")
    print(f"  Pending (locked)    : {summary.pending_balance:>15,.2f}")
    print(f"  Available           : {summary.available_for_withdraw:>15,.2f}")
    print(f"  Processing          : {summary.processing_total:>15,.2f}")
    print(f"  Paid                : {summary.paid_total:>15,.2f}")


def print_network(budget: NetworkBudget, points: Sequence[dict]) -> None:
    print(f"\n{'═'*50}")
    print("  NETWORK BUDGET")
    print(f"{'═'*50}")
    print(f"  Locations           : {budget.locations_count:>15}")
    print(f"  Screens             : {budget.display_count:>15}")
    print(f"  Daily traffic       : {budget.total_daily_traffic:>15,}")
    print(f"  Monthly price       : {budget.monthly_price:>15,.2f}")
    print(f"  Insertions / month  : {budget.monthly_insertions:>15,}")
    print(f"  Exposure min / day  : {budget.daily_exposure_minutes:>15,.1f}")
    print(f"  {'─'*46}")
    for p in points:
        medal = p["medal"] or "-"
        print(f"  {p['location_name'][:24]:<24} {medal:<7} {p['price']:>13,.2f}")


def export_json(data: dict, path: str | Path) -> None:
    Path(path).write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")
    print(f"  → Exported: {path}")
