from __future__ import annotations

import argparse
import sys
from dataclasses import asdict
from datetime import datetime

from playreach.commissions import can_withdraw, compute_commissions, release_matured
from playreach.config import DEFAULT_SETTINGS, Settings, load_config
from playreach.engine import compute_exposure_reports, compute_financial_reports
from playreach.evaluator import evaluate
from playreach.export import reports_to_dict, to_row, write_csv
from playreach.loader import load_ledger, load_snapshot, load_terminals
from playreach.models import CampaignParams
from playreach.periods import PERIOD_KINDS, parse_period
from playreach.quotes import (
    calculate_quote, filter_by_radius, locations_in_radius, medal_prices, network_budget,
)
from playreach.revenue import filter_terminals, select_terminals, simulate_budget
from playreach.visualizer import (
    export_json, print_advertisers, print_commissions, print_locations,
    print_network, print_quote, print_simulation, print_totals,
)


def _settings(path: str | None) -> Settings:
    return load_config(path) if path else DEFAULT_SETTINGS


def cmd_reports(args: argparse.Namespace) -> None:
    settings = _settings(args.config)

    print("[1] Loading inventory...", flush=True)
    snapshot = load_snapshot(args.inventory)
    print(f"    {len(snapshot.media_items)} media, {len(snapshot.monitors)} screens, "
          f"{len(snapshot.locations)} locations loaded.", flush=True)

    period = parse_period(args.period, args.start, args.end)
    print(f"[2] Computing exposure (period={period.kind}, x{period.multiplier})...", flush=True)
    reports = compute_exposure_reports(snapshot, period, settings.engine)
    financial = compute_financial_reports(reports.advertisers, settings.engine)
    totals = evaluate(snapshot, reports)

    print_totals(totals)
    print_advertisers(reports.advertisers, financial)
    print_locations(reports.locations)

    export_json(reports_to_dict(reports, period, totals, financial), args.out)
    if args.csv_dir:
        for name, rows in (
            ("media", reports.media),
            ("advertisers", reports.advertisers),
            ("locations", reports.locations),
            ("playlists", reports.playlists),
            ("financial", financial),
        ):
            if rows:
                n = write_csv(rows, f"{args.csv_dir}/{name}.csv")
                print(f"  → {name}.csv ({n} rows)")


def cmd_simulate(args: argparse.Namespace) -> None:
    settings = _settings(args.config)

    print("[1] Loading terminals...", flush=True)
    terminals = load_terminals(args.terminals)
    filtered = filter_terminals(terminals, args.city or "")
    selected = select_terminals(terminals, filtered, args.select)
    print(f"    {len(terminals)} terminals, {len(selected)} in simulation.", flush=True)

    params = CampaignParams(
        duration_days=args.days,
        slot_seconds=args.slot,
        plays_per_day=args.plays,
    )
    sim = simulate_budget(selected, params, settings.simulator)
    print_simulation(sim)
    if args.out:
        export_json({"params": asdict(params), "result": to_row(sim)}, args.out)


def cmd_quote(args: argparse.Namespace) -> None:
    settings = _settings(args.config)
    terminals = load_terminals(args.terminals)
    if args.lat is not None and args.lng is not None:
        terminals = filter_by_radius(terminals, args.lat, args.lng, args.radius)
    print(f"[1] Quoting {len(terminals)} terminals...", flush=True)

    quote = calculate_quote(terminals, args.plays, args.days, settings.quote)
    print_quote(quote)
    if args.out:
        export_json(to_row(quote), args.out)


def cmd_network(args: argparse.Namespace) -> None:
    settings = _settings(args.config)
    snapshot = load_snapshot(args.inventory)
    print(f"[1] Screens within {args.radius} km of ({args.lat}, {args.lng})...", flush=True)

    budget = network_budget(
        snapshot.locations, snapshot.monitors, args.lat, args.lng, args.radius, settings.network,
    )
    nearby = locations_in_radius(snapshot.locations, args.lat, args.lng, args.radius)
    points = medal_prices(nearby, settings.network.price_per_display_month, settings.medals)
    print_network(budget, points)
    if args.out:
        export_json({"budget": to_row(budget), "locations": points}, args.out)


def cmd_commissions(args: argparse.Namespace) -> None:
    settings = _settings(args.config)
    entries = load_ledger(args.ledger)
    now = datetime.fromisoformat(args.now) if args.now else datetime.now()
    entries = release_matured(entries, now)
    if args.earner:
        entries = [e for e in entries if e.earner_id == args.earner]
    print(f"[1] {len(entries)} ledger entries.", flush=True)

    summary = compute_commissions(entries)
    print_commissions(summary)
    print(f"  Withdrawal allowed  : {'yes' if can_withdraw(summary, settings.affiliate) else 'no'}")
    if args.out:
        export_json(to_row(summary), args.out)


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="playreach")
    ap.add_argument("--config", default=None, help="JSON file overriding default settings")
    sub = ap.add_subparsers(dest="command", required=True)

    rp = sub.add_parser("reports", help="Exposure reports by media/advertiser/location/playlist")
    rp.add_argument("--inventory", default="data/inventory.json")
    rp.add_argument("--period", choices=PERIOD_KINDS, default="month")
    rp.add_argument("--start", default=None, help="YYYY-MM-DD (custom period)")
    rp.add_argument("--end", default=None, help="YYYY-MM-DD (custom period)")
    rp.add_argument("--out", default="reports.json")
    rp.add_argument("--csv-dir", default=None)
    rp.set_defaults(func=cmd_reports)

    sp = sub.add_parser("simulate", help="What-if budget simulation")
    sp.add_argument("--terminals", default="data/terminals.json")
    sp.add_argument("--city", default=None)
    sp.add_argument("--select", nargs="*", default=None, help="Terminal ids (default: all filtered)")
    sp.add_argument("--days", type=int, default=30)
    sp.add_argument("--slot", type=float, default=15)
    sp.add_argument("--plays", type=int, default=48)
    sp.add_argument("--out", default=None)
    sp.set_defaults(func=cmd_simulate)

    qp = sub.add_parser("quote", help="Tier-priced quote with volume discount")
    qp.add_argument("--terminals", default="data/terminals.json")
    qp.add_argument("--lat", type=float, default=None)
    qp.add_argument("--lng", type=float, default=None)
    qp.add_argument("--radius", type=float, default=5.0)
    qp.add_argument("--days", type=int, default=30)
    qp.add_argument("--plays", type=int, default=48)
    qp.add_argument("--out", default=None)
    qp.set_defaults(func=cmd_quote)

    nw = sub.add_parser("network", help="Radius budget with traffic medals")
    nw.add_argument("--inventory", default="data/inventory.json")
    nw.add_argument("--lat", type=float, required=True)
    nw.add_argument("--lng", type=float, required=True)
    nw.add_argument("--radius", type=float, default=5.0)
    nw.add_argument("--out", default=None)
    nw.set_defaults(func=cmd_network)

    cp = sub.add_parser("commissions", help="Ledger balances")
    cp.add_argument("--ledger", default="data/ledger.json")
    cp.add_argument("--earner", default=None)
    cp.add_argument("--now", default=None, help="naive ISO datetime (UTC) used for lock release")
    cp.add_argument("--out", default=None)
    cp.set_defaults(func=cmd_commissions)
    return ap


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    try:
        args.func(args)
    except (FileNotFoundError, ValueError) as e:
        print(f"error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
