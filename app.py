import streamlit as st

from playreach.aggregator import filter_by_location
from playreach.config import DEFAULT_SETTINGS, SimulatorPricing
from playreach.engine import compute_exposure_reports, compute_financial_reports
from playreach.evaluator import evaluate
from playreach.export import to_rows
from playreach.loader import load_snapshot, load_terminals
from playreach.models import CampaignParams
from playreach.periods import Period
from playreach.revenue import filter_terminals, select_terminals, simulate_budget
from playreach.visualizer import format_duration, format_number

INVENTORY_PATH = "data/inventory.json"
TERMINALS_PATH = "data/terminals.json"

TIER_ICONS = {"GOLD": "🥇", "SILVER": "🥈", "BRONZE": "🥉"}


def fmt_money(v: float) -> str:
    """Format as Brazilian real with thousands separators."""
    return "R$ " + f"{v:,.2f}".replace(",", "X").replace(".", ",").replace("X", ".")


st.set_page_config(page_title="Exposure & budget", layout="wide")

st.title("📺 Exposure & revenue estimation")

tab_reports, tab_sim = st.tabs(["📊 Reports", "🧮 Budget simulator"])

# ── Exposure reports ───────────────────────────────────────────────
with tab_reports:
    try:
        snapshot = load_snapshot(INVENTORY_PATH)
    except FileNotFoundError:
        st.error(f"File `{INVENTORY_PATH}` not found.")
        st.stop()

    kind = st.radio("Period", ["day", "week", "month", "year", "custom"], index=2, horizontal=True)
    if kind == "custom":
        c1, c2 = st.columns(2)
        start = c1.date_input("Start")
        end = c2.date_input("End")
        period = Period("custom", start, end)
    else:
        period = Period(kind)

    reports = compute_exposure_reports(snapshot, period, DEFAULT_SETTINGS.engine)
    financial = compute_financial_reports(reports.advertisers, DEFAULT_SETTINGS.engine)
    totals = evaluate(snapshot, reports)

    k1, k2, k3, k4, k5 = st.columns(5)
    k1.metric("Active media", totals["total_media"])
    k2.metric("Advertisers", totals["total_advertisers"])
    k3.metric("Locations", totals["total_locations"])
    k4.metric("Active screens", totals["total_monitors"])
    k5.metric(f"Exposures ({period.kind})", format_number(totals["total_exposures_in_period"]))
    if totals["orphan_media"]:
        st.warning(f"{totals['orphan_media']} media reference a location missing from the inventory.")

    view = st.selectbox("View", ["Advertisers", "Media", "Locations", "Playlists"])
    if view == "Advertisers":
        rows = to_rows(reports.advertisers)
        values = {f.advertiser_id: f for f in financial}
        for r in rows:
            fin = values.get(r["advertiser_id"])
            r["time_per_day"] = format_duration(r["total_seconds_per_day"])
            r["estimated_monthly_value"] = fin.estimated_monthly_value if fin else 0.0
        st.dataframe(rows, use_container_width=True)
        st.caption(
            f"Monthly value is an estimate at a reference CPM of "
            f"{DEFAULT_SETTINGS.engine.cpm_reference:.2f}, not billing."
        )
    elif view == "Media":
        location_names = {l.id: l.name for l in snapshot.locations}
        choice = st.selectbox("Location", ["all"] + list(location_names), format_func=lambda i: location_names.get(i, "All"))
        rows = filter_by_location(reports.media, choice)
        st.dataframe(to_rows(rows), use_container_width=True)
    elif view == "Locations":
        st.dataframe(to_rows(reports.locations), use_container_width=True)
    else:
        st.dataframe(to_rows(reports.playlists), use_container_width=True)

# ── What-if simulator ──────────────────────────────────────────────
with tab_sim:
    try:
        terminals = load_terminals(TERMINALS_PATH)
    except FileNotFoundError:
        st.error(f"File `{TERMINALS_PATH}` not found.")
        st.stop()

    city = st.text_input("Filter by city", "")
    filtered = filter_terminals(terminals, city)

    labels = {t.id: f"{TIER_ICONS.get(t.tier, '')} {t.name} — {t.location_name} ({t.avg_daily_audience:,.0f}/day)" for t in filtered}
    selected_ids = st.multiselect("Terminals (empty = all filtered)", list(labels), format_func=labels.get)

    s1, s2, s3 = st.columns(3)
    days = s1.number_input("Duration (days)", min_value=1, value=30)
    slot = s2.select_slider("Slot (seconds)", options=[10, 15, 30, 45, 60], value=15)
    plays = s3.number_input("Plays per day", min_value=1, value=48)

    with st.expander("Pricing"):
        p1, p2, p3 = st.columns(3)
        defaults = DEFAULT_SETTINGS.simulator
        pricing = SimulatorPricing(
            price_per_play=p1.number_input("Price per play", min_value=0.0, value=defaults.price_per_play, step=0.01),
            reference_slot_duration=p2.number_input("Reference slot (s)", min_value=1, value=int(defaults.reference_slot_duration)),
            commission_rate_percent=p3.number_input("Commission %", min_value=0.0, max_value=100.0, value=defaults.commission_rate_percent),
        )

    selected = select_terminals(terminals, filtered, selected_ids)
    sim = simulate_budget(selected, CampaignParams(int(days), float(slot), int(plays)), pricing)

    m1, m2, m3, m4 = st.columns(4)
    m1.metric("Total value", fmt_money(sim.total_value))
    m2.metric("Per day", fmt_money(sim.daily_value))
    m3.metric("Sales commission", fmt_money(sim.commission))
    m4.metric("CPM", fmt_money(sim.cpm))

    n1, n2, n3 = st.columns(3)
    n1.metric("Terminals", sim.num_terminals)
    n2.metric("Total plays", format_number(sim.total_plays))
    n3.metric("Est. impressions", format_number(sim.estimated_impressions))

    if selected_ids:
        st.info(f"{len(selected_ids)} of {len(filtered)} terminals selected")
    else:
        st.info(f"{len(filtered)} terminals available (all considered)")
