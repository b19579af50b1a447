"""Tests unitaires — devis par terminal, rayon géographique, médailles"""
import sys, os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import contextlib
import io
import json
import shutil
import tempfile
import unittest

import main
from playreach.config import MedalConfig
from playreach.loader import load_snapshot, load_terminals
from playreach.models import Terminal
from playreach.quotes import (
    apply_medal_multiplier, calculate_quote, distance_km, filter_by_radius, format_cents,
    medal_for_traffic, medal_prices, network_budget, terminal_quote, tier_multiplier, volume_discount,
)

DATA = os.path.join(os.path.dirname(__file__), "..", "data")
AURORA = (-23.5614, -46.6559)


def make_terminal(id="T1", tier="BRONZE", audience=500):
    return Terminal(id=id, name=id, tier=tier, avg_daily_audience=audience)


class TestPricing(unittest.TestCase):
    def test_tier_gold(self): self.assertEqual(tier_multiplier("GOLD"), 2.0)
    def test_tier_unknown(self): self.assertEqual(tier_multiplier("PLATINUM"), 1.0)
    def test_discount_none(self): self.assertEqual(volume_discount(4), 0)
    def test_discount_5(self): self.assertEqual(volume_discount(5), 5)
    def test_discount_12(self): self.assertEqual(volume_discount(12), 10)
    def test_discount_50(self): self.assertEqual(volume_discount(80), 20)
    def test_min_daily(self): self.assertEqual(terminal_quote(make_terminal(), 48, 30).daily_price_cents, 500)
    def test_gold_price(self):
        q = terminal_quote(make_terminal(tier="GOLD", audience=800), 100, 30)
        self.assertEqual((q.price_per_play_cents, q.daily_price_cents, q.total_price_cents), (10, 1000, 30_000))
    def test_reach(self): self.assertEqual(terminal_quote(make_terminal(audience=800), 48, 30).estimated_daily_reach, 560)
    def test_format(self): self.assertEqual(format_cents(123456), "R$ 1,234.56")


class TestQuote(unittest.TestCase):
    def test_two_terminals(self):
        q = calculate_quote([make_terminal("T1", "GOLD", 800), make_terminal("T2", "BRONZE", 500)], 100, 30)
        self.assertEqual((q.subtotal_cents, q.total_cents, q.volume_discount_percent), (45_000, 45_000, 0))
        self.assertEqual(q.estimated_daily_reach, 728)
        self.assertEqual(q.total_plays, 6000)

    def test_single_no_dedup(self): self.assertEqual(calculate_quote([make_terminal(audience=800)], 48, 30).estimated_daily_reach, 560)

    def test_volume(self):
        q = calculate_quote([make_terminal(f"T{i}") for i in range(5)], 48, 10)
        self.assertEqual((q.subtotal_cents, q.volume_discount_cents, q.total_cents), (25_000, 1250, 23_750))
        self.assertEqual(q.monthly_equivalent_cents, 71_250)

    def test_zero_days(self):
        q = calculate_quote([make_terminal()], 48, 0)
        self.assertEqual((q.total_cents, q.monthly_equivalent_cents), (0, 0))

    def test_empty(self): self.assertEqual(calculate_quote([], 48, 30).total_cents, 0)


class TestGeo(unittest.TestCase):
    def test_self(self): self.assertAlmostEqual(distance_km(*AURORA, *AURORA), 0.0)
    def test_sp_campinas(self): self.assertTrue(70 < distance_km(*AURORA, -22.9056, -47.0608) < 100)
    def test_radius(self):
        terminals = load_terminals(os.path.join(DATA, "terminals.json"))
        self.assertEqual(sorted(t.id for t in filter_by_radius(terminals, *AURORA, 5)), ["T1", "T2", "T3"])

    def test_network_budget(self):
        snap = load_snapshot(os.path.join(DATA, "inventory.json"))
        b = network_budget(snap.locations, snap.monitors, *AURORA, 5)
        self.assertEqual((b.locations_count, b.display_count, b.total_daily_traffic), (2, 2, 410))
        self.assertEqual((b.monthly_price, b.daily_insertions, b.monthly_insertions), (40.0, 48, 2880))
        self.assertAlmostEqual(b.daily_exposure_minutes, 24.0)


class TestMedals(unittest.TestCase):
    def test_bronze(self): self.assertEqual(medal_for_traffic(150)["type"], "bronze")
    def test_silver(self): self.assertEqual(medal_for_traffic(250)["type"], "silver")
    def test_gold(self): self.assertEqual(medal_for_traffic(300)["type"], "gold")
    def test_zero(self): self.assertIsNone(medal_for_traffic(0))
    def test_disabled(self): self.assertIsNone(medal_for_traffic(250, MedalConfig(enabled=False)))
    def test_apply(self):
        price, medal = apply_medal_multiplier(100, 250)
        self.assertEqual((price, medal["type"]), (150.0, "silver"))
    def test_apply_none(self): self.assertEqual(apply_medal_multiplier(100, 0), (100.0, None))
    def test_prices(self):
        snap = load_snapshot(os.path.join(DATA, "inventory.json"))
        points = {p["location_id"]: p for p in medal_prices(snap.locations, 20.0)}
        self.assertEqual([(points[i]["medal"], points[i]["price"]) for i in ("L1", "L2", "L3")],
                         [("gold", 40.0), ("silver", 30.0), ("bronze", 20.0)])
    def test_prices_disabled(self):
        snap = load_snapshot(os.path.join(DATA, "inventory.json"))
        self.assertEqual({p["price"] for p in medal_prices(snap.locations, 20.0, MedalConfig(enabled=False))}, {20.0})


class TestNetworkCommand(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.mkdtemp()
        self.addCleanup(shutil.rmtree, self.tmp)

    def _run(self, overrides):
        cfg, out = os.path.join(self.tmp, "settings.json"), os.path.join(self.tmp, "network.json")
        with open(cfg, "w", encoding="utf-8") as f:
            json.dump(overrides, f)
        with contextlib.redirect_stdout(io.StringIO()):
            main.main(["--config", cfg, "network", "--inventory", os.path.join(DATA, "inventory.json"),
                       f"--lat={AURORA[0]}", f"--lng={AURORA[1]}", "--radius", "5", "--out", out])
        with open(out, encoding="utf-8") as f:
            return json.load(f)

    def test_network_settings(self):
        data = self._run({"network": {"price_per_display_month": 30}})
        self.assertEqual((data["budget"]["display_count"], data["budget"]["monthly_price"]), (2, 60.0))
        self.assertEqual([p["price"] for p in data["locations"]], [60.0, 30.0])

    def test_medal_settings(self):
        data = self._run({"medals": {"enabled": False}})
        self.assertEqual([(p["medal"], p["price"]) for p in data["locations"]], [(None, 20.0), (None, 20.0)])


if __name__ == "__main__":
    unittest.main(verbosity=2)
