"""Tests unitaires — modèles, chargement JSON et configuration"""
import sys, os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import json
import tempfile
import unittest
from datetime import date, datetime

from playreach.config import DEFAULT_SETTINGS, load_config
from playreach.loader import (
    _fix_encoding, ledger_entry_from_dict, load_ledger, load_snapshot, load_terminals,
    location_from_dict, media_from_dict, terminal_from_dict,
)
from playreach.models import CommissionLedgerEntry, InventorySnapshot, Location, Monitor

DATA = os.path.join(os.path.dirname(__file__), "..", "data")


class TestSnapshot(unittest.TestCase):
    def _snap(self):
        return InventorySnapshot(
            monitors=(Monitor("S1", "L1"), Monitor("S2", "L1"), Monitor("S3", "L2", is_active=False)),
            locations=(Location("L1", "Aurora", latitude=-23.5, longitude=-46.6), Location("L2")),
        )
    def test_lookup(self): self.assertEqual(self._snap().location("L1").name, "Aurora")
    def test_lookup_missing(self): self.assertIsNone(self._snap().location("L9"))
    def test_screens(self): self.assertEqual(self._snap().active_monitor_count("L1"), 2)
    def test_screens_inactive(self): self.assertEqual(self._snap().active_monitor_count("L2"), 0)
    def test_total_screens(self): self.assertEqual(self._snap().active_monitors_total, 2)
    def test_coords(self): self.assertTrue(self._snap().location("L1").has_coordinates)
    def test_no_coords(self): self.assertFalse(self._snap().location("L2").has_coordinates)
    def test_cancelled(self): self.assertTrue(CommissionLedgerEntry("E", "U", 1, 10, 100, 10, status="cancelled").is_cancelled)


class TestLoader(unittest.TestCase):
    def test_fix_encoding(self): self.assertEqual(_fix_encoding("MatinÃ©e"), "Matinée")
    def test_fix_encoding_clean(self): self.assertEqual(_fix_encoding("São Paulo"), "São Paulo")
    def test_camel_case(self): self.assertEqual(media_from_dict({"id": 1, "durationSeconds": 20, "locationId": "L1"}).location_id, "L1")
    def test_snake_case(self): self.assertEqual(media_from_dict({"id": 1, "duration_seconds": 20}).duration_seconds, 20)
    def test_negative_duration(self): self.assertEqual(media_from_dict({"id": 1, "durationSeconds": -5}).duration_seconds, 10)
    def test_nan_duration(self): self.assertEqual(media_from_dict({"id": 1, "durationSeconds": "nan"}).duration_seconds, 10)
    def test_missing_duration(self): self.assertEqual(media_from_dict({"id": 1}).duration_seconds, 10)
    def test_id_str(self): self.assertEqual(media_from_dict({"id": 7}).id, "7")
    def test_nested_commission(self): self.assertEqual(location_from_dict({"id": "L", "commission": {"percentage": 12.5}}).commission_percentage, 12.5)
    def test_missing_audience(self): self.assertEqual(terminal_from_dict({"id": "T"}).avg_daily_audience, 500)
    def test_negative_audience(self): self.assertEqual(terminal_from_dict({"id": "T", "avgDailyAudience": -3}).avg_daily_audience, 0.0)
    def test_unknown_tier(self): self.assertEqual(terminal_from_dict({"id": "T", "tier": "PLATINUM"}).tier, "BRONZE")
    def test_tier_case(self): self.assertEqual(terminal_from_dict({"id": "T", "tier": "gold"}).tier, "GOLD")

    def test_ledger_amount_derived(self):
        e = ledger_entry_from_dict({"id": "E", "affiliateId": "U1", "baseAmount": 299, "percentageApplied": 10})
        self.assertEqual((e.amount, e.status, e.level), (29.9, "pending", 1))

    def test_ledger_aware_datetime(self):
        e = ledger_entry_from_dict({"id": "E", "availableAt": "2026-07-05T10:00:00Z"})
        self.assertEqual(e.available_at, datetime(2026, 7, 5, 10, 0))

    def test_ledger_unknown_status(self): self.assertEqual(ledger_entry_from_dict({"id": "E", "status": "lost"}).status, "pending")


class TestSampleData(unittest.TestCase):
    def test_snapshot(self):
        snap = load_snapshot(os.path.join(DATA, "inventory.json"))
        self.assertEqual(len(snap.media_items), 9)
        self.assertEqual(snap.location("L2").name, "Café Central")
        self.assertEqual(snap.campaign("C1").start_date, date(2026, 1, 1))
    def test_no_bad_encoding(self):
        snap = load_snapshot(os.path.join(DATA, "inventory.json"))
        self.assertEqual([l.name for l in snap.locations if "Ã" in l.name], [])
    def test_terminals(self): self.assertEqual(len(load_terminals(os.path.join(DATA, "terminals.json"))), 6)
    def test_ledger(self): self.assertEqual(len(load_ledger(os.path.join(DATA, "ledger.json"))), 5)


class TestConfig(unittest.TestCase):
    def _write(self, payload):
        f = tempfile.NamedTemporaryFile("w", suffix=".json", delete=False, encoding="utf-8")
        json.dump(payload, f)
        f.close()
        self.addCleanup(os.remove, f.name)
        return f.name

    def test_defaults(self):
        s = DEFAULT_SETTINGS
        self.assertEqual((s.engine.hours_per_day, s.engine.cpm_reference, s.affiliate.lock_days), (12, 5.0, 30))

    def test_override(self):
        s = load_config(self._write({"engine": {"hours_per_day": 14}, "affiliate": {"level1_rate": 20}}))
        self.assertEqual((s.engine.hours_per_day, s.affiliate.level1_rate, s.affiliate.level2_rate), (14, 20, 5.0))

    def test_discounts_tuple(self):
        s = load_config(self._write({"quote": {"volume_discounts": [[5, 5], [10, 12]]}}))
        self.assertEqual(s.quote.volume_discounts, ((5, 5), (10, 12)))

    def test_unknown_key(self):
        with self.assertRaises(ValueError): load_config(self._write({"engine": {"hours": 14}}))

    def test_unknown_section(self):
        with self.assertRaises(ValueError): load_config(self._write({"billing": {}}))

    def test_example_file(self): self.assertEqual(load_config(os.path.join(DATA, "settings.example.json")).engine.hours_per_day, 14)


if __name__ == "__main__":
    unittest.main(verbosity=2)
