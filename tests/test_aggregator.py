"""Tests unitaires — agrégations annonceur / lieu / playlist et totaux"""
import sys, os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import unittest

from playreach.aggregator import by_advertiser, by_campaign, by_location, filter_by_location
from playreach.audience import build_media_reports
from playreach.engine import compute_exposure_reports
from playreach.evaluator import evaluate
from playreach.loader import load_snapshot
from playreach.models import Advertiser, Campaign, InventorySnapshot, Location, MediaItem, Monitor
from playreach.periods import WEEK

DATA = os.path.join(os.path.dirname(__file__), "..", "data")


def sample():
    return load_snapshot(os.path.join(DATA, "inventory.json"))


class TestAdvertiser(unittest.TestCase):
    def setUp(self):
        self.snap = sample()
        self.reports = compute_exposure_reports(self.snap)
        self.adv = {r.advertiser_id: r for r in self.reports.advertisers}

    def test_active_only(self): self.assertEqual(sorted(self.adv), ["A1", "A2"])
    def test_totals(self): self.assertEqual((self.adv["A1"].total_exposures_per_day, self.adv["A2"].total_exposures_per_day), (7200, 13680))
    def test_media_count(self): self.assertEqual(self.adv["A2"].total_media_items, 4)
    def test_locations(self): self.assertEqual(self.adv["A2"].locations_count, 3)
    # deux médias du même lieu à 2 écrans + un lieu sans écran : 2 + 2 + 1
    def test_monitors_summed(self): self.assertEqual(self.adv["A1"].monitors_count, 5)

    def test_completeness(self):
        for adv in self.reports.advertisers:
            rows = [m for m in self.reports.media if m.advertiser_id == adv.advertiser_id]
            self.assertEqual(sum(m.exposures_per_day for m in rows), adv.total_exposures_per_day)
            self.assertEqual(sum(m.total_seconds_per_month for m in rows), adv.total_seconds_per_month)

    def test_completeness_synthetic(self):
        media = tuple(
            MediaItem(id=f"M{i}", duration_seconds=5 + 7 * i, location_id=f"L{i % 3}",
                      campaign_id="C1" if i % 2 else None, advertiser_id=f"A{i % 4}")
            for i in range(17)
        )
        snap = InventorySnapshot(
            media_items=media,
            monitors=tuple(Monitor(f"S{i}", f"L{i % 3}") for i in range(5)),
            locations=tuple(Location(f"L{i}") for i in range(3)),
            advertisers=tuple(Advertiser(f"A{i}") for i in range(4)),
        )
        rows = build_media_reports(snap, WEEK)
        for adv in by_advertiser(rows, snap):
            expected = sum(r.exposures_per_day for r in rows if r.advertiser_id == adv.advertiser_id)
            self.assertEqual(adv.total_exposures_per_day, expected)
            self.assertEqual(adv.total_exposures_in_period, expected * 7)

    def test_no_media_dropped(self):
        snap = InventorySnapshot(advertisers=(Advertiser("A1"),))
        self.assertEqual(by_advertiser([], snap), [])


class TestLocation(unittest.TestCase):
    def setUp(self):
        self.snap = sample()
        self.loc = {r.location_id: r for r in by_location(build_media_reports(self.snap), self.snap)}

    def test_orphan_excluded(self): self.assertEqual(sorted(self.loc), ["L1", "L2", "L3"])
    def test_real_screens(self): self.assertEqual((self.loc["L1"].monitors_count, self.loc["L3"].monitors_count), (2, 0))
    def test_advertisers(self): self.assertEqual((self.loc["L1"].total_advertisers, self.loc["L2"].total_advertisers), (2, 1))
    def test_commission(self): self.assertEqual(self.loc["L2"].commission_percentage, 12.5)
    def test_total(self): self.assertEqual(self.loc["L1"].total_exposures_per_day, 11520)


class TestPlaylist(unittest.TestCase):
    def setUp(self):
        snap = sample()
        self.pl = {r.campaign_id: r for r in by_campaign(build_media_reports(snap), snap)}

    def test_inactive_campaign(self): self.assertNotIn("C3", self.pl)
    def test_internal(self): self.assertEqual(self.pl["C2"].advertiser_name, "Internal")
    def test_advertiser_name(self): self.assertEqual(self.pl["C1"].advertiser_name, "Padaria Pão Quente")
    def test_total(self): self.assertEqual(self.pl["C1"].total_exposures_per_day, 5760)

    def test_no_rows_no_report(self):
        snap = InventorySnapshot(campaigns=(Campaign("C1"),))
        self.assertEqual(by_campaign([], snap), [])


class TestFilterAndTotals(unittest.TestCase):
    def setUp(self):
        self.snap = sample()
        self.reports = compute_exposure_reports(self.snap)

    def test_filter_all(self): self.assertEqual(len(filter_by_location(self.reports.media, "all")), 8)
    def test_filter_none(self): self.assertEqual(len(filter_by_location(self.reports.media)), 8)
    def test_filter_one(self): self.assertEqual(len(filter_by_location(self.reports.media, "L2")), 2)
    def test_filter_unknown(self): self.assertEqual(filter_by_location(self.reports.media, "L404"), [])

    def test_totals(self):
        t = evaluate(self.snap, self.reports)
        self.assertEqual((t["total_media"], t["total_monitors"], t["orphan_media"]), (8, 3, 1))
        self.assertEqual(t["total_exposures_per_day"], sum(m.exposures_per_day for m in self.reports.media))

    # l'orphelin compte dans le total mais pas dans les lieux
    def test_orphan_in_totals_only(self):
        t = evaluate(self.snap, self.reports)
        by_loc = sum(r.total_exposures_per_day for r in self.reports.locations)
        self.assertEqual(t["total_exposures_per_day"] - by_loc, 3600)


if __name__ == "__main__":
    unittest.main(verbosity=2)
