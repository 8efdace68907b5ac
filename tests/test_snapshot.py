import unittest
from datetime import date

import pandas as pd

from africa_covid.config import CFR_COL, COUNTRY_COL, DATE_COL, REGION_COL
from africa_covid.snapshot import latest_snapshot, regional_snapshot, snapshot_date, top_countries

from tests.fixtures import make_cases, spring_2020_cases


class TestSnapshotSelection(unittest.TestCase):
    def test_day_before_reference_date(self):
        self.assertEqual(snapshot_date(date(2020, 5, 29)), pd.Timestamp("2020-05-28"))
        self.assertEqual(snapshot_date("2020-03-01 17:45"), pd.Timestamp("2020-02-29"))

    def test_selects_exactly_the_previous_day(self):
        cases = spring_2020_cases()
        snap = latest_snapshot(cases, date(2020, 5, 29))
        expected = cases[cases[DATE_COL] == pd.Timestamp("2020-05-28")].reset_index(drop=True)

        pd.testing.assert_frame_equal(snap, expected)
        self.assertEqual(sorted(snap[COUNTRY_COL]), ["Kenya", "Nigeria"])

    def test_no_matching_date_is_empty(self):
        cases = spring_2020_cases()

        self.assertTrue(latest_snapshot(cases, date(2020, 7, 1)).empty)
        self.assertTrue(latest_snapshot(cases, date(2020, 1, 22)).empty)


class TestSnapshotViews(unittest.TestCase):
    def setUp(self):
        self.snapshot = make_cases([
            ("2020-05-28", "Kenya", "Eastern Africa", 1618, 58, 421, 1139),
            ("2020-05-28", "Tanzania", "Eastern Africa", 509, 21, 183, 305),
            ("2020-05-28", "Nigeria", "Western Africa", 8344, 249, 2385, 5710),
            ("2020-05-28", "Ghana", "Western Africa", 7117, 34, 2317, 4766),
            ("2020-05-28", "Lesotho", "Southern Africa", 0, 0, 0, 0),
        ])

    def test_regional_snapshot(self):
        regional = regional_snapshot(self.snapshot).set_index(REGION_COL)

        self.assertEqual(regional.loc["Eastern Africa", "Confirmed"], 2127)
        self.assertEqual(regional.loc["Western Africa", "Deaths"], 283)
        self.assertEqual(regional.loc["Western Africa", CFR_COL], round(283 / 15461 * 100, 2))
        self.assertTrue(pd.isna(regional.loc["Southern Africa", CFR_COL]))

    def test_top_countries(self):
        ranked = top_countries(self.snapshot, "Confirmed", 3)

        self.assertEqual(ranked[COUNTRY_COL].tolist(), ["Nigeria", "Ghana", "Kenya"])

    def test_top_countries_skips_undefined(self):
        snap = self.snapshot.assign(**{CFR_COL: [3.58, 4.13, 2.98, 0.48, float("nan")]})
        ranked = top_countries(snap, CFR_COL, 10)

        self.assertEqual(ranked[COUNTRY_COL].tolist(), ["Tanzania", "Kenya", "Nigeria", "Ghana"])


if __name__ == "__main__":
    unittest.main()
