import unittest
from datetime import date

import numpy as np
import pandas as pd

from africa_covid import charts
from africa_covid.config import CFR_COL, COUNTRY_COL, DATE_COL, REGION_COL, SERIES_STYLES
from africa_covid.loader import load_cases
from africa_covid.report import build_report
from africa_covid.snapshot import top_countries

from tests.fixtures import SAMPLE_CSV
from tests.test_names import feature_collection


class TestCharts(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.report = build_report(load_cases(SAMPLE_CSV), date(2020, 5, 29))

    def test_trend_chart_uses_series_colours(self):
        fig = charts.trend_chart(self.report.daily, ["Confirmed", "Deaths"])
        colours = {trace.name: trace.line.color for trace in fig.data}

        self.assertEqual(colours, {
            SERIES_STYLES["Confirmed"].label: SERIES_STYLES["Confirmed"].color,
            SERIES_STYLES["Deaths"].label: SERIES_STYLES["Deaths"].color,
        })
        self.assertEqual(fig.layout.paper_bgcolor, "rgba(0,0,0,0)")

    def test_rates_chart_leaves_gaps(self):
        daily = self.report.daily.copy()
        daily.loc[0, CFR_COL] = np.nan
        fig = charts.rates_chart(daily)

        self.assertEqual(len(fig.data), 2)
        self.assertTrue(all(trace.connectgaps is False for trace in fig.data))

    def test_regional_trend_has_one_line_per_region(self):
        fig = charts.regional_trend_chart(self.report.regional, "New cases")

        self.assertEqual(len(fig.data), self.report.regional[REGION_COL].nunique())

    def test_ranking_chart(self):
        ranked = top_countries(self.report.snapshot, "Confirmed", 3)
        fig = charts.ranking_chart(ranked, "Confirmed")

        plotted = [x for trace in fig.data for x in trace.x]
        self.assertEqual(sorted(plotted), sorted(ranked[COUNTRY_COL]))

    def test_heatmap_pivot(self):
        fig = charts.heatmap_chart(self.report.regional, REGION_COL, DATE_COL, "New cases", title="New cases")
        heat = fig.data[0]

        self.assertEqual(len(heat.y), 5)
        self.assertEqual(len(heat.x), 14)
        self.assertEqual(heat.x[0], "2020-05-15")

    def test_rates_heatmap(self):
        fig = charts.rates_heatmap(self.report.snapshot)

        self.assertEqual(list(fig.data[0].y), sorted(self.report.snapshot[COUNTRY_COL]))

    def test_choropleth_joins_on_geo_name(self):
        fig = charts.choropleth_map(self.report.snapshot, feature_collection("Kenya"), "Confirmed", "properties.ADMIN")
        locations = list(fig.data[0].locations)

        self.assertIn("United Republic of Tanzania", locations)
        self.assertNotIn("Tanzania", locations)
        self.assertEqual(fig.data[0].featureidkey, "properties.ADMIN")

    def test_table_blanks_undefined_values(self):
        frame = pd.DataFrame({COUNTRY_COL: ["Kenya", "Eritrea"], "Confirmed": [200, 0], CFR_COL: [5.0, np.nan]})
        fig = charts.table_chart(frame)
        cells = fig.data[0].cells.values

        self.assertEqual(list(cells[1]), ["200", "0"])
        self.assertEqual(list(cells[2]), ["5.00", ""])

    def test_composition_chart(self):
        fig = charts.composition_chart(self.report.latest_totals)

        self.assertEqual(list(fig.data[0].labels), ["Active", "Recovered", "Deaths"])


if __name__ == "__main__":
    unittest.main()
