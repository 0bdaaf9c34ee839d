import unittest
from datetime import date
from unittest.mock import MagicMock, patch

import requests

from field_mon.analysis.layer_kinds import GROWTH
from field_mon.data.plots import (
    Plot,
    PlotContext,
    default_plot,
    fetch_field_analysis,
    fetch_plot_geometry,
    plots_from_profile,
    summarize_field_analysis,
)

from layer_payloads import BOUNDARY_RING

TODAY = date(2025, 2, 10)

PROFILE = {
    "plots": [
        {
            "id": 1,
            "fastapi_plot_id": "P1",
            "gat_number": "112",
            "plot_number": "3",
            "address": {"village": "Wai", "full_address": "Wai, Satara, Maharashtra"},
            "coordinates": {
                "boundary": {"type": "Polygon", "coordinates": [BOUNDARY_RING], "has_boundary": True}
            },
        },
        {"id": 2, "fastapi_plot_id": "", "gat_number": "9"},
        {"id": 3, "fastapi_plot_id": "P3", "coordinates": {"boundary": {"type": "Polygon", "coordinates": [], "has_boundary": False}}},
    ]
}


class TestProfilePlots(unittest.TestCase):

    def test_plots_from_profile(self):
        plots = plots_from_profile(PROFILE)
        self.assertEqual([p.plot_name for p in plots], ["P1", "P3"])

        p1 = plots[0]
        self.assertEqual(p1.gat_number, "112")
        self.assertEqual(p1.plot_number, "3")
        self.assertEqual(p1.address, "Wai, Satara, Maharashtra")
        self.assertEqual(p1.boundary["geometry"]["coordinates"], [BOUNDARY_RING])
        self.assertEqual(p1.boundary["properties"]["plot_name"], "P1")
        self.assertIsNone(plots[1].boundary)

    def test_empty_profile(self):
        self.assertEqual(plots_from_profile(None), [])
        self.assertEqual(plots_from_profile({"plots": None}), [])

    def test_default_plot(self):
        self.assertEqual(default_plot(plots_from_profile(PROFILE)), "P1")
        self.assertIsNone(default_plot([]))


class TestPlotContext(unittest.TestCase):

    def test_select_known_and_unknown(self):
        context = PlotContext(plots_from_profile(PROFILE))
        self.assertIsNone(context.plot)

        context.select("P1")
        self.assertEqual(context.plot.gat_number, "112")

        context.select("P9")
        self.assertEqual(context.plot, Plot("P9"))

        context.clear()
        self.assertIsNone(context.plot_name)


class TestFieldAnalysis(unittest.TestCase):

    def test_object_response(self):
        summary = summarize_field_analysis(
            {"plot_name": "P1", "overall_health": 78, "health_status": "Good", "statistics": {"mean": 0.61}}, "P1"
        )
        self.assertEqual(summary, {"plot_name": "P1", "overall_health": 78, "health_status": "Good", "mean": 0.61})

    def test_list_response_picks_newest_for_plot(self):
        data = [
            {"plot_name": "P1", "date": "2025-01-01", "health_score": 50},
            {"plot": "P1", "analysis_date": "2025-02-01", "health_score": 70, "status": "Fair", "mean": 0.4},
            {"plot_name": "P2", "date": "2025-03-01", "health_score": 90},
        ]
        summary = summarize_field_analysis(data, "P1")
        self.assertEqual(summary["overall_health"], 70)
        self.assertEqual(summary["health_status"], "Fair")
        self.assertEqual(summary["mean"], 0.4)
        self.assertEqual(summary["plot_name"], "P1")

    def test_defaults(self):
        summary = summarize_field_analysis({}, "P1")
        self.assertEqual(summary, {"plot_name": "P1", "overall_health": 0, "health_status": "Unknown", "mean": 0})

    def test_no_entry_for_plot(self):
        self.assertIsNone(summarize_field_analysis([{"plot_name": "P2"}], "P1"))
        self.assertIsNone(summarize_field_analysis("oops", "P1"))

    @patch('field_mon.data.plots.requests.get')
    def test_fetch_field_analysis(self, mock_get):
        response = MagicMock()
        response.json.return_value = {"overall_health": 65, "health_status": "Moderate"}
        mock_get.return_value = response

        summary = fetch_field_analysis("P1", TODAY)

        self.assertEqual(summary["overall_health"], 65)
        args, kwargs = mock_get.call_args
        self.assertTrue(args[0].endswith("/analyze"))
        self.assertEqual(kwargs["params"]["end_date"], "2025-02-10")

    @patch('field_mon.data.plots.requests.get')
    def test_fetch_field_analysis_failure(self, mock_get):
        mock_get.side_effect = requests.Timeout("timed out")
        self.assertIsNone(fetch_field_analysis("P1", TODAY))

    @patch('field_mon.data.plots.fetch_analysis')
    def test_fetch_plot_geometry_uses_growth_at_today(self, mock_fetch):
        mock_fetch.return_value = {"features": []}
        self.assertEqual(fetch_plot_geometry("P1", TODAY), {"features": []})
        mock_fetch.assert_called_once_with(GROWTH, "P1", TODAY)


if __name__ == '__main__':
    unittest.main()
