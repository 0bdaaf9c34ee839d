"""Tests for OverlayView rendering and the console report."""

import unittest
from datetime import date
from unittest.mock import patch

import matplotlib
matplotlib.use('Agg')

import matplotlib.pyplot as plt

from field_mon import config
from field_mon.analysis.layer_kinds import GROWTH, PEST, SOIL_MOISTURE
from field_mon.data.plots import PlotContext
from field_mon.gui.date_pager import DatePager
from field_mon.gui.orchestrator import LayerOrchestrator
from field_mon.gui.overlay_view import OverlayView
from field_mon.visualization.reports import print_map_report

from layer_payloads import TILE_URL, growth_response, pixel, soil_moisture_response

TODAY = date(2025, 2, 10)
RESPONSES = {GROWTH: growth_response(), SOIL_MOISTURE: soil_moisture_response(), PEST: None}


def load_layer(kind, plot_name, end_date):
    from field_mon.data.analysis_api import parse_analysis_layer
    return parse_analysis_layer(kind, plot_name, end_date, RESPONSES.get(kind))


def make_orchestrator():
    return LayerOrchestrator(
        context=PlotContext(),
        pager=DatePager(today_fn=lambda: TODAY),
        load_layer_fn=load_layer,
        plot_geometry_fn=lambda plot, today: None,
        field_analysis_fn=lambda plot, today: {"plot_name": plot, "overall_health": 80, "health_status": "Good", "mean": 0.6},
    )


class TestOverlayView(unittest.TestCase):

    def setUp(self):
        self.orch = make_orchestrator()
        self.orch.select_plot("P1")
        self.view = OverlayView()

    def tearDown(self):
        plt.close('all')

    @patch('contextily.add_basemap')
    def test_renders_basemap_tiles_boundary_and_legend(self, mock_base):
        fig, ax = self.view.render(self.orch.snapshot())

        sources = [call.kwargs['source'] for call in mock_base.call_args_list]
        self.assertEqual(sources, [config.BASEMAP_URL, TILE_URL])
        self.assertEqual(len(ax.patches), 1)
        legend = ax.get_legend()
        self.assertIsNotNone(legend)
        self.assertEqual(len(legend.get_texts()), 4)
        self.assertIn("Growth", ax.get_title())

    @patch('contextily.add_basemap')
    def test_missing_tile_url_still_draws_boundary(self, mock_base):
        self.orch.select_layer(PEST)
        fig, ax = self.view.render(self.orch.snapshot())

        self.assertEqual(mock_base.call_count, 1)
        self.assertEqual(len(ax.patches), 1)
        self.assertIsNone(ax.get_legend())

    @patch('contextily.add_basemap')
    def test_pixel_markers_and_tooltip(self, mock_base):
        self.orch.select_legend_class("Healthy", 65)
        self.orch.select_layer(SOIL_MOISTURE)
        self.orch.select_layer(GROWTH)
        self.orch.select_legend_class("Healthy", 65)
        self.orch.hover_coordinate(pixel(3, 0))

        fig, ax = self.view.render(self.orch.snapshot())

        self.assertEqual(len(ax.collections), 1)
        self.assertEqual(len(ax.collections[0].get_offsets()), 2)
        tooltip_texts = [t.get_text() for t in ax.texts]
        self.assertTrue(any("Soil Moisture: Excess" in t for t in tooltip_texts))

    @patch('contextily.add_basemap', side_effect=RuntimeError("offline"))
    def test_tile_errors_do_not_break_render(self, mock_base):
        fig, ax = self.view.render(self.orch.snapshot())
        self.assertIsNotNone(fig)
        self.assertEqual(len(ax.patches), 1)

    @patch('contextily.add_basemap')
    def test_idle_snapshot(self, mock_base):
        fig, ax = self.view.render(make_orchestrator().snapshot())
        self.assertEqual(len(ax.patches), 0)
        self.assertIn("no plot selected", ax.get_title())


def test_print_map_report(capsys):
    orch = make_orchestrator()
    orch.select_plot("P1")
    orch.select_legend_class("Healthy", 65)
    orch.hover_coordinate(pixel(3, 0))

    print_map_report(orch.snapshot())
    out = capsys.readouterr().out

    assert "FIELD OVERLAY REPORT" in out
    assert "Plot:" in out and "P1" in out
    assert "*Healthy" in out
    assert "Highlighted: Healthy (2 pixels)" in out
    assert "Growth" in out and "Healthy" in out
    assert "2.50 acres" in out


def test_print_map_report_without_data(capsys):
    orch = make_orchestrator()
    orch.select_plot("P1")
    orch.select_layer(PEST)

    print_map_report(orch.snapshot())
    out = capsys.readouterr().out

    assert "No legend data for this layer." in out
    assert "no raster overlay" in out
    assert "No Pest data available" in out


def test_print_map_report_hover_without_match(capsys):
    orch = make_orchestrator()
    orch.select_plot("P1")
    orch.hover_coordinate(pixel(40, 40))

    print_map_report(orch.snapshot())
    assert "Pixel: no class in any loaded layer" in capsys.readouterr().out

    orch.hover_coordinate(None)
    print_map_report(orch.snapshot())
    assert "Pixel:" not in capsys.readouterr().out


if __name__ == '__main__':
    unittest.main()
