"""
Data fetching module for field_mon.

This module provides functions for:
- Analysis layer requests (analysis_api.py)
- Plot selection, plot geometry and field analysis (plots.py)
"""

from .analysis_api import AnalysisLayer, fetch_analysis, parse_analysis_layer, load_layer
from .plots import (
    Plot,
    PlotContext,
    plots_from_profile,
    default_plot,
    fetch_plot_geometry,
    fetch_field_analysis
)

__all__ = [
    # analysis_api
    'AnalysisLayer',
    'fetch_analysis',
    'parse_analysis_layer',
    'load_layer',
    # plots
    'Plot',
    'PlotContext',
    'plots_from_profile',
    'default_plot',
    'fetch_plot_geometry',
    'fetch_field_analysis',
]
