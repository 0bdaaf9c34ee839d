"""
Plot selection data: farmer profile plots, plot geometry and the field
analysis summary.
"""

from datetime import date
from typing import Any, Dict, List, NamedTuple, Optional

import requests

from .. import config
from ..analysis.field_boundary import make_boundary_feature
from ..analysis.layer_kinds import GROWTH
from .analysis_api import fetch_analysis


class Plot(NamedTuple):
    plot_name: str
    gat_number: str = ""
    plot_number: str = ""
    address: str = ""
    boundary: Optional[dict] = None


class PlotContext:
    """
    The selected plot, shared read-only with every consumer.

    Only the orchestrator calls select()/clear().
    """

    def __init__(self, plots: List[Plot] = None):
        self.plots = {p.plot_name: p for p in (plots or [])}
        self.plot_name: Optional[str] = None

    @property
    def plot(self) -> Optional[Plot]:
        if self.plot_name is None:
            return None
        return self.plots.get(self.plot_name, Plot(self.plot_name))

    def select(self, plot_name: str):
        self.plot_name = plot_name

    def clear(self):
        self.plot_name = None


def plots_from_profile(profile: Optional[dict]) -> List[Plot]:
    """
    Builds Plot records from a farmer profile's ``plots`` array.

    Entries without a ``fastapi_plot_id`` cannot be queried and are skipped.
    """
    if not isinstance(profile, dict):
        return []

    plots = []
    for entry in profile.get("plots") or []:
        if not isinstance(entry, dict) or not entry.get("fastapi_plot_id"):
            continue
        address = entry.get("address") or {}
        boundary_geom = (entry.get("coordinates") or {}).get("boundary")
        boundary = None
        if isinstance(boundary_geom, dict) and boundary_geom.get("has_boundary", True):
            boundary = make_boundary_feature(
                {"type": boundary_geom.get("type"), "coordinates": boundary_geom.get("coordinates")},
                {"plot_name": entry["fastapi_plot_id"]},
            )
        plots.append(Plot(
            plot_name=entry["fastapi_plot_id"],
            gat_number=entry.get("gat_number") or "",
            plot_number=entry.get("plot_number") or "",
            address=(address.get("full_address") or "") if isinstance(address, dict) else "",
            boundary=boundary,
        ))
    return plots


def default_plot(plots: List[Plot]) -> Optional[str]:
    return plots[0].plot_name if plots else None


def fetch_plot_geometry(plot_name: str, today: date) -> Optional[dict]:
    """Growth analysis at today's date; used for its plot boundary."""
    return fetch_analysis(GROWTH, plot_name, today)


def _pick_field_entry(data: Any, plot_name: str) -> Optional[dict]:
    if isinstance(data, list):
        entries = [
            item for item in data
            if isinstance(item, dict)
            and (item.get("plot_name") or item.get("plot") or item.get("name") or "") == plot_name
        ]
        if not entries:
            return None
        entries.sort(key=lambda item: str(item.get("date") or item.get("analysis_date") or ""), reverse=True)
        return entries[0]
    if isinstance(data, dict):
        return data
    return None


def summarize_field_analysis(data: Any, plot_name: str) -> Optional[Dict[str, Any]]:
    """
    Reduce a field analysis response to the health figures the dashboard shows.

    A list response holds entries for several plots and dates; the newest
    entry for ``plot_name`` is used.
    """
    entry = _pick_field_entry(data, plot_name)
    if entry is None:
        return None

    statistics = entry.get("statistics") if isinstance(entry.get("statistics"), dict) else {}
    overall = entry.get("overall_health")
    if overall is None:
        overall = entry.get("health_score")
    status = entry.get("health_status")
    if status is None:
        status = entry.get("status")
    mean = statistics.get("mean")
    if mean is None:
        mean = entry.get("mean")

    return {
        "plot_name": entry.get("plot_name") or plot_name,
        "overall_health": 0 if overall is None else overall,
        "health_status": "Unknown" if status is None else status,
        "mean": 0 if mean is None else mean,
    }


def fetch_field_analysis(plot_name: str, today: date) -> Optional[Dict[str, Any]]:
    """Fetches and summarizes the field analysis; None on failure."""
    if not plot_name:
        return None

    url = f"{config.FIELD_API_URL}/analyze"
    params = {"plot_name": plot_name, "end_date": today.isoformat(), "days_back": config.DAYS_BACK}
    try:
        response = requests.get(url, params=params, timeout=config.REQUEST_TIMEOUT)
        response.raise_for_status()
        data = response.json()
    except (requests.RequestException, ValueError) as e:
        print(f"[fetch_field_analysis] Field analysis failed for {plot_name}: {e}")
        return None

    return summarize_field_analysis(data, plot_name)
