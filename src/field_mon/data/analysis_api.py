"""
Analysis layer fetching for the field overlay.

One request/parse path serves all four layers; what differs between them
(endpoint, class names, summary keys) lives in analysis.layer_kinds.
"""

from datetime import date
from typing import Any, NamedTuple, Optional

import requests

from .. import config
from ..analysis.field_boundary import extract_boundary_feature
from ..analysis.layer_kinds import get_layer_spec
from ..processing.tile_url import resolve_tile_url


class AnalysisLayer(NamedTuple):
    kind: str
    plot_name: str
    end_date: date
    pixel_summary: dict
    boundary: Optional[dict]
    tile_url: Optional[str]
    response: dict


def build_layer_request(kind: str, plot_name: str, end_date: date, days_back: int = None):
    """Returns (url, params) for a layer's analysis endpoint."""
    spec = get_layer_spec(kind)
    url = f"{config.PLOT_API_URL}/{spec.endpoint}"
    params = {
        "plot_name": plot_name,
        "end_date": end_date.isoformat(),
        "days_back": config.DAYS_BACK if days_back is None else days_back,
    }
    return url, params


def fetch_analysis(kind: str, plot_name: str, end_date: date, days_back: int = None) -> Optional[dict]:
    """
    POSTs an analysis request and returns the decoded JSON body.

    Network, HTTP and decode errors are reported on the console and give
    None, so one failing layer never takes down the others.
    """
    if not plot_name:
        return None

    url, params = build_layer_request(kind, plot_name, end_date, days_back)
    print(f"[fetch_analysis] {kind} for plot {plot_name}, end_date {params['end_date']}")
    try:
        response = requests.post(
            url,
            params=params,
            headers={"Content-Type": "application/json"},
            timeout=config.REQUEST_TIMEOUT,
        )
        response.raise_for_status()
        data = response.json()
    except (requests.RequestException, ValueError) as e:
        print(f"[fetch_analysis] {kind} request failed: {e}")
        return None

    if not isinstance(data, dict):
        print(f"[fetch_analysis] {kind} returned {type(data).__name__}, expected an object")
        return None
    return data


def parse_analysis_layer(kind: str, plot_name: str, end_date: date, data: Any) -> Optional[AnalysisLayer]:
    """
    Turns a decoded response into an AnalysisLayer.

    A response without a usable pixel summary still yields a layer (its
    boundary and tiles may be fine); only a non-dict body gives None.
    """
    get_layer_spec(kind)
    if not isinstance(data, dict):
        return None

    summary = data.get("pixel_summary")
    return AnalysisLayer(
        kind=kind,
        plot_name=plot_name,
        end_date=end_date,
        pixel_summary=summary if isinstance(summary, dict) else {},
        boundary=extract_boundary_feature(data),
        tile_url=resolve_tile_url(data, layer_name=kind),
        response=data,
    )


def load_layer(kind: str, plot_name: str, end_date: date) -> Optional[AnalysisLayer]:
    """Fetch and parse one analysis layer; None on any failure."""
    return parse_analysis_layer(kind, plot_name, end_date, fetch_analysis(kind, plot_name, end_date))
