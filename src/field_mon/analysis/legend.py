"""
Legend rows for the active analysis layer.

Labels, colors and descriptions come from the static layer table; only the
percentage is read from the pixel summary.
"""

import math
from typing import List, NamedTuple, Optional

from .layer_kinds import PEST, first_present, get_layer_spec


class LegendRow(NamedTuple):
    label: str
    color: str
    percentage: int
    description: str


def round_percentage(value) -> int:
    """Round half up to the nearest integer; non-numeric and non-finite values count as 0."""
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
        return 0
    return int(math.floor(value + 0.5))


def _raw_number(value) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
        return 0.0
    return float(value)


def build_legend(kind: str, pixel_summary: Optional[dict]) -> List[LegendRow]:
    """
    Build the ordered legend for one layer.

    Args:
        kind: Layer kind (see layer_kinds.LAYER_ORDER).
        pixel_summary: The response's ``pixel_summary`` dict, or None.

    Returns:
        List of LegendRow in the layer's canonical class order. Empty when
        there is no summary yet.
    """
    spec = get_layer_spec(kind)
    if not isinstance(pixel_summary, dict) or not pixel_summary:
        return []

    return [
        LegendRow(
            label=cls.label,
            color=cls.color,
            percentage=round_percentage(first_present(pixel_summary, cls.percentage_keys)),
            description=cls.description,
        )
        for cls in spec.classes
    ]


def legend_percentage(legend: List[LegendRow], label: str) -> int:
    for row in legend:
        if row.label == label:
            return row.percentage
    return 0


def pest_summary(pixel_summary: Optional[dict]) -> Optional[dict]:
    """
    Aggregate pest pressure figures for the dashboard cards.

    Returns None when there is no pest summary.
    """
    if not isinstance(pixel_summary, dict) or not pixel_summary:
        return None

    spec = get_layer_spec(PEST)
    percentages = {
        cls.label: _raw_number(first_present(pixel_summary, cls.percentage_keys))
        for cls in spec.classes
    }
    affected_pct = sum(percentages.values())

    def count(*keys):
        return int(_raw_number(first_present(pixel_summary, keys)))

    chewing_pixels = count("chewing_affected_pixel_count")
    sucking_pixels = count("sucking_affected_pixel_count")
    affected_pixels = (
        chewing_pixels
        + sucking_pixels
        + count("fungi_affected_pixel_count")
        + count("SoilBorn_pixel_count", "SoilBorn_affected_pixel_count", "SoilBorne_affected_pixel_count")
    )

    return {
        "pest_percentage": affected_pct,
        "healthy_percentage": 100 - affected_pct,
        "total_pixels": count("total_pixel_count"),
        "pest_affected_pixels": affected_pixels,
        "chewing_pest_percentage": percentages["Chewing"],
        "chewing_pest_pixels": chewing_pixels,
        "sucking_percentage": percentages["Sucking"],
        "sucking_pixels": sucking_pixels,
    }
