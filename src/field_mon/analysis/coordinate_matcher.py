"""
Pixel coordinate lookup across analysis layers.

Matching is a per-axis absolute difference test. Pixels sit on a regular
grid and the tolerance is far below the grid spacing, so great-circle
distance is unnecessary.
"""

import math
from typing import Dict, List, NamedTuple, Optional, Sequence

import numpy as np

from .. import config
from .layer_kinds import LAYER_ORDER, first_present, get_class_spec, get_layer_spec
from .legend import round_percentage


class TooltipEntry(NamedTuple):
    layer: str
    label: str
    description: str
    percentage: int


def _as_point(coord) -> Optional[tuple]:
    """(lon, lat) floats, or None if coord is not at least two finite numbers."""
    if not isinstance(coord, (list, tuple)) or len(coord) < 2:
        return None
    lon, lat = coord[0], coord[1]
    for v in (lon, lat):
        if isinstance(v, bool) or not isinstance(v, (int, float)) or not math.isfinite(v):
            return None
    return float(lon), float(lat)


def clean_coordinates(raw) -> np.ndarray:
    """
    Converts a summary coordinate list into an (N, 2) float array.

    Entries that are not [lon, lat] number pairs are skipped.
    """
    if not isinstance(raw, (list, tuple)):
        return np.empty((0, 2), dtype=float)
    points = [p for p in (_as_point(c) for c in raw) if p is not None]
    if not points:
        return np.empty((0, 2), dtype=float)
    return np.asarray(points, dtype=float)


def class_coordinates(kind: str, pixel_summary: Optional[dict], label: str) -> np.ndarray:
    """Coordinates listed for one class of a layer."""
    if not isinstance(pixel_summary, dict):
        return np.empty((0, 2), dtype=float)
    for cls in get_layer_spec(kind).classes:
        if cls.label == label:
            return clean_coordinates(first_present(pixel_summary, cls.coordinates_keys))
    return np.empty((0, 2), dtype=float)


def _contains(points: np.ndarray, lon: float, lat: float, tolerance: float) -> bool:
    if points.size == 0:
        return False
    hits = (np.abs(points[:, 0] - lon) < tolerance) & (np.abs(points[:, 1] - lat) < tolerance)
    return bool(hits.any())


def find_class(layer, coordinate: Sequence[float], tolerance: float = None) -> Optional[str]:
    """
    Name the class of ``layer`` whose bucket holds ``coordinate``.

    Buckets are searched in the layer's canonical class order and the first
    hit wins.

    Args:
        layer: An AnalysisLayer (anything with ``kind`` and ``pixel_summary``).
        coordinate: [lon, lat].
        tolerance: Per-axis tolerance in degrees; defaults to
            config.PIXEL_TOLERANCE_DEG.

    Returns:
        The class label, or None for no match or a malformed coordinate.
    """
    if layer is None:
        return None
    point = _as_point(coordinate)
    if point is None:
        return None
    if tolerance is None:
        tolerance = config.PIXEL_TOLERANCE_DEG

    summary = layer.pixel_summary
    if not isinstance(summary, dict):
        return None

    lon, lat = point
    for cls in get_layer_spec(layer.kind).classes:
        points = clean_coordinates(first_present(summary, cls.coordinates_keys))
        if _contains(points, lon, lat, tolerance):
            return cls.label
    return None


def find_all_layers(layers: Dict[str, object], coordinate: Sequence[float], tolerance: float = None) -> List[TooltipEntry]:
    """
    Look a coordinate up in every loaded layer.

    Layers missing from ``layers`` (or mapped to None) are skipped. Results
    follow LAYER_ORDER.
    """
    entries = []
    for kind in LAYER_ORDER:
        layer = layers.get(kind)
        label = find_class(layer, coordinate, tolerance)
        if label is None:
            continue
        cls = get_class_spec(kind, label)
        entries.append(TooltipEntry(
            layer=kind,
            label=label,
            description=cls.description,
            percentage=round_percentage(first_present(layer.pixel_summary, cls.percentage_keys)),
        ))
    return entries
