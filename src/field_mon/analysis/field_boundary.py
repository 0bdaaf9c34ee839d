import math
from typing import List, Optional, Tuple

import pyproj
from shapely.geometry import Polygon
from shapely.ops import transform as shapely_transform

SQ_METERS_PER_ACRE = 4046.8564224


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


def make_boundary_feature(geometry: dict, properties: dict = None) -> Optional[dict]:
    """
    Wraps a GeoJSON-like polygon geometry into a feature dict.

    Returns None if the geometry is not a Polygon with a non-empty outer ring.
    """
    if not isinstance(geometry, dict) or geometry.get("type") != "Polygon":
        return None
    rings = geometry.get("coordinates")
    if not isinstance(rings, list) or not rings or not rings[0]:
        return None
    return {
        "type": "Feature",
        "geometry": geometry,
        "properties": dict(properties or {}),
    }


def extract_boundary_feature(response) -> Optional[dict]:
    """
    Returns the boundary-bearing first feature of an analysis response.

    Args:
        response: Decoded analysis response (may be None or malformed).

    Returns:
        dict: The feature itself if its geometry is a usable Polygon, else None.
    """
    if not isinstance(response, dict):
        return None
    features = response.get("features")
    if not isinstance(features, list) or not features:
        return None
    feature = features[0]
    if not isinstance(feature, dict):
        return None
    if make_boundary_feature(feature.get("geometry")) is None:
        return None
    return feature


def boundary_ring(feature: Optional[dict]) -> List[List[float]]:
    """
    Outer ring of a boundary feature as [lon, lat] pairs.

    Vertices that are not two numbers are dropped; an unusable feature
    gives an empty list.
    """
    if not isinstance(feature, dict):
        return []
    geometry = feature.get("geometry")
    if not isinstance(geometry, dict) or geometry.get("type") != "Polygon":
        return []
    rings = geometry.get("coordinates")
    if not isinstance(rings, list) or not rings or not isinstance(rings[0], list):
        return []

    ring = []
    for vertex in rings[0]:
        if isinstance(vertex, (list, tuple)) and len(vertex) >= 2 and _is_number(vertex[0]) and _is_number(vertex[1]):
            ring.append([float(vertex[0]), float(vertex[1])])
    return ring


def boundary_center(feature: Optional[dict]) -> Optional[Tuple[float, float]]:
    """Mean of the ring vertices as (lon, lat), used to frame the map."""
    ring = boundary_ring(feature)
    if not ring:
        return None
    lon = sum(v[0] for v in ring) / len(ring)
    lat = sum(v[1] for v in ring) / len(ring)
    return lon, lat


def boundary_area_acres(feature: Optional[dict]) -> Optional[float]:
    """
    Plot area in acres.

    Uses the feature's ``area_acres`` property when the service provides it,
    otherwise projects the ring to its UTM zone and measures it.
    """
    if not isinstance(feature, dict):
        return None
    props = feature.get("properties") or {}
    if _is_number(props.get("area_acres")):
        return float(props["area_acres"])

    ring = boundary_ring(feature)
    if len(ring) < 3:
        return None

    poly = Polygon(ring)
    # Calculate area using simplified UTM projection based on centroid
    centroid = poly.centroid
    utm_zone = int((centroid.x + 180) / 6) + 1
    hemisphere = 'north' if centroid.y >= 0 else 'south'
    utm_crs_str = f"+proj=utm +zone={utm_zone} +{hemisphere} +datum=WGS84"

    project_to_utm = pyproj.Transformer.from_crs(
        "EPSG:4326",
        utm_crs_str,
        always_xy=True
    ).transform
    poly_utm = shapely_transform(project_to_utm, poly)
    return poly_utm.area / SQ_METERS_PER_ACRE


class BoundaryCache:
    """
    Holds the plot outline so it survives layer switches and failed fetches.

    Writes are fill-if-absent. Only clear() (called on plot change) removes
    a cached boundary.
    """

    def __init__(self):
        self._feature: Optional[dict] = None

    def observe(self, response) -> bool:
        """Cache the response's boundary if none is cached yet. Returns True if cached."""
        if self._feature is not None:
            return False
        feature = extract_boundary_feature(response)
        if feature is None:
            return False
        self._feature = feature
        return True

    def seed(self, feature: Optional[dict]) -> bool:
        """Cache an already-built boundary feature, same fill-if-absent rule."""
        if self._feature is not None or not boundary_ring(feature):
            return False
        self._feature = feature
        return True

    def get(self) -> Optional[dict]:
        return self._feature

    def clear(self):
        self._feature = None
