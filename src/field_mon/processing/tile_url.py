"""
Tile URL extraction and validation for analysis responses.

The analysis service places the raster tile template in different spots
depending on the endpoint. Candidates are tried in a fixed order and the
first string found is validated before it reaches the renderer.
"""

from typing import Any, Optional

TILE_PLACEHOLDERS = ("{z}", "{x}", "{y}")

# (path, key) pairs in lookup order; path "feature" is features[0].properties
TILE_URL_CANDIDATES = (
    ("feature", "tile_url"),
    ("feature", "tileURL"),
    ("feature", "tileServerUrl"),
    ("feature", "tiles"),
    ("properties", "tile_url"),
    ("root", "tile_url"),
    ("root", "tileURL"),
    ("root", "tileServerUrl"),
)


def _first_feature_properties(response: dict) -> dict:
    features = response.get("features")
    if isinstance(features, list) and features and isinstance(features[0], dict):
        props = features[0].get("properties")
        if isinstance(props, dict):
            return props
    return {}


def _candidate_containers(response: dict) -> dict:
    props = response.get("properties")
    return {
        "feature": _first_feature_properties(response),
        "properties": props if isinstance(props, dict) else {},
        "root": response,
    }


def extract_tile_url(response: Any) -> Optional[str]:
    """
    Find the first tile-URL-like value in a layer response.

    Array values contribute their first element, and only if it is a string.
    Empty values and arrays that do not start with a string are skipped so
    the search moves on to the next candidate.

    Args:
        response: Decoded JSON body of an analysis endpoint.

    Returns:
        The raw candidate string, or None if nothing was found.
    """
    if not isinstance(response, dict):
        return None

    containers = _candidate_containers(response)
    for path, key in TILE_URL_CANDIDATES:
        value = containers[path].get(key)
        if not value:
            continue
        if isinstance(value, (list, tuple)):
            if isinstance(value[0], str):
                return value[0]
            continue
        if isinstance(value, str):
            return value
    return None


def is_tile_template(url: Optional[str]) -> bool:
    """True if url carries the {z}, {x} and {y} placeholders."""
    return isinstance(url, str) and all(p in url for p in TILE_PLACEHOLDERS)


def resolve_tile_url(response: Any, layer_name: str = "layer") -> Optional[str]:
    """Return a usable z/x/y tile template from a response, or None."""
    raw_url = extract_tile_url(response)
    if raw_url is None:
        return None

    if not is_tile_template(raw_url):
        print(f"[resolve_tile_url] Ignoring tile_url for {layer_name} without {{z}}/{{x}}/{{y}} placeholders: {raw_url}")
        return None

    return raw_url
