"""
Per-layer taxonomy table for the four analysis layers.

Each layer kind has a fixed, ordered list of classes. The order is shared by
the legend rows and the coordinate lookup, so a legend index always maps to
the same summary keys. The analysis service is not consistent about its
field names (``adequat_`` vs ``adequate_``, ``shallow_water_``,
``SoilBorn_`` vs ``SoilBorne_``), so every class lists the exact keys it is
read from instead of deriving them from the label.
"""

from typing import List, NamedTuple, Optional, Tuple

GROWTH = "Growth"
WATER_UPTAKE = "Water Uptake"
SOIL_MOISTURE = "Soil Moisture"
PEST = "PEST"

# Fixed layer order for cross-layer lookups
LAYER_ORDER = (GROWTH, WATER_UPTAKE, SOIL_MOISTURE, PEST)


class ClassSpec(NamedTuple):
    label: str
    color: str
    description: str
    percentage_keys: Tuple[str, ...]
    coordinates_keys: Tuple[str, ...]


class LayerSpec(NamedTuple):
    kind: str
    title: str
    endpoint: str
    classes: Tuple[ClassSpec, ...]


def _cls(label, prefix, color, description, coords_prefixes=None):
    """Build a ClassSpec from summary key prefixes."""
    coords_prefixes = coords_prefixes or (prefix,)
    return ClassSpec(
        label=label,
        color=color,
        description=description,
        percentage_keys=(f"{prefix}_pixel_percentage",),
        coordinates_keys=tuple(f"{p}_pixel_coordinates" for p in coords_prefixes),
    )


LAYER_SPECS = {
    GROWTH: LayerSpec(
        kind=GROWTH,
        title="Growth",
        endpoint="analyze_Growth",
        classes=(
            _cls("Weak", "weak", "#90EE90", "damaged or weak crop"),
            _cls("Stress", "stress", "#32CD32", "crop under stress"),
            _cls("Moderate", "moderate", "#228B22", "Crop under normal growth"),
            _cls("Healthy", "healthy", "#006400", "proper growth"),
        ),
    ),
    WATER_UPTAKE: LayerSpec(
        kind=WATER_UPTAKE,
        title="Water Uptake",
        endpoint="wateruptake",
        classes=(
            _cls("Deficient", "deficient", "#E6F3FF", "weak root"),
            _cls("Less", "less", "#87CEEB", "weak roots"),
            _cls("Adequate", "adequat", "#4682B4", "healthy roots"),
            _cls("Excellent", "excellent", "#1E90FF", "healthy roots"),
            _cls("Excess", "excess", "#000080", "root logging"),
        ),
    ),
    SOIL_MOISTURE: LayerSpec(
        kind=SOIL_MOISTURE,
        title="Soil Moisture",
        endpoint="SoilMoisture",
        classes=(
            _cls("Less", "less", "#9fd4d2", "less soil moisture"),
            _cls("Adequate", "adequate", "#8fc7c5", "Irrigation need"),
            _cls("Excellent", "excellent", "#8fe3e0", "no irrigation require"),
            _cls("Excess", "excess", "#74dbd8", "water logging"),
            _cls("Shallow", "shallow_water", "#50f2ec", "water source"),
        ),
    ),
    PEST: LayerSpec(
        kind=PEST,
        title="Pest",
        endpoint="pest-detection",
        classes=(
            _cls("Chewing", "chewing_affected", "#DC2626", "Areas affected by chewing pests"),
            _cls("Sucking", "sucking_affected", "#B91C1C", "Areas affected by sucking disease"),
            _cls("Fungi", "fungi_affected", "#991B1B", "fungi infections affecting plants"),
            # Percentage and coordinates are published under different spellings
            _cls("Soil Borne", "SoilBorn_affected", "#7F1D1D", "Soil borne infections affecting plants",
                 coords_prefixes=("SoilBorne_affected", "SoilBorn_affected")),
        ),
    ),
}


def get_layer_spec(kind: str) -> LayerSpec:
    """Return the LayerSpec for a layer kind, raising ValueError for unknown kinds."""
    try:
        return LAYER_SPECS[kind]
    except KeyError:
        raise ValueError(f"Unknown layer kind: {kind!r} (expected one of {', '.join(LAYER_ORDER)})")


def class_labels(kind: str) -> List[str]:
    return [c.label for c in get_layer_spec(kind).classes]


def get_class_spec(kind: str, label: str) -> Optional[ClassSpec]:
    """Look up a class of a layer by its legend label."""
    for spec in get_layer_spec(kind).classes:
        if spec.label == label:
            return spec
    return None


def first_present(summary: dict, keys: Tuple[str, ...]):
    """Return the value of the first key present in summary, else None."""
    for key in keys:
        if key in summary:
            return summary[key]
    return None
