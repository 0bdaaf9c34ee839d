from .layer_kinds import (
    GROWTH,
    WATER_UPTAKE,
    SOIL_MOISTURE,
    PEST,
    LAYER_ORDER,
    LAYER_SPECS,
    get_layer_spec,
    class_labels
)
from .legend import LegendRow, build_legend, pest_summary
from .coordinate_matcher import TooltipEntry, find_class, find_all_layers, class_coordinates
from .field_boundary import (
    BoundaryCache,
    extract_boundary_feature,
    boundary_ring,
    boundary_center,
    boundary_area_acres
)
