import os

# Configuration
PLOT_API_URL = "https://dev-plot.cropeye.ai"
FIELD_API_URL = "https://dev-field.cropeye.ai"
REQUEST_TIMEOUT = 30

# Analysis window sent with every layer request, and the paging increment
DAYS_BACK = 7
DAYS_STEP = 15

# Per-axis match tolerance in degrees (10 m pixels are ~0.00009 deg apart)
PIXEL_TOLERANCE_DEG = 0.00001

# Legend rows at or above this coverage cannot be isolated
FULL_COVERAGE_PCT = 99

TILE_OPACITY = 0.7
BASEMAP_URL = "https://server.arcgisonline.com/ArcGIS/rest/services/World_Imagery/MapServer/tile/{z}/{y}/{x}"


def setup_environment():
    """Reads FIELD_MON_* environment overrides into the module settings."""
    global PLOT_API_URL, FIELD_API_URL, REQUEST_TIMEOUT
    PLOT_API_URL = os.environ.get('FIELD_MON_PLOT_API_URL', PLOT_API_URL).rstrip('/')
    FIELD_API_URL = os.environ.get('FIELD_MON_FIELD_API_URL', FIELD_API_URL).rstrip('/')
    try:
        REQUEST_TIMEOUT = float(os.environ.get('FIELD_MON_REQUEST_TIMEOUT', REQUEST_TIMEOUT))
    except ValueError:
        print("[config] Invalid FIELD_MON_REQUEST_TIMEOUT, keeping default.")


setup_environment()
