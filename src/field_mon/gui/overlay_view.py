"""
Map rendering of an orchestrator snapshot.

Draws the satellite basemap, the active layer's analysis tiles, the plot
outline, highlighted pixels, the legend and the hover tooltip.
"""

from __future__ import annotations

from typing import Optional, Tuple

import contextily as ctx
import matplotlib.pyplot as plt
from matplotlib.patches import Patch, Polygon as PolygonPatch
from pyproj import Transformer

from .. import config
from ..analysis.layer_kinds import get_layer_spec
from .orchestrator import MapSnapshot

BOUNDARY_COLOR = "#FFD700"
MARKER_COLOR = "#FFFFFF"

# Padding around the plot, as a fraction of its larger side
FRAME_PADDING = 0.2
# Extent used when there is no boundary to frame (meters around the centre)
DEFAULT_HALF_EXTENT_M = 250


class OverlayView:
    """
    Renders MapSnapshot objects onto a Matplotlib axes.

    A missing tile URL only skips the raster layer; the outline, markers and
    legend are still drawn.
    """

    def __init__(self, figsize: Tuple[int, int] = (12, 10)):
        self.figsize = figsize
        self.fig: Optional[plt.Figure] = None
        self.ax: Optional[plt.Axes] = None

        # Transformer (WGS84 -> Web Mercator for display)
        self._to_mercator = Transformer.from_crs("EPSG:4326", "EPSG:3857", always_xy=True)

    def render(self, snapshot: MapSnapshot) -> Tuple[plt.Figure, plt.Axes]:
        """Draw a snapshot on a fresh figure and return (fig, ax)."""
        if self.fig is not None:
            plt.close(self.fig)
        self.fig, self.ax = plt.subplots(figsize=self.figsize)

        self._set_extent(snapshot)
        self._add_tiles(config.BASEMAP_URL, alpha=1.0, zorder=0)
        if snapshot.tile_url:
            self._add_tiles(snapshot.tile_url, alpha=config.TILE_OPACITY, zorder=1)

        self._add_boundary(snapshot)
        self._add_pixel_markers(snapshot)
        self._add_legend(snapshot)
        self._add_tooltip(snapshot)

        title = get_layer_spec(snapshot.active_layer).title
        plot = snapshot.plot_name or "no plot selected"
        self.ax.set_title(
            f"{title} - {plot} ({snapshot.window_start.isoformat()} to {snapshot.current_end_date.isoformat()})",
            fontsize=14,
            fontweight='bold'
        )
        if snapshot.status_message:
            self.fig.text(0.02, 0.02, snapshot.status_message, fontsize=10, color='darkred')

        return self.fig, self.ax

    def _project(self, lon: float, lat: float) -> Tuple[float, float]:
        return self._to_mercator.transform(lon, lat)

    def _set_extent(self, snapshot: MapSnapshot):
        if snapshot.boundary_polygon:
            xs, ys = zip(*(self._project(lon, lat) for lon, lat in snapshot.boundary_polygon))
            x_min, x_max, y_min, y_max = min(xs), max(xs), min(ys), max(ys)
            padding = max(x_max - x_min, y_max - y_min, 1.0) * FRAME_PADDING
        elif snapshot.plot_center:
            cx, cy = self._project(*snapshot.plot_center)
            x_min, x_max, y_min, y_max = cx, cx, cy, cy
            padding = DEFAULT_HALF_EXTENT_M
        else:
            return

        self.ax.set_xlim(x_min - padding, x_max + padding)
        self.ax.set_ylim(y_min - padding, y_max + padding)

    def _add_tiles(self, source: str, alpha: float, zorder: int):
        """Add a z/x/y tile layer under the vector overlays."""
        try:
            ctx.add_basemap(
                self.ax,
                source=source,
                crs="EPSG:3857",
                alpha=alpha,
                attribution="",
                zorder=zorder
            )
        except Exception as e:
            print(f"Warning: Could not load tiles from {source}: {e}")

    def _add_boundary(self, snapshot: MapSnapshot):
        if not snapshot.boundary_polygon:
            return
        points = [self._project(lon, lat) for lon, lat in snapshot.boundary_polygon]
        self.ax.add_patch(PolygonPatch(
            points,
            closed=True,
            fill=False,
            edgecolor=BOUNDARY_COLOR,
            linewidth=3,
            zorder=3
        ))

    def _add_pixel_markers(self, snapshot: MapSnapshot):
        if not snapshot.pixel_markers:
            return
        xs, ys = zip(*(self._project(*m.coordinate) for m in snapshot.pixel_markers))
        self.ax.scatter(xs, ys, s=18, c=MARKER_COLOR, edgecolors=MARKER_COLOR, zorder=4,
                        label=f"{snapshot.selected_class} pixels")

    def _add_legend(self, snapshot: MapSnapshot):
        if not snapshot.legend:
            return
        handles = []
        for row in snapshot.legend:
            text = f"{row.label} {row.percentage}% - {row.description}"
            if row.label == snapshot.selected_class:
                text = f"> {text}"
            handles.append(Patch(facecolor=row.color, edgecolor='black', label=text))
        self.ax.legend(handles=handles, loc='lower right', fontsize=9, framealpha=0.85,
                       title=get_layer_spec(snapshot.active_layer).title)

    def _add_tooltip(self, snapshot: MapSnapshot):
        if not snapshot.tooltip:
            return
        lines = [f"{e.layer}: {e.label} ({e.percentage}%) - {e.description}" for e in snapshot.tooltip]
        self.ax.text(
            0.02, 0.98, "\n".join(lines),
            transform=self.ax.transAxes,
            fontsize=9,
            va='top',
            bbox=dict(boxstyle='round', facecolor='black', alpha=0.7),
            color='white',
            zorder=5
        )

    def show(self):
        """Display the rendered figure."""
        if self.ax is not None:
            self.ax.set_aspect('equal')
        plt.tight_layout()
        plt.show()
