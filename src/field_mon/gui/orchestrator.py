"""
Layer orchestrator - connects plot/layer/date selection to the analysis
layers and produces the map state the view renders.

Flow:
1) A plot is selected: date resets to today, boundary cache is cleared,
   field analysis and the active layer are fetched, plus the plot geometry
   when the active layer is not Growth
2) A layer is selected: date resets to today, the layer is fetched unless
   it is already loaded for this plot and date
3) The date is paged: only the active layer is re-fetched
4) Legend clicks isolate one class as pixel markers; hovering a marker looks
   the coordinate up in every loaded layer
"""

from __future__ import annotations

import threading
from concurrent.futures import Executor, Future
from datetime import date
from functools import partial
from typing import Callable, Dict, List, NamedTuple, Optional, Tuple

from .. import config
from ..analysis.coordinate_matcher import TooltipEntry, class_coordinates, find_all_layers
from ..analysis.field_boundary import BoundaryCache, boundary_area_acres, boundary_center, boundary_ring
from ..analysis.layer_kinds import GROWTH, LAYER_ORDER, PEST, class_labels, get_class_spec, get_layer_spec
from ..analysis.legend import LegendRow, build_legend, legend_percentage, pest_summary
from ..data.analysis_api import AnalysisLayer, load_layer
from ..data.plots import PlotContext, fetch_field_analysis, fetch_plot_geometry
from .date_pager import DatePager

IDLE = "Idle"
LOADING = "Loading"
READY = "Ready"


class PixelMarker(NamedTuple):
    pixel_id: str
    coordinate: Tuple[float, float]
    label: str
    description: str
    percentage: int


class _LayerRequest:
    """One submitted layer fetch; replaced in _pending when superseded."""

    def __init__(self):
        self.future: Optional[Future] = None


class MapSnapshot(NamedTuple):
    phase: str
    plot_name: Optional[str]
    active_layer: str
    tile_url: Optional[str]
    legend: List[LegendRow]
    selected_class: Optional[str]
    boundary_polygon: Optional[List[List[float]]]
    pixel_markers: List[PixelMarker]
    tooltip: Optional[List[TooltipEntry]]
    current_end_date: date
    window_start: date
    can_page_forward: bool
    plot_center: Optional[Tuple[float, float]]
    plot_area_acres: Optional[float]
    field_analysis: Optional[dict]
    pest_summary: Optional[dict]
    status_message: Optional[str]


class LayerOrchestrator:
    """
    Owns plot, layer, legend and date selection for the overlay map.

    Fetches run inline unless an Executor is given. With an executor, a
    request is keyed by (plot, layer, end date): a duplicate key is not
    re-sent, and a response whose plot or date is no longer current, or
    whose request was replaced by a newer one, is dropped when it arrives.
    """

    def __init__(
        self,
        context: Optional[PlotContext] = None,
        pager: Optional[DatePager] = None,
        executor: Optional[Executor] = None,
        load_layer_fn: Callable[[str, str, date], Optional[AnalysisLayer]] = load_layer,
        plot_geometry_fn: Callable[[str, date], Optional[dict]] = fetch_plot_geometry,
        field_analysis_fn: Callable[[str, date], Optional[dict]] = fetch_field_analysis,
        on_change: Optional[Callable[[MapSnapshot], None]] = None,
    ):
        self.context = context or PlotContext()
        self.pager = pager or DatePager()
        self.boundary = BoundaryCache()
        self.active_layer = GROWTH
        self.layers: Dict[str, Optional[AnalysisLayer]] = {kind: None for kind in LAYER_ORDER}
        self.selected_class: Optional[str] = None
        self.hovered_coordinate = None
        self.tooltip: Optional[List[TooltipEntry]] = None
        self.field_analysis: Optional[dict] = None
        self.status_message: Optional[str] = None

        self._executor = executor
        self._load_layer = load_layer_fn
        self._plot_geometry = plot_geometry_fn
        self._field_analysis = field_analysis_fn
        self._on_change = on_change

        self._loaded_for: Dict[str, Tuple[str, date]] = {}
        self._pending: Dict[tuple, _LayerRequest] = {}
        self._side_futures: List[Future] = []
        self._lock = threading.RLock()

    # ------------------------------------------------------------------
    # Public operations
    # ------------------------------------------------------------------

    def select_plot(self, plot_name: Optional[str]):
        """Switch plots and reload everything for the new one."""
        with self._lock:
            self._release_pending()
            self._reset_plot_state()

            if not plot_name:
                self.context.clear()
                self._notify()
                return

            self.context.select(plot_name)
            plot = self.context.plot
            if plot is not None and plot.boundary is not None:
                self.boundary.seed(plot.boundary)

            today = self.pager.current_end_date
            # An active Growth layer already supplies the boundary
            if self.active_layer != GROWTH:
                self._track(self._dispatch(self._plot_geometry, (plot_name, today),
                                           partial(self._on_plot_geometry, plot_name)))
            self._track(self._dispatch(self._field_analysis, (plot_name, today),
                                       partial(self._on_field_analysis, plot_name)))
            self._request_layer(self.active_layer)
            self._notify()

    def select_layer(self, kind: str):
        """Make ``kind`` the active layer; navigation restarts at today."""
        get_layer_spec(kind)
        with self._lock:
            self.active_layer = kind
            self.selected_class = None
            self.pager.reset()
            self.status_message = None

            plot_name = self.context.plot_name
            if plot_name is not None and self._loaded_for.get(kind) != (plot_name, self.pager.current_end_date):
                self._request_layer(kind)
            self._notify()

    def page_date(self, direction: int):
        """Page the end date (date_pager.BACK / FORWARD) and refresh the active layer."""
        with self._lock:
            previous = self.pager.current_end_date
            current = self.pager.page(direction)
            if current != previous and self.context.plot_name is not None:
                self._request_layer(self.active_layer)
            self._notify()

    def select_legend_class(self, label: str, percentage: Optional[int] = None):
        """
        Toggle the highlighted legend class.

        Empty classes are ignored. A class covering FULL_COVERAGE_PCT or more
        of the plot clears the selection, since its pixels cannot be told apart
        from the rest of the field.
        """
        with self._lock:
            if label not in class_labels(self.active_layer):
                print(f"[orchestrator] '{label}' is not a {self.active_layer} class, ignoring")
                return

            if percentage is None:
                percentage = legend_percentage(self._active_legend(), label)

            if percentage <= 0:
                return
            if percentage >= config.FULL_COVERAGE_PCT:
                self.selected_class = None
            elif self.selected_class == label:
                self.selected_class = None
            else:
                self.selected_class = label
            self._notify()

    def hover_coordinate(self, coordinate):
        """Set or clear (None) the hovered pixel and rebuild the tooltip."""
        with self._lock:
            self.hovered_coordinate = coordinate
            self._refresh_tooltip()
            self._notify()

    def close(self):
        """Cancel anything still queued."""
        with self._lock:
            self._release_pending()

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def phase(self) -> str:
        plot_name = self.context.plot_name
        if plot_name is None:
            return IDLE
        if (plot_name, self.active_layer, self.pager.current_end_date) in self._pending:
            return LOADING
        return READY

    def snapshot(self) -> MapSnapshot:
        """Read-only view of the current map state."""
        with self._lock:
            layer = self.layers.get(self.active_layer)
            legend = self._active_legend()
            boundary = self.boundary.get()
            ring = boundary_ring(boundary)
            pest = self.layers.get(PEST)

            return MapSnapshot(
                phase=self.phase,
                plot_name=self.context.plot_name,
                active_layer=self.active_layer,
                tile_url=layer.tile_url if layer is not None else None,
                legend=legend,
                selected_class=self.selected_class,
                boundary_polygon=ring or None,
                pixel_markers=self._pixel_markers(layer, legend),
                tooltip=list(self.tooltip) if self.tooltip is not None else None,
                current_end_date=self.pager.current_end_date,
                window_start=self.pager.window_start,
                can_page_forward=self.pager.can_page_forward(),
                plot_center=boundary_center(boundary),
                plot_area_acres=boundary_area_acres(boundary),
                field_analysis=self.field_analysis,
                pest_summary=pest_summary(pest.pixel_summary) if pest is not None else None,
                status_message=self.status_message,
            )

    def _active_legend(self) -> List[LegendRow]:
        layer = self.layers.get(self.active_layer)
        if layer is None:
            return []
        return build_legend(self.active_layer, layer.pixel_summary)

    def _pixel_markers(self, layer: Optional[AnalysisLayer], legend: List[LegendRow]) -> List[PixelMarker]:
        if layer is None or self.selected_class is None:
            return []

        label = self.selected_class
        spec = get_class_spec(layer.kind, label)
        percentage = legend_percentage(legend, label)
        slug = label.lower().replace(" ", "-")
        points = class_coordinates(layer.kind, layer.pixel_summary, label)
        return [
            PixelMarker(
                pixel_id=f"{slug}-{i}",
                coordinate=(float(lon), float(lat)),
                label=label,
                description=spec.description,
                percentage=percentage,
            )
            for i, (lon, lat) in enumerate(points)
        ]

    def _refresh_tooltip(self):
        if self.hovered_coordinate is None:
            self.tooltip = None
        else:
            self.tooltip = find_all_layers(self.layers, self.hovered_coordinate)

    def _reset_plot_state(self):
        self.pager.reset()
        self.boundary.clear()
        self.layers = {kind: None for kind in LAYER_ORDER}
        self._loaded_for.clear()
        self.selected_class = None
        self.hovered_coordinate = None
        self.tooltip = None
        self.field_analysis = None
        self.status_message = None

    def _notify(self):
        if self._on_change is not None:
            self._on_change(self.snapshot())

    # ------------------------------------------------------------------
    # Fetching
    # ------------------------------------------------------------------

    def _dispatch(self, fn, args, callback) -> Optional[Future]:
        """Run fn(*args) inline or on the executor, then hand the result to callback."""
        if self._executor is None:
            try:
                result = fn(*args)
            except Exception as e:
                print(f"[orchestrator] {getattr(fn, '__name__', fn)} failed: {e}")
                result = None
            callback(result)
            return None

        future = self._executor.submit(fn, *args)
        future.add_done_callback(partial(self._complete, callback))
        return future

    def _complete(self, callback, future: Future):
        if future.cancelled():
            return
        try:
            result = future.result()
        except Exception as e:
            print(f"[orchestrator] Background fetch failed: {e}")
            result = None
        with self._lock:
            callback(result)
            self._notify()

    def _track(self, future: Optional[Future]):
        self._side_futures = [f for f in self._side_futures if not f.done()]
        if future is not None and not future.done():
            self._side_futures.append(future)

    def _release_pending(self):
        futures = [request.future for request in self._pending.values()] + self._side_futures
        for future in futures:
            if future is not None:
                future.cancel()
        self._pending.clear()
        self._side_futures = []

    def _request_layer(self, kind: str):
        key = (self.context.plot_name, kind, self.pager.current_end_date)
        if key in self._pending:
            print(f"[orchestrator] {kind} for {key[2].isoformat()} already in flight")
            return

        request = _LayerRequest()
        self._pending[key] = request
        request.future = self._dispatch(self._load_layer, (kind, key[0], key[2]),
                                        partial(self._on_layer_loaded, key, request))

    def _on_layer_loaded(self, key, request: _LayerRequest, layer: Optional[AnalysisLayer]):
        plot_name, kind, end_date = key
        if self._pending.get(key) is not request:
            print(f"[orchestrator] Discarding superseded {kind} response for {plot_name} on {end_date.isoformat()}")
            return
        del self._pending[key]

        if layer is not None:
            self.boundary.seed(layer.boundary)
        if end_date != self.pager.current_end_date:
            print(f"[orchestrator] Discarding stale {kind} response for {end_date.isoformat()}")
            return

        self.layers[kind] = layer
        if layer is None:
            self._loaded_for.pop(kind, None)
            self.status_message = f"No {get_layer_spec(kind).title} data available for {end_date.isoformat()}"
        else:
            self._loaded_for[kind] = (plot_name, end_date)
            if kind == self.active_layer:
                self.status_message = None
        self._refresh_tooltip()

    def _on_plot_geometry(self, plot_name: str, response: Optional[dict]):
        if plot_name == self.context.plot_name:
            self.boundary.observe(response)

    def _on_field_analysis(self, plot_name: str, summary: Optional[dict]):
        if plot_name == self.context.plot_name:
            self.field_analysis = summary
