"""GUI module for the layered field overlay map."""

from .date_pager import DatePager
from .orchestrator import LayerOrchestrator, MapSnapshot
from .overlay_view import OverlayView

__all__ = ['DatePager', 'LayerOrchestrator', 'MapSnapshot', 'OverlayView']
