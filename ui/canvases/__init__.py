"""
Matplotlib canvas widgets for trajectory replay.
"""
from ui.canvases.route_map import RouteMapCanvas

__all__ = ['RouteMapCanvas']
