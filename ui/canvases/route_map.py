"""
Route map canvas: full recorded route, driven portion and vehicle marker.
"""
from typing import Optional, Sequence, Tuple

import matplotlib
import numpy as np
from matplotlib.backends.backend_qt5agg import FigureCanvasQTAgg as FigureCanvas
from matplotlib.collections import LineCollection
from matplotlib.colors import Normalize
from matplotlib.figure import Figure

from trajectory.model import RenderFrame
from ui import styles

# Half-width of the view shown before any route is loaded, in degrees
EMPTY_VIEW_SPAN_DEG = 0.01


class RouteMapCanvas(FigureCanvas):
    """
    Matplotlib canvas for the replay map.

    Longitude runs along X and latitude along Y. The full route is drawn
    faintly, the traversed prefix is colored by speed, and a marker shows
    the vehicle at the current sample.
    """

    def __init__(self, parent=None, width=6, height=6, dpi=100,
                 initial_center: Tuple[float, float] = (17.385044, 78.486671)):
        """
        Initialize route map canvas.

        Args:
            parent: Parent QWidget
            width: Figure width in inches
            height: Figure height in inches
            dpi: Dots per inch resolution
            initial_center: (latitude, longitude) shown while nothing is loaded
        """
        self.fig = Figure(figsize=(width, height), dpi=dpi)
        self.ax = self.fig.add_subplot(111)
        super().__init__(self.fig)
        self.setParent(parent)

        self.initial_center = initial_center

        self.fig.patch.set_facecolor(styles.BG_COLOR)

        self.route_line = None
        self.traversed_collection: Optional[LineCollection] = None
        self.marker = None
        self._route_key = None

        self._style_axes()
        self.show_empty()

        self.fig.tight_layout(pad=1.0)

    def _style_axes(self):
        self.ax.set_facecolor(styles.BG_COLOR_LIGHT)
        for spine in self.ax.spines.values():
            spine.set_color(styles.TEXT_COLOR_DIM)
        self.ax.tick_params(colors=styles.TEXT_COLOR_DIM, labelsize=7)
        self.ax.xaxis.label.set_color(styles.TEXT_COLOR_DIM)
        self.ax.yaxis.label.set_color(styles.TEXT_COLOR_DIM)
        self.ax.title.set_color("#FFFFFF")

        self.ax.set_aspect("equal", adjustable="datalim")
        self.ax.set_title("Vehicle Route", fontsize=10)
        self.ax.set_xlabel("Longitude [°]", fontsize=8)
        self.ax.set_ylabel("Latitude [°]", fontsize=8)
        self.ax.grid(True, color=styles.GRID_COLOR, alpha=0.6)

    def show_empty(self):
        """Clear the route and center the view on the initial position."""
        self.ax.clear()
        self._style_axes()
        self.route_line = None
        self.traversed_collection = None
        self.marker = None
        self._route_key = None

        lat, lon = self.initial_center
        self.ax.set_xlim(lon - EMPTY_VIEW_SPAN_DEG, lon + EMPTY_VIEW_SPAN_DEG)
        self.ax.set_ylim(lat - EMPTY_VIEW_SPAN_DEG, lat + EMPTY_VIEW_SPAN_DEG)
        self.draw_idle()

    def plot_frame(self, frame: RenderFrame, speeds: Optional[Sequence[float]] = None):
        """
        Draw one playback step.

        Args:
            frame: Render payload from the replay controller
            speeds: Per-sample speeds in km/h used to color the traversed path
        """
        if not frame.full_path:
            self.show_empty()
            return

        route = np.asarray(frame.full_path, dtype=float)
        route_key = (len(route), tuple(route[0]), tuple(route[-1]))
        if route_key != self._route_key:
            self._draw_route(route)
            self._route_key = route_key

        self._draw_traversed(np.asarray(frame.traversed_prefix, dtype=float), speeds)
        self._draw_marker(frame.current_position)
        self.draw_idle()

    def _draw_route(self, route: np.ndarray):
        self.ax.clear()
        self._style_axes()
        self.traversed_collection = None
        self.marker = None

        lats, lons = route[:, 0], route[:, 1]
        self.route_line, = self.ax.plot(
            lons, lats,
            color=styles.ROUTE_COLOR,
            linewidth=styles.ROUTE_WIDTH,
            alpha=styles.ROUTE_ALPHA,
            zorder=1,
        )

        pad_lat = max((lats.max() - lats.min()) * 0.1, 1e-4)
        pad_lon = max((lons.max() - lons.min()) * 0.1, 1e-4)
        self.ax.set_xlim(lons.min() - pad_lon, lons.max() + pad_lon)
        self.ax.set_ylim(lats.min() - pad_lat, lats.max() + pad_lat)

    def _draw_traversed(self, prefix: np.ndarray, speeds: Optional[Sequence[float]]):
        if self.traversed_collection is not None:
            self.traversed_collection.remove()
            self.traversed_collection = None

        if prefix.shape[0] < 2:
            return

        # (lon, lat) points -> consecutive segments
        points = prefix[:, ::-1].reshape(-1, 1, 2)
        segments = np.concatenate([points[:-1], points[1:]], axis=1)

        lc = LineCollection(segments, linewidth=styles.TRAVERSED_WIDTH, zorder=2)
        if speeds is not None and len(speeds) >= prefix.shape[0]:
            segment_speeds = np.asarray(speeds, dtype=float)[1:prefix.shape[0]]
            vmax = max(float(np.max(speeds)), 1.0)
            lc.set_cmap(matplotlib.colormaps[styles.TRAVERSED_CMAP])
            lc.set_norm(Normalize(vmin=0.0, vmax=vmax))
            lc.set_array(segment_speeds)
        else:
            lc.set_color(styles.ACCENT_BLUE)

        self.traversed_collection = lc
        self.ax.add_collection(lc)

    def _draw_marker(self, position):
        if position is None:
            if self.marker is not None:
                self.marker.remove()
                self.marker = None
            return

        lat, lon = position
        if self.marker is None:
            self.marker, = self.ax.plot(
                [lon], [lat],
                marker="o",
                markersize=styles.MARKER_SIZE,
                color=styles.MARKER_COLOR,
                markeredgecolor="#FFFFFF",
                zorder=3,
            )
        else:
            self.marker.set_data([lon], [lat])
