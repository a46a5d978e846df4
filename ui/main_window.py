"""
Main window for the trajectory replay viewer.
"""
import logging
from typing import Optional

import numpy as np
from PyQt5.QtWidgets import (
    QMainWindow,
    QWidget,
    QVBoxLayout,
    QHBoxLayout,
    QLabel,
    QPushButton,
    QGroupBox,
)

from trajectory.controller import ReplayController
from trajectory.derivation import display_speed
from trajectory.geo import route_length_km, segment_speeds_kmh
from trajectory.model import RenderFrame
from ui import styles
from ui.canvases import RouteMapCanvas
from ui.styles import DARK_STYLESHEET

logger = logging.getLogger(__name__)

PLACEHOLDER = "N/A"


class MainWindow(QMainWindow):
    """
    Replay window: route map, status panel and playback controls.

    The window only renders frames and forwards button presses to the
    controller; it holds no playback state of its own.
    """

    def __init__(self, controller: ReplayController,
                 initial_center=(17.385044, 78.486671)):
        super().__init__()

        self.controller = controller
        self._speeds: Optional[np.ndarray] = None
        self._speeds_for = None

        self.setWindowTitle("Vehicle Route Replay")
        self.resize(1200, 800)

        central = QWidget()
        self.setCentralWidget(central)

        root_layout = QHBoxLayout()
        root_layout.setContentsMargins(8, 8, 8, 8)
        root_layout.setSpacing(10)
        central.setLayout(root_layout)

        map_group = QGroupBox("Route Map")
        map_layout = QVBoxLayout()
        map_group.setLayout(map_layout)
        self.map_canvas = RouteMapCanvas(self, width=7, height=6, dpi=100, initial_center=initial_center)
        map_layout.addWidget(self.map_canvas)

        root_layout.addWidget(map_group, 4)
        root_layout.addLayout(self._build_side_column(), 1)

        self.setStyleSheet(DARK_STYLESHEET)

        self.play_button.clicked.connect(self.controller.play)
        self.pause_button.clicked.connect(self.controller.pause)
        self.reset_button.clicked.connect(self.controller.reset)
        self.controller.frame_changed.connect(self.render_frame)

        self.render_frame(self.controller.frame())

    def _build_side_column(self):
        """Build right column: status panel + playback controls."""
        side_col = QVBoxLayout()
        side_col.setSpacing(10)

        status_group = QGroupBox("Replay Status")
        status_layout = QVBoxLayout()
        status_layout.setSpacing(2)
        status_group.setLayout(status_layout)

        self.position_label = QLabel(f"Position: {PLACEHOLDER}")
        self.speed_label = QLabel(f"Speed: {PLACEHOLDER}")
        self.progress_label = QLabel(f"Progress: {PLACEHOLDER}")
        self.sample_label = QLabel(f"Sample: {PLACEHOLDER}")
        self.distance_label = QLabel(f"Route: {PLACEHOLDER}")
        self.status_label = QLabel("Status: ⏳ LOADING")

        for label in (
            self.position_label,
            self.speed_label,
            self.progress_label,
            self.sample_label,
            self.distance_label,
            self.status_label,
        ):
            status_layout.addWidget(label)
        status_layout.addStretch()

        controls_group = QGroupBox("Playback")
        controls_layout = QHBoxLayout()
        controls_group.setLayout(controls_layout)

        self.play_button = QPushButton("▶ Play")
        self.pause_button = QPushButton("⏸ Pause")
        self.reset_button = QPushButton("⏮ Reset")
        for button in (self.play_button, self.pause_button, self.reset_button):
            controls_layout.addWidget(button)

        side_col.addWidget(status_group)
        side_col.addWidget(controls_group)
        side_col.addStretch()

        return side_col

    # ==========================================================================
    # Data Update Methods
    # ==========================================================================

    def render_frame(self, frame: RenderFrame):
        """
        Draw a frame from the controller.

        Args:
            frame: RenderFrame emitted on every cursor or state change
        """
        if frame.current_position is None:
            self._show_placeholders()
            self.map_canvas.show_empty()
            return

        speeds = self._speeds_for_route()
        self.map_canvas.plot_frame(frame, speeds)

        lat, lon = frame.current_position
        self.position_label.setText(f"Position: {lat:.6f}, {lon:.6f}")
        self.speed_label.setText(f"Speed: {display_speed(frame.speed_kmh):.1f} km/h")
        self.progress_label.setText(f"Progress: {frame.progress_percent:.1f}%")
        self.sample_label.setText(f"Sample: {frame.cursor + 1} / {frame.sample_count}")

        self.status_label.setStyleSheet(f"color: {styles.ACCENT_GREEN};" if frame.is_playing else "")
        if frame.is_playing:
            self.status_label.setText("Status: ▶ PLAYING")
        elif frame.cursor >= frame.sample_count - 1:
            self.status_label.setText("Status: 🏁 FINISHED")
        else:
            self.status_label.setText("Status: ⏸ PAUSED")

        self._update_buttons(frame)

    def show_load_error(self, message: str):
        """Keep placeholders on screen and report why nothing was loaded."""
        logger.warning(f"UI: showing load failure: {message}")
        self._show_placeholders()
        self.status_label.setText("Status: ❌ LOAD FAILED")
        self.status_label.setToolTip(message)
        self.status_label.setStyleSheet(f"color: {styles.ACCENT_RED};")

    def show_no_samples(self, message: str):
        """The recording was read but had nothing to replay."""
        self._show_placeholders()
        self.status_label.setText("Status: ⚠ NO SAMPLES")
        self.status_label.setToolTip(message)
        self.status_label.setStyleSheet(f"color: {styles.ACCENT_AMBER};")

    def _show_placeholders(self):
        self.position_label.setText(f"Position: {PLACEHOLDER}")
        self.speed_label.setText(f"Speed: {PLACEHOLDER}")
        self.progress_label.setText(f"Progress: {PLACEHOLDER}")
        self.sample_label.setText(f"Sample: {PLACEHOLDER}")
        self.distance_label.setText(f"Route: {PLACEHOLDER}")
        for button in (self.play_button, self.pause_button, self.reset_button):
            button.setEnabled(False)

    def _update_buttons(self, frame: RenderFrame):
        at_end = frame.cursor >= frame.sample_count - 1
        self.play_button.setEnabled(not frame.is_playing and not at_end)
        self.pause_button.setEnabled(frame.is_playing)
        self.reset_button.setEnabled(True)

    def _speeds_for_route(self) -> Optional[np.ndarray]:
        # Per-sample speeds only change when a new trajectory is loaded
        trajectory = self.controller.trajectory
        if trajectory is not self._speeds_for:
            self._speeds = segment_speeds_kmh(trajectory)
            self._speeds_for = trajectory
            self.distance_label.setText(f"Route: {route_length_km(trajectory):.2f} km")
        return self._speeds

    def closeEvent(self, event):
        self.controller.shutdown()
        super().closeEvent(event)
