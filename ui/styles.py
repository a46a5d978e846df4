"""
Styling constants and theme configuration for the replay window.
"""

# =============================================================================
# Color Palette
# =============================================================================

# Dark theme colors
BG_COLOR = "#111111"          # Main background
BG_COLOR_LIGHT = "#181818"    # Lighter background (axes, panels)
TEXT_COLOR = "#EEEEEE"        # Main text
TEXT_COLOR_DIM = "#CCCCCC"    # Dimmed text (axis labels, etc.)
TEXT_COLOR_DARK = "#888888"   # Dark text (placeholders)
BORDER_COLOR = "#3C4452"      # Group box borders, disabled buttons
GRID_COLOR = "#333333"        # Grid lines

# Accent colors
ACCENT_BLUE = "#6FA8FF"       # Buttons
ACCENT_BLUE_HOVER = "#8CBBFF"
ACCENT_BLUE_PRESSED = "#4F8EEA"
ACCENT_RED = "#FF6B6B"        # Vehicle marker, load errors
ACCENT_GREEN = "#6BCB77"      # Playing status
ACCENT_AMBER = "#F2B84B"      # Recording without samples

# Route styling
ROUTE_COLOR = "gray"          # Full recorded route
ROUTE_WIDTH = 3
ROUTE_ALPHA = 0.5
TRAVERSED_WIDTH = 3.5
TRAVERSED_CMAP = "Blues"      # Traversed path colored by speed
MARKER_COLOR = ACCENT_RED
MARKER_SIZE = 10

# =============================================================================
# PyQt5 Stylesheet
# =============================================================================

DARK_STYLESHEET = f"""
    QMainWindow {{
        background-color: {BG_COLOR};
        color: {TEXT_COLOR};
    }}
    QGroupBox {{
        border: 1px solid {BORDER_COLOR};
        border-radius: 4px;
        margin-top: 8px;
        padding-top: 10px;
        font-weight: bold;
        color: {TEXT_COLOR};
    }}
    QGroupBox::title {{
        subcontrol-origin: margin;
        left: 8px;
        padding: 0 4px 0 4px;
    }}
    QLabel {{
        color: {TEXT_COLOR};
        font-size: 10pt;
    }}
    QPushButton {{
        background-color: {ACCENT_BLUE};
        color: #FFFFFF;
        border: none;
        border-radius: 4px;
        padding: 6px 12px;
        font-weight: bold;
    }}
    QPushButton:hover {{
        background-color: {ACCENT_BLUE_HOVER};
    }}
    QPushButton:pressed {{
        background-color: {ACCENT_BLUE_PRESSED};
    }}
    QPushButton:disabled {{
        background-color: {BORDER_COLOR};
        color: {TEXT_COLOR_DARK};
    }}
"""
