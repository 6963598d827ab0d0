"""Background colour choices for the layer management window."""

from __future__ import annotations

from PyQt6.QtGui import QColor

BACKGROUND_COLORS: dict[str, str] = {
    "Black": "#000000",
    "Dark Gray": "#404040",
    "Gray": "#808080",
    "Light Gray": "#D3D3D3",
    "White": "#FFFFFF",
}

_LUMINANCE_THRESHOLD = 0.5


def background_color(name: str) -> str:
    """Return the hex colour for the background choice *name*."""
    return BACKGROUND_COLORS[name]


def foreground_for(background: str) -> str:
    """Return black or white, whichever reads better on *background*."""
    color = QColor(background)
    luminance = 0.2126 * color.redF() + 0.7152 * color.greenF() + 0.0722 * color.blueF()
    return "#000000" if luminance > _LUMINANCE_THRESHOLD else "#FFFFFF"
