"""Persistent application settings backed by QSettings."""

from PyQt6.QtCore import QSettings

from layerdesk.config.constants import (
    APP_NAME,
    DEFAULT_BACKGROUND_COLOR,
    ORG_NAME,
)


class AppSettings:
    """Thin wrapper around QSettings for typed access to application preferences."""

    def __init__(self, qsettings: QSettings | None = None) -> None:
        self._qs = qsettings if qsettings is not None else QSettings(ORG_NAME, APP_NAME)

    # --- window geometry ---

    def save_window_geometry(self, geometry: bytes) -> None:
        self._qs.setValue("layerManagement/geometry", geometry)

    def window_geometry(self) -> bytes | None:
        val = self._qs.value("layerManagement/geometry")
        if isinstance(val, bytes):
            return val
        return None

    # --- background ---

    def background_color_name(self) -> str:
        val = self._qs.value("layerManagement/backgroundColor", DEFAULT_BACKGROUND_COLOR)
        return str(val)

    def set_background_color_name(self, name: str) -> None:
        self._qs.setValue("layerManagement/backgroundColor", name)
