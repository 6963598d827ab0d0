"""Keyboard shortcut definitions.

Each entry maps a logical action name to a key sequence string
compatible with ``QKeySequence``.
"""

SHORTCUTS: dict[str, str] = {
    # File
    "file.page_setup": "Ctrl+Shift+P",
    "file.print": "Ctrl+P",
    "file.export_raster": "Ctrl+E",
    "file.export_vector": "Ctrl+Shift+E",
    "file.close": "Ctrl+W",
    # Layer
    "layer.new": "Ctrl+Shift+N",
    "layer.delete": "Delete",
    # Settings
    "settings.default_size": "Ctrl+0",
}
