"""LayerManagementToolBar — create and delete layer buttons."""

from __future__ import annotations

from typing import TYPE_CHECKING

from PyQt6.QtGui import QAction, QKeySequence
from PyQt6.QtWidgets import QToolBar

from layerdesk.config.shortcuts import SHORTCUTS

if TYPE_CHECKING:
    from PyQt6.QtWidgets import QWidget


class LayerManagementToolBar(QToolBar):
    """Toolbar holding the New Layer and Delete Layers actions.

    The same action objects are placed in the Layer menu, so disabling
    delete here disables it there too.
    """

    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__("Layers", parent)
        self.setMovable(False)

        self.create_action = QAction("New Layer", self)
        self.create_action.setToolTip("Create a layer cloned from the active layer")
        self.create_action.setShortcut(QKeySequence(SHORTCUTS["layer.new"]))
        self.addAction(self.create_action)

        self.delete_action = QAction("Delete Layers", self)
        self.delete_action.setToolTip("Delete the selected layers")
        self.delete_action.setShortcut(QKeySequence(SHORTCUTS["layer.delete"]))
        self.delete_action.setEnabled(False)
        self.addAction(self.delete_action)

    def set_delete_enabled(self, enabled: bool) -> None:
        self.delete_action.setEnabled(enabled)
