"""LayerManagementWindow — top-level window around the layer table."""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING

from PyQt6.QtGui import QAction, QActionGroup, QCloseEvent, QKeySequence
from PyQt6.QtWidgets import (
    QDialog,
    QFileDialog,
    QLabel,
    QMainWindow,
    QMenuBar,
    QMessageBox,
    QWidget,
)

from layerdesk.config.constants import (
    LAYER_MANAGEMENT_HEIGHT_DEFAULT,
    LAYER_MANAGEMENT_TITLE,
    LAYER_MANAGEMENT_WIDTH_DEFAULT,
    LAYER_MANAGEMENT_X_DEFAULT,
    LAYER_MANAGEMENT_Y_DEFAULT,
)
from layerdesk.config.settings import AppSettings
from layerdesk.config.shortcuts import SHORTCUTS
from layerdesk.core.controller import LayerCollectionController
from layerdesk.core.errors import LayerError
from layerdesk.core.layer import LayerEntity
from layerdesk.core.layer_collection import LayerCollection
from layerdesk.core.palette import BACKGROUND_COLORS
from layerdesk.io.exporter import RASTER_FORMATS, export_raster, export_vector, print_widget
from layerdesk.ui.dialogs import make_confirmation
from layerdesk.ui.layer_panel import LayerManagementPane
from layerdesk.ui.toolbar import LayerManagementToolBar

if TYPE_CHECKING:
    from PyQt6.QtPrintSupport import QPrinter

log = logging.getLogger(__name__)


class LayerManagementWindow(QMainWindow):
    """Layer management window.

    Owns the controller, table pane and toolbar, and serves as the
    controller's contextual settings notifier.  The collection itself
    belongs to the host document and is supplied via
    :meth:`set_layer_collection`.
    """

    def __init__(
        self,
        collection: LayerCollection | None = None,
        settings: AppSettings | None = None,
        parent: QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self._settings = settings if settings is not None else AppSettings()
        self.setWindowTitle(LAYER_MANAGEMENT_TITLE)
        self.reset_window_size()

        if collection is None:
            collection = LayerCollection(parent=self)

        self._pane = LayerManagementPane(collection, self)
        self.setCentralWidget(self._pane)

        self._toolbar = LayerManagementToolBar(self)
        self.addToolBar(self._toolbar)

        self._status_label = QLabel("")
        status_bar = self.statusBar()
        if status_bar is not None:
            status_bar.addWidget(self._status_label, 1)

        self._controller = LayerCollectionController(
            collection,
            confirm=make_confirmation(self),
            notifier=self,
            presenter=self._pane,
            delete_target=self._toolbar,
            parent=self,
        )

        # Wiring
        self._toolbar.create_action.triggered.connect(self.create_layer)
        self._toolbar.delete_action.triggered.connect(self.delete_layers)
        self._pane.rows_selected.connect(self._controller.select_rows)
        self._controller.background_changed.connect(self._on_background_changed)

        self._background_actions: dict[str, QAction] = {}
        self._printer: QPrinter | None = None
        self._setup_menus()

        self._restore_settings()

        # Start with no rows selected so delete enablement is correct
        self._pane.clear_selection()
        self._controller.select_rows([])
        self.on_collection_changed()

    # ---- menus ----

    def _setup_menus(self) -> None:
        menu_bar = self.menuBar()
        if menu_bar is None:
            return
        self._setup_file_menu(menu_bar)
        self._setup_layer_menu(menu_bar)
        self._setup_settings_menu(menu_bar)

    def _setup_file_menu(self, menu_bar: QMenuBar) -> None:
        file_menu = menu_bar.addMenu("&File")
        if file_menu is None:
            return

        page_setup_action = file_menu.addAction("Page Set&up...")
        if page_setup_action is not None:
            page_setup_action.setShortcut(QKeySequence(SHORTCUTS["file.page_setup"]))
            page_setup_action.triggered.connect(self.page_setup)

        print_action = file_menu.addAction("&Print...")
        if print_action is not None:
            print_action.setShortcut(QKeySequence(SHORTCUTS["file.print"]))
            print_action.triggered.connect(self.print_layers)

        file_menu.addSeparator()

        export_menu = file_menu.addMenu("&Export")
        if export_menu is not None:
            raster_action = export_menu.addAction("&Raster Graphics...")
            if raster_action is not None:
                raster_action.setShortcut(QKeySequence(SHORTCUTS["file.export_raster"]))
                raster_action.triggered.connect(self.export_raster_graphics)
            vector_action = export_menu.addAction("&Vector Graphics...")
            if vector_action is not None:
                vector_action.setShortcut(QKeySequence(SHORTCUTS["file.export_vector"]))
                vector_action.triggered.connect(self.export_vector_graphics)

        file_menu.addSeparator()

        close_action = file_menu.addAction("&Close")
        if close_action is not None:
            close_action.setShortcut(QKeySequence(SHORTCUTS["file.close"]))
            close_action.triggered.connect(self.close)

    def _setup_layer_menu(self, menu_bar: QMenuBar) -> None:
        layer_menu = menu_bar.addMenu("&Layer")
        if layer_menu is None:
            return
        layer_menu.addAction(self._toolbar.create_action)
        layer_menu.addAction(self._toolbar.delete_action)

    def _setup_settings_menu(self, menu_bar: QMenuBar) -> None:
        settings_menu = menu_bar.addMenu("&Settings")
        if settings_menu is None:
            return

        background_menu = settings_menu.addMenu("&Background Color")
        if background_menu is not None:
            group = QActionGroup(self)
            group.setExclusive(True)
            for name in BACKGROUND_COLORS:
                action = QAction(name, self)
                action.setCheckable(True)
                action.setChecked(name == self._controller.background_color_name)
                action.triggered.connect(self._make_background_selector(name))
                group.addAction(action)
                background_menu.addAction(action)
                self._background_actions[name] = action

        settings_menu.addSeparator()

        size_action = settings_menu.addAction("&Default Window Size")
        if size_action is not None:
            size_action.setShortcut(QKeySequence(SHORTCUTS["settings.default_size"]))
            size_action.triggered.connect(self.reset_window_size)

    def _make_background_selector(self, name: str) -> Callable[[], None]:
        def _select() -> None:
            self.select_background_color(name)

        return _select

    # ---- layer operations ----

    def set_layer_collection(self, collection: LayerCollection) -> None:
        """Show the layer collection of a newly loaded document."""
        self._pane.set_collection(collection)
        self._controller.bind(collection)

    def create_layer(self) -> int:
        try:
            return self._controller.create_layer()
        except LayerError as e:
            log.exception("Layer creation failed")
            QMessageBox.critical(self, "Create Layer", f"Could not create layer:\n{e}")
            return -1

    def delete_layers(self) -> set[int]:
        try:
            return self._controller.delete_layers()
        except LayerError as e:
            log.exception("Layer deletion failed")
            QMessageBox.critical(self, "Delete Layers", f"Could not delete layers:\n{e}")
            return set()

    def import_layer(self, candidate: LayerEntity | None) -> LayerEntity:
        """Entry point for the file-load pipeline; see the controller."""
        return self._controller.import_layer(candidate)

    def update_contextual_settings(self) -> bool:
        return self._controller.update_contextual_settings()

    # ---- contextual settings notifier ----

    def on_collection_changed(self) -> None:
        collection = self._controller.collection
        active = collection.active_layer
        active_name = active.name if active is not None else "none"
        count = len(collection)
        noun = "layer" if count == 1 else "layers"
        self._status_label.setText(f"{count} {noun}, active: {active_name}")

    # ---- printing and export ----

    @property
    def printer(self) -> QPrinter:
        """Printer shared by page setup and print; created on first use."""
        if self._printer is None:
            from PyQt6.QtPrintSupport import QPrinter

            self._printer = QPrinter(QPrinter.PrinterMode.HighResolution)
        return self._printer

    def page_setup(self) -> bool:
        from PyQt6.QtPrintSupport import QPageSetupDialog

        dlg = QPageSetupDialog(self.printer, self)
        return dlg.exec() == QDialog.DialogCode.Accepted

    def print_layers(self) -> bool:
        """Print the layer table after the user confirms the print dialog."""
        from PyQt6.QtPrintSupport import QPrintDialog

        dlg = QPrintDialog(self.printer, self)
        if dlg.exec() != QDialog.DialogCode.Accepted:
            return False
        print_widget(self._pane, self.printer)
        log.info("Printed layer table")
        return True

    def export_raster_graphics(self) -> Path | None:
        path_str, selected_filter = QFileDialog.getSaveFileName(
            self, "Export Raster Graphics", "", "PNG Image (*.png);;JPEG Image (*.jpg)"
        )
        if not path_str:
            return None
        path = Path(path_str)
        if path.suffix.lower() not in RASTER_FORMATS:
            path = path.with_suffix(".jpg" if "JPEG" in selected_filter else ".png")
        return self._export(path, export_raster)

    def export_vector_graphics(self) -> Path | None:
        path_str, _ = QFileDialog.getSaveFileName(
            self, "Export Vector Graphics", "", "SVG Image (*.svg)"
        )
        if not path_str:
            return None
        path = Path(path_str)
        if path.suffix.lower() != ".svg":
            path = path.with_suffix(".svg")
        return self._export(path, export_vector)

    def _export(self, path: Path, exporter: Callable[[QWidget, Path], None]) -> Path | None:
        try:
            exporter(self._pane, path)
        except (OSError, ValueError) as e:
            log.exception("Export to %s failed", path)
            QMessageBox.critical(self, "Export", f"Could not export to {path}:\n{e}")
            return None
        log.info("Exported layer table to %s", path)
        return path

    # ---- background ----

    @property
    def background_color_name(self) -> str:
        return self._controller.background_color_name

    def select_background_color(self, name: str) -> None:
        self._controller.select_background_color(name)
        action = self._background_actions.get(name)
        if action is not None:
            action.setChecked(True)
        self._settings.set_background_color_name(name)

    def _on_background_changed(self, _color: str) -> None:
        self._apply_background()

    def _apply_background(self) -> None:
        self._pane.set_foreground_from_background(
            self._controller.background_color, self._controller.foreground_color
        )

    # ---- window ----

    def reset_window_size(self) -> None:
        self.setGeometry(
            LAYER_MANAGEMENT_X_DEFAULT,
            LAYER_MANAGEMENT_Y_DEFAULT,
            LAYER_MANAGEMENT_WIDTH_DEFAULT,
            LAYER_MANAGEMENT_HEIGHT_DEFAULT,
        )

    def _restore_settings(self) -> None:
        name = self._settings.background_color_name()
        if name in BACKGROUND_COLORS:
            self.select_background_color(name)
        else:
            log.warning("Ignoring unknown background colour %r in settings", name)
        self._apply_background()

        geo = self._settings.window_geometry()
        if geo is not None:
            self.restoreGeometry(geo)

    def closeEvent(self, event: QCloseEvent | None) -> None:  # noqa: N802
        """Save window geometry on close."""
        self._settings.save_window_geometry(self.saveGeometry().data())
        super().closeEvent(event)

    # ---- properties ----

    @property
    def controller(self) -> LayerCollectionController:
        return self._controller

    @property
    def pane(self) -> LayerManagementPane:
        return self._pane

    @property
    def toolbar(self) -> LayerManagementToolBar:
        return self._toolbar
