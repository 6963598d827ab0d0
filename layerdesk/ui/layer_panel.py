"""LayerManagementPane — the layer table and its selection plumbing."""

from __future__ import annotations

from PyQt6.QtCore import QItemSelection, QItemSelectionModel, pyqtSignal
from PyQt6.QtGui import QColor, QPalette
from PyQt6.QtWidgets import QAbstractItemView, QHeaderView, QTableView, QVBoxLayout, QWidget

from layerdesk.config.constants import COLUMN_LAYER_NAME
from layerdesk.core.layer_collection import LayerCollection
from layerdesk.ui.layer_table import LayerTableModel


class LayerManagementPane(QWidget):
    """Editable layer table.

    Acts as the controller's presenter: it is told which row to focus or
    select and reports the rows the user selects through ``rows_selected``.

    Signals
    -------
    rows_selected(list)
        Emitted with the sorted selected row indices.
    """

    rows_selected = pyqtSignal(list)

    def __init__(self, collection: LayerCollection, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self._tracking = False

        self._model = LayerTableModel(collection, self)
        self._table = QTableView(self)
        self._table.setModel(self._model)
        self._table.setSelectionBehavior(QAbstractItemView.SelectionBehavior.SelectRows)
        self._table.setSelectionMode(QAbstractItemView.SelectionMode.ExtendedSelection)
        self._table.setEditTriggers(
            QAbstractItemView.EditTrigger.DoubleClicked
            | QAbstractItemView.EditTrigger.EditKeyPressed
        )
        header = self._table.horizontalHeader()
        if header is not None:
            header.setSectionResizeMode(COLUMN_LAYER_NAME, QHeaderView.ResizeMode.Stretch)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.addWidget(self._table)

        self.add_selection_tracking()

    @property
    def model(self) -> LayerTableModel:
        return self._model

    @property
    def table(self) -> QTableView:
        return self._table

    # --- collection ---

    def set_collection(self, collection: LayerCollection) -> None:
        """Show a different collection; selection tracking is paused meanwhile."""
        self.remove_selection_tracking()
        self._model.set_collection(collection)
        self.add_selection_tracking()

    # --- selection ---

    def add_selection_tracking(self) -> None:
        """Start reporting table selections. Safe to call repeatedly."""
        selection_model = self._table.selectionModel()
        if self._tracking or selection_model is None:
            return
        selection_model.selectionChanged.connect(self._on_selection_changed)
        self._tracking = True

    def remove_selection_tracking(self) -> None:
        selection_model = self._table.selectionModel()
        if not self._tracking or selection_model is None:
            return
        selection_model.selectionChanged.disconnect(self._on_selection_changed)
        self._tracking = False

    def selected_rows(self) -> list[int]:
        selection_model = self._table.selectionModel()
        if selection_model is None:
            return []
        return sorted(index.row() for index in selection_model.selectedRows())

    def clear_selection(self) -> None:
        self._table.clearSelection()

    # --- presenter ---

    def select_row(self, row: int) -> None:
        if not 0 <= row < self._model.rowCount():
            return
        self._table.selectRow(row)

    def focus(self, row: int, column: int) -> None:
        """Select *row* and open an editor on *column*."""
        index = self._model.index(row, column)
        if not index.isValid():
            return
        selection_model = self._table.selectionModel()
        if selection_model is not None:
            selection_model.setCurrentIndex(
                index,
                QItemSelectionModel.SelectionFlag.ClearAndSelect
                | QItemSelectionModel.SelectionFlag.Rows,
            )
        self._table.setFocus()
        self._table.edit(index)

    # --- styling ---

    def set_foreground_from_background(self, background: str, foreground: str) -> None:
        palette = self._table.palette()
        palette.setColor(QPalette.ColorRole.Base, QColor(background))
        palette.setColor(QPalette.ColorRole.Text, QColor(foreground))
        self._table.setPalette(palette)

    # --- internal ---

    def _on_selection_changed(self, _selected: QItemSelection, _deselected: QItemSelection) -> None:
        self.rows_selected.emit(self.selected_rows())
