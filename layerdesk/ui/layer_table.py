"""LayerTableModel — exposes a LayerCollection to a QTableView."""

from __future__ import annotations

from typing import Any

from PyQt6.QtCore import QAbstractTableModel, QModelIndex, QObject, Qt
from PyQt6.QtGui import QColor

from layerdesk.config.constants import (
    COLUMN_LAYER_ACTIVE,
    COLUMN_LAYER_COLOR,
    COLUMN_LAYER_LOCKED,
    COLUMN_LAYER_NAME,
    COLUMN_LAYER_VISIBLE,
    LAYER_TABLE_HEADERS,
    ROW_DEFAULT_LAYER,
)
from layerdesk.core.layer_collection import LayerCollection

_CHECK_COLUMNS = (COLUMN_LAYER_VISIBLE, COLUMN_LAYER_LOCKED, COLUMN_LAYER_ACTIVE)


class LayerTableModel(QAbstractTableModel):
    """Table model with one row per layer.

    Edits go straight to the collection; the model resets whenever the
    collection reports a change.
    """

    def __init__(self, collection: LayerCollection, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._collection = collection
        collection.layers_changed.connect(self._on_layers_changed)

    @property
    def collection(self) -> LayerCollection:
        return self._collection

    def set_collection(self, collection: LayerCollection) -> None:
        """Show *collection* instead of the current one."""
        self._collection.layers_changed.disconnect(self._on_layers_changed)
        self.beginResetModel()
        self._collection = collection
        self.endResetModel()
        collection.layers_changed.connect(self._on_layers_changed)

    # --- QAbstractTableModel ---

    def rowCount(self, parent: QModelIndex = QModelIndex()) -> int:  # noqa: B008, N802
        if parent.isValid():
            return 0
        return len(self._collection)

    def columnCount(self, parent: QModelIndex = QModelIndex()) -> int:  # noqa: B008, N802
        if parent.isValid():
            return 0
        return len(LAYER_TABLE_HEADERS)

    def headerData(  # noqa: N802
        self,
        section: int,
        orientation: Qt.Orientation,
        role: int = Qt.ItemDataRole.DisplayRole,
    ) -> Any:
        if role != Qt.ItemDataRole.DisplayRole:
            return None
        if orientation == Qt.Orientation.Horizontal:
            return LAYER_TABLE_HEADERS[section]
        return str(section)

    def data(self, index: QModelIndex, role: int = Qt.ItemDataRole.DisplayRole) -> Any:
        if not index.isValid() or index.row() >= len(self._collection):
            return None
        layer = self._collection[index.row()]
        column = index.column()

        if column == COLUMN_LAYER_NAME and role in (
            Qt.ItemDataRole.DisplayRole,
            Qt.ItemDataRole.EditRole,
        ):
            return layer.name
        if column == COLUMN_LAYER_COLOR:
            if role == Qt.ItemDataRole.DisplayRole:
                return layer.color
            if role == Qt.ItemDataRole.DecorationRole:
                return QColor(layer.color)
        if column in _CHECK_COLUMNS and role == Qt.ItemDataRole.CheckStateRole:
            checked = {
                COLUMN_LAYER_VISIBLE: layer.visible,
                COLUMN_LAYER_LOCKED: layer.locked,
                COLUMN_LAYER_ACTIVE: layer.active,
            }[column]
            return Qt.CheckState.Checked if checked else Qt.CheckState.Unchecked
        return None

    def flags(self, index: QModelIndex) -> Qt.ItemFlag:
        if not index.isValid():
            return Qt.ItemFlag.NoItemFlags
        flags = Qt.ItemFlag.ItemIsEnabled | Qt.ItemFlag.ItemIsSelectable
        column = index.column()
        if column == COLUMN_LAYER_NAME and index.row() != ROW_DEFAULT_LAYER:
            flags |= Qt.ItemFlag.ItemIsEditable
        elif column == COLUMN_LAYER_COLOR:
            flags |= Qt.ItemFlag.ItemIsEditable
        elif column in _CHECK_COLUMNS:
            flags |= Qt.ItemFlag.ItemIsUserCheckable
        return flags

    def setData(  # noqa: N802
        self,
        index: QModelIndex,
        value: Any,
        role: int = Qt.ItemDataRole.EditRole,
    ) -> bool:
        if not index.isValid() or index.row() >= len(self._collection):
            return False
        row = index.row()
        column = index.column()

        if role == Qt.ItemDataRole.EditRole:
            if column == COLUMN_LAYER_NAME:
                name = str(value).strip()
                if not name or row == ROW_DEFAULT_LAYER:
                    return False
                self._collection.rename(row, name)
                return True
            if column == COLUMN_LAYER_COLOR:
                color = QColor(str(value))
                if not color.isValid():
                    return False
                self._collection.set_color(row, color.name().upper())
                return True

        if role == Qt.ItemDataRole.CheckStateRole and column in _CHECK_COLUMNS:
            checked = _is_checked(value)
            if column == COLUMN_LAYER_VISIBLE:
                self._collection.set_visible(row, checked)
            elif column == COLUMN_LAYER_LOCKED:
                self._collection.set_locked(row, checked)
            elif checked:
                self._collection.set_active(row)
            else:
                # The active layer can only change by activating another one
                return False
            return True
        return False

    # --- internal ---

    def _on_layers_changed(self) -> None:
        self.beginResetModel()
        self.endResetModel()


def _is_checked(value: Any) -> bool:
    if isinstance(value, Qt.CheckState):
        return value == Qt.CheckState.Checked
    return int(value) == Qt.CheckState.Checked.value
