"""SelectionState — tracks the layer table rows currently selected."""

from __future__ import annotations

from collections.abc import Iterable

from PyQt6.QtCore import QObject, pyqtSignal

from layerdesk.config.constants import ROW_DEFAULT_LAYER


class SelectionState(QObject):
    """Set of selected row indices into a layer collection.

    The state only names indices; it is reset or clamped whenever the
    collection it refers to shrinks or is replaced.

    Signals
    -------
    selection_changed(list)
        Emitted with the sorted list of selected rows.
    """

    selection_changed = pyqtSignal(list)

    def __init__(self, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._rows: set[int] = set()

    @property
    def rows(self) -> list[int]:
        return sorted(self._rows)

    @property
    def count(self) -> int:
        return len(self._rows)

    @property
    def is_empty(self) -> bool:
        return len(self._rows) == 0

    def select(self, indices: Iterable[int]) -> None:
        """Replace the selection with *indices*."""
        rows = {int(i) for i in indices if i >= 0}
        if rows != self._rows:
            self._rows = rows
            self.selection_changed.emit(self.rows)

    def clear(self) -> None:
        if self._rows:
            self._rows = set()
            self.selection_changed.emit(self.rows)

    def clamp(self, collection_size: int) -> None:
        """Drop rows that no longer exist in a collection of *collection_size*."""
        self.select(i for i in self._rows if i < collection_size)

    def can_delete(self, collection_size: int) -> bool:
        """Return whether a delete would remove at least one layer.

        With nothing selected, the last row is the implied target, so any
        collection holding a non-default row can be trimmed.
        """
        rows = {i for i in self._rows if i < collection_size}
        if rows:
            return rows != {ROW_DEFAULT_LAYER}
        return collection_size > 1

    def delete_targets(self, collection_size: int) -> list[int]:
        """Return the rows a delete would act on, including the implied last row."""
        rows = sorted(i for i in self._rows if i < collection_size)
        if rows:
            return rows
        if collection_size > 1:
            return [collection_size - 1]
        return []
