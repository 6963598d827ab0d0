"""LayerCollection — ordered layer set that keeps a default and a single active layer."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Iterator

from PyQt6.QtCore import QObject, pyqtSignal

from layerdesk.core.errors import IndexOutOfRange, InvariantViolation
from layerdesk.core.layer import LayerEntity

log = logging.getLogger(__name__)

_COUNTER_SUFFIX = re.compile(r"^(?P<base>.*?) \((?P<count>\d+)\)$")

Snapshot = list[tuple[LayerEntity, bool]]


class LayerCollection(QObject):
    """Manages an ordered list of :class:`LayerEntity` objects.

    Index 0 always holds the default layer and is never removed.  After every
    completed mutation exactly one layer is active; the active layer is found
    by scanning the ``active`` flags rather than by a cached index.

    Signals
    -------
    layers_changed()
        Emitted after any change to membership, order, active flag or
        layer properties.
    """

    layers_changed = pyqtSignal()

    def __init__(self, max_layers: int | None = None, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._layers: list[LayerEntity] = [LayerEntity.default()]
        self._max_layers = max_layers

    # --- queries ---

    def __len__(self) -> int:
        return len(self._layers)

    def __iter__(self) -> Iterator[LayerEntity]:
        return iter(list(self._layers))

    def __getitem__(self, index: int) -> LayerEntity:
        self._check_index(index)
        return self._layers[index]

    @property
    def layers(self) -> list[LayerEntity]:
        """Return the layer list in display order."""
        return list(self._layers)

    @property
    def default_layer(self) -> LayerEntity:
        return self._layers[0]

    @property
    def active_layer(self) -> LayerEntity | None:
        for layer in self._layers:
            if layer.active:
                return layer
        return None

    @property
    def active_index(self) -> int:
        for i, layer in enumerate(self._layers):
            if layer.active:
                return i
        return -1

    @property
    def max_layers(self) -> int | None:
        return self._max_layers

    def has_active_layer(self) -> bool:
        return self.active_layer is not None

    def can_accept(self) -> bool:
        """Return whether another layer fits within the capacity limit."""
        return self._max_layers is None or len(self._layers) < self._max_layers

    def find(self, name: str) -> LayerEntity | None:
        for layer in self._layers:
            if layer.name == name:
                return layer
        return None

    def index_of(self, entity: LayerEntity) -> int:
        for i, layer in enumerate(self._layers):
            if layer is entity:
                return i
        return -1

    def names(self) -> list[str]:
        return [layer.name for layer in self._layers]

    def unique_name(self, name: str) -> str:
        """Return ``"Base (n)"`` for the smallest *n* not already in use.

        Any trailing counter on *name* is stripped first, so cloning
        ``"Wall (1)"`` continues the ``"Wall"`` sequence.
        """
        match = _COUNTER_SUFFIX.match(name)
        base = match.group("base") if match else name
        taken = set(self.names())
        n = 1
        while f"{base} ({n})" in taken:
            n += 1
        return f"{base} ({n})"

    def check_invariants(self) -> None:
        """Raise :class:`InvariantViolation` if the collection is inconsistent."""
        if not self._layers:
            raise InvariantViolation("layer collection is empty")
        if not self._layers[0].is_default:
            raise InvariantViolation("index 0 is not the default layer")
        defaults = sum(1 for layer in self._layers if layer.is_default)
        if defaults != 1:
            raise InvariantViolation(f"expected one default layer, found {defaults}")
        active = sum(1 for layer in self._layers if layer.active)
        if active != 1:
            raise InvariantViolation(f"expected one active layer, found {active}")

    # --- mutations ---

    def append(self, entity: LayerEntity) -> int:
        """Append *entity* and return its index.

        The caller is responsible for leaving exactly one active layer once
        its own operation completes; appending must not leave none.
        """
        if entity.is_default:
            raise InvariantViolation("only index 0 may hold the default layer")
        if not entity.active and not self.has_active_layer():
            raise InvariantViolation("append would leave no active layer")
        self._layers.append(entity)
        self.layers_changed.emit()
        return len(self._layers) - 1

    def set_active(self, index: int) -> None:
        """Make the layer at *index* the only active layer."""
        self._check_index(index)
        target = self._layers[index]
        if target.active and sum(1 for layer in self._layers if layer.active) == 1:
            return
        for layer in self._layers:
            layer.active = layer is target
        self.layers_changed.emit()

    def reset_default_active(self) -> None:
        """Make the default layer the active layer."""
        self.set_active(0)

    def remove(self, indices: Iterable[int]) -> set[int]:
        """Remove the layers at *indices*; index 0 is always kept.

        Every index is validated before anything is removed.  Returns the
        indices that were actually removed.
        """
        requested = set(indices)
        for index in requested:
            self._check_index(index)
        removed = {index for index in requested if index != 0}
        if not removed:
            return removed
        self._layers = [layer for i, layer in enumerate(self._layers) if i not in removed]
        log.debug("Removed layer rows %s", sorted(removed))
        self.layers_changed.emit()
        return removed

    def rename(self, index: int, name: str) -> None:
        self._check_index(index)
        self._layers[index].name = name
        self.layers_changed.emit()

    def set_visible(self, index: int, visible: bool) -> None:
        self._check_index(index)
        self._layers[index].visible = visible
        self.layers_changed.emit()

    def set_locked(self, index: int, locked: bool) -> None:
        self._check_index(index)
        self._layers[index].locked = locked
        self.layers_changed.emit()

    def set_color(self, index: int, color: str) -> None:
        self._check_index(index)
        self._layers[index].color = color
        self.layers_changed.emit()

    # --- rollback support ---

    def snapshot(self) -> Snapshot:
        """Capture membership and active flags."""
        return [(layer, layer.active) for layer in self._layers]

    def restore(self, snapshot: Snapshot) -> None:
        """Return to a state previously captured by :meth:`snapshot`."""
        self._layers = [layer for layer, _active in snapshot]
        for layer, active in snapshot:
            layer.active = active
        self.layers_changed.emit()

    # --- internal ---

    def _check_index(self, index: int) -> None:
        if not 0 <= index < len(self._layers):
            raise IndexOutOfRange(index, len(self._layers))
