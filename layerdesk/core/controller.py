"""LayerCollectionController — create, import and delete layers as atomic operations."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Iterator
from contextlib import contextmanager

from PyQt6.QtCore import QMetaObject, QObject, pyqtSignal

from layerdesk.config.constants import (
    COLUMN_LAYER_NAME,
    DEFAULT_BACKGROUND_COLOR,
    DELETE_LAYERS_MESSAGE,
    DELETE_LAYERS_TITLE,
    ROW_DEFAULT_LAYER,
)
from layerdesk.core.collaborators import (
    Confirmation,
    ContextualSettingsNotifier,
    DeleteActionTarget,
    Presenter,
)
from layerdesk.core.errors import IndexOutOfRange, OperationAborted, ReentrantOperation
from layerdesk.core.layer import LayerEntity
from layerdesk.core.layer_collection import LayerCollection
from layerdesk.core.palette import background_color, foreground_for
from layerdesk.core.selection_state import SelectionState

log = logging.getLogger(__name__)


class CollectionSubscription:
    """Connection to a collection's ``layers_changed`` signal, released explicitly."""

    def __init__(self, collection: LayerCollection, slot: Callable[[], None]) -> None:
        self._collection = collection
        self._connection: QMetaObject.Connection | None = collection.layers_changed.connect(slot)

    @property
    def active(self) -> bool:
        return self._connection is not None

    def release(self) -> None:
        if self._connection is not None:
            self._collection.layers_changed.disconnect(self._connection)
            self._connection = None


class LayerCollectionController(QObject):
    """Runs layer operations against one bound :class:`LayerCollection`.

    Each mutating operation is a transaction: it either completes, including
    the single call to the contextual settings notifier, or it restores the
    collection and selection to their prior state and re-raises.  Operations
    are not reentrant; starting one from inside another (typically from the
    notifier) raises :class:`ReentrantOperation`.

    Signals
    -------
    background_changed(str)
        Emitted with the hex colour of a newly selected background.
    """

    background_changed = pyqtSignal(str)

    def __init__(
        self,
        collection: LayerCollection,
        *,
        confirm: Confirmation | None = None,
        notifier: ContextualSettingsNotifier | None = None,
        presenter: Presenter | None = None,
        delete_target: DeleteActionTarget | None = None,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self.confirm = confirm
        self.notifier = notifier
        self.presenter = presenter
        self.delete_target = delete_target
        self._selection = SelectionState(self)
        self._mutating = False
        self._can_delete = False
        self._background_name = DEFAULT_BACKGROUND_COLOR
        self._collection = collection
        self._subscription = CollectionSubscription(collection, self._on_collection_changed)

    # --- queries ---

    @property
    def collection(self) -> LayerCollection:
        return self._collection

    @property
    def selection(self) -> SelectionState:
        return self._selection

    @property
    def is_mutating(self) -> bool:
        return self._mutating

    @property
    def can_delete(self) -> bool:
        """Delete enablement as of the last :meth:`update_contextual_settings`."""
        return self._can_delete

    @property
    def background_color_name(self) -> str:
        return self._background_name

    @property
    def background_color(self) -> str:
        return background_color(self._background_name)

    @property
    def foreground_color(self) -> str:
        return foreground_for(self.background_color)

    # --- binding ---

    def bind(self, collection: LayerCollection) -> None:
        """Switch to *collection*, dropping the previous subscription and selection."""
        with self._guard("bind"):
            self._subscription.release()
            self._collection = collection
            self._subscription = CollectionSubscription(collection, self._on_collection_changed)
            self._selection.clear()
            log.debug("Bound layer collection with %d layer(s)", len(collection))
            self._finish()

    # --- operations ---

    def create_layer(self) -> int:
        """Append a layer cloned from the active one and make it active.

        Returns the new row, or -1 if the collection is full.
        """
        with self._transaction("create_layer"):
            if not self._collection.can_accept():
                log.warning("Layer limit of %s reached", self._collection.max_layers)
                index = -1
            else:
                reference = self._collection.active_layer or self._collection.default_layer
                layer = reference.clone(self._collection.unique_name(reference.name))
                layer.active = True
                index = self._collection.append(layer)
                self._collection.set_active(index)
                self._selection.select([index])
                if self.presenter is not None:
                    self.presenter.focus(index, COLUMN_LAYER_NAME)
                log.debug("Created layer %r at row %d", layer.name, index)
        return index

    def import_layer(self, candidate: LayerEntity | None) -> LayerEntity:
        """Add a layer found while loading a document, unless its name is taken.

        Names coming from files are not disambiguated: a name already in the
        collection resolves to the existing layer.  ``None`` and a full
        collection resolve to the default layer.
        """
        with self._transaction("import_layer"):
            collection = self._collection
            existing = collection.find(candidate.name) if candidate is not None else None
            if candidate is None:
                result = collection.default_layer
            elif existing is not None:
                result = existing
            elif not collection.can_accept():
                log.warning("Layer limit reached; %r mapped to the default layer", candidate.name)
                result = collection.default_layer
            else:
                index = collection.append(candidate)
                if candidate.active:
                    collection.set_active(index)
                result = candidate
                log.debug("Imported layer %r at row %d", candidate.name, index)
        return result

    def delete_layers(self, selection: Iterable[int] | None = None) -> set[int]:
        """Delete the layers at *selection* (or the current table selection).

        The default layer is never deleted.  Returns the rows removed; an
        empty set if nothing was removable or the user declined.
        """
        removed: set[int] = set()
        try:
            with self._transaction("delete_layers"):
                size = len(self._collection)
                if selection is None:
                    targets = self._selection.delete_targets(size)
                else:
                    targets = sorted(set(selection))
                for index in targets:
                    if not 0 <= index < size:
                        raise IndexOutOfRange(index, size)
                removable = [index for index in targets if index != ROW_DEFAULT_LAYER]
                if not removable:
                    log.debug("Nothing to delete in rows %s", targets)
                else:
                    self._ask_confirmation()
                    removed = self._collection.remove(removable)
                    if not self._collection.has_active_layer():
                        self._collection.reset_default_active()
                        row = ROW_DEFAULT_LAYER
                    else:
                        row = min(min(removed), len(self._collection) - 1)
                    self._selection.select([row])
                    if self.presenter is not None:
                        self.presenter.select_row(row)
                    log.info("Deleted %d layer(s)", len(removed))
        except OperationAborted:
            log.info("Layer deletion cancelled")
            return set()
        return removed

    def select_rows(self, rows: Iterable[int]) -> None:
        """Record the rows selected in the presenting table."""
        self._selection.select(rows)
        self.update_contextual_settings()

    def update_contextual_settings(self) -> bool:
        """Recompute whether deletion is allowed and push it to the delete target."""
        self._can_delete = self._selection.can_delete(len(self._collection))
        if self.delete_target is not None:
            self.delete_target.set_delete_enabled(self._can_delete)
        return self._can_delete

    def select_background_color(self, name: str) -> str:
        """Choose the background by name and return its hex colour."""
        color = background_color(name)
        if name != self._background_name:
            self._background_name = name
            self.background_changed.emit(color)
        return color

    # --- internal ---

    @contextmanager
    def _guard(self, operation: str) -> Iterator[None]:
        if self._mutating:
            raise ReentrantOperation(f"{operation} started while a layer operation is in progress")
        self._mutating = True
        try:
            yield
        finally:
            self._mutating = False

    @contextmanager
    def _transaction(self, operation: str) -> Iterator[None]:
        with self._guard(operation):
            snapshot = self._collection.snapshot()
            rows = self._selection.rows
            try:
                yield
                self._collection.check_invariants()
                self._finish()
            except Exception:
                if self._collection.snapshot() != snapshot:
                    self._collection.restore(snapshot)
                self._selection.select(rows)
                self.update_contextual_settings()
                raise

    def _finish(self) -> None:
        self.update_contextual_settings()
        if self.notifier is not None:
            self.notifier.on_collection_changed()

    def _ask_confirmation(self) -> None:
        if self.confirm is None:
            return
        if not self.confirm(DELETE_LAYERS_MESSAGE, DELETE_LAYERS_TITLE):
            raise OperationAborted("layer deletion declined")

    def _on_collection_changed(self) -> None:
        if self._mutating:
            return
        # Runs as a Qt slot; an exception here would reach the event loop
        try:
            with self._guard("collection change"):
                self._selection.clamp(len(self._collection))
                self._finish()
        except Exception:
            log.exception("Contextual settings update failed after a collection change")
