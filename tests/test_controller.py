"""Tests for LayerCollectionController."""

from __future__ import annotations

import logging
import random

import pytest

from layerdesk.config.constants import COLUMN_LAYER_NAME, DELETE_LAYERS_TITLE
from layerdesk.core.controller import LayerCollectionController
from layerdesk.core.errors import IndexOutOfRange, InvariantViolation, ReentrantOperation
from layerdesk.core.layer import LayerEntity
from layerdesk.core.layer_collection import LayerCollection

from conftest import (
    Confirmer,
    RecordingDeleteTarget,
    RecordingNotifier,
    RecordingPresenter,
)


def _assert_consistent(c: LayerCollection) -> None:
    assert len(c) >= 1
    assert c[0].is_default
    assert sum(1 for layer in c if layer.active) == 1


# ---- create_layer ----


class TestCreateLayer:
    def test_clones_active_layer_with_counter(
        self, make_controller, wall_collection: LayerCollection  # type: ignore[no-untyped-def]
    ) -> None:
        ctrl = make_controller(wall_collection)
        index = ctrl.create_layer()
        assert index == 2  # noqa: PLR2004
        new = wall_collection[2]
        assert new.name == "Wall (1)"
        assert new.color == "#AA0000"
        assert new.active
        assert not wall_collection[1].active
        _assert_consistent(wall_collection)

    def test_second_create_continues_counter(
        self, make_controller, wall_collection: LayerCollection  # type: ignore[no-untyped-def]
    ) -> None:
        ctrl = make_controller(wall_collection)
        ctrl.create_layer()
        ctrl.create_layer()
        assert wall_collection.names() == ["Layer 0", "Wall", "Wall (1)", "Wall (2)"]

    def test_uses_default_when_none_active(
        self, make_controller, collection: LayerCollection  # type: ignore[no-untyped-def]
    ) -> None:
        collection.default_layer.active = False
        ctrl = make_controller(collection)
        index = ctrl.create_layer()
        assert collection[index].name == "Layer 0 (1)"
        _assert_consistent(collection)

    def test_focuses_name_and_notifies_once(
        self,
        make_controller,  # type: ignore[no-untyped-def]
        wall_collection: LayerCollection,
        notifier: RecordingNotifier,
        presenter: RecordingPresenter,
    ) -> None:
        ctrl = make_controller(wall_collection)
        index = ctrl.create_layer()
        assert presenter.focused == [(index, COLUMN_LAYER_NAME)]
        assert ctrl.selection.rows == [index]
        assert notifier.calls == 1

    def test_full_collection_returns_minus_one(
        self, make_controller, notifier: RecordingNotifier  # type: ignore[no-untyped-def]
    ) -> None:
        limited = LayerCollection(max_layers=1)
        ctrl = make_controller(limited)
        assert ctrl.create_layer() == -1
        assert len(limited) == 1
        assert notifier.calls == 1


# ---- import_layer ----


class TestImportLayer:
    def test_existing_name_returns_existing(
        self, make_controller, wall_collection: LayerCollection  # type: ignore[no-untyped-def]
    ) -> None:
        ctrl = make_controller(wall_collection)
        existing = wall_collection[1]
        result = ctrl.import_layer(LayerEntity(name="Wall", color="#00FF00"))
        assert result is existing
        assert len(wall_collection) == 2  # noqa: PLR2004
        assert existing.color == "#AA0000"

    def test_new_name_is_appended_verbatim(
        self, make_controller, wall_collection: LayerCollection  # type: ignore[no-untyped-def]
    ) -> None:
        ctrl = make_controller(wall_collection)
        candidate = LayerEntity(name="Doors")
        result = ctrl.import_layer(candidate)
        assert result is candidate
        assert wall_collection.names() == ["Layer 0", "Wall", "Doors"]
        assert wall_collection.active_layer is wall_collection[1]

    def test_imported_active_layer_takes_over(
        self, make_controller, wall_collection: LayerCollection  # type: ignore[no-untyped-def]
    ) -> None:
        ctrl = make_controller(wall_collection)
        candidate = LayerEntity(name="Doors", active=True)
        ctrl.import_layer(candidate)
        assert wall_collection.active_layer is candidate
        _assert_consistent(wall_collection)

    def test_none_returns_default(
        self,
        make_controller,  # type: ignore[no-untyped-def]
        wall_collection: LayerCollection,
        notifier: RecordingNotifier,
    ) -> None:
        ctrl = make_controller(wall_collection)
        assert ctrl.import_layer(None) is wall_collection.default_layer
        assert notifier.calls == 1

    def test_noop_import_still_notifies(
        self,
        make_controller,  # type: ignore[no-untyped-def]
        wall_collection: LayerCollection,
        notifier: RecordingNotifier,
    ) -> None:
        ctrl = make_controller(wall_collection)
        ctrl.import_layer(LayerEntity(name="Wall"))
        assert notifier.calls == 1

    def test_no_disambiguation_on_import(
        self, make_controller, collection: LayerCollection  # type: ignore[no-untyped-def]
    ) -> None:
        ctrl = make_controller(collection)
        ctrl.import_layer(LayerEntity(name="Wall (1)"))
        assert collection.names() == ["Layer 0", "Wall (1)"]

    def test_default_candidate_is_rejected(
        self,
        make_controller,  # type: ignore[no-untyped-def]
        collection: LayerCollection,
        notifier: RecordingNotifier,
    ) -> None:
        ctrl = make_controller(collection)
        with pytest.raises(InvariantViolation):
            ctrl.import_layer(LayerEntity(name="Base", is_default=True))
        assert len(collection) == 1
        assert notifier.calls == 0

    def test_full_collection_maps_to_default(self, make_controller) -> None:  # type: ignore[no-untyped-def]
        limited = LayerCollection(max_layers=1)
        ctrl = make_controller(limited)
        assert ctrl.import_layer(LayerEntity(name="Doors")) is limited.default_layer
        assert len(limited) == 1


# ---- delete_layers ----


def _three_layers() -> LayerCollection:
    c = LayerCollection()
    for name in ("A", "B", "C"):
        c.append(LayerEntity(name=name))
    return c


class TestDeleteLayers:
    def test_default_row_only_removes_nothing(
        self,
        make_controller,  # type: ignore[no-untyped-def]
        wall_collection: LayerCollection,
        confirmer: Confirmer,
    ) -> None:
        ctrl = make_controller(wall_collection)
        assert ctrl.delete_layers({0}) == set()
        assert len(wall_collection) == 2  # noqa: PLR2004
        assert confirmer.asked == []

    def test_deleting_active_layer_resets_default(
        self,
        make_controller,  # type: ignore[no-untyped-def]
        wall_collection: LayerCollection,
        presenter: RecordingPresenter,
        confirmer: Confirmer,
    ) -> None:
        ctrl = make_controller(wall_collection)
        assert ctrl.delete_layers({1}) == {1}
        assert wall_collection.active_layer is wall_collection.default_layer
        assert presenter.selected == [0]
        assert ctrl.selection.rows == [0]
        assert confirmer.asked[0][1] == DELETE_LAYERS_TITLE

    def test_selects_where_delete_happened(
        self, make_controller, presenter: RecordingPresenter  # type: ignore[no-untyped-def]
    ) -> None:
        c = _three_layers()
        ctrl = make_controller(c)
        ctrl.delete_layers({2})
        assert c.names() == ["Layer 0", "A", "C"]
        assert presenter.selected == [2]

    def test_selected_row_clamped_to_new_size(
        self, make_controller, presenter: RecordingPresenter  # type: ignore[no-untyped-def]
    ) -> None:
        c = _three_layers()
        ctrl = make_controller(c)
        ctrl.delete_layers({2, 3})
        assert c.names() == ["Layer 0", "A"]
        assert presenter.selected == [1]

    def test_default_kept_when_selected_with_others(
        self, make_controller  # type: ignore[no-untyped-def]
    ) -> None:
        c = _three_layers()
        ctrl = make_controller(c)
        assert ctrl.delete_layers({0, 1, 2, 3}) == {1, 2, 3}
        assert c.names() == ["Layer 0"]
        _assert_consistent(c)

    def test_declined_confirmation_changes_nothing(
        self,
        make_controller,  # type: ignore[no-untyped-def]
        wall_collection: LayerCollection,
        confirmer: Confirmer,
        notifier: RecordingNotifier,
    ) -> None:
        confirmer.answer = False
        ctrl = make_controller(wall_collection)
        ctrl.select_rows([1])
        assert ctrl.delete_layers() == set()
        assert wall_collection.names() == ["Layer 0", "Wall"]
        assert wall_collection.active_index == 1
        assert ctrl.selection.rows == [1]
        assert notifier.calls == 0

    def test_uses_table_selection(self, make_controller) -> None:  # type: ignore[no-untyped-def]
        c = _three_layers()
        ctrl = make_controller(c)
        ctrl.select_rows([1])
        assert ctrl.delete_layers() == {1}
        assert c.names() == ["Layer 0", "B", "C"]

    def test_empty_selection_deletes_last_row(self, make_controller) -> None:  # type: ignore[no-untyped-def]
        c = _three_layers()
        ctrl = make_controller(c)
        assert ctrl.delete_layers() == {3}
        assert c.names() == ["Layer 0", "A", "B"]

    def test_out_of_range_fails_before_confirming(
        self,
        make_controller,  # type: ignore[no-untyped-def]
        wall_collection: LayerCollection,
        confirmer: Confirmer,
    ) -> None:
        ctrl = make_controller(wall_collection)
        with pytest.raises(IndexOutOfRange):
            ctrl.delete_layers({1, 9})
        assert confirmer.asked == []
        assert len(wall_collection) == 2  # noqa: PLR2004

    def test_notifies_once(
        self, make_controller, notifier: RecordingNotifier  # type: ignore[no-untyped-def]
    ) -> None:
        c = _three_layers()
        ctrl = make_controller(c)
        ctrl.delete_layers({1, 2})
        assert notifier.calls == 1
        assert notifier.sizes == [2]


# ---- contextual settings ----


class TestContextualSettings:
    def test_idempotent(
        self,
        make_controller,  # type: ignore[no-untyped-def]
        wall_collection: LayerCollection,
        delete_target: RecordingDeleteTarget,
    ) -> None:
        ctrl = make_controller(wall_collection)
        first = ctrl.update_contextual_settings()
        second = ctrl.update_contextual_settings()
        assert first == second
        assert delete_target.values[-2:] == [first, second]

    def test_default_only_disables_delete(
        self,
        make_controller,  # type: ignore[no-untyped-def]
        collection: LayerCollection,
        delete_target: RecordingDeleteTarget,
    ) -> None:
        ctrl = make_controller(collection)
        assert ctrl.update_contextual_settings() is False
        ctrl.select_rows([0])
        assert delete_target.enabled is False

    def test_selection_drives_enablement(
        self,
        make_controller,  # type: ignore[no-untyped-def]
        wall_collection: LayerCollection,
        delete_target: RecordingDeleteTarget,
    ) -> None:
        ctrl = make_controller(wall_collection)
        ctrl.select_rows([0])
        assert delete_target.enabled is False
        ctrl.select_rows([1])
        assert delete_target.enabled is True
        assert ctrl.can_delete is True

    def test_external_change_notifies(
        self,
        make_controller,  # type: ignore[no-untyped-def]
        wall_collection: LayerCollection,
        notifier: RecordingNotifier,
    ) -> None:
        ctrl = make_controller(wall_collection)
        wall_collection.rename(1, "Walls")
        assert notifier.calls == 1
        assert ctrl.can_delete is True


class TestBind:
    def test_rebind_releases_old_collection(
        self,
        make_controller,  # type: ignore[no-untyped-def]
        wall_collection: LayerCollection,
        notifier: RecordingNotifier,
    ) -> None:
        ctrl = make_controller(wall_collection)
        ctrl.select_rows([1])
        replacement = LayerCollection()
        ctrl.bind(replacement)
        assert ctrl.collection is replacement
        assert ctrl.selection.is_empty
        calls = notifier.calls
        wall_collection.rename(1, "Ignored")
        assert notifier.calls == calls
        replacement.rename(0, "Layer 0")
        assert notifier.calls == calls + 1

    def test_bind_does_not_copy(self, make_controller, collection: LayerCollection) -> None:  # type: ignore[no-untyped-def]
        ctrl = make_controller(LayerCollection())
        ctrl.bind(collection)
        ctrl.create_layer()
        assert len(collection) == 2  # noqa: PLR2004


# ---- transactions ----


class ReentrantNotifier:
    def __init__(self) -> None:
        self.controller: LayerCollectionController | None = None
        self.error: Exception | None = None

    def on_collection_changed(self) -> None:
        assert self.controller is not None
        try:
            self.controller.create_layer()
        except ReentrantOperation as e:
            self.error = e


class PropagatingNotifier:
    """Starts a new operation from inside the notification and lets it fail."""

    def __init__(self) -> None:
        self.controller: LayerCollectionController | None = None

    def on_collection_changed(self) -> None:
        assert self.controller is not None
        self.controller.create_layer()


class FailingNotifier:
    def on_collection_changed(self) -> None:
        raise RuntimeError("listener failed")


class TestTransactions:
    def test_reentrant_mutation_rejected(self, wall_collection: LayerCollection) -> None:
        notifier = ReentrantNotifier()
        ctrl = LayerCollectionController(wall_collection, notifier=notifier)
        notifier.controller = ctrl
        ctrl.create_layer()
        assert isinstance(notifier.error, ReentrantOperation)
        assert len(wall_collection) == 3  # noqa: PLR2004
        assert not ctrl.is_mutating

    def test_propagated_reentry_rolls_back(self, wall_collection: LayerCollection) -> None:
        notifier = PropagatingNotifier()
        ctrl = LayerCollectionController(wall_collection, notifier=notifier)
        notifier.controller = ctrl
        with pytest.raises(ReentrantOperation):
            ctrl.create_layer()
        assert wall_collection.names() == ["Layer 0", "Wall"]
        assert wall_collection.active_index == 1
        assert ctrl.selection.is_empty
        assert not ctrl.is_mutating

    def test_reentry_from_external_change_is_logged(
        self, wall_collection: LayerCollection, caplog: pytest.LogCaptureFixture
    ) -> None:
        notifier = PropagatingNotifier()
        ctrl = LayerCollectionController(wall_collection, notifier=notifier)
        notifier.controller = ctrl
        with caplog.at_level(logging.ERROR, logger="layerdesk.core.controller"):
            wall_collection.rename(1, "Walls")
        assert wall_collection.names() == ["Layer 0", "Walls"]
        assert not ctrl.is_mutating
        errors = [r for r in caplog.records if r.levelno == logging.ERROR]
        assert len(errors) == 1
        assert errors[0].exc_info is not None
        assert errors[0].exc_info[0] is ReentrantOperation

    def test_notifier_failure_rolls_back(self, wall_collection: LayerCollection) -> None:
        ctrl = LayerCollectionController(wall_collection, notifier=FailingNotifier())
        with pytest.raises(RuntimeError):
            ctrl.delete_layers({1})
        assert wall_collection.names() == ["Layer 0", "Wall"]
        assert wall_collection.active_index == 1
        assert not ctrl.is_mutating

    def test_invariants_hold_for_random_operations(self, make_controller) -> None:  # type: ignore[no-untyped-def]
        rng = random.Random(7)
        c = LayerCollection()
        ctrl = make_controller(c)
        for _ in range(200):
            op = rng.choice(("create", "import", "delete", "activate"))
            if op == "create":
                ctrl.create_layer()
            elif op == "import":
                ctrl.import_layer(LayerEntity(name=f"L{rng.randint(0, 10)}", active=rng.random() < 0.3))
            elif op == "delete":
                rows = rng.sample(range(len(c)), k=rng.randint(0, len(c)))
                ctrl.delete_layers(rows)
            else:
                c.set_active(rng.randrange(len(c)))
            _assert_consistent(c)


# ---- background ----


def test_background_selection(make_controller, collection: LayerCollection) -> None:  # type: ignore[no-untyped-def]
    ctrl = make_controller(collection)
    emitted: list[str] = []
    ctrl.background_changed.connect(emitted.append)
    assert ctrl.select_background_color("Black") == "#000000"
    assert ctrl.background_color_name == "Black"
    assert ctrl.foreground_color == "#FFFFFF"
    ctrl.select_background_color("Black")
    assert emitted == ["#000000"]
    with pytest.raises(KeyError):
        ctrl.select_background_color("Mauve")
