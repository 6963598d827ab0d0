"""Shared pytest fixtures."""

from __future__ import annotations

import os
from pathlib import Path

import pytest
from PyQt6.QtCore import QSettings
from pytestqt.qtbot import QtBot

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from layerdesk.config.settings import AppSettings  # noqa: E402
from layerdesk.core.controller import LayerCollectionController  # noqa: E402
from layerdesk.core.layer import LayerEntity  # noqa: E402
from layerdesk.core.layer_collection import LayerCollection  # noqa: E402
from layerdesk.main_window import LayerManagementWindow  # noqa: E402


class RecordingNotifier:
    """Counts notifier calls and snapshots the collection size at each one."""

    def __init__(self) -> None:
        self.calls = 0
        self.sizes: list[int] = []
        self.collection: LayerCollection | None = None

    def on_collection_changed(self) -> None:
        self.calls += 1
        if self.collection is not None:
            self.sizes.append(len(self.collection))


class RecordingPresenter:
    def __init__(self) -> None:
        self.focused: list[tuple[int, int]] = []
        self.selected: list[int] = []

    def focus(self, row: int, column: int) -> None:
        self.focused.append((row, column))

    def select_row(self, row: int) -> None:
        self.selected.append(row)


class RecordingDeleteTarget:
    def __init__(self) -> None:
        self.values: list[bool] = []

    def set_delete_enabled(self, enabled: bool) -> None:
        self.values.append(enabled)

    @property
    def enabled(self) -> bool | None:
        return self.values[-1] if self.values else None


class Confirmer:
    def __init__(self, answer: bool = True) -> None:
        self.answer = answer
        self.asked: list[tuple[str, str]] = []

    def __call__(self, message: str, title: str) -> bool:
        self.asked.append((message, title))
        return self.answer


@pytest.fixture()
def collection() -> LayerCollection:
    """A collection holding only the default layer."""
    return LayerCollection()


@pytest.fixture()
def wall_collection() -> LayerCollection:
    """["Layer 0", "Wall"] with "Wall" active."""
    c = LayerCollection()
    c.append(LayerEntity(name="Wall", color="#AA0000"))
    c.set_active(1)
    return c


@pytest.fixture()
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture()
def presenter() -> RecordingPresenter:
    return RecordingPresenter()


@pytest.fixture()
def delete_target() -> RecordingDeleteTarget:
    return RecordingDeleteTarget()


@pytest.fixture()
def confirmer() -> Confirmer:
    return Confirmer()


@pytest.fixture()
def make_controller(
    notifier: RecordingNotifier,
    presenter: RecordingPresenter,
    delete_target: RecordingDeleteTarget,
    confirmer: Confirmer,
):  # type: ignore[no-untyped-def]
    """Factory building a controller wired to the recording collaborators."""

    def _make(c: LayerCollection) -> LayerCollectionController:
        notifier.collection = c
        return LayerCollectionController(
            c,
            confirm=confirmer,
            notifier=notifier,
            presenter=presenter,
            delete_target=delete_target,
        )

    return _make


@pytest.fixture()
def settings(tmp_path: Path) -> AppSettings:
    """Settings stored in a throwaway ini file."""
    qs = QSettings(str(tmp_path / "layerdesk.ini"), QSettings.Format.IniFormat)
    return AppSettings(qs)


@pytest.fixture()
def window(qtbot: QtBot, settings: AppSettings) -> LayerManagementWindow:
    """Create a LayerManagementWindow instance managed by qtbot."""
    w = LayerManagementWindow(settings=settings)
    qtbot.addWidget(w)
    return w
