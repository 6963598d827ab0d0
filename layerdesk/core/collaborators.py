"""Interfaces the controller talks to; the UI supplies the implementations."""

from __future__ import annotations

from typing import Protocol


class ContextualSettingsNotifier(Protocol):
    """Receives one call after every completed controller operation.

    Implementations may read the collection but must not mutate it.
    """

    def on_collection_changed(self) -> None: ...


class Confirmation(Protocol):
    """Blocking yes/no question; ``False`` means the user declined."""

    def __call__(self, message: str, title: str) -> bool: ...


class Presenter(Protocol):
    """Table presenting the collection; addressed by row and column only."""

    def focus(self, row: int, column: int) -> None: ...

    def select_row(self, row: int) -> None: ...


class DeleteActionTarget(Protocol):
    """Whatever triggers deletes (toolbar button, menu item)."""

    def set_delete_enabled(self, enabled: bool) -> None: ...
