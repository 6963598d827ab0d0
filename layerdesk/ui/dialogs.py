"""Blocking dialogs used by the layer management window."""

from __future__ import annotations

from collections.abc import Callable

from PyQt6.QtWidgets import QMessageBox, QWidget


def make_confirmation(parent: QWidget | None) -> Callable[[str, str], bool]:
    """Return a ``confirm(message, title)`` callable backed by a question box."""

    def _confirm(message: str, title: str) -> bool:
        result = QMessageBox.question(
            parent,
            title,
            message,
            QMessageBox.StandardButton.Yes | QMessageBox.StandardButton.Cancel,
            QMessageBox.StandardButton.Cancel,
        )
        return result in (QMessageBox.StandardButton.Yes, QMessageBox.StandardButton.Ok)

    return _confirm
