"""Exporter — render the layer table to raster images, SVG and printers."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from PyQt6.QtCore import QRectF, QSize
from PyQt6.QtGui import QPainter
from PyQt6.QtWidgets import QWidget

if TYPE_CHECKING:
    from PyQt6.QtPrintSupport import QPrinter

RASTER_FORMATS: dict[str, str] = {".png": "PNG", ".jpg": "JPEG", ".jpeg": "JPEG"}


def export_raster(widget: QWidget, path: Path, quality: int = 90) -> None:
    """Export a snapshot of *widget* to a PNG or JPG file chosen by suffix."""
    fmt = RASTER_FORMATS.get(path.suffix.lower())
    if fmt is None:
        raise ValueError(f"Unsupported raster format: {path.suffix!r}")
    pixmap = widget.grab()
    if pixmap.isNull() or not pixmap.save(str(path), fmt, quality):
        raise OSError(f"Could not write {path}")


def export_vector(widget: QWidget, path: Path) -> None:
    """Export *widget* to an SVG file using QSvgGenerator."""
    from PyQt6.QtSvg import QSvgGenerator

    width, height = widget.width(), widget.height()
    generator = QSvgGenerator()
    generator.setFileName(str(path))
    generator.setSize(QSize(width, height))
    generator.setViewBox(QRectF(0, 0, width, height))
    generator.setTitle(widget.windowTitle())
    painter = QPainter(generator)
    widget.render(painter)
    painter.end()


def print_widget(widget: QWidget, printer: QPrinter) -> None:
    """Paint *widget* onto *printer*, scaled to fit the printable area."""
    painter = QPainter(printer)
    page = printer.pageLayout().paintRectPixels(printer.resolution())
    width, height = max(widget.width(), 1), max(widget.height(), 1)
    # Uniform scale so the table keeps its aspect ratio on the page
    scale = min(page.width() / width, page.height() / height)
    painter.scale(scale, scale)
    widget.render(painter)
    painter.end()
