"""Exceptions raised by the layer core."""


class LayerError(Exception):
    """Base class for all layer management errors."""


class IndexOutOfRange(LayerError, IndexError):
    """A row index referenced a position outside the collection."""

    def __init__(self, index: int, size: int) -> None:
        super().__init__(f"layer index {index} out of range for collection of size {size}")
        self.index = index
        self.size = size


class InvariantViolation(LayerError):
    """The collection would lose its default layer or its single active layer."""


class OperationAborted(LayerError):
    """The user declined a confirmation; nothing was changed."""


class ReentrantOperation(LayerError):
    """A mutation was attempted while another one was still in progress."""
