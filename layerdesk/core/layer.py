"""Layer data model."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field

from layerdesk.config.constants import DEFAULT_LAYER_COLOR, DEFAULT_LAYER_NAME


@dataclass
class LayerEntity:
    """Lightweight record describing one layer of drawable content.

    A ``LayerEntity`` holds no content itself; it is the metadata that a
    :class:`~layerdesk.core.layer_collection.LayerCollection` keeps ordered
    and consistent.  ``is_default`` is fixed once assigned.
    """

    name: str
    color: str = DEFAULT_LAYER_COLOR
    visible: bool = True
    locked: bool = False
    active: bool = False
    is_default: bool = False
    layer_id: str = field(default_factory=lambda: uuid.uuid4().hex)

    def __setattr__(self, name: str, value: object) -> None:
        if name == "is_default" and "is_default" in self.__dict__:
            raise AttributeError("is_default cannot be reassigned")
        super().__setattr__(name, value)

    @classmethod
    def default(cls) -> LayerEntity:
        """Return a fresh, active default layer."""
        return cls(name=DEFAULT_LAYER_NAME, active=True, is_default=True)

    def clone(self, name: str) -> LayerEntity:
        """Return a copy with the same styling under *name*, inactive and non-default."""
        return LayerEntity(
            name=name,
            color=self.color,
            visible=self.visible,
            locked=self.locked,
        )
