"""Static catalog of selectable items."""

from __future__ import annotations

from typing import Sequence

from smoke_break.core.entities.item import Item

DEFAULT_ITEMS: tuple[Item, ...] = (
    Item(id="marlboro", name="Marlboro", price=1.5),
    Item(id="chunghwa", name="Chunghwa", price=3.5),
    Item(id="esse", name="Esse", price=1.2),
    Item(id="black_devil", name="Black Devil", price=2.0),
)


class Catalog:
    def __init__(self, items: Sequence[Item] = DEFAULT_ITEMS) -> None:
        if not items:
            raise ValueError("catalog needs at least one item")
        self._items = tuple(items)

    def __len__(self) -> int:
        return len(self._items)

    @property
    def first(self) -> Item:
        return self._items[0]

    def neighbour(self, item: Item, offset: int) -> Item:
        """Item ``offset`` steps away from ``item``, wrapping around."""
        ids = [i.id for i in self._items]
        try:
            index = ids.index(item.id)
        except ValueError:
            index = 0
        return self._items[(index + offset) % len(self._items)]
