"""Catalog item a session is smoked with."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Item:
    id: str
    name: str
    price: float  # value of a single unit, CNY
