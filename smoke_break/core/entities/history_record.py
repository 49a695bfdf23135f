"""Ledger entry written once per completed session."""

from __future__ import annotations

import datetime as dt
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class HistoryRecord:
    id: int  # time based, strictly increasing within a ledger
    timestamp: dt.datetime  # timezone aware
    item_label: str
    saved_amount: float
