"""JSON wire format of the persisted history and settings blobs."""

from __future__ import annotations

import json
from typing import Any, List

from smoke_break.core.entities.history_record import HistoryRecord
from smoke_break.core.entities.reminder_config import ReminderConfig
from smoke_break.core.errors import CorruptDataError, SettingsValidationError
from smoke_break.utils.clock import from_epoch_ms, to_epoch_ms

HISTORY_KEY = "smoke_history"
SETTINGS_KEY = "smoke_settings"


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def record_to_dict(record: HistoryRecord) -> dict[str, Any]:
    return {
        "id": record.id,
        "timestamp": to_epoch_ms(record.timestamp),
        "itemLabel": record.item_label,
        "savedAmount": record.saved_amount,
    }


def record_from_dict(data: Any) -> HistoryRecord:
    if not isinstance(data, dict):
        raise CorruptDataError(f"history entry must be an object, got {type(data).__name__}")
    # unknown keys (e.g. a display ``date``) are ignored
    if not _is_int(data.get("id")) or not _is_int(data.get("timestamp")):
        raise CorruptDataError("history entry needs integer 'id' and 'timestamp'")
    if not isinstance(data.get("itemLabel"), str):
        raise CorruptDataError("history entry needs a string 'itemLabel'")
    if not _is_number(data.get("savedAmount")):
        raise CorruptDataError("history entry needs a numeric 'savedAmount'")
    try:
        timestamp = from_epoch_ms(data["timestamp"])
    except (OverflowError, OSError, ValueError) as exc:
        raise CorruptDataError(f"timestamp out of range: {data['timestamp']!r}") from exc
    return HistoryRecord(
        id=data["id"],
        timestamp=timestamp,
        item_label=data["itemLabel"],
        saved_amount=float(data["savedAmount"]),
    )


def encode_history(records: List[HistoryRecord]) -> str:
    return json.dumps([record_to_dict(r) for r in records], ensure_ascii=False)


def decode_history(payload: str) -> List[HistoryRecord]:
    try:
        data = json.loads(payload)
    except (TypeError, ValueError) as exc:
        raise CorruptDataError(f"history blob is not valid JSON: {exc}") from exc
    if not isinstance(data, list):
        raise CorruptDataError("history blob must be a JSON array")
    return [record_from_dict(item) for item in data]


def encode_settings(config: ReminderConfig) -> str:
    return json.dumps(config.to_dict())


def decode_settings(payload: str) -> ReminderConfig:
    try:
        data = json.loads(payload)
    except (TypeError, ValueError) as exc:
        raise CorruptDataError(f"settings blob is not valid JSON: {exc}") from exc
    try:
        return ReminderConfig.from_dict(data)
    except SettingsValidationError as exc:
        raise CorruptDataError(str(exc)) from exc
