from __future__ import annotations

import json
import os
from dataclasses import fields, is_dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any


class JsonlEventLogger:
    """Appends protection events to a JSON-lines journal, one event per line."""

    def __init__(self, path: str) -> None:
        self._path = path

    def handle(self, event: object) -> None:
        record = {
            "event_type": type(event).__name__,
            "event": serialize(event),
        }
        directory = os.path.dirname(self._path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(self._path, "a", encoding="utf-8") as journal:
            journal.write(json.dumps(record))
            journal.write("\n")


def serialize(value: Any) -> Any:
    if is_dataclass(value) and not isinstance(value, type):
        # Decisions are a union; keep the variant visible in the journal.
        return {
            "kind": type(value).__name__,
            **{field.name: serialize(getattr(value, field.name)) for field in fields(value)},
        }
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return value.isoformat(timespec="microseconds")
    return value
