"""Result cache and rolling validation history.

Both are owned by one engine instance. Cache entries live until
``clear_cache()``; history is a FIFO ring used only for statistics.
"""

import hashlib
import json
from collections import Counter, deque
from datetime import date, datetime
from enum import Enum
from typing import Any

from farmqc.core.types import (
    HistoryEntry,
    ValidationContext,
    ValidationResult,
    ValidationStats,
)

DEFAULT_HISTORY_CAPACITY = 100
TOP_ERROR_CODES = 5


def _encode(value: Any) -> Any:
    """Type-tagged JSON form of a value.

    Every dict is wrapped and every non-JSON type carries a tag, so values
    that merely print alike (``date`` vs its ISO string, tuple vs list)
    never share a key.

    Raises:
        TypeError: For non-string dict keys and values with no encoding
    """
    if isinstance(value, Enum):
        return {"__enum__": f"{type(value).__qualname__}.{value.name}"}
    if value is None or isinstance(value, (str, bool, int, float)):
        return value
    if isinstance(value, dict):
        items = {}
        for key, item in value.items():
            if not isinstance(key, str):
                raise TypeError(f"Record keys must be strings, got {type(key).__name__}")
            items[key] = _encode(item)
        return {"__dict__": items}
    if isinstance(value, list):
        return [_encode(item) for item in value]
    if isinstance(value, tuple):
        return {"__tuple__": [_encode(item) for item in value]}
    if isinstance(value, (set, frozenset)):
        tag = "__frozenset__" if isinstance(value, frozenset) else "__set__"
        encoded = [_encode(item) for item in value]
        return {tag: sorted(encoded, key=lambda item: json.dumps(item, sort_keys=True))}
    if isinstance(value, datetime):
        return {"__datetime__": value.isoformat()}
    if isinstance(value, date):
        return {"__date__": value.isoformat()}
    raise TypeError(f"Cannot build a cache key for {type(value).__name__}")


def canonical_key(record: dict[str, Any], context: ValidationContext) -> str:
    """Order-independent cache key for a (record, context) pair.

    Keys are sorted at every nesting level, so two dicts with the same
    items in a different insertion order produce the same key.

    Raises:
        TypeError: If the record holds a value with no canonical encoding
    """
    payload = {
        "record": _encode(record),
        "context": {
            "entity_kind": context.entity_kind.value,
            "operation_kind": context.operation_kind.value,
            "previous_record": _encode(context.previous_record),
            "user_id": _encode(context.user_id),
            "farm_id": _encode(context.farm_id),
            "timestamp": _encode(context.timestamp),
        },
    }
    encoded = json.dumps(payload, sort_keys=True, separators=(",", ":"))
    return hashlib.sha256(encoded.encode("utf-8")).hexdigest()


class ValidationTracker:
    """Memoizes results and keeps a bounded log of validation calls.

    Example:
        >>> tracker = ValidationTracker(capacity=100)
        >>> tracker.store(key, result)
        >>> tracker.get(key) is result
        True
    """

    def __init__(self, capacity: int = DEFAULT_HISTORY_CAPACITY) -> None:
        self.capacity = capacity
        self._cache: dict[str, ValidationResult] = {}
        self._history: deque[HistoryEntry] = deque(maxlen=capacity)

    def get(self, key: str) -> ValidationResult | None:
        """Cached result for ``key``, if any."""
        return self._cache.get(key)

    def store(self, key: str, result: ValidationResult) -> None:
        """Cache ``result`` under ``key``."""
        self._cache[key] = result

    def record(self, context: ValidationContext, result: ValidationResult) -> None:
        """Append a call to the history, evicting the oldest past capacity."""
        self._history.append(
            HistoryEntry(timestamp=datetime.now(), context=context, result=result)
        )

    def clear_cache(self) -> None:
        """Drop every cached result. History is kept."""
        self._cache.clear()

    @property
    def cache_size(self) -> int:
        return len(self._cache)

    @property
    def history(self) -> list[HistoryEntry]:
        """Snapshot of the history, oldest first."""
        return list(self._history)

    def stats(self) -> ValidationStats:
        """Aggregate statistics over the current history."""
        total = len(self._history)
        if total == 0:
            return ValidationStats()

        results = [entry.result for entry in self._history]
        codes = Counter(f.code for r in results for f in r.errors)

        return ValidationStats(
            total=total,
            error_rate=sum(len(r.errors) for r in results) / total,
            average_processing_time=sum(r.processing_time_ms for r in results) / total,
            average_quality_score=sum(r.quality_score for r in results) / total,
            top_error_codes=codes.most_common(TOP_ERROR_CODES),
        )
