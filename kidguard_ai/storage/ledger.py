"""
Append-only, process-local metrics ledger.

Holds one MetricsRecord per logical call and aggregates them on demand.
Safe for concurrent appends from several threads.
"""

import threading
from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .models import MetricsRecord, Operation


@dataclass(frozen=True)
class LedgerStats:
    """Aggregate statistics over ledger records."""
    total_requests: int
    success_count: int
    failure_count: int
    success_rate: float  # Percentage, 0-100
    total_cost_usd: float
    total_tokens: int
    avg_response_time_ms: float
    error_type_histogram: Dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalRequests": self.total_requests,
            "successCount": self.success_count,
            "failureCount": self.failure_count,
            "successRate": self.success_rate,
            "totalCostUsd": self.total_cost_usd,
            "totalTokens": self.total_tokens,
            "avgResponseTimeMs": self.avg_response_time_ms,
            "errorTypeHistogram": dict(self.error_type_histogram),
        }


class MetricsLedger:
    """In-memory ledger of AI call metrics.

    Records are only ever appended; ``clear()`` is the single way to
    remove them.
    """

    def __init__(self):
        self._records: List[MetricsRecord] = []
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def record(self, entry: MetricsRecord) -> None:
        """Append a record.

        Raises:
            TypeError: If entry is not a MetricsRecord
        """
        if not isinstance(entry, MetricsRecord):
            raise TypeError("entry must be a MetricsRecord")
        with self._lock:
            self._records.append(entry)

    def all(self, operation: Optional[Operation] = None) -> List[MetricsRecord]:
        """Snapshot of records in insertion order, optionally filtered."""
        with self._lock:
            records = list(self._records)
        if operation is not None:
            records = [r for r in records if r.operation == operation]
        return records

    def stats(self, operation: Optional[Operation] = None) -> LedgerStats:
        """Aggregate statistics, optionally for one operation only."""
        records = self.all(operation)
        total = len(records)
        successes = sum(1 for r in records if r.success)
        histogram = Counter(r.error_type for r in records if r.error_type)

        # Sum cost in micro-dollars to keep float noise out of the total
        total_cost = sum(round(r.cost_usd * 1_000_000) for r in records) / 1_000_000

        return LedgerStats(
            total_requests=total,
            success_count=successes,
            failure_count=total - successes,
            success_rate=(successes / total * 100) if total else 0.0,
            total_cost_usd=total_cost,
            total_tokens=sum(r.total_tokens for r in records),
            avg_response_time_ms=(sum(r.response_time_ms for r in records) / total) if total else 0.0,
            error_type_histogram=dict(histogram),
        )

    def clear(self) -> None:
        with self._lock:
            self._records.clear()
