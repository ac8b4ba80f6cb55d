"""
Data models for the metrics ledger.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional


class Operation(Enum):
    """Logical operation a metrics record belongs to."""
    GENERATE = "generate"
    VALIDATE = "validate"


@dataclass(frozen=True)
class MetricsRecord:
    """Immutable record of one logical AI call.

    Exactly one record per operation, whatever the number of retries.
    Once appended to the ledger, these records are never modified.
    """
    request_id: str
    timestamp: datetime
    operation: Operation
    model: str
    prompt_tokens: int
    completion_tokens: int
    total_tokens: int
    response_time_ms: int
    cost_usd: float
    success: bool
    error_type: Optional[str] = None
    retry_count: int = 0
