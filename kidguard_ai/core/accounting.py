"""
Per-call cost and latency accounting.

Turns the outcome of one logical gateway call into a MetricsRecord and
appends it to the ledger.
"""

import uuid
from datetime import datetime
from typing import Optional

from ..sdk.deepseek_client import ChatResponse
from ..storage.ledger import MetricsLedger
from ..storage.models import MetricsRecord, Operation
from .errors import KidGuardError
from .pricing import calculate_cost


def record_call(
    ledger: MetricsLedger,
    operation: Operation,
    model: str,
    response_time_ms: int,
    response: Optional[ChatResponse] = None,
    error: Optional[KidGuardError] = None,
) -> MetricsRecord:
    """Append one record describing a finished logical call.

    Token counts and cost come from ``response`` when one is given,
    otherwise they are zero. ``model`` is the configured model and prices
    the call; the record keeps the model the provider reports. The call is
    a success only when there is no ``error``.
    """
    if response is not None:
        usage = response.usage
        prompt_tokens, completion_tokens = usage.prompt_tokens, usage.completion_tokens
        cost = calculate_cost(model, usage).total_cost
        attempts = response.attempts
        reported_model = response.model or model
    else:
        prompt_tokens = completion_tokens = 0
        cost = 0.0
        attempts = 0
        reported_model = model

    error_type = None
    if error is not None:
        context = error.context()
        error_type = context["kind"]
        attempts = max(attempts, context["attempts"])

    entry = MetricsRecord(
        request_id=(response.request_id if response is not None and response.request_id else uuid.uuid4().hex),
        timestamp=datetime.now(),
        operation=operation,
        model=reported_model,
        prompt_tokens=prompt_tokens,
        completion_tokens=completion_tokens,
        total_tokens=prompt_tokens + completion_tokens,
        response_time_ms=response_time_ms,
        cost_usd=cost,
        success=error is None,
        error_type=error_type,
        retry_count=max(attempts - 1, 0),
    )
    ledger.record(entry)
    return entry
