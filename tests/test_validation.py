"""
Unit tests for the answer validation orchestrator.

Tests model verdicts and the deterministic fallback.
"""

import json
import logging
from unittest.mock import Mock

from kidguard_ai.core.errors import ClientError, Timeout
from kidguard_ai.core.pricing import TokenUsage
from kidguard_ai.core.validation import (
    FALLBACK_CORRECT_FEEDBACK,
    FALLBACK_INCORRECT_FEEDBACK,
    AnswerValidator,
    fallback_verdict,
    normalize_answer,
)
from kidguard_ai.sdk import ChatResponse
from kidguard_ai.storage.ledger import MetricsLedger
from kidguard_ai.storage.models import Operation


def chat_response(payload):
    content = payload if isinstance(payload, str) else json.dumps(payload)
    return ChatResponse(
        content=content,
        model="deepseek-chat",
        usage=TokenUsage(prompt_tokens=400, completion_tokens=60),
        request_id="chatcmpl-val",
        attempts=1,
        elapsed_ms=700,
    )


class TestFallback:
    """Test the deterministic fallback verdict."""

    def test_normalize(self):
        assert normalize_answer("  Huit ") == "huit"
        assert normalize_answer(None) == ""
        assert normalize_answer(8) == "8"

    def test_equal_answers(self):
        verdict = fallback_verdict("8", "8")
        assert verdict.is_correct is True
        assert verdict.feedback == FALLBACK_CORRECT_FEEDBACK
        assert verdict.leniency_applied is False
        assert verdict.fallback_used is True

    def test_different_answers(self):
        verdict = fallback_verdict("8", "9")
        assert verdict.is_correct is False
        assert verdict.feedback == FALLBACK_INCORRECT_FEEDBACK

    def test_case_and_whitespace_ignored(self):
        assert fallback_verdict("Paris", " paris ").is_correct is True


class TestAnswerValidator:
    """Test AnswerValidator behavior."""

    def setup_method(self):
        """Set up test environment."""
        self.gateway = Mock()
        self.gateway.model = "deepseek-chat"
        self.ledger = MetricsLedger()
        self.validator = AnswerValidator(self.gateway, self.ledger)

    def test_model_verdict(self):
        """Test a lenient model verdict is returned as is."""
        self.gateway.complete.return_value = chat_response({
            "isCorrect": True,
            "feedback": "Bravo, huit c'est bien 8 !",
            "leniencyApplied": True,
            "reasoning": "Spelled-out number",
        })

        verdict = self.validator.validate("Combien font 3 + 5 ?", "8", "huit", 7, "math")

        assert verdict.is_correct is True
        assert verdict.leniency_applied is True
        assert verdict.fallback_used is False

        args, kwargs = self.gateway.complete.call_args
        assert args[0][0]["role"] == "user"
        assert "Child's answer: huit" in args[0][0]["content"]
        assert kwargs["temperature"] == 0.2
        assert kwargs["max_tokens"] == 500

        record = self.ledger.all(Operation.VALIDATE)[0]
        assert record.success is True
        assert record.total_tokens == 460

    def test_fallback_on_gateway_failure_correct(self):
        """Test a persistent timeout falls back to exact match (correct)."""
        self.gateway.complete.side_effect = Timeout("timed out", attempts=3)

        verdict = self.validator.validate("Combien font 3 + 5 ?", "8", "8", 8, "math")

        assert verdict.is_correct is True
        assert verdict.fallback_used is True
        assert verdict.leniency_applied is False

        record = self.ledger.all()[0]
        assert record.success is False
        assert record.error_type == "timeout"
        assert record.operation == Operation.VALIDATE

    def test_fallback_on_gateway_failure_incorrect(self):
        self.gateway.complete.side_effect = Timeout("timed out", attempts=3)

        verdict = self.validator.validate("Combien font 3 + 5 ?", "8", "9", 8, "math")

        assert verdict.is_correct is False
        assert verdict.feedback == FALLBACK_INCORRECT_FEEDBACK

    def test_fallback_on_client_error(self):
        self.gateway.complete.side_effect = ClientError("bad request", status_code=400)

        verdict = self.validator.validate("Q ?", "chat", "Chat", 10, "vocabulary")

        assert verdict.is_correct is True
        assert verdict.fallback_used is True

    def test_fallback_on_malformed_verdict(self):
        """Test unparseable output falls back with a zero-cost record."""
        self.gateway.complete.return_value = chat_response({"feedback": "Super !"})

        verdict = self.validator.validate("Q ?", "8", "8", 8, "math")

        assert verdict.fallback_used is True
        record = self.ledger.all()[0]
        assert record.error_type == "malformed_response"
        assert record.success is False
        assert record.total_tokens == 0
        assert record.cost_usd == 0.0

    def test_fallback_on_invalid_json_keeps_attempts(self):
        """Test retries spent before an unparseable answer are still counted."""
        response = chat_response("not json")
        self.gateway.complete.return_value = ChatResponse(
            content=response.content,
            model=response.model,
            usage=response.usage,
            request_id=response.request_id,
            attempts=3,
            elapsed_ms=response.elapsed_ms,
        )

        verdict = self.validator.validate("Q ?", "8", "9", 8, "math")

        assert verdict.is_correct is False
        assert verdict.fallback_used is True
        record = self.ledger.all()[0]
        assert record.total_tokens == 0
        assert record.cost_usd == 0.0
        assert record.retry_count == 2
        assert self.ledger.stats().total_cost_usd == 0.0

    def test_fallback_on_out_of_range_age(self):
        """Test validation never raises, even on bad input."""
        verdict = self.validator.validate("Q ?", "8", "8", 20, "math")

        assert verdict.is_correct is True
        assert verdict.fallback_used is True
        self.gateway.complete.assert_not_called()

    def test_fallback_on_unexpected_error(self):
        self.gateway.complete.side_effect = RuntimeError("boom")

        verdict = self.validator.validate("Q ?", "8", "7", 8, "math")

        assert verdict.is_correct is False
        assert verdict.fallback_used is True
        assert self.ledger.stats().failure_count == 1

    def test_missing_feedback_gets_default(self):
        self.gateway.complete.return_value = chat_response({"isCorrect": False})

        verdict = self.validator.validate("Q ?", "8", "7", 8, "math")

        assert verdict.is_correct is False
        assert verdict.feedback
        assert verdict.fallback_used is False

    def test_fallback_log_carries_context(self, caplog):
        self.gateway.complete.side_effect = Timeout("timed out", attempts=3)

        with caplog.at_level(logging.WARNING, logger="kidguard_ai.core.validation"):
            self.validator.validate("Q ?", "8", "8", 8, "math")

        record = caplog.records[-1]
        assert record.kind == "timeout"
        assert record.operation == "validate"
        assert record.attempts == 3
