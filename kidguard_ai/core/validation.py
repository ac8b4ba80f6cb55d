"""
Answer validation orchestrator.

Asks the model to judge a child's answer under the age band's leniency
policy. Never raises: any failure falls back to a deterministic string
comparison so the child's session always gets a verdict.
"""

import logging
import time
from typing import Any, Optional

from ..prompts import DEFAULT_LANGUAGE, build_validation_prompt
from ..sdk.deepseek_client import ChatResponse, DeepSeekGateway
from ..storage.ledger import MetricsLedger
from ..storage.models import Operation
from .accounting import record_call
from .errors import KidGuardError
from .schemas import AnswerValidationVerdict, parse_verdict

logger = logging.getLogger(__name__)

FALLBACK_CORRECT_FEEDBACK = "Bonne réponse ! / Correct!"
FALLBACK_INCORRECT_FEEDBACK = "Réponse incorrecte. / Not quite."
DEFAULT_FEEDBACK = "Réponse évaluée. / Answer checked."


def normalize_answer(answer: Any) -> str:
    if answer is None:
        return ""
    return str(answer).strip().lower()


def fallback_verdict(correct_answer: Any, child_answer: Any) -> AnswerValidationVerdict:
    """Deterministic verdict: trimmed, case-insensitive equality."""
    is_correct = normalize_answer(child_answer) == normalize_answer(correct_answer)
    return AnswerValidationVerdict(
        is_correct=is_correct,
        feedback=FALLBACK_CORRECT_FEEDBACK if is_correct else FALLBACK_INCORRECT_FEEDBACK,
        leniency_applied=False,
        fallback_used=True,
    )


class AnswerValidator:
    """Judges a child's free-text answer."""

    def __init__(
        self,
        gateway: DeepSeekGateway,
        ledger: MetricsLedger,
        temperature: float = 0.2,
        max_tokens: int = 500,
        language: str = DEFAULT_LANGUAGE,
    ):
        self.gateway = gateway
        self.ledger = ledger
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.language = language

    def validate(
        self,
        question: str,
        correct_answer: str,
        child_answer: str,
        age: int,
        subject: Any,
    ) -> AnswerValidationVerdict:
        """Validate an answer. Always returns a verdict."""
        start = time.monotonic()
        response: Optional[ChatResponse] = None

        try:
            prompt = build_validation_prompt(
                question, correct_answer, child_answer, age, subject, language=self.language,
            )
            response = self.gateway.complete(
                [{"role": "user", "content": prompt}],
                temperature=self.temperature,
                max_tokens=self.max_tokens,
            )
            verdict = parse_verdict(response.content, default_feedback=DEFAULT_FEEDBACK)
        except KidGuardError as error:
            error.operation = "validate"
            logger.warning(
                "Answer validation fell back to exact match (%s): %s",
                error.kind.value, error.message,
                extra=error.context(),
            )
            return self._fallback(correct_answer, child_answer, start, response, error)
        except Exception as exc:
            logger.exception("Unexpected error during answer validation")
            error = KidGuardError(str(exc), operation="validate")
            return self._fallback(correct_answer, child_answer, start, response, error)

        elapsed_ms = _elapsed_ms(start)
        record_call(self.ledger, Operation.VALIDATE, self.gateway.model, elapsed_ms, response=response)
        logger.info(
            "Answer validated in %dms (correct=%s, leniency=%s)",
            elapsed_ms, verdict.is_correct, verdict.leniency_applied,
        )
        return verdict

    def _fallback(
        self,
        correct_answer: Any,
        child_answer: Any,
        start: float,
        response: Optional[ChatResponse],
        error: KidGuardError,
    ) -> AnswerValidationVerdict:
        # Fallback records carry no tokens or cost
        if response is not None:
            error.attempts = max(error.attempts, response.attempts)
        try:
            record_call(
                self.ledger, Operation.VALIDATE, self.gateway.model, _elapsed_ms(start),
                error=error,
            )
        except Exception:
            logger.exception("Could not record validation metrics")
        return fallback_verdict(correct_answer, child_answer)


def _elapsed_ms(start: float) -> int:
    return int((time.monotonic() - start) * 1000)
