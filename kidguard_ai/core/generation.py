"""
Exercise generation orchestrator.

Builds prompts, calls the gateway, validates the model output against the
exercise schema and records one metrics entry per call.
"""

import logging
import time
from typing import Any, List

from ..prompts import DEFAULT_LANGUAGE, build_generation_prompt
from ..sdk.deepseek_client import DeepSeekGateway
from ..storage.ledger import MetricsLedger
from ..storage.models import Operation
from .accounting import record_call
from .errors import ExerciseGenerationFailed, GatewayError, MalformedExerciseError
from .guidelines import band_for
from .schemas import DifficultyLevel, GeneratedExercise, SubjectType, parse_exercises

logger = logging.getLogger(__name__)

MIN_QUESTION_LENGTH = 10


def review_exercise(exercise: GeneratedExercise) -> List[str]:
    """Soft quality issues in an exercise that passed the schema.

    Issues are reported, never enforced.
    """
    issues = []
    if len(exercise.question) < MIN_QUESTION_LENGTH:
        issues.append("question is too short")
    if len(set(h.lower() for h in exercise.hints)) < len(exercise.hints):
        issues.append("hints are duplicated")
    answer = exercise.correct_answer.lower()
    if len(answer) > 2 and any(answer in hint.lower() for hint in exercise.hints):
        issues.append("a hint gives the answer away")
    if len(exercise.correct_answer) > len(exercise.question):
        issues.append("answer is longer than the question")
    return issues


class ExerciseGenerator:
    """Generates structured exercises for a child."""

    def __init__(
        self,
        gateway: DeepSeekGateway,
        ledger: MetricsLedger,
        temperature: float = 0.8,
        max_tokens: int = 2000,
        response_time_target_ms: int = 2000,
        language: str = DEFAULT_LANGUAGE,
    ):
        self.gateway = gateway
        self.ledger = ledger
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.response_time_target_ms = response_time_target_ms
        self.language = language

    def generate(self, subject: Any, age: int, difficulty: Any, count: int = 1) -> List[GeneratedExercise]:
        """Generate up to ``count`` exercises.

        Args:
            subject: SubjectType or its string value
            age: Child age in [6, 14]
            difficulty: DifficultyLevel or its string value
            count: Number of exercises wanted, in [1, 10]

        Returns:
            Between 1 and ``count`` well-formed exercises

        Raises:
            InvalidInputError: On caller input outside the contract, before
                any network call
            MalformedExerciseError: If the model output breaks the schema
            ExerciseGenerationFailed: If the gateway call failed for good
        """
        subject_type = SubjectType.parse(subject)
        level = DifficultyLevel.parse(difficulty)
        band = band_for(age)
        prompt = build_generation_prompt(subject_type, age, level, count, language=self.language)

        logger.debug(
            "Generating %d %s exercise(s) for age %d (%s)",
            count, subject_type.value, age, level.value,
        )
        start = time.monotonic()

        try:
            response = self.gateway.complete(
                prompt.as_messages(),
                temperature=self.temperature,
                max_tokens=self.max_tokens,
            )
        except GatewayError as error:
            error.operation = "generate"
            record_call(self.ledger, Operation.GENERATE, self.gateway.model, _elapsed_ms(start), error=error)
            raise ExerciseGenerationFailed(
                f"could not generate {subject_type.value} exercises: {error.message}",
                cause=error,
            ) from error

        elapsed_ms = _elapsed_ms(start)
        try:
            exercises = parse_exercises(response.content, count, band, default_topic=subject_type.value)
        except MalformedExerciseError as error:
            error.elapsed_ms = elapsed_ms
            error.attempts = response.attempts
            logger.error(
                "Rejected model output for %s: %s", subject_type.value, error.message,
                extra=error.context(),
            )
            record_call(
                self.ledger, Operation.GENERATE, self.gateway.model, elapsed_ms,
                response=response, error=error,
            )
            raise

        record_call(self.ledger, Operation.GENERATE, self.gateway.model, elapsed_ms, response=response)

        for index, exercise in enumerate(exercises):
            for issue in review_exercise(exercise):
                logger.warning("Exercise %d (%s): %s", index, subject_type.value, issue)

        if len(exercises) < count:
            logger.warning("Requested %d exercises, model returned %d", count, len(exercises))
        if elapsed_ms > self.response_time_target_ms:
            logger.warning(
                "Generation took %dms, above the %dms target",
                elapsed_ms, self.response_time_target_ms,
            )
        logger.info("Generated %d %s exercise(s) in %dms", len(exercises), subject_type.value, elapsed_ms)
        return exercises


def _elapsed_ms(start: float) -> int:
    return int((time.monotonic() - start) * 1000)
