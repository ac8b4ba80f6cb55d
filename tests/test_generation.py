"""
Unit tests for the exercise generation orchestrator.

Uses a mock gateway; no network access.
"""

import json
from unittest.mock import Mock

import pytest

from kidguard_ai.core.errors import (
    ErrorKind,
    ExerciseGenerationFailed,
    InvalidCountError,
    InvalidSubjectError,
    MalformedExerciseError,
    OutOfRangeError,
    RateLimited,
)
from kidguard_ai.core.generation import ExerciseGenerator, review_exercise
from kidguard_ai.core.guidelines import AgeBand
from kidguard_ai.core.pricing import TokenUsage, calculate_cost
from kidguard_ai.core.schemas import GeneratedExercise
from kidguard_ai.sdk import ChatResponse
from kidguard_ai.storage.ledger import MetricsLedger
from kidguard_ai.storage.models import Operation

EXERCISE = {
    "question": "Tom a 4 billes et en gagne 3. Combien en a-t-il ?",
    "correctAnswer": "7",
    "hints": ["Compte ses billes", "Ajoute 3 à 4", "4 + 3 = ?"],
    "topic": "addition",
}


def chat_response(content, attempts=1):
    return ChatResponse(
        content=content,
        model="deepseek-chat",
        usage=TokenUsage(prompt_tokens=800, completion_tokens=300),
        request_id="chatcmpl-gen",
        attempts=attempts,
        elapsed_ms=900,
    )


class TestExerciseGenerator:
    """Test ExerciseGenerator behavior."""

    def setup_method(self):
        """Set up test environment."""
        self.gateway = Mock()
        self.gateway.model = "deepseek-chat"
        self.ledger = MetricsLedger()
        self.generator = ExerciseGenerator(self.gateway, self.ledger)

    def test_generate_two_exercises(self):
        """Test a well-formed array yields exercises and one success record."""
        self.gateway.complete.return_value = chat_response(json.dumps([EXERCISE, EXERCISE]))

        exercises = self.generator.generate("math", 8, "easy", 2)

        assert len(exercises) == 2
        assert all(isinstance(e, GeneratedExercise) for e in exercises)
        assert all(e.age_range == AgeBand.YOUNG for e in exercises)
        assert all(len(e.hints) == 3 for e in exercises)

        records = self.ledger.all()
        assert len(records) == 1
        assert records[0].success is True
        assert records[0].operation == Operation.GENERATE
        assert records[0].total_tokens == 1100

    def test_prompt_sent_to_gateway(self):
        self.gateway.complete.return_value = chat_response(json.dumps(EXERCISE))

        self.generator.generate("math", 8, "easy")

        args, kwargs = self.gateway.complete.call_args
        messages = args[0]
        assert [m["role"] for m in messages] == ["system", "user"]
        assert "8-year-old" in messages[1]["content"]
        assert kwargs["temperature"] == 0.8
        assert kwargs["max_tokens"] == 2000

    def test_cost_matches_pricing(self):
        """Verify the ledger total equals the priced token usage."""
        self.gateway.complete.return_value = chat_response(json.dumps(EXERCISE))

        self.generator.generate("math", 8, "easy")

        expected = calculate_cost("deepseek-chat", TokenUsage(prompt_tokens=800, completion_tokens=300))
        assert self.ledger.stats().total_cost_usd == expected.total_cost

    def test_extra_exercises_are_truncated(self):
        self.gateway.complete.return_value = chat_response(json.dumps([EXERCISE] * 5))
        assert len(self.generator.generate("math", 8, "easy", 3)) == 3

    @pytest.mark.parametrize("kwargs,error", [
        ({"count": 0}, InvalidCountError),
        ({"count": 11}, InvalidCountError),
        ({"age": 5}, OutOfRangeError),
        ({"age": 15}, OutOfRangeError),
        ({"subject": "history"}, InvalidSubjectError),
    ])
    def test_invalid_input_makes_no_call(self, kwargs, error):
        """Verify input errors are raised before any network call."""
        call = {"subject": "math", "age": 8, "difficulty": "easy", "count": 1}
        call.update(kwargs)

        with pytest.raises(error):
            self.generator.generate(**call)

        self.gateway.complete.assert_not_called()
        assert len(self.ledger) == 0

    def test_malformed_output(self):
        """Test schema errors are surfaced and the spent tokens recorded."""
        self.gateway.complete.return_value = chat_response("Voici ton exercice !")

        with pytest.raises(MalformedExerciseError) as exc_info:
            self.generator.generate("math", 8, "easy")

        assert exc_info.value.kind == ErrorKind.MALFORMED_RESPONSE
        record = self.ledger.all()[0]
        assert record.success is False
        assert record.error_type == "malformed_response"
        assert record.total_tokens == 1100
        assert record.cost_usd > 0

    def test_wrong_hint_count_is_malformed(self):
        bad = dict(EXERCISE, hints=["only one"])
        self.gateway.complete.return_value = chat_response(json.dumps(bad))

        with pytest.raises(MalformedExerciseError):
            self.generator.generate("math", 8, "easy")

    def test_gateway_failure(self):
        """Test a terminal gateway failure becomes a generation failure."""
        self.gateway.complete.side_effect = RateLimited("rate limit exceeded", status_code=429, attempts=3)

        with pytest.raises(ExerciseGenerationFailed) as exc_info:
            self.generator.generate("math", 8, "easy")

        error = exc_info.value
        assert not isinstance(error, MalformedExerciseError)
        assert error.kind == ErrorKind.RATE_LIMITED
        assert error.status_code == 429
        assert error.attempts == 3
        assert isinstance(error.__cause__, RateLimited)

        record = self.ledger.all()[0]
        assert record.success is False
        assert record.error_type == "rate_limited"
        assert record.cost_usd == 0.0
        assert record.retry_count == 2


class TestReviewExercise:
    """Test soft quality checks."""

    def test_clean_exercise(self):
        exercise = GeneratedExercise(
            question=EXERCISE["question"],
            correct_answer="7",
            hints=tuple(EXERCISE["hints"]),
            topic="addition",
            age_range=AgeBand.YOUNG,
        )
        assert review_exercise(exercise) == []

    def test_flags_issues(self):
        exercise = GeneratedExercise(
            question="Chat ?",
            correct_answer="un chat noir",
            hints=("C'est un chat noir", "Miaou", "Miaou"),
            topic="animals",
            age_range=AgeBand.YOUNG,
        )
        issues = review_exercise(exercise)
        assert "question is too short" in issues
        assert "hints are duplicated" in issues
        assert "a hint gives the answer away" in issues
        assert "answer is longer than the question" in issues
