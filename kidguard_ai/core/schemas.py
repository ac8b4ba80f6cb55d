"""
Exercise and verdict schemas.

Strict parsing of model output into structured exercises and answer
verdicts. Anything that does not match the expected shape is rejected
with a typed error instead of being coerced.
"""

import json
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from .errors import (
    InvalidDifficultyError,
    InvalidSubjectError,
    MalformedExerciseError,
    MalformedVerdictError,
)
from .guidelines import AgeBand

REQUIRED_HINT_COUNT = 3

_CODE_FENCE = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL | re.IGNORECASE)


class SubjectType(Enum):
    """Exercise subjects, one prompt template set each."""
    MATH = "math"
    READING = "reading"
    LOGIC = "logic"
    VOCABULARY = "vocabulary"

    @classmethod
    def parse(cls, value: Any) -> "SubjectType":
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        valid = [subject.value for subject in cls]
        raise InvalidSubjectError(f"subject must be one of: {valid}, got {value!r}")


class DifficultyLevel(Enum):
    """Difficulty chosen by the caller."""
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"

    @classmethod
    def parse(cls, value: Any) -> "DifficultyLevel":
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        valid = [level.value for level in cls]
        raise InvalidDifficultyError(f"difficulty must be one of: {valid}, got {value!r}")


@dataclass(frozen=True)
class GeneratedExercise:
    """One exercise produced by the model."""
    question: str
    correct_answer: str
    hints: Tuple[str, ...]
    topic: str
    age_range: AgeBand

    def to_dict(self) -> Dict[str, Any]:
        """Wire shape consumed by the persistence layer."""
        return {
            "question": self.question,
            "correctAnswer": self.correct_answer,
            "hints": list(self.hints),
            "topic": self.topic,
            "ageRange": self.age_range.value,
        }


@dataclass(frozen=True)
class AnswerValidationVerdict:
    """Correctness judgement for a child's answer."""
    is_correct: bool
    feedback: str
    leniency_applied: bool
    reasoning: Optional[str] = None
    fallback_used: bool = False

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "isCorrect": self.is_correct,
            "feedback": self.feedback,
            "leniencyApplied": self.leniency_applied,
        }
        if self.reasoning is not None:
            data["reasoning"] = self.reasoning
        return data


def extract_json(content: str) -> Any:
    """Decode a JSON document, tolerating a surrounding Markdown code fence.

    Raises:
        ValueError: If the content is empty or not valid JSON
    """
    if content is None or not content.strip():
        raise ValueError("empty model output")
    text = content.strip()
    match = _CODE_FENCE.match(text)
    if match:
        text = match.group(1)
    return json.loads(text)


def _require_text(data: Dict[str, Any], key: str, index: int, allow_number: bool = False) -> str:
    value = data.get(key)
    if isinstance(value, bool) or value is None:
        raise MalformedExerciseError(f"exercise {index}: '{key}' is required")
    if allow_number and isinstance(value, (int, float)):
        value = str(value)
    if not isinstance(value, str) or not value.strip():
        raise MalformedExerciseError(f"exercise {index}: '{key}' must be a non-empty string")
    return value.strip()


def parse_exercise(data: Any, age_band: AgeBand, default_topic: str, index: int = 0) -> GeneratedExercise:
    """Validate one decoded JSON object against the exercise schema."""
    if not isinstance(data, dict):
        raise MalformedExerciseError(f"exercise {index}: expected an object, got {type(data).__name__}")

    question = _require_text(data, "question", index)
    correct_answer = _require_text(data, "correctAnswer", index, allow_number=True)

    hints = data.get("hints")
    if not isinstance(hints, list) or len(hints) != REQUIRED_HINT_COUNT:
        raise MalformedExerciseError(
            f"exercise {index}: 'hints' must be a list of exactly {REQUIRED_HINT_COUNT} items"
        )
    for hint in hints:
        if not isinstance(hint, str) or not hint.strip():
            raise MalformedExerciseError(f"exercise {index}: every hint must be a non-empty string")

    topic = data.get("topic")
    if topic is None or (isinstance(topic, str) and not topic.strip()):
        topic = default_topic
    elif not isinstance(topic, str):
        raise MalformedExerciseError(f"exercise {index}: 'topic' must be a string")

    return GeneratedExercise(
        question=question,
        correct_answer=correct_answer,
        hints=tuple(hint.strip() for hint in hints),
        topic=topic.strip(),
        age_range=age_band,
    )


def parse_exercises(content: str, count: int, age_band: AgeBand, default_topic: str) -> List[GeneratedExercise]:
    """Parse model output into at most ``count`` exercises.

    An array root is truncated to ``count`` items; a single object is
    wrapped into a one-element list.

    Raises:
        MalformedExerciseError: On invalid JSON, an empty array, or any
            element breaking the schema
    """
    try:
        parsed = extract_json(content)
    except ValueError as e:
        raise MalformedExerciseError(f"model output is not valid JSON: {e}") from e

    if isinstance(parsed, list):
        items = parsed[:count]
    elif isinstance(parsed, dict):
        items = [parsed]
    else:
        raise MalformedExerciseError(f"expected a JSON object or array, got {type(parsed).__name__}")

    if not items:
        raise MalformedExerciseError("model returned no exercises")

    return [
        parse_exercise(item, age_band, default_topic, index)
        for index, item in enumerate(items)
    ]


def parse_verdict(content: str, default_feedback: str) -> AnswerValidationVerdict:
    """Parse model output into a verdict.

    Raises:
        MalformedVerdictError: On invalid JSON or a missing/non-boolean isCorrect
    """
    try:
        parsed = extract_json(content)
    except ValueError as e:
        raise MalformedVerdictError(f"validation output is not valid JSON: {e}") from e

    if not isinstance(parsed, dict):
        raise MalformedVerdictError("validation output must be a JSON object")
    if "isCorrect" not in parsed:
        raise MalformedVerdictError("validation output is missing 'isCorrect'")
    if not isinstance(parsed["isCorrect"], bool):
        raise MalformedVerdictError("'isCorrect' must be a boolean")

    feedback = parsed.get("feedback")
    if not isinstance(feedback, str) or not feedback.strip():
        feedback = default_feedback

    reasoning = parsed.get("reasoning")
    if not isinstance(reasoning, str) or not reasoning.strip():
        reasoning = None

    return AnswerValidationVerdict(
        is_correct=parsed["isCorrect"],
        feedback=feedback.strip(),
        leniency_applied=parsed.get("leniencyApplied") is True,
        reasoning=reasoning,
    )
