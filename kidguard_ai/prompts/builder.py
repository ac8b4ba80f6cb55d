"""
Prompt builder.

Pure functions turning (subject, age, difficulty, count) into generation
prompts and (question, answers, age, subject) into validation prompts.
Identical inputs always give identical text.
"""

import json
from dataclasses import dataclass
from typing import Any, Dict

from ..core.errors import InvalidCountError
from ..core.guidelines import band_for, leniency_policy, lookup
from ..core.schemas import REQUIRED_HINT_COUNT, DifficultyLevel, SubjectType
from .logic import LOGIC_TEMPLATE
from .math import MATH_TEMPLATE
from .reading import READING_TEMPLATE
from .templates import GUIDELINE_FIELDS, SubjectTemplate
from .vocabulary import VOCABULARY_TEMPLATE

MIN_COUNT = 1
MAX_COUNT = 10
DEFAULT_LANGUAGE = "French"

PROMPT_TEMPLATES: Dict[SubjectType, SubjectTemplate] = {
    SubjectType.MATH: MATH_TEMPLATE,
    SubjectType.READING: READING_TEMPLATE,
    SubjectType.LOGIC: LOGIC_TEMPLATE,
    SubjectType.VOCABULARY: VOCABULARY_TEMPLATE,
}


@dataclass(frozen=True)
class GenerationPrompt:
    """System and user prompts for one generation call."""
    system_prompt: str
    user_prompt: str

    def as_messages(self):
        return [
            {"role": "system", "content": self.system_prompt},
            {"role": "user", "content": self.user_prompt},
        ]


def get_template(subject: Any) -> SubjectTemplate:
    """Get the template set for a subject.

    Raises:
        InvalidSubjectError: If subject is unknown
    """
    return PROMPT_TEMPLATES[SubjectType.parse(subject)]


def validate_count(count: Any) -> int:
    """Check a requested exercise count.

    Raises:
        InvalidCountError: If count is not an integer in [1, 10]
    """
    if isinstance(count, bool) or not isinstance(count, int):
        raise InvalidCountError(f"count must be an integer, got {count!r}")
    if count < MIN_COUNT or count > MAX_COUNT:
        raise InvalidCountError(f"count must be between {MIN_COUNT} and {MAX_COUNT}, got {count}")
    return count


def _exercise_shape(topic: str) -> Dict[str, Any]:
    return {
        "question": "...",
        "correctAnswer": "...",
        "hints": ["hint 1", "hint 2", "hint 3"],
        "topic": topic,
    }


def _output_block(count: int) -> str:
    if count == 1:
        shape = json.dumps(_exercise_shape("..."), indent=2, ensure_ascii=False)
        return f"Reply ONLY with one valid JSON object in exactly this format:\n{shape}"
    shape = json.dumps([_exercise_shape("..."), _exercise_shape("...")], indent=2, ensure_ascii=False)
    return (
        f"Reply ONLY with a valid JSON array of exactly {count} different, varied exercises "
        f"in exactly this format:\n{shape}"
    )


def build_generation_prompt(
    subject: Any,
    age: int,
    difficulty: Any,
    count: int = 1,
    language: str = DEFAULT_LANGUAGE,
) -> GenerationPrompt:
    """Build the system and user prompts for exercise generation.

    Args:
        subject: SubjectType or its string value
        age: Child age in [6, 14]
        difficulty: DifficultyLevel or its string value
        count: Number of exercises wanted, in [1, 10]
        language: Language every exercise must be written in

    Returns:
        GenerationPrompt

    Raises:
        InvalidSubjectError, InvalidDifficultyError, InvalidCountError,
        OutOfRangeError: On input outside the contract
    """
    template = get_template(subject)
    level = DifficultyLevel.parse(difficulty)
    validate_count(count)
    band = band_for(age)
    guidelines = lookup(band)
    example = template.example_for(band)

    wanted = f"ONE unique {template.noun}" if count == 1 else f"{count} unique {template.noun}s"
    guideline_lines = "\n".join(
        f"- {GUIDELINE_FIELDS[field]}: {getattr(guidelines, field)}"
        for field in template.guideline_fields
    )
    guideline_lines += f"\n- Typical activities: {', '.join(guidelines.examples)}"
    example_json = json.dumps(
        {
            "question": example.question,
            "correctAnswer": example.correct_answer,
            "hints": list(example.hints),
            "topic": example.topic,
        },
        indent=2,
        ensure_ascii=False,
    )

    sections = [
        f"Generate {wanted} for a {age}-year-old child with these parameters:",
        f"AGE RANGE: {band.label}\nDIFFICULTY: {template.difficulty_blocks[level]}",
        template.age_blocks[band],
        f"COGNITIVE GUIDELINES:\n{guideline_lines}",
    ]
    if template.structure_notes:
        sections.append(template.structure_notes)
    sections.append(
        "IMPORTANT:\n"
        f"- Write every field in {language}\n"
        "- Make the exercise FUN with a story or playful context\n"
        "- The question must be clear and precise\n"
        f"- {template.answer_rule}\n"
        f"- Give exactly {REQUIRED_HINT_COUNT} progressive hints, from vague to precise\n"
        "- Never put the answer itself in a hint\n"
        "- Set \"topic\" to the specific skill practised"
    )
    sections.append(f"STYLE EXAMPLE (do not copy it):\n{example_json}")
    sections.append(_output_block(count))

    system_prompt = f"{template.system_prompt}\n\nAlways write in {language}."
    return GenerationPrompt(system_prompt=system_prompt, user_prompt="\n\n".join(sections))


def build_validation_prompt(
    question: str,
    correct_answer: str,
    child_answer: str,
    age: int,
    subject: Any,
    language: str = DEFAULT_LANGUAGE,
) -> str:
    """Build the prompt asking the model to judge a child's answer.

    The age band's leniency policy is embedded verbatim.

    Raises:
        InvalidSubjectError, OutOfRangeError: On input outside the contract
    """
    template = get_template(subject)
    band = band_for(age)

    verdict_shape = json.dumps(
        {
            "isCorrect": True,
            "feedback": f"Message for the child, in {language}",
            "leniencyApplied": False,
            "reasoning": "One sentence explaining the decision",
        },
        indent=2,
        ensure_ascii=False,
    )

    return "\n\n".join([
        template.validation_intro,
        f"EXERCISE:\n{question}",
        f"Expected answer: {correct_answer}\n"
        f"Child's answer: {child_answer}\n"
        f"Child's age: {age} ({band.label})",
        f"TOLERANCE LEVEL FOR THIS AGE:\n{leniency_policy(band)}",
        f"VALIDATION INSTRUCTIONS:\n{template.validation_rules}",
        f"FEEDBACK (in {language}, encouraging and positive):\n{template.feedback_rules}",
        f"Reply ONLY with a valid JSON object:\n{verdict_shape}",
    ])
