"""
Prompt template structure shared by every subject.

Each subject module defines one SubjectTemplate with its own system
prompt, difficulty and age-band instruction blocks, validation rules and
example exercises. Subjects never share instruction text.
"""

from dataclasses import dataclass
from typing import Dict, Tuple

from ..core.guidelines import AgeBand
from ..core.schemas import DifficultyLevel, SubjectType

# Guideline fields a template may pull into its user prompt
GUIDELINE_FIELDS = {
    "cognitive_level": "Cognitive level",
    "attention_span": "Attention span",
    "language_level": "Language level",
    "math_level": "Math level",
    "reading_level": "Reading level",
}


@dataclass(frozen=True)
class ExampleExercise:
    """Reference exercise shown to the model as a style example."""
    age_band: AgeBand
    difficulty: DifficultyLevel
    question: str
    correct_answer: str
    hints: Tuple[str, str, str]
    topic: str


@dataclass(frozen=True)
class SubjectTemplate:
    """Complete prompt template set for one subject."""
    subject: SubjectType
    noun: str
    system_prompt: str
    difficulty_blocks: Dict[DifficultyLevel, str]
    age_blocks: Dict[AgeBand, str]
    guideline_fields: Tuple[str, ...]
    structure_notes: str
    answer_rule: str
    validation_intro: str
    validation_rules: str
    feedback_rules: str
    examples: Tuple[ExampleExercise, ...]

    def __post_init__(self):
        """Validate the template covers every difficulty and age band."""
        missing_levels = set(DifficultyLevel) - set(self.difficulty_blocks)
        if missing_levels:
            raise ValueError(f"{self.subject.value}: missing difficulty blocks {missing_levels}")
        missing_bands = set(AgeBand) - set(self.age_blocks)
        if missing_bands:
            raise ValueError(f"{self.subject.value}: missing age blocks {missing_bands}")
        unknown_fields = set(self.guideline_fields) - set(GUIDELINE_FIELDS)
        if unknown_fields:
            raise ValueError(f"{self.subject.value}: unknown guideline fields {unknown_fields}")

    def example_for(self, age_band: AgeBand) -> ExampleExercise:
        """Return the reference example for an age band."""
        for example in self.examples:
            if example.age_band == age_band:
                return example
        raise KeyError(f"{self.subject.value}: no example for {age_band.value}")
