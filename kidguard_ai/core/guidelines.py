"""
Age band guidelines.

Static pedagogical constraints per age band, and the leniency policy
used when judging a child's free-text answer.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Tuple

from .errors import OutOfRangeError

MIN_AGE = 6
MAX_AGE = 14


class AgeBand(Enum):
    """Non-overlapping age ranges driving tone and leniency."""
    YOUNG = "6-8"
    MIDDLE = "9-11"
    TEEN = "12-14"

    @property
    def min_age(self) -> int:
        return int(self.value.split("-")[0])

    @property
    def max_age(self) -> int:
        return int(self.value.split("-")[1])

    @property
    def label(self) -> str:
        """Human-readable range, e.g. "6-8 years"."""
        return f"{self.value} years"

    def contains(self, age: int) -> bool:
        return self.min_age <= age <= self.max_age


@dataclass(frozen=True)
class GuidelineEntry:
    """Pedagogical constraints for one age band."""
    age_band: AgeBand
    cognitive_level: str
    attention_span: str
    language_level: str
    math_level: str
    reading_level: str
    examples: Tuple[str, ...]
    leniency_policy: str


GUIDELINE_TABLE: Dict[AgeBand, GuidelineEntry] = {
    AgeBand.YOUNG: GuidelineEntry(
        age_band=AgeBand.YOUNG,
        cognitive_level="Concrete thinking, first steps in simple logic",
        attention_span="Short attention span (5-10 minutes)",
        language_level="Basic vocabulary (500-1500 words), simple sentences",
        math_level="Simple addition and subtraction (0-20), first multiplication tables",
        reading_level="Simple words, short sentences (3-7 words)",
        examples=(
            "Counting objects",
            "Reading simple words",
            "Basic visual patterns",
            "Sorting pictures into categories",
        ),
        leniency_policy=(
            "VERY LENIENT:\n"
            "- Accept phonetic spelling variations\n"
            "- Accept simple synonyms\n"
            "- Accept partially correct answers\n"
            "- Ignore case and accents\n"
            "- For math: accept any numeric format (8, eight, huit, 8.0)"
        ),
    ),
    AgeBand.MIDDLE: GuidelineEntry(
        age_band=AgeBand.MIDDLE,
        cognitive_level="Logical thinking, sequential reasoning",
        attention_span="Medium attention span (15-25 minutes)",
        language_level="Broader vocabulary (2000-4000 words), compound sentences",
        math_level="Multiplication and division, simple fractions, multi-step problems",
        reading_level="Short paragraphs, understanding narrative texts",
        examples=(
            "Solving word problems",
            "Reading comprehension of short passages",
            "Simple deductive logic",
            "Synonyms and antonyms",
        ),
        leniency_policy=(
            "MODERATELY LENIENT:\n"
            "- Accept synonyms\n"
            "- Tolerate minor spelling mistakes (1-2 letters)\n"
            "- Accept partial answers when the main idea is right\n"
            "- Respect case and accents, with tolerance\n"
            "- For math: accept varied numeric formats"
        ),
    ),
    AgeBand.TEEN: GuidelineEntry(
        age_band=AgeBand.TEEN,
        cognitive_level="Abstract thinking, hypothetical reasoning",
        attention_span="Sustained attention span (30+ minutes)",
        language_level="Advanced vocabulary (5000+ words), complex grammar",
        math_level="Basic algebra, geometry, percentages, proportions",
        reading_level="Long texts, literary analysis, nuanced comprehension",
        examples=(
            "Solving algebraic equations",
            "Analysing complex texts",
            "Advanced logical reasoning",
            "Nuances of language and idioms",
        ),
        leniency_policy=(
            "STANDARD TOLERANCE:\n"
            "- Accept exact synonyms\n"
            "- Tolerate minor spelling mistakes\n"
            "- Require a complete answer but accept different wordings\n"
            "- Respect case and accents (small tolerance)\n"
            "- For math: require precision but accept scientific notation"
        ),
    ),
}


def band_for(age: int) -> AgeBand:
    """Map a child's age to its age band.

    Raises:
        OutOfRangeError: If age is not an integer in [6, 14]
    """
    if isinstance(age, bool) or not isinstance(age, int):
        raise OutOfRangeError(f"age must be an integer, got {age!r}")
    for band in AgeBand:
        if band.contains(age):
            return band
    raise OutOfRangeError(f"age must be between {MIN_AGE} and {MAX_AGE}, got {age}")


def lookup(age_band: AgeBand) -> GuidelineEntry:
    return GUIDELINE_TABLE[age_band]


def leniency_policy(age_band: AgeBand) -> str:
    return GUIDELINE_TABLE[age_band].leniency_policy
