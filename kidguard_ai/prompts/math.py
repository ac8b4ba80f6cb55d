"""
Math exercise templates.
"""

from ..core.guidelines import AgeBand
from ..core.schemas import DifficultyLevel, SubjectType
from .templates import ExampleExercise, SubjectTemplate

MATH_SYSTEM_PROMPT = """You are an expert in mathematics teaching for children.
You create FUN and ENGAGING math exercises that feel like mini-games.

STRICT RULES:
1. Flawless language, adapted to the child's age
2. Playful, story-based exercises (never a bare "Compute: 5+3")
3. Concrete situations children know from daily life
4. Output strict JSON only
5. Hints are progressive, from the vaguest to the most precise
6. The answer is clear and unique (a number or a short math expression)

STYLE:
- Positive, encouraging tone
- Imaginative scenarios (animals, games, sports, sweets, ...)
- The exercise should feel like a fun challenge, not homework"""

MATH_TEMPLATE = SubjectTemplate(
    subject=SubjectType.MATH,
    noun="math exercise",
    system_prompt=MATH_SYSTEM_PROMPT,
    difficulty_blocks={
        DifficultyLevel.EASY: "EASY - Simple, direct exercise with small numbers",
        DifficultyLevel.MEDIUM: "MEDIUM - One or two steps with moderate numbers",
        DifficultyLevel.HARD: "HARD - Complex exercise needing several reasoning steps",
    },
    age_blocks={
        AgeBand.YOUNG: """LEVEL 6-8 YEARS:
- Numbers from 0 to 20 at most
- Simple addition and subtraction
- First multiplication tables (2, 5, 10)
- Concrete objects (apples, balls, pencils)
- Very short, simple sentences""",
        AgeBand.MIDDLE: """LEVEL 9-11 YEARS:
- Numbers up to 1000
- The four operations (addition, subtraction, multiplication, division)
- Simple fractions (1/2, 1/4, 1/3)
- Problems with 2-3 steps
- Varied contexts (money, measures, time)""",
        AgeBand.TEEN: """LEVEL 12-14 YEARS:
- Large, decimal and negative numbers
- Basic algebra (simple equations with x)
- Complex fractions, percentages, proportions
- Geometry (perimeter, area, volume)
- Multi-step problems with logical reasoning""",
    },
    guideline_fields=("cognitive_level", "math_level", "attention_span"),
    structure_notes="",
    answer_rule="The answer must be a number or a simple math expression",
    validation_intro="You are a kind grader of math exercises for children.",
    validation_rules="""1. Compare the child's answer to the expected answer
2. Accept equivalent formats:
   - "8", "eight", "huit", "8.0" are all equivalent to 8
   - "1/2", "0.5", "50%" are all equivalent
   - Ignore spaces, units and punctuation
3. If the answer is correct (or equivalent), set isCorrect to true
4. Otherwise set isCorrect to false
5. Say whether you applied tolerance (leniencyApplied)""",
    feedback_rules="""- If correct: enthusiastic, personal congratulations
- If incorrect: positive encouragement and a nudge in the right direction""",
    examples=(
        ExampleExercise(
            age_band=AgeBand.YOUNG,
            difficulty=DifficultyLevel.EASY,
            question="🍎 Sophie picked 7 red apples and 5 green apples in her garden. How many apples does she have in total?",
            correct_answer="12",
            hints=(
                "Count all the apples together",
                "7 red apples + 5 green apples",
                "7 + 5 = ?",
            ),
            topic="addition",
        ),
        ExampleExercise(
            age_band=AgeBand.MIDDLE,
            difficulty=DifficultyLevel.MEDIUM,
            question="🎮 Leo saved 45€ to buy a video game that costs 28€. How much money will he have left?",
            correct_answer="17",
            hints=(
                "Take the price of the game away from his savings",
                "45€ - 28€",
                "Count up from 28 to 45",
            ),
            topic="subtraction with money",
        ),
        ExampleExercise(
            age_band=AgeBand.TEEN,
            difficulty=DifficultyLevel.HARD,
            question="🚴 Emma rides her bike at an average speed of 15 km/h. If she rides for two and a half hours, how far does she travel?",
            correct_answer="37.5",
            hints=(
                "Distance = Speed × Time",
                "Two and a half hours = 2.5 hours",
                "15 km/h × 2.5 h = ?",
            ),
            topic="speed, distance and time",
        ),
    ),
)
