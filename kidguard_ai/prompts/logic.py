"""
Logic puzzle templates.
"""

from ..core.guidelines import AgeBand
from ..core.schemas import DifficultyLevel, SubjectType
from .templates import ExampleExercise, SubjectTemplate

LOGIC_SYSTEM_PROMPT = """You are an expert in teaching logic and reasoning to children.
You create FASCINATING riddles and logic challenges that stimulate thinking.

STRICT RULES:
1. Flawless language, adapted to the child's age
2. Visual puzzles, patterns, sequences, deduction, problem solving
3. Clear presentation with emojis to picture the problem
4. Output strict JSON only
5. Hints guide the reasoning step by step
6. The answer is clear and unique

KINDS OF LOGIC EXERCISES:
- Logical sequences (numbers, shapes, patterns)
- Deduction riddles
- Spatial logic problems
- Number puzzles
- Reasoning by elimination

STYLE:
- Intriguing riddles children want to solve
- Visual presentation with emojis
- Fun settings (detectives, explorers, magicians)
- The exercise should feel like a captivating puzzle"""

LOGIC_TEMPLATE = SubjectTemplate(
    subject=SubjectType.LOGIC,
    noun="logic puzzle",
    system_prompt=LOGIC_SYSTEM_PROMPT,
    difficulty_blocks={
        DifficultyLevel.EASY: "EASY - Simple pattern, direct deduction, 1-2 steps",
        DifficultyLevel.MEDIUM: "MEDIUM - Pattern or deduction needing 2-3 reasoning steps",
        DifficultyLevel.HARD: "HARD - Complex reasoning, several steps, elimination",
    },
    age_blocks={
        AgeBand.YOUNG: """LEVEL 6-8 YEARS:
- Simple visual patterns (repetitions)
- Simple number sequences (+1, +2, -1)
- Basic sorting (animals, colours, shapes)
- Riddles with 2-3 elements at most
- Plenty of emojis to picture the problem""",
        AgeBand.MIDDLE: """LEVEL 9-11 YEARS:
- More complex patterns (alternation, multiplication)
- Logical deduction from 3-4 clues
- Position and ordering riddles
- Logic problems with 2-3 steps
- Puzzles with several candidate solutions to eliminate""",
        AgeBand.TEEN: """LEVEL 12-14 YEARS:
- Abstract and algebraic patterns
- Deduction with several conditions
- Riddles that need methodical organisation
- Proof by contradiction
- Simple combinatorics problems""",
    },
    guideline_fields=("cognitive_level", "attention_span"),
    structure_notes="""KINDS OF RIDDLES:
- Sequence: "🔵 🔴 🔵 🔴 🔵 ___ ?"
- Deduction: "If all A are B, and C is an A, then..."
- Number pattern: "2, 4, 8, 16, ___ ?"
- Ordering: "Mark is taller than Lea. Lea is taller than Tom. Who is the shortest?"
Use emojis to illustrate (🔴🔵🟡🟢⭐🌙☀️🐱🐶🦁).""",
    answer_rule="The solution must be logically deducible from the puzzle alone",
    validation_intro="You are a kind grader of logic puzzles for children.",
    validation_rules="""1. Check whether the child's reasoning leads to the right answer
2. Accept equivalent answers:
   - Different wordings of the same answer
   - Symbols for words (red/🔴, star/⭐)
   - Different numeric formats
3. For patterns, accept the answer if it follows the logic
4. Tolerate spelling mistakes according to the age
5. If the child understood the logic but slipped on a detail, be lenient
6. Say whether you applied tolerance (leniencyApplied)""",
    feedback_rules="""- If correct: praise the excellent logic and reasoning
- If incorrect: encourage thinking differently and give a clue""",
    examples=(
        ExampleExercise(
            age_band=AgeBand.YOUNG,
            difficulty=DifficultyLevel.EASY,
            question="🔵 🔴 🔵 🔴 🔵 ___\n\nWhich colour comes next in this pattern?",
            correct_answer="red",
            hints=(
                "Look at the order of the colours",
                "The colours take turns: blue, red, blue, red...",
                "After blue comes...",
            ),
            topic="repeating pattern",
        ),
        ExampleExercise(
            age_band=AgeBand.MIDDLE,
            difficulty=DifficultyLevel.MEDIUM,
            question="🐱 Three friends each have a different pet: a cat, a dog and a fish.\n- Julie does not have the cat\n- Mark's pet swims\n- Sophie loves felines\n\nWho has the dog?",
            correct_answer="Julie",
            hints=(
                "Mark has the fish (it swims)",
                "Sophie has the cat (it is a feline)",
                "So the dog belongs to...",
            ),
            topic="deduction by elimination",
        ),
        ExampleExercise(
            age_band=AgeBand.TEEN,
            difficulty=DifficultyLevel.HARD,
            question="🧮 In this sequence:\n2, 6, 12, 20, 30, __\n\nWhich number comes next?",
            correct_answer="42",
            hints=(
                "Look at the differences between the numbers",
                "The differences are +4, +6, +8, +10: they grow by 2 each time",
                "So after +10 comes +12",
            ),
            topic="second-order sequence",
        ),
    ),
)
