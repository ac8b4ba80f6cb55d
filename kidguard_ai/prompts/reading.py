"""
Reading comprehension templates.
"""

from ..core.guidelines import AgeBand
from ..core.schemas import DifficultyLevel, SubjectType
from .templates import ExampleExercise, SubjectTemplate

READING_SYSTEM_PROMPT = """You are an expert in teaching reading to children.
You create CAPTIVATING reading comprehension exercises that make children want to read.

STRICT RULES:
1. Flawless language, adapted to the child's age
2. Short, engaging stories (adventures, animals, funny situations)
3. One clear, precise comprehension question
4. Output strict JSON only
5. Hints help the child re-read or understand the text
6. The answer is clear (a word, a short sentence or a choice)

STYLE:
- Imaginative, positive stories
- Rich vocabulary that still fits the age
- Themes children enjoy (nature, friendship, adventure, magic)
- Reading should feel like a discovery, not a test"""

READING_TEMPLATE = SubjectTemplate(
    subject=SubjectType.READING,
    noun="reading exercise",
    system_prompt=READING_SYSTEM_PROMPT,
    difficulty_blocks={
        DifficultyLevel.EASY: "EASY - Short text, direct question, obvious answer",
        DifficultyLevel.MEDIUM: "MEDIUM - Longer text, question that needs understanding",
        DifficultyLevel.HARD: "HARD - Complex text, question that needs analysis or inference",
    },
    age_blocks={
        AgeBand.YOUNG: """LEVEL 6-8 YEARS:
- Text of 2-4 short sentences (30-50 words at most)
- Simple, concrete vocabulary
- Sentences of 5-8 words at most
- Questions about explicit facts
- Answer: one word or a very short phrase""",
        AgeBand.MIDDLE: """LEVEL 9-11 YEARS:
- Text of 1-2 paragraphs (80-120 words)
- Richer vocabulary with a few new words
- More complex sentences
- Questions about understanding and simple inferences
- Answer: short sentence or brief explanation""",
        AgeBand.TEEN: """LEVEL 12-14 YEARS:
- Text of 2-3 paragraphs (150-200 words)
- Varied, nuanced vocabulary
- Complex grammatical structures
- Questions about analysis, interpretation, theme
- Answer: full sentence or short analysis""",
    },
    guideline_fields=("cognitive_level", "reading_level", "language_level"),
    structure_notes="""EXERCISE STRUCTURE:
1. Start with the short text to read
2. Then ask ONE comprehension question
3. Separate the question from the text with "Question: "
4. Format of the question field: "[TEXT]\\n\\nQuestion: [QUESTION]"
5. Use a few emojis to make the text visual (🌳 🐱 ⭐)""",
    answer_rule="The answer must be found in the text or be logically deducible from it",
    validation_intro="You are a kind grader of reading exercises for children.",
    validation_rules="""1. For reading, UNDERSTANDING matters, not exact wording
2. Accept answers that show comprehension even with different words
3. Accept synonyms and rephrasings
4. Tolerate spelling mistakes according to the age
5. If the answer captures the main idea, it is correct
6. Say whether you applied tolerance (leniencyApplied)""",
    feedback_rules="""- If correct: praise the careful reading and understanding
- If incorrect: encourage re-reading and hint at where to look""",
    examples=(
        ExampleExercise(
            age_band=AgeBand.YOUNG,
            difficulty=DifficultyLevel.EASY,
            question="🐱 Little cat Minou loves playing in the garden. He runs after butterflies. Mummy cat calls him to eat.\n\nQuestion: Where does Minou play?",
            correct_answer="in the garden",
            hints=(
                "Read the first sentence again",
                "Look for where the cat likes to play",
                "The cat plays in the...",
            ),
            topic="explicit facts",
        ),
        ExampleExercise(
            age_band=AgeBand.MIDDLE,
            difficulty=DifficultyLevel.MEDIUM,
            question="🌲 Lucas loved walking in the forest with his grandfather. Together they watched birds and picked mushrooms. One day they found an abandoned cabin among the trees. It became their secret.\n\nQuestion: Why was the cabin special for Lucas and his grandfather?",
            correct_answer="It was their secret",
            hints=(
                "Read the last sentence again",
                "What did the cabin mean to them?",
                "The cabin was their...",
            ),
            topic="simple inference",
        ),
        ExampleExercise(
            age_band=AgeBand.TEEN,
            difficulty=DifficultyLevel.HARD,
            question="🎨 Marie hesitated in front of her blank canvas. She had so many ideas, yet none seemed perfect enough. Her teacher had told her: \"Art is not about perfection, it is about expression.\" The sentence echoed in her head. At last she took her brush and let her feelings guide her hand. The result surprised even her.\n\nQuestion: How does Marie change by the end of the text?",
            correct_answer="She stops chasing perfection and lets her feelings guide her",
            hints=(
                "Compare the beginning and the end of the text",
                "What changes in her attitude?",
                "She goes from hesitation to...",
            ),
            topic="character change",
        ),
    ),
)
