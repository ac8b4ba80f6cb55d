"""
Vocabulary exercise templates.
"""

from ..core.guidelines import AgeBand
from ..core.schemas import DifficultyLevel, SubjectType
from .templates import ExampleExercise, SubjectTemplate

VOCABULARY_SYSTEM_PROMPT = """You are an expert in teaching vocabulary to children.
You create ENRICHING vocabulary exercises that build command of the language.

STRICT RULES:
1. Flawless language, adapted to the child's age
2. Varied exercises: synonyms, antonyms, definitions, context, word families
3. Concrete words that are useful to children
4. Output strict JSON only
5. Hints help the child grasp meaning and context
6. The answer is clear (one word or a short expression)

STYLE:
- Rich, varied vocabulary
- Concrete, vivid examples
- Settings familiar to children
- Learning words should feel like a game of discovery"""

VOCABULARY_TEMPLATE = SubjectTemplate(
    subject=SubjectType.VOCABULARY,
    noun="vocabulary exercise",
    system_prompt=VOCABULARY_SYSTEM_PROMPT,
    difficulty_blocks={
        DifficultyLevel.EASY: "EASY - Everyday words, simple synonyms, obvious context",
        DifficultyLevel.MEDIUM: "MEDIUM - Richer vocabulary, nuances, common expressions",
        DifficultyLevel.HARD: "HARD - Advanced vocabulary, figurative meaning, fine nuances",
    },
    age_blocks={
        AgeBand.YOUNG: """LEVEL 6-8 YEARS:
- Everyday words (family, school, animals, nature)
- Very simple synonyms (happy/glad, small/tiny)
- Obvious antonyms (big/small, hot/cold)
- Definitions backed by concrete mental images
- Avoid abstract words""",
        AgeBand.MIDDLE: """LEVEL 9-11 YEARS:
- Richer vocabulary (emotions, actions, descriptions)
- Synonyms with nuances (fear/terror/anxiety)
- Less obvious antonyms
- Common expressions
- A few simple abstract words""",
        AgeBand.TEEN: """LEVEL 12-14 YEARS:
- Formal, varied vocabulary
- Fine nuances between synonyms
- Literal and figurative meaning
- Idioms
- Abstract words and complex concepts""",
    },
    guideline_fields=("cognitive_level", "language_level"),
    structure_notes="""EXERCISE KINDS (pick one):
1. Synonym: "Find another word that means the same as [WORD]"
2. Antonym: "What is the opposite of [WORD]?"
3. Definition: "What does the word [WORD] mean?"
4. Context: "Which word completes this sentence: [SENTENCE with ___]?"
5. Word family: "Find a word from the same family as [WORD]"
Use emojis to illustrate (📚 🎨 🌟).""",
    answer_rule="The answer must be one word or a short expression",
    validation_intro="You are a kind grader of vocabulary exercises for children.",
    validation_rules="""1. For vocabulary, understanding the meaning comes first
2. ACCEPT VALID SYNONYMS even when they differ from the expected answer
   - Example: for "happy", accept "glad", "joyful", "cheerful"
3. For antonyms, accept every valid opposite
4. For definitions, accept any correct explanation
5. Tolerate spelling mistakes according to the age
6. Accept regional variants of the language
7. Say whether you applied tolerance (leniencyApplied)""",
    feedback_rules="""- If correct: praise the command of vocabulary
- If a valid but unexpected synonym: praise it and mention the expected answer too
- If incorrect: encourage and give a clue about the meaning""",
    examples=(
        ExampleExercise(
            age_band=AgeBand.YOUNG,
            difficulty=DifficultyLevel.EASY,
            question="📚 Find another word that means the same as 'happy'",
            correct_answer="glad",
            hints=(
                "Think about how you feel on your birthday",
                "It is a word for feeling good",
                "It starts with 'gl...'",
            ),
            topic="synonyms",
        ),
        ExampleExercise(
            age_band=AgeBand.MIDDLE,
            difficulty=DifficultyLevel.MEDIUM,
            question="🎨 Which word completes this sentence?\n\nThe painter mixes colours on his ___ before painting.",
            correct_answer="palette",
            hints=(
                "It is something painters hold in their hand",
                "All the colours are on it",
                "It starts with 'pa...'",
            ),
            topic="words in context",
        ),
        ExampleExercise(
            age_band=AgeBand.TEEN,
            difficulty=DifficultyLevel.HARD,
            question="🌟 What does the expression 'to have a heart of gold' mean?",
            correct_answer="to be very kind and generous",
            hints=(
                "It describes a person, not an object",
                "Gold is precious, so is this quality",
                "It means being very ___ to others",
            ),
            topic="idioms",
        ),
    ),
)
