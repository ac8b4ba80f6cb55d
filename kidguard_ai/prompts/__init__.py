"""
Prompt templates for exercise generation and answer validation.
"""

from .builder import (
    DEFAULT_LANGUAGE,
    MAX_COUNT,
    MIN_COUNT,
    PROMPT_TEMPLATES,
    GenerationPrompt,
    build_generation_prompt,
    build_validation_prompt,
    get_template,
    validate_count,
)

__all__ = [
    "DEFAULT_LANGUAGE",
    "MAX_COUNT",
    "MIN_COUNT",
    "PROMPT_TEMPLATES",
    "GenerationPrompt",
    "build_generation_prompt",
    "build_validation_prompt",
    "get_template",
    "validate_count",
]
