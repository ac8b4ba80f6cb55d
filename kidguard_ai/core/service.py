"""
Service facade.

The two operations the surrounding application calls: generate exercises
and validate an answer. One instance owns one gateway and one ledger.
"""

from typing import Any, List, Optional

from ..config.loader import ServiceConfig
from ..sdk.deepseek_client import DeepSeekGateway
from ..storage.ledger import LedgerStats, MetricsLedger
from .generation import ExerciseGenerator
from .schemas import AnswerValidationVerdict, GeneratedExercise
from .validation import AnswerValidator


class ExerciseService:
    """Exercise generation and answer validation over one gateway."""

    def __init__(
        self,
        gateway: DeepSeekGateway,
        ledger: Optional[MetricsLedger] = None,
        generator: Optional[ExerciseGenerator] = None,
        validator: Optional[AnswerValidator] = None,
    ):
        self.gateway = gateway
        self.ledger = ledger if ledger is not None else MetricsLedger()
        self.generator = generator or ExerciseGenerator(gateway, self.ledger)
        self.validator = validator or AnswerValidator(gateway, self.ledger)

    @classmethod
    def from_config(cls, config: ServiceConfig, **gateway_kwargs: Any) -> "ExerciseService":
        """Build a service and its gateway from explicit configuration."""
        gateway = DeepSeekGateway(config.gateway, **gateway_kwargs)
        ledger = MetricsLedger()
        generator = ExerciseGenerator(
            gateway,
            ledger,
            temperature=config.generation.temperature,
            max_tokens=config.generation.max_tokens,
            response_time_target_ms=config.generation.response_time_target_ms or 2000,
        )
        validator = AnswerValidator(
            gateway,
            ledger,
            temperature=config.validation.temperature,
            max_tokens=config.validation.max_tokens,
        )
        return cls(gateway, ledger=ledger, generator=generator, validator=validator)

    def generate(self, subject: Any, age: int, difficulty: Any, count: int = 1) -> List[GeneratedExercise]:
        return self.generator.generate(subject, age, difficulty, count)

    def validate(
        self,
        question: str,
        correct_answer: str,
        child_answer: str,
        age: int,
        subject: Any,
    ) -> AnswerValidationVerdict:
        return self.validator.validate(question, correct_answer, child_answer, age, subject)

    def stats(self) -> LedgerStats:
        return self.ledger.stats()
