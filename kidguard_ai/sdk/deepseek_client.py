"""
AI gateway client for the DeepSeek chat-completion API.

Wraps the OpenAI-compatible endpoint with per-attempt timeouts, capped
exponential backoff and a typed failure taxonomy. The SDK's own retry
logic is disabled so this client alone governs attempts.
"""

import logging
import time
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

from openai import APIConnectionError, APIError, APIStatusError, APITimeoutError, OpenAI

from ..config.loader import GatewayConfig
from ..core.errors import (
    ClientError,
    ConfigurationError,
    GatewayError,
    NetworkError,
    RateLimited,
    ServerError,
    Timeout,
)
from ..core.pricing import TokenUsage
from .retry import BackoffPolicy

logger = logging.getLogger(__name__)

VALID_ROLES = {"system", "user", "assistant"}


@dataclass(frozen=True)
class ChatResponse:
    """Model output and usage accounting for one completed call."""
    content: str
    model: str
    usage: TokenUsage
    request_id: Optional[str]
    attempts: int
    elapsed_ms: int


class DeepSeekGateway:
    """Chat-completion client with retry and error classification.

    Knows nothing about exercises: it sends opaque message lists and
    returns text plus token usage.
    """

    def __init__(
        self,
        config: GatewayConfig,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ):
        """Initialize the gateway.

        Args:
            config: Validated gateway configuration (required)
            sleep: Sleep function used between attempts, in seconds
            clock: Monotonic clock used for elapsed time, in seconds

        Raises:
            ConfigurationError: If config is missing
        """
        if config is None:
            raise ConfigurationError("gateway configuration is required")

        self.config = config
        self.backoff = BackoffPolicy(base_ms=config.backoff_base_ms, cap_ms=config.backoff_cap_ms)
        self._sleep = sleep
        self._clock = clock
        self.client = OpenAI(
            api_key=config.api_key,
            base_url=config.base_url,
            timeout=config.timeout_seconds,
            max_retries=0,
        )

    @property
    def model(self) -> str:
        return self.config.model

    def worst_case_latency_ms(self) -> int:
        """Upper bound on one logical call: every attempt times out."""
        timeouts = int(self.config.timeout_seconds * 1000) * self.config.max_retries
        return timeouts + sum(self.backoff.schedule(self.config.max_retries))

    def complete(
        self,
        messages: List[Dict[str, str]],
        temperature: float = 0.7,
        max_tokens: int = 2000,
    ) -> ChatResponse:
        """Create a chat completion, retrying transient failures.

        Args:
            messages: Ordered list of {role, content} dictionaries (required)
            temperature: Sampling temperature
            max_tokens: Maximum tokens to generate

        Returns:
            ChatResponse

        Raises:
            ValueError: If messages is empty or malformed
            ClientError: Immediately, on a non-retryable 4xx
            RateLimited, ServerError, Timeout, NetworkError: Once the
                attempts are exhausted, with ``terminal`` set
        """
        _check_messages(messages)

        max_attempts = self.config.max_retries
        start = self._clock()

        for attempt in range(1, max_attempts + 1):
            try:
                response = self.client.chat.completions.create(
                    model=self.config.model,
                    messages=messages,
                    temperature=temperature,
                    max_tokens=max_tokens,
                )
                result = self._to_chat_response(response, attempt, self._elapsed_ms(start))
            except GatewayError as error:
                failure = error
            except APIError as exc:
                failure = _classify(exc)
            else:
                logger.info(
                    "Chat completion succeeded in %dms after %d attempt(s) (%d tokens)",
                    result.elapsed_ms, attempt, result.usage.total_tokens,
                )
                return result

            failure.attempts = attempt
            failure.elapsed_ms = self._elapsed_ms(start)

            if not failure.retryable:
                logger.error(
                    "Chat completion failed with non-retryable %s (status %s): %s",
                    failure.kind.value, failure.status_code, failure.message,
                    extra=failure.context(),
                )
                raise failure

            if attempt == max_attempts:
                failure.terminal = True
                logger.error(
                    "Chat completion failed after %d attempt(s) in %dms: %s",
                    attempt, failure.elapsed_ms, failure.message,
                    extra=failure.context(),
                )
                raise failure

            delay_ms = self.backoff.delay_ms(attempt)
            logger.warning(
                "Attempt %d/%d failed with %s; retrying in %dms",
                attempt, max_attempts, failure.kind.value, delay_ms,
            )
            self._sleep(delay_ms / 1000)

        # max_retries >= 1 is enforced by GatewayConfig
        raise AssertionError("unreachable")

    def _elapsed_ms(self, start: float) -> int:
        return int((self._clock() - start) * 1000)

    def _to_chat_response(self, response, attempt: int, elapsed_ms: int) -> ChatResponse:
        """Extract text and usage from a provider response.

        Raises:
            ServerError: If the response lacks choices, content or valid usage
        """
        choices = getattr(response, "choices", None)
        if not choices:
            raise ServerError("empty response from provider: no choices")

        content = choices[0].message.content
        if not content:
            raise ServerError("empty response from provider: no content")

        usage = getattr(response, "usage", None)
        if usage is None:
            raise ServerError("provider response missing usage information")
        counts = (usage.prompt_tokens, usage.completion_tokens)
        if any(isinstance(n, bool) or not isinstance(n, int) or n < 0 for n in counts):
            raise ServerError("provider response has invalid usage counts")

        reported_model = getattr(response, "model", None)
        return ChatResponse(
            content=content,
            model=reported_model if isinstance(reported_model, str) and reported_model else self.config.model,
            usage=TokenUsage(
                prompt_tokens=usage.prompt_tokens,
                completion_tokens=usage.completion_tokens,
            ),
            request_id=getattr(response, "id", None),
            attempts=attempt,
            elapsed_ms=elapsed_ms,
        )


def _check_messages(messages: List[Dict[str, str]]) -> None:
    if not messages:
        raise ValueError("messages is required and cannot be empty")
    for message in messages:
        if not isinstance(message, dict) or message.get("role") not in VALID_ROLES:
            raise ValueError(f"each message needs a role in {sorted(VALID_ROLES)}")
        if not isinstance(message.get("content"), str):
            raise ValueError("each message needs string content")


def _classify(exc: APIError) -> GatewayError:
    """Map an SDK exception onto the gateway taxonomy."""
    # APITimeoutError subclasses APIConnectionError, so it goes first
    if isinstance(exc, APITimeoutError):
        return Timeout(f"request timed out: {exc}")
    if isinstance(exc, APIConnectionError):
        return NetworkError(f"network error: {exc}")
    if isinstance(exc, APIStatusError):
        status = exc.status_code
        if status == 429:
            return RateLimited(f"rate limit exceeded: {exc}", status_code=status)
        if status >= 500:
            return ServerError(f"provider error ({status}): {exc}", status_code=status)
        return ClientError(f"request rejected ({status}): {exc}", status_code=status)
    return ServerError(f"unexpected provider response: {exc}")
