"""
Unit tests for SDK layer.

Tests the DeepSeek gateway: response extraction, error classification,
retry bounds and backoff timing.
"""

import logging
from unittest.mock import Mock, patch

import httpx
import openai
import pytest

from kidguard_ai.config.loader import GatewayConfig
from kidguard_ai.core.errors import (
    ClientError,
    ConfigurationError,
    ErrorKind,
    NetworkError,
    RateLimited,
    ServerError,
    Timeout,
)
from kidguard_ai.sdk import BackoffPolicy, ChatResponse, DeepSeekGateway

API_URL = "https://api.deepseek.com/v1/chat/completions"
MESSAGES = [{"role": "user", "content": "Bonjour"}]


def make_response(content='{"ok": true}', prompt_tokens=100, completion_tokens=50):
    mock_response = Mock()
    mock_response.id = "chatcmpl-123"
    mock_response.model = "deepseek-chat"
    mock_response.choices = [Mock(message=Mock(content=content))]
    mock_response.usage.prompt_tokens = prompt_tokens
    mock_response.usage.completion_tokens = completion_tokens
    return mock_response


def status_error(cls, status):
    request = httpx.Request("POST", API_URL)
    response = httpx.Response(status, request=request)
    return cls(f"HTTP {status}", response=response, body=None)


def timeout_error():
    return openai.APITimeoutError(request=httpx.Request("POST", API_URL))


def connection_error():
    return openai.APIConnectionError(request=httpx.Request("POST", API_URL))


class TestBackoffPolicy:
    """Test capped exponential backoff."""

    def test_default_delays(self):
        policy = BackoffPolicy()
        assert [policy.delay_ms(n) for n in range(1, 6)] == [1000, 2000, 4000, 8000, 8000]

    def test_schedule_has_no_wait_after_last_attempt(self):
        assert BackoffPolicy().schedule(3) == [1000, 2000]
        assert BackoffPolicy().schedule(1) == []

    def test_invalid(self):
        with pytest.raises(ValueError):
            BackoffPolicy(base_ms=-1)
        with pytest.raises(ValueError):
            BackoffPolicy(base_ms=1000, cap_ms=500)
        with pytest.raises(ValueError):
            BackoffPolicy().delay_ms(0)


class TestDeepSeekGateway:
    """Test DeepSeekGateway client wrapper."""

    def setup_method(self):
        """Set up test environment."""
        self.config = GatewayConfig(api_key="sk-test")
        self.sleeps = []

    def make_gateway(self, mock_openai_class, config=None):
        self.client = Mock()
        mock_openai_class.return_value = self.client
        return DeepSeekGateway(config or self.config, sleep=self.sleeps.append)

    @patch('kidguard_ai.sdk.deepseek_client.OpenAI')
    def test_init_configures_sdk(self, mock_openai_class):
        """Verify SDK retries are disabled and the timeout is passed through."""
        gateway = self.make_gateway(mock_openai_class)

        mock_openai_class.assert_called_once_with(
            api_key="sk-test",
            base_url="https://api.deepseek.com/v1",
            timeout=30.0,
            max_retries=0,
        )
        assert gateway.model == "deepseek-chat"

    def test_init_missing_config(self):
        with pytest.raises(ConfigurationError):
            DeepSeekGateway(None)

    @patch('kidguard_ai.sdk.deepseek_client.OpenAI')
    def test_complete_success(self, mock_openai_class):
        """Test successful completion returns content and usage."""
        gateway = self.make_gateway(mock_openai_class)
        self.client.chat.completions.create.return_value = make_response()

        result = gateway.complete(MESSAGES, temperature=0.8, max_tokens=2000)

        assert isinstance(result, ChatResponse)
        assert result.content == '{"ok": true}'
        assert result.usage.prompt_tokens == 100
        assert result.usage.completion_tokens == 50
        assert result.request_id == "chatcmpl-123"
        assert result.attempts == 1
        assert self.sleeps == []
        self.client.chat.completions.create.assert_called_once_with(
            model="deepseek-chat",
            messages=MESSAGES,
            temperature=0.8,
            max_tokens=2000,
        )

    @patch('kidguard_ai.sdk.deepseek_client.OpenAI')
    def test_retries_then_succeeds(self, mock_openai_class):
        """Test a transient failure is retried after the first backoff."""
        gateway = self.make_gateway(mock_openai_class)
        self.client.chat.completions.create.side_effect = [
            status_error(openai.InternalServerError, 503),
            make_response(),
        ]

        result = gateway.complete(MESSAGES)

        assert result.attempts == 2
        assert self.sleeps == [1.0]

    @patch('kidguard_ai.sdk.deepseek_client.OpenAI')
    def test_persistent_timeout_is_bounded(self, mock_openai_class):
        """Test exactly three attempts with 1s and 2s waits on persistent timeouts."""
        gateway = self.make_gateway(mock_openai_class)
        self.client.chat.completions.create.side_effect = timeout_error()

        with pytest.raises(Timeout) as exc_info:
            gateway.complete(MESSAGES)

        assert self.client.chat.completions.create.call_count == 3
        assert self.sleeps == [1.0, 2.0]
        assert exc_info.value.attempts == 3
        assert exc_info.value.terminal is True
        assert exc_info.value.kind == ErrorKind.TIMEOUT

    @patch('kidguard_ai.sdk.deepseek_client.OpenAI')
    def test_rate_limited(self, mock_openai_class):
        gateway = self.make_gateway(mock_openai_class)
        self.client.chat.completions.create.side_effect = status_error(openai.RateLimitError, 429)

        with pytest.raises(RateLimited) as exc_info:
            gateway.complete(MESSAGES)

        assert exc_info.value.status_code == 429
        assert self.client.chat.completions.create.call_count == 3
        assert self.sleeps == [1.0, 2.0]

    @patch('kidguard_ai.sdk.deepseek_client.OpenAI')
    def test_client_error_is_not_retried(self, mock_openai_class):
        """Test a 400 surfaces immediately."""
        gateway = self.make_gateway(mock_openai_class)
        self.client.chat.completions.create.side_effect = status_error(openai.BadRequestError, 400)

        with pytest.raises(ClientError) as exc_info:
            gateway.complete(MESSAGES)

        assert self.client.chat.completions.create.call_count == 1
        assert self.sleeps == []
        assert exc_info.value.status_code == 400
        assert exc_info.value.retryable is False

    @patch('kidguard_ai.sdk.deepseek_client.OpenAI')
    def test_authentication_error_is_client_error(self, mock_openai_class):
        gateway = self.make_gateway(mock_openai_class)
        self.client.chat.completions.create.side_effect = status_error(openai.AuthenticationError, 401)

        with pytest.raises(ClientError):
            gateway.complete(MESSAGES)

    @patch('kidguard_ai.sdk.deepseek_client.OpenAI')
    def test_connection_error(self, mock_openai_class):
        gateway = self.make_gateway(mock_openai_class)
        self.client.chat.completions.create.side_effect = connection_error()

        with pytest.raises(NetworkError):
            gateway.complete(MESSAGES)

        assert self.client.chat.completions.create.call_count == 3

    @patch('kidguard_ai.sdk.deepseek_client.OpenAI')
    def test_empty_content_is_server_error(self, mock_openai_class):
        """Test a 2xx without content counts as a retryable server error."""
        gateway = self.make_gateway(mock_openai_class)
        self.client.chat.completions.create.side_effect = [make_response(content=""), make_response()]

        result = gateway.complete(MESSAGES)

        assert result.attempts == 2

    @patch('kidguard_ai.sdk.deepseek_client.OpenAI')
    def test_missing_choices(self, mock_openai_class):
        gateway = self.make_gateway(mock_openai_class)
        response = make_response()
        response.choices = []
        self.client.chat.completions.create.return_value = response

        with pytest.raises(ServerError, match="no choices"):
            gateway.complete(MESSAGES)

    @patch('kidguard_ai.sdk.deepseek_client.OpenAI')
    def test_single_attempt_config(self, mock_openai_class):
        config = GatewayConfig(api_key="sk-test", max_retries=1)
        gateway = self.make_gateway(mock_openai_class, config)
        self.client.chat.completions.create.side_effect = timeout_error()

        with pytest.raises(Timeout):
            gateway.complete(MESSAGES)

        assert self.client.chat.completions.create.call_count == 1
        assert self.sleeps == []

    @patch('kidguard_ai.sdk.deepseek_client.OpenAI')
    def test_invalid_messages(self, mock_openai_class):
        gateway = self.make_gateway(mock_openai_class)

        with pytest.raises(ValueError, match="cannot be empty"):
            gateway.complete([])
        with pytest.raises(ValueError, match="role"):
            gateway.complete([{"role": "robot", "content": "hi"}])
        with pytest.raises(ValueError, match="string content"):
            gateway.complete([{"role": "user", "content": None}])

        self.client.chat.completions.create.assert_not_called()

    @patch('kidguard_ai.sdk.deepseek_client.OpenAI')
    def test_worst_case_latency(self, mock_openai_class):
        """Verify three 30s timeouts plus 1s and 2s waits."""
        gateway = self.make_gateway(mock_openai_class)
        assert gateway.worst_case_latency_ms() == 93000

    @patch('kidguard_ai.sdk.deepseek_client.OpenAI')
    def test_persistent_server_error_is_bounded(self, mock_openai_class):
        """Test an always-503 provider gets exactly three attempts."""
        gateway = self.make_gateway(mock_openai_class)
        self.client.chat.completions.create.side_effect = status_error(openai.InternalServerError, 503)

        with pytest.raises(ServerError) as exc_info:
            gateway.complete(MESSAGES)

        assert self.client.chat.completions.create.call_count == 3
        assert self.sleeps == [1.0, 2.0]
        assert exc_info.value.terminal is True
        assert exc_info.value.status_code == 503

    @pytest.mark.parametrize("prompt_tokens,completion_tokens", [
        (None, 50),
        (100, None),
        ("100", 50),
        (100, 2.5),
        (True, 50),
        (-1, 50),
    ])
    @patch('kidguard_ai.sdk.deepseek_client.OpenAI')
    def test_invalid_usage_counts_are_server_errors(self, mock_openai_class, prompt_tokens, completion_tokens):
        """Test unusable token counts are retried as provider errors."""
        gateway = self.make_gateway(mock_openai_class)
        self.client.chat.completions.create.return_value = make_response(
            prompt_tokens=prompt_tokens, completion_tokens=completion_tokens,
        )

        with pytest.raises(ServerError, match="invalid usage counts") as exc_info:
            gateway.complete(MESSAGES)

        assert self.client.chat.completions.create.call_count == 3
        assert exc_info.value.terminal is True

    @patch('kidguard_ai.sdk.deepseek_client.OpenAI')
    def test_reported_model_is_kept(self, mock_openai_class):
        gateway = self.make_gateway(mock_openai_class)
        response = make_response()
        response.model = "deepseek-chat-v3"
        self.client.chat.completions.create.return_value = response

        assert gateway.complete(MESSAGES).model == "deepseek-chat-v3"

    @patch('kidguard_ai.sdk.deepseek_client.OpenAI')
    def test_terminal_failure_log_carries_context(self, mock_openai_class, caplog):
        """Test the terminal log record exposes the error context fields."""
        gateway = self.make_gateway(mock_openai_class)
        self.client.chat.completions.create.side_effect = status_error(openai.RateLimitError, 429)

        with caplog.at_level(logging.ERROR, logger="kidguard_ai.sdk.deepseek_client"):
            with pytest.raises(RateLimited):
                gateway.complete(MESSAGES)

        record = caplog.records[-1]
        assert record.kind == "rate_limited"
        assert record.status_code == 429
        assert record.attempts == 3
