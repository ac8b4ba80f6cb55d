"""
Configuration management and loading.

Builds the gateway and sampling settings from an optional YAML file and
environment variables. Validation is strict: unknown keys and bad values
fail loudly at load time.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from ..core.errors import ConfigurationError
from ..core.pricing import PRICING_TABLE

API_KEY_ENV = "DEEPSEEK_API_KEY"
BASE_URL_ENV = "DEEPSEEK_BASE_URL"
MODEL_ENV = "DEEPSEEK_MODEL"

DEFAULT_BASE_URL = "https://api.deepseek.com/v1"
DEFAULT_MODEL = "deepseek-chat"


@dataclass(frozen=True)
class GatewayConfig:
    """Settings owned by the AI gateway client."""
    api_key: str
    base_url: str = DEFAULT_BASE_URL
    model: str = DEFAULT_MODEL
    timeout_seconds: float = 30.0
    max_retries: int = 3
    backoff_base_ms: int = 1000
    backoff_cap_ms: int = 8000

    def __post_init__(self):
        """Validate gateway settings."""
        if not isinstance(self.api_key, str) or not self.api_key.strip():
            raise ConfigurationError(f"{API_KEY_ENV} is not set")
        if not self.base_url or not self.base_url.strip():
            raise ConfigurationError("base_url cannot be empty")
        if not PRICING_TABLE.supports(self.model):
            raise ConfigurationError(f"Unsupported model: {self.model}")
        if self.timeout_seconds <= 0:
            raise ConfigurationError("timeout_seconds must be > 0")
        if self.max_retries < 1:
            raise ConfigurationError("max_retries must be >= 1")
        if self.backoff_base_ms < 0:
            raise ConfigurationError("backoff_base_ms cannot be negative")
        if self.backoff_cap_ms < self.backoff_base_ms:
            raise ConfigurationError("backoff_cap_ms must be >= backoff_base_ms")


@dataclass(frozen=True)
class SamplingConfig:
    """Sampling settings for one kind of call."""
    temperature: float
    max_tokens: int
    response_time_target_ms: Optional[int] = None

    def __post_init__(self):
        """Validate sampling values."""
        if not 0 <= self.temperature <= 2:
            raise ConfigurationError("temperature must be between 0 and 2")
        if self.max_tokens <= 0:
            raise ConfigurationError("max_tokens must be > 0")
        if self.response_time_target_ms is not None and self.response_time_target_ms <= 0:
            raise ConfigurationError("response_time_target_ms must be > 0")


DEFAULT_GENERATION = SamplingConfig(temperature=0.8, max_tokens=2000, response_time_target_ms=2000)
DEFAULT_VALIDATION = SamplingConfig(temperature=0.2, max_tokens=500)


@dataclass(frozen=True)
class ServiceConfig:
    """Complete service configuration."""
    gateway: GatewayConfig
    generation: SamplingConfig = field(default=DEFAULT_GENERATION)
    validation: SamplingConfig = field(default=DEFAULT_VALIDATION)


_GATEWAY_KEYS = {
    "api_key": str,
    "base_url": str,
    "model": str,
    "timeout_seconds": (int, float),
    "max_retries": int,
    "backoff_base_ms": int,
    "backoff_cap_ms": int,
}

_SAMPLING_KEYS = {
    "temperature": (int, float),
    "max_tokens": int,
    "response_time_target_ms": int,
}


def load_service_config(path: Optional[str] = None, env: Optional[Mapping[str, str]] = None) -> ServiceConfig:
    """Load and validate service configuration.

    Args:
        path: Optional path to a YAML configuration file
        env: Environment mapping (defaults to os.environ)

    Returns:
        Validated ServiceConfig

    Raises:
        FileNotFoundError: If path is given but does not exist
        yaml.YAMLError: If YAML is invalid
        ConfigurationError: If configuration is invalid or the API key is missing
    """
    env = os.environ if env is None else env
    raw_config: Dict[str, Any] = {}

    if path is not None:
        config_path = Path(path)
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")
        with open(config_path, 'r', encoding='utf-8') as f:
            try:
                raw_config = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise yaml.YAMLError(f"Invalid YAML in config file {path}: {e}")

    if not isinstance(raw_config, dict):
        raise ConfigurationError("Configuration root must be a dictionary")

    allowed_top_keys = {'gateway', 'generation', 'validation'}
    unknown_keys = set(raw_config.keys()) - allowed_top_keys
    if unknown_keys:
        raise ConfigurationError(f"Unknown configuration keys: {unknown_keys}")

    gateway_data = _parse_section(raw_config.get('gateway'), _GATEWAY_KEYS, "gateway")

    # Environment wins over the file
    if env.get(API_KEY_ENV):
        gateway_data['api_key'] = env[API_KEY_ENV]
    if env.get(BASE_URL_ENV):
        gateway_data['base_url'] = env[BASE_URL_ENV]
    if env.get(MODEL_ENV):
        gateway_data['model'] = env[MODEL_ENV]

    if 'api_key' not in gateway_data:
        raise ConfigurationError(f"{API_KEY_ENV} is not set")

    gateway = GatewayConfig(**gateway_data)
    generation = _sampling_config(raw_config.get('generation'), DEFAULT_GENERATION, "generation")
    validation = _sampling_config(raw_config.get('validation'), DEFAULT_VALIDATION, "validation")

    return ServiceConfig(gateway=gateway, generation=generation, validation=validation)


def _parse_section(data: Any, schema: Dict[str, Any], path: str) -> Dict[str, Any]:
    """Check a section's keys and value types.

    Raises:
        ConfigurationError: On unknown keys or wrongly typed values
    """
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"'{path}' must be a dictionary")

    unknown_keys = set(data.keys()) - set(schema)
    if unknown_keys:
        raise ConfigurationError(f"Unknown keys in {path}: {unknown_keys}")

    parsed = {}
    for key, value in data.items():
        expected = schema[key]
        if isinstance(value, bool) or not isinstance(value, expected):
            raise ConfigurationError(f"'{key}' in {path} has an invalid type")
        parsed[key] = value
    return parsed


def _sampling_config(data: Any, defaults: SamplingConfig, path: str) -> SamplingConfig:
    values = _parse_section(data, _SAMPLING_KEYS, path)
    return SamplingConfig(
        temperature=float(values.get('temperature', defaults.temperature)),
        max_tokens=values.get('max_tokens', defaults.max_tokens),
        response_time_target_ms=values.get('response_time_target_ms', defaults.response_time_target_ms),
    )
