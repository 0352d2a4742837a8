"""Client configuration with environment and YAML loading."""

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from .errors import ConfigError


class ClientConfig(BaseModel):
    """Connection settings for a raccoon-kv store.

    Only ``base_url`` is required. Timeouts are in seconds.
    """

    base_url: str = Field(..., description="Base URL of the store, e.g. http://localhost:8080")
    request_timeout: float = Field(
        10.0, gt=0, description="Timeout for single reads and writes"
    )
    watch_timeout: int = Field(
        60, gt=0, description="Long-poll hint sent with each watch request"
    )
    initial_backoff_seconds: int = Field(1, gt=0)
    max_backoff_seconds: int = Field(60, gt=0, description="Ceiling for watch retry backoff")

    @field_validator("base_url")
    @classmethod
    def _strip_base_url(cls, v: str) -> str:
        v = v.strip().rstrip("/")
        if not v:
            raise ValueError("base_url must not be empty")
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"base_url must be an http(s) URL, got {v!r}")
        return v

    @model_validator(mode="after")
    def _check_backoff_bounds(self) -> "ClientConfig":
        if self.max_backoff_seconds < self.initial_backoff_seconds:
            raise ValueError("max_backoff_seconds must be >= initial_backoff_seconds")
        return self

    @property
    def watch_request_timeout(self) -> float:
        """Per-request timeout for a long-poll: the hint plus normal slack."""
        return self.watch_timeout + self.request_timeout

    @classmethod
    def from_env(cls, **overrides: Any) -> "ClientConfig":
        """Load configuration from environment variables.

        Environment variables are prefixed with RACCOON_KV_:
        - RACCOON_KV_URL -> base_url
        - RACCOON_KV_REQUEST_TIMEOUT -> request_timeout
        - RACCOON_KV_WATCH_TIMEOUT -> watch_timeout
        - RACCOON_KV_INITIAL_BACKOFF_SECONDS -> initial_backoff_seconds
        - RACCOON_KV_MAX_BACKOFF_SECONDS -> max_backoff_seconds

        Keyword overrides win over the environment.
        """
        env_map = {
            "base_url": "RACCOON_KV_URL",
            "request_timeout": "RACCOON_KV_REQUEST_TIMEOUT",
            "watch_timeout": "RACCOON_KV_WATCH_TIMEOUT",
            "initial_backoff_seconds": "RACCOON_KV_INITIAL_BACKOFF_SECONDS",
            "max_backoff_seconds": "RACCOON_KV_MAX_BACKOFF_SECONDS",
        }
        data: dict[str, Any] = {}
        for field, var in env_map.items():
            value = os.environ.get(var)
            if value is not None and value != "":
                data[field] = value
        data.update(overrides)

        if "base_url" not in data:
            raise ConfigError("RACCOON_KV_URL is not set")
        return cls._validate(data, source="environment")

    @classmethod
    def from_yaml(cls, path: Path) -> "ClientConfig":
        """
        Load and validate configuration from a YAML file.

        Args:
            path: Path to YAML configuration file

        Returns:
            Validated configuration

        Raises:
            ConfigError: On missing file, invalid YAML, or validation errors
        """
        path = Path(path)
        if not path.exists():
            raise ConfigError(f"Configuration file not found: {path}")

        try:
            with open(path) as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigError(f"Expected a mapping at the top of {path}")
        return cls._validate(data, source=path.name)

    def to_yaml_string(self) -> str:
        """Convert configuration to a YAML string."""
        return yaml.dump(self.model_dump(), default_flow_style=False, sort_keys=False)

    @classmethod
    def _validate(cls, data: dict[str, Any], source: str) -> "ClientConfig":
        try:
            return cls(**data)
        except ValidationError as e:
            lines = [f"Invalid {cls.__name__} configuration ({source}):"]
            for err in e.errors():
                field_path = ".".join(str(loc) for loc in err["loc"]) or "<root>"
                lines.append(f"  {field_path}: {err['msg']}")
            raise ConfigError("\n".join(lines)) from e
