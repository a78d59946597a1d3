"""Configuration loader for the inference probe.

Reads an optional YAML file, validates its structure and resolves the bearer
token either from the file itself or from the environment variable named by
`envKey`. The result is a :class:`ProbeCfg` value that is handed to the probe
and the client at construction time.
"""

from __future__ import annotations

import os
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field, HttpUrl, ValidationError, model_validator

DEFAULT_ENDPOINT = "https://by62y2zqbeqalfay.eu-west-1.aws.endpoints.huggingface.cloud"
DEFAULT_BASE_URL = "https://api-inference.huggingface.co/models/"
# the default endpoint is public and accepts any key
DEFAULT_API_KEY = "public-endpoint-no-key-needed"
DEFAULT_PROMPT = "Alan Turing was"


class AuthConfig(BaseModel):
    """Static bearer token, given inline or through an environment variable."""

    key: str | None = None
    envKey: str | None = None

    @model_validator(mode="after")
    def _resolve_key(self) -> "AuthConfig":
        if self.envKey:
            value = os.getenv(self.envKey)
            if not value:
                raise ValueError(f"Environment variable '{self.envKey}' not set or empty")
            self.key = value
        elif self.key is None:
            self.key = DEFAULT_API_KEY
        if not self.key:
            raise ValueError("auth key must not be empty")
        return self

    @property
    def api_key(self) -> str:
        assert self.key is not None
        return self.key


class ProbeCfg(BaseModel):
    """Run-time configuration for one probe run."""

    model_config = ConfigDict(validate_default=True)

    endpoint: HttpUrl = DEFAULT_ENDPOINT  # type: ignore[assignment]
    base_url: HttpUrl = DEFAULT_BASE_URL  # type: ignore[assignment]
    auth: AuthConfig = Field(default_factory=AuthConfig)
    prompt: str = DEFAULT_PROMPT
    target: str | None = None  # typed-client target, defaults to endpoint

    connect_timeout: float = 10.0
    read_timeout: float = 360.0  # 6 minutes
    max_keepalive_connections: int = 5
    keepalive_expiry: float = 300.0  # 5 minutes

    @property
    def api_key(self) -> str:
        return self.auth.api_key

    def typed_target(self) -> str:
        return self.target or str(self.endpoint)


def default_config_path() -> Path:
    """Return ``$INFERENCE_PROBE_CONFIG_PATH`` or ``~/.inference-probe.yaml``."""
    env = os.getenv("INFERENCE_PROBE_CONFIG_PATH")
    if env:
        return Path(env)
    return Path.home() / ".inference-probe.yaml"


def parse_config(raw: object) -> ProbeCfg:
    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ValueError("probe config must be a YAML mapping")
    return ProbeCfg(**raw)


def load_config(path: str | Path | None = None) -> ProbeCfg:
    """Parse *path* and return the validated :class:`ProbeCfg`."""

    path = Path(path) if path is not None else default_config_path()
    if not path.exists():
        raise FileNotFoundError(path)

    with path.open("rt", encoding="utf-8") as fp:
        data = yaml.safe_load(fp)

    try:
        return parse_config(data)
    except ValidationError as exc:
        raise ValueError(f"Invalid probe config in '{path}': {exc}") from exc
