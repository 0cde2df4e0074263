"""Configuration for Brainy.

Settings come from an optional YAML file, then ``BRAINY_*`` environment
variables override individual fields.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Literal

import structlog
import yaml  # type: ignore[import-untyped]
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from brainy.exceptions import ConfigError

logger = structlog.get_logger()

DEFAULT_CONFIG_PATH = Path(".brainy") / "config.yaml"
ENV_PREFIX = "BRAINY_"


class BrainySettings(BaseModel):
    """Runtime settings for the parser host, executor and model adapters."""

    model_config = ConfigDict(frozen=True)

    # Model settings
    provider: Literal["anthropic", "openai", "local", "echo"] = Field(
        default="openai",
        description="Model provider used by the task and model skills",
    )
    default_model: str = Field(
        default="gpt-4.1",
        description="Model selected when a session opens",
    )
    request_timeout_seconds: float = Field(
        default=8.0,
        gt=0,
        description="Timeout for a single model request",
    )
    max_retries: int = Field(
        default=3,
        ge=1,
        le=10,
        description="Transport attempts for a model request",
    )
    local_base_url: str = Field(
        default="http://localhost:8000/v1",
        description="OpenAI-compatible endpoint for the local provider",
    )

    # Execution settings
    workspace_root: Path | None = Field(
        default=None,
        description="Working directory for file and execute skills (cwd when unset)",
    )
    default_context: str = Field(
        default="default",
        min_length=1,
        description="Context selected when a session opens",
    )
    execute_timeout_seconds: float | None = Field(
        default=None,
        gt=0,
        description="Timeout for code run by the execute skill (none when unset)",
    )

    log_level: Literal["debug", "info", "warning", "error"] = Field(
        default="info",
        description="Minimum log level for the CLI",
    )


def _env_overrides() -> dict[str, Any]:
    overrides: dict[str, Any] = {}
    for name in BrainySettings.model_fields:
        value = os.environ.get(f"{ENV_PREFIX}{name.upper()}")
        if value is not None and value.strip():
            overrides[name] = value.strip()
    return overrides


def load_settings(path: str | Path | None = None) -> BrainySettings:
    """Load settings from YAML and the environment.

    Args:
        path: YAML file to read. Defaults to ``.brainy/config.yaml``, which
            may be absent; an explicit path must exist.

    Returns:
        Validated settings

    Raises:
        ConfigError: If the file cannot be read or a value is invalid.
    """
    data: dict[str, Any] = {}
    config_path = Path(path) if path is not None else DEFAULT_CONFIG_PATH

    if config_path.exists():
        try:
            with open(config_path) as f:
                content = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"Failed to read config file {config_path}: {e}")
        if content is not None and not isinstance(content, dict):
            raise ConfigError(f"Config file {config_path} must contain a mapping")
        data.update(content or {})
        logger.debug("config_file_loaded", path=str(config_path))
    elif path is not None:
        raise ConfigError(f"Config file not found: {config_path}")

    data.update(_env_overrides())

    try:
        return BrainySettings(**data)
    except ValidationError as e:
        details = [f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()]
        raise ConfigError("Invalid configuration", details=details)
