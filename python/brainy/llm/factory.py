"""Model client construction from settings."""

from __future__ import annotations

from brainy.config import BrainySettings
from brainy.exceptions import ConfigError
from brainy.llm.base import ModelClient


def create_model_client(
    settings: BrainySettings,
    provider: str | None = None,
    model: str | None = None,
) -> ModelClient:
    """Create a model client instance.

    Provider SDKs are imported only when their client is requested.

    Args:
        settings: Loaded settings (provider, default model, timeouts)
        provider: Provider override (anthropic, openai, local, echo)
        model: Model override

    Returns:
        Model client with the model selected locally (not yet verified)

    Raises:
        ConfigError: For an unknown provider.
    """
    provider = provider or settings.provider
    model = model or settings.default_model

    if provider == "echo":
        from brainy.llm.echo_client import EchoModelClient

        return EchoModelClient(model=model)

    if provider == "openai":
        from brainy.llm.openai_client import OpenAIModelClient

        return OpenAIModelClient(
            model=model,
            timeout_seconds=settings.request_timeout_seconds,
            max_retries=settings.max_retries,
        )

    if provider == "anthropic":
        from brainy.llm.anthropic_client import AnthropicModelClient

        return AnthropicModelClient(
            model=model,
            timeout_seconds=settings.request_timeout_seconds,
            max_retries=settings.max_retries,
        )

    if provider == "local":
        from brainy.llm.local_client import LocalModelClient

        return LocalModelClient(
            base_url=settings.local_base_url,
            model=model,
            timeout_seconds=settings.request_timeout_seconds,
            max_retries=settings.max_retries,
        )

    raise ConfigError(f"Unknown provider: {provider}")
