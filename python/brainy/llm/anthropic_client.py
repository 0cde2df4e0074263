"""Anthropic model client."""

from __future__ import annotations

import os
from typing import Any

import anthropic
import structlog
from anthropic import AsyncAnthropic
from tenacity import AsyncRetrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from brainy.exceptions import ModelClientError, ModelSelectionError
from brainy.llm.base import Message, ModelClient, ModelReply, Role, SendRequestOptions

logger = structlog.get_logger()

_TRANSIENT_ERRORS = (
    anthropic.APIConnectionError,
    anthropic.RateLimitError,
    anthropic.InternalServerError,
)


class AnthropicModelClient(ModelClient):
    """Model client backed by the Anthropic Messages API."""

    def __init__(
        self,
        api_key: str | None = None,
        model: str = "claude-3-5-sonnet-20241022",
        timeout_seconds: float = 8.0,
        max_retries: int = 3,
    ):
        """
        Initialize the Anthropic client.

        Args:
            api_key: Anthropic API key. If not provided, uses ANTHROPIC_API_KEY env var.
            model: Model selected until a playbook selects another one.
            timeout_seconds: Timeout for each API call.
            max_retries: Attempts for transient transport failures.
        """
        super().__init__(default_model=model)
        self.api_key = api_key or os.environ.get("ANTHROPIC_API_KEY", "")
        self.max_retries = max_retries
        # tenacity owns retries; disable the SDK's own
        self.client = AsyncAnthropic(api_key=self.api_key, timeout=timeout_seconds, max_retries=0)

    @property
    def name(self) -> str:
        return "anthropic"

    async def select_model(self, model_id: str) -> None:
        """Select a model after confirming the API knows it."""
        try:
            await self.client.models.retrieve(model_id)
        except anthropic.NotFoundError as e:
            raise ModelSelectionError(f'Model "{model_id}" is not available: {e}', raw=e)
        except anthropic.APIError as e:
            raise ModelSelectionError(f'Could not select model "{model_id}": {e}', raw=e)

        logger.info("model_selected", client=self.name, model=model_id)
        self._selected_model = model_id

    async def send_request(
        self,
        role: Role | str,
        content: str,
        context_messages: list[Message] | None = None,
        options: SendRequestOptions | None = None,
    ) -> ModelReply:
        """Send the context plus the new message to the Messages API."""
        resolved_role = self.validate_role(role)
        model = self.resolve_model(options)
        options = options or SendRequestOptions()

        kwargs: dict[str, Any] = {
            "model": model,
            "messages": self.to_chat_messages(context_messages, resolved_role, content),
            "max_tokens": options.max_tokens,
        }
        if options.temperature is not None:
            kwargs["temperature"] = options.temperature

        logger.debug(
            "anthropic_send_request",
            model=model,
            message_count=len(kwargs["messages"]),
        )

        try:
            async for attempt in AsyncRetrying(
                stop=stop_after_attempt(self.max_retries),
                wait=wait_exponential(multiplier=1, min=1, max=10),
                retry=retry_if_exception_type(_TRANSIENT_ERRORS),
                reraise=True,
            ):
                with attempt:
                    response = await self.client.messages.create(**kwargs)
        except anthropic.APIError as e:
            logger.error("anthropic_request_failed", model=model, error=str(e))
            raise ModelClientError(f"Model request failed: {e}", raw=e)

        text = "".join(block.text for block in response.content if block.type == "text")

        return ModelReply(
            reply=text,
            raw=response,
            model=response.model,
            usage={
                "prompt_tokens": response.usage.input_tokens,
                "completion_tokens": response.usage.output_tokens,
                "total_tokens": response.usage.input_tokens + response.usage.output_tokens,
            },
        )
