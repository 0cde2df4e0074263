"""Model client for self-hosted models (vLLM, Ollama, etc.)."""

from __future__ import annotations

from typing import Any

import httpx
import structlog
from tenacity import AsyncRetrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from brainy.exceptions import ModelClientError, ModelSelectionError
from brainy.llm.base import Message, ModelClient, ModelReply, Role, SendRequestOptions

logger = structlog.get_logger()

_TRANSIENT_ERRORS = (httpx.TransportError,)


class LocalModelClient(ModelClient):
    """Model client for a local server with an OpenAI-compatible API."""

    def __init__(
        self,
        base_url: str = "http://localhost:8000/v1",
        model: str | None = None,
        api_key: str = "not-needed",
        timeout_seconds: float = 120.0,
        max_retries: int = 3,
    ):
        """
        Initialize the local client.

        Args:
            base_url: Base URL for the local API server.
            model: Model selected until a playbook selects another one.
            api_key: API key (often not needed for local deployments).
            timeout_seconds: Timeout for each API call.
            max_retries: Attempts for transient transport failures.
        """
        super().__init__(default_model=model)
        self.base_url = base_url.rstrip("/")
        self.max_retries = max_retries
        self.client = httpx.AsyncClient(
            base_url=self.base_url,
            headers={"Authorization": f"Bearer {api_key}"},
            timeout=timeout_seconds,
        )

    @property
    def name(self) -> str:
        return "local"

    async def list_models(self) -> list[str]:
        """Return the model ids served by the local API."""
        try:
            response = await self.client.get("/models")
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise ModelClientError(f"Could not list local models: {e}", raw=e)
        return [entry.get("id", "") for entry in response.json().get("data", [])]

    async def select_model(self, model_id: str) -> None:
        """Select a model after confirming the server serves it."""
        try:
            available = await self.list_models()
        except ModelClientError as e:
            raise ModelSelectionError(f'Could not select model "{model_id}": {e}', raw=e.raw)
        if model_id not in available:
            raise ModelSelectionError(f'Model "{model_id}" is not available on {self.base_url}')

        logger.info("model_selected", client=self.name, model=model_id)
        self._selected_model = model_id

    async def send_request(
        self,
        role: Role | str,
        content: str,
        context_messages: list[Message] | None = None,
        options: SendRequestOptions | None = None,
    ) -> ModelReply:
        """Post the context plus the new message to ``/chat/completions``."""
        resolved_role = self.validate_role(role)
        model = self.resolve_model(options)
        options = options or SendRequestOptions()

        body: dict[str, Any] = {
            "model": model,
            "messages": self.to_chat_messages(context_messages, resolved_role, content),
            "max_tokens": options.max_tokens,
        }
        if options.temperature is not None:
            body["temperature"] = options.temperature

        logger.debug("local_send_request", model=model, message_count=len(body["messages"]))

        try:
            async for attempt in AsyncRetrying(
                stop=stop_after_attempt(self.max_retries),
                wait=wait_exponential(multiplier=1, min=1, max=10),
                retry=retry_if_exception_type(_TRANSIENT_ERRORS),
                reraise=True,
            ):
                with attempt:
                    response = await self.client.post("/chat/completions", json=body)
                    response.raise_for_status()
        except httpx.HTTPError as e:
            logger.error("local_request_failed", model=model, error=str(e))
            raise ModelClientError(f"Model request failed: {e}", raw=e)

        data = response.json()
        choices = data.get("choices") or []
        if not choices:
            raise ModelClientError("Model returned no choices", raw=data)

        usage = data.get("usage") or {}
        return ModelReply(
            reply=choices[0].get("message", {}).get("content") or "",
            raw=data,
            model=data.get("model", model),
            usage={
                "prompt_tokens": usage.get("prompt_tokens", 0),
                "completion_tokens": usage.get("completion_tokens", 0),
                "total_tokens": usage.get("total_tokens", 0),
            },
        )

    async def close(self) -> None:
        """Close the HTTP client."""
        await self.client.aclose()
