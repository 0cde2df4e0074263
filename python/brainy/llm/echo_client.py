"""Offline model client for dry runs and tests."""

from __future__ import annotations

from brainy.exceptions import ModelSelectionError
from brainy.llm.base import Message, ModelClient, ModelReply, Role, SendRequestOptions


class EchoModelClient(ModelClient):
    """Replies with the request content, without any network call.

    Any model id is accepted unless ``known_models`` is given.
    """

    def __init__(self, model: str = "echo", known_models: list[str] | None = None):
        super().__init__(default_model=model)
        self.known_models = known_models
        self.requests: list[tuple[Role, str, list[Message]]] = []

    @property
    def name(self) -> str:
        return "echo"

    async def select_model(self, model_id: str) -> None:
        if self.known_models is not None and model_id not in self.known_models:
            raise ModelSelectionError(f"Unknown model: {model_id}")
        self._selected_model = model_id

    async def send_request(
        self,
        role: Role | str,
        content: str,
        context_messages: list[Message] | None = None,
        options: SendRequestOptions | None = None,
    ) -> ModelReply:
        resolved = self.validate_role(role)
        model = self.resolve_model(options)
        self.requests.append((resolved, content, list(context_messages or [])))
        return ModelReply(reply=f"[{model}] {content}", model=model)
