"""Model transport abstraction for Brainy skills.

Provider adapters are imported lazily through :func:`create_model_client`.
"""

from brainy.llm.base import Message, ModelClient, ModelReply, Role, SendRequestOptions
from brainy.llm.echo_client import EchoModelClient
from brainy.llm.factory import create_model_client

__all__ = [
    "EchoModelClient",
    "Message",
    "ModelClient",
    "ModelReply",
    "Role",
    "SendRequestOptions",
    "create_model_client",
]
