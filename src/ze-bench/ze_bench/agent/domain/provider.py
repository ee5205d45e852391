"""Provider ports — the adapter interface callers use and the turn-level port the driver uses."""

from collections.abc import Sequence
from typing import Protocol

from ze_bench.agent.domain.conversation import HistoryEntry, ProviderTurn
from ze_bench.agent.domain.request import AgentRequest
from ze_bench.agent.domain.response import AgentResponse
from ze_bench.agent.domain.tool import ToolDefinition


class ProviderAdapter(Protocol):
    """Structural interface satisfied by every agent backend.

    ``send`` never raises for tool-handler failures; it raises
    ``ProviderTransportError`` when the backend itself cannot be reached.
    """

    name: str

    async def send(self, request: AgentRequest) -> AgentResponse: ...


class ChatProvider(Protocol):
    """One request/response exchange with a tool-calling chat model.

    Implementations translate the neutral history into their wire format and
    normalize the reply into a ProviderTurn.
    """

    name: str
    model: str
    default_max_turns: int

    async def complete(
        self,
        history: Sequence[HistoryEntry],
        tools: Sequence[ToolDefinition],
    ) -> ProviderTurn: ...
