"""FakeChatProvider — scripted ChatProvider for driver tests."""

import asyncio
from collections.abc import Sequence

from ze_bench.agent.domain.conversation import HistoryEntry, ProviderTurn
from ze_bench.agent.domain.tool import ToolDefinition


class FakeChatProvider:
    """Returns scripted turns in order and records every call it receives.

    Once the script runs out the last turn is repeated, so a script of one
    tool-calling turn keeps the driver looping until its budget is spent.
    Every call waits *delay_s* seconds before answering.
    """

    def __init__(
        self,
        turns: Sequence[ProviderTurn | Exception],
        name: str = "fake",
        model: str = "fake-model",
        default_max_turns: int = 10,
        delay_s: float = 0.0,
    ) -> None:
        self.name = name
        self.model = model
        self.default_max_turns = default_max_turns
        self._turns = list(turns)
        self._delay_s = delay_s
        self.calls: list[tuple[list[HistoryEntry], list[ToolDefinition]]] = []

    async def complete(
        self,
        history: Sequence[HistoryEntry],
        tools: Sequence[ToolDefinition],
    ) -> ProviderTurn:
        index = min(len(self.calls), len(self._turns) - 1)
        self.calls.append((list(history), list(tools)))
        if self._delay_s:
            await asyncio.sleep(self._delay_s)
        turn = self._turns[index]
        if isinstance(turn, Exception):
            raise turn
        return turn
