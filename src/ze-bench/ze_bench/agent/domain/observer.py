"""AgentObserver port — domain events emitted while a conversation is driven."""

from typing import Protocol

from ze_bench.core.run_context import RunContext


class AgentObserver(Protocol):
    """Observer port for agent domain events.

    Implementations may log to structlog, record for tests, or emit metrics.
    """

    def conversation_started(
        self, context: RunContext, provider: str, model: str, max_turns: int, tools: int
    ) -> None: ...

    def turn_completed(
        self,
        context: RunContext,
        turn: int,
        tool_calls: int,
        tokens_in: int,
        tokens_out: int,
    ) -> None: ...

    def tool_calls_recovered(self, context: RunContext, turn: int, names: list[str]) -> None: ...

    def tool_failed(self, context: RunContext, tool_name: str, reason: str) -> None: ...

    def tool_output_compacted(
        self, context: RunContext, tool_name: str, original_size: int, compacted_size: int
    ) -> None: ...

    def max_turns_reached(self, context: RunContext, max_turns: int) -> None: ...

    def conversation_completed(
        self,
        context: RunContext,
        turns: int,
        tool_calls: int,
        cost_usd: float,
        duration_ms: int,
    ) -> None: ...

    def conversation_failed(self, context: RunContext, reason: str) -> None: ...


class PricingObserver(Protocol):
    def pricing_refreshed(self, models: int) -> None: ...

    def pricing_refresh_failed(self, reason: str) -> None: ...
