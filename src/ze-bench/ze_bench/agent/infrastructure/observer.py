"""StructlogAgentObserver — production observer that delegates to structlog."""

import structlog

from ze_bench.core.run_context import RunContext


class StructlogAgentObserver:
    """Logs agent domain events to structlog.

    Does NOT inherit from AgentObserver (structural typing via Protocol).
    """

    def __init__(self) -> None:
        self._log = structlog.get_logger()

    def conversation_started(
        self, context: RunContext, provider: str, model: str, max_turns: int, tools: int
    ) -> None:
        self._log.info(
            "agent.conversation_started",
            **context.log_fields(),
            provider=provider,
            model=model,
            max_turns=max_turns,
            tools=tools,
        )

    def turn_completed(
        self,
        context: RunContext,
        turn: int,
        tool_calls: int,
        tokens_in: int,
        tokens_out: int,
    ) -> None:
        self._log.debug(
            "agent.turn_completed",
            **context.log_fields(),
            turn=turn,
            tool_calls=tool_calls,
            tokens_in=tokens_in,
            tokens_out=tokens_out,
        )

    def tool_calls_recovered(self, context: RunContext, turn: int, names: list[str]) -> None:
        self._log.info(
            "agent.tool_calls_recovered", **context.log_fields(), turn=turn, names=names
        )

    def tool_failed(self, context: RunContext, tool_name: str, reason: str) -> None:
        self._log.warning(
            "agent.tool_failed", **context.log_fields(), tool_name=tool_name, reason=reason
        )

    def tool_output_compacted(
        self, context: RunContext, tool_name: str, original_size: int, compacted_size: int
    ) -> None:
        self._log.info(
            "agent.tool_output_compacted",
            **context.log_fields(),
            tool_name=tool_name,
            original_size=original_size,
            compacted_size=compacted_size,
        )

    def max_turns_reached(self, context: RunContext, max_turns: int) -> None:
        self._log.warning("agent.max_turns_reached", **context.log_fields(), max_turns=max_turns)

    def conversation_completed(
        self,
        context: RunContext,
        turns: int,
        tool_calls: int,
        cost_usd: float,
        duration_ms: int,
    ) -> None:
        self._log.info(
            "agent.conversation_completed",
            **context.log_fields(),
            turns=turns,
            tool_calls=tool_calls,
            cost_usd=round(cost_usd, 6),
            duration_ms=duration_ms,
        )

    def conversation_failed(self, context: RunContext, reason: str) -> None:
        self._log.error("agent.conversation_failed", **context.log_fields(), reason=reason)


class StructlogPricingObserver:
    """Logs pricing catalogue refreshes to structlog."""

    def __init__(self) -> None:
        self._log = structlog.get_logger()

    def pricing_refreshed(self, models: int) -> None:
        self._log.debug("pricing.refreshed", models=models)

    def pricing_refresh_failed(self, reason: str) -> None:
        self._log.warning("pricing.refresh_failed", reason=reason)
