"""ClaudeAgentSdkAdapter — runs the Claude Code agent in-process through the Claude Agent SDK."""

from claude_agent_sdk import query
from claude_agent_sdk._errors import ClaudeSDKError
from claude_agent_sdk.types import (
    AssistantMessage,
    ClaudeAgentOptions,
    ResultMessage,
    TextBlock,
    ToolUseBlock,
)

from ze_bench.agent.domain.observer import AgentObserver
from ze_bench.agent.domain.request import AgentRequest
from ze_bench.agent.domain.response import AgentResponse
from ze_bench.agent.infrastructure.claude_cli import DEFAULT_MAX_TURNS, flatten_prompt
from ze_bench.agent.infrastructure.errors import ProviderTransportError
from ze_bench.core.run_context import RunContext


class ClaudeAgentSdkAdapter:
    """Satisfies the ProviderAdapter protocol via ``claude_agent_sdk.query``.

    Like the CLI adapter, the agent uses its own built-in tools inside the
    workspace; system messages become the SDK system prompt and the rest of
    the conversation is flattened into the query prompt.
    """

    name = "claude-sdk"

    def __init__(
        self,
        observer: AgentObserver,
        context: RunContext,
        model: str | None = None,
    ) -> None:
        self._observer = observer
        self._context = context
        self._model = model

    async def send(self, request: AgentRequest) -> AgentResponse:
        """Run one SDK session for *request*.

        Raises:
            ProviderTransportError: on SDK errors or a missing/error ResultMessage.
        """
        max_turns = request.max_turns or DEFAULT_MAX_TURNS
        self._observer.conversation_started(
            context=self._context,
            provider=self.name,
            model=self._model or "default",
            max_turns=max_turns,
            tools=0,
        )

        system_prompt = "\n\n".join(m.content for m in request.messages if m.role == "system")
        options = ClaudeAgentOptions(
            model=self._model,
            system_prompt=system_prompt or None,
            cwd=request.workspace_dir,
            max_turns=max_turns,
            permission_mode="bypassPermissions",
            setting_sources=[],
        )
        prompt = flatten_prompt([m for m in request.messages if m.role != "system"])

        try:
            result_message, texts, tool_calls = await self._collect(prompt=prompt, options=options)
        except ProviderTransportError as exc:
            self._observer.conversation_failed(context=self._context, reason=str(exc))
            raise

        usage = result_message.usage or {}
        cost_usd = result_message.total_cost_usd or 0.0
        self._observer.conversation_completed(
            context=self._context,
            turns=result_message.num_turns,
            tool_calls=tool_calls,
            cost_usd=cost_usd,
            duration_ms=result_message.duration_ms,
        )
        return AgentResponse(
            content=result_message.result or "\n\n".join(texts),
            tokens_in=usage.get("input_tokens"),
            tokens_out=usage.get("output_tokens"),
            cost_usd=cost_usd,
            tool_calls=tool_calls,
            turns=result_message.num_turns,
            model=self._model,
        )

    async def _collect(
        self, prompt: str, options: ClaudeAgentOptions
    ) -> tuple[ResultMessage, list[str], int]:
        result_message: ResultMessage | None = None
        texts: list[str] = []
        tool_calls = 0

        try:
            async for message in query(prompt=prompt, options=options):
                if isinstance(message, ResultMessage):
                    result_message = message
                elif isinstance(message, AssistantMessage):
                    for block in message.content:
                        if isinstance(block, TextBlock):
                            texts.append(block.text)
                        elif isinstance(block, ToolUseBlock):
                            tool_calls += 1
        except ClaudeSDKError as exc:
            raise ProviderTransportError(provider=self.name, reason=str(exc), retriable=True) from exc
        except Exception as exc:
            # The SDK raises a bare Exception when its message reader hits a
            # fatal error such as the CLI subprocess exiting.
            raise ProviderTransportError(provider=self.name, reason=str(exc), retriable=True) from exc

        if result_message is None:
            raise ProviderTransportError(provider=self.name, reason="no ResultMessage in response stream")
        if result_message.is_error:
            raise ProviderTransportError(
                provider=self.name,
                reason=f"agent returned error response: {result_message.result}",
            )
        return result_message, texts, tool_calls
