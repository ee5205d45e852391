"""Provider registry — maps AgentConfig.type to a ready-to-use ProviderAdapter."""

from ze_bench.agent.application.driver import ConversationDriver
from ze_bench.agent.domain.observer import AgentObserver
from ze_bench.agent.domain.pricing import CostEstimator
from ze_bench.agent.domain.provider import ProviderAdapter
from ze_bench.agent.infrastructure.claude_cli import ClaudeCliAdapter
from ze_bench.agent.infrastructure.claude_sdk import ClaudeAgentSdkAdapter
from ze_bench.agent.infrastructure.errors import AgentTypeNotSupportedError
from ze_bench.agent.infrastructure.litellm_provider import LiteLLMChatProvider
from ze_bench.agent.infrastructure.openrouter import OpenRouterChatProvider
from ze_bench.config.domain.agent import AgentConfig
from ze_bench.config.domain.settings import HarnessSettings
from ze_bench.core.run_context import RunContext


def create_provider_adapter(
    config: AgentConfig,
    settings: HarnessSettings,
    pricing: CostEstimator,
    observer: AgentObserver,
    context: RunContext,
) -> ProviderAdapter:
    """Return the ProviderAdapter for *config*.

    Raises:
        AgentTypeNotSupportedError: if config.type is not a known agent type.
        MissingCredentialsError: if the chosen provider's API key is not set.
        AgentExecutableNotFoundError: if the CLI adapter's executable is missing.
    """
    if config.type == "anthropic":
        return ConversationDriver(
            provider=LiteLLMChatProvider(settings=settings, model=config.model),
            pricing=pricing,
            observer=observer,
            context=context,
        )
    if config.type == "openrouter":
        return ConversationDriver(
            provider=OpenRouterChatProvider(
                settings=settings,
                model=config.model,
                fallback_models=config.fallback_models,
            ),
            pricing=pricing,
            observer=observer,
            context=context,
        )
    if config.type == "claude-cli":
        return ClaudeCliAdapter(observer=observer, context=context, model=config.model)
    if config.type == "claude-sdk":
        return ClaudeAgentSdkAdapter(observer=observer, context=context, model=config.model)

    raise AgentTypeNotSupportedError(agent_type=config.type)
