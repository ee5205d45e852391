"""Error types raised by agent infrastructure."""

from ze_bench.core.errors import ZeBenchError


class ProviderTransportError(ZeBenchError):
    """Raised when a provider cannot be reached or rejects the request."""

    def __init__(self, provider: str, reason: str, retriable: bool = False) -> None:
        self.provider = provider
        super().__init__(f"Failed to call provider '{provider}': {reason}", retriable=retriable)


class MissingCredentialsError(ZeBenchError):
    """Raised at construction when an adapter has no credentials to work with."""

    def __init__(self, provider: str, env_var: str) -> None:
        self.env_var = env_var
        super().__init__(
            f"Failed to create provider '{provider}': {env_var} environment variable is required"
        )


class AgentTypeNotSupportedError(ZeBenchError):
    """Raised when the agent type specified in config is not a known agent type."""

    def __init__(self, agent_type: str) -> None:
        super().__init__(
            f"Failed to create provider adapter: unsupported agent type '{agent_type}'"
        )


class AgentExecutableNotFoundError(ZeBenchError):
    """Raised at construction when a subprocess-backed adapter's executable is not on PATH."""

    def __init__(self, provider: str, executable: str) -> None:
        super().__init__(
            f"Failed to create provider '{provider}': executable '{executable}' not found on PATH"
        )
