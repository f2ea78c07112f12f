"""
Provider factory - creates the backend named in the provider config.
"""

from typing import Optional

from loguru import logger

from aicoder.core.config import Config
from aicoder.core.errors import InvalidConfigError
from aicoder.core.runtime import LocalRuntime, ProviderConfig
from aicoder.llm.base_client import BaseProvider
from aicoder.llm.mock_client import MockProvider
from aicoder.llm.ollama_client import OllamaProvider

SUPPORTED_PROVIDERS = ("ollama", "mock")


def create_provider(provider_config: ProviderConfig) -> BaseProvider:
    """
    Create a provider backend.

    Args:
        provider_config: Which provider to use and where it lives

    Returns:
        Initialized provider

    Raises:
        InvalidConfigError: If the provider name is unknown
    """
    name = provider_config.provider.lower()
    logger.info(f"Creating provider: {name}")

    if name == "ollama":
        return OllamaProvider(provider_config)
    if name == "mock":
        logger.warning("Mock provider active - responses are simulated.")
        return MockProvider()

    raise InvalidConfigError(
        f"Unknown provider '{provider_config.provider}'. Valid options: {', '.join(SUPPORTED_PROVIDERS)}"
    )


def provider_config_from(
    config: Config,
    host: Optional[str] = None,
    provider: Optional[str] = None,
) -> ProviderConfig:
    """Build a ProviderConfig from global settings and CLI overrides."""
    return ProviderConfig(
        provider=(provider or config.provider).lower(),
        endpoint=config.resolve_host(host),
        timeout_secs=config.request_timeout,
        max_retries=config.max_retries,
    )


def create_runtime(
    config: Config,
    host: Optional[str] = None,
    provider: Optional[str] = None,
) -> LocalRuntime:
    """Convenience function: provider config, provider, and runtime in one step."""
    provider_config = provider_config_from(config, host=host, provider=provider)
    return LocalRuntime(provider_config, create_provider(provider_config))
