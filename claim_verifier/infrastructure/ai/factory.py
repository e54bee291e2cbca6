"""Factory for creating and managing AI providers."""

from typing import Dict, Optional, Type

from ...domain.ports.ai_provider import AIProvider, ProviderConfigurationError
from ..settings import PipelineSettings
from .chatgpt_adapter import ChatGPTAdapter, ChatGPTConfig
from .gemini_adapter import GeminiAdapter, GeminiConfig


class AIProviderFactory:
    """Factory for creating and managing AI providers."""

    def __init__(self, settings: Optional[PipelineSettings] = None):
        """Initialize the factory."""
        self._settings = settings or PipelineSettings.from_env()
        self._providers: Dict[str, Type[AIProvider]] = {}
        self._instances: Dict[str, AIProvider] = {}

        # Register default providers
        self.register_provider("gemini", GeminiAdapter)
        self.register_provider("chatgpt", ChatGPTAdapter)

    def register_provider(self, name: str, provider_class: Type[AIProvider]) -> None:
        """Register a new AI provider.

        Args:
            name: Provider name
            provider_class: Provider class
        """
        self._providers[name] = provider_class

    async def create_provider(self, name: Optional[str] = None, **kwargs) -> AIProvider:
        """Create and initialize a provider instance.

        Args:
            name: Provider name, defaults to the configured provider
            **kwargs: Provider-specific configuration overrides

        Returns:
            Initialized provider instance

        Raises:
            ProviderConfigurationError: If the provider is missing, unknown or has no key
        """
        name = name or self._settings.llm_provider
        if not name:
            raise ProviderConfigurationError(
                "No language model configured: set GOOGLE_AI_API_KEY or OPENAI_API_KEY"
            )
        if name not in self._providers:
            raise ProviderConfigurationError(f"Unknown language model provider '{name}' (LLM_PROVIDER)")

        if name not in self._instances:
            if name == "gemini":
                if not self._settings.google_ai_api_key:
                    raise ProviderConfigurationError("GOOGLE_AI_API_KEY is not configured")
                config = GeminiConfig(
                    api_key=self._settings.google_ai_api_key,
                    model=self._settings.gemini_model,
                    timeout=self._settings.upstream_timeout,
                    **kwargs
                )
                provider = self._providers[name](config=config)
            elif name == "chatgpt":
                if not self._settings.openai_api_key:
                    raise ProviderConfigurationError("OPENAI_API_KEY is not configured")
                config = ChatGPTConfig(
                    api_key=self._settings.openai_api_key,
                    model=self._settings.openai_model,
                    timeout=self._settings.upstream_timeout,
                    **kwargs
                )
                provider = self._providers[name](config=config)
            else:
                provider = self._providers[name](**kwargs)

            await provider.initialize()
            self._instances[name] = provider

        return self._instances[name]

    def get_provider(self, name: str) -> Optional[AIProvider]:
        """Get an existing provider instance.

        Args:
            name: Provider name

        Returns:
            Provider instance if exists, None otherwise
        """
        return self._instances.get(name)

    @property
    def available_providers(self) -> Dict[str, bool]:
        """Get dictionary of registered providers and their availability."""
        return {
            name: name in self._instances
            for name in self._providers
        }

    async def shutdown(self) -> None:
        """Shutdown all provider instances."""
        for provider in self._instances.values():
            await provider.shutdown()
        self._instances.clear()
