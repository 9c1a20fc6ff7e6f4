"""
Pluggable provider runtime abstraction for QA case generator.

Every provider (OpenAI, Gemini, Claude) is reached through its
OpenAI-compatible chat completions endpoint, so one runtime class covers all
three. Runtimes only return raw text; parsing happens elsewhere.
"""

from __future__ import annotations
from typing import Any, Dict, Iterable, Mapping, Optional, Protocol
import logging

from openai import OpenAI

from .exceptions import ConfigurationError, ProviderRuntimeError
from .models import Provider

logger = logging.getLogger(__name__)


class ProviderRuntime(Protocol):
    """Protocol for all provider runtime implementations."""

    def generate(
        self,
        prompt: str,
        temperature: float = 0.2,
        max_tokens: int = 2048,
        **kwargs
    ) -> str:
        """Generate text response from prompt."""
        ...

    def get_model_info(self) -> Dict[str, Any]:
        """Get information about the current model."""
        ...


class OpenAICompatibleRuntime:
    """
    Runtime for OpenAI-compatible chat completion APIs.
    Works with OpenAI itself and the compatibility endpoints of Gemini and Claude.
    """

    SYSTEM_PROMPT = (
        "You are a senior QA engineer. Write test cases in exactly the layout the "
        "user asks for. No introductions and no closing remarks."
    )

    def __init__(
        self,
        base_url: str,
        api_key: str,
        model: str,
        name: str = "openai-compatible"
    ):
        self.base_url = base_url
        self.api_key = api_key
        self.model = model
        self.name = name
        self.client = OpenAI(base_url=base_url, api_key=api_key)

    def generate(
        self,
        prompt: str,
        temperature: float = 0.2,
        max_tokens: int = 2048,
        **kwargs
    ) -> str:
        """Generate response using an OpenAI-compatible API."""
        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": self.SYSTEM_PROMPT},
                    {"role": "user", "content": prompt}
                ],
                temperature=temperature,
                max_tokens=max_tokens,
                **kwargs
            )
        except Exception as e:
            raise ProviderRuntimeError(f"Failed to generate response from {self.name}: {e}", self.name)

        content = response.choices[0].message.content if response.choices else None
        if not content or not content.strip():
            raise ProviderRuntimeError(f"{self.name} returned an empty response", self.name)
        return content.strip()

    def get_model_info(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "model": self.model,
            "base_url": self.base_url,
            "type": "openai-compatible"
        }


class RuntimeFactory:
    """Creates one runtime per configured provider."""

    def __init__(self, config: Mapping[str, Any]):
        self.config = config
        self._runtimes = {}

    def register_runtime(self, provider: Provider, runtime: ProviderRuntime) -> None:
        """Register a custom runtime (overrides the configured one)."""
        self._runtimes[Provider(provider)] = runtime

    def create_runtime(self, provider: Provider) -> ProviderRuntime:
        provider = Provider(provider)
        if provider in self._runtimes:
            return self._runtimes[provider]

        api_key = self.config["api_keys"].get(provider.value)
        if not api_key:
            raise ConfigurationError(f"No API key configured for {provider.display_name}")

        runtime = OpenAICompatibleRuntime(
            base_url=self.config["base_urls"][provider.value],
            api_key=api_key,
            model=self.config["models"][provider.value],
            name=provider.value
        )
        self._runtimes[provider] = runtime
        return runtime

    def create_runtimes(self, providers: Iterable[Provider]) -> Dict[Provider, ProviderRuntime]:
        """
        Create runtimes for the requested providers.

        Providers without an API key are skipped with a warning; the workflow
        then reports them as failed instead of silently dropping them.
        """
        runtimes = {}
        for provider in providers:
            try:
                runtimes[Provider(provider)] = self.create_runtime(provider)
            except ConfigurationError as e:
                logger.warning(str(e))
        return runtimes


class MockProviderRuntime:
    """Mock runtime for testing - returns a canned response or raises."""

    def __init__(self, response: str = "", error: Optional[str] = None, name: str = "mock"):
        """
        Args:
            response: Text returned by every generate() call
            error: If set, generate() raises ProviderRuntimeError with this message
        """
        self.response = response
        self.error = error
        self.name = name
        self.call_count = 0
        self.last_prompt = ""

    def generate(
        self,
        prompt: str,
        temperature: float = 0.2,
        max_tokens: int = 2048,
        **kwargs
    ) -> str:
        self.call_count += 1
        self.last_prompt = prompt
        if self.error:
            raise ProviderRuntimeError(self.error, self.name)
        return self.response

    def get_model_info(self) -> Dict[str, Any]:
        return {"name": self.name, "type": "mock"}
