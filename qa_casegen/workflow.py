"""
QA Case Generation Workflow

Prompt every requested provider → parse each response → aggregate into a Run.

Providers are called one after another. A provider that fails is recorded as
failed on the run; it never aborts the others.
"""

from __future__ import annotations
from typing import Dict, Iterable, Mapping, Optional
import logging

from .exceptions import CaseGenError
from .models import OutputFormat, ParsedOutput, Provider, ProviderFailure, Run
from .nodes import Aggregator, Normalizer
from .nodes.aggregator import ProviderOutcome
from .parsing import parse_output
from .prompts import build_prompt
from .runtime import ProviderRuntime

logger = logging.getLogger(__name__)


class GenerationWorkflow:
    """
    Main workflow orchestrator.

    Holds one runtime per provider; providers without a runtime are reported
    as failed ("not configured") when requested.
    """

    def __init__(
        self,
        runtimes: Mapping[Provider, ProviderRuntime],
        temperature: float = 0.2,
        max_tokens: int = 2048,
        normalizer: Optional[Normalizer] = None
    ):
        self.runtimes = {Provider(p): r for p, r in runtimes.items()}
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.normalizer = normalizer or Normalizer()

    def run(
        self,
        description: str,
        providers: Iterable[Provider],
        output_format: OutputFormat = OutputFormat.GHERKIN
    ) -> Run:
        """
        Generate test cases for a feature description.

        Raises:
            ValueError: If the description is blank
        """
        output_format = OutputFormat(output_format)
        providers = [Provider(p) for p in providers]
        prompt = build_prompt(description, output_format)

        logger.info(f"Generating {output_format.value} test cases with: "
                    f"{', '.join(p.display_name for p in providers)}")

        outcomes: Dict[Provider, ProviderOutcome] = {}
        for provider in providers:
            outcomes[provider] = self._call_provider(provider, prompt, output_format)

        return Aggregator.process(
            outcomes,
            requested=providers,
            output_format=output_format,
            description=description.strip()
        )

    def _call_provider(
        self,
        provider: Provider,
        prompt: str,
        output_format: OutputFormat
    ) -> ProviderOutcome:
        runtime = self.runtimes.get(provider)
        if runtime is None:
            logger.warning(f"{provider.display_name} requested but not configured")
            return ProviderFailure(message=f"{provider.display_name} is not configured")

        try:
            raw = runtime.generate(prompt, temperature=self.temperature, max_tokens=self.max_tokens)
        except CaseGenError as e:
            logger.warning(f"{provider.display_name} failed: {e}")
            return ProviderFailure(message=str(e))

        parsed = parse_output(raw, output_format, self.normalizer)
        logger.info(f"{provider.display_name}: {len(parsed.cases)} test cases")
        return parsed


def parse_run(
    raw_by_provider: Mapping[Provider, str],
    output_format: OutputFormat = OutputFormat.GHERKIN,
    description: str = ""
) -> Run:
    """
    Build a Run from provider text that was already fetched.

    Every provider in ``raw_by_provider`` counts as requested.
    """
    normalizer = Normalizer()
    outcomes: Dict[Provider, ParsedOutput] = {
        Provider(provider): parse_output(raw, output_format, normalizer)
        for provider, raw in raw_by_provider.items()
    }
    return Aggregator.process(
        outcomes,
        requested=list(outcomes),
        output_format=OutputFormat(output_format),
        description=description
    )
