"""
Aggregator Node

Combines per-provider parse results into one Run. Providers stay independent
columns: nothing is merged or deduplicated across them, and completion order
does not matter.
"""

from __future__ import annotations
import logging
from typing import Iterable, Mapping, Optional, Union

from ..models import (
    OutputFormat,
    ParsedOutput,
    Provider,
    ProviderFailure,
    ProviderResult,
    Run
)

logger = logging.getLogger(__name__)

ProviderOutcome = Union[ParsedOutput, ProviderFailure]

NO_RESULT_MESSAGE = "No result was reported for this provider"


class Aggregator:
    """Node 5: build a Run from whatever the network layer reported."""

    @staticmethod
    def process(
        outcomes: Mapping[Provider, ProviderOutcome],
        requested: Optional[Iterable[Provider]] = None,
        output_format: Optional[OutputFormat] = None,
        description: str = ""
    ) -> Run:
        """
        Args:
            outcomes: Parse result or failure per provider, any order
            requested: Providers the user selected (defaults to the outcome keys)
            output_format: Format the prompts asked for
            description: Feature description the run was generated from

        Returns:
            Run with one ProviderResult per requested provider
        """
        requested_list = Aggregator._dedupe(requested if requested is not None else outcomes.keys())

        ignored = [p.value for p in outcomes if p not in requested_list]
        if ignored:
            logger.warning(f"Ignoring results from providers that were not requested: {ignored}")

        results = {}
        for provider in requested_list:
            outcome = outcomes.get(provider)
            results[provider] = Aggregator._to_result(provider, outcome)

        run = Run(
            requested=tuple(requested_list),
            results=results,
            format=output_format,
            description=description
        )

        failed = [p.value for p in requested_list if results[p].failed]
        logger.info(f"Aggregated run {run.id}: {run.total_cases} cases from "
                    f"{len(requested_list) - len(failed)} providers, {len(failed)} failed")
        return run

    @staticmethod
    def _to_result(provider: Provider, outcome: Optional[ProviderOutcome]) -> ProviderResult:
        if outcome is None:
            return ProviderResult(provider=provider, failed=True, error=NO_RESULT_MESSAGE)
        if isinstance(outcome, ProviderFailure):
            return ProviderResult(provider=provider, failed=True, error=outcome.message)
        return ProviderResult(
            provider=provider,
            cases=tuple(outcome.cases),
            summary=outcome.summary
        )

    @staticmethod
    def _dedupe(providers: Iterable[Provider]) -> list:
        seen = []
        for provider in providers:
            provider = Provider(provider)
            if provider not in seen:
                seen.append(provider)
        return seen


def aggregate(
    outcomes: Mapping[Provider, ProviderOutcome],
    requested: Optional[Iterable[Provider]] = None,
    **kwargs
) -> Run:
    """Convenience function to aggregate provider outcomes."""
    return Aggregator.process(outcomes, requested, **kwargs)
