"""
Normalizer Node

Assigns identifiers and turns extractor drafts into TestCase records. The only
non-deterministic part of parsing is the identifier.
"""

from __future__ import annotations
import itertools
import logging
from typing import Iterator, List, Optional
from uuid import uuid4

from ..models import OutputFormat, TestCase, TestCaseDraft

logger = logging.getLogger(__name__)


class IdGenerator:
    """
    Process-unique test case ids.

    A monotonically increasing counter guarantees uniqueness inside the
    process; the random process token keeps ids from runs reloaded out of
    history (written by an earlier process) from colliding with new ones.
    """

    def __init__(self, prefix: str = "tc"):
        self.prefix = prefix
        self.token = uuid4().hex[:8]
        self._counter: Iterator[int] = itertools.count(1)

    def next_id(self) -> str:
        return f"{self.prefix}-{self.token}-{next(self._counter):06d}"


_default_ids = IdGenerator()


class Normalizer:
    """Node 4: build provider-agnostic TestCase records from drafts."""

    def __init__(self, id_generator: Optional[IdGenerator] = None):
        self.ids = id_generator or _default_ids

    def process(self, draft: TestCaseDraft, output_format: OutputFormat) -> TestCase:
        return TestCase(
            id=self.ids.next_id(),
            title=draft.title,
            steps=list(draft.steps),
            expected_result=draft.expected_result,
            priority=draft.priority,
            format=output_format
        )

    def process_batch(self, drafts: List[TestCaseDraft], output_format: OutputFormat) -> List[TestCase]:
        return [self.process(draft, output_format) for draft in drafts]


def normalize(draft: TestCaseDraft, output_format: OutputFormat = OutputFormat.GHERKIN) -> TestCase:
    """Convenience function using the process-wide id generator."""
    return Normalizer().process(draft, output_format)
