"""
Segmenter Node (Deterministic)

Splits one raw provider response into candidate record chunks and separates
out the trailing coverage summary. Splitting never drops text: the preamble
plus the concatenated chunks is exactly the pre-summary text.
"""

from __future__ import annotations
import re
import logging
from dataclasses import dataclass, field
from typing import List

from ..models import OutputFormat

logger = logging.getLogger(__name__)


# Markdown decoration ("**", "##", "__") around a marker belongs to the marker.
SUMMARY_MARKER = re.compile(
    r'(?:[*_#]+[ \t]*)?coverage summary[ \t]*:(?:[ \t]*[*_]+)?',
    re.IGNORECASE
)

GHERKIN_BOUNDARY = re.compile(r'((?:[*_#]+[ \t]*)?scenario(?: outline)?:)', re.IGNORECASE)

PLAIN_BOUNDARY = (
    r'^[ \t]*(?:[*_#]+[ \t]*)?'
    r'(?:\d+\.[ \t]|test case\b[ \t]*#?\d*[ \t]*[:.])'
)
PLAIN_FIRST_ITEM = re.compile(PLAIN_BOUNDARY, re.IGNORECASE | re.MULTILINE)
PLAIN_SPLIT = re.compile(f'(?={PLAIN_BOUNDARY})', re.IGNORECASE | re.MULTILINE)


@dataclass
class SegmentResult:
    """Result of segmenting one provider response."""
    chunks: List[str] = field(default_factory=list)
    summary: str = ""
    preamble: str = ""       # text before the first boundary
    fallback: bool = False   # no boundary found, chunks holds the whole cases text

    @property
    def cases_text(self) -> str:
        return self.preamble + "".join(self.chunks)


class Segmenter:
    """
    Node 1: split raw provider text into chunks.

    Purely deterministic, cannot fail. The worst case is one large malformed
    chunk flagged as ``fallback``.
    """

    @staticmethod
    def process(raw: str, output_format: OutputFormat) -> SegmentResult:
        cases_text, summary = Segmenter.split_summary(raw)

        if output_format == OutputFormat.GHERKIN:
            preamble, chunks = Segmenter._split_gherkin(cases_text)
        else:
            preamble, chunks = Segmenter._split_plain(cases_text)

        if not chunks and cases_text.strip():
            logger.debug("No scenario boundary found, using whole text as one chunk")
            return SegmentResult(chunks=[cases_text], summary=summary, fallback=True)

        return SegmentResult(chunks=chunks, summary=summary, preamble=preamble)

    @staticmethod
    def split_summary(raw: str) -> tuple[str, str]:
        """Return (cases_text, summary) around the first coverage summary marker."""
        match = SUMMARY_MARKER.search(raw)
        if not match:
            return raw, ""
        return raw[:match.start()], raw[match.end():].strip()

    @staticmethod
    def _split_gherkin(text: str) -> tuple[str, List[str]]:
        # The capture group keeps each matched boundary so it can be re-prepended
        pieces = GHERKIN_BOUNDARY.split(text)
        preamble = pieces[0]
        chunks = [
            pieces[i] + pieces[i + 1]
            for i in range(1, len(pieces) - 1, 2)
        ]
        return preamble, chunks

    @staticmethod
    def _split_plain(text: str) -> tuple[str, List[str]]:
        first = PLAIN_FIRST_ITEM.search(text)
        if not first:
            return text, []

        preamble = text[:first.start()]
        remainder = text[first.start():]
        chunks = [piece for piece in PLAIN_SPLIT.split(remainder) if piece]
        return preamble, chunks


def segment(raw: str, output_format: OutputFormat = OutputFormat.GHERKIN) -> SegmentResult:
    """Convenience function to segment one provider response."""
    return Segmenter.process(raw, output_format)
