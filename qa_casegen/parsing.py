"""
Single parse entry point for provider output.

Parameterized by output format only: the same rules apply whichever provider
produced the text.
"""

from __future__ import annotations
import logging
from typing import Optional

from .models import OutputFormat, ParsedOutput
from .nodes import Normalizer, RecordExtractor, Segmenter

logger = logging.getLogger(__name__)


def parse_output(
    raw: str,
    output_format: OutputFormat = OutputFormat.GHERKIN,
    normalizer: Optional[Normalizer] = None
) -> ParsedOutput:
    """
    Parse one provider response into test cases and a coverage summary.

    Total over non-blank input: text without any recognizable marker becomes a
    single "Untitled" record instead of being dropped.
    """
    output_format = OutputFormat(output_format)
    normalizer = normalizer or Normalizer()

    if not raw or not raw.strip():
        logger.debug("Blank provider output, nothing to parse")
        return ParsedOutput()

    segments = Segmenter.process(raw, output_format)

    if segments.fallback:
        drafts = [RecordExtractor.fallback_draft(segments.cases_text)]
    elif not segments.chunks:
        # Only a coverage summary came back; keep the whole response as one record
        drafts = [RecordExtractor.fallback_draft(raw)]
    else:
        drafts = [RecordExtractor.process(chunk, output_format) for chunk in segments.chunks]

    drafts = [draft for draft in drafts if draft.steps]
    if segments.fallback or not segments.chunks:
        logger.info("Provider output had no recognizable test case markers, using fallback record")

    cases = normalizer.process_batch(drafts, output_format)
    logger.debug(f"Parsed {len(cases)} test cases ({output_format.value})")
    return ParsedOutput(cases=cases, summary=segments.summary)
