"""
RecordExtractor Node (Deterministic)

Turns one chunk of provider text into a TestCaseDraft: title, steps, priority
and, for plain-text output, the expected result block.

Each field is driven by an explicit ordered rule list. Rules are tried in
sequence; a rule whose pattern does not match leaves the text untouched and
the next rule gets its turn. Missing fields fall back to sentinels, never to
None, and extraction never raises.
"""

from __future__ import annotations
import re
import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Pattern

from ..models import OutputFormat, Priority, TestCaseDraft

logger = logging.getLogger(__name__)

UNTITLED = "Untitled"


@dataclass(frozen=True)
class PrefixRule:
    """Strips one kind of provider-added prefix from a title line."""
    name: str
    pattern: Pattern[str]

    def apply(self, text: str) -> str:
        return self.pattern.sub("", text, count=1).strip()


@dataclass(frozen=True)
class PriorityRule:
    """
    Reads a priority from a "Priority:" tag.

    Precondition: the chunk contains a "Priority:" label followed by a value
    listed in ``mapping``. Otherwise the rule does not match.
    """
    name: str
    pattern: Pattern[str]
    mapping: Dict[str, Priority]

    def apply(self, text: str) -> Optional[Priority]:
        match = self.pattern.search(text)
        if not match:
            return None
        return self.mapping.get(match.group(1).lower())


# ==================== Rule tables ====================

_LABEL = r'priority[*_]*[ \t]*:[ \t]*[*_]*[ \t]*'

TITLE_PREFIX_RULES: List[PrefixRule] = [
    PrefixRule("scenario_label", re.compile(r'^scenario(?: outline)?[ \t]*:[ \t]*', re.IGNORECASE)),
    PrefixRule("test_case_label", re.compile(r'^test case\b[ \t]*#?\d*[ \t]*[:.\-][ \t]*', re.IGNORECASE)),
    PrefixRule("ordinal", re.compile(r'^\d+[.)][ \t]*')),
]

PRIORITY_RULES: List[PriorityRule] = [
    PriorityRule(
        "named_level",
        re.compile(_LABEL + r'(high|medium|low)', re.IGNORECASE),
        {"high": Priority.HIGH, "medium": Priority.MEDIUM, "low": Priority.LOW},
    ),
    PriorityRule(
        "p_level",
        re.compile(_LABEL + r'(p[0-3])\b', re.IGNORECASE),
        {"p0": Priority.HIGH, "p1": Priority.HIGH, "p2": Priority.MEDIUM, "p3": Priority.LOW},
    ),
    PriorityRule(
        "synonym",
        re.compile(_LABEL + r'(critical|urgent|major|normal|minor|trivial)\b', re.IGNORECASE),
        {
            "critical": Priority.HIGH, "urgent": Priority.HIGH, "major": Priority.HIGH,
            "normal": Priority.MEDIUM,
            "minor": Priority.LOW, "trivial": Priority.LOW,
        },
    ),
]

PRIORITY_LINE = re.compile(r'priority[*_]*[ \t]*:', re.IGNORECASE)

EXPECTED_MARKER = re.compile(
    r'(?:[*_]+[ \t]*)?expected results?[*_]*[ \t]*:(?:[ \t]*[*_]+)?',
    re.IGNORECASE
)
STEPS_LABEL = re.compile(
    r'^\s*(?:[*_]+[ \t]*)?(?:test )?steps[*_]*[ \t]*:(?:[ \t]*[*_]+)?',
    re.IGNORECASE
)

DECORATION_LINE = re.compile(r'^[\s*_#`~=\-]+$')
EMPHASIS = re.compile(r'\*\*|__')


class RecordExtractor:
    """
    Node 2: extract structured fields from one chunk.

    Extraction order: title line → priority (whole chunk) → priority lines
    removed from the body → format-specific steps / expected result split →
    fallback steps when the body produced none.
    """

    @staticmethod
    def process(chunk: str, output_format: OutputFormat) -> TestCaseDraft:
        lines = RecordExtractor._trimmed_lines(chunk)
        if not lines:
            return TestCaseDraft()

        title_line, body_lines = lines[0], lines[1:]
        title = RecordExtractor.extract_title(title_line)
        priority = RecordExtractor.extract_priority(chunk)
        body_lines = [line for line in body_lines if not PRIORITY_LINE.search(line)]

        expected_result = ""
        if output_format == OutputFormat.PLAIN:
            steps, expected_result = RecordExtractor._split_plain_body(body_lines)
        else:
            steps = RecordExtractor._clean_steps(body_lines)

        if not steps:
            logger.debug(f"Chunk '{title}' has no step lines, keeping its own text as steps")
            steps = RecordExtractor._clean_steps([title_line]) or [line for line in lines if line]

        return TestCaseDraft(
            title=title,
            steps=steps,
            expected_result=expected_result,
            priority=priority
        )

    @staticmethod
    def fallback_draft(text: str) -> TestCaseDraft:
        """Single record holding unstructured text verbatim."""
        steps = [line.strip() for line in text.splitlines() if line.strip()]
        return TestCaseDraft(title=UNTITLED, steps=steps)

    @staticmethod
    def extract_title(title_line: str) -> str:
        """Strip provider prefixes, repeating the rule pass until none applies."""
        title = RecordExtractor._strip_emphasis(title_line)
        previous = None
        while title != previous:
            previous = title
            for rule in TITLE_PREFIX_RULES:
                title = RecordExtractor._strip_emphasis(rule.apply(title))
        title = RecordExtractor._strip_emphasis(EMPHASIS.sub("", title))
        return title or UNTITLED

    @staticmethod
    def extract_priority(text: str) -> Priority:
        for rule in PRIORITY_RULES:
            priority = rule.apply(text)
            if priority is not None:
                return priority
        return Priority.NA

    @staticmethod
    def _split_plain_body(body_lines: List[str]) -> tuple[List[str], str]:
        body = "\n".join(body_lines)
        marker = EXPECTED_MARKER.search(body)
        if marker:
            steps_text = body[:marker.start()]
            expected = body[marker.end():].strip()
        else:
            steps_text, expected = body, ""

        steps_text = STEPS_LABEL.sub("", steps_text, count=1)
        return RecordExtractor._clean_steps(steps_text.split("\n")), expected

    @staticmethod
    def _trimmed_lines(chunk: str) -> List[str]:
        lines = [line.strip() for line in chunk.splitlines()]
        while lines and not lines[0]:
            lines.pop(0)
        while lines and not lines[-1]:
            lines.pop()
        return lines

    @staticmethod
    def _clean_steps(lines: List[str]) -> List[str]:
        return [
            line.strip() for line in lines
            if line.strip() and not DECORATION_LINE.match(line)
        ]

    @staticmethod
    def _strip_emphasis(text: str) -> str:
        return text.strip().strip("*_#` \t").strip()


def extract(chunk: str, output_format: OutputFormat = OutputFormat.GHERKIN) -> TestCaseDraft:
    """Convenience function to extract one draft."""
    return RecordExtractor.process(chunk, output_format)
