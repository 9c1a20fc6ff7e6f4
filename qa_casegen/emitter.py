"""
Artifact emitters for generated test cases.

Spreadsheet rows (CSV / Excel), Gherkin .feature files and bug report
templates. Flattening a run into one list happens here, in the presentation
layer; the run itself keeps providers apart.
"""

from __future__ import annotations
import logging
import re
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

import pandas as pd

from .exceptions import ExportError
from .models import OutputFormat, Provider, Run, TestCase
from .skeletons import export_all_playwright, export_all_webdriverio

logger = logging.getLogger(__name__)

DEFAULT_FEATURE_NAME = "AI Generated Feature"
EXPORT_FORMATS = ("csv", "xlsx", "feature", "playwright", "webdriverio")


def flatten_cases(run: Run) -> List[Tuple[Provider, TestCase]]:
    """All cases of a run, provider by provider in request order."""
    return [(provider, case) for provider in run.requested for case in run.cases_for(provider)]


def to_rows(cases: Sequence[Tuple[Optional[Provider], TestCase]]) -> List[Dict[str, Any]]:
    """
    Flatten cases into spreadsheet rows.

    The "Expected Result" column only appears when at least one case has one.
    """
    include_expected = any(case.expected_result for _, case in cases)
    rows = []
    for index, (provider, case) in enumerate(cases, 1):
        row = {
            "Test Case #": index,
            "Provider": provider.display_name if provider else "",
            "Title": case.title,
            "Steps": "\n".join(case.steps),
            "Priority": case.priority.value,
            "Category": case.category.value,
        }
        if include_expected:
            row["Expected Result"] = case.expected_result
        rows.append(row)
    return rows


def export_csv(cases: Sequence[Tuple[Optional[Provider], TestCase]], path: Path) -> Path:
    path = Path(path)
    try:
        pd.DataFrame(to_rows(cases)).to_csv(path, index=False)
    except OSError as e:
        raise ExportError(f"Could not write CSV to {path}: {e}")
    return path


def export_excel(cases: Sequence[Tuple[Optional[Provider], TestCase]], path: Path) -> Path:
    path = Path(path)
    try:
        with pd.ExcelWriter(path, engine="openpyxl") as writer:
            pd.DataFrame(to_rows(cases)).to_excel(writer, index=False, sheet_name="Test Cases")
    except OSError as e:
        raise ExportError(f"Could not write Excel workbook to {path}: {e}")
    return path


# ==================== Gherkin .feature ====================

def generate_feature_name(cases: Sequence[TestCase], requirement: str = "") -> str:
    """Feature name from the requirement's first line, else the first scenario title."""
    if requirement and requirement.strip():
        first_line = requirement.strip().split("\n")[0]
        name = re.sub(r'[^a-z0-9 ]', '', first_line, flags=re.IGNORECASE).strip()
        if name:
            return name

    if cases:
        title = re.sub(r'(User|Guest|Customer)\s+', '', cases[0].title, count=1, flags=re.IGNORECASE)
        words = [w[0].upper() + w[1:] for w in title.split()[:5]]
        if words:
            return " ".join(words)

    return DEFAULT_FEATURE_NAME


def scenario_to_feature(case: TestCase, feature_name: str = "") -> str:
    text = f"Feature: {feature_name}\n\n" if feature_name else ""
    text += f"Scenario: {case.title}\n"
    for step in case.steps:
        text += f"  {step}\n"
    if case.format == OutputFormat.PLAIN and case.expected_result:
        for line in case.expected_result.splitlines():
            if line.strip():
                text += f"  # Expected: {line.strip()}\n"
    return text


def export_feature_file(cases: Sequence[TestCase], requirement: str = "") -> str:
    feature = f"Feature: {generate_feature_name(cases, requirement)}\n\n"
    return feature + "\n".join(scenario_to_feature(case) for case in cases)


# ==================== Bug report ====================

def render_bug_report(case: TestCase, provider: Optional[Provider] = None) -> str:
    """Markdown bug report pre-filled from a test case."""
    if case.expected_result:
        expected = case.expected_result
    else:
        then_steps = [s for s in case.steps if re.match(r'(then|and)\b', s, re.IGNORECASE)]
        expected = "\n".join(then_steps) or "See test case steps"

    lines = [
        f"## Bug: {case.title}",
        "",
        f"**Priority:** {case.priority.value}",
        f"**Category:** {case.category.value}",
    ]
    if provider:
        lines.append(f"**Source:** {provider.display_name}")
    lines += ["", "### Steps to Reproduce"]
    lines += [f"{i}. {step}" for i, step in enumerate(case.steps, 1)]
    lines += [
        "",
        "### Expected Result",
        expected,
        "",
        "### Actual Result",
        "_Describe what actually happened._",
        "",
        "### Environment",
        "_Browser, OS, build._",
    ]
    return "\n".join(lines) + "\n"


class ArtifactEmitter:
    """Writes the selected export formats for one run into an output directory."""

    FILENAMES = {
        "csv": "test_cases.csv",
        "xlsx": "test_cases.xlsx",
        "feature": "test_cases.feature",
        "playwright": "test_cases.spec.js",
        "webdriverio": "test_cases.wdio.js",
    }

    def __init__(self, output_dir: Path):
        self.output_dir = Path(output_dir)

    def process(self, run: Run, formats: Iterable[str]) -> Dict[str, Path]:
        formats = list(formats)
        unknown = [f for f in formats if f not in self.FILENAMES]
        if unknown:
            raise ExportError(f"Unknown export formats: {unknown}")

        self.output_dir.mkdir(parents=True, exist_ok=True)
        flat = flatten_cases(run)
        cases = [case for _, case in flat]
        paths = {}

        for fmt in formats:
            path = self.output_dir / self.FILENAMES[fmt]
            if fmt == "csv":
                export_csv(flat, path)
            elif fmt == "xlsx":
                export_excel(flat, path)
            else:
                self._write_text(path, self._render_text(fmt, cases, run.description))
            paths[fmt] = path
            logger.info(f"Wrote {fmt} export: {path}")

        return paths

    @staticmethod
    def _render_text(fmt: str, cases: List[TestCase], description: str) -> str:
        if fmt == "feature":
            return export_feature_file(cases, description)
        if fmt == "playwright":
            return export_all_playwright(cases)
        return export_all_webdriverio(cases)

    @staticmethod
    def _write_text(path: Path, text: str) -> None:
        try:
            path.write_text(text, encoding='utf-8')
        except OSError as e:
            raise ExportError(f"Could not write {path}: {e}")
