"""Test the Segmenter node (chunking and coverage summary split)."""

import pytest

from qa_casegen.models import OutputFormat
from qa_casegen.nodes.segmenter import Segmenter, segment


class TestCoverageSummary:
    """Test separation of the trailing coverage summary."""

    def test_summary_split_and_trimmed(self):
        """Test splitting off a trimmed coverage summary."""
        result = segment("Scenario: A\nGiven x\n\nCoverage Summary:   Covers A.  \n", OutputFormat.GHERKIN)

        assert result.summary == "Covers A."
        assert "Coverage Summary" not in result.cases_text
        assert result.cases_text == "Scenario: A\nGiven x\n\n"

    @pytest.mark.parametrize("marker", ["coverage summary:", "COVERAGE SUMMARY:", "Coverage summary:"])
    def test_summary_marker_is_case_insensitive(self, marker):
        """Test summary markers in any case."""
        cases_text, summary = Segmenter.split_summary(f"Scenario: A\nGiven x\n{marker} X")

        assert summary == "X"
        assert cases_text == "Scenario: A\nGiven x\n"

    def test_markdown_decorated_marker(self):
        """Test a summary marker wrapped in Markdown."""
        cases_text, summary = Segmenter.split_summary("Scenario: A\nGiven x\n**Coverage Summary:** All good")

        assert summary == "All good"
        assert cases_text == "Scenario: A\nGiven x\n"

    def test_no_summary(self):
        """Test a response without a summary."""
        result = segment("Scenario: A\nGiven x", OutputFormat.GHERKIN)

        assert result.summary == ""
        assert result.chunks == ["Scenario: A\nGiven x"]


class TestGherkinSegmentation:
    """Test splitting on the Scenario: boundary."""

    def test_splits_scenarios_and_keeps_boundary(self, gherkin_response):
        """Test splitting on Scenario: and keeping the boundary."""
        result = segment(gherkin_response, OutputFormat.GHERKIN)

        assert len(result.chunks) == 3
        assert all(chunk.startswith("Scenario:") for chunk in result.chunks)
        assert result.preamble == "Feature: Shopping cart checkout\n\n"
        assert result.fallback is False

    def test_boundary_case_preserved(self):
        """Test that the boundary keeps its original case."""
        result = segment("scenario: lower\nGiven a\nSCENARIO: upper\nGiven b", OutputFormat.GHERKIN)

        assert result.chunks == ["scenario: lower\nGiven a\n", "SCENARIO: upper\nGiven b"]

    def test_inline_boundary(self):
        """Test a boundary in the middle of a line."""
        result = segment("Scenario: one Given a Scenario: two Given b", OutputFormat.GHERKIN)

        assert result.chunks == ["Scenario: one Given a ", "Scenario: two Given b"]

    def test_markdown_boundary_kept_with_chunk(self):
        """Test that Markdown around a boundary stays with its chunk."""
        result = segment("**Scenario:** Bold\nGiven a\n**Scenario:** Next\nGiven b", OutputFormat.GHERKIN)

        assert result.chunks[0] == "**Scenario:** Bold\nGiven a\n"
        assert result.chunks[1] == "**Scenario:** Next\nGiven b"

    def test_no_boundary_falls_back_to_single_chunk(self):
        """Test the single-chunk fallback for Gherkin."""
        text = "Just some unstructured text with no markers"
        result = segment(text, OutputFormat.GHERKIN)

        assert result.chunks == [text]
        assert result.fallback is True
        assert result.preamble == ""


class TestPlainSegmentation:
    """Test splitting on numbered list items."""

    def test_splits_numbered_items_and_skips_preamble(self, plain_response):
        """Test splitting numbered items and keeping the preamble aside."""
        result = segment(plain_response, OutputFormat.PLAIN)

        assert len(result.chunks) == 2
        assert result.chunks[0].startswith("1. Reset password with a registered email")
        assert result.chunks[1].startswith("2. Reset password with an unknown email")
        assert result.preamble == "Here are the test cases:\n\n"
        assert result.summary == "Covers registered and unknown emails."

    def test_inline_numbers_do_not_split(self):
        """Test that numbers inside a line do not split."""
        text = "1. Pay\nTest Steps:\nEnter 2. 5 as amount\n2. Refund\nTest Steps:\nClick refund"
        result = segment(text, OutputFormat.PLAIN)

        assert len(result.chunks) == 2
        assert "Enter 2. 5 as amount" in result.chunks[0]

    def test_test_case_labels_split(self):
        """Test splitting on Test Case labels."""
        text = "Test Case 1: Login\nOpen app\nTest Case 2: Logout\nClick logout"
        result = segment(text, OutputFormat.PLAIN)

        assert result.chunks == ["Test Case 1: Login\nOpen app\n", "Test Case 2: Logout\nClick logout"]

    def test_no_numbered_item_falls_back(self):
        """Test the single-chunk fallback for plain text."""
        result = segment("Open the page and check it", OutputFormat.PLAIN)

        assert result.chunks == ["Open the page and check it"]
        assert result.fallback is True


class TestLosslessSegmentation:
    """Preamble plus chunks must rebuild the pre-summary text exactly."""

    @pytest.mark.parametrize("raw,output_format", [
        ("Intro\nScenario: A\nGiven a\n\nScenario: B\nGiven b\nCoverage Summary: s", OutputFormat.GHERKIN),
        ("**Scenario:** A\n  Given a\n---\n### Scenario: B\nThen b\n", OutputFormat.GHERKIN),
        ("Preamble 3. not a list\n1. A\nstep\n\n2. B\nstep\n  10. C\nstep", OutputFormat.PLAIN),
        ("no markers at all\n\nsecond line", OutputFormat.PLAIN),
        ("no markers at all", OutputFormat.GHERKIN),
    ])
    def test_reconstructs_cases_text(self, raw, output_format):
        """Test that preamble and chunks rebuild the text."""
        cases_text, _ = Segmenter.split_summary(raw)
        result = segment(raw, output_format)

        assert result.preamble + "".join(result.chunks) == cases_text
        assert result.cases_text == cases_text

    def test_summary_only_input_has_no_chunks(self):
        """Test a response holding only a summary."""
        result = segment("Coverage Summary: nothing to test", OutputFormat.GHERKIN)

        assert result.chunks == []
        assert result.summary == "nothing to test"
