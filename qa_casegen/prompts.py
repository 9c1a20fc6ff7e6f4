"""
Prompt templates for test case generation.

The layout each prompt asks for is the layout the segmenter and extractor
expect back, so the two must change together.
"""

from __future__ import annotations

from .models import OutputFormat


def build_prompt(description: str, output_format: OutputFormat = OutputFormat.GHERKIN) -> str:
    """Build the generation prompt for a feature description."""
    if not description or not description.strip():
        raise ValueError("Feature description must not be blank")

    output_format = OutputFormat(output_format)
    if output_format == OutputFormat.GHERKIN:
        return _gherkin_prompt(description.strip())
    return _plain_prompt(description.strip())


def _gherkin_prompt(description: str) -> str:
    return f"""Write QA test scenarios in Gherkin for the feature below.

FEATURE:
{description}

REQUIREMENTS:
1. Cover positive, negative and edge cases
2. Start every scenario with a line "Scenario: <title>"
3. Follow with Given / When / Then / And steps, one per line
4. End every scenario with a line "Priority: High", "Priority: Medium" or "Priority: Low"
5. Do not number the scenarios and do not use markdown

After the last scenario add one paragraph starting with "Coverage Summary:" that
describes what the scenarios cover and what they leave out.

EXAMPLE:
Scenario: Successful login with valid credentials
Given the user is on the login page
When they submit a valid email and password
Then they are redirected to the dashboard
Priority: High

Coverage Summary: Covers the login happy path."""


def _plain_prompt(description: str) -> str:
    return f"""Write QA test cases in plain text for the feature below.

FEATURE:
{description}

REQUIREMENTS:
1. Cover positive, negative and edge cases
2. Number the test cases: "1. <title>", "2. <title>", ...
3. Under each title write "Test Steps:" followed by one step per line (no numbering)
4. Then write "Expected Result:" followed by the expected outcome
5. End every test case with a line "Priority: High", "Priority: Medium" or "Priority: Low"

After the last test case add one paragraph starting with "Coverage Summary:" that
describes what the test cases cover and what they leave out.

EXAMPLE:
1. Successful login with valid credentials
Test Steps:
Open the login page
Submit a valid email and password
Expected Result:
The dashboard is shown
Priority: High

Coverage Summary: Covers the login happy path."""
