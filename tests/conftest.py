"""Pytest configuration and fixtures for QA case generator tests."""

import pytest

from qa_casegen.models import OutputFormat, Priority, TestCase
from qa_casegen.runtime import MockProviderRuntime


GHERKIN_RESPONSE = """Feature: Shopping cart checkout

Scenario: Successful checkout with a valid card
Given the user is logged in
And the user adds a burger to the cart
When the user proceeds to the payment page
Then the order is confirmed
Priority: High

Scenario: Checkout with an invalid card
Given the user has items in the cart
When the user pays with an invalid card number
Then an error message is shown
Priority: Medium

Scenario: Checkout with an empty cart
Given the cart is empty
When the user opens the checkout page
Then the pay button is disabled
Priority: Low

Coverage Summary: Covers the happy path, card validation and the empty cart boundary.
"""

PLAIN_RESPONSE = """Here are the test cases:

1. Reset password with a registered email
Test Steps:
Open the forgot password page
Submit a registered email address
Expected Result:
A reset link is emailed to the user
Priority: High

2. Reset password with an unknown email
Test Steps:
Open the forgot password page
Submit an email that is not registered
Expected Result:
An error message says the account does not exist
Priority: Medium

Coverage Summary: Covers registered and unknown emails.
"""


@pytest.fixture
def gherkin_response():
    return GHERKIN_RESPONSE


@pytest.fixture
def plain_response():
    return PLAIN_RESPONSE


@pytest.fixture
def mock_runtimes():
    """One canned runtime per provider; Gemini fails like a rate-limited call."""
    from qa_casegen.models import Provider

    return {
        Provider.OPENAI: MockProviderRuntime(GHERKIN_RESPONSE, name="openai"),
        Provider.GEMINI: MockProviderRuntime(error="429 Too Many Requests", name="gemini"),
        Provider.CLAUDE: MockProviderRuntime(GHERKIN_RESPONSE, name="claude"),
    }


@pytest.fixture
def make_case():
    """Factory for TestCase records with sensible defaults."""
    counter = {"n": 0}

    def _make(title="Login works", steps=None, priority=Priority.NA,
              expected_result="", output_format=OutputFormat.GHERKIN):
        counter["n"] += 1
        return TestCase(
            id=f"tc-test-{counter['n']:06d}",
            title=title,
            steps=steps or ["Given a user", "When they log in", "Then success"],
            expected_result=expected_result,
            priority=priority,
            format=output_format
        )

    return _make
