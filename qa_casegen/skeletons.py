"""
Browser automation skeletons from test case steps.

Each step line is matched against an ordered keyword rule list and mapped to
placeholder statements. The output is a starting point for a human, not a
runnable suite.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Callable, List, Sequence

from .models import TestCase


@dataclass(frozen=True)
class StepRule:
    name: str
    matches: Callable[[str], bool]
    playwright: List[str]
    webdriverio: List[str]


# First matching rule wins; "{step}" is replaced with the original step text.
STEP_RULES: List[StepRule] = [
    StepRule(
        "login",
        lambda l: "logged in" in l,
        [
            "await page.goto('https://your-dev-url.com/login');",
            "await page.fill('#email', 'testuser@example.com');",
            "await page.fill('#password', 'Password1!');",
            "await page.click('#login');",
        ],
        [
            "await browser.url('https://your-dev-url.com/login');",
            "await $('#email').setValue('testuser@example.com');",
            "await $('#password').setValue('Password1!');",
            "await $('#loginButton').click();",
        ],
    ),
    StepRule(
        "store_locator",
        lambda l: "store locator" in l or "selects a location" in l,
        ["// TODO: Add store locator interaction here"],
        ["// TODO: Add store locator interaction here"],
    ),
    StepRule(
        "add_to_cart",
        lambda l: "adds" in l and "cart" in l,
        ["// TODO: Add menu item to cart"],
        ["// TODO: Add menu item to cart"],
    ),
    StepRule(
        "payment_page",
        lambda l: "proceeds to the payment page" in l,
        ["// TODO: Proceed to payment page"],
        ["// TODO: Proceed to payment page"],
    ),
    StepRule(
        "assertion",
        lambda l: l.startswith("then ") or l.startswith("and "),
        ["// Assert: {step}"],
        ["// Assert: {step}"],
    ),
]

DEFAULT_STATEMENT = "// {step}"


def step_statements(step: str, target: str) -> List[str]:
    """Statements for one step; ``target`` is "playwright" or "webdriverio"."""
    lowered = step.strip().lower()
    for rule in STEP_RULES:
        if rule.matches(lowered):
            return [s.replace("{step}", step) for s in getattr(rule, target)]
    return [DEFAULT_STATEMENT.replace("{step}", step)]


def _js_string(text: str) -> str:
    return text.replace("\\", "\\\\").replace("'", "\\'")


def to_playwright(case: TestCase) -> str:
    code = f"test('{_js_string(case.title)}', async ({{ page }}) => {{\n"
    for step in case.steps:
        for statement in step_statements(step, "playwright"):
            code += f"  {statement}\n"
    code += "});\n"
    return code


def export_all_playwright(cases: Sequence[TestCase]) -> str:
    header = "// Auto-generated Playwright tests\nimport { test, expect } from '@playwright/test';\n\n"
    return header + "\n".join(to_playwright(case) for case in cases)


def to_webdriverio(case: TestCase) -> str:
    code = f"describe('{_js_string(case.title)}', () => {{\n"
    code += "  it('should execute the scenario', async () => {\n"
    for step in case.steps:
        for statement in step_statements(step, "webdriverio"):
            code += f"    {statement}\n"
    code += "  });\n});\n"
    return code


def export_all_webdriverio(cases: Sequence[TestCase]) -> str:
    return "\n".join(to_webdriverio(case) for case in cases)
