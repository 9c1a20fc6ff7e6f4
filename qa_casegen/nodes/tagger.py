"""
Tagger Node (Deterministic)

Heuristic Positive / Negative / Edge classification of a scenario from its
step text. Independent of any tag the provider emitted.
"""

from __future__ import annotations
import re
from typing import List, Pattern, Tuple

from ..models import Category

# Checked in order, first match wins. Negative vocabulary outranks Edge.
CATEGORY_RULES: List[Tuple[Category, Pattern[str]]] = [
    (Category.NEGATIVE, re.compile(r'fail|error|invalid|incorrect')),
    (Category.EDGE, re.compile(r'edge|boundary|limit|empty|null')),
]


class Tagger:
    """Node 3: classify steps into a scenario category."""

    @staticmethod
    def process(steps: List[str]) -> Category:
        text = " ".join(steps).lower()
        for category, pattern in CATEGORY_RULES:
            if pattern.search(text):
                return category
        return Category.POSITIVE


def classify(steps: List[str]) -> Category:
    """Convenience function to classify one step list."""
    return Tagger.process(steps)
