"""
Parsing nodes for the QA Case Generator.

The pipeline, leaf-first:
1. Segmenter - Split raw provider text into chunks and a coverage summary
2. RecordExtractor - Title, steps, priority and expected result per chunk
3. Tagger - Positive / Negative / Edge heuristic classification
4. Normalizer - Unique ids and the provider-agnostic TestCase schema
5. Aggregator - Per-provider results combined into a Run
"""

from .segmenter import Segmenter, SegmentResult
from .extractor import RecordExtractor
from .tagger import Tagger
from .normalizer import Normalizer, IdGenerator
from .aggregator import Aggregator

__all__ = [
    "Segmenter",
    "SegmentResult",
    "RecordExtractor",
    "Tagger",
    "Normalizer",
    "IdGenerator",
    "Aggregator"
]
