"""
QA Case Generator

Turns free-text feature descriptions into structured QA test cases by prompting
several LLM providers and normalizing their free-text answers into one
provider-agnostic data model.
"""

__version__ = "0.1.0"
__all__ = [
    "parse_output",
    "GenerationWorkflow",
    "RunHistory",
    "OutputFormat",
    "Provider",
    "TestCase",
    "Run",
]

from .models import OutputFormat, Provider, Run, TestCase
from .parsing import parse_output
from .workflow import GenerationWorkflow
from .history import RunHistory
