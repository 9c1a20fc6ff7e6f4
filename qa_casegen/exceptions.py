"""Custom exceptions for QA case generator."""

from typing import Optional


class CaseGenError(Exception):
    """Base exception for QA case generator errors."""
    pass


class ProviderRuntimeError(CaseGenError):
    """
    Raised when a provider call fails (network, auth, rate limit, empty reply).

    Attributes:
        provider: Provider name the failure belongs to, if known
    """

    def __init__(self, message: str, provider: Optional[str] = None):
        self.provider = provider
        super().__init__(message)


class ConfigurationError(CaseGenError):
    """Raised when configuration is invalid or missing."""
    pass


class InvalidEditError(CaseGenError):
    """Raised when a step edit would leave a test case without steps."""

    def __init__(self, case_id: str, details: str):
        self.case_id = case_id
        self.details = details
        super().__init__(f"Invalid edit for test case {case_id}: {details}")


class RunNotFoundError(CaseGenError):
    """Raised when a run or test case id is not present in history."""
    pass


class ExportError(CaseGenError):
    """Raised when an exporter cannot write its artifact."""
    pass
