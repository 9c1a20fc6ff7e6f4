"""
Run history: the application state the presentation layer owns.

Holds generated runs newest-last. A run is the unit of undo; test case steps
are the only thing that can change inside a stored run.
"""

from __future__ import annotations
import logging
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, Field

from .exceptions import RunNotFoundError
from .models import Run, TestCase

logger = logging.getLogger(__name__)


class _HistoryFile(BaseModel):
    version: int = 1
    runs: List[Run] = Field(default_factory=list)


class RunHistory:
    """Ordered run history with undo, step edits and JSON persistence."""

    def __init__(self, limit: int = 20):
        if limit < 1:
            raise ValueError("History limit must be at least 1")
        self.limit = limit
        self._runs: List[Run] = []

    def __len__(self) -> int:
        return len(self._runs)

    @property
    def runs(self) -> List[Run]:
        return list(self._runs)

    @property
    def current(self) -> Optional[Run]:
        return self._runs[-1] if self._runs else None

    def push(self, run: Run) -> Run:
        """Add a run as the new current one, evicting the oldest beyond the limit."""
        self._runs.append(run)
        if len(self._runs) > self.limit:
            evicted = self._runs.pop(0)
            logger.debug(f"History full, evicted run {evicted.id}")
        return run

    def undo(self) -> Optional[Run]:
        """Discard the current run and return the one before it (None when empty)."""
        if not self._runs:
            return None
        dropped = self._runs.pop()
        logger.info(f"Undid run {dropped.id}")
        return self.current

    def get(self, run_id: str) -> Run:
        for run in self._runs:
            if run.id == run_id:
                return run
        raise RunNotFoundError(f"Run {run_id} not found in history")

    def clear(self) -> None:
        self._runs.clear()

    def edit_steps(self, run_id: str, case_id: str, steps: List[str]) -> TestCase:
        """Replace the steps of one test case in a stored run."""
        return self.get(run_id).edit_steps(case_id, steps)

    def save(self, path: Path) -> Path:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(_HistoryFile(runs=self._runs).model_dump_json(indent=2), encoding='utf-8')
        logger.debug(f"Saved {len(self._runs)} runs to {path}")
        return path

    @classmethod
    def load(cls, path: Path, limit: int = 20) -> "RunHistory":
        """Load history from disk; a missing file gives an empty history."""
        history = cls(limit)
        path = Path(path)
        if not path.exists():
            return history

        stored = _HistoryFile.model_validate_json(path.read_text(encoding='utf-8'))
        for run in stored.runs:
            history.push(run)
        return history
