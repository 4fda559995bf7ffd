"""Base class for usage analyzers."""

from __future__ import annotations
from abc import ABC, abstractmethod

from ..config import TrackedConfig
from ..jsx_scanner import FileScan


class BaseAnalyzer(ABC):
    """Base class for all usage analyzers.

    Each analyzer measures one aspect of tracked-component usage. Work is
    split in two so files can be scanned concurrently:

    - `analyze_file` is pure and may run on any worker thread;
    - `merge` folds one file's result into the running totals and is only
      ever called from one thread, in file order.
    """

    name: str = "base"
    description: str = ""

    def __init__(self, tracked: TrackedConfig):
        self.tracked = tracked

    @abstractmethod
    def analyze_file(self, scan: FileScan, content: str):
        """Measure one file. Returns an analyzer-specific result."""
        ...

    @abstractmethod
    def merge(self, result, codebase: str, rel_path: str) -> None:
        """Fold the result of `analyze_file` into the aggregate."""
        ...

    def finalize(self) -> None:
        """Called once after every codebase has been merged."""

    @abstractmethod
    def build_outputs(self, codebases: list[str]) -> dict[str, str]:
        """Render reports as {path relative to the output dir: content}."""
        ...
