from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Optional

# Shared state handed from one pipeline stage to the next.
Context = Dict[str, Any]


class BaseProcessor(ABC):
    """Stage that loads or transforms input records."""

    @abstractmethod
    def process(
        self, data: Context, *, on_progress: Optional[Callable[[int, Optional[int]], None]] = None
    ) -> Context:
        """Process ``data`` and return the updated context."""


class BaseAnalyzer(ABC):
    """Stage that derives a frequency table from parsed records."""

    @abstractmethod
    def analyze(self, data: Context) -> Context:
        """Analyze ``data`` and return the updated context."""


class BaseReporter(ABC):
    """Stage that persists results."""

    @abstractmethod
    def report(self, data: Context) -> Context:
        """Write reports for ``data`` and return the updated context."""
