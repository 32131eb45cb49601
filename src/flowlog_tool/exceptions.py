"""Custom exceptions for the :mod:`flowlog_tool` package."""

from __future__ import annotations

import os


class FlowLogToolError(Exception):
    """Base class for all custom ``flowlog_tool`` exceptions.

    Parameters
    ----------
    message:
        Short description of the failure.
    context:
        Optional additional information about where/why the error occurred.
    suggestion:
        Optional hint that may help recover from the error.
    """

    def __init__(
        self,
        message: str = "",
        *,
        context: str | None = None,
        suggestion: str | None = None,
    ) -> None:
        super().__init__(message)
        self.context = context
        self.suggestion = suggestion


class FlowLogIOError(FlowLogToolError):
    """Raised when a CSV file cannot be opened, read or written.

    ``path`` identifies the offending file (or stream name).
    """

    def __init__(
        self,
        message: str = "",
        *,
        path: str | os.PathLike[str] | None = None,
        context: str | None = None,
        suggestion: str | None = None,
    ) -> None:
        super().__init__(message, context=context, suggestion=suggestion)
        self.path = None if path is None else str(path)


class InputReadError(FlowLogIOError):
    """Raised when a flow log or tag rule file cannot be read."""


class OutputWriteError(FlowLogIOError):
    """Raised when an output CSV file cannot be written."""


class FlowLogParsingError(FlowLogToolError):
    """Raised when parsing fails for a reason other than a malformed line."""


class AggregationError(FlowLogToolError):
    """Raised when building a frequency table fails."""


class GenerationError(FlowLogToolError, ValueError):
    """Raised when a generator is asked for an impossible or invalid output."""
