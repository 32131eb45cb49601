"""CSV output sinks.

:func:`write_csv` serialises a header and a lazy sequence of rows to a path or
an open text stream. :class:`SharedCsvSink` is used when several worker
threads append batches to the same file; appends are serialised by a lock
while the batches themselves are built without synchronisation.
"""

from __future__ import annotations

import os
import threading
from pathlib import Path
from typing import IO, Iterable, Optional, Union

from ..exceptions import OutputWriteError
from ..logging import get_logger

logger = get_logger(__name__)

Destination = Union[str, "os.PathLike[str]", IO[str]]


def describe_destination(destination: Destination) -> str:
    if isinstance(destination, (str, os.PathLike)):
        return str(destination)
    return str(getattr(destination, "name", "<stream>"))


def _write_lines(fh: IO[str], header: str, rows: Iterable[str]) -> int:
    fh.write(header + "\n")
    written = 0
    for row in rows:
        fh.write(row + "\n")
        written += 1
    return written


def write_csv(destination: Destination, header: str, rows: Iterable[str]) -> int:
    """Write ``header`` then each of ``rows`` to ``destination``.

    Parameters
    ----------
    destination:
        File path, or a text stream that stays open after the call.
    header:
        Header line without a trailing newline.
    rows:
        ``"key,count"`` rows, written in iteration order.

    Returns
    -------
    int
        Number of rows written.

    Raises
    ------
    OutputWriteError
        If the destination cannot be opened or written. Rows written before
        the failure are left in place.
    """
    name = describe_destination(destination)
    try:
        if isinstance(destination, (str, os.PathLike)):
            with Path(destination).open("w", encoding="utf-8", newline="") as fh:
                written = _write_lines(fh, header, rows)
        else:
            written = _write_lines(destination, header, rows)
            destination.flush()
    except OSError as exc:
        logger.error("Error writing to output CSV file: %s", name, exc_info=True)
        raise OutputWriteError(f"Error writing to output CSV file: {name}", path=name) from exc
    return written


class SharedCsvSink:
    """Append-only text file shared by concurrent writers."""

    def __init__(self, path: str | os.PathLike[str], header: Optional[str] = None) -> None:
        self.path = Path(path)
        self._lock = threading.Lock()
        try:
            self._fh: Optional[IO[str]] = self.path.open("w", encoding="utf-8", newline="")
            if header is not None:
                self._fh.write(header + "\n")
        except OSError as exc:
            logger.error("Error opening output CSV file: %s", self.path, exc_info=True)
            raise OutputWriteError(f"Error writing to output CSV file: {self.path}", path=self.path) from exc

    def append(self, text: str) -> None:
        """Append ``text`` atomically with respect to other writers."""
        with self._lock:
            if self._fh is None:
                raise OutputWriteError(f"Sink already closed: {self.path}", path=self.path)
            try:
                self._fh.write(text)
            except OSError as exc:
                raise OutputWriteError(
                    f"Error writing batch to CSV file: {self.path}", path=self.path
                ) from exc

    def close(self) -> None:
        with self._lock:
            if self._fh is None:
                return
            try:
                self._fh.close()
            except OSError as exc:
                raise OutputWriteError(f"Error closing CSV file: {self.path}", path=self.path) from exc
            finally:
                self._fh = None

    @property
    def closed(self) -> bool:
        return self._fh is None

    def __enter__(self) -> "SharedCsvSink":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


__all__ = ["Destination", "describe_destination", "write_csv", "SharedCsvSink"]
