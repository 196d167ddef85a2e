"""Custom exception hierarchy for vmtbrowser."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any


class VmtError(Exception):
    """Base exception for all vmtbrowser errors."""


class VmtConfigError(VmtError):
    """Invalid or missing configuration."""


class RowError(VmtError):
    """A single rejected tabular row."""

    def __init__(self, message: str, *, row_index: int, field: str = "") -> None:
        self.row_index = row_index
        self.field = field
        super().__init__(message)


class ParseError(VmtError):
    """One or more tabular rows could not be parsed.

    The whole load is rejected; ``row_errors`` lists every offending row
    so the consolidated message can point at all of them at once.
    """

    def __init__(self, message: str, *, row_errors: Sequence[RowError] = (), source: str = "") -> None:
        self.row_errors = tuple(row_errors)
        self.source = source
        super().__init__(message)

    @property
    def row_indexes(self) -> tuple[int, ...]:
        return tuple(err.row_index for err in self.row_errors)


class GeometryError(VmtError):
    """Boundary geometry is malformed or the named collection is absent."""

    def __init__(self, message: str, *, object_name: str = "") -> None:
        self.object_name = object_name
        super().__init__(message)


class FetchError(VmtError):
    """Transport-level failure (network, non-200, timeout, invalid JSON)."""

    def __init__(
        self,
        message: str,
        *,
        url: str = "",
        status: int | None = None,
    ) -> None:
        self.url = url
        self.status = status
        super().__init__(message)


class DatasetLoadError(VmtError):
    """A load was aborted; carries every underlying error.

    Concurrent fetches fan in to a single failure so the caller shows one
    message instead of one per file.
    """

    def __init__(self, errors: Sequence[BaseException]) -> None:
        self.errors = tuple(errors)
        lines = [f"Failed to load dataset ({len(self.errors)} error(s)):"]
        lines.extend(f"  - {type(err).__name__}: {err}" for err in self.errors)
        super().__init__("\n".join(lines))


class InvalidSelection(VmtError):
    """A municipality, theme or year is not present in its registry/dataset."""

    def __init__(self, message: str, *, kind: str, value: Any) -> None:
        self.kind = kind
        self.value = value
        super().__init__(message)


class DataNotReady(VmtError):
    """The selection refers to data that has not been loaded yet."""

    def __init__(self, message: str, *, year: int | None = None) -> None:
        self.year = year
        super().__init__(message)
