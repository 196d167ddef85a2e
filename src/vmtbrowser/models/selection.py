"""Selection state model."""

from __future__ import annotations

from vmtbrowser.models._base import VmtBaseModel


class SelectionState(VmtBaseModel):
    """The user's current theme, year and municipality.

    Snapshots are immutable; the selection manager replaces its instance
    wholesale on every successful change.
    """

    active_year: int
    active_theme_id: str | None = None
    selected_municipality_id: int | None = None
