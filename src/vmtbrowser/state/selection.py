"""Selection state manager.

The only component allowed to change :class:`SelectionState`. Every public
operation validates first, builds the candidate state and its projections,
and only then commits; a raised error leaves both the state and the feature
order exactly as they were.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Sequence
from typing import Protocol

from vmtbrowser.aggregate import NumberFormatter
from vmtbrowser.dataset import FeatureCollection, relocate_to_end
from vmtbrowser.exceptions import DataNotReady, InvalidSelection
from vmtbrowser.ingestion.normalize import strict_int
from vmtbrowser.models.feature import EnrichedFeature
from vmtbrowser.models.selection import SelectionState
from vmtbrowser.models.table import DisplayRow
from vmtbrowser.models.theme import Theme
from vmtbrowser.municipalities import MunicipalityRegistry
from vmtbrowser.state.events import MapProjection, RenderUpdate
from vmtbrowser.state.projections import build_render_update
from vmtbrowser.themes import THEMES, theme_by_id, theme_by_tab

_logger = logging.getLogger(__name__)

Subscriber = Callable[[RenderUpdate], None]


class MapRenderer(Protocol):
    def render_map(self, projection: MapProjection) -> None: ...


class TableRenderer(Protocol):
    def render_table(self, title: str, rows: Sequence[DisplayRow]) -> None: ...


class SelectionManager:
    """Owns the single selection state and the bound feature collection.

    Parameters
    ----------
    registry : MunicipalityRegistry
        Valid municipality ids.
    themes : sequence of Theme
        Selectable themes, in display order.
    default_year : int
        Initial ``active_year``.
    formatter : NumberFormatter, optional
        Table number formatting.
    years : iterable of int, optional
        The year catalog. Defaults to just ``default_year``.
    total_tolerance : float
        Passed through to the total-discrepancy check.
    """

    def __init__(
        self,
        registry: MunicipalityRegistry,
        themes: Sequence[Theme] = THEMES,
        default_year: int = 2012,
        formatter: NumberFormatter | None = None,
        *,
        years: Iterable[int] | None = None,
        total_tolerance: float = 0.5,
    ) -> None:
        self._registry = registry
        self._themes: tuple[Theme, ...] = tuple(themes)
        self._formatter = formatter or NumberFormatter()
        self._years: frozenset[int] = frozenset(years) if years is not None else frozenset({default_year})
        self._total_tolerance = total_tolerance
        self._state = SelectionState(active_year=default_year)
        self._collection: FeatureCollection | None = None
        self._subscribers: list[Subscriber] = []

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    @property
    def state(self) -> SelectionState:
        return self._state

    @property
    def collection(self) -> FeatureCollection | None:
        return self._collection

    @property
    def themes(self) -> tuple[Theme, ...]:
        return self._themes

    @property
    def years(self) -> tuple[int, ...]:
        return tuple(sorted(self._years))

    @property
    def active_theme(self) -> Theme | None:
        if self._state.active_theme_id is None:
            return None
        return theme_by_id(self._state.active_theme_id, self._themes)

    def snapshot(self) -> RenderUpdate:
        """Projections for the current state, without emitting an event."""
        collection = self._require_collection()
        return self._build(collection.features, self._state)

    # ------------------------------------------------------------------
    # Subscriptions
    # ------------------------------------------------------------------

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register *callback* for render updates; returns an unsubscribe function."""
        self._subscribers.append(callback)

        def _unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return _unsubscribe

    def attach_renderers(
        self,
        map_renderer: MapRenderer | None = None,
        table_renderer: TableRenderer | None = None,
    ) -> Callable[[], None]:
        def _render(update: RenderUpdate) -> None:
            if map_renderer is not None:
                map_renderer.render_map(update.map)
            if table_renderer is not None:
                for table in update.tables:
                    table_renderer.render_table(table.title, table.rows)

        return self.subscribe(_render)

    # ------------------------------------------------------------------
    # Dataset binding
    # ------------------------------------------------------------------

    def bind_dataset(self, collection: FeatureCollection) -> RenderUpdate:
        """Install a joined dataset; the active year must be loaded in it."""
        if self._state.active_year not in collection.years:
            raise DataNotReady(
                f"Dataset has no data for the active year {self._state.active_year}",
                year=self._state.active_year,
            )
        return self._commit_dataset(collection, self._state)

    def swap_dataset(self, collection: FeatureCollection, year: int) -> RenderUpdate:
        """Install a dataset carrying a newly loaded *year* and make it active."""
        self._check_year_in_catalog(year)
        if year not in collection.years:
            raise DataNotReady(f"Dataset has no data for {year}", year=year)
        return self._commit_dataset(collection, self._state.model_copy(update={"active_year": year}))

    def _commit_dataset(self, collection: FeatureCollection, candidate: SelectionState) -> RenderUpdate:
        selected = candidate.selected_municipality_id
        if selected is not None and selected not in collection:
            _logger.warning("Selected municipality %s is not in the new dataset; clearing selection", selected)
            candidate = candidate.model_copy(update={"selected_municipality_id": None})
            selected = None

        features = collection.features
        if selected is not None:
            features = relocate_to_end(features, selected)
        update = self._build(features, candidate)

        self._collection = collection
        self._state = candidate
        if selected is not None:
            collection.relocate_to_end(selected)
        self._emit(update)
        return update

    # ------------------------------------------------------------------
    # Selections
    # ------------------------------------------------------------------

    def select_municipality(self, municipality_id: int) -> RenderUpdate:
        collection = self._require_collection()
        self._registry.get(municipality_id)
        if municipality_id not in collection:
            raise InvalidSelection(
                f"Municipality {municipality_id!r} has no boundary in the loaded dataset",
                kind="municipality",
                value=municipality_id,
            )

        candidate = self._state.model_copy(update={"selected_municipality_id": municipality_id})
        update = self._build(relocate_to_end(collection.features, municipality_id), candidate)

        self._state = candidate
        collection.relocate_to_end(municipality_id)
        self._emit(update)
        return update

    def on_feature_clicked(self, municipality_id: int | str) -> RenderUpdate:
        """Inbound map click; ids may arrive as text from the rendering layer."""
        try:
            resolved = strict_int(municipality_id)
        except ValueError as exc:
            raise InvalidSelection(
                f"Clicked feature id {municipality_id!r} is not a municipality id",
                kind="municipality",
                value=municipality_id,
            ) from exc
        return self.select_municipality(resolved)

    def select_theme(self, theme_id: str) -> RenderUpdate:
        collection = self._require_collection()
        theme = theme_by_id(theme_id, self._themes)
        return self._commit_state(collection, self._state.model_copy(update={"active_theme_id": theme.id}))

    def select_tab(self, tab_id: str) -> RenderUpdate:
        theme = theme_by_tab(tab_id, self._themes)
        return self.select_theme(theme.id)

    def select_year(self, year: int) -> RenderUpdate:
        self._check_year_in_catalog(year)
        collection = self._require_collection()
        if year not in collection.years:
            raise DataNotReady(f"Data for {year} is not loaded", year=year)
        return self._commit_state(collection, self._state.model_copy(update={"active_year": year}))

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _check_year_in_catalog(self, year: int) -> None:
        if year not in self._years:
            raise InvalidSelection(f"Year {year!r} is not one of {self.years}", kind="year", value=year)

    def _require_collection(self) -> FeatureCollection:
        if self._collection is None:
            raise DataNotReady("No dataset is loaded yet")
        return self._collection

    def _commit_state(self, collection: FeatureCollection, candidate: SelectionState) -> RenderUpdate:
        update = self._build(collection.features, candidate)
        self._state = candidate
        self._emit(update)
        return update

    def _build(self, features: Sequence[EnrichedFeature], state: SelectionState) -> RenderUpdate:
        theme = theme_by_id(state.active_theme_id, self._themes) if state.active_theme_id else None
        return build_render_update(features, state, theme, self._themes, self._formatter, self._total_tolerance)

    def _emit(self, update: RenderUpdate) -> None:
        for callback in list(self._subscribers):
            try:
                callback(update)
            except Exception:
                _logger.warning("Render subscriber %r failed", callback, exc_info=True)
