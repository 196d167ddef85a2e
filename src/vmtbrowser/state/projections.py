"""Pure builders from (dataset order, selection state) to render projections."""

from __future__ import annotations

from collections.abc import Sequence

from vmtbrowser._constants import NO_DATA_COLOR, TABLE_COLUMNS
from vmtbrowser.aggregate import NumberFormatter, aggregate, find_total_discrepancy
from vmtbrowser.models.feature import EnrichedFeature
from vmtbrowser.models.selection import SelectionState
from vmtbrowser.models.theme import Theme
from vmtbrowser.state.events import MapProjection, RenderUpdate, TableProjection


def build_map_projection(
    features: Sequence[EnrichedFeature],
    state: SelectionState,
    theme: Theme | None,
) -> MapProjection:
    """Color every feature by the active theme's total for the active year.

    Without a theme every municipality gets the no-data fill and the legend
    is empty. A missing record for the active year also gets the no-data
    fill and is listed in ``missing_ids``.
    """
    year = state.active_year
    colors: dict[int, str] = {}
    missing: list[int] = []
    for feature in features:
        record = feature.record_for(year)
        if record is None:
            missing.append(feature.municipality_id)
            colors[feature.municipality_id] = NO_DATA_COLOR
        elif theme is None:
            colors[feature.municipality_id] = NO_DATA_COLOR
        else:
            colors[feature.municipality_id] = theme.color_for(record.value(theme.metric_field))

    return MapProjection(
        year=year,
        theme_id=theme.id if theme else None,
        ordered_ids=tuple(f.municipality_id for f in features),
        colors=colors,
        legend_title=theme.display_name if theme else "",
        legend_description=theme.legend_description if theme else "",
        legend_buckets=theme.legend_buckets if theme else (),
        highlighted_id=state.selected_municipality_id,
        missing_ids=tuple(missing),
    )


def build_table_projections(
    feature: EnrichedFeature | None,
    year: int,
    themes: Sequence[Theme],
    formatter: NumberFormatter,
    total_tolerance: float = 0.5,
) -> tuple[TableProjection, ...]:
    """One table per theme for the selected municipality (none without a selection)."""
    if feature is None:
        return ()

    record = feature.record_for(year)
    tables: list[TableProjection] = []
    for theme in themes:
        title = theme.caption_for(feature.display_name)
        if record is None:
            tables.append(
                TableProjection(
                    family=theme.family,
                    tab_id=theme.tab_id,
                    title=title,
                    summary=theme.table_summary,
                    columns=TABLE_COLUMNS,
                    missing=True,
                )
            )
            continue
        tables.append(
            TableProjection(
                family=theme.family,
                tab_id=theme.tab_id,
                title=title,
                summary=theme.table_summary,
                columns=TABLE_COLUMNS,
                rows=aggregate(record, theme.family, formatter),
                discrepancy=find_total_discrepancy(record, theme.family, total_tolerance),
            )
        )
    return tuple(tables)


def build_render_update(
    features: Sequence[EnrichedFeature],
    state: SelectionState,
    theme: Theme | None,
    themes: Sequence[Theme],
    formatter: NumberFormatter,
    total_tolerance: float = 0.5,
) -> RenderUpdate:
    selected: EnrichedFeature | None = None
    if state.selected_municipality_id is not None:
        selected = next((f for f in features if f.municipality_id == state.selected_municipality_id), None)
    return RenderUpdate(
        state=state,
        map=build_map_projection(features, state, theme),
        tables=build_table_projections(selected, state.active_year, themes, formatter, total_tolerance),
        active_tab=theme.tab_id if theme else None,
    )
