"""Tabular (per-year CSV) ingestion + parsing."""

from __future__ import annotations

import csv
import io
import logging
from collections.abc import Callable, Iterable, Mapping
from typing import Any

from vmtbrowser._constants import ID_FIELD, NAME_FIELD
from vmtbrowser._transport import Fetcher
from vmtbrowser.config import BrowserConfig
from vmtbrowser.exceptions import ParseError, RowError
from vmtbrowser.ingestion.normalize import strict_float, strict_int, to_title_case
from vmtbrowser.models.metrics import MetricFamily, Period, VehicleClass, field_name, total_field
from vmtbrowser.models.record import MetricValues, PeriodValues, TabularRecord

_logger = logging.getLogger(__name__)

NameLookup = Callable[[int], str | None]


def read_csv_text(text: str) -> list[dict[str, str]]:
    """Split CSV text (header row first) into dict rows."""
    if text.startswith("\ufeff"):
        text = text[1:]
    try:
        return list(csv.DictReader(io.StringIO(text)))
    except csv.Error as exc:
        raise ParseError(f"Malformed CSV: {exc}") from exc


def _number(row: Mapping[str, Any], name: str, index: int, errors: list[RowError]) -> float:
    try:
        return strict_float(row.get(name))
    except ValueError as exc:
        errors.append(RowError(f"row {index}: field {name}: {exc}", row_index=index, field=name))
        return 0.0


def _parse_family(
    row: Mapping[str, Any],
    family: MetricFamily,
    index: int,
    errors: list[RowError],
) -> MetricValues:
    by_class: dict[VehicleClass, PeriodValues] = {}
    for vehicle_class in VehicleClass:
        cells = {p.value.lower(): _number(row, field_name(family, vehicle_class, p), index, errors) for p in Period}
        by_class[vehicle_class] = PeriodValues(**cells)
    return MetricValues(
        family=family,
        by_class=by_class,
        total=_number(row, total_field(family), index, errors),
    )


def _display_name(row: Mapping[str, Any], municipality_id: int, name_for: NameLookup | None) -> str:
    raw_name = row.get(NAME_FIELD)
    if isinstance(raw_name, str) and raw_name.strip():
        return to_title_case(raw_name.strip())
    if name_for is not None:
        registered = name_for(municipality_id)
        if registered:
            return registered
    return f"Municipality {municipality_id}"


def _parse_row(
    row: Mapping[str, Any],
    index: int,
    year: int,
    name_for: NameLookup | None,
) -> tuple[TabularRecord | None, list[RowError]]:
    errors: list[RowError] = []
    if ID_FIELD not in row:
        return None, [RowError(f"row {index}: missing {ID_FIELD}", row_index=index, field=ID_FIELD)]
    try:
        municipality_id = strict_int(row[ID_FIELD])
    except ValueError as exc:
        return None, [RowError(f"row {index}: field {ID_FIELD}: {exc}", row_index=index, field=ID_FIELD)]

    metrics = {family: _parse_family(row, family, index, errors) for family in MetricFamily}
    if errors:
        return None, errors
    record = TabularRecord(
        municipality_id=municipality_id,
        display_name=_display_name(row, municipality_id, name_for),
        year=year,
        metrics=metrics,
    )
    return record, errors


def parse_tabular_rows(
    rows: Iterable[Mapping[str, Any]],
    year: int,
    *,
    name_for: NameLookup | None = None,
    source: str = "",
) -> dict[int, TabularRecord]:
    """Parse raw rows of one forecast year into records keyed by municipality id.

    Parameters
    ----------
    rows : iterable of mapping
        Rows of named fields, values usually text.
    year : int
        Forecast year the rows belong to.
    name_for : callable, optional
        Fallback display-name lookup used when a row has no ``TOWN``.
    source : str
        Where the rows came from; only used in messages.

    Returns
    -------
    dict
        ``{municipality_id: TabularRecord}``. On duplicate ids the last row
        wins.

    Raises
    ------
    ParseError
        If any row has a missing/non-numeric id or a non-numeric metric.
        Every offending row is listed in ``row_errors``; nothing is
        returned partially.
    """
    records: dict[int, TabularRecord] = {}
    row_errors: list[RowError] = []

    for index, row in enumerate(rows):
        record, errors = _parse_row(row, index, year, name_for)
        if record is None:
            row_errors.extend(errors)
            continue
        if record.municipality_id in records:
            _logger.warning(
                "Duplicate %s=%s in %s (year %s, row %s); keeping the last row",
                ID_FIELD,
                record.municipality_id,
                source or "tabular data",
                year,
                index,
            )
        records[record.municipality_id] = record

    if row_errors:
        rows_hit = sorted({err.row_index for err in row_errors})
        raise ParseError(
            f"{len(rows_hit)} malformed row(s) in {source or 'tabular data'} for {year}: "
            + "; ".join(str(err) for err in row_errors[:10])
            + (" ..." if len(row_errors) > 10 else ""),
            row_errors=row_errors,
            source=source,
        )

    _logger.debug("Parsed %d tabular records for %s", len(records), year)
    return records


async def fetch_tabular(
    config: BrowserConfig,
    fetcher: Fetcher,
    year: int,
    *,
    name_for: NameLookup | None = None,
) -> dict[int, TabularRecord]:
    """Fetch and parse the CSV of one forecast year."""
    url = config.url_for(config.files.tabular_path(year))
    text = await fetcher.fetch_text(url)
    return parse_tabular_rows(read_csv_text(text), year, name_for=name_for, source=url)
