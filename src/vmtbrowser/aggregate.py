"""Row aggregation for the per-municipality tables.

One parametrized function serves all six metric families; the column names
come from :mod:`vmtbrowser.models.metrics`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from vmtbrowser._constants import GRAND_TOTAL_TITLE
from vmtbrowser.models.metrics import MetricFamily, Period, VehicleClass
from vmtbrowser.models.record import TabularRecord
from vmtbrowser.models.table import DisplayRow, RowValues, TotalDiscrepancy

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NumberFormatter:
    """Whole-unit, half-up rounding with digit grouping (``1234.5`` -> ``"1,235"``)."""

    separator: str = ","

    @staticmethod
    def round_half_up(value: float) -> int:
        return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))

    def format(self, value: float) -> str:
        text = f"{self.round_half_up(value):,}"
        if self.separator != ",":
            text = text.replace(",", self.separator)
        return text

    __call__ = format


def _row(title: str, values: RowValues, formatter: NumberFormatter) -> DisplayRow:
    return DisplayRow(
        title=title,
        am=formatter(values.am),
        md=formatter(values.md),
        pm=formatter(values.pm),
        nt=formatter(values.nt),
        total=formatter(values.total),
        values=values,
    )


def aggregate(
    record: TabularRecord,
    family: MetricFamily,
    formatter: NumberFormatter | None = None,
) -> tuple[DisplayRow, ...]:
    """Build the four table rows of one metric family.

    Class rows total their own four periods. The grand-total row sums each
    period across classes, but its daily value is the supplied
    ``<FAMILY>_TOTAL``, never the recomputed sum. Rounding happens after
    summation.
    """
    formatter = formatter or NumberFormatter()
    metric = record.metric(family)

    rows: list[DisplayRow] = []
    for vehicle_class in VehicleClass:
        periods = metric.by_class[vehicle_class]
        values = RowValues(am=periods.am, md=periods.md, pm=periods.pm, nt=periods.nt, total=periods.daily)
        rows.append(_row(vehicle_class.label, values, formatter))

    grand = RowValues(
        am=metric.period_sum(Period.AM),
        md=metric.period_sum(Period.MD),
        pm=metric.period_sum(Period.PM),
        nt=metric.period_sum(Period.NT),
        total=metric.total,
    )
    rows.append(_row(GRAND_TOTAL_TITLE, grand, formatter))
    return tuple(rows)


def aggregate_all(
    record: TabularRecord,
    formatter: NumberFormatter | None = None,
) -> dict[MetricFamily, tuple[DisplayRow, ...]]:
    return {family: aggregate(record, family, formatter) for family in MetricFamily}


def find_total_discrepancy(
    record: TabularRecord,
    family: MetricFamily,
    tolerance: float = 0.5,
) -> TotalDiscrepancy | None:
    """Compare the supplied daily total with the sum of its twelve components.

    Returns ``None`` when they agree within *tolerance*. The supplied total
    is still the one displayed; this only makes the disagreement visible.
    """
    metric = record.metric(family)
    recomputed = metric.component_sum
    if abs(metric.total - recomputed) <= tolerance:
        return None
    _logger.warning(
        "%s for %s (%s) in %s: supplied total %s differs from component sum %s",
        family.value,
        record.display_name,
        record.municipality_id,
        record.year,
        metric.total,
        recomputed,
    )
    return TotalDiscrepancy(
        municipality_id=record.municipality_id,
        year=record.year,
        family=family,
        supplied_total=metric.total,
        recomputed_total=recomputed,
    )
