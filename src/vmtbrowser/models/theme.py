"""Map theme model."""

from __future__ import annotations

from bisect import bisect_right

from pydantic import model_validator

from vmtbrowser.models._base import VmtBaseModel
from vmtbrowser.models.metrics import MetricFamily, total_field


class LegendBucket(VmtBaseModel):
    label: str
    representative_value: float
    color: str


class Theme(VmtBaseModel):
    """A selectable metric family with its color classification.

    ``thresholds`` split values into ``len(thresholds) + 1`` left-closed
    buckets: a value equal to a threshold belongs to the bucket above it,
    and the last bucket is open ended.
    """

    id: str
    display_name: str
    family: MetricFamily
    thresholds: tuple[float, ...]
    colors: tuple[str, ...]
    legend_labels: tuple[str, ...]
    legend_values: tuple[float, ...]
    legend_description: str
    tab_id: str
    table_caption: str
    table_summary: str
    unit: str

    @model_validator(mode="after")
    def _check_classification(self) -> Theme:
        if any(b < a for a, b in zip(self.thresholds, self.thresholds[1:])):
            raise ValueError(f"{self.id}: thresholds must be non-decreasing")
        bucket_count = len(self.thresholds) + 1
        if len(self.colors) != bucket_count:
            raise ValueError(f"{self.id}: expected {bucket_count} colors, got {len(self.colors)}")
        if len(self.legend_labels) != bucket_count or len(self.legend_values) != bucket_count:
            raise ValueError(f"{self.id}: legend must have {bucket_count} entries")
        # Each legend swatch must classify into its own bucket.
        for index, value in enumerate(self.legend_values):
            if self.classify(value) != index:
                raise ValueError(
                    f"{self.id}: legend value {value} for {self.legend_labels[index]!r} "
                    f"falls into bucket {self.classify(value)}, not {index}"
                )
        return self

    @property
    def metric_field(self) -> str:
        """Source column that drives the map color, e.g. ``VMT_TOTAL``."""
        return total_field(self.family)

    @property
    def legend_buckets(self) -> tuple[LegendBucket, ...]:
        return tuple(
            LegendBucket(label=label, representative_value=value, color=color)
            for label, value, color in zip(self.legend_labels, self.legend_values, self.colors)
        )

    def classify(self, value: float) -> int:
        return bisect_right(self.thresholds, value)

    def color_for(self, value: float) -> str:
        return self.colors[self.classify(value)]

    def caption_for(self, municipality_name: str) -> str:
        return f"{self.table_caption} for {municipality_name}"
