from __future__ import annotations

import pytest
from pydantic import ValidationError

from vmtbrowser.exceptions import InvalidSelection
from vmtbrowser.models.metrics import MetricFamily
from vmtbrowser.themes import THEME_CO2, THEME_VMT, THEMES, theme_by_id, theme_by_tab


def test_catalog_covers_every_family_once() -> None:
    assert [t.family for t in THEMES] == list(MetricFamily)
    assert [t.id for t in THEMES] == ["THEME_VMT", "THEME_VHT", "THEME_VOC", "THEME_NOX", "THEME_CO", "THEME_CO2"]


def test_classify_is_left_closed() -> None:
    t1, t2, t3 = THEME_VMT.thresholds

    assert THEME_VMT.classify(t1 - 0.001) == 0
    assert THEME_VMT.classify(t1) == 1
    assert THEME_VMT.classify(t2) == 2
    assert THEME_VMT.classify(t3 + 1_000_000) == 3
    assert THEME_VMT.color_for(t3) == "#a10048"


@pytest.mark.parametrize("theme", THEMES, ids=lambda t: t.id)
def test_legend_swatches_use_their_own_bucket_color(theme) -> None:
    for index, bucket in enumerate(theme.legend_buckets):
        assert theme.color_for(bucket.representative_value) == bucket.color == theme.colors[index]


def test_metric_field_and_caption() -> None:
    assert THEME_VMT.metric_field == "VMT_TOTAL"
    assert THEME_VMT.caption_for("Boston") == "Vehicle Miles of Travel for Boston"
    assert THEME_CO2.caption_for("Boston") == "Carbon Dioxide, grams, for Boston"


def test_mis_keyed_legend_value_rejected() -> None:
    with pytest.raises(ValidationError, match="falls into bucket"):
        THEME_VMT.model_validate({**THEME_VMT.model_dump(), "legend_values": (0, 300000, 93000, 2000000)})


def test_bad_threshold_shapes_rejected() -> None:
    data = THEME_VMT.model_dump()

    with pytest.raises(ValidationError, match="non-decreasing"):
        THEME_VMT.model_validate({**data, "thresholds": (560000, 230000, 920000)})
    with pytest.raises(ValidationError, match="colors"):
        THEME_VMT.model_validate({**data, "colors": ("#000000",)})


def test_lookup_by_id_and_tab() -> None:
    assert theme_by_id("THEME_NOX").family is MetricFamily.NOX
    assert theme_by_tab("#co2") is THEME_CO2
    assert theme_by_tab("vmt") is THEME_VMT


@pytest.mark.parametrize(
    "lookup",
    [lambda: theme_by_id("THEME_PM25"), lambda: theme_by_tab("#pm25"), lambda: theme_by_tab(None), lambda: theme_by_id([])],
)
def test_unknown_theme_raises(lookup) -> None:
    with pytest.raises(InvalidSelection) as excinfo:
        lookup()

    assert excinfo.value.kind == "theme"
