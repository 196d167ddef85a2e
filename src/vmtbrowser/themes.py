"""Static theme catalog: one choropleth classification per metric family.

Thresholds split roughly at the 25th/50th/75th percentile of the 2012
municipal totals.
"""

from __future__ import annotations

from collections.abc import Sequence

from vmtbrowser.exceptions import InvalidSelection
from vmtbrowser.models.metrics import MetricFamily
from vmtbrowser.models.theme import Theme

_SUMMARY = (
    "Table columns are daily peak and off peak period divisions plus daily totals, "
    "rows are 3 vehicle types, cells are total {cells}"
)

THEME_VMT = Theme(
    id="THEME_VMT",
    display_name="Vehicle Miles Traveled",
    family=MetricFamily.VMT,
    thresholds=(230000, 560000, 920000),
    colors=("#febfdc", "#fe80b9", "#d62e6c", "#a10048"),
    legend_labels=("< 230,000 miles", "230,000-560,000 miles", "560,000-920,000 miles", "> 920,000 miles"),
    legend_values=(0, 300000, 700000, 2000000),
    legend_description="Daily total of modeled vehicle miles traveled (VMT), per municipality.",
    tab_id="#vmt",
    table_caption="Vehicle Miles of Travel",
    table_summary=_SUMMARY.format(cells="vehicle miles"),
    unit="miles",
)

THEME_VHT = Theme(
    id="THEME_VHT",
    display_name="Vehicle Hours Traveled",
    family=MetricFamily.VHT,
    thresholds=(7000, 16000, 28000),
    colors=("#d4ffd4", "#a9d6a8", "#53ad51", "#1d6b1b"),
    legend_labels=("< 7,000 hours", "7,000-16,000 hours", "16,000-28,000 hours", "> 28,000 hours"),
    legend_values=(0, 10000, 20000, 30000),
    legend_description="Daily total of modeled vehicle hours traveled (VHT), per municipality.",
    tab_id="#vht",
    table_caption="Vehicle Hours of Travel",
    table_summary=_SUMMARY.format(cells="vehicle hours of travel"),
    unit="hours",
)

THEME_VOC = Theme(
    id="THEME_VOC",
    display_name="Volatile Organic Compounds",
    family=MetricFamily.VOC,
    thresholds=(25, 60, 100),
    colors=("#FEF7E7", "#E79484", "#BD4A39", "#8C0808"),
    legend_labels=("< 25 grams", "25-60 grams", "60-100 grams", "> 100 grams"),
    legend_values=(0, 30, 70, 200),
    legend_description="Daily total of modeled grams of volatile organic compounds (VOC) emitted, per municipality.",
    tab_id="#voc",
    table_caption="Volatile Organic Compounds, grams,",
    table_summary=_SUMMARY.format(cells="grams of V O C"),
    unit="grams",
)

THEME_NOX = Theme(
    id="THEME_NOX",
    display_name="Nitrogen Oxides",
    family=MetricFamily.NOX,
    thresholds=(150, 350, 600),
    colors=("#e7fec8", "#cffe91", "#86d51e", "#5e9515"),
    legend_labels=("< 150 grams", "150-350 grams", "350-600 grams", "> 600 grams"),
    legend_values=(0, 200, 400, 2500),
    legend_description="Daily total of modeled grams of nitrogen oxides (NOX) emitted, per municipality.",
    tab_id="#nox",
    table_caption="Nitrogen Oxides, grams,",
    table_summary=_SUMMARY.format(cells="grams of N O X"),
    unit="grams",
)

THEME_CO = Theme(
    id="THEME_CO",
    display_name="Carbon Monoxide",
    family=MetricFamily.CO,
    thresholds=(700, 1700, 3000),
    colors=("#bffffe", "#80fffe", "#0fb3bc", "#006b6b"),
    legend_labels=("< 700 grams", "700-1,700 grams", "1,700-3,000 grams", "> 3,000 grams"),
    legend_values=(0, 1000, 2000, 3500),
    legend_description="Daily total of modeled grams of carbon monoxide (CO) emitted, per municipality.",
    tab_id="#co",
    table_caption="Carbon Monoxide, grams,",
    table_summary=_SUMMARY.format(cells="grams of C O"),
    unit="grams",
)

THEME_CO2 = Theme(
    id="THEME_CO2",
    display_name="Carbon Dioxide",
    family=MetricFamily.CO2,
    thresholds=(100000, 250000, 500000),
    colors=("#ecd9fe", "#d9b3f3", "#824aba", "#5b3482"),
    legend_labels=("< 100,000 grams", "100,000-250,000 grams", "250,000-500,000 grams", "> 500,000 grams"),
    legend_values=(0, 200000, 450000, 2000000),
    legend_description="Daily total of modeled grams of carbon dioxide (CO2) emitted, per municipality.",
    tab_id="#co2",
    table_caption="Carbon Dioxide, grams,",
    table_summary=_SUMMARY.format(cells="grams of C O 2"),
    unit="grams",
)

THEMES: tuple[Theme, ...] = (THEME_VMT, THEME_VHT, THEME_VOC, THEME_NOX, THEME_CO, THEME_CO2)


def theme_by_id(theme_id: str, themes: Sequence[Theme] = THEMES) -> Theme:
    for theme in themes:
        if theme.id == theme_id:
            return theme
    raise InvalidSelection(f"Unknown theme {theme_id!r}", kind="theme", value=theme_id)


def theme_by_tab(tab_id: str, themes: Sequence[Theme] = THEMES) -> Theme:
    """Resolve a table tab (``"#vmt"``; the leading ``#`` is optional)."""
    if isinstance(tab_id, str):
        key = tab_id if tab_id.startswith("#") else f"#{tab_id}"
        for theme in themes:
            if theme.tab_id == key:
                return theme
    raise InvalidSelection(f"Unknown table tab {tab_id!r}", kind="theme", value=tab_id)
