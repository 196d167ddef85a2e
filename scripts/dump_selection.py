#!/usr/bin/env python3
"""Print what the data browser would render for one selection.

Loads the region's boundaries and tabular data, applies the requested
theme/year/municipality and prints the legend, the map colors and the
six per-municipality tables.

Usage
-----
From a local copy of the data directory::

    python scripts/dump_selection.py --data-dir ./app --theme THEME_VMT --town 35

Or over HTTP::

    export VMT_BASE_URL="https://example.org/vmt"
    python scripts/dump_selection.py --year 2040 --theme THEME_CO2 --town 49

Options::

    --data-dir DIR     Read data files from DIR instead of VMT_BASE_URL
    --region REGION    mpo101 (default) or mpo97
    --year YEAR        Forecast year to show (default: configured default)
    --theme THEME_ID   Map theme, e.g. THEME_VMT
    --town ID          Municipality TOWN_ID to select
    --json             Output as machine-readable JSON
    --output FILE      Write output to FILE instead of stdout
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any

# Allow running from the repo root without installing the package.
_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from vmtbrowser import BrowserConfig, DataBrowser, LocalFetcher, RenderUpdate, VmtError  # noqa: E402

# ── helpers ──────────────────────────────────────────────────


def _section(title: str) -> str:
    line = "=" * 60
    return f"\n{line}\n  {title}\n{line}"


def _format_update(update: RenderUpdate, names: dict[int, str]) -> list[str]:
    out: list[str] = []
    state = update.state
    out.append(_section("SELECTION"))
    out.append(f"  year      : {state.active_year}")
    out.append(f"  theme     : {state.active_theme_id or '-'}")
    town = state.selected_municipality_id
    out.append(f"  town      : {names.get(town, '-') if town is not None else '-'} ({town})")

    projection = update.map
    out.append(_section(f"LEGEND  {projection.legend_title or '(no theme)'}"))
    if projection.legend_description:
        out.append(f"  {projection.legend_description}")
    for bucket in projection.legend_buckets:
        out.append(f"  {bucket.color}  {bucket.label}")

    out.append(_section("MAP COLORS (paint order)"))
    for municipality_id in projection.ordered_ids:
        marker = " *" if municipality_id == projection.highlighted_id else ""
        out.append(f"  {municipality_id:>4}  {projection.colors[municipality_id]}  {names.get(municipality_id, '')}{marker}")
    if projection.missing_ids:
        out.append(f"  no data for {state.active_year}: {list(projection.missing_ids)}")

    for table in update.tables:
        out.append(_section(table.title))
        if table.missing:
            out.append("  (no data)")
            continue
        headers = [header for header, _ in table.columns]
        out.append("  " + " | ".join(f"{h:>26}" if i == 0 else f"{h:>12}" for i, h in enumerate(headers)))
        for row in table.rows:
            grid = row.as_grid_row()
            cells = [grid[key] for _, key in table.columns]
            out.append("  " + " | ".join(f"{c:>26}" if i == 0 else f"{c:>12}" for i, c in enumerate(cells)))
        if table.discrepancy is not None:
            d = table.discrepancy
            out.append(f"  ! supplied total {d.supplied_total} differs from component sum {d.recomputed_total}")
    return out


def _config_from_args(args: argparse.Namespace) -> BrowserConfig:
    overrides: dict[str, Any] = {}
    if args.region:
        overrides["region"] = args.region
    if args.data_dir:
        # LocalFetcher resolves relative paths; VMT_BASE_URL must not prefix them.
        overrides["base_url"] = ""
    return BrowserConfig.from_env(**overrides)


# ── main ─────────────────────────────────────────────────────


async def main() -> int:
    parser = argparse.ArgumentParser(
        description="Dump the map and table projections for one data browser selection.",
    )
    parser.add_argument("--data-dir", help="Read data files from this directory instead of VMT_BASE_URL")
    parser.add_argument("--region", help="mpo101 or mpo97 (default: VMT_REGION or mpo101)")
    parser.add_argument("--year", type=int, help="Forecast year to show")
    parser.add_argument("--theme", help="Map theme id, e.g. THEME_VMT")
    parser.add_argument("--town", help="Municipality TOWN_ID to select")
    parser.add_argument("--json", action="store_true", dest="json_mode", help="Output machine-readable JSON")
    parser.add_argument("--output", "-o", help="Write output to FILE instead of stdout")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    else:
        logging.basicConfig(level=logging.WARNING)

    config = _config_from_args(args)
    fetcher = LocalFetcher(args.data_dir) if args.data_dir else None

    try:
        async with DataBrowser(config, fetcher=fetcher) as browser:
            update = await browser.start()
            if args.year is not None and args.year != config.default_year:
                update = await browser.change_year(args.year) or browser.snapshot()
            if args.theme:
                update = browser.select_theme(args.theme)
            if args.town:
                update = browser.on_feature_clicked(args.town)
            names = dict(browser.registry.options())
    except VmtError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    if args.json_mode:
        payload = update.model_dump_json(indent=2)
    else:
        payload = "\n".join(_format_update(update, names))

    if args.output:
        Path(args.output).write_text(payload, encoding="utf-8")
        print(f"Output written to {args.output}", file=sys.stderr)
    else:
        print(payload)
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
