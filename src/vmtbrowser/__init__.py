"""vmtbrowser - Municipal VMT and emissions data browser engine."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("vmtbrowser")
except PackageNotFoundError:
    __version__ = "0+local"
from vmtbrowser._transport import Fetcher, HttpFetcher, LocalFetcher
from vmtbrowser.aggregate import NumberFormatter, aggregate, aggregate_all, find_total_discrepancy
from vmtbrowser.browser import DataBrowser
from vmtbrowser.config import BrowserConfig, Region
from vmtbrowser.dataset import FeatureCollection, JoinResult, join, relocate_to_end
from vmtbrowser.exceptions import (
    DataNotReady,
    DatasetLoadError,
    FetchError,
    GeometryError,
    InvalidSelection,
    ParseError,
    RowError,
    VmtConfigError,
    VmtError,
)
from vmtbrowser.ingestion.geometry import parse_geometry, parse_outline
from vmtbrowser.ingestion.tabular import parse_tabular_rows, read_csv_text
from vmtbrowser.models import (
    DisplayRow,
    EnrichedFeature,
    GeometryFeature,
    JoinWarning,
    LegendBucket,
    MetricFamily,
    MissingRecord,
    Period,
    SelectionState,
    TabularRecord,
    Theme,
    TotalDiscrepancy,
    VehicleClass,
)
from vmtbrowser.municipalities import Municipality, MunicipalityRegistry
from vmtbrowser.state.events import LoadState, MapProjection, RenderUpdate, TableProjection
from vmtbrowser.state.selection import MapRenderer, SelectionManager, TableRenderer
from vmtbrowser.themes import THEMES, theme_by_id, theme_by_tab

__all__ = [
    "__version__",
    "BrowserConfig",
    "DataBrowser",
    "DataNotReady",
    "DatasetLoadError",
    "DisplayRow",
    "EnrichedFeature",
    "FeatureCollection",
    "FetchError",
    "Fetcher",
    "GeometryError",
    "GeometryFeature",
    "HttpFetcher",
    "InvalidSelection",
    "JoinResult",
    "JoinWarning",
    "LegendBucket",
    "LoadState",
    "LocalFetcher",
    "MapProjection",
    "MapRenderer",
    "MetricFamily",
    "MissingRecord",
    "Municipality",
    "MunicipalityRegistry",
    "NumberFormatter",
    "ParseError",
    "Period",
    "Region",
    "RenderUpdate",
    "RowError",
    "SelectionManager",
    "SelectionState",
    "THEMES",
    "TableProjection",
    "TableRenderer",
    "TabularRecord",
    "Theme",
    "TotalDiscrepancy",
    "VehicleClass",
    "VmtConfigError",
    "VmtError",
    "aggregate",
    "aggregate_all",
    "find_total_discrepancy",
    "join",
    "parse_geometry",
    "parse_outline",
    "parse_tabular_rows",
    "read_csv_text",
    "relocate_to_end",
    "theme_by_id",
    "theme_by_tab",
]
