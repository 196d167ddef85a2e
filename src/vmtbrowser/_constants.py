"""Internal constants shared across the library."""

from vmtbrowser.models.metrics import Period

# Column / feature property holding the municipality identifier and name.
ID_FIELD = "TOWN_ID"
NAME_FIELD = "TOWN"

# Fill used on the map for municipalities without data (no theme, or a
# missing record for the active year).
NO_DATA_COLOR = "#ffffff"

# Accessible grid column descriptors: (header, key in DisplayRow.as_grid_row()).
TABLE_COLUMNS: tuple[tuple[str, str], ...] = (
    ("Mode", "title"),
    *((period.label, period.value.lower()) for period in Period),
    ("Daily", "total"),
)

GRAND_TOTAL_TITLE = "Total (SOV, HOV, Trucks)"
