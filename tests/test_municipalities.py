from __future__ import annotations

import pytest

from vmtbrowser.config import Region
from vmtbrowser.exceptions import InvalidSelection
from vmtbrowser.municipalities import MPO_97_TOWNS, MPO_101_TOWNS, MunicipalityRegistry


def test_region_sizes() -> None:
    assert len(MunicipalityRegistry.for_region(Region.MPO101)) == 101
    assert len(MunicipalityRegistry.for_region("mpo97")) == 97
    assert len({town_id for town_id, _ in MPO_101_TOWNS}) == 101


def test_97_region_drops_the_four_departed_towns() -> None:
    dropped = {name for _, name in MPO_101_TOWNS} - {name for _, name in MPO_97_TOWNS}

    assert dropped == {"DUXBURY", "MILFORD", "PEMBROKE", "STOUGHTON"}


def test_options_are_title_cased() -> None:
    registry = MunicipalityRegistry.for_region()

    options = dict(registry.options())

    assert options[35] == "Boston"
    assert options[49] == "Cambridge"
    assert registry.display_name(35) == "Boston"
    assert registry.display_name(999) is None


def test_unknown_id_raises_invalid_selection() -> None:
    registry = MunicipalityRegistry.for_region()

    with pytest.raises(InvalidSelection) as excinfo:
        registry.get(999)

    assert excinfo.value.kind == "municipality"
    assert excinfo.value.value == 999
    assert 999 not in registry
    assert 35 in registry
