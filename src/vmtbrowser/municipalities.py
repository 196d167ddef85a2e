"""Static registry of Boston Region MPO municipalities.

Identifiers are MassGIS ``TOWN_ID`` values (alphabetical over all 351
Massachusetts cities and towns), the same key used by the boundary
geometry and the modeled CSV data. Canonical names are stored upper case,
as in the source data.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from vmtbrowser.config import Region
from vmtbrowser.exceptions import InvalidSelection
from vmtbrowser.ingestion.normalize import to_title_case
from vmtbrowser.models._base import VmtBaseModel

MPO_101_TOWNS: tuple[tuple[int, str], ...] = (
    (2, "ACTON"),
    (10, "ARLINGTON"),
    (14, "ASHLAND"),
    (23, "BEDFORD"),
    (25, "BELLINGHAM"),
    (26, "BELMONT"),
    (30, "BEVERLY"),
    (34, "BOLTON"),
    (35, "BOSTON"),
    (37, "BOXBOROUGH"),
    (40, "BRAINTREE"),
    (46, "BROOKLINE"),
    (48, "BURLINGTON"),
    (49, "CAMBRIDGE"),
    (50, "CANTON"),
    (51, "CARLISLE"),
    (57, "CHELSEA"),
    (65, "COHASSET"),
    (67, "CONCORD"),
    (71, "DANVERS"),
    (73, "DEDHAM"),
    (78, "DOVER"),
    (82, "DUXBURY"),
    (92, "ESSEX"),
    (93, "EVERETT"),
    (99, "FOXBOROUGH"),
    (100, "FRAMINGHAM"),
    (101, "FRANKLIN"),
    (107, "GLOUCESTER"),
    (119, "HAMILTON"),
    (122, "HANOVER"),
    (131, "HINGHAM"),
    (133, "HOLBROOK"),
    (136, "HOLLISTON"),
    (139, "HOPKINTON"),
    (141, "HUDSON"),
    (142, "HULL"),
    (144, "IPSWICH"),
    (155, "LEXINGTON"),
    (157, "LINCOLN"),
    (158, "LITTLETON"),
    (163, "LYNN"),
    (164, "LYNNFIELD"),
    (165, "MALDEN"),
    (166, "MANCHESTER"),
    (168, "MARBLEHEAD"),
    (170, "MARLBOROUGH"),
    (171, "MARSHFIELD"),
    (174, "MAYNARD"),
    (175, "MEDFIELD"),
    (176, "MEDFORD"),
    (177, "MEDWAY"),
    (178, "MELROSE"),
    (184, "MIDDLETON"),
    (185, "MILFORD"),
    (187, "MILLIS"),
    (189, "MILTON"),
    (196, "NAHANT"),
    (198, "NATICK"),
    (199, "NEEDHAM"),
    (207, "NEWTON"),
    (208, "NORFOLK"),
    (213, "NORTH READING"),
    (219, "NORWELL"),
    (220, "NORWOOD"),
    (229, "PEABODY"),
    (231, "PEMBROKE"),
    (243, "QUINCY"),
    (244, "RANDOLPH"),
    (246, "READING"),
    (248, "REVERE"),
    (251, "ROCKLAND"),
    (252, "ROCKPORT"),
    (258, "SALEM"),
    (262, "SAUGUS"),
    (264, "SCITUATE"),
    (266, "SHARON"),
    (269, "SHERBORN"),
    (274, "SOMERVILLE"),
    (277, "SOUTHBOROUGH"),
    (284, "STONEHAM"),
    (285, "STOUGHTON"),
    (286, "STOW"),
    (288, "SUDBURY"),
    (291, "SWAMPSCOTT"),
    (298, "TOPSFIELD"),
    (305, "WAKEFIELD"),
    (307, "WALPOLE"),
    (308, "WALTHAM"),
    (314, "WATERTOWN"),
    (315, "WAYLAND"),
    (317, "WELLESLEY"),
    (320, "WENHAM"),
    (333, "WESTON"),
    (335, "WESTWOOD"),
    (336, "WEYMOUTH"),
    (342, "WILMINGTON"),
    (344, "WINCHESTER"),
    (346, "WINTHROP"),
    (347, "WOBURN"),
    (350, "WRENTHAM"),
)

# Municipalities that left the region in 2017 (97-member MPO).
_LEFT_IN_2017: frozenset[int] = frozenset({82, 185, 231, 285})

MPO_97_TOWNS: tuple[tuple[int, str], ...] = tuple(t for t in MPO_101_TOWNS if t[0] not in _LEFT_IN_2017)


class Municipality(VmtBaseModel):
    id: int
    name: str

    @property
    def display_name(self) -> str:
        return to_title_case(self.name)


class MunicipalityRegistry:
    """Lookup of valid municipality ids, in combo-box order."""

    def __init__(self, municipalities: Iterable[Municipality | tuple[int, str]]) -> None:
        self._by_id: dict[int, Municipality] = {}
        for item in municipalities:
            municipality = item if isinstance(item, Municipality) else Municipality(id=item[0], name=item[1])
            self._by_id[municipality.id] = municipality

    @classmethod
    def for_region(cls, region: Region | str = Region.MPO101) -> MunicipalityRegistry:
        towns = MPO_97_TOWNS if Region(region) is Region.MPO97 else MPO_101_TOWNS
        return cls(towns)

    def __contains__(self, municipality_id: object) -> bool:
        return municipality_id in self._by_id

    def __iter__(self) -> Iterator[Municipality]:
        return iter(self._by_id.values())

    def __len__(self) -> int:
        return len(self._by_id)

    def get(self, municipality_id: int) -> Municipality:
        """Return the municipality or raise :class:`InvalidSelection`."""
        try:
            return self._by_id[municipality_id]
        except KeyError:
            raise InvalidSelection(
                f"Municipality {municipality_id!r} is not in the registry",
                kind="municipality",
                value=municipality_id,
            ) from None

    def display_name(self, municipality_id: int) -> str | None:
        municipality = self._by_id.get(municipality_id)
        return municipality.display_name if municipality is not None else None

    def options(self) -> list[tuple[int, str]]:
        """``(id, display name)`` pairs for populating a combo box."""
        return [(m.id, m.display_name) for m in self._by_id.values()]
