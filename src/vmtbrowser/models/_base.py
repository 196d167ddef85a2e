"""Base model for vmtbrowser data types.

Every domain model inherits from :class:`VmtBaseModel` which provides:

* ``frozen=True`` so joined data and selection snapshots can be shared
  with renderers without defensive copies.
* ``arbitrary_types_allowed`` so shapely geometries can be carried as-is.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class VmtBaseModel(BaseModel):
    """Base for vmtbrowser models."""

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        arbitrary_types_allowed=True,
    )
