from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, List, Optional, Tuple

from ..core.constants import MIN_POLYGON_VERTICES
from ..core.enums import GeofenceMode, GeoStatus
from .boundary import boundary_is_usable, parse_ward_boundary

logger = logging.getLogger(__name__)


def read_vertices(polygon: Any) -> Optional[List[Tuple[float, float]]]:
    """``[(lat, lng), ...]`` or ``None`` when any vertex is not a numeric pair."""

    if not isinstance(polygon, (list, tuple)):
        return None
    try:
        return [(float(v[0]), float(v[1])) for v in polygon]
    except (TypeError, ValueError, LookupError):
        return None


def is_point_in_polygon(latitude: float, longitude: float, polygon: Any) -> bool:
    """Even-odd ray casting. Vertices are ``[lat, lng]``; lat is y, lng is x.

    A polygon that is not a list, has fewer than 3 vertices, or has a vertex
    that is not a numeric pair counts as inside (fail open). Points exactly
    on an edge have no defined result.
    """

    vertices = read_vertices(polygon)
    if vertices is None or len(vertices) < MIN_POLYGON_VERTICES:
        return True

    x = float(longitude)
    y = float(latitude)
    inside = False
    j = len(vertices) - 1
    for i, (yi, xi) in enumerate(vertices):
        yj, xj = vertices[j]
        j = i
        if yi == yj:
            continue
        if (yi > y) != (yj > y) and x < xj + (xi - xj) * (y - yj) / (yi - yj):
            inside = not inside
    return inside


@dataclass(frozen=True)
class GeofencePolicy:
    """Turns a location and a ward boundary into a ``GeoStatus`` annotation."""

    mode: GeofenceMode = GeofenceMode.ADVISORY_ONLY

    def _unusable(self) -> GeoStatus:
        if self.mode == GeofenceMode.FAIL_CLOSED:
            return GeoStatus.OUTSIDE_WARD
        return GeoStatus.VALID

    def evaluate(
        self,
        latitude: Optional[float],
        longitude: Optional[float],
        raw_boundary: Any,
    ) -> GeoStatus:
        polygon = parse_ward_boundary(raw_boundary)
        if latitude is None or longitude is None or not boundary_is_usable(polygon):
            return self._unusable()

        if read_vertices(polygon) is None:
            logger.warning("Ignoring malformed ward boundary with %d vertices", len(polygon))
            return self._unusable()

        inside = is_point_in_polygon(latitude, longitude, polygon)
        return GeoStatus.VALID if inside else GeoStatus.OUTSIDE_WARD
