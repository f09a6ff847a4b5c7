"""Ward boundary parsing.

Boundaries are stored either as a JSON column (returned as text by the
MySQL driver) or as an already decoded list of ``[lat, lng]`` pairs.
"""

from __future__ import annotations

import json
from typing import Any, List, Optional

from ..core.constants import MIN_POLYGON_VERTICES


def parse_ward_boundary(raw: Any) -> Optional[List[Any]]:
    """Return the boundary as an ordered vertex list, or None.

    Never raises: undecodable text and non-list shapes give None. Vertex
    count and ring closure are not checked here.
    """

    if raw is None or raw == "" or raw == b"":
        return None

    if isinstance(raw, (str, bytes, bytearray)):
        try:
            parsed = json.loads(raw)
        except (ValueError, TypeError):
            return None
    else:
        parsed = raw

    if isinstance(parsed, (list, tuple)):
        return list(parsed)
    return None


def boundary_is_usable(polygon: Optional[List[Any]]) -> bool:
    return isinstance(polygon, list) and len(polygon) >= MIN_POLYGON_VERTICES
