from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from fegeometry.base.ref_el import RefEl, RefElType
from fegeometry.geometry.point import Point
from fegeometry.geometry.quad_o1 import QuadO1
from fegeometry.geometry.segment import SegmentO1
from fegeometry.geometry.tria_o1 import TriaO1

if TYPE_CHECKING:
    import numpy.typing as npt
    from fegeometry.geometry.geometry import Geometry

logger = logging.getLogger(__name__)

GEOMETRY_TYPES: dict[RefElType, type[Geometry]] = {
    RefElType.POINT: Point,
    RefElType.SEGMENT: SegmentO1,
    RefElType.TRIA: TriaO1,
    RefElType.QUAD: QuadO1,
}


def make_geometry(ref_el: RefEl, coords: npt.ArrayLike) -> Geometry:
    """
    Construct the first-order geometry of a reference element from node coordinates.

    Args:
        ref_el: Reference element of the cell.
        coords: ``(dim_global, num_nodes)`` array of node coordinates in the
            reference element's canonical node order.

    Raises:
        ConfigurationError: If the coordinates do not fit the reference element.

    Returns:
        The geometry instance.
    """
    geometry_type = GEOMETRY_TYPES[ref_el.type]
    logger.debug(f"Creating {geometry_type.__name__} geometry.")
    return geometry_type(coords)
