from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

from fegeometry.config import CURVED_QUAD_ORDER, DEFAULT_QUAD_ORDER
from fegeometry.quad.gauss import make_quad_rule

if TYPE_CHECKING:
    from fegeometry.geometry.geometry import Geometry


def volume(geom: Geometry, order: int | None = None) -> float:
    """
    Generalized volume (length, area) of a geometry.

    The integration element is integrated with a Gauss rule over the
    reference element. For a point the volume is 1. Affine geometries are
    measured exactly; for non-affine ones the default rule is of high order
    and the result is exact only up to quadrature error.

    Args:
        geom: Geometry to measure.
        order: Quadrature order, defaults to ``DEFAULT_QUAD_ORDER`` for affine
            geometries and ``CURVED_QUAD_ORDER`` otherwise.

    Returns:
        The volume.
    """
    if order is None:
        order = DEFAULT_QUAD_ORDER if geom.is_affine else CURVED_QUAD_ORDER
    qr = make_quad_rule(geom.ref_el, order)
    return float(np.dot(qr.weights, geom.integration_element(qr.points)))


def total_volume(geometries: list[Geometry], order: int | None = None) -> float:
    """Sum of the volumes of several geometries, 0 for an empty list."""
    return sum((volume(geom, order) for geom in geometries), 0.0)
