"""Geometric mapping and refinement of reference cells for finite element meshes."""
from fegeometry.base.ref_el import RefEl, RefElType
from fegeometry.errors import AnchorNotSetError, ConfigurationError, GeometryError
from fegeometry.geometry import (
    Geometry,
    Point,
    QuadO1,
    SegmentO1,
    SegmentO2,
    TriaO1,
    make_geometry,
    total_volume,
    volume,
)
from fegeometry.quad.gauss import QuadRule, make_quad_rule
from fegeometry.refinement import RefinementPattern, RefPat

__all__ = [
    "AnchorNotSetError",
    "ConfigurationError",
    "Geometry",
    "GeometryError",
    "Point",
    "QuadO1",
    "QuadRule",
    "RefEl",
    "RefElType",
    "RefPat",
    "RefinementPattern",
    "SegmentO1",
    "SegmentO2",
    "TriaO1",
    "make_geometry",
    "make_quad_rule",
    "total_volume",
    "volume",
]
