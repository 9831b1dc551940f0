from fegeometry.geometry.geometry import Geometry
from fegeometry.geometry.point import Point
from fegeometry.geometry.segment import SegmentO1, SegmentO2
from fegeometry.geometry.tria_o1 import TriaO1
from fegeometry.geometry.quad_o1 import QuadO1
from fegeometry.geometry.factory import make_geometry
from fegeometry.geometry.utils import total_volume, volume

__all__ = [
    "Geometry",
    "Point",
    "QuadO1",
    "SegmentO1",
    "SegmentO2",
    "TriaO1",
    "make_geometry",
    "total_volume",
    "volume",
]
