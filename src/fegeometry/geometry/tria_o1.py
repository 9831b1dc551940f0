from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

from fegeometry.base.ref_el import RefEl
from fegeometry.geometry.geometry import Geometry
from fegeometry.geometry.point import Point
from fegeometry.geometry.segment import SegmentO1

if TYPE_CHECKING:
    import numpy.typing as npt


# B_N = [
#   [dN1(x,y)/dx, dN2(x,y)/dx, dN3(x,y)/dx],
#   [dN1(x,y)/dy, dN2(x,y)/dy, dN3(x,y)/dy]
# ]
B_N = np.array([
    [-1.0, 1.0, 0.0],
    [-1.0, 0.0, 1.0],
])


class TriaO1(Geometry):
    """
    Represents a straight triangle, the affine image of the unit triangle.
    """
    REF_EL = RefEl.TRIA
    NUM_NODES = 3

    def __init__(self, coords: npt.ArrayLike) -> None:
        """
        Initialize the triangle.

        Args:
            coords: ``(dim_global, 3)`` array with the vertex coordinates.
        """
        super().__init__(coords)
        self._jacobian: npt.NDArray[np.float64] = self._coords @ B_N.T

    @property
    def is_affine(self) -> bool:
        return True

    @staticmethod
    def shape_functions(points: npt.NDArray[np.float64]) -> npt.NDArray[np.float64]:
        """
        Calculate the shape functions of the triangle.

        Args:
            points: ``(2, n)`` array of reference coordinates.

        Returns:
            ``(3, n)`` array of shape function values ``[N1, N2, N3]``.
        """
        x, y = points
        return np.array([1.0 - x - y, x, y])

    def global_coords(self, points: npt.ArrayLike) -> npt.NDArray[np.float64]:
        points = self._as_points(points)
        return self._coords @ self.shape_functions(points)

    def jacobian(self, points: npt.ArrayLike) -> npt.NDArray[np.float64]:
        points = self._as_points(points)
        return np.tile(self._jacobian, (1, points.shape[1]))

    def sub_geometry(self, codim: int, index: int) -> Geometry:
        nodes = list(self.REF_EL.sub_entity_nodes(codim, index))
        if codim == 0:
            return TriaO1(self._coords)
        if codim == 1:
            return SegmentO1(self._coords[:, nodes])
        return Point(self._coords[:, nodes])

    def _make_child(self, ref_el: RefEl, coords: npt.NDArray[np.float64]) -> Geometry:
        return TriaO1(coords)
