from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

from fegeometry.base.ref_el import RefEl
from fegeometry.geometry.geometry import Geometry
from fegeometry.geometry.point import Point
from fegeometry.geometry.segment import SegmentO1
from fegeometry.geometry.tria_o1 import TriaO1

if TYPE_CHECKING:
    import numpy.typing as npt


class QuadO1(Geometry):
    """
    Represents a quadrilateral with straight edges, the bilinear image of the unit square.
    """
    REF_EL = RefEl.QUAD
    NUM_NODES = 4

    @property
    def is_affine(self) -> bool:
        # Bilinear term vanishes for parallelograms
        c = self._coords
        return bool(np.array_equal(c[:, 0] + c[:, 2], c[:, 1] + c[:, 3]))

    @staticmethod
    def shape_functions(points: npt.NDArray[np.float64]) -> npt.NDArray[np.float64]:
        """
        Calculate the bilinear shape functions.

        Args:
            points: ``(2, n)`` array of reference coordinates.

        Returns:
            ``(4, n)`` array of shape function values ``[N1, N2, N3, N4]``.
        """
        x, y = points
        return np.array([
            (1.0 - x) * (1.0 - y),
            x * (1.0 - y),
            x * y,
            (1.0 - x) * y,
        ])

    @staticmethod
    def shape_function_derivatives(
        points: npt.NDArray[np.float64]
    ) -> tuple[npt.NDArray[np.float64], npt.NDArray[np.float64]]:
        """
        Calculate the derivatives of the shape functions.

        Args:
            points: ``(2, n)`` array of reference coordinates.

        Returns:
            Two ``(4, n)`` arrays with the x- and y-derivatives.
        """
        x, y = points
        d_dx = np.array([-(1.0 - y), 1.0 - y, y, -y])
        d_dy = np.array([-(1.0 - x), -x, x, 1.0 - x])
        return d_dx, d_dy

    def global_coords(self, points: npt.ArrayLike) -> npt.NDArray[np.float64]:
        points = self._as_points(points)
        return self._coords @ self.shape_functions(points)

    def jacobian(self, points: npt.ArrayLike) -> npt.NDArray[np.float64]:
        points = self._as_points(points)
        d_dx, d_dy = self.shape_function_derivatives(points)
        jac = np.empty((self.dim_global, 2 * points.shape[1]), dtype=np.float64)
        jac[:, 0::2] = self._coords @ d_dx
        jac[:, 1::2] = self._coords @ d_dy
        return jac

    def sub_geometry(self, codim: int, index: int) -> Geometry:
        nodes = list(self.REF_EL.sub_entity_nodes(codim, index))
        if codim == 0:
            return QuadO1(self._coords)
        if codim == 1:
            return SegmentO1(self._coords[:, nodes])
        return Point(self._coords[:, nodes])

    def _make_child(self, ref_el: RefEl, coords: npt.NDArray[np.float64]) -> Geometry:
        if ref_el == RefEl.TRIA:
            return TriaO1(coords)
        return QuadO1(coords)
