from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

from fegeometry.base.ref_el import RefEl
from fegeometry.geometry.geometry import Geometry
from fegeometry.geometry.point import Point

if TYPE_CHECKING:
    import numpy.typing as npt


class SegmentO1(Geometry):
    """Straight segment: affine map of [0, 1] between two nodes."""
    REF_EL = RefEl.SEGMENT
    NUM_NODES = 2

    @property
    def is_affine(self) -> bool:
        return True

    @staticmethod
    def shape_functions(t: npt.NDArray[np.float64]) -> npt.NDArray[np.float64]:
        """Shape functions ``[N1, N2]`` as rows, one column per reference point."""
        return np.array([1.0 - t, t])

    def global_coords(self, points: npt.ArrayLike) -> npt.NDArray[np.float64]:
        points = self._as_points(points)
        return self._coords @ self.shape_functions(points[0])

    def jacobian(self, points: npt.ArrayLike) -> npt.NDArray[np.float64]:
        points = self._as_points(points)
        tangent = self._coords[:, [1]] - self._coords[:, [0]]
        return np.repeat(tangent, points.shape[1], axis=1)

    def sub_geometry(self, codim: int, index: int) -> Geometry:
        nodes = self.REF_EL.sub_entity_nodes(codim, index)
        if codim == 0:
            return SegmentO1(self._coords)
        return Point(self._coords[:, list(nodes)])

    def _make_child(self, ref_el: RefEl, coords: npt.NDArray[np.float64]) -> Geometry:
        if ref_el == RefEl.POINT:
            return Point(coords)
        return SegmentO1(coords)


class SegmentO2(Geometry):
    """
    Curved segment given by a quadratic map.

    Nodes are ordered ``[p0, p1, p_mid]`` where ``p_mid`` is the image of the
    reference midpoint 1/2.
    """
    REF_EL = RefEl.SEGMENT
    NUM_NODES = 3

    @staticmethod
    def shape_functions(t: npt.NDArray[np.float64]) -> npt.NDArray[np.float64]:
        """Quadratic Lagrange shape functions ``[N1, N2, N3]`` as rows."""
        return np.array([
            (1.0 - t) * (1.0 - 2.0 * t),
            t * (2.0 * t - 1.0),
            4.0 * t * (1.0 - t),
        ])

    @staticmethod
    def shape_function_derivatives(t: npt.NDArray[np.float64]) -> npt.NDArray[np.float64]:
        """Derivatives ``[dN1/dt, dN2/dt, dN3/dt]`` as rows."""
        return np.array([
            4.0 * t - 3.0,
            4.0 * t - 1.0,
            4.0 - 8.0 * t,
        ])

    def global_coords(self, points: npt.ArrayLike) -> npt.NDArray[np.float64]:
        points = self._as_points(points)
        return self._coords @ self.shape_functions(points[0])

    def jacobian(self, points: npt.ArrayLike) -> npt.NDArray[np.float64]:
        points = self._as_points(points)
        return self._coords @ self.shape_function_derivatives(points[0])

    def sub_geometry(self, codim: int, index: int) -> Geometry:
        nodes = self.REF_EL.sub_entity_nodes(codim, index)
        if codim == 0:
            return SegmentO2(self._coords)
        return Point(self._coords[:, list(nodes)])

    def _child_nodes(
        self,
        ref_el: RefEl,
        ref_vertices: npt.NDArray[np.float64]
    ) -> npt.NDArray[np.float64]:
        if ref_el == RefEl.POINT:
            return ref_vertices
        # The restriction of a quadratic map is quadratic: its end and midpoint images define it
        midpoint = 0.5 * (ref_vertices[:, [0]] + ref_vertices[:, [1]])
        return np.hstack([ref_vertices, midpoint])

    def _make_child(self, ref_el: RefEl, coords: npt.NDArray[np.float64]) -> Geometry:
        if ref_el == RefEl.POINT:
            return Point(coords)
        return SegmentO2(coords)
