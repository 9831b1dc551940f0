from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

from fegeometry.base.ref_el import RefEl
from fegeometry.geometry.geometry import Geometry

if TYPE_CHECKING:
    import numpy.typing as npt


class Point(Geometry):
    """
    Geometry of a single node.

    The reference element has dimension 0, so every reference point is the
    empty vector and maps to the node itself.
    """
    REF_EL = RefEl.POINT
    NUM_NODES = 1

    @property
    def is_affine(self) -> bool:
        return True

    def global_coords(self, points: npt.ArrayLike) -> npt.NDArray[np.float64]:
        points = self._as_points(points)
        return np.repeat(self._coords, points.shape[1], axis=1)

    def jacobian(self, points: npt.ArrayLike) -> npt.NDArray[np.float64]:
        self._as_points(points)
        return np.zeros((self.dim_global, 0), dtype=np.float64)

    def _gramian(self, points: npt.ArrayLike) -> tuple[npt.NDArray[np.float64], npt.NDArray[np.float64]]:
        # det of the empty Gramian is 1
        points = self._as_points(points)
        return np.zeros((self.dim_global, 0), dtype=np.float64), np.ones(points.shape[1], dtype=np.float64)

    def sub_geometry(self, codim: int, index: int) -> Point:
        self.REF_EL.sub_entity_nodes(codim, index)
        return Point(self._coords)

    def _make_child(self, ref_el: RefEl, coords: npt.NDArray[np.float64]) -> Point:
        return Point(coords)
