from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

import numpy as np

from fegeometry.base.ref_el import RefEl
from fegeometry.errors import ConfigurationError
from fegeometry.geometry.kernels import gramian_kernel

if TYPE_CHECKING:
    import numpy.typing as npt
    from fegeometry.refinement.refinement_pattern import RefinementPattern

logger = logging.getLogger(__name__)


class Geometry(ABC):
    """
    Abstract base class for the parametric map of a reference element into world space.

    A geometry is fixed by the world coordinates of its nodes and is immutable
    afterwards. All evaluation methods take a batch of reference points, one
    point per column.
    """

    #: Reference element of the concrete geometry
    REF_EL: RefEl
    #: Number of nodes defining the map (may exceed the number of vertices)
    NUM_NODES: int

    def __init__(self, coords: npt.ArrayLike) -> None:
        """
        Initialize the geometry from the world coordinates of its nodes.

        Args:
            coords: ``(dim_global, num_nodes)`` array, one column per node in
                the reference element's canonical node order.

        Raises:
            ConfigurationError: If the array does not have the expected shape.
        """
        coords = np.array(coords, dtype=np.float64)
        if coords.ndim != 2 or coords.shape[1] != self.NUM_NODES:
            msg = (f"{self.__class__.__name__} expects a (dim_global, {self.NUM_NODES}) "
                   f"coordinate array, got shape {coords.shape}.")
            logger.error(msg)
            raise ConfigurationError(msg)
        if coords.shape[0] < self.REF_EL.dimension:
            msg = (f"{self.__class__.__name__} cannot be embedded in {coords.shape[0]}D world space, "
                   f"its local dimension is {self.REF_EL.dimension}.")
            logger.error(msg)
            raise ConfigurationError(msg)
        coords.setflags(write=False)
        self._coords = coords

    def __repr__(self) -> str:
        """String representation of the geometry."""
        return f"{self.__class__.__name__}(coords={self._coords.tolist()})"

    @property
    def ref_el(self) -> RefEl:
        """Reference element this geometry maps from."""
        return self.REF_EL

    @property
    def dim_local(self) -> int:
        """Dimension of the reference element."""
        return self.REF_EL.dimension

    @property
    def dim_global(self) -> int:
        """Dimension of the world space."""
        return self._coords.shape[0]

    @property
    def coords(self) -> npt.NDArray[np.float64]:
        """Read-only world coordinates of the nodes."""
        return self._coords

    @property
    def is_affine(self) -> bool:
        """Whether the map is affine, i.e. has a constant Jacobian."""
        return False

    @abstractmethod
    def global_coords(self, points: npt.ArrayLike) -> npt.NDArray[np.float64]:
        """
        Map reference points to world coordinates.

        Args:
            points: ``(dim_local, n)`` array of reference coordinates.

        Returns:
            ``(dim_global, n)`` array of world coordinates.
        """
        pass

    @abstractmethod
    def jacobian(self, points: npt.ArrayLike) -> npt.NDArray[np.float64]:
        """
        Derivative of the map at reference points.

        Args:
            points: ``(dim_local, n)`` array of reference coordinates.

        Returns:
            ``(dim_global, n * dim_local)`` array of horizontally stacked Jacobians.
        """
        pass

    @abstractmethod
    def sub_geometry(self, codim: int, index: int) -> Geometry:
        """
        Geometry of a sub-entity, expressed in world coordinates.

        Args:
            codim: Codimension of the sub-entity relative to this geometry.
            index: Local index of the sub-entity.

        Returns:
            A new geometry for the sub-entity.
        """
        pass

    @abstractmethod
    def _make_child(self, ref_el: RefEl, coords: npt.NDArray[np.float64]) -> Geometry:
        """Construct a child geometry of type ``ref_el`` from its world node coordinates."""
        pass

    def jacobian_inverse_gramian(self, points: npt.ArrayLike) -> npt.NDArray[np.float64]:
        """
        Blockwise J (JᵀJ)⁻¹, the transposed pseudo-inverse of the Jacobian.

        For a square Jacobian this is the inverse transpose J⁻ᵀ.

        Args:
            points: ``(dim_local, n)`` array of reference coordinates.

        Returns:
            ``(dim_global, n * dim_local)`` array.
        """
        jig, _ = self._gramian(points)
        return jig

    def integration_element(self, points: npt.ArrayLike) -> npt.NDArray[np.float64]:
        """
        Local measure scaling factor sqrt(det(JᵀJ)) at reference points.

        Args:
            points: ``(dim_local, n)`` array of reference coordinates.

        Returns:
            ``(n, )`` array of integration elements.
        """
        _, dets = self._gramian(points)
        return dets

    def child_geometry(self, ref_pat: RefinementPattern, codim: int = 0) -> list[Geometry]:
        """
        Geometries of the children produced by a refinement pattern.

        Each lattice polygon of the pattern is normalized to reference
        coordinates, mapped to world space by this geometry, and turned into a
        new geometry of the child's cell type.

        Args:
            ref_pat: Refinement pattern for this geometry's reference element.
            codim: Relative codimension of the requested children; only cells (0) are supported.

        Raises:
            ConfigurationError: If the pattern belongs to a different reference
                element or ``codim`` is not 0.

        Returns:
            List of child geometries, in the pattern's child order.
        """
        if ref_pat.ref_el != self.REF_EL:
            msg = (f"Refinement pattern for '{ref_pat.ref_el}' cannot refine a "
                   f"'{self.REF_EL}' geometry.")
            logger.error(msg)
            raise ConfigurationError(msg)
        if codim != 0:
            msg = f"Child geometries are only available for codimension 0, got {codim}."
            logger.error(msg)
            raise ConfigurationError(msg)

        lattice_const = ref_pat.lattice_const
        children: list[Geometry] = []
        for polygon in ref_pat.child_polygons():
            child_ref_el = RefEl.for_polygon(*polygon.shape)
            ref_vertices = polygon.astype(np.float64) / lattice_const
            world = self.global_coords(self._child_nodes(child_ref_el, ref_vertices))
            children.append(self._make_child(child_ref_el, world))

        logger.debug(f"Refined {self.__class__.__name__} with {ref_pat}: {len(children)} children.")
        return children

    def _child_nodes(
        self,
        ref_el: RefEl,
        ref_vertices: npt.NDArray[np.float64]
    ) -> npt.NDArray[np.float64]:
        """Reference coordinates of the nodes defining a child, given its vertices."""
        return ref_vertices

    def _gramian(self, points: npt.ArrayLike) -> tuple[npt.NDArray[np.float64], npt.NDArray[np.float64]]:
        points = self._as_points(points)
        jac = np.ascontiguousarray(self.jacobian(points))
        return gramian_kernel(jac, self.dim_local)

    def _as_points(self, points: npt.ArrayLike) -> npt.NDArray[np.float64]:
        points = np.asarray(points, dtype=np.float64)
        if points.ndim != 2 or points.shape[0] != self.dim_local:
            msg = (f"{self.__class__.__name__} expects a ({self.dim_local}, n) array of "
                   f"reference points, got shape {points.shape}.")
            logger.error(msg)
            raise ConfigurationError(msg)
        return points
