"""Catalog of the reference elements (point, segment, triangle, quadrilateral)."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, ClassVar

import numpy as np

from fegeometry.errors import ConfigurationError

if TYPE_CHECKING:
    import numpy.typing as npt

logger = logging.getLogger(__name__)


class RefElType(StrEnum):
    """Topological type of a reference element."""
    POINT = "point"
    SEGMENT = "segment"
    TRIA = "tria"
    QUAD = "quad"


_DIMENSION: dict[RefElType, int] = {
    RefElType.POINT: 0,
    RefElType.SEGMENT: 1,
    RefElType.TRIA: 2,
    RefElType.QUAD: 2,
}


def _frozen(array: npt.NDArray[np.float64]) -> npt.NDArray[np.float64]:
    array.setflags(write=False)
    return array


# Node coordinates, one column per node
_NODE_COORDS: dict[RefElType, npt.NDArray[np.float64]] = {
    RefElType.POINT: _frozen(np.zeros((0, 1), dtype=np.float64)),
    RefElType.SEGMENT: _frozen(np.array([[0.0, 1.0]])),
    RefElType.TRIA: _frozen(np.array([
        [0.0, 1.0, 0.0],
        [0.0, 0.0, 1.0],
    ])),
    RefElType.QUAD: _frozen(np.array([
        [0.0, 1.0, 1.0, 0.0],
        [0.0, 0.0, 1.0, 1.0],
    ])),
}

# Edge i connects node i with node (i + 1) mod num_nodes
_EDGE_NODES: dict[RefElType, tuple[tuple[int, int], ...]] = {
    RefElType.TRIA: ((0, 1), (1, 2), (2, 0)),
    RefElType.QUAD: ((0, 1), (1, 2), (2, 3), (3, 0)),
}

_VOLUME: dict[RefElType, float] = {
    RefElType.POINT: 1.0,
    RefElType.SEGMENT: 1.0,
    RefElType.TRIA: 0.5,
    RefElType.QUAD: 1.0,
}


@dataclass(frozen=True)
class RefEl:
    """
    A reference element: the canonical domain of a parametric map.

    Instances are immutable and one shared constant exists per type
    (``RefEl.POINT``, ``RefEl.SEGMENT``, ``RefEl.TRIA``, ``RefEl.QUAD``).

    Attributes:
        type: The topological type.
    """
    type: RefElType

    POINT: ClassVar[RefEl]
    SEGMENT: ClassVar[RefEl]
    TRIA: ClassVar[RefEl]
    QUAD: ClassVar[RefEl]

    def __str__(self) -> str:
        return str(self.type)

    @property
    def dimension(self) -> int:
        """Topological dimension of the reference element."""
        return _DIMENSION[self.type]

    @property
    def num_nodes(self) -> int:
        """Number of vertices."""
        return _NODE_COORDS[self.type].shape[1]

    @property
    def node_coords(self) -> npt.NDArray[np.float64]:
        """Read-only ``(dimension, num_nodes)`` array of vertex coordinates."""
        return _NODE_COORDS[self.type]

    @property
    def volume(self) -> float:
        """Length/area of the reference domain (1 for a point)."""
        return _VOLUME[self.type]

    def num_sub_entities(self, codim: int) -> int:
        """
        Number of sub-entities of a given relative codimension.

        Args:
            codim: Relative codimension, 0 <= codim <= dimension.

        Raises:
            ConfigurationError: If ``codim`` is out of range.

        Returns:
            The number of sub-entities.
        """
        self._check_codim(codim)
        if codim == 0:
            return 1
        if codim == self.dimension:
            return self.num_nodes
        return len(_EDGE_NODES[self.type])

    def sub_type(self, codim: int, index: int) -> RefEl:
        """Reference element of the ``index``-th sub-entity of codimension ``codim``."""
        self._check_sub_index(codim, index)
        return _BY_DIMENSION[self.dimension - codim] if codim > 0 else self

    def sub_entity_nodes(self, codim: int, index: int) -> tuple[int, ...]:
        """
        Local node indices of a sub-entity, in the sub-entity's node order.

        Args:
            codim: Relative codimension of the sub-entity.
            index: Local index of the sub-entity.

        Returns:
            Tuple of node indices of this reference element.
        """
        self._check_sub_index(codim, index)
        if codim == 0:
            return tuple(range(self.num_nodes))
        if codim == self.dimension:
            return (index,)
        return _EDGE_NODES[self.type][index]

    def sub_sub_entity_to_sub_entity(
        self,
        sub_codim: int,
        sub_index: int,
        sub_sub_codim: int,
        sub_sub_index: int
    ) -> int:
        """
        Map a sub-entity of a sub-entity back to a sub-entity of this element.

        Args:
            sub_codim: Codimension of the sub-entity relative to this element.
            sub_index: Index of the sub-entity.
            sub_sub_codim: Codimension of the sub-sub-entity relative to the sub-entity.
            sub_sub_index: Index of the sub-sub-entity within the sub-entity.

        Raises:
            ConfigurationError: If any index or codimension is out of range.

        Returns:
            Index of the sub-sub-entity as a sub-entity of codimension
            ``sub_codim + sub_sub_codim`` of this element.
        """
        sub_ref_el = self.sub_type(sub_codim, sub_index)
        sub_ref_el._check_sub_index(sub_sub_codim, sub_sub_index)
        if sub_sub_codim == 0:
            return sub_index
        if sub_codim == 0:
            return sub_sub_index
        # Only the vertices of an edge remain
        return _EDGE_NODES[self.type][sub_index][sub_sub_index]

    @classmethod
    def for_polygon(cls, dimension: int, num_vertices: int) -> RefEl:
        """
        Classify a child polygon by its shape.

        Args:
            dimension: Number of coordinate rows of the polygon.
            num_vertices: Number of vertex columns of the polygon.

        Raises:
            ConfigurationError: If no reference element has this shape.

        Returns:
            The matching reference element.
        """
        for ref_el in (cls.POINT, cls.SEGMENT, cls.TRIA, cls.QUAD):
            if ref_el.dimension == dimension and ref_el.num_nodes == num_vertices:
                return ref_el
        msg = f"No reference element with dimension {dimension} and {num_vertices} vertices."
        logger.error(msg)
        raise ConfigurationError(msg)

    def _check_codim(self, codim: int) -> None:
        if not 0 <= codim <= self.dimension:
            msg = (f"Illegal codimension {codim} for reference element '{self}' "
                   f"of dimension {self.dimension}.")
            logger.error(msg)
            raise ConfigurationError(msg)

    def _check_sub_index(self, codim: int, index: int) -> None:
        count = self.num_sub_entities(codim)
        if not 0 <= index < count:
            msg = (f"Sub-entity index {index} out of range for codimension {codim} "
                   f"of '{self}' ({count} sub-entities).")
            logger.error(msg)
            raise ConfigurationError(msg)


RefEl.POINT = RefEl(RefElType.POINT)
RefEl.SEGMENT = RefEl(RefElType.SEGMENT)
RefEl.TRIA = RefEl(RefElType.TRIA)
RefEl.QUAD = RefEl(RefElType.QUAD)

_BY_DIMENSION: dict[int, RefEl] = {0: RefEl.POINT, 1: RefEl.SEGMENT}
