"""
Peak detection: apex-rooted caps that can be diminished or gyrated.

A peak is a pyramid (an apex vertex ringed by triangles), a cupola (an
n-gon top ringed by alternating squares and triangles) or a rotunda (a
pentagon top over a band of triangles and pentagons). Each peak sits on a
planar boundary ring that separates it from the rest of the mesh.
"""

from __future__ import annotations

import logging
from collections import Counter
from enum import Enum
from typing import FrozenSet, List, Optional, Sequence, Tuple

import numpy as np

from .errors import OperationError, StructuralError

logger = logging.getLogger(__name__)

Edge = Tuple[int, int]


class PeakType(Enum):
    PYRAMID = "pyramid"
    CUPOLA = "cupola"
    ROTUNDA = "rotunda"


def get_boundary(directed_edges: Sequence[Edge]) -> List[Edge]:
    """Chain directed edges into one closed loop, starting at the lowest vertex."""
    if not directed_edges:
        raise OperationError("Boundary is empty")
    following = {}
    for v1, v2 in directed_edges:
        if v1 in following:
            raise OperationError(f"Boundary passes through vertex {v1} more than once")
        following[v1] = v2
    start = min(following)
    ring = []
    current = start
    while True:
        if current not in following:
            raise OperationError(f"Boundary is open at vertex {current}")
        ring.append((current, following[current]))
        current = following[current]
        if current == start:
            break
    if len(ring) != len(directed_edges):
        raise OperationError("Boundary is not a single closed loop")
    return ring


class Peak:
    def __init__(
        self,
        polyhedron,
        kind: PeakType,
        inner: Sequence[int],
        top_face: Optional[int] = None,
        ring_size: Optional[int] = None,
    ):
        self.polyhedron = polyhedron
        self.kind = kind
        self.top_face = top_face
        self.ring_size = ring_size
        self._inner = tuple(inner)
        self._faces = frozenset(face.f_index for face in polyhedron.adjacent_faces(*self._inner))
        self._boundary = None

    def __repr__(self):
        root = f"face {self.top_face}" if self.top_face is not None else f"vertex {self._inner[0]}"
        return f"<Peak {self.kind.value} at {root}>"

    @property
    def apex(self) -> Optional[int]:
        return self._inner[0] if self.kind is PeakType.PYRAMID else None

    def inner_vertices(self) -> Tuple[int, ...]:
        """Vertices strictly above the boundary ring."""
        return self._inner

    def faces(self) -> FrozenSet[int]:
        return self._faces

    def top_point(self) -> np.ndarray:
        if self.kind is PeakType.PYRAMID:
            return self.polyhedron.vertex_vector(self.apex)
        return self.polyhedron.get_face(self.top_face).centroid()

    def boundary(self) -> List[Edge]:
        """
        The ring of edges between the peak and the rest of the mesh, directed
        the way the peak's own faces traverse them.
        """
        if self._boundary is None:
            graph = self.polyhedron.directed_edge_to_face_graph()
            edges = []
            for f_index in sorted(self._faces):
                for v1, v2 in self.polyhedron.get_face(f_index).directed_edges():
                    if graph.get((v2, v1)) not in self._faces:
                        edges.append((v1, v2))
            self._boundary = get_boundary(edges)
        return self._boundary

    def boundary_vertices(self) -> List[int]:
        return [v1 for v1, _ in self.boundary()]

    def is_valid(self) -> bool:
        """The boundary is one planar loop that is not already a face."""
        try:
            ring = self.boundary_vertices()
        except OperationError as e:
            logger.debug("Rejected %r: %s", self, e)
            return False
        if self.ring_size is not None and len(ring) != self.ring_size:
            return False
        if set(ring) & set(self._inner):
            return False
        if not self.polyhedron.is_planar(ring):
            return False
        ring_set = set(ring)
        return not any(set(face.v_indices()) == ring_set for face in self.polyhedron.adjacent_faces(ring[0]))

    @staticmethod
    def _pyramid(polyhedron, v_index: int) -> Optional["Peak"]:
        touching = polyhedron.adjacent_faces(v_index)
        if not 3 <= len(touching) <= 5:
            return None
        if any(face.num_sides() != 3 for face in touching):
            return None
        try:
            polyhedron.directed_adjacent_faces(v_index)
        except StructuralError:
            return None
        return Peak(polyhedron, PeakType.PYRAMID, [v_index], ring_size=len(touching))

    @staticmethod
    def _capped(polyhedron, face) -> Optional["Peak"]:
        n = face.num_sides()
        if not 3 <= n <= 5:
            return None
        across = [polyhedron.edge_faces(edge)[1] for edge in face.directed_edges()]
        if any(other is None for other in across):
            return None
        top = list(face.v_indices())
        if all(other.num_sides() == 4 for other in across):
            kind = PeakType.CUPOLA
            inner = top
            expected = Counter({n: 1}) + Counter({4: n, 3: n})
            ring_size = 2 * n
        elif n == 5 and all(other.num_sides() == 3 for other in across):
            kind = PeakType.ROTUNDA
            middle = [v for v in polyhedron.adjacent_vertex_indices(*top) if v not in top]
            if len(middle) != 5:
                return None
            inner = top + middle
            expected = Counter({5: 6, 3: 10})
            ring_size = 10
        else:
            return None
        members = polyhedron.adjacent_faces(*inner)
        if Counter(f.num_sides() for f in members) != expected:
            return None
        return Peak(polyhedron, kind, inner, top_face=face.f_index, ring_size=ring_size)

    @staticmethod
    def get_all(polyhedron) -> List["Peak"]:
        candidates = []
        for v_index in polyhedron.v_indices():
            peak = Peak._pyramid(polyhedron, v_index)
            if peak is not None:
                candidates.append(peak)
        for face in polyhedron.get_faces():
            peak = Peak._capped(polyhedron, face)
            if peak is not None:
                candidates.append(peak)
        peaks = [peak for peak in candidates if peak.is_valid()]
        logger.debug("Found %d peaks (%d candidates)", len(peaks), len(candidates))
        return peaks


__all__ = ["Peak", "PeakType", "get_boundary"]
