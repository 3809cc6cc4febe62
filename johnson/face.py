"""Per-face view over a Polyhedron snapshot."""

from __future__ import annotations

from typing import Iterable, List, Tuple

import numpy as np

from .errors import StructuralError
from .lin_alg import Plane, Ray, get_centroid, get_normal, get_normal_ray, get_plane

Edge = Tuple[int, int]


class Face:
    """
    Handle to face `f_index` of `polyhedron`.

    Obtain faces through Polyhedron.get_face so that each (polyhedron, index)
    pair maps to a single cached view. A view is only meaningful for the
    polyhedron instance it was created from.
    """

    def __init__(self, polyhedron, f_index: int):
        self.polyhedron = polyhedron
        self.f_index = f_index
        self._plane = None
        self._centroid = None

    def __eq__(self, other):
        if not isinstance(other, Face):
            return NotImplemented
        return self.polyhedron is other.polyhedron and self.f_index == other.f_index

    def __hash__(self):
        return hash((id(self.polyhedron), self.f_index))

    def __repr__(self):
        return f"Face({self.f_index}, {list(self.v_indices())})"

    def v_indices(self) -> Tuple[int, ...]:
        return self.polyhedron.faces[self.f_index]

    def vertices(self) -> List[np.ndarray]:
        return list(self.polyhedron.vertex_vectors(self.v_indices()))

    def num_sides(self) -> int:
        return len(self.v_indices())

    def directed_edges(self) -> List[Edge]:
        vs = self.v_indices()
        return [(v, vs[(i + 1) % len(vs)]) for i, v in enumerate(vs)]

    def edges(self) -> List[Edge]:
        """Undirected edges of this face as (min, max) pairs, in face order."""
        return [(min(v1, v2), max(v1, v2)) for v1, v2 in self.directed_edges()]

    def adjacent_faces(self) -> List["Face"]:
        graph = self.polyhedron.face_graph()
        return [self.polyhedron.get_face(f) for f in graph.neighbors(self.f_index)]

    def centroid(self) -> np.ndarray:
        if self._centroid is None:
            self._centroid = get_centroid(self.vertices())
        return self._centroid

    def normal(self) -> np.ndarray:
        return get_normal(self.vertices())

    def normal_ray(self) -> Ray:
        return get_normal_ray(self.vertices())

    def plane(self) -> Plane:
        if self._plane is None:
            self._plane = get_plane(self.vertices())
        return self._plane

    def edge_length(self) -> float:
        v0, v1 = self.vertices()[:2]
        return float(np.linalg.norm(v0 - v1))

    def distance_to_center(self) -> float:
        return float(np.linalg.norm(self.centroid() - self.polyhedron.centroid()))

    def _position(self, v_index: int) -> int:
        vs = self.v_indices()
        if v_index not in vs:
            raise StructuralError(f"Vertex {v_index} is not on face {self.f_index}")
        return vs.index(v_index)

    def next_vertex(self, v_index: int) -> int:
        vs = self.v_indices()
        return vs[(self._position(v_index) + 1) % len(vs)]

    def prev_vertex(self, v_index: int) -> int:
        vs = self.v_indices()
        return vs[(self._position(v_index) - 1) % len(vs)]

    def in_set(self, f_indices: Iterable[int]) -> bool:
        return self.f_index in set(f_indices)


__all__ = ["Edge", "Face"]
