"""
Immutable polyhedron mesh with lazily cached derived graphs.

A Polyhedron owns a vertex list and a face list. Everything else (edges,
vertex and face adjacency graphs, face views, peaks) is computed on first
access and memoized on the instance. Transforms never mutate: they return a
new Polyhedron whose caches start empty.
"""

from __future__ import annotations

from collections import Counter
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple, Union

import networkx as nx
import numpy as np

from .catalog import Catalog, default_catalog
from .errors import StructuralError
from .face import Edge, Face
from .lin_alg import PRECISION, angle_between, get_centroid, get_midpoint, is_planar, vec
from .peak import Peak

Vertex = Tuple[float, float, float]
FaceIndices = Tuple[int, ...]


class Polyhedron:
    def __init__(
        self,
        vertices: Sequence[Sequence[float]],
        faces: Sequence[Sequence[int]],
        edges: Optional[Sequence[Edge]] = None,
        name: Optional[str] = None,
    ):
        self.vertices: Tuple[Vertex, ...] = tuple(tuple(float(c) for c in v) for v in vertices)
        self.faces: Tuple[FaceIndices, ...] = tuple(tuple(int(i) for i in f) for f in faces)
        self.name = name
        self._edges = [tuple(e) for e in edges] if edges is not None else None

        self._vertex_vectors = None
        self._vertex_graph = None
        self._vertex_to_face_graph = None
        self._face_graph = None
        self._directed_edge_to_face_graph = None
        self._face_cache: Dict[int, Face] = {}
        self._peaks = None

    @staticmethod
    def get(name: str, catalog: Optional[Catalog] = None) -> "Polyhedron":
        data = (catalog or default_catalog).get_solid_data(name)
        return Polyhedron(data["vertices"], data["faces"], name=name)

    @staticmethod
    def of(vertices, faces) -> "Polyhedron":
        return Polyhedron(vertices, faces)

    def __repr__(self):
        label = self.name or "polyhedron"
        return f"<Polyhedron {label}: V={self.num_vertices()} F={self.num_faces()}>"

    # -------------------- Snapshot --------------------

    def _all_edges(self) -> List[Edge]:
        return list(dict.fromkeys(edge for face in self.get_faces() for edge in face.edges()))

    @property
    def edges(self) -> List[Edge]:
        if self._edges is None:
            self._edges = self._all_edges()
        return self._edges

    def to_json(self) -> dict:
        return {
            "vertices": [list(v) for v in self.vertices],
            "faces": [list(f) for f in self.faces],
            "edges": [list(e) for e in self.edges],
            "name": self.name,
        }

    # -------------------- Faces and counts --------------------

    def get_face(self, f_index: int) -> Face:
        face = self._face_cache.get(f_index)
        if face is None:
            if not 0 <= f_index < self.num_faces():
                raise IndexError(f"Face index {f_index} out of range")
            face = Face(self, f_index)
            self._face_cache[f_index] = face
        return face

    def get_faces(self) -> List[Face]:
        return [self.get_face(f_index) for f_index in self.f_indices()]

    def biggest_face(self) -> Face:
        return max(self.get_faces(), key=lambda face: face.num_sides())

    def num_vertices(self) -> int:
        return len(self.vertices)

    def num_faces(self) -> int:
        return len(self.faces)

    def v_indices(self) -> range:
        return range(self.num_vertices())

    def f_indices(self) -> range:
        return range(self.num_faces())

    def face_count(self) -> Counter:
        """Number of faces for each side count."""
        return Counter(face.num_sides() for face in self.get_faces())

    def face_types(self) -> List[int]:
        return sorted(self.face_count())

    def vertex_vectors(self, v_indices: Optional[Iterable[int]] = None) -> np.ndarray:
        if self._vertex_vectors is None:
            self._vertex_vectors = np.asarray(self.vertices, dtype=float).reshape(-1, 3)
        if v_indices is None:
            return self._vertex_vectors
        return self._vertex_vectors[list(v_indices)]

    def vertex_vector(self, v_index: int) -> np.ndarray:
        return self.vertex_vectors()[v_index]

    def edge_length(self) -> float:
        """Edge length of this polyhedron, assuming all edges are equal."""
        return self.get_face(0).edge_length()

    # -------------------- Vertex neighbourhoods --------------------

    def adjacent_faces(self, *v_indices: int) -> List[Face]:
        graph = self.vertex_to_face_graph()
        return list(dict.fromkeys(face for v_index in v_indices for face in graph[v_index]))

    def directed_adjacent_faces(self, v_index: int) -> List[Face]:
        """
        Faces around `v_index` in cyclic order.

        Each step picks the face whose next vertex after `v_index` is the
        previous vertex of the current face. The touching faces must form
        exactly one cycle; anything else is a boundary or non-manifold vertex.
        """
        touching = self.adjacent_faces(v_index)
        if not touching:
            raise StructuralError(f"Vertex {v_index} is not on any face")
        result = [touching[0]]
        while len(result) < len(touching):
            prev = result[-1].prev_vertex(v_index)
            matches = [f for f in touching if f.next_vertex(v_index) == prev]
            if len(matches) != 1 or matches[0] in result:
                raise StructuralError(f"Faces around vertex {v_index} do not form a single cycle")
            result.append(matches[0])
        if result[0].next_vertex(v_index) != result[-1].prev_vertex(v_index):
            raise StructuralError(f"Faces around vertex {v_index} do not close into a cycle")
        return result

    def adjacent_face_count(self, v_index: int) -> Counter:
        return Counter(face.num_sides() for face in self.adjacent_faces(v_index))

    def adjacent_vertex_indices(self, *v_indices: int) -> List[int]:
        graph = self.vertex_graph()
        return list(dict.fromkeys(n for v_index in v_indices for n in graph.successors(v_index)))

    # -------------------- Derived graphs --------------------

    def vertex_graph(self) -> nx.DiGraph:
        """Directed graph with an edge v -> next(v) for every face traversal."""
        if self._vertex_graph is None:
            graph = nx.DiGraph()
            graph.add_nodes_from(self.v_indices())
            for face in self.get_faces():
                graph.add_edges_from(face.directed_edges())
            self._vertex_graph = graph
        return self._vertex_graph

    def vertex_to_face_graph(self) -> List[List[Face]]:
        if self._vertex_to_face_graph is None:
            mapping = [[] for _ in self.v_indices()]
            for face in self.get_faces():
                for v_index in face.v_indices():
                    mapping[v_index].append(face)
            self._vertex_to_face_graph = mapping
        return self._vertex_to_face_graph

    def face_graph(self) -> nx.Graph:
        """Faces joined through shared edges."""
        if self._face_graph is None:
            graph = nx.Graph()
            graph.add_nodes_from(self.f_indices())
            for edge in self.edges:
                f1, f2 = self.edge_faces(edge)
                if f1 is None or f2 is None:
                    raise StructuralError(f"The edge {edge} is not connected to two faces.")
                graph.add_edge(f1.f_index, f2.f_index)
            self._face_graph = graph
        return self._face_graph

    def directed_edge_to_face_graph(self) -> Dict[Edge, int]:
        if self._directed_edge_to_face_graph is None:
            edges_to_faces: Dict[Edge, int] = {}
            for face in self.get_faces():
                for edge in face.directed_edges():
                    if edge in edges_to_faces:
                        raise StructuralError(
                            f"Directed edge {edge} appears in faces "
                            f"{edges_to_faces[edge]} and {face.f_index}"
                        )
                    edges_to_faces[edge] = face.f_index
            self._directed_edge_to_face_graph = edges_to_faces
        return self._directed_edge_to_face_graph

    def edge_faces(self, edge: Edge) -> Tuple[Optional[Face], Optional[Face]]:
        """Faces on either side of `edge`, the face containing (v1, v2) first."""
        v1, v2 = edge
        graph = self.directed_edge_to_face_graph()
        first, second = graph.get((v1, v2)), graph.get((v2, v1))
        return (
            self.get_face(first) if first is not None else None,
            self.get_face(second) if second is not None else None,
        )

    # -------------------- Transforms --------------------

    def with_vertices(self, vertices) -> "Polyhedron":
        return Polyhedron(vertices, self.faces, edges=self._edges, name=self.name)

    def with_faces(self, faces) -> "Polyhedron":
        return Polyhedron(self.vertices, faces, name=self.name)

    def with_name(self, name: Optional[str]) -> "Polyhedron":
        return Polyhedron(self.vertices, self.faces, edges=self._edges, name=name)

    def add_vertices(self, vertices) -> "Polyhedron":
        return self.with_vertices(list(self.vertices) + [tuple(v) for v in vertices])

    def add_faces(self, faces) -> "Polyhedron":
        return self.with_faces(list(self.faces) + [tuple(f) for f in faces])

    def add_polyhedron(self, other: "Polyhedron") -> "Polyhedron":
        offset = self.num_vertices()
        return self.add_vertices(other.vertices).add_faces(
            [tuple(v_index + offset for v_index in face) for face in other.faces]
        )

    def remove_face(self, face: Union[Face, int]) -> "Polyhedron":
        return self.remove_faces([face])

    def remove_faces(self, faces: Iterable[Union[Face, int]]) -> "Polyhedron":
        removed = {f.f_index if isinstance(f, Face) else int(f) for f in faces}
        return self.with_faces([face for i, face in enumerate(self.faces) if i not in removed])

    def map_vertices(self, iteratee: Callable[[Vertex, int], Sequence[float]]) -> "Polyhedron":
        return self.with_vertices([iteratee(v, i) for i, v in enumerate(self.vertices)])

    def map_faces(self, iteratee: Callable[[Face], Sequence[int]]) -> "Polyhedron":
        return self.with_faces([iteratee(face) for face in self.get_faces()])

    def remove_unused_vertices(self) -> "Polyhedron":
        """Drop vertices no face refers to and renumber the faces."""
        used = sorted({v_index for face in self.faces for v_index in face})
        if len(used) == self.num_vertices():
            return self
        new_index = {old: new for new, old in enumerate(used)}
        return Polyhedron(
            [self.vertices[old] for old in used],
            [tuple(new_index[v] for v in face) for face in self.faces],
            name=self.name,
        )

    # -------------------- Geometry --------------------

    def is_planar(self, v_indices: Sequence[int]) -> bool:
        """Whether the given vertices of this polyhedron lie on one plane."""
        return is_planar(list(self.vertex_vectors(v_indices)))

    def centroid(self) -> np.ndarray:
        return get_centroid(self.vertex_vectors())

    def center(self) -> "Polyhedron":
        """Translate the polyhedron so its centroid is the origin."""
        centroid = self.centroid()
        return self.with_vertices(self.vertex_vectors() - centroid)

    def distance_to_center(self) -> float:
        return self.get_face(0).distance_to_center()

    def get_dihedral_angle(self, edge: Edge) -> float:
        f1, f2 = self.edge_faces(edge)
        if f1 is None or f2 is None:
            raise StructuralError(f"The edge {edge} is not connected to two faces.")
        v1, v2 = self.vertex_vectors(edge)
        midpoint = get_midpoint(v1, v2)
        return angle_between(f1.centroid() - midpoint, f2.centroid() - midpoint)

    def hit_face(self, point) -> Face:
        """The face whose plane is nearest to `point`."""
        p = vec(point)
        return min(self.get_faces(), key=lambda face: face.plane().distance_to_point(p))

    def face_adjacency_list(self) -> List[Tuple[int, Tuple[Tuple[int, int], ...]]]:
        """
        Topology fingerprint: for every face, its side count and a histogram
        of its neighbours' side counts, sorted.
        """
        entries = []
        for face in self.get_faces():
            adj = Counter(other.num_sides() for other in face.adjacent_faces())
            entries.append((face.num_sides(), tuple(sorted(adj.items()))))
        return sorted(entries)

    def is_same(self, other: "Polyhedron") -> bool:
        if self.face_count() != other.face_count():
            return False
        return self.face_adjacency_list() == other.face_adjacency_list()

    def peaks(self) -> List[Peak]:
        if self._peaks is None:
            self._peaks = Peak.get_all(self)
        return self._peaks

    def find_peak(self, point) -> Optional[Peak]:
        hit_point = vec(point)
        hit_face = self.hit_face(hit_point)
        peaks = [peak for peak in self.peaks() if hit_face.in_set(peak.faces())]
        if not peaks:
            return None
        return min(peaks, key=lambda peak: float(np.linalg.norm(peak.top_point() - hit_point)))

    # -------------------- Checks --------------------

    def validate(self) -> "Polyhedron":
        """Raise StructuralError unless this is a closed, consistently oriented mesh."""
        n = self.num_vertices()
        for f_index, face in enumerate(self.faces):
            if len(face) < 3:
                raise StructuralError(f"Face {f_index} has fewer than three vertices")
            if len(set(face)) != len(face):
                raise StructuralError(f"Face {f_index} repeats a vertex")
            for v_index in face:
                if not 0 <= v_index < n:
                    raise StructuralError(f"Face {f_index} refers to missing vertex {v_index}")
        graph = self.directed_edge_to_face_graph()
        for v1, v2 in graph:
            if (v2, v1) not in graph:
                raise StructuralError(f"The edge {(v1, v2)} is not connected to two faces.")
        return self

    def is_regular(self) -> bool:
        """Uniform edge length and planar faces, within PRECISION."""
        length = self.edge_length()
        vectors = self.vertex_vectors()
        for v1, v2 in self.edges:
            if abs(float(np.linalg.norm(vectors[v1] - vectors[v2])) - length) > PRECISION:
                return False
        return all(self.is_planar(face) for face in self.faces)


__all__ = ["Polyhedron"]
