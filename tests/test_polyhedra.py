from collections import Counter

import pytest

from johnson.catalog import BUILTIN_SOLIDS
from johnson.polyhedra import PolyhedronGenerators
from johnson.polyhedron import Polyhedron

GENERATOR_EXPECTATIONS = [
    ("tetrahedron", 4, 6, 4),
    ("cube", 8, 12, 6),
    ("octahedron", 6, 12, 8),
    ("dodecahedron", 20, 30, 12),
    ("icosahedron", 12, 30, 20),
    ("truncated-tetrahedron", 12, 18, 8),
    ("cuboctahedron", 12, 24, 14),
    ("truncated-cube", 24, 36, 14),
    ("truncated-octahedron", 24, 36, 14),
    ("rhombicuboctahedron", 24, 48, 26),
    ("icosidodecahedron", 30, 60, 32),
    ("triangular-prism", 6, 9, 5),
    ("pentagonal-prism", 10, 15, 7),
    ("hexagonal-prism", 12, 18, 8),
    ("octagonal-prism", 16, 24, 10),
    ("decagonal-prism", 20, 30, 12),
    ("square-antiprism", 8, 16, 10),
    ("pentagonal-antiprism", 10, 20, 12),
    ("hexagonal-antiprism", 12, 24, 14),
    ("octagonal-antiprism", 16, 32, 18),
    ("decagonal-antiprism", 20, 40, 22),
    ("square-pyramid", 5, 8, 5),
    ("pentagonal-pyramid", 6, 10, 6),
    ("triangular-cupola", 9, 15, 8),
    ("square-cupola", 12, 20, 10),
    ("pentagonal-cupola", 15, 25, 12),
    ("pentagonal-rotunda", 20, 35, 17),
]

FACE_COUNTS = [
    ("triangular-cupola", {3: 4, 4: 3, 6: 1}),
    ("square-cupola", {3: 4, 4: 5, 8: 1}),
    ("pentagonal-cupola", {3: 5, 4: 5, 5: 1, 10: 1}),
    ("pentagonal-rotunda", {3: 10, 5: 6, 10: 1}),
    ("truncated-cube", {3: 8, 8: 6}),
    ("rhombicuboctahedron", {3: 8, 4: 18}),
    ("icosidodecahedron", {3: 20, 5: 12}),
]


def test_every_builtin_has_expectations():
    assert {name for name, *_ in GENERATOR_EXPECTATIONS} == set(BUILTIN_SOLIDS)


@pytest.mark.parametrize("name, n_vertices, n_edges, n_faces", GENERATOR_EXPECTATIONS)
def test_polyhedron_generators(name, n_vertices, n_edges, n_faces):
    polyhedron = Polyhedron.get(name)

    assert polyhedron.num_vertices() == n_vertices
    assert len(polyhedron.edges) == n_edges
    assert polyhedron.num_faces() == n_faces
    assert n_vertices - n_edges + n_faces == 2

    for u, v in polyhedron.edges:
        assert isinstance(u, int) and isinstance(v, int)
        assert 0 <= u < n_vertices and 0 <= v < n_vertices
        assert u < v  # undirected edges stored in ascending order


@pytest.mark.parametrize("name", sorted(BUILTIN_SOLIDS))
def test_manifold_closure(name):
    polyhedron = Polyhedron.get(name)
    sharing = Counter()
    for face in polyhedron.faces:
        for i, v in enumerate(face):
            w = face[(i + 1) % len(face)]
            sharing[(min(v, w), max(v, w))] += 1
    assert set(sharing.values()) == {2}
    polyhedron.validate()


@pytest.mark.parametrize("name", sorted(BUILTIN_SOLIDS))
def test_unit_edges_and_planar_faces(name):
    polyhedron = Polyhedron.get(name)
    assert polyhedron.edge_length() == pytest.approx(1.0, abs=1e-6)
    assert polyhedron.is_regular()


@pytest.mark.parametrize("name", sorted(BUILTIN_SOLIDS))
def test_faces_point_outward(name):
    polyhedron = Polyhedron.get(name)
    center = polyhedron.centroid()
    for face in polyhedron.get_faces():
        assert float((face.centroid() - center) @ face.normal()) > 0


@pytest.mark.parametrize("name, counts", FACE_COUNTS)
def test_face_counts(name, counts):
    assert dict(Polyhedron.get(name).face_count()) == counts


def test_faces_sorted_by_side_count():
    sides = [len(face) for face in Polyhedron.get("triangular-cupola").faces]
    assert sides == sorted(sides)
    assert sides[7] == 6
    assert len(Polyhedron.get("truncated-cube").faces[8]) == 8


def test_generators_are_deterministic():
    assert PolyhedronGenerators.cupola(4) == PolyhedronGenerators.cupola(4)


@pytest.mark.parametrize("builder, sides", [
    (PolyhedronGenerators.pyramid, 6),
    (PolyhedronGenerators.cupola, 6),
    (PolyhedronGenerators.antiprism, 2),
])
def test_generator_rejects_impossible_solids(builder, sides):
    with pytest.raises(ValueError):
        builder(sides)
