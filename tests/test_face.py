from collections import Counter

import numpy as np
import pytest

from johnson.errors import StructuralError
from johnson.polyhedron import Polyhedron


@pytest.fixture
def cupola():
    return Polyhedron.get("triangular-cupola")


def test_hexagon_face(cupola):
    face = cupola.get_face(7)
    assert face.num_sides() == 6
    assert len(face.v_indices()) == 6
    assert len(face.vertices()) == 6
    assert face.edge_length() == pytest.approx(1.0)


def test_edges_wrap_around(cupola):
    face = cupola.get_face(0)
    a, b, c = face.v_indices()
    assert face.directed_edges() == [(a, b), (b, c), (c, a)]
    assert face.edges() == [(min(a, b), max(a, b)), (min(b, c), max(b, c)), (min(a, c), max(a, c))]


def test_next_and_prev_vertex(cupola):
    face = cupola.get_face(7)
    vs = face.v_indices()
    assert face.next_vertex(vs[-1]) == vs[0]
    assert face.prev_vertex(vs[0]) == vs[-1]
    assert face.next_vertex(vs[2]) == vs[3]
    outside = next(v for v in cupola.v_indices() if v not in vs)
    with pytest.raises(StructuralError):
        face.next_vertex(outside)


def test_adjacent_faces_of_cupola_base(cupola):
    neighbours = cupola.get_face(7).adjacent_faces()
    assert Counter(face.num_sides() for face in neighbours) == Counter({3: 3, 4: 3})


def test_plane_and_normal(cupola):
    face = cupola.get_face(7)
    plane = face.plane()
    for v in face.vertices():
        assert plane.distance_to_point(v) < 1e-9
    assert float(np.dot(face.normal(), face.centroid() - cupola.centroid())) > 0
    ray = face.normal_ray()
    assert np.allclose(ray.origin, face.centroid())
    assert np.allclose(ray.direction, face.normal())


def test_distance_to_center(cupola):
    face = cupola.get_face(7)
    expected = np.linalg.norm(face.centroid() - cupola.centroid())
    assert face.distance_to_center() == pytest.approx(expected)


def test_in_set_and_identity(cupola):
    face = cupola.get_face(3)
    assert face.in_set({1, 3})
    assert not face.in_set([0, 7])
    assert face == cupola.get_face(3)
    assert face != cupola.get_face(4)
    other = Polyhedron.get("triangular-cupola").get_face(3)
    assert face != other
    assert len({face, cupola.get_face(3), other}) == 2
