import numpy as np
import pytest

from johnson.errors import OperationError
from johnson.peak import Peak, PeakType, get_boundary
from johnson.polyhedron import Polyhedron


@pytest.mark.parametrize("name, kind, count", [
    ("icosahedron", PeakType.PYRAMID, 12),
    ("octahedron", PeakType.PYRAMID, 6),
    ("cuboctahedron", PeakType.CUPOLA, 8),
    ("icosidodecahedron", PeakType.ROTUNDA, 12),
])
def test_peak_counts(name, kind, count):
    peaks = Polyhedron.get(name).peaks()
    assert len(peaks) == count
    assert all(peak.kind is kind for peak in peaks)


@pytest.mark.parametrize("name", [
    "tetrahedron",
    "cube",
    "dodecahedron",
    "triangular-cupola",
    "pentagonal-pyramid",
    "pentagonal-rotunda",
])
def test_solids_without_peaks(name):
    assert Polyhedron.get(name).peaks() == []


def test_pyramid_peak_shape():
    p = Polyhedron.get("icosahedron")
    peak = p.peaks()[0]
    assert peak.apex == peak.inner_vertices()[0]
    assert len(peak.faces()) == 5
    assert len(peak.boundary_vertices()) == 5
    assert np.allclose(peak.top_point(), p.vertex_vector(peak.apex))


def test_cupola_peak_shape():
    p = Polyhedron.get("cuboctahedron")
    peak = p.peaks()[0]
    assert peak.apex is None
    assert p.get_face(peak.top_face).num_sides() == 3
    assert len(peak.inner_vertices()) == 3
    assert len(peak.faces()) == 7
    assert len(peak.boundary_vertices()) == 6
    assert np.allclose(peak.top_point(), p.get_face(peak.top_face).centroid())


def test_rotunda_peak_shape():
    p = Polyhedron.get("icosidodecahedron")
    peak = p.peaks()[0]
    assert len(peak.inner_vertices()) == 10
    assert len(peak.faces()) == 16
    assert len(peak.boundary_vertices()) == 10


@pytest.mark.parametrize("name", ["icosahedron", "cuboctahedron", "icosidodecahedron"])
def test_boundary_is_a_planar_loop_owned_by_the_peak(name):
    p = Polyhedron.get(name)
    owner = p.directed_edge_to_face_graph()
    for peak in p.peaks():
        boundary = peak.boundary()
        for (_, v2), (v3, _) in zip(boundary, boundary[1:] + boundary[:1]):
            assert v2 == v3
        ring = peak.boundary_vertices()
        assert ring[0] == min(ring)
        assert not set(ring) & set(peak.inner_vertices())
        assert p.is_planar(ring)
        for edge in boundary:
            assert owner[edge] in peak.faces()
            assert owner[(edge[1], edge[0])] not in peak.faces()


def test_get_boundary_orders_from_lowest_vertex():
    assert get_boundary([(3, 1), (1, 2), (2, 3)]) == [(1, 2), (2, 3), (3, 1)]


@pytest.mark.parametrize("edges", [
    [],
    [(0, 1), (0, 2), (1, 0)],
    [(0, 1), (1, 2)],
    [(0, 1), (1, 0), (2, 3), (3, 2)],
])
def test_get_boundary_rejects_broken_loops(edges):
    with pytest.raises(OperationError):
        get_boundary(edges)


def test_find_peak_near_apex():
    p = Polyhedron.get("icosahedron")
    center = p.centroid()
    apex = 4
    point = center + 1.05 * (p.vertex_vector(apex) - center)
    peak = p.find_peak(point)
    assert peak is not None
    assert peak.apex == apex


def test_find_peak_without_peaks():
    p = Polyhedron.get("cube")
    assert p.find_peak(p.get_face(0).centroid()) is None


def test_peaks_are_cached():
    p = Polyhedron.get("octahedron")
    assert p.peaks() is p.peaks()
    assert all(peak.polyhedron is p for peak in p.peaks())


def test_repr_names_the_root():
    p = Polyhedron.get("cuboctahedron")
    assert repr(p.peaks()[0]).startswith("<Peak cupola at face ")
    assert Peak.get_all(Polyhedron.get("octahedron"))[0].kind is PeakType.PYRAMID
