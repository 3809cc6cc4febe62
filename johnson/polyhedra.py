"""Vertex/face generators for the built-in convex regular-faced solids."""

from __future__ import annotations

from itertools import combinations, permutations, product
from math import cos, pi, sin, sqrt

import numpy as np

from .lin_alg import PRECISION

PHI = (1 + sqrt(5)) / 2


class PolyhedronGenerators:
    """Build solids as (vertices, faces) with unit edge length and outward faces."""

    @staticmethod
    def _finalize(coords):
        points = np.asarray(coords, dtype=float)
        points = points / PolyhedronGenerators._min_distance(points)
        faces = PolyhedronGenerators._hull_faces(points)
        vertices = [tuple(float(c) for c in p) for p in points]
        return vertices, faces

    @staticmethod
    def tetrahedron():
        coords = [
            (1, 1, 1),
            (1, -1, -1),
            (-1, 1, -1),
            (-1, -1, 1),
        ]
        return PolyhedronGenerators._finalize(coords)

    @staticmethod
    def cube():
        coords = [
            (
                1 if (idx & 1) else -1,
                1 if (idx & 2) else -1,
                1 if (idx & 4) else -1,
            )
            for idx in range(8)
        ]
        return PolyhedronGenerators._finalize(coords)

    @staticmethod
    def octahedron():
        coords = [
            (0, 0, 1),
            (0, 0, -1),
            (-1, 0, 0),
            (1, 0, 0),
            (0, -1, 0),
            (0, 1, 0),
        ]
        return PolyhedronGenerators._finalize(coords)

    @staticmethod
    def dodecahedron():
        coords = list(product((-1, 1), repeat=3))
        for x in (-1 / PHI, 1 / PHI):
            for y in (-PHI, PHI):
                coords.append((x, y, 0))
                coords.append((y, 0, x))
                coords.append((0, x, y))
        return PolyhedronGenerators._finalize(coords)

    @staticmethod
    def icosahedron():
        coords = []
        for x in (-1, 1):
            for y in (-PHI, PHI):
                coords.append((x, y, 0))
                coords.append((0, x, y))
                coords.append((y, 0, x))
        return PolyhedronGenerators._finalize(coords)

    @staticmethod
    def truncated_tetrahedron():
        a = 3.0
        b = 1.0
        coords = [
            (a, b, b), (b, a, b), (b, b, a),
            (a, -b, -b), (b, -a, -b), (b, -b, -a),
            (-a, b, -b), (-b, a, -b), (-b, b, -a),
            (-a, -b, b), (-b, -a, b), (-b, -b, a),
        ]
        return PolyhedronGenerators._finalize(coords)

    @staticmethod
    def cuboctahedron():
        coords = []
        for a in (-1, 1):
            for b in (-1, 1):
                coords.append((a, b, 0))
                coords.append((a, 0, b))
                coords.append((0, a, b))
        return PolyhedronGenerators._finalize(coords)

    @staticmethod
    def truncated_cube():
        xi = sqrt(2) - 1
        return PolyhedronGenerators._finalize(PolyhedronGenerators._signed_permutations((xi, 1, 1)))

    @staticmethod
    def truncated_octahedron():
        return PolyhedronGenerators._finalize(PolyhedronGenerators._signed_permutations((0, 1, 2)))

    @staticmethod
    def rhombicuboctahedron():
        s = 1 + sqrt(2)
        return PolyhedronGenerators._finalize(PolyhedronGenerators._signed_permutations((1, 1, s)))

    @staticmethod
    def icosidodecahedron():
        coords = PolyhedronGenerators._signed_permutations((0, 0, PHI), cyclic=True)
        coords += PolyhedronGenerators._signed_permutations((0.5, PHI / 2, PHI ** 2 / 2), cyclic=True)
        return PolyhedronGenerators._finalize(coords)

    @staticmethod
    def pyramid(sides: int):
        """n-gonal pyramid (n = 3 gives the tetrahedron)."""
        if not 3 <= sides <= 5:
            raise ValueError("Pyramids with regular faces have 3 to 5 sides")
        radius = PolyhedronGenerators._circumradius(sides)
        coords = PolyhedronGenerators._ring(sides, radius, 0.0)
        coords.append((0.0, 0.0, sqrt(1 - radius ** 2)))
        return PolyhedronGenerators._finalize(coords)

    @staticmethod
    def prism(sides: int):
        radius = PolyhedronGenerators._circumradius(sides)
        coords = PolyhedronGenerators._ring(sides, radius, 0.5)
        coords += PolyhedronGenerators._ring(sides, radius, -0.5)
        return PolyhedronGenerators._finalize(coords)

    @staticmethod
    def antiprism(sides: int):
        """n-gonal antiprism made of two polygons offset by half a step."""
        if sides < 3:
            raise ValueError("Antiprism requires at least 3 sides")
        radius = PolyhedronGenerators._circumradius(sides)
        # lateral edges join vertices pi/n apart in angle
        height = sqrt(1 - 2 * radius ** 2 * (1 - cos(pi / sides)))
        coords = PolyhedronGenerators._ring(sides, radius, height / 2)
        coords += PolyhedronGenerators._ring(sides, radius, -height / 2, offset=pi / sides)
        return PolyhedronGenerators._finalize(coords)

    @staticmethod
    def cupola(sides: int):
        """Cupola over an n-gon top and a 2n-gon base."""
        if not 3 <= sides <= 5:
            raise ValueError("Cupolae with regular faces have 3 to 5 sides")
        top = PolyhedronGenerators._circumradius(sides)
        base = PolyhedronGenerators._circumradius(2 * sides)
        # square edges join a top vertex to a base vertex pi/2n further round
        height = sqrt(1 - (top ** 2 + base ** 2 - 2 * top * base * cos(pi / (2 * sides))))
        coords = PolyhedronGenerators._ring(sides, top, height)
        coords += PolyhedronGenerators._ring(2 * sides, base, 0.0, offset=pi / (2 * sides))
        return PolyhedronGenerators._finalize(coords)

    @staticmethod
    def pentagonal_rotunda():
        """Upper half of the icosidodecahedron, cut along a decagonal equator."""
        top = PolyhedronGenerators._circumradius(5)
        middle = (2 * PHI ** 2 - 1) / (2 * PHI * cos(pi / 10))
        coords = PolyhedronGenerators._ring(5, top, sqrt(PHI ** 2 - top ** 2), offset=pi / 5)
        coords += PolyhedronGenerators._ring(5, middle, sqrt(PHI ** 2 - middle ** 2))
        coords += PolyhedronGenerators._ring(10, PHI, 0.0, offset=pi / 10)
        return PolyhedronGenerators._finalize(coords)

    @staticmethod
    def _circumradius(sides: int) -> float:
        return 1 / (2 * sin(pi / sides))

    @staticmethod
    def _ring(sides, radius, z, offset=0.0):
        return [
            (radius * cos(offset + 2 * pi * k / sides), radius * sin(offset + 2 * pi * k / sides), z)
            for k in range(sides)
        ]

    @staticmethod
    def _signed_permutations(point, cyclic=False):
        """Every sign choice of every (cyclic) permutation of `point`, deduplicated."""
        if cyclic:
            orders = [point, (point[1], point[2], point[0]), (point[2], point[0], point[1])]
        else:
            orders = permutations(point)
        seen = {}
        for order in orders:
            for signs in product((-1, 1), repeat=3):
                p = tuple(s * c for s, c in zip(signs, order))
                seen.setdefault(tuple(round(c, 9) + 0.0 for c in p), p)
        return list(seen.values())

    @staticmethod
    def _min_distance(points):
        diffs = points[:, None, :] - points[None, :, :]
        dists = np.linalg.norm(diffs, axis=-1)
        return float(dists[dists > PRECISION].min())

    @staticmethod
    def _hull_faces(points):
        """
        Faces of the convex hull of `points`, counter-clockwise seen from outside.

        Every non-degenerate triple spans a candidate plane; it is a face plane
        when all points lie on one side of it. Faces are sorted by side count,
        then by centroid, so indices are stable across runs.
        """
        seen = set()
        faces = []
        for i, j, k in combinations(range(len(points)), 3):
            normal = np.cross(points[j] - points[i], points[k] - points[i])
            norm = np.linalg.norm(normal)
            if norm < PRECISION:
                continue
            normal = normal / norm
            offsets = (points - points[i]) @ normal
            if np.all(offsets < PRECISION):
                pass
            elif np.all(offsets > -PRECISION):
                normal, offsets = -normal, -offsets
            else:
                continue
            members = tuple(int(v) for v in np.flatnonzero(np.abs(offsets) < PRECISION))
            if members in seen:
                continue
            seen.add(members)
            faces.append(PolyhedronGenerators._order_face(points, members, normal))

        def sort_key(face):
            centroid = points[list(face)].mean(axis=0)
            return (len(face),) + tuple(round(float(-c), 6) + 0.0 for c in centroid[::-1])

        return sorted(faces, key=sort_key)

    @staticmethod
    def _order_face(points, members, normal):
        coords = points[list(members)]
        centroid = coords.mean(axis=0)
        u = coords[0] - centroid
        u = u / np.linalg.norm(u)
        w = np.cross(normal, u)
        angles = [
            float(np.arctan2(np.dot(p - centroid, w), np.dot(p - centroid, u))) % (2 * pi)
            for p in coords
        ]
        ordered = [members[o] for o in np.argsort(angles, kind="stable")]
        start = ordered.index(min(ordered))
        return tuple(ordered[start:] + ordered[:start])


__all__ = ["PHI", "PolyhedronGenerators"]
