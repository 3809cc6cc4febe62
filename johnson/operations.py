"""
Operations that edit a polyhedron's caps: augment, diminish and gyrate.

Each operation is a pure function from a Polyhedron (plus options) to a
new Polyhedron. OPERATIONS maps every OperationKind to its function, the
options it accepts and a predicate telling whether it applies at all;
apply_operation checks both before running anything.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from math import pi
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple, Union

import numpy as np

from .errors import OperationError, StructuralError
from .lin_alg import PRECISION, get_normal, rigid_transform, rotation_about_axis, with_origin
from .peak import Peak, PeakType
from .polyhedron import Polyhedron

logger = logging.getLogger(__name__)

ORTHO = "ortho"
GYRO = "gyro"
GYRATE_OPTIONS = (ORTHO, GYRO)
DEFAULT_GYRATE = GYRO

PYRAMID = "pyramid"
CUPOLA = "cupola"
ROTUNDA = "rotunda"

# side count of the augmented face -> cap type -> catalog solid; first entry is the default
CAPS: Dict[int, Dict[str, str]] = {
    3: {PYRAMID: "tetrahedron"},
    4: {PYRAMID: "square-pyramid"},
    5: {PYRAMID: "pentagonal-pyramid"},
    6: {CUPOLA: "triangular-cupola"},
    8: {CUPOLA: "square-cupola"},
    10: {CUPOLA: "pentagonal-cupola", ROTUNDA: "pentagonal-rotunda"},
}


# -------------------- Augment --------------------

def _resolve_cap(num_sides: int, using: Optional[str]) -> Tuple[str, str]:
    choices = CAPS.get(num_sides)
    if choices is None:
        raise OperationError(f"No cap fits a face with {num_sides} sides")
    if using is None:
        using = next(iter(choices))
    if using not in choices:
        raise OperationError(
            f"Cannot augment a {num_sides}-sided face using {using!r}; choose from {sorted(choices)}"
        )
    return using, choices[using]


def _alignment(polyhedron: Polyhedron, base, cap: Polyhedron, cap_base, offset: int) -> str:
    """
    Alignment produced by fusing cap_base onto base at `offset`.

    Looks at the first edge of the base face: ortho when the faces on either
    side of it are both triangles or both not, gyro otherwise.
    """
    t = base.v_indices()
    b = cap_base.v_indices()
    k = len(t)
    outside = polyhedron.edge_faces((t[0], t[1]))[1]
    if outside is None:
        raise StructuralError(f"The edge {(t[0], t[1])} is not connected to two faces.")
    c0, c1 = b[offset % k], b[(offset - 1) % k]
    inside = cap.edge_faces((c1, c0))[1]
    if (outside.num_sides() == 3) == (inside.num_sides() == 3):
        return ORTHO
    return GYRO


def augment(
    polyhedron: Polyhedron,
    face_index: int,
    gyrate: Optional[str] = None,
    using: Optional[str] = None,
) -> Polyhedron:
    """
    Attach a pyramid, cupola or rotunda to face `face_index`.

    The cap is scaled to the face's edge length and its base is fused onto
    the face. Cupolae and rotundae can sit in two rotations a step of pi/n
    apart; `gyrate` picks "ortho" or "gyro" (default "gyro").
    """
    if not 0 <= face_index < polyhedron.num_faces():
        raise OperationError(f"Face index {face_index} out of range")
    base = polyhedron.get_face(face_index)
    n = base.num_sides()
    using, cap_name = _resolve_cap(n, using)
    if using == PYRAMID:
        if gyrate is not None:
            raise OperationError(f"A {cap_name} cap has only one alignment; gyrate does not apply")
    elif gyrate is None:
        gyrate = DEFAULT_GYRATE
    elif gyrate not in GYRATE_OPTIONS:
        raise OperationError(f"gyrate must be one of {GYRATE_OPTIONS}, got {gyrate!r}")

    cap = Polyhedron.get(cap_name)
    cap_base = cap.biggest_face()
    scale = base.edge_length() / cap_base.edge_length()
    cap = cap.with_vertices(cap.vertex_vectors() * scale)
    cap_base = cap.get_face(cap_base.f_index)

    offset = 0
    if using != PYRAMID:
        offset = next(o for o in (0, 1) if _alignment(polyhedron, base, cap, cap_base, o) == gyrate)

    # cap base runs the opposite way round to the face it is fused onto
    t = base.v_indices()
    b = cap_base.v_indices()
    matched = [b[(offset - i) % n] for i in range(n)]
    transform = rigid_transform(cap.vertex_vectors(matched), polyhedron.vertex_vectors(t))
    aligned = cap.with_vertices([transform(v) for v in cap.vertex_vectors()])

    v_offset = polyhedron.num_vertices()
    fused = {v_offset + c: v for c, v in zip(matched, t)}
    merged = polyhedron.add_polyhedron(aligned).remove_faces(
        [face_index, polyhedron.num_faces() + cap_base.f_index]
    )
    result = merged.map_faces(lambda face: [fused.get(v, v) for v in face.v_indices()])
    logger.debug("Augmented face %d (%d sides) with %s, gyrate=%s", face_index, n, cap_name, gyrate)
    return result.remove_unused_vertices().with_name(None)


# -------------------- Diminish / gyrate --------------------

def _resolve_peak(polyhedron: Polyhedron, peak: Union[Peak, int]) -> Peak:
    if isinstance(peak, Peak):
        if peak.polyhedron is not polyhedron:
            raise OperationError("The peak belongs to a different polyhedron")
        return peak
    peaks = polyhedron.peaks()
    if not 0 <= peak < len(peaks):
        raise OperationError(f"Peak index {peak} out of range ({len(peaks)} peaks)")
    return peaks[peak]


def diminish(polyhedron: Polyhedron, peak: Union[Peak, int]) -> Polyhedron:
    """Remove a peak and close the hole with a single face on its boundary."""
    peak = _resolve_peak(polyhedron, peak)
    ring = peak.boundary_vertices()
    result = polyhedron.remove_faces(peak.faces()).add_faces([ring])
    logger.debug("Diminished %r, new %d-sided face", peak, len(ring))
    return result.remove_unused_vertices().with_name(None)


def gyrate(polyhedron: Polyhedron, peak: Union[Peak, int]) -> Polyhedron:
    """
    Rotate a cupola or rotunda by one boundary step, swapping ortho and gyro.

    Inner vertices turn by 2*pi/len(boundary) about the boundary's normal;
    each boundary vertex the peak's faces used is replaced by the one it
    turns onto. Faces outside the peak are untouched.
    """
    peak = _resolve_peak(polyhedron, peak)
    if peak.kind is PeakType.PYRAMID:
        raise OperationError("Pyramids have a single alignment and cannot be gyrated")
    ring = peak.boundary_vertices()
    vectors = polyhedron.vertex_vectors()
    ring_points = vectors[ring]
    center = ring_points.mean(axis=0)
    rotation = rotation_about_axis(get_normal(ring_points), 2 * pi / len(ring))
    turn = with_origin(center, lambda v: rotation @ v)

    shifted = {}
    for v in ring:
        target = turn(vectors[v])
        distances = np.linalg.norm(ring_points - target, axis=1)
        nearest = int(np.argmin(distances))
        if distances[nearest] > PRECISION:
            raise OperationError(f"The boundary of {peak!r} is not a regular polygon")
        shifted[v] = ring[nearest]

    inner = set(peak.inner_vertices())
    vertices = [turn(p) if i in inner else p for i, p in enumerate(vectors)]
    members = peak.faces()
    faces = [
        [shifted.get(v, v) for v in face] if f_index in members else face
        for f_index, face in enumerate(polyhedron.faces)
    ]
    logger.debug("Gyrated %r", peak)
    return Polyhedron(vertices, faces)


# -------------------- Dispatch --------------------

def augmentable_faces(polyhedron: Polyhedron) -> List[int]:
    return [face.f_index for face in polyhedron.get_faces() if face.num_sides() in CAPS]


def can_augment(polyhedron: Polyhedron) -> bool:
    return bool(augmentable_faces(polyhedron))


def can_diminish(polyhedron: Polyhedron) -> bool:
    return bool(polyhedron.peaks())


def can_gyrate(polyhedron: Polyhedron) -> bool:
    return any(peak.kind is not PeakType.PYRAMID for peak in polyhedron.peaks())


class OperationKind(Enum):
    AUGMENT = "augment"
    DIMINISH = "diminish"
    GYRATE = "gyrate"


@dataclass(frozen=True)
class Operation:
    kind: OperationKind
    apply: Callable[..., Polyhedron]
    required: Tuple[str, ...]
    optional: Tuple[str, ...]
    is_valid: Callable[[Polyhedron], bool]


OPERATIONS: Dict[OperationKind, Operation] = {
    OperationKind.AUGMENT: Operation(
        OperationKind.AUGMENT, augment, ("face_index",), ("gyrate", "using"), can_augment
    ),
    OperationKind.DIMINISH: Operation(OperationKind.DIMINISH, diminish, ("peak",), (), can_diminish),
    OperationKind.GYRATE: Operation(OperationKind.GYRATE, gyrate, ("peak",), (), can_gyrate),
}


def applicable_operations(polyhedron: Polyhedron) -> List[OperationKind]:
    return [kind for kind, op in OPERATIONS.items() if op.is_valid(polyhedron)]


def apply_operation(
    kind: Union[OperationKind, str],
    polyhedron: Polyhedron,
    options: Optional[Mapping[str, Any]] = None,
) -> Polyhedron:
    try:
        kind = OperationKind(kind)
    except ValueError:
        raise OperationError(f"Unknown operation: {kind!r}") from None
    op = OPERATIONS[kind]
    options = dict(options or {})
    unknown = sorted(set(options) - set(op.required) - set(op.optional))
    if unknown:
        raise OperationError(f"{kind.value} does not accept options {unknown}")
    missing = [name for name in op.required if name not in options]
    if missing:
        raise OperationError(f"{kind.value} requires options {missing}")
    if not op.is_valid(polyhedron):
        raise OperationError(f"{kind.value} does not apply to {polyhedron!r}")
    return op.apply(polyhedron, **options)


__all__ = [
    "CAPS",
    "DEFAULT_GYRATE",
    "GYRATE_OPTIONS",
    "OPERATIONS",
    "Operation",
    "OperationKind",
    "applicable_operations",
    "apply_operation",
    "augment",
    "augmentable_faces",
    "can_augment",
    "can_diminish",
    "can_gyrate",
    "diminish",
    "gyrate",
]
