"""
Solid catalog: a read-only lookup from solid name to raw {vertices, faces}.

Built-in solids come from PolyhedronGenerators. A catalog can be extended
with model files in the polyhedra-viewer JSON layout:

    {"name": "...", "vertices": [[x, y, z], ...], "faces": [[i, j, k, ...], ...]}
"""

from __future__ import annotations

import json
import logging
import os
from functools import lru_cache
from typing import Callable, Dict, List, Mapping, Optional

from .errors import InvalidNameError, StructuralError
from .polyhedra import PolyhedronGenerators

logger = logging.getLogger(__name__)

G = PolyhedronGenerators

BUILTIN_SOLIDS: Dict[str, Callable] = {
    "tetrahedron": G.tetrahedron,
    "cube": G.cube,
    "octahedron": G.octahedron,
    "dodecahedron": G.dodecahedron,
    "icosahedron": G.icosahedron,
    "truncated-tetrahedron": G.truncated_tetrahedron,
    "cuboctahedron": G.cuboctahedron,
    "truncated-cube": G.truncated_cube,
    "truncated-octahedron": G.truncated_octahedron,
    "rhombicuboctahedron": G.rhombicuboctahedron,
    "icosidodecahedron": G.icosidodecahedron,
    "triangular-prism": lambda: G.prism(3),
    "pentagonal-prism": lambda: G.prism(5),
    "hexagonal-prism": lambda: G.prism(6),
    "octagonal-prism": lambda: G.prism(8),
    "decagonal-prism": lambda: G.prism(10),
    "square-antiprism": lambda: G.antiprism(4),
    "pentagonal-antiprism": lambda: G.antiprism(5),
    "hexagonal-antiprism": lambda: G.antiprism(6),
    "octagonal-antiprism": lambda: G.antiprism(8),
    "decagonal-antiprism": lambda: G.antiprism(10),
    "square-pyramid": lambda: G.pyramid(4),
    "pentagonal-pyramid": lambda: G.pyramid(5),
    "triangular-cupola": lambda: G.cupola(3),
    "square-cupola": lambda: G.cupola(4),
    "pentagonal-cupola": lambda: G.cupola(5),
    "pentagonal-rotunda": G.pentagonal_rotunda,
}


@lru_cache(maxsize=None)
def _builtin_data(name: str):
    vertices, faces = BUILTIN_SOLIDS[name]()
    return tuple(vertices), tuple(faces)


def parse_model(data: Mapping, source: str = "<model>") -> Dict[str, List]:
    """Validate a raw model mapping and return plain {vertices, faces} lists."""
    vertices = data.get("vertices")
    faces = data.get("faces")
    if not isinstance(vertices, list) or not isinstance(faces, list):
        raise StructuralError(f"{source}: model needs 'vertices' and 'faces' lists")
    parsed_vertices = []
    for v in vertices:
        if not isinstance(v, (list, tuple)) or len(v) != 3:
            raise StructuralError(f"{source}: vertex must have three coordinates: {v}")
        parsed_vertices.append(tuple(float(c) for c in v))
    parsed_faces = []
    for face in faces:
        if not isinstance(face, (list, tuple)) or len(face) < 3:
            raise StructuralError(f"{source}: face must have at least three vertices: {face}")
        parsed_faces.append(tuple(int(i) for i in face))
    return {"vertices": parsed_vertices, "faces": parsed_faces}


def load_model(path: str) -> Dict[str, List]:
    """Load one JSON model file. The name defaults to the file stem."""
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    model = parse_model(data, source=path)
    model["name"] = data.get("name") or os.path.splitext(os.path.basename(path))[0]
    return model


class Catalog:
    """Name -> solid data lookup; built-ins plus any loaded models."""

    def __init__(self, models: Optional[Mapping[str, Mapping]] = None):
        self._models: Dict[str, Dict[str, List]] = {}
        for name, data in (models or {}).items():
            self._models[name] = parse_model(data, source=name)

    @classmethod
    def from_folder(cls, folder: str) -> "Catalog":
        models = {}
        files = sorted(f for f in os.listdir(folder) if f.lower().endswith(".json"))
        for fn in files:
            model = load_model(os.path.join(folder, fn))
            models[model.pop("name")] = model
        logger.debug("Loaded %d models from %s", len(models), folder)
        return cls(models)

    def names(self) -> List[str]:
        return sorted(set(BUILTIN_SOLIDS) | set(self._models))

    def is_valid_solid(self, name: str) -> bool:
        return name in self._models or name in BUILTIN_SOLIDS

    def get_solid_data(self, name: str) -> Dict[str, List]:
        if name in self._models:
            model = self._models[name]
            return {"vertices": list(model["vertices"]), "faces": list(model["faces"])}
        if name in BUILTIN_SOLIDS:
            vertices, faces = _builtin_data(name)
            return {"vertices": list(vertices), "faces": list(faces)}
        raise InvalidNameError(name)


default_catalog = Catalog()


def is_valid_solid(name: str) -> bool:
    return default_catalog.is_valid_solid(name)


def get_solid_data(name: str) -> Dict[str, List]:
    return default_catalog.get_solid_data(name)


__all__ = [
    "BUILTIN_SOLIDS",
    "Catalog",
    "default_catalog",
    "get_solid_data",
    "is_valid_solid",
    "load_model",
    "parse_model",
]
