# Copyright 2025 Allard Peper (Dragon Ace / DragonAceNL)
# Licensed under the Apache License, Version 2.0 (see LICENSE).

"""
Tagged object graph used for model versions.

Every node is a ``Base``: a type tag (``speckle_type``), an optional
content id and an ordered mapping of property names to values. Property
values are restricted to a closed set of shapes:

- scalars: None, bool, int, float, str and Enum members
- a nested ``Base``
- a list whose items are any of these shapes
- a mapping from string keys to any of these shapes

``Mesh``, ``DirectShape`` and ``Collection`` are ``Base`` nodes with a fixed
type tag and typed accessors over their properties.
"""

from enum import Enum
from typing import Any, Iterator, Optional, Union
import hashlib
import json
import logging

import numpy as np
import trimesh

from .categories import RevitCategory, parse_category
from .kit import KitRegistry

logger = logging.getLogger(__name__)

# Length of content ids (hex characters taken from the SHA256 digest)
ID_LENGTH = 32

_RESERVED_NAMES = ("id", "speckle_type")
_SCALAR_TYPES = (type(None), bool, int, float, str, Enum)


class Base:
    """Generic tagged object."""

    speckle_type: str = "Base"

    def __init__(self, speckle_type: Optional[str] = None, id: Optional[str] = None, **properties: Any):
        if speckle_type is not None:
            self.speckle_type = speckle_type
        self.id = id
        self._properties: dict[str, Any] = {}
        for name, value in properties.items():
            self[name] = value

    # -------------------------------------------------------------------------
    # Property access
    # -------------------------------------------------------------------------

    def __getitem__(self, name: str) -> Any:
        return self._properties[name]

    def __setitem__(self, name: str, value: Any) -> None:
        if not isinstance(name, str) or not name:
            raise ValueError(f"Property name must be a non-empty string, got {name!r}")
        if name in _RESERVED_NAMES:
            raise ValueError(f"'{name}' is reserved and cannot be used as a property name")
        self._properties[name] = _normalize_value(value, name)

    def __delitem__(self, name: str) -> None:
        del self._properties[name]

    def __contains__(self, name: object) -> bool:
        return name in self._properties

    def get(self, name: str, default: Any = None) -> Any:
        """Get a property value, or ``default`` if it is not set."""
        return self._properties.get(name, default)

    def keys(self) -> list[str]:
        """Property names in insertion order."""
        return list(self._properties.keys())

    def members(self) -> Iterator[tuple[str, Any]]:
        """Iterate over (name, value) pairs in insertion order."""
        return iter(list(self._properties.items()))

    # -------------------------------------------------------------------------
    # Serialization
    # -------------------------------------------------------------------------

    def to_dict(self) -> dict:
        """
        Convert to a JSON-ready dictionary.

        Nested nodes are converted recursively. The ``id`` entry is the
        node's explicit id, or its content hash when no id was set.
        The graph must be acyclic.
        """
        data: dict[str, Any] = {"speckle_type": self.speckle_type}
        for name, value in self._properties.items():
            data[name] = _serialize_value(value)

        object_id = self.id or compute_object_id(data)
        return {"id": object_id, **data}

    def get_id(self) -> str:
        """Explicit id, or the content hash of the serialized node."""
        return self.id or self.to_dict()["id"]

    def to_json(self, indent: Optional[int] = None) -> str:
        """Serialize to a JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: dict) -> "Base":
        """
        Rebuild a node from a dictionary produced by ``to_dict``.

        The class is chosen from the kit registry by type tag; unknown
        tags become plain ``Base`` nodes that keep their tag.
        """
        if not isinstance(data, dict):
            raise ValueError(f"Expected a mapping, got {type(data).__name__}")

        speckle_type = data.get("speckle_type") or Base.speckle_type
        entry = KitRegistry.get(speckle_type)
        type_cls = entry.cls if entry is not None else Base

        node = type_cls.__new__(type_cls)
        Base.__init__(node, speckle_type=speckle_type, id=data.get("id"))
        for name, value in data.items():
            if name in _RESERVED_NAMES:
                continue
            node[name] = _deserialize_value(value)
        return node

    @classmethod
    def from_json(cls, text: str) -> "Base":
        """Rebuild a node from a JSON string."""
        return cls.from_dict(json.loads(text))

    def __repr__(self) -> str:
        return f"{type(self).__name__}(speckle_type={self.speckle_type!r}, id={self.id!r})"


class Mesh(Base):
    """
    Polygon mesh geometry.

    Vertices are stored flat (``[x0, y0, z0, x1, ...]``). Faces are stored
    as a vertex count followed by that many vertex indices; the legacy
    counts 0 and 1 stand for triangles and quads.
    """

    speckle_type = "Objects.Geometry.Mesh"

    def __init__(
        self,
        vertices: Optional[list[float]] = None,
        faces: Optional[list[int]] = None,
        units: str = "m",
        id: Optional[str] = None,
        **properties: Any,
    ):
        super().__init__(id=id, **properties)
        self["vertices"] = list(vertices) if vertices is not None else []
        self["faces"] = list(faces) if faces is not None else []
        self["units"] = units

    @property
    def vertices(self) -> list[float]:
        return self.get("vertices") or []

    @property
    def faces(self) -> list[int]:
        return self.get("faces") or []

    @property
    def units(self) -> str:
        return self.get("units", "m")

    @property
    def vertex_count(self) -> int:
        return len(self.vertices) // 3

    @property
    def face_count(self) -> int:
        return len(_split_faces(self.faces))

    @classmethod
    def from_trimesh(cls, mesh: trimesh.Trimesh, units: str = "m", **properties: Any) -> "Mesh":
        """Create a mesh from a trimesh object."""
        vertices = np.asarray(mesh.vertices, dtype=np.float64).ravel()
        faces = np.asarray(mesh.faces, dtype=np.int64).reshape(-1, 3)
        encoded = np.column_stack([np.full(len(faces), 3, dtype=np.int64), faces]).ravel()
        return cls(
            vertices=vertices.tolist(),
            faces=encoded.tolist(),
            units=units,
            **properties,
        )

    def to_trimesh(self) -> trimesh.Trimesh:
        """
        Convert to a trimesh object.

        Polygons with more than three vertices are fan-triangulated.
        """
        vertices = np.asarray(self.vertices, dtype=np.float64).reshape(-1, 3)
        triangles = []
        for polygon in _split_faces(self.faces):
            for k in range(1, len(polygon) - 1):
                triangles.append((polygon[0], polygon[k], polygon[k + 1]))
        faces = np.asarray(triangles, dtype=np.int64).reshape(-1, 3)
        return trimesh.Trimesh(vertices=vertices, faces=faces, process=False)


class DirectShape(Base):
    """Arbitrary geometry tagged with a building element category."""

    speckle_type = "Objects.BuiltElements.Revit.DirectShape"

    def __init__(
        self,
        name: str,
        category: RevitCategory,
        base_geometries: list[Base],
        id: Optional[str] = None,
        **properties: Any,
    ):
        super().__init__(id=id, **properties)
        self["name"] = name
        self["category"] = category
        self["baseGeometries"] = list(base_geometries)

    @property
    def name(self) -> str:
        return self.get("name", "")

    @property
    def category(self) -> Optional[RevitCategory]:
        value = self.get("category")
        if isinstance(value, RevitCategory):
            return value
        if isinstance(value, str):
            return parse_category(value)
        return None

    @property
    def base_geometries(self) -> list[Base]:
        return self.get("baseGeometries") or []


class Collection(Base):
    """Named container of elements."""

    speckle_type = "Speckle.Core.Models.Collection"

    def __init__(
        self,
        name: str = "",
        collection_type: str = "",
        elements: Optional[list[Base]] = None,
        id: Optional[str] = None,
        **properties: Any,
    ):
        super().__init__(id=id, **properties)
        self["name"] = name
        self["collectionType"] = collection_type
        self["elements"] = list(elements) if elements is not None else []

    @property
    def name(self) -> str:
        return self.get("name", "")

    @property
    def collection_type(self) -> str:
        return self.get("collectionType", "")

    @property
    def elements(self) -> list[Base]:
        return self.get("elements") or []


def compute_object_id(data: dict) -> str:
    """
    Compute the content id of a serialized node.

    The id is the first ``ID_LENGTH`` hex characters of the SHA256 of the
    canonical JSON encoding, ignoring any ``id`` entry at the top level.
    """
    content = {key: value for key, value in data.items() if key != "id"}
    encoded = json.dumps(content, sort_keys=True, separators=(",", ":"))
    return hashlib.sha256(encoded.encode("utf-8")).hexdigest()[:ID_LENGTH]


def is_mesh(value: Any) -> bool:
    """Check whether a value is a mesh node, by class or by type tag."""
    if isinstance(value, Mesh):
        return True
    if isinstance(value, Base):
        return value.speckle_type.rsplit(":", 1)[-1] == Mesh.speckle_type
    return False


def _split_faces(faces: list[int]) -> list[list[int]]:
    """Split an encoded face list into per-polygon index lists."""
    polygons = []
    i = 0
    while i < len(faces):
        count = int(faces[i])
        if count < 3:
            count += 3
        indices = [int(index) for index in faces[i + 1:i + 1 + count]]
        if len(indices) < count:
            raise ValueError(f"Truncated face at offset {i}: expected {count} indices")
        polygons.append(indices)
        i += count + 1
    return polygons


def _normalize_value(value: Any, name: str) -> Any:
    """Check a property value against the allowed shapes."""
    if isinstance(value, np.ndarray):
        return value.tolist()
    if isinstance(value, np.generic):
        return value.item()
    if isinstance(value, (Base,) + _SCALAR_TYPES):
        return value
    if isinstance(value, (list, tuple)):
        return [_normalize_value(item, name) for item in value]
    if isinstance(value, dict):
        return {str(key): _normalize_value(item, name) for key, item in value.items()}
    raise TypeError(f"Unsupported value for property '{name}': {type(value).__name__}")


def _serialize_value(value: Any) -> Any:
    if isinstance(value, Base):
        return value.to_dict()
    if isinstance(value, Enum):
        return value.name
    if isinstance(value, list):
        return [_serialize_value(item) for item in value]
    if isinstance(value, dict):
        return {key: _serialize_value(item) for key, item in value.items()}
    return value


def _deserialize_value(value: Any) -> Union[Base, Any]:
    if isinstance(value, dict):
        if "speckle_type" in value:
            return Base.from_dict(value)
        return {key: _deserialize_value(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_deserialize_value(item) for item in value]
    return value
