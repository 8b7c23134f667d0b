# Copyright 2025 Allard Peper (Dragon Ace / DragonAceNL)
# Licensed under the Apache License, Version 2.0 (see LICENSE).

"""
Display geometry lookup and OBJ loading.

A node's renderable geometry lives in its ``displayValue`` property
(``@displayValue`` when stored detached). The value is either a single
node or a list of nodes; ``try_get_display_value`` always hands back a
list.
"""

from pathlib import Path
from typing import Optional, Union
import logging

import trimesh

from .objects import Base, Collection, Mesh, is_mesh

logger = logging.getLogger(__name__)

DISPLAY_VALUE_NAMES = ("displayValue", "@displayValue")

OBJ_SOURCE_TYPE = "Objects.Other.ObjObject"


def try_get_display_value(node: Optional[Base]) -> Optional[list[Base]]:
    """
    Get the display geometry of a node.

    Args:
        node: Node to inspect (may be None)

    Returns:
        List of display nodes, or None if the node has no display value
    """
    if node is None:
        return None

    for name in DISPLAY_VALUE_NAMES:
        if name not in node:
            continue
        value = node[name]
        if isinstance(value, Base):
            return [value]
        if isinstance(value, list):
            return [item for item in value if isinstance(item, Base)]

    return None


def extract_meshes(node: Optional[Base]) -> list[Mesh]:
    """Get the meshes in a node's display value (empty if there are none)."""
    display_value = try_get_display_value(node)
    if not display_value:
        return []
    return [item for item in display_value if is_mesh(item)]


def load_obj(path: Union[str, Path], units: str = "m") -> Collection:
    """
    Load an OBJ file as a collection of displayable nodes.

    Each geometry trimesh finds in the file becomes one node whose
    ``displayValue`` holds a single mesh.

    Args:
        path: Path to the OBJ file
        units: Length units of the file's coordinates

    Returns:
        Collection named after the file

    Raises:
        FileNotFoundError: If file does not exist
        ValueError: If file cannot be loaded or holds no triangle geometry
    """
    path = Path(path)

    if not path.exists():
        raise FileNotFoundError(f"Mesh file not found: {path}")

    logger.info(f"Loading mesh from: {path}")

    try:
        scene = trimesh.load(str(path), force="scene")
    except Exception as e:
        raise ValueError(f"Failed to load mesh: {e}") from e

    geometries = [
        (name, geometry)
        for name, geometry in scene.geometry.items()
        if isinstance(geometry, trimesh.Trimesh) and len(geometry.faces) > 0
    ]
    if not geometries:
        raise ValueError(f"No geometry found in file: {path}")

    elements = []
    for name, geometry in geometries:
        mesh = Mesh.from_trimesh(geometry, units=units)
        elements.append(Base(
            speckle_type=OBJ_SOURCE_TYPE,
            name=str(name),
            displayValue=[mesh],
        ))
        logger.debug(
            f"  {name}: {len(geometry.vertices)} vertices, {len(geometry.faces)} faces"
        )

    logger.info(f"Loaded {len(elements)} geometries from {path.name}")

    return Collection(name=path.stem, collection_type="OBJ file", elements=elements)
