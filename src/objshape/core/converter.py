# Copyright 2025 Allard Peper (Dragon Ace / DragonAceNL)
# Licensed under the Apache License, Version 2.0 (see LICENSE).

"""Conversion of displayable nodes into DirectShape elements."""

from typing import Optional
import logging

from ..config import COLLECTION_NAME, COLLECTION_TYPE, DIRECT_SHAPE_LABEL
from .categories import parse_category
from .geometry import extract_meshes
from .objects import Base, Collection, DirectShape
from .traversal import traverse

logger = logging.getLogger(__name__)


def convert_to_direct_shape(node: Optional[Base], category: str) -> Optional[DirectShape]:
    """
    Convert a node's display meshes into a DirectShape.

    Args:
        node: Node to convert (may be None)
        category: RevitCategory member name

    Returns:
        DirectShape carrying the node's meshes, or None if the category is
        unknown or the node has no display meshes
    """
    revit_category = parse_category(category)
    if revit_category is None:
        logger.warning(
            f"Invalid Revit category '{category}' provided. Skipping object conversion."
        )
        return None

    meshes = extract_meshes(node)
    if not meshes:
        logger.debug(
            f"No display meshes found for object '{node.id if node else None}'. Skipping conversion."
        )
        return None

    shape = DirectShape(
        DIRECT_SHAPE_LABEL.format(category=category),
        revit_category,
        meshes,
    )
    shape["categoryName"] = revit_category.value
    shape["@displayValue"] = meshes
    return shape


def convert_version_objects(root: Base, category: str) -> list[DirectShape]:
    """Convert every node reachable from ``root``, keeping the successes."""
    shapes = []
    for context in traverse(root):
        shape = convert_to_direct_shape(context.current, category)
        if shape is not None:
            shapes.append(shape)

    logger.info(f"Converted {len(shapes)} objects to {category} DirectShapes")
    return shapes


def create_version_collection(objects: list[Base]) -> Collection:
    """Wrap converted elements in the root collection of a new version."""
    return Collection(
        name=COLLECTION_NAME,
        collection_type=COLLECTION_TYPE,
        elements=objects,
    )
