# Copyright 2025 Allard Peper (Dragon Ace / DragonAceNL)
# Licensed under the Apache License, Version 2.0 (see LICENSE).

"""
Core logic for object graphs, traversal, conversion and naming.

This module provides the building blocks of the automate function:
- objects: Tagged object graph (Base, Mesh, DirectShape, Collection)
- kit: Object type registry and one-time initialisation
- traversal: Depth-first traversal of object graphs
- geometry: Display value lookup and OBJ loading
- categories: RevitCategory enumeration and category policies
- converter: DirectShape conversion
- naming: Target model name generation
"""

from .kit import (
    KitRegistry,
    initialise_objects_kit,
    is_initialised,
)

from .categories import (
    RevitCategory,
    CategoryPolicy,
    DEFAULT_CATEGORY,
    parse_category,
    resolve_category,
    list_categories,
)

from .objects import (
    Base,
    Mesh,
    DirectShape,
    Collection,
    compute_object_id,
    is_mesh,
)

from .traversal import (
    TraversalContext,
    traverse,
    flatten,
)

from .geometry import (
    try_get_display_value,
    extract_meshes,
    load_obj,
)

from .converter import (
    convert_to_direct_shape,
    convert_version_objects,
    create_version_collection,
)

from .naming import (
    generate_target_model_name,
    sanitize_prefix,
    sanitize_path_segments,
    validate_source_model_name,
)

__all__ = [
    # Kit
    "KitRegistry",
    "initialise_objects_kit",
    "is_initialised",
    # Categories
    "RevitCategory",
    "CategoryPolicy",
    "DEFAULT_CATEGORY",
    "parse_category",
    "resolve_category",
    "list_categories",
    # Objects
    "Base",
    "Mesh",
    "DirectShape",
    "Collection",
    "compute_object_id",
    "is_mesh",
    # Traversal
    "TraversalContext",
    "traverse",
    "flatten",
    # Geometry
    "try_get_display_value",
    "extract_meshes",
    "load_obj",
    # Conversion
    "convert_to_direct_shape",
    "convert_version_objects",
    "create_version_collection",
    # Naming
    "generate_target_model_name",
    "sanitize_prefix",
    "sanitize_path_segments",
    "validate_source_model_name",
]
