# Copyright 2025 Allard Peper (Dragon Ace / DragonAceNL)
# Licensed under the Apache License, Version 2.0 (see LICENSE).

"""
Constants and default paths shared across objshape.

Centralizes the labels written into published versions and the
locations used by the local project store.
"""

import os
from pathlib import Path

# =============================================================================
# Naming
# =============================================================================

MAX_MODEL_NAME_LENGTH = 255

# =============================================================================
# Published versions
# =============================================================================

COLLECTION_NAME = "Converted Revit model"
COLLECTION_TYPE = "Directly shaped model"
DIRECT_SHAPE_LABEL = "A {category} from OBJ"
VERSION_MESSAGE = "{count} {category} DirectShapes"
SUCCESS_MESSAGE = "Converted {count} OBJ objects to {category} DirectShapes"
NO_OBJECTS_MESSAGE = "No valid objects found for conversion."

# =============================================================================
# Local project store
# =============================================================================

PROJECT_DIR_ENV = "OBJSHAPE_PROJECT_DIR"
DEFAULT_PROJECT_DIR = Path.home() / ".objshape" / "project"


def get_project_dir() -> Path:
    """Project directory from OBJSHAPE_PROJECT_DIR, or the default."""
    value = os.environ.get(PROJECT_DIR_ENV)
    if value:
        return Path(value).expanduser()
    return DEFAULT_PROJECT_DIR
