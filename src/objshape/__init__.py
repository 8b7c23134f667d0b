# Copyright 2025 Allard Peper (Dragon Ace / DragonAceNL)
# Licensed under the Apache License, Version 2.0 (see LICENSE).

"""objshape - Convert OBJ meshes in a model version into DirectShape elements."""

__version__ = "0.1.0"
