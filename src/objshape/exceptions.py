# Copyright 2025 Allard Peper (Dragon Ace / DragonAceNL)
# Licensed under the Apache License, Version 2.0 (see LICENSE).

"""Exception types raised by objshape."""


class ObjShapeError(Exception):
    """Base class for all objshape errors."""


class InvalidArgumentError(ObjShapeError, ValueError):
    """A caller supplied an unusable value (empty name, bad prefix, name too long)."""


class UnknownCategoryError(InvalidArgumentError):
    """A category name does not match any RevitCategory member."""

    def __init__(self, category: str):
        super().__init__(f"Invalid Revit category '{category}'")
        self.category = category


class PlatformError(ObjShapeError, RuntimeError):
    """A call to the model hosting platform failed."""
