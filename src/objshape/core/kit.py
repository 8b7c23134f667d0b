# Copyright 2025 Allard Peper (Dragon Ace / DragonAceNL)
# Licensed under the Apache License, Version 2.0 (see LICENSE).

"""
Object kit registry.

The kit maps type tags (``speckle_type``) to the Python classes used when
rebuilding nodes from serialized data. Nothing is registered at import
time: the built-in object types are registered by calling
``initialise_objects_kit()`` once during process start-up. Until then,
deserialization produces plain ``Base`` nodes.
"""

from dataclasses import dataclass
from typing import Optional, Type
import logging
import threading

logger = logging.getLogger(__name__)


@dataclass
class KitEntry:
    """
    A registered object type.

    Attributes:
        speckle_type: Type tag written into serialized objects
        cls: Class used to rebuild objects carrying this tag
        description: Human-readable description of the type
    """
    speckle_type: str
    cls: Type
    description: str = ""


class KitRegistry:
    """
    Registry of object types known to the kit.

    Lookups match the full tag first, then the last segment of an
    inheritance chain such as ``"Objects.Other.Custom:Objects.Geometry.Mesh"``.
    """

    _types: dict[str, KitEntry] = {}

    @classmethod
    def register(cls, speckle_type: str, type_cls: Type, description: str = "") -> None:
        """Register a class for a type tag."""
        if speckle_type in cls._types:
            logger.warning(f"Object type '{speckle_type}' already registered")
        cls._types[speckle_type] = KitEntry(
            speckle_type=speckle_type,
            cls=type_cls,
            description=description,
        )
        logger.debug(f"Registered object type: {speckle_type}")

    @classmethod
    def get(cls, speckle_type: str) -> Optional[KitEntry]:
        """Get the entry for a type tag, or None."""
        entry = cls._types.get(speckle_type)
        if entry is None and ":" in speckle_type:
            entry = cls._types.get(speckle_type.rsplit(":", 1)[-1])
        return entry

    @classmethod
    def exists(cls, speckle_type: str) -> bool:
        """Check if a type tag is registered."""
        return cls.get(speckle_type) is not None

    @classmethod
    def list_types(cls) -> list[str]:
        """List all registered type tags."""
        return list(cls._types.keys())

    @classmethod
    def clear(cls) -> None:
        """Remove every registration."""
        cls._types.clear()


_init_lock = threading.Lock()
_initialised = False


def initialise_objects_kit() -> bool:
    """
    Register the built-in object types.

    Safe to call any number of times; registration happens once per
    process.

    Returns:
        True if this call performed the registration, False if the kit
        was already initialised
    """
    global _initialised

    with _init_lock:
        if _initialised:
            return False

        from .objects import Base, Collection, DirectShape, Mesh

        for type_cls in (Base, Mesh, DirectShape, Collection):
            KitRegistry.register(
                type_cls.speckle_type,
                type_cls,
                description=(type_cls.__doc__ or "").strip().splitlines()[0],
            )

        _initialised = True

    logger.info("Objects kit initialised")
    return True


def is_initialised() -> bool:
    """Check whether ``initialise_objects_kit()`` has run."""
    return _initialised


def reset_objects_kit() -> None:
    """Forget all registrations so the kit can be initialised again."""
    global _initialised

    with _init_lock:
        KitRegistry.clear()
        _initialised = False
