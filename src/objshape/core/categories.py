# Copyright 2025 Allard Peper (Dragon Ace / DragonAceNL)
# Licensed under the Apache License, Version 2.0 (see LICENSE).

"""
Building element categories for DirectShape elements.

``parse_category`` is the only place a category name is turned into a
``RevitCategory``. It never raises; what happens to a name it cannot
parse is decided by ``resolve_category`` and its ``CategoryPolicy``.
"""

from enum import Enum
from typing import Optional
import logging

from ..exceptions import UnknownCategoryError

logger = logging.getLogger(__name__)


class RevitCategory(Enum):
    """Categories a DirectShape can be assigned to. Values are display labels."""
    Casework = "Casework"
    Ceilings = "Ceilings"
    Columns = "Columns"
    CommunicationDevices = "Communication Devices"
    DataDevices = "Data Devices"
    Doors = "Doors"
    ElectricalEquipment = "Electrical Equipment"
    ElectricalFixtures = "Electrical Fixtures"
    Entourage = "Entourage"
    FireAlarmDevices = "Fire Alarm Devices"
    Floors = "Floors"
    Furniture = "Furniture"
    FurnitureSystems = "Furniture Systems"
    GenericModel = "Generic Models"
    LightingDevices = "Lighting Devices"
    LightingFixtures = "Lighting Fixtures"
    Mass = "Mass"
    MechanicalEquipment = "Mechanical Equipment"
    NurseCallDevices = "Nurse Call Devices"
    Parking = "Parking"
    Planting = "Planting"
    PlumbingFixtures = "Plumbing Fixtures"
    Railings = "Railings"
    Ramps = "Ramps"
    Roads = "Roads"
    Roofs = "Roofs"
    SecurityDevices = "Security Devices"
    Site = "Site"
    SpecialityEquipment = "Specialty Equipment"
    Stairs = "Stairs"
    StructuralColumns = "Structural Columns"
    StructuralConnections = "Structural Connections"
    StructuralFoundation = "Structural Foundations"
    StructuralFraming = "Structural Framing"
    StructuralStiffener = "Structural Stiffeners"
    TelephoneDevices = "Telephone Devices"
    Topography = "Topography"
    Walls = "Walls"
    Windows = "Windows"


DEFAULT_CATEGORY = RevitCategory.GenericModel


class CategoryPolicy(Enum):
    """What to do with a category name that is not a RevitCategory member."""
    FALLBACK = "fallback"  # substitute DEFAULT_CATEGORY
    STRICT = "strict"  # raise UnknownCategoryError


def parse_category(name: Optional[str]) -> Optional[RevitCategory]:
    """
    Look up a category by member name.

    Matching is exact and case-sensitive: "Walls" parses, "walls" and
    "Generic Models" do not.

    Returns:
        The matching RevitCategory, or None
    """
    if not isinstance(name, str):
        return None
    return RevitCategory.__members__.get(name)


def resolve_category(
    name: Optional[str],
    policy: CategoryPolicy = CategoryPolicy.FALLBACK,
) -> RevitCategory:
    """
    Resolve a user-supplied category name under a policy.

    Args:
        name: Category member name
        policy: FALLBACK substitutes GenericModel, STRICT raises

    Returns:
        The parsed or substituted category

    Raises:
        UnknownCategoryError: If the name does not parse and policy is STRICT
    """
    category = parse_category(name)
    if category is not None:
        return category

    if policy is CategoryPolicy.STRICT:
        raise UnknownCategoryError(str(name))

    logger.warning(
        f"Invalid Revit category '{name}' provided. Defaulting to '{DEFAULT_CATEGORY.name}'."
    )
    return DEFAULT_CATEGORY


def list_categories() -> list[str]:
    """List all category member names."""
    return list(RevitCategory.__members__.keys())
