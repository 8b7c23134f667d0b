# Copyright 2025 Allard Peper (Dragon Ace / DragonAceNL)
# Licensed under the Apache License, Version 2.0 (see LICENSE).

"""
User-supplied inputs of the automate function.

Inputs are read from JSON or YAML documents. Keys use the platform's
names (``RevitCategory``, ``TargetModelPrefix``, ``StrictCategory``);
snake_case spellings are accepted as well.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Union
import json
import logging

import yaml

from ..core.categories import CategoryPolicy, parse_category

logger = logging.getLogger(__name__)

_KEYS = {
    "revit_category": ("RevitCategory", "revit_category"),
    "target_model_prefix": ("TargetModelPrefix", "target_model_prefix"),
    "strict_category": ("StrictCategory", "strict_category"),
}


@dataclass
class FunctionInputs:
    """
    Inputs of a conversion run.

    Attributes:
        revit_category: Category assigned to every DirectShape (required)
        target_model_prefix: Path prefix of the model receiving the result
        strict_category: Fail the run on an unknown category instead of
            falling back to GenericModel
    """
    revit_category: str
    target_model_prefix: str = ""
    strict_category: bool = False

    @property
    def category_policy(self) -> CategoryPolicy:
        return CategoryPolicy.STRICT if self.strict_category else CategoryPolicy.FALLBACK

    @classmethod
    def from_dict(cls, data: dict) -> "FunctionInputs":
        """Create from dictionary."""
        values = {}
        for field_name, keys in _KEYS.items():
            for key in keys:
                if key in data:
                    values[field_name] = data[key]
                    break

        if "revit_category" not in values:
            raise ValueError("Function inputs must include 'RevitCategory'")

        return cls(
            revit_category=str(values["revit_category"] or ""),
            target_model_prefix=str(values.get("target_model_prefix") or ""),
            strict_category=_parse_flag(values.get("strict_category", False), "StrictCategory"),
        )

    @classmethod
    def from_json(cls, path: Union[str, Path]) -> "FunctionInputs":
        """Load from JSON file."""
        with open(path, encoding="utf-8") as f:
            return cls.from_dict(json.load(f))

    @classmethod
    def from_yaml(cls, path: Union[str, Path]) -> "FunctionInputs":
        """Load from YAML file."""
        with open(path, encoding="utf-8") as f:
            return cls.from_dict(yaml.safe_load(f) or {})

    @classmethod
    def load(cls, path: Union[str, Path]) -> "FunctionInputs":
        """
        Load from file, auto-detecting format from extension.

        Supports .json and .yaml/.yml files.
        """
        path = Path(path)

        if not path.exists():
            raise FileNotFoundError(f"Function inputs not found: {path}")

        suffix = path.suffix.lower()

        if suffix == ".json":
            return cls.from_json(path)
        elif suffix in (".yaml", ".yml"):
            return cls.from_yaml(path)
        else:
            # Try JSON first, then YAML
            try:
                return cls.from_json(path)
            except json.JSONDecodeError:
                return cls.from_yaml(path)

    def to_dict(self) -> dict:
        """Convert to dictionary using the platform's key names."""
        return {
            "RevitCategory": self.revit_category,
            "TargetModelPrefix": self.target_model_prefix,
            "StrictCategory": self.strict_category,
        }

    def validate(self) -> list[str]:
        """
        Check the inputs without running anything.

        Returns:
            List of problems (empty if valid)
        """
        errors = []

        if not self.revit_category:
            errors.append("RevitCategory is required")
        elif parse_category(self.revit_category) is None:
            if self.strict_category:
                errors.append(f"Unknown RevitCategory '{self.revit_category}'")
            else:
                logger.debug(f"Unknown RevitCategory '{self.revit_category}' will fall back")

        if not self.target_model_prefix.strip():
            errors.append("TargetModelPrefix is required")

        return errors


_TRUE_WORDS = ("true", "yes", "on", "1")
_FALSE_WORDS = ("false", "no", "off", "0", "")


def _parse_flag(value, key: str) -> bool:
    """Read a boolean input; strings are matched by word, not truthiness."""
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        word = value.strip().lower()
        if word in _TRUE_WORDS:
            return True
        if word in _FALSE_WORDS:
            return False
    raise ValueError(f"{key} must be true or false, got {value!r}")
