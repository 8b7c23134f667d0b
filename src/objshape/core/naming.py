# Copyright 2025 Allard Peper (Dragon Ace / DragonAceNL)
# Licensed under the Apache License, Version 2.0 (see LICENSE).

"""
Target model name generation.

A converted version is published to ``<prefix>/<source path>``, where the
source path is the source model's name split into segments. Both parts
are sanitized so that only letters, digits, underscores and path
separators remain.
"""

import logging
import re

from ..config import MAX_MODEL_NAME_LENGTH
from ..exceptions import InvalidArgumentError

logger = logging.getLogger(__name__)

_SEGMENT_SEPARATORS = re.compile(r"[/\\]")


def _is_alphanumeric(char: str) -> bool:
    return char.isalpha() or char.isdecimal()


def sanitize_prefix(prefix: str) -> str:
    """
    Replace characters other than letters, digits, ``_`` and ``/`` with
    ``_``, then strip leading and trailing ``/``.
    """
    cleaned = "".join(
        char if _is_alphanumeric(char) or char in "_/" else "_"
        for char in prefix
    )
    return cleaned.strip("/")


def sanitize_path_segments(name: str) -> list[str]:
    """
    Split a model name into sanitized path segments.

    Characters other than letters, digits, ``_``, ``/`` and ``\\`` become
    ``_``. The result is split on both separators and empty segments are
    dropped.
    """
    cleaned = "".join(
        char if _is_alphanumeric(char) or char in "_/\\" else "_"
        for char in name
    ).strip()

    return [
        segment.replace(" ", "_").strip()
        for segment in _SEGMENT_SEPARATORS.split(cleaned)
        if segment
    ]


def validate_source_model_name(name: str) -> None:
    """Raise InvalidArgumentError if the source model name is empty."""
    if not name:
        raise InvalidArgumentError("Source model name cannot be null or empty")


def generate_target_model_name(source_model_name: str, prefix: str) -> str:
    """
    Build the name of the model that receives converted versions.

    Examples:
        >>> generate_target_model_name("Example/Model Name", "Converted/")
        'Converted/Example/Model_Name'
        >>> generate_target_model_name("Model", "Converted@/")
        'Converted_/Model'

    Args:
        source_model_name: Name of the model that triggered the run
        prefix: User-supplied prefix for the target model path

    Returns:
        ``<sanitized prefix>/<segment>/.../<segment>``

    Raises:
        InvalidArgumentError: If either input is empty or whitespace, the
            prefix or source name sanitize to nothing, or the result is
            longer than MAX_MODEL_NAME_LENGTH
    """
    if source_model_name is None or not source_model_name.strip():
        raise InvalidArgumentError("Source model name cannot be null, empty, or whitespace.")

    if prefix is None or not prefix.strip():
        raise InvalidArgumentError("Prefix cannot be null, empty, or whitespace.")

    clean_prefix = sanitize_prefix(prefix)
    if not clean_prefix:
        raise InvalidArgumentError(f"Prefix '{prefix}' contains no usable characters.")

    segments = sanitize_path_segments(source_model_name)
    if not segments:
        raise InvalidArgumentError(
            f"Source model name '{source_model_name}' contains no usable path segments."
        )

    target_model_name = "/".join([clean_prefix] + segments)

    if len(target_model_name) > MAX_MODEL_NAME_LENGTH:
        raise InvalidArgumentError(
            "Generated target model name exceeds the maximum allowed length "
            f"of {MAX_MODEL_NAME_LENGTH} characters."
        )

    logger.debug(f"Target model name for '{source_model_name}': {target_model_name}")
    return target_model_name
