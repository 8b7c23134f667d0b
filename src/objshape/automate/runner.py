# Copyright 2025 Allard Peper (Dragon Ace / DragonAceNL)
# Licensed under the Apache License, Version 2.0 (see LICENSE).

"""
Harness that runs an automate function locally and records its final status.

On Speckle Automate the speckle_automate runner plays this part (see speckle.py);
``run_function`` follows the same rules for the CLI and the local project.
"""

from typing import Any, Callable
import logging

from ..core.kit import initialise_objects_kit
from .context import AutomationContext
from .inputs import FunctionInputs

logger = logging.getLogger(__name__)

AutomateFunction = Callable[[AutomationContext, FunctionInputs], Any]

ASSUMED_SUCCESS_MESSAGE = (
    "WARNING: Automate assumed a success status, but it was not marked as so by the function."
)


def bootstrap() -> None:
    """One-time process set-up required before any run."""
    initialise_objects_kit()


def run_function(
    function: AutomateFunction,
    context: AutomationContext,
    inputs: FunctionInputs,
) -> AutomationContext:
    """
    Run ``function`` and make sure the run ends in a terminal status.

    An exception escaping the function marks the run as EXCEPTION with the
    error message. A function that returns without marking the run is
    assumed to have succeeded.

    Returns:
        The context, carrying the final run status
    """
    bootstrap()
    context.mark_run_running()

    try:
        function(context, inputs)
    except Exception as e:
        logger.exception(f"Function raised: {e}")
        context.mark_run_exception(f"{type(e).__name__}: {e}")
        return context

    if not context.run_status.is_terminal:
        context.mark_run_success(ASSUMED_SUCCESS_MESSAGE)

    return context
