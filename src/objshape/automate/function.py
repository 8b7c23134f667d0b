# Copyright 2025 Allard Peper (Dragon Ace / DragonAceNL)
# Licensed under the Apache License, Version 2.0 (see LICENSE).

"""
The automate function: convert OBJ meshes in a version to DirectShapes.

A run moves through these states:

    START -> RECEIVED -> CONVERTED -> NAMED -> PUBLISHED -> LINKED -> DONE

Only "no convertible objects" is handled here, as a failed run. Any
other error propagates to the harness (see runner.py).
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional
import logging
import time

from ..config import NO_OBJECTS_MESSAGE, SUCCESS_MESSAGE, VERSION_MESSAGE
from ..core.categories import RevitCategory, resolve_category
from ..core.converter import convert_version_objects, create_version_collection
from ..core.naming import generate_target_model_name, validate_source_model_name
from ..core.objects import Base, DirectShape
from .context import AutomationContext
from .inputs import FunctionInputs

logger = logging.getLogger(__name__)


class RunState(Enum):
    """Stage reached by a conversion run."""
    START = "start"
    RECEIVED = "received"
    CONVERTED = "converted"
    NAMED = "named"
    PUBLISHED = "published"
    LINKED = "linked"
    DONE = "done"


@dataclass
class RunResult:
    """Outcome of a conversion run."""
    success: bool
    state: RunState
    message: str = ""
    category: Optional[str] = None
    object_count: int = 0
    source_model_name: Optional[str] = None
    target_model_name: Optional[str] = None
    target_model_id: Optional[str] = None
    version_id: Optional[str] = None
    duration_ms: float = 0.0

    def to_dict(self) -> dict:
        return {
            "success": self.success,
            "state": self.state.value,
            "message": self.message,
            "category": self.category,
            "object_count": self.object_count,
            "source_model_name": self.source_model_name,
            "target_model_name": self.target_model_name,
            "target_model_id": self.target_model_id,
            "version_id": self.version_id,
            "duration_ms": self.duration_ms,
        }


class DirectShapeRun:
    """One execution of the conversion against an automation context."""

    def __init__(self, context: AutomationContext, inputs: FunctionInputs):
        self.context = context
        self.inputs = inputs
        self.state = RunState.START
        self.result = RunResult(success=False, state=self.state)

    def _advance(self, state: RunState) -> None:
        logger.debug(f"Run state: {self.state.value} -> {state.value}")
        self.state = state
        self.result.state = state

    def execute(self) -> RunResult:
        """
        Run the conversion.

        Returns:
            RunResult describing the outcome

        Raises:
            InvalidArgumentError: If the category (strict policy), source
                model name or target prefix is unusable
            PlatformError: If a platform call fails
        """
        logger.info("Starting execution")
        start = time.perf_counter()
        try:
            self._execute()
        finally:
            self.result.duration_ms = (time.perf_counter() - start) * 1000
        return self.result

    def _execute(self) -> None:
        context = self.context
        run_data = context.automation_run_data

        logger.info("Receiving version")
        version_object = context.receive_version()
        logger.info(f"Received version: {version_object}")
        self._advance(RunState.RECEIVED)

        category = resolve_category(self.inputs.revit_category, self.inputs.category_policy)
        self.result.category = category.name

        objects = self.convert(version_object, category)
        self.result.object_count = len(objects)
        if not objects:
            self.fail(NO_OBJECTS_MESSAGE)
            return
        self._advance(RunState.CONVERTED)

        source_model = context.get_model(run_data.model_id, run_data.project_id)
        validate_source_model_name(source_model.name)
        self.result.source_model_name = source_model.name

        target_model_name = generate_target_model_name(
            source_model.name,
            self.inputs.target_model_prefix,
        )
        self.result.target_model_name = target_model_name
        self._advance(RunState.NAMED)

        version_id = context.create_new_version_in_project(
            root_object=create_version_collection(objects),
            model_name=target_model_name,
            version_message=VERSION_MESSAGE.format(count=len(objects), category=category.name),
        )
        self.result.version_id = version_id
        logger.info(f"New model version published! Version ID: {version_id}")
        self._advance(RunState.PUBLISHED)

        self.link(target_model_name, version_id)
        self._advance(RunState.LINKED)

        message = SUCCESS_MESSAGE.format(count=len(objects), category=category.name)
        context.mark_run_success(message)
        self.result.success = True
        self.result.message = message
        self._advance(RunState.DONE)

    def convert(self, version_object: Base, category: RevitCategory) -> list[DirectShape]:
        """Convert every displayable node of the version."""
        return convert_version_objects(version_object, category.name)

    def fail(self, message: str) -> None:
        """End the run as failed without raising."""
        self.context.mark_run_failed(message)
        logger.error(message)
        self.result.success = False
        self.result.message = message
        self._advance(RunState.DONE)

    def find_target_model_id(self, target_model_name: str) -> Optional[str]:
        """Look up the id of the target model; None unless the search finds that exact name."""
        models = self.context.get_project_models(
            self.context.automation_run_data.project_id,
            name_filter=target_model_name,
            limit=1,
        )
        for model in models:
            if model.name == target_model_name:
                return model.id
        return None

    def link(self, target_model_name: str, version_id: str) -> None:
        """Point the run's context view at the new version, when the model can be found."""
        target_model_id = self.find_target_model_id(target_model_name)
        if target_model_id is None:
            logger.warning(f"Target model '{target_model_name}' not found; context view not set")
            return

        self.result.target_model_id = target_model_id
        model_version_identifier = f"{target_model_id}@{version_id}"
        self.context.set_context_view([model_version_identifier], include_source_model_version=False)
        logger.info(f"Context view set with: {model_version_identifier}")


def automate_function(context: AutomationContext, function_inputs: FunctionInputs) -> RunResult:
    """Entry point invoked by the harness for each run."""
    return DirectShapeRun(context, function_inputs).execute()
