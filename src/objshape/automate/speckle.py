# Copyright 2025 Allard Peper (Dragon Ace / DragonAceNL)
# Licensed under the Apache License, Version 2.0 (see LICENSE).

"""
Speckle Automate entry point.

``SpeckleAutomationContext`` runs the automate function against a live
Speckle Automate run. Platform calls go to the ``speckle_automate``
context and its ``speckle_client``; object graphs are converted between
specklepy ``Base`` objects and ``objshape.core.objects`` at the seam.

Run as the function's container entry point:

    python -m objshape.automate.speckle
"""

from enum import Enum
from typing import Any, Optional
import logging

from pydantic import Field
from speckle_automate import AutomateBase, execute_automate_function
from speckle_automate import AutomationContext as SpeckleContext
from specklepy.core.api.inputs.project_inputs import ProjectModelsFilter
from specklepy.logging.exceptions import SpeckleException
from specklepy.objects.base import Base as SpeckleBase

from ..core.objects import Base
from ..exceptions import PlatformError
from .context import AutomationContext, AutomationRunData, ModelInfo
from .function import automate_function
from .inputs import FunctionInputs
from .runner import bootstrap

logger = logging.getLogger(__name__)

# Members specklepy manages itself; never copied between the two graphs
_SPECKLE_MANAGED_MEMBERS = ("id", "speckle_type", "totalChildrenCount", "applicationId")

DEFAULT_MODELS_LIMIT = 25


class SpeckleFunctionInputs(AutomateBase):
    """Input schema shown to users when they configure the automation."""

    revit_category: str = Field(
        title="Revit category",
        description="Category assigned to every DirectShape, e.g. Walls or GenericModel.",
    )
    target_model_prefix: str = Field(
        title="Target model prefix",
        description="Converted versions are published to <prefix>/<source model name>.",
    )
    strict_category: bool = Field(
        default=False,
        title="Strict category",
        description="Fail the run on an unknown category instead of using Generic Models.",
    )

    def to_function_inputs(self) -> FunctionInputs:
        return FunctionInputs(
            revit_category=self.revit_category,
            target_model_prefix=self.target_model_prefix,
            strict_category=self.strict_category,
        )


# -----------------------------------------------------------------------------
# Object conversion
# -----------------------------------------------------------------------------

def to_speckle(node: Base) -> SpeckleBase:
    """Convert a node graph to specklepy objects, keeping type tags and members."""
    return _to_speckle_value(node.to_dict())


def _to_speckle_value(value: Any) -> Any:
    if isinstance(value, dict):
        if "speckle_type" not in value:
            return {key: _to_speckle_value(item) for key, item in value.items()}
        speckle_object = SpeckleBase.of_type(value["speckle_type"])
        for name, item in value.items():
            if name in _SPECKLE_MANAGED_MEMBERS:
                continue
            speckle_object[name] = _to_speckle_value(item)
        return speckle_object
    if isinstance(value, list):
        return [_to_speckle_value(item) for item in value]
    return value


def from_speckle(speckle_object: SpeckleBase) -> Base:
    """Convert a received specklepy graph to nodes; classes come from the objects kit."""
    return Base.from_dict(_from_speckle_value(speckle_object))


def _from_speckle_value(value: Any) -> Any:
    if isinstance(value, SpeckleBase):
        data = {"speckle_type": value.speckle_type}
        if value.id:
            data["id"] = value.id
        for name in value.get_member_names():
            if name.startswith("_") or name in _SPECKLE_MANAGED_MEMBERS:
                continue
            item = getattr(value, name, None)
            if item is None:
                continue
            data[name] = _from_speckle_value(item)
        return data
    if isinstance(value, (list, tuple)):
        return [_from_speckle_value(item) for item in value]
    if isinstance(value, dict):
        return {str(key): _from_speckle_value(item) for key, item in value.items()}
    if isinstance(value, Enum):
        return value.value
    return value


# -----------------------------------------------------------------------------
# Context
# -----------------------------------------------------------------------------

class SpeckleAutomationContext(AutomationContext):
    """Automation context backed by a Speckle Automate run."""

    def __init__(self, automate_context: SpeckleContext):
        run_data = automate_context.automation_run_data
        trigger = run_data.triggers[0].payload
        super().__init__(AutomationRunData(
            project_id=run_data.project_id,
            model_id=trigger.model_id,
            version_id=trigger.version_id,
            automation_run_id=run_data.automation_run_id,
        ))
        self.automate_context = automate_context

    @property
    def client(self):
        return self.automate_context.speckle_client

    def receive_version(self) -> Base:
        return from_speckle(self.automate_context.receive_version())

    def get_model(self, model_id: str, project_id: str) -> ModelInfo:
        try:
            model = self.client.model.get(model_id, project_id)
        except SpeckleException as e:
            raise PlatformError(f"Failed to get model {model_id}: {e}") from e
        return ModelInfo(id=model.id, name=model.name)

    def create_new_version_in_project(
        self,
        root_object: Base,
        model_name: str,
        version_message: str = "",
    ) -> str:
        _, version_id = self.automate_context.create_new_version_in_project(
            to_speckle(root_object),
            model_name,
            version_message,
        )
        return version_id

    def get_project_models(
        self,
        project_id: str,
        name_filter: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> list[ModelInfo]:
        models_filter = ProjectModelsFilter(search=name_filter) if name_filter else None
        try:
            project = self.client.project.get_with_models(
                project_id,
                models_limit=limit or DEFAULT_MODELS_LIMIT,
                models_filter=models_filter,
            )
        except SpeckleException as e:
            raise PlatformError(f"Failed to list models of project {project_id}: {e}") from e
        return [ModelInfo(id=model.id, name=model.name) for model in project.models.items]

    def mark_run_success(self, message: Optional[str] = None) -> None:
        super().mark_run_success(message)
        self.automate_context.mark_run_success(message or "")

    def mark_run_failed(self, message: str) -> None:
        super().mark_run_failed(message)
        self.automate_context.mark_run_failed(message)

    def mark_run_exception(self, message: str) -> None:
        super().mark_run_exception(message)
        self.automate_context.mark_run_exception(message)

    def set_context_view(
        self,
        resource_ids: Optional[list[str]] = None,
        include_source_model_version: bool = True,
    ) -> None:
        super().set_context_view(resource_ids, include_source_model_version)
        self.automate_context.set_context_view(resource_ids, include_source_model_version)


def speckle_function(automate_context: SpeckleContext, function_inputs: SpeckleFunctionInputs) -> None:
    """Function handed to the Speckle Automate runner."""
    bootstrap()
    context = SpeckleAutomationContext(automate_context)
    result = automate_function(context, function_inputs.to_function_inputs())
    logger.info(f"Run finished in state {result.state.value}")


def main() -> None:
    # The runner reads run data and inputs from the command line and
    # reports exceptions and unmarked runs to the platform.
    execute_automate_function(speckle_function, SpeckleFunctionInputs)


if __name__ == "__main__":
    main()
