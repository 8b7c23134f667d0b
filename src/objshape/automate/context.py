# Copyright 2025 Allard Peper (Dragon Ace / DragonAceNL)
# Licensed under the Apache License, Version 2.0 (see LICENSE).

"""
Automation context: the function's view of the hosting platform.

``AutomationContext`` implements run status and context view bookkeeping
and leaves the platform calls (receiving versions, model lookups,
publishing) to subclasses.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional
import logging
import uuid

from ..core.objects import Base

logger = logging.getLogger(__name__)


class RunStatus(Enum):
    """Status of an automation run."""
    INITIALIZING = "INITIALIZING"
    RUNNING = "RUNNING"
    SUCCEEDED = "SUCCEEDED"
    FAILED = "FAILED"
    EXCEPTION = "EXCEPTION"

    @property
    def is_terminal(self) -> bool:
        return self in (RunStatus.SUCCEEDED, RunStatus.FAILED, RunStatus.EXCEPTION)


@dataclass
class ModelInfo:
    """A model in a project."""
    id: str
    name: str
    versions: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {"id": self.id, "name": self.name, "versions": list(self.versions)}

    @classmethod
    def from_dict(cls, data: dict) -> "ModelInfo":
        return cls(
            id=data["id"],
            name=data["name"],
            versions=list(data.get("versions", [])),
        )


@dataclass
class AutomationRunData:
    """
    Identifies the run and the version that triggered it.

    Attributes:
        project_id: Project holding the source model
        model_id: Model whose new version triggered the run
        version_id: The triggering version
        automation_run_id: Unique id of this run
    """
    project_id: str
    model_id: str
    version_id: str
    automation_run_id: str = field(default_factory=lambda: uuid.uuid4().hex[:10])

    def to_dict(self) -> dict:
        return {
            "project_id": self.project_id,
            "model_id": self.model_id,
            "version_id": self.version_id,
            "automation_run_id": self.automation_run_id,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "AutomationRunData":
        run_data = cls(
            project_id=data["project_id"],
            model_id=data["model_id"],
            version_id=data["version_id"],
        )
        if data.get("automation_run_id"):
            run_data.automation_run_id = data["automation_run_id"]
        return run_data


class AutomationContext(ABC):
    """Base class for automation contexts."""

    def __init__(self, automation_run_data: AutomationRunData):
        self.automation_run_data = automation_run_data
        self.run_status = RunStatus.INITIALIZING
        self.status_message: Optional[str] = None
        self.context_view: Optional[list[str]] = None
        self.logger = logging.getLogger(f"objshape.run.{automation_run_data.automation_run_id}")

    # -------------------------------------------------------------------------
    # Platform calls
    # -------------------------------------------------------------------------

    @abstractmethod
    def receive_version(self) -> Base:
        """Fetch the root object of the triggering version."""

    @abstractmethod
    def get_model(self, model_id: str, project_id: str) -> ModelInfo:
        """Fetch a model of a project."""

    @abstractmethod
    def create_new_version_in_project(
        self,
        root_object: Base,
        model_name: str,
        version_message: str = "",
    ) -> str:
        """
        Publish ``root_object`` as a new version of the named model.

        The model is created if it does not exist yet.

        Returns:
            Id of the new version
        """

    @abstractmethod
    def get_project_models(
        self,
        project_id: str,
        name_filter: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> list[ModelInfo]:
        """List the models of a project whose name matches ``name_filter``."""

    # -------------------------------------------------------------------------
    # Run status
    # -------------------------------------------------------------------------

    def mark_run_running(self) -> None:
        self.run_status = RunStatus.RUNNING

    def mark_run_success(self, message: Optional[str] = None) -> None:
        """Mark the run as succeeded."""
        self._mark_run(RunStatus.SUCCEEDED, message)

    def mark_run_failed(self, message: str) -> None:
        """Mark the run as failed."""
        self._mark_run(RunStatus.FAILED, message)

    def mark_run_exception(self, message: str) -> None:
        """Mark the run as ended by an unhandled error."""
        self._mark_run(RunStatus.EXCEPTION, message)

    def set_context_view(
        self,
        resource_ids: Optional[list[str]] = None,
        include_source_model_version: bool = True,
    ) -> None:
        """
        Set the model versions the run's results should be viewed in.

        Args:
            resource_ids: ``"<model id>@<version id>"`` strings
            include_source_model_version: Prepend the triggering version
        """
        view = []
        if include_source_model_version:
            run_data = self.automation_run_data
            view.append(f"{run_data.model_id}@{run_data.version_id}")
        view.extend(resource_ids or [])

        if not view:
            raise ValueError("Cannot set an empty context view")

        self.context_view = view
        self.logger.info(f"Context view set to: {','.join(view)}")

    def _mark_run(self, status: RunStatus, message: Optional[str]) -> None:
        self.run_status = status
        self.status_message = message
        log = self.logger.info if status is RunStatus.SUCCEEDED else self.logger.error
        log(f"Run {status.value}: {message or ''}")
