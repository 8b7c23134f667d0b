# Copyright 2025 Allard Peper (Dragon Ace / DragonAceNL)
# Licensed under the Apache License, Version 2.0 (see LICENSE).

"""
File-backed project store and automation context.

A local project lives in a directory:

    <root>/project.json                          project id, models, version ids
    <root>/versions/<model id>/<version id>.json  version message and root object

``LocalAutomationContext`` runs the automate function against such a
project, which is how the command-line interface and the tests drive it.
"""

from datetime import datetime
from pathlib import Path
from typing import Optional, Union
import json
import logging
import uuid

from ..core.geometry import load_obj
from ..core.objects import Base
from ..exceptions import PlatformError
from .context import AutomationContext, AutomationRunData, ModelInfo

logger = logging.getLogger(__name__)

PROJECT_FILE = "project.json"
VERSIONS_DIR = "versions"


def _new_id() -> str:
    return uuid.uuid4().hex[:10]


class LocalProject:
    """A project stored in a local directory."""

    def __init__(self, root: Union[str, Path], project_id: Optional[str] = None):
        self.root = Path(root)
        self._models: list[ModelInfo] = []

        project_file = self.root / PROJECT_FILE
        if project_file.exists():
            self._load(project_file)
            if project_id and project_id != self.project_id:
                raise PlatformError(
                    f"Directory {self.root} holds project '{self.project_id}', not '{project_id}'"
                )
        else:
            self.project_id = project_id or _new_id()
            self._save()
            logger.info(f"Created local project {self.project_id} in {self.root}")

    def _load(self, project_file: Path) -> None:
        try:
            with open(project_file, encoding="utf-8") as f:
                data = json.load(f)
            self.project_id = data["project_id"]
            self._models = [ModelInfo.from_dict(m) for m in data.get("models", [])]
        except (OSError, ValueError, KeyError) as e:
            raise PlatformError(f"Failed to read project file {project_file}: {e}") from e

    def _save(self) -> None:
        self.root.mkdir(parents=True, exist_ok=True)
        data = {
            "project_id": self.project_id,
            "models": [m.to_dict() for m in self._models],
        }
        with open(self.root / PROJECT_FILE, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)

    # -------------------------------------------------------------------------
    # Models
    # -------------------------------------------------------------------------

    def create_model(self, name: str) -> ModelInfo:
        """Create an empty model."""
        if not name:
            raise PlatformError("Model name cannot be empty")
        if self.find_model(name) is not None:
            raise PlatformError(f"Model '{name}' already exists in project {self.project_id}")

        model = ModelInfo(id=_new_id(), name=name)
        self._models.append(model)
        self._save()
        logger.info(f"Created model '{name}' ({model.id})")
        return model

    def find_model(self, name: str) -> Optional[ModelInfo]:
        """Get the model with exactly this name, or None."""
        for model in self._models:
            if model.name == name:
                return model
        return None

    def get_model(self, model_id: str) -> ModelInfo:
        """Get a model by id."""
        for model in self._models:
            if model.id == model_id:
                return model
        raise PlatformError(f"Model {model_id} not found in project {self.project_id}")

    def list_models(
        self,
        name_filter: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> list[ModelInfo]:
        """
        List models in creation order.

        Args:
            name_filter: Case-insensitive substring the name must contain;
                a model with exactly this name is listed first
            limit: Maximum number of models to return
        """
        models = self._models
        if name_filter:
            needle = name_filter.lower()
            models = [m for m in models if needle in m.name.lower()]
            models.sort(key=lambda m: m.name != name_filter)
        if limit is not None:
            models = models[:limit]
        return list(models)

    # -------------------------------------------------------------------------
    # Versions
    # -------------------------------------------------------------------------

    def commit(self, model_name: str, root_object: Base, message: str = "") -> str:
        """
        Store ``root_object`` as a new version of a model.

        The model is created if it does not exist.

        Returns:
            Id of the new version
        """
        model = self.find_model(model_name) or self.create_model(model_name)
        version_id = _new_id()

        version_path = self.root / VERSIONS_DIR / model.id / f"{version_id}.json"
        version_path.parent.mkdir(parents=True, exist_ok=True)
        document = {
            "id": version_id,
            "model_id": model.id,
            "message": message,
            "created_at": datetime.now().isoformat(),
            "object": root_object.to_dict(),
        }
        with open(version_path, "w", encoding="utf-8") as f:
            json.dump(document, f)

        model.versions.append(version_id)
        self._save()

        logger.info(f"Committed version {version_id} to '{model_name}'")
        return version_id

    def read_version(self, model_id: str, version_id: str) -> Base:
        """Load the root object of a version."""
        model = self.get_model(model_id)
        if version_id not in model.versions:
            raise PlatformError(f"Version {version_id} not found in model '{model.name}'")

        version_path = self.root / VERSIONS_DIR / model_id / f"{version_id}.json"
        try:
            with open(version_path, encoding="utf-8") as f:
                document = json.load(f)
            return Base.from_dict(document["object"])
        except (OSError, ValueError, KeyError) as e:
            raise PlatformError(f"Failed to read version {version_id}: {e}") from e

    def version_message(self, model_id: str, version_id: str) -> str:
        """Get the message a version was committed with."""
        version_path = self.root / VERSIONS_DIR / model_id / f"{version_id}.json"
        try:
            with open(version_path, encoding="utf-8") as f:
                return json.load(f).get("message", "")
        except (OSError, ValueError) as e:
            raise PlatformError(f"Failed to read version {version_id}: {e}") from e

    def latest_version(self, model_id: str) -> Optional[str]:
        """Id of the most recent version of a model, or None."""
        versions = self.get_model(model_id).versions
        return versions[-1] if versions else None

    # -------------------------------------------------------------------------
    # Importing
    # -------------------------------------------------------------------------

    def import_obj(
        self,
        path: Union[str, Path],
        model_name: Optional[str] = None,
        units: str = "m",
    ) -> tuple[ModelInfo, str]:
        """Commit an OBJ file as a new version. The model name defaults to the file stem."""
        path = Path(path)
        root_object = load_obj(path, units=units)
        name = model_name or path.stem
        version_id = self.commit(name, root_object, message=f"Imported from {path.name}")
        return self.find_model(name), version_id

    def import_object(
        self,
        path: Union[str, Path],
        model_name: Optional[str] = None,
    ) -> tuple[ModelInfo, str]:
        """Commit a serialized object (JSON) as a new version."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Object file not found: {path}")

        with open(path, encoding="utf-8") as f:
            data = json.load(f)
        if "object" in data and "speckle_type" not in data:
            data = data["object"]

        name = model_name or path.stem
        version_id = self.commit(name, Base.from_dict(data), message=f"Imported from {path.name}")
        return self.find_model(name), version_id

    def import_file(
        self,
        path: Union[str, Path],
        model_name: Optional[str] = None,
    ) -> tuple[ModelInfo, str]:
        """Import an OBJ or JSON file, chosen by extension."""
        path = Path(path)
        if path.suffix.lower() == ".json":
            return self.import_object(path, model_name)
        return self.import_obj(path, model_name)


class LocalAutomationContext(AutomationContext):
    """Automation context backed by a LocalProject."""

    def __init__(self, project: LocalProject, automation_run_data: AutomationRunData):
        super().__init__(automation_run_data)
        self.project = project

    @classmethod
    def for_latest_version(cls, project: LocalProject, model_name: str) -> "LocalAutomationContext":
        """Create a context triggered by the latest version of a model."""
        model = project.find_model(model_name)
        if model is None:
            raise PlatformError(f"Model '{model_name}' not found in project {project.project_id}")
        version_id = project.latest_version(model.id)
        if version_id is None:
            raise PlatformError(f"Model '{model_name}' has no versions")

        run_data = AutomationRunData(
            project_id=project.project_id,
            model_id=model.id,
            version_id=version_id,
        )
        return cls(project, run_data)

    def _check_project(self, project_id: str) -> None:
        if project_id != self.project.project_id:
            raise PlatformError(f"Project {project_id} not found")

    def receive_version(self) -> Base:
        run_data = self.automation_run_data
        self._check_project(run_data.project_id)
        root_object = self.project.read_version(run_data.model_id, run_data.version_id)
        self.logger.info(f"Received version {run_data.version_id} of model {run_data.model_id}")
        return root_object

    def get_model(self, model_id: str, project_id: str) -> ModelInfo:
        self._check_project(project_id)
        return self.project.get_model(model_id)

    def create_new_version_in_project(
        self,
        root_object: Base,
        model_name: str,
        version_message: str = "",
    ) -> str:
        return self.project.commit(model_name, root_object, message=version_message)

    def get_project_models(
        self,
        project_id: str,
        name_filter: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> list[ModelInfo]:
        self._check_project(project_id)
        return self.project.list_models(name_filter=name_filter, limit=limit)
