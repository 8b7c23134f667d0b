# Copyright 2025 Allard Peper (Dragon Ace / DragonAceNL)
# Licensed under the Apache License, Version 2.0 (see LICENSE).

"""Pytest configuration and fixtures for objshape tests."""

from typing import Optional

import pytest
import trimesh

from objshape.automate import AutomationContext, AutomationRunData, LocalProject, ModelInfo
from objshape.core import Base, Collection, Mesh, initialise_objects_kit
from objshape.exceptions import PlatformError


CUBE_OBJ = """\
# unit cube
o cube
v 0 0 0
v 1 0 0
v 1 1 0
v 0 1 0
v 0 0 1
v 1 0 1
v 1 1 1
v 0 1 1
f 1 3 2
f 1 4 3
f 5 6 7
f 5 7 8
f 1 2 6
f 1 6 5
f 2 3 7
f 2 7 6
f 3 4 8
f 3 8 7
f 4 1 5
f 4 5 8
"""


@pytest.fixture(scope="session", autouse=True)
def objects_kit():
    """Initialise the objects kit once, as the harness does at start-up."""
    initialise_objects_kit()


@pytest.fixture
def box_trimesh():
    """Unit box as a trimesh object (8 vertices, 12 triangles)."""
    return trimesh.creation.box(extents=[1, 1, 1])


@pytest.fixture
def box_mesh(box_trimesh):
    """Unit box as a Mesh node."""
    return Mesh.from_trimesh(box_trimesh)


@pytest.fixture
def mesh_node(box_mesh):
    """Node with one display mesh."""
    return Base(speckle_type="Objects.Other.ObjObject", name="box", displayValue=[box_mesh])


@pytest.fixture
def version_graph(box_trimesh):
    """
    Version root with two displayable nodes and one without geometry.

    Collection
      elements:
        node_a (displayValue: [mesh])
        Collection
          elements:
            node_b (displayValue: mesh, not wrapped in a list)
            node_c (no display value)
    """
    node_a = Base(name="a", displayValue=[Mesh.from_trimesh(box_trimesh)])
    node_b = Base(name="b", displayValue=Mesh.from_trimesh(box_trimesh))
    node_c = Base(name="c", height=3.0)
    inner = Collection(name="inner", collection_type="layer", elements=[node_b, node_c])
    return Collection(name="root", collection_type="OBJ file", elements=[node_a, inner])


@pytest.fixture
def empty_graph():
    """Version root without any mesh."""
    return Collection(
        name="root",
        elements=[Base(name="line", length=2.0), Base(name="point", displayValue=[Base(name="p")])],
    )


@pytest.fixture
def obj_file(tmp_path):
    """OBJ file with a unit cube."""
    path = tmp_path / "cube.obj"
    path.write_text(CUBE_OBJ)
    return path


@pytest.fixture
def local_project(tmp_path):
    """Empty local project."""
    return LocalProject(tmp_path / "project", project_id="proj000001")


class RecordingContext(AutomationContext):
    """Automation context that serves a fixed version and records platform calls."""

    def __init__(
        self,
        root: Base,
        model_name: str = "Example/Model Name",
        find_target: bool = True,
        fail_on: Optional[str] = None,
        found_model_name: Optional[str] = None,
    ):
        super().__init__(AutomationRunData(
            project_id="project",
            model_id="source-model",
            version_id="source-version",
            automation_run_id="run-1",
        ))
        self.root = root
        self.model_name = model_name
        self.find_target = find_target
        self.fail_on = fail_on
        self.found_model_name = found_model_name
        self.published: list[tuple[Base, str, str]] = []
        self.model_queries: list[tuple[str, Optional[str], Optional[int]]] = []

    def _maybe_fail(self, call: str) -> None:
        if self.fail_on == call:
            raise PlatformError(f"{call} failed")

    def receive_version(self) -> Base:
        self._maybe_fail("receive_version")
        return self.root

    def get_model(self, model_id: str, project_id: str) -> ModelInfo:
        self._maybe_fail("get_model")
        return ModelInfo(id=model_id, name=self.model_name)

    def create_new_version_in_project(self, root_object, model_name, version_message=""):
        self._maybe_fail("create_new_version_in_project")
        self.published.append((root_object, model_name, version_message))
        return "new-version"

    def get_project_models(self, project_id, name_filter=None, limit=None):
        self._maybe_fail("get_project_models")
        self.model_queries.append((project_id, name_filter, limit))
        if not self.find_target:
            return []
        return [ModelInfo(id="target-model", name=self.found_model_name or name_filter)]


@pytest.fixture
def make_context():
    """Factory for RecordingContext."""
    return RecordingContext
