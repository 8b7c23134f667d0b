# Copyright 2025 Allard Peper (Dragon Ace / DragonAceNL)
# Licensed under the Apache License, Version 2.0 (see LICENSE).

"""Tests for the conversion run and its harness."""

import pytest

from objshape.automate import (
    DirectShapeRun,
    FunctionInputs,
    RunState,
    RunStatus,
    automate_function,
    run_function,
)
from objshape.automate.runner import ASSUMED_SUCCESS_MESSAGE
from objshape.core import Collection, DirectShape, RevitCategory
from objshape.core.kit import initialise_objects_kit, is_initialised, reset_objects_kit
from objshape.exceptions import InvalidArgumentError, PlatformError, UnknownCategoryError


@pytest.fixture
def inputs():
    return FunctionInputs(revit_category="Walls", target_model_prefix="Converted/")


class TestSuccessfulRun:
    """Runs with a valid category and mesh-bearing nodes."""

    def test_run_succeeds(self, make_context, version_graph, inputs):
        context = make_context(version_graph)

        result = automate_function(context, inputs)

        assert result.success == True
        assert result.state is RunState.DONE
        assert context.run_status is RunStatus.SUCCEEDED
        assert context.status_message == "Converted 2 OBJ objects to Walls DirectShapes"

    def test_publishes_one_version(self, make_context, version_graph, inputs):
        context = make_context(version_graph)

        automate_function(context, inputs)

        assert len(context.published) == 1
        root_object, model_name, message = context.published[0]
        assert model_name == "Converted/Example/Model_Name"
        assert message == "2 Walls DirectShapes"

    def test_published_collection(self, make_context, version_graph, inputs):
        context = make_context(version_graph)

        automate_function(context, inputs)

        root_object = context.published[0][0]
        assert isinstance(root_object, Collection)
        assert root_object.name == "Converted Revit model"
        assert root_object.collection_type == "Directly shaped model"
        assert len(root_object.elements) == 2
        for element in root_object.elements:
            assert isinstance(element, DirectShape)
            assert element.category is RevitCategory.Walls
            assert len(element.base_geometries) > 0

    def test_context_view_linked(self, make_context, version_graph, inputs):
        context = make_context(version_graph)

        result = automate_function(context, inputs)

        assert context.context_view == ["target-model@new-version"]
        assert result.target_model_id == "target-model"
        assert context.model_queries == [("project", "Converted/Example/Model_Name", 1)]

    def test_missing_target_model_skips_link(self, make_context, version_graph, inputs):
        context = make_context(version_graph, find_target=False)

        result = automate_function(context, inputs)

        assert result.success == True
        assert context.context_view is None
        assert result.target_model_id is None
        assert context.run_status is RunStatus.SUCCEEDED

    def test_similarly_named_model_not_linked(self, make_context, version_graph, inputs):
        """A search hit with a different name is not taken for the target model."""
        context = make_context(version_graph, found_model_name="Converted/Example/Model_Name_Old")

        result = automate_function(context, inputs)

        assert result.success == True
        assert context.context_view is None
        assert result.target_model_id is None

    def test_result_details(self, make_context, version_graph, inputs):
        result = automate_function(make_context(version_graph), inputs)

        assert result.category == "Walls"
        assert result.object_count == 2
        assert result.source_model_name == "Example/Model Name"
        assert result.target_model_name == "Converted/Example/Model_Name"
        assert result.version_id == "new-version"
        assert result.to_dict()["state"] == "done"


class TestCategoryPolicies:
    """Unknown categories under the fallback and strict policies."""

    def test_unknown_category_falls_back(self, make_context, version_graph):
        context = make_context(version_graph)
        inputs = FunctionInputs(revit_category="Banana", target_model_prefix="Converted")

        result = automate_function(context, inputs)

        assert result.success == True
        assert result.category == "GenericModel"
        for element in context.published[0][0].elements:
            assert element.category is RevitCategory.GenericModel

    def test_unknown_category_strict_raises(self, make_context, version_graph):
        context = make_context(version_graph)
        inputs = FunctionInputs("Banana", "Converted", strict_category=True)

        with pytest.raises(UnknownCategoryError):
            automate_function(context, inputs)

        assert context.published == []

    def test_known_category_strict(self, make_context, version_graph):
        context = make_context(version_graph)
        inputs = FunctionInputs("Floors", "Converted", strict_category=True)

        assert automate_function(context, inputs).success == True


class TestFailedRun:
    """Runs that end as failures or exceptions."""

    def test_no_meshes_fails_gracefully(self, make_context, empty_graph, inputs):
        context = make_context(empty_graph)

        result = automate_function(context, inputs)

        assert result.success == False
        assert result.state is RunState.DONE
        assert context.run_status is RunStatus.FAILED
        assert context.status_message == "No valid objects found for conversion."
        assert context.published == []
        assert context.context_view is None

    def test_empty_prefix_raises(self, make_context, version_graph):
        context = make_context(version_graph)
        inputs = FunctionInputs(revit_category="Walls", target_model_prefix="")

        with pytest.raises(InvalidArgumentError):
            automate_function(context, inputs)

        assert context.published == []

    def test_empty_source_model_name_raises(self, make_context, version_graph, inputs):
        context = make_context(version_graph, model_name="")

        with pytest.raises(InvalidArgumentError):
            automate_function(context, inputs)

    def test_platform_failure_propagates(self, make_context, version_graph, inputs):
        context = make_context(version_graph, fail_on="create_new_version_in_project")
        run = DirectShapeRun(context, inputs)

        with pytest.raises(PlatformError):
            run.execute()

        assert run.state is RunState.NAMED
        assert run.result.success == False

    def test_receive_failure_propagates(self, make_context, version_graph, inputs):
        context = make_context(version_graph, fail_on="receive_version")
        run = DirectShapeRun(context, inputs)

        with pytest.raises(PlatformError):
            run.execute()

        assert run.state is RunState.START

    def test_lookup_failure_propagates(self, make_context, version_graph, inputs):
        context = make_context(version_graph, fail_on="get_project_models")
        run = DirectShapeRun(context, inputs)

        with pytest.raises(PlatformError):
            run.execute()

        assert run.state is RunState.PUBLISHED
        assert len(context.published) == 1


class TestRunFunction:
    """Tests for the harness."""

    def test_success_status(self, make_context, version_graph, inputs):
        context = run_function(automate_function, make_context(version_graph), inputs)
        assert context.run_status is RunStatus.SUCCEEDED

    def test_failed_status(self, make_context, empty_graph, inputs):
        context = run_function(automate_function, make_context(empty_graph), inputs)

        assert context.run_status is RunStatus.FAILED
        assert context.status_message == "No valid objects found for conversion."

    def test_empty_inputs_end_in_exception(self, make_context, version_graph):
        context = make_context(version_graph)
        inputs = FunctionInputs(revit_category="", target_model_prefix="")

        run_function(automate_function, context, inputs)

        assert context.run_status is RunStatus.EXCEPTION
        assert "Prefix" in context.status_message
        assert context.published == []

    def test_platform_failure_ends_in_exception(self, make_context, version_graph, inputs):
        context = make_context(version_graph, fail_on="receive_version")

        run_function(automate_function, context, inputs)

        assert context.run_status is RunStatus.EXCEPTION
        assert "PlatformError" in context.status_message

    def test_unmarked_run_assumed_successful(self, make_context, version_graph, inputs):
        context = run_function(lambda ctx, inp: None, make_context(version_graph), inputs)

        assert context.run_status is RunStatus.SUCCEEDED
        assert context.status_message == ASSUMED_SUCCESS_MESSAGE

    def test_initialises_kit(self, make_context, version_graph, inputs):
        reset_objects_kit()
        try:
            run_function(automate_function, make_context(version_graph), inputs)
            assert is_initialised()
        finally:
            reset_objects_kit()
            initialise_objects_kit()
