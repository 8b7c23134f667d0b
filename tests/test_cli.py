# Copyright 2025 Allard Peper (Dragon Ace / DragonAceNL)
# Licensed under the Apache License, Version 2.0 (see LICENSE).

"""Tests for the command-line interface."""

import json

import pytest
from click.testing import CliRunner

from objshape.automate import LocalProject
from objshape.cli.main import main


@pytest.fixture
def runner():
    return CliRunner()


class TestRunCommand:

    def test_run_obj(self, runner, obj_file, tmp_path):
        project_dir = tmp_path / "project"
        report_path = tmp_path / "report.json"

        result = runner.invoke(main, [
            "run", str(obj_file),
            "--category", "Walls",
            "--prefix", "Converted",
            "--project-dir", str(project_dir),
            "--model-name", "Example/Cube",
            "--report", str(report_path),
        ])

        assert result.exit_code == 0, result.output
        assert "Run SUCCEEDED" in result.output

        project = LocalProject(project_dir)
        assert project.find_model("Converted/Example/Cube") is not None

        report = json.loads(report_path.read_text())
        assert report["status"] == "SUCCEEDED"
        assert report["result"]["target_model_name"] == "Converted/Example/Cube"

    def test_run_with_inputs_file(self, runner, obj_file, tmp_path):
        inputs_path = tmp_path / "inputs.yaml"
        inputs_path.write_text("RevitCategory: Floors\nTargetModelPrefix: exports\n")

        result = runner.invoke(main, [
            "run", str(obj_file),
            "--inputs", str(inputs_path),
            "--project-dir", str(tmp_path / "project"),
        ])

        assert result.exit_code == 0, result.output
        assert LocalProject(tmp_path / "project").find_model("exports/cube") is not None

    def test_run_strict_unknown_category(self, runner, obj_file, tmp_path):
        result = runner.invoke(main, [
            "run", str(obj_file),
            "-c", "Banana",
            "-p", "Converted",
            "--strict-category",
            "--project-dir", str(tmp_path / "project"),
        ])

        assert result.exit_code == 1
        assert "Run EXCEPTION" in result.output

    def test_run_requires_category(self, runner, obj_file, tmp_path):
        result = runner.invoke(main, ["run", str(obj_file), "--project-dir", str(tmp_path / "p")])
        assert result.exit_code == 1

    def test_run_requires_prefix(self, runner, obj_file, tmp_path):
        """A missing prefix is reported before anything is imported."""
        project_dir = tmp_path / "project"

        result = runner.invoke(main, [
            "run", str(obj_file), "-c", "Walls", "--project-dir", str(project_dir),
        ])

        assert result.exit_code == 1
        assert "--prefix" in result.output
        assert not project_dir.exists()


class TestConvertCommand:

    def test_convert(self, runner, obj_file):
        result = runner.invoke(main, ["convert", "-i", str(obj_file), "-c", "Walls"])

        assert result.exit_code == 0, result.output
        assert "A Walls from OBJ" in result.output

    def test_convert_json_and_output(self, runner, obj_file, tmp_path):
        output = tmp_path / "converted.json"

        result = runner.invoke(main, [
            "convert", "-i", str(obj_file), "-c", "Walls", "--json", "-o", str(output),
        ])

        assert result.exit_code == 0, result.output
        assert '"category": "Walls"' in result.output
        data = json.loads(output.read_text())
        assert data["collectionType"] == "Directly shaped model"

    def test_convert_invalid_category(self, runner, obj_file):
        result = runner.invoke(main, ["convert", "-i", str(obj_file), "-c", "Banana"])
        assert result.exit_code == 1


class TestInfoCommands:

    def test_target_name(self, runner):
        result = runner.invoke(main, ["target-name", "Example/Model Name", "Converted/"])

        assert result.exit_code == 0
        assert result.output.strip() == "Converted/Example/Model_Name"

    def test_target_name_invalid(self, runner):
        result = runner.invoke(main, ["target-name", "Model", "/"])
        assert result.exit_code == 1

    def test_list_categories(self, runner):
        result = runner.invoke(main, ["list-categories"])

        assert result.exit_code == 0
        assert "Walls" in result.output
        assert "GenericModel" in result.output

    def test_list_models(self, runner, local_project):
        local_project.create_model("Converted/a")

        result = runner.invoke(main, ["list-models", "--project-dir", str(local_project.root)])

        assert result.exit_code == 0
        assert "Converted/a" in result.output

    def test_version(self, runner):
        result = runner.invoke(main, ["--version"])
        assert "objshape" in result.output
