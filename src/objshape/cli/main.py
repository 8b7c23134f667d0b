# Copyright 2025 Allard Peper (Dragon Ace / DragonAceNL)
# Licensed under the Apache License, Version 2.0 (see LICENSE).

"""
Command-line interface for objshape.

Provides commands for:
- run: Import a model file into a local project and run the conversion on it
- convert: Convert a local OBJ file and show the resulting DirectShapes
- target-name: Show the target model name for a source model
- list-categories: Show the available categories
- list-models: Show the models of a local project
"""

import json
import logging
import sys
from pathlib import Path
from typing import Optional

import click

from objshape import __version__
from objshape.automate import (
    FunctionInputs,
    LocalAutomationContext,
    LocalProject,
    RunStatus,
    automate_function,
    bootstrap,
    run_function,
)
from objshape.config import get_project_dir
from objshape.core import (
    RevitCategory,
    convert_version_objects,
    create_version_collection,
    generate_target_model_name,
    load_obj,
)
from objshape.exceptions import ObjShapeError


def setup_logging(verbose: bool) -> None:
    """Configure logging based on verbosity."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%H:%M:%S"
    )


@click.group()
@click.version_option(version=__version__, prog_name="objshape")
def main():
    """
    objshape - Convert OBJ meshes in a model version into DirectShapes.

    Use 'objshape COMMAND --help' for more information on each command.
    """
    pass


@main.command()
@click.argument("source", type=click.Path(exists=True, dir_okay=False))
@click.option("--category", "-c", type=str, help="RevitCategory for the DirectShapes")
@click.option("--prefix", "-p", type=str, help="Target model prefix")
@click.option("--inputs", "-f", "inputs_path", type=click.Path(exists=True, dir_okay=False),
              help="Function inputs file (JSON/YAML)")
@click.option("--project-dir", type=click.Path(file_okay=False),
              help="Local project directory (default: $OBJSHAPE_PROJECT_DIR or ~/.objshape/project)")
@click.option("--model-name", "-m", type=str, help="Source model name (default: file name)")
@click.option("--strict-category", is_flag=True, help="Fail on an unknown category")
@click.option("--report", "-r", "report_path", type=click.Path(dir_okay=False),
              help="Path for JSON report output")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
def run(
    source: str,
    category: Optional[str],
    prefix: Optional[str],
    inputs_path: Optional[str],
    project_dir: Optional[str],
    model_name: Optional[str],
    strict_category: bool,
    report_path: Optional[str],
    verbose: bool
):
    """
    Publish SOURCE as a model version and convert it.

    SOURCE is an OBJ file or a serialized object (JSON).

    Examples:

        objshape run model.obj -c Walls -p Converted

        objshape run model.obj -f inputs.yaml --project-dir ./project
    """
    setup_logging(verbose)

    # Build function inputs
    if inputs_path:
        try:
            inputs = FunctionInputs.load(inputs_path)
        except ValueError as e:
            click.echo(f"Error reading inputs: {e}")
            sys.exit(1)
    elif category is None:
        click.echo("Error: Provide --category or --inputs")
        sys.exit(1)
    else:
        inputs = FunctionInputs(revit_category=category)

    if inputs_path and category is not None:
        inputs.revit_category = category
    if prefix is not None:
        inputs.target_model_prefix = prefix
    if strict_category:
        inputs.strict_category = True

    if not inputs.target_model_prefix.strip():
        click.echo("Error: Provide --prefix or a TargetModelPrefix in --inputs")
        sys.exit(1)

    bootstrap()

    project = LocalProject(Path(project_dir) if project_dir else get_project_dir())

    click.echo(f"Importing: {source}")
    try:
        model, version_id = project.import_file(source, model_name)
    except (ValueError, OSError, ObjShapeError) as e:
        click.echo(f"Error importing model: {e}")
        sys.exit(1)
    click.echo(f"  Model: {model.name} ({model.id})")
    click.echo(f"  Version: {version_id}")

    context = LocalAutomationContext.for_latest_version(project, model.name)

    results = []

    def function(ctx, function_inputs):
        results.append(automate_function(ctx, function_inputs))

    click.echo(f"\nConverting to {inputs.revit_category} DirectShapes")
    run_function(function, context, inputs)

    click.echo(f"\nRun {context.run_status.value}: {context.status_message}")
    if context.context_view:
        click.echo(f"  Context view: {', '.join(context.context_view)}")

    if report_path:
        report = {
            "source": str(source),
            "project_dir": str(project.root),
            "project_id": project.project_id,
            "run": context.automation_run_data.to_dict(),
            "inputs": inputs.to_dict(),
            "status": context.run_status.value,
            "status_message": context.status_message,
            "context_view": context.context_view,
            "result": results[0].to_dict() if results else None,
        }
        report_path = Path(report_path)
        report_path.parent.mkdir(parents=True, exist_ok=True)
        with open(report_path, "w") as f:
            json.dump(report, f, indent=2)
        click.echo(f"Report saved: {report_path}")

    if context.run_status is not RunStatus.SUCCEEDED:
        sys.exit(1)


@main.command()
@click.option("--input", "-i", "input_path", required=True, type=click.Path(exists=True),
              help="Path to OBJ file")
@click.option("--category", "-c", required=True, type=str, help="RevitCategory for the DirectShapes")
@click.option("--output", "-o", "output_path", type=click.Path(dir_okay=False),
              help="Write the converted collection as JSON")
@click.option("--json", "-j", "json_output", is_flag=True, help="Output summary as JSON")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
def convert(input_path: str, category: str, output_path: Optional[str], json_output: bool, verbose: bool):
    """
    Convert an OBJ file to DirectShapes without publishing.

    Examples:

        objshape convert -i model.obj -c Walls

        objshape convert -i model.obj -c GenericModel -o converted.json
    """
    setup_logging(verbose)
    bootstrap()

    try:
        root = load_obj(input_path)
    except Exception as e:
        click.echo(f"Error loading mesh: {e}")
        sys.exit(1)

    shapes = convert_version_objects(root, category)
    if not shapes:
        click.echo(f"No objects converted (category '{category}')")
        sys.exit(1)

    summary = [
        {
            "name": shape.name,
            "category": shape.category.name,
            "meshes": len(shape.base_geometries),
            "vertices": sum(m.vertex_count for m in shape.base_geometries),
            "faces": sum(m.face_count for m in shape.base_geometries),
        }
        for shape in shapes
    ]

    if json_output:
        click.echo(json.dumps(summary, indent=2))
    else:
        click.echo(f"Converted {len(shapes)} objects:")
        for i, item in enumerate(summary, 1):
            click.echo(
                f"  [{i}] {item['name']}: {item['meshes']} meshes, "
                f"{item['vertices']:,} vertices, {item['faces']:,} faces"
            )

    if output_path:
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with open(output_path, "w") as f:
            f.write(create_version_collection(shapes).to_json(indent=2))
        click.echo(f"Saved: {output_path}")


@main.command("target-name")
@click.argument("source_model_name")
@click.argument("prefix")
def target_name(source_model_name: str, prefix: str):
    """
    Show the model name converted versions of SOURCE_MODEL_NAME go to.

    Examples:

        objshape target-name "Example/Model Name" Converted
    """
    try:
        click.echo(generate_target_model_name(source_model_name, prefix))
    except ObjShapeError as e:
        click.echo(f"Error: {e}")
        sys.exit(1)


@main.command("list-categories")
def list_categories_cmd():
    """
    List available Revit categories.
    """
    click.echo("Available categories:\n")
    for category in RevitCategory:
        click.echo(f"  {category.name:<24} {category.value}")


@main.command("list-models")
@click.option("--project-dir", type=click.Path(file_okay=False, exists=True),
              help="Local project directory (default: $OBJSHAPE_PROJECT_DIR or ~/.objshape/project)")
@click.option("--filter", "name_filter", type=str, help="Only models whose name contains this")
def list_models(project_dir: Optional[str], name_filter: Optional[str]):
    """
    List the models of a local project.
    """
    project = LocalProject(Path(project_dir) if project_dir else get_project_dir())
    models = project.list_models(name_filter=name_filter)

    click.echo(f"Project {project.project_id}: {len(models)} models\n")
    for model in models:
        click.echo(f"  {model.id}  {model.name}  ({len(model.versions)} versions)")


if __name__ == "__main__":
    main()
