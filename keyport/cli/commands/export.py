"""Export command: device layers JSON to a ZMK keymap file."""

import asyncio
import logging
from pathlib import Path
from typing import Annotated, Any

import typer
from pydantic import ValidationError

from keyport.adapters import create_artifact_sink, create_file_adapter
from keyport.cli.app import AppContext
from keyport.cli.decorators import handle_errors
from keyport.cli.helpers import (
    print_error_message,
    print_list_item,
    print_success_message,
    print_warning_message,
)
from keyport.core.errors import KeymapError
from keyport.models.keymap import BehaviorRegistryEntry, Layer
from keyport.services.export_service import create_export_service
from keyport.services.notifications import (
    export_error_message,
    export_success_message,
    warning_message,
)


logger = logging.getLogger(__name__)


def parse_registry(data: Any) -> dict[int, BehaviorRegistryEntry]:
    """Read a behavior registry.

    Accepts a list of ``{"id": .., "displayName": ..}`` entries or a mapping
    of id to display name.
    """
    if isinstance(data, dict):
        data = [
            {"id": int(behavior_id), "displayName": name}
            for behavior_id, name in data.items()
        ]
    if not isinstance(data, list):
        raise KeymapError("Behavior registry must be a list or an object")

    try:
        entries = [BehaviorRegistryEntry.model_validate(item) for item in data]
    except ValidationError as e:
        raise KeymapError(f"Invalid behavior registry: {e}") from e
    return {entry.id: entry for entry in entries}


def _layer_from_dict(index: int, data: dict[str, Any]) -> Layer:
    bindings = [
        binding if "position" in binding else {**binding, "position": position}
        for position, binding in enumerate(data.get("bindings", []))
    ]
    return Layer.model_validate(
        {
            "id": data.get("id", index),
            "label": data.get("label", ""),
            "bindings": bindings,
        }
    )


def load_export_input(
    data: Any,
) -> tuple[str | None, list[Layer], dict[int, BehaviorRegistryEntry]]:
    """Read device name, layers and registry from a layers document.

    The document is either a list of layers or an object with ``layers`` and
    optional ``deviceName`` and ``behaviors`` keys, as written by
    ``keyport import``.
    """
    if isinstance(data, list):
        data = {"layers": data}
    if not isinstance(data, dict) or not isinstance(data.get("layers"), list):
        raise KeymapError("Layers file must contain a 'layers' list")

    try:
        layers = [
            _layer_from_dict(index, layer)
            for index, layer in enumerate(data["layers"])
        ]
    except (ValidationError, AttributeError) as e:
        raise KeymapError(f"Invalid layer data: {e}") from e

    registry = parse_registry(data["behaviors"]) if data.get("behaviors") else {}
    device_name = data.get("deviceName") or data.get("device_name")
    return device_name, layers, registry


def export_command(
    ctx: typer.Context,
    layers_json: Annotated[
        Path, typer.Argument(help="Layers JSON file read from the device")
    ],
    device: Annotated[
        str | None,
        typer.Option("--device", "-d", help="Device name (overrides the JSON file)"),
    ] = None,
    registry_json: Annotated[
        Path | None,
        typer.Option("--registry", "-r", help="Behavior registry JSON file"),
    ] = None,
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Output directory"),
    ] = None,
) -> None:
    """Export device layers to a ZMK .keymap file."""
    app_context: AppContext = ctx.obj
    settings = app_context.user_config.data.export
    file_adapter = create_file_adapter()

    data = file_adapter.read_json(layers_json)
    device_name, layers, registry = load_export_input(data)
    if registry_json is not None:
        registry = parse_registry(file_adapter.read_json(registry_json))

    output_dir = output if output is not None else settings.output_dir
    service = create_export_service(create_artifact_sink(output_dir), settings)
    result = asyncio.run(
        service.export_keymap(device or device_name or "", layers, registry or None)
    )

    if not result.success:
        print_error_message(export_error_message(result))
        raise typer.Exit(1)

    print_success_message(export_success_message(result.filename))
    print_list_item(str(output_dir / result.filename))
    if result.warnings:
        print_warning_message(warning_message(result.warnings))


def register_commands(app: typer.Typer) -> None:
    """Register the export command with the main app."""
    app.command(name="export")(handle_errors(export_command))
