"""Import command: ZMK keymap file to layers JSON."""

import asyncio
import json
from pathlib import Path
from typing import Annotated, Any

import typer

from keyport.adapters import create_file_adapter, create_text_source
from keyport.cli.app import AppContext
from keyport.cli.decorators import handle_errors
from keyport.cli.helpers import (
    print_error_message,
    print_list_item,
    print_result,
    print_success_message,
    print_warning_message,
)
from keyport.services.import_service import ImportResult, create_import_service


def import_payload(result: ImportResult) -> dict[str, Any]:
    """JSON document for an import, readable by ``keyport export``."""
    metadata = result.metadata
    payload: dict[str, Any] = {
        "deviceName": metadata.device if metadata else None,
        "layers": [layer.to_dict_full() for layer in result.layers],
    }
    if metadata is not None:
        payload["metadata"] = metadata.to_dict()
    if result.warnings:
        payload["warnings"] = list(result.warnings)
    return payload


def import_command(
    ctx: typer.Context,
    keymap_file: Annotated[Path, typer.Argument(help="ZMK .keymap file")],
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Write layers JSON here instead of stdout"),
    ] = None,
    validate: Annotated[
        bool,
        typer.Option("--validate/--no-validate", help="Check the imported layers"),
    ] = True,
) -> None:
    """Import a ZMK .keymap file into layers JSON."""
    app_context: AppContext = ctx.obj
    service = create_import_service(
        create_text_source(), app_context.user_config.data.validation
    )
    result = asyncio.run(service.import_from_file(str(keymap_file)))

    if not result.success:
        print_result(result, stderr=True)
        raise typer.Exit(1)

    for warning in result.warnings:
        print_warning_message(warning, stderr=True)

    if validate:
        validation = service.validate_import(result)
        for warning in validation.warnings:
            print_warning_message(warning, stderr=True)
        if not validation.valid:
            for error in validation.errors:
                print_error_message(error, stderr=True)
            raise typer.Exit(1)

    payload = import_payload(result)
    if output is None:
        typer.echo(json.dumps(payload, indent=2))
        return

    create_file_adapter().write_json(output, payload)
    print_success_message(f"Imported {len(result.layers)} layers", stderr=True)
    print_list_item(str(output), stderr=True)


def register_commands(app: typer.Typer) -> None:
    """Register the import command with the main app."""
    app.command(name="import")(handle_errors(import_command))
