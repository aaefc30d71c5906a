"""Inspect command: summarize the layers of a ZMK keymap file."""

from collections import Counter
from pathlib import Path
from typing import Annotated

import typer

from keyport.adapters import create_file_adapter
from keyport.cli.decorators import handle_errors
from keyport.cli.helpers import (
    get_console,
    print_list_item,
    print_result,
    print_table,
    print_warning_message,
)
from keyport.keymap.generator import constant_name
from keyport.keymap.parser import create_keymap_parser, parse_binding


def _behavior_summary(bindings: list[str]) -> str:
    counts = Counter(parse_binding(binding).behavior_tag for binding in bindings)
    return ", ".join(f"{tag}×{count}" for tag, count in counts.most_common())


def inspect_command(
    keymap_file: Annotated[Path, typer.Argument(help="ZMK .keymap file")],
    show_bindings: Annotated[
        bool, typer.Option("--bindings", "-b", help="List every binding")
    ] = False,
) -> None:
    """Show metadata and layers of a ZMK .keymap file."""
    content = create_file_adapter().read_text(keymap_file)
    result = create_keymap_parser().parse(content)

    if not result.success:
        print_result(result)
        raise typer.Exit(1)

    console = get_console()
    metadata = result.metadata
    if metadata is not None and metadata.device:
        console.print(f"[bold cyan]Device:[/] {metadata.device}")
        if metadata.date:
            console.print(f"[bold cyan]Date:[/] {metadata.date}")
        if metadata.version:
            console.print(f"[bold cyan]Version:[/] {metadata.version}")

    print_table(
        title=f"{keymap_file.name}: {len(result.layers)} layers",
        columns=["#", "Constant", "Label", "Bindings", "Behaviors"],
        rows=[
            [
                index,
                constant_name(layer.label),
                layer.label,
                len(layer.bindings),
                _behavior_summary(layer.bindings),
            ]
            for index, layer in enumerate(result.layers)
        ],
    )

    if show_bindings:
        for index, layer in enumerate(result.layers):
            console.print(f"[bold]Layer {index}[/] ({layer.label})")
            for position, binding in enumerate(layer.bindings):
                print_list_item(f"{position}: {binding}")

    for warning in result.warnings:
        print_warning_message(warning)


def register_commands(app: typer.Typer) -> None:
    """Register the inspect command with the main app."""
    app.command(name="inspect")(handle_errors(inspect_command))
