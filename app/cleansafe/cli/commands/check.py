"""Check command for validating paths before deletion.

This module provides the `cleansafe check` command, which reports
whether paths are protected system paths, critical user locations,
large directories, or files in use. Nothing is modified.
"""

import asyncio
from typing import Annotated

import typer

from cleansafe.cli.display import create_validation_table
from cleansafe.cli.runtime import build_manager
from cleansafe.utils.formatting import console, print_error, print_success, print_warning


def check(
    paths: Annotated[
        list[str],
        typer.Argument(help="Paths to validate."),
    ],
) -> None:
    """Validate paths without deleting anything.

    Exits with code 1 when any path is a protected system path.

    Examples:
        cleansafe check ~/Downloads/old-build
        cleansafe check /usr/local ~/.cache/pip
    """
    manager = build_manager()
    validation = asyncio.run(manager.validate_paths(paths))

    console.print(create_validation_table(paths, validation))

    for warning in validation.warnings:
        print_warning(warning)

    if not validation.is_valid:
        for blocker in validation.blockers:
            print_error(blocker)
        raise typer.Exit(code=1)

    print_success(f"{len(paths)} path(s) can be deleted safely.")
