"""Option declarations shared by several commands."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

ConfigOption = Annotated[
    Path | None,
    typer.Option(
        "--config",
        "-c",
        help="Path to configuration file (YAML, TOML, or JSON)",
    ),
]
StoriesDirOption = Annotated[
    Path | None,
    typer.Option(
        "--stories-dir",
        "-d",
        help="Directory containing .tos stories",
        file_okay=False,
        resolve_path=True,
    ),
]
JsonOption = Annotated[bool, typer.Option("--json", help="Output as JSON")]
