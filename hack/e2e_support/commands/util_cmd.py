# /*
# Copyright 2026 The Grove Authors.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
# */

"""Utility subcommands (files, platform, time-now)."""

from __future__ import annotations

from pathlib import Path

import typer

from e2e_support.sources import find_files
from e2e_support.utils import host_platform, time_now

app = typer.Typer(help="Source tree and host utilities.")


@app.command()
def files(
    root: Path = typer.Option(Path("."), "--root", help="Directory to search"),
    suffix: str = typer.Option(".go", "--suffix", help="File suffix to list"),
) -> None:
    """List source files, skipping generated and vendored paths."""
    for path in find_files(root, suffix):
        typer.echo(path)


@app.command()
def platform() -> None:
    """Print the host platform as <os>/<arch>."""
    typer.echo(host_platform())


@app.command("time-now")
def time_now_cmd() -> None:
    """Print the time since the epoch in milliseconds."""
    typer.echo(time_now())
