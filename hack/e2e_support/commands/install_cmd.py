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

"""Install subcommands (router, registry)."""

from __future__ import annotations

from collections.abc import Callable

import sh
import typer

from e2e_support import console
from e2e_support.config import HarnessConfig
from e2e_support.installers import install_registry, install_router

app = typer.Typer(help="Install cluster add-ons.")


def _install(installer: Callable[[HarnessConfig], None]) -> None:
    try:
        installer(HarnessConfig())
    except sh.ErrorReturnCode as e:
        console.print(f"[red]\u274c {e.full_cmd} failed with exit code {e.exit_code}[/red]")
        raise typer.Exit(code=e.exit_code) from e


@app.command()
def router() -> None:
    """Install the router for the extended tests."""
    _install(install_router)


@app.command()
def registry() -> None:
    """Install the registry for the extended tests."""
    _install(install_registry)
