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

"""Log subcommands (dump, sanitize)."""

from __future__ import annotations

from pathlib import Path

import typer

from e2e_support import console
from e2e_support.config import HarnessConfig
from e2e_support.logs import delete_empty_logs, dump_container_logs, truncate_large_logs

app = typer.Typer(help="Collect and sanitize logs.")


@app.command()
def dump(
    log_dir: Path | None = typer.Option(None, "--log-dir", help="Target directory (overrides LOG_DIR)"),
) -> None:
    """Write every container's logs to the log directory."""
    cfg = HarnessConfig()
    dump_container_logs(log_dir or cfg.log_dir)


@app.command()
def sanitize() -> None:
    """Delete empty logs and truncate oversized ones."""
    cfg = HarnessConfig()
    deleted = delete_empty_logs(*cfg.log_dirs)
    truncated = truncate_large_logs(*cfg.log_dirs)
    console.print(f"[green]\u2705 Deleted {len(deleted)} empty and truncated {len(truncated)} large logs[/green]")
