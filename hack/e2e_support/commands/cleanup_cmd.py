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

"""Cleanup command: save logs and tear the local cluster down."""

from __future__ import annotations

import typer

from e2e_support.config import HarnessConfig, display_config
from e2e_support.processes import ProcessRegistry
from e2e_support.teardown import cleanup as run_cleanup


def cleanup(
    pids: list[int] | None = typer.Option(None, "--pid", help="Background process to kill (repeatable)"),
) -> None:
    """Save container logs, kill processes and containers, and sanitize logs.

    Always exits 0; failed steps are reported but do not stop the teardown.
    """
    registry = ProcessRegistry()
    for pid in pids or []:
        registry.register(pid)
    cfg = HarnessConfig()
    display_config(cfg)
    run_cleanup(cfg, registry)
