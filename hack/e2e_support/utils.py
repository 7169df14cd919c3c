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

"""Utility functions for command lookup, timing, and host platform checks."""

from __future__ import annotations

import time

import sh


def require_command(cmd: str) -> None:
    """Check if a command exists on the system PATH.

    Args:
        cmd: Name of the CLI command to check.

    Raises:
        RuntimeError: If the command is not found.
    """
    message = f"Required command '{cmd}' not found. Please install it first."
    try:
        path = sh.which(cmd)
    except (sh.ErrorReturnCode, sh.CommandNotFound) as err:
        raise RuntimeError(message) from err
    # sh's builtin which returns None for unknown commands
    if not path:
        raise RuntimeError(message)


def command_exists(cmd: str) -> bool:
    """Return True when *cmd* resolves on the system PATH."""
    try:
        require_command(cmd)
    except RuntimeError:
        return False
    return True


def time_now() -> int:
    """Return the time since the epoch in milliseconds."""
    return time.time_ns() // 1_000_000


def host_platform() -> str:
    """Ask the Go toolchain what it thinks the host platform is.

    The Go tool chain does slightly different things when the target
    platform matches the host platform.

    Returns:
        Platform string in ``<os>/<arch>`` form (e.g. ``linux/amd64``).
    """
    goos = str(sh.go("env", "GOHOSTOS")).strip()
    goarch = str(sh.go("env", "GOHOSTARCH")).strip()
    return f"{goos}/{goarch}"
