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

"""Background process registry and best-effort reaping."""

from __future__ import annotations

import psutil
import sh

from e2e_support import logger


class ProcessRegistry:
    """PIDs of background processes started for the current test run.

    Launchers record each child at spawn time; teardown walks this list
    instead of inspecting ambient shell state.
    """

    def __init__(self) -> None:
        self._pids: list[int] = []

    def register(self, pid: int) -> None:
        """Record *pid* for reaping. Duplicate registrations are ignored."""
        if pid not in self._pids:
            self._pids.append(pid)

    def spawn(self, cmd: str, *args: str, **kwargs) -> sh.RunningCommand:
        """Start *cmd* in the background and record its PID.

        Args:
            cmd: Command name or path.
            *args: Command arguments.
            **kwargs: Extra ``sh`` special keyword arguments (e.g. ``_out``).

        Returns:
            The running ``sh`` command handle.
        """
        proc = sh.Command(cmd)(*args, _bg=True, _bg_exc=False, **kwargs)
        self.register(proc.pid)
        logger.info("Started %s (pid %d)", cmd, proc.pid)
        return proc

    @property
    def pids(self) -> tuple[int, ...]:
        return tuple(self._pids)

    def clear(self) -> None:
        self._pids.clear()

    def __len__(self) -> int:
        return len(self._pids)


def child_pids(pid: int) -> list[int]:
    """Return the direct children of *pid*, or an empty list if none can be found."""
    try:
        return [child.pid for child in psutil.Process(pid).children()]
    except psutil.Error:
        return []


def terminate(pid: int, use_sudo: bool = False) -> None:
    """Send SIGTERM to *pid*, ignoring processes that are gone or not ours."""
    if use_sudo:
        try:
            sh.sudo("-n", "kill", str(pid))
        except (sh.ErrorReturnCode, sh.CommandNotFound):
            pass
        return
    try:
        psutil.Process(pid).terminate()
    except psutil.Error:
        pass


def kill_all_processes(registry: ProcessRegistry, use_sudo: bool = False) -> None:
    """Kill every registered process and its direct children.

    Failures are ignored: a process may already have exited or belong to
    another user, and ``sudo`` may be missing. The registry is emptied afterwards.

    Args:
        registry: Registry of background processes started by the run.
        use_sudo: Deliver signals through ``sudo -n kill``.
    """
    for pid in registry.pids:
        for child in child_pids(pid):
            terminate(child, use_sudo)
        terminate(pid, use_sudo)
        logger.debug("Signalled pid %d", pid)
    registry.clear()
