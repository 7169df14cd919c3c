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

"""Host precondition checks that terminate the run when a tool is unusable."""

from __future__ import annotations

import sys

import sh

from e2e_support import console
from e2e_support.utils import command_exists

IPTABLES_MISSING = (
    "IPTables not found - the end-to-end test requires a system with iptables "
    "for Kubernetes services."
)
IPTABLES_HINT = (
    "You do not have iptables or sudo privileges. Kubernetes services will not work "
    "without iptables access. See https://github.com/kubernetes/kubernetes/issues/1859. "
    "Try 'sudo hack/test-end-to-end.sh'."
)
GINKGO_HINT = 'Run: "go get github.com/onsi/ginkgo/ginkgo"'


def _try_run(tool: str, args: tuple[str, ...], use_sudo: bool) -> bool:
    """Run *tool* once, optionally through non-interactive sudo.

    Returns:
        True if the command exited zero.
    """
    try:
        if use_sudo:
            sh.sudo("-n", tool, *args)
        else:
            sh.Command(tool)(*args)
    except (sh.ErrorReturnCode, sh.CommandNotFound):
        return False
    return True


def ensure_tool_or_die(tool: str, check_args: tuple[str, ...], missing_msg: str, hint: str) -> None:
    """Exit the process unless *tool* is installed and usable.

    The tool is first run unprivileged; when that fails it is retried once
    through sudo. No escalation is attempted when the tool is not on PATH.

    Args:
        tool: Command name to look up.
        check_args: Arguments for a no-op invocation of the tool.
        missing_msg: Message printed when the tool is not on PATH.
        hint: Message printed when neither invocation succeeds.

    Raises:
        SystemExit: With status 1 on a missing tool or missing privilege.
    """
    if not command_exists(tool):
        console.print(f"[red]\u274c {missing_msg}[/red]")
        sys.exit(1)

    if _try_run(tool, check_args, use_sudo=False):
        return
    if _try_run(tool, check_args, use_sudo=True):
        return

    console.print(f"[red]\u274c {hint}[/red]")
    sys.exit(1)


def ensure_iptables_or_die() -> None:
    """Check that iptables is on PATH and listable, directly or through sudo."""
    ensure_tool_or_die("iptables", ("--list",), IPTABLES_MISSING, IPTABLES_HINT)


def ensure_ginkgo_or_die() -> None:
    """Exit with an install hint when ginkgo is not on PATH."""
    if not command_exists("ginkgo"):
        console.print(f"[red]\u274c {GINKGO_HINT}[/red]")
        sys.exit(1)
