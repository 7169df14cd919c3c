#!/usr/bin/env python3
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

"""
cli.py - Host preparation, teardown, and log helpers for end-to-end tests.

Subcommands:
    check      Verify host preconditions (iptables, ginkgo)
    logs       Collect and sanitize logs (dump, sanitize)
    cleanup    Save logs and tear the local cluster down
    install    Install cluster add-ons (router, registry)
    util       Source tree and host utilities (files, platform, time-now)

Environment Variables:
    Configuration is read from the environment, for example:
    - BASETMPDIR (default: /tmp/openshift)
    - LOG_DIR (default: $BASETMPDIR/logs)
    - ARTIFACT_DIR (default: $LOG_DIR)
    - ETCD_DATA_DIR (default: $BASETMPDIR/etcd)
    - USE_SUDO, SKIP_TEARDOWN, SKIP_IMAGE_CLEANUP
    - CREATE_ROUTER_CERT, DROP_SYN_DURING_RESTART
    - MASTER_CONFIG_DIR, ADMIN_KUBECONFIG, USE_IMAGES

Examples:
    # Fail early when iptables cannot be used
    ./cli.py check iptables

    # Tear down after a run, killing the given server processes
    ./cli.py cleanup --pid 4242 --pid 4243

    # Install the router with a generated default certificate
    CREATE_ROUTER_CERT=1 ./cli.py install router

For detailed usage information, run: ./cli.py --help
"""

from __future__ import annotations

import logging
import sys

import typer

from e2e_support import console
from e2e_support.commands import check_cmd, cleanup_cmd, install_cmd, logs_cmd, util_cmd

app = typer.Typer(
    help="Host preparation, teardown, and log helpers for end-to-end tests.",
    no_args_is_help=True,
)


@app.callback()
def _main_callback() -> None:
    """Initialize logging for all subcommands."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%H:%M:%S",
    )


app.add_typer(check_cmd.app, name="check")
app.add_typer(logs_cmd.app, name="logs")
app.command("cleanup")(cleanup_cmd.cleanup)
app.add_typer(install_cmd.app, name="install")
app.add_typer(util_cmd.app, name="util")


if __name__ == "__main__":
    try:
        app()
    except Exception as e:
        console.print(f"[red]\u274c {e}[/red]")
        sys.exit(1)
