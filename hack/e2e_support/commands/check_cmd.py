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

"""Host precondition subcommands (iptables, ginkgo)."""

from __future__ import annotations

import typer

from e2e_support.preconditions import ensure_ginkgo_or_die, ensure_iptables_or_die

app = typer.Typer(help="Check host preconditions.")


@app.command()
def iptables() -> None:
    """Exit 1 unless iptables is usable, directly or through sudo."""
    ensure_iptables_or_die()


@app.command()
def ginkgo() -> None:
    """Exit 1 unless ginkgo is on PATH."""
    ensure_ginkgo_or_die()
