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

"""Router and registry installation for the extended tests."""

from __future__ import annotations

from pathlib import Path

import sh
from rich.panel import Panel

from e2e_support import console
from e2e_support.config import HarnessConfig
from e2e_support.constants import (
    REGISTRY_ENV,
    ROUTER_DROP_SYN_ENV,
    ROUTER_NAME,
    ROUTER_SERVICE_ACCOUNT,
    ROUTER_WILDCARD_DOMAIN,
)


# ============================================================================
# Router
# ============================================================================

def create_router_cert(cfg: HarnessConfig) -> Path:
    """Sign a wildcard router certificate with the master CA.

    Writes ``router.crt`` and ``router.key`` to the master config directory
    and bundles them with ``ca.crt`` into ``router.pem``.

    Args:
        cfg: Harness configuration with the master config dir and API host.

    Returns:
        Path of the PEM bundle.
    """
    master = cfg.master_config_dir
    console.print("[yellow]\u2139\ufe0f  Generating router TLS certificate[/yellow]")
    sh.oadm(
        "ca", "create-server-cert",
        f"--signer-cert={master / 'ca.crt'}",
        f"--signer-key={master / 'ca.key'}",
        f"--signer-serial={master / 'ca.serial.txt'}",
        f"--hostnames=*.{cfg.api_host}.{ROUTER_WILDCARD_DOMAIN}",
        f"--cert={master / 'router.crt'}",
        f"--key={master / 'router.key'}",
    )
    bundle = master / "router.pem"
    with open(bundle, "wb") as out:
        for part in ("router.crt", "router.key", "ca.crt"):
            out.write((master / part).read_bytes())
    return bundle


def install_router(cfg: HarnessConfig) -> None:
    """Install the router, optionally with a default certificate.

    Args:
        cfg: Resolved harness configuration.

    Raises:
        sh.ErrorReturnCode: If any admin command fails.
    """
    console.print(Panel.fit("Installing the router", style="bold blue"))
    kubeconfig = f"--config={cfg.admin_kubeconfig}"
    sh.oadm("policy", "add-scc-to-user", "privileged", "-z", ROUTER_SERVICE_ACCOUNT, kubeconfig)

    router_args = [
        "admin", "router",
        kubeconfig,
        f"--images={cfg.use_images}",
        f"--service-account={ROUTER_SERVICE_ACCOUNT}",
    ]
    if cfg.create_router_cert:
        router_args.append(f"--default-cert={create_router_cert(cfg)}")
    sh.openshift(*router_args)

    # Router reloads are more robust when SYNs are dropped during the restart.
    if cfg.drop_syn_during_restart:
        console.print("[yellow]\u2139\ufe0f  Changing the router DC to drop SYN packets during a reload[/yellow]")
        sh.oc("set", "env", f"dc/{ROUTER_NAME}", "-c", ROUTER_NAME, f"{ROUTER_DROP_SYN_ENV}=true")
    console.print("[green]\u2705 Router installed[/green]")


# ============================================================================
# Registry
# ============================================================================

def install_registry(cfg: HarnessConfig) -> None:
    """Install the registry with its project cache disabled.

    The registry manifest is rendered as JSON, the environment overrides
    from dependencies.yaml are injected with ``oc env``, and the result is
    created in the cluster.

    Args:
        cfg: Resolved harness configuration.

    Raises:
        sh.ErrorReturnCode: If any admin command fails.
    """
    console.print(Panel.fit("Installing the registry", style="bold blue"))
    manifest = sh.openshift(
        "admin", "registry",
        f"--config={cfg.admin_kubeconfig}",
        f"--images={cfg.use_images}",
        "--enforce-quota",
        "-o", "json",
    )
    env_args = [f"{key}={value}" for key, value in REGISTRY_ENV.items()]
    patched = sh.oc("env", "-f", "-", "--output", "json", *env_args, _in=str(manifest))
    sh.oc("create", "-f", "-", _in=str(patched))
    console.print("[green]\u2705 Registry installed[/green]")
