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

"""Harness configuration resolved once from the environment."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

from pydantic import BeforeValidator, Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from rich.panel import Panel
from rich.table import Table

from e2e_support import console
from e2e_support.constants import (
    ADMIN_KUBECONFIG_NAME,
    DEFAULT_API_HOST,
    DEFAULT_API_SCHEME,
    DEFAULT_BASE_TMP_DIR,
    DEFAULT_ETCD_PORT,
    DEFAULT_USE_IMAGES,
    REL_ETCD_DATA_DIR,
    REL_LOG_DIR,
    REL_MASTER_CONFIG_DIR,
    SERVER_LOG_NAME,
)


def _is_set(value: object) -> bool:
    """Treat any non-empty value as set, the way the test scripts check toggles."""
    if isinstance(value, bool):
        return value
    return bool(str(value))


# Presence toggle: USE_SUDO=0 or SKIP_TEARDOWN=please both count as set.
Toggle = Annotated[bool, BeforeValidator(_is_set)]


class HarnessConfig(BaseSettings):
    """Test harness configuration, auto-loaded from environment variables.

    Derived paths left unset are filled in from ``base_tmp_dir`` when the
    model is constructed, so every consumer sees the same resolved values.
    Values are not validated beyond their presence: toggles are on whenever
    their variable is set to a non-empty value.

    Attributes:
        base_tmp_dir: Scratch root for the test run (``BASETMPDIR``).
        log_dir: Directory receiving server and container logs.
        artifact_dir: Directory archived after the run; defaults to ``log_dir``.
        api_host: Host the API server listens on.
        api_scheme: Scheme of the API server endpoint.
        etcd_port: Client port of the local etcd, kept as given.
        etcd_data_dir: etcd data directory pruned during teardown.
        use_sudo: Run signal delivery and data pruning through sudo.
        skip_teardown: Leave processes, containers, and etcd data in place.
        skip_image_cleanup: Stop cluster containers but do not remove them.
        create_router_cert: Generate a default TLS certificate for the router.
        drop_syn_during_restart: Make the router drop SYN packets while reloading.
        master_config_dir: Directory holding the master CA and admin kubeconfig.
        admin_kubeconfig: Admin kubeconfig used by the add-on installers.
        use_images: Image template passed to the add-on installers.
    """

    model_config = SettingsConfigDict(extra="ignore", env_ignore_empty=True, populate_by_name=True)

    base_tmp_dir: Path = Field(default=Path(DEFAULT_BASE_TMP_DIR), validation_alias="BASETMPDIR")
    log_dir: Path | None = None
    artifact_dir: Path | None = None
    api_host: str = DEFAULT_API_HOST
    api_scheme: str = DEFAULT_API_SCHEME
    etcd_port: str = DEFAULT_ETCD_PORT
    etcd_data_dir: Path | None = None
    use_sudo: Toggle = False
    skip_teardown: Toggle = False
    skip_image_cleanup: Toggle = False
    create_router_cert: Toggle = False
    drop_syn_during_restart: Toggle = False
    master_config_dir: Path | None = None
    admin_kubeconfig: Path | None = None
    use_images: str = DEFAULT_USE_IMAGES

    @model_validator(mode="after")
    def _apply_path_defaults(self) -> HarnessConfig:
        if self.log_dir is None:
            self.log_dir = self.base_tmp_dir / REL_LOG_DIR
        if self.artifact_dir is None:
            self.artifact_dir = self.log_dir
        if self.etcd_data_dir is None:
            self.etcd_data_dir = self.base_tmp_dir / REL_ETCD_DATA_DIR
        if self.master_config_dir is None:
            self.master_config_dir = self.base_tmp_dir / REL_MASTER_CONFIG_DIR
        if self.admin_kubeconfig is None:
            self.admin_kubeconfig = self.master_config_dir / ADMIN_KUBECONFIG_NAME
        return self

    @property
    def server_log(self) -> Path:
        """Primary API server log inspected during teardown."""
        return self.log_dir / SERVER_LOG_NAME

    @property
    def log_dirs(self) -> tuple[Path, ...]:
        """Directories swept by the log sanitizer, without duplicates."""
        return tuple(dict.fromkeys((self.artifact_dir, self.log_dir)))

    @property
    def api_url(self) -> str:
        """Base URL of the API server."""
        return f"{self.api_scheme}://{self.api_host}"

    @property
    def etcd_url(self) -> str:
        """Client URL of the local etcd, handed to etcd dumpers."""
        return f"{self.api_scheme}://{self.api_host}:{self.etcd_port}"


def display_config(cfg: HarnessConfig) -> None:
    """Print the resolved configuration as a table.

    Args:
        cfg: Resolved harness configuration.
    """
    table = Table(show_header=False, box=None)
    table.add_column("key", style="cyan")
    table.add_column("value")
    for name, value in cfg.model_dump().items():
        table.add_row(name, str(value))
    table.add_row("api_url", cfg.api_url)
    table.add_row("etcd_url", cfg.etcd_url)
    console.print(Panel.fit(table, title="Harness configuration", style="bold blue"))
