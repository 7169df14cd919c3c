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

"""Staged cluster teardown that always collects and sanitizes logs."""

from __future__ import annotations

import shutil
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path

import docker
import sh
from rich.markup import escape
from rich.panel import Panel

from e2e_support import console, logger
from e2e_support.config import HarnessConfig
from e2e_support.constants import (
    CACHE_ALTERED_CONTEXT_LINES,
    CACHE_ALTERED_PATTERN,
    CONTAINER_STOP_TIMEOUT_SECONDS,
    NO_DOCKER_SOCKET_MARKER,
)
from e2e_support.logs import (
    delete_empty_logs,
    docker_client,
    dump_container_logs,
    export_docker_journal,
    grep_context,
    is_cluster_container,
    log_contains,
    truncate_large_logs,
)
from e2e_support.processes import ProcessRegistry, kill_all_processes
from e2e_support.utils import command_exists

EtcdDumper = Callable[[HarnessConfig], None]


# ============================================================================
# Step results
# ============================================================================

@dataclass(frozen=True)
class StepResult:
    """Outcome of a single teardown stage.

    Attributes:
        name: Stage name.
        ok: False if the stage raised.
        skipped: True if the stage did not apply to this run.
        error: Error message of a failed stage.
    """

    name: str
    ok: bool = True
    skipped: bool = False
    error: str | None = None


@dataclass
class TeardownReport:
    """Results of every stage attempted, in execution order."""

    steps: list[StepResult] = field(default_factory=list)

    @property
    def failed(self) -> list[StepResult]:
        return [step for step in self.steps if not step.ok]

    @property
    def ok(self) -> bool:
        return not self.failed

    def names(self) -> list[str]:
        return [step.name for step in self.steps]


class StepSkipped(Exception):
    """Raised by a stage that has nothing to do for this run."""


def _run_step(report: TeardownReport, name: str, fn: Callable[[], object]) -> None:
    """Run one stage, recording its outcome instead of propagating errors."""
    try:
        fn()
    except StepSkipped as reason:
        logger.info("Teardown step %s skipped: %s", name, reason)
        report.steps.append(StepResult(name, skipped=True))
    except Exception as e:
        logger.warning("Teardown step %s failed: %s", name, e)
        console.print(f"[yellow]\u26a0\ufe0f  {name} failed: {escape(str(e))}[/yellow]")
        report.steps.append(StepResult(name, ok=False, error=str(e)))
    else:
        report.steps.append(StepResult(name))


# ============================================================================
# Stages
# ============================================================================

def check_cache_altered(cfg: HarnessConfig) -> None:
    """Print server log lines reporting an altered cache.

    An altered cache is a severe correctness problem; printing it makes it
    stand out in CI output. Finding nothing is the normal case.
    """
    for line in grep_context(cfg.server_log, CACHE_ALTERED_PATTERN, CACHE_ALTERED_CONTEXT_LINES):
        print(line)


def dump_etcd(cfg: HarnessConfig, etcd_dumper: EtcdDumper | None) -> None:
    if etcd_dumper is None:
        raise StepSkipped("no etcd dumper configured")
    etcd_dumper(cfg)


def _container_action(container, action: str, failed: list[str], **kwargs) -> None:
    try:
        getattr(container, action)(**kwargs)
    except docker.errors.APIError as e:
        console.print(f"[yellow]\u26a0\ufe0f  Failed to {action} {container.name}: {escape(str(e))}[/yellow]")
        failed.append(f"{action} {container.name}")


def remove_cluster_containers(skip_image_cleanup: bool) -> None:
    """Stop running kubelet containers and, optionally, remove all of them.

    A container that cannot be stopped or removed does not keep the others
    from being handled.

    Args:
        skip_image_cleanup: Stop the containers but leave them in place.

    Raises:
        RuntimeError: Listing the containers that failed, after all were tried.
    """
    client = docker_client()
    if client is None:
        raise StepSkipped("docker is not reachable")
    failed: list[str] = []
    try:
        console.print("[yellow]\u2139\ufe0f  Stopping k8s docker containers[/yellow]")
        for container in client.containers.list():
            if is_cluster_container(container):
                _container_action(container, "stop", failed, timeout=CONTAINER_STOP_TIMEOUT_SECONDS)
        if not skip_image_cleanup:
            console.print("[yellow]\u2139\ufe0f  Removing k8s docker containers[/yellow]")
            for container in client.containers.list(all=True):
                if is_cluster_container(container):
                    _container_action(container, "remove", failed, v=True)
    finally:
        client.close()
    if failed:
        raise RuntimeError(f"could not clean up containers: {', '.join(failed)}")


def prune_etcd_data(data_dir: Path, use_sudo: bool) -> None:
    """Recursively delete the etcd data directory."""
    console.print("[yellow]\u2139\ufe0f  Pruning etcd data directory...[/yellow]")
    if use_sudo:
        sh.sudo("-n", "rm", "-rf", str(data_dir))
    elif data_dir.exists():
        shutil.rmtree(data_dir)


def export_journal_if_docker_crashed(cfg: HarnessConfig) -> None:
    """Save the Docker daemon journal when the server could not reach Docker."""
    if not log_contains(cfg.server_log, NO_DOCKER_SOCKET_MARKER):
        raise StepSkipped("docker socket was reachable")
    if not command_exists("journalctl"):
        raise StepSkipped("journalctl not available")
    export_docker_journal(cfg.log_dir)


# ============================================================================
# Orchestration
# ============================================================================

def cleanup(
    cfg: HarnessConfig,
    registry: ProcessRegistry | None = None,
    etcd_dumper: EtcdDumper | None = None,
) -> TeardownReport:
    """Save container logs, kill processes and containers, and sanitize logs.

    Every stage runs even if an earlier one failed, so that logs are always
    collected and sanitized. Failures are logged and returned in the report;
    this function does not raise for them.

    Args:
        cfg: Resolved harness configuration.
        registry: Background processes started by the run.
        etcd_dumper: Callable that saves etcd contents before the data
            directory is pruned. The stage is skipped when None.

    Returns:
        Report with one entry per attempted stage.
    """
    registry = registry if registry is not None else ProcessRegistry()
    report = TeardownReport()

    _run_step(report, "dump-container-logs", lambda: dump_container_logs(cfg.log_dir))
    _run_step(report, "cache-altered-check", lambda: check_cache_altered(cfg))
    _run_step(report, "dump-etcd", lambda: dump_etcd(cfg, etcd_dumper))

    if not cfg.skip_teardown:
        console.print(Panel.fit("Tearing down test", style="bold blue"))
        _run_step(report, "kill-processes", lambda: kill_all_processes(registry, cfg.use_sudo))
        _run_step(report, "remove-containers", lambda: remove_cluster_containers(cfg.skip_image_cleanup))
        _run_step(report, "prune-etcd-data", lambda: prune_etcd_data(cfg.etcd_data_dir, cfg.use_sudo))

    _run_step(report, "export-docker-journal", lambda: export_journal_if_docker_crashed(cfg))
    _run_step(report, "delete-empty-logs", lambda: delete_empty_logs(*cfg.log_dirs))
    _run_step(report, "truncate-large-logs", lambda: truncate_large_logs(*cfg.log_dirs))

    if report.ok:
        console.print("[green]\u2705 Cleanup complete[/green]")
    else:
        failed = ", ".join(step.name for step in report.failed)
        console.print(f"[yellow]\u26a0\ufe0f  Cleanup complete with failed steps: {failed}[/yellow]")
    return report
