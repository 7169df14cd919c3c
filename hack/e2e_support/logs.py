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

"""Container log collection, log sanitation, and server log inspection."""

from __future__ import annotations

import os
import re
import shutil
from dataclasses import dataclass
from pathlib import Path

import docker
import sh
from rich.markup import escape

from e2e_support import console, logger
from e2e_support.constants import (
    CONTAINER_LOG_PREFIX,
    DOCKER_JOURNAL_LOG_NAME,
    DOCKER_SYSTEMD_UNIT,
    JOURNAL_SINCE,
    K8S_CONTAINER_PREFIX,
    LOG_FILE_PATTERN,
    MAX_LOG_BYTES,
    TRUNCATED_SUFFIX,
)


# ============================================================================
# Container names
# ============================================================================

@dataclass(frozen=True)
class ContainerName:
    """Fields of a kubelet-managed container name.

    Kubelet names its containers
    ``k8s_<container>[.<hash>]_<pod>_<namespace>_<uid>_<attempt>``.
    Missing fields are empty strings.
    """

    container: str
    pod: str
    namespace: str = ""
    uid: str = ""
    attempt: str = ""

    @property
    def display_name(self) -> str:
        return f"{self.pod}-{self.container}"


def parse_container_name(name: str) -> ContainerName | None:
    """Parse a kubelet container name.

    Names that do not carry the ``k8s_`` prefix are not kubelet managed and
    yield None. Prefixed names with too few fields still parse, with the
    absent fields left empty.

    Args:
        name: Container name without the leading ``/``.

    Returns:
        Parsed name, or None if the name is not kubelet managed.
    """
    if not name.startswith(K8S_CONTAINER_PREFIX):
        return None
    fields = name[len(K8S_CONTAINER_PREFIX):].split("_")
    fields += [""] * (5 - len(fields))
    container = fields[0].split(".", 1)[0]
    return ContainerName(container, fields[1], fields[2], fields[3], fields[4])


def container_display_name(raw_name: str) -> str:
    """Turn a runtime container name into the name used for its log file.

    Args:
        raw_name: Name as reported by the runtime (e.g. ``/k8s_router.1a2b_router-1_default_...``).

    Returns:
        ``<pod>-<container>`` for kubelet containers, else the name itself.
    """
    name = raw_name[1:] if raw_name.startswith("/") else raw_name
    parsed = parse_container_name(name)
    return parsed.display_name if parsed else name


def is_cluster_container(container) -> bool:
    """Return True for containers started by the kubelet."""
    return container.name.startswith(K8S_CONTAINER_PREFIX)


# ============================================================================
# Container runtime
# ============================================================================

def docker_client() -> docker.DockerClient | None:
    """Connect to the Docker daemon.

    Returns:
        A connected client, or None when the daemon is unreachable.
    """
    try:
        client = docker.from_env()
        client.ping()
    except Exception as e:
        logger.debug("Docker is not reachable: %s", e)
        return None
    return client


def dump_container_logs(log_dir: Path, client: docker.DockerClient | None = None) -> None:
    """Write the logs of every container, running or stopped, to *log_dir*.

    Does nothing when Docker is unreachable. Each container's combined
    stdout/stderr goes to ``<log_dir>/container-<name>.log``, replacing any
    earlier dump.

    Args:
        log_dir: Target directory, created if absent.
        client: Docker client to use; one is created (and closed) if omitted.
    """
    owns_client = client is None
    if owns_client:
        client = docker_client()
        if client is None:
            return

    try:
        log_dir.mkdir(parents=True, exist_ok=True)
        console.print(f"[yellow]\u2139\ufe0f  Dumping container logs to {log_dir}[/yellow]")
        for container in client.containers.list(all=True):
            name = container_display_name(container.attrs.get("Name") or container.name)
            try:
                output = container.logs(stdout=True, stderr=True)
            except docker.errors.APIError as e:
                console.print(f"[yellow]\u26a0\ufe0f  Failed to read logs of {name}: {escape(str(e))}[/yellow]")
                continue
            (log_dir / f"{CONTAINER_LOG_PREFIX}{name}.log").write_bytes(output)
    finally:
        if owns_client:
            client.close()


# ============================================================================
# Log sanitation
# ============================================================================

def find_logs(*dirs: Path) -> list[Path]:
    """Recursively collect regular ``*.log`` files below *dirs*.

    Missing directories are skipped and files reachable from more than one
    directory are listed once.
    """
    found: dict[Path, Path] = {}
    for directory in dirs:
        directory = Path(directory)
        if not directory.is_dir():
            continue
        for path in directory.rglob(LOG_FILE_PATTERN):
            if path.is_file() and not path.is_symlink():
                found.setdefault(path.resolve(), path)
    return sorted(found.values())


def delete_empty_logs(*dirs: Path) -> list[Path]:
    """Delete zero byte log files.

    Returns:
        The deleted paths.
    """
    deleted = []
    for path in find_logs(*dirs):
        if path.stat().st_size == 0:
            path.unlink()
            deleted.append(path)
    return deleted


def _format_size(num_bytes: int) -> str:
    size = float(num_bytes)
    for unit in ("", "K", "M", "G"):
        if size < 1024 or unit == "G":
            return f"{size:.0f}{unit}" if size.is_integer() else f"{size:.1f}{unit}"
        size /= 1024
    return str(num_bytes)


def truncation_header(original_size: int, max_bytes: int = MAX_LOG_BYTES) -> str:
    """First line written to a truncated log file."""
    return (
        f"LOGFILE TOO LONG ({original_size} bytes), PREVIOUS BYTES TRUNCATED. "
        f"LAST {_format_size(max_bytes)} OF LOGFILE:\n"
    )


def truncate_log(path: Path, max_bytes: int = MAX_LOG_BYTES) -> bool:
    """Keep only the last *max_bytes* bytes of *path*, behind a header line.

    Returns:
        True if the file was truncated.
    """
    size = path.stat().st_size
    if size <= max_bytes:
        return False

    tmp = path.with_name(path.name + TRUNCATED_SUFFIX)
    path.rename(tmp)
    try:
        with open(tmp, "rb") as src, open(path, "wb") as dst:
            dst.write(truncation_header(size, max_bytes).encode())
            src.seek(-max_bytes, os.SEEK_END)
            shutil.copyfileobj(src, dst)
    except BaseException:
        # put the untouched log back
        path.unlink(missing_ok=True)
        tmp.rename(path)
        raise
    tmp.unlink()
    return True


def truncate_large_logs(*dirs: Path, max_bytes: int = MAX_LOG_BYTES) -> list[Path]:
    """Truncate large logs so only their last *max_bytes* are archived.

    Returns:
        The truncated paths.
    """
    truncated = [path for path in find_logs(*dirs) if truncate_log(path, max_bytes)]
    for path in truncated:
        logger.info("Truncated %s", path)
    return truncated


# ============================================================================
# Server log inspection
# ============================================================================

def grep_context(path: Path, pattern: str, context: int = 0) -> list[str]:
    """Return lines of *path* matching *pattern* plus surrounding context.

    Behaves like ``grep -a -C <context>``: overlapping windows are merged and
    separate groups are divided by a ``--`` line. A missing file matches
    nothing.
    """
    try:
        lines = path.read_text(errors="replace").splitlines()
    except FileNotFoundError:
        return []

    regex = re.compile(pattern)
    selected: list[str] = []
    last = -1
    for i, line in enumerate(lines):
        if not regex.search(line):
            continue
        start = max(i - context, last + 1)
        end = min(i + context, len(lines) - 1)
        if start > end:
            continue
        if selected and start > last + 1:
            selected.append("--")
        selected.extend(lines[start:end + 1])
        last = end
    return selected


def log_contains(path: Path, marker: str) -> bool:
    """Return True if *path* exists and contains the fixed string *marker*."""
    try:
        with open(path, errors="replace") as f:
            return any(marker in line for line in f)
    except FileNotFoundError:
        return False


def export_docker_journal(log_dir: Path) -> Path:
    """Write the last hours of the Docker daemon journal to ``docker.log``.

    Returns:
        Path of the written journal export.
    """
    target = log_dir / DOCKER_JOURNAL_LOG_NAME
    log_dir.mkdir(parents=True, exist_ok=True)
    sh.journalctl("--unit", DOCKER_SYSTEMD_UNIT, "--since", JOURNAL_SINCE, _out=str(target))
    return target
