"""Shared fixtures: isolated environment, harness config, and Docker fakes."""

from __future__ import annotations

import docker
import pytest

from e2e_support.config import HarnessConfig

CONFIG_ENV_VARS = (
    "BASETMPDIR", "LOG_DIR", "ARTIFACT_DIR", "API_HOST", "API_SCHEME", "ETCD_PORT",
    "ETCD_DATA_DIR", "USE_SUDO", "SKIP_TEARDOWN", "SKIP_IMAGE_CLEANUP",
    "CREATE_ROUTER_CERT", "DROP_SYN_DURING_RESTART", "MASTER_CONFIG_DIR",
    "ADMIN_KUBECONFIG", "USE_IMAGES",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep the caller's harness variables out of the tests."""
    for name in CONFIG_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def cfg(tmp_path):
    return HarnessConfig(base_tmp_dir=tmp_path)


class FakeContainer:
    def __init__(self, raw_name, output=b"", running=True, fail_on=()):
        self.attrs = {"Name": raw_name}
        self.name = raw_name.lstrip("/")
        self.id = f"id-{self.name}"
        self.output = output
        self.running = running
        self.stopped_with = None
        self.removed_with = None
        self.fail_on = set(fail_on)

    def _maybe_fail(self, action):
        if action in self.fail_on:
            raise docker.errors.NotFound(f"No such container: {self.name}")

    def logs(self, stdout=True, stderr=True):
        self._maybe_fail("logs")
        return self.output

    def stop(self, timeout=10):
        self._maybe_fail("stop")
        self.stopped_with = timeout
        self.running = False

    def remove(self, v=False):
        self._maybe_fail("remove")
        self.removed_with = v


class FakeContainers:
    def __init__(self, containers):
        self._containers = containers

    def list(self, all=False):
        return [c for c in self._containers if all or c.running]


class FakeDockerClient:
    def __init__(self, containers=()):
        self.containers = FakeContainers(list(containers))
        self.closed = False

    def close(self):
        self.closed = True


@pytest.fixture
def fake_docker():
    return FakeDockerClient


@pytest.fixture
def fake_container():
    return FakeContainer
