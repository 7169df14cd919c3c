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

"""Constants, dependency loading, and dep_value helper."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml


def load_dependencies() -> dict:
    """Load default images and add-on settings from dependencies.yaml.

    Returns:
        Parsed YAML content as a nested dictionary.
    """
    deps_file = Path(__file__).resolve().parent / "dependencies.yaml"
    with open(deps_file) as f:
        return yaml.safe_load(f)


DEPENDENCIES = load_dependencies()


def dep_value(*keys: str, default: Any = None) -> Any:
    """Safely traverse the DEPENDENCIES dict by key path.

    Args:
        *keys: Sequence of dictionary keys to traverse.
        default: Value to return if any key is missing.

    Returns:
        The value at the nested key path, or *default* if not found.
    """
    node = DEPENDENCIES
    for key in keys:
        if not isinstance(node, dict):
            return default
        node = node.get(key)
        if node is None:
            return default
    return node


# -- Harness defaults --
DEFAULT_BASE_TMP_DIR = "/tmp/openshift"
DEFAULT_API_HOST = "127.0.0.1"
DEFAULT_API_SCHEME = "https"
DEFAULT_ETCD_PORT = "4001"
DEFAULT_USE_IMAGES = dep_value("images", "default", default="openshift/origin-${component}:latest")

# -- Relative paths --
REL_LOG_DIR = "logs"
REL_ETCD_DATA_DIR = "etcd"
REL_MASTER_CONFIG_DIR = "openshift.local.config/master"
ADMIN_KUBECONFIG_NAME = "admin.kubeconfig"
SERVER_LOG_NAME = "openshift.log"
DOCKER_JOURNAL_LOG_NAME = "docker.log"

# -- Containers --
K8S_CONTAINER_PREFIX = "k8s_"
CONTAINER_LOG_PREFIX = "container-"
CONTAINER_STOP_TIMEOUT_SECONDS = 1

# -- Diagnostic markers --
CACHE_ALTERED_PATTERN = r"CACHE.*ALTERED"
CACHE_ALTERED_CONTEXT_LINES = 5
NO_DOCKER_SOCKET_MARKER = "no Docker socket found"

# -- Journal export --
DOCKER_SYSTEMD_UNIT = "docker.service"
JOURNAL_SINCE = "-4hours"

# -- Log sanitation --
LOG_FILE_PATTERN = "*.log"
MAX_LOG_BYTES = 50 * 1024 * 1024
TRUNCATED_SUFFIX = ".tmp"

# -- Router / registry --
ROUTER_NAME = dep_value("router", "name", default="router")
ROUTER_SERVICE_ACCOUNT = dep_value("router", "service_account", default="router")
ROUTER_WILDCARD_DOMAIN = dep_value("router", "wildcard_domain", default="xip.io")
ROUTER_DROP_SYN_ENV = "DROP_SYN_DURING_RESTART"
REGISTRY_ENV = dep_value("registry", "env", default={})

# -- Source enumeration --
DEFAULT_SOURCE_SUFFIX = ".go"
SOURCE_EXCLUDES = (
    "./_output",
    "./.*",
    "./pkg/assets/bindata.go",
    "./pkg/assets/*/bindata.go",
    "./pkg/bootstrap/bindata.go",
    "./openshift.local.*",
    "*/vendor/*",
    "./assets/bower_components/*",
)
