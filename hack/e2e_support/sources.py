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

"""Source file enumeration that skips generated and vendored paths."""

from __future__ import annotations

import os
from fnmatch import fnmatchcase
from pathlib import Path

from e2e_support.constants import DEFAULT_SOURCE_SUFFIX, SOURCE_EXCLUDES


def _excluded(rel_path: str, excludes: tuple[str, ...]) -> bool:
    return any(fnmatchcase(rel_path, pattern) for pattern in excludes)


def find_files(
    root: Path | str = ".",
    suffix: str = DEFAULT_SOURCE_SUFFIX,
    excludes: tuple[str, ...] = SOURCE_EXCLUDES,
) -> list[str]:
    """List source files below *root*, skipping excluded paths.

    Exclusion patterns are matched against ``./``-prefixed paths relative to
    *root*, where ``*`` also matches ``/``. Excluded directories are not
    descended into.

    Args:
        root: Directory to search.
        suffix: File name suffix to keep.
        excludes: Glob patterns of paths to prune.

    Returns:
        Sorted, de-duplicated ``./``-prefixed relative paths.
    """
    root = Path(root)
    found: set[str] = set()
    for dirpath, dirnames, filenames in os.walk(root):
        rel_dir = Path(dirpath).relative_to(root).as_posix()
        prefix = "." if rel_dir == "." else f"./{rel_dir}"
        dirnames[:] = [d for d in dirnames if not _excluded(f"{prefix}/{d}", excludes)]
        for name in filenames:
            rel_path = f"{prefix}/{name}"
            if name.endswith(suffix) and not _excluded(rel_path, excludes):
                found.add(rel_path)
    return sorted(found)
