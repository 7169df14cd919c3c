"""Tests for container name parsing, log collection, and log sanitation."""

from __future__ import annotations

import pytest

from e2e_support import logs
from e2e_support.constants import MAX_LOG_BYTES
from e2e_support.logs import (
    ContainerName,
    container_display_name,
    delete_empty_logs,
    dump_container_logs,
    find_logs,
    grep_context,
    log_contains,
    parse_container_name,
    truncate_large_logs,
    truncate_log,
    truncation_header,
)


class TestContainerNames:
    def test_kubelet_name(self):
        parsed = parse_container_name("k8s_mycontainer_mypod_namespace_uid_0")
        assert parsed == ContainerName("mycontainer", "mypod", "namespace", "uid", "0")
        assert parsed.display_name == "mypod-mycontainer"

    def test_hash_suffix_is_dropped(self):
        name = "/k8s_router.3f2a1b_router-1-abcde_default_1234-5678_0"
        assert container_display_name(name) == "router-1-abcde-router"

    def test_dotted_pod_name_is_kept_whole(self):
        # Only "_" separates fields; dots belong to the pod name.
        name = "/k8s_web.5d1c_web.example.com-1_default_uid_0"
        assert container_display_name(name) == "web.example.com-1-web"

    def test_leading_slash_stripped_once(self):
        assert container_display_name("/registry") == "registry"
        assert container_display_name("//odd") == "/odd"

    def test_unmanaged_name(self):
        assert parse_container_name("etcd") is None
        assert container_display_name("/etcd") == "etcd"

    def test_malformed_kubelet_name_is_passed_through_as_garbage(self):
        # Too few fields: the pod is empty, producing "-<container>".
        assert parse_container_name("k8s_lonely") == ContainerName("lonely", "")
        assert container_display_name("/k8s_lonely") == "-lonely"


class TestDumpContainerLogs:
    def test_writes_one_file_per_container(self, tmp_path, fake_docker, fake_container):
        client = fake_docker([
            fake_container("/k8s_mycontainer_mypod_namespace_uid_0", b"hello\n"),
            fake_container("/registry", b"stopped output", running=False),
        ])
        log_dir = tmp_path / "logs"
        dump_container_logs(log_dir, client)

        assert (log_dir / "container-mypod-mycontainer.log").read_bytes() == b"hello\n"
        assert (log_dir / "container-registry.log").read_bytes() == b"stopped output"
        assert not client.closed

    def test_unreadable_container_is_skipped(self, tmp_path, fake_docker, fake_container):
        client = fake_docker([
            fake_container("/k8s_gone_web-0_default_uid_0", b"lost", fail_on={"logs"}),
            fake_container("/registry", b"kept"),
        ])
        dump_container_logs(tmp_path, client)

        assert not (tmp_path / "container-web-0-gone.log").exists()
        assert (tmp_path / "container-registry.log").read_bytes() == b"kept"

    def test_overwrites_previous_dump(self, tmp_path, fake_docker, fake_container):
        target = tmp_path / "container-web.log"
        target.write_text("stale content that is longer")
        dump_container_logs(tmp_path, fake_docker([fake_container("/web", b"new")]))
        assert target.read_bytes() == b"new"

    def test_unreachable_docker_is_a_noop(self, tmp_path, monkeypatch):
        monkeypatch.setattr(logs, "docker_client", lambda: None)
        log_dir = tmp_path / "logs"
        dump_container_logs(log_dir)
        assert not log_dir.exists()

    def test_owned_client_is_closed(self, tmp_path, monkeypatch, fake_docker):
        client = fake_docker()
        monkeypatch.setattr(logs, "docker_client", lambda: client)
        dump_container_logs(tmp_path)
        assert client.closed


class TestDeleteEmptyLogs:
    def test_removes_only_empty_log_files(self, tmp_path):
        artifacts = tmp_path / "artifacts"
        nested = tmp_path / "logs" / "nested"
        artifacts.mkdir()
        nested.mkdir(parents=True)
        (artifacts / "empty.log").touch()
        (nested / "empty.log").touch()
        (nested / "full.log").write_text("data")
        (nested / "empty.txt").touch()

        deleted = delete_empty_logs(artifacts, tmp_path / "logs")

        assert len(deleted) == 2
        assert not any(p.stat().st_size == 0 for p in find_logs(artifacts, tmp_path / "logs"))
        assert (nested / "full.log").exists()
        assert (nested / "empty.txt").exists()

    def test_idempotent_and_tolerates_missing_dirs(self, tmp_path):
        (tmp_path / "a.log").touch()
        assert delete_empty_logs(tmp_path, tmp_path / "missing") == [tmp_path / "a.log"]
        assert delete_empty_logs(tmp_path) == []

    def test_overlapping_dirs_list_files_once(self, tmp_path):
        (tmp_path / "sub").mkdir()
        (tmp_path / "sub" / "x.log").write_text("x")
        assert find_logs(tmp_path, tmp_path / "sub") == [tmp_path / "sub" / "x.log"]


class TestTruncateLargeLogs:
    def test_keeps_exact_tail_behind_header(self, tmp_path):
        path = tmp_path / "server.log"
        original = bytes(range(256)) * 4 + b"no newline at the end"
        path.write_bytes(original)

        assert truncate_large_logs(tmp_path, max_bytes=100) == [path]

        content = path.read_bytes()
        header = truncation_header(len(original), 100).encode()
        assert content == header + original[-100:]
        assert f"({len(original)} bytes)".encode() in content.splitlines()[0]
        assert not (tmp_path / "server.log.tmp").exists()

    def test_file_at_limit_is_untouched(self, tmp_path):
        path = tmp_path / "exact.log"
        path.write_bytes(b"a" * 100)
        assert not truncate_log(path, max_bytes=100)
        assert path.read_bytes() == b"a" * 100

    def test_default_limit_is_fifty_mebibytes(self, tmp_path):
        path = tmp_path / "big.log"
        tail = b"tail-marker\n"
        with open(path, "wb") as f:
            f.write(b"h" * 1024)
            f.write(b"x" * (MAX_LOG_BYTES - len(tail)))
            f.write(tail)
        size = path.stat().st_size

        assert truncate_log(path)

        with open(path, "rb") as f:
            header = f.readline()
            body = f.read()
        assert header == truncation_header(size).encode()
        assert b"LAST 50M OF LOGFILE" in header
        assert len(body) == MAX_LOG_BYTES
        assert body.endswith(tail)
        assert not body.startswith(b"h")

    def test_failed_copy_restores_original(self, tmp_path, monkeypatch):
        path = tmp_path / "server.log"
        original = b"z" * 500
        path.write_bytes(original)

        def _disk_full(src, dst):
            raise OSError("no space left on device")

        monkeypatch.setattr(logs.shutil, "copyfileobj", _disk_full)
        with pytest.raises(OSError, match="no space"):
            truncate_log(path, max_bytes=100)

        assert path.read_bytes() == original
        assert not (tmp_path / "server.log.tmp").exists()


class TestGrepContext:
    @pytest.fixture
    def server_log(self, tmp_path):
        path = tmp_path / "openshift.log"
        lines = [f"line {i}" for i in range(21)]
        lines[2] = "CACHE was ALTERED here"
        lines[18] = "CACHE ALTERED again"
        path.write_text("\n".join(lines) + "\n")
        return path

    def test_groups_are_separated(self, server_log):
        out = grep_context(server_log, r"CACHE.*ALTERED", context=5)
        assert out[:8] == ["line 0", "line 1", "CACHE was ALTERED here"] + [f"line {i}" for i in range(3, 8)]
        assert out[8] == "--"
        assert out[9:] == [f"line {i}" for i in range(13, 18)] + ["CACHE ALTERED again", "line 19", "line 20"]

    def test_overlapping_windows_merge(self, server_log):
        out = grep_context(server_log, r"CACHE.*ALTERED", context=8)
        assert "--" not in out
        assert len(out) == 21

    def test_no_match_and_missing_file(self, server_log, tmp_path):
        assert grep_context(server_log, "NOPE") == []
        assert grep_context(tmp_path / "missing.log", "CACHE") == []

    def test_log_contains(self, server_log, tmp_path):
        assert log_contains(server_log, "ALTERED again")
        assert not log_contains(server_log, "no Docker socket found")
        assert not log_contains(tmp_path / "missing.log", "x")
