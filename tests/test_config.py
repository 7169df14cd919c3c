"""Tests for HarnessConfig defaults and environment overrides."""

from pathlib import Path

import pytest

from e2e_support.config import HarnessConfig


class TestDefaults:
    def test_paths_derive_from_base_tmp_dir(self, monkeypatch, tmp_path):
        monkeypatch.setenv("BASETMPDIR", str(tmp_path))
        cfg = HarnessConfig()
        assert cfg.log_dir == tmp_path / "logs"
        assert cfg.artifact_dir == cfg.log_dir
        assert cfg.etcd_data_dir == tmp_path / "etcd"
        assert cfg.master_config_dir == tmp_path / "openshift.local.config" / "master"
        assert cfg.admin_kubeconfig == cfg.master_config_dir / "admin.kubeconfig"
        assert cfg.server_log == tmp_path / "logs" / "openshift.log"

    def test_connection_defaults(self):
        cfg = HarnessConfig()
        assert cfg.api_host == "127.0.0.1"
        assert cfg.api_scheme == "https"
        assert cfg.etcd_port == "4001"
        assert cfg.api_url == "https://127.0.0.1"
        assert cfg.etcd_url == "https://127.0.0.1:4001"
        assert not cfg.use_sudo
        assert not cfg.skip_teardown

    def test_use_images_default_comes_from_dependencies(self):
        assert HarnessConfig().use_images == "openshift/origin-${component}:latest"


class TestEnvironment:
    def test_explicit_dirs_win(self, monkeypatch, tmp_path):
        monkeypatch.setenv("LOG_DIR", str(tmp_path / "l"))
        monkeypatch.setenv("ARTIFACT_DIR", str(tmp_path / "a"))
        cfg = HarnessConfig()
        assert cfg.log_dir == tmp_path / "l"
        assert cfg.artifact_dir == tmp_path / "a"
        assert cfg.log_dirs == (tmp_path / "a", tmp_path / "l")

    def test_log_dirs_are_deduplicated(self, cfg):
        assert cfg.log_dirs == (cfg.log_dir,)

    def test_flags_parse_from_env(self, monkeypatch):
        monkeypatch.setenv("USE_SUDO", "1")
        monkeypatch.setenv("SKIP_TEARDOWN", "true")
        cfg = HarnessConfig()
        assert cfg.use_sudo
        assert cfg.skip_teardown
        assert not cfg.skip_image_cleanup

    def test_empty_flag_is_unset(self, monkeypatch):
        monkeypatch.setenv("SKIP_TEARDOWN", "")
        assert not HarnessConfig().skip_teardown

    @pytest.mark.parametrize("value", ["0", "false", "please", "enabled"])
    def test_any_non_empty_toggle_is_set(self, monkeypatch, value):
        monkeypatch.setenv("SKIP_TEARDOWN", value)
        monkeypatch.setenv("USE_SUDO", value)
        cfg = HarnessConfig()
        assert cfg.skip_teardown is True
        assert cfg.use_sudo is True

    def test_connection_values_are_taken_as_given(self, monkeypatch):
        monkeypatch.setenv("API_SCHEME", "HTTPS")
        monkeypatch.setenv("ETCD_PORT", "not-a-port")
        cfg = HarnessConfig()
        assert cfg.api_url == "HTTPS://127.0.0.1"
        assert cfg.etcd_port == "not-a-port"

    def test_keyword_construction(self, tmp_path):
        cfg = HarnessConfig(base_tmp_dir=tmp_path, etcd_data_dir=Path("/data/etcd"))
        assert cfg.etcd_data_dir == Path("/data/etcd")
        assert cfg.log_dir == tmp_path / "logs"
