"""
Unit tests for cache directory resolution.
"""

import os
from pathlib import Path
from unittest.mock import patch

import pytest

from ec_launcher.core.directory import (
    APP_DIR_NAME,
    CachePaths,
    CachePolicy,
    derive_paths,
    ensure_cache_dir,
    get_executable_dir,
    get_user_cache_dir,
    resolve_base,
)
from ec_launcher.core.exceptions import UnresolvableBasePath


class TestDerivePaths:
    """Tests for derive_paths."""

    def test_paths(self, tmp_path):
        """Test archive and binary paths under the base."""
        paths = derive_paths(tmp_path, "ec-linux-amd64")

        assert paths == CachePaths(
            base=tmp_path,
            archive_path=tmp_path / "ec-linux-amd64.tar.gz",
            binary_path=tmp_path / "bin" / "ec-linux-amd64",
        )
        assert paths.bin_dir == tmp_path / "bin"

    def test_executable_suffix(self, tmp_path):
        """Test the suffix only applies to the binary."""
        paths = derive_paths(tmp_path, "ec-windows-amd64", executable_suffix=".exe")

        assert paths.archive_path.name == "ec-windows-amd64.tar.gz"
        assert paths.binary_path.name == "ec-windows-amd64.exe"

    def test_pure(self, tmp_path):
        """Test nothing is created on disk."""
        base = tmp_path / "not-created"
        derive_paths(base, "ec-linux-amd64")

        assert not base.exists()


@pytest.mark.skipif(os.name == "nt", reason="POSIX cache layout")
class TestUserCacheDir:
    """Tests for get_user_cache_dir on POSIX hosts."""

    def test_override(self, tmp_path):
        """Test EC_LAUNCHER_HOME wins over everything."""
        environ = {"EC_LAUNCHER_HOME": str(tmp_path), "XDG_CACHE_HOME": "/xdg"}
        assert get_user_cache_dir(environ) == tmp_path

    def test_xdg_cache_home(self):
        """Test XDG_CACHE_HOME is honored."""
        assert get_user_cache_dir({"XDG_CACHE_HOME": "/xdg"}) == Path("/xdg") / APP_DIR_NAME

    def test_home_fallback(self, tmp_path):
        """Test ~/.cache is used by default."""
        with patch("pathlib.Path.home", return_value=tmp_path):
            result = get_user_cache_dir({})

        assert result == tmp_path / ".cache" / APP_DIR_NAME

    def test_no_home(self):
        """Test an undeterminable home directory raises."""
        with patch("pathlib.Path.home", side_effect=RuntimeError("no home")):
            with pytest.raises(UnresolvableBasePath, match="home directory"):
                get_user_cache_dir({})


class TestExecutableDir:
    """Tests for get_executable_dir."""

    def test_parent_of_executable(self, tmp_path):
        """Test the directory containing the executable is returned."""
        exe = tmp_path / "ec"
        exe.touch()

        assert get_executable_dir(exe) == tmp_path.resolve()

    @pytest.mark.parametrize("executable", [None, ""])
    def test_unknown_executable(self, executable):
        """Test an unknown executable location raises."""
        with pytest.raises(UnresolvableBasePath):
            get_executable_dir(executable)

    @pytest.mark.skipif(os.name == "nt", reason="POSIX root path")
    def test_root_has_no_parent(self):
        """Test a path without parent directory raises."""
        with pytest.raises(UnresolvableBasePath, match="no parent"):
            get_executable_dir("/")


class TestResolveBase:
    """Tests for resolve_base."""

    def test_user_cache_policy(self, tmp_path):
        """Test the default policy uses the user cache directory."""
        base = resolve_base(environ={"EC_LAUNCHER_HOME": str(tmp_path)})
        assert base == tmp_path

    def test_executable_dir_policy(self, tmp_path):
        """Test the executable-dir policy ignores the environment."""
        exe = tmp_path / "bin" / "ec"
        exe.parent.mkdir()
        exe.touch()

        base = resolve_base(
            CachePolicy.EXECUTABLE_DIR,
            executable=exe,
            environ={"EC_LAUNCHER_HOME": "/elsewhere"},
        )

        assert base == exe.parent.resolve()

    def test_stable_across_calls(self, tmp_path):
        """Test resolution is deterministic."""
        environ = {"EC_LAUNCHER_HOME": str(tmp_path)}
        assert resolve_base(environ=environ) == resolve_base(environ=environ)


class TestEnsureCacheDir:
    """Tests for ensure_cache_dir."""

    def test_creates_nested(self, tmp_path):
        """Test missing parents are created."""
        base = tmp_path / "a" / "b"
        assert ensure_cache_dir(base) == base
        assert base.is_dir()

    def test_idempotent(self, tmp_path):
        """Test an existing directory is accepted."""
        ensure_cache_dir(tmp_path)
        assert tmp_path.is_dir()

    def test_failure_raises(self, tmp_path):
        """Test a file in the way raises UnresolvableBasePath."""
        blocker = tmp_path / "file"
        blocker.write_text("x")

        with pytest.raises(UnresolvableBasePath):
            ensure_cache_dir(blocker / "cache")
