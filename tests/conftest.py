"""
Pytest configuration and shared fixtures for ec-launcher tests.
"""

import io
import sys
import tarfile
from pathlib import Path
from typing import Callable, Dict

import pytest


def build_tar_gz(members: Dict[str, bytes], mode: int = 0o755) -> bytes:
    """Build a gzip-compressed tar archive in memory."""
    buffer = io.BytesIO()
    with tarfile.open(fileobj=buffer, mode="w:gz") as tar:
        for name, content in members.items():
            info = tarfile.TarInfo(name=name)
            info.size = len(content)
            info.mode = mode
            tar.addfile(info, io.BytesIO(content))
    return buffer.getvalue()


@pytest.fixture
def make_archive(tmp_path: Path) -> Callable[..., Path]:
    """Factory writing a .tar.gz archive with the given members."""

    def _make(name: str, members: Dict[str, bytes], mode: int = 0o755) -> Path:
        archive = tmp_path / name
        archive.parent.mkdir(parents=True, exist_ok=True)
        archive.write_bytes(build_tar_gz(members, mode))
        return archive

    return _make


def stub_script(body: str) -> bytes:
    """Source of an executable Python stub delegate."""
    return f"#!{sys.executable}\nimport os, sys\n{body}\n".encode("utf-8")


@pytest.fixture
def make_delegate(tmp_path: Path) -> Callable[[str], Path]:
    """Factory writing an executable stub delegate script."""

    def _make(body: str, name: str = "delegate") -> Path:
        path = tmp_path / "stubs" / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(stub_script(body))
        path.chmod(0o755)
        return path

    return _make


@pytest.fixture
def cache_home(tmp_path: Path) -> Path:
    """Empty cache base directory."""
    home = tmp_path / "cache"
    home.mkdir()
    return home


@pytest.fixture
def tar_gz_bytes() -> Callable[..., bytes]:
    """In-memory archive builder, for HTTP response bodies."""
    return build_tar_gz


@pytest.fixture
def delegate_source() -> Callable[[str], bytes]:
    """Source builder for stub delegates packed into archives."""
    return stub_script
