"""
Pytest configuration for the unitresolve test suite.

This conftest.py provides:
- Machine-mode logging (suppresses console output)
- Fresh configuration and bug registry per test
- Workspace fixtures: Go source files on disk plus matching metadata
"""

import os
from pathlib import Path

import pytest

from unitresolve import bug
from unitresolve.cache import (
    Metadata,
    MemorySnapshot,
    PackageID,
    PackagePath,
    PackageName,
    new_intermediate_test_variant,
    new_test_variant,
)
from unitresolve.config import reset_config
from unitresolve.logging_config import setup_logging
from unitresolve.protocol import uri_from_path


# ============================================================================
# GLOBAL CONFIGURATION
# ============================================================================

def pytest_configure(config):
    os.environ.setdefault("UNITRESOLVE_MACHINE_MODE", "1")


@pytest.fixture(autouse=True)
def setup_test_logging():
    """
    Machine mode by default - suppress console logs for clean test output.
    """
    setup_logging(level="DEBUG", suppress_console=True, enable_file_logging=False, force=True)


@pytest.fixture(autouse=True)
def fresh_state(monkeypatch):
    """Each test sees default config and an empty bug registry."""
    for key in ("UNITRESOLVE_TRACE", "UNITRESOLVE_MAX_BUGS", "UNITRESOLVE_PANIC_ON_BUGS", "UNITRESOLVE_LOG_LEVEL"):
        monkeypatch.delenv(key, raising=False)
    reset_config()
    bug.clear()
    yield
    reset_config()
    bug.clear()


# ============================================================================
# WORKSPACE FIXTURES
# ============================================================================

class Workspace:
    """A directory of Go files with helpers to build metadata over them."""

    def __init__(self, root: Path):
        self.root = root

    def write(self, rel: str, content: str):
        path = self.root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)
        return uri_from_path(path)

    def uri(self, rel: str):
        return uri_from_path(self.root / rel)


@pytest.fixture
def temp_workspace(tmp_path):
    return Workspace(tmp_path)


@pytest.fixture
def scenario_a(temp_workspace):
    """
    File a.go belongs to:
      P        - example.com/p, files [a.go, b.go]
      P' (ITV) - p compiled for the test of example.com/q, same two files
      P_test   - test variant of p, files [a.go, b.go, a_test.go]

    Returns (snapshot, uri of a.go, P, P', P_test).
    """
    ws = temp_workspace
    a = ws.write("p/a.go", "package p\n\nfunc A() int { return B() }\n")
    b = ws.write("p/b.go", "package p\n\nfunc B() int { return 1 }\n")
    a_test = ws.write("p/a_test.go", 'package p\n\nimport "testing"\n\nfunc TestA(t *testing.T) {}\n')

    p = Metadata(
        id=PackageID("example.com/p"),
        pkg_path=PackagePath("example.com/p"),
        name=PackageName("p"),
        compiled_go_files=[a, b],
    )
    p_itv = new_intermediate_test_variant(p, PackagePath("example.com/q"))
    p_test = new_test_variant(p, [a_test])

    # Declared out of order: the snapshot must sort by file count.
    snapshot = MemorySnapshot([p_test, p_itv, p])
    return snapshot, a, p, p_itv, p_test
