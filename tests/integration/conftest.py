"""Shared fixtures for integration tests."""

from __future__ import annotations

from pathlib import Path

import pytest

# ── Marker registration ──────────────────────────────────────────


def pytest_configure(config: pytest.Config) -> None:
    """Register the ``integration`` marker."""
    config.addinivalue_line("markers", "integration: integration tests")


# ── File creation helpers ────────────────────────────────────────


def write_file(root: Path, rel: str, content: str) -> Path:
    """Write *content* to a file under *root*."""
    f = root / rel
    f.parent.mkdir(parents=True, exist_ok=True)
    f.write_text(content, encoding="utf-8")
    return f


def write_profile(root: Path, lines: list[str], mode: str = "set") -> Path:
    """Write a cover profile with the given block lines."""
    return write_file(root, "cover.out", "\n".join([f"mode: {mode}", *lines]) + "\n")


# ── Go module fixture ────────────────────────────────────────────

_CALC_GO = """\
package calc

func Add(a, b int) int {
\treturn a + b
}

func Div(a, b int) int {
\tif b == 0 {
\t\treturn 0
\t}
\treturn a / b
}
"""

_FMT_GO = """\
package calc

import "fmt"

func Show(v int) string {
\treturn fmt.Sprint(v)
}
"""


@pytest.fixture
def calc_module(tmp_path: Path) -> Path:
    """A small module laid out as ``<tmp>/calc/{calc.go,fmt.go}``."""
    write_file(tmp_path, "go.mod", "module example.com/demo\n\ngo 1.22\n")
    write_file(tmp_path, "calc/calc.go", _CALC_GO)
    write_file(tmp_path, "calc/fmt.go", _FMT_GO)
    return tmp_path
