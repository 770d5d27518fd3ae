"""End-to-end tests for the coverage summary pipeline (analyzers/coverage.py)."""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest

from gocovsum.analyzers.coverage import CoverageSummaryTask, analyze_profile
from gocovsum.errors import PackageNotFoundError, PackageResolutionError, SourceParseError
from gocovsum.reporters.terminal import render_lines
from gocovsum.utils.subprocess_runner import SubprocessResult
from tests.integration.conftest import write_file, write_profile

pytestmark = pytest.mark.integration

_RUN = "gocovsum.adapters.go_list.run_subprocess"

# calc.go: Add 3.1-5.2, Div 7.1-12.2; fmt.go: Show 5.1-7.2
_CALC_BLOCKS = [
    "example.com/demo/calc/calc.go:3.24,5.2 1 1",
    "example.com/demo/calc/calc.go:7.24,8.12 1 1",
    "example.com/demo/calc/calc.go:8.12,10.3 1 0",
    "example.com/demo/calc/calc.go:11.2,11.14 1 1",
    "example.com/demo/calc/fmt.go:5.26,7.2 1 0",
]


def _go_list(*records: dict[str, object]) -> AsyncMock:
    stdout = "\n".join(json.dumps(r) for r in records)
    return AsyncMock(return_value=SubprocessResult(returncode=0, stdout=stdout, stderr=""))


class TestEndToEnd:
    async def test_two_function_file(self, tmp_path: Path) -> None:
        source = write_file(
            tmp_path,
            "demo.go",
            "package demo\n\nfunc A() {\n\ta()\n\tb()\n\tc()\n}\n\nfunc B() {\n\td()\n\te()\n}\n",
        )
        profile = write_profile(
            tmp_path,
            [f"{source}:3.10,7.2 3 5", f"{source}:9.10,12.2 2 0"],
        )

        report = await analyze_profile(CoverageSummaryTask(profile_path=profile))

        assert len(report.files) == 1
        assert report.files[0].file_path == str(source)
        assert report.files[0].percent == 60.0
        assert report.total_percent == 60.0
        texts = [line.text for line in render_lines(report)]
        assert texts[0].endswith("\t60.0%")
        assert texts[-1].endswith("\t60.0%")

    async def test_module_resolved_through_go_list(self, calc_module: Path) -> None:
        profile = write_profile(calc_module, _CALC_BLOCKS)
        record = {"ImportPath": "example.com/demo/calc", "Dir": str(calc_module / "calc")}
        go_list = _go_list(record)

        with patch(_RUN, new=go_list):
            report = await analyze_profile(
                CoverageSummaryTask(profile_path=profile, workdir=calc_module, go_binary="go")
            )

        go_list.assert_awaited_once()
        assert go_list.await_args.kwargs["cwd"] == calc_module
        by_path = {Path(f.file_path).name: f for f in report.files}
        assert (by_path["calc.go"].covered_statements, by_path["calc.go"].total_statements) == (
            3,
            4,
        )
        assert (by_path["fmt.go"].covered_statements, by_path["fmt.go"].total_statements) == (
            0,
            1,
        )
        assert [Path(f.file_path).name for f in report.files] == ["fmt.go", "calc.go"]
        assert report.total_percent == 60.0

    async def test_output_is_deterministic(self, calc_module: Path) -> None:
        profile = write_profile(calc_module, _CALC_BLOCKS)
        record = {"ImportPath": "example.com/demo/calc", "Dir": str(calc_module / "calc")}

        renders = []
        for _ in range(2):
            with patch(_RUN, new=_go_list(record)):
                report = await analyze_profile(
                    CoverageSummaryTask(profile_path=profile, go_binary="go")
                )
            renders.append(render_lines(report))

        assert renders[0] == renders[1]

    async def test_total_weighted_by_statements(self, tmp_path: Path) -> None:
        big = write_file(tmp_path, "big.go", "package p\n\nfunc Big() {\n}\n")
        small = write_file(tmp_path, "small.go", "package p\n\nfunc Small() {\n}\n")
        profile = write_profile(
            tmp_path,
            [f"{big}:3.13,4.2 9 1", f"{small}:3.15,4.2 1 0"],
        )

        report = await analyze_profile(CoverageSummaryTask(profile_path=profile))

        assert [f.percent for f in report.files] == [0.0, 100.0]
        assert report.total_percent == 90.0


class TestFailures:
    async def test_unknown_package(self, calc_module: Path) -> None:
        profile = write_profile(calc_module, _CALC_BLOCKS)
        with (
            patch(_RUN, new=_go_list()),
            pytest.raises(PackageNotFoundError),
        ):
            await analyze_profile(CoverageSummaryTask(profile_path=profile, go_binary="go"))

    async def test_package_error(self, calc_module: Path) -> None:
        profile = write_profile(calc_module, _CALC_BLOCKS)
        record = {
            "ImportPath": "example.com/demo/calc",
            "Error": {"Err": "no required module provides package"},
        }
        with (
            patch(_RUN, new=_go_list(record)),
            pytest.raises(PackageResolutionError, match="no required module"),
        ):
            await analyze_profile(CoverageSummaryTask(profile_path=profile, go_binary="go"))

    async def test_source_parse_error(self, tmp_path: Path) -> None:
        broken = write_file(tmp_path, "broken.go", "package p\n\nfunc F( {\n")
        profile = write_profile(tmp_path, [f"{broken}:3.1,3.9 1 1"])
        with pytest.raises(SourceParseError):
            await analyze_profile(CoverageSummaryTask(profile_path=profile))
