"""Package directory resolution through ``go list``.

Profile file names are usually import-path based
(``example.com/mod/pkg/file.go``). Every distinct package is resolved to
its on-disk directory with one batched ``go list -e -json`` call made
before any per-file work.
"""

from __future__ import annotations

import json
import logging
import os
import posixpath
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any

from gocovsum.errors import (
    PackageNotFoundError,
    PackageResolutionError,
    ToolInvocationError,
)
from gocovsum.utils.subprocess_runner import SubprocessError, run_subprocess

if TYPE_CHECKING:
    from collections.abc import Iterable

    from gocovsum.models.coverage import Profile

logger = logging.getLogger(__name__)

_DEFAULT_TIMEOUT = 120.0
_GO_BINARY = "go"


@dataclass(frozen=True)
class GoPackage:
    """One record of ``go list -json`` output."""

    import_path: str
    dir: str = ""
    error: str | None = None
    """Embedded ``Error.Err`` message, if ``go list`` could not load the package."""


@dataclass
class PackageMap:
    """Import path to package mapping, populated once per run."""

    packages: dict[str, GoPackage] = field(default_factory=dict)

    def resolve(self, file_name: str) -> str:
        """Map a profile file name to a path on disk.

        Raises:
            PackageNotFoundError: If the file's package is not in the listing.
            PackageResolutionError: If ``go list`` reported an error for it.
        """
        if not needs_resolution(file_name):
            return file_name

        pkg = self.packages.get(package_dir(file_name))
        if pkg is not None:
            if pkg.dir:
                return os.path.join(pkg.dir, posixpath.basename(file_name))
            if pkg.error is not None:
                raise PackageResolutionError(pkg.error)
        raise PackageNotFoundError(f"did not find package for {file_name} in go list output")


def needs_resolution(file_name: str) -> bool:
    """Return False for relative (``./``, ``../``) and absolute file names."""
    return not (file_name.startswith(".") or os.path.isabs(file_name))


def package_dir(file_name: str) -> str:
    """Return the cleaned directory part of a slash-separated file name, like Go's path.Dir."""
    return posixpath.dirname(posixpath.normpath(file_name)) or "."


def default_go_binary() -> str:
    """Return ``$GOROOT/bin/go`` when it exists, else ``go`` from PATH."""
    goroot = os.environ.get("GOROOT", "")
    if goroot:
        candidate = Path(goroot) / "bin" / _GO_BINARY
        if candidate.is_file():
            return str(candidate)
    return shutil.which(_GO_BINARY) or _GO_BINARY


def package_paths(profiles: Iterable[Profile]) -> list[str]:
    """Collect distinct import paths needing resolution, in first-seen order."""
    seen: dict[str, None] = {}
    for profile in profiles:
        if needs_resolution(profile.file_name):
            seen.setdefault(package_dir(profile.file_name), None)
    return list(seen)


def decode_go_list_output(stdout: str) -> dict[str, GoPackage]:
    """Decode the concatenated JSON objects printed by ``go list -json``.

    Raises:
        ToolInvocationError: If the output is not a JSON object stream.
    """
    decoder = json.JSONDecoder()
    packages: dict[str, GoPackage] = {}
    pos = 0
    length = len(stdout)
    while True:
        while pos < length and stdout[pos].isspace():
            pos += 1
        if pos >= length:
            break
        try:
            raw, pos = decoder.raw_decode(stdout, pos)
        except json.JSONDecodeError as exc:
            raise ToolInvocationError(f"decoding go list json: {exc}") from exc
        if not isinstance(raw, dict):
            raise ToolInvocationError(f"decoding go list json: unexpected value {raw!r}")
        pkg = _package_from_json(raw)
        packages[pkg.import_path] = pkg
    return packages


def _package_from_json(raw: dict[str, Any]) -> GoPackage:
    error_raw = raw.get("Error")
    error: str | None = None
    if isinstance(error_raw, dict):
        error = str(error_raw.get("Err", ""))
    return GoPackage(
        import_path=str(raw.get("ImportPath", "")),
        dir=str(raw.get("Dir", "") or ""),
        error=error,
    )


async def find_packages(
    profiles: Iterable[Profile],
    *,
    go_binary: str | None = None,
    cwd: Path | None = None,
    timeout: float = _DEFAULT_TIMEOUT,
) -> PackageMap:
    """Resolve every package referenced by ``profiles`` with one ``go list`` call.

    Raises:
        ToolInvocationError: If ``go list`` cannot be started, times out,
            exits non-zero or prints undecodable output.
    """
    pkgs = package_paths(profiles)
    if not pkgs:
        logger.debug("No import-path file names in profile; skipping go list")
        return PackageMap()

    binary = go_binary or default_go_binary()
    command = [binary, "list", "-e", "-json", *pkgs]
    try:
        result = await run_subprocess(command, cwd=cwd, timeout=timeout)
    except SubprocessError as exc:
        raise ToolInvocationError(f"cannot run go list: {exc}", exc.result.stderr) from exc
    except ValueError as exc:
        raise ToolInvocationError(f"cannot run go list: {exc}") from exc

    if result.timed_out:
        raise ToolInvocationError(f"cannot run go list: timed out after {timeout}s")
    if not result.success:
        raise ToolInvocationError(
            f"cannot run go list: exit status {result.returncode}", result.stderr
        )

    packages = decode_go_list_output(result.stdout)
    logger.debug("go list resolved %d of %d packages", len(packages), len(pkgs))
    return PackageMap(packages=packages)
