"""Go cover profile reader.

Parses the standard Go cover profile format (mode line, then one
``file:startLine.startCol,endLine.endCol numStmts count`` line per block)
into per-file ``Profile`` records, merging repeated blocks the way the Go
toolchain does.
"""

from __future__ import annotations

import logging
import re
from dataclasses import replace
from pathlib import Path

from gocovsum.errors import ProfileParseError
from gocovsum.models.coverage import CoverageBlock, Profile

logger = logging.getLogger(__name__)

# ── Constants ────────────────────────────────────────────────────

_MODE_PREFIX = "mode: "
_SET_MODE = "set"

# Cover profile: "file:startLine.startCol,endLine.endCol numStmts count"
_COVER_LINE_REGEX = re.compile(r"^(.+):(\d+)\.(\d+),(\d+)\.(\d+) (\d+) (\d+)$")


# ── Parsing ──────────────────────────────────────────────────────


def parse_profiles(profile_path: str | Path) -> list[Profile]:
    """Read a cover profile file.

    Raises:
        ProfileParseError: If the file cannot be read or is malformed.
    """
    path = Path(profile_path)
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ProfileParseError(f"Cannot read cover profile {path}: {exc}") from exc

    profiles = parse_profile_text(text)
    logger.debug("Parsed %d file profiles from %s", len(profiles), path)
    return profiles


def parse_profile_text(text: str) -> list[Profile]:
    """Parse cover profile text into profiles sorted by file name."""
    mode = ""
    file_blocks: dict[str, list[CoverageBlock]] = {}

    for line_no, line in enumerate(text.splitlines(), start=1):
        if not mode:
            if not line.startswith(_MODE_PREFIX) or line == _MODE_PREFIX:
                raise ProfileParseError(f"bad mode line: {line!r}")
            mode = line[len(_MODE_PREFIX) :]
            continue
        if not line:
            continue

        match = _COVER_LINE_REGEX.match(line)
        if not match:
            raise ProfileParseError(f"line {line_no} {line!r} doesn't match expected format")

        file_name = match.group(1)
        start_line, start_col, end_line, end_col, num_stmts, count = (
            int(value) for value in match.groups()[1:]
        )
        file_blocks.setdefault(file_name, []).append(
            CoverageBlock(
                start_line=start_line,
                start_col=start_col,
                end_line=end_line,
                end_col=end_col,
                num_statements=num_stmts,
                hit_count=count,
            )
        )

    return [
        Profile(
            file_name=file_name,
            mode=mode,
            blocks=tuple(_merge_blocks(blocks, mode)),
        )
        for file_name, blocks in sorted(file_blocks.items())
    ]


def _merge_blocks(blocks: list[CoverageBlock], mode: str) -> list[CoverageBlock]:
    """Sort blocks by start and fold samples recorded at the same location."""
    ordered = sorted(blocks, key=lambda b: (b.start_line, b.start_col))
    merged: list[CoverageBlock] = []
    for block in ordered:
        last = merged[-1] if merged else None
        if last is None or not _same_location(last, block):
            merged.append(block)
            continue
        if block.num_statements != last.num_statements:
            raise ProfileParseError(
                f"inconsistent NumStmt: changed from {last.num_statements} "
                f"to {block.num_statements}"
            )
        if mode == _SET_MODE:
            count = last.hit_count | block.hit_count
        else:
            count = last.hit_count + block.hit_count
        merged[-1] = replace(last, hit_count=count)
    return merged


def _same_location(a: CoverageBlock, b: CoverageBlock) -> bool:
    return (a.start_line, a.start_col, a.end_line, a.end_col) == (
        b.start_line,
        b.start_col,
        b.end_line,
        b.end_col,
    )
