"""gocovsum CLI — per-file coverage summary of a Go cover profile."""

from __future__ import annotations

import asyncio
import logging
import sys
from pathlib import Path

import click

from gocovsum import __version__
from gocovsum.analyzers.coverage import CoverageSummaryTask, analyze_profile
from gocovsum.config import GoCovSumConfig, load_config, validate_config
from gocovsum.errors import ConfigError, CoverageSummaryError
from gocovsum.reporters.terminal import TerminalReporter

logger = logging.getLogger(__name__)

_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _configure_logging(*, verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format=_LOG_FORMAT,
        stream=sys.stderr,
    )


def _apply_log_level(level: str, *, verbose: bool) -> None:
    if not verbose:
        logging.getLogger().setLevel(getattr(logging, level, logging.WARNING))


def _load_checked_config(chdir: str | None, config_file: str | None) -> GoCovSumConfig:
    config = load_config(chdir or ".", config_file)
    problems = validate_config(config)
    if problems:
        raise ConfigError("Invalid configuration:\n  " + "\n  ".join(problems))
    return config


def _build_task(
    config: GoCovSumConfig,
    profile: str,
    *,
    reverse: bool,
    include_methods: bool,
    chdir: str | None,
) -> CoverageSummaryTask:
    workdir = Path(chdir) if chdir else Path(config.go.workdir)
    return CoverageSummaryTask(
        profile_path=Path(profile),
        reverse=reverse or config.report.reverse,
        include_methods=include_methods or config.extract.include_methods,
        go_binary=config.go.binary or None,
        workdir=workdir,
        timeout=config.go.timeout,
    )


@click.command()
@click.argument("profile", type=click.Path(exists=True, dir_okay=False))
@click.option("-r", "--reverse", is_flag=True, help="Sort from best to worst coverage.")
@click.option(
    "--config",
    "config_file",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="Configuration file (default: .gocovsum.yml in the working directory).",
)
@click.option(
    "-C",
    "--chdir",
    type=click.Path(exists=True, file_okay=False),
    default=None,
    help="Directory to run `go list` in.",
)
@click.option("--include-methods", is_flag=True, help="Also count method declarations.")
@click.option("--no-color", is_flag=True, help="Disable colored output.")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
@click.version_option(version=__version__, prog_name="gocovsum")
def cli(
    profile: str,
    *,
    reverse: bool,
    config_file: str | None,
    chdir: str | None,
    include_methods: bool,
    no_color: bool,
    verbose: bool,
) -> None:
    """Summarize Go statement coverage per source file.

    PROFILE is the output of `go test -coverprofile=PROFILE`.
    """
    _configure_logging(verbose=verbose)
    reporter = TerminalReporter(color=not no_color)
    try:
        config = _load_checked_config(chdir, config_file)
        _apply_log_level(config.logging.level, verbose=verbose)
        reporter = TerminalReporter(
            color=config.report.color and not no_color,
            red_threshold=config.report.red_threshold,
            yellow_threshold=config.report.yellow_threshold,
        )
        task = _build_task(
            config,
            profile,
            reverse=reverse,
            include_methods=include_methods,
            chdir=chdir,
        )
        report = asyncio.run(analyze_profile(task))
    except CoverageSummaryError as exc:
        logger.debug("Coverage summary failed", exc_info=True)
        reporter.print_error(str(exc))
        sys.exit(1)

    reporter.print_report(report)
