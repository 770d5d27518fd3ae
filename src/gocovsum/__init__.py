"""gocovsum — per-file Go coverage summaries from ``go test`` cover profiles."""

__version__ = "0.3.0"
