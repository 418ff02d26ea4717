"""CLI command handlers."""

from facemetric.cli.commands.baseline import run_baseline
from facemetric.cli.commands.describe import run_describe
from facemetric.cli.commands.info import run_info
from facemetric.cli.commands.lint import run_lint
from facemetric.cli.commands.quality import run_quality

__all__ = [
    "run_baseline",
    "run_describe",
    "run_info",
    "run_lint",
    "run_quality",
]
