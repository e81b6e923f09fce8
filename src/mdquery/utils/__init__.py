"""Utility modules for mdquery."""

from mdquery.utils.logging import setup_logging
from mdquery.utils.output import OutputManager, output

__all__ = [
    "setup_logging",
    "OutputManager",
    "output",
]
