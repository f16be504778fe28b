"""CLI interface facades for modelbridge."""

from .__main__ import cli
from .check import check

__all__ = ["check", "cli"]
