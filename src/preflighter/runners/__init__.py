"""Async subprocess execution."""

from __future__ import annotations

from preflighter.runners.command import CommandRunner
from preflighter.runners.models import CommandResult

__all__ = ["CommandRunner", "CommandResult"]
