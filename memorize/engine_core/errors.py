"""
Engine errors.

Only programmer errors and invalid phase transitions are raised.
Taps on invalid targets are never errors; they are silently ignored.
"""

from __future__ import annotations


class MemorizeError(Exception):
    """Base class for engine errors."""


class InvalidLevelConfigError(MemorizeError, ValueError):
    """The level definition list cannot be played (rejected at construction)."""


class InvalidTransitionError(MemorizeError, ValueError):
    """A command was issued in a phase that does not accept it."""

    def __init__(self, command: str, phase):
        self.command = command
        self.phase = phase
        super().__init__(f"Cannot {command} while {phase}")
