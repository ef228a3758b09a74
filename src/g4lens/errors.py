"""Error types for g4lens.

The analysis pipeline itself never raises on grammar input: malformed
grammars only degrade the accuracy of the report.  The exceptions here
cover the configuration surface (options objects, settings files) where
a caller handed us something we cannot interpret.
"""
from __future__ import annotations


class G4LensError(Exception):
    """Base class for all g4lens errors."""


class InvalidOptionsError(G4LensError, ValueError):
    """Raised when analysis options are malformed.

    Parameters
    ----------
    key:
        The option name that failed validation.
    message:
        Human-readable description of the problem.
    """

    def __init__(self, key: str, message: str) -> None:
        super().__init__(f"Invalid option {key!r}: {message}")
        self.key = key
        self.option_message = message
