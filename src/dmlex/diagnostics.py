"""Diagnostics sinks that receive lexical errors before they are raised."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Protocol

from dmlex.tokens import Position


class DiagnosticsSink(Protocol):
    def report(self, message: str, position: Position) -> None: ...


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """A single reported problem."""

    message: str
    position: Position

    def __str__(self) -> str:
        return f"Parse error at {self.position}: {self.message}"


class DiagnosticList:
    """Collect reports in order. Used when no sink is supplied."""

    def __init__(self) -> None:
        self.diagnostics: list[Diagnostic] = []

    def report(self, message: str, position: Position) -> None:
        self.diagnostics.append(Diagnostic(message, position))

    def __len__(self) -> int:
        return len(self.diagnostics)

    def __iter__(self):
        return iter(self.diagnostics)


class LoggingSink:
    """Forward each report to a logger at ERROR level."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self.logger = logger or logging.getLogger("dmlex.diagnostics")

    def report(self, message: str, position: Position) -> None:
        self.logger.error("%s", Diagnostic(message, position))
