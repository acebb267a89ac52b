"""Data models for fault reporting."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Tuple, Union

import click


class FaultKind(str, Enum):
    """How a fault reached the router."""

    RUNTIME_ERROR = "runtime-error"
    THROWN_EXCEPTION = "thrown-exception"
    FATAL_FAULT = "fatal-fault"


@dataclass(frozen=True)
class SeverityClass:
    """Named classification of a severity code."""

    name: str
    fatal: bool
    generic: bool = False


@dataclass(frozen=True)
class StackFrame:
    """One call in a captured stack, innermost first."""

    file: Optional[str] = None
    line: Optional[int] = None
    class_name: Optional[str] = None
    call_type: Optional[str] = None
    function: Optional[str] = None
    arguments: Tuple[Any, ...] = ()


@dataclass(frozen=True)
class FaultRecord:
    """Normalized fault handed from an entry point to the renderer."""

    message: str
    kind: FaultKind
    type_name: str
    severity: Optional[int] = None
    file: Optional[str] = None
    line: Optional[int] = None
    frames: Tuple[StackFrame, ...] = ()


@dataclass(frozen=True)
class RenderedReport:
    """Styled lines of one fault report."""

    lines: Tuple[str, ...]
    fatal: bool = False

    @property
    def text(self) -> str:
        return "\n".join(self.lines) + "\n"

    @property
    def plain(self) -> str:
        """The report text with styling removed."""
        return click.unstyle(self.text)


@dataclass(frozen=True)
class Continue:
    """Execution carries on after the fault."""


@dataclass(frozen=True)
class Halt:
    """The process must stop; the fault has already been rendered."""

    record: FaultRecord


Outcome = Union[Continue, Halt]

CONTINUE = Continue()


class ErrorFault(Exception):
    """
    An exception carrying a severity code.

    Raising one of these reports it under its severity's class instead of
    the generic EXCEPTION class.
    """

    def __init__(
        self,
        message: str,
        severity: int,
        filename: Optional[str] = None,
        lineno: Optional[int] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.severity = severity
        self.filename = filename
        self.lineno = lineno
