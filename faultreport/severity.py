"""Severity codes and their classification."""

from enum import IntFlag
from typing import Dict, Optional, Type

from .constants import GENERIC_NAME
from .models import FaultKind, FaultRecord, SeverityClass


class Severity(IntFlag):
    """Fault severity codes."""

    E_ERROR = 1
    E_WARNING = 2
    E_PARSE = 4
    E_NOTICE = 8
    E_CORE_ERROR = 16
    E_CORE_WARNING = 32
    E_COMPILE_ERROR = 64
    E_COMPILE_WARNING = 128
    E_USER_ERROR = 256
    E_USER_WARNING = 512
    E_USER_NOTICE = 1024
    E_STRICT = 2048
    E_RECOVERABLE_ERROR = 4096
    E_DEPRECATED = 8192
    E_USER_DEPRECATED = 16384
    E_ALL = 32767


SEVERITY_NAMES: Dict[int, str] = {
    1: "E_ERROR",
    2: "E_WARNING",
    4: "E_PARSE",
    8: "E_NOTICE",
    16: "E_CORE_ERROR",
    32: "E_CORE_WARNING",
    64: "E_COMPILE_ERROR",
    128: "E_COMPILE_WARNING",
    256: "E_USER_ERROR",
    512: "E_USER_WARNING",
    1024: "E_USER_NOTICE",
    2048: "E_STRICT",
    4096: "E_RECOVERABLE_ERROR",
    8192: "E_DEPRECATED",
    16384: "E_USER_DEPRECATED",
}

# Codes meaning the runtime has stopped executing the program
FATAL = frozenset(
    {
        Severity.E_ERROR,
        Severity.E_PARSE,
        Severity.E_CORE_ERROR,
        Severity.E_COMPILE_ERROR,
        Severity.E_USER_ERROR,
    }
)

# Codes that trigger_error() accepts
USER_SEVERITIES = frozenset(
    {
        Severity.E_USER_ERROR,
        Severity.E_USER_WARNING,
        Severity.E_USER_NOTICE,
        Severity.E_USER_DEPRECATED,
    }
)

WARNING_SEVERITIES: Dict[Type[Warning], Severity] = {
    DeprecationWarning: Severity.E_DEPRECATED,
    PendingDeprecationWarning: Severity.E_DEPRECATED,
    FutureWarning: Severity.E_USER_DEPRECATED,
    SyntaxWarning: Severity.E_COMPILE_WARNING,
    ImportWarning: Severity.E_CORE_WARNING,
    ResourceWarning: Severity.E_NOTICE,
    BytesWarning: Severity.E_STRICT,
    UnicodeWarning: Severity.E_STRICT,
    RuntimeWarning: Severity.E_WARNING,
    UserWarning: Severity.E_USER_WARNING,
}

GENERIC = SeverityClass(name=GENERIC_NAME, fatal=False, generic=True)


def is_fatal(code: Optional[int]) -> bool:
    return code is not None and code in FATAL


def classify(code: Optional[int]) -> SeverityClass:
    """
    Map a severity code to its named class.

    Unknown codes (and None) map to the generic EXCEPTION class, which is
    never fatal on its own.
    """
    if code is None:
        return GENERIC
    name = SEVERITY_NAMES.get(int(code))
    if name is None:
        return GENERIC
    return SeverityClass(name=name, fatal=is_fatal(code))


def classify_fault(fault: FaultRecord) -> SeverityClass:
    """Classify a fault record, forcing fatal faults to be treated as fatal."""
    sclass = classify(fault.severity)
    if fault.kind is FaultKind.FATAL_FAULT and not sclass.fatal:
        return SeverityClass(name=sclass.name, fatal=True, generic=sclass.generic)
    return sclass


def severity_for_warning(category: Type[Warning]) -> Severity:
    """
    Pick the severity for a warning category.

    The category's method resolution order is walked so subclasses of the
    builtin categories share their parent's severity.
    """
    for klass in getattr(category, "__mro__", ()):
        if klass in WARNING_SEVERITIES:
            return WARNING_SEVERITIES[klass]
    return Severity.E_USER_WARNING
