"""
faultreport - A library for rendering runtime faults as readable reports.

This library replaces Python's default traceback and warning output with
severity-coloured reports: a title naming the fault class, the message,
where the fault happened and the call stack with the arguments of each call.

Example usage:
    >>> import faultreport
    >>> faultreport.register()
    >>> faultreport.trigger_error("Cache is cold", faultreport.Severity.E_USER_WARNING)
"""

from .constants import GENERIC_NAME, FATAL_EXIT_CODE
from .models import (
    FaultKind,
    SeverityClass,
    StackFrame,
    FaultRecord,
    RenderedReport,
    Continue,
    Halt,
    Outcome,
    CONTINUE,
    ErrorFault,
)
from .severity import (
    Severity,
    SEVERITY_NAMES,
    FATAL,
    classify,
    classify_fault,
    severity_for_warning,
)
from .styling import Styler
from .utils import format_arguments
from .formatter import render_frame, render_report
from .core import (
    FaultRouter,
    capture_stack,
    capture_traceback,
    fault_from_exception,
    get_router,
    register,
    unregister,
    trigger_error,
)

__version__ = "0.1.0"
__author__ = "faultreport"
__email__ = ""
__description__ = "A library for rendering runtime faults as readable reports"

# Main API exports
__all__ = [
    # Process hooks
    "register",
    "unregister",
    "trigger_error",
    "get_router",
    "FaultRouter",

    # Rendering
    "render_report",
    "render_frame",
    "format_arguments",
    "Styler",

    # Classification
    "Severity",
    "SEVERITY_NAMES",
    "FATAL",
    "classify",
    "classify_fault",
    "severity_for_warning",

    # Capture
    "capture_stack",
    "capture_traceback",
    "fault_from_exception",

    # Data models
    "FaultKind",
    "SeverityClass",
    "StackFrame",
    "FaultRecord",
    "RenderedReport",
    "Continue",
    "Halt",
    "Outcome",
    "CONTINUE",
    "ErrorFault",

    # Constants
    "GENERIC_NAME",
    "FATAL_EXIT_CODE",

    # Version info
    "__version__",
]


# Example usage function
def demo() -> None:
    """
    Demonstrate the library functionality with a sample exception.
    """

    class Widget:
        def render(self, title: str, sizes: list) -> float:
            return len(title) / (len(sizes) - 3)  # ZeroDivisionError

    router = FaultRouter(color=True)

    print("=== WARNING ===")
    router.handle_error(Severity.E_USER_WARNING, "division check", "math.src", 42)

    print("\n\n=== EXCEPTION ===")
    try:
        Widget().render("title", [1, 2, 3])
    except Exception as e:
        router.handle_exception(e)


if __name__ == "__main__":
    demo()
