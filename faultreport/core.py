"""Core functionality for fault reporting."""

import atexit
import inspect
import logging
import sys
import threading
import warnings
from types import FrameType, TracebackType
from typing import Any, List, Mapping, Optional, TextIO, Tuple

import click

from .constants import CALL_TYPE_ATTRIBUTE, ERROR_FAULT_NAME, FATAL_EXIT_CODE
from .formatter import render_report
from .models import (
    CONTINUE,
    ErrorFault,
    FaultKind,
    FaultRecord,
    Halt,
    Outcome,
    RenderedReport,
    StackFrame,
)
from .severity import USER_SEVERITIES, Severity, classify, is_fatal, severity_for_warning
from .styling import Styler

logger = logging.getLogger(__name__)


# ---- stack capture ----------------------------------------------------------


def _call_arguments(frame: FrameType) -> Tuple[Optional[str], Optional[str], Tuple[Any, ...]]:
    """
    Pull the class name, call type and arguments of the call a frame runs.

    ``self`` and ``cls`` become the class name rather than an argument,
    ``*args`` are expanded in place and ``**kwargs`` are passed as one
    mapping.
    """
    code = frame.f_code
    local_vars = frame.f_locals or {}
    names = list(code.co_varnames[: code.co_argcount + code.co_kwonlyargcount])

    class_name = None
    call_type = None
    if names and names[0] in ("self", "cls") and names[0] in local_vars:
        bound = local_vars[names[0]]
        owner = bound if names[0] == "cls" and isinstance(bound, type) else type(bound)
        class_name = owner.__name__
        call_type = CALL_TYPE_ATTRIBUTE
        names = names[1:]

    arguments: List[Any] = [local_vars[name] for name in names if name in local_vars]

    index = code.co_argcount + code.co_kwonlyargcount
    if code.co_flags & inspect.CO_VARARGS:
        arguments.extend(local_vars.get(code.co_varnames[index], ()))
        index += 1
    if code.co_flags & inspect.CO_VARKEYWORDS:
        kwargs = local_vars.get(code.co_varnames[index])
        if kwargs:
            arguments.append(kwargs)

    return class_name, call_type, tuple(arguments)


def _frames_from_stack(
    stack: List[Tuple[FrameType, int]], max_frames: int
) -> Tuple[StackFrame, ...]:
    """
    Turn an innermost-first list of (frame, lineno) pairs into trace entries.

    Each entry names the function a frame runs, with the file and line of
    the call site in the calling frame. The outermost module-level frame is
    not a call and gets no entry.
    """
    frames: List[StackFrame] = []
    for i, (frame, _) in enumerate(stack):
        caller = stack[i + 1] if i + 1 < len(stack) else None
        if caller is None and frame.f_code.co_name == "<module>":
            break
        if len(frames) >= max_frames:
            break
        class_name, call_type, arguments = _call_arguments(frame)
        frames.append(
            StackFrame(
                file=caller[0].f_code.co_filename if caller else None,
                line=caller[1] if caller else None,
                class_name=class_name,
                call_type=call_type,
                function=frame.f_code.co_name,
                arguments=arguments,
            )
        )
    return tuple(frames)


def capture_traceback(
    tb: Optional[TracebackType], max_frames: int = 200
) -> Tuple[Optional[str], Optional[int], Tuple[StackFrame, ...]]:
    """
    Capture the fault location and trace entries from a traceback.

    Returns (file, line, frames) where file and line are where the
    exception was raised.
    """
    stack: List[Tuple[FrameType, int]] = []
    while tb is not None:
        stack.append((tb.tb_frame, tb.tb_lineno))
        tb = tb.tb_next
    if not stack:
        return None, None, ()
    stack.reverse()
    frame, lineno = stack[0]
    return frame.f_code.co_filename, lineno, _frames_from_stack(stack, max_frames)


def capture_stack(
    frame: Optional[FrameType], max_frames: int = 200
) -> Tuple[Optional[str], Optional[int], Tuple[StackFrame, ...]]:
    """Capture the fault location and trace entries from a live frame."""
    stack: List[Tuple[FrameType, int]] = []
    while frame is not None:
        stack.append((frame, frame.f_lineno))
        frame = frame.f_back
    if not stack:
        return None, None, ()
    first, lineno = stack[0]
    return first.f_code.co_filename, lineno, _frames_from_stack(stack, max_frames)


def _safe_str(exc: BaseException) -> str:
    try:
        return str(exc)
    except Exception:
        return f"<unprintable {type(exc).__name__} object>"


def fault_from_exception(exc: BaseException, max_frames: int = 200) -> FaultRecord:
    """Build a fault record for a thrown exception."""
    file, line, frames = capture_traceback(exc.__traceback__, max_frames)
    severity = None
    if isinstance(exc, ErrorFault):
        severity = exc.severity
        file = exc.filename if exc.filename is not None else file
        line = exc.lineno if exc.lineno is not None else line
    return FaultRecord(
        message=_safe_str(exc),
        kind=FaultKind.THROWN_EXCEPTION,
        type_name=type(exc).__name__,
        severity=severity,
        file=file,
        line=line,
        frames=frames,
    )


# ---- routing ----------------------------------------------------------------


class FaultRouter:
    """
    Receives faults from the three delivery channels and renders them.

    Parameters:
        reporting_level: bitmask of severities to report from the
            recoverable channel
        stream: where reports are written, standard error by default
        color: passed to click.echo; None strips styling when the stream
            is not a terminal
        styler: styling helper used by the renderer
        max_frames: limit on captured trace entries per fault
    """

    def __init__(
        self,
        *,
        reporting_level: int = Severity.E_ALL,
        stream: Optional[TextIO] = None,
        color: Optional[bool] = None,
        styler: Optional[Styler] = None,
        max_frames: int = 200,
    ) -> None:
        self.reporting_level = reporting_level
        self.stream = stream
        self.color = color
        self.styler = styler or Styler()
        self.max_frames = max_frames
        self.last_error: Optional[FaultRecord] = None

    def _emit(self, fault: FaultRecord) -> RenderedReport:
        report = render_report(fault, self.styler)
        try:
            click.echo(report.text, file=self.stream, err=True, nl=False, color=self.color)
        except OSError as e:
            logger.warning("Unable to write fault report: %s", e)
        return report

    def handle_error(
        self,
        severity: Optional[int],
        message: str,
        file: Optional[str],
        line: Optional[int],
        *,
        frames: Tuple[StackFrame, ...] = (),
        type_name: str = ERROR_FAULT_NAME,
    ) -> Outcome:
        """
        Handle a recoverable fault.

        Returns Halt when the severity is fatal, after rendering, so the
        caller can stop the process. Severities outside the reporting level
        are recorded but not rendered.
        """
        record = FaultRecord(
            message=message,
            kind=FaultKind.RUNTIME_ERROR,
            type_name=type_name,
            severity=severity,
            file=file,
            line=line,
            frames=frames,
        )
        self.last_error = record

        if severity is not None and not (self.reporting_level & severity):
            logger.debug("Suppressed %s: %s", classify(severity).name, message)
            return CONTINUE

        self.last_error = None
        self._emit(record)
        if is_fatal(severity):
            return Halt(record)
        return CONTINUE

    def handle_exception(self, exc: Any) -> Optional[RenderedReport]:
        """Render an uncaught exception. Anything else is ignored."""
        if not isinstance(exc, BaseException):
            logger.debug("Ignoring non-exception value %r", exc)
            return None
        return self._emit(fault_from_exception(exc, self.max_frames))

    def handle_shutdown(
        self, error: Optional[Mapping[str, Any]] = None
    ) -> Optional[RenderedReport]:
        """
        Render the last recorded fault at shutdown if it was fatal.

        ``error`` may describe the last fault explicitly with ``type``,
        ``message``, ``file`` and ``line`` keys; otherwise the last fault
        the router recorded without rendering is used.
        """
        if error is not None:
            severity = error.get("type")
            record = FaultRecord(
                message=str(error.get("message", "")),
                kind=FaultKind.FATAL_FAULT,
                type_name=ERROR_FAULT_NAME,
                severity=severity,
                file=error.get("file"),
                line=error.get("line"),
            )
        elif self.last_error is not None:
            severity = self.last_error.severity
            record = FaultRecord(
                message=self.last_error.message,
                kind=FaultKind.FATAL_FAULT,
                type_name=self.last_error.type_name,
                severity=severity,
                file=self.last_error.file,
                line=self.last_error.line,
                frames=self.last_error.frames,
            )
        else:
            return None

        self.last_error = None
        if not is_fatal(severity):
            return None
        return self._emit(record)


# ---- process hooks ----------------------------------------------------------

_router: Optional[FaultRouter] = None
_original_excepthook = None
_original_showwarning = None
_original_threading_excepthook = None


def get_router() -> FaultRouter:
    """The registered router, or a default one when none is registered."""
    return _router or FaultRouter()


def _excepthook(exc_type, exc_value, exc_tb) -> None:
    get_router().handle_exception(exc_value)


def _threading_excepthook(args) -> None:
    # Threads ending with SystemExit are not faults
    if args.exc_type is SystemExit:
        return
    get_router().handle_exception(args.exc_value)


def _showwarning(message, category, filename, lineno, file=None, line=None) -> None:
    outcome = get_router().handle_error(
        severity_for_warning(category),
        str(message),
        filename,
        lineno,
        type_name=category.__name__,
    )
    if isinstance(outcome, Halt):
        sys.exit(FATAL_EXIT_CODE)


def _at_exit() -> None:
    if _router is not None:
        _router.handle_shutdown()


def register(**config: Any) -> FaultRouter:
    """
    Install faultreport as the process-wide fault handler.

    Replaces sys.excepthook, threading.excepthook and warnings.showwarning,
    which also stops Python from printing its own tracebacks and warnings,
    and runs a shutdown check at exit. Keyword arguments configure the FaultRouter.
    Call unregister() to restore the original handlers.
    """
    global _router, \
        _original_excepthook, \
        _original_showwarning, \
        _original_threading_excepthook

    if _router is None:
        _original_excepthook = sys.excepthook
        _original_showwarning = warnings.showwarning
        _original_threading_excepthook = threading.excepthook
        atexit.register(_at_exit)

    _router = FaultRouter(**config)
    sys.excepthook = _excepthook
    threading.excepthook = _threading_excepthook
    warnings.showwarning = _showwarning
    logger.debug("Registered fault handlers")
    return _router


def unregister() -> None:
    """Restore the handlers that were in place before register()."""
    global _router, \
        _original_excepthook, \
        _original_showwarning, \
        _original_threading_excepthook

    if _router is None:
        return
    sys.excepthook = _original_excepthook
    threading.excepthook = _original_threading_excepthook
    warnings.showwarning = _original_showwarning
    atexit.unregister(_at_exit)
    _router = None
    _original_excepthook = None
    _original_showwarning = None
    _original_threading_excepthook = None
    logger.debug("Unregistered fault handlers")


def trigger_error(message: str, severity: int = Severity.E_USER_NOTICE) -> Outcome:
    """
    Raise a user-level fault at the caller's location.

    Fatal severities (E_USER_ERROR) stop the process with exit status 255
    once the report is written.
    """
    if severity not in USER_SEVERITIES:
        raise ValueError(f"Invalid user severity: {severity!r}")

    router = get_router()
    file, line, frames = capture_stack(sys._getframe(1), router.max_frames)
    outcome = router.handle_error(
        severity, message, file, line, frames=frames, type_name=ERROR_FAULT_NAME
    )
    if isinstance(outcome, Halt):
        sys.exit(FATAL_EXIT_CODE)
    return outcome
