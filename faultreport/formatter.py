"""Formatting utilities for fault reports."""

from typing import List, Optional, Tuple

from .constants import BASE_INDENT, BODY_INDENT_PAD, FRAME_NUMBER_WIDTH
from .models import FaultRecord, RenderedReport, SeverityClass, StackFrame
from .severity import classify_fault
from .styling import Styler
from .utils import format_arguments


def _location(file: Optional[str], line: Optional[int], styler: Styler) -> str:
    return f"{styler.magenta(file)} : {styler.magenta(line)}"


def render_frame(
    index: int, frame: StackFrame, styler: Optional[Styler] = None
) -> Tuple[str, Optional[str]]:
    """
    Format one stack frame.

    Returns the call line, e.g. ``1   Widget->render("title", )``, and the
    location line, which is None when the frame has neither file nor line.
    """
    styler = styler or Styler()

    pos = str(index + 1).ljust(FRAME_NUMBER_WIDTH)
    class_name = styler.yellow(frame.class_name)
    call_type = frame.call_type or ""
    function = frame.function or ""
    args = format_arguments(frame.arguments or (), True)
    call_line = f"{pos}{class_name}{call_type}{function}({args})"

    if frame.file is None and frame.line is None:
        return call_line, None
    return call_line, _location(frame.file, frame.line, styler)


def _type_tag(sclass: SeverityClass, styler: Styler) -> str:
    tag = f" {sclass.name} "
    # Non-fatal notices and warnings are shown with a yellow background
    if not sclass.fatal and not sclass.generic:
        return styler.bold(tag, fg="black", bg="yellow")
    return styler.bold(tag, fg="white", bg="red")


def render_report(fault: FaultRecord, styler: Optional[Styler] = None) -> RenderedReport:
    """
    Render a fault record into a styled report.

    Parameters:
        fault: the fault to render
        styler: styling helper, a colouring Styler by default

    Returns:
        A RenderedReport whose lines are, in order: an empty line, the
        title, the message, the location and then each stack frame.
    """
    styler = styler or Styler()
    sclass = classify_fault(fault)
    lines: List[str] = [""]

    tag = _type_tag(sclass, styler)
    title = f"{tag} {styler.bold(fault.type_name, fg='red')}"
    lines.append(styler.indent(title, BASE_INDENT))

    # Everything below the title lines up after the tag
    indent = len(styler.strip(tag)) + BODY_INDENT_PAD

    lines.append(styler.indent(styler.yellow(fault.message), indent))
    lines.append("")
    lines.append(
        styler.indent(f"at  {_location(fault.file, fault.line, styler)}", indent)
    )

    for i, frame in enumerate(fault.frames):
        call_line, location_line = render_frame(i, frame, styler)
        lines.append("")
        lines.append(styler.indent(call_line, indent))
        if location_line is not None:
            lines.append(
                styler.indent(" " * FRAME_NUMBER_WIDTH + location_line, indent)
            )

    return RenderedReport(lines=tuple(lines), fatal=sclass.fatal)
