"""Terminal styling for fault reports."""

import logging
from typing import Any, Optional

import click

logger = logging.getLogger(__name__)


class Styler:
    """
    Thin wrapper around click's styling helpers.

    Styling never fails: unknown colour names or other bad requests fall
    back to the plain text. With ``enabled=False`` every request returns
    plain text, which keeps reports readable on dumb terminals and in tests.
    """

    def __init__(self, *, enabled: bool = True) -> None:
        self.enabled = enabled

    def style(
        self,
        value: Any,
        *,
        fg: Optional[str] = None,
        bg: Optional[str] = None,
        bold: Optional[bool] = None,
    ) -> str:
        text = "" if value is None else str(value)
        if not self.enabled or not text:
            return text
        try:
            return click.style(text, fg=fg, bg=bg, bold=bold)
        except (TypeError, ValueError) as e:
            logger.debug("Unable to style %r: %s", text, e)
            return text

    def bold(self, value: Any, **kwargs: Any) -> str:
        return self.style(value, bold=True, **kwargs)

    def yellow(self, value: Any) -> str:
        return self.style(value, fg="yellow")

    def magenta(self, value: Any) -> str:
        return self.style(value, fg="magenta")

    def strip(self, text: str) -> str:
        return click.unstyle(text)

    def indent(self, text: str, width: int) -> str:
        return " " * width + text
