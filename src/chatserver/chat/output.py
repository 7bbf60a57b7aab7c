"""
=============================================================================
OUTPUT: PROMPTS AND MESSAGE SPACING
=============================================================================

Users sit at a ">" prompt. Two kinds of output reach them:

    AFTER_ENTER                         INTERRUPT
    ───────────                         ─────────
    The user just pressed enter,        Someone else did something while
    so the cursor is at the start       the user may be mid-typing, so we
    of a fresh line.                    first move to a fresh line.

    >hello                              >hal
    [You]: hello                        [bob]: hi everyone
    >                                   >

    text + CRLF + ">"                   CRLF + text + CRLF + ">"

=============================================================================
"""

from enum import Enum
from typing import TYPE_CHECKING

from .messages import CRLF, PROMPT
from .session import Session

if TYPE_CHECKING:
    from ..core import Multiplexer


class PrintKind(Enum):
    AFTER_ENTER = "after_enter"  # No leading blank line
    INTERRUPT = "interrupt"      # Leading CRLF


def encode(text: str) -> bytes:
    # Everything we build is ASCII, user text included (get_line filters it)
    return text.encode("ascii", errors="replace")


class Output:
    """Writes text to sessions through the multiplexer's outbound buffers."""

    def __init__(self, multiplexer: "Multiplexer"):
        self._mux = multiplexer

    def send(self, session: Session, text: str) -> None:
        """Raw text, no line ending, no prompt."""
        self._mux.send(session.identity, encode(text))

    def prompt(self, session: Session) -> None:
        self._mux.send(session.identity, encode(PROMPT))

    def print(self, session: Session, text: str, kind: PrintKind = PrintKind.AFTER_ENTER) -> None:
        """A full message: optional leading CRLF, text, CRLF, prompt."""
        if kind is PrintKind.INTERRUPT:
            self.send(session, CRLF)

        self.send(session, text + CRLF)
        self.prompt(session)

    def interrupt(self, session: Session, text: str) -> None:
        self.print(session, text, PrintKind.INTERRUPT)
