"""
=============================================================================
PROTOCOL STATE MACHINE
=============================================================================

Each session is in exactly one state. A state is a pair of actions:

    entry(session)          runs once when the session switches in
    on_line(session, line)  runs for every complete line the user sends

    ┌──────────┬──────────────────────────┬──────────────────────────────┐
    │  State   │  Entry                   │  Line                        │
    ├──────────┼──────────────────────────┼──────────────────────────────┤
    │  LOGIN   │  welcome banner          │  pick a username, or /exit   │
    │  CHAT    │  greeting                │  message, or /command        │
    │  EXIT    │  "are you sure?"         │  y → disconnect, else back   │
    └──────────┴──────────────────────────┴──────────────────────────────┘

Leaving a state does nothing, but switch() still goes old-exit →
set state → new-entry so the order is fixed if a state ever needs one.

=============================================================================
"""

import logging
from typing import TYPE_CHECKING, Callable, Dict, Tuple

from ..core import Connection
from . import messages
from .lines import get_line, is_command, is_valid_username
from .session import Session, SessionState

if TYPE_CHECKING:
    from .app import ChatApp


logger = logging.getLogger(__name__)


EntryAction = Callable[[Session], None]
LineAction = Callable[[Session, str], None]


class StateMachine:
    """Drives sessions through LOGIN → CHAT → EXIT."""

    def __init__(self, app: "ChatApp"):
        self.app = app

        self._states: Dict[SessionState, Tuple[EntryAction, LineAction]] = {
            SessionState.LOGIN: (self._login_entry, self._login_line),
            SessionState.CHAT: (self._chat_entry, self._chat_line),
            SessionState.EXIT: (self._exit_entry, self._exit_line),
        }

    # =========================================================================
    # DRIVING
    # =========================================================================

    def enter(self, session: Session) -> None:
        """Run the entry action of the session's current state (new sessions)."""
        entry, _ = self._states[session.state]
        entry(session)

    def switch(self, session: Session, state: SessionState) -> None:
        self._leave(session)
        session.state = state
        self.enter(session)

    def _leave(self, session: Session) -> None:
        pass

    def update(self, session: Session, connection: Connection) -> int:
        """
        Feed every complete line in the connection's inbound buffer.

        Stops early once the connection is flagged (e.g. the user confirmed
        exit), leaving any remaining bytes unread.

        Returns:
            Number of lines handled.
        """
        handled = 0

        while not connection.is_flagged:
            line = get_line(connection.inbound)
            if line is None:
                break

            _, on_line = self._states[session.state]
            on_line(session, line)
            handled += 1

        return handled

    # =========================================================================
    # LOGIN
    # =========================================================================

    def _login_entry(self, session: Session) -> None:
        others = len(self.app.registry) - 1
        banner = messages.welcome_banner(
            self.app.config.server_name, others, self.app.uptime_days
        )
        self.app.output.print(session, banner)

    def _login_line(self, session: Session, line: str) -> None:
        output = self.app.output
        registry = self.app.registry

        if not line:
            output.prompt(session)
            return

        if line.lower() == "/exit":
            self.switch(session, SessionState.EXIT)
            return

        if registry.name_taken(line):
            output.print(session, messages.USERNAME_TAKEN)
            return

        if not is_valid_username(line):
            output.print(session, messages.USERNAME_INVALID)
            return

        registry.claim_name(session, line)
        logger.debug(f"Session {session.identity} logged in as {line}.")

        self.app.broadcast(session, messages.joined(line))
        self.switch(session, SessionState.CHAT)

    # =========================================================================
    # CHAT
    # =========================================================================

    def _chat_entry(self, session: Session) -> None:
        self.app.output.print(session, messages.chat_greeting(session.name))

    def _chat_line(self, session: Session, line: str) -> None:
        if not line:
            self.app.output.prompt(session)
            return

        if is_command(line):
            self.app.commands.dispatch(session, line)
            return

        self.app.broadcast(session, messages.chat_message(session.name, line))
        self.app.output.print(session, messages.chat_echo(line))

    # =========================================================================
    # EXIT
    # =========================================================================

    def _exit_entry(self, session: Session) -> None:
        self.app.output.print(session, messages.EXIT_CONFIRM)

    def _exit_line(self, session: Session, line: str) -> None:
        if line.lower() == "y":
            if session.has_name:
                self.app.broadcast(session, messages.left(session.name))
                session.farewell_sent = True
            self.app.multiplexer.disconnect(session.identity)
            return

        if session.has_name:
            self.switch(session, SessionState.CHAT)
        else:
            self.switch(session, SessionState.LOGIN)
