"""
=============================================================================
CHAT APPLICATION
=============================================================================

The chat layer's half of the tick. After every Multiplexer.poll():

    ┌─────────────────────────────────────────────────────────────────────┐
    │                         update() in one tick                         │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   1. for each session whose connection isn't flagged:                │
    │         state machine eats every complete inbound line               │
    │                                                                      │
    │   2. for each connection:                                            │
    │         NEW, no session      → spawn Session, show welcome           │
    │         PENDING_REMOVAL,     → tear Session down                     │
    │           has session           ("has left" unless already said)     │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Step 2 runs after step 1 so a user who types "y" at the exit prompt is
torn down in the same tick, and the next poll() closes the socket.

=============================================================================
"""

import time
import logging
from typing import Optional

from ..config import ServerConfig
from ..core import Connection, ConnectionState, Multiplexer
from . import messages
from .commands import CommandDispatcher
from .output import Output
from .registry import SessionRegistry
from .session import Session
from .states import StateMachine


logger = logging.getLogger(__name__)


SECONDS_PER_DAY = 86400


class ChatApp:
    """
    Sessions, states and commands on top of a Multiplexer.

    Usage:
        mux = Multiplexer(config)
        app = ChatApp(mux, config)
        mux.listen()
        while True:
            mux.poll()
            app.update()
    """

    def __init__(self, multiplexer: Multiplexer, config: Optional[ServerConfig] = None):
        self.multiplexer = multiplexer
        self.config = config or multiplexer.config

        self.registry = SessionRegistry(capacity=self.config.max_clients)
        self.output = Output(multiplexer)
        self.states = StateMachine(self)
        self.commands = CommandDispatcher(self)

        self.started_at = time.time()

    @property
    def uptime_days(self) -> int:
        return int((time.time() - self.started_at) / SECONDS_PER_DAY)

    def broadcast(self, sender: Session, text: str) -> int:
        """
        Interrupt every CHAT session except `sender` with `text`.

        Returns:
            Number of sessions the text was queued for.
        """
        count = 0
        for session in self.registry.chatting(exclude=sender):
            self.output.interrupt(session, text)
            count += 1
        return count

    # =========================================================================
    # THE TICK
    # =========================================================================

    def update(self) -> None:
        for session in self.registry.sessions():
            connection = self.multiplexer.get(session.identity)
            if connection.is_flagged:
                continue
            self.states.update(session, connection)

        for connection in self.multiplexer.connections():
            session = self.registry.find(connection.identity)

            if connection.state is ConnectionState.NEW and session is None:
                self._spawn(connection)
            elif connection.is_flagged and session is not None:
                self._teardown(session)

    def _spawn(self, connection: Connection) -> Session:
        session = Session(identity=connection.identity)
        self.registry.add(session)
        logger.debug(f"Session created for client ({connection.ip}).")

        self.states.enter(session)
        return session

    def _teardown(self, session: Session) -> None:
        self.registry.remove(session.identity)

        if session.has_name and not session.farewell_sent:
            self.broadcast(session, messages.left(session.name))

        logger.debug(f"Session {session.identity} torn down.")
