"""
Session: the chat-level identity bound to one Connection.
"""

from enum import Enum
from dataclasses import dataclass


class SessionState(Enum):
    """
    Protocol states.

        LOGIN ──valid name──► CHAT ──/exit──► EXIT ──y──► (disconnected)
          │                    ▲               │
          └──────/exit─────────┼──────────►    │
                               └──────n────────┘
    """
    LOGIN = "login"
    CHAT = "chat"
    EXIT = "exit"


@dataclass
class Session:
    """
    Per-user protocol state.

    Attributes:
        identity: Same integer as the owning Connection's identity.
        state: Current protocol state.
        name: Display name, empty until login succeeds.
        farewell_sent: "has left" was already broadcast (confirmed exit).
    """

    identity: int
    state: SessionState = SessionState.LOGIN
    name: str = ""
    farewell_sent: bool = False

    @property
    def has_name(self) -> bool:
        return bool(self.name)

    @property
    def is_chatting(self) -> bool:
        return self.state is SessionState.CHAT
