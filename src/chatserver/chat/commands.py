"""
=============================================================================
SLASH-COMMAND DISPATCHER
=============================================================================

Any line a chatting user starts with "/" is a command, not a message:

    ┌─────────────────────────────────────────────────────────────────────┐
    │                        DISPATCH FLOW                                 │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   "/w bob see you at 5"                                              │
    │        │                                                             │
    │        ▼                                                             │
    │   strip "/", split at the first space                                │
    │        │                                                             │
    │        ├── token: "w"                                                │
    │        └── args:  "bob see you at 5"                                 │
    │        │                                                             │
    │        ▼                                                             │
    │   ┌─────────────────────────────────────────────────────────────┐   │
    │   │  ALIAS TABLE  (built once, read-only afterwards)             │   │
    │   │                                                              │   │
    │   │  help, h                    → HELP                           │   │
    │   │  exit, e, quit, q           → EXIT                           │   │
    │   │  info, i                    → INFO                           │   │
    │   │  list, l                    → LIST                           │   │
    │   │  whisper, w, msg, m         → WHISPER     ← MATCH!           │   │
    │   └─────────────────────────────────────────────────────────────┘   │
    │        │                                                             │
    │        ▼                                                             │
    │   _whisper(session, "bob see you at 5")                              │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Lookup is case-sensitive: "/Help" is an unknown command. Unknown commands
and a bare "/" both show the help text.

=============================================================================
"""

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Callable, Dict, Tuple

from ..containers import HashMap, fnv1a_hash
from . import messages
from .lines import COMMAND_PREFIX
from .messages import CRLF
from .session import Session, SessionState

if TYPE_CHECKING:
    from .app import ChatApp


class Command(Enum):
    HELP = "help"
    EXIT = "exit"
    INFO = "info"
    LIST = "list"
    WHISPER = "whisper"


@dataclass(frozen=True)
class CommandInfo:
    """
    A command as shown in /help.

    `description` may contain "{server}", filled in with the server name.
    """
    command: Command
    aliases: Tuple[str, ...]         # Short forms, in help order
    description: str

    @property
    def name(self) -> str:
        return self.command.value


COMMANDS: Tuple[CommandInfo, ...] = (
    CommandInfo(Command.HELP, ("h",), "Show this help message."),
    CommandInfo(Command.EXIT, ("e", "quit", "q"), "Exit {server}."),
    CommandInfo(Command.INFO, ("i",), "Show server information."),
    CommandInfo(Command.LIST, ("l",), "List online users."),
    CommandInfo(Command.WHISPER, ("w", "msg", "m"), "Send a private message."),
)


# Handler: a bound method taking the session and the text after the command
Handler = Callable[[Session, str], None]


class CommandDispatcher:
    """
    Parses "/command args" lines and runs the matching handler.

    Usage:
        dispatcher = CommandDispatcher(app)
        dispatcher.dispatch(session, "/list")
    """

    def __init__(self, app: "ChatApp"):
        self.app = app

        # alias → Command, every name and short form
        self._table: HashMap[str, Command] = HashMap(fnv1a_hash)
        for info in COMMANDS:
            self._table[info.name] = info.command
            for alias in info.aliases:
                self._table[alias] = info.command

        self._handlers: Dict[Command, Handler] = {
            Command.HELP: self._help,
            Command.EXIT: self._exit,
            Command.INFO: self._info,
            Command.LIST: self._list,
            Command.WHISPER: self._whisper,
        }

    def lookup(self, token: str):
        """The Command for an alias, or None."""
        return self._table.get(token)

    def dispatch(self, session: Session, line: str) -> None:
        """
        Run the command in `line` for `session`.

        Args:
            session: A session in CHAT state.
            line: A trimmed line starting with "/".
        """
        body = line[len(COMMAND_PREFIX):]
        token, _, args = body.partition(" ")

        command = self.lookup(token) if token else None
        if command is None:
            command = Command.HELP

        self._handlers[command](session, args.strip(" "))

    # =========================================================================
    # HANDLERS
    # =========================================================================

    def _help(self, session: Session, args: str) -> None:
        commands = [(info.name, info.aliases, info.description) for info in COMMANDS]
        self.app.output.print(session, messages.help_text(self.app.config.server_name, commands))

    def _exit(self, session: Session, args: str) -> None:
        self.app.states.switch(session, SessionState.EXIT)

    def _info(self, session: Session, args: str) -> None:
        text = messages.server_info(
            self.app.config.server_name,
            self.app.uptime_days,
            len(self.app.registry),
        )
        self.app.output.print(session, text)

    def _list(self, session: Session, args: str) -> None:
        output = self.app.output

        output.send(session, messages.ONLINE_USERS_HEADER + CRLF)
        output.send(session, messages.online_user(session.name, is_self=True) + CRLF)

        for other in self.app.registry.chatting(exclude=session):
            output.send(session, messages.online_user(other.name) + CRLF)

        output.prompt(session)

    def _whisper(self, session: Session, args: str) -> None:
        """
        /whisper <username> <message>

        The recipient gets the message as an interrupt, the sender gets
        an acknowledgement. Nothing is delivered on any error.
        """
        output = self.app.output

        recipient_name, _, text = args.partition(" ")
        text = text.strip(" ")

        if not recipient_name:
            output.print(session, messages.WHISPER_USAGE)
            return

        recipient = self.app.registry.find_by_name(recipient_name)
        if recipient is None:
            output.print(session, messages.user_not_found(recipient_name))
            return

        if not recipient.is_chatting:
            output.print(session, messages.user_not_in_chat(recipient_name))
            return

        if not text:
            output.print(session, messages.WHISPER_USAGE)
            return

        output.interrupt(recipient, messages.whisper_received(session.name, text))
        output.print(session, messages.whisper_sent(recipient.name, text))
