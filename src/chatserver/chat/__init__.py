"""
=============================================================================
CHAT PROTOCOL LAYER
=============================================================================

Everything above raw sockets:

1. APP (app.py)
   - One update() per tick, after Multiplexer.poll()
   - Spawns and tears down sessions, broadcasts

2. SESSIONS (session.py, registry.py)
   - Per-user state and display name
   - Lookup by identity and by name

3. STATE MACHINE (states.py)
   - LOGIN → CHAT → EXIT

4. COMMANDS (commands.py)
   - /help /exit /info /list /whisper and their aliases

5. TEXT (lines.py, output.py, messages.py)
   - Line extraction, prompts and spacing, message wording

=============================================================================
"""

from .app import ChatApp
from .commands import Command, CommandDispatcher, COMMANDS
from .lines import get_line, is_valid_username, is_command
from .output import Output, PrintKind
from .registry import SessionRegistry
from .session import Session, SessionState
from .states import StateMachine

__all__ = [
    "ChatApp",            # Chat half of the tick
    "Session",            # Per-user protocol state
    "SessionState",       # LOGIN / CHAT / EXIT
    "SessionRegistry",    # identity → Session, name → Session
    "StateMachine",       # Entry and line actions per state
    "Command",            # HELP / EXIT / INFO / LIST / WHISPER
    "CommandDispatcher",  # "/cmd args" → handler
    "COMMANDS",
    "Output",             # Prompts and message spacing
    "PrintKind",          # AFTER_ENTER / INTERRUPT
    "get_line",
    "is_valid_username",
    "is_command",
]
