"""
=============================================================================
CORE NETWORKING COMPONENTS
=============================================================================

This package contains the low-level networking building blocks:

1. MULTIPLEXER (multiplexer.py)
   - Owns the listening socket and every client connection
   - One poll() per tick: accept, read, promote, reap, flush
   - Never blocks while any client is connected

2. CONNECTION (connection.py)
   - One record per client socket
   - Inbound and outbound byte buffers
   - NEW → ONLINE → PENDING_REMOVAL lifecycle

=============================================================================
SINGLE THREAD, NO LOCKS
=============================================================================

Everything here runs on one thread. The client registry is only mutated
from poll() and from the chat layer's update(), which never run at the
same time, so there is nothing to lock.

=============================================================================
IMPORTS AND EXPORTS
=============================================================================
"""

from .connection import Connection, ConnectionState, ConnectionNotFoundError
from .multiplexer import (
    Multiplexer,
    ChatServerError,
    ServerSetupError,
    PollError,
    SERVER_FULL_MESSAGE,
    GOODBYE_MESSAGE,
)

__all__ = [
    "Multiplexer",              # Listener + client registry + tick I/O
    "Connection",               # One client socket and its buffers
    "ConnectionState",          # NEW / ONLINE / PENDING_REMOVAL
    "ConnectionNotFoundError",  # Identity lookup contract violation
    "ChatServerError",          # Base for fatal errors
    "ServerSetupError",         # socket/bind/listen failed
    "PollError",                # readiness wait failed
    "SERVER_FULL_MESSAGE",
    "GOODBYE_MESSAGE",
]
