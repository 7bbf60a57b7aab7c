"""
=============================================================================
CONNECTION
=============================================================================

One Connection per accepted client socket. It's a plain record owned by
the Multiplexer: the socket, the liveness state, and two byte buffers.

=============================================================================
TCP IS A BYTE STREAM, NOT A MESSAGE PROTOCOL!
=============================================================================

A client typing "hello" and pressing enter might arrive as:

    recv() → "hel"
    recv() → "lo\r\n"

or, if the client is fast, two lines might arrive together:

    recv() → "hello\r\nworld\r\n"

So the Connection does NO framing. Whatever recv() returns is appended to
`inbound` verbatim, and the chat layer pulls complete lines out of it when
it's ready. Bytes after the last line terminator simply stay buffered
until the next tick.

Outbound works the same way in reverse: the chat layer appends to
`outbound`, and the Multiplexer flushes as much as the kernel will take.

=============================================================================
CONNECTION LIFECYCLE
=============================================================================

    accept()
       │
       ▼
     NEW  ───────── next poll() ──────────►  ONLINE
                                               │
                zero-byte read / read error /  │
                disconnect()                   │
                                               ▼
                                        PENDING_REMOVAL   (flagged)
                                               │
                                          next poll()
                                               │
                                               ▼
                                        socket closed,
                                        registry entry erased   (reaped)

NEW lasts exactly one tick. That gives the chat layer one update() in
which it sees NEW and creates the Session, before any bytes from the
client are dispatched to it.

PENDING_REMOVAL also lasts exactly one tick: the chat layer sees the flag,
tears down the Session (and still can read the Connection while doing
so), and only then does the next poll() destroy the Connection.

=============================================================================
"""

import socket
import time
from enum import Enum
from dataclasses import dataclass, field
from typing import Tuple

from ..containers import Sequence


class ConnectionState(Enum):
    """Connection liveness states."""
    NEW = "new"                          # Accepted this tick, no session yet
    ONLINE = "online"                    # Session exists, reads dispatched
    PENDING_REMOVAL = "pending_removal"  # Flagged, reaped by next poll()


class ConnectionNotFoundError(LookupError):
    """
    Raised when a connection identity that must exist is not registered.

    This is a programming error (e.g. a Session outliving its Connection),
    never a runtime condition caused by a client.
    """

    def __init__(self, identity: int):
        self.identity = identity
        super().__init__(f"No connection registered with identity {identity}")


@dataclass
class Connection:
    """
    A registered client socket and its buffers.

    Attributes:
        socket: The non-blocking client socket.
        address: Client's (ip, port) tuple.
        identity: Stable integer handle (the socket's file descriptor).
        state: Liveness state.
        inbound: Bytes received but not yet consumed by the chat layer.
        outbound: Bytes queued but not yet sent.
        connected_at: Timestamp when the connection was accepted.
    """

    socket: socket.socket
    address: Tuple[str, int]

    identity: int = field(init=False)
    state: ConnectionState = ConnectionState.NEW
    inbound: Sequence[int] = field(default_factory=Sequence, repr=False)
    outbound: Sequence[int] = field(default_factory=Sequence, repr=False)
    connected_at: float = field(default_factory=time.time)

    def __post_init__(self):
        self.identity = self.socket.fileno()

    @property
    def ip(self) -> str:
        """Remote address as a string."""
        return self.address[0]

    @property
    def connected_for(self) -> float:
        """Seconds since the connection was accepted."""
        return time.time() - self.connected_at

    @property
    def is_flagged(self) -> bool:
        return self.state is ConnectionState.PENDING_REMOVAL

    def queue(self, data: bytes) -> None:
        """Append bytes to the outbound buffer."""
        self.outbound.extend(data)

    def flag_for_removal(self) -> None:
        """
        Mark this connection for lazy teardown.

        The socket stays open until the Multiplexer reaps it on the next
        poll(), so readers may still inspect the Connection this tick.
        """
        self.state = ConnectionState.PENDING_REMOVAL

    def flush(self) -> int:
        """
        Try to send the whole outbound buffer once.

        On a partial send only the unsent suffix is kept. On failure the
        buffer is left untouched so the next tick retries it.

        Returns:
            Number of bytes sent (0 on failure or nothing to send).
        """
        if not self.outbound:
            return 0

        try:
            sent = self.socket.send(bytes(self.outbound))
        except OSError:
            # Includes BlockingIOError: kernel buffer full, retry next tick
            return 0

        self.outbound.remove_n(0, sent)
        return sent

    def close(self) -> None:
        """Close the socket and release both buffers."""
        try:
            self.socket.close()
        except OSError:
            pass  # Already closed

        self.inbound.clear()
        self.outbound.clear()
