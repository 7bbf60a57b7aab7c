"""
=============================================================================
LINE EXTRACTION AND INPUT VALIDATION
=============================================================================

Clients are usually telnet or netcat, so "lines" can end in \\r\\n, \\n,
or a bare \\r, and may contain control bytes (arrow keys, backspaces,
telnet negotiation). get_line() turns the raw inbound buffer into clean
printable lines:

    inbound:  b"  hi\\x08 there  \\r\\nnext"
                                    │
                         get_line() ▼
    returns:  "hi there"        (control byte dropped, spaces trimmed)
    inbound:  b"next"           (partial line waits for more bytes)

=============================================================================
"""

from typing import Optional

from ..containers import Sequence


COMMAND_PREFIX = "/"

USERNAME_MIN_LENGTH = 2
USERNAME_MAX_LENGTH = 16

_TERMINATORS = (ord("\r"), ord("\n"))
_PRINTABLE_MIN = 0x20
_PRINTABLE_MAX = 0x7E


def get_line(buffer: Sequence[int]) -> Optional[str]:
    """
    Pull one complete line off the front of `buffer`.

    - Only printable ASCII (0x20-0x7E) before the terminator is kept.
    - The terminator and any terminators directly after it are consumed,
      printable or not, so "\\r\\n" counts as one line ending.
    - Leading and trailing spaces are trimmed (tabs etc. are already gone).

    Args:
        buffer: Inbound byte buffer. Consumed in place.

    Returns:
        The line, or None if there's no terminator yet (nothing consumed).
    """
    length = None
    for i, byte in enumerate(buffer):
        if byte in _TERMINATORS:
            length = i
            break

    if length is None:
        return None

    chars = []
    for i in range(length):
        byte = buffer[i]
        if _PRINTABLE_MIN <= byte <= _PRINTABLE_MAX:
            chars.append(chr(byte))

    end = length
    while end < len(buffer) and buffer[end] in _TERMINATORS:
        end += 1

    buffer.remove_n(0, end)

    return "".join(chars).strip(" ")


def is_valid_username(name: str) -> bool:
    """2-16 characters, ASCII letters, digits and underscores only."""
    if not USERNAME_MIN_LENGTH <= len(name) <= USERNAME_MAX_LENGTH:
        return False

    for c in name:
        if not (("a" <= c <= "z") or ("A" <= c <= "Z") or ("0" <= c <= "9") or c == "_"):
            return False

    return True


def is_command(line: str) -> bool:
    return line.startswith(COMMAND_PREFIX)
