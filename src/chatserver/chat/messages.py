"""
=============================================================================
MESSAGE TEMPLATES
=============================================================================

Every line of text the server shows a user is built here, so the wording
lives in one place and the protocol code only decides WHEN to send.

Multi-line messages are joined with CRLF, the wire line ending:

    welcome_banner("AuroraComms", 2, 0)
      → "Welcome to AuroraComms!\\r\\n"
        "There are currently 2 users online.\\r\\n"
        "Server uptime: 0 days\\r\\n"
        ...

None of these add the trailing CRLF or the prompt. Output does that.

=============================================================================
"""

from typing import Iterable, Tuple


CRLF = "\r\n"
PROMPT = ">"


def _lines(*lines: str) -> str:
    return CRLF.join(lines)


def uptime(days: int) -> str:
    return f"{days} days"


# =============================================================================
# LOGIN
# =============================================================================

def welcome_banner(server_name: str, users_online: int, uptime_days: int) -> str:
    if users_online == 1:
        count = "There is currently 1 user online."
    else:
        count = f"There are currently {users_online} users online."

    return _lines(
        f"Welcome to {server_name}!",
        count,
        f"Server uptime: {uptime(uptime_days)}",
        "",
        "Enter a username between 2-16 characters long.",
        "It may include letters, numbers and underscores.",
    )


USERNAME_TAKEN = "Username is taken. Please choose another one."

USERNAME_INVALID = (
    "Username must be between 2-16 characters long and may only contain "
    "letters, numbers, and underscores. Please try again."
)


# =============================================================================
# CHAT
# =============================================================================

def chat_greeting(name: str) -> str:
    return f"You may now chat with others, {name}!"


def joined(name: str) -> str:
    return f"{name} joins the chat!"


def left(name: str) -> str:
    return f"{name} has left the chat."


def chat_message(sender: str, text: str) -> str:
    return f"[{sender}]: {text}"


def chat_echo(text: str) -> str:
    return f"[You]: {text}"


# =============================================================================
# EXIT
# =============================================================================

EXIT_CONFIRM = "Are you sure you want to exit? (y/n)"


# =============================================================================
# COMMANDS
# =============================================================================

def help_text(server_name: str, commands: Iterable[Tuple[str, Tuple[str, ...], str]]) -> str:
    """
    Args:
        commands: (name, other aliases, description) per command.
    """
    lines = ["Available commands:"]
    for name, aliases, description in commands:
        if aliases:
            lines.append(f" - {name} ({' / '.join(aliases)}): {description.format(server=server_name)}")
        else:
            lines.append(f" - {name}: {description.format(server=server_name)}")
    return _lines(*lines)


def server_info(server_name: str, uptime_days: int, connected_users: int) -> str:
    return _lines(
        f"{server_name} Server",
        f" - Uptime: {uptime(uptime_days)}",
        f" - Connected users: {connected_users}",
    )


ONLINE_USERS_HEADER = "Online users:"


def online_user(name: str, is_self: bool = False) -> str:
    return f" - {name} (You)" if is_self else f" - {name}"


def whisper_received(sender: str, text: str) -> str:
    return f"[{sender} -> You]: {text}"


def whisper_sent(recipient: str, text: str) -> str:
    return f"[You -> {recipient}]: {text}"


def user_not_found(name: str) -> str:
    return f"User '{name}' not found."


def user_not_in_chat(name: str) -> str:
    return f"User '{name}' is not in the chat."


WHISPER_USAGE = "Usage: /whisper <username> <message>"
