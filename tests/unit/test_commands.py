"""
Unit tests for slash commands.
"""

import pytest

from chatserver.chat import Command, COMMANDS, SessionState


HELP_TEXT = (
    "Available commands:\r\n"
    " - help (h): Show this help message.\r\n"
    " - exit (e / quit / q): Exit AuroraComms.\r\n"
    " - info (i): Show server information.\r\n"
    " - list (l): List online users.\r\n"
    " - whisper (w / msg / m): Send a private message.\r\n"
    ">"
)


class TestCommandTable:
    """Tests for alias lookup."""

    @pytest.mark.parametrize("alias,command", [
        ("help", Command.HELP), ("h", Command.HELP),
        ("exit", Command.EXIT), ("e", Command.EXIT), ("quit", Command.EXIT), ("q", Command.EXIT),
        ("info", Command.INFO), ("i", Command.INFO),
        ("list", Command.LIST), ("l", Command.LIST),
        ("whisper", Command.WHISPER), ("w", Command.WHISPER),
        ("msg", Command.WHISPER), ("m", Command.WHISPER),
    ])
    def test_aliases(self, harness, alias, command):
        assert harness.app.commands.lookup(alias) is command

    def test_lookup_is_case_sensitive(self, harness):
        assert harness.app.commands.lookup("Help") is None
        assert harness.app.commands.lookup("W") is None

    def test_every_command_is_listed(self):
        assert {info.command for info in COMMANDS} == set(Command)


class TestHelp:
    """Tests for /help and fallbacks to it."""

    @pytest.mark.parametrize("line", ["/help", "/h", "/", "/dance", "/Help"])
    def test_help(self, harness, alice_and_bob, line):
        alice, _ = alice_and_bob
        harness.say(alice, line)
        assert alice.recv() == HELP_TEXT


class TestInfoAndList:
    """Tests for /info and /list."""

    def test_info(self, harness, alice_and_bob):
        alice, _ = alice_and_bob
        harness.connect()  # Counted even before login

        harness.say(alice, "/info")

        assert alice.recv() == (
            "AuroraComms Server\r\n"
            " - Uptime: 0 days\r\n"
            " - Connected users: 3\r\n"
            ">"
        )

    def test_list(self, harness, alice_and_bob):
        alice, bob = alice_and_bob
        harness.connect()  # Not in CHAT, not listed

        harness.say(alice, "/l")

        assert alice.recv() == "Online users:\r\n - alice (You)\r\n - bob\r\n>"

    def test_list_skips_users_at_exit_prompt(self, harness, alice_and_bob):
        alice, bob = alice_and_bob
        harness.say(bob, "/exit")

        harness.say(alice, "/list")

        assert alice.recv() == "Online users:\r\n - alice (You)\r\n>"


class TestExitCommand:
    """Tests for /exit and its aliases."""

    @pytest.mark.parametrize("line", ["/exit", "/e", "/quit", "/q"])
    def test_exit_aliases(self, harness, alice_and_bob, line):
        alice, _ = alice_and_bob
        harness.say(alice, line)
        assert harness.session(alice).state is SessionState.EXIT


class TestWhisper:
    """Tests for /whisper."""

    def test_delivery_and_acknowledgement(self, harness, alice_and_bob):
        alice, bob = alice_and_bob

        harness.say(bob, "/whisper alice hello there")

        assert alice.recv() == "\r\n[bob -> You]: hello there\r\n>"
        assert bob.recv() == "[You -> alice]: hello there\r\n>"

    def test_short_alias(self, harness, alice_and_bob):
        alice, bob = alice_and_bob
        harness.say(alice, "/m bob hi")
        assert bob.recv() == "\r\n[alice -> You]: hi\r\n>"

    def test_not_found(self, harness, alice_and_bob):
        alice, bob = alice_and_bob

        harness.say(bob, "/whisper ghost boo")

        assert bob.recv() == "User 'ghost' not found.\r\n>"
        assert alice.recv() == ""

    def test_recipient_not_in_chat(self, harness, alice_and_bob):
        alice, bob = alice_and_bob
        harness.say(alice, "/exit")
        alice.recv()

        harness.say(bob, "/w alice psst")

        assert bob.recv() == "User 'alice' is not in the chat.\r\n>"
        assert alice.recv() == ""

    @pytest.mark.parametrize("line", ["/whisper", "/whisper   ", "/whisper alice", "/w alice   "])
    def test_usage(self, harness, alice_and_bob, line):
        alice, bob = alice_and_bob

        harness.say(bob, line)

        assert bob.recv() == "Usage: /whisper <username> <message>\r\n>"
        assert alice.recv() == ""
