"""
Unit tests for the session registry.
"""

from chatserver.chat import Session, SessionState, SessionRegistry


class TestSessionRegistry:
    """Tests for SessionRegistry."""

    def test_add_is_identity_only(self):
        registry = SessionRegistry()
        session = Session(identity=4)
        registry.add(session)

        assert 4 in registry
        assert registry.get(4) is session
        assert len(registry) == 1
        assert registry.name_count == 0

    def test_claim_name(self):
        registry = SessionRegistry()
        session = Session(identity=4)
        registry.add(session)

        assert registry.claim_name(session, "alice")
        assert session.name == "alice"
        assert registry.find_by_name("alice") is session
        assert registry.name_taken("alice")

    def test_names_are_unique(self):
        registry = SessionRegistry()
        first, second = Session(identity=4), Session(identity=5)
        registry.add(first)
        registry.add(second)

        assert registry.claim_name(first, "alice")
        assert not registry.claim_name(second, "alice")
        assert second.name == ""
        assert registry.find_by_name("alice") is first

    def test_claim_adds_one_name_entry(self):
        registry = SessionRegistry()
        session = Session(identity=4)
        registry.add(session)

        registry.claim_name(session, "alice")
        assert registry.name_count == 1
        assert registry.find_by_name("bob") is None

    def test_names_are_case_sensitive(self):
        registry = SessionRegistry()
        first, second = Session(identity=4), Session(identity=5)
        registry.add(first)
        registry.add(second)

        registry.claim_name(first, "alice")
        assert registry.claim_name(second, "Alice")

    def test_remove_drops_both_entries(self):
        registry = SessionRegistry()
        session = Session(identity=4)
        registry.add(session)
        registry.claim_name(session, "alice")

        assert registry.remove(4) is session
        assert 4 not in registry
        assert not registry.name_taken("alice")
        assert registry.remove(4) is None

    def test_chatting(self):
        registry = SessionRegistry()
        alice = Session(identity=1, state=SessionState.CHAT, name="alice")
        bob = Session(identity=2, state=SessionState.CHAT, name="bob")
        newcomer = Session(identity=3)
        for s in (alice, bob, newcomer):
            registry.add(s)

        assert set(s.identity for s in registry.chatting()) == {1, 2}
        assert [s.identity for s in registry.chatting(exclude=alice)] == [2]
        assert len(registry.sessions()) == 3
