"""
=============================================================================
SESSION REGISTRY
=============================================================================

Two maps over the same Session objects:

    ┌──────────────────────┐            ┌──────────────────────┐
    │   by identity        │            │   by name            │
    │   (every session)    │            │   (logged in only)   │
    ├──────────────────────┤            ├──────────────────────┤
    │   7  ──────────────────► Session ◄──────────  "alice"    │
    │   9  ──────────────────► Session ◄──────────  "bob"      │
    │  12  ──────────────────► Session   (still in LOGIN)      │
    └──────────────────────┘            └──────────────────────┘

INVARIANTS:
- by identity holds exactly the live sessions
- a session is in by name iff its name is non-empty, and names are unique

Sessions are owned here. Everything else refers to a session by its
integer identity and looks it up when it needs it.

=============================================================================
"""

import operator
from typing import Iterator, List, Optional

from ..containers import HashMap, fnv1a_hash, handle_hash, DEFAULT_CAPACITY
from .session import Session, SessionState


class SessionRegistry:
    """Identity→Session and name→Session maps kept in step."""

    def __init__(self, capacity: int = DEFAULT_CAPACITY):
        self._by_identity: HashMap[int, Session] = HashMap(handle_hash, capacity=capacity)
        self._by_name: HashMap[str, Session] = HashMap(fnv1a_hash, operator.eq, capacity=capacity)

    def __len__(self) -> int:
        return len(self._by_identity)

    def __contains__(self, identity: int) -> bool:
        return identity in self._by_identity

    # =========================================================================
    # LOOKUP
    # =========================================================================

    def get(self, identity: int) -> Session:
        """
        Session for a live identity.

        Raises:
            KeyError: If no session has this identity.
        """
        return self._by_identity[identity]

    def find(self, identity: int) -> Optional[Session]:
        return self._by_identity.get(identity)

    def find_by_name(self, name: str) -> Optional[Session]:
        return self._by_name.get(name)

    def name_taken(self, name: str) -> bool:
        return name in self._by_name

    @property
    def name_count(self) -> int:
        """Number of sessions that have claimed a name."""
        return len(self._by_name)

    def sessions(self) -> List[Session]:
        """Snapshot of every live session, in registry order."""
        return list(self._by_identity.values())

    def chatting(self, exclude: Optional[Session] = None) -> Iterator[Session]:
        """Sessions in CHAT state, optionally skipping one."""
        for session in self._by_identity.values():
            if session is exclude:
                continue
            if session.state is SessionState.CHAT:
                yield session

    # =========================================================================
    # MUTATION
    # =========================================================================

    def add(self, session: Session) -> None:
        """Register a new session by identity only."""
        self._by_identity[session.identity] = session

    def claim_name(self, session: Session, name: str) -> bool:
        """
        Give `session` the display name `name`.

        Returns:
            False (and changes nothing) if the name is already taken.
        """
        if self.name_taken(name):
            return False

        session.name = name
        self._by_name[name] = session
        return True

    def remove(self, identity: int) -> Optional[Session]:
        """
        Drop a session from both maps.

        Returns:
            The removed session, or None if it wasn't registered.
        """
        session = self._by_identity.get(identity)
        if session is None:
            return None

        self._by_identity.remove(identity)

        if session.name and self._by_name.get(session.name) is session:
            self._by_name.remove(session.name)

        return session
