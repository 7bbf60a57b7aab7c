"""
=============================================================================
CONTAINERS
=============================================================================

The two generic containers every other component is built on:

    Sequence[T]      Growable sequence with (len + n) * 2 growth
    HashMap[K, V]    Open-chaining hash map, doubles at half-full buckets

Plus the hash functions the server uses for its keys:

    fnv1a_hash       Usernames and command aliases
    handle_hash      Integer connection handles

=============================================================================
"""

from .sequence import Sequence
from .hashmap import HashMap, fnv1a_hash, handle_hash, DEFAULT_CAPACITY

__all__ = [
    "Sequence",
    "HashMap",
    "fnv1a_hash",
    "handle_hash",
    "DEFAULT_CAPACITY",
]
