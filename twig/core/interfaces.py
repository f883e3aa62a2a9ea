"""Collaborator contracts used by the tree writer and commit builder.

The disk-backed ``Repository`` implements all of them; any other store
only needs the methods below.
"""

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from .actor import Identity
    from .objects import TwigObject
    from .snapshot import TreeSnapshot


class ObjectWriter(Protocol):
    def put(self, data: bytes, kind: str) -> str:
        """
        Store a raw object and return its hex hash.

        Must be content addressed and durable once it returns. The
        returned hash is used in parent tree records and commits. The
        unchanged-tree check predicts hashes with git's SHA-1 object
        hashing, so it only matches stores that hash the same way.
        Raises ``WriteError`` on failure.
        """
        ...


class ObjectReader(Protocol):
    def read_object(self, obj_hash: str) -> 'TwigObject':
        """Load an object; raises ``NotFoundError`` if it is missing."""
        ...


class RefStore(Protocol):
    def update(self, ref_name: str, new_hash: str) -> None:
        """Point ``ref_name`` at ``new_hash``; raises ``RefUpdateError``."""
        ...


class TreeResolver(Protocol):
    def resolve(self, ref: str) -> 'TreeSnapshot':
        """Resolve a branch, tag or sha to a tree; raises ``NotFoundError``."""
        ...


class IdentityResolver(Protocol):
    def resolve_identity(self) -> 'Identity':
        """Configured user identity; raises ``IdentityError`` if unset."""
        ...
