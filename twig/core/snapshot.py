"""Read-only view of a persisted tree, used as the merge base."""

from typing import List, Optional

from .errors import NotFoundError
from .interfaces import ObjectReader
from .objects import Tree, TreeEntry


class TreeSnapshot:
    """
    One level of a committed tree.

    Children are loaded lazily from the object reader the first time
    they are asked for.
    """

    def __init__(self, reader: ObjectReader, tree_hash: str, tree: Optional[Tree] = None):
        """
        Args:
            reader: Object reader (anything with ``read_object``)
            tree_hash: Hash of the tree object
            tree: Already loaded tree, if the caller has it
        """
        self.reader = reader
        self.hash = tree_hash
        self._tree = tree

    @classmethod
    def load(cls, reader: ObjectReader, tree_hash: str) -> 'TreeSnapshot':
        """Load a snapshot, checking that ``tree_hash`` names a tree."""
        obj = reader.read_object(tree_hash)
        if not isinstance(obj, Tree):
            raise NotFoundError(f"{tree_hash} is a {obj.type}, not a tree")
        return cls(reader, tree_hash, obj)

    @property
    def tree(self) -> Tree:
        if self._tree is None:
            self._tree = TreeSnapshot.load(self.reader, self.hash).tree
        return self._tree

    @property
    def contents(self) -> List[TreeEntry]:
        """Entries of this level in stored order."""
        return list(self.tree.entries)

    def child(self, name: str) -> Optional['TreeSnapshot']:
        """Snapshot of subdirectory ``name``, or None if there is no such directory."""
        entry = self.tree.get(name)
        if entry is None or not entry.is_tree:
            return None
        return TreeSnapshot(self.reader, entry.hash)

    def __truediv__(self, name: str) -> Optional['TreeSnapshot']:
        return self.child(name)

    def __iter__(self):
        return iter(self.contents)

    def __len__(self) -> int:
        return len(self.tree)

    def __repr__(self) -> str:
        return f"TreeSnapshot(hash={self.hash[:7]})"
