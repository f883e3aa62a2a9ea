"""Merge staged changes over a base tree and write the result.

Each directory level is merged and encoded in the canonical binary tree
format:

    <mode> <name>\\0<raw hash>   (repeated, no separators)

Records are ordered by sort key: the entry name, with '/' appended for
directories. Any other order changes the tree hash.
"""

import logging
from typing import Dict, List, Optional, Tuple

from twig.core.hash import hash_raw_object
from twig.core.interfaces import ObjectWriter
from twig.core.objects import MODE_FILE, MODE_TREE, TreeEntry, encode_name
from twig.core.snapshot import TreeSnapshot
from twig.core.staging import Deleted, Directory, FileContent, StagedTree

logger = logging.getLogger(__name__)


class ObjectBatch:
    """
    Objects produced by one tree build, in creation order.

    Hashes are predicted with git's SHA-1 object hashing so the root can
    be compared before anything is stored. Children are always added
    before the trees that reference them, so flushing in order never
    persists a tree whose entries are missing.
    """

    def __init__(self):
        self.objects: Dict[str, Tuple[str, bytes, Optional[List[TreeEntry]]]] = {}
        self.root: Optional[str] = None
        self.stored: Dict[str, str] = {}

    def add(self, data: bytes, kind: str, entries: Optional[List[TreeEntry]] = None) -> str:
        """Queue an object and return its predicted hash."""
        obj_hash = hash_raw_object(data, kind)
        self.objects.setdefault(obj_hash, (kind, data, entries))
        return obj_hash

    def add_tree(self, entries: List[TreeEntry]) -> str:
        """Queue a tree from entries already in sort-key order."""
        return self.add(b''.join(entry.encode() for entry in entries), 'tree', entries)

    def _relink(self, entries: List[TreeEntry]) -> bytes:
        return b''.join(
            TreeEntry(e.mode, e.type, self.stored.get(e.hash, e.hash), e.name).encode()
            for e in entries
        )

    def flush(self, writer: ObjectWriter) -> Optional[str]:
        """
        Persist every queued object through ``writer``.

        The writer names objects. Tree records are encoded with the hashes
        it returned for their children, which are the predicted ones for
        any store that hashes the way git does.

        Returns:
            The writer's hash for the root tree
        """
        for obj_hash, (kind, data, entries) in self.objects.items():
            if entries is not None:
                data = self._relink(entries)
            stored = writer.put(data, kind)
            self.stored[obj_hash] = stored
            logger.debug("wrote %s %s (%d bytes)", kind, stored, len(data))
        return self.stored.get(self.root, self.root)

    def __len__(self) -> int:
        return len(self.objects)

    def __repr__(self) -> str:
        return f"ObjectBatch(root={self.root}, objects={len(self.objects)})"


def _dir_key(name: str) -> bytes:
    return encode_name(name) + b'/'


def _file_key(name: str) -> bytes:
    return encode_name(name)


class TreeWriter:
    """
    Serializes a ``StagedTree`` over an optional ``TreeSnapshot``.

    Merge rules per level:
    - base entries are copied as they are (mode text and hash unchanged)
    - staged file content replaces the same-named file or directory
    - a staged directory is merged recursively against the base child
      of that name, and replaces a same-named base file; it is written
      even when it merges to nothing
    - a tombstone removes the same-named file or directory
    """

    def __init__(self, writer: ObjectWriter):
        """
        Args:
            writer: Object writer collaborator (``put(data, kind) -> hash``)
        """
        self.writer = writer

    def write_blob(self, data: bytes) -> str:
        """Store ``data`` as a blob and return its hash."""
        return self.writer.put(data, 'blob')

    def write_tree(self, staged: StagedTree, base: Optional[TreeSnapshot] = None) -> str:
        """
        Merge, encode and persist every level, children first.

        Args:
            staged: Pending changes
            base: Tree the changes apply to, or None for an empty base

        Returns:
            str: Hash the writer gave the root tree
        """
        return self.build(staged, base).flush(self.writer)

    def build(self, staged: StagedTree, base: Optional[TreeSnapshot] = None) -> ObjectBatch:
        """
        Merge and encode every level without persisting anything.

        Returns:
            ObjectBatch: Queued blobs and trees; ``root`` is the root tree hash
        """
        batch = ObjectBatch()
        batch.root = self._build_level(staged, StagedTree.ROOT, base, batch)
        return batch

    def merge_level(self, staged: StagedTree, node: int, base: Optional[TreeSnapshot],
                    batch: ObjectBatch) -> Dict[bytes, TreeEntry]:
        """Merged entries of one level, keyed by sort key."""
        merged: Dict[bytes, TreeEntry] = {}

        if base is not None:
            for entry in base.contents:
                merged[entry.sort_key] = entry

        for name, value in staged.children(node).items():
            if isinstance(value, FileContent):
                blob_hash = batch.add(value.data, 'blob')
                merged.pop(_dir_key(name), None)
                merged[_file_key(name)] = TreeEntry(MODE_FILE, 'blob', blob_hash, name)

            elif isinstance(value, Directory):
                child_base = base.child(name) if base is not None else None
                tree_hash = self._build_level(staged, value.node, child_base, batch)
                merged.pop(_file_key(name), None)
                merged[_dir_key(name)] = TreeEntry(MODE_TREE, 'tree', tree_hash, name)

            elif isinstance(value, Deleted):
                merged.pop(_file_key(name), None)
                merged.pop(_dir_key(name), None)

        return merged

    def _build_level(self, staged: StagedTree, node: int, base: Optional[TreeSnapshot],
                     batch: ObjectBatch) -> str:
        merged = self.merge_level(staged, node, base, batch)
        tree_hash = batch.add_tree([merged[key] for key in sorted(merged)])
        logger.debug("built tree %s with %d entries", tree_hash, len(merged))
        return tree_hash
