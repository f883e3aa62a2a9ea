"""Staged tree: pending additions and deletions for the next commit."""

from dataclasses import dataclass
from typing import Dict, Iterator, List, Tuple, Union

from .errors import InvalidPathError


@dataclass(frozen=True)
class FileContent:
    """New content for a file."""
    data: bytes

    def __repr__(self) -> str:
        return f"FileContent(size={len(self.data)})"


@dataclass(frozen=True)
class Deleted:
    """Tombstone: the entry is removed from the base tree."""

    def __repr__(self) -> str:
        return "DELETED"


@dataclass(frozen=True)
class Directory:
    """Intermediate directory; ``node`` indexes the owning tree's arena."""
    node: int


DELETED = Deleted()

StagedEntry = Union[FileContent, Deleted, Directory]


def split_path(path: str) -> List[str]:
    """
    Split a slash-delimited path into its segments.

    Args:
        path: Path including filename, no leading slash

    Returns:
        List of segments; the last one is the entry's own name

    Raises:
        InvalidPathError: For an empty path or an unusable segment
    """
    if not path:
        raise InvalidPathError(path, "path is empty")

    segments = path.split('/')
    for segment in segments:
        if not segment:
            raise InvalidPathError(path, "empty path segment")
        if segment in ('.', '..'):
            raise InvalidPathError(path, f"'{segment}' is not allowed as a path segment")
        if '\0' in segment:
            raise InvalidPathError(path, "NUL byte in path segment")
    return segments


class StagedTree:
    """
    In-memory hierarchy of pending changes.

    Nodes live in an arena owned by the tree. Each node maps a segment
    name to a ``FileContent``, ``DELETED`` or a ``Directory`` pointing at
    another node. Node 0 is the root. Nodes of a directory replaced by a
    leaf are released and reused by later additions.
    """

    ROOT = 0

    def __init__(self):
        self._nodes: List[Dict[str, StagedEntry]] = [{}]
        self._free: List[int] = []

    def _new_node(self) -> int:
        if self._free:
            node = self._free.pop()
            self._nodes[node] = {}
            return node
        self._nodes.append({})
        return len(self._nodes) - 1

    def _release(self, node: int) -> None:
        """Return ``node`` and every directory below it to the free list."""
        for entry in self._nodes[node].values():
            if isinstance(entry, Directory):
                self._release(entry.node)
        self._nodes[node] = {}
        self._free.append(node)

    def _directory_node(self, dirs: List[str]) -> int:
        """Walk ``dirs`` from the root, materializing missing directories."""
        node = self.ROOT
        for name in dirs:
            entry = self._nodes[node].get(name)
            if isinstance(entry, Directory):
                node = entry.node
            else:
                # A staged file or tombstone on the way down becomes a directory
                child = self._new_node()
                self._nodes[node][name] = Directory(child)
                node = child
        return node

    def _stage(self, path: str, entry: StagedEntry) -> None:
        segments = split_path(path)
        node = self._directory_node(segments[:-1])
        previous = self._nodes[node].get(segments[-1])
        if isinstance(previous, Directory):
            self._release(previous.node)
        self._nodes[node][segments[-1]] = entry

    def add(self, path: str, data: Union[bytes, str]) -> None:
        """
        Stage file content at ``path``.

        Overwrites whatever was staged at that exact path, including a
        staged directory.

        Args:
            path: Slash-delimited path including filename
            data: File contents; ``str`` is stored UTF-8 encoded
        """
        if isinstance(data, str):
            data = data.encode('utf-8')
        self._stage(path, FileContent(bytes(data)))

    def delete(self, path: str) -> None:
        """
        Stage removal of the entry at ``path``.

        The tombstone applies to one name only; descendants staged under
        the same path are discarded with the node it replaces.
        """
        self._stage(path, DELETED)

    def children(self, node: int = ROOT) -> Dict[str, StagedEntry]:
        """Entries staged at one level (a copy)."""
        return dict(self._nodes[node])

    def get(self, path: str) -> Union[StagedEntry, None]:
        """Return the entry staged at ``path``, or None."""
        node = self.ROOT
        segments = split_path(path)
        for name in segments[:-1]:
            entry = self._nodes[node].get(name)
            if not isinstance(entry, Directory):
                return None
            node = entry.node
        return self._nodes[node].get(segments[-1])

    def paths(self, node: int = ROOT, prefix: str = '') -> Iterator[Tuple[str, StagedEntry]]:
        """Yield ``(path, entry)`` for every staged leaf, sorted by path."""
        for name in sorted(self._nodes[node]):
            entry = self._nodes[node][name]
            path = f"{prefix}{name}"
            if isinstance(entry, Directory):
                yield from self.paths(entry.node, path + '/')
            else:
                yield path, entry

    def clear(self) -> None:
        """Drop every staged change."""
        self._nodes = [{}]
        self._free = []

    def is_empty(self) -> bool:
        return not self._nodes[self.ROOT]

    def __len__(self) -> int:
        """Number of staged leaves."""
        return sum(1 for _ in self.paths())

    def __repr__(self) -> str:
        return f"StagedTree(entries={len(self)})"
