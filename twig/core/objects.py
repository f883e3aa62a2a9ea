"""Git objects for twig."""

from abc import ABC, abstractmethod
from typing import Optional
from .hash import hash_raw_object


MODE_FILE = '100644'
MODE_GITLINK = '160000'
MODE_TREE = '40000'

# Older writers pad the directory mode with a leading zero.
TREE_MODES = ('40000', '040000')

HASH_SIZE = 20


def encode_name(name: str) -> bytes:
    """Encode an entry name the way it is stored in tree objects."""
    return name.encode('utf-8', 'surrogateescape')


def decode_name(raw: bytes) -> str:
    """Decode a stored entry name, keeping undecodable bytes intact."""
    return raw.decode('utf-8', 'surrogateescape')


class TwigObject(ABC):
    """Base class for all objects."""

    def __init__(self):
        self._hash: Optional[str] = None

    @abstractmethod
    def serialize(self) -> bytes:
        """
        Serialize object to bytes.

        Returns:
            bytes: Serialized object data
        """
        pass

    @abstractmethod
    def deserialize(self, data: bytes) -> None:
        """
        Deserialize object from bytes.

        Args:
            data: Serialized object data
        """
        pass

    @property
    def type(self) -> str:
        """
        Return object type name.

        Returns:
            str: Object type (blob, tree, commit)
        """
        return self.__class__.__name__.lower()

    def compute_hash(self) -> str:
        """
        Compute and cache object hash.

        Objects are hashed with a header containing the type and size.
        Format: <type> <size>\\0<content>

        Returns:
            str: 40-character SHA-1 hash
        """
        if self._hash is None:
            self._hash = hash_raw_object(self.serialize(), self.type)
        return self._hash

    @property
    def hash(self) -> str:
        """
        Get object hash.

        Returns:
            str: 40-character SHA-1 hash
        """
        return self.compute_hash()


class Blob(TwigObject):
    """
    Represents file content.

    A blob stores the raw content of a file without any metadata
    like filename or permissions.
    """

    def __init__(self, data: Optional[bytes] = None):
        super().__init__()
        self.data = data or b''

    def serialize(self) -> bytes:
        return self.data

    def deserialize(self, data: bytes) -> None:
        self.data = data
        self._hash = None

    def __repr__(self) -> str:
        """String representation of blob."""
        size = len(self.data)
        return f"Blob(hash={self.hash[:7]}, size={size})"


class TreeEntry:
    """
    Represents a single entry in a tree.

    Each entry contains:
    - mode: Mode text exactly as stored (e.g. '100644' for a file, '40000' for a directory)
    - type: Object type ('blob', 'tree' or 'commit' for a submodule link)
    - hash: SHA-1 hash of the object (hex)
    - name: Filename or directory name
    """

    def __init__(self, mode: str, obj_type: str, obj_hash: str, name: str):
        """
        Initialize tree entry.

        Args:
            mode: File mode (e.g., '100644', '100755', '40000')
            obj_type: Object type ('blob' or 'tree')
            obj_hash: SHA-1 hash of object
            name: Entry name
        """
        self.mode = mode
        self.type = obj_type
        self.hash = obj_hash
        self.name = name

    @property
    def is_tree(self) -> bool:
        return self.type == 'tree'

    @property
    def sort_key(self) -> bytes:
        """
        Canonical ordering key.

        Trees sort as if their name carried a trailing slash, so a file
        'foo' and a directory 'foo' never share a key.
        """
        key = encode_name(self.name)
        if self.is_tree:
            key += b'/'
        return key

    def encode(self) -> bytes:
        """Binary record: ``<mode> <name>\\0<raw hash bytes>``."""
        return (self.mode.encode() + b' ' + encode_name(self.name) + b'\0'
                + bytes.fromhex(self.hash))

    def __eq__(self, other) -> bool:
        if not isinstance(other, TreeEntry):
            return NotImplemented
        return (self.mode, self.type, self.hash, self.name) == \
            (other.mode, other.type, other.hash, other.name)

    def __repr__(self) -> str:
        """String representation."""
        return f"TreeEntry({self.mode} {self.type} {self.hash[:7]} {self.name})"

    def __lt__(self, other: 'TreeEntry') -> bool:
        """Sort entries in canonical tree order."""
        return self.sort_key < other.sort_key


def entry_type_for_mode(mode: str) -> str:
    """Object type a tree entry with ``mode`` points at."""
    if mode in TREE_MODES:
        return 'tree'
    if mode == MODE_GITLINK:
        return 'commit'
    return 'blob'


class Tree(TwigObject):
    """
    Represents directory structure.

    A tree contains entries pointing to blobs (files) and other trees (subdirectories).
    """

    def __init__(self):
        """Initialize empty tree."""
        super().__init__()
        self.entries: list[TreeEntry] = []

    def add_entry(self, mode: str, obj_type: str, obj_hash: str, name: str) -> None:
        """
        Add entry to tree.

        Args:
            mode: File mode
            obj_type: Object type ('blob' or 'tree')
            obj_hash: Object hash
            name: Entry name
        """
        entry = TreeEntry(mode, obj_type, obj_hash, name)
        self.entries.append(entry)
        self.entries.sort()
        self._hash = None

    def get(self, name: str) -> Optional[TreeEntry]:
        """Return the entry called ``name``, if any."""
        for entry in self.entries:
            if entry.name == name:
                return entry
        return None

    def serialize(self) -> bytes:
        """
        Serialize tree to the canonical binary format.

        Format: <mode> <name>\\0<20-byte hash>
        Entries are ordered by sort key, with no separator between records.

        Returns:
            bytes: Serialized tree data
        """
        return b''.join(entry.encode() for entry in sorted(self.entries))

    def deserialize(self, data: bytes) -> None:
        """
        Deserialize tree from the canonical binary format.

        Stored order and mode text are kept as they are, so re-serializing
        a tree reproduces its bytes.

        Args:
            data: Serialized tree data
        """
        self.entries = []
        pos = 0

        while pos < len(data):
            space_pos = data.index(b' ', pos)
            mode = data[pos:space_pos].decode()

            null_pos = data.index(b'\0', space_pos)
            name = decode_name(data[space_pos + 1:null_pos])

            hash_bytes = data[null_pos + 1:null_pos + 1 + HASH_SIZE]
            if len(hash_bytes) != HASH_SIZE:
                raise ValueError(f"Truncated tree entry: {name}")

            self.entries.append(TreeEntry(mode, entry_type_for_mode(mode), hash_bytes.hex(), name))
            pos = null_pos + 1 + HASH_SIZE

        self._hash = None

    def __len__(self) -> int:
        return len(self.entries)

    def __repr__(self) -> str:
        """String representation."""
        return f"Tree(entries={len(self.entries)})"


class Commit(TwigObject):
    """
    Represents a commit with metadata.

    A commit captures:
    - Snapshot of project (tree hash)
    - Parent commit(s) for history
    - Author and committer info
    - Timestamp
    - Commit message
    """

    def __init__(self):
        """Initialize empty commit."""
        super().__init__()
        self.tree: str = ''
        self.parents: list[str] = []
        self.author: str = ''
        self.author_time: int = 0
        self.author_timezone: str = '+0000'
        self.committer: str = ''
        self.committer_time: int = 0
        self.committer_timezone: str = '+0000'
        self.message: str = ''

    def serialize(self) -> bytes:
        """
        Serialize commit to the canonical text format.

        Format:
        tree <tree-hash>
        parent <parent-hash>  (zero or more)
        author Name <email> <timestamp> <timezone>
        committer Name <email> <timestamp> <timezone>

        <commit message>

        The message is written verbatim.

        Returns:
            bytes: Serialized commit data
        """
        lines = []

        lines.append(f'tree {self.tree}')

        for parent in self.parents:
            lines.append(f'parent {parent}')

        lines.append(f'author {self.author} {self.author_time} {self.author_timezone}')
        lines.append(f'committer {self.committer} {self.committer_time} {self.committer_timezone}')

        lines.append('')
        lines.append(self.message)

        return '\n'.join(lines).encode()

    def deserialize(self, data: bytes) -> None:
        """
        Deserialize commit from the canonical text format.

        Args:
            data: Serialized commit data
        """
        content = data.decode()
        lines = content.split('\n')
        self.parents = []

        message_start = len(lines)
        for i, line in enumerate(lines):
            if not line:
                message_start = i + 1
                break

            if line.startswith('tree '):
                self.tree = line[5:]

            elif line.startswith('parent '):
                self.parents.append(line[7:])

            elif line.startswith('author '):
                parts = line[7:].rsplit(' ', 2)
                self.author = parts[0]
                self.author_time = int(parts[1])
                self.author_timezone = parts[2]

            elif line.startswith('committer '):
                parts = line[10:].rsplit(' ', 2)
                self.committer = parts[0]
                self.committer_time = int(parts[1])
                self.committer_timezone = parts[2]

        self.message = '\n'.join(lines[message_start:])
        self._hash = None

    @classmethod
    def create(
        cls,
        tree_hash: str,
        parent_hashes: list[str],
        author: str,
        committer: str,
        message: str,
        timestamp: Optional[int] = None,
        timezone: str = '+0000'
    ) -> 'Commit':
        """
        Create a new commit.

        Args:
            tree_hash: Hash of tree object
            parent_hashes: List of parent commit hashes
            author: Author name and email (e.g., "Name <email>")
            committer: Committer name and email
            message: Commit message
            timestamp: Unix timestamp (defaults to current time)
            timezone: Timezone offset (e.g., "+0000", "-0500")

        Returns:
            Commit: New commit object
        """
        import time

        commit = cls()
        commit.tree = tree_hash
        commit.parents = list(parent_hashes)
        commit.author = author
        commit.committer = committer
        commit.message = message

        if timestamp is None:
            timestamp = int(time.time())

        commit.author_time = timestamp
        commit.committer_time = timestamp
        commit.author_timezone = timezone
        commit.committer_timezone = timezone

        return commit

    def __repr__(self) -> str:
        """String representation."""
        parent_info = f", parents={len(self.parents)}" if self.parents else ""
        msg_preview = self.message.split('\n')[0][:50]
        return f"Commit(hash={self.hash[:7]}{parent_info}, msg='{msg_preview}')"


OBJECT_TYPES = {
    'blob': Blob,
    'tree': Tree,
    'commit': Commit,
}
