"""Repository management for twig."""

import logging
import os
import tempfile
import zlib
from pathlib import Path
from typing import Optional, Tuple

from .errors import NotFoundError, WriteError
from .hash import hash_raw_object, object_header
from .objects import OBJECT_TYPES, Commit, Tree, TwigObject
from .snapshot import TreeSnapshot

logger = logging.getLogger(__name__)


class Repository:
    """
    A git repository on disk.

    Stores loose objects under ``.git/objects`` and implements the
    object writer, ref store, tree resolver and identity resolver
    collaborators used by ``Index``.
    """

    def __init__(self, path: str = '.'):
        """
        Initialize repository.

        Args:
            path: Path to repository root (defaults to current directory)
        """
        self.work_tree = Path(path).resolve()
        self.git_dir = self.work_tree / '.git'
        self.objects_dir = self.git_dir / 'objects'
        self.refs_dir = self.git_dir / 'refs'
        self.heads_dir = self.refs_dir / 'heads'
        self.tags_dir = self.refs_dir / 'tags'
        self.head_file = self.git_dir / 'HEAD'
        self.config_file = self.git_dir / 'config'

        # Lazy to avoid circular imports
        self._ref_manager = None
        self._config = None

    @property
    def refs(self):
        """Get RefManager instance."""
        if self._ref_manager is None:
            from .refs import RefManager
            self._ref_manager = RefManager(self)
        return self._ref_manager

    @property
    def config(self):
        """Get Config instance for this repository."""
        if self._config is None:
            from .config import Config
            self._config = Config(self.config_file)
        return self._config

    def init(self, initial_branch: str = 'master') -> 'Repository':
        """
        Initialize a new repository.

        Creates the .git directory structure:
        .git/
        ├── objects/       # Object database
        ├── refs/
        │   ├── heads/     # Branch references
        │   └── tags/      # Tag references
        ├── HEAD           # Current branch
        └── config         # Repository configuration

        Returns:
            Repository: self for method chaining

        Raises:
            FileExistsError: If repository already exists
        """
        if self.git_dir.exists():
            raise FileExistsError(f"Repository already exists at {self.git_dir}")

        self.git_dir.mkdir(parents=True)
        self.objects_dir.mkdir()
        self.refs_dir.mkdir()
        self.heads_dir.mkdir()
        self.tags_dir.mkdir()

        self.head_file.write_text(f'ref: refs/heads/{initial_branch}\n')
        self.config_file.write_text('[core]\n\trepositoryformatversion = 0\n\tbare = false\n')

        return self

    @classmethod
    def find_repository(cls, path: str = '.') -> Optional['Repository']:
        """
        Find repository by searching up the directory tree.

        Args:
            path: Starting path for search

        Returns:
            Repository if found, None otherwise
        """
        current = Path(path).resolve()

        while True:
            if (current / '.git').is_dir():
                return cls(str(current))

            # Reached filesystem root
            if current == current.parent:
                return None

            current = current.parent

    def object_path(self, obj_hash: str) -> Path:
        """
        Get filesystem path for an object.

        Objects are stored in subdirectories named by the first 2 characters
        of the hash, with the remaining 38 characters as the filename.

        Args:
            obj_hash: 40-character SHA-1 hash

        Returns:
            Path: Full path to object file
        """
        return self.objects_dir / obj_hash[:2] / obj_hash[2:]

    def put(self, data: bytes, kind: str) -> str:
        """
        Store a raw object.

        Objects are stored compressed with zlib. The format is:
        <kind> <size>\\0<content>

        Args:
            data: Object body
            kind: 'blob', 'tree' or 'commit'

        Returns:
            str: SHA-1 hash of the object

        Raises:
            WriteError: If the object cannot be written
        """
        if kind not in OBJECT_TYPES:
            raise ValueError(f"Unknown object type: {kind}")

        obj_hash = hash_raw_object(data, kind)
        path = self.object_path(obj_hash)

        if path.exists():
            return obj_hash

        compressed = zlib.compress(object_header(kind, len(data)) + data)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=str(path.parent), prefix='tmp_obj_')
            try:
                with os.fdopen(fd, 'wb') as f:
                    f.write(compressed)
                os.replace(tmp_name, path)
            except BaseException:
                if os.path.exists(tmp_name):
                    os.unlink(tmp_name)
                raise
        except OSError as e:
            raise WriteError(f"Failed to write {kind} {obj_hash}: {e}") from e

        logger.debug("stored %s %s", kind, obj_hash)
        return obj_hash

    def write_object(self, obj: TwigObject) -> str:
        """Store a parsed object and return its hash."""
        return self.put(obj.serialize(), obj.type)

    def read_raw_object(self, obj_hash: str) -> Tuple[str, bytes]:
        """
        Read an object's kind and body.

        Raises:
            NotFoundError: If the object does not exist
            ValueError: If the stored object is malformed
        """
        path = self.object_path(obj_hash)

        if len(obj_hash) != 40 or not path.exists():
            raise NotFoundError(f"Object {obj_hash} not found")

        content = zlib.decompress(path.read_bytes())

        null_idx = content.index(b'\0')
        header = content[:null_idx].decode()
        data = content[null_idx + 1:]

        try:
            kind, size_str = header.split(' ', 1)
            size = int(size_str)
        except ValueError:
            raise ValueError(f"Invalid object header: {header}")

        if len(data) != size:
            raise ValueError(f"Object size mismatch: expected {size}, got {len(data)}")

        return kind, data

    def read_object(self, obj_hash: str) -> TwigObject:
        """
        Read object from repository.

        Args:
            obj_hash: 40-character SHA-1 hash

        Returns:
            TwigObject: Deserialized object (Blob, Tree, or Commit)
        """
        kind, data = self.read_raw_object(obj_hash)

        if kind not in OBJECT_TYPES:
            raise ValueError(f"Unknown object type: {kind}")

        obj = OBJECT_TYPES[kind]()
        obj.deserialize(data)
        return obj

    def object_exists(self, obj_hash: str) -> bool:
        return len(obj_hash) == 40 and self.object_path(obj_hash).exists()

    def find_object_by_prefix(self, prefix: str) -> Optional[str]:
        """
        Expand an abbreviated hash.

        Returns:
            The full hash, or None if no object matches

        Raises:
            NotFoundError: If the prefix is ambiguous
        """
        prefix = prefix.lower()
        if len(prefix) < 4:
            return None

        bucket = self.objects_dir / prefix[:2]
        if not bucket.is_dir():
            return None

        matches = [prefix[:2] + f.name for f in bucket.iterdir()
                   if f.is_file() and f.name.startswith(prefix[2:]) and len(f.name) == 38]
        if len(matches) > 1:
            raise NotFoundError(f"Ambiguous object name: {prefix}")
        return matches[0] if matches else None

    def resolve(self, ref: str) -> TreeSnapshot:
        """
        Resolve a branch, tag, HEAD, commit or tree hash to a tree snapshot.

        Raises:
            NotFoundError: If ``ref`` names no commit or tree
        """
        obj_hash = self.refs.resolve_reference(ref)
        if obj_hash is None:
            raise NotFoundError(f"Not a valid reference: {ref}")

        obj = self.read_object(obj_hash)
        if isinstance(obj, Commit):
            return TreeSnapshot.load(self, obj.tree)
        if isinstance(obj, Tree):
            return TreeSnapshot(self, obj_hash, obj)
        raise NotFoundError(f"{ref} does not name a commit or tree")

    def update(self, ref_name: str, new_hash: str) -> None:
        """Point ``ref_name`` at ``new_hash`` (ref store collaborator)."""
        self.refs.update_ref(ref_name, new_hash)

    def resolve_identity(self):
        """Configured user identity (identity resolver collaborator)."""
        return self.config.resolve_identity()

    def index(self):
        """A fresh staging index bound to this repository."""
        from .index import Index
        return Index.for_repository(self)

    def __repr__(self) -> str:
        """String representation of repository."""
        return f"Repository(path={self.work_tree})"
