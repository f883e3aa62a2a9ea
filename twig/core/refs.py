"""Reference management for twig."""

import logging
import os
from typing import Dict, List, Optional, Tuple

from .errors import RefUpdateError

logger = logging.getLogger(__name__)

HEX_DIGITS = frozenset('0123456789abcdef')


def is_hex(text: str) -> bool:
    return bool(text) and all(c in HEX_DIGITS for c in text.lower())


class RefManager:
    """
    Manages references (branches, tags, HEAD).

    Handles:
    - Symbolic references (HEAD pointing to branch)
    - Direct references (detached HEAD)
    - Loose and packed references
    - Reference resolution
    - Locked reference updates
    """

    def __init__(self, repo):
        """
        Initialize reference manager.

        Args:
            repo: Repository instance
        """
        self.repo = repo
        self.git_dir = repo.git_dir
        self.refs_dir = self.git_dir / 'refs'
        self.heads_dir = self.refs_dir / 'heads'
        self.tags_dir = self.refs_dir / 'tags'
        self.head_file = self.git_dir / 'HEAD'
        self.packed_refs_file = self.git_dir / 'packed-refs'

    def packed_refs(self) -> Dict[str, str]:
        """Refs listed in ``packed-refs``, by full name."""
        if not self.packed_refs_file.exists():
            return {}

        refs = {}
        for line in self.packed_refs_file.read_text().splitlines():
            # Comments and peeled tag lines
            if not line or line.startswith('#') or line.startswith('^'):
                continue
            sha, _, name = line.partition(' ')
            refs[name.strip()] = sha
        return refs

    def _read_full_ref(self, ref_name: str, depth: int = 0) -> Optional[str]:
        if depth > 5:
            return None

        ref_path = self.git_dir / ref_name
        if ref_path.is_file():
            content = ref_path.read_text().strip()
            if content.startswith('ref: '):
                return self._read_full_ref(content[5:], depth + 1)
            return content

        return self.packed_refs().get(ref_name)

    def read_ref(self, ref_name: str) -> Optional[str]:
        """
        Read a reference and return its commit hash.

        Args:
            ref_name: Reference name (e.g., 'refs/heads/main', 'HEAD', 'main')

        Returns:
            Commit hash or None if reference doesn't exist
        """
        if ref_name == 'HEAD':
            return self.resolve_head()

        candidates = [ref_name] if ref_name.startswith('refs/') else [
            f'refs/{ref_name}',
            f'refs/tags/{ref_name}',
            f'refs/heads/{ref_name}',
        ]
        for candidate in candidates:
            value = self._read_full_ref(candidate)
            if value:
                return value

        return None

    def resolve_head(self) -> Optional[str]:
        """
        Resolve HEAD to a commit hash.

        Returns:
            Commit hash or None if HEAD doesn't exist or its branch is unborn
        """
        return self._read_full_ref('HEAD')

    def get_current_branch(self) -> Optional[str]:
        """
        Get the current branch name.

        Returns:
            Branch name or None if in detached HEAD state
        """
        if not self.head_file.exists():
            return None

        content = self.head_file.read_text().strip()

        if content.startswith('ref: refs/heads/'):
            return content[16:]

        # Detached HEAD
        return None

    def is_detached_head(self) -> bool:
        if not self.head_file.exists():
            return False
        return not self.head_file.read_text().startswith('ref: ')

    def full_ref_name(self, ref: str) -> str:
        """
        Expand a short ref name to the ref that an update writes.

        'HEAD' follows a symbolic HEAD to its branch; names outside
        ``refs/`` are branches.
        """
        if ref == 'HEAD':
            if self.head_file.exists():
                content = self.head_file.read_text().strip()
                if content.startswith('ref: '):
                    return content[5:]
            return 'HEAD'
        if ref.startswith('refs/'):
            return ref
        return f'refs/heads/{ref}'

    def update_ref(self, ref: str, new_hash: str) -> str:
        """
        Point a reference at ``new_hash``.

        The new value is written to ``<ref>.lock`` (created exclusively)
        and renamed into place.

        Args:
            ref: Branch name, full ref name or 'HEAD'
            new_hash: Object hash to store

        Returns:
            str: Full name of the updated ref

        Raises:
            RefUpdateError: If the ref is locked or cannot be written
        """
        ref_name = self.full_ref_name(ref)
        ref_path = self.git_dir / ref_name
        lock_path = ref_path.with_name(ref_path.name + '.lock')

        try:
            ref_path.parent.mkdir(parents=True, exist_ok=True)
            with open(lock_path, 'x') as f:
                f.write(new_hash + '\n')
        except FileExistsError:
            raise RefUpdateError(f"Unable to lock {ref_name}: {lock_path} exists")
        except OSError as e:
            raise RefUpdateError(f"Unable to write {ref_name}: {e}") from e

        try:
            os.replace(lock_path, ref_path)
        except OSError as e:
            lock_path.unlink(missing_ok=True)
            raise RefUpdateError(f"Unable to update {ref_name}: {e}") from e

        logger.debug("%s -> %s", ref_name, new_hash)
        return ref_name

    def list_branches(self) -> List[Tuple[str, str]]:
        """
        List all branches.

        Returns:
            List of (branch_name, commit_hash) tuples
        """
        branches = {name[len('refs/heads/'):]: sha
                    for name, sha in self.packed_refs().items()
                    if name.startswith('refs/heads/')}

        if self.heads_dir.exists():
            for branch_file in self.heads_dir.rglob('*'):
                if branch_file.is_file() and not branch_file.name.endswith('.lock'):
                    branch_name = branch_file.relative_to(self.heads_dir).as_posix()
                    branches[branch_name] = branch_file.read_text().strip()

        return sorted(branches.items())

    def resolve_reference(self, ref: str) -> Optional[str]:
        """
        Resolve any reference (branch, tag, HEAD, hash) to an object hash.

        Args:
            ref: Reference string (e.g., 'HEAD', 'main', 'v1.0', commit or tree hash)

        Returns:
            Object hash or None if reference can't be resolved
        """
        if len(ref) == 40 and is_hex(ref):
            if self.repo.object_exists(ref.lower()):
                return ref.lower()

        value = self.read_ref(ref)
        if value:
            return value

        if len(ref) >= 4 and is_hex(ref):
            return self.repo.find_object_by_prefix(ref)

        return None
