"""Index: stage changes in memory and commit them on top of a base tree."""

import logging
from typing import Optional, Sequence, Union

from .actor import Identity
from .errors import MissingCollaboratorError
from .interfaces import IdentityResolver, ObjectWriter, RefStore, TreeResolver
from .snapshot import TreeSnapshot
from .staging import StagedTree

logger = logging.getLogger(__name__)


class Index:
    """
    Staging area for the next commit.

    Holds a ``StagedTree`` of pending changes and the ``TreeSnapshot``
    they apply to. Nothing touches the object store until ``write_tree``,
    ``write_blob`` or ``commit`` is called.

    Typical use::

        index = repo.index()
        index.read_tree('master')
        index.add('docs/README', b'hello')
        index.delete('old.txt')
        index.commit('Update docs', parents=[repo.refs.read_ref('master')])
    """

    def __init__(self, writer: ObjectWriter, refs: Optional[RefStore] = None,
                 resolver: Optional[TreeResolver] = None,
                 identity_resolver: Optional[IdentityResolver] = None):
        """
        Args:
            writer: Object writer (``put(data, kind) -> hash``)
            refs: Ref store (``update(ref_name, hash)``); required to commit
            resolver: Tree resolver used by ``read_tree``
            identity_resolver: Supplies the author when ``commit`` gets none
        """
        from twig.operations.commit import CommitBuilder
        from twig.operations.tree_writer import TreeWriter

        self.writer = writer
        self.refs = refs
        self.resolver = resolver
        self.tree = StagedTree()
        self.current_tree: Optional[TreeSnapshot] = None
        self.tree_writer = TreeWriter(writer)
        self.builder = CommitBuilder(writer, refs, identity_resolver) if refs is not None else None

    @classmethod
    def for_repository(cls, repo) -> 'Index':
        """Index whose collaborators are all ``repo``."""
        return cls(repo, refs=repo, resolver=repo, identity_resolver=repo)

    def add(self, path: str, data: Union[bytes, str]) -> None:
        """
        Add a file to the index.

        Args:
            path: File path including filename (no slash prefix)
            data: Contents of the file
        """
        self.tree.add(path, data)

    def delete(self, path: str) -> None:
        """Stage removal of the file or directory at ``path``."""
        self.tree.delete(path)

    def read_tree(self, ref: str) -> TreeSnapshot:
        """
        Use the tree of ``ref`` as the base for the next commit.

        Args:
            ref: Branch, tag, commit or tree hash

        Raises:
            NotFoundError: If ``ref`` does not resolve
        """
        if self.resolver is None:
            raise MissingCollaboratorError("Index has no tree resolver")
        self.current_tree = self.resolver.resolve(ref)
        logger.debug("base tree %s from %s", self.current_tree.hash, ref)
        return self.current_tree

    def clear(self) -> None:
        """Drop staged changes; the base tree is kept."""
        self.tree.clear()

    def write_blob(self, data: bytes) -> str:
        return self.tree_writer.write_blob(data)

    def write_tree(self) -> str:
        """Write the merged tree and return its hash without committing."""
        return self.tree_writer.write_tree(self.tree, self.current_tree)

    def commit(
        self,
        message: str,
        parents: Optional[Sequence[str]] = None,
        actor: Optional[Identity] = None,
        last_tree: Optional[str] = None,
        head: str = 'master',
        timestamp: Optional[int] = None,
        timezone: Optional[str] = None,
    ):
        """
        Commit the contents of the index.

        Args:
            message: Commit message
            parents: Parent commit hashes for the new commit
            actor: Author and committer (default: from configuration)
            last_tree: Tree hash to compare with to avoid empty commits
            head: Ref to advance (default: 'master')
            timestamp: Commit time (default: now)
            timezone: UTC offset text (default: local zone)

        Returns:
            The new commit hash, or ``NO_CHANGES`` when the tree equals
            ``last_tree``. After a commit the staged changes are cleared
            and the new tree becomes the base.
        """
        if self.builder is None:
            raise MissingCollaboratorError("Index has no ref store; use write_tree instead")

        result = self.builder.commit(
            self.tree,
            self.current_tree,
            message,
            parents=parents,
            author=actor,
            last_tree=last_tree,
            ref=head,
            timestamp=timestamp,
            timezone=timezone,
        )
        if not result:
            return result

        self.tree.clear()
        if self.resolver is not None:
            self.current_tree = self.resolver.resolve(result)
        return result

    def __len__(self) -> int:
        return len(self.tree)

    def __repr__(self) -> str:
        base = self.current_tree.hash[:7] if self.current_tree else None
        return f"Index(entries={len(self.tree)}, base={base})"
