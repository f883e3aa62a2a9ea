"""Build commit objects from staged changes and advance a ref."""

import logging
from typing import Optional, Sequence, Union

from twig.core.actor import Identity, local_timezone
from twig.core.errors import IdentityError
from twig.core.interfaces import IdentityResolver, ObjectWriter, RefStore
from twig.core.objects import Commit
from twig.core.snapshot import TreeSnapshot
from twig.core.staging import StagedTree
from twig.operations.tree_writer import TreeWriter

logger = logging.getLogger(__name__)

DEFAULT_REF = 'master'


class NoChanges:
    """Result of a commit whose tree matches ``last_tree``. Falsy."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return 'NO_CHANGES'


NO_CHANGES = NoChanges()


class CommitBuilder:
    """
    Writes a commit for a staged tree.

    The builder keeps no state between calls. Blobs and trees are hashed
    up front and only persisted once the dedup guard and identity lookup
    have passed. The commit names the tree by the hash the writer
    returned, and the ref moves last, after every object it reaches has
    been written.
    """

    def __init__(self, writer: ObjectWriter, refs: RefStore,
                 identity_resolver: Optional[IdentityResolver] = None):
        """
        Args:
            writer: Object writer collaborator
            refs: Ref store collaborator (``update(ref_name, hash)``)
            identity_resolver: Used when ``commit`` gets no author
        """
        self.writer = writer
        self.refs = refs
        self.identity_resolver = identity_resolver
        self.tree_writer = TreeWriter(writer)

    def resolve_identity(self, author: Optional[Identity]) -> Identity:
        if author is not None:
            return author
        if self.identity_resolver is None:
            raise IdentityError("No author given and no identity resolver configured")
        return self.identity_resolver.resolve_identity()

    def commit(
        self,
        staged: StagedTree,
        base: Optional[TreeSnapshot],
        message: str,
        parents: Optional[Sequence[str]] = None,
        author: Optional[Identity] = None,
        last_tree: Optional[str] = None,
        ref: str = DEFAULT_REF,
        timestamp: Optional[int] = None,
        timezone: Optional[str] = None,
    ) -> Union[str, NoChanges]:
        """
        Commit ``staged`` on top of ``base``.

        Args:
            staged: Pending changes
            base: Tree the changes apply to, or None
            message: Commit message, written verbatim
            parents: Parent commit hashes, in order
            author: Author and committer; resolved from config when None
            last_tree: Tree hash to compare against to avoid empty commits
            ref: Ref to advance
            timestamp: Commit time (defaults to now)
            timezone: UTC offset text (defaults to the local zone)

        Returns:
            The new commit hash, or ``NO_CHANGES`` if the tree hash equals
            ``last_tree`` (nothing is written in that case)
        """
        batch = self.tree_writer.build(staged, base)

        if last_tree is not None and batch.root == last_tree:
            logger.debug("tree %s unchanged, skipping commit", batch.root)
            return NO_CHANGES

        identity = self.resolve_identity(author)
        if timezone is None:
            timezone = local_timezone(timestamp)

        tree_hash = batch.flush(self.writer)

        commit = Commit.create(
            tree_hash=tree_hash,
            parent_hashes=list(parents or []),
            author=str(identity),
            committer=str(identity),
            message=message,
            timestamp=timestamp,
            timezone=timezone,
        )

        commit_hash = self.writer.put(commit.serialize(), 'commit')
        logger.debug("wrote commit %s (tree %s)", commit_hash, tree_hash)

        self.refs.update(ref, commit_hash)
        logger.debug("updated %s to %s", ref, commit_hash)
        return commit_hash
