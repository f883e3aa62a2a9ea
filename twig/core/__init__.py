"""Core functionality for twig.

This module contains the core data structures:
- Git objects (Blob, Tree, Commit)
- Staged tree of pending changes
- Tree snapshots used as merge bases
- Repository, reference and configuration management
- Hashing utilities and errors

For tree serialization and commit building, see twig.operations
"""

from twig.core.objects import TwigObject, Blob, Tree, TreeEntry, Commit
from twig.core.staging import StagedTree, FileContent, Directory, DELETED, split_path
from twig.core.snapshot import TreeSnapshot
from twig.core.actor import Identity
from twig.core.repository import Repository
from twig.core.hash import hash_object, hash_raw_object
from twig.core.index import Index
from twig.core.refs import RefManager
from twig.core.config import Config, get_config
from twig.core.errors import (TwigError, InvalidPathError, NotFoundError, WriteError,
                              RefUpdateError, IdentityError, ConfigError,
                              MissingCollaboratorError)

__all__ = [
    'TwigObject',
    'Blob',
    'Tree',
    'TreeEntry',
    'Commit',
    'StagedTree',
    'FileContent',
    'Directory',
    'DELETED',
    'split_path',
    'TreeSnapshot',
    'Identity',
    'Repository',
    'Index',
    'RefManager',
    'Config',
    'get_config',
    'hash_object',
    'hash_raw_object',
    'TwigError',
    'InvalidPathError',
    'NotFoundError',
    'WriteError',
    'RefUpdateError',
    'IdentityError',
    'ConfigError',
    'MissingCollaboratorError',
]
