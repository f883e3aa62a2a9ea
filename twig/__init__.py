"""twig - stage changes and write git trees and commits from Python."""

__version__ = '0.1.0'

from twig.core.repository import Repository
from twig.core.index import Index
from twig.core.actor import Identity
from twig.core.objects import Blob, Tree, Commit
from twig.operations.commit import NO_CHANGES

__all__ = [
    'Repository',
    'Index',
    'Identity',
    'Blob',
    'Tree',
    'Commit',
    'NO_CHANGES',
]
