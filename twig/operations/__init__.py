"""Operations module: tree serialization and commit building.

- TreeWriter merges a staged tree over a base snapshot and writes it
- CommitBuilder turns the written tree into a commit and moves a ref
"""

from twig.operations.tree_writer import TreeWriter, ObjectBatch
from twig.operations.commit import CommitBuilder, NoChanges, NO_CHANGES

__all__ = [
    'TreeWriter', 'ObjectBatch',
    'CommitBuilder', 'NoChanges', 'NO_CHANGES',
]
