"""Unit tests for the commit builder."""

import pytest
from twig.core.actor import Identity
from twig.core.errors import IdentityError, RefUpdateError, WriteError
from twig.core.hash import hash_raw_object
from twig.core.objects import Commit
from twig.core.staging import StagedTree
from twig.operations.commit import CommitBuilder, NO_CHANGES, NoChanges
from twig.operations.tree_writer import TreeWriter
from tests.conftest import (HELLO_BLOB, FailingStore, MemoryStore, RecordingRefs,
                            StaticIdentity, make_tree)


AUTHOR = Identity('A', 'a@x.com')


def staged_readme():
    staged = StagedTree()
    staged.add('README', 'hello')
    return staged


def test_end_to_end_first_commit(store, refs):
    """One blob, one tree, one commit and one ref update."""
    builder = CommitBuilder(store, refs)

    commit_hash = builder.commit(staged_readme(), None, 'init', parents=[], author=AUTHOR,
                                 ref='main', timestamp=1700000000, timezone='+0000')

    assert store.writes_of('blob') == [b'hello']

    trees = store.writes_of('tree')
    assert trees == [b'100644 README\0' + bytes.fromhex(HELLO_BLOB)]
    tree_hash = TreeWriter(store).build(staged_readme()).root

    commits = store.writes_of('commit')
    assert len(commits) == 1
    assert commits[0] == (
        f"tree {tree_hash}\n"
        "author A <a@x.com> 1700000000 +0000\n"
        "committer A <a@x.com> 1700000000 +0000\n"
        "\n"
        "init"
    ).encode()

    assert [kind for kind, _ in store.writes] == ['blob', 'tree', 'commit']
    assert refs.updates == [('main', commit_hash)]


def test_parents_in_given_order(store, refs):
    builder = CommitBuilder(store, refs)
    parents = ['b' * 40, 'a' * 40]

    commit_hash = builder.commit(staged_readme(), None, 'merge', parents=parents,
                                 author=AUTHOR, timestamp=1, timezone='+0000')

    commit = store.read_object(commit_hash)
    assert isinstance(commit, Commit)
    assert commit.parents == parents


def test_default_ref_is_master(store, refs):
    commit_hash = CommitBuilder(store, refs).commit(staged_readme(), None, 'm', author=AUTHOR)
    assert refs.updates == [('master', commit_hash)]


def test_message_written_verbatim(store, refs):
    message = '  subject  \n\n body with trailing newline\n\n'
    commit_hash = CommitBuilder(store, refs).commit(staged_readme(), None, message,
                                                    author=AUTHOR)
    assert store.objects[commit_hash][1].endswith(b'\n\n' + message.encode())


def test_dedup_guard_writes_nothing(store, refs):
    tree_hash = TreeWriter(store).build(staged_readme()).root

    result = CommitBuilder(store, refs).commit(staged_readme(), None, 'again',
                                               author=AUTHOR, last_tree=tree_hash)

    assert result is NO_CHANGES
    assert not result
    assert store.writes == []
    assert refs.updates == []


def test_dedup_guard_against_base(store, refs):
    base = make_tree(store, [('100644', 'a', 'a' * 40)])

    result = CommitBuilder(store, refs).commit(StagedTree(), base, 'noop', author=AUTHOR,
                                               last_tree=base.hash)
    assert result is NO_CHANGES


def test_different_last_tree_commits(store, refs):
    result = CommitBuilder(store, refs).commit(staged_readme(), None, 'm', author=AUTHOR,
                                               last_tree='f' * 40)
    assert isinstance(result, str)
    assert len(refs.updates) == 1


def test_no_changes_is_singleton():
    assert NoChanges() is NO_CHANGES
    assert repr(NO_CHANGES) == 'NO_CHANGES'


def test_identity_from_resolver(store, refs):
    resolver = StaticIdentity(Identity('Conf User', 'conf@x.com'))
    commit_hash = CommitBuilder(store, refs, resolver).commit(staged_readme(), None, 'm')

    commit = store.read_object(commit_hash)
    assert commit.author == 'Conf User <conf@x.com>'
    assert commit.committer == commit.author
    assert resolver.calls == 1


def test_explicit_author_skips_resolver(store, refs):
    resolver = StaticIdentity(Identity('Conf User', 'conf@x.com'))
    CommitBuilder(store, refs, resolver).commit(staged_readme(), None, 'm', author=AUTHOR)
    assert resolver.calls == 0


def test_missing_identity_writes_nothing(store, refs):
    with pytest.raises(IdentityError):
        CommitBuilder(store, refs).commit(staged_readme(), None, 'm')
    assert store.writes == []
    assert refs.updates == []


def test_timezone_defaults_to_local(store, refs, monkeypatch):
    monkeypatch.setattr('twig.operations.commit.local_timezone', lambda ts=None: '+0530')
    commit_hash = CommitBuilder(store, refs).commit(staged_readme(), None, 'm',
                                                    author=AUTHOR, timestamp=10)
    commit = store.read_object(commit_hash)
    assert commit.author_time == 10
    assert commit.author_timezone == '+0530'


def test_tree_write_failure_leaves_no_commit(refs):
    failing = FailingStore('tree')

    with pytest.raises(WriteError):
        CommitBuilder(failing, refs).commit(staged_readme(), None, 'm', author=AUTHOR)

    assert failing.writes_of('commit') == []
    assert refs.updates == []


def test_ref_failure_propagates(store):
    class LockedRefs(RecordingRefs):
        def update(self, ref_name, new_hash):
            raise RefUpdateError(f"{ref_name} is locked")

    with pytest.raises(RefUpdateError):
        CommitBuilder(store, LockedRefs()).commit(staged_readme(), None, 'm', author=AUTHOR)
    assert len(store.writes_of('commit')) == 1


def test_commit_uses_hashes_returned_by_writer(refs):
    class PrefixedStore(MemoryStore):
        def put(self, data, kind):
            return 'f' + super().put(data, kind)[1:]

    store = PrefixedStore()
    commit_hash = CommitBuilder(store, refs).commit(staged_readme(), None, 'm',
                                                    author=AUTHOR, timestamp=1,
                                                    timezone='+0000')

    tree_data = store.writes_of('tree')[0]
    stored_tree = 'f' + hash_raw_object(tree_data, 'tree')[1:]
    assert tree_data.endswith(bytes.fromhex('f' + HELLO_BLOB[1:]))
    assert store.writes_of('commit')[0].startswith(f"tree {stored_tree}\n".encode())
    assert commit_hash.startswith('f')
    assert refs.updates == [('master', commit_hash)]
