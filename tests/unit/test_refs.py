"""Unit tests for reference management."""

import pytest
from twig.core.errors import RefUpdateError
from twig.core.refs import RefManager


def test_ref_manager_init(repo):
    refs = RefManager(repo)
    assert refs.repo == repo
    assert refs.git_dir == repo.git_dir


def test_current_branch_after_init(repo):
    assert repo.refs.get_current_branch() == 'master'
    assert repo.refs.resolve_head() is None


def test_detached_head(repo):
    repo.head_file.write_text('a' * 40 + '\n')
    assert repo.refs.get_current_branch() is None
    assert repo.refs.is_detached_head()
    assert repo.refs.resolve_head() == 'a' * 40


def test_update_ref_short_name_is_branch(repo):
    name = repo.refs.update_ref('main', 'a' * 40)

    assert name == 'refs/heads/main'
    assert (repo.heads_dir / 'main').read_text() == 'a' * 40 + '\n'
    assert repo.refs.read_ref('main') == 'a' * 40


def test_update_ref_full_name(repo):
    repo.refs.update_ref('refs/tags/v1', 'b' * 40)
    assert repo.refs.read_ref('v1') == 'b' * 40


def test_update_head_follows_symbolic_ref(repo):
    name = repo.refs.update_ref('HEAD', 'c' * 40)

    assert name == 'refs/heads/master'
    assert repo.refs.resolve_head() == 'c' * 40
    assert repo.head_file.read_text() == 'ref: refs/heads/master\n'


def test_update_ref_nested_branch(repo):
    repo.refs.update_ref('feature/x', 'd' * 40)
    assert repo.refs.list_branches() == [('feature/x', 'd' * 40)]


def test_update_ref_locked(repo):
    (repo.heads_dir / 'main.lock').write_text('')

    with pytest.raises(RefUpdateError):
        repo.refs.update_ref('main', 'a' * 40)
    assert repo.refs.read_ref('main') is None


def test_update_ref_leaves_no_lock(repo):
    repo.refs.update_ref('main', 'a' * 40)
    assert not (repo.heads_dir / 'main.lock').exists()


def test_packed_refs(repo):
    (repo.git_dir / 'packed-refs').write_text(
        '# pack-refs with: peeled fully-peeled sorted\n'
        f"{'e' * 40} refs/heads/packed\n"
        f"{'f' * 40} refs/tags/v2\n"
        f"^{'0' * 40}\n"
    )

    assert repo.refs.read_ref('packed') == 'e' * 40
    assert repo.refs.read_ref('v2') == 'f' * 40
    assert ('packed', 'e' * 40) in repo.refs.list_branches()


def test_loose_ref_wins_over_packed(repo):
    (repo.git_dir / 'packed-refs').write_text(f"{'e' * 40} refs/heads/main\n")
    repo.refs.update_ref('main', 'a' * 40)
    assert repo.refs.read_ref('main') == 'a' * 40


def test_resolve_reference_hash_and_prefix(repo):
    blob_hash = repo.put(b'hello', 'blob')

    assert repo.refs.resolve_reference(blob_hash) == blob_hash
    assert repo.refs.resolve_reference(blob_hash[:8]) == blob_hash
    assert repo.refs.resolve_reference('nope') is None
