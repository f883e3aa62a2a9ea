"""Shared pytest fixtures for twig tests."""

import pytest
import tempfile
import shutil
from pathlib import Path
from twig.core.config import Config
from twig.core.errors import NotFoundError, WriteError
from twig.core.hash import hash_raw_object
from twig.core.objects import OBJECT_TYPES, Commit, Tree
from twig.core.repository import Repository
from twig.core.snapshot import TreeSnapshot


EMPTY_TREE = '4b825dc642cb6eb9a060e54bf8d69288fbee4904'
HELLO_BLOB = 'b6fc4c620b67d95f953a5c1c1230aaab5db5a1b0'


class MemoryStore:
    """
    In-memory object store that records every write.

    Implements the object writer, object reader and tree resolver
    collaborators.
    """

    def __init__(self):
        self.objects = {}
        self.writes = []

    def put(self, data, kind):
        obj_hash = hash_raw_object(data, kind)
        self.objects[obj_hash] = (kind, data)
        self.writes.append((kind, data))
        return obj_hash

    def read_object(self, obj_hash):
        if obj_hash not in self.objects:
            raise NotFoundError(f"Object {obj_hash} not found")
        kind, data = self.objects[obj_hash]
        obj = OBJECT_TYPES[kind]()
        obj.deserialize(data)
        return obj

    def resolve(self, ref):
        obj = self.read_object(ref)
        if isinstance(obj, Commit):
            return TreeSnapshot.load(self, obj.tree)
        return TreeSnapshot(self, ref, obj)

    def writes_of(self, kind):
        return [data for k, data in self.writes if k == kind]

    def seed(self, data, kind):
        """Store an object without recording it as a write."""
        obj_hash = hash_raw_object(data, kind)
        self.objects[obj_hash] = (kind, data)
        return obj_hash


class FailingStore(MemoryStore):
    """Fails on the first write of ``fail_kind``."""

    def __init__(self, fail_kind):
        super().__init__()
        self.fail_kind = fail_kind

    def put(self, data, kind):
        if kind == self.fail_kind:
            raise WriteError(f"disk full writing {kind}")
        return super().put(data, kind)


class RecordingRefs:
    """Ref store that remembers updates."""

    def __init__(self):
        self.refs = {}
        self.updates = []

    def update(self, ref_name, new_hash):
        self.updates.append((ref_name, new_hash))
        self.refs[ref_name] = new_hash


class StaticIdentity:
    """Identity resolver returning a fixed identity."""

    def __init__(self, identity):
        self.identity = identity
        self.calls = 0

    def resolve_identity(self):
        self.calls += 1
        return self.identity


def make_tree(store, entries):
    """
    Seed a tree built from ``(mode, name, hash)`` tuples.

    Returns:
        TreeSnapshot for the new tree
    """
    tree = Tree()
    for mode, name, obj_hash in entries:
        obj_type = 'tree' if mode in ('40000', '040000') else 'blob'
        tree.add_entry(mode, obj_type, obj_hash, name)
    tree_hash = store.seed(tree.serialize(), 'tree')
    return TreeSnapshot(store, tree_hash)


@pytest.fixture(autouse=True)
def isolated_config(tmp_path_factory, monkeypatch):
    """Keep the user's ~/.gitconfig and identity variables out of tests."""
    home = tmp_path_factory.mktemp('home')
    monkeypatch.setattr(Config, 'GLOBAL_CONFIG_PATH', home / '.gitconfig')
    for var in ('TWIG_USER_NAME', 'TWIG_USER_EMAIL', 'GIT_AUTHOR_NAME', 'GIT_AUTHOR_EMAIL'):
        monkeypatch.delenv(var, raising=False)
    return home / '.gitconfig'


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    tmpdir = tempfile.mkdtemp()
    yield Path(tmpdir)
    shutil.rmtree(tmpdir, ignore_errors=True)


@pytest.fixture
def repo(temp_dir):
    """Create an initialized repository."""
    repo = Repository(str(temp_dir))
    repo.init()
    return repo


@pytest.fixture
def repo_with_config(repo):
    """Create a repository with a user identity configured."""
    repo.config_file.write_text("""[core]
\trepositoryformatversion = 0
[user]
\tname = Test User
\temail = test@example.com
""")
    return repo


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def refs():
    return RecordingRefs()
