"""Unit tests for the staged tree."""

import pytest
from twig.core.errors import InvalidPathError
from twig.core.staging import (StagedTree, FileContent, Directory, DELETED,
                               split_path)


def test_split_path():
    assert split_path('a/b/c') == ['a', 'b', 'c']
    assert split_path('README') == ['README']


@pytest.mark.parametrize('path', ['', '/a', 'a/', 'a//b', 'a/./b', '../a', 'a\0b'])
def test_split_path_rejects(path):
    with pytest.raises(InvalidPathError):
        split_path(path)


def test_invalid_path_is_value_error():
    with pytest.raises(ValueError):
        StagedTree().add('', b'x')


def test_add_creates_intermediate_directories():
    """'a/b/c' and 'a/b/d' share directory nodes; no leaf at 'a/b'."""
    staged = StagedTree()
    staged.add('a/b/c', b'1')
    staged.add('a/b/d', b'2')

    root = staged.children()
    assert list(root) == ['a']
    assert isinstance(root['a'], Directory)

    a = staged.children(root['a'].node)
    assert list(a) == ['b']
    assert isinstance(a['b'], Directory)

    b = staged.children(a['b'].node)
    assert b == {'c': FileContent(b'1'), 'd': FileContent(b'2')}
    assert len(staged) == 2


def test_add_encodes_text():
    staged = StagedTree()
    staged.add('README', 'héllo')
    assert staged.get('README') == FileContent('héllo'.encode('utf-8'))


def test_add_overwrites_file():
    staged = StagedTree()
    staged.add('a', b'old')
    staged.add('a', b'new')
    assert staged.get('a') == FileContent(b'new')


def test_add_file_over_staged_directory():
    staged = StagedTree()
    staged.add('a/b', b'1')
    staged.add('a', b'file')

    assert staged.get('a') == FileContent(b'file')
    assert staged.get('a/b') is None
    assert list(staged.paths()) == [('a', FileContent(b'file'))]


def test_replaced_directory_nodes_are_reused():
    staged = StagedTree()
    staged.add('a/b/c', b'1')
    staged.add('a/d', b'2')
    size = len(staged._nodes)

    staged.delete('a')
    staged.add('x/y/z', b'3')

    assert len(staged._nodes) == size
    assert list(staged.paths()) == [('a', DELETED), ('x/y/z', FileContent(b'3'))]


def test_add_below_staged_file_turns_it_into_directory():
    staged = StagedTree()
    staged.add('a', b'file')
    staged.add('a/b', b'1')

    assert isinstance(staged.get('a'), Directory)
    assert staged.get('a/b') == FileContent(b'1')


def test_delete_stages_tombstone():
    staged = StagedTree()
    staged.delete('dir/old.txt')

    assert staged.get('dir/old.txt') is DELETED
    assert isinstance(staged.get('dir'), Directory)


def test_delete_replaces_staged_content():
    staged = StagedTree()
    staged.add('x', b'1')
    staged.delete('x')
    assert staged.get('x') is DELETED


def test_paths_sorted_regardless_of_insertion_order():
    first = StagedTree()
    for path in ['b/z', 'a', 'b/y']:
        first.add(path, path.encode())

    second = StagedTree()
    for path in ['b/y', 'a', 'b/z']:
        second.add(path, path.encode())

    assert list(first.paths()) == list(second.paths())
    assert [p for p, _ in first.paths()] == ['a', 'b/y', 'b/z']


def test_children_is_a_copy():
    staged = StagedTree()
    staged.add('a', b'1')
    staged.children()['b'] = FileContent(b'2')
    assert staged.get('b') is None


def test_clear():
    staged = StagedTree()
    staged.add('a/b', b'1')
    staged.clear()

    assert staged.is_empty()
    assert len(staged) == 0
    assert staged.children() == {}
