"""Inspect trees and objects."""

import click
from colorama import Fore, Style
from twig.core.errors import NotFoundError
from twig.core.objects import Blob, Commit, Tree
from twig.core.repository import Repository
from twig.cli.output import error


def find_repository_or_abort():
    repo = Repository.find_repository()
    if not repo:
        click.echo(error("Not a git repository"))
        raise click.Abort()
    return repo


@click.command('ls-tree')
@click.option('-r', '--recursive', is_flag=True, help='Recurse into sub-trees')
@click.option('--name-only', is_flag=True, help='Show only file names')
@click.option('--abbrev', type=int, default=0, help='Abbreviate hashes to N characters')
@click.argument('treeish', required=False, default='HEAD')
def ls_tree_cmd(recursive, name_only, abbrev, treeish):
    """
    List contents of a tree object.

    TREEISH can be a branch, tag, commit or tree hash. Defaults to HEAD.
    Entries are listed in stored order.

    Examples:
        twig ls-tree
        twig ls-tree -r master
    """
    repo = find_repository_or_abort()

    try:
        snapshot = repo.resolve(treeish)
    except NotFoundError as e:
        click.echo(error(str(e)))
        raise click.Abort()

    display_tree(snapshot, '', recursive, name_only, abbrev)


def display_tree(snapshot, prefix, recursive, name_only, abbrev):
    """Display tree entries with optional recursion."""
    for entry in snapshot.contents:
        full_path = f"{prefix}{entry.name}"

        if entry.is_tree and recursive:
            display_tree(snapshot.child(entry.name), full_path + '/', recursive, name_only, abbrev)
            continue

        if name_only:
            click.echo(full_path)
        else:
            hash_display = entry.hash[:abbrev] if abbrev else entry.hash
            mode = entry.mode.zfill(6)
            click.echo(f"{mode} {entry.type} {Fore.YELLOW}{hash_display}{Style.RESET_ALL}\t{full_path}")


@click.command('cat-file')
@click.option('-t', '--type', 'show_type', is_flag=True, help='Show object type')
@click.option('-s', '--size', 'show_size', is_flag=True, help='Show object size')
@click.argument('object_hash')
def cat_file_cmd(show_type, show_size, object_hash):
    """
    Show object content, type, or size.

    Examples:
        twig cat-file -t abc123
        twig cat-file abc123
    """
    repo = find_repository_or_abort()

    try:
        full_hash = repo.refs.resolve_reference(object_hash)
        if not full_hash:
            raise NotFoundError(f"Object not found: {object_hash}")
        kind, data = repo.read_raw_object(full_hash)
    except NotFoundError as e:
        click.echo(error(str(e)))
        raise click.Abort()

    if show_type:
        click.echo(kind)
        return
    if show_size:
        click.echo(len(data))
        return

    obj = repo.read_object(full_hash)
    if isinstance(obj, Tree):
        for entry in obj.entries:
            click.echo(f"{entry.mode.zfill(6)} {entry.type} {entry.hash}\t{entry.name}")
    elif isinstance(obj, Commit):
        click.echo(data.decode(errors='replace'))
    elif isinstance(obj, Blob):
        click.echo(data, nl=False)
