"""Commit command - stage changes and commit them in one step."""

import click
from twig.core.actor import Identity
from twig.core.errors import TwigError
from twig.core.repository import Repository
from twig.cli.output import success, error, info, warning, short


def parse_addition(value):
    """Split a ``PATH=TEXT`` option value."""
    path, sep, text = value.partition('=')
    if not sep:
        raise click.BadParameter(f"expected PATH=TEXT, got {value!r}", param_hint='--add')
    return path, text


def parse_author(value):
    if value is None:
        return None
    try:
        return Identity.from_string(value)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint='--author')


@click.command('commit')
@click.option('-m', '--message', required=True, help='Commit message')
@click.option('-a', '--add', 'additions', multiple=True, metavar='PATH=TEXT',
              help='Stage TEXT as the content of PATH (repeatable)')
@click.option('-d', '--delete', 'deletions', multiple=True, metavar='PATH',
              help='Stage removal of PATH (repeatable)')
@click.option('--ref', help='Ref to advance (default: current branch)')
@click.option('--base', help='Tree-ish the changes apply to (default: the ref)')
@click.option('--no-base', is_flag=True, help='Start from an empty tree')
@click.option('-p', '--parent', 'parents', multiple=True,
              help='Parent commit (repeatable; default: the ref)')
@click.option('--author', help='Author name and email (format: "Name <email>")')
@click.option('--last-tree', help='Skip the commit if the new tree equals this tree')
@click.option('--allow-empty', is_flag=True, help='Commit even if the tree is unchanged')
def commit_cmd(message, additions, deletions, ref, base, no_base, parents, author,
               last_tree, allow_empty):
    """
    Record staged changes as a new commit.

    Changes are given on the command line and merged over the base
    tree; nothing is read from the working directory.

    Examples:
        twig commit -m "init" -a README=hello
        twig commit -m "Move docs" -a docs/intro.md="# Intro" -d intro.md
        twig commit -m "Fork" --ref topic --base master -p master
    """
    repo = Repository.find_repository()
    if not repo:
        click.echo(error("Not a git repository"))
        raise click.Abort()

    if base and no_base:
        raise click.UsageError("--base and --no-base are mutually exclusive")

    identity = parse_author(author)
    changes = [parse_addition(value) for value in additions]

    ref = ref or repo.refs.get_current_branch() or 'master'
    tip = repo.refs.read_ref(ref)

    try:
        index = repo.index()

        if not no_base:
            if base:
                index.read_tree(base)
            elif tip:
                index.read_tree(tip)

        for path, text in changes:
            index.add(path, text)
        for path in deletions:
            index.delete(path)

        if parents:
            parent_list = []
            for parent in parents:
                resolved = repo.refs.resolve_reference(parent)
                if not resolved:
                    click.echo(error(f"Not a valid commit: {parent}"))
                    raise click.Abort()
                parent_list.append(resolved)
        else:
            parent_list = [tip] if tip else []

        if last_tree is None and not allow_empty and index.current_tree is not None:
            last_tree = index.current_tree.hash

        click.echo(info(f"Committing {len(index)} staged change(s) to {ref}..."))
        commit_hash = index.commit(message, parents=parent_list, actor=identity,
                                   last_tree=last_tree, head=ref)
    except TwigError as e:
        click.echo(error(f"Failed to create commit: {e}"))
        raise click.Abort()

    if not commit_hash:
        click.echo(warning("Nothing to commit (tree unchanged)"))
        return

    click.echo(success(f"Created commit {commit_hash[:7]}"))
    click.echo(info(f"Tree: {short(index.current_tree.hash)}"))
    if parent_list:
        click.echo(info(f"Parents: {', '.join(p[:7] for p in parent_list)}"))
    else:
        click.echo(info("(root commit)"))
