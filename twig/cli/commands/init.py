"""Initialize a new repository."""

import click
from pathlib import Path
from twig.core.repository import Repository
from twig.cli.output import success, error, info


@click.command('init')
@click.argument('path', default='.')
@click.option('-b', '--initial-branch', default='master', help='Name of the first branch')
def init_cmd(path, initial_branch):
    """
    Initialize a new repository.

    Creates a .git directory that twig (and git) can commit into.

    Examples:
        twig init                    # Initialize in current directory
        twig init my-project         # Initialize in my-project directory
        twig init -b main            # Start on a 'main' branch
    """
    repo_path = Path(path).resolve()

    if (repo_path / '.git').exists():
        click.echo(error(f"Repository already exists at {repo_path}"))
        raise click.Abort()

    try:
        repo = Repository(str(repo_path))
        repo.init(initial_branch=initial_branch)
    except PermissionError:
        click.echo(error(f"Permission denied: Cannot create repository at {path}"))
        raise click.Abort()
    except OSError as e:
        click.echo(error(f"Failed to initialize repository: {e}"))
        raise click.Abort()

    click.echo(success(f"Initialized empty repository in {repo.git_dir}"))
    click.echo(info(f"HEAD points to refs/heads/{initial_branch}"))
