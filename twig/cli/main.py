"""Main CLI entry point for twig."""

import logging

import click
from colorama import init

from twig import __version__
from twig.cli.output import BANNER
from twig.cli.commands import (init_cmd, commit_cmd, config_cmd, ls_tree_cmd,
                               cat_file_cmd)

# Initialize colorama for cross-platform colored output
init(autoreset=True)


class TwigGroup(click.Group):
    """Custom Group class to display banner before help."""

    def format_help(self, ctx, formatter):
        """Override to add banner before help text."""
        click.echo(BANNER)
        super().format_help(ctx, formatter)


@click.group(cls=TwigGroup)
@click.version_option(version=__version__)
@click.option('-v', '--verbose', is_flag=True, help='Log object and ref writes')
def cli(verbose):
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format='%(name)s: %(message)s')


# Register commands
cli.add_command(init_cmd)
cli.add_command(commit_cmd)
cli.add_command(config_cmd)
cli.add_command(ls_tree_cmd)
cli.add_command(cat_file_cmd)


def main():
    """Main entry point."""
    cli()


if __name__ == '__main__':
    main()
