"""CLI commands for twig."""

from twig.cli.commands.init import init_cmd
from twig.cli.commands.commit import commit_cmd
from twig.cli.commands.config import config_cmd
from twig.cli.commands.ls_tree import ls_tree_cmd, cat_file_cmd

__all__ = ['init_cmd', 'commit_cmd', 'config_cmd', 'ls_tree_cmd', 'cat_file_cmd']
