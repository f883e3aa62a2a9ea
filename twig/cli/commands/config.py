"""Config command - manage repository configuration."""

import click
from twig.core.config import Config
from twig.core.errors import ConfigError
from twig.core.repository import Repository
from twig.cli.output import success, error, info


def split_key(key):
    section, _, option = key.rpartition('.')
    return (section or 'core'), option


def load_config(is_global):
    if is_global:
        return Config()
    repo = Repository.find_repository()
    if not repo:
        click.echo(error("Not a git repository (use --global for global config)"))
        raise click.Abort()
    return repo.config


@click.group('config')
def config_cmd():
    """Get and set repository or global options."""
    pass


@config_cmd.command('set')
@click.argument('key')
@click.argument('value')
@click.option('--global', 'is_global', is_flag=True, help='Set global config')
def config_set(key, value, is_global):
    """
    Set a config value.

    Examples:
        twig config set user.name "Your Name"
        twig config set --global user.email "you@example.com"
    """
    config = load_config(is_global)
    section, option = split_key(key)
    try:
        config.set(section, option, value, global_config=is_global)
    except ConfigError as e:
        click.echo(error(str(e)))
        raise click.Abort()

    scope = "global" if is_global else "repository"
    click.echo(success(f"Set {scope} config: {key} = {value}"))


@config_cmd.command('get')
@click.argument('key')
@click.option('--global', 'is_global', is_flag=True, help='Read global config only')
def config_get(key, is_global):
    """
    Get a config value.

    Examples:
        twig config get user.name
    """
    config = load_config(is_global)
    section, option = split_key(key)
    try:
        value = config.get(section, option)
    except ConfigError as e:
        click.echo(error(str(e)))
        raise click.Abort()

    if value is None:
        click.echo(error(f"Config key not found: {key}"))
        raise click.Abort()
    click.echo(value)


@config_cmd.command('unset')
@click.argument('key')
@click.option('--global', 'is_global', is_flag=True, help='Modify global config')
def config_unset(key, is_global):
    """Remove a config value."""
    config = load_config(is_global)
    section, option = split_key(key)

    try:
        removed = config.unset(section, option, global_config=is_global)
    except ConfigError as e:
        click.echo(error(str(e)))
        raise click.Abort()

    if not removed:
        click.echo(error(f"Config key not found: {key}"))
        raise click.Abort()
    click.echo(success(f"Removed {key}"))


@config_cmd.command('list')
@click.option('--global', 'is_global', is_flag=True, help='List global config only')
def config_list(is_global):
    """List all config values."""
    try:
        values = load_config(is_global).list_all()
    except ConfigError as e:
        click.echo(error(str(e)))
        raise click.Abort()

    if not values:
        click.echo(info("No configuration set"))
        return

    for section in sorted(values):
        for key, value in sorted(values[section].items()):
            click.echo(f"{section}.{key}={value}")
