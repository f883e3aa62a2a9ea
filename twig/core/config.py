"""Configuration management for twig.

This module provides a clean interface for reading and writing
both repository-local and global configuration files.

Files are read with configparser. Writes edit only the lines of the
key being changed, so comments, includes and repeated keys elsewhere
in a git config survive.
"""

import os
import re
import configparser
from pathlib import Path
from typing import List, Optional, Dict

from .actor import Identity
from .errors import ConfigError, IdentityError

SECTION_RE = re.compile(r'^\s*\[\s*([^\]]+?)\s*\]')
KEY_RE = re.compile(r'^\s*([A-Za-z][-A-Za-z0-9]*)\s*(?:=|$)')


def _new_parser() -> configparser.ConfigParser:
    # Git configs repeat keys (e.g. remote fetch refspecs), contain '%' and
    # allow bare boolean keys
    return configparser.ConfigParser(strict=False, interpolation=None, allow_no_value=True)


def _load(path: Path) -> configparser.ConfigParser:
    parser = _new_parser()
    if path.exists():
        try:
            parser.read(path)
        except configparser.Error as e:
            raise ConfigError(f"Cannot parse {path}: {e}") from e
    return parser


def _value(raw: Optional[str]) -> str:
    # A key without '=' is a boolean set to true
    return 'true' if raw is None else raw


def edit_config_file(path: Path, section: str, key: str, value: Optional[str]) -> bool:
    """
    Set ``key`` in ``section``, or remove it when ``value`` is None.

    An existing key is rewritten in place (the last occurrence, which is
    the one readers see); a new key goes at the end of its section, and a
    missing section is appended to the file.

    Returns:
        True if the file changed
    """
    lines: List[str] = path.read_text().splitlines(keepends=True) if path.exists() else []
    if lines and not lines[-1].endswith('\n'):
        lines[-1] += '\n'

    in_section = False
    section_end = None
    matches = []
    for i, line in enumerate(lines):
        header = SECTION_RE.match(line)
        if header:
            in_section = header.group(1).lower() == section.lower()
            if in_section:
                section_end = i + 1
            continue
        if not in_section:
            continue
        section_end = i + 1
        found = KEY_RE.match(line)
        if found and found.group(1).lower() == key.lower():
            matches.append(i)

    if value is None:
        if not matches:
            return False
        for i in reversed(matches):
            del lines[i]
    else:
        entry = f"\t{key} = {value}\n"
        if matches:
            lines[matches[-1]] = entry
        elif section_end is not None:
            lines.insert(section_end, entry)
        else:
            lines += [f"[{section}]\n", entry]

    try:
        path.write_text(''.join(lines))
    except OSError as e:
        raise ConfigError(f"Cannot write {path}: {e}") from e
    return True


class Config:
    """
    Manages configuration files.

    Configuration is stored in INI format, like git's own:
    - Global config: ~/.gitconfig
    - Repository config: .git/config

    Repository config takes precedence over global config.
    Environment variables take highest precedence.
    """

    GLOBAL_CONFIG_PATH = Path.home() / '.gitconfig'
    ENV_PREFIX = 'TWIG'

    def __init__(self, repo_config_path: Optional[Path] = None):
        """
        Initialize Config manager.

        Args:
            repo_config_path: Path to repository config file, if in a repo
        """
        self.repo_config_path = repo_config_path
        self._global_config = None
        self._repo_config = None

    @property
    def global_config(self) -> configparser.ConfigParser:
        """Load and return global configuration."""
        if self._global_config is None:
            self._global_config = _load(self.GLOBAL_CONFIG_PATH)
        return self._global_config

    @property
    def repo_config(self) -> Optional[configparser.ConfigParser]:
        """Load and return repository configuration."""
        if self._repo_config is None and self.repo_config_path:
            self._repo_config = _load(self.repo_config_path)
        return self._repo_config

    def get(self, section: str, key: str, fallback: Optional[str] = None) -> Optional[str]:
        """
        Get a configuration value.

        Priority order (highest to lowest):
        1. Environment variables (TWIG_<SECTION>_<KEY>)
        2. Repository config
        3. Global config
        4. Fallback value

        Args:
            section: Config section (e.g., 'user', 'core')
            key: Config key (e.g., 'name', 'email')
            fallback: Default value if not found

        Returns:
            Configuration value or fallback
        """
        env_key = f"{self.ENV_PREFIX}_{section.upper()}_{key.upper()}"
        env_value = os.environ.get(env_key)
        if env_value is not None:
            return env_value

        if self.repo_config and self.repo_config.has_option(section, key):
            return _value(self.repo_config.get(section, key))

        if self.global_config.has_option(section, key):
            return _value(self.global_config.get(section, key))

        return fallback

    def _path(self, global_config: bool) -> Optional[Path]:
        return self.GLOBAL_CONFIG_PATH if global_config else self.repo_config_path

    def _reload(self, global_config: bool) -> None:
        if global_config:
            self._global_config = None
        else:
            self._repo_config = None

    def set(self, section: str, key: str, value: str, global_config: bool = False) -> None:
        """Write ``section.key = value`` to the repository or global file."""
        path = self._path(global_config)
        if path is None:
            raise ConfigError("No repository config path available")
        edit_config_file(path, section, key, value)
        self._reload(global_config)

    def unset(self, section: str, key: str, global_config: bool = False) -> bool:
        """
        Remove a configuration value.

        Returns:
            True if value was removed, False if it didn't exist
        """
        path = self._path(global_config)
        if path is None or not edit_config_file(path, section, key, None):
            return False
        self._reload(global_config)
        return True

    def list_all(self) -> Dict[str, Dict[str, str]]:
        """
        List all configuration values, repository values winning.

        Returns:
            Dict of sections to key-value dicts
        """
        result: Dict[str, Dict[str, str]] = {}

        parsers = [self.global_config]
        if self.repo_config:
            parsers.append(self.repo_config)

        for parser in parsers:
            for section in parser.sections():
                values = {key: _value(raw) for key, raw in parser.items(section)}
                result.setdefault(section, {}).update(values)

        return result

    def get_user_identity(self) -> tuple:
        """
        Get user name and email for commits.

        GIT_AUTHOR_NAME / GIT_AUTHOR_EMAIL override the config files.

        Returns:
            Tuple of (name, email), either may be None
        """
        name = os.environ.get('GIT_AUTHOR_NAME') or self.get('user', 'name')
        email = os.environ.get('GIT_AUTHOR_EMAIL') or self.get('user', 'email')
        return name, email

    def resolve_identity(self) -> Identity:
        """
        Configured identity for commits.

        Raises:
            IdentityError: If user.name or user.email is not set
        """
        name, email = self.get_user_identity()
        if not name or not email:
            raise IdentityError("Author identity unknown: set user.name and user.email")
        return Identity(name, email)


def get_config(repo=None) -> Config:
    """
    Get a Config instance.

    Args:
        repo: Repository instance, or None for global-only config

    Returns:
        Config instance
    """
    if repo:
        return Config(repo.config_file)
    return Config()
