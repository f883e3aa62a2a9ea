"""Exceptions raised by twig."""


class TwigError(Exception):
    """Base class for all twig errors."""


class InvalidPathError(TwigError, ValueError):
    """A staged path is empty or has an unusable segment."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Invalid path {path!r}: {reason}")


class NotFoundError(TwigError, LookupError):
    """A reference or object could not be resolved."""


class WriteError(TwigError):
    """The object store failed to persist an object."""


class RefUpdateError(TwigError):
    """A reference could not be written."""


class IdentityError(TwigError):
    """No author identity was given and none could be resolved."""


class ConfigError(TwigError):
    """A configuration file cannot be read or written."""


class MissingCollaboratorError(TwigError, ValueError):
    """An operation needs a store the object was built without."""
