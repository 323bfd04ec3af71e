"""Exceptions raised by the engagement engine and its integration systems."""


class InvalidInput(ValueError):
    """Negative or malformed counts/parameters, rejected before any simulation."""


class ConfigError(InvalidInput):
    """A combat configuration document could not be read or parsed."""


class NotFound(LookupError):
    """A fortress, garrison or unit group the caller referenced does not exist."""
