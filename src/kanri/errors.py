"""Exception hierarchy for kanri commands."""


class KanriError(Exception):
    """Base exception for all command failures."""

    pass


class NotFoundError(KanriError):
    """Referenced item or scope does not exist."""

    pass


class OwnershipViolation(KanriError):
    """Supplied parent id does not match the item's stored parent."""

    pass


class ScopeMismatch(KanriError):
    """Destination scope belongs to a different owner than the source."""

    pass


class StorageFailure(KanriError):
    """Underlying database error (lock timeout, I/O, constraint)."""

    pass


class ValidationError(KanriError, ValueError):
    """Rejected input value."""

    pass


class ConfigError(KanriError):
    """Configuration file could not be loaded."""

    pass
