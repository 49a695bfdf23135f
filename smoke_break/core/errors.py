"""Exception hierarchy shared by the core and data providers."""


class SmokeBreakError(Exception):
    """Base class for all application errors."""


class PersistenceError(SmokeBreakError):
    """Reading or writing a persisted blob failed."""


class CorruptDataError(PersistenceError):
    """A persisted blob exists but cannot be decoded."""


class SettingsValidationError(SmokeBreakError, ValueError):
    """A reminder configuration failed validation."""
