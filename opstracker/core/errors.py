"""Exception hierarchy."""


class OpsTrackerError(Exception):
    """Base class for tracker errors."""


class StorageError(OpsTrackerError):
    """Persistence backend unavailable, or stored data unreadable."""

    def __init__(self, message: str, key: str | None = None):
        super().__init__(message)
        self.key = key


class CorruptValueError(StorageError):
    """Backend answered, but the stored value is not decodable JSON."""
