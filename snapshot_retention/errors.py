class RetentionError(Exception):
    """Base class for every failure raised by snapshot retention."""


class ValidationError(RetentionError, ValueError):
    """Malformed or missing input. Raised before anything is mutated."""


class ListingError(RetentionError, RuntimeError):
    """The snapshot inventory could not be read. Fatal for the run."""


class DeletionError(RetentionError, RuntimeError):
    """A single snapshot could not be deleted."""

    def __init__(self, name: str, reason: str):
        super().__init__(f"Failed to delete snapshot {name}: {reason}")
        self.name: str = name
        self.reason: str = reason
