"""Error taxonomy for ticker operations."""


class TickerError(Exception):
    """Base class for ticker state errors."""
    pass


class Unauthorized(TickerError):
    """Supplied admin password does not match the state password."""
    pass


class InvalidInput(TickerError):
    """Request field is missing or cannot be parsed."""
    pass


class PersistenceFailure(TickerError):
    """Snapshot could not be written or read."""
    pass
