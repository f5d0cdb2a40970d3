class StoreError(RuntimeError):
    """Raised when the persistence layer cannot complete a read or write."""


class AdvisorUnavailable(RuntimeError):
    """Raised when the remote advisor cannot produce a usable response."""
