"""Exception classes for the sales tracker."""


class SalesTrackerError(Exception):
    """Base exception for the sales tracker."""


class InvalidMonth(SalesTrackerError, ValueError):
    """A month name outside the twelve full English month names."""

    def __init__(self, name):
        self.name = name
        super().__init__(f"Invalid month name: {name!r}")


class StoreUnavailable(SalesTrackerError):
    """The transaction store could not be opened or queried."""


class UpstreamSeedFailure(SalesTrackerError):
    """The remote seed source failed or returned an unusable payload."""
