# Purpose: Exception types shared by the records viewer core.
# Only BootstrapError is fatal; everything else is recovered where it happens.


class ViewerError(Exception):
    """Base class for records viewer errors."""


class BootstrapError(ViewerError):
    """Raised when the initial data load cannot run at all.

    Individual collection failures never raise this; they leave a ``None``
    slot in the store instead.
    """


class RouteError(ViewerError, ValueError):
    """Raised for a route that cannot be constructed (e.g. an empty section)."""
