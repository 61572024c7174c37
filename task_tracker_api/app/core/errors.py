"""
Typed failures raised by the service layer.

Routers translate these into HTTP responses; other callers (scripts,
tests) can catch them directly.  Input validation errors are not listed
here: they are raised by the pydantic schemas in ``app.schemas`` before
a service is ever called.
"""


class TrackerError(Exception):
    """Base class for all service-level failures."""


class NotFoundError(TrackerError):
    """A referenced entity id does not resolve in the store."""


class AuthenticationError(TrackerError):
    """No acting identity was supplied with the request."""


class StoreError(TrackerError):
    """The underlying database failed (connectivity, constraint violation)."""
