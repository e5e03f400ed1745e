"""
Exceptions raised by Minisites services.
"""


class MinisitesError(Exception):
    """Base class for all Minisites errors."""


class ConfigurationError(MinisitesError):
    """Settings are inconsistent and the app cannot start."""


class ContentStoreError(MinisitesError):
    """The content store could not answer a query.

    Raised by store adapters for transport, HTTP and decoding failures so
    callers can decide whether to degrade or propagate.
    """

    def __init__(self, message: str, table: str | None = None):
        super().__init__(message)
        self.table = table


class ContentStoreTimeout(ContentStoreError):
    """The content store did not answer within the configured timeout."""
