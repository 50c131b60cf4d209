# Catalog error types.
# Created: 2026-10-19
#
# Per-source failures during search are logged and dropped by SearchEngine;
# single-target operations (browse, detail, play URL) let these propagate.


class CatalogError(Exception):
    """Base class for all catalog errors."""


class IndexUnavailable(CatalogError):
    """A file-backed search index could not be downloaded or read."""


class CorruptArchive(CatalogError):
    """A downloaded index archive could not be extracted, or lacked its text file."""


class RemoteUnavailable(CatalogError):
    """A listing, search or detail call to the remote file store failed.

    ``code`` and ``remote_message`` carry the store's response envelope when
    the call reached the store; ``status`` is the HTTP status, if any.
    """

    def __init__(
        self,
        message: str,
        *,
        code: int | None = None,
        remote_message: str = "",
        status: int | None = None,
    ):
        super().__init__(message)
        self.code = code
        self.remote_message = remote_message
        self.status = status


class MalformedPlaylistLine(CatalogError):
    """A playlist episode line has no target file. Recoverable: the line is skipped."""

    def __init__(self, line: str):
        super().__init__(f"Malformed playlist line: {line!r}")
        self.line = line


class UnrecognizedSort(CatalogError):
    """A sort string is not one of ``name|time|size`` x ``asc|desc``."""

    def __init__(self, value: str):
        super().__init__(f"Unrecognized sort: {value!r}")
        self.value = value


class UnknownSite(CatalogError):
    """An identifier refers to a site that is not configured."""


class InvalidCatalogId(CatalogError):
    """An identifier is not of the form ``site$path``."""
