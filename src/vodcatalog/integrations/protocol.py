# Remote file store protocol - the listing/search capability the catalog consumes.
# Created: 2026-10-19

from typing import Protocol

from vodcatalog.config import Site
from vodcatalog.models import DirEntry, DirListing, FileDetail


class RemoteFileStore(Protocol):
    """Protocol for remote file stores.

    Every method raises ``RemoteUnavailable`` when the call fails.
    """

    def list_directory(self, site: Site, path: str, page: int, page_size: int) -> DirListing:
        """List one page of *path*. ``page_size=0`` lists everything."""
        ...

    def get_file(self, site: Site, path: str) -> FileDetail:
        """Get one file or folder, including its raw playable URL."""
        ...

    def search(self, site: Site, endpoint: str, keyword: str) -> list[DirEntry]:
        """Search *site* through *endpoint*; entries carry their parent path."""
        ...

    def read_file_content(self, site: Site, path: str) -> str | None:
        """Text content of *path*, or None if it does not exist."""
        ...
