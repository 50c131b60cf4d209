from vodcatalog.integrations.alist import AListClient
from vodcatalog.integrations.protocol import RemoteFileStore

__all__ = ["AListClient", "RemoteFileStore"]
