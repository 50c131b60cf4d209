"""vodcatalog - browse and search an AList file store as a video catalog."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("vodcatalog")
except PackageNotFoundError:  # running from a source checkout
    __version__ = "0.0.0"
