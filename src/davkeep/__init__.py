"""Top-level package for davkeep.

Backs up a configuration directory to a WebDAV server or a local archive
and restores it again.
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("davkeep")
except PackageNotFoundError:
    # Fallback for development environments where package isn't installed
    __version__ = "dev"
