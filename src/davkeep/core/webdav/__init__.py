"""WebDAV transport for backup archives.

Public API:
    - WebDAVClient: stateless upload/download/list/delete client
    - DavResource: one resource of a PROPFIND multi-status response
    - parse_multistatus: structural multi-status parser
"""

from davkeep.core.webdav.client import WebDAVClient, resource_url
from davkeep.core.webdav.multistatus import DavResource, parse_multistatus

__all__ = [
    "DavResource",
    "WebDAVClient",
    "parse_multistatus",
    "resource_url",
]
