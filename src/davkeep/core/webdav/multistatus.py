"""Parser for WebDAV PROPFIND multi-status responses.

The body is parsed as XML with the ``DAV:`` namespace, so servers may use
any prefix (``d:``, ``D:``, ``lp1:`` or a default namespace).
"""

import xml.etree.ElementTree as ET
from dataclasses import dataclass
from urllib.parse import unquote

from davkeep.constants import DAV_NAMESPACE
from davkeep.exceptions import FormatError
from davkeep.logger import get_logger

logger = get_logger(__name__)

_NS = f"{{{DAV_NAMESPACE}}}"


@dataclass(frozen=True)
class DavResource:
    """One ``<response>`` element of a multi-status body."""

    href: str
    content_length: int | None = None
    last_modified: str | None = None
    is_collection: bool = False

    @property
    def name(self) -> str:
        """Last segment of the URL-decoded href."""
        return unquote(self.href).rstrip("/").rsplit("/", 1)[-1]


def _first_text(element: ET.Element, tag: str) -> str | None:
    for found in element.iter(f"{_NS}{tag}"):
        if found.text and found.text.strip():
            return found.text.strip()
    return None


def _parse_length(raw: str | None, href: str) -> int | None:
    if raw is None:
        return None
    try:
        return int(raw)
    except ValueError:
        logger.debug("Ignoring invalid content length %r for %s", raw, href)
        return None


def parse_multistatus(body: bytes | str) -> list[DavResource]:
    """Parse a 207 multi-status body into resources.

    Responses without an href are ignored.

    Args:
        body: Raw XML body

    Returns:
        Resources in document order

    Raises:
        FormatError: If the body is not well-formed XML

    """
    try:
        root = ET.fromstring(body)  # noqa: S314
    except ET.ParseError as e:
        msg = f"malformed multi-status response: {e}"
        raise FormatError(msg) from e

    resources: list[DavResource] = []
    for response in root.iter(f"{_NS}response"):
        href = _first_text(response, "href")
        if href is None:
            continue
        resources.append(
            DavResource(
                href=href,
                content_length=_parse_length(
                    _first_text(response, "getcontentlength"), href
                ),
                last_modified=_first_text(response, "getlastmodified"),
                is_collection=any(
                    True for _ in response.iter(f"{_NS}collection")
                ),
            )
        )
    return resources
