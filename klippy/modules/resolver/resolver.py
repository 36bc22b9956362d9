"""
Image reference resolution.

Turns a free-form reference such as ``library/nginx:1.21`` or
``myregistry.example.com:5000/team/app@sha256:...`` into the registry base
URL, repository path and tag that the registry API needs.

A host that cannot be found in DNS is taken to be part of the repository
path, and the whole reference is re-read against the public registry.
"""

import logging
import socket
from dataclasses import dataclass
from typing import Optional
from urllib.parse import SplitResult, urlsplit

from klippy.config import DEFAULT_REGISTRY, DEFAULT_SCHEME, DEFAULT_TAG
from klippy.error import ReferenceParseError

logger = logging.getLogger(__name__)


# =============================================================================
# Data Classes
# =============================================================================

@dataclass(frozen=True)
class ImageReference:
    """A reference split into the pieces the registry v2 API addresses."""
    registry: str
    repository: str
    tag: str = DEFAULT_TAG

    @property
    def host(self) -> str:
        """Registry host[:port] without the scheme."""
        return urlsplit(self.registry).netloc

    @property
    def is_digest(self) -> bool:
        """True when the tag is a content digest such as 'sha256:...'."""
        return ":" in self.tag

    def __str__(self) -> str:
        separator = "@" if self.is_digest else ":"
        return f"{self.host}/{self.repository}{separator}{self.tag}"


# =============================================================================
# DNS
# =============================================================================

def host_resolves(hostname: Optional[str]) -> bool:
    """Return True if the hostname has at least one DNS record."""
    if not hostname:
        return False
    try:
        socket.getaddrinfo(hostname, None)
    except (socket.gaierror, UnicodeError):
        return False
    return True


# =============================================================================
# Resolution
# =============================================================================

def _split_path(path: str) -> tuple[str, Optional[str]]:
    """
    Split a URL path into repository and tag.

    The digest form 'ns/name@sha256:...' is tried first, then the tag form
    'ns/name:tag'. Only the first two parts are used when a delimiter appears
    more than once.
    """
    for delimiter in ("@", ":"):
        parts = path.split(delimiter)
        if len(parts) == 1:
            continue
        if len(parts) > 2:
            logger.warning("Expecting only 2 parts to Namespace/project %s tag, found %d in [%s]",
                           delimiter, len(parts), path)
        return parts[0], parts[1]
    return path, None


def _split_url(url: str, reference: str) -> SplitResult:
    """Parse url, reporting malformed input (e.g. an unclosed IPv6 bracket) against the reference."""
    try:
        return urlsplit(url)
    except ValueError as e:
        raise ReferenceParseError(reference, str(e)) from e


def resolve(reference: str, default_registry: str = DEFAULT_REGISTRY) -> ImageReference:
    """
    Resolve an image reference to a registry, repository and tag.

    Args:
        reference: Reference such as 'library/nginx:1.21',
                   'registry.example.com/team/app:v1' or 'ns/name@sha256:...'
        default_registry: Registry used when the reference names no
                          resolvable host (default: the public hub)

    Returns:
        ImageReference with the tag defaulting to 'latest'

    Raises:
        ReferenceParseError: If the reference is empty or not a valid URL, or
                             its repository is empty
    """
    reference = reference.strip() if reference else ""
    if not reference:
        raise ReferenceParseError(reference, "Empty image reference")

    url = reference
    if "://" not in url:
        url = f"{DEFAULT_SCHEME}://{reference}"
        logger.debug("Reparsing modified URL [%s]", url)

    parsed = _split_url(url, reference)
    if not host_resolves(parsed.hostname):
        logger.debug("Unable to resolve [%s] dropping back to %s", parsed.hostname, default_registry)
        url = f"{default_registry.rstrip('/')}/{url.split('://', 1)[1]}"
        parsed = _split_url(url, reference)
        logger.debug("Reparsing modified URL [%s]", url)

    registry = f"{parsed.scheme}://{parsed.netloc}"

    repository, tag = _split_path(parsed.path)
    repository = repository.lstrip("/")
    if not repository:
        raise ReferenceParseError(reference)

    if not tag:
        logger.debug('Setting tag to "%s"', DEFAULT_TAG)
        tag = DEFAULT_TAG

    logger.debug("Identified registry [%s]", registry)
    return ImageReference(registry=registry, repository=repository, tag=tag)
