"""
Registry v2 read endpoints: tag listing and manifest retrieval.

Each call issues exactly one GET and decodes the body as JSON. A non-200
answer is never retried.
"""

import logging
from typing import Any, Optional

import requests

from klippy.error import ManifestDecodeError, RegistryRequestError
from klippy.modules.auth import http_get
from klippy.modules.registry.models import Manifest
from klippy.modules.resolver import ImageReference

logger = logging.getLogger(__name__)


def _get_json(
    url: str,
    ref: ImageReference,
    token: str,
    session: Optional[requests.Session],
    action: str,
) -> Any:
    """GET url and return its decoded JSON body, closing the response either way."""
    logger.debug("Built v2 Registry URL [%s]", url)
    resp = http_get(url, token=token, session=session)
    try:
        if resp.status_code != 200:
            logger.debug("HTTP Error [%s %s]", resp.status_code, resp.reason)
            raise RegistryRequestError(ref.repository, resp.status_code, url=url, action=action)
        try:
            return resp.json()
        except ValueError as e:
            raise ManifestDecodeError(f"Unable to decode response from [{url}]: {e}") from e
    finally:
        resp.close()


def fetch_tags(
    ref: ImageReference,
    token: str = "",
    session: Optional[requests.Session] = None,
) -> list[str]:
    """
    List every tag of the referenced repository.

    Raises:
        RegistryRequestError: On a non-200 answer
        ManifestDecodeError: If the body is not a tag list
    """
    url = f"{ref.registry}/v2/{ref.repository}/tags/list"
    body = _get_json(url, ref, token, session, action="retrieve tags")

    if not isinstance(body, dict):
        raise ManifestDecodeError(f"Unexpected tag list from [{url}]")
    tags = body.get("tags") or []
    if not isinstance(tags, list):
        raise ManifestDecodeError(f"Unexpected tag list from [{url}]")
    return tags


def fetch_manifest(
    ref: ImageReference,
    token: str = "",
    session: Optional[requests.Session] = None,
) -> Manifest:
    """
    Fetch the manifest the reference's tag (or digest) points at.

    Raises:
        RegistryRequestError: On a non-200 answer
        ManifestDecodeError: If the body is not a manifest
    """
    url = f"{ref.registry}/v2/{ref.repository}/manifests/{ref.tag}"
    body = _get_json(url, ref, token, session, action="retrieve manifest")

    try:
        manifest = Manifest.from_dict(body)
    except (AttributeError, KeyError, TypeError) as e:
        raise ManifestDecodeError(f"Unexpected manifest layout from [{url}]: {e!r}") from e

    logger.debug("Manifest [%s:%s] has %d layers", manifest.name, manifest.tag, len(manifest.fs_layers))
    return manifest
