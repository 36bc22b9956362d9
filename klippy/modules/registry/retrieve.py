# retrieve.py
# End-to-end lookups: resolve the reference, negotiate a token, query the registry.
# Each call opens one session for the lookup and closes it when done.

import logging

import requests

from klippy.config import DEFAULT_REGISTRY
from klippy.modules.auth import negotiate
from klippy.modules.history import decode_history, decode_layers
from klippy.modules.registry.client import fetch_manifest, fetch_tags
from klippy.modules.registry.models import LayerBuildInfo, Manifest
from klippy.modules.resolver import ImageReference, resolve

logger = logging.getLogger(__name__)


def _authenticate(
    image_name: str,
    session: requests.Session,
    default_registry: str,
) -> tuple[ImageReference, str]:
    """Resolve the image name and obtain a token for its repository."""
    ref = resolve(image_name, default_registry=default_registry)
    logger.debug("Registry [%s], Image [%s], Tag [%s]", ref.registry, ref.repository, ref.tag)
    token = negotiate(ref.registry, ref.repository, session=session)
    return ref, token


def retrieve_tags(image_name: str, default_registry: str = DEFAULT_REGISTRY) -> list[str]:
    """Find an image on a registry and return all of its tags."""
    with requests.Session() as session:
        ref, token = _authenticate(image_name, session, default_registry)
        return fetch_tags(ref, token=token, session=session)


def retrieve_overview(image_name: str, default_registry: str = DEFAULT_REGISTRY) -> Manifest:
    """Find an image on a registry and return its manifest."""
    with requests.Session() as session:
        ref, token = _authenticate(image_name, session, default_registry)
        return fetch_manifest(ref, token=token, session=session)


def retrieve_commands(
    image_name: str,
    color: bool = False,
    default_registry: str = DEFAULT_REGISTRY,
) -> list[str]:
    """Find an image on a registry and return the commands used to build each layer."""
    manifest = retrieve_overview(image_name, default_registry=default_registry)
    return decode_history(manifest, color=color)


def retrieve_layers(
    image_name: str,
    default_registry: str = DEFAULT_REGISTRY,
) -> tuple[Manifest, list[LayerBuildInfo]]:
    """Return the manifest together with its decoded per-layer build records."""
    manifest = retrieve_overview(image_name, default_registry=default_registry)
    return manifest, decode_layers(manifest)


def image_exists(image_name: str, default_registry: str = DEFAULT_REGISTRY) -> bool:
    """
    Check that an image's registry can be located and authorises a pull.

    Any failure along the way is raised, not turned into False.
    """
    logger.info("Beginning lookup of image [%s]", image_name)
    with requests.Session() as session:
        _authenticate(image_name, session, default_registry)
    return True
