"""
Docker registry bearer-token negotiation.

Implements the two-step Docker registry token authentication flow:

1. GET {registry}/v2/ and read the WWW-Authenticate challenge
2. GET {realm}?service={service}&scope=repository:{repo}:pull for a token

A registry that sends no challenge needs no token, and negotiate() returns
an empty string for it.
"""

import logging
from dataclasses import dataclass
from typing import Optional

import requests

from klippy.config import (
    API_VERSION_HEADER,
    AUTHENTICATE_HEADER,
    JSON_CONTENT_TYPE,
    TOKEN_SCOPE_ACTION,
)
from klippy.error import AuthChallengeError, TokenResponseError

logger = logging.getLogger(__name__)


@dataclass
class AuthChallenge:
    """Where and for which audience a token must be requested."""
    realm: str = ""
    service: str = ""
    scope: Optional[str] = None


# =============================================================================
# HTTP
# =============================================================================

def http_get(
    url: str,
    token: str = "",
    session: Optional[requests.Session] = None,
) -> requests.Response:
    """
    Issue a single GET expecting a JSON answer.

    Args:
        url: Full URL to request
        token: Bearer token, sent as an Authorization header when non-empty
        session: Session to send the request on; a bare requests.get is used
                 when omitted

    Returns:
        requests.Response object; the caller is responsible for closing it
    """
    headers = {"Content-Type": JSON_CONTENT_TYPE}
    if token:
        headers["Authorization"] = f"Bearer {token}"

    getter = session.get if session is not None else requests.get
    return getter(url, headers=headers)


# =============================================================================
# Challenge parsing
# =============================================================================

def parse_challenge(header: str) -> AuthChallenge:
    """
    Parse a WWW-Authenticate header into its realm, service and scope.

    Expected format:
        Bearer realm="https://auth.docker.io/token",service="registry.docker.io"

    Unrecognised keys and fragments without '=' are ignored, so a quoted
    scope containing commas does not break parsing. Missing keys are left
    empty for the caller to check.
    """
    challenge = AuthChallenge()

    parts = header.strip().split(" ", 1)
    if len(parts) < 2:
        return challenge

    for pair in parts[1].split(","):
        if "=" not in pair:
            continue
        key, value = pair.split("=", 1)
        key = key.strip()
        value = value.strip().strip('",')
        logger.debug("Header Key:[%s] Value:[%s]", key, value)
        if key == "realm":
            challenge.realm = value
        elif key == "service":
            challenge.service = value
        elif key == "scope":
            challenge.scope = value

    return challenge


def token_url(challenge: AuthChallenge, repository: str) -> str:
    """Build the token-issuer URL requesting pull scope for the repository."""
    separator = "&" if "?" in challenge.realm else "?"
    return (
        f"{challenge.realm}{separator}service={challenge.service}"
        f"&scope=repository:{repository}:{TOKEN_SCOPE_ACTION}"
    )


# =============================================================================
# Negotiation
# =============================================================================

def request_token(url: str, session: Optional[requests.Session] = None) -> str:
    """
    Fetch a token from the issuer.

    Raises:
        TokenResponseError: If the body is not JSON or carries no token
    """
    resp = http_get(url, session=session)
    try:
        try:
            body = resp.json()
        except ValueError as e:
            raise TokenResponseError(f"Authorisation server returned invalid JSON: {e}") from e
    finally:
        resp.close()

    token = body.get("token") if isinstance(body, dict) else None
    if not isinstance(token, str) or not token:
        raise TokenResponseError("No Token could be identified in the response from the authorisation server")

    logger.debug("Token of [%d] bytes found", len(token))
    return token


def negotiate(
    registry: str,
    repository: str,
    session: Optional[requests.Session] = None,
) -> str:
    """
    Find the registry's bearer server and return a pull token.

    Args:
        registry: Registry base URL (e.g., "https://registry-1.docker.io")
        repository: Repository path (e.g., "library/nginx")
        session: Optional session threaded through both requests

    Returns:
        Bearer token, or "" if the registry sent no challenge

    Raises:
        AuthChallengeError: If the challenge lacks a realm or service
        TokenResponseError: If the issuer returns no token
        requests.RequestException: On network errors
    """
    v2_endpoint = f"{registry}/v2/"
    resp = http_get(v2_endpoint, session=session)
    try:
        api_version = resp.headers.get(API_VERSION_HEADER)
        challenge_header = resp.headers.get(AUTHENTICATE_HEADER)
    finally:
        resp.close()

    if not api_version:
        logger.warning("Unknown registry version for [%s]", registry)
    else:
        logger.debug("Registry version [%s]", api_version)

    if not challenge_header:
        logger.debug("No %s header from [%s], continuing without a token", AUTHENTICATE_HEADER, registry)
        return ""

    logger.debug("%s header [%s]", AUTHENTICATE_HEADER, challenge_header)
    challenge = parse_challenge(challenge_header)
    if not challenge.realm:
        raise AuthChallengeError(registry, "No Registry bearer server could be identified")
    if not challenge.service:
        raise AuthChallengeError(registry, "No Registry bearer service could be identified")

    url = token_url(challenge, repository)
    logger.debug("Built URL [%s]", url)
    return request_token(url, session=session)
