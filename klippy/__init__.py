"""klippy - inspect container images on a Docker registry v2 without pulling them."""

__version__ = "0.1.0"

from .error import (
    AuthChallengeError,
    HistoryDecodeError,
    KlippyError,
    ManifestDecodeError,
    ReferenceParseError,
    RegistryRequestError,
    TokenResponseError,
)

__all__ = [
    "KlippyError",
    "ReferenceParseError",
    "AuthChallengeError",
    "TokenResponseError",
    "RegistryRequestError",
    "ManifestDecodeError",
    "HistoryDecodeError",
]
