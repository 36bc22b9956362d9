"""Exceptions raised by the klippy resolution and authentication pipeline."""

from typing import Optional


class KlippyError(Exception):
    """Base class for all klippy exceptions"""

    pass


class ReferenceParseError(KlippyError):
    """The image reference is empty or cannot be split into repository and tag"""

    def __init__(self, reference: str, message: str = "Unable to parse namespace/image:tag") -> None:
        super().__init__(f"{message} from reference [{reference}]")
        self.reference = reference


class AuthChallengeError(KlippyError):
    """The registry's WWW-Authenticate challenge is missing a realm or service"""

    def __init__(self, registry: str, message: str) -> None:
        super().__init__(f"{message} for registry [{registry}]")
        self.registry = registry


class TokenResponseError(KlippyError):
    """The token issuer did not hand back a usable token"""

    pass


class RegistryRequestError(KlippyError):
    """A registry endpoint answered with something other than 200 OK"""

    def __init__(self, repository: str, status_code: int, url: Optional[str] = None, action: str = "retrieve") -> None:
        super().__init__(f"Unable to {action} for image [{repository}] (HTTP {status_code})")
        self.repository = repository
        self.status_code = status_code
        self.url = url


class ManifestDecodeError(KlippyError):
    """A manifest or tag list body is not the JSON document we expect"""

    pass


class HistoryDecodeError(KlippyError):
    """One of the manifest's embedded v1Compatibility documents is malformed"""

    def __init__(self, index: int, cause: Exception) -> None:
        super().__init__(f"Unable to decode history entry [{index}]: {cause}")
        self.index = index
